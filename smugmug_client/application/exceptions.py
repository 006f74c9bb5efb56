"""
Core exceptions for the SmugMug client.

This module defines a hierarchy of custom exceptions so callers can tell a
failed HTTP exchange apart from a response the client could not decode.
"""


class SmugMugError(Exception):
    """Base exception for all client-specific errors."""
    pass


# --- Configuration Errors ---

class ConfigurationError(SmugMugError):
    """Raised for errors related to client configuration."""
    pass


# --- Infrastructure Errors ---

class InfrastructureError(SmugMugError):
    """Base class for errors related to the remote API or the network."""
    pass


class TransportError(InfrastructureError):
    """Raised when the HTTP exchange fails or returns a status >= 400."""

    def __init__(self, message: str, status_code: int = 0):
        super().__init__(message)
        self.status_code = status_code


class APIError(InfrastructureError):
    """Raised when the response envelope itself reports a failure code."""
    pass


# --- Domain/Decoding Errors ---

class DomainError(SmugMugError):
    """Base class for errors raised while interpreting a response."""
    pass


class DecodeError(DomainError):
    """Raised when the envelope or the primary object cannot be decoded."""
    pass


class ExpansionDecodeError(DomainError):
    """Raised when an expanded payload does not match its relation's shape."""

    def __init__(self, relation: str, cause: Exception):
        super().__init__(f"Failed to decode expansion '{relation}': {cause}")
        self.relation = relation
        self.cause = cause
