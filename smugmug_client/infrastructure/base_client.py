"""Base class for the SmugMug HTTP client."""

import logging
from typing import Any, Dict, Mapping, Optional, Tuple
from urllib.parse import urlencode, urljoin

import httpx

from ..application.domain import ServerResponse
from ..application.exceptions import (
    ConfigurationError,
    DecodeError,
    TransportError,
)

DEFAULT_BASE_URL = "https://api.smugmug.com/api/v2/"
DEFAULT_USER_AGENT = "smugmug-client"


class BaseClient:
    """A base client that owns the httpx client and request defaults."""

    def __init__(
        self,
        client: httpx.Client,
        base_url: str = DEFAULT_BASE_URL,
        user_agent: str = DEFAULT_USER_AGENT,
        api_key: Optional[str] = None,
        timeout: Optional[float] = None,
        debug: bool = False,
    ):
        """
        Initializes the base client.

        Authentication is the caller's concern: pass an `httpx.Client`
        configured with the signing `auth` it needs.

        Args:
            client: An instance of httpx.Client.
            base_url: The API root that request paths are resolved against.
            user_agent: The User-Agent header sent with every request.
            api_key: An optional API key sent as the 'APIKey' parameter.
            timeout: An optional per-request timeout, in seconds.
            debug: Ask the server for pretty output and log request and
                response bodies at debug level.

        Raises:
            ConfigurationError: If the base URL is missing or the API key
                                appears to be a placeholder.
        """

        if not base_url:
            raise ConfigurationError(
                f"Base URL for {self.__class__.__name__} is missing. "
                f"Please check your config files."
            )

        if api_key and "YOUR_" in api_key.upper():
            raise ConfigurationError(
                f"API key for {self.__class__.__name__} is a placeholder. "
                f"Please check your config files."
            )

        self.client = client
        self.base_url = base_url if base_url.endswith("/") else base_url + "/"
        self.user_agent = user_agent
        self.api_key = api_key or None
        self.timeout = timeout
        self.debug = debug
        self.logger = logging.getLogger(self.__class__.__name__)

    def _url(self, path: str) -> str:
        """Resolve a request path against the base URL."""
        # '!authuser' style paths hang off the version segment itself.
        if path.startswith("!"):
            return self.base_url.rstrip("/") + path
        return urljoin(self.base_url, path)

    def _encode_params(self, overrides: Mapping[str, str]) -> str:
        """Build the query string, keeping relation lists comma-separated."""
        params: Dict[str, str] = {
            "_expand": "",
            "_shorturis": "",
            "_verbosity": "1",
        }
        if self.debug:
            params["_pretty"] = ""
        if self.api_key:
            params["APIKey"] = self.api_key
        params.update(overrides)
        return urlencode(sorted(params.items()), safe=",")

    def _headers(self) -> Dict[str, str]:
        return {
            "Accept": "application/json",
            "Content-Type": "application/json",
            "User-Agent": self.user_agent,
        }

    def _execute_fetch(
        self, path: str, params: Mapping[str, str]
    ) -> Tuple[ServerResponse, Any]:
        """
        Executes the raw HTTP GET request.

        Returns:
            The transport metadata and the parsed JSON body.

        Raises:
            TransportError: If the request fails or the status is >= 400.
            DecodeError: If the body is not JSON.
        """
        url = f"{self._url(path)}?{self._encode_params(params)}"
        kwargs = {} if self.timeout is None else {"timeout": self.timeout}

        if self.debug:
            self.logger.debug(f"GET {url}")

        try:
            response = self.client.get(url, headers=self._headers(), **kwargs)
        except httpx.HTTPError as e:
            raise TransportError(f"GET {url} failed: {e}") from e

        if self.debug:
            self.logger.debug(
                f"{response.status_code} {response.reason_phrase}\n"
                f"{response.text}"
            )

        if response.status_code >= 400:
            raise TransportError(
                f"GET {url} returned {response.status_code} "
                f"{response.reason_phrase}",
                status_code=response.status_code,
            )

        server_response = ServerResponse(
            http_status_code=response.status_code,
            headers=dict(response.headers),
        )

        try:
            body = response.json()
        except ValueError as e:
            raise DecodeError(f"Response from {url} is not JSON: {e}") from e

        return server_response, body
