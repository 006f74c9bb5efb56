"""
This module defines the core domain values of the client.

These classes are technology-agnostic: the pagination cursor, the link
references every resource carries, and the keys used to route expansions.
"""

import dataclasses
import enum
from typing import Any, Dict, Mapping, Optional, Union


# --- Link References ---

@dataclasses.dataclass(frozen=True)
class PlainLink:
    """A related resource advertised as a bare URI string."""

    uri: str


@dataclasses.dataclass(frozen=True)
class DescribedLink:
    """A related resource advertised as an object with locator details."""

    uri: str
    locator: str = ""
    locator_type: str = ""
    description: str = ""
    endpoint_type: str = ""


LinkRef = Union[PlainLink, DescribedLink]


def to_link_ref(value: Any) -> LinkRef:
    """
    Interpret one wire value of a related-links map.

    The server sends a link either as a plain string or as an object whose
    'Uri' field holds the address. Both project onto the same `uri`.

    Raises:
        ValueError: If the value is neither shape.
    """
    if isinstance(value, (PlainLink, DescribedLink)):
        return value
    if isinstance(value, str):
        return PlainLink(uri=value)
    if isinstance(value, dict) and isinstance(value.get("Uri"), str):
        return DescribedLink(
            uri=value["Uri"],
            locator=value.get("Locator") or "",
            locator_type=value.get("LocatorType") or "",
            description=value.get("UriDescription") or "",
            endpoint_type=value.get("EndpointType") or "",
        )
    raise ValueError(f"unrecognized link reference: {value!r}")


RelatedLinks = Mapping[str, LinkRef]


# --- Pagination ---

@dataclasses.dataclass(frozen=True)
class Pages:
    """A window over a collection resource, as reported by the server."""

    total: int = 0
    start: int = 0
    count: int = 0
    requested_count: int = 0
    first_page: Optional[str] = None
    last_page: Optional[str] = None
    next_page: Optional[str] = None

    def next(self) -> int:
        return self.start + self.count

    def previous(self) -> int:
        return self.start - self.count

    def remaining(self) -> int:
        return self.total - self.start - self.count


# --- Routing Keys ---

class Cardinality(enum.Enum):
    """Whether a relation resolves to one object or a list of objects."""

    ONE = "one"
    MANY = "many"


class Endpoint(enum.Enum):
    """The calling endpoint, used to pick where expansions are attached."""

    ALBUM = "album"
    USER_ALBUMS = "user_albums"
    IMAGE = "image"
    NODE = "node"
    USER = "user"


@dataclasses.dataclass(frozen=True)
class ServerResponse:
    """Transport metadata of the HTTP exchange behind a result."""

    http_status_code: int
    headers: Dict[str, str] = dataclasses.field(default_factory=dict)
