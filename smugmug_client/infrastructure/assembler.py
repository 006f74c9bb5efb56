"""
Assembly of endpoint results from a decoded envelope.

The resolver only knows relation names. Which field of a result a relation
lands in depends on the endpoint that was called, so each endpoint owns a
placement table here.
"""

import dataclasses
import logging
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Type, Union

from pydantic import BaseModel, TypeAdapter, ValidationError

from ..application.domain import Endpoint, Pages, ServerResponse
from ..application.exceptions import DecodeError

from .api_models import (
    Album,
    AlbumImage,
    CatalogSkuPrice,
    Image,
    ImageDownload,
    ImageMetadata,
    ImageSizeDetails,
    ImageSizes,
    LargestImage,
    Node,
    ServiceEnvelope,
    User,
)
from .expansions import resolve_expansions

logger = logging.getLogger(__name__)

_ALBUM_LIST = TypeAdapter(List[Album])


# --- Results ---

@dataclasses.dataclass
class UserAlbums:
    """One page of a user's albums."""

    uri: str = ""
    locator: str = ""
    locator_type: str = ""
    albums: List[Album] = dataclasses.field(default_factory=list)
    pages: Pages = dataclasses.field(default_factory=Pages)


@dataclasses.dataclass
class AlbumsGetResponse:
    server_response: ServerResponse
    album: Optional[Album] = None
    node: Optional[Node] = None
    user: Optional[User] = None
    highlight_image: Optional[Image] = None
    album_highlight_image: Optional[AlbumImage] = None
    user_albums: Optional[UserAlbums] = None


@dataclasses.dataclass
class ImagesGetResponse:
    server_response: ServerResponse
    image: Optional[Image] = None
    album: Optional[Album] = None
    owner: Optional[User] = None
    largest_image: Optional[LargestImage] = None
    image_sizes: Optional[ImageSizes] = None
    image_size_details: Optional[ImageSizeDetails] = None
    image_metadata: Optional[ImageMetadata] = None
    image_prices: List[CatalogSkuPrice] = dataclasses.field(
        default_factory=list
    )
    image_download: Optional[ImageDownload] = None


@dataclasses.dataclass
class NodesGetResponse:
    server_response: ServerResponse
    node: Optional[Node] = None
    parent_node: Optional[Node] = None
    parent_nodes: List[Node] = dataclasses.field(default_factory=list)
    child_nodes: List[Node] = dataclasses.field(default_factory=list)
    highlight_image: Optional[Image] = None
    user: Optional[User] = None
    album: Optional[Album] = None


@dataclasses.dataclass
class UsersGetResponse:
    server_response: ServerResponse
    user: Optional[User] = None
    node: Optional[Node] = None
    user_albums: List[Album] = dataclasses.field(default_factory=list)


EndpointResult = Union[
    AlbumsGetResponse, ImagesGetResponse, NodesGetResponse, UsersGetResponse
]


@dataclasses.dataclass(frozen=True)
class _PrimarySpec:
    """Where an endpoint's primary object lives and what it decodes into."""

    payload_field: str
    model: Type[BaseModel]
    result: Type
    attribute: str


_PRIMARY: Mapping[Endpoint, _PrimarySpec] = MappingProxyType({
    Endpoint.ALBUM: _PrimarySpec("Album", Album, AlbumsGetResponse, "album"),
    Endpoint.IMAGE: _PrimarySpec("Image", Image, ImagesGetResponse, "image"),
    Endpoint.NODE: _PrimarySpec("Node", Node, NodesGetResponse, "node"),
    Endpoint.USER: _PrimarySpec("User", User, UsersGetResponse, "user"),
})

# Relation name -> dotted attribute path on the result. 'AlbumImages' on an
# album request attaches to the album itself, not to the result.
_PLACEMENTS: Mapping[Endpoint, Mapping[str, str]] = MappingProxyType({
    Endpoint.ALBUM: MappingProxyType({
        "Node": "node",
        "User": "user",
        "HighlightImage": "highlight_image",
        "AlbumHighlightImage": "album_highlight_image",
        "AlbumImages": "album.images",
    }),
    Endpoint.IMAGE: MappingProxyType({
        "ImageAlbum": "album",
        "ImageOwner": "owner",
        "LargestImage": "largest_image",
        "ImageSizes": "image_sizes",
        "ImageSizeDetails": "image_size_details",
        "ImageMetadata": "image_metadata",
        "ImagePrices": "image_prices",
        "ImageDownload": "image_download",
    }),
    Endpoint.NODE: MappingProxyType({
        "ParentNode": "parent_node",
        "ParentNodes": "parent_nodes",
        "ChildNodes": "child_nodes",
        "HighlightImage": "highlight_image",
        "User": "user",
        "Album": "album",
    }),
    Endpoint.USER: MappingProxyType({
        "Node": "node",
        "UserAlbums": "user_albums",
    }),
})


def _decode_primary(
    envelope: ServiceEnvelope, spec: _PrimarySpec
) -> BaseModel:
    raw = envelope.response.payload(spec.payload_field)
    if raw is None:
        raise DecodeError(
            f"Response has no '{spec.payload_field}' object "
            f"(locator '{envelope.response.locator}')"
        )
    try:
        return spec.model.model_validate(raw)
    except ValidationError as e:
        raise DecodeError(
            f"Failed to decode '{spec.payload_field}': {e}"
        ) from e


def attach_expansions(
    endpoint: Endpoint, result: Any, resolved: Mapping[str, Any]
) -> Any:
    """
    Place resolved expansions onto an endpoint result.

    Relations with no placement for this endpoint are dropped.
    """
    placements = _PLACEMENTS.get(endpoint, {})

    for name, value in resolved.items():
        target = placements.get(name)
        if target is None:
            logger.debug(
                f"No placement for '{name}' on {endpoint.value} results."
            )
            continue

        path, _, attribute = target.rpartition(".")
        owner = result
        for part in filter(None, path.split(".")):
            owner = getattr(owner, part)
        setattr(owner, attribute, value)

    return result


def _assemble_user_albums(
    envelope: ServiceEnvelope, server_response: ServerResponse
) -> AlbumsGetResponse:
    """Decode a collection response: embedded albums plus its page cursor."""
    body = envelope.response
    if body.pages is None:
        raise DecodeError("Collection response has no 'Pages' object")

    pages = body.pages.to_domain()
    albums: List[Album] = []

    if pages.count > 0:
        raw = body.payload("Album")
        if raw is None:
            raise DecodeError(
                f"Pages reports {pages.count} albums but none were embedded"
            )
        try:
            albums = _ALBUM_LIST.validate_python(raw)
        except ValidationError as e:
            raise DecodeError(f"Failed to decode 'Album' list: {e}") from e

    user_albums = UserAlbums(
        uri=body.uri,
        locator=body.locator,
        locator_type=body.locator_type,
        albums=albums,
        pages=pages,
    )
    return AlbumsGetResponse(
        server_response=server_response, user_albums=user_albums
    )


def assemble(
    endpoint: Endpoint,
    envelope: ServiceEnvelope,
    server_response: ServerResponse,
) -> EndpointResult:
    """
    Build the typed result of one endpoint call.

    Args:
        endpoint: The endpoint that was called; selects the primary shape
            and where each expansion is attached.
        envelope: The validated response envelope.
        server_response: Transport metadata for the result.

    Returns:
        The endpoint's result object.

    Raises:
        DecodeError: If the primary object is missing or malformed.
        ExpansionDecodeError: If an expanded payload is malformed.
    """
    if endpoint is Endpoint.USER_ALBUMS:
        return _assemble_user_albums(envelope, server_response)

    spec = _PRIMARY[endpoint]
    primary = _decode_primary(envelope, spec)
    resolved: Dict[str, Any] = resolve_expansions(
        primary.uris, envelope.expansions
    )

    result = spec.result(server_response=server_response)
    setattr(result, spec.attribute, primary)
    return attach_expansions(endpoint, result, resolved)
