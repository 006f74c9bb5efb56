"""
Resolution of expanded related resources.

A response may carry an 'Expansions' map of URI -> payload alongside the
primary object. The primary object's related links are the only way to tell
which payload belongs to which relation, so resolution always walks
relation name -> URI -> payload, and decodes each payload according to a
closed table of known relations.
"""

import enum
import logging
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Type

from pydantic import BaseModel, TypeAdapter

from ..application.domain import Cardinality, to_link_ref
from ..application.exceptions import DecodeError, ExpansionDecodeError

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
    User,
)

logger = logging.getLogger(__name__)


class Relation(enum.Enum):
    """
    Every relation the client knows how to decode.

    Each member carries the relation name as advertised in 'Uris', the model
    its payload decodes into, its cardinality, and the field of the payload
    the content is nested under. The nested field follows the payload's
    locator, which is not always the relation name ('AlbumImages' nests
    under 'AlbumImage').
    """

    ALBUM = ("Album", Album, Cardinality.ONE, "Album")
    IMAGE_ALBUM = ("ImageAlbum", Album, Cardinality.ONE, "Album")
    NODE = ("Node", Node, Cardinality.ONE, "Node")
    PARENT_NODE = ("ParentNode", Node, Cardinality.ONE, "Node")
    CHILD_NODES = ("ChildNodes", Node, Cardinality.MANY, "Node")
    PARENT_NODES = ("ParentNodes", Node, Cardinality.MANY, "Node")
    HIGHLIGHT_IMAGE = ("HighlightImage", Image, Cardinality.ONE, "Image")
    ALBUM_HIGHLIGHT_IMAGE = (
        "AlbumHighlightImage", AlbumImage, Cardinality.ONE, "AlbumImage"
    )
    IMAGE_DOWNLOAD = (
        "ImageDownload", ImageDownload, Cardinality.ONE, "ImageDownload"
    )
    IMAGE_METADATA = (
        "ImageMetadata", ImageMetadata, Cardinality.ONE, "ImageMetadata"
    )
    USER = ("User", User, Cardinality.ONE, "User")
    IMAGE_OWNER = ("ImageOwner", User, Cardinality.ONE, "User")
    IMAGE_PRICES = (
        "ImagePrices", CatalogSkuPrice, Cardinality.MANY, "CatalogSkuPrice"
    )
    IMAGE_SIZE_DETAILS = (
        "ImageSizeDetails", ImageSizeDetails, Cardinality.ONE,
        "ImageSizeDetails",
    )
    IMAGE_SIZES = ("ImageSizes", ImageSizes, Cardinality.ONE, "ImageSizes")
    LARGEST_IMAGE = (
        "LargestImage", LargestImage, Cardinality.ONE, "LargestImage"
    )
    USER_ALBUMS = ("UserAlbums", Album, Cardinality.MANY, "Album")
    ALBUM_IMAGES = ("AlbumImages", AlbumImage, Cardinality.MANY, "AlbumImage")

    def __init__(
        self,
        relation_name: str,
        model: Type[BaseModel],
        cardinality: Cardinality,
        nested_field: str,
    ):
        self.relation_name = relation_name
        self.model = model
        self.cardinality = cardinality
        self.nested_field = nested_field
        if cardinality is Cardinality.MANY:
            self.adapter = TypeAdapter(List[model])
        else:
            self.adapter = TypeAdapter(model)

    @classmethod
    def for_name(cls, name: str) -> Optional["Relation"]:
        """Look up a relation by its advertised name."""
        return _RELATIONS_BY_NAME.get(name)

    def decode(self, payload: Any) -> Any:
        """
        Decode one expansion payload into this relation's shape.

        A payload without the nested field decodes to the empty value for
        the relation's cardinality.

        Raises:
            ValueError: If the payload is not an object or fails validation.
        """
        if not isinstance(payload, dict):
            raise ValueError(
                f"expected an object payload, got {type(payload).__name__}"
            )

        nested = payload.get(self.nested_field)
        if nested is None:
            return [] if self.cardinality is Cardinality.MANY else None

        return self.adapter.validate_python(nested)


_RELATIONS_BY_NAME: Mapping[str, Relation] = MappingProxyType(
    {relation.relation_name: relation for relation in Relation}
)


def resolve_expansions(
    links: Mapping[str, Any], expansions: Mapping[str, Any]
) -> Dict[str, Any]:
    """
    Decode the expanded payloads that belong to one resource.

    Args:
        links: The resource's related links, relation name -> link.
        expansions: The envelope's URI -> raw payload map.

    Returns:
        A mapping of relation name to decoded value, holding only the
        relations whose URI was present in `expansions`.

    Raises:
        DecodeError: If a link is neither a URI string nor an object with
            a 'Uri' field.
        ExpansionDecodeError: If a matched payload does not decode. One bad
            expansion fails the whole resolution.
    """
    resolved: Dict[str, Any] = {}

    for name, link in links.items():
        try:
            uri = to_link_ref(link).uri
        except ValueError as e:
            raise DecodeError(f"Invalid related link '{name}': {e}") from e

        if uri not in expansions:
            continue

        relation = Relation.for_name(name)
        if relation is None:
            logger.debug(f"Ignoring expansion for unknown relation '{name}'.")
            continue

        try:
            resolved[name] = relation.decode(expansions[uri])
        except ValueError as e:
            raise ExpansionDecodeError(name, e) from e

        logger.debug(f"Resolved expansion '{name}' from {uri}.")

    return resolved
