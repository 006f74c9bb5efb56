"""
Pydantic models for decoding responses from the SmugMug v2 API.

The server speaks PascalCase JSON and routinely omits fields, so every model
defaults missing values to their zero value and ignores fields it does not
know. Two wire quirks are normalised here: related links that arrive either
as strings or as objects, and dates that arrive in several layouts.
"""

import re
from datetime import datetime, timezone
from typing import Annotated, Any, Dict, List, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    PlainValidator,
    model_validator,
)
from pydantic.alias_generators import to_pascal

from ..application.domain import LinkRef, Pages, to_link_ref

# Tried in order: RFC 3339, timestamp without zone, bare date.
_DATE_LAYOUTS = (
    "%Y-%m-%dT%H:%M:%S%z",
    "%Y-%m-%dT%H:%M:%S.%f%z",
    "%Y-%m-%dT%H:%M:%S",
    "%Y-%m-%dT%H:%M:%S.%f",
    "%Y-%m-%d",
)

# strptime reads at most microseconds; RFC 3339 allows any precision.
_EXCESS_FRACTION = re.compile(r"(\.\d{6})\d+")


def parse_smugmug_time(value: Any) -> Optional[datetime]:
    """
    Parse a SmugMug date literal.

    A literal starting with '-' is the server's marker for a date before
    its reference epoch and decodes to None. Layouts without a zone are
    read as UTC.

    Raises:
        ValueError: If the literal matches none of the accepted layouts.
    """
    if value is None or isinstance(value, datetime):
        return value
    if isinstance(value, str):
        if value.startswith("-"):
            return None
        literal = _EXCESS_FRACTION.sub(r"\1", value)
        for layout in _DATE_LAYOUTS:
            try:
                parsed = datetime.strptime(literal, layout)
            except ValueError:
                continue
            if parsed.tzinfo is None:
                parsed = parsed.replace(tzinfo=timezone.utc)
            return parsed
    raise ValueError(f"unable to parse '{value}'")


SmugMugTime = Annotated[Optional[datetime], PlainValidator(parse_smugmug_time)]

Link = Annotated[LinkRef, PlainValidator(to_link_ref)]


class ApiModel(BaseModel):
    """Base for all wire models: PascalCase aliases, unknown keys ignored."""

    model_config = ConfigDict(
        alias_generator=to_pascal,
        populate_by_name=True,
        extra="ignore",
    )

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data: Any) -> Any:
        # An explicit null takes the field's zero value, like a missing key.
        if isinstance(data, dict):
            return {key: value for key, value in data.items() if value is not None}
        return data


class ResourceModel(ApiModel):
    """Fields shared by every addressable resource."""

    uri: str = ""
    uri_description: str = ""
    web_uri: str = ""
    response_level: str = ""
    uris: Dict[str, Link] = Field(default_factory=dict)


class FormattedText(BaseModel):
    html: str = ""
    text: str = ""


class FormattedValues(ApiModel):
    caption: FormattedText = Field(default_factory=FormattedText)
    name: FormattedText = Field(default_factory=FormattedText)
    description: FormattedText = Field(default_factory=FormattedText)
    file_name: FormattedText = Field(default_factory=FormattedText)


# --- Images ---

class Image(ResourceModel):
    """An image requested directly by its key."""

    image_key: str = ""
    title: str = ""
    caption: str = ""
    keywords: str = ""
    keyword_array: List[str] = Field(default_factory=list)
    file_name: str = ""
    format: str = ""
    watermark: str = ""
    watermarked: bool = False
    latitude: str = ""
    longitude: str = ""
    altitude: int = 0
    hidden: bool = False
    processing: bool = False
    upload_key: str = ""
    thumbnail_url: str = ""
    date: SmugMugTime = None
    date_time_uploaded: SmugMugTime = None
    date_time_original: SmugMugTime = None
    last_updated: str = ""
    original_height: int = 0
    original_width: int = 0
    original_size: int = 0
    serial: int = 0
    archived_uri: str = ""
    archived_size: int = 0
    archived_md5: str = Field(default="", alias="ArchivedMD5")
    collectable: bool = False
    is_archive: bool = False
    is_video: bool = False
    can_edit: bool = False
    can_buy: bool = False
    can_share: bool = False
    comments: bool = False
    protected: bool = False
    show_keywords: bool = False
    formatted_values: FormattedValues = Field(default_factory=FormattedValues)


class AlbumImage(Image):
    """
    An image reached through an album.

    The API names images listed under an album 'AlbumImage'; they carry the
    album-relative placement fields on top of the plain image fields.
    """

    movable: bool = False
    origin: str = ""


class ImageSize(ApiModel):
    url: str = ""
    ext: str = ""
    height: int = 0
    width: int = 0
    size: int = 0
    watermarked: bool = False


class ImageSizes(ResourceModel):
    tiny_image_url: str = ""
    thumb_image_url: str = ""
    small_image_url: str = ""
    medium_image_url: str = ""
    large_image_url: str = ""
    x_large_image_url: str = ""
    x2_large_image_url: str = ""
    x3_large_image_url: str = ""
    original_image_url: str = ""
    largest_image_url: str = ""


class ImageSizeDetails(ResourceModel):
    image_url_template: str = ""
    usable_sizes: List[str] = Field(default_factory=list)
    image_size_tiny: Optional[ImageSize] = None
    image_size_thumb: Optional[ImageSize] = None
    image_size_small: Optional[ImageSize] = None
    image_size_medium: Optional[ImageSize] = None
    image_size_large: Optional[ImageSize] = None
    image_size_x_large: Optional[ImageSize] = None
    image_size_x2_large: Optional[ImageSize] = None
    image_size_x3_large: Optional[ImageSize] = None
    image_size_original: Optional[ImageSize] = None


class LargestImage(ResourceModel):
    url: str = ""
    ext: str = ""
    height: int = 0
    width: int = 0
    size: int = 0
    usable: bool = False
    watermarked: bool = False


class ImageDownload(ResourceModel):
    url: str = ""


class ImageMetadata(ResourceModel):
    """EXIF and IPTC data extracted from the original file."""

    title: str = ""
    caption: str = ""
    keywords: str = ""
    author: str = ""
    copyright: str = ""
    city: str = ""
    state: str = ""
    country: str = ""
    rating: str = ""
    lens: str = ""
    make: str = ""
    model: str = ""
    software: str = ""
    serial_number: str = ""
    aperture: str = ""
    exposure: str = ""
    iso: int = Field(default=0, alias="ISO")
    focal_length: str = ""
    flash: str = ""
    white_balance: str = ""
    color_space: str = ""
    date_time_created: SmugMugTime = None
    date_time_modified: SmugMugTime = None
    date_created: SmugMugTime = None
    date_digitized: SmugMugTime = None
    latitude: float = 0
    longitude: float = 0
    altitude: int = 0


class CatalogSkuPrice(ResourceModel):
    currency: str = ""
    price: float = 0


# --- Albums, Nodes, Users ---

class Album(ResourceModel):
    album_key: str = ""
    name: str = ""
    nice_name: str = ""
    title: str = ""
    description: str = ""
    keywords: str = ""
    url_name: str = ""
    url_path: str = ""
    node_id: str = Field(default="", alias="NodeID")
    date: SmugMugTime = None
    last_updated: str = ""
    images_last_updated: str = ""
    image_count: int = 0
    privacy: str = ""
    security_type: str = ""
    sort_direction: str = ""
    sort_method: str = ""
    password_hint: str = ""
    has_download_password: bool = False
    allow_downloads: bool = False
    can_buy: bool = False
    can_favorite: bool = False
    can_rank: bool = False
    can_share: bool = False
    commerce_lightbox: bool = False
    comments: bool = False
    exif: bool = Field(default=False, alias="EXIF")
    external: bool = False
    filenames: bool = False
    geography: bool = False
    hide_owner: bool = False
    packages: bool = False
    protected: bool = False
    share: bool = False
    square_thumbs: bool = False
    watermark: bool = False
    world_searchable: bool = False
    smug_searchable: str = ""
    largest_size: str = ""
    template_uri: str = ""
    images: List[AlbumImage] = Field(default_factory=list)


class Node(ResourceModel):
    """A folder, album or page in a user's hierarchy."""

    node_id: str = Field(default="", alias="NodeID")
    name: str = ""
    description: str = ""
    type: str = ""
    url_name: str = ""
    url_path: str = ""
    privacy: str = ""
    security_type: str = ""
    effective_privacy: str = ""
    effective_security_type: str = ""
    sort_direction: str = ""
    sort_method: str = ""
    password_hint: str = ""
    is_root: bool = False
    has_children: bool = False
    keywords: List[str] = Field(default_factory=list)
    date_added: SmugMugTime = None
    date_modified: SmugMugTime = None
    formatted_values: FormattedValues = Field(default_factory=FormattedValues)


class User(ResourceModel):
    nick_name: str = ""
    name: str = ""
    first_name: str = ""
    last_name: str = ""
    account_status: str = ""
    plan: str = ""
    domain: str = ""
    domain_only: str = ""
    ref_tag: str = ""
    sort_by: str = ""
    view_pass_hint: str = ""
    view_password: str = ""
    image_count: int = 0
    friends_view: bool = False
    is_trial: bool = False
    quick_share: bool = False


# --- Envelope ---

class PagesDTO(ApiModel):
    """The 'Pages' object of a paginated response."""

    total: int = 0
    start: int = 0
    count: int = 0
    requested_count: int = 0
    first_page: Optional[Link] = None
    last_page: Optional[Link] = None
    next_page: Optional[Link] = None
    misaligned: bool = False

    def to_domain(self) -> Pages:
        return Pages(
            total=self.total,
            start=self.start,
            count=self.count,
            requested_count=self.requested_count,
            first_page=self.first_page.uri if self.first_page else None,
            last_page=self.last_page.uri if self.last_page else None,
            next_page=self.next_page.uri if self.next_page else None,
        )


class ResponseBody(ApiModel):
    """
    The 'Response' object of the envelope.

    The primary payload sits under a key named after the resource type
    ('Album', 'Image', ...); it is kept undecoded until the caller knows
    which shape the endpoint expects.
    """

    model_config = ConfigDict(extra="allow")

    uri: str = ""
    locator: str = ""
    locator_type: str = ""
    uri_description: str = ""
    endpoint_type: str = ""
    doc_uri: str = ""
    response_level: str = ""
    pages: Optional[PagesDTO] = None

    def payload(self, name: str) -> Any:
        return (self.model_extra or {}).get(name)


class ServiceEnvelope(ApiModel):
    """Represents the top-level structure of every API response."""

    code: int = 0
    message: str = ""
    response: ResponseBody = Field(default_factory=ResponseBody)
    expansions: Dict[str, Any] = Field(default_factory=dict)
