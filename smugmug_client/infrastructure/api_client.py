"""HTTP client for the SmugMug v2 API: services and fluent calls."""

from typing import Any, Dict, Generic, List, TypeVar

from pydantic import ValidationError

from ..application.domain import Endpoint
from ..application.exceptions import APIError, DecodeError

from .assembler import (
    AlbumsGetResponse,
    ImagesGetResponse,
    NodesGetResponse,
    UsersGetResponse,
    assemble,
)
from .api_models import ServiceEnvelope
from .base_client import BaseClient

DEFAULT_PAGE_START = 0
DEFAULT_PAGE_COUNT = 50

ResultT = TypeVar("ResultT")


class GetCall(Generic[ResultT]):
    """A single GET request against one endpoint, configured fluently."""

    def __init__(self, service: "SmugMugService", path: str, endpoint: Endpoint):
        self.service = service
        self.path = path
        self.endpoint = endpoint
        self.url_params: Dict[str, str] = {}

    def expand(self, expansions: List[str]) -> "GetCall[ResultT]":
        """Ask the server to embed the named relations in the response."""
        self.url_params["_expand"] = ",".join(expansions)
        return self

    def filter(self, fields: List[str]) -> "GetCall[ResultT]":
        """Restrict the primary object to the named fields."""
        self.url_params["_filter"] = ",".join(fields)
        return self

    def paginate(self, start: int, count: int) -> "GetCall[ResultT]":
        self.url_params["start"] = str(start)
        self.url_params["count"] = str(count)
        return self

    def do(self) -> ResultT:
        """
        Issues the request and decodes the response.

        Exactly one HTTP attempt is made.

        Returns:
            The endpoint's typed result.

        Raises:
            TransportError: If the HTTP exchange fails.
            APIError: If the envelope reports a failure code.
            DecodeError: If the envelope or primary object is malformed.
            ExpansionDecodeError: If an expanded payload is malformed.
        """
        return self.service.fetch(self.path, self.url_params, self.endpoint)


class AlbumsService:
    def __init__(self, service: "SmugMugService"):
        self.service = service

    def get(self, album_key: str) -> GetCall[AlbumsGetResponse]:
        return GetCall(self.service, f"album/{album_key}", Endpoint.ALBUM)

    def get_n(self, nickname: str) -> GetCall[AlbumsGetResponse]:
        """List a user's albums, one page at a time."""
        call: GetCall[AlbumsGetResponse] = GetCall(
            self.service, f"user/{nickname}!albums", Endpoint.USER_ALBUMS
        )
        return call.paginate(DEFAULT_PAGE_START, DEFAULT_PAGE_COUNT)


class ImagesService:
    def __init__(self, service: "SmugMugService"):
        self.service = service

    def get(self, image_key: str) -> GetCall[ImagesGetResponse]:
        return GetCall(self.service, f"image/{image_key}", Endpoint.IMAGE)


class NodesService:
    def __init__(self, service: "SmugMugService"):
        self.service = service

    def get(self, node_id: str) -> GetCall[NodesGetResponse]:
        return GetCall(self.service, f"node/{node_id}", Endpoint.NODE)


class UsersService:
    def __init__(self, service: "SmugMugService"):
        self.service = service

    def get(self, nickname: str) -> GetCall[UsersGetResponse]:
        return GetCall(self.service, f"user/{nickname}", Endpoint.USER)

    def get_auth_user(self) -> GetCall[UsersGetResponse]:
        """The user the client's credentials belong to."""
        return GetCall(self.service, "!authuser", Endpoint.USER)


class SmugMugService(BaseClient):
    """Entry point to the API, grouping the per-resource services."""

    def __init__(self, *args, **kwargs):
        """Initializes the service; see BaseClient for the arguments."""
        super().__init__(*args, **kwargs)
        self.albums = AlbumsService(self)
        self.images = ImagesService(self)
        self.nodes = NodesService(self)
        self.users = UsersService(self)

    def _validate_envelope(self, json_data: Any) -> ServiceEnvelope:
        """Validates the raw response body against the envelope shape."""
        try:
            envelope = ServiceEnvelope.model_validate(json_data)
        except ValidationError as e:
            raise DecodeError(f"Malformed response envelope: {e}") from e

        if envelope.code >= 400:
            message = envelope.message or "Unknown API error"
            raise APIError(f"API code {envelope.code}: {message}")

        return envelope

    def fetch(
        self, path: str, params: Dict[str, str], endpoint: Endpoint
    ) -> Any:
        """Fetches, validates and assembles the result of one call."""
        self.logger.info(f"Fetching {path} ({endpoint.value})...")

        server_response, raw_data = self._execute_fetch(path, params)
        envelope = self._validate_envelope(raw_data)
        result = assemble(endpoint, envelope, server_response)

        self.logger.debug(
            f"Decoded {path} with {len(envelope.expansions)} expansion(s)."
        )
        return result
