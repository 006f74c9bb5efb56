"""
Root conftest.py - shared fixtures for unit and integration tests.

Integration tests run the whole client against `httpx.MockTransport`, so
no network is needed.
"""
import json
from typing import Any, Callable, Dict, List, Tuple

import httpx
import pytest

from smugmug_client.infrastructure.api_client import SmugMugService

BASE_URL = "http://smugmug.test/api/v2/"

Route = Tuple[int, Any]


class RecordingServer:
    """Serves canned responses by path and records every request."""

    def __init__(self, routes: Dict[str, Route]):
        self.routes = routes
        self.requests: List[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self.routes.get(request.url.path)
        if route is None:
            return httpx.Response(404, json={"Code": 404, "Message": "Not Found"})
        status, body = route
        if isinstance(body, (bytes, str)):
            return httpx.Response(status, content=body)
        return httpx.Response(status, content=json.dumps(body).encode())

    @property
    def last_request(self) -> httpx.Request:
        return self.requests[-1]


@pytest.fixture
def make_service() -> Callable[..., Tuple[SmugMugService, RecordingServer]]:
    """Factory building a service wired to a recording mock server"""
    clients: List[httpx.Client] = []

    def _make(routes: Dict[str, Route], **kwargs) -> Tuple[SmugMugService, RecordingServer]:
        server = RecordingServer(routes)
        client = httpx.Client(transport=httpx.MockTransport(server))
        clients.append(client)
        service = SmugMugService(client=client, base_url=BASE_URL, **kwargs)
        return service, server

    yield _make

    for client in clients:
        client.close()
