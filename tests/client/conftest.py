# tests/client/conftest.py
"""Fixtures for the API client and client-side state tests."""

from collections.abc import AsyncGenerator, Callable
from typing import Any

import pytest
from httpx import AsyncClient, MockTransport, Request, Response

from techtalk.client import BlogApiClient

type Route = tuple[str, str]
type Handler = Callable[[Request], Response]


class FakeServer:
    """Routes requests by ``(method, path)`` and records what was sent."""

    def __init__(self) -> None:
        self.routes: dict[Route, Handler] = {}
        self.requests: list[Request] = []

    def on(self, method: str, path: str, status_code: int = 200, json: Any = None) -> None:
        self.routes[(method, path)] = lambda _request: Response(status_code, json=json)

    def handle(self, request: Request) -> Response:
        self.requests.append(request)
        handler = self.routes.get((request.method, request.url.path))
        if handler is None:
            return Response(404, json={"detail": "Not Found"})
        return handler(request)


@pytest.fixture
def server() -> FakeServer:
    return FakeServer()


@pytest.fixture
async def api(server: FakeServer) -> AsyncGenerator[BlogApiClient]:
    http = AsyncClient(base_url="http://test", transport=MockTransport(server.handle))
    async with BlogApiClient(client=http) as client:
        yield client
    await http.aclose()


def make_post(post_id: str = "p1", title: str = "Hello World", **fields: Any) -> dict[str, Any]:
    return {
        "id": post_id,
        "title": title,
        "content": "Body text",
        "slug": title.lower().replace(" ", "-"),
        "tags": [],
        "viewCount": 0,
        "isPublished": False,
        **fields,
    }


@pytest.fixture
def post_factory() -> Callable[..., dict[str, Any]]:
    return make_post
