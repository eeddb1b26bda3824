"""Test configuration and shared fixtures."""

from __future__ import annotations

import json
from collections.abc import Callable, Iterator
from typing import Any

import httpx
import pytest
from rest_harness import BaseApiClient, ClientConfig, HttpxTransport, PreparedRequest

BASE_URL = "https://api.example.com/api/v4"

# =============================================================================
# Fake Server
# =============================================================================


class FakeServer:
    """Answers requests from canned responses and records what it received.

    Routes are keyed by (method, full URL). Each route holds a queue of
    responses; the last one is repeated once the queue runs dry.

    """

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self._routes: dict[tuple[str, str], list[Callable[[httpx.Request], httpx.Response]]] = {}

    def add(
        self,
        method: str,
        url: str,
        *,
        json_data: Any = None,
        content: bytes | None = None,
        status: int = 200,
        headers: dict[str, str] | None = None,
    ) -> None:
        """Queue a response for a route."""

        def answer(request: httpx.Request) -> httpx.Response:
            if json_data is not None:
                return httpx.Response(status, json=json_data, headers=headers)
            return httpx.Response(status, content=content or b"", headers=headers)

        self._routes.setdefault((method, url), []).append(answer)

    def fail(self, method: str, url: str, error_cls: type[httpx.HTTPError], message: str) -> None:
        """Make a route raise an httpx exception."""

        def answer(request: httpx.Request) -> httpx.Response:
            raise error_cls(message, request=request)

        self._routes.setdefault((method, url), []).append(answer)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        queue = self._routes.get((request.method, str(request.url)))
        if not queue:
            return httpx.Response(404, json={"message": f"No route for {request.url}"})
        answer = queue.pop(0) if len(queue) > 1 else queue[0]
        return answer(request)

    def body_of(self, index: int) -> Any:
        """Decode the JSON body of a recorded request."""
        return json.loads(self.requests[index].content)


class DummyClient(BaseApiClient):
    """Minimal binding: bearer header for any token kind."""

    def prepare_request(self, request: PreparedRequest) -> None:
        if self.token is not None:
            request.headers["Authorization"] = f"Bearer {self.token.value}"


# =============================================================================
# Client Fixtures
# =============================================================================


@pytest.fixture
def config() -> ClientConfig:
    """Create a test configuration."""
    return ClientConfig(timeout=5.0, max_pages=None)


@pytest.fixture
def server() -> FakeServer:
    """A fresh fake server."""
    return FakeServer()


@pytest.fixture
def make_client(
    server: FakeServer, config: ClientConfig
) -> Iterator[Callable[..., BaseApiClient]]:
    """Factory building a binding wired to the fake server."""
    created: list[BaseApiClient] = []

    def factory(
        client_cls: type[BaseApiClient] = DummyClient,
        base_url: str = BASE_URL,
        client_config: ClientConfig | None = None,
        **kwargs: Any,
    ) -> BaseApiClient:
        cfg = client_config or config
        transport = HttpxTransport(cfg, transport=httpx.MockTransport(server.handler))
        client = client_cls(base_url, config=cfg, transport=transport, **kwargs)
        created.append(client)
        return client

    yield factory

    for client in created:
        client.close()


@pytest.fixture
def client(make_client: Callable[..., BaseApiClient]) -> BaseApiClient:
    """A DummyClient against BASE_URL."""
    return make_client()


# =============================================================================
# Link Headers
# =============================================================================


@pytest.fixture
def gitlab_link_header() -> str:
    """Link header as sent by GitLab on page 2 of 3."""
    base = "https://gitlab.example.com/api/v4/projects/8/issues/8/notes"
    return (
        f'<{base}?page=1&per_page=3>; rel="prev", '
        f'<{base}?page=3&per_page=3>; rel="next", '
        f'<{base}?page=1&per_page=3>; rel="first", '
        f'<{base}?page=3&per_page=3>; rel="last"'
    )
