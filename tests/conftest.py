"""
Pytest configuration and shared fixtures for koios_client tests.

Every client under test talks to an ``httpx.MockTransport`` instead of the
network. Handlers receive the outgoing ``httpx.Request`` and return the
response the mock server should send.
"""

from typing import Any, Callable, List

import httpx
import pytest

from koios_client.infrastructure import options as opt
from koios_client.infrastructure.api_client import KoiosClient

TEST_HOST = "localhost"
TEST_PORT = 8080
TEST_BASE_URL = f"http://{TEST_HOST}:{TEST_PORT}/api/v1/"


def json_response(payload: Any, status_code: int = 200, **headers) -> httpx.Response:
    """A JSON response as the API would send it."""
    return httpx.Response(status_code, json=payload, headers=headers)


class RecordingHandler:
    """Mock server handler that records requests and replays one response."""

    def __init__(self, payload: Any = None, status_code: int = 200, **headers):
        self.requests: List[httpx.Request] = []
        self.payload = [] if payload is None else payload
        self.status_code = status_code
        self.headers = headers

    async def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return json_response(self.payload, self.status_code, **self.headers)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]


@pytest.fixture
def make_client() -> Callable[..., KoiosClient]:
    """Build a KoiosClient wired to a mock server handler."""

    def factory(handler, *options: opt.Option) -> KoiosClient:
        transport = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        return KoiosClient(
            opt.scheme("http"),
            opt.host(TEST_HOST),
            opt.port(TEST_PORT),
            opt.rate_limit(255),
            opt.http_client(transport),
            *options,
        )

    return factory
