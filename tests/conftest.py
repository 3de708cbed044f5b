import json

import httpx
import pytest
from httpx import ASGITransport, AsyncClient

from eansearch.app import app
from eansearch.services.ean_search import EANSearchClient, set_token

TOKEN = "test-token"


class FakeUpstream:
    """Canned ean-search API answering every request with one body."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.status_code = 200
        self.content = b"[]"
        self.exception: Exception | None = None

    def respond(self, payload: object, status_code: int = 200) -> None:
        """Answer with *payload*; dicts and lists are sent as JSON."""
        self.status_code = status_code
        if isinstance(payload, bytes):
            self.content = payload
        elif isinstance(payload, str):
            self.content = payload.encode()
        else:
            self.content = json.dumps(payload).encode()

    def fail(self, exc: Exception) -> None:
        self.exception = exc

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.exception is not None:
            raise self.exception
        return httpx.Response(self.status_code, content=self.content)

    @property
    def last_params(self) -> httpx.QueryParams:
        return self.requests[-1].url.params


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def upstream() -> FakeUpstream:
    return FakeUpstream()


@pytest.fixture
def ean_client(upstream: FakeUpstream) -> EANSearchClient:
    return EANSearchClient(set_token(TOKEN), transport=httpx.MockTransport(upstream.handler))


@pytest.fixture
async def client(ean_client: EANSearchClient):
    app.state.ean_client = ean_client
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.state.ean_client = None


@pytest.fixture
async def unconfigured_client():
    app.state.ean_client = None
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
