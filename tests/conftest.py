import json
from pathlib import Path
from typing import Any, Callable

import httpx
import pytest
import pytest_asyncio

from adapters.api import TeamflowApi
from adapters.session_store import MemorySessionStore
from core.config import AppSettings
from core.services.query_client import QueryClient, QueryClientConfig

BASE = "http://testserver"


class FakeBackend:
    """Backend en memoria sobre `httpx.MockTransport`.

    Las rutas son `(METHOD, path)`; el valor es un callable `request -> Response`
    para que cada llamada reciba una respuesta nueva.
    """

    def __init__(self) -> None:
        self.routes: dict[tuple[str, str], Callable[[httpx.Request], httpx.Response]] = {}
        self.requests: list[httpx.Request] = []

    def add(self, method: str, path: str, payload: Any = None, *, status: int = 200) -> None:
        def respond(request: httpx.Request) -> httpx.Response:
            if payload is None:
                return httpx.Response(status)
            return httpx.Response(status, json=payload)

        self.routes[(method.upper(), path)] = respond

    def on(self, method: str, path: str, handler: Callable[[httpx.Request], httpx.Response]) -> None:
        self.routes[(method.upper(), path)] = handler

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self.routes.get((request.method, request.url.path))
        if route is None:
            return httpx.Response(404, json={"message": f"No route {request.method} {request.url.path}"})
        return route(request)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def calls(self, method: str, path: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.method == method.upper() and r.url.path == path]

    @staticmethod
    def body(request: httpx.Request) -> Any:
        return json.loads(request.content) if request.content else None


@pytest.fixture
def settings(tmp_path: Path) -> AppSettings:
    return AppSettings(
        _env_file=None,
        api_url=BASE,
        session_path=tmp_path / "session.json",
        query_retry_delay_seconds=0,
    )


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def session() -> MemorySessionStore:
    return MemorySessionStore(token="test-token")


@pytest.fixture
def queries() -> QueryClient:
    return QueryClient(QueryClientConfig(retry_delay=0))


@pytest_asyncio.fixture
async def api(settings, queries, session, backend):
    client = TeamflowApi.create(settings, queries, session, transport=backend.transport)
    yield client
    await client.aclose()
