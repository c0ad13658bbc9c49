"""Fachada: todos los módulos de API sobre un mismo cliente, sesión y caché."""

from __future__ import annotations

import httpx

from adapters.http_client import ApiHttpClient
from core.config import AppSettings
from core.interfaces.session import SessionStore
from core.services.query_client import QueryClient

from .auth import AuthApi
from .comments import CommentsApi
from .metrics import MetricsApi
from .tasks import TasksApi
from .teams import TeamsApi
from .users import UsersApi


class TeamflowApi:
    """Punto de entrada del cliente.

    La `QueryClient` se inyecta: la construye quien arranca la aplicación y
    puede compartirse entre varias fachadas.
    """

    def __init__(self, http: ApiHttpClient, queries: QueryClient) -> None:
        self.http = http
        self.queries = queries
        self.auth = AuthApi(http, queries)
        self.users = UsersApi(http, queries)
        self.teams = TeamsApi(http, queries)
        self.tasks = TasksApi(http, queries)
        self.comments = CommentsApi(http, queries)
        self.metrics = MetricsApi(http, queries)

    @classmethod
    def create(
        cls,
        settings: AppSettings,
        queries: QueryClient,
        session: SessionStore,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> TeamflowApi:
        return cls(ApiHttpClient(settings, session, transport=transport), queries)

    async def __aenter__(self) -> TeamflowApi:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self.http.aclose()
