"""Base de los módulos de API por entidad.

Patrón común:
- Lectura: clave determinista -> GET -> `QueryClient.fetch_query`.
- Escritura: POST/PUT/PATCH/DELETE -> `QueryClient.mutate(invalidates=...)`.
- Ningún módulo captura errores: todo sube al llamador.
"""

from __future__ import annotations

from typing import Any, Iterable

from adapters.http_client import ApiHttpClient, parse_model
from core.domain.query_keys import QueryKey
from core.services.query_client import QueryClient, RetryPolicy


class EntityApi:
    """Comparte cliente HTTP y caché entre todos los módulos."""

    def __init__(self, http: ApiHttpClient, queries: QueryClient) -> None:
        self.http = http
        self.queries = queries

    async def _query(
        self,
        key: QueryKey,
        path: str,
        *,
        model: Any = None,
        params: dict[str, Any] | None = None,
        retry: RetryPolicy | None = None,
    ) -> Any:
        async def fetch() -> Any:
            return await self.http.get(path, params=params, response_model=model)

        return await self.queries.fetch_query(key, fetch, retry=retry)

    async def _mutate(
        self,
        method: str,
        path: str,
        *,
        body: Any = None,
        model: Any = None,
        invalidates: Iterable[QueryKey] = (),
    ) -> Any:
        async def send() -> Any:
            return await self.http.request(path, method=method, json=body, response_model=model)

        return await self.queries.mutate(send, invalidates=tuple(invalidates))

    @staticmethod
    def _parse(model: Any, payload: Any) -> Any:
        return parse_model(model, payload)
