"""Wrapper de httpx para el backend.

Por qué un wrapper:
- Estandariza base URL, timeouts, headers y el token bearer en un solo sitio.
- Convierte todos los fallos a la taxonomía de `core.errors`; nunca se traga
  un error ni reintenta (los reintentos viven en la caché).
- Facilita testeo: se inyecta un `httpx.MockTransport`.
"""

from __future__ import annotations

import logging
import re
from functools import lru_cache
from typing import Any, Mapping

import httpx
from pydantic import BaseModel, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from core.config import AppSettings
from core.errors import HttpError, NetworkError, ParseError, ValidationError
from core.interfaces.session import SessionStore

logger = logging.getLogger(__name__)

# Rutas públicas: nunca llevan Authorization.
_PUBLIC_PATH_RE = re.compile(r"/auth/(login|register)/?$")
_TOKEN_FIELDS = ("access_token", "accessToken", "token")


def build_async_client(
    settings: AppSettings | None = None,
    *,
    extra_headers: dict[str, str] | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
    base_url: str = "",
) -> httpx.AsyncClient:
    """Crea un `httpx.AsyncClient` con defaults seguros.

    Por qué un builder:
    - Centraliza timeouts/headers para que todas las llamadas se comporten igual.
    - Permite inyectar un transporte (tests) sin tocar el resto del código.
    """

    settings = settings or AppSettings()
    headers: dict[str, str] = {
        "User-Agent": settings.user_agent,
        "Accept": "application/json",
    }
    if extra_headers:
        headers.update(extra_headers)
    return httpx.AsyncClient(
        base_url=base_url,
        timeout=httpx.Timeout(settings.http_timeout_seconds),
        follow_redirects=True,
        headers=headers,
        transport=transport,
    )


@lru_cache(maxsize=None)
def _adapter(model: Any) -> TypeAdapter[Any]:
    return TypeAdapter(model)


def parse_model(model: Any, payload: Any) -> Any:
    """Valida `payload` contra `model` (clase o tipo genérico como `list[Team]`)."""

    try:
        return _adapter(model).validate_python(payload)
    except PydanticValidationError as exc:
        raise ValidationError(
            f"Response does not match {getattr(model, '__name__', model)!s}: {exc.error_count()} error(s)",
            errors=exc.errors(include_url=False),
        ) from exc


def extract_token(payload: Any) -> str | None:
    """El backend ha usado `access_token`, `accessToken` y `token`."""

    if not isinstance(payload, Mapping):
        return None
    for field_name in _TOKEN_FIELDS:
        value = payload.get(field_name)
        if isinstance(value, str) and value:
            return value
    return None


def is_public_path(path: str) -> bool:
    return bool(_PUBLIC_PATH_RE.search(path.split("?", 1)[0]))


def _serialize_body(body: Any) -> Any:
    if isinstance(body, BaseModel):
        return body.model_dump(mode="json", by_alias=True, exclude_none=True)
    return body


class ApiHttpClient:
    """Cliente JSON del backend sobre un único `httpx.AsyncClient`."""

    def __init__(
        self,
        settings: AppSettings,
        session: SessionStore,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.settings = settings
        self.session = session
        self.base_url = settings.resolved_api_base
        self._client = build_async_client(settings, transport=transport)

    async def __aenter__(self) -> ApiHttpClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    def url_for(self, path: str) -> str:
        if path.startswith(("http://", "https://")):
            return path
        return f"{self.base_url.rstrip('/')}/{path.lstrip('/')}"

    def _headers_for(self, path: str, headers: Mapping[str, str] | None, has_body: bool) -> dict[str, str]:
        out: dict[str, str] = dict(headers or {})
        lowered = {k.lower() for k in out}
        if has_body and "content-type" not in lowered:
            out["Content-Type"] = "application/json"
        if "authorization" not in lowered and not is_public_path(path):
            token = self.session.get_token()
            if token:
                out["Authorization"] = f"Bearer {token}"
        return out

    async def request(
        self,
        path: str,
        *,
        method: str = "GET",
        json: Any = None,
        params: Mapping[str, Any] | None = None,
        headers: Mapping[str, str] | None = None,
        response_model: Any = None,
    ) -> Any:
        """Ejecuta la petición y devuelve el cuerpo ya parseado.

        - 2xx con JSON -> objeto Python (o `response_model` validado).
        - 2xx sin cuerpo -> `None`.
        - No 2xx -> `HttpError(status, body)`.
        - Fallo de transporte -> `NetworkError`.
        """

        url = self.url_for(path)
        method = method.upper()
        body = _serialize_body(json)
        request_headers = self._headers_for(path, headers, body is not None)

        logger.debug("%s %s", method, url)
        try:
            response = await self._client.request(
                method,
                url,
                json=body,
                params=params,
                headers=request_headers,
            )
        except httpx.RequestError as exc:
            logger.warning("%s %s failed: %s", method, url, exc)
            raise NetworkError(f"{method} {url} failed: {exc}", url=url) from exc

        payload = self._decode(response, url)
        logger.debug("%s %s -> %d", method, url, response.status_code)

        if not response.is_success:
            logger.warning("%s %s -> HTTP %d", method, url, response.status_code)
            raise HttpError(response.status_code, payload, url=url)

        if response_model is not None and payload is not None:
            return parse_model(response_model, payload)
        return payload

    @staticmethod
    def _decode(response: httpx.Response, url: str) -> Any:
        text = response.text
        if not text.strip():
            return None
        content_type = response.headers.get("content-type", "")
        if "json" not in content_type.lower():
            return text
        try:
            return response.json()
        except ValueError as exc:
            if not response.is_success:
                # Un error con cuerpo roto sigue siendo un HttpError.
                return text
            raise ParseError(f"Invalid JSON from {url}: {exc}", url=url, text=text) from exc

    async def get(self, path: str, **kwargs: Any) -> Any:
        return await self.request(path, method="GET", **kwargs)

    async def post(self, path: str, **kwargs: Any) -> Any:
        return await self.request(path, method="POST", **kwargs)

    async def put(self, path: str, **kwargs: Any) -> Any:
        return await self.request(path, method="PUT", **kwargs)

    async def patch(self, path: str, **kwargs: Any) -> Any:
        return await self.request(path, method="PATCH", **kwargs)

    async def delete(self, path: str, **kwargs: Any) -> Any:
        return await self.request(path, method="DELETE", **kwargs)
