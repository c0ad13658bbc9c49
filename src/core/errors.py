"""Taxonomía de errores del cliente.

Por qué una jerarquía propia:
- La CLI y los consumidores capturan `TeamflowError` sin conocer httpx/pydantic.
- La caché decide qué reintentar mirando el tipo (`is_transient`).
"""

from __future__ import annotations

from typing import Any

_TRANSIENT_STATUSES = frozenset({408, 429})


class TeamflowError(Exception):
    """Base de todos los errores que expone el cliente."""


class NetworkError(TeamflowError):
    """La petición no llegó al servidor (conexión, DNS, timeout)."""

    def __init__(self, message: str, *, url: str | None = None) -> None:
        super().__init__(message)
        self.url = url


class HttpError(TeamflowError):
    """El servidor respondió con un status de fallo."""

    def __init__(self, status: int, body: Any = None, *, url: str | None = None) -> None:
        self.status = status
        self.body = body
        self.url = url
        super().__init__(self.message)

    @property
    def message(self) -> str:
        body = self.body
        if isinstance(body, dict):
            detail = body.get("message") or body.get("error")
            if isinstance(detail, list):
                return "; ".join(str(d) for d in detail)
            if detail:
                return str(detail)
        if isinstance(body, str) and body.strip():
            return body.strip()
        return f"HTTP {self.status}"

    def __str__(self) -> str:
        prefix = f"HTTP {self.status}"
        message = self.message
        if message == prefix:
            return prefix
        return f"{prefix}: {message}"


class ParseError(TeamflowError):
    """El cuerpo de la respuesta no es JSON válido."""

    def __init__(self, message: str, *, url: str | None = None, text: str = "") -> None:
        super().__init__(message)
        self.url = url
        self.text = text


class ValidationError(TeamflowError):
    """La forma de los datos no coincide con el modelo esperado."""

    def __init__(self, message: str, *, errors: list[dict[str, Any]] | None = None) -> None:
        super().__init__(message)
        self.errors = errors or []


class NotAuthenticatedError(TeamflowError):
    """La operación necesita una sesión y no hay token guardado."""


class MissingContextError(TeamflowError):
    """Se leyó un contexto (settings, caché, consola) que nadie proveyó."""


def is_transient(exc: BaseException) -> bool:
    """Fallos que merece la pena reintentar automáticamente."""

    if isinstance(exc, NetworkError):
        return True
    if isinstance(exc, HttpError):
        return exc.status >= 500 or exc.status in _TRANSIENT_STATUSES
    return False
