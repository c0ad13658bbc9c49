"""Contextos explícitos de la aplicación.

Por qué contextvars en vez de singletons de módulo:
- La caché y los settings se construyen una vez al arrancar y se proveen
  alrededor de la unidad raíz; nadie los recrea implícitamente.
- `asyncio.run` copia el contexto actual, así que las corrutinas los ven.
"""

from __future__ import annotations

from contextlib import contextmanager
from contextvars import ContextVar
from typing import TYPE_CHECKING, Generic, Iterator, TypeVar

from core.errors import MissingContextError

if TYPE_CHECKING:
    from core.config import AppSettings
    from core.services.query_client import QueryClient

T = TypeVar("T")


class ContextSlot(Generic[T]):
    """Un valor con nombre que se provee para un bloque y se lee dentro."""

    def __init__(self, name: str) -> None:
        self.name = name
        self._var: ContextVar[T] = ContextVar(name)

    @contextmanager
    def provide(self, value: T) -> Iterator[T]:
        token = self._var.set(value)
        try:
            yield value
        finally:
            self._var.reset(token)

    def get(self) -> T:
        try:
            return self._var.get()
        except LookupError:
            raise MissingContextError(f"No '{self.name}' has been provided") from None

    def get_or_none(self) -> T | None:
        return self._var.get(None)

    def __repr__(self) -> str:
        return f"ContextSlot({self.name!r})"


SETTINGS: ContextSlot[AppSettings] = ContextSlot("settings")
QUERY_CLIENT: ContextSlot[QueryClient] = ContextSlot("query_client")
