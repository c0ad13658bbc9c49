"""Puente entre comandos síncronos (typer) y la API asíncrona.

Por qué aquí:
- Los comandos no construyen clientes ni cachés: los leen del contexto que
  montan los providers.
- Un único punto convierte `TeamflowError` en mensaje + exit code 1.
"""

from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Callable, Coroutine, TypeVar

import httpx
import typer
from rich.markup import escape

from adapters.api import TeamflowApi
from adapters.session_store import FileSessionStore
from cli.providers import CONSOLE, ROUTE
from core.context import QUERY_CLIENT, SETTINGS
from core.errors import HttpError, NotAuthenticatedError, TeamflowError

logger = logging.getLogger(__name__)

T = TypeVar("T")


def build_transport() -> httpx.AsyncBaseTransport | None:
    """Transporte HTTP de la CLI; `None` usa el de httpx (los tests lo sustituyen)."""

    return None


def session_store() -> FileSessionStore:
    return FileSessionStore(SETTINGS.get().resolved_session_path)


@asynccontextmanager
async def open_api() -> AsyncIterator[TeamflowApi]:
    session = session_store()
    route = ROUTE.get_or_none()
    if route is not None and route.requires_auth and not session.get_token():
        raise NotAuthenticatedError(f"'{route.name}' requires a session. Run `teamflow login` first.")

    api = TeamflowApi.create(SETTINGS.get(), QUERY_CLIENT.get(), session, transport=build_transport())
    async with api:
        yield api


def render_error(exc: TeamflowError) -> None:
    console = CONSOLE.get()
    if isinstance(exc, HttpError) and exc.status == 401:
        console.print(f"[error]Unauthorized:[/error] {escape(exc.message)}. Run `teamflow login` again.")
        return
    console.print(f"[error]Error:[/error] {escape(str(exc))}")


def run_async(factory: Callable[[], Coroutine[Any, Any, T]]) -> T:
    """Ejecuta una corrutina; los errores del cliente terminan con exit code 1."""

    try:
        return asyncio.run(factory())
    except TeamflowError as exc:
        logger.debug("Command failed", exc_info=exc)
        render_error(exc)
        raise typer.Exit(code=1) from exc
