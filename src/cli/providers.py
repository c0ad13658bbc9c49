"""Providers de la CLI.

Cada provider envuelve la unidad raíz (un callable sin argumentos) y provee
un contexto durante su ejecución. `with_providers` los encadena una sola vez;
el orden importa: los de dentro leen lo que proveen los de fuera.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass
from typing import Callable, TypeVar

from rich.console import Console
from rich.theme import Theme

from core.compose import compose
from core.config import AppSettings
from core.context import QUERY_CLIENT, SETTINGS, ContextSlot
from core.domain.theme import ThemeMode
from core.log_config import configure_logging
from core.services.query_client import QueryClient

T = TypeVar("T")

# Comandos accesibles sin sesión.
PUBLIC_COMMANDS = frozenset({"login", "register", "doctor"})

THEMES: dict[ThemeMode, Theme] = {
    ThemeMode.LIGHT: Theme(
        {
            "accent": "bold blue",
            "muted": "grey42",
            "success": "green4",
            "warning": "dark_orange3",
            "error": "bold red3",
        }
    ),
    ThemeMode.DARK: Theme(
        {
            "accent": "bold cyan",
            "muted": "grey62",
            "success": "bright_green",
            "warning": "yellow",
            "error": "bold bright_red",
        }
    ),
}


@dataclass(frozen=True)
class Route:
    """Ruta activa: el comando pedido en la línea de órdenes."""

    path: tuple[str, ...]
    requires_auth: bool

    @classmethod
    def from_argv(cls, argv: list[str]) -> Route:
        path = tuple(arg for arg in argv if not arg.startswith("-"))
        wants_help = any(arg in ("--help", "-h") for arg in argv)
        public = not path or path[0] in PUBLIC_COMMANDS or wants_help
        return cls(path=path, requires_auth=not public)

    @property
    def name(self) -> str:
        return " ".join(self.path) or "(root)"


CONSOLE: ContextSlot[Console] = ContextSlot("console")
ROUTE: ContextSlot[Route] = ContextSlot("route")


def with_settings(inner: Callable[[], T]) -> Callable[[], T]:
    def wrapped() -> T:
        with SETTINGS.provide(AppSettings()):
            return inner()

    return wrapped


def with_router(inner: Callable[[], T]) -> Callable[[], T]:
    def wrapped() -> T:
        with ROUTE.provide(Route.from_argv(sys.argv[1:])):
            return inner()

    return wrapped


def with_theme(inner: Callable[[], T]) -> Callable[[], T]:
    def wrapped() -> T:
        mode = SETTINGS.get().theme
        with CONSOLE.provide(Console(theme=THEMES[mode])):
            return inner()

    return wrapped


def with_logging(inner: Callable[[], T]) -> Callable[[], T]:
    def wrapped() -> T:
        settings = SETTINGS.get()
        # Logs a stderr para no mezclarse con tablas/JSON en stdout.
        configure_logging(settings.log_level, console=Console(stderr=True, theme=THEMES[settings.theme]))
        return inner()

    return wrapped


def with_query_client(inner: Callable[[], T]) -> Callable[[], T]:
    def wrapped() -> T:
        with QUERY_CLIENT.provide(QueryClient.from_settings(SETTINGS.get())):
            return inner()

    return wrapped


with_providers = compose(
    with_settings,
    with_router,
    with_theme,
    with_logging,
    with_query_client,
)
