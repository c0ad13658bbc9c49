"""Configuración de logging.

Por qué RichHandler:
- La CLI ya escribe con Rich; los logs comparten consola y tema.
- Los adaptadores solo usan `logging.getLogger(__name__)`, sin saber dónde acaban.
"""

from __future__ import annotations

import logging
import re

from rich.console import Console
from rich.logging import RichHandler

_HANDLER_NAME = "teamflow-rich"


class SensitiveDataFilter(logging.Filter):
    """Enmascara tokens y contraseñas en los mensajes de log."""

    PATTERNS: tuple[tuple[re.Pattern[str], str], ...] = (
        (re.compile(r"Bearer\s+[^\s\"',]+", re.IGNORECASE), "Bearer ***"),
        (re.compile(r"(access_?token[\"']?\s*[:=]\s*[\"']?)[^\"'\s,}]+", re.IGNORECASE), r"\1***"),
        (re.compile(r"(password[\"']?\s*[:=]\s*[\"']?)[^\"'\s,}]+", re.IGNORECASE), r"\1***"),
    )

    def filter(self, record: logging.LogRecord) -> bool:
        if record.args:
            record.msg = record.getMessage()
            record.args = None
        if isinstance(record.msg, str):
            record.msg = mask_sensitive(record.msg)
        return True


def mask_sensitive(text: str) -> str:
    for pattern, replacement in SensitiveDataFilter.PATTERNS:
        text = pattern.sub(replacement, text)
    return text


def configure_logging(level: str = "WARNING", console: Console | None = None) -> logging.Handler:
    """Instala (una sola vez) el handler Rich en el logger raíz."""

    root = logging.getLogger()
    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        numeric_level = logging.WARNING

    for handler in root.handlers:
        if handler.get_name() == _HANDLER_NAME:
            if console is not None and isinstance(handler, RichHandler):
                handler.console = console
            handler.setLevel(numeric_level)
            root.setLevel(numeric_level)
            return handler

    handler = RichHandler(
        console=console,
        show_path=False,
        rich_tracebacks=False,
        markup=False,
    )
    handler.set_name(_HANDLER_NAME)
    handler.setLevel(numeric_level)
    handler.addFilter(SensitiveDataFilter())
    root.addHandler(handler)
    root.setLevel(numeric_level)
    # httpx registra cada request a INFO; lo dejamos en nuestro propio wrapper.
    logging.getLogger("httpx").setLevel(max(numeric_level, logging.WARNING))
    return handler
