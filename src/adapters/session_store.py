"""Almacenes de sesión.

Por qué un fichero JSON:
- La CLI es un proceso corto; el token debe sobrevivir entre invocaciones.
- Vive junto al `.env` de usuario (ver `core.config.get_user_config_dir`).
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from core.domain.models import User

logger = logging.getLogger(__name__)


class FileSessionStore:
    """Sesión persistida como `{"token": ..., "user": {...}}`."""

    def __init__(self, path: Path) -> None:
        self.path = path

    def _read(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            logger.warning("Ignoring unreadable session file %s: %s", self.path, exc)
            return {}
        return data if isinstance(data, dict) else {}

    def _write(self, data: dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(
            json.dumps(data, ensure_ascii=False, indent=2, sort_keys=True) + "\n",
            encoding="utf-8",
        )

    def get_token(self) -> str | None:
        token = self._read().get("token")
        return token if isinstance(token, str) and token else None

    def set_token(self, token: str) -> None:
        data = self._read()
        data["token"] = token
        self._write(data)

    def get_user(self) -> User | None:
        raw = self._read().get("user")
        if not isinstance(raw, dict):
            return None
        try:
            return User.model_validate(raw)
        except PydanticValidationError:
            logger.warning("Stored user in %s does not match the current model", self.path)
            return None

    def set_user(self, user: User | None) -> None:
        data = self._read()
        data["user"] = user.model_dump(mode="json", by_alias=True, exclude_none=True) if user else None
        self._write(data)

    def clear(self) -> None:
        self.path.unlink(missing_ok=True)


class MemorySessionStore:
    """Sesión en memoria (tests, uso embebido)."""

    def __init__(self, token: str | None = None, user: User | None = None) -> None:
        self._token = token
        self._user = user

    def get_token(self) -> str | None:
        return self._token

    def set_token(self, token: str) -> None:
        self._token = token

    def get_user(self) -> User | None:
        return self._user

    def set_user(self, user: User | None) -> None:
        self._user = user

    def clear(self) -> None:
        self._token = None
        self._user = None
