"""Contrato del almacén de sesión.

Por qué Protocol:
- El cliente HTTP solo necesita "dame el token"; no le importa si viene de
  un fichero, de memoria o de un keyring.
- Los tests usan la variante en memoria sin tocar disco.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from core.domain.models import User


@runtime_checkable
class SessionStore(Protocol):
    """Guarda el token bearer y el usuario autenticado."""

    def get_token(self) -> str | None: ...

    def set_token(self, token: str) -> None: ...

    def get_user(self) -> User | None: ...

    def set_user(self, user: User | None) -> None: ...

    def clear(self) -> None:
        """Olvida token y usuario (logout)."""

        ...
