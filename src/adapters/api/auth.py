"""Autenticación.

Por qué limpia la caché al entrar/salir:
- Los datos cacheados pertenecen al usuario anterior; servirlos tras cambiar de
  sesión mezclaría identidades.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping

from adapters.http_client import extract_token, parse_model
from core.domain.models import AuthResult, User
from core.domain.payloads import LoginPayload, RegisterPayload
from core.errors import ValidationError

from .base import EntityApi

logger = logging.getLogger(__name__)


class AuthApi(EntityApi):
    async def login(self, phone: str, password: str) -> AuthResult:
        payload = await self.queries.mutate(
            lambda: self.http.post("/auth/login", json=LoginPayload(phone=phone, password=password))
        )
        return self._start_session(payload)

    async def register(self, name: str, phone: str, password: str) -> AuthResult:
        payload = await self.queries.mutate(
            lambda: self.http.post(
                "/auth/register",
                json=RegisterPayload(name=name, phone=phone, password=password),
            )
        )
        return self._start_session(payload)

    def logout(self) -> None:
        self.http.session.clear()
        self.queries.clear()
        logger.info("Session cleared")

    def current_user(self) -> User | None:
        return self.http.session.get_user()

    def is_authenticated(self) -> bool:
        return self.http.session.get_token() is not None

    def _start_session(self, payload: Any) -> AuthResult:
        session = self.http.session
        token = extract_token(payload)
        if not token:
            session.clear()
            raise ValidationError("Authentication response did not include an access token")

        raw_user = payload.get("user") if isinstance(payload, Mapping) else None
        user = parse_model(User, raw_user) if isinstance(raw_user, Mapping) else None

        session.set_token(token)
        session.set_user(user)
        self.queries.clear()
        logger.info("Session started for %s", user.full_name if user else "unknown user")
        return AuthResult(token=token, user=user)
