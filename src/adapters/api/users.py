"""Usuarios."""

from __future__ import annotations

from core.domain import query_keys as keys
from core.domain.models import User
from core.domain.payloads import UpdateProfileData

from .base import EntityApi


class UsersApi(EntityApi):
    async def list(self) -> list[User]:
        return await self._query(keys.users(), "/users", model=list[User])

    async def available_for_teams(self) -> list[User]:
        """Usuarios sin equipo activo (candidatos a `add_member`)."""

        return await self._query(keys.available_users(), "/users/available-for-teams", model=list[User])

    async def update_me(self, data: UpdateProfileData) -> User:
        user = await self._mutate(
            "PATCH",
            "/users/me",
            body=data,
            model=User,
            invalidates=[keys.users()],
        )
        if self.http.session.get_token():
            self.http.session.set_user(user)
        return user
