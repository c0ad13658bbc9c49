"""Equipos.

Contrato de invalidación:
- Toda escritura invalida `("teams",)`, lo que cubre lista, detalle,
  historial y equipo activo de cada usuario.
- Los cambios de membresía invalidan además `("users", "available-for-teams")`.
"""

from __future__ import annotations

from core.domain import query_keys as keys
from core.domain.models import Team, TeamHistoryEntry
from core.domain.payloads import (
    AddMemberData,
    AssignLeaderData,
    CreateTeamData,
    TransferMemberData,
    UpdateTeamData,
)

from .base import EntityApi

_MEMBERSHIP = (keys.teams(), keys.available_users())


class TeamsApi(EntityApi):
    async def list(self) -> list[Team]:
        return await self._query(keys.teams(), "/teams", model=list[Team])

    async def get(self, team_id: int) -> Team:
        return await self._query(keys.team(team_id), f"/teams/{int(team_id)}", model=Team)

    async def history(self, team_id: int) -> list[TeamHistoryEntry]:
        return await self._query(
            keys.team_history(team_id),
            f"/teams/{int(team_id)}/history",
            model=list[TeamHistoryEntry],
        )

    async def user_active_team(self, user_id: int) -> Team | None:
        """Equipo activo del usuario; `None` si no pertenece a ninguno."""

        return await self._query(
            keys.user_active_team(user_id),
            f"/teams/user/{int(user_id)}/active-team",
            model=Team,
        )

    async def create(self, data: CreateTeamData) -> Team:
        return await self._mutate("POST", "/teams", body=data, model=Team, invalidates=[keys.teams()])

    async def update(self, team_id: int, data: UpdateTeamData) -> Team:
        return await self._mutate(
            "PATCH",
            f"/teams/{int(team_id)}",
            body=data,
            model=Team,
            invalidates=[keys.teams()],
        )

    async def add_member(self, team_id: int, user_id: int) -> None:
        await self._mutate(
            "POST",
            f"/teams/{int(team_id)}/members",
            body=AddMemberData(user_id=user_id),
            invalidates=_MEMBERSHIP,
        )

    async def remove_member(self, team_id: int, user_id: int) -> None:
        await self._mutate(
            "DELETE",
            f"/teams/{int(team_id)}/members/{int(user_id)}",
            invalidates=_MEMBERSHIP,
        )

    async def assign_leader(self, team_id: int, leader_id: int) -> None:
        await self._mutate(
            "PATCH",
            f"/teams/{int(team_id)}/leader",
            body=AssignLeaderData(leader_id=leader_id),
            invalidates=_MEMBERSHIP,
        )

    async def remove_leader(self, team_id: int) -> None:
        await self._mutate("DELETE", f"/teams/{int(team_id)}/leader", invalidates=_MEMBERSHIP)

    async def transfer_member(self, user_id: int, from_team_id: int, to_team_id: int) -> None:
        await self._mutate(
            "POST",
            "/teams/transfer",
            body=TransferMemberData(user_id=user_id, from_team_id=from_team_id, to_team_id=to_team_id),
            invalidates=_MEMBERSHIP,
        )
