import httpx
import pytest

from core.domain import query_keys as keys
from core.domain.models import TeamStatus
from core.domain.payloads import CreateTeamData, UpdateTeamData

TEAM = {
    "id": 3,
    "name": "Core",
    "description": "Platform team",
    "isActive": True,
    "maxMembers": 5,
    "leaderId": 10,
    "users": [{"user": {"id": 10, "name": "Ana", "role": "TEAM_LEADER"}}, {"id": 11, "name": "Luis"}],
    "createdAt": "2024-01-01T00:00:00Z",
    "updatedAt": "2024-01-01T00:00:00Z",
}


@pytest.mark.asyncio
async def test_get_normalizes_membership(api, backend):
    backend.add("GET", "/api/teams/3", TEAM)

    team = await api.teams.get(3)

    assert [m.id for m in team.members] == [10, 11]
    assert team.member_count == 2
    assert team.capacity_label == "2/5"
    assert team.status is TeamStatus.ACTIVE
    assert team.is_leader(10)
    assert team.is_member(11)


@pytest.mark.asyncio
async def test_list_and_create_invalidate_team_keys(api, backend, queries):
    backend.add("GET", "/api/teams", [TEAM])
    backend.add("GET", "/api/teams/3", TEAM)
    backend.add("POST", "/api/teams", {"id": 4, "name": "Ops"}, status=201)

    await api.teams.list()
    await api.teams.get(3)
    created = await api.teams.create(CreateTeamData(name="Ops"))

    assert created.id == 4
    assert backend.body(backend.calls("POST", "/api/teams")[0]) == {"name": "Ops"}
    assert queries.get_query_state(keys.teams()).is_stale
    assert queries.get_query_state(keys.team(3)).is_stale


@pytest.mark.asyncio
async def test_membership_changes_invalidate_available_users(api, backend, queries):
    backend.add("GET", "/api/teams", [TEAM])
    backend.add("GET", "/api/users/available-for-teams", [{"id": 12, "name": "Eva"}])
    backend.add("POST", "/api/teams/3/members", {"success": True}, status=201)
    backend.on("DELETE", "/api/teams/3/members/12", lambda request: httpx.Response(200))

    await api.teams.list()
    await api.users.available_for_teams()
    await api.teams.add_member(3, 12)

    assert backend.body(backend.calls("POST", "/api/teams/3/members")[0]) == {"userId": 12}
    assert queries.get_query_state(keys.teams()).is_stale
    assert queries.get_query_state(keys.available_users()).is_stale

    await api.users.available_for_teams()
    await api.teams.remove_member(3, 12)
    assert queries.get_query_state(keys.available_users()).is_stale
    assert len(backend.calls("GET", "/api/users/available-for-teams")) == 2


@pytest.mark.asyncio
async def test_leader_and_transfer_payloads(api, backend):
    backend.add("PATCH", "/api/teams/3/leader", TEAM)
    backend.add("DELETE", "/api/teams/3/leader", TEAM)
    backend.add("POST", "/api/teams/transfer", {"success": True})
    backend.add("PATCH", "/api/teams/3", {**TEAM, "isActive": False})

    await api.teams.assign_leader(3, 11)
    await api.teams.remove_leader(3)
    await api.teams.transfer_member(11, 3, 4)
    updated = await api.teams.update(3, UpdateTeamData(is_active=False))

    assert backend.body(backend.calls("PATCH", "/api/teams/3/leader")[0]) == {"leaderId": 11}
    assert backend.body(backend.calls("POST", "/api/teams/transfer")[0]) == {
        "userId": 11,
        "fromTeamId": 3,
        "toTeamId": 4,
    }
    assert backend.body(backend.calls("PATCH", "/api/teams/3")[0]) == {"isActive": False}
    assert updated.status is TeamStatus.INACTIVE


@pytest.mark.asyncio
async def test_user_without_team_gets_none(api, backend):
    backend.on("GET", "/api/teams/user/12/active-team", lambda request: httpx.Response(200))

    assert await api.teams.user_active_team(12) is None


@pytest.mark.asyncio
async def test_history(api, backend):
    backend.add(
        "GET",
        "/api/teams/3/history",
        [{"id": 1, "userId": 11, "teamId": 3, "joinedAt": "2024-02-01T00:00:00Z", "leftAt": None}],
    )

    history = await api.teams.history(3)

    assert history[0].user_id == 11
    assert history[0].left_at is None
