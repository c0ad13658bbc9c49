import pytest

from core.domain import query_keys as keys
from core.domain.models import Role
from core.domain.payloads import UpdateProfileData
from core.errors import HttpError, ValidationError

USER = {"id": 10, "name": "Ana", "surname": "García", "phone": "+34600000000", "role": "ADMIN"}


@pytest.mark.asyncio
async def test_users_list_is_cached_under_users_key(api, backend, queries):
    backend.add("GET", "/api/users", [USER])

    users = await api.users.list()
    await api.users.list()

    assert users[0].role is Role.ADMIN
    assert users[0].full_name == "García Ana"
    assert users[0].initials == "AG"
    assert queries.get_query_data(keys.users()) == users
    assert len(backend.calls("GET", "/api/users")) == 1


@pytest.mark.asyncio
async def test_update_me_invalidates_users(api, backend, queries, session):
    backend.add("GET", "/api/users", [USER])
    backend.add("PATCH", "/api/users/me", {**USER, "hobbies": "chess"})

    await api.users.list()
    me = await api.users.update_me(UpdateProfileData(hobbies="chess"))

    assert me.hobbies == "chess"
    assert backend.body(backend.calls("PATCH", "/api/users/me")[0]) == {"hobbies": "chess"}
    assert queries.get_query_state(keys.users()).is_stale
    assert session.get_user().hobbies == "chess"


@pytest.mark.asyncio
async def test_login_stores_session_and_clears_cache(api, backend, queries, session):
    backend.add("GET", "/api/users", [USER])
    backend.add("POST", "/api/auth/login", {"access_token": "fresh", "user": USER})
    await api.users.list()

    result = await api.auth.login("+34600000000", "secret")

    login = backend.calls("POST", "/api/auth/login")[0]
    assert "Authorization" not in login.headers
    assert backend.body(login) == {"phone": "+34600000000", "password": "secret"}
    assert result.token == "fresh"
    assert session.get_token() == "fresh"
    assert session.get_user().id == 10
    assert len(queries) == 0


@pytest.mark.asyncio
async def test_register_accepts_camel_case_token(api, backend, session):
    backend.add("POST", "/api/auth/register", {"accessToken": "reg", "user": USER}, status=201)

    result = await api.auth.register("Ana", "+34600000000", "secret")

    assert result.user.name == "Ana"
    assert session.get_token() == "reg"
    assert backend.body(backend.calls("POST", "/api/auth/register")[0]) == {
        "phone": "+34600000000",
        "password": "secret",
        "name": "Ana",
    }


@pytest.mark.asyncio
async def test_login_without_token_clears_session(api, backend, session):
    backend.add("POST", "/api/auth/login", {"user": USER})

    with pytest.raises(ValidationError):
        await api.auth.login("+34600000000", "secret")

    assert session.get_token() is None


@pytest.mark.asyncio
async def test_bad_credentials_propagate(api, backend, session):
    backend.add("POST", "/api/auth/login", {"message": "Invalid credentials"}, status=401)

    with pytest.raises(HttpError) as exc_info:
        await api.auth.login("+34600000000", "wrong")

    assert exc_info.value.status == 401
    assert session.get_token() == "test-token"


@pytest.mark.asyncio
async def test_logout(api, backend, queries, session):
    backend.add("GET", "/api/users", [USER])
    await api.users.list()

    api.auth.logout()

    assert not api.auth.is_authenticated()
    assert api.auth.current_user() is None
    assert len(queries) == 0


@pytest.mark.asyncio
async def test_dashboard_not_found_is_not_retried(api, backend):
    backend.add("GET", "/api/metrics/dashboard", {"message": "No business context"}, status=404)

    with pytest.raises(HttpError):
        await api.metrics.dashboard()

    assert len(backend.calls("GET", "/api/metrics/dashboard")) == 1


@pytest.mark.asyncio
async def test_dashboard_server_error_is_retried_once(api, backend):
    backend.add("GET", "/api/metrics/dashboard", {"message": "boom"}, status=500)

    with pytest.raises(HttpError):
        await api.metrics.dashboard()

    assert len(backend.calls("GET", "/api/metrics/dashboard")) == 2


@pytest.mark.asyncio
async def test_dashboard_keeps_unknown_sections(api, backend):
    backend.add(
        "GET",
        "/api/metrics/dashboard",
        {"businessContext": {"companyName": "ACME"}, "recentMetrics": [{"id": 1}], "kpis": {"revenue": 10}},
    )

    dashboard = await api.metrics.dashboard()

    assert dashboard.business_context == {"companyName": "ACME"}
    assert dashboard.recent_metrics == [{"id": 1}]
    assert dashboard.model_extra["kpis"] == {"revenue": 10}
