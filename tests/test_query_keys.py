from core.domain import query_keys as keys
from core.domain.models import TaskStatus
from core.domain.payloads import TaskFilters


def test_ids_are_normalized():
    assert keys.comments("7") == keys.comments(7) == ("comments", 7)
    assert keys.team("3") == ("teams", 3)


def test_filter_order_does_not_matter():
    a = keys.task_list({"status": "DONE", "teamId": 2})
    b = keys.task_list({"teamId": 2, "status": "DONE"})

    assert a == b
    assert hash(a) == hash(b)


def test_none_filters_are_dropped():
    assert keys.task_list({"status": None}) == keys.task_list() == keys.task_list({})


def test_model_filters_match_their_wire_form():
    model = TaskFilters(status=TaskStatus.DONE, team_id=2)

    assert keys.task_list(model) == keys.task_list({"teamId": 2, "status": "DONE"})


def test_distinct_requests_never_collide():
    assert keys.task_list({"teamId": 1}) != keys.task_list({"teamId": 2})
    # Los filtros congelados no se confunden con una tupla normal.
    frozen = keys.make_key("tasks", {"a": 1})
    assert frozen != ("tasks", (("a", 1),))
    assert keys.users() != keys.available_users()
    assert keys.team(1) != keys.task(1)


def test_prefix_matching():
    assert keys.is_prefix(keys.teams(), keys.team(3))
    assert keys.is_prefix(keys.teams(), keys.user_active_team(5))
    assert keys.is_prefix(keys.tasks(), keys.task_list({"status": "DONE"}))
    assert keys.is_prefix((), keys.users())
    assert not keys.is_prefix(keys.team(3), keys.teams())
    assert not keys.is_prefix(keys.comments(7), keys.comments(8))


def test_make_key_is_idempotent():
    key = keys.task_list({"a": 1})

    assert keys.make_key(*key) == key
    assert keys.make_key(*key) != ("tasks", "list", (("a", 1),))
