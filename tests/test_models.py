from datetime import datetime, timezone

from core.domain.models import Comment, Task, TaskStatus, Team, TeamStatus, User


def test_team_accepts_users_instead_of_members():
    team = Team.model_validate({"id": 1, "name": "A", "users": [{"id": 2, "name": "B"}]})

    assert [m.id for m in team.members] == [2]


def test_team_unwraps_membership_rows_and_count():
    team = Team.model_validate(
        {
            "id": 1,
            "name": "A",
            "maxMembers": 1,
            "leader": {"id": 2, "name": "B"},
            "members": [{"id": 50, "userId": 2, "teamId": 1, "user": {"id": 2, "name": "B"}}],
            "_count": {"members": 1},
        }
    )

    assert team.members[0].id == 2
    assert team.leader_id == 2
    assert team.member_count == 1
    assert team.is_full
    assert not team.can_add_members
    assert team.status is TeamStatus.FULL
    assert team.capacity_percentage == 100


def test_members_win_over_users_when_both_present():
    team = Team.model_validate(
        {"id": 1, "name": "A", "members": [{"id": 3, "name": "C"}], "users": [{"id": 4, "name": "D"}]}
    )

    assert [m.id for m in team.members] == [3]


def test_team_status_precedence():
    assert Team(id=1, name="A", is_active=False).status is TeamStatus.INACTIVE
    assert Team(id=1, name="A").status is TeamStatus.NEEDS_LEADER
    assert Team(id=1, name="A", leader_id=2).status is TeamStatus.ACTIVE
    assert Team(id=1, name="A", leader_id=2).capacity_label == "0/10"


def test_user_name_helpers():
    user = User(id=1, name="Ivan", surname="Petrov", patronymic="Sergeevich")

    assert user.full_name == "Petrov Ivan Sergeevich"
    assert user.initials == "IP"
    assert User(id=9, name="").full_name == "#9"


def test_comment_round_trips_wire_shape():
    raw = {"id": 1, "body": "hi", "taskId": 7, "authorId": 3, "createdAt": "2024-01-01T00:00:00Z"}

    comment = Comment.model_validate(raw)

    assert comment.created_at == datetime(2024, 1, 1, tzinfo=timezone.utc)
    assert comment.model_dump(mode="json", by_alias=True, exclude_none=True) == raw


def test_task_overdue():
    past = datetime(2020, 1, 1, tzinfo=timezone.utc)
    now = datetime(2024, 1, 1, tzinfo=timezone.utc)

    assert Task(id=1, title="t", due_date=past).is_overdue(now)
    assert not Task(id=1, title="t", due_date=past, status=TaskStatus.DONE).is_overdue(now)
    assert not Task(id=1, title="t").is_overdue(now)


def test_unknown_fields_are_ignored():
    user = User.model_validate({"id": 1, "name": "A", "passwordHash": "x"})

    assert not hasattr(user, "password_hash")
