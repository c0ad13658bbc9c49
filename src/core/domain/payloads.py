"""Cuerpos de petición (mutaciones y filtros).

Se serializan con `model_dump(mode="json", by_alias=True, exclude_none=True)`:
los campos opcionales sin valor no viajan al backend.
"""

from __future__ import annotations

from datetime import date
from typing import Literal

from pydantic import Field

from core.domain.models import ApiModel, TaskPriority, TaskStatus, TaskType


class LoginPayload(ApiModel):
    phone: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class RegisterPayload(ApiModel):
    phone: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)


class CreateCommentPayload(ApiModel):
    task_id: int
    body: str = Field(..., min_length=1)


class UpdateCommentPayload(ApiModel):
    body: str = Field(..., min_length=1)


class CreateTeamData(ApiModel):
    name: str = Field(..., min_length=1)
    description: str | None = None


class UpdateTeamData(ApiModel):
    name: str | None = Field(default=None, min_length=1)
    description: str | None = None
    max_members: int | None = Field(default=None, ge=1)
    is_active: bool | None = None


class AddMemberData(ApiModel):
    user_id: int


class AssignLeaderData(ApiModel):
    leader_id: int


class TransferMemberData(ApiModel):
    user_id: int
    from_team_id: int
    to_team_id: int


class CreateTaskRequest(ApiModel):
    title: str = Field(..., min_length=1)
    type: TaskType = TaskType.PERSONAL
    description: str | None = None
    priority: TaskPriority | None = None
    start_date: date | None = None
    due_date: date | None = None
    estimated_hours: float | None = Field(default=None, ge=0)
    assignee_id: int | None = None
    team_id: int | None = None
    parent_task_id: int | None = None
    tags: list[str] | None = None
    depends_on: list[int] | None = None


class UpdateTaskRequest(ApiModel):
    title: str | None = Field(default=None, min_length=1)
    description: str | None = None
    priority: TaskPriority | None = None
    start_date: date | None = None
    due_date: date | None = None
    progress: int | None = Field(default=None, ge=0, le=100)
    estimated_hours: float | None = Field(default=None, ge=0)
    actual_hours: float | None = Field(default=None, ge=0)
    assignee_id: int | None = None
    tags: list[str] | None = None


class ChangeStatusPayload(ApiModel):
    status: TaskStatus


class BulkStatusPayload(ApiModel):
    task_ids: list[int] = Field(..., min_length=1)
    status: TaskStatus


class BulkAssignPayload(ApiModel):
    task_ids: list[int] = Field(..., min_length=1)
    assignee_id: int


class BulkDeletePayload(ApiModel):
    task_ids: list[int] = Field(..., min_length=1)


class AddDependencyPayload(ApiModel):
    depends_on_id: int


class TaskFilters(ApiModel):
    """Filtros de `GET /tasks/filtered`. Vacío equivale a "sin filtros"."""

    status: TaskStatus | None = None
    priority: TaskPriority | None = None
    type: TaskType | None = None
    assignee_id: int | None = None
    creator_id: int | None = None
    team_id: int | None = None
    parent_task_id: int | None = None
    has_subtasks: bool | None = None
    has_dependencies: bool | None = None
    tags: list[str] | None = None
    search: str | None = None
    due_date_from: date | None = None
    due_date_to: date | None = None
    created_from: date | None = None
    created_to: date | None = None
    updated_from: date | None = None
    updated_to: date | None = None
    sort_by: Literal["dueDate", "priority", "createdAt", "title"] | None = None
    sort_order: Literal["asc", "desc"] | None = None
    page: int | None = Field(default=None, ge=1)
    limit: int | None = Field(default=None, ge=1, le=100)

    def is_empty(self) -> bool:
        return not self.to_params()

    def to_params(self) -> dict[str, str | list[str]]:
        """Query string para httpx (booleanos como `true`/`false`)."""

        params: dict[str, str | list[str]] = {}
        for key, value in self.model_dump(mode="json", by_alias=True, exclude_none=True).items():
            if isinstance(value, bool):
                params[key] = "true" if value else "false"
            elif isinstance(value, list):
                params[key] = [str(v) for v in value]
            else:
                params[key] = str(value)
        return params


class UpdateProfileData(ApiModel):
    name: str | None = Field(default=None, min_length=1)
    surname: str | None = None
    patronymic: str | None = None
    birth_date: date | None = None
    personal_telegram: str | None = None
    personal_instagram: str | None = None
    personal_phone: str | None = None
    years_in_business: int | None = Field(default=None, ge=0)
    hobbies: str | None = None
