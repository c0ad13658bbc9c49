"""Tareas.

Notas:
- `GET /tasks` devuelve una lista; `GET /tasks/filtered` devuelve una página
  `{tasks: [...], total, ...}`. Ambas se normalizan a `list[Task]`.
- Toda escritura invalida `("tasks",)` y `("metrics",)`: el panel de métricas
  se calcula a partir de las tareas.
"""

from __future__ import annotations

from typing import Any, Mapping

from core.domain import query_keys as keys
from core.domain.models import Task, TaskActivity, TaskDependency, TaskStatus
from core.domain.payloads import (
    AddDependencyPayload,
    BulkAssignPayload,
    BulkDeletePayload,
    BulkStatusPayload,
    ChangeStatusPayload,
    CreateTaskRequest,
    TaskFilters,
    UpdateTaskRequest,
)
from core.errors import ValidationError

from .base import EntityApi

_WRITES = (keys.tasks(), keys.metrics())


def _task_rows(payload: Any) -> Any:
    if isinstance(payload, Mapping):
        rows = payload.get("tasks", payload.get("data"))
        if rows is None:
            raise ValidationError("Task page without a 'tasks' list")
        return rows
    return payload if payload is not None else []


class TasksApi(EntityApi):
    async def list(self, filters: TaskFilters | None = None) -> list[Task]:
        filters = filters if filters is not None and not filters.is_empty() else None
        path = "/tasks/filtered" if filters else "/tasks"
        params = filters.to_params() if filters else None

        async def fetch() -> list[Task]:
            payload = await self.http.get(path, params=params)
            return self._parse(list[Task], _task_rows(payload))

        return await self.queries.fetch_query(keys.task_list(filters), fetch)

    async def get(self, task_id: int) -> Task:
        return await self._query(keys.task(task_id), f"/tasks/{int(task_id)}/details", model=Task)

    async def activity(self, task_id: int) -> list[TaskActivity]:
        return await self._query(
            keys.task_activity(task_id),
            f"/tasks/{int(task_id)}/activity",
            model=list[TaskActivity],
        )

    async def subtasks(self, task_id: int) -> list[Task]:
        return await self._query(keys.subtasks(task_id), f"/tasks/subtasks/{int(task_id)}", model=list[Task])

    async def dependencies(self, task_id: int) -> list[TaskDependency]:
        return await self._query(
            keys.task_dependencies(task_id),
            f"/tasks/dependencies/{int(task_id)}",
            model=list[TaskDependency],
        )

    async def create(self, data: CreateTaskRequest) -> Task:
        return await self._mutate("POST", "/tasks", body=data, model=Task, invalidates=_WRITES)

    async def update(self, task_id: int, data: UpdateTaskRequest) -> Task:
        return await self._mutate("PUT", f"/tasks/{int(task_id)}", body=data, model=Task, invalidates=_WRITES)

    async def change_status(self, task_id: int, status: TaskStatus) -> Task:
        return await self._mutate(
            "PATCH",
            f"/tasks/{int(task_id)}/status",
            body=ChangeStatusPayload(status=status),
            model=Task,
            invalidates=_WRITES,
        )

    async def delete(self, task_id: int) -> None:
        await self._mutate("DELETE", f"/tasks/{int(task_id)}", invalidates=_WRITES)

    async def bulk_update_status(self, task_ids: list[int], status: TaskStatus) -> Any:
        return await self._mutate(
            "POST",
            "/tasks/bulk/status",
            body=BulkStatusPayload(task_ids=task_ids, status=status),
            invalidates=_WRITES,
        )

    async def bulk_assign(self, task_ids: list[int], assignee_id: int) -> Any:
        return await self._mutate(
            "POST",
            "/tasks/bulk/assign",
            body=BulkAssignPayload(task_ids=task_ids, assignee_id=assignee_id),
            invalidates=_WRITES,
        )

    async def bulk_delete(self, task_ids: list[int]) -> Any:
        return await self._mutate(
            "POST",
            "/tasks/bulk/delete",
            body=BulkDeletePayload(task_ids=task_ids),
            invalidates=_WRITES,
        )

    async def add_dependency(self, task_id: int, depends_on_id: int) -> Any:
        return await self._mutate(
            "POST",
            f"/tasks/{int(task_id)}/dependencies",
            body=AddDependencyPayload(depends_on_id=depends_on_id),
            invalidates=_WRITES,
        )

    async def remove_dependency(self, task_id: int, dependency_id: int) -> None:
        await self._mutate(
            "DELETE",
            f"/tasks/{int(task_id)}/dependencies/{int(dependency_id)}",
            invalidates=_WRITES,
        )
