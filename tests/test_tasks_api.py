import httpx
import pytest

from core.domain import query_keys as keys
from core.domain.models import TaskPriority, TaskStatus
from core.domain.payloads import CreateTaskRequest, TaskFilters, UpdateTaskRequest

TASK = {
    "id": 5,
    "title": "Write report",
    "status": "IN_PROGRESS",
    "priority": "HIGH",
    "type": "TEAM",
    "teamId": 3,
    "creatorId": 10,
    "tags": ["q1"],
    "_count": {"subtasks": 1, "dependencies": 0, "dependents": 0},
    "subtasks": [{"id": 6, "title": "Collect data", "status": "DONE", "priority": "LOW", "type": "TEAM"}],
}


@pytest.mark.asyncio
async def test_list_without_filters_uses_plain_endpoint(api, backend):
    backend.add("GET", "/api/tasks", [TASK])

    tasks = await api.tasks.list()

    assert tasks[0].status is TaskStatus.IN_PROGRESS
    assert tasks[0].subtasks[0].is_done
    assert tasks[0].counts.subtasks == 1
    assert len(backend.calls("GET", "/api/tasks")) == 1


@pytest.mark.asyncio
async def test_filtered_list_unwraps_page(api, backend, queries):
    backend.add("GET", "/api/tasks/filtered", {"tasks": [TASK], "total": 1, "page": 1, "limit": 20})
    filters = TaskFilters(status=TaskStatus.IN_PROGRESS, team_id=3, has_subtasks=True)

    tasks = await api.tasks.list(filters)

    request = backend.calls("GET", "/api/tasks/filtered")[0]
    assert request.url.params["status"] == "IN_PROGRESS"
    assert request.url.params["teamId"] == "3"
    assert request.url.params["hasSubtasks"] == "true"
    assert [t.id for t in tasks] == [5]
    assert queries.get_query_data(keys.task_list({"teamId": 3, "status": "IN_PROGRESS", "hasSubtasks": True}))


@pytest.mark.asyncio
async def test_empty_filters_use_plain_endpoint(api, backend):
    backend.add("GET", "/api/tasks", [])

    assert await api.tasks.list(TaskFilters()) == []
    assert len(backend.calls("GET", "/api/tasks/filtered")) == 0


@pytest.mark.asyncio
async def test_create_invalidates_tasks_and_metrics(api, backend, queries):
    backend.add("GET", "/api/tasks", [TASK])
    backend.add("GET", "/api/metrics/dashboard", {"recentMetrics": []})
    backend.add("POST", "/api/tasks", {**TASK, "id": 9, "title": "New"}, status=201)

    await api.tasks.list()
    await api.metrics.dashboard()
    created = await api.tasks.create(
        CreateTaskRequest(title="New", priority=TaskPriority.URGENT, team_id=3, tags=["x"])
    )

    assert created.id == 9
    assert backend.body(backend.calls("POST", "/api/tasks")[0]) == {
        "title": "New",
        "type": "PERSONAL",
        "priority": "URGENT",
        "teamId": 3,
        "tags": ["x"],
    }
    assert queries.get_query_state(keys.task_list()).is_stale
    assert queries.get_query_state(keys.metrics_dashboard()).is_stale


@pytest.mark.asyncio
async def test_detail_and_status_change(api, backend, queries):
    backend.add("GET", "/api/tasks/5/details", TASK)
    backend.add("PATCH", "/api/tasks/5/status", {**TASK, "status": "DONE"})
    backend.add("PUT", "/api/tasks/5", {**TASK, "progress": 50})

    task = await api.tasks.get(5)
    assert task.title == "Write report"

    done = await api.tasks.change_status(5, TaskStatus.DONE)
    assert done.status is TaskStatus.DONE
    assert backend.body(backend.calls("PATCH", "/api/tasks/5/status")[0]) == {"status": "DONE"}
    assert queries.get_query_state(keys.task(5)).is_stale

    updated = await api.tasks.update(5, UpdateTaskRequest(progress=50))
    assert updated.progress == 50
    assert backend.body(backend.calls("PUT", "/api/tasks/5")[0]) == {"progress": 50}


@pytest.mark.asyncio
async def test_bulk_and_dependency_endpoints(api, backend):
    backend.add("POST", "/api/tasks/bulk/status", {"updated": 2})
    backend.add("POST", "/api/tasks/bulk/assign", {"updated": 2})
    backend.add("POST", "/api/tasks/bulk/delete", {"deleted": 2})
    backend.add("POST", "/api/tasks/5/dependencies", {"id": 1, "taskId": 5, "dependsOnId": 6})
    backend.on("DELETE", "/api/tasks/5/dependencies/1", lambda request: httpx.Response(204))
    backend.add("GET", "/api/tasks/dependencies/5", [{"id": 1, "taskId": 5, "dependsOnId": 6}])

    await api.tasks.bulk_update_status([5, 6], TaskStatus.DONE)
    await api.tasks.bulk_assign([5, 6], 11)
    await api.tasks.bulk_delete([5, 6])
    await api.tasks.add_dependency(5, 6)
    await api.tasks.remove_dependency(5, 1)
    deps = await api.tasks.dependencies(5)

    assert backend.body(backend.calls("POST", "/api/tasks/bulk/status")[0]) == {"taskIds": [5, 6], "status": "DONE"}
    assert backend.body(backend.calls("POST", "/api/tasks/bulk/assign")[0]) == {"taskIds": [5, 6], "assigneeId": 11}
    assert backend.body(backend.calls("POST", "/api/tasks/bulk/delete")[0]) == {"taskIds": [5, 6]}
    assert backend.body(backend.calls("POST", "/api/tasks/5/dependencies")[0]) == {"dependsOnId": 6}
    assert deps[0].depends_on_id == 6
