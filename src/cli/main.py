"""CLI principal (typer).

Por qué comandos finos:
- Cada comando solo traduce argumentos -> llamada a la API -> componente Rich.
- Settings, consola, caché y sesión llegan por contexto (ver `cli.providers`).
"""

from __future__ import annotations

from datetime import date
from pathlib import Path
from typing import Optional

import typer

from adapters.json_exporter import export_json
from cli import doctor, runtime
from cli.providers import CONSOLE, with_providers
from cli.ui_components import (
    build_comments_table,
    build_dashboard_panel,
    build_task_panel,
    build_tasks_table,
    build_team_panel,
    build_teams_table,
    build_users_table,
    print_banner,
)
from core.domain.models import TaskPriority, TaskStatus, TaskType
from core.domain.payloads import CreateTaskRequest, CreateTeamData, TaskFilters

app = typer.Typer(
    name="teamflow",
    no_args_is_help=True,
    help="Command-line client for the TeamFlow team and task backend.",
)
users_app = typer.Typer(no_args_is_help=True, help="Browse users.")
teams_app = typer.Typer(no_args_is_help=True, help="Manage teams and their members.")
tasks_app = typer.Typer(no_args_is_help=True, help="Manage tasks.")
comments_app = typer.Typer(no_args_is_help=True, help="Read and write task comments.")

app.add_typer(users_app, name="users")
app.add_typer(teams_app, name="teams")
app.add_typer(tasks_app, name="tasks")
app.add_typer(comments_app, name="comments")
app.add_typer(doctor.app, name="doctor")


# Sesión


@app.command()
def login(
    phone: str = typer.Option(..., "--phone", "-p", prompt=True, help="Phone number used to sign in."),
    password: str = typer.Option(..., "--password", prompt=True, hide_input=True),
) -> None:
    """Sign in and store the session token."""

    async def _run():
        async with runtime.open_api() as api:
            return await api.auth.login(phone, password)

    result = runtime.run_async(_run)
    name = result.user.full_name if result.user else phone
    CONSOLE.get().print(f"[success]Signed in as[/success] {name}")


@app.command()
def register(
    name: str = typer.Option(..., "--name", prompt=True),
    phone: str = typer.Option(..., "--phone", "-p", prompt=True),
    password: str = typer.Option(..., "--password", prompt=True, hide_input=True, confirmation_prompt=True),
) -> None:
    """Create an account and sign in."""

    async def _run():
        async with runtime.open_api() as api:
            return await api.auth.register(name, phone, password)

    result = runtime.run_async(_run)
    CONSOLE.get().print(f"[success]Welcome,[/success] {result.user.full_name if result.user else name}")


@app.command()
def logout() -> None:
    """Forget the stored session."""

    runtime.session_store().clear()
    CONSOLE.get().print("[muted]Signed out.[/muted]")


@app.command()
def whoami() -> None:
    """Show the signed-in user."""

    console = CONSOLE.get()
    session = runtime.session_store()
    user = session.get_user()
    if not session.get_token():
        console.print("[warning]Not signed in.[/warning]")
        raise typer.Exit(code=1)
    if user is None:
        console.print("Signed in (no user profile stored).")
        return
    console.print(build_users_table([user], title="Current user"))


@app.command()
def dashboard() -> None:
    """Show the metrics dashboard."""

    async def _run():
        async with runtime.open_api() as api:
            return await api.metrics.dashboard()

    console = CONSOLE.get()
    print_banner(console)
    console.print(build_dashboard_panel(runtime.run_async(_run)))


# Usuarios


@users_app.command("list")
def users_list() -> None:
    """List all users."""

    async def _run():
        async with runtime.open_api() as api:
            return await api.users.list()

    CONSOLE.get().print(build_users_table(runtime.run_async(_run)))


@users_app.command("available")
def users_available() -> None:
    """List users that can join a team."""

    async def _run():
        async with runtime.open_api() as api:
            return await api.users.available_for_teams()

    CONSOLE.get().print(build_users_table(runtime.run_async(_run), title="Available for teams"))


# Equipos


@teams_app.command("list")
def teams_list() -> None:
    """List teams."""

    async def _run():
        async with runtime.open_api() as api:
            return await api.teams.list()

    CONSOLE.get().print(build_teams_table(runtime.run_async(_run)))


@teams_app.command("show")
def teams_show(team_id: int = typer.Argument(..., help="Team id.")) -> None:
    """Show a team with its members."""

    async def _run():
        async with runtime.open_api() as api:
            return await api.teams.get(team_id)

    CONSOLE.get().print(build_team_panel(runtime.run_async(_run)))


@teams_app.command("create")
def teams_create(
    name: str = typer.Argument(...),
    description: Optional[str] = typer.Option(None, "--description", "-d"),
) -> None:
    """Create a team."""

    async def _run():
        async with runtime.open_api() as api:
            return await api.teams.create(CreateTeamData(name=name, description=description))

    team = runtime.run_async(_run)
    CONSOLE.get().print(f"[success]Created team[/success] #{team.id} {team.name}")


@teams_app.command("add-member")
def teams_add_member(team_id: int = typer.Argument(...), user_id: int = typer.Argument(...)) -> None:
    """Add a user to a team."""

    async def _run():
        async with runtime.open_api() as api:
            await api.teams.add_member(team_id, user_id)

    runtime.run_async(_run)
    CONSOLE.get().print(f"[success]Added user #{user_id} to team #{team_id}[/success]")


@teams_app.command("remove-member")
def teams_remove_member(team_id: int = typer.Argument(...), user_id: int = typer.Argument(...)) -> None:
    """Remove a user from a team."""

    async def _run():
        async with runtime.open_api() as api:
            await api.teams.remove_member(team_id, user_id)

    runtime.run_async(_run)
    CONSOLE.get().print(f"[success]Removed user #{user_id} from team #{team_id}[/success]")


@teams_app.command("set-leader")
def teams_set_leader(team_id: int = typer.Argument(...), user_id: int = typer.Argument(...)) -> None:
    """Make a user the team leader."""

    async def _run():
        async with runtime.open_api() as api:
            await api.teams.assign_leader(team_id, user_id)

    runtime.run_async(_run)
    CONSOLE.get().print(f"[success]User #{user_id} now leads team #{team_id}[/success]")


# Tareas


def _filters(
    status: Optional[TaskStatus],
    priority: Optional[TaskPriority],
    team_id: Optional[int],
    assignee_id: Optional[int],
    search: Optional[str],
) -> TaskFilters:
    return TaskFilters(
        status=status,
        priority=priority,
        team_id=team_id,
        assignee_id=assignee_id,
        search=search or None,
    )


@tasks_app.command("list")
def tasks_list(
    status: Optional[TaskStatus] = typer.Option(None, "--status", case_sensitive=False),
    priority: Optional[TaskPriority] = typer.Option(None, "--priority", case_sensitive=False),
    team_id: Optional[int] = typer.Option(None, "--team"),
    assignee_id: Optional[int] = typer.Option(None, "--assignee"),
    search: Optional[str] = typer.Option(None, "--search", "-s"),
) -> None:
    """List tasks, optionally filtered."""

    filters = _filters(status, priority, team_id, assignee_id, search)

    async def _run():
        async with runtime.open_api() as api:
            return await api.tasks.list(filters)

    CONSOLE.get().print(build_tasks_table(runtime.run_async(_run)))


@tasks_app.command("show")
def tasks_show(task_id: int = typer.Argument(...)) -> None:
    """Show a task with its subtasks."""

    async def _run():
        async with runtime.open_api() as api:
            return await api.tasks.get(task_id)

    CONSOLE.get().print(build_task_panel(runtime.run_async(_run)))


@tasks_app.command("create")
def tasks_create(
    title: str = typer.Argument(...),
    description: Optional[str] = typer.Option(None, "--description", "-d"),
    priority: Optional[TaskPriority] = typer.Option(None, "--priority", case_sensitive=False),
    task_type: TaskType = typer.Option(TaskType.PERSONAL, "--type", case_sensitive=False),
    due: Optional[str] = typer.Option(None, "--due", help="Due date (YYYY-MM-DD)."),
    assignee_id: Optional[int] = typer.Option(None, "--assignee"),
    team_id: Optional[int] = typer.Option(None, "--team"),
    parent_id: Optional[int] = typer.Option(None, "--parent", help="Create as a subtask of this task."),
) -> None:
    """Create a task."""

    try:
        due_date = date.fromisoformat(due) if due else None
    except ValueError:
        raise typer.BadParameter("--due must be YYYY-MM-DD") from None

    data = CreateTaskRequest(
        title=title,
        description=description,
        priority=priority,
        type=task_type,
        due_date=due_date,
        assignee_id=assignee_id,
        team_id=team_id,
        parent_task_id=parent_id,
    )

    async def _run():
        async with runtime.open_api() as api:
            return await api.tasks.create(data)

    task = runtime.run_async(_run)
    CONSOLE.get().print(f"[success]Created task[/success] #{task.id} {task.title}")


@tasks_app.command("status")
def tasks_status(
    task_id: int = typer.Argument(...),
    status: TaskStatus = typer.Argument(..., case_sensitive=False),
) -> None:
    """Change the status of a task."""

    async def _run():
        async with runtime.open_api() as api:
            return await api.tasks.change_status(task_id, status)

    task = runtime.run_async(_run)
    CONSOLE.get().print(f"[success]Task #{task.id}[/success] is now {task.status.value}")


@tasks_app.command("delete")
def tasks_delete(
    task_id: int = typer.Argument(...),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation."),
) -> None:
    """Delete a task."""

    if not yes:
        typer.confirm(f"Delete task #{task_id}?", abort=True)

    async def _run():
        async with runtime.open_api() as api:
            await api.tasks.delete(task_id)

    runtime.run_async(_run)
    CONSOLE.get().print(f"[success]Deleted task #{task_id}[/success]")


@tasks_app.command("export")
def tasks_export(
    output: Path = typer.Argument(Path("tasks.json"), help="Destination JSON file."),
    status: Optional[TaskStatus] = typer.Option(None, "--status", case_sensitive=False),
    priority: Optional[TaskPriority] = typer.Option(None, "--priority", case_sensitive=False),
    team_id: Optional[int] = typer.Option(None, "--team"),
    assignee_id: Optional[int] = typer.Option(None, "--assignee"),
    search: Optional[str] = typer.Option(None, "--search", "-s"),
) -> None:
    """Export tasks to a JSON file."""

    filters = _filters(status, priority, team_id, assignee_id, search)

    async def _run():
        async with runtime.open_api() as api:
            return await api.tasks.list(filters)

    tasks = runtime.run_async(_run)
    path = export_json(data=tasks, output_path=output)
    CONSOLE.get().print(f"[success]Exported {len(tasks)} task(s) to[/success] {path}")


# Comentarios


@comments_app.command("list")
def comments_list(task_id: int = typer.Argument(...)) -> None:
    """List the comments of a task."""

    async def _run():
        async with runtime.open_api() as api:
            return await api.comments.list(task_id)

    CONSOLE.get().print(build_comments_table(runtime.run_async(_run), task_id=task_id))


@comments_app.command("add")
def comments_add(task_id: int = typer.Argument(...), body: str = typer.Argument(...)) -> None:
    """Comment on a task."""

    async def _run():
        async with runtime.open_api() as api:
            return await api.comments.create(task_id, body)

    comment = runtime.run_async(_run)
    CONSOLE.get().print(f"[success]Added comment[/success] #{comment.id} to task #{task_id}")


def run() -> None:
    """Punto de entrada: aplica los providers una sola vez y lanza typer."""

    with_providers(app)()
