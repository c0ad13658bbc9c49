"""Componentes de UI para CLI (Rich).

Por qué separar componentes:
- Evita mezclar lógica de comandos con detalles visuales.
- Permite reutilizar tablas/paneles en múltiples comandos.
- Los estilos (`accent`, `muted`, `success`...) vienen del tema que provee
  `with_theme`; aquí solo se nombran.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Iterable

from rich.align import Align
from rich.console import Console, Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from core.domain.models import Comment, MetricsDashboard, Task, TaskPriority, TaskStatus, Team, TeamStatus, User

_STATUS_STYLE = {
    TaskStatus.TODO: "muted",
    TaskStatus.PENDING: "muted",
    TaskStatus.IN_PROGRESS: "accent",
    TaskStatus.IN_REVIEW: "warning",
    TaskStatus.DONE: "success",
    TaskStatus.CANCELLED: "muted",
}

_PRIORITY_STYLE = {
    TaskPriority.LOW: "muted",
    TaskPriority.MEDIUM: "",
    TaskPriority.HIGH: "warning",
    TaskPriority.URGENT: "error",
}

_TEAM_STATUS_STYLE = {
    TeamStatus.ACTIVE: "success",
    TeamStatus.INACTIVE: "muted",
    TeamStatus.FULL: "warning",
    TeamStatus.NEEDS_LEADER: "error",
}


def _date(value: datetime | None) -> str:
    return value.strftime("%Y-%m-%d") if value else "-"


def print_banner(console: Console) -> None:
    """Imprime el banner de bienvenida."""

    title = Text("TeamFlow", style="accent")
    subtitle = Text("Equipos • Tareas • Comentarios", style="muted")
    body = Align.center(Text.assemble(title, "\n", subtitle), vertical="middle")
    console.print(Panel(body, border_style="accent", padding=(1, 4)))


def build_users_table(users: Iterable[User], *, title: str = "Users") -> Table:
    table = Table(title=title)
    table.add_column("ID", style="accent", no_wrap=True)
    table.add_column("Name")
    table.add_column("Phone", style="muted")
    table.add_column("Role")
    for user in users:
        table.add_row(str(user.id), user.full_name, user.phone or "-", user.role.value)
    return table


def build_teams_table(teams: Iterable[Team]) -> Table:
    table = Table(title="Teams")
    table.add_column("ID", style="accent", no_wrap=True)
    table.add_column("Name")
    table.add_column("Leader")
    table.add_column("Members", justify="right")
    table.add_column("Status")
    for team in teams:
        status = team.status
        table.add_row(
            str(team.id),
            team.name,
            team.leader.full_name if team.leader else "-",
            team.capacity_label,
            Text(status.label(), style=_TEAM_STATUS_STYLE[status]),
        )
    return table


def build_team_panel(team: Team) -> Panel:
    """Detalle de un equipo: cabecera + miembros."""

    header = Text()
    if team.description:
        header.append(team.description.strip() + "\n\n")
    header.append("Leader: ", style="bold")
    header.append((team.leader.full_name if team.leader else "-") + "\n")
    header.append("Capacity: ", style="bold")
    header.append(f"{team.capacity_label} ({team.capacity_percentage}%)\n")
    header.append("Status: ", style="bold")
    header.append(team.status.label(), style=_TEAM_STATUS_STYLE[team.status])

    body: list[Any] = [header]
    if team.members:
        body.append(build_users_table(team.members, title="Members"))
    return Panel(Group(*body), title=Text(team.name, style="accent"), border_style="accent")


def build_tasks_table(tasks: Iterable[Task]) -> Table:
    table = Table(title="Tasks")
    table.add_column("ID", style="accent", no_wrap=True)
    table.add_column("Title")
    table.add_column("Status")
    table.add_column("Priority")
    table.add_column("Assignee")
    table.add_column("Due", style="muted")
    for task in tasks:
        due = _date(task.due_date)
        table.add_row(
            str(task.id),
            task.title,
            Text(task.status.value, style=_STATUS_STYLE[task.status]),
            Text(task.priority.value, style=_PRIORITY_STYLE[task.priority]),
            task.assignee.full_name if task.assignee else "-",
            Text(due, style="error") if task.is_overdue() else due,
        )
    return table


def build_task_panel(task: Task) -> Panel:
    body = Text()
    if task.description:
        body.append(task.description.strip() + "\n\n")
    body.append("Status: ", style="bold")
    body.append(task.status.value + "\n", style=_STATUS_STYLE[task.status])
    body.append("Priority: ", style="bold")
    body.append(task.priority.value + "\n", style=_PRIORITY_STYLE[task.priority])
    body.append("Type: ", style="bold")
    body.append(task.type.value + "\n")
    body.append("Assignee: ", style="bold")
    body.append((task.assignee.full_name if task.assignee else "-") + "\n")
    body.append("Due: ", style="bold")
    body.append(_date(task.due_date))
    if task.tags:
        body.append("\nTags: ", style="bold")
        body.append(", ".join(task.tags), style="muted")
    if task.subtasks:
        body.append("\n\nSubtasks:\n", style="bold")
        for sub in task.subtasks:
            body.append(f"- #{sub.id} {sub.title} [{sub.status.value}]\n")
    return Panel(body, title=Text(f"#{task.id} {task.title}", style="accent"), border_style="accent")


def build_comments_table(comments: Iterable[Comment], *, task_id: int) -> Table:
    table = Table(title=f"Comments on task #{task_id}")
    table.add_column("ID", style="accent", no_wrap=True)
    table.add_column("Author")
    table.add_column("When", style="muted")
    table.add_column("Comment")
    for comment in comments:
        author = comment.author.name if comment.author else f"#{comment.author_id}"
        table.add_row(str(comment.id), author, comment.created_at.strftime("%Y-%m-%d %H:%M"), comment.body)
    return table


def build_dashboard_panel(dashboard: MetricsDashboard) -> Panel:
    """Resumen del panel de métricas (la forma exacta depende del backend)."""

    body = Text()
    context = dashboard.business_context or {}
    if context:
        body.append("Business context\n", style="bold")
        for key in sorted(context):
            value = context[key]
            if isinstance(value, (dict, list)) or value in (None, ""):
                continue
            body.append(f"  {key}: ", style="muted")
            body.append(f"{value}\n")
    if dashboard.metrics_by_category:
        body.append("\nMetrics by category\n", style="bold")
        for category, items in sorted(dashboard.metrics_by_category.items()):
            count = len(items) if isinstance(items, (list, dict)) else items
            body.append(f"  {category}: ", style="muted")
            body.append(f"{count}\n")
    body.append(f"\nRecent metric values: {len(dashboard.recent_metrics)}", style="muted")
    return Panel(body, title=Text("Dashboard", style="accent"), border_style="accent")
