"""Modelos del dominio (Pydantic v2).

Por qué Pydantic en el dominio:
- Validación en el borde: lo que devuelve el backend se normaliza una vez aquí
  y el resto del código trabaja con una única forma canónica.
- El backend habla camelCase; en Python usamos snake_case vía alias.

Nota:
- Estos modelos describen *qué* devuelve el backend, no *cómo* se obtiene.
- Los campos desconocidos se ignoran: el backend evoluciona más rápido que el
  cliente.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, model_validator
from pydantic.alias_generators import to_camel
from pydantic.config import ConfigDict


class ApiModel(BaseModel):
    """Base común: alias camelCase en el wire, tolerante a campos extra."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


class Role(str, Enum):
    USER = "USER"
    TEAM_LEADER = "TEAM_LEADER"
    ADMIN = "ADMIN"


class User(ApiModel):
    """Usuario tal y como lo expone el backend (sin hash de contraseña)."""

    id: int
    name: str = Field(default="", description="Nombre de pila.")
    surname: str | None = Field(default=None, description="Apellido.")
    patronymic: str | None = Field(default=None, description="Patronímico.")
    phone: str | None = Field(default=None, description="Teléfono usado para iniciar sesión.")
    role: Role = Field(default=Role.USER)
    birth_date: datetime | None = None
    personal_telegram: str | None = None
    personal_instagram: str | None = None
    personal_phone: str | None = None
    years_in_business: int | None = Field(default=None, ge=0)
    hobbies: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def full_name(self) -> str:
        parts = [self.surname, self.name, self.patronymic]
        joined = " ".join(p.strip() for p in parts if p and p.strip())
        return joined or (self.phone or f"#{self.id}")

    @property
    def initials(self) -> str:
        letters = [p.strip()[0] for p in (self.name, self.surname) if p and p.strip()]
        return "".join(letters).upper() or "?"


class CommentAuthor(ApiModel):
    id: int
    name: str = ""


class Comment(ApiModel):
    """Comentario de una tarea."""

    id: int
    body: str
    created_at: datetime
    task_id: int
    author_id: int
    author: CommentAuthor | None = Field(
        default=None,
        description="Resumen del autor si el backend lo incluye.",
    )


class TaskStatus(str, Enum):
    TODO = "TODO"
    PENDING = "PENDING"
    IN_PROGRESS = "IN_PROGRESS"
    IN_REVIEW = "IN_REVIEW"
    DONE = "DONE"
    CANCELLED = "CANCELLED"


class TaskPriority(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    URGENT = "URGENT"


class TaskType(str, Enum):
    PERSONAL = "PERSONAL"
    TEAM = "TEAM"


class TaskCounts(ApiModel):
    subtasks: int = 0
    dependencies: int = 0
    dependents: int = 0


class Task(ApiModel):
    """Tarea. Solo los campos que el cliente usa; el resto se ignora."""

    id: int
    title: str
    description: str | None = None
    status: TaskStatus = TaskStatus.TODO
    priority: TaskPriority = TaskPriority.MEDIUM
    type: TaskType = TaskType.PERSONAL
    assignee_id: int | None = None
    assignee: User | None = None
    creator_id: int | None = None
    creator: User | None = None
    team_id: int | None = None
    parent_task_id: int | None = None
    start_date: datetime | None = None
    due_date: datetime | None = None
    completed_at: datetime | None = None
    estimated_hours: float | None = None
    actual_hours: float | None = None
    progress: int | None = Field(default=None, ge=0, le=100)
    tags: list[str] = Field(default_factory=list)
    subtasks: list[Task] = Field(default_factory=list)
    counts: TaskCounts | None = Field(default=None, alias="_count")
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def is_done(self) -> bool:
        return self.status in (TaskStatus.DONE, TaskStatus.CANCELLED)

    def is_overdue(self, now: datetime | None = None) -> bool:
        if self.due_date is None or self.is_done:
            return False
        now = now or datetime.now(tz=self.due_date.tzinfo)
        return self.due_date < now


class TaskActivity(ApiModel):
    id: int
    action: str
    description: str | None = None
    user_id: int | None = None
    user: User | None = None
    task_id: int | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)
    created_at: datetime | None = None


class TaskDependency(ApiModel):
    id: int
    task_id: int | None = None
    depends_on_id: int | None = None
    depends_on: Task | None = None
    created_at: datetime | None = None


class TeamStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    FULL = "full"
    NEEDS_LEADER = "needs_leader"

    def label(self) -> str:
        return {
            TeamStatus.ACTIVE: "Active",
            TeamStatus.INACTIVE: "Inactive",
            TeamStatus.FULL: "Full",
            TeamStatus.NEEDS_LEADER: "Needs leader",
        }[self]


class Team(ApiModel):
    """Equipo en forma canónica.

    El backend puede devolver la membresía como `members` o `users`, como
    usuarios directos o envueltos en filas `{user: {...}}`, y a veces solo el
    recuento `_count.members`. `_normalize` lo reduce todo a `members` +
    `member_count` antes de validar.
    """

    id: int
    name: str
    description: str | None = None
    is_active: bool = True
    max_members: int = Field(default=10, ge=0, description="Capacidad del equipo.")
    leader_id: int | None = None
    leader: User | None = None
    members: list[User] = Field(default_factory=list)
    tasks: list[Task] = Field(default_factory=list)
    reported_member_count: int | None = Field(
        default=None,
        description="Recuento que envía el backend en `_count.members`, si lo hay.",
    )
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @model_validator(mode="before")
    @classmethod
    def _normalize(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)

        rows = data.get("members")
        if rows is None:
            rows = data.pop("users", None)
        else:
            data.pop("users", None)
        if rows is not None:
            data["members"] = [
                row["user"] if isinstance(row, dict) and isinstance(row.get("user"), dict) else row
                for row in rows
            ]

        counts = data.pop("_count", None)
        if isinstance(counts, dict) and counts.get("members") is not None:
            data.setdefault("reportedMemberCount", counts["members"])

        leader = data.get("leader")
        has_leader_id = data.get("leaderId") is not None or data.get("leader_id") is not None
        if not has_leader_id and isinstance(leader, dict) and leader.get("id") is not None:
            data["leaderId"] = leader["id"]
        return data

    @property
    def member_count(self) -> int:
        if self.reported_member_count is not None:
            return self.reported_member_count
        return len(self.members)

    @property
    def is_full(self) -> bool:
        return self.member_count >= self.max_members

    @property
    def can_add_members(self) -> bool:
        return self.is_active and not self.is_full

    @property
    def status(self) -> TeamStatus:
        if not self.is_active:
            return TeamStatus.INACTIVE
        if not self.leader_id:
            return TeamStatus.NEEDS_LEADER
        if self.is_full:
            return TeamStatus.FULL
        return TeamStatus.ACTIVE

    @property
    def capacity_label(self) -> str:
        return f"{self.member_count}/{self.max_members}"

    @property
    def capacity_percentage(self) -> int:
        if self.max_members <= 0:
            return 100
        return round(self.member_count / self.max_members * 100)

    def is_leader(self, user_id: int) -> bool:
        return self.leader_id == user_id

    def is_member(self, user_id: int) -> bool:
        return any(member.id == user_id for member in self.members)


class TeamHistoryEntry(ApiModel):
    id: int
    user_id: int | None = None
    user: User | None = None
    team_id: int | None = None
    action: str | None = None
    joined_at: datetime | None = None
    left_at: datetime | None = None
    created_at: datetime | None = None


class MetricsDashboard(ApiModel):
    """Panel de métricas. La forma varía según el backend; se conserva todo."""

    model_config = ConfigDict(extra="allow")

    business_context: dict[str, Any] | None = None
    metrics_by_category: dict[str, Any] = Field(default_factory=dict)
    category_analysis: list[dict[str, Any]] = Field(default_factory=list)
    recent_metrics: list[dict[str, Any]] = Field(default_factory=list)
    recent_history: list[dict[str, Any]] = Field(default_factory=list)


class AuthResult(ApiModel):
    """Resultado de login/registro ya normalizado."""

    token: str
    user: User | None = None


Task.model_rebuild()
