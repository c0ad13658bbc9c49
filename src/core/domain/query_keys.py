"""Claves de caché (query keys).

Reglas:
- Dos peticiones lógicamente idénticas producen la misma clave (los ids se
  normalizan a `int`, los filtros se congelan y ordenan).
- Dos peticiones distintas nunca colisionan: los filtros van envueltos en
  `Params`, que no es igual a ninguna tupla normal.
- La invalidación funciona por prefijo: `("teams",)` cubre `("teams", 3)`.
"""

from __future__ import annotations

from collections.abc import Hashable, Mapping
from typing import Any

from pydantic import BaseModel

QueryKey = tuple[Hashable, ...]


class Params(tuple):
    """Tupla ordenada de pares `(nombre, valor)` que representa filtros."""

    __slots__ = ()

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Params) and tuple.__eq__(self, other)

    def __ne__(self, other: object) -> bool:
        return not self == other

    def __hash__(self) -> int:
        return hash(("Params", tuple(self)))

    def __repr__(self) -> str:
        return f"Params({tuple.__repr__(self)})"


def freeze(value: Any) -> Hashable:
    """Convierte un valor en una parte de clave hashable y determinista."""

    if isinstance(value, BaseModel):
        return freeze(value.model_dump(mode="json", by_alias=True, exclude_none=True))
    if isinstance(value, Mapping):
        items = ((str(k), freeze(v)) for k, v in value.items() if v is not None)
        return Params(sorted(items, key=lambda item: item[0]))
    if isinstance(value, Params):
        return value
    if isinstance(value, (set, frozenset)):
        return tuple(sorted((freeze(v) for v in value), key=repr))
    if isinstance(value, (list, tuple)):
        return tuple(freeze(v) for v in value)
    return value


def make_key(*parts: Any) -> QueryKey:
    return tuple(freeze(part) for part in parts)


def is_prefix(prefix: QueryKey, key: QueryKey) -> bool:
    return len(prefix) <= len(key) and key[: len(prefix)] == prefix


def _id(value: int | str) -> int:
    return int(value)


def users() -> QueryKey:
    return ("users",)


def available_users() -> QueryKey:
    return ("users", "available-for-teams")


def teams() -> QueryKey:
    return ("teams",)


def team(team_id: int | str) -> QueryKey:
    return ("teams", _id(team_id))


def team_history(team_id: int | str) -> QueryKey:
    return ("teams", _id(team_id), "history")


def user_active_team(user_id: int | str) -> QueryKey:
    return ("teams", "user", _id(user_id))


def tasks() -> QueryKey:
    return ("tasks",)


def task_list(filters: Mapping[str, Any] | BaseModel | None = None) -> QueryKey:
    return make_key("tasks", "list", filters or {})


def task(task_id: int | str) -> QueryKey:
    return ("tasks", _id(task_id))


def task_activity(task_id: int | str) -> QueryKey:
    return ("tasks", _id(task_id), "activity")


def subtasks(task_id: int | str) -> QueryKey:
    return ("tasks", _id(task_id), "subtasks")


def task_dependencies(task_id: int | str) -> QueryKey:
    return ("tasks", _id(task_id), "dependencies")


def comments(task_id: int | str) -> QueryKey:
    return ("comments", _id(task_id))


def metrics() -> QueryKey:
    return ("metrics",)


def metrics_dashboard() -> QueryKey:
    return ("metrics", "dashboard")
