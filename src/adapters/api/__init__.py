"""Módulos de API por entidad (auth, users, teams, tasks, comments, metrics)."""

from .auth import AuthApi
from .comments import CommentsApi
from .facade import TeamflowApi
from .metrics import MetricsApi
from .tasks import TasksApi
from .teams import TeamsApi
from .users import UsersApi

__all__ = [
    "AuthApi",
    "CommentsApi",
    "MetricsApi",
    "TasksApi",
    "TeamflowApi",
    "TeamsApi",
    "UsersApi",
]
