"""Comentarios de tareas.

Clave: `("comments", task_id)`. Cualquier escritura sobre un comentario de la
tarea T invalida `comments(T)`.
"""

from __future__ import annotations

from core.domain import query_keys as keys
from core.domain.models import Comment
from core.domain.payloads import CreateCommentPayload, UpdateCommentPayload

from .base import EntityApi


class CommentsApi(EntityApi):
    async def list(self, task_id: int) -> list[Comment]:
        return await self._query(
            keys.comments(task_id),
            "/comments",
            params={"taskId": int(task_id)},
            model=list[Comment],
        )

    async def create(self, task_id: int, body: str) -> Comment:
        payload = CreateCommentPayload(task_id=task_id, body=body)
        return await self._mutate(
            "POST",
            "/comments",
            body=payload,
            model=Comment,
            invalidates=[keys.comments(task_id)],
        )

    async def update(self, comment_id: int, task_id: int, body: str) -> Comment:
        return await self._mutate(
            "PUT",
            f"/comments/{int(comment_id)}",
            body=UpdateCommentPayload(body=body),
            model=Comment,
            invalidates=[keys.comments(task_id)],
        )

    async def delete(self, comment_id: int, task_id: int) -> None:
        await self._mutate(
            "DELETE",
            f"/comments/{int(comment_id)}",
            invalidates=[keys.comments(task_id)],
        )
