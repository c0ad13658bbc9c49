"""Panel de métricas."""

from __future__ import annotations

from core.domain import query_keys as keys
from core.domain.models import MetricsDashboard
from core.errors import HttpError, is_transient

from .base import EntityApi


def _retry_unless_missing(failure_count: int, exc: BaseException) -> bool:
    # Un 404 significa "sin contexto de negocio todavía": reintentar no ayuda.
    if isinstance(exc, HttpError) and exc.status == 404:
        return False
    return failure_count < 1 and is_transient(exc)


class MetricsApi(EntityApi):
    async def dashboard(self) -> MetricsDashboard:
        return await self._query(
            keys.metrics_dashboard(),
            "/metrics/dashboard",
            model=MetricsDashboard,
            retry=_retry_unless_missing,
        )
