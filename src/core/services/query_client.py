"""Caché de estado del servidor (query client).

Una única instancia por proceso, construida al arrancar y provista por
contexto. Responsabilidades:

- Servir datos frescos sin volver a llamar al backend.
- Deduplicar: como mucho un fetch en vuelo por clave; los demás lo comparten.
- Reintentar fallos transitorios antes de exponer el error.
- Invalidar por prefijo tras una mutación para forzar el siguiente refetch.
- Ordenar respuestas por generación: una respuesta más antigua que la ya
  guardada se descarta aunque llegue después.

Limitación conocida: no hay cancelación; si el consumidor desaparece, el fetch
en vuelo termina igualmente y actualiza la caché.
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Awaitable, Callable, Iterable, TypeVar, Union

from core.domain.query_keys import QueryKey, is_prefix, make_key
from core.errors import is_transient

if TYPE_CHECKING:
    from core.config import AppSettings

logger = logging.getLogger(__name__)

T = TypeVar("T")

QueryFn = Callable[[], Awaitable[T]]
RetryPredicate = Callable[[int, BaseException], bool]
RetryPolicy = Union[int, RetryPredicate]
Listener = Callable[["QueryState"], None]


@dataclass(frozen=True)
class QueryClientConfig:
    stale_time: float = 30.0
    cache_time: float = 300.0
    retry: RetryPolicy = 1
    retry_delay: float = 1.0
    max_retry_delay: float = 30.0
    refetch_on_window_focus: bool = False

    @classmethod
    def from_settings(cls, settings: AppSettings) -> QueryClientConfig:
        return cls(
            stale_time=settings.query_stale_seconds,
            cache_time=settings.query_cache_seconds,
            retry=settings.query_retry,
            retry_delay=settings.query_retry_delay_seconds,
            max_retry_delay=settings.query_max_retry_delay_seconds,
            refetch_on_window_focus=settings.refetch_on_window_focus,
        )


@dataclass(frozen=True)
class QueryState:
    """Foto del estado observable de una clave (`data`, `error`, `is_loading`...)."""

    key: QueryKey
    data: Any = None
    error: BaseException | None = None
    has_data: bool = False
    is_fetching: bool = False
    is_stale: bool = True
    updated_at: float | None = None

    @property
    def status(self) -> str:
        if self.error is not None and not self.is_fetching:
            return "error"
        if self.has_data:
            return "success"
        if self.is_fetching:
            return "loading"
        return "idle"

    @property
    def is_loading(self) -> bool:
        return self.is_fetching and not self.has_data

    @property
    def is_success(self) -> bool:
        return self.status == "success"

    @property
    def is_error(self) -> bool:
        return self.status == "error"


@dataclass
class _Entry:
    key: QueryKey
    data: Any = None
    has_data: bool = False
    error: BaseException | None = None
    updated_at: float | None = None
    # Generación = número de fetch emitido para esta clave (1, 2, ...).
    generation: int = 0
    data_generation: int = 0
    invalidated_through: int = 0
    in_flight: asyncio.Future[Any] | None = None
    in_flight_generation: int = 0
    fetch_count: int = 0
    last_accessed: float = 0.0
    listeners: list[Listener] = field(default_factory=list)


def _consume_exception(future: asyncio.Future[Any]) -> None:
    # El error ya se entrega a quien espera; evita el aviso "never retrieved".
    if not future.cancelled():
        future.exception()


class QueryClient:
    """Caché de consultas compartida por toda la aplicación."""

    def __init__(
        self,
        config: QueryClientConfig | None = None,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.config = config or QueryClientConfig()
        self._clock = clock
        self._entries: dict[QueryKey, _Entry] = {}

    @classmethod
    def from_settings(cls, settings: AppSettings) -> QueryClient:
        return cls(QueryClientConfig.from_settings(settings))

    # Lectura

    async def fetch_query(
        self,
        key: QueryKey,
        fn: QueryFn[T],
        *,
        stale_time: float | None = None,
        retry: RetryPolicy | None = None,
    ) -> T:
        """Devuelve los datos de `key`, llamando a `fn` solo si hace falta."""

        key = make_key(*key)
        self._collect_garbage()
        entry = self._entry(key)
        entry.last_accessed = self._clock()

        if self._is_fresh(entry, stale_time):
            logger.debug("Cache hit for %r", key)
            return entry.data

        if entry.in_flight is not None and entry.in_flight_generation > entry.invalidated_through:
            logger.debug("Joining in-flight fetch #%d for %r", entry.in_flight_generation, key)
            return await asyncio.shield(entry.in_flight)

        future = self._start_fetch(entry, fn, retry)
        return await asyncio.shield(future)

    async def query(
        self,
        key: QueryKey,
        fn: QueryFn[Any],
        *,
        stale_time: float | None = None,
        retry: RetryPolicy | None = None,
    ) -> QueryState:
        """Como `fetch_query`, pero devuelve el estado en vez de lanzar."""

        try:
            await self.fetch_query(key, fn, stale_time=stale_time, retry=retry)
        except Exception as exc:
            state = self.get_query_state(key)
            if state.error is exc:
                return state
            return QueryState(
                key=state.key,
                data=state.data,
                error=exc,
                has_data=state.has_data,
                is_fetching=state.is_fetching,
                is_stale=state.is_stale,
                updated_at=state.updated_at,
            )
        return self.get_query_state(key)

    def get_query_data(self, key: QueryKey) -> Any:
        entry = self._entries.get(make_key(*key))
        return entry.data if entry is not None else None

    def get_query_state(self, key: QueryKey) -> QueryState:
        key = make_key(*key)
        entry = self._entries.get(key)
        if entry is None:
            return QueryState(key=key)
        return self._snapshot(entry)

    def subscribe(self, key: QueryKey, listener: Listener) -> Callable[[], None]:
        """Registra un observador; devuelve la función para darse de baja."""

        entry = self._entry(make_key(*key))
        entry.listeners.append(listener)

        def unsubscribe() -> None:
            if listener in entry.listeners:
                entry.listeners.remove(listener)

        return unsubscribe

    # Escritura (siempre vía invalidación)

    async def mutate(
        self,
        fn: Callable[[], Awaitable[T]],
        *,
        invalidates: Iterable[QueryKey] = (),
    ) -> T:
        """Ejecuta una mutación y, si tiene éxito, invalida las claves dadas."""

        result = await fn()
        for prefix in invalidates:
            self.invalidate_queries(prefix)
        return result

    def invalidate_queries(self, prefix: QueryKey = ()) -> int:
        prefix = make_key(*prefix)
        count = 0
        for entry in self._entries.values():
            if not is_prefix(prefix, entry.key):
                continue
            entry.invalidated_through = entry.generation
            count += 1
            self._notify(entry)
        logger.info("Invalidated %d cached quer%s under %r", count, "y" if count == 1 else "ies", prefix)
        return count

    def remove_queries(self, prefix: QueryKey = ()) -> int:
        prefix = make_key(*prefix)
        doomed = [key for key in self._entries if is_prefix(prefix, key)]
        for key in doomed:
            del self._entries[key]
        return len(doomed)

    def clear(self) -> None:
        self._entries.clear()

    def on_window_focus(self) -> int:
        """Marca como obsoletas las consultas observadas, si la política lo pide."""

        if not self.config.refetch_on_window_focus:
            return 0
        count = 0
        for entry in self._entries.values():
            if entry.listeners:
                entry.invalidated_through = entry.generation
                count += 1
                self._notify(entry)
        return count

    def fetch_count(self, key: QueryKey) -> int:
        entry = self._entries.get(make_key(*key))
        return entry.fetch_count if entry is not None else 0

    def __len__(self) -> int:
        return len(self._entries)

    # Internos

    def _entry(self, key: QueryKey) -> _Entry:
        entry = self._entries.get(key)
        if entry is None:
            entry = _Entry(key=key, last_accessed=self._clock())
            self._entries[key] = entry
        return entry

    def _is_stale(self, entry: _Entry, stale_time: float | None = None) -> bool:
        if not entry.has_data or entry.updated_at is None:
            return True
        if entry.data_generation <= entry.invalidated_through:
            return True
        limit = self.config.stale_time if stale_time is None else stale_time
        return self._clock() - entry.updated_at >= limit

    def _is_fresh(self, entry: _Entry, stale_time: float | None) -> bool:
        return not self._is_stale(entry, stale_time)

    def _start_fetch(self, entry: _Entry, fn: QueryFn[T], retry: RetryPolicy | None) -> asyncio.Future[T]:
        entry.generation += 1
        generation = entry.generation
        entry.fetch_count += 1
        logger.debug("Fetching %r (#%d)", entry.key, generation)

        future = asyncio.ensure_future(self._run_fetch(entry, fn, generation, retry))
        future.add_done_callback(_consume_exception)
        entry.in_flight = future
        entry.in_flight_generation = generation
        self._notify(entry)
        return future

    async def _run_fetch(
        self,
        entry: _Entry,
        fn: QueryFn[T],
        generation: int,
        retry: RetryPolicy | None,
    ) -> T:
        try:
            data = await self._call_with_retries(entry.key, fn, retry)
        except Exception as exc:
            if generation < entry.data_generation and entry.has_data:
                logger.debug("Dropping failure of superseded fetch #%d for %r", generation, entry.key)
                return entry.data
            entry.error = exc
            raise
        else:
            if generation < entry.data_generation:
                logger.debug(
                    "Discarding out-of-order response #%d for %r (have #%d)",
                    generation,
                    entry.key,
                    entry.data_generation,
                )
                return entry.data
            entry.data = data
            entry.has_data = True
            entry.error = None
            entry.data_generation = generation
            entry.updated_at = self._clock()
            return data
        finally:
            if entry.in_flight_generation == generation:
                entry.in_flight = None
            self._notify(entry)

    async def _call_with_retries(self, key: QueryKey, fn: QueryFn[T], retry: RetryPolicy | None) -> T:
        policy = self.config.retry if retry is None else retry
        failures = 0
        while True:
            try:
                return await fn()
            except Exception as exc:
                if not self._should_retry(policy, failures, exc):
                    raise
                failures += 1
                delay = min(self.config.retry_delay * (2 ** (failures - 1)), self.config.max_retry_delay)
                logger.info("Retrying %r in %.2fs after %s (attempt %d)", key, delay, exc, failures)
                await asyncio.sleep(delay)

    @staticmethod
    def _should_retry(policy: RetryPolicy, failures: int, exc: BaseException) -> bool:
        if callable(policy):
            return bool(policy(failures, exc))
        return failures < policy and is_transient(exc)

    def _snapshot(self, entry: _Entry) -> QueryState:
        return QueryState(
            key=entry.key,
            data=entry.data,
            error=entry.error,
            has_data=entry.has_data,
            is_fetching=entry.in_flight is not None,
            is_stale=self._is_stale(entry),
            updated_at=entry.updated_at,
        )

    def _notify(self, entry: _Entry) -> None:
        if not entry.listeners:
            return
        state = self._snapshot(entry)
        for listener in list(entry.listeners):
            try:
                listener(state)
            except Exception:
                logger.exception("Query listener failed for %r", entry.key)

    def _collect_garbage(self) -> None:
        now = self._clock()
        idle = [
            key
            for key, entry in self._entries.items()
            if not entry.listeners
            and entry.in_flight is None
            and now - entry.last_accessed > self.config.cache_time
        ]
        for key in idle:
            del self._entries[key]
