"""
Servicio de sincronizacion feed -> base de datos.

Diseño (resumen):
- Full sync: ventana updated = [now - 6 meses, now), luego desalojo de lo
  vencido o no observado.
- Incremental: ventana updated = [max(updated) guardado, now). Nunca borra:
  no ve el set activo completo. Con el store vacio no hace nada.
- El rango de `published` es fijo por corrida: [now - 6 meses, now].

Estrategia de idempotencia:
- Upsert por uuid; re-leer paginas o ventanas solo vuelve a pisar la fila.
- Cada lote se confirma al escribirse: si la corrida aborta a mitad, lo ya
  escrito queda y la proxima corrida completa lo que falto.

Ninguna de las dos entradas es reentrante: dos corridas simultaneas contra el
mismo store compiten en upsert/delete. El que llama debe serializarlas
(ver `SyncRunLock`).
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from loguru import logger

from jobsearch.core.config import Settings, settings as default_settings
from jobsearch.infrastructure.repositories.job_ad_repository import JobAdRepository
from jobsearch.shared.constants.sync_constants import DEFAULT_LOOKBACK_MONTHS, SyncMode
from jobsearch.shared.exceptions.sync import SyncConfigError
from jobsearch.shared.utils.date_utils import ensure_utc, subtract_months, utc_now

from .evictor import StalenessEvictor
from .feed_client import FeedCredentials, JobFeedClient
from .paginator import PaginationResult, WindowedPaginator
from .reconciler import BatchReconciler
from .retry import RetryingFetcher, RetryPolicy
from .types import FetchWindow


@dataclass(frozen=True)
class SyncResult:
    mode: SyncMode
    started_at: datetime
    finished_at: datetime
    windows: int = 0
    pages_fetched: int = 0
    pages_skipped: int = 0
    records_seen: int = 0
    upserted: int = 0
    inserted: int = 0
    updated: int = 0
    evicted: int = 0
    skipped_reason: Optional[str] = None


class FeedSyncService:
    """
    Orquestador del pipeline: paginador -> reconciliador -> (desalojo).
    """

    def __init__(
        self,
        *,
        repository: JobAdRepository,
        fetcher: RetryingFetcher,
        batch_size: int = 100,
        lookback_months: int = DEFAULT_LOOKBACK_MONTHS,
    ) -> None:
        self._repo = repository
        self._fetcher = fetcher
        self._batch_size = batch_size
        self._lookback_months = lookback_months

    def run_full_sync(self, now: datetime) -> SyncResult:
        """
        Barrido completo de la ventana de retencion y desalojo posterior.

        Raises:
            FeedFetchError: si falla la pagina inicial de una ventana o hay un
                error fatal. En ese caso no se desaloja nada.
        """
        now = ensure_utc(now)
        oldest = subtract_months(now, self._lookback_months)
        logger.info(f"Full sync: updated=[{oldest.isoformat()}, {now.isoformat()})")

        active_keys: set[str] = set()
        reconciler = BatchReconciler(self._repo, batch_size=self._batch_size, active_keys=active_keys)
        pagination = self._paginate(self._window(now, oldest), reconciler)

        evicted = StalenessEvictor(self._repo).evict(now, active_keys)
        return self._result(SyncMode.FULL, now, pagination, reconciler, evicted=evicted)

    def run_incremental_sync(self, now: datetime) -> SyncResult:
        """
        Trae solo lo actualizado desde el `updated` mas nuevo guardado.
        No-op si el store esta vacio (el primer llenado lo hace el full sync).
        """
        now = ensure_utc(now)
        newest_stored = self._repo.max_updated()
        if newest_stored is None:
            logger.info("Sync incremental omitido: no hay avisos guardados todavia")
            return SyncResult(
                mode=SyncMode.INCREMENTAL,
                started_at=now,
                finished_at=utc_now(),
                skipped_reason="empty_store",
            )

        logger.info(f"Sync incremental: updated=[{newest_stored.isoformat()}, {now.isoformat()})")
        reconciler = BatchReconciler(self._repo, batch_size=self._batch_size)
        pagination = self._paginate(self._window(now, newest_stored), reconciler)
        return self._result(SyncMode.INCREMENTAL, now, pagination, reconciler)

    def _window(self, now: datetime, oldest: datetime) -> FetchWindow:
        return FetchWindow(
            oldest=oldest,
            newest=now,
            published_from=subtract_months(now, self._lookback_months),
            published_to=now,
        )

    def _paginate(self, window: FetchWindow, reconciler: BatchReconciler) -> PaginationResult:
        paginator = WindowedPaginator(self._fetcher)
        try:
            return paginator.run(window, reconciler.reconcile)
        finally:
            # Tambien si aborta: el progreso parcial se conserva
            reconciler.flush()

    @staticmethod
    def _result(
        mode: SyncMode,
        started_at: datetime,
        pagination: PaginationResult,
        reconciler: BatchReconciler,
        *,
        evicted: int = 0,
    ) -> SyncResult:
        result = SyncResult(
            mode=mode,
            started_at=started_at,
            finished_at=utc_now(),
            windows=pagination.windows,
            pages_fetched=pagination.pages_fetched,
            pages_skipped=pagination.pages_skipped,
            records_seen=pagination.records_seen,
            upserted=reconciler.upserted,
            inserted=reconciler.inserted,
            updated=reconciler.updated,
            evicted=evicted,
        )
        logger.info(
            f"Sync {mode.value} completado. upserts={result.upserted} "
            f"(nuevos={result.inserted}, actualizados={result.updated}), eliminados={result.evicted}"
        )
        return result


def build_fetcher(config: Optional[Settings] = None) -> RetryingFetcher:
    """
    Construye cliente + reintentos desde la configuracion.

    Raises:
        SyncConfigError: si faltan FEED_API_URL o FEED_API_TOKEN
    """
    config = config or default_settings
    if not config.FEED_API_URL:
        raise SyncConfigError("Falta variable de entorno obligatoria: FEED_API_URL")
    if not config.FEED_API_TOKEN:
        raise SyncConfigError("Falta variable de entorno obligatoria: FEED_API_TOKEN")

    client = JobFeedClient(
        FeedCredentials(api_url=config.FEED_API_URL, token=config.FEED_API_TOKEN),
        category=config.FEED_CATEGORY,
        page_size=config.FEED_PAGE_SIZE,
        timeout_s=config.FEED_TIMEOUT_S,
    )
    policy = RetryPolicy(
        max_attempts=config.RETRY_MAX_ATTEMPTS,
        base_delay_s=config.RETRY_BASE_DELAY_MS / 1000.0,
        multiplier=config.RETRY_MULTIPLIER,
    )
    return RetryingFetcher(client, policy)


def build_service(
    repository: JobAdRepository,
    *,
    fetcher: Optional[RetryingFetcher] = None,
    config: Optional[Settings] = None,
) -> FeedSyncService:
    """Constructor "oficial" del pipeline a partir de la configuracion."""
    config = config or default_settings
    return FeedSyncService(
        repository=repository,
        fetcher=fetcher or build_fetcher(config),
        batch_size=config.FEED_BATCH_SIZE,
        lookback_months=config.FEED_LOOKBACK_MONTHS,
    )
