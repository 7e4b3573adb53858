"""
Casos de uso para la sincronizacion del feed de avisos.

Son las dos entradas que dispara el scheduler (y la API / CLI):
- run_full_sync: barrido completo + desalojo
- run_incremental_sync: solo lo actualizado desde el ultimo `updated` guardado

Cada llamada abre su propia sesion y reserva el `SyncRunLock`: nunca hay
dos corridas simultaneas en el mismo proceso.
"""
from datetime import datetime
from typing import Callable, Optional

from loguru import logger
from sqlalchemy.orm import Session

from jobsearch.core.config import Settings, settings as default_settings
from jobsearch.infrastructure.database.session import SessionLocal
from jobsearch.infrastructure.external.job_feed.retry import RetryingFetcher
from jobsearch.infrastructure.external.job_feed.sync_service import SyncResult, build_service
from jobsearch.infrastructure.repositories.job_ad_repository import JobAdRepository
from jobsearch.infrastructure.scheduling.sync_lock import SyncRunLock
from jobsearch.shared.constants.sync_constants import SyncMode
from jobsearch.shared.utils.date_utils import utc_now


class FeedSyncUseCases:
    """
    Orquesta una corrida: sesion -> repositorio -> servicio, bajo el lock.
    """

    def __init__(
        self,
        session_factory: Callable[[], Session] = SessionLocal,
        *,
        fetcher: Optional[RetryingFetcher] = None,
        config: Optional[Settings] = None,
    ):
        self._session_factory = session_factory
        self._fetcher = fetcher
        self._config = config or default_settings

    def run_full_sync(self, now: Optional[datetime] = None) -> SyncResult:
        return self._run(SyncMode.FULL, now)

    def run_incremental_sync(self, now: Optional[datetime] = None) -> SyncResult:
        return self._run(SyncMode.INCREMENTAL, now)

    def _run(self, mode: SyncMode, now: Optional[datetime]) -> SyncResult:
        now = now or utc_now()

        with SyncRunLock.hold(mode.value):
            db = self._session_factory()
            try:
                repository = JobAdRepository(db)
                service = build_service(repository, fetcher=self._fetcher, config=self._config)
                if mode is SyncMode.FULL:
                    return service.run_full_sync(now)
                return service.run_incremental_sync(now)
            except Exception as e:
                db.rollback()
                logger.error(f"Sync {mode.value} fallido: {e}")
                raise
            finally:
                db.close()
