"""
Scheduler de corridas de sync (APScheduler).

Jobs:
- full_sync_job: cron FULL_SYNC_CRON (default: todos los dias 00:00)
- incremental_sync_job: cron INCREMENTAL_SYNC_CRON (default: cada 10 minutos)
- full_sync_startup: un full sync apenas arranca la app (FULL_SYNC_ON_STARTUP)

Las corridas se serializan con `SyncRunLock`: si un disparo encuentra otra
corrida en curso, se registra y se omite; el siguiente disparo lo reintenta.
"""

from __future__ import annotations

from typing import Optional

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.cron import CronTrigger
from loguru import logger

from jobsearch.application.use_cases.sync_use_cases import FeedSyncUseCases
from jobsearch.core.config import Settings, settings as default_settings
from jobsearch.shared.exceptions.sync import SyncAlreadyRunningError

FULL_SYNC_JOB_ID = "full_sync_job"
INCREMENTAL_SYNC_JOB_ID = "incremental_sync_job"
STARTUP_SYNC_JOB_ID = "full_sync_startup"


class FeedSyncScheduler:
    """
    Dispara full e incremental sync segun cron.

    Los jobs corren en el thread pool de APScheduler; `max_instances=1` y el
    lock de corrida evitan solapamientos.
    """

    def __init__(
        self,
        use_cases: Optional[FeedSyncUseCases] = None,
        *,
        config: Optional[Settings] = None,
        scheduler: Optional[BackgroundScheduler] = None,
    ) -> None:
        self.config = config or default_settings
        self.use_cases = use_cases or FeedSyncUseCases(config=self.config)
        self.scheduler = scheduler or BackgroundScheduler(timezone="UTC")

        logger.info(
            f"FeedSyncScheduler inicializado (full='{self.config.FULL_SYNC_CRON}', "
            f"incremental='{self.config.INCREMENTAL_SYNC_CRON}')"
        )

    def execute_full_sync(self) -> None:
        self._execute("full", self.use_cases.run_full_sync)

    def execute_incremental_sync(self) -> None:
        self._execute("incremental", self.use_cases.run_incremental_sync)

    @staticmethod
    def _execute(mode: str, run) -> None:
        logger.info(f"Disparando sync {mode}")
        try:
            result = run()
        except SyncAlreadyRunningError as e:
            logger.warning(f"Sync {mode} omitido: {e.message}")
            return
        except Exception as e:
            logger.opt(exception=e).error(f"Sync {mode} fallo; se reintenta en el proximo disparo")
            raise

        logger.info(
            f"Sync {mode} OK: upserts={result.upserted}, eliminados={result.evicted}, "
            f"paginas omitidas={result.pages_skipped}"
        )

    def register_jobs(self) -> None:
        self.scheduler.add_job(
            self.execute_full_sync,
            trigger=CronTrigger.from_crontab(self.config.FULL_SYNC_CRON, timezone="UTC"),
            id=FULL_SYNC_JOB_ID,
            name="Full sync del feed de avisos",
            replace_existing=True,
            max_instances=1,
            coalesce=True,
        )
        self.scheduler.add_job(
            self.execute_incremental_sync,
            trigger=CronTrigger.from_crontab(self.config.INCREMENTAL_SYNC_CRON, timezone="UTC"),
            id=INCREMENTAL_SYNC_JOB_ID,
            name="Sync incremental del feed de avisos",
            replace_existing=True,
            max_instances=1,
            coalesce=True,
        )
        if self.config.FULL_SYNC_ON_STARTUP:
            # Sin trigger: APScheduler lo ejecuta una vez, apenas arranca
            self.scheduler.add_job(
                self.execute_full_sync,
                id=STARTUP_SYNC_JOB_ID,
                name="Full sync inicial",
                replace_existing=True,
            )

    def start(self) -> None:
        self.register_jobs()
        self.scheduler.start()
        logger.info("Scheduler iniciado")

        for job_id in (FULL_SYNC_JOB_ID, INCREMENTAL_SYNC_JOB_ID):
            job = self.scheduler.get_job(job_id)
            next_run = getattr(job, "next_run_time", None)
            logger.info(f"Job {job_id}: proxima ejecucion {next_run}")

    def shutdown(self, wait: bool = True) -> None:
        if self.scheduler.running:
            logger.info("Deteniendo scheduler")
            self.scheduler.shutdown(wait=wait)
            logger.info("Scheduler detenido")
