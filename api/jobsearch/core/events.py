"""
Manejadores de eventos de inicio y cierre de la aplicacion.
"""
from typing import Callable, Optional
from fastapi import FastAPI
from loguru import logger

from jobsearch.core.config import settings
from jobsearch.infrastructure.database.session import init_db, close_db
from jobsearch.infrastructure.scheduling.scheduler import FeedSyncScheduler


def startup_handler(app: FastAPI) -> Callable:
    """
    Manejador de eventos de inicio de la aplicacion.

    Args:
        app: Instancia de FastAPI

    Returns:
        Callable: Funcion asincrona de inicio
    """
    async def startup() -> None:
        """Inicializa recursos al inicio de la aplicacion."""
        try:
            logger.info(f"Iniciando {settings.APP_NAME} v{settings.APP_VERSION}")
            logger.info(f"Entorno: {settings.ENVIRONMENT}")

            # Logging a archivo con rotacion
            logger.add(
                settings.LOG_FILE,
                rotation="500 MB",
                retention="10 days",
                level=settings.LOG_LEVEL
            )

            sync_configured = _validate_config()

            # Inicializar base de datos (crea tablas si no existen)
            init_db()
            logger.info("Base de datos inicializada")

            app.state.sync_scheduler = _start_scheduler(sync_configured)

            logger.success("Aplicacion iniciada correctamente")

        except Exception as e:
            logger.error(f"Error durante startup: {e}")
            logger.exception("Detalle del error:")
            raise

    return startup


def _validate_config() -> bool:
    """
    Valida la configuracion critica del sync.

    Returns:
        True si el feed esta configurado
    """
    warnings = []

    if not settings.FEED_API_URL:
        warnings.append("FEED_API_URL no configurada - el sync no funcionara")
    if not settings.FEED_API_TOKEN:
        warnings.append("FEED_API_TOKEN no configurada - el sync no funcionara")

    for warning in warnings:
        logger.warning(f"CONFIG: {warning}")

    return not warnings


def _start_scheduler(sync_configured: bool) -> Optional[FeedSyncScheduler]:
    if not settings.SCHEDULER_ENABLED:
        logger.info("Scheduler deshabilitado (SCHEDULER_ENABLED=false)")
        return None
    if not sync_configured:
        logger.warning("Scheduler no iniciado: falta configuracion del feed")
        return None

    scheduler = FeedSyncScheduler()
    scheduler.start()
    return scheduler


def shutdown_handler(app: FastAPI) -> Callable:
    """
    Manejador de eventos de cierre de la aplicacion.

    Args:
        app: Instancia de FastAPI

    Returns:
        Callable: Funcion asincrona de cierre
    """
    async def shutdown() -> None:
        """Libera recursos al cerrar la aplicacion."""
        logger.info("Cerrando aplicacion...")

        scheduler = getattr(app.state, "sync_scheduler", None)
        if scheduler is not None:
            # No esperar a una corrida en curso: el proximo arranque la repite
            scheduler.shutdown(wait=False)

        close_db()
        logger.info("Conexiones de base de datos cerradas")

        logger.success("Aplicacion cerrada correctamente")

    return shutdown
