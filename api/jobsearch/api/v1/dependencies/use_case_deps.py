"""
Dependencias para inyeccion de casos de uso.
"""
from fastapi import Depends
from sqlalchemy.orm import Session

from jobsearch.application.use_cases.stats_use_cases import StatsUseCases
from jobsearch.application.use_cases.sync_use_cases import FeedSyncUseCases
from jobsearch.infrastructure.database.session import get_db


def get_stats_use_cases(
    db: Session = Depends(get_db)
) -> StatsUseCases:
    """
    Dependencia para obtener los casos de uso de estadisticas.

    Args:
        db: Sesion de base de datos

    Returns:
        StatsUseCases: Instancia de casos de uso de estadisticas
    """
    return StatsUseCases(db)


def get_sync_use_cases() -> FeedSyncUseCases:
    """
    Dependencia para obtener los casos de uso de sincronizacion.
    Cada corrida abre su propia sesion (no comparte la del request).
    """
    return FeedSyncUseCases()
