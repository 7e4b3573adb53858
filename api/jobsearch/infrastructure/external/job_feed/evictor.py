"""
Desalojo de avisos vencidos o que ya no publica el feed.

Solo corre despues de un full sync: un aviso ausente en un barrido completo
de la ventana de retencion ya no esta publicado y se borra. Es un barrido
O(tamaño del store); se acepta porque el full sync es diario.
"""

from __future__ import annotations

from datetime import datetime
from typing import Iterable, List, Protocol

from loguru import logger

from jobsearch.infrastructure.database.models import JobAdModel
from jobsearch.shared.utils.date_utils import ensure_utc


class EvictableStore(Protocol):
    def find_all(self) -> List[JobAdModel]:
        ...

    def delete(self, ad: JobAdModel) -> None:
        ...

    def commit(self) -> None:
        ...


def is_stale(ad: JobAdModel, now: datetime, active_keys: Iterable[str]) -> bool:
    """Vencido (`expires < now`) o ausente del set activo. El vencimiento manda."""
    if ad.expires is not None and ensure_utc(ad.expires) < now:
        return True
    return ad.uuid not in active_keys


class StalenessEvictor:
    def __init__(self, store: EvictableStore) -> None:
        self._store = store

    def evict(self, now: datetime, active_keys: set[str]) -> int:
        """
        Borra los avisos vencidos o no observados en esta corrida.

        Returns:
            Cantidad de avisos borrados
        """
        now = ensure_utc(now)
        removed = 0

        for ad in self._store.find_all():
            if is_stale(ad, now, active_keys):
                logger.info(f"Eliminando aviso uuid={ad.uuid}")
                self._store.delete(ad)
                removed += 1

        if removed:
            self._store.commit()
        logger.info(f"Desalojo completado: {removed} aviso(s) eliminado(s), {len(active_keys)} activos")
        return removed
