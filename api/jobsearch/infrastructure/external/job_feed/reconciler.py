"""
Reconciliacion por lotes: FeedRecord -> JobAdModel.

Cada aviso se resuelve por clave natural: si existe se actualiza en el lugar,
si no se crea. Se acumula en un lote y se escribe cada `batch_size` claves.
Claves repetidas (dentro de una pagina o por re-lectura de ventanas) pisan
el mismo objeto: el upsert es idempotente por clave.
"""

from __future__ import annotations

from typing import Iterable, Optional, Protocol

from loguru import logger

from jobsearch.infrastructure.database.models import JobAdModel

from .types import FeedRecord


class JobAdStore(Protocol):
    def find_by_uuid(self, uuid: str) -> Optional[JobAdModel]:
        ...

    def upsert_batch(self, ads: Iterable[JobAdModel]) -> int:
        ...


class BatchReconciler:
    """
    Acumula upserts y los escribe por lotes.

    Si recibe `active_keys` (full sync) registra cada uuid procesado.
    Hay que llamar a `flush()` al terminar el stream de avisos.
    """

    def __init__(
        self,
        store: JobAdStore,
        *,
        batch_size: int = 100,
        active_keys: Optional[set[str]] = None,
    ) -> None:
        if batch_size < 1:
            raise ValueError("batch_size debe ser >= 1")
        self._store = store
        self._batch_size = batch_size
        self._active_keys = active_keys
        self._pending: dict[str, JobAdModel] = {}
        self.upserted = 0
        self.inserted = 0
        self.updated = 0

    def reconcile(self, records: Iterable[FeedRecord]) -> None:
        records = list(records)
        logger.info(f"Procesando {len(records)} avisos")

        for record in records:
            pending = self._pending.get(record.uuid)
            if pending is not None:
                pending.update_from_record(record)
            else:
                existing = self._store.find_by_uuid(record.uuid)
                if existing is not None:
                    existing.update_from_record(record)
                    self._pending[record.uuid] = existing
                    self.updated += 1
                else:
                    self._pending[record.uuid] = JobAdModel.from_record(record)
                    self.inserted += 1

            if self._active_keys is not None:
                self._active_keys.add(record.uuid)

            if len(self._pending) >= self._batch_size:
                self.flush()

    def flush(self) -> int:
        """Escribe lo pendiente. Retorna cuantos avisos se escribieron."""
        if not self._pending:
            return 0
        written = self._store.upsert_batch(list(self._pending.values()))
        self.upserted += written
        self._pending.clear()
        return written

    @property
    def pending_count(self) -> int:
        return len(self._pending)
