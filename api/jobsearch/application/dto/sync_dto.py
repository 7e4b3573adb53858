"""
DTOs para la sincronizacion del feed.
"""
from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from jobsearch.infrastructure.external.job_feed.sync_service import SyncResult


class SyncResultDTO(BaseModel):
    """Resultado de una corrida de sincronizacion."""
    success: bool
    mode: str
    message: str
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

    @classmethod
    def from_result(cls, result: SyncResult) -> "SyncResultDTO":
        if result.skipped_reason:
            message = f"Sync {result.mode.value} omitido ({result.skipped_reason})"
        elif result.upserted or result.evicted:
            message = (
                f"Sync {result.mode.value} completado: {result.upserted} aviso(s) "
                f"actualizado(s), {result.evicted} eliminado(s)"
            )
        else:
            message = "Sin cambios en el feed"

        return cls(
            success=True,
            mode=result.mode.value,
            message=message,
            started_at=result.started_at,
            finished_at=result.finished_at,
            windows=result.windows,
            pages_fetched=result.pages_fetched,
            pages_skipped=result.pages_skipped,
            records_seen=result.records_seen,
            upserted=result.upserted,
            inserted=result.inserted,
            updated=result.updated,
            evicted=result.evicted,
            skipped_reason=result.skipped_reason,
        )


class SyncStatusDTO(BaseModel):
    """Estado del lock de corrida."""
    running: bool
    mode: Optional[str] = None
