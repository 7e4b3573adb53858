"""
Lock de corrida del sync.

Motivacion:
- El pipeline no es reentrante: dos corridas (full o incremental) contra el
  mismo store compiten en upsert/delete.
- Las corridas pueden dispararse desde el scheduler, la API o la CLI.
- Necesitamos un unico slot, sin esperar: si hay una corrida en curso, la
  nueva se rechaza y el siguiente disparo programado vuelve a intentar.
"""

from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Iterator, Optional

from loguru import logger

from jobsearch.shared.exceptions.sync import SyncAlreadyRunningError


class SyncRunLock:
    """
    Semaforo de un solo slot para corridas de sync (por proceso).

    Implementacion:
    - `threading.Lock` adquirido sin bloquear.
    - Guarda el modo de la corrida en curso para diagnostico.
    """

    _lock = threading.Lock()
    _running_mode: Optional[str] = None

    @classmethod
    @contextmanager
    def hold(cls, mode: str) -> Iterator[None]:
        """
        Context manager que reserva el slot para una corrida.

        Raises:
            SyncAlreadyRunningError: si ya hay una corrida en curso

        Ejemplo:
            with SyncRunLock.hold("full"):
                service.run_full_sync(now)
        """
        if not cls._lock.acquire(blocking=False):
            logger.warning(f"Sync '{mode}' rechazado: corrida '{cls._running_mode}' en curso")
            raise SyncAlreadyRunningError(mode, cls._running_mode)

        cls._running_mode = mode
        try:
            yield
        finally:
            cls._running_mode = None
            cls._lock.release()

    @classmethod
    def is_running(cls) -> bool:
        return cls._lock.locked()

    @classmethod
    def running_mode(cls) -> Optional[str]:
        """Modo de la corrida en curso (para monitoreo)."""
        return cls._running_mode
