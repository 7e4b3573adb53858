"""
Tests unitarios para SyncRunLock.

Verifica que nunca hay dos corridas de sync simultaneas y que el slot se
libera aun cuando la corrida falla.
"""
from __future__ import annotations

import threading

import pytest

from jobsearch.infrastructure.scheduling.sync_lock import SyncRunLock
from jobsearch.shared.exceptions.sync import SyncAlreadyRunningError


class TestSyncRunLock:
    """Tests para el lock de corrida."""

    def test_reports_running_mode_while_held(self) -> None:
        """Dentro del contexto el lock figura tomado con su modo."""
        with SyncRunLock.hold("full"):
            assert SyncRunLock.is_running()
            assert SyncRunLock.running_mode() == "full"

        assert not SyncRunLock.is_running()
        assert SyncRunLock.running_mode() is None

    def test_second_run_is_rejected(self) -> None:
        """Una segunda corrida falla de inmediato con 409."""
        with SyncRunLock.hold("full"):
            with pytest.raises(SyncAlreadyRunningError) as exc_info:
                with SyncRunLock.hold("incremental"):
                    pass

        error = exc_info.value
        assert error.status_code == 409
        assert error.requested_mode == "incremental"
        assert error.running_mode == "full"

    def test_released_after_exception(self) -> None:
        """Si la corrida falla el slot se libera."""
        with pytest.raises(RuntimeError):
            with SyncRunLock.hold("full"):
                raise RuntimeError("boom")

        assert not SyncRunLock.is_running()

    def test_rejects_run_from_other_thread(self) -> None:
        """El lock es por proceso: otro thread tambien queda afuera."""
        errors: list[Exception] = []

        def _other() -> None:
            try:
                with SyncRunLock.hold("incremental"):
                    pass
            except SyncAlreadyRunningError as e:
                errors.append(e)

        with SyncRunLock.hold("full"):
            worker = threading.Thread(target=_other)
            worker.start()
            worker.join(timeout=5)

        assert len(errors) == 1
