"""
Tests unitarios para los endpoints de sync, estadisticas y health.

Verifica el contrato HTTP:
- POST /sync/full y /sync/incremental devuelven el resumen de la corrida.
- Una corrida en curso responde 409; un fallo del feed, 502.
- GET /stats/kotlin-vs-java agrupa por semana y valida `months`.
"""
from __future__ import annotations

from datetime import timedelta
from unittest.mock import MagicMock

import pytest
from httpx import ASGITransport, AsyncClient

from jobsearch.api.v1.dependencies.use_case_deps import get_sync_use_cases
from jobsearch.infrastructure.database.models import JobAdModel
from jobsearch.infrastructure.database.session import get_db
from jobsearch.infrastructure.external.job_feed.sync_service import SyncResult
from jobsearch.shared.constants.sync_constants import SyncMode
from jobsearch.shared.exceptions.sync import FatalFetchError, SyncAlreadyRunningError
from jobsearch.shared.utils.date_utils import utc_now, week_start

from conftest import utc


def _result(mode: SyncMode, **kwargs) -> SyncResult:
    return SyncResult(mode=mode, started_at=utc(2025, 7, 1), finished_at=utc(2025, 7, 1, 0, 5), **kwargs)


@pytest.fixture
def mock_use_cases() -> MagicMock:
    uc = MagicMock()
    uc.run_full_sync.return_value = _result(SyncMode.FULL, windows=2, upserted=10, inserted=8, updated=2, evicted=3)
    uc.run_incremental_sync.return_value = _result(SyncMode.INCREMENTAL, skipped_reason="empty_store")
    return uc


@pytest.fixture
def app_with_mock(mock_use_cases: MagicMock, db_session):
    """App FastAPI con casos de uso de sync mockeados y SQLite de test."""
    from main import create_application
    app = create_application()

    def _test_db():
        yield db_session

    app.dependency_overrides[get_sync_use_cases] = lambda: mock_use_cases
    app.dependency_overrides[get_db] = _test_db
    yield app
    app.dependency_overrides.clear()


async def _request(app, method: str, url: str, **kwargs):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        return await client.request(method, url, **kwargs)


@pytest.mark.asyncio
async def test_full_sync_endpoint_returns_summary(app_with_mock, mock_use_cases: MagicMock) -> None:
    """POST /sync/full retorna 200 con el resumen."""
    response = await _request(app_with_mock, "POST", "/api/v1/sync/full")

    assert response.status_code == 200
    data = response.json()
    assert data["mode"] == "full"
    assert data["upserted"] == 10
    assert data["evicted"] == 3
    assert data["success"] is True
    mock_use_cases.run_full_sync.assert_called_once()


@pytest.mark.asyncio
async def test_incremental_sync_endpoint_reports_skip(app_with_mock) -> None:
    """Con el store vacio el incremental se informa como omitido."""
    response = await _request(app_with_mock, "POST", "/api/v1/sync/incremental")

    assert response.status_code == 200
    data = response.json()
    assert data["skipped_reason"] == "empty_store"
    assert "omitido" in data["message"]


@pytest.mark.asyncio
async def test_sync_endpoint_conflict_when_running(app_with_mock, mock_use_cases: MagicMock) -> None:
    """Una corrida en curso responde 409 con el formato de error comun."""
    mock_use_cases.run_full_sync.side_effect = SyncAlreadyRunningError("full", "incremental")

    response = await _request(app_with_mock, "POST", "/api/v1/sync/full")

    assert response.status_code == 409
    body = response.json()
    assert body["error"] == "SYNC_ALREADY_RUNNING"
    assert body["details"]["running_mode"] == "incremental"


@pytest.mark.asyncio
async def test_sync_endpoint_bad_gateway_on_feed_failure(app_with_mock, mock_use_cases: MagicMock) -> None:
    """Un fallo fatal del feed se expone como 502."""
    mock_use_cases.run_full_sync.side_effect = FatalFetchError("El feed respondio 503", http_status=503)

    response = await _request(app_with_mock, "POST", "/api/v1/sync/full")

    assert response.status_code == 502
    assert response.json()["error"] == "FEED_FETCH_FATAL"


@pytest.mark.asyncio
async def test_unexpected_error_is_generic_500(app_with_mock, mock_use_cases: MagicMock) -> None:
    """Errores no controlados no filtran detalles."""
    mock_use_cases.run_incremental_sync.side_effect = RuntimeError("secreto")

    response = await _request(app_with_mock, "POST", "/api/v1/sync/incremental")

    assert response.status_code == 500
    assert response.json()["error"] == "INTERNAL_SERVER_ERROR"
    assert "secreto" not in response.text


@pytest.mark.asyncio
async def test_sync_status_when_idle(app_with_mock) -> None:
    response = await _request(app_with_mock, "GET", "/api/v1/sync/status")

    assert response.status_code == 200
    assert response.json() == {"running": False, "mode": None}


@pytest.mark.asyncio
async def test_stats_endpoint_groups_by_week(app_with_mock, db_session) -> None:
    """GET /stats/kotlin-vs-java lee de la base y agrupa por semana."""
    # Lunes y martes de la semana pasada
    monday = week_start(utc_now()) - timedelta(days=7)
    db_session.add_all([
        JobAdModel(uuid="1", published=monday + timedelta(hours=9), description="Kotlin"),
        JobAdModel(uuid="2", published=monday + timedelta(days=1, hours=9), description="Java"),
    ])
    db_session.commit()

    response = await _request(app_with_mock, "GET", "/api/v1/stats/kotlin-vs-java", params={"months": 1})

    assert response.status_code == 200
    data = response.json()
    assert len(data) == 1
    assert data[0]["kotlin_count"] == 1
    assert data[0]["java_count"] == 1
    assert data[0]["total_count"] == 2


@pytest.mark.asyncio
async def test_stats_endpoint_rejects_invalid_months(app_with_mock) -> None:
    response = await _request(app_with_mock, "GET", "/api/v1/stats/kotlin-vs-java", params={"months": 0})

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_health_check(app_with_mock) -> None:
    response = await _request(app_with_mock, "GET", "/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
