"""
Tests unitarios para el cliente HTTP del feed.

Verifica:
- Construccion del query string (filtros, page, escapado).
- Clasificacion de errores transient / rejected / fatal.
- Parseo de la pagina (content, pageNumber, totalPages).
"""
from __future__ import annotations

from typing import Any, Optional

import pytest
import requests

from jobsearch.infrastructure.external.job_feed.feed_client import (
    FeedCredentials,
    JobFeedClient,
    build_query_string,
)
from jobsearch.infrastructure.external.job_feed.types import FetchWindow
from jobsearch.shared.constants.sync_constants import FetchErrorKind
from jobsearch.shared.exceptions.sync import (
    FatalFetchError,
    RejectedFetchError,
    TransientFetchError,
)

from conftest import utc


WINDOW = FetchWindow(
    oldest=utc(2025, 1, 1),
    newest=utc(2025, 1, 2, 12, 30),
    published_from=utc(2024, 7, 2),
    published_to=utc(2025, 1, 2, 12, 30),
)


class _DummyResponse:
    def __init__(self, status_code: int = 200, payload: Any = None, text: str = "") -> None:
        self.status_code = status_code
        self._payload = payload
        self.text = text

    def json(self):
        if isinstance(self._payload, Exception):
            raise self._payload
        return self._payload


class _DummySession:
    def __init__(self, response: Optional[_DummyResponse] = None, error: Optional[Exception] = None) -> None:
        self.response = response
        self.error = error
        self.requests: list[dict] = []

    def get(self, url, headers=None, timeout=None):
        self.requests.append({"url": url, "headers": headers, "timeout": timeout})
        if self.error is not None:
            raise self.error
        return self.response


def _client(session: _DummySession) -> JobFeedClient:
    return JobFeedClient(
        FeedCredentials(api_url="https://feed.example.com/jobs", token="secret"),
        session=session,
        category="IT",
        page_size=50,
        timeout_s=7,
    )


class TestBuildQueryString:
    """Tests para el query string de una pagina."""

    def test_first_page_has_no_page_param(self) -> None:
        query = build_query_string(WINDOW, category="IT", page_size=100)

        assert "page=" not in query
        assert "category=IT" in query
        assert "size=100" in query

    def test_ranges_are_sent_literal(self) -> None:
        query = build_query_string(WINDOW, category="IT", page_size=100)

        assert "published=(2024-07-02T00:00:00,2025-01-02T12:30:00)" in query
        assert "updated=(2025-01-01T00:00:00,2025-01-02T12:30:00)" in query

    def test_page_index_is_appended(self) -> None:
        query = build_query_string(WINDOW, category="IT", page_size=100, page_index=3)

        assert query.endswith("page=3")

    def test_plus_sign_is_percent_encoded(self) -> None:
        query = build_query_string(WINDOW, category="C++", page_size=10)

        assert "category=C%2B%2B" in query

    def test_window_without_newest_is_rejected(self) -> None:
        window = FetchWindow(
            oldest=utc(2025, 1, 1),
            newest=None,
            published_from=utc(2024, 7, 1),
            published_to=utc(2025, 1, 1),
        )
        with pytest.raises(ValueError):
            build_query_string(window, category="IT", page_size=10)


class TestFetchPage:
    """Tests para fetch_page: request y parseo."""

    def test_sends_bearer_token_and_timeout(self) -> None:
        session = _DummySession(_DummyResponse(payload={"content": [], "pageNumber": 0, "totalPages": 0}))

        _client(session).fetch_page(WINDOW)

        sent = session.requests[0]
        assert sent["headers"]["Authorization"] == "Bearer secret"
        assert sent["timeout"] == 7
        assert sent["url"].startswith("https://feed.example.com/jobs?category=IT&size=50")

    def test_parses_records_and_paging(self) -> None:
        payload = {
            "content": [
                {"uuid": "a", "title": "Kotlin dev", "published": "2025-01-01T10:00:00Z", "updated": "2025-01-01T10:00:00Z"},
                {"uuid": "b", "title": "Java dev", "published": "2025-01-01T12:00:00Z", "expires": "2025-02-01T00:00:00Z"},
            ],
            "pageNumber": 0,
            "totalPages": 4,
            "totalElements": 200,
        }
        page = _client(_DummySession(_DummyResponse(payload=payload))).fetch_page(WINDOW)

        assert [r.uuid for r in page.records] == ["a", "b"]
        assert page.total_pages == 4
        assert page.page_number == 0
        assert page.last_published == utc(2025, 1, 1, 12)
        assert page.records[1].expires == utc(2025, 2, 1)

    def test_empty_content_is_empty_page(self) -> None:
        payload = {"content": [], "pageNumber": 2, "totalPages": 3}
        page = _client(_DummySession(_DummyResponse(payload=payload))).fetch_page(WINDOW, page_index=2)

        assert page.is_empty
        assert page.last_published is None


class TestErrorClassification:
    """Tests para la taxonomia de errores del fetch."""

    def test_timeout_is_transient(self) -> None:
        session = _DummySession(error=requests.Timeout("read timed out"))

        with pytest.raises(TransientFetchError) as exc_info:
            _client(session).fetch_page(WINDOW)

        assert exc_info.value.kind is FetchErrorKind.TRANSIENT

    def test_connection_error_is_transient(self) -> None:
        session = _DummySession(error=requests.ConnectionError("reset by peer"))

        with pytest.raises(TransientFetchError):
            _client(session).fetch_page(WINDOW)

    @pytest.mark.parametrize("status_code", [400, 401, 403, 429])
    def test_4xx_is_rejected(self, status_code: int) -> None:
        session = _DummySession(_DummyResponse(status_code=status_code, text="nope"))

        with pytest.raises(RejectedFetchError) as exc_info:
            _client(session).fetch_page(WINDOW)

        assert exc_info.value.http_status == status_code
        assert exc_info.value.details["kind"] == "rejected"

    def test_5xx_is_fatal(self) -> None:
        session = _DummySession(_DummyResponse(status_code=503, text="maintenance"))

        with pytest.raises(FatalFetchError) as exc_info:
            _client(session).fetch_page(WINDOW)

        assert exc_info.value.error_code == "FEED_FETCH_FATAL"

    def test_non_json_body_is_fatal(self) -> None:
        session = _DummySession(_DummyResponse(payload=ValueError("no json")))

        with pytest.raises(FatalFetchError):
            _client(session).fetch_page(WINDOW)

    def test_record_without_uuid_is_fatal(self) -> None:
        payload = {"content": [{"title": "sin clave"}], "pageNumber": 0, "totalPages": 1}

        with pytest.raises(FatalFetchError):
            _client(_DummySession(_DummyResponse(payload=payload))).fetch_page(WINDOW)

    @pytest.mark.parametrize(
        "payload",
        [
            {},
            {"content": None, "pageNumber": 0, "totalPages": 1},
            {"pageNumber": 0, "totalPages": 1},
            {"content": [], "totalPages": 1},
            {"content": [], "pageNumber": 0},
            {"content": [], "pageNumber": "0", "totalPages": 1},
            {"content": [], "pageNumber": 0, "totalPages": None},
            {"content": "[]", "pageNumber": 0, "totalPages": 1},
        ],
        ids=[
            "empty-body",
            "null-content",
            "missing-content",
            "missing-page-number",
            "missing-total-pages",
            "page-number-not-int",
            "total-pages-null",
            "content-not-list",
        ],
    )
    def test_incomplete_body_is_fatal(self, payload) -> None:
        """Un body sin content/pageNumber/totalPages validos no es una pagina vacia."""
        with pytest.raises(FatalFetchError):
            _client(_DummySession(_DummyResponse(payload=payload))).fetch_page(WINDOW)

    def test_payload_not_an_object_is_fatal(self) -> None:
        with pytest.raises(FatalFetchError):
            _client(_DummySession(_DummyResponse(payload=[1, 2, 3]))).fetch_page(WINDOW)
