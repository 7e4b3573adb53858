"""
Configuracion de fixtures para pytest.

La configuracion se fuerza a SQLite en memoria y sin scheduler antes de
importar la aplicacion: `settings` y el engine se crean al importar.
"""
import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SCHEDULER_ENABLED"] = "false"
os.environ.setdefault("FEED_API_URL", "https://feed.example.com/api/v1/jobs")
os.environ.setdefault("FEED_API_TOKEN", "test-token")

from datetime import datetime, timezone
from typing import Generator, Optional

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from jobsearch.infrastructure.database.session import Base
from jobsearch.infrastructure.database import models  # noqa: F401
from jobsearch.infrastructure.external.job_feed.retry import RetryingFetcher, RetryPolicy
from jobsearch.infrastructure.external.job_feed.types import FeedPage, FeedRecord, FetchWindow


TEST_DATABASE_URL = "sqlite://"


def utc(*args) -> datetime:
    """Atajo para datetimes UTC aware en los tests."""
    return datetime(*args, tzinfo=timezone.utc)


class ScriptedFeedClient:
    """
    Feed falso: responde segun (newest de la ventana, page_index).

    Cada respuesta puede ser un FeedPage, una excepcion, o una lista de ambos
    que se consume en orden (el ultimo elemento se repite). Lo no definido
    responde una pagina vacia.
    """

    def __init__(self, responses: Optional[dict] = None) -> None:
        self.responses = dict(responses or {})
        self.calls: list = []
        self.windows: list[FetchWindow] = []

    def fetch_page(self, window: FetchWindow, page_index: Optional[int] = None) -> FeedPage:
        key = (window.newest, page_index)
        self.calls.append(key)
        self.windows.append(window)
        outcome = self.responses.get(key, FeedPage())
        if isinstance(outcome, list):
            outcome = outcome.pop(0) if len(outcome) > 1 else outcome[0]
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


def make_record(uuid: str, published: datetime, **kwargs) -> FeedRecord:
    kwargs.setdefault("title", f"Aviso {uuid}")
    kwargs.setdefault("description", "Backend developer")
    kwargs.setdefault("updated", published)
    return FeedRecord(uuid=uuid, published=published, **kwargs)


def make_page(*records: FeedRecord, page_number: int = 0, total_pages: int = 1) -> FeedPage:
    return FeedPage(records=list(records), page_number=page_number, total_pages=total_pages)


def make_fetcher(client, max_attempts: int = 3) -> RetryingFetcher:
    """RetryingFetcher sin esperas reales."""
    return RetryingFetcher(client, RetryPolicy(max_attempts=max_attempts), sleep=lambda _: None)


@pytest.fixture(scope="function")
def engine():
    """Engine SQLite en memoria compartido entre threads (StaticPool)."""
    test_engine = create_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(test_engine)
    yield test_engine
    Base.metadata.drop_all(test_engine)
    test_engine.dispose()


@pytest.fixture(scope="function")
def session_factory(engine):
    return sessionmaker(bind=engine, class_=Session, expire_on_commit=False, autoflush=False)


@pytest.fixture(scope="function")
def db_session(session_factory) -> Generator[Session, None, None]:
    """
    Fixture que proporciona una sesion de base de datos para tests.
    Crea una base de datos en memoria para cada test.
    """
    session = session_factory()
    try:
        yield session
    finally:
        session.close()
