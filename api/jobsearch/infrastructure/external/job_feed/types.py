"""
Tipos del pipeline feed -> base de datos.

Se mantienen libres de I/O para poder testearlos facilmente.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional

from jobsearch.shared.utils.date_utils import parse_feed_datetime


@dataclass(frozen=True)
class FeedRecord:
    """
    Snapshot inmutable de un aviso tal como lo publico el feed.

    `uuid` es la clave natural: correlaciona el aviso del feed con la fila
    guardada en `job_ads`.
    """

    uuid: str
    title: Optional[str] = None
    description: Optional[str] = None
    published: Optional[datetime] = None
    updated: Optional[datetime] = None
    expires: Optional[datetime] = None

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "FeedRecord":
        """
        Construye el record desde un elemento de `content`.

        Ignora campos desconocidos. Los timestamps se normalizan a UTC.

        Raises:
            ValueError: si falta `uuid` o un timestamp no es ISO 8601
        """
        uuid = payload.get("uuid")
        if not uuid:
            raise ValueError("El feed devolvio un aviso sin 'uuid'")

        return cls(
            uuid=str(uuid),
            title=payload.get("title"),
            description=payload.get("description"),
            published=parse_feed_datetime(payload.get("published")),
            updated=parse_feed_datetime(payload.get("updated")),
            expires=parse_feed_datetime(payload.get("expires")),
        )


@dataclass(frozen=True)
class FeedPage:
    """Una pagina del feed: avisos ordenados asc por published/updated."""

    records: list[FeedRecord] = field(default_factory=list)
    page_number: int = 0
    total_pages: int = 0

    @property
    def is_empty(self) -> bool:
        return not self.records

    @property
    def last_published(self) -> Optional[datetime]:
        """`published` del ultimo aviso: es lo que hace avanzar la ventana."""
        if not self.records:
            return None
        return self.records[-1].published


@dataclass(frozen=True)
class FetchWindow:
    """
    Ventana [oldest, newest) sobre `updated`, mas el rango fijo de `published`.

    El paginador solo achica `newest`; `oldest` y el rango de published se
    mantienen durante toda la corrida.
    """

    oldest: datetime
    newest: Optional[datetime]
    published_from: datetime
    published_to: datetime

    @property
    def is_open(self) -> bool:
        """Hay algo que pedir solo si newest es estrictamente posterior a oldest."""
        return self.newest is not None and self.newest > self.oldest

    def narrowed_to(self, newest: datetime) -> "FetchWindow":
        return FetchWindow(
            oldest=self.oldest,
            newest=newest,
            published_from=self.published_from,
            published_to=self.published_to,
        )
