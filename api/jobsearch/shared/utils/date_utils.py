"""
Utilidades puras de fechas para el sync y las estadisticas.

Todo instante que entra al sistema se normaliza a UTC (aware); el feed y la
base pueden devolver datetimes naive, que se interpretan como UTC.
"""
import calendar
from datetime import datetime, timedelta, timezone
from typing import Optional

from jobsearch.shared.constants.sync_constants import FEED_DATETIME_FORMAT


def utc_now() -> datetime:
    """Retorna la hora actual en UTC, como datetime aware."""
    return datetime.now(timezone.utc)


def ensure_utc(dt: datetime) -> datetime:
    """
    Normaliza datetime a UTC (aware).

    SQLite no guarda zona horaria: lo que vuelve de la base llega naive y
    se asume UTC.
    """
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def parse_feed_datetime(value: Optional[str]) -> Optional[datetime]:
    """
    Parsea un timestamp ISO 8601 del feed ("2025-01-01T10:00:00Z",
    "2025-01-01T11:00:00+01:00", "2025-01-01T10:00:00").

    Returns:
        datetime UTC aware, o None si el valor viene vacio

    Raises:
        ValueError: si el texto no es ISO 8601
    """
    if value is None or not str(value).strip():
        return None
    text = str(value).strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    return ensure_utc(datetime.fromisoformat(text))


def format_feed_datetime(dt: datetime) -> str:
    """Serializa un instante para los filtros del feed (UTC, sin offset ni micros)."""
    return ensure_utc(dt).strftime(FEED_DATETIME_FORMAT)


def subtract_months(dt: datetime, months: int) -> datetime:
    """
    Resta meses calendario conservando hora y zona.
    Si el dia no existe en el mes destino (31 -> febrero) se usa el ultimo dia.
    """
    month_index = dt.month - 1 - months
    year = dt.year + month_index // 12
    month = month_index % 12 + 1
    day = min(dt.day, calendar.monthrange(year, month)[1])
    return dt.replace(year=year, month=month, day=day)


def week_start(dt: datetime) -> datetime:
    """Normaliza al lunes 00:00 de la semana ISO que contiene `dt`."""
    monday = dt - timedelta(days=dt.weekday())
    return monday.replace(hour=0, minute=0, second=0, microsecond=0)
