"""
Constantes relacionadas con la sincronizacion del feed de avisos.
"""
from enum import Enum


class FetchErrorKind(str, Enum):
    """Clasificacion de fallos al pedir una pagina del feed."""
    TRANSIENT = "transient"   # timeout, conexion reseteada
    REJECTED = "rejected"     # 4xx: request mal formado, auth
    FATAL = "fatal"           # 5xx, body invalido, cualquier otro


class SyncMode(str, Enum):
    """Modos de ejecucion del sync."""
    FULL = "full"
    INCREMENTAL = "incremental"


# Formato de fechas en los filtros published/updated del feed (siempre UTC)
FEED_DATETIME_FORMAT = "%Y-%m-%dT%H:%M:%S"

# Ventana de retencion del full sync
DEFAULT_LOOKBACK_MONTHS = 6

# Palabras clave de la estadistica semanal
STATS_KEYWORDS = ("kotlin", "java")
