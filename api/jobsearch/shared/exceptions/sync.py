"""
Excepciones del pipeline de sincronizacion del feed.

Taxonomia de fallos de fetch (se despacha por `kind`, no por jerarquia):
- TransientFetchError: red/timeout. Reintentable.
- RejectedFetchError: 4xx. Reintentable hasta el tope, pero indica un problema
  del lado cliente (token vencido, query mal formada).
- FatalFetchError: todo lo demas. No se reintenta y aborta la corrida.
"""
from typing import Any, Dict, Optional

from jobsearch.shared.constants.sync_constants import FetchErrorKind
from jobsearch.shared.exceptions.base import AppException


class FeedFetchError(AppException):
    """Error base al pedir una pagina del feed."""

    kind: FetchErrorKind = FetchErrorKind.FATAL
    status_code = 502

    def __init__(
        self,
        message: str,
        *,
        url: Optional[str] = None,
        http_status: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.url = url
        self.http_status = http_status
        payload = {"kind": self.kind.value, **(details or {})}
        if url:
            payload["url"] = url
        if http_status is not None:
            payload["http_status"] = http_status
        super().__init__(
            message=message,
            error_code=f"FEED_FETCH_{self.kind.name}",
            details=payload,
        )


class TransientFetchError(FeedFetchError):
    """Timeout o conexion caida contra el feed."""

    kind = FetchErrorKind.TRANSIENT


class RejectedFetchError(FeedFetchError):
    """El feed rechazo el request (4xx)."""

    kind = FetchErrorKind.REJECTED


class FatalFetchError(FeedFetchError):
    """Fallo no recuperable: 5xx, body invalido, error inesperado."""

    kind = FetchErrorKind.FATAL


class SyncConfigError(AppException):
    """Error de configuracion del pipeline (variables faltantes, valores invalidos)."""

    status_code = 500
    error_code = "SYNC_CONFIG_ERROR"


class SyncAlreadyRunningError(AppException):
    """Ya hay una corrida de sync en curso contra el store."""

    status_code = 409
    error_code = "SYNC_ALREADY_RUNNING"

    def __init__(self, requested_mode: str, running_mode: Optional[str] = None):
        self.requested_mode = requested_mode
        self.running_mode = running_mode
        super().__init__(
            message=(
                f"No se puede iniciar sync '{requested_mode}': "
                f"hay una corrida '{running_mode or 'desconocida'}' en curso"
            ),
            details={"requested_mode": requested_mode, "running_mode": running_mode},
        )
