"""
Excepción base para todas las excepciones de la aplicación.

Las subclases fijan `status_code` y `error_code`; el handler global de FastAPI
las serializa con `to_dict()`.
"""
from typing import Optional, Dict, Any


class AppException(Exception):
    """
    Excepción base de la aplicación.

    Args:
        message: Mensaje de error descriptivo
        status_code: Código HTTP con el que se expone en la API
        error_code: Código de error estable (para clientes/alertas)
        details: Contexto adicional serializable
    """

    status_code: int = 500
    error_code: str = "INTERNAL_ERROR"

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        if error_code is not None:
            self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Payload JSON de error (mismo formato en toda la API)."""
        return {
            "error": self.error_code,
            "message": self.message,
            "details": self.details,
        }
