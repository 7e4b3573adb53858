"""
Configuracion central de la aplicacion.
Gestiona variables de entorno y configuraciones globales.

Agrupa tres bloques:
- Aplicacion y servidor HTTP (FastAPI/uvicorn)
- Base de datos (URL completa o por componentes)
- Feed de avisos: credenciales, filtros, reintentos y cron de sincronizacion
"""
import json
from typing import List
from pydantic_settings import BaseSettings
from pydantic import Field, computed_field


class Settings(BaseSettings):
    """
    Clase de configuracion de la aplicacion.
    Lee variables de entorno y proporciona valores por defecto.

    Configuracion del sync:
    - FEED_API_URL / FEED_API_TOKEN: endpoint y bearer token del feed
    - RETRY_*: politica de reintentos (backoff exponencial)
    - *_CRON: expresiones crontab de 5 campos para el scheduler
    """

    # Configuracion de la aplicacion
    APP_NAME: str = Field(default="Jobsearch Feed Sync")
    APP_VERSION: str = Field(default="1.0.0")
    DEBUG: bool = Field(default=False)
    ENVIRONMENT: str = Field(default="production")

    # Configuracion del servidor
    HOST: str = Field(default="0.0.0.0")
    PORT: int = Field(default=8000)

    # Base de datos - Componentes separados
    DATABASE_HOST: str = Field(default="localhost")
    DATABASE_PORT: int = Field(default=5432)
    DATABASE_USER: str = Field(default="jobsearch")
    DATABASE_PASSWORD: str = Field(default="jobsearch")
    DATABASE_NAME: str = Field(default="jobsearch")

    # Base de datos - URL completa (override de componentes si se proporciona)
    DATABASE_URL: str = Field(default="")
    DB_POOL_SIZE: int = Field(default=5)
    DB_MAX_OVERFLOW: int = Field(default=10)

    # Feed de avisos
    FEED_API_URL: str = Field(default="")
    FEED_API_TOKEN: str = Field(default="")
    FEED_CATEGORY: str = Field(default="IT")
    FEED_PAGE_SIZE: int = Field(default=100)
    FEED_TIMEOUT_S: int = Field(default=30)
    FEED_BATCH_SIZE: int = Field(default=100)
    FEED_LOOKBACK_MONTHS: int = Field(default=6)

    # Reintentos del fetch (delay = base * multiplier^(intento-1))
    RETRY_MAX_ATTEMPTS: int = Field(default=3)
    RETRY_BASE_DELAY_MS: int = Field(default=5000)
    RETRY_MULTIPLIER: float = Field(default=3.0)

    # Scheduler
    SCHEDULER_ENABLED: bool = Field(default=True)
    FULL_SYNC_CRON: str = Field(default="0 0 * * *")
    INCREMENTAL_SYNC_CRON: str = Field(default="*/10 * * * *")
    FULL_SYNC_ON_STARTUP: bool = Field(default=True)

    # CORS (acepta lista JSON o "*" para todos los origenes)
    CORS_ORIGINS: str = Field(default="*")

    # Logging
    LOG_LEVEL: str = Field(default="INFO")
    LOG_FILE: str = Field(default="logs/app.log")

    @computed_field
    @property
    def effective_database_url(self) -> str:
        """
        Retorna la URL de base de datos efectiva.
        Si DATABASE_URL esta definida, la usa directamente.
        Si no, construye la URL (driver psycopg) desde los componentes.
        """
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return (
            f"postgresql+psycopg://{self.DATABASE_USER}:{self.DATABASE_PASSWORD}"
            f"@{self.DATABASE_HOST}:{self.DATABASE_PORT}/{self.DATABASE_NAME}"
        )

    class Config:
        """Configuracion de Pydantic."""
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"  # Ignorar campos extra del .env


def get_cors_origins(cors_string: str) -> List[str]:
    """
    Parsea la configuracion de CORS.
    Acepta "*" para todos los origenes o una lista JSON.
    """
    if cors_string == "*":
        return ["*"]
    try:
        return json.loads(cors_string)
    except json.JSONDecodeError:
        # Si no es JSON valido, retornar como lista simple
        return [origin.strip() for origin in cors_string.split(",")]


# Instancia global de configuracion
settings = Settings()
