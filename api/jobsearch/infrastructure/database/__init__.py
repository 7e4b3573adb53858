"""
Configuración de base de datos.

Importa todos los modelos para que se registren con Base
antes de crear las tablas.
"""
from jobsearch.infrastructure.database.models import JobAdModel


__all__ = ["JobAdModel"]
