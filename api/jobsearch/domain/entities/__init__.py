"""
Entidades del dominio.
"""
from jobsearch.domain.entities.job_statistics import JobStatistics

__all__ = ["JobStatistics"]
