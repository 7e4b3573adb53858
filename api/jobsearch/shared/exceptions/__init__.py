"""
Excepciones de la aplicacion.
"""
from jobsearch.shared.exceptions.base import AppException
from jobsearch.shared.exceptions.sync import (
    FeedFetchError,
    TransientFetchError,
    RejectedFetchError,
    FatalFetchError,
    SyncConfigError,
    SyncAlreadyRunningError,
)

__all__ = [
    "AppException",
    "FeedFetchError",
    "TransientFetchError",
    "RejectedFetchError",
    "FatalFetchError",
    "SyncConfigError",
    "SyncAlreadyRunningError",
]
