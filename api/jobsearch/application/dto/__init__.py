"""
Data Transfer Objects (DTOs) para la capa de aplicacion.
"""
from .stats_dto import WeeklyKeywordStatsDTO
from .sync_dto import SyncResultDTO, SyncStatusDTO

__all__ = ["WeeklyKeywordStatsDTO", "SyncResultDTO", "SyncStatusDTO"]
