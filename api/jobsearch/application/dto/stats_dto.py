"""
DTOs para estadisticas de avisos.
"""
from datetime import datetime

from pydantic import BaseModel, Field


class WeeklyKeywordStatsDTO(BaseModel):
    """Conteo de una semana ISO."""

    week: datetime = Field(..., description="Lunes 00:00 UTC de la semana")
    week_number: int = Field(..., ge=1, le=53)
    kotlin_count: int = Field(..., ge=0)
    java_count: int = Field(..., ge=0)
    total_count: int = Field(..., ge=0)
