"""
Endpoints de estadisticas sobre los avisos sincronizados.
"""
from typing import List

from fastapi import APIRouter, Depends, Query

from jobsearch.api.v1.dependencies.use_case_deps import get_stats_use_cases
from jobsearch.application.dto.stats_dto import WeeklyKeywordStatsDTO
from jobsearch.application.use_cases.stats_use_cases import StatsUseCases


router = APIRouter(prefix="/stats", tags=["Stats"])


@router.get(
    "/kotlin-vs-java",
    response_model=List[WeeklyKeywordStatsDTO],
    summary="Avisos Kotlin vs Java por semana"
)
def get_kotlin_vs_java_stats(
    months: int = Query(default=6, ge=1, le=24, description="Meses hacia atras"),
    use_cases: StatsUseCases = Depends(get_stats_use_cases),
) -> List[WeeklyKeywordStatsDTO]:
    """
    Cantidad de avisos que mencionan Kotlin y Java, agrupados por semana ISO
    (lunes a domingo) segun la fecha de publicacion.
    """
    return use_cases.kotlin_vs_java(months=months)
