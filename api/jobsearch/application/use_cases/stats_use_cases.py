"""
Casos de uso de estadisticas sobre los avisos guardados.
"""
from datetime import datetime
from typing import List, Optional

from sqlalchemy.orm import Session

from jobsearch.application.dto.stats_dto import WeeklyKeywordStatsDTO
from jobsearch.domain.entities.job_statistics import JobStatistics
from jobsearch.infrastructure.repositories.job_ad_repository import JobAdRepository
from jobsearch.shared.constants.sync_constants import DEFAULT_LOOKBACK_MONTHS, STATS_KEYWORDS
from jobsearch.shared.utils.date_utils import ensure_utc, subtract_months, utc_now


class StatsUseCases:
    """Estadisticas semanales Kotlin vs Java de los ultimos meses."""

    def __init__(self, db: Session):
        self.repository = JobAdRepository(db)

    def kotlin_vs_java(
        self,
        now: Optional[datetime] = None,
        months: int = DEFAULT_LOOKBACK_MONTHS,
    ) -> List[WeeklyKeywordStatsDTO]:
        """
        Conteo por semana ISO de avisos que mencionan kotlin / java.

        Args:
            now: referencia temporal (default: ahora UTC)
            months: meses hacia atras a considerar
        """
        since = subtract_months(ensure_utc(now or utc_now()), months)
        rows = self.repository.keyword_counts_by_published(since, STATS_KEYWORDS)
        weekly = JobStatistics.aggregate_weekly(rows, STATS_KEYWORDS)

        return [
            WeeklyKeywordStatsDTO(
                week=stat.week_start,
                week_number=stat.week_number,
                kotlin_count=stat.count_for("kotlin"),
                java_count=stat.count_for("java"),
                total_count=stat.total_count,
            )
            for stat in weekly
        ]
