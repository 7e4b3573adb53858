"""
Entidad de dominio: estadistica semanal de avisos por keyword.
"""
from collections import defaultdict
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from jobsearch.shared.constants.sync_constants import STATS_KEYWORDS
from jobsearch.shared.utils.date_utils import ensure_utc, week_start


@dataclass(frozen=True)
class JobStatistics:
    """
    Conteo de una semana ISO: avisos que mencionan cada keyword y el total.

    `week_start` es el lunes 00:00 UTC.
    """

    week_start: datetime
    week_number: int
    keyword_counts: Tuple[int, ...]
    total_count: int

    @classmethod
    def from_row(cls, row: Optional[Sequence[Any]], keywords: Sequence[str] = STATS_KEYWORDS) -> Optional["JobStatistics"]:
        """
        Construye la estadistica de una fila (published, count_1..count_n, total).
        Filas con forma o tipos inesperados devuelven None.
        """
        if not _is_valid_row(row, len(keywords)):
            return None

        start = week_start(ensure_utc(row[0]))
        return cls(
            week_start=start,
            week_number=start.isocalendar()[1],
            keyword_counts=tuple(int(v) for v in row[1:-1]),
            total_count=int(row[-1]),
        )

    @classmethod
    def aggregate_weekly(
        cls,
        rows: Iterable[Sequence[Any]],
        keywords: Sequence[str] = STATS_KEYWORDS,
    ) -> List["JobStatistics"]:
        """Agrupa filas diarias por semana ISO, suma los conteos y ordena por semana."""
        weeks: Dict[datetime, List[JobStatistics]] = defaultdict(list)
        for row in rows:
            stat = cls.from_row(row, keywords)
            if stat is not None:
                weeks[stat.week_start].append(stat)

        aggregated = []
        for start, stats in weeks.items():
            aggregated.append(cls(
                week_start=start,
                week_number=start.isocalendar()[1],
                keyword_counts=tuple(sum(col) for col in zip(*(s.keyword_counts for s in stats))),
                total_count=sum(s.total_count for s in stats),
            ))
        return sorted(aggregated, key=lambda s: s.week_start)

    def count_for(self, keyword: str, keywords: Sequence[str] = STATS_KEYWORDS) -> int:
        return self.keyword_counts[list(keywords).index(keyword)]


def _is_valid_row(row: Optional[Sequence[Any]], keyword_count: int) -> bool:
    if row is None or len(row) != keyword_count + 2:
        return False
    if not isinstance(row[0], datetime):
        return False
    # bool es subclase de int: se descarta explicitamente
    return all(isinstance(v, int) and not isinstance(v, bool) for v in row[1:])
