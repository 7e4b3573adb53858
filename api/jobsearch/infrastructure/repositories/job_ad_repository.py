"""
Repositorio para operaciones de persistencia de JobAd.
Es el "store" del sync: busqueda por clave natural, upsert por lotes,
barrido completo para desalojo y el maximo `updated` para el sync incremental.
"""
from datetime import datetime
from typing import Iterable, List, Optional, Sequence, Tuple

from loguru import logger
from sqlalchemy import case, func, select
from sqlalchemy.orm import Session

from jobsearch.infrastructure.database.models import JobAdModel
from jobsearch.shared.utils.date_utils import ensure_utc


class JobAdRepository:
    """
    Repositorio de avisos persistidos.

    No serializa escrituras concurrentes: asume un unico escritor por corrida.
    """

    def __init__(self, db: Session):
        """
        Inicializa el repositorio con una sesion de base de datos.

        Args:
            db: Sesion sincrona de SQLAlchemy
        """
        self.db = db

    def find_by_uuid(self, uuid: str) -> Optional[JobAdModel]:
        """Obtiene un aviso por su clave natural, o None."""
        query = select(JobAdModel).where(JobAdModel.uuid == uuid)
        return self.db.execute(query).scalar_one_or_none()

    def upsert_batch(self, ads: Iterable[JobAdModel]) -> int:
        """
        Persiste un lote de avisos nuevos o modificados y confirma.

        Cada lote se confirma por separado: si la corrida aborta despues,
        lo ya escrito queda.

        Returns:
            Cantidad de avisos escritos
        """
        ads_list = list(ads)
        if not ads_list:
            return 0

        self.db.add_all(ads_list)
        self.db.commit()
        logger.debug(f"Lote de {len(ads_list)} avisos persistido")
        return len(ads_list)

    def find_all(self) -> List[JobAdModel]:
        """Todos los avisos guardados (barrido O(n) del desalojo)."""
        return list(self.db.execute(select(JobAdModel)).scalars().all())

    def delete(self, ad: JobAdModel) -> None:
        """Marca un aviso para borrar; se aplica en el proximo commit."""
        self.db.delete(ad)

    def commit(self) -> None:
        self.db.commit()

    def max_updated(self) -> Optional[datetime]:
        """`updated` mas nuevo guardado, o None si la tabla esta vacia."""
        value = self.db.execute(select(func.max(JobAdModel.updated))).scalar_one_or_none()
        return ensure_utc(value) if value is not None else None

    def count(self) -> int:
        return int(self.db.execute(select(func.count(JobAdModel.id))).scalar_one())

    def keyword_counts_by_published(
        self,
        since: datetime,
        keywords: Sequence[str],
    ) -> List[Tuple]:
        """
        Conteo de avisos por fecha de publicacion cuyo description menciona
        cada keyword (case-insensitive), mas el total.

        Returns:
            Filas (published, count_kw_1, ..., count_kw_n, total) ordenadas por published
        """
        description = func.lower(JobAdModel.description)
        keyword_columns = [
            func.sum(case((description.like(f"%{kw.lower()}%"), 1), else_=0)).label(f"{kw}_count")
            for kw in keywords
        ]
        query = (
            select(JobAdModel.published, *keyword_columns, func.count(JobAdModel.id).label("total_count"))
            .where(JobAdModel.published >= since)
            .group_by(JobAdModel.published)
            .order_by(JobAdModel.published)
        )
        return [tuple(row) for row in self.db.execute(query).all()]
