"""
Modelos de base de datos (ORM).
"""
from sqlalchemy import Column, DateTime, Integer, String, Text
from sqlalchemy.sql import func

from jobsearch.infrastructure.database.session import Base
from jobsearch.infrastructure.external.job_feed.types import FeedRecord


class JobAdModel(Base):
    """
    Proyeccion persistida del ultimo snapshot de un aviso del feed.

    `uuid` es la clave natural (unica): se crea al ver el aviso por primera vez,
    se actualiza en cada sync que lo vuelve a ver y se borra al desalojarlo.
    """

    __tablename__ = "job_ads"

    id = Column(Integer, primary_key=True, index=True)
    uuid = Column(String(255), nullable=False, unique=True, index=True)
    title = Column(String(1024), nullable=True)
    description = Column(Text, nullable=True)
    published = Column(DateTime(timezone=True), nullable=True, index=True)
    updated = Column(DateTime(timezone=True), nullable=True, index=True)
    expires = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    synced_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    @classmethod
    def from_record(cls, record: FeedRecord) -> "JobAdModel":
        """Crea la fila para un aviso nuevo."""
        ad = cls(uuid=record.uuid)
        ad.update_from_record(record)
        return ad

    def update_from_record(self, record: FeedRecord) -> None:
        """Pisa los campos mutables con el snapshot del feed (la clave no cambia)."""
        self.title = record.title
        self.description = record.description
        self.published = record.published
        self.updated = record.updated
        self.expires = record.expires

    def __repr__(self):
        return f"<JobAd(id={self.id}, uuid={self.uuid}, title={self.title})>"
