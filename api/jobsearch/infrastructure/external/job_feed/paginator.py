"""
Paginador por ventanas de tiempo.

El feed no expone cursor. Se pagina con un limite superior movil:
1. Se pide la pagina inicial de la ventana [oldest, newest).
2. Se recorren las paginas restantes de la MISMA ventana.
3. El `published` del ultimo aviso visto pasa a ser el nuevo `newest`
   y se repite, siempre con el mismo `oldest`.

Es tolerante a que el feed crezca mientras se pagina, a costa de re-leer
paginas ya vistas: el upsert aguas abajo tiene que ser idempotente.

Terminacion: la ventana tiene que achicarse en cada vuelta. Si el candidato
es None, no es posterior a `oldest` o no es anterior al `newest` actual,
se corta.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

from loguru import logger

from jobsearch.shared.exceptions.sync import FeedFetchError

from .retry import RetryingFetcher
from .types import FeedRecord, FetchWindow

RecordsHandler = Callable[[list[FeedRecord]], None]


@dataclass
class PaginationResult:
    windows: int = 0
    pages_fetched: int = 0
    pages_skipped: int = 0
    records_seen: int = 0


class WindowedPaginator:
    """
    Maquina de estados AwaitingWindow -> FetchingPage0 -> FetchingRemainingPages
    -> (siguiente ventana | Done).

    No es reentrante: una corrida por instancia a la vez.
    """

    def __init__(self, fetcher: RetryingFetcher) -> None:
        self._fetcher = fetcher

    def run(self, window: FetchWindow, handler: RecordsHandler) -> PaginationResult:
        """
        Recorre el feed ventana por ventana entregando cada pagina no vacia a `handler`.

        Raises:
            FeedFetchError: si falla la pagina inicial de una ventana (tras
                reintentos) o cualquier pagina con error fatal. Lo ya entregado
                a `handler` en ventanas anteriores no se deshace.
        """
        result = PaginationResult()
        current: Optional[FetchWindow] = window

        while current is not None:
            if not current.is_open:
                logger.info(
                    f"Ventana cerrada (oldest={current.oldest.isoformat()}, newest={current.newest}). Nada que pedir."
                )
                break

            result.windows += 1
            candidate = self._walk_window(current, handler, result)
            current = self._next_window(current, candidate)

        logger.info(
            f"Paginacion terminada: ventanas={result.windows}, paginas={result.pages_fetched}, "
            f"omitidas={result.pages_skipped}, avisos={result.records_seen}"
        )
        return result

    def _walk_window(
        self,
        window: FetchWindow,
        handler: RecordsHandler,
        result: PaginationResult,
    ) -> Optional[datetime]:
        """Recorre todas las paginas de una ventana y retorna el ultimo published observado."""
        logger.info(
            f"Ventana #{result.windows}: updated=[{window.oldest.isoformat()}, {window.newest.isoformat()})"
        )

        # Errores de la pagina inicial se propagan: abortan la corrida
        first = self._fetcher.fetch_with_retry(window, None)
        result.pages_fetched += 1

        if first.is_empty:
            logger.info("La pagina inicial vino vacia. No hay mas avisos en la ventana.")
            return None

        handler(first.records)
        result.records_seen += len(first.records)
        last_observed = first.last_published

        for page_index in range(first.page_number + 1, first.total_pages):
            try:
                page = self._fetcher.fetch_with_retry(window, page_index)
            except FeedFetchError as e:
                if not self._fetcher.policy.is_retryable(e):
                    raise
                result.pages_skipped += 1
                logger.warning(f"Pagina {page_index}/{first.total_pages - 1} omitida tras reintentos: {e.message}")
                continue

            result.pages_fetched += 1
            if page.is_empty:
                continue

            handler(page.records)
            result.records_seen += len(page.records)
            if page.last_published is not None:
                last_observed = page.last_published

        return last_observed

    @staticmethod
    def _next_window(window: FetchWindow, candidate: Optional[datetime]) -> Optional[FetchWindow]:
        if candidate is None:
            logger.info("No se observaron avisos con fecha en la ventana. Fin del fetch.")
            return None
        if candidate <= window.oldest:
            logger.info(f"Sin avance: {candidate.isoformat()} no es posterior a oldest. Fin del fetch.")
            return None
        if window.newest is not None and candidate >= window.newest:
            logger.info(f"Sin avance: la ventana no se achica ({candidate.isoformat()}). Fin del fetch.")
            return None
        return window.narrowed_to(candidate)
