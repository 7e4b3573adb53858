"""
Reintentos con backoff exponencial sobre `JobFeedClient.fetch_page`.

Politica:
- hasta `max_attempts` intentos en total
- se reintenta solo si `error.kind` esta en `retryable_kinds`
- delay antes del intento n+1: base_delay_s * multiplier ** (n - 1)
- al agotar intentos se relanza la excepcion original, sin envolver
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Callable, FrozenSet, Optional, Protocol

from loguru import logger

from jobsearch.shared.constants.sync_constants import FetchErrorKind
from jobsearch.shared.exceptions.sync import FeedFetchError

from .types import FeedPage, FetchWindow


class PageFetcher(Protocol):
    def fetch_page(self, window: FetchWindow, page_index: Optional[int] = None) -> FeedPage:
        ...


@dataclass(frozen=True)
class RetryPolicy:
    max_attempts: int = 3
    base_delay_s: float = 5.0
    multiplier: float = 3.0
    retryable_kinds: FrozenSet[FetchErrorKind] = field(
        default_factory=lambda: frozenset({FetchErrorKind.TRANSIENT, FetchErrorKind.REJECTED})
    )

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError("max_attempts debe ser >= 1")

    def delay_for(self, attempt: int) -> float:
        """Espera (segundos) despues de fallar el intento `attempt` (1-based)."""
        return self.base_delay_s * (self.multiplier ** (attempt - 1))

    def is_retryable(self, error: FeedFetchError) -> bool:
        return error.kind in self.retryable_kinds


class RetryingFetcher:
    """
    Envuelve un PageFetcher con la politica de reintentos.

    `sleep` es inyectable para tests.
    """

    def __init__(
        self,
        client: PageFetcher,
        policy: Optional[RetryPolicy] = None,
        *,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._client = client
        self.policy = policy or RetryPolicy()
        self._sleep = sleep

    def fetch_with_retry(self, window: FetchWindow, page_index: Optional[int] = None) -> FeedPage:
        page_label = "inicial" if page_index is None else str(page_index)

        for attempt in range(1, self.policy.max_attempts + 1):
            try:
                page = self._client.fetch_page(window, page_index)
            except FeedFetchError as e:
                if not self.policy.is_retryable(e):
                    logger.error(
                        f"Fetch pagina {page_label}: error {e.kind.value} no reintentable "
                        f"(intento {attempt}/{self.policy.max_attempts}): {e.message}"
                    )
                    raise

                if attempt >= self.policy.max_attempts:
                    logger.error(
                        f"Fetch pagina {page_label}: error {e.kind.value} tras "
                        f"{attempt} intentos. Abandonando: {e.message}"
                    )
                    raise

                delay = self.policy.delay_for(attempt)
                logger.warning(
                    f"Fetch pagina {page_label}: error {e.kind.value} "
                    f"(intento {attempt}/{self.policy.max_attempts}), reintento en {delay:.1f}s: {e.message}"
                )
                self._sleep(delay)
                continue

            if attempt > 1:
                logger.info(f"Fetch pagina {page_label}: OK en el intento {attempt}")
            else:
                logger.debug(f"Fetch pagina {page_label}: OK ({len(page.records)} avisos)")
            return page

        # max_attempts >= 1 garantiza que el loop retorna o relanza
        raise AssertionError("unreachable")
