"""
Cliente HTTP minimo del feed de avisos.

Requisitos cubiertos:
- requests, un GET por pagina
- bearer token por request
- filtros category/size/published/updated y numero de pagina
- clasificacion de errores (transient / rejected / fatal)

No reintenta: eso vive en `RetryingFetcher`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional
from urllib.parse import urlencode

import requests
from loguru import logger

from jobsearch.shared.exceptions.sync import (
    FatalFetchError,
    RejectedFetchError,
    TransientFetchError,
)
from jobsearch.shared.utils.date_utils import format_feed_datetime

from .types import FeedPage, FeedRecord, FetchWindow


@dataclass(frozen=True)
class FeedCredentials:
    api_url: str
    token: str


def _range_param(start, end) -> str:
    return f"({format_feed_datetime(start)},{format_feed_datetime(end)})"


def build_query_string(
    window: FetchWindow,
    *,
    category: str,
    page_size: int,
    page_index: Optional[int] = None,
) -> str:
    """
    Construye el query string de una pagina.

    - published: rango fijo de la corrida (lookback de retencion)
    - updated: ventana movil [oldest, newest]
    - page: se omite en el primer request de cada ventana

    Parentesis, comas y ':' viajan sin escapar (el feed los espera literales);
    '+' se escapa como %2B.
    """
    if window.newest is None:
        raise ValueError("No se puede construir un request para una ventana sin 'newest'")

    params: list[tuple[str, Any]] = [
        ("category", category),
        ("size", page_size),
        ("published", _range_param(window.published_from, window.published_to)),
        ("updated", _range_param(window.oldest, window.newest)),
    ]
    if page_index is not None:
        params.append(("page", page_index))
    return urlencode(params, safe="(),:")


class JobFeedClient:
    """
    Cliente HTTP del feed. Expone `fetch_page`, que devuelve un FeedPage tipado
    o levanta un FeedFetchError clasificado.
    """

    def __init__(
        self,
        credentials: FeedCredentials,
        *,
        session: Optional[requests.Session] = None,
        category: str = "IT",
        page_size: int = 100,
        timeout_s: int = 30,
    ) -> None:
        self._creds = credentials
        self._api_url = credentials.api_url.rstrip("?")
        self._session = session or requests.Session()
        self._category = category
        self._page_size = page_size
        self._timeout_s = timeout_s

    def build_url(self, window: FetchWindow, page_index: Optional[int] = None) -> str:
        query = build_query_string(
            window,
            category=self._category,
            page_size=self._page_size,
            page_index=page_index,
        )
        return f"{self._api_url}?{query}"

    def fetch_page(self, window: FetchWindow, page_index: Optional[int] = None) -> FeedPage:
        """
        Pide una pagina de la ventana.

        Raises:
            TransientFetchError: timeout / error de conexion
            RejectedFetchError: respuesta 4xx
            FatalFetchError: 5xx, body no JSON o con forma inesperada
        """
        url = self.build_url(window, page_index)
        headers = {
            "Authorization": f"Bearer {self._creds.token}",
            "Accept": "application/json",
        }
        logger.debug(f"GET {url}")

        try:
            resp = self._session.get(url, headers=headers, timeout=self._timeout_s)
        except (requests.Timeout, requests.ConnectionError) as e:
            raise TransientFetchError(f"Timeout/conexion fallida contra el feed: {e}", url=url) from e
        except requests.RequestException as e:
            raise FatalFetchError(f"Error inesperado pidiendo el feed: {e}", url=url) from e

        if 400 <= resp.status_code < 500:
            raise RejectedFetchError(
                f"El feed rechazo el request ({resp.status_code}): {resp.text[:500]}",
                url=url,
                http_status=resp.status_code,
            )
        if not 200 <= resp.status_code < 300:
            raise FatalFetchError(
                f"El feed respondio {resp.status_code}: {resp.text[:500]}",
                url=url,
                http_status=resp.status_code,
            )

        try:
            payload = resp.json()
        except ValueError as e:
            raise FatalFetchError("El feed devolvio un body que no es JSON", url=url) from e

        return self._parse_page(payload, url=url, page_index=page_index)

    @staticmethod
    def _parse_page(payload: Any, *, url: str, page_index: Optional[int]) -> FeedPage:
        if not isinstance(payload, dict):
            raise FatalFetchError("Respuesta del feed con forma inesperada (no es un objeto)", url=url)

        # Un body incompleto no es una pagina vacia: terminaria en un desalojo total
        missing = [key for key in ("content", "pageNumber", "totalPages") if key not in payload]
        if missing:
            raise FatalFetchError(f"Respuesta del feed sin campos obligatorios: {missing}", url=url)

        content = payload["content"]
        if not isinstance(content, list):
            raise FatalFetchError("'content' no es una lista", url=url)

        page_number = payload["pageNumber"]
        total_pages = payload["totalPages"]
        for name, value in (("pageNumber", page_number), ("totalPages", total_pages)):
            if not isinstance(value, int) or isinstance(value, bool) or value < 0:
                raise FatalFetchError(f"'{name}' invalido: {value!r}", url=url)

        try:
            records = [FeedRecord.from_payload(item) for item in content]
        except (TypeError, ValueError, AttributeError) as e:
            raise FatalFetchError(f"No se pudo parsear la pagina del feed: {e}", url=url) from e

        return FeedPage(records=records, page_number=page_number, total_pages=total_pages)
