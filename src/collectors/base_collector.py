# src/collectors/base_collector.py
# Clase base para colectores y proveedores externos
# =================================================

"""
Comportamiento común de todo lo que sale a la red: feeds RSS de noticias,
calendarios comunitarios y las APIs de Eventbrite y Ticketmaster.

La clase base se encarga de tres cosas:

- crear el cliente ``httpx.AsyncClient`` con los encabezados del sitio;
- reintentar con backoff exponencial los estados 429/5xx y los timeouts;
- emitir logs estructurados con nombres de evento con puntos
  (``news.feed.failed``, ``events.provider.skipped``...).

Las subclases sólo describen qué pedir y cómo mapear la respuesta. Un fallo
de una fuente nunca debe tumbar una agregación completa: las subclases
capturan ``FetchError`` y devuelven una lista vacía para esa fuente.
"""

import asyncio
from typing import TYPE_CHECKING, Any, Callable, Dict, Mapping, Optional

import httpx

from config.settings import COLLECTION_CONFIG, RATE_LIMITING_CONFIG

from src.utils.logger import get_logger

from .rate_limit_utils import compute_backoff_delay, is_retryable_status

if TYPE_CHECKING:  # pragma: no cover - import for typing only
    from src.utils.logger import CommunityMediaLogger


FEED_ACCEPT_HEADER = "application/rss+xml, application/atom+xml, application/xml, text/xml"


class FetchError(RuntimeError):
    """Una petición falló definitivamente (tras agotar reintentos o por estado no exitoso)."""

    def __init__(self, message: str, *, url: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.url = url
        self.status_code = status_code


class BaseCollector:
    """
    Base de colectores y proveedores.

    Args:
        logger_factory: Fábrica de loggers; por defecto la global.
        transport: Transporte httpx opcional (``httpx.MockTransport`` en tests).
        collection_config: Sobrescribe ``COLLECTION_CONFIG``.
        rate_limiting: Sobrescribe ``RATE_LIMITING_CONFIG``.
    """

    log_namespace = "collectors"

    def __init__(
        self,
        logger_factory: Optional["CommunityMediaLogger"] = None,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        collection_config: Optional[Mapping[str, Any]] = None,
        rate_limiting: Optional[Mapping[str, Any]] = None,
        sleep: Optional[Callable[[float], Any]] = None,
    ) -> None:
        self.collector_type = self.__class__.__name__
        self.transport = transport
        self.collection_config: Dict[str, Any] = {**COLLECTION_CONFIG, **(collection_config or {})}
        self.rate_limiting: Dict[str, Any] = {**RATE_LIMITING_CONFIG, **(rate_limiting or {})}
        self._sleep = sleep or asyncio.sleep
        self.stats: Dict[str, int] = {}
        self._reset_stats()

        self.logger_factory: "CommunityMediaLogger" = logger_factory or get_logger()
        self.module_logger = self.logger_factory.create_module_logger(
            f"{self.log_namespace}.{self.collector_type.lower()}"
        )

    # Cliente HTTP
    # ============

    def _default_headers(self) -> Dict[str, str]:
        return {
            "User-Agent": self.collection_config["user_agent"],
            "Accept-Language": "es-US,es;q=0.9,en;q=0.8",
        }

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            headers=self._default_headers(),
            follow_redirects=True,
            timeout=self.collection_config["request_timeout"],
            transport=self.transport,
        )

    def _semaphore(self) -> asyncio.Semaphore:
        return asyncio.Semaphore(self.collection_config["max_concurrent_requests"])

    async def _request(
        self,
        client: httpx.AsyncClient,
        url: str,
        *,
        source_id: Optional[str] = None,
        params: Optional[Mapping[str, Any]] = None,
        headers: Optional[Mapping[str, str]] = None,
    ) -> httpx.Response:
        """
        GET con reintentos. Devuelve la respuesta 2xx o lanza ``FetchError``.
        """
        max_retries = int(self.rate_limiting.get("max_retries", 0))
        for attempt in range(max_retries + 1):
            try:
                response = await client.get(url, params=params, headers=headers)
            except (httpx.ConnectTimeout, httpx.ReadTimeout, httpx.ConnectError) as exc:
                if attempt < max_retries:
                    await self._backoff(attempt, source_id, reason=type(exc).__name__)
                    continue
                raise FetchError(f"retries exhausted: {exc}", url=url) from exc
            except httpx.HTTPError as exc:
                raise FetchError(str(exc), url=url) from exc

            if is_retryable_status(response.status_code) and attempt < max_retries:
                await self._backoff(attempt, source_id, reason=str(response.status_code))
                continue
            if not response.is_success:
                raise FetchError(
                    f"HTTP {response.status_code}", url=url, status_code=response.status_code
                )
            return response
        raise FetchError("retries exhausted", url=url)  # pragma: no cover - loop always returns

    async def _backoff(self, attempt: int, source_id: Optional[str], *, reason: str) -> None:
        delay = compute_backoff_delay(attempt, self.rate_limiting)
        self._emit_log(
            "debug",
            f"{self.log_namespace}.request.retry",
            source_id=source_id,
            latency=delay,
            details={"attempt": attempt + 1, "reason": reason},
        )
        await self._sleep(delay)

    # Logging estructurado
    # ====================

    def _build_log_payload(
        self,
        event: str,
        *,
        source_id: Optional[str] = None,
        latency: Optional[float] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "event": event,
            "source_id": source_id,
            "collector_type": self.collector_type,
            "latency": latency,
            "details": details or None,
        }
        return {key: value for key, value in payload.items() if value is not None}

    def _emit_log(
        self,
        level: str,
        event: str,
        *,
        source_id: Optional[str] = None,
        latency: Optional[float] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        payload = self._build_log_payload(
            event, source_id=source_id, latency=latency, details=details
        )
        getattr(self.module_logger, level)(payload)

    # Estadísticas
    # ============

    def _reset_stats(self) -> None:
        self.stats = {"sources_processed": 0, "items_found": 0, "errors": 0}

    def _record_source(self, *, items: int, failed: bool = False) -> None:
        self.stats["sources_processed"] += 1
        self.stats["items_found"] += items
        if failed:
            self.stats["errors"] += 1
