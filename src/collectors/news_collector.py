# src/collectors/news_collector.py
# Agregador de noticias por categoría e idioma
# ============================================

"""
Descarga en paralelo los feeds de una categoría, los aplana en una sola
lista ordenada de la más reciente a la más antigua y la guarda en caché por
``(idioma, categoría)``.
"""

import asyncio
from datetime import datetime
from typing import Any, Callable, Dict, List, Mapping, Optional

import feedparser
import httpx

from config.settings import NEWS_CONFIG
from config.sources import NEWS_CATEGORIES, THUMBNAIL_KEYWORDS, get_news_feeds

from src.utils.cache import ResponseCache
from src.utils.datetime_utils import isoformat_utc, parse_to_utc, sort_timestamp, utc_now
from src.utils.text_cleaner import clean_html, extract_first_image

from .base_collector import FEED_ACCEPT_HEADER, BaseCollector, FetchError


def fallback_thumbnail(title: str, category: str) -> str:
    """Miniatura local cuando un artículo no trae imagen."""
    lowered = (title or "").lower()
    for keywords, key in THUMBNAIL_KEYWORDS:
        if any(keyword in lowered for keyword in keywords):
            return f"/thumbs/thumb_{key}.png"
    key = category if category in NEWS_CATEGORIES else "ultimas"
    return f"/thumbs/thumb_{key}.png"


class NewsFeedCollector(BaseCollector):
    """Colector de noticias para ``GET /api/news``."""

    log_namespace = "news"

    def __init__(
        self,
        logger_factory=None,
        *,
        cache: Optional[ResponseCache] = None,
        news_config: Optional[Mapping[str, Any]] = None,
        clock: Callable[[], datetime] = utc_now,
        **kwargs,
    ) -> None:
        super().__init__(logger_factory, **kwargs)
        self.news_config: Dict[str, Any] = {**NEWS_CONFIG, **(news_config or {})}
        self.cache = cache or ResponseCache(
            max_size=self.collection_config["cache_max_entries"],
            ttl=self.collection_config["cache_ttl_seconds"],
        )
        self.clock = clock

    async def collect(self, category: Optional[str], lang: Optional[str]) -> Dict[str, Any]:
        """
        Noticias de ``category`` en ``lang``.

        Devuelve ``{category, lang, count, items}`` con la categoría y el
        idioma efectivos tras aplicar los valores por defecto.
        """
        effective_category, effective_lang, feeds = get_news_feeds(category or "", lang or "")
        cache_key = (effective_lang, effective_category)
        cached = self.cache.get(cache_key)
        if cached is not None:
            return cached

        self._reset_stats()
        semaphore = self._semaphore()
        async with self._client() as client:
            batches = await asyncio.gather(
                *(self._collect_feed(client, semaphore, url) for url in feeds)
            )

        items = [item for batch in batches for item in batch]
        items.sort(key=lambda item: sort_timestamp(item["date"]), reverse=True)
        items = items[: self.news_config["max_items"]]

        result = {
            "category": effective_category,
            "lang": effective_lang,
            "count": len(items),
            "items": items,
        }
        self.cache.set(cache_key, result)
        self._emit_log(
            "info",
            "news.collect.completed",
            details={**self.stats, "category": effective_category, "lang": effective_lang},
        )
        return result

    async def _collect_feed(
        self, client: httpx.AsyncClient, semaphore: asyncio.Semaphore, url: str
    ) -> List[Dict[str, Any]]:
        try:
            async with semaphore:
                response = await self._request(
                    client, url, source_id=url, headers={"Accept": FEED_ACCEPT_HEADER}
                )
            if len(response.content) > self.collection_config["max_feed_bytes"]:
                raise FetchError("feed too large", url=url, status_code=response.status_code)
            parsed = feedparser.parse(response.content)
            if parsed.bozo and not parsed.entries:
                raise FetchError(f"unparsable feed: {parsed.get('bozo_exception')}", url=url)
        except FetchError as exc:
            self._record_source(items=0, failed=True)
            self._emit_log(
                "warning",
                "news.feed.failed",
                source_id=url,
                details={"error": str(exc), "status_code": exc.status_code},
            )
            return []

        items = [self._map_entry(entry) for entry in parsed.entries]
        self._record_source(items=len(items))
        return items

    def _map_entry(self, entry: Mapping[str, Any]) -> Dict[str, Any]:
        summary = entry.get("summary") or ""
        contents = entry.get("content") or []
        html = contents[0].get("value", "") if contents else summary
        return {
            "title": entry.get("title") or "",
            "link": entry.get("link") or "",
            "img": extract_first_image(html) or extract_first_image(summary),
            "date": self._entry_date(entry),
            "desc": clean_html(summary),
        }

    def _entry_date(self, entry: Mapping[str, Any]) -> str:
        for parsed_key in ("published_parsed", "updated_parsed"):
            parsed = parse_to_utc(entry.get(parsed_key))
            if parsed:
                return isoformat_utc(parsed)
        raw = entry.get("published") or entry.get("updated")
        if raw:
            return raw
        return isoformat_utc(self.clock())
