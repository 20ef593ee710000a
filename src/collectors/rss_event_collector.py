# src/collectors/rss_event_collector.py
# Calendarios comunitarios y feeds regionales de eventos
# ======================================================

"""
Eventos publicados como RSS.

- ``collect()``: calendarios de San José (centro, ciudad, biblioteca, Meetup),
  hasta ``rss_items_per_feed`` elementos por feed, normalizados como
  :class:`UnifiedEvent`.
- ``collect_regional()``: periódicos y portales turísticos de la región,
  etiquetados por condado, deduplicados por enlace y ordenados del más
  reciente al más antiguo.

Un feed que falla se registra y se omite.
"""

import asyncio
import re
from typing import Any, Dict, List, Mapping, Optional, Sequence

import feedparser
import httpx

from config.settings import EVENTS_CONFIG
from config.sources import EVENT_RSS_FEEDS, REGIONAL_EVENT_FEEDS

from src.events.city_directory import get_city
from src.events.models import RegionalEvent, UnifiedEvent
from src.events.normalize import enclosure_url, normalize_rss_item
from src.utils.datetime_utils import sort_timestamp
from src.utils.dedupe import dedupe_by_key
from src.utils.text_cleaner import clean_html

from .base_collector import FEED_ACCEPT_HEADER, BaseCollector, FetchError

_WHITESPACE = re.compile(r"\s+")


class RSSEventCollector(BaseCollector):
    """Colector de eventos RSS para ``/api/events/rss`` y ``/api/events/regional``."""

    log_namespace = "events"

    def __init__(
        self,
        logger_factory=None,
        *,
        feeds: Optional[Sequence[Mapping[str, Any]]] = None,
        regional_feeds: Optional[Sequence[Mapping[str, Any]]] = None,
        events_config: Optional[Mapping[str, Any]] = None,
        **kwargs,
    ) -> None:
        super().__init__(logger_factory, **kwargs)
        self.feeds = list(feeds if feeds is not None else EVENT_RSS_FEEDS)
        self.regional_feeds = list(
            regional_feeds if regional_feeds is not None else REGIONAL_EVENT_FEEDS
        )
        self.events_config: Dict[str, Any] = {**EVENTS_CONFIG, **(events_config or {})}

    async def collect(self) -> List[UnifiedEvent]:
        self._reset_stats()
        limit = self.events_config["rss_items_per_feed"]
        semaphore = self._semaphore()
        async with self._client() as client:
            parsed_feeds = await asyncio.gather(
                *(self._fetch_entries(client, semaphore, feed["url"]) for feed in self.feeds)
            )

        events: List[UnifiedEvent] = []
        for feed, entries in zip(self.feeds, parsed_feeds):
            city = get_city(feed.get("city"))
            if city is None:
                self._emit_log(
                    "warning",
                    "events.rss.unknown_city",
                    source_id=feed["url"],
                    details={"city": feed.get("city")},
                )
                continue
            for entry in entries[:limit]:
                events.append(normalize_rss_item(entry, feed, city))

        self._emit_log("info", "events.rss.completed", details=dict(self.stats))
        return events

    async def collect_regional(self) -> List[RegionalEvent]:
        self._reset_stats()
        semaphore = self._semaphore()
        async with self._client() as client:
            parsed_feeds = await asyncio.gather(
                *(
                    self._fetch_entries(client, semaphore, feed["url"])
                    for feed in self.regional_feeds
                )
            )

        events = [
            self._map_regional(entry, feed)
            for feed, entries in zip(self.regional_feeds, parsed_feeds)
            for entry in entries
        ]
        events = dedupe_by_key(events, lambda event: event.link or None)
        events.sort(key=lambda event: sort_timestamp(event.date), reverse=True)
        self._emit_log("info", "events.regional.completed", details=dict(self.stats))
        return events

    def _map_regional(self, entry: Mapping[str, Any], feed: Mapping[str, Any]) -> RegionalEvent:
        title = entry.get("title") or "Untitled Event"
        published = entry.get("published") or ""
        event_id = _WHITESPACE.sub("", f"{feed['url']}-{title[:32]}-{published}")
        return RegionalEvent(
            id=event_id,
            title=title,
            description=clean_html(entry.get("summary") or "") or "No description available.",
            date=published,
            county=feed["county"],
            category="General",
            image=enclosure_url(entry) or self.events_config["fallback_image"],
            link=entry.get("link"),
            source=feed["url"],
        )

    async def _fetch_entries(
        self, client: httpx.AsyncClient, semaphore: asyncio.Semaphore, url: str
    ) -> List[Mapping[str, Any]]:
        try:
            async with semaphore:
                response = await self._request(
                    client, url, source_id=url, headers={"Accept": FEED_ACCEPT_HEADER}
                )
            parsed = feedparser.parse(response.content)
            if parsed.bozo and not parsed.entries:
                raise FetchError(f"unparsable feed: {parsed.get('bozo_exception')}", url=url)
        except FetchError as exc:
            self._record_source(items=0, failed=True)
            self._emit_log(
                "warning",
                "events.rss.feed_failed",
                source_id=url,
                details={"error": str(exc), "status_code": exc.status_code},
            )
            return []

        self._record_source(items=len(parsed.entries))
        return list(parsed.entries)
