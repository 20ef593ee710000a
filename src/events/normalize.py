"""
Mapping of provider payloads (Eventbrite, Ticketmaster, RSS items) into
:class:`UnifiedEvent`.

Normalizers return ``None`` for events outside the supported cities; the
caller simply drops them.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional

from config.settings import EVENTS_CONFIG

from src.utils.datetime_utils import to_iso_or_none
from src.utils.dedupe import sha256_hex
from src.utils.text_cleaner import clean_html

from .categorize import detect_category
from .city_directory import match_city
from .models import CityInfo, UnifiedEvent

FALLBACK_IMAGE = EVENTS_CONFIG["fallback_image"]


def normalize_date(value: Any) -> Optional[str]:
    """ISO-8601 (UTC) for anything date-like, ``None`` when missing or unparsable."""
    return to_iso_or_none(value)


def dig(raw: Mapping[str, Any], *path: Any) -> Any:
    node: Any = raw
    for step in path:
        if isinstance(step, int):
            if not isinstance(node, (list, tuple)) or len(node) <= step:
                return None
            node = node[step]
        else:
            if not isinstance(node, Mapping):
                return None
            node = node.get(step)
        if node is None:
            return None
    return node


def _resolve_city(venue_city: Optional[str], fallback: Optional[CityInfo]) -> Optional[CityInfo]:
    return match_city(venue_city) or fallback


def normalize_eventbrite(
    raw: Mapping[str, Any], *, fallback_city: Optional[CityInfo] = None
) -> Optional[UnifiedEvent]:
    city = _resolve_city(dig(raw, "venue", "address", "city"), fallback_city)
    if city is None:
        return None

    title = (dig(raw, "name", "text") or "").strip()
    description = (dig(raw, "description", "text") or "").strip()
    return UnifiedEvent(
        id=f"eb-{raw.get('id')}",
        title=title,
        description=description,
        image=dig(raw, "logo", "url") or FALLBACK_IMAGE,
        source_url=raw.get("url"),
        start_date=normalize_date(dig(raw, "start", "local")),
        end_date=normalize_date(dig(raw, "end", "local")),
        city=city.slug,
        city_name=city.name,
        county=city.county,
        category=detect_category(f"{title} {description}"),
        source="eventbrite",
    )


def normalize_ticketmaster(
    raw: Mapping[str, Any], *, fallback_city: Optional[CityInfo] = None
) -> Optional[UnifiedEvent]:
    city = _resolve_city(dig(raw, "_embedded", "venues", 0, "city", "name"), fallback_city)
    if city is None:
        return None

    title = raw.get("name") or ""
    description = raw.get("info") or raw.get("pleaseNote") or ""
    image = dig(raw, "images", 0, "url") or dig(raw, "images", 1, "url") or FALLBACK_IMAGE
    return UnifiedEvent(
        id=f"tm-{raw.get('id')}",
        title=title,
        description=description,
        image=image,
        source_url=raw.get("url"),
        start_date=normalize_date(dig(raw, "dates", "start", "localDate")),
        end_date=None,
        city=city.slug,
        city_name=city.name,
        county=city.county,
        category=detect_category(f"{title} {description}"),
        source="ticketmaster",
    )


def enclosure_url(entry: Mapping[str, Any]) -> Optional[str]:
    """URL of the first enclosure of a feedparser entry."""
    for enclosure in entry.get("enclosures") or []:
        href = enclosure.get("href") or enclosure.get("url")
        if href:
            return href
    return None


def normalize_rss_item(
    entry: Mapping[str, Any], feed: Mapping[str, Any], city: CityInfo
) -> UnifiedEvent:
    """RSS feeds are not city specific; every item takes the feed's city."""
    title = (entry.get("title") or "").strip()
    link = entry.get("link")
    published = entry.get("published") or None
    item_id = entry.get("guid") or entry.get("id")
    if not item_id:
        item_id = f"{feed['name']}-{sha256_hex(f'{title}|{link}|{published}')[:16]}"

    description = clean_html(entry.get("summary") or "")
    return UnifiedEvent(
        id=str(item_id),
        title=title,
        description=description,
        image=enclosure_url(entry) or FALLBACK_IMAGE,
        source_url=link,
        start_date=normalize_date(entry.get("published_parsed")) or normalize_date(published),
        end_date=None,
        city=city.slug,
        city_name=city.name,
        county=city.county,
        category=detect_category(f"{title} {description}"),
        source="rss",
    )
