# src/events/service.py
# Agregaciones de eventos
# =======================

"""
Orquesta proveedores y feeds para cada endpoint de eventos.

``core_events`` mezcla Ticketmaster regional, Eventbrite y los calendarios
RSS de una ciudad; ``full_events`` es la versión estrictamente local con
filtro por categoría; ``live_events`` es el feed regional de Ticketmaster.
"""

import asyncio
from datetime import date
from typing import Any, Dict, List, Mapping, Optional

from config.locations import APPROVED_COUNTIES, CITY_TO_COUNTY
from config.settings import EVENTS_CONFIG

from src.collectors.rss_event_collector import RSSEventCollector
from src.utils.logger import get_logger

from .categorize import classify_ticketmaster
from .city_directory import DEFAULT_EVENT_CITY, get_city
from .dedupe import dedupe_events
from .errors import InvalidCityError
from .models import LiveEvent, UnifiedEvent
from .normalize import dig
from .providers import EventbriteProvider, TicketmasterProvider

NO_EVENTS_MESSAGE = "No events available for this city."


def sort_by_start_date(events: List[UnifiedEvent]) -> List[UnifiedEvent]:
    """Ascending start date; undated events last, in their original order."""
    return sorted(events, key=lambda event: (event.start_date is None, event.start_date or ""))


def to_live_event(raw: Mapping[str, Any], fallback_image: str, min_width: int) -> LiveEvent:
    city = dig(raw, "_embedded", "venues", 0, "city", "name") or ""
    image = next(
        (
            img.get("url")
            for img in raw.get("images") or []
            if (img.get("width") or 0) > min_width and img.get("url")
        ),
        fallback_image,
    )
    return LiveEvent(
        id=str(raw.get("id") or ""),
        title=raw.get("name") or "",
        description=raw.get("info") or "",
        date=dig(raw, "dates", "start", "localDate") or "",
        time=dig(raw, "dates", "start", "localTime") or "",
        image=image,
        source_url=raw.get("url") or "",
        city=city,
        county=CITY_TO_COUNTY.get(city, ""),
        category=classify_ticketmaster(dig(raw, "classifications", 0)),
    )


class EventsService:
    """Punto de entrada de los endpoints ``/api/events/*``."""

    def __init__(
        self,
        *,
        eventbrite: Optional[EventbriteProvider] = None,
        ticketmaster: Optional[TicketmasterProvider] = None,
        rss: Optional[RSSEventCollector] = None,
        events_config: Optional[Mapping[str, Any]] = None,
        logger_factory=None,
    ) -> None:
        self.events_config: Dict[str, Any] = {**EVENTS_CONFIG, **(events_config or {})}
        self.eventbrite = eventbrite or EventbriteProvider(
            logger_factory, events_config=self.events_config
        )
        self.ticketmaster = ticketmaster or TicketmasterProvider(
            logger_factory, events_config=self.events_config
        )
        self.rss = rss or RSSEventCollector(logger_factory, events_config=self.events_config)
        self.logger = (logger_factory or get_logger()).create_module_logger("events.service")

    async def core_events(self, city_slug: Optional[str] = None) -> Dict[str, Any]:
        """
        Eventos de una ciudad desde todas las fuentes.

        Raises:
            InvalidCityError: si el slug no está en el directorio.
        """
        slug = city_slug or self.events_config["default_city"]
        city = get_city(slug)
        if city is None:
            raise InvalidCityError(slug)

        ticketmaster, eventbrite, rss = await asyncio.gather(
            self.ticketmaster.fetch(city, strict_local=False, fallback_to_city=True),
            self.eventbrite.fetch(
                city, self.events_config["eventbrite_within"], fallback_to_city=True
            ),
            self.rss.collect(),
        )
        events = sort_by_start_date(dedupe_events([*ticketmaster, *eventbrite, *rss]))
        self.logger.info(
            {"event": "events.core.completed", "city": city.slug, "count": len(events)}
        )
        return {
            "city": city.name,
            "count": len(events),
            "events": [event.to_api() for event in events],
        }

    async def full_events(
        self, city_slug: Optional[str] = None, category: Optional[str] = None
    ) -> Dict[str, Any]:
        city = get_city(city_slug) or get_city(DEFAULT_EVENT_CITY)

        eventbrite, ticketmaster = await asyncio.gather(
            self.eventbrite.fetch(city, self.events_config["eventbrite_local_within"]),
            self.ticketmaster.fetch(city, strict_local=True),
        )
        events = dedupe_events([*eventbrite, *ticketmaster])
        if category:
            events = [event for event in events if event.category == category]

        if not events:
            return {"events": [], "city": city.slug, "message": NO_EVENTS_MESSAGE}
        return {
            "events": [event.to_api() for event in events],
            "city": city.slug,
            "category": category or None,
        }

    async def live_events(self, today: date) -> List[Dict[str, Any]]:
        """
        Feed regional en vivo: condados aprobados, fecha de hoy en adelante.

        Raises:
            ProviderNotConfiguredError: sin clave de Ticketmaster.
            FetchError: si Ticketmaster falla.
        """
        raw_events = await self.ticketmaster.fetch_live()
        cutoff = today.isoformat()
        events = [
            to_live_event(
                raw,
                self.events_config["live_fallback_image"],
                self.events_config["live_min_image_width"],
            )
            for raw in raw_events
        ]
        kept = [
            event
            for event in events
            if event.county in APPROVED_COUNTIES and event.date and event.date >= cutoff
        ]
        self.logger.debug(
            {"event": "events.live.filtered", "received": len(events), "kept": len(kept)}
        )
        return [event.to_api() for event in kept]

    async def rss_events(self) -> Dict[str, Any]:
        events = dedupe_events(await self.rss.collect())
        return {"total": len(events), "events": [event.to_api() for event in events]}

    async def regional_rss_events(self) -> List[Dict[str, Any]]:
        return [event.to_api() for event in await self.rss.collect_regional()]
