"""
Motor de eventos: directorio de ciudades, normalización y deduplicación.

El servicio de agregación vive en ``src.events.service`` y se importa por
separado porque depende de los colectores.
"""

from .categorize import classify_ticketmaster, detect_category
from .city_directory import all_cities, get_city, match_city
from .dedupe import dedupe_events
from .errors import InvalidCityError, ProviderNotConfiguredError
from .models import CityInfo, LiveEvent, RegionalEvent, UnifiedEvent
from .normalize import normalize_date, normalize_eventbrite, normalize_rss_item, normalize_ticketmaster

__all__ = [
    "CityInfo",
    "UnifiedEvent",
    "LiveEvent",
    "RegionalEvent",
    "InvalidCityError",
    "ProviderNotConfiguredError",
    "all_cities",
    "get_city",
    "match_city",
    "detect_category",
    "classify_ticketmaster",
    "normalize_date",
    "normalize_eventbrite",
    "normalize_ticketmaster",
    "normalize_rss_item",
    "dedupe_events",
]
