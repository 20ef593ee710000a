"""City/county directory backing every events endpoint."""

from __future__ import annotations

from typing import Dict, List, Optional

from config.locations import EVENT_COUNTIES

from src.utils.text_cleaner import fold_accents

from .models import CityInfo

DEFAULT_EVENT_CITY = "sanjose"

COUNTIES: Dict[str, List[CityInfo]] = {
    county: [CityInfo(name=name, slug=slug, county=county) for name, slug in cities]
    for county, cities in EVENT_COUNTIES.items()
}
_ALL_CITIES: List[CityInfo] = [city for cities in COUNTIES.values() for city in cities]
_BY_SLUG: Dict[str, CityInfo] = {city.slug: city for city in _ALL_CITIES}


def all_cities() -> List[CityInfo]:
    """Every city, in declaration order."""
    return list(_ALL_CITIES)


def normalize_slug(raw: Optional[str]) -> str:
    """``"San-Jose"`` and ``"san jose"`` both become ``"sanjose"``."""
    return "".join(ch for ch in (raw or "").lower() if ch not in "- _")


def get_city(slug: Optional[str]) -> Optional[CityInfo]:
    return _BY_SLUG.get(normalize_slug(slug))


def match_city(raw: Optional[str]) -> Optional[CityInfo]:
    """
    Best-effort match of a free-form venue city against the directory.

    Tries an exact (accent-insensitive) name match first, then a slug
    contained in the text, then a city name contained in the text.
    """
    if not raw:
        return None
    clean = raw.lower().replace(".", "").strip()
    if not clean:
        return None
    folded = fold_accents(clean)

    for city in _ALL_CITIES:
        if fold_accents(city.name.lower()) == folded:
            return city
    for city in _ALL_CITIES:
        if city.slug in folded:
            return city
    for city in _ALL_CITIES:
        if fold_accents(city.name.lower()) in folded:
            return city
    return None


def directory_payload() -> Dict[str, List[Dict[str, str]]]:
    """Counties → cities, ready to serialize."""
    return {
        county: [city.model_dump() for city in cities] for county, cities in COUNTIES.items()
    }
