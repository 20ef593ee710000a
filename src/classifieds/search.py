# src/classifieds/search.py
# Búsqueda de clasificados por texto, categoría y radio
# =====================================================

"""
Búsqueda de anuncios.

El punto de referencia (``anchor``) sale de un ZIP conocido de 5 dígitos, si
no de una ciudad conocida (aceptando alias coloquiales), y si no de la
ciudad por defecto. Los anuncios en ciudades sin coordenadas nunca se
ocultan por distancia.
"""

from __future__ import annotations

import math
from typing import Any, Dict, Iterable, List, Literal, Mapping, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from config.locations import CA_CITIES, CITY_ALIASES, ZIP_GEO
from config.settings import CLASSIFIEDS_CONFIG

from src.utils.datetime_utils import sort_timestamp
from src.utils.geo import haversine_miles
from src.utils.text_cleaner import normalize_search_text

from .rentas import parse_usd

SortOrder = Literal["newest", "priceAsc", "priceDesc"]

_CITY_BY_KEY: Dict[str, str] = {normalize_search_text(name): name for name in CA_CITIES}


class SearchQuery(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    q: str = ""
    category: str = "todos"
    seller: Literal["all", "personal", "negocio"] = "all"
    with_photo: bool = Field(default=False, alias="withPhoto")
    city: str = ""
    zip: str = ""
    radius_mi: float = Field(
        default=CLASSIFIEDS_CONFIG["default_radius_mi"], alias="radiusMi", gt=0
    )
    sort: SortOrder = "newest"
    lang: Literal["es", "en"] = "es"


class Anchor(BaseModel):
    label: str
    lat: float
    lng: float
    zip_mode: bool = Field(alias="zipMode")

    model_config = ConfigDict(populate_by_name=True)


def canonicalize_city(raw: str) -> str:
    """Canonical spelling for a known alias, otherwise the input unchanged."""
    return CITY_ALIASES.get(normalize_search_text(raw), raw)


def city_coordinates(name: Optional[str]) -> Optional[Tuple[float, float]]:
    known = _CITY_BY_KEY.get(normalize_search_text(name or ""))
    if known is None:
        return None
    record = CA_CITIES[known]
    return float(record["lat"]), float(record["lng"])


def resolve_anchor(city: str = "", zip_code: str = "") -> Anchor:
    cleaned_zip = (zip_code or "").strip()
    if len(cleaned_zip) == 5 and cleaned_zip in ZIP_GEO:
        lat, lng = ZIP_GEO[cleaned_zip]
        return Anchor(label=f"ZIP {cleaned_zip}", lat=lat, lng=lng, zip_mode=True)

    canonical = canonicalize_city(city or "")
    coords = city_coordinates(canonical)
    if coords is not None:
        return Anchor(label=canonical, lat=coords[0], lng=coords[1], zip_mode=False)

    default_city = CLASSIFIEDS_CONFIG["default_city"]
    coords = city_coordinates(default_city)
    if coords is None:
        default_city = next(iter(CA_CITIES))
        coords = city_coordinates(default_city)
    return Anchor(label=default_city, lat=coords[0], lng=coords[1], zip_mode=False)


def nearby_cities(
    anchor: Anchor, radius_mi: float, *, city: str = "", limit: Optional[int] = None
) -> List[str]:
    """Cities within ``radius_mi`` of the anchor, nearest first."""
    limit = limit or CLASSIFIEDS_CONFIG["max_nearby_chips"]
    within = sorted(
        (
            (haversine_miles(anchor.lat, anchor.lng, float(rec["lat"]), float(rec["lng"])), name)
            for name, rec in CA_CITIES.items()
        ),
        key=lambda pair: pair[0],
    )
    names = [name for distance, name in within if distance <= radius_mi][:limit]

    if not anchor.zip_mode:
        key = normalize_search_text(canonicalize_city(city))
        for idx, name in enumerate(names):
            if idx > 0 and normalize_search_text(name) == key:
                names.insert(0, names.pop(idx))
                break
    return names


def suggest_cities(text: str, limit: int = 10) -> List[str]:
    """Known cities whose name or alias contains ``text``."""
    needle = normalize_search_text(text)
    if not needle:
        return []
    hits: List[str] = []
    for key, name in _CITY_BY_KEY.items():
        if needle in key and name not in hits:
            hits.append(name)
    for alias, name in CITY_ALIASES.items():
        if needle in alias and name not in hits:
            hits.append(name)
    return hits[:limit]


def suggest_zips(prefix: str, limit: int = 10) -> List[str]:
    prefix = (prefix or "").strip()
    if not prefix:
        return []
    return [code for code in ZIP_GEO if code.startswith(prefix)][:limit]


def _localized(listing: Mapping[str, Any], field: str, lang: str) -> str:
    value = listing.get(field)
    if isinstance(value, Mapping):
        return str(value.get(lang) or "")
    return str(value or "")


def listing_price(listing: Mapping[str, Any]) -> Optional[float]:
    """Numeric price from the English label (Spanish as fallback); ``None`` if unparsable."""
    label = listing.get("priceLabel")
    if not isinstance(label, Mapping):
        return None
    return parse_usd(label.get("en") or label.get("es"))


def _has_photo(listing: Mapping[str, Any]) -> bool:
    return bool(listing.get("hasImage") or listing.get("hasPhoto"))


def _sort(listings: List[Mapping[str, Any]], order: SortOrder) -> List[Mapping[str, Any]]:
    if order == "newest":
        return sorted(listings, key=lambda x: sort_timestamp(x.get("createdAt")), reverse=True)

    def price_key(listing):
        price = listing_price(listing)
        if price is None or math.isnan(price):
            return (1, 0.0)
        return (0, price if order == "priceAsc" else -price)

    return sorted(listings, key=price_key)


def search_listings(
    listings: Iterable[Mapping[str, Any]], query: Optional[SearchQuery] = None
) -> Dict[str, Any]:
    """
    Filtra y ordena ``listings``.

    Devuelve ``{anchor, nearbyCities, count, listings}``.
    """
    query = query or SearchQuery()
    anchor = resolve_anchor(query.city, query.zip)
    results = list(listings)

    if query.category != "todos":
        results = [x for x in results if x.get("category") == query.category]
    if query.seller != "all":
        results = [x for x in results if x.get("sellerType") == query.seller]
    if query.with_photo:
        results = [x for x in results if _has_photo(x)]

    needle = normalize_search_text(query.q)
    if needle:
        results = [
            x
            for x in results
            if needle
            in normalize_search_text(
                " ".join(
                    (
                        _localized(x, "title", query.lang),
                        _localized(x, "description", query.lang),
                        str(x.get("city") or ""),
                        str(x.get("category") or ""),
                    )
                )
            )
        ]

    def within_radius(listing: Mapping[str, Any]) -> bool:
        coords = city_coordinates(listing.get("city"))
        if coords is None:
            return True
        return haversine_miles(anchor.lat, anchor.lng, *coords) <= query.radius_mi

    results = _sort([x for x in results if within_radius(x)], query.sort)
    return {
        "anchor": anchor.model_dump(by_alias=True),
        "nearbyCities": nearby_cities(anchor, query.radius_mi, city=query.city),
        "count": len(results),
        "listings": results,
    }
