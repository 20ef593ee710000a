# src/restaurants/search.py
# Directorio de restaurantes
# ==========================

"""
Filtros y orden del directorio de restaurantes.

Los restaurantes llegan como diccionarios con las claves del directorio
(``id``, ``name``, ``city``, ``cuisine``, ``price``, ``tags``,
``supporter``, ``verified``, ``couponsUrl``, ``address``). Abierto ahora,
familiar, dietas y promociones se deducen de las etiquetas. El radio se
guarda como preferencia pero no filtra: el directorio no tiene
coordenadas.
"""

import re
from typing import Any, Dict, Iterable, List, Literal, Mapping, Optional, Pattern, Sequence

from pydantic import BaseModel, ConfigDict, Field

Restaurant = Mapping[str, Any]

SUPPORTER_RANKS = {"Corona de Oro": 2, "Corona": 1}

OPEN_NOW_PATTERNS = [
    re.compile(p, re.I) for p in (r"open\s*now", r"abierto\s*ahora", r"abierto\b", r"open\b")
]
FAMILY_PATTERNS = [re.compile(p, re.I) for p in (r"family", r"familia", r"kids?", r"niñ[oa]s?")]
DIETARY_PATTERNS = [
    re.compile(p, re.I)
    for p in (r"vegan", r"vegano", r"vegetar", r"halal", r"gluten\s*-?free", r"sin\s*gluten", r"kosher")
]
SPECIALS_PATTERNS = [
    re.compile(p, re.I) for p in (r"special", r"oferta", r"promo", r"descuento", r"coupon", r"cupon")
]


class RestaurantSearchQuery(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    q: str = ""
    city: str = "all"
    cuisine: str = "all"
    price: Literal["all", "$", "$$", "$$$", "$$$$"] = "all"
    radius_mi: Literal[10, 25, 40, 50] = Field(default=25, alias="radiusMi")
    open_now: bool = Field(default=False, alias="openNow")
    family_friendly: bool = Field(default=False, alias="familyFriendly")
    dietary: bool = False
    specials_only: bool = Field(default=False, alias="specialsOnly")
    favorites_only: bool = Field(default=False, alias="favoritesOnly")
    sort: Literal["recommended", "az", "supporters"] = "recommended"


def _normalize(value: Any) -> str:
    return str(value or "").strip().lower()


def supporter_rank(supporter: Optional[str]) -> int:
    return SUPPORTER_RANKS.get(supporter or "", 0)


def _tags_match(restaurant: Restaurant, patterns: Sequence[Pattern[str]]) -> bool:
    tags = restaurant.get("tags")
    text = " ".join(tags if isinstance(tags, list) else []).lower()
    return any(pattern.search(text) for pattern in patterns)


def is_open_now(restaurant: Restaurant) -> bool:
    return _tags_match(restaurant, OPEN_NOW_PATTERNS)


def is_family_friendly(restaurant: Restaurant) -> bool:
    return _tags_match(restaurant, FAMILY_PATTERNS)


def is_dietary_friendly(restaurant: Restaurant) -> bool:
    return _tags_match(restaurant, DIETARY_PATTERNS)


def has_specials(restaurant: Restaurant) -> bool:
    """Solo señales reales: enlace de cupones o etiquetas explícitas."""
    if restaurant.get("couponsUrl"):
        return True
    return _tags_match(restaurant, SPECIALS_PATTERNS)


def _haystack(restaurant: Restaurant) -> str:
    tags = restaurant.get("tags") or []
    parts = [restaurant.get(key) for key in ("name", "cuisine", "city", "address")]
    return " ".join([*(_normalize(part) for part in parts), _normalize(" ".join(tags))])


def _sort_key(sort: str):
    def name(restaurant: Restaurant) -> str:
        return _normalize(restaurant.get("name"))

    if sort == "az":
        return name
    if sort == "supporters":
        return lambda r: (-supporter_rank(r.get("supporter")), name(r))
    return lambda r: (-supporter_rank(r.get("supporter")), not r.get("verified"), name(r))


def search_restaurants(
    restaurants: Iterable[Restaurant],
    query: RestaurantSearchQuery,
    favorite_ids: Optional[Iterable[str]] = None,
) -> List[Dict[str, Any]]:
    """
    Aplica los filtros del directorio y devuelve la lista ordenada.

    ``favorite_ids`` solo se usa con ``favorites_only``; el modo favoritos
    se aplica después del resto de filtros.
    """
    results = [dict(restaurant) for restaurant in restaurants or []]

    if query.city != "all":
        city = _normalize(query.city)
        results = [r for r in results if _normalize(r.get("city")) == city]
    if query.cuisine != "all":
        cuisine = _normalize(query.cuisine)
        results = [r for r in results if _normalize(r.get("cuisine")) == cuisine]
    if query.price != "all":
        results = [r for r in results if (r.get("price") or "") == query.price]

    if query.open_now:
        results = [r for r in results if is_open_now(r)]
    if query.family_friendly:
        results = [r for r in results if is_family_friendly(r)]
    if query.dietary:
        results = [r for r in results if is_dietary_friendly(r)]
    if query.specials_only:
        results = [r for r in results if has_specials(r)]

    needle = _normalize(query.q)
    if needle:
        results = [r for r in results if needle in _haystack(r)]

    if query.favorites_only:
        favorites = set(favorite_ids or ())
        results = [r for r in results if r.get("id") in favorites]

    results.sort(key=_sort_key(query.sort))
    return results
