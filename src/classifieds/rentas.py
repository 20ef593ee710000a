"""
Rental filters for the rentas category.

Every criterion ignores listings that do not state the value in question:
an unknown field never excludes a listing.
"""

from __future__ import annotations

import math
import re
from typing import Any, Iterable, List, Literal, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field

_NON_NUMERIC = re.compile(r"[^\d.]")
_FREE_LABEL = re.compile(r"gratis|free", re.I)


class RentasFilters(BaseModel):
    """Filter form state; empty strings mean "no preference"."""

    model_config = ConfigDict(populate_by_name=True)

    min_rent: str = Field(default="", alias="minRent")
    max_rent: str = Field(default="", alias="maxRent")
    beds: str = ""  # "", "studio", "room", "1".."3", "4+"
    baths: str = ""  # "", "1", "1.5", "2", "3", "4+"
    property_type: str = Field(default="", alias="propertyType")
    pets: Literal["any", "dogs", "cats", "none"] = "any"
    parking: str = ""
    furnished: Literal["any", "yes", "no"] = "any"
    utilities: Literal["any", "included"] = "any"
    availability: Literal["any", "now", "30"] = "any"
    sqft_min: str = Field(default="", alias="sqftMin")
    sqft_max: str = Field(default="", alias="sqftMax")
    lease_term: str = Field(default="", alias="leaseTerm")


DEFAULT_RENTAS_FILTERS = RentasFilters()


def parse_usd(text: Optional[str]) -> Optional[float]:
    cleaned = _NON_NUMERIC.sub("", text or "")
    if not cleaned:
        return None
    try:
        value = float(cleaned)
    except ValueError:
        return None
    return value if math.isfinite(value) else None


def _number(value: Any) -> Optional[float]:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return float(value) if math.isfinite(value) else None


def rent_value(listing: Mapping[str, Any]) -> Optional[float]:
    monthly = _number(listing.get("rentMonthly"))
    if monthly is not None:
        return monthly
    label = listing.get("priceLabel") or {}
    text = (label.get("es") or label.get("en") or "") if isinstance(label, Mapping) else ""
    if _FREE_LABEL.search(text):
        return 0.0
    return parse_usd(text)


def _beds_match(listing: Mapping[str, Any], beds: str) -> bool:
    actual = _number(listing.get("beds"))
    if not beds or actual is None:
        return True
    if beds == "studio":
        return actual == 0
    if beds == "room":
        return actual == 1
    if beds == "4+":
        return actual >= 4
    wanted = parse_usd(beds)
    return True if wanted is None else actual == wanted


def _baths_match(listing: Mapping[str, Any], baths: str) -> bool:
    actual = _number(listing.get("baths"))
    if not baths or actual is None:
        return True
    if baths == "4+":
        return actual >= 4
    wanted = parse_usd(baths)
    return True if wanted is None else actual >= wanted


def _same_or_unknown(actual: Any, expected: str) -> bool:
    return not expected or not actual or actual == expected


def _pets_match(policy: Optional[str], wanted: str) -> bool:
    if wanted == "any" or not policy:
        return True
    if wanted == "none":
        return policy == "none"
    return policy in (wanted, "any")


def _matches(listing: Mapping[str, Any], f: RentasFilters, bounds) -> bool:
    min_rent, max_rent, sqft_min, sqft_max = bounds

    rent = rent_value(listing)
    if rent is not None:
        if min_rent is not None and rent < min_rent:
            return False
        if max_rent is not None and rent > max_rent:
            return False

    if not _beds_match(listing, f.beds) or not _baths_match(listing, f.baths):
        return False
    if not _same_or_unknown(listing.get("propertyType"), f.property_type):
        return False
    if not _pets_match(listing.get("petsPolicy"), f.pets):
        return False
    if not _same_or_unknown(listing.get("parking"), f.parking):
        return False

    furnished = listing.get("furnished")
    if f.furnished != "any" and isinstance(furnished, bool):
        if furnished != (f.furnished == "yes"):
            return False

    utilities = listing.get("utilitiesIncluded")
    if f.utilities == "included" and isinstance(utilities, bool) and not utilities:
        return False

    if f.availability == "now":
        available_now = listing.get("availableNow")
        if isinstance(available_now, bool) and not available_now:
            return False
    elif f.availability == "30":
        days = _number(listing.get("availableInDays"))
        if days is not None and days > 30:
            return False

    sqft = _number(listing.get("sqft"))
    if sqft is not None:
        if sqft_min is not None and sqft < sqft_min:
            return False
        if sqft_max is not None and sqft > sqft_max:
            return False

    return _same_or_unknown(listing.get("leaseTerm"), f.lease_term)


def apply_rentas_filters(
    listings: Iterable[Mapping[str, Any]], filters: Optional[RentasFilters] = None
) -> List[Mapping[str, Any]]:
    f = filters or DEFAULT_RENTAS_FILTERS
    bounds = (
        parse_usd(f.min_rent) if f.min_rent else None,
        parse_usd(f.max_rent) if f.max_rent else None,
        parse_usd(f.sqft_min) if f.sqft_min else None,
        parse_usd(f.sqft_max) if f.sqft_max else None,
    )
    return [listing for listing in listings if _matches(listing, f, bounds)]
