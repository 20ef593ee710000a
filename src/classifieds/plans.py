"""Listing plan detection: only Free and LEONIX Pro exist publicly."""

from __future__ import annotations

from typing import Any, Literal, Mapping, Optional

ListingPlan = Literal["free", "pro"]

# Legacy tiers map to Pro.
_PRO_MARKERS = ("pro", "business", "lite", "premium")
_PRO_FLAGS = ("isPro", "pro", "is_pro")
_PLAN_KEYS = (
    "plan",
    "tier",
    "membership",
    "membershipTier",
    "membership_tier",
    "role",
    "userPlan",
    "user_plan",
    "sellerPlan",
    "seller_plan",
    "sellerType",
    "seller_type",
)


def normalize_plan(raw: Any) -> ListingPlan:
    value = raw.lower().strip() if isinstance(raw, str) else ""
    if value and any(marker in value for marker in _PRO_MARKERS):
        return "pro"
    return "free"


def infer_listing_plan(listing: Optional[Mapping[str, Any]]) -> ListingPlan:
    if not listing:
        return "free"
    if any(listing.get(flag) is True for flag in _PRO_FLAGS):
        return "pro"
    if any(normalize_plan(listing.get(key)) == "pro" for key in _PLAN_KEYS):
        return "pro"
    return "free"


def is_pro_listing(listing: Optional[Mapping[str, Any]]) -> bool:
    return infer_listing_plan(listing) == "pro"
