from __future__ import annotations

from typing import Any, Mapping, Optional

_VERIFIED_BADGES = frozenset({"verified", "verified_seller", "seller_verified"})


def is_verified_seller(listing: Optional[Mapping[str, Any]]) -> bool:
    """
    True only when the listing already carries an explicit verified marker.

    This never grants verification; absence of data means unverified.
    """
    if not listing:
        return False

    if any(listing.get(flag) is True for flag in ("verifiedSeller", "sellerVerified", "verified")):
        return True

    verification = listing.get("verification")
    if isinstance(verification, Mapping):
        status = str(verification.get("status") or "").lower()
        if status in ("verified", "active") or verification.get("verified") is True:
            return True

    seller = listing.get("seller")
    if isinstance(seller, Mapping):
        if seller.get("verified") is True:
            return True
        if str(seller.get("verificationStatus") or "").lower() == "verified":
            return True

    badges = []
    for key in ("badges", "trustBadges"):
        value = listing.get(key)
        if isinstance(value, list):
            badges.extend(str(badge).lower() for badge in value)
    return any(badge in _VERIFIED_BADGES for badge in badges)
