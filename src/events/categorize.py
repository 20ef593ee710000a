"""Keyword and classification based event categories."""

from __future__ import annotations

from typing import Any, Mapping, Optional, Sequence, Tuple

from .models import EventCategory

# First matching group wins.
CATEGORY_KEYWORDS: Sequence[Tuple[EventCategory, Tuple[str, ...]]] = (
    ("music", ("music", "musica", "concert", "concierto", "live band", "grupo", "banda")),
    ("food", ("food", "comida", "taco", "dinner", "wine", "beer")),
    ("family", ("family", "familia", "kids", "niño")),
    ("holiday", ("navidad", "christmas", "holiday", "xmas", "posada")),
    ("nightlife", ("nightlife", "club", "fiesta", "baile", "party", "salsa", "reggaeton")),
    ("sports", ("sport", "game", "vs ")),
    ("couples", ("couples", "date night")),
    ("singles", ("singles", "speed dating")),
)


def detect_category(text: Optional[str]) -> EventCategory:
    lowered = (text or "").lower()
    for category, keywords in CATEGORY_KEYWORDS:
        if any(keyword in lowered for keyword in keywords):
            return category
    return "community"


def classify_ticketmaster(classification: Optional[Mapping[str, Any]]) -> str:
    """Display category for the live feed from a Ticketmaster classification."""
    if not classification:
        return "Community"
    segment = ((classification.get("segment") or {}).get("name") or "").lower()
    genre = ((classification.get("genre") or {}).get("name") or "").lower()

    if "sports" in segment:
        return "Sports"
    if "music" in segment:
        return "Music"
    if "arts" in segment:
        return "Family"
    if "film" in segment:
        return "Nightlife"
    if "family" in genre:
        return "Family"
    if "festival" in genre:
        return "Community"
    return "Community"
