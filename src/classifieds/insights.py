"""
Listing quality insights shown to sellers before publishing.

Nothing here invents facts about a listing: hints only point at fields that
are missing and at category conventions.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Literal, Mapping

from src.utils.text_cleaner import normalize_key

Lang = Literal["es", "en"]

_CATEGORY_HINTS: Dict[str, Dict[str, str]] = {
    "autos": {
        "es": "Autos: incluye año, marca, modelo y millaje en la descripción.",
        "en": "Autos: include year, make, model, and mileage in the description.",
    },
    "rentas": {
        "es": "Rentas: incluye recámaras, depósito y fecha de disponibilidad.",
        "en": "Rentals: include bedrooms, deposit, and availability date.",
    },
    "empleos": {
        "es": "Empleos: incluye tipo de trabajo, pago y requisitos clave.",
        "en": "Jobs: include job type, pay, and key requirements.",
    },
}

_MISSING_HINTS: Dict[str, Dict[str, str]] = {
    "title": {"es": "Falta el título.", "en": "Missing title."},
    "description": {"es": "Falta la descripción.", "en": "Missing description."},
    "price": {"es": "Falta el precio.", "en": "Missing price."},
    "city": {"es": "Falta la ciudad.", "en": "Missing city."},
    "photo": {
        "es": "Agrega una foto para generar más confianza.",
        "en": "Add a photo to build trust.",
    },
    "contact": {
        "es": "Agrega al menos un método de contacto (teléfono, texto o email).",
        "en": "Add at least one contact method (phone, text, or email).",
    },
}

_CONTACT_FIELDS = ("phone", "text", "email", "mapsUrl", "website")


def _localized(listing: Mapping[str, Any], field: str, lang: str) -> str:
    value = listing.get(field)
    if isinstance(value, Mapping):
        return str(value.get(lang) or "").strip()
    return ""


def _blurb(listing: Mapping[str, Any], lang: str) -> str:
    return _localized(listing, "blurb", lang) or _localized(listing, "description", lang)


def detect_language_completeness(listing: Mapping[str, Any]) -> Dict[str, Any]:
    """``{ok, missing}`` where ``missing`` lists languages lacking a title or blurb."""
    missing: List[str] = [
        lang
        for lang in ("es", "en")
        if not _localized(listing, "title", lang) or not _blurb(listing, lang)
    ]
    return {"ok": not missing, "missing": missing}


def _duplicate_key(listing: Mapping[str, Any]) -> str:
    title = _localized(listing, "title", "es") or _localized(listing, "title", "en")
    return normalize_key(f"{title}|{listing.get('city') or ''}")


def find_potential_duplicates(
    listing: Mapping[str, Any], others: Iterable[Mapping[str, Any]]
) -> List[str]:
    key = _duplicate_key(listing)
    if not key:
        return []
    return [
        other["id"]
        for other in others
        if other
        and other.get("id") != listing.get("id")
        and other.get("category") == listing.get("category")
        and _duplicate_key(other) == key
    ]


def quality_gate_hints(listing: Mapping[str, Any], lang: Lang) -> List[str]:
    lang = "es" if lang == "es" else "en"
    checks = (
        ("title", _localized(listing, "title", lang)),
        ("description", _blurb(listing, lang)),
        ("price", _localized(listing, "priceLabel", lang)),
        ("city", str(listing.get("city") or "").strip()),
        ("photo", listing.get("hasImage") or listing.get("hasPhoto")),
        ("contact", any(listing.get(field) for field in _CONTACT_FIELDS)),
    )
    hints = [_MISSING_HINTS[name][lang] for name, present in checks if not present]

    category_hint = _CATEGORY_HINTS.get(listing.get("category") or "")
    if category_hint:
        hints.append(category_hint[lang])
    return hints


def listing_insights(
    listing: Mapping[str, Any], others: Iterable[Mapping[str, Any]], lang: Lang
) -> Dict[str, Any]:
    """Everything the insights panel shows for one listing."""
    return {
        "id": listing.get("id"),
        "languages": detect_language_completeness(listing),
        "duplicates": find_potential_duplicates(listing, others),
        "hints": quality_gate_hints(listing, lang),
    }
