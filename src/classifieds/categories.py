"""Classifieds categories with bilingual labels and planned filters."""

from typing import Dict, List

CATEGORY_CONFIG: Dict[str, Dict[str, object]] = {
    "servicios": {
        "label": {"es": "Servicios", "en": "Services"},
        "futureFilters": ["location", "type"],
    },
    "empleos": {
        "label": {"es": "Empleos", "en": "Jobs"},
        "futureFilters": ["jobType", "location", "pay"],
    },
    "rentas": {
        "label": {"es": "Rentas", "en": "Rentals"},
        "futureFilters": ["bedrooms", "price", "location"],
    },
    "en-venta": {
        "label": {"es": "En Venta", "en": "For Sale"},
        "futureFilters": ["condition", "price"],
    },
    "autos": {
        "label": {"es": "Autos", "en": "Cars"},
        "futureFilters": ["make", "model", "year"],
    },
    "clases": {
        "label": {"es": "Clases", "en": "Classes"},
        "futureFilters": ["level", "schedule"],
    },
    "comunidad": {
        "label": {"es": "Comunidad", "en": "Community"},
        "futureFilters": ["location"],
    },
    "travel": {
        "label": {"es": "Viajes", "en": "Travel"},
        "futureFilters": ["mode", "dates", "location"],
    },
}

def is_valid_category(key: str) -> bool:
    return key in CATEGORY_CONFIG


def category_choices(lang: str = "es") -> List[Dict[str, str]]:
    lang = "en" if lang == "en" else "es"
    return [
        {"key": key, "label": config["label"][lang]}  # type: ignore[index]
        for key, config in CATEGORY_CONFIG.items()
    ]
