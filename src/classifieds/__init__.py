"""
Clasificados: planes, verificación, video Pro, sugerencias de calidad,
filtros de rentas, búsqueda y persistencia.
"""

from .categories import CATEGORY_CONFIG, category_choices
from .insights import (
    detect_language_completeness,
    find_potential_duplicates,
    listing_insights,
    quality_gate_hints,
)
from .plans import infer_listing_plan, is_pro_listing, normalize_plan
from .pro_video import extract_pro_video_info
from .rentas import DEFAULT_RENTAS_FILTERS, RentasFilters, apply_rentas_filters
from .search import SearchQuery, resolve_anchor, search_listings
from .store import ListingCreate, ListingStore, SavedListingsStore
from .verification import is_verified_seller

__all__ = [
    "CATEGORY_CONFIG",
    "category_choices",
    "detect_language_completeness",
    "find_potential_duplicates",
    "listing_insights",
    "quality_gate_hints",
    "infer_listing_plan",
    "is_pro_listing",
    "normalize_plan",
    "extract_pro_video_info",
    "DEFAULT_RENTAS_FILTERS",
    "RentasFilters",
    "apply_rentas_filters",
    "SearchQuery",
    "resolve_anchor",
    "search_listings",
    "ListingCreate",
    "ListingStore",
    "SavedListingsStore",
    "is_verified_seller",
]
