"""
Classifieds endpoints.

Route map::

    GET  /api/classifieds/categories
    GET  /api/classifieds/listings                      search
    POST /api/classifieds/listings                      create
    GET  /api/classifieds/listings/{listing_id}         one listing, with plan/verification
    GET  /api/classifieds/listings/{listing_id}/insights
    POST /api/classifieds/rentas/filter
    GET  /api/classifieds/locations/suggest
    POST /api/classifieds/saved/{owner_id}/{listing_id}/toggle
    GET  /api/classifieds/saved/{owner_id}
    GET  /api/storage-check
"""

from __future__ import annotations

from typing import Annotated, Any, Dict, List, Literal, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, Field

from src.classifieds import (
    CATEGORY_CONFIG,
    ListingCreate,
    RentasFilters,
    SearchQuery,
    apply_rentas_filters,
    extract_pro_video_info,
    infer_listing_plan,
    is_verified_seller,
    listing_insights,
    search_listings,
)
from src.classifieds.search import suggest_cities, suggest_zips

from .dependencies import ListingsDep, SavedDep

router = APIRouter(prefix="/api")


class RentasFilterRequest(BaseModel):
    listings: List[Dict[str, Any]]
    filters: RentasFilters = Field(default_factory=RentasFilters)


def _search_params(
    q: str = "",
    category: str = "todos",
    seller: Literal["all", "personal", "negocio"] = "all",
    with_photo: bool = Query(default=False, alias="withPhoto"),
    city: str = "",
    zip_code: str = Query(default="", alias="zip"),
    radius_mi: Optional[float] = Query(default=None, alias="radiusMi", gt=0),
    sort: Literal["newest", "priceAsc", "priceDesc"] = "newest",
    lang: Literal["es", "en"] = "es",
) -> SearchQuery:
    params: Dict[str, Any] = {
        "q": q,
        "category": category,
        "seller": seller,
        "with_photo": with_photo,
        "city": city,
        "zip": zip_code,
        "sort": sort,
        "lang": lang,
    }
    if radius_mi is not None:
        params["radius_mi"] = radius_mi
    return SearchQuery(**params)


SearchDep = Annotated[SearchQuery, Depends(_search_params)]


def _decorate(listing: Dict[str, Any]) -> Dict[str, Any]:
    description = listing.get("description")
    text = ""
    if isinstance(description, dict):
        text = description.get("es") or description.get("en") or ""
    return {
        **listing,
        "plan": infer_listing_plan(listing),
        "verifiedSeller": is_verified_seller(listing),
        "proVideo": extract_pro_video_info(text),
    }


@router.get("/classifieds/categories")
def list_categories():
    return CATEGORY_CONFIG


@router.get("/classifieds/listings")
def search(query: SearchDep, listings: ListingsDep):
    return search_listings(listings.list_all(), query)


@router.post("/classifieds/listings", status_code=201)
def create_listing(payload: ListingCreate, listings: ListingsDep):
    return _decorate(listings.create(payload))


@router.get("/classifieds/listings/{listing_id}")
def get_listing(listing_id: str, listings: ListingsDep):
    listing = listings.get(listing_id)
    if listing is None:
        raise HTTPException(status_code=404, detail="Listing not found")
    return _decorate(listing)


@router.get("/classifieds/listings/{listing_id}/insights")
def get_listing_insights(
    listing_id: str,
    listings: ListingsDep,
    lang: Literal["es", "en"] = "es",
):
    listing = listings.get(listing_id)
    if listing is None:
        raise HTTPException(status_code=404, detail="Listing not found")
    others = listings.list_all(category=listing["category"])
    return listing_insights(listing, others, lang)


@router.post("/classifieds/rentas/filter")
def filter_rentas(request: RentasFilterRequest):
    results = apply_rentas_filters(request.listings, request.filters)
    return {"count": len(results), "listings": results}


@router.get("/classifieds/locations/suggest")
def suggest_locations(city: str = "", zip_code: str = Query(default="", alias="zip")):
    return {"cities": suggest_cities(city), "zips": suggest_zips(zip_code)}


@router.post("/classifieds/saved/{owner_id}/{listing_id}/toggle")
def toggle_saved(owner_id: str, listing_id: str, saved: SavedDep):
    return {"listingId": listing_id, "saved": saved.toggle(owner_id, listing_id)}


@router.get("/classifieds/saved/{owner_id}")
def list_saved(owner_id: str, saved: SavedDep):
    return {"ownerId": owner_id, "listingIds": saved.list(owner_id)}


@router.get("/storage-check")
def storage_check(listings: ListingsDep):
    return listings.storage_check()
