"""
Restaurant preferences, keyed by an opaque owner id.

Route map::

    POST /api/restaurants/{owner_id}/favorites/{restaurant_id}/toggle
    GET  /api/restaurants/{owner_id}/favorites
    GET  /api/restaurants/{owner_id}/recent-cities
    POST /api/restaurants/{owner_id}/recent-cities
    GET  /api/restaurants/{owner_id}/alerts
    PUT  /api/restaurants/{owner_id}/alerts
    POST /api/restaurants/{owner_id}/search
    GET  /api/restaurants/{owner_id}/geo
    PUT  /api/restaurants/{owner_id}/geo
    GET  /api/restaurants/reviews/{restaurant_id}
    POST /api/restaurants/reviews/{restaurant_id}
    GET  /api/restaurants/reviews/{restaurant_id}/stats
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from src.restaurants import (
    AlertPrefsUpdate,
    RestaurantSearchQuery,
    ReviewCreate,
    search_restaurants,
)

from .dependencies import RestaurantsDep

router = APIRouter(prefix="/api/restaurants")


class RecentCityRequest(BaseModel):
    city: Optional[str] = None


class GeoRequest(BaseModel):
    lat: float = Field(ge=-90, le=90)
    lng: float = Field(ge=-180, le=180)


class RestaurantSearchRequest(BaseModel):
    restaurants: List[Dict[str, Any]] = Field(default_factory=list)
    query: RestaurantSearchQuery = Field(default_factory=RestaurantSearchQuery)


@router.get("/reviews/{restaurant_id}")
def list_reviews(restaurant_id: str, store: RestaurantsDep):
    return store.reviews(restaurant_id)


@router.post("/reviews/{restaurant_id}", status_code=201)
def add_review(restaurant_id: str, review: ReviewCreate, store: RestaurantsDep):
    try:
        return store.add_review(restaurant_id, review.rating, review.recommend, review.note)
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc


@router.get("/reviews/{restaurant_id}/stats")
def review_stats(restaurant_id: str, store: RestaurantsDep):
    return store.review_stats(restaurant_id)


@router.post("/{owner_id}/favorites/{restaurant_id}/toggle")
def toggle_favorite(owner_id: str, restaurant_id: str, store: RestaurantsDep):
    favorite = store.toggle_favorite(owner_id, restaurant_id)
    return {"restaurantId": restaurant_id, "favorite": favorite}


@router.get("/{owner_id}/favorites")
def list_favorites(owner_id: str, store: RestaurantsDep):
    return {"ownerId": owner_id, "restaurantIds": store.favorite_ids(owner_id)}


@router.get("/{owner_id}/recent-cities")
def recent_cities(owner_id: str, store: RestaurantsDep):
    return {"cities": store.recent_cities(owner_id)}


@router.post("/{owner_id}/recent-cities")
def push_recent_city(owner_id: str, payload: RecentCityRequest, store: RestaurantsDep):
    return {"cities": store.push_recent_city(owner_id, payload.city)}


@router.get("/{owner_id}/alerts")
def get_alerts(owner_id: str, store: RestaurantsDep):
    return store.get_alert_prefs(owner_id)


@router.put("/{owner_id}/alerts")
def save_alerts(owner_id: str, prefs: AlertPrefsUpdate, store: RestaurantsDep):
    return store.save_alert_prefs(owner_id, prefs)


@router.get("/{owner_id}/geo")
def get_geo(owner_id: str, store: RestaurantsDep):
    state = store.get_geo_state(owner_id)
    if state is None:
        raise HTTPException(status_code=404, detail="No saved location")
    return state


@router.put("/{owner_id}/geo")
def save_geo(owner_id: str, payload: GeoRequest, store: RestaurantsDep):
    return store.save_geo_state(owner_id, payload.lat, payload.lng)


@router.post("/{owner_id}/search")
def search(owner_id: str, payload: RestaurantSearchRequest, store: RestaurantsDep):
    favorites = store.favorite_ids(owner_id) if payload.query.favorites_only else None
    results = search_restaurants(payload.restaurants, payload.query, favorites)
    return {"count": len(results), "restaurants": results}
