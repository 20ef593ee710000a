# src/restaurants/store.py
# Preferencias de restaurantes por visitante
# ==========================================

"""
Favoritos, ciudades recientes, reseñas, alertas y ubicación.

Todo lo que el sitio guardaba en el navegador se indexa aquí por
``owner_id``; las reseñas son por restaurante.
"""

import math
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Literal, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field

from config.settings import RESTAURANTS_CONFIG

from src.storage import (
    DatabaseManager,
    OwnerGeoState,
    RestaurantAlertPrefs,
    RestaurantFavorite,
    RestaurantRecentCity,
    RestaurantReview,
)
from src.utils.datetime_utils import isoformat_utc, utc_now
from src.utils.logger import get_logger

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def round_half_up(value: float, digits: int = 0) -> float:
    factor = 10**digits
    return math.floor(value * factor + 0.5) / factor


class AlertPrefsUpdate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    cuisine: str = ""
    radius_mi: Literal[10, 25, 40, 50] = Field(default=25, alias="radiusMi")
    frequency: Literal["weekly", "biweekly", "monthly"] = "weekly"
    enabled: bool = False


class ReviewCreate(BaseModel):
    rating: float
    recommend: Optional[bool] = None
    note: str = ""


class RestaurantStore:
    def __init__(
        self,
        database_manager: DatabaseManager,
        *,
        config: Optional[Mapping[str, Any]] = None,
        clock: Callable[[], datetime] = utc_now,
        logger_factory=None,
    ) -> None:
        self.db = database_manager
        self.config: Dict[str, Any] = {**RESTAURANTS_CONFIG, **(config or {})}
        self.clock = clock
        self.logger = (logger_factory or get_logger()).create_module_logger("restaurants.store")

    # Favoritos
    # =========

    def toggle_favorite(self, owner_id: str, restaurant_id: str) -> bool:
        """
        Cambia el favorito y devuelve el estado nuevo.

        Con la lista llena (``favorites_cap``) no se agregan más.
        """
        with self.db.get_session() as session:
            query = session.query(RestaurantFavorite).filter_by(owner_id=owner_id)
            existing = query.filter_by(restaurant_id=restaurant_id).first()
            if existing is not None:
                session.delete(existing)
                return False
            if query.count() >= self.config["favorites_cap"]:
                self.logger.info(
                    {"event": "restaurants.favorites.cap_reached", "owner_id": owner_id}
                )
                return False
            session.add(
                RestaurantFavorite(
                    owner_id=owner_id, restaurant_id=restaurant_id, created_at=self.clock()
                )
            )
            return True

    def favorite_ids(self, owner_id: str) -> List[str]:
        with self.db.get_session() as session:
            rows = (
                session.query(RestaurantFavorite.restaurant_id)
                .filter_by(owner_id=owner_id)
                .order_by(RestaurantFavorite.id.asc())
                .all()
            )
            return [restaurant_id for (restaurant_id,) in rows]

    def is_favorite(self, owner_id: str, restaurant_id: str) -> bool:
        return restaurant_id in self.favorite_ids(owner_id)

    # Ciudades recientes
    # ==================

    def recent_cities(self, owner_id: str) -> List[str]:
        with self.db.get_session() as session:
            rows = (
                session.query(RestaurantRecentCity.city)
                .filter_by(owner_id=owner_id)
                .order_by(RestaurantRecentCity.position.asc())
                .limit(self.config["recent_cities_cap"])
                .all()
            )
            return [city for (city,) in rows]

    def push_recent_city(self, owner_id: str, city: Optional[str]) -> List[str]:
        value = (city or "").strip()
        if not value:
            return self.recent_cities(owner_id)

        current = self.recent_cities(owner_id)
        updated = [value, *(c for c in current if c.lower() != value.lower())]
        updated = updated[: self.config["recent_cities_cap"]]
        with self.db.get_session() as session:
            session.query(RestaurantRecentCity).filter_by(owner_id=owner_id).delete()
            session.add_all(
                RestaurantRecentCity(owner_id=owner_id, city=name, position=idx)
                for idx, name in enumerate(updated)
            )
        return updated

    # Reseñas
    # =======

    def add_review(
        self,
        restaurant_id: str,
        rating: float,
        recommend: Optional[bool] = None,
        note: Optional[str] = None,
    ) -> Dict[str, Any]:
        rating = float(rating)
        if not math.isfinite(rating):
            raise ValueError(f"rating must be a finite number, got {rating!r}")
        clamped = int(max(1, min(5, round_half_up(rating))))
        if not isinstance(recommend, bool):
            recommend = rating >= 4
        note = (note or "")[: self.config["review_note_max_length"]]

        with self.db.get_session() as session:
            review = RestaurantReview(
                restaurant_id=restaurant_id,
                rating=clamped,
                recommend=recommend,
                note=note,
                created_at=self.clock(),
            )
            session.add(review)
            session.flush()
            record = review.to_dict()

            overflow = (
                session.query(RestaurantReview.id)
                .filter_by(restaurant_id=restaurant_id)
                .order_by(RestaurantReview.id.desc())
                .offset(self.config["reviews_cap"])
                .all()
            )
            if overflow:
                session.query(RestaurantReview).filter(
                    RestaurantReview.id.in_([row_id for (row_id,) in overflow])
                ).delete(synchronize_session=False)
        return record

    def reviews(self, restaurant_id: str) -> List[Dict[str, Any]]:
        with self.db.get_session() as session:
            rows = (
                session.query(RestaurantReview)
                .filter_by(restaurant_id=restaurant_id)
                .order_by(RestaurantReview.id.desc())
                .limit(self.config["reviews_cap"])
                .all()
            )
            return [row.to_dict() for row in rows]

    def review_stats(self, restaurant_id: str) -> Dict[str, Any]:
        items = self.reviews(restaurant_id)
        count = len(items)
        if not count:
            return {"avg": 0, "count": 0, "recommendPct": 0}

        avg = round_half_up(sum(item["rating"] for item in items) / count, 1)
        answered = [item for item in items if isinstance(item["recommend"], bool)]
        yes = sum(1 for item in answered if item["recommend"])
        recommend_pct = 0
        if len(answered) >= self.config["recommend_min_answers"]:
            recommend_pct = int(round_half_up(yes / len(answered) * 100))
        return {"avg": avg, "count": count, "recommendPct": recommend_pct}

    # Alertas
    # =======

    def get_alert_prefs(self, owner_id: str) -> Dict[str, Any]:
        with self.db.get_session() as session:
            row = session.get(RestaurantAlertPrefs, owner_id)
            if row is not None:
                return row.to_dict()
        return {
            "cuisine": "",
            "radiusMi": 25,
            "frequency": "weekly",
            "enabled": False,
            "createdAt": isoformat_utc(EPOCH),
        }

    def save_alert_prefs(self, owner_id: str, prefs: AlertPrefsUpdate) -> Dict[str, Any]:
        with self.db.get_session() as session:
            row = session.get(RestaurantAlertPrefs, owner_id)
            if row is None:
                row = RestaurantAlertPrefs(owner_id=owner_id)
                session.add(row)
            row.cuisine = prefs.cuisine
            row.radius_mi = prefs.radius_mi
            row.frequency = prefs.frequency
            row.enabled = prefs.enabled
            row.created_at = self.clock()
            session.flush()
            return row.to_dict()

    # Ubicación
    # =========

    def save_geo_state(self, owner_id: str, lat: float, lng: float) -> Dict[str, Any]:
        with self.db.get_session() as session:
            row = session.get(OwnerGeoState, owner_id)
            if row is None:
                row = OwnerGeoState(owner_id=owner_id, lat=lat, lng=lng)
                session.add(row)
            row.lat, row.lng, row.updated_at = lat, lng, self.clock()
            session.flush()
            return row.to_dict()

    def get_geo_state(self, owner_id: str) -> Optional[Dict[str, Any]]:
        with self.db.get_session() as session:
            row = session.get(OwnerGeoState, owner_id)
            return row.to_dict() if row else None
