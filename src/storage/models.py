# src/storage/models.py
# Modelos de datos para El Águila
# ===============================

"""
Tablas SQLAlchemy que respaldan cada almacén del sitio: participaciones de
sorteos, ganadores, formularios, cupones, anuncios clasificados y las
preferencias por visitante (favoritos, ciudades recientes, reseñas, alertas
y ubicación) que antes vivían en el navegador.

Los registros que llegan como documentos libres (anuncios, formularios) se
guardan en columnas JSON; los campos por los que se filtra o se ordena se
copian a columnas propias con índice.
"""

import uuid
from datetime import datetime, timezone
from typing import Any, Dict

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    Float,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import declarative_base

from src.utils.datetime_utils import isoformat_utc

Base = declarative_base()


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _new_id() -> str:
    return uuid.uuid4().hex


def _iso(value: datetime | None) -> str | None:
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return isoformat_utc(value)


# Sorteos y promociones
# =====================


class SweepstakesEntry(Base):
    """Participación simple (nombre + email) en el sorteo semanal."""

    __tablename__ = "sweepstakes_entries"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(200), nullable=False)
    email = Column(String(320), nullable=False, index=True)
    submitted_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "submittedAt": _iso(self.submitted_at),
        }


class VideoEntry(Base):
    """
    Participación obtenida al ver el video de un anunciante.

    Un mismo email sólo cuenta una vez por video.
    """

    __tablename__ = "video_entries"

    id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(String(320), nullable=False)
    phone = Column(String(40), nullable=False)
    video_id = Column(String(120), nullable=False)
    advertiser_id = Column(String(120), nullable=False, index=True)
    package_type = Column(String(40))
    recorded_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)
    week = Column(Integer, nullable=False)

    __table_args__ = (
        UniqueConstraint("email", "video_id", name="uq_video_entries_email_video"),
        Index("ix_video_entries_week", "week"),
    )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "email": self.email,
            "phone": self.phone,
            "videoId": self.video_id,
            "advertiserId": self.advertiser_id,
            "date": _iso(self.recorded_at),
            "week": self.week,
        }


class Winner(Base):
    __tablename__ = "winners"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(200), nullable=False)
    prize = Column(String(300), nullable=False)
    date = Column(String(40), nullable=False)
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False, index=True)

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "name": self.name, "prize": self.prize, "date": self.date}


class FormEntry(Base):
    """Envío libre de formulario; se guarda tal cual llegó."""

    __tablename__ = "form_entries"

    id = Column(Integer, primary_key=True, autoincrement=True)
    payload = Column(JSON, nullable=False)
    submitted_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)

    def to_dict(self) -> Dict[str, Any]:
        data = dict(self.payload or {})
        data["submittedAt"] = _iso(self.submitted_at)
        return data


class Coupon(Base):
    """Cupón de anunciante publicado en la revista."""

    __tablename__ = "coupons"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(200), nullable=False)
    business = Column(String(200), nullable=False)
    description = Column(Text)
    image = Column(String(500))
    phone = Column(String(40))
    email = Column(String(320))
    expires_on = Column(String(20))
    is_active = Column(Boolean, default=True, nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "business": self.business,
            "description": self.description,
            "image": self.image,
            "phone": self.phone,
            "email": self.email,
            "expiration": self.expires_on,
        }


# Clasificados
# ============


class Listing(Base):
    """
    Anuncio clasificado.

    ``data`` guarda el documento bilingüe completo (títulos, descripción,
    precio, contacto, campos de rentas, banderas de plan); las columnas
    duplican lo necesario para filtrar y ordenar en SQL.
    """

    __tablename__ = "listings"

    id = Column(String(32), primary_key=True, default=_new_id)
    category = Column(String(40), nullable=False)
    city = Column(String(120))
    seller_type = Column(String(20), default="personal", nullable=False)
    data = Column(JSON, nullable=False)
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)

    __table_args__ = (
        Index("ix_listings_category_created", "category", "created_at"),
    )

    def to_dict(self) -> Dict[str, Any]:
        record = dict(self.data or {})
        record.update(
            {
                "id": self.id,
                "category": self.category,
                "city": self.city or "",
                "sellerType": self.seller_type,
                "createdAt": _iso(self.created_at),
            }
        )
        return record


class SavedListing(Base):
    __tablename__ = "saved_listings"

    id = Column(Integer, primary_key=True, autoincrement=True)
    owner_id = Column(String(120), nullable=False)
    listing_id = Column(String(32), nullable=False)
    saved_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)

    __table_args__ = (
        UniqueConstraint("owner_id", "listing_id", name="uq_saved_listings_owner_listing"),
    )


# Restaurantes y preferencias por visitante
# =========================================


class RestaurantFavorite(Base):
    __tablename__ = "restaurant_favorites"

    id = Column(Integer, primary_key=True, autoincrement=True)
    owner_id = Column(String(120), nullable=False)
    restaurant_id = Column(String(120), nullable=False)
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)

    __table_args__ = (
        UniqueConstraint("owner_id", "restaurant_id", name="uq_restaurant_favorites"),
    )


class RestaurantRecentCity(Base):
    __tablename__ = "restaurant_recent_cities"

    id = Column(Integer, primary_key=True, autoincrement=True)
    owner_id = Column(String(120), nullable=False, index=True)
    city = Column(String(120), nullable=False)
    position = Column(Integer, nullable=False)


class RestaurantReview(Base):
    __tablename__ = "restaurant_reviews"

    id = Column(Integer, primary_key=True, autoincrement=True)
    review_id = Column(String(32), unique=True, default=_new_id, nullable=False)
    restaurant_id = Column(String(120), nullable=False)
    rating = Column(Integer, nullable=False)
    recommend = Column(Boolean, nullable=False)
    note = Column(String(600))
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)

    __table_args__ = (
        Index("ix_restaurant_reviews_restaurant_created", "restaurant_id", "created_at"),
    )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.review_id,
            "rating": self.rating,
            "recommend": self.recommend,
            "note": self.note,
            "createdAt": _iso(self.created_at),
        }


class RestaurantAlertPrefs(Base):
    __tablename__ = "restaurant_alert_prefs"

    owner_id = Column(String(120), primary_key=True)
    cuisine = Column(String(80), default="", nullable=False)
    radius_mi = Column(Integer, default=25, nullable=False)
    frequency = Column(String(20), default="weekly", nullable=False)
    enabled = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "cuisine": self.cuisine,
            "radiusMi": self.radius_mi,
            "frequency": self.frequency,
            "enabled": self.enabled,
            "createdAt": _iso(self.created_at),
        }


class OwnerGeoState(Base):
    __tablename__ = "owner_geo_states"

    owner_id = Column(String(120), primary_key=True)
    lat = Column(Float, nullable=False)
    lng = Column(Float, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)

    def to_dict(self) -> Dict[str, Any]:
        return {"lat": self.lat, "lng": self.lng, "updatedAt": _iso(self.updated_at)}
