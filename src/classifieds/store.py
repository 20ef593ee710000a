# src/classifieds/store.py
# Persistencia de anuncios y guardados por visitante
# ==================================================

"""
Anuncios clasificados y listas de guardados.

El documento completo del anuncio se guarda en JSON; categoría, ciudad y
tipo de vendedor se copian a columnas para filtrar. Los guardados antes
vivían en ``localStorage``: aquí se indexan por ``owner_id``.
"""

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from sqlalchemy.exc import SQLAlchemyError

from src.storage import DatabaseManager, Listing, SavedListing
from src.utils.logger import get_logger

from .categories import is_valid_category


class LocalizedText(BaseModel):
    es: str = ""
    en: str = ""


class ListingCreate(BaseModel):
    """Anuncio nuevo; los campos adicionales (rentas, contacto, plan) se conservan."""

    model_config = ConfigDict(extra="allow", populate_by_name=True, str_strip_whitespace=True)

    category: str
    title: LocalizedText
    description: LocalizedText = Field(default_factory=LocalizedText)
    price_label: LocalizedText = Field(default_factory=LocalizedText, alias="priceLabel")
    city: str = ""
    seller_type: Literal["personal", "negocio"] = Field(default="personal", alias="sellerType")
    has_image: bool = Field(default=False, alias="hasImage")

    @field_validator("category")
    @classmethod
    def _known_category(cls, value: str) -> str:
        if not is_valid_category(value):
            raise ValueError(f"unknown category: {value}")
        return value


class ListingStore:
    def __init__(self, database_manager: DatabaseManager, logger_factory=None) -> None:
        self.db = database_manager
        self.logger = (logger_factory or get_logger()).create_module_logger("classifieds.store")

    def create(self, listing: ListingCreate) -> Dict[str, Any]:
        data = listing.model_dump(by_alias=True)
        category = data.pop("category")
        city = data.pop("city")
        seller_type = data.pop("sellerType")
        with self.db.get_session() as session:
            row = Listing(category=category, city=city, seller_type=seller_type, data=data)
            session.add(row)
            session.flush()
            record = row.to_dict()
        self.logger.info(
            {"event": "classifieds.listing.created", "id": record["id"], "category": category}
        )
        return record

    def get(self, listing_id: str) -> Optional[Dict[str, Any]]:
        with self.db.get_session() as session:
            row = session.get(Listing, listing_id)
            return row.to_dict() if row else None

    def list_all(self, category: Optional[str] = None) -> List[Dict[str, Any]]:
        with self.db.get_session() as session:
            query = session.query(Listing)
            if category:
                query = query.filter(Listing.category == category)
            rows = query.order_by(Listing.created_at.desc()).all()
            return [row.to_dict() for row in rows]

    def storage_check(self) -> Dict[str, Any]:
        """Lectura mínima (un id) para confirmar que el almacén responde."""
        try:
            with self.db.get_session() as session:
                sample = session.query(Listing.id).limit(1).all()
        except SQLAlchemyError as exc:
            self.logger.warning({"event": "classifieds.storage_check.failed", "error": str(exc)})
            return {"ok": False, "read": {"ok": False, "error": str(exc), "sampleCount": 0}}
        return {"ok": True, "read": {"ok": True, "error": None, "sampleCount": len(sample)}}


class SavedListingsStore:
    def __init__(self, database_manager: DatabaseManager) -> None:
        self.db = database_manager

    def toggle(self, owner_id: str, listing_id: str) -> bool:
        """Cambia el estado y devuelve ``True`` si quedó guardado."""
        with self.db.get_session() as session:
            existing = (
                session.query(SavedListing)
                .filter_by(owner_id=owner_id, listing_id=listing_id)
                .first()
            )
            if existing is not None:
                session.delete(existing)
                return False
            session.add(SavedListing(owner_id=owner_id, listing_id=listing_id))
            return True

    def is_saved(self, owner_id: str, listing_id: str) -> bool:
        with self.db.get_session() as session:
            return (
                session.query(SavedListing.id)
                .filter_by(owner_id=owner_id, listing_id=listing_id)
                .first()
                is not None
            )

    def list(self, owner_id: str) -> List[str]:
        with self.db.get_session() as session:
            rows = (
                session.query(SavedListing.listing_id)
                .filter_by(owner_id=owner_id)
                .order_by(SavedListing.id.asc())
                .all()
            )
            return [listing_id for (listing_id,) in rows]
