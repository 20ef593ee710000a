"""
Paquete de storage de El Águila.

Gestiona la conexión a la base de datos y los modelos de cada almacén.
"""

from .database import DatabaseManager, get_database_manager
from .models import (
    Base,
    Coupon,
    FormEntry,
    Listing,
    OwnerGeoState,
    RestaurantAlertPrefs,
    RestaurantFavorite,
    RestaurantRecentCity,
    RestaurantReview,
    SavedListing,
    SweepstakesEntry,
    VideoEntry,
    Winner,
)


__all__ = [
    "get_database_manager",
    "DatabaseManager",
    "Base",
    "Coupon",
    "FormEntry",
    "Listing",
    "OwnerGeoState",
    "RestaurantAlertPrefs",
    "RestaurantFavorite",
    "RestaurantRecentCity",
    "RestaurantReview",
    "SavedListing",
    "SweepstakesEntry",
    "VideoEntry",
    "Winner",
]
