"""Preferencias de restaurantes por visitante y búsqueda en el directorio."""

from .search import RestaurantSearchQuery, search_restaurants
from .store import AlertPrefsUpdate, RestaurantStore, ReviewCreate

__all__ = [
    "AlertPrefsUpdate",
    "RestaurantSearchQuery",
    "RestaurantStore",
    "ReviewCreate",
    "search_restaurants",
]
