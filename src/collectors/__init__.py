"""
Paquete de colectores de El Águila.

Incluye el agregador de noticias por categoría y los calendarios RSS de
eventos.
"""

from .base_collector import BaseCollector, FetchError
from .news_collector import NewsFeedCollector, fallback_thumbnail
from .rss_event_collector import RSSEventCollector

AVAILABLE_COLLECTORS = {
    "news": NewsFeedCollector,
    "rss_events": RSSEventCollector,
}


def create_collector_by_name(collector_type: str, **kwargs):
    """Crea un colector por nombre de tipo."""
    if collector_type not in AVAILABLE_COLLECTORS:
        raise ValueError(f"Tipo de colector no disponible: {collector_type}")
    return AVAILABLE_COLLECTORS[collector_type](**kwargs)


__all__ = [
    "BaseCollector",
    "FetchError",
    "NewsFeedCollector",
    "RSSEventCollector",
    "fallback_thumbnail",
    "AVAILABLE_COLLECTORS",
    "create_collector_by_name",
]
