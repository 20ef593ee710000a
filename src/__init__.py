"""
Paquete principal del backend de El Águila en Vuelo.

Contiene los módulos funcionales del sitio comunitario: noticias, eventos,
sorteos, clasificados, restaurantes, almacenamiento y utilidades.
"""

from config.version import PROJECT_VERSION, PYTHON_REQUIRES_SPECIFIER

from .collectors import BaseCollector, NewsFeedCollector, RSSEventCollector
from .serving import create_app
from .storage import DatabaseManager, get_database_manager
from .utils import get_logger, setup_logging

__version__ = PROJECT_VERSION
__description__ = "Backend del sitio comunitario El Águila en Vuelo"

__package_info__ = {
    "name": "elaguila_community_media",
    "version": __version__,
    "description": __description__,
    "author": "El Águila Team",
    "license": "MIT",
    "python_requires": PYTHON_REQUIRES_SPECIFIER,
}

__all__ = [
    "BaseCollector",
    "NewsFeedCollector",
    "RSSEventCollector",
    "get_database_manager",
    "DatabaseManager",
    "get_logger",
    "setup_logging",
    "create_app",
]
