"""
Utilidades compartidas del backend de El Águila.
"""

from .cache import ResponseCache
from .logger import get_logger, setup_logging

__all__ = [
    "get_logger",
    "setup_logging",
    "ResponseCache",
]
