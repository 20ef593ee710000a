"""Config package with lazy attribute loading so packaging never reads config.toml."""

from __future__ import annotations

from importlib import import_module
from typing import Any, Dict, Iterable

_MODULE_ATTRS: Dict[str, Iterable[str]] = {
    "config.settings": (
        "CONFIG",
        "DATABASE_CONFIG",
        "COLLECTION_CONFIG",
        "RATE_LIMITING_CONFIG",
        "NEWS_CONFIG",
        "EVENTS_CONFIG",
        "SHEETS_CONFIG",
        "CLASSIFIEDS_CONFIG",
        "RESTAURANTS_CONFIG",
        "MAGAZINE_CONFIG",
        "LOGGING_CONFIG",
        "ENVIRONMENT",
        "IS_PRODUCTION",
        "DEBUG",
        "validate_config",
    ),
    "config.sources": (
        "NEWS_SOURCES",
        "NEWS_CATEGORIES",
        "EVENT_RSS_FEEDS",
        "REGIONAL_EVENT_FEEDS",
        "get_news_feeds",
        "validate_sources",
    ),
    "config.locations": (
        "EVENT_COUNTIES",
        "CA_CITIES",
        "CITY_ALIASES",
        "ZIP_GEO",
    ),
    "config.version": (
        "MIN_PYTHON_VERSION",
        "PROJECT_VERSION",
        "PYTHON_REQUIRES_SPECIFIER",
        "__version__",
    ),
}

_ATTR_TO_MODULE: Dict[str, str] = {
    attribute: module for module, attributes in _MODULE_ATTRS.items() for attribute in attributes
}

__all__ = sorted(_ATTR_TO_MODULE)


def __getattr__(name: str) -> Any:
    module_name = _ATTR_TO_MODULE.get(name)
    if module_name is None:
        raise AttributeError(f"module 'config' has no attribute {name!r}")
    value = getattr(import_module(module_name), name)
    globals()[name] = value
    return value


__author__ = "El Águila Dev Team"
