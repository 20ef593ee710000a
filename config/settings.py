"""Project configuration facade backed by elaguila.config_manager."""
from __future__ import annotations

from pathlib import Path
from typing import Any, Dict

from elaguila.config_manager import ConfigError, load_config
from elaguila.config_schema import Config

CONFIG: Config = load_config()

BASE_DIR = Path(__file__).resolve().parent.parent
DATA_DIR = CONFIG.paths.data_dir
LOGS_DIR = CONFIG.paths.logs_dir

for directory in (DATA_DIR, LOGS_DIR):
    directory.mkdir(parents=True, exist_ok=True)

ENVIRONMENT = CONFIG.app.environment
DEBUG = CONFIG.app.debug
IS_PRODUCTION = ENVIRONMENT == "production"

DATABASE_CONFIG: Dict[str, Any] = CONFIG.database.model_dump(mode="python")
DATABASE_CONFIG["type"] = DATABASE_CONFIG.pop("driver")

COLLECTION_CONFIG: Dict[str, Any] = CONFIG.collection.model_dump(mode="python")
COLLECTION_CONFIG["request_timeout"] = COLLECTION_CONFIG["request_timeout_seconds"]

RATE_LIMITING_CONFIG: Dict[str, Any] = CONFIG.rate_limiting.model_dump(mode="python")
NEWS_CONFIG: Dict[str, Any] = CONFIG.news.model_dump(mode="python")
EVENTS_CONFIG: Dict[str, Any] = CONFIG.events.model_dump(mode="python")
SHEETS_CONFIG: Dict[str, Any] = CONFIG.sheets.model_dump(mode="python")
CLASSIFIEDS_CONFIG: Dict[str, Any] = CONFIG.classifieds.model_dump(mode="python")
RESTAURANTS_CONFIG: Dict[str, Any] = CONFIG.restaurants.model_dump(mode="python")
MAGAZINE_CONFIG: Dict[str, Any] = CONFIG.magazine.model_dump(mode="python")

LOGGING_CONFIG: Dict[str, Any] = {
    "level": CONFIG.logging.level,
    "file_path": str(CONFIG.logging.file_path),
    "max_file_size": f"{CONFIG.logging.max_file_size_mb} MB",
    "retention": f"{CONFIG.logging.retention_days} days",
    "format": CONFIG.logging.format,
}


def validate_config(config: Config | None = None) -> None:
    """Cross-section checks the schema cannot express on its own."""

    cfg = config or CONFIG
    sheets = cfg.sheets
    has_credentials = bool(sheets.client_email and sheets.private_key)
    has_sheet = bool(sheets.entries_sheet_id or sheets.winners_sheet_id)
    if has_sheet and not has_credentials:
        raise ConfigError("sheets.client_email and sheets.private_key are required for Sheets")
    if cfg.database.driver == "postgresql" and not cfg.database.password:
        raise ConfigError("postgresql configuration missing: password")
    if cfg.classifieds.max_nearby_chips > 50:
        raise ConfigError("classifieds.max_nearby_chips must not exceed 50")


__all__ = [
    "BASE_DIR",
    "CONFIG",
    "DATA_DIR",
    "LOGS_DIR",
    "ENVIRONMENT",
    "DEBUG",
    "IS_PRODUCTION",
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
    "validate_config",
]
