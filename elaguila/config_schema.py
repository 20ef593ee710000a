"""Declarative configuration schema for the El Águila backend."""
from __future__ import annotations

from pathlib import Path
from typing import Any, Iterable, List, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    PositiveFloat,
    PositiveInt,
    PrivateAttr,
    field_validator,
    model_validator,
)


class StrictModel(BaseModel):
    """Base model enforcing strict validation rules."""

    model_config = ConfigDict(
        populate_by_name=True,
        extra="forbid",
        validate_assignment=True,
        str_strip_whitespace=True,
    )


class AppSettings(StrictModel):
    """Top-level runtime metadata."""

    environment: str = Field(
        default="development",
        description="Normalized deployment environment name.",
        examples=["production"],
    )
    debug: bool = Field(
        default=False,
        description="When true, enables verbose logging and relaxed guards.",
    )
    timezone: str = Field(
        default="America/Los_Angeles",
        description="Timezone used for user-facing dates such as event days.",
        examples=["America/Los_Angeles"],
    )
    base_url: Optional[str] = Field(
        default=None,
        description="Public base URL of the site, reported by the environment check.",
        examples=["https://elaguilaenvuelo.com"],
    )

    @field_validator("environment")
    @classmethod
    def _normalize_environment(cls, value: str) -> str:
        normalized = value.strip().lower()
        if normalized not in {"development", "production", "staging", "test"}:
            raise ValueError(
                "environment must be one of: development, staging, production, test"
            )
        return normalized


class PathsConfig(StrictModel):
    """Filesystem layout settings."""

    data_dir: Path = Field(
        default=Path("data"),
        description="Root directory for persistent runtime artefacts.",
        examples=["/var/lib/elaguila"],
    )
    logs_dir: Path = Field(
        default=Path("logs"),
        description="Directory where operational logs are written.",
        examples=["/var/log/elaguila"],
    )

    @model_validator(mode="after")
    def _ensure_child_paths(self) -> "PathsConfig":
        base = self.data_dir if self.data_dir.is_absolute() else self.data_dir.resolve()
        object.__setattr__(self, "data_dir", base)
        if not self.logs_dir.is_absolute():
            object.__setattr__(self, "logs_dir", (base / self.logs_dir).resolve())
        return self


class DatabaseConfig(StrictModel):
    """Database connectivity parameters."""

    driver: str = Field(
        default="sqlite",
        description="Database backend driver to use.",
        examples=["postgresql"],
    )
    path: Optional[Path] = Field(
        default=Path("data/elaguila.db"),
        description="Filesystem path for SQLite database files.",
    )
    host: Optional[str] = Field(
        default=None,
        description="Hostname for the SQL server when using a network backend.",
    )
    port: Optional[int] = Field(
        default=None,
        description="TCP port for the SQL server backend.",
        examples=[5432],
    )
    name: str = Field(default="elaguila", description="Database name or schema.")
    user: Optional[str] = Field(
        default=None,
        description="Database username for authenticated connections.",
    )
    password: Optional[str] = Field(
        default=None,
        description="Database password; treated as secret.",
    )
    connect_timeout: PositiveInt = Field(
        default=10, description="Seconds to wait when establishing a connection."
    )
    pool_size: PositiveInt = Field(
        default=5, description="Number of persistent connections per worker."
    )
    max_overflow: PositiveInt = Field(
        default=10,
        description="How many extra connections can be opened temporarily.",
    )

    @model_validator(mode="after")
    def _validate_backend(self) -> "DatabaseConfig":
        driver = self.driver.lower()
        if driver not in {"sqlite", "postgresql"}:
            raise ValueError("driver must be either 'sqlite' or 'postgresql'")
        if driver == "sqlite":
            if not self.path:
                raise ValueError("SQLite configuration requires a file path")
        else:
            missing = [
                field_name
                for field_name in ("host", "port", "user")
                if getattr(self, field_name) in (None, "")
            ]
            if missing:
                raise ValueError(
                    "PostgreSQL configuration requires fields: " + ", ".join(missing)
                )
            if self.port is not None and self.port <= 0:
                raise ValueError("Database port must be a positive integer")
        return self


class CollectionConfig(StrictModel):
    """Outbound HTTP behaviour shared by feed collectors and event providers."""

    request_timeout_seconds: PositiveFloat = Field(
        default=8.0,
        description="HTTP timeout applied to every feed or provider request.",
    )
    max_concurrent_requests: PositiveInt = Field(
        default=8,
        description="Concurrency limit when fetching several feeds at once.",
    )
    user_agent: str = Field(
        default="ElAguilaNewsBot/1.0",
        description="HTTP User-Agent header sent to feeds and providers.",
    )
    max_feed_bytes: PositiveInt = Field(
        default=10 * 1024 * 1024,
        description="Feeds larger than this are discarded.",
    )
    cache_ttl_seconds: PositiveInt = Field(
        default=600,
        description="Seconds an aggregated feed response stays cached.",
    )
    cache_max_entries: PositiveInt = Field(
        default=256,
        description="Maximum cached aggregations before LRU eviction.",
    )


class RateLimitingConfig(StrictModel):
    """Retry and backoff policy for outbound requests."""

    max_retries: int = Field(
        default=2,
        ge=0,
        description="Retries after the first attempt for retryable failures.",
    )
    backoff_base: PositiveFloat = Field(
        default=0.5, description="Base factor for exponential backoff."
    )
    backoff_max: PositiveFloat = Field(
        default=10.0,
        description="Maximum jitter-free delay enforced by backoff.",
    )
    jitter_max: PositiveFloat = Field(
        default=0.3, description="Maximum random jitter added to delays."
    )


class NewsConfig(StrictModel):
    """News aggregation settings."""

    max_items: PositiveInt = Field(
        default=40,
        description="Maximum number of news items returned per request.",
    )
    default_language: str = Field(
        default="es",
        description="Catalog used when no language is requested.",
        examples=["en"],
    )
    default_category: str = Field(
        default="ultimas",
        description="Category used when the requested one is unknown.",
    )

    @field_validator("default_language")
    @classmethod
    def _check_language(cls, value: str) -> str:
        normalized = value.lower()
        if normalized not in {"es", "en"}:
            raise ValueError("default_language must be 'es' or 'en'")
        return normalized


class EventsConfig(StrictModel):
    """Event providers and aggregation parameters."""

    default_city: str = Field(
        default="sanjose", description="City slug used when none is requested."
    )
    eventbrite_token: Optional[str] = Field(
        default=None,
        description="Eventbrite OAuth token; Eventbrite is skipped when unset.",
    )
    ticketmaster_api_key: Optional[str] = Field(
        default=None,
        description="Ticketmaster Discovery API key; Ticketmaster is skipped when unset.",
    )
    eventbrite_within: str = Field(
        default="25km",
        description="Eventbrite search radius for the combined city feed.",
    )
    eventbrite_local_within: str = Field(
        default="10mi",
        description="Eventbrite search radius for the strict local feed.",
    )
    ticketmaster_radius_miles: PositiveInt = Field(
        default=50,
        description="Ticketmaster radius around a city for the combined feed.",
    )
    ticketmaster_page_size: PositiveInt = Field(
        default=50, description="Events requested per Ticketmaster call."
    )
    rss_items_per_feed: PositiveInt = Field(
        default=10, description="Items taken from each community RSS feed."
    )
    live_latitude: float = Field(default=37.3382, ge=-90.0, le=90.0)
    live_longitude: float = Field(default=-121.8863, ge=-180.0, le=180.0)
    live_radius_miles: PositiveInt = Field(
        default=150, description="Radius of the live Ticketmaster search."
    )
    live_cache_max_age_seconds: PositiveInt = Field(
        default=10_800,
        description="Shared cache lifetime advertised for the live feed.",
    )
    fallback_image: str = Field(
        default="/event-fallback.png",
        description="Image used when a provider supplies none.",
    )
    live_fallback_image: str = Field(
        default="/fallback-event.jpg",
        description="Image used by the live feed when no wide image exists.",
    )
    live_min_image_width: PositiveInt = Field(
        default=600,
        description="Minimum width for a Ticketmaster image to be used as flyer.",
    )


class SheetsConfig(StrictModel):
    """Google Sheets mirror for sweepstakes entries and winners."""

    client_email: Optional[str] = Field(
        default=None, description="Service account client email."
    )
    private_key: Optional[str] = Field(
        default=None,
        description="Service account private key; literal \\n sequences are unescaped.",
    )
    entries_sheet_id: Optional[str] = Field(
        default=None, description="Spreadsheet receiving sweepstakes entries."
    )
    winners_sheet_id: Optional[str] = Field(
        default=None, description="Spreadsheet receiving announced winners."
    )
    entries_range: str = Field(default="Sheet1!A:C")
    winners_range: str = Field(default="Winners!A:C")


class ClassifiedsConfig(StrictModel):
    """Listing search defaults."""

    default_city: str = Field(
        default="San José", description="Anchor city when none can be resolved."
    )
    default_radius_mi: PositiveFloat = Field(
        default=25.0, description="Search radius in miles around the anchor."
    )
    max_nearby_chips: PositiveInt = Field(
        default=12, description="Maximum nearby cities suggested for a search."
    )


class RestaurantsConfig(StrictModel):
    """Limits for per-visitor restaurant preferences and reviews."""

    favorites_cap: PositiveInt = Field(default=500)
    recent_cities_cap: PositiveInt = Field(default=10)
    reviews_cap: PositiveInt = Field(
        default=50, description="Reviews kept per restaurant, newest first."
    )
    review_note_max_length: PositiveInt = Field(default=600)
    recommend_min_answers: PositiveInt = Field(
        default=3,
        description="Answers required before a recommend percentage is reported.",
    )


class MagazineConfig(StrictModel):
    """Cache busting for magazine PDF downloads."""

    release_version: Optional[str] = Field(
        default=None,
        description="Version stamp (e.g. git commit) appended to magazine PDF URLs.",
    )
    deployment_id: Optional[str] = Field(
        default=None,
        description="Fallback version stamp when no release version is known.",
    )


class LoggingConfig(StrictModel):
    """Logging subsystem configuration."""

    level: str = Field(
        default="INFO",
        description="Minimum log level captured by the application logger.",
        examples=["DEBUG"],
    )
    file_path: Path = Field(
        default=Path("data/logs/elaguila.log"),
        description="Absolute path of the rotating log file.",
    )
    max_file_size_mb: PositiveInt = Field(
        default=10,
        description="Maximum size per log file before rotation (MiB).",
    )
    retention_days: PositiveInt = Field(
        default=30,
        description="Number of days to keep rotated log files.",
    )
    format: str = Field(
        default="{time:YYYY-MM-DD HH:mm:ss} | {level:<8} | {name}:{line} | {message}",
        description="Log formatting template compatible with loguru.",
    )

    @field_validator("level")
    @classmethod
    def _normalize_level(cls, value: str) -> str:
        normalized = value.upper()
        if normalized not in {"TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"unknown log level: {value}")
        return normalized

    @model_validator(mode="after")
    def _resolve_path(self) -> "LoggingConfig":
        if not self.file_path.is_absolute():
            self.file_path = self.file_path.resolve()
        return self


class Config(StrictModel):
    """Complete El Águila configuration model."""

    app: AppSettings = Field(default_factory=AppSettings)
    paths: PathsConfig = Field(default_factory=PathsConfig)
    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    collection: CollectionConfig = Field(default_factory=CollectionConfig)
    rate_limiting: RateLimitingConfig = Field(default_factory=RateLimitingConfig)
    news: NewsConfig = Field(default_factory=NewsConfig)
    events: EventsConfig = Field(default_factory=EventsConfig)
    sheets: SheetsConfig = Field(default_factory=SheetsConfig)
    classifieds: ClassifiedsConfig = Field(default_factory=ClassifiedsConfig)
    restaurants: RestaurantsConfig = Field(default_factory=RestaurantsConfig)
    magazine: MagazineConfig = Field(default_factory=MagazineConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    _metadata: object = PrivateAttr(default=None)


DEFAULT_CONFIG = Config()


def iter_field_docs(
    model: BaseModel | type[BaseModel],
    prefix: str = "",
    *,
    include_defaults: bool = True,
) -> Iterable[dict[str, object]]:
    """Yield flattened schema documentation entries."""

    instance = DEFAULT_CONFIG if isinstance(model, type) else model
    target_model = type(instance) if not isinstance(model, type) else model

    for name, field in target_model.model_fields.items():
        value = getattr(instance, name, field.default)
        key = f"{prefix}.{name}" if prefix else name
        is_nested = isinstance(value, BaseModel)
        entry: dict[str, object] = {
            "name": key,
            "type": getattr(field.annotation, "__name__", str(field.annotation)),
            "description": field.description or "",
            "default": None if (is_nested or not include_defaults) else value,
            "examples": field.examples or [],
            "constraints": _describe_constraints(field),
            "is_nested": is_nested,
        }
        yield entry
        if is_nested:
            yield from iter_field_docs(value, key, include_defaults=include_defaults)


_COMPARATORS = {"ge": ">=", "gt": ">", "le": "<=", "lt": "<"}


def _describe_constraints(field: Any) -> str:
    """Return a human readable description of numeric field bounds."""

    parts: List[str] = []
    for constraint in field.metadata:
        for attr, comparator in _COMPARATORS.items():
            bound = getattr(constraint, attr, None)
            if bound is not None:
                parts.append(f"{comparator} {bound}")
    return ", ".join(parts)


__all__ = [
    "Config",
    "DEFAULT_CONFIG",
    "iter_field_docs",
]
