"""HTTP API surface for the community site: news, events, promotions, classifieds."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Callable, Dict, Optional

from fastapi import FastAPI, HTTPException
from sqlalchemy.exc import SQLAlchemyError

from config.settings import CONFIG, MAGAZINE_CONFIG
from config.version import PROJECT_VERSION

from src.classifieds import ListingStore, SavedListingsStore
from src.collectors import NewsFeedCollector
from src.events.service import EventsService
from src.restaurants import RestaurantStore
from src.storage.database import DatabaseManager, get_database_manager
from src.sweepstakes import GoogleSheetsClient, SweepstakesService
from src.utils.datetime_utils import utc_now

from . import routes_classifieds, routes_content, routes_promotions, routes_restaurants
from .dependencies import DatabaseDep
from .middleware import MagazineVersionMiddleware


def create_app(
    database_manager: Optional[DatabaseManager] = None,
    *,
    news_collector: Optional[NewsFeedCollector] = None,
    events_service: Optional[EventsService] = None,
    sheets_client: Optional[GoogleSheetsClient] = None,
    clock: Optional[Callable[[], datetime]] = None,
    magazine_config: Optional[Dict[str, Any]] = None,
) -> FastAPI:
    """Create a configured FastAPI application."""

    db_manager = database_manager or get_database_manager()
    clock = clock or utc_now
    app = FastAPI(title="El Águila API", version=PROJECT_VERSION)

    app.state.db = db_manager
    app.state.clock = clock
    app.state.news_collector = news_collector or NewsFeedCollector()
    app.state.events_service = events_service or EventsService()
    app.state.sweepstakes = SweepstakesService(
        db_manager,
        sheets_client=sheets_client or GoogleSheetsClient.from_config(),
        clock=clock,
    )
    app.state.listings = ListingStore(db_manager)
    app.state.saved_listings = SavedListingsStore(db_manager)
    app.state.restaurants = RestaurantStore(db_manager, clock=clock)

    app.add_middleware(
        MagazineVersionMiddleware,
        magazine_config=magazine_config if magazine_config is not None else MAGAZINE_CONFIG,
    )

    app.include_router(routes_content.router)
    app.include_router(routes_promotions.router)
    app.include_router(routes_classifieds.router)
    app.include_router(routes_restaurants.router)

    @app.get("/healthz")
    def health_check(manager: DatabaseDep) -> Dict[str, Any]:
        status = manager.get_health_status()
        return {
            "status": "ok" if status.get("status") == "healthy" else "degraded",
            "details": status,
        }

    @app.get("/readyz")
    def readiness_check(manager: DatabaseDep) -> Dict[str, Any]:
        try:
            manager.ping()
        except SQLAlchemyError as exc:
            raise HTTPException(status_code=503, detail="database unavailable") from exc
        return {"status": "ready"}

    @app.get("/api/test-env")
    def environment_check() -> Dict[str, Any]:
        return {
            "BASE_URL": CONFIG.app.base_url or "NOT_FOUND",
            "message": "Environment variable check working.",
        }

    return app


__all__ = ["create_app"]
