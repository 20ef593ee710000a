"""
News and events endpoints.

Route map::

    GET /api/news                 category/lang news aggregation
    GET /api/events/core          all sources for one city
    GET /api/events/full          strict local events, category filter
    GET /api/events/live          regional Ticketmaster feed
    GET /api/events/rss           community calendars
    GET /api/events/regional      regional newspapers and tourism feeds
    GET /api/events/cities        county → cities directory
"""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Query
from fastapi.responses import JSONResponse

from config.settings import EVENTS_CONFIG

from src.collectors.base_collector import FetchError
from src.events import InvalidCityError, ProviderNotConfiguredError
from src.events.city_directory import directory_payload
from src.utils.datetime_utils import to_display_tz
from src.utils.logger import get_logger

from .dependencies import ClockDep, EventsDep, NewsDep

router = APIRouter(prefix="/api")
logger = get_logger().create_module_logger("serving.content")


@router.get("/news")
async def get_news(
    news: NewsDep,
    category: Optional[str] = Query(default=None),
    lang: Optional[str] = Query(default=None),
):
    return await news.collect(category, lang)


@router.get("/events/core")
async def get_core_events(events: EventsDep, city: Optional[str] = Query(default=None)):
    try:
        return await events.core_events(city)
    except InvalidCityError:
        return JSONResponse({"error": "Invalid city"}, status_code=400)
    except Exception as exc:
        logger.exception({"event": "events.core.failed", "error": str(exc)})
        return JSONResponse({"error": "Failed to load events"}, status_code=500)


@router.get("/events/full")
async def get_full_events(
    events: EventsDep,
    city: Optional[str] = Query(default=None),
    category: Optional[str] = Query(default=None),
):
    try:
        return await events.full_events(city, category)
    except Exception as exc:
        logger.exception({"event": "events.full.failed", "error": str(exc)})
        return {"events": [], "message": "Error loading events."}


@router.get("/events/live")
async def get_live_events(events: EventsDep, clock: ClockDep):
    today = to_display_tz(clock()).date()
    try:
        payload = await events.live_events(today)
    except ProviderNotConfiguredError:
        logger.error({"event": "events.live.unconfigured"})
        return JSONResponse([], status_code=500)
    except FetchError as exc:
        logger.error({"event": "events.live.failed", "error": str(exc)})
        return JSONResponse([], status_code=500)
    max_age = EVENTS_CONFIG["live_cache_max_age_seconds"]
    return JSONResponse(payload, headers={"Cache-Control": f"s-maxage={max_age}"})


@router.get("/events/rss")
async def get_rss_events(events: EventsDep):
    try:
        return await events.rss_events()
    except Exception as exc:
        logger.exception({"event": "events.rss.failed", "error": str(exc)})
        return JSONResponse({"error": "Failed to load RSS events."}, status_code=500)


@router.get("/events/regional")
async def get_regional_events(events: EventsDep):
    return await events.regional_rss_events()


@router.get("/events/cities")
def get_event_cities():
    return directory_payload()
