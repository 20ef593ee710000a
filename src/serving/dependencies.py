"""Services resolved from ``app.state`` for route handlers."""

from __future__ import annotations

from datetime import datetime
from typing import Annotated, Callable

from fastapi import Depends, Request

from src.classifieds import ListingStore, SavedListingsStore
from src.collectors import NewsFeedCollector
from src.events.service import EventsService
from src.restaurants import RestaurantStore
from src.storage import DatabaseManager
from src.sweepstakes import SweepstakesService


def _get_db(request: Request) -> DatabaseManager:
    return request.app.state.db


def _get_news(request: Request) -> NewsFeedCollector:
    return request.app.state.news_collector


def _get_events(request: Request) -> EventsService:
    return request.app.state.events_service


def _get_sweepstakes(request: Request) -> SweepstakesService:
    return request.app.state.sweepstakes


def _get_listings(request: Request) -> ListingStore:
    return request.app.state.listings


def _get_saved(request: Request) -> SavedListingsStore:
    return request.app.state.saved_listings


def _get_restaurants(request: Request) -> RestaurantStore:
    return request.app.state.restaurants


def _get_clock(request: Request) -> Callable[[], datetime]:
    return request.app.state.clock


DatabaseDep = Annotated[DatabaseManager, Depends(_get_db)]
NewsDep = Annotated[NewsFeedCollector, Depends(_get_news)]
EventsDep = Annotated[EventsService, Depends(_get_events)]
SweepstakesDep = Annotated[SweepstakesService, Depends(_get_sweepstakes)]
ListingsDep = Annotated[ListingStore, Depends(_get_listings)]
SavedDep = Annotated[SavedListingsStore, Depends(_get_saved)]
RestaurantsDep = Annotated[RestaurantStore, Depends(_get_restaurants)]
ClockDep = Annotated[Callable[[], datetime], Depends(_get_clock)]
