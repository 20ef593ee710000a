"""Event providers and the aggregation service, with the network mocked by httpx.MockTransport."""

from __future__ import annotations

import asyncio
from datetime import date
from typing import Any, Dict, List

import httpx
import pytest

from src.collectors import FetchError, RSSEventCollector
from src.events import InvalidCityError, ProviderNotConfiguredError, get_city
from src.events.providers import (
    EVENTBRITE_SEARCH_URL,
    TICKETMASTER_EVENTS_URL,
    EventbriteProvider,
    TicketmasterProvider,
)
from src.events.service import NO_EVENTS_MESSAGE, EventsService, to_live_event

CONFIG = {"eventbrite_token": "eb-token", "ticketmaster_api_key": "tm-key"}


async def _no_sleep(_delay: float) -> None:
    return None


def _eventbrite_payload() -> Dict[str, Any]:
    return {
        "events": [
            {
                "id": "1",
                "name": {"text": "Taco Festival"},
                "url": "https://eb.example/1",
                "start": {"local": "2025-06-10T12:00:00"},
                "venue": {"address": {"city": "San Jose"}},
            },
            {
                "id": "2",
                "name": {"text": "Kids Art Day"},
                "url": "https://eb.example/2",
                "start": {"local": "2025-06-05T10:00:00"},
                "venue": {"address": {"city": "Somewhere Else"}},
            },
        ]
    }


def _ticketmaster_payload() -> Dict[str, Any]:
    return {
        "_embedded": {
            "events": [
                {
                    "id": "a",
                    "name": "Sharks vs Kings",
                    "url": "https://tm.example/a",
                    "dates": {"start": {"localDate": "2025-06-01"}},
                    "_embedded": {"venues": [{"city": {"name": "San Jose"}}]},
                },
                {
                    "id": "dup",
                    "name": "Taco Festival",
                    "url": "https://eb.example/1",
                    "dates": {"start": {"localDate": "2025-06-10"}},
                    "_embedded": {"venues": [{"city": {"name": "San Jose"}}]},
                },
            ]
        }
    }


class _Recorder:
    def __init__(self, routes: Dict[str, httpx.Response]) -> None:
        self.routes = routes
        self.requests: List[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        url = f"{request.url.scheme}://{request.url.host}{request.url.path}"
        response = self.routes.get(url)
        if response is None:
            return httpx.Response(404)
        return response


def _providers(recorder: _Recorder, logger_factory, config=None):
    kwargs = dict(
        transport=httpx.MockTransport(recorder),
        sleep=_no_sleep,
        events_config=config if config is not None else CONFIG,
        rate_limiting={"max_retries": 0},
    )
    return (
        EventbriteProvider(logger_factory, **kwargs),
        TicketmasterProvider(logger_factory, **kwargs),
    )


def _service(recorder: _Recorder, logger_factory, config=None) -> EventsService:
    eventbrite, ticketmaster = _providers(recorder, logger_factory, config)
    rss = RSSEventCollector(
        logger_factory,
        feeds=[],
        regional_feeds=[],
        transport=httpx.MockTransport(recorder),
        sleep=_no_sleep,
    )
    return EventsService(
        eventbrite=eventbrite,
        ticketmaster=ticketmaster,
        rss=rss,
        events_config=config if config is not None else CONFIG,
        logger_factory=logger_factory,
    )


def test_eventbrite_sends_bearer_token_and_drops_unknown_cities(logger_factory) -> None:
    recorder = _Recorder({EVENTBRITE_SEARCH_URL: httpx.Response(200, json=_eventbrite_payload())})
    eventbrite, _ = _providers(recorder, logger_factory)
    events = asyncio.run(eventbrite.fetch(get_city("sanjose"), "10mi"))

    assert [event.id for event in events] == ["eb-1"]
    request = recorder.requests[0]
    assert request.headers["Authorization"] == "Bearer eb-token"
    assert request.url.params["location.address"] == "San José"
    assert request.url.params["location.within"] == "10mi"


def test_fallback_to_city_keeps_unknown_venues(logger_factory) -> None:
    recorder = _Recorder({EVENTBRITE_SEARCH_URL: httpx.Response(200, json=_eventbrite_payload())})
    eventbrite, _ = _providers(recorder, logger_factory)
    events = asyncio.run(eventbrite.fetch(get_city("fremont"), fallback_to_city=True))
    assert [(event.id, event.city) for event in events] == [("eb-1", "sanjose"), ("eb-2", "fremont")]


def test_missing_credentials_skip_provider(logger_factory) -> None:
    recorder = _Recorder({})
    eventbrite, ticketmaster = _providers(recorder, logger_factory, config={})
    city = get_city("sanjose")
    assert asyncio.run(eventbrite.fetch(city)) == []
    assert asyncio.run(ticketmaster.fetch(city)) == []
    assert recorder.requests == []
    assert logger_factory.module_logger.events().count("events.provider.skipped") == 2


def test_provider_failure_returns_empty_list(logger_factory) -> None:
    recorder = _Recorder({TICKETMASTER_EVENTS_URL: httpx.Response(500)})
    _, ticketmaster = _providers(recorder, logger_factory)
    assert asyncio.run(ticketmaster.fetch(get_city("sanjose"))) == []
    assert "events.provider.failed" in logger_factory.module_logger.events()


def test_invalid_json_is_a_provider_failure(logger_factory) -> None:
    recorder = _Recorder({TICKETMASTER_EVENTS_URL: httpx.Response(200, content=b"<html>")})
    _, ticketmaster = _providers(recorder, logger_factory)
    assert asyncio.run(ticketmaster.fetch(get_city("sanjose"), strict_local=True)) == []


def test_ticketmaster_strict_local_params(logger_factory) -> None:
    recorder = _Recorder({TICKETMASTER_EVENTS_URL: httpx.Response(200, json={})})
    _, ticketmaster = _providers(recorder, logger_factory)
    asyncio.run(ticketmaster.fetch(get_city("oakland"), strict_local=True))
    params = recorder.requests[0].url.params
    assert params["city"] == "Oakland"
    assert params["countryCode"] == "US"
    assert "keyword" not in params


def test_core_events_merges_dedupes_and_sorts(logger_factory) -> None:
    recorder = _Recorder(
        {
            EVENTBRITE_SEARCH_URL: httpx.Response(200, json=_eventbrite_payload()),
            TICKETMASTER_EVENTS_URL: httpx.Response(200, json=_ticketmaster_payload()),
        }
    )
    service = _service(recorder, logger_factory)
    result = asyncio.run(service.core_events("sanjose"))

    assert result["city"] == "San José"
    assert result["count"] == 3
    ids = [event["id"] for event in result["events"]]
    assert ids == ["tm-a", "eb-2", "tm-dup"]
    assert all(event["city"] == "sanjose" for event in result["events"])


def test_core_events_rejects_unknown_city(logger_factory) -> None:
    service = _service(_Recorder({}), logger_factory)
    with pytest.raises(InvalidCityError):
        asyncio.run(service.core_events("atlantis"))


def test_full_events_filters_by_category(logger_factory) -> None:
    recorder = _Recorder(
        {
            EVENTBRITE_SEARCH_URL: httpx.Response(200, json=_eventbrite_payload()),
            TICKETMASTER_EVENTS_URL: httpx.Response(200, json=_ticketmaster_payload()),
        }
    )
    service = _service(recorder, logger_factory)
    result = asyncio.run(service.full_events("sanjose", "sports"))
    assert result["city"] == "sanjose"
    assert result["category"] == "sports"
    assert [event["id"] for event in result["events"]] == ["tm-a"]


def test_full_events_empty_returns_message(logger_factory) -> None:
    service = _service(_Recorder({}), logger_factory, config={})
    result = asyncio.run(service.full_events("nowhere", None))
    assert result == {"events": [], "city": "sanjose", "message": NO_EVENTS_MESSAGE}


def test_live_events_filters_county_and_date(logger_factory) -> None:
    payload = {
        "_embedded": {
            "events": [
                {
                    "id": "keep",
                    "name": "Concert",
                    "dates": {"start": {"localDate": "2025-06-02", "localTime": "19:00:00"}},
                    "images": [
                        {"url": "https://img.example/small.jpg", "width": 300},
                        {"url": "https://img.example/wide.jpg", "width": 1024},
                    ],
                    "classifications": [{"segment": {"name": "Music"}}],
                    "_embedded": {"venues": [{"city": {"name": "San Jose"}}]},
                },
                {
                    "id": "past",
                    "name": "Old show",
                    "dates": {"start": {"localDate": "2025-05-30"}},
                    "_embedded": {"venues": [{"city": {"name": "Oakland"}}]},
                },
                {
                    "id": "far",
                    "name": "Reno show",
                    "dates": {"start": {"localDate": "2025-06-03"}},
                    "_embedded": {"venues": [{"city": {"name": "Reno"}}]},
                },
            ]
        }
    }
    recorder = _Recorder({TICKETMASTER_EVENTS_URL: httpx.Response(200, json=payload)})
    service = _service(recorder, logger_factory)
    events = asyncio.run(service.live_events(date(2025, 6, 1)))

    assert [event["id"] for event in events] == ["keep"]
    live = events[0]
    assert live["image"] == "https://img.example/wide.jpg"
    assert live["county"] == "Santa Clara"
    assert live["category"] == "Music"
    assert live["time"] == "19:00:00"
    params = recorder.requests[0].url.params
    assert params["latlong"] == "37.3382,-121.8863"


def test_live_events_requires_key(logger_factory) -> None:
    service = _service(_Recorder({}), logger_factory, config={})
    with pytest.raises(ProviderNotConfiguredError):
        asyncio.run(service.live_events(date(2025, 6, 1)))


def test_live_events_propagates_fetch_errors(logger_factory) -> None:
    recorder = _Recorder({TICKETMASTER_EVENTS_URL: httpx.Response(502)})
    service = _service(recorder, logger_factory)
    with pytest.raises(FetchError):
        asyncio.run(service.live_events(date(2025, 6, 1)))


def test_to_live_event_uses_fallback_image() -> None:
    event = to_live_event({"id": 5, "name": "x", "images": []}, "/fallback.jpg", 600)
    assert event.image == "/fallback.jpg"
    assert event.id == "5"
    assert event.county == ""
