import asyncio

import httpx

from src.collectors import RSSEventCollector, create_collector_by_name


def _rss(*items: str) -> bytes:
    return (
        '<?xml version="1.0" encoding="UTF-8"?><rss version="2.0"><channel><title>t</title>'
        + "".join(items)
        + "</channel></rss>"
    ).encode("utf-8")


def _item(title: str, link: str = "", pub_date: str = "", summary: str = "") -> str:
    parts = [f"<title>{title}</title>"] if title else []
    if link:
        parts.append(f"<link>{link}</link>")
    if pub_date:
        parts.append(f"<pubDate>{pub_date}</pubDate>")
    if summary:
        parts.append(f"<description>{summary}</description>")
    return "<item>" + "".join(parts) + "</item>"


async def _no_sleep(_delay: float) -> None:
    return None


def _collector(bodies, logger_factory, **kwargs) -> RSSEventCollector:
    def handler(request: httpx.Request) -> httpx.Response:
        body = bodies.get(str(request.url))
        if body is None:
            return httpx.Response(500)
        return httpx.Response(200, content=body)

    return RSSEventCollector(
        logger_factory,
        transport=httpx.MockTransport(handler),
        sleep=_no_sleep,
        rate_limiting={"max_retries": 0},
        **kwargs,
    )


def test_collect_limits_items_per_feed_and_uses_feed_city(logger_factory) -> None:
    feeds = [
        {"name": "Downtown", "url": "https://feeds.example/downtown", "city": "sanjose", "county": "Santa Clara County"},
        {"name": "Broken", "url": "https://feeds.example/broken", "city": "sanjose", "county": "Santa Clara County"},
    ]
    items = [
        _item(f"Evento {n}", f"https://sj.example/{n}", "Mon, 02 Jun 2025 18:00:00 GMT")
        for n in range(4)
    ]
    collector = _collector(
        {"https://feeds.example/downtown": _rss(*items)},
        logger_factory,
        feeds=feeds,
        regional_feeds=[],
        events_config={"rss_items_per_feed": 2},
    )
    events = asyncio.run(collector.collect())

    assert [event.title for event in events] == ["Evento 0", "Evento 1"]
    assert {event.city for event in events} == {"sanjose"}
    assert all(event.source == "rss" for event in events)
    assert collector.stats["errors"] == 1
    assert "events.rss.feed_failed" in logger_factory.module_logger.events()


def test_collect_regional_dedupes_by_link_and_sorts_newest_first(logger_factory) -> None:
    regional = [
        {"url": "https://news.example/a", "county": "Santa Clara"},
        {"url": "https://news.example/b", "county": "Alameda"},
    ]
    bodies = {
        "https://news.example/a": _rss(
            _item("Older", "https://story.example/1", "Mon, 02 Jun 2025 10:00:00 GMT"),
            _item("", "", "", "Solo texto"),
        ),
        "https://news.example/b": _rss(
            _item("Newer", "https://story.example/2", "Tue, 03 Jun 2025 10:00:00 GMT"),
            _item("Copy", "https://story.example/1", "Wed, 04 Jun 2025 10:00:00 GMT"),
        ),
    }
    collector = _collector(bodies, logger_factory, feeds=[], regional_feeds=regional)
    events = asyncio.run(collector.collect_regional())

    titles = [event.title for event in events]
    assert titles == ["Newer", "Older", "Untitled Event"]
    untitled = events[-1]
    assert untitled.description == "Solo texto"
    assert untitled.county == "Santa Clara"
    assert untitled.link is None
    older = events[1]
    assert older.id == "https://news.example/a-Older-Mon,02Jun202510:00:00GMT"
    assert older.description == "No description available."
    assert older.category == "General"
    assert older.source == "https://news.example/a"


def test_create_collector_by_name() -> None:
    collector = create_collector_by_name("rss_events", feeds=[], regional_feeds=[])
    assert isinstance(collector, RSSEventCollector)
