import asyncio
from datetime import datetime, timezone

import httpx
import pytest

from config.sources import get_news_feeds
from src.collectors import NewsFeedCollector, fallback_thumbnail
from src.utils.cache import ResponseCache


def _rss(*items: str) -> bytes:
    return (
        '<?xml version="1.0" encoding="UTF-8"?><rss version="2.0"><channel><title>t</title>'
        + "".join(items)
        + "</channel></rss>"
    ).encode("utf-8")


def _item(title: str, link: str, pub_date: str = "", description: str = "") -> str:
    pub = f"<pubDate>{pub_date}</pubDate>" if pub_date else ""
    return (
        f"<item><title>{title}</title><link>{link}</link>{pub}"
        f"<description><![CDATA[{description}]]></description></item>"
    )


def _collector(handler, logger_factory, **kwargs) -> NewsFeedCollector:
    async def no_sleep(_delay: float) -> None:
        return None

    return NewsFeedCollector(
        logger_factory,
        transport=httpx.MockTransport(handler),
        sleep=no_sleep,
        clock=lambda: datetime(2025, 5, 1, tzinfo=timezone.utc),
        **kwargs,
    )


def test_collect_merges_feeds_newest_first(logger_factory) -> None:
    _category, _lang, feeds = get_news_feeds("deportes", "es")
    bodies = {
        feeds[0]: _rss(
            _item("Gol de último minuto", "https://a.example/1", "Tue, 01 Apr 2025 10:00:00 GMT",
                  '<p>Resumen</p><img src="https://img.example/1.jpg">'),
        ),
        feeds[1]: _rss(
            _item("Final del torneo", "https://b.example/2", "Wed, 02 Apr 2025 10:00:00 GMT"),
        ),
    }

    def handler(request: httpx.Request) -> httpx.Response:
        body = bodies.get(str(request.url))
        if body is None:
            return httpx.Response(404)
        return httpx.Response(200, content=body)

    collector = _collector(handler, logger_factory)
    result = asyncio.run(collector.collect("deportes", "es"))

    assert result["category"] == "deportes"
    assert result["lang"] == "es"
    assert result["count"] == 2
    assert [item["title"] for item in result["items"]] == ["Final del torneo", "Gol de último minuto"]
    first = result["items"][1]
    assert first["img"] == "https://img.example/1.jpg"
    assert first["desc"] == "Resumen"
    assert first["date"] == "2025-04-01T10:00:00.000Z"
    assert "news.feed.failed" in logger_factory.module_logger.events()


def test_unknown_category_and_language_fall_back(logger_factory) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, content=_rss())

    collector = _collector(handler, logger_factory)
    result = asyncio.run(collector.collect("astrologia", "fr"))
    assert (result["category"], result["lang"]) == ("ultimas", "es")
    assert result["items"] == []


def test_missing_date_uses_clock(logger_factory) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, content=_rss(_item("Sin fecha", "https://c.example/3")))

    collector = _collector(handler, logger_factory)
    result = asyncio.run(collector.collect("local", "en"))
    assert result["items"][0]["date"] == "2025-05-01T00:00:00.000Z"


def test_results_are_cached_per_language_and_category(logger_factory) -> None:
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(str(request.url))
        return httpx.Response(200, content=_rss())

    collector = _collector(handler, logger_factory, cache=ResponseCache(max_size=4, ttl=60))
    asyncio.run(collector.collect("negocios", "en"))
    first_round = len(calls)
    asyncio.run(collector.collect("negocios", "en"))
    assert len(calls) == first_round
    asyncio.run(collector.collect("negocios", "es"))
    assert len(calls) > first_round


def test_retries_retryable_status_then_succeeds(logger_factory) -> None:
    attempts = {"count": 0}

    def handler(request: httpx.Request) -> httpx.Response:
        attempts["count"] += 1
        if attempts["count"] == 1:
            return httpx.Response(503)
        return httpx.Response(200, content=_rss(_item("Ok", "https://d.example/4")))

    collector = _collector(
        handler,
        logger_factory,
        collection_config={"max_concurrent_requests": 1},
        rate_limiting={"max_retries": 1},
    )
    response = asyncio.run(_fetch_one(collector, "https://feed.example/rss"))
    assert response.status_code == 200
    assert attempts["count"] == 2
    assert "news.request.retry" in logger_factory.module_logger.events()


def test_retries_read_timeout_then_succeeds(logger_factory) -> None:
    attempts = {"count": 0}

    def handler(request: httpx.Request) -> httpx.Response:
        attempts["count"] += 1
        if attempts["count"] == 1:
            raise httpx.ReadTimeout("slow feed", request=request)
        return httpx.Response(200, content=_rss(_item("Ok", "https://d.example/4")))

    collector = _collector(handler, logger_factory, rate_limiting={"max_retries": 1})
    response = asyncio.run(_fetch_one(collector, "https://feed.example/rss"))
    assert response.status_code == 200
    assert attempts["count"] == 2
    assert "news.request.retry" in logger_factory.module_logger.events()


def test_items_are_truncated_to_max_items(logger_factory) -> None:
    _category, _lang, feeds = get_news_feeds("local", "es")
    body = _rss(
        *(
            _item(f"Nota {i}", f"https://e.example/{i}", f"Tue, 01 Apr 2025 10:{i:02d}:00 GMT")
            for i in range(45)
        )
    )

    def handler(request: httpx.Request) -> httpx.Response:
        if str(request.url) == feeds[1]:
            return httpx.Response(200, content=body)
        return httpx.Response(200, content=_rss())

    result = asyncio.run(_collector(handler, logger_factory).collect("local", "es"))
    assert result["count"] == 40
    assert result["items"][0]["title"] == "Nota 44"
    assert result["items"][-1]["title"] == "Nota 5"

    small = _collector(handler, logger_factory, news_config={"max_items": 3})
    assert [item["title"] for item in asyncio.run(small.collect("local", "es"))["items"]] == [
        "Nota 44",
        "Nota 43",
        "Nota 42",
    ]


async def _fetch_one(collector: NewsFeedCollector, url: str) -> httpx.Response:
    async with collector._client() as client:
        return await collector._request(client, url)


@pytest.mark.parametrize(
    ("title", "category", "expected"),
    [
        ("Big Tech earnings", "negocios", "/thumbs/thumb_tecnologia.png"),
        ("Noticias de deportes", "local", "/thumbs/thumb_deportes.png"),
        ("Resultados deportivos", "local", "/thumbs/thumb_local.png"),
        ("Sin palabras clave", "cultura", "/thumbs/thumb_cultura.png"),
        ("Sin palabras clave", "desconocida", "/thumbs/thumb_ultimas.png"),
    ],
)
def test_fallback_thumbnail(title: str, category: str, expected: str) -> None:
    assert fallback_thumbnail(title, category) == expected
