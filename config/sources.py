# config/sources.py
# Catálogo de fuentes RSS para El Águila
# ======================================

"""
Este archivo define todas las fuentes externas que el sitio agrega:

- NEWS_SOURCES: feeds de noticias por idioma ("es" / "en") y categoría.
- EVENT_RSS_FEEDS: calendarios comunitarios de San José.
- REGIONAL_EVENT_FEEDS: periódicos y portales turísticos de la región,
  cada uno etiquetado con su condado.

Las URLs de Google News se construyen con ``google_news_url`` para que el
idioma y la región queden siempre alineados con el catálogo.
"""

from typing import Dict, List
from urllib.parse import urlparse

# Categorías de noticias
# ======================
# El orden importa: es el orden en que se muestran en el sitio.

NEWS_CATEGORIES = (
    "deportes",
    "tecnologia",
    "negocios",
    "internacional",
    "cultura",
    "local",
    "ultimas",
    "tendencias",
)

DEFAULT_NEWS_CATEGORY = "ultimas"


def google_news_url(query: str, lang: str) -> str:
    """URL de búsqueda RSS de Google News para Estados Unidos."""
    return f"https://news.google.com/rss/search?q={query}&hl={lang}&gl=US&ceid=US:{lang}"


# Catálogo en español
# ===================

SOURCES_ES: Dict[str, List[str]] = {
    "deportes": [
        "https://www.univision.com/feeds/sports.xml",
        "https://www.telemundodeportes.com/rss.xml",
        "https://www.espn.com/espn/rss/news",
        google_news_url("deportes+latinoamerica", "es"),
    ],
    "tecnologia": [
        "https://www.xataka.com/tag/rss",
        "https://cnnespanol.cnn.com/category/tecnologia/rss",
        google_news_url("tecnologia+latinoamerica", "es"),
    ],
    "negocios": [
        "https://cnnespanol.cnn.com/category/economia/rss",
        "https://www.forbes.com.mx/feed/",
        google_news_url("negocios+latinoamerica", "es"),
    ],
    "internacional": [
        "https://www.bbc.com/mundo/ultimas_noticias/index.xml",
        "https://cnnespanol.cnn.com/category/internacional/rss",
        google_news_url("noticias+internacionales", "es"),
    ],
    "cultura": [
        "https://www.univision.com/feeds/entertainment.xml",
        "https://www.telemundo.com/rss/entretenimiento",
        "https://peopleenespanol.com/feed/",
        google_news_url("cultura+latina", "es"),
    ],
    "local": [
        google_news_url("San+Jose+CA+noticias", "es"),
        "https://www.nbcbayarea.com/feed/",
        "https://www.telemundoareadelabahia.com/feed/",
    ],
    "ultimas": [google_news_url("noticias+latinoamerica", "es")],
    "tendencias": [google_news_url("tendencias+latinoamerica", "es")],
}

# Catálogo en inglés
# ==================

SOURCES_EN: Dict[str, List[str]] = {
    "deportes": [
        "https://www.espn.com/espn/rss/news",
        google_news_url("latino+sports", "en"),
    ],
    "tecnologia": [
        "https://www.theverge.com/rss/index.xml",
        "https://www.engadget.com/rss.xml",
        google_news_url("technology+latino", "en"),
    ],
    "negocios": [
        "https://www.cnbc.com/id/10001147/device/rss/rss.html",
        "https://www.reuters.com/finance/rss",
        google_news_url("latino+business", "en"),
    ],
    "internacional": [
        "https://feeds.bbci.co.uk/news/world/rss.xml",
        "https://rss.cnn.com/rss/cnn_world.rss",
        google_news_url("latin+america+news", "en"),
    ],
    "cultura": [
        google_news_url("latino+culture", "en"),
        "https://www.nbcnews.com/latino/latino-news/rss.xml",
    ],
    "local": [
        google_news_url("San+Jose+CA+news", "en"),
        "https://www.nbcbayarea.com/feed/",
    ],
    "ultimas": [google_news_url("latino+news", "en")],
    "tendencias": [google_news_url("trending+latino", "en")],
}

NEWS_SOURCES: Dict[str, Dict[str, List[str]]] = {"es": SOURCES_ES, "en": SOURCES_EN}

# Palabras clave para miniaturas de respaldo
# ==========================================
# Se revisan en orden; la primera coincidencia en el título gana.

THUMBNAIL_KEYWORDS = (
    (("deporte", "sport"), "deportes"),
    (("tech", "tecnolog"), "tecnologia"),
    (("negocio", "business"), "negocios"),
    (("internacional", "international"), "internacional"),
    (("cultura", "culture"), "cultura"),
    (("local",), "local"),
    (("tendencia", "trend"), "tendencias"),
)

# Calendarios comunitarios
# ========================
# Todos cubren San José; los eventos se normalizan con esa ciudad.

EVENT_RSS_FEEDS = [
    {
        "name": "Downtown San Jose Events",
        "url": "https://sjdowntown.com/events/feed/",
        "city": "sanjose",
        "county": "Santa Clara County",
    },
    {
        "name": "City of San Jose Calendar",
        "url": "https://www.sanjoseca.gov/Home/Components/News/NewsFeed?format=rss",
        "city": "sanjose",
        "county": "Santa Clara County",
    },
    {
        "name": "San Jose Library Events",
        "url": "https://events.sjpl.org/events/feed/rss",
        "city": "sanjose",
        "county": "Santa Clara County",
    },
    {
        "name": "Eventbrite Regional Feed",
        "url": "https://www.eventbrite.com/d/ca--san-jose/events--rss/",
        "city": "sanjose",
        "county": "Santa Clara County",
    },
    {
        "name": "San Jose Family Events (Meetup)",
        "url": "https://www.meetup.com/sanjose-family-events/events/rss/",
        "city": "sanjose",
        "county": "Santa Clara County",
    },
    {
        "name": "San Jose Social Events (Meetup)",
        "url": "https://www.meetup.com/sanjose-social-events/events/rss/",
        "city": "sanjose",
        "county": "Santa Clara County",
    },
]

# Feeds regionales
# ================

REGIONAL_EVENT_FEEDS = [
    {"url": "https://www.mercurynews.com/feed/", "county": "Santa Clara"},
    {"url": "https://www.eastbaytimes.com/feed/", "county": "Alameda"},
    {"url": "https://www.visitcalifornia.com/events/rss.xml", "county": "California"},
    {"url": "https://www.sanjose.org/events/rss", "county": "Santa Clara"},
    {"url": "https://www.sftravel.com/events/rss", "county": "San Francisco"},
]


def get_news_feeds(category, lang):
    """
    Devuelve (categoría efectiva, idioma efectivo, feeds).

    Cualquier idioma distinto de "en" usa el catálogo en español, y una
    categoría desconocida cae en "ultimas".
    """
    language = "en" if lang == "en" else "es"
    catalog = NEWS_SOURCES[language]
    effective = category if category in catalog else DEFAULT_NEWS_CATEGORY
    return effective, language, list(catalog[effective])


def _is_http_url(url):
    parsed = urlparse(url)
    return parsed.scheme in {"http", "https"} and bool(parsed.netloc)


def validate_sources():
    """
    Verifica que los catálogos estén completos y que todas las URLs sean válidas.
    """
    for language, catalog in NEWS_SOURCES.items():
        missing = [category for category in NEWS_CATEGORIES if category not in catalog]
        if missing:
            raise ValueError(f"Catálogo {language} sin categorías: {', '.join(missing)}")
        for category, urls in catalog.items():
            if not urls:
                raise ValueError(f"Categoría {language}/{category} no tiene feeds")
            for url in urls:
                if not _is_http_url(url):
                    raise ValueError(f"URL inválida en {language}/{category}: {url}")

    for feed in [*EVENT_RSS_FEEDS, *REGIONAL_EVENT_FEEDS]:
        if not _is_http_url(feed["url"]):
            raise ValueError(f"URL de eventos inválida: {feed['url']}")
        if not feed.get("county"):
            raise ValueError(f"Feed de eventos sin condado: {feed['url']}")
