from __future__ import annotations

import html as _html
import re
import unicodedata
from typing import Iterable, Optional

from bs4 import BeautifulSoup


_BOILERPLATE_PATTERNS: Iterable[re.Pattern] = [
    re.compile(r"^\s*(read more|leer m[aá]s)\s*$", re.I),
    re.compile(r"^\s*continue reading\s*$", re.I),
    re.compile(r"^\s*the post .* appeared first on .*", re.I),
]
_SEARCH_DISALLOWED = re.compile(r"[^a-z0-9\s-]")
_KEY_DISALLOWED = re.compile(r"[^a-z0-9\s]")


def normalize_text(text: str) -> str:
    if not text:
        return ""
    text = _html.unescape(text)
    text = unicodedata.normalize("NFKC", text)
    text = text.replace("\x00", "").replace("\r", " ").replace("\n", " ")
    return " ".join(text.split())


def clean_html(html: str) -> str:
    """Plain-text rendition of a feed summary, boilerplate lines removed."""
    if not html:
        return ""
    soup = BeautifulSoup(html, "html.parser")
    for tag in soup(["script", "style", "noscript"]):
        tag.decompose()
    for node in list(soup.find_all(string=True)):
        if any(p.search(normalize_text(str(node))) for p in _BOILERPLATE_PATTERNS):
            node.extract()
    return normalize_text(soup.get_text(" "))


def extract_first_image(html: str) -> Optional[str]:
    """``src`` of the first ``<img>`` in an HTML fragment, if any."""
    if not html or "<img" not in html.lower():
        return None
    img = BeautifulSoup(html, "html.parser").find("img", src=True)
    if img is None:
        return None
    src = img["src"].strip()
    return src or None


def fold_accents(text: str) -> str:
    decomposed = unicodedata.normalize("NFD", text or "")
    return "".join(ch for ch in decomposed if unicodedata.category(ch) != "Mn")


def normalize_search_text(text: str) -> str:
    """Lowercase, accent-free text limited to letters, digits, spaces and dashes."""
    folded = fold_accents((text or "").strip().lower())
    return " ".join(_SEARCH_DISALLOWED.sub("", folded).split())


def normalize_key(text: str) -> str:
    """Comparison key for near-identical titles: like search text without dashes."""
    folded = fold_accents((text or "").lower())
    return " ".join(_KEY_DISALLOWED.sub("", " ".join(folded.split())).split())
