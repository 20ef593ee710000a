"""
LEONIX Pro video metadata embedded in a listing description.

Current format::

    [LEONIX_PRO_VIDEO]
    url=https://...
    thumb=https://...
    [/LEONIX_PRO_VIDEO]

Older listings carry a human-readable section instead::

    — Video (Pro) —
    Video: https://...
    Thumbnail: https://...      (or Miniatura:)
"""

from __future__ import annotations

import re
from typing import Optional, TypedDict

LEGACY_MARKER = "— Video (Pro) —"

_BLOCK = re.compile(r"\[LEONIX_PRO_VIDEO\](.*?)\[/LEONIX_PRO_VIDEO\]", re.S)
_BLOCK_URL = re.compile(r"^\s*url\s*=\s*(.+?)\s*$", re.M)
_BLOCK_THUMB = re.compile(r"^\s*thumb\s*=\s*(.+?)\s*$", re.M)
_LEGACY_URL = re.compile(r"^\s*Video:\s*(.+?)\s*$", re.M)
_LEGACY_THUMB = re.compile(r"^\s*(?:Thumbnail|Miniatura):\s*(.+?)\s*$", re.M)


class ProVideoInfo(TypedDict, total=False):
    url: str
    thumbUrl: str


def _build(url_match, thumb_match) -> Optional[ProVideoInfo]:
    url = url_match.group(1).strip() if url_match else ""
    if not url:
        return None
    info: ProVideoInfo = {"url": url}
    thumb = thumb_match.group(1).strip() if thumb_match else ""
    if thumb:
        info["thumbUrl"] = thumb
    return info


def extract_pro_video_info(description: Optional[str]) -> Optional[ProVideoInfo]:
    if not description:
        return None

    block = _BLOCK.search(description)
    if block and block.group(1):
        body = block.group(1)
        info = _build(_BLOCK_URL.search(body), _BLOCK_THUMB.search(body))
        if info:
            return info

    idx = description.find(LEGACY_MARKER)
    if idx >= 0:
        tail = description[idx:]
        return _build(_LEGACY_URL.search(tail), _LEGACY_THUMB.search(tail))

    return None
