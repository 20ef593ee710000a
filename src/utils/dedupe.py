"""Order-preserving deduplication helpers."""

from __future__ import annotations

import hashlib
from typing import Callable, Hashable, Iterable, List, Optional, TypeVar

T = TypeVar("T")


def sha256_hex(text: str) -> str:
    return hashlib.sha256(text.encode("utf-8")).hexdigest()


def dedupe_by_key(
    items: Iterable[T], key: Callable[[T], Optional[Hashable]]
) -> List[T]:
    """Keep the first item for every key; items whose key is ``None`` are always kept."""
    seen: set = set()
    result: List[T] = []
    for item in items:
        marker = key(item)
        if marker is None:
            result.append(item)
            continue
        if marker in seen:
            continue
        seen.add(marker)
        result.append(item)
    return result
