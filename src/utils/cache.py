"""Small TTL cache for aggregated HTTP responses."""

from __future__ import annotations

from typing import Any, Callable, Hashable, Optional

from cachetools import TTLCache


class ResponseCache:
    """``cachetools.TTLCache`` keyed by request parameters.

    Entries expire after ``ttl`` seconds; once ``max_size`` is reached the
    least recently used entry is evicted. ``timer`` is injectable for tests.
    """

    def __init__(
        self,
        max_size: int = 256,
        ttl: float = 600,
        timer: Optional[Callable[[], float]] = None,
    ) -> None:
        if timer is None:
            self._cache: TTLCache = TTLCache(maxsize=max_size, ttl=ttl)
        else:
            self._cache = TTLCache(maxsize=max_size, ttl=ttl, timer=timer)

    def get(self, key: Hashable) -> Any | None:
        return self._cache.get(key)

    def set(self, key: Hashable, value: Any) -> None:
        self._cache[key] = value

    def __contains__(self, key: Hashable) -> bool:
        return key in self._cache

    def __len__(self) -> int:
        return len(self._cache)

    def clear(self) -> None:
        self._cache.clear()
