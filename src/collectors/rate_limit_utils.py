"""Retry classification and backoff delays for outbound feed/provider requests."""

from __future__ import annotations

import random
from typing import Any, Callable, Mapping, Optional

from config.settings import RATE_LIMITING_CONFIG

RETRYABLE_STATUS_CODES = frozenset({429, 500, 502, 503, 504})


def is_retryable_status(status_code: int) -> bool:
    return status_code in RETRYABLE_STATUS_CODES


def compute_backoff_delay(
    attempt: int,
    config: Optional[Mapping[str, Any]] = None,
    *,
    jitter: Optional[Callable[[float, float], float]] = None,
) -> float:
    """Exponential delay for ``attempt`` (0-based) plus random jitter, capped at ``backoff_max``."""

    settings = config if config is not None else RATE_LIMITING_CONFIG
    base = float(settings.get("backoff_base", 0.5))
    ceiling = float(settings.get("backoff_max", 10.0))
    jitter_max = float(settings.get("jitter_max", 0.3))
    draw = jitter or random.uniform
    return min(ceiling, base * (2**attempt) + draw(0, jitter_max))
