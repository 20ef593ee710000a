from __future__ import annotations

from typing import Iterable, List

from src.utils.dedupe import dedupe_by_key

from .models import UnifiedEvent


def event_dedupe_key(event: UnifiedEvent) -> str:
    """Source URL, else title + start date, else id."""
    if event.source_url:
        return event.source_url.lower().strip()
    if event.title and event.start_date:
        return (event.title + event.start_date).lower().strip()
    return event.id.lower().strip()


def dedupe_events(events: Iterable[UnifiedEvent]) -> List[UnifiedEvent]:
    """First occurrence wins; order is preserved."""
    return dedupe_by_key(events, event_dedupe_key)
