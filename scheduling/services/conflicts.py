"""Service for detecting scheduling conflicts between events."""

from __future__ import annotations

from datetime import datetime
from typing import Iterable

from scheduling.domain.models import Event, ensure_aware


def _overlaps(event: Event, start: datetime, end: datetime) -> bool:
    starts_inside = start <= event.start_time < end
    ends_inside = start < event.end_time <= end
    contains = event.start_time <= start and event.end_time >= end
    return starts_inside or ends_inside or contains


def find_conflicts(
    candidate_start: datetime,
    candidate_end: datetime,
    existing_events: Iterable[Event],
    exclude_event_id: str | None = None,
) -> list[Event]:
    """Return existing events that overlap ``[candidate_start, candidate_end)``.

    An event conflicts if it starts inside the candidate, ends inside it, or
    fully contains it. Touching endpoints (end == start) are NOT conflicts.
    A candidate with ``candidate_start >= candidate_end`` conflicts with nothing.
    Naive bounds are read as UTC.
    """
    candidate_start, candidate_end = ensure_aware(candidate_start), ensure_aware(candidate_end)
    if not candidate_start < candidate_end:
        return []
    return [
        event
        for event in existing_events
        if event.id != exclude_event_id
        and _overlaps(event, candidate_start, candidate_end)
    ]


def has_conflict(
    candidate_start: datetime,
    candidate_end: datetime,
    existing_events: Iterable[Event],
    exclude_event_id: str | None = None,
) -> bool:
    return bool(
        find_conflicts(candidate_start, candidate_end, existing_events, exclude_event_id)
    )
