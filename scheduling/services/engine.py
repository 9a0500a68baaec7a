"""Owner-facing scheduling operations over an event snapshot provider."""

from __future__ import annotations

import logging
from datetime import date, datetime, time, tzinfo
from typing import Protocol

from scheduling.domain.models import CalendarStats, Event, Slot, ensure_aware
from scheduling.services.conflicts import find_conflicts
from scheduling.services.slots import (
    DEFAULT_BUFFER_MINUTES,
    DEFAULT_WORK_END,
    DEFAULT_WORK_START,
    find_slots,
    validate_range,
)
from scheduling.services.stats import compute_stats

logger = logging.getLogger(__name__)

FIND_TIME_NOTE = (
    "Slots shown are based on your calendar. "
    "Attendee availability would require calendar integration."
)


class EventSnapshotProvider(Protocol):
    def list_events(
        self,
        owner_id: str,
        start: datetime | None = None,
        end: datetime | None = None,
    ) -> list[Event]:
        """Return copies of the owner's events starting within ``[start, end]``.

        Either bound may be omitted. Results are sorted by start ascending.
        """
        ...


class SchedulingEngine:
    """Fetches a snapshot per call and runs the pure scheduling functions on it.

    Holds no state besides the provider, so concurrent calls never interfere.
    Naive datetimes are read as UTC before the provider is queried.
    Provider errors propagate to the caller untouched.
    """

    def __init__(self, provider: EventSnapshotProvider) -> None:
        self.provider = provider

    # ------------------------------------------------------------------
    # Conflicts
    # ------------------------------------------------------------------

    def find_conflicts(
        self,
        owner_id: str,
        candidate_start: datetime,
        candidate_end: datetime,
        exclude_event_id: str | None = None,
    ) -> list[Event]:
        candidate_start, candidate_end = ensure_aware(candidate_start), ensure_aware(candidate_end)
        # Events that began before the candidate may still overlap it.
        snapshot = self.provider.list_events(owner_id, end=candidate_end)
        return find_conflicts(candidate_start, candidate_end, snapshot, exclude_event_id)

    def has_conflict(
        self,
        owner_id: str,
        candidate_start: datetime,
        candidate_end: datetime,
        exclude_event_id: str | None = None,
    ) -> bool:
        return bool(
            self.find_conflicts(owner_id, candidate_start, candidate_end, exclude_event_id)
        )

    # ------------------------------------------------------------------
    # Slots
    # ------------------------------------------------------------------

    def find_slots(
        self,
        owner_id: str,
        range_start: datetime,
        range_end: datetime,
        duration_minutes: int,
        work_start: str = DEFAULT_WORK_START,
        work_end: str = DEFAULT_WORK_END,
        buffer_minutes: int = DEFAULT_BUFFER_MINUTES,
    ) -> list[Slot]:
        range_start, range_end = ensure_aware(range_start), ensure_aware(range_end)
        validate_range(range_start, range_end)
        snapshot = self.provider.list_events(owner_id, range_start, range_end)
        logger.debug("slot search for %s over %d events", owner_id, len(snapshot))
        return find_slots(
            snapshot,
            range_start,
            range_end,
            duration_minutes,
            work_start=work_start,
            work_end=work_end,
            buffer_minutes=buffer_minutes,
        )

    def find_time(
        self,
        owner_id: str,
        range_start: datetime,
        range_end: datetime,
        duration_minutes: int,
        limit: int = 10,
    ) -> list[Slot]:
        """First *limit* slots for the requesting user only."""
        return self.find_slots(owner_id, range_start, range_end, duration_minutes)[:limit]

    # ------------------------------------------------------------------
    # Statistics and day views
    # ------------------------------------------------------------------

    def get_stats(
        self, owner_id: str, range_start: datetime, range_end: datetime
    ) -> CalendarStats:
        range_start, range_end = ensure_aware(range_start), ensure_aware(range_end)
        validate_range(range_start, range_end)
        snapshot = self.provider.list_events(owner_id, range_start, range_end)
        return compute_stats(snapshot)

    def get_day_events(
        self, owner_id: str, day: date, tz: tzinfo | None = None
    ) -> list[Event]:
        start = ensure_aware(datetime.combine(day, time.min, tzinfo=tz))
        end = ensure_aware(datetime.combine(day, time.max, tzinfo=tz))
        return self.provider.list_events(owner_id, start, end)

    def get_today_events(self, owner_id: str, now: datetime) -> list[Event]:
        return self.get_day_events(owner_id, now.date(), now.tzinfo)
