"""Service for aggregating meeting-load statistics over an event snapshot."""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Sequence

from dateutil.relativedelta import relativedelta

from scheduling.domain.models import CalendarStats, Event


def has_external_attendees(event: Event) -> bool:
    return any(attendee.is_external for attendee in event.attendees)


def compute_stats(events: Sequence[Event]) -> CalendarStats:
    """Derive meeting-load metrics from *events*.

    Minutes are fractional and never rounded; ``average_duration`` is 0 for
    an empty snapshot.
    """
    total_meetings = len(events)
    total_minutes = sum((event.duration_minutes for event in events), 0.0)
    virtual_meetings = sum(1 for event in events if event.is_online)

    return CalendarStats(
        total_meetings=total_meetings,
        total_minutes=total_minutes,
        average_duration=total_minutes / total_meetings if total_meetings else 0.0,
        virtual_meetings=virtual_meetings,
        in_person_meetings=total_meetings - virtual_meetings,
        meetings_with_external_attendees=sum(
            1 for event in events if has_external_attendees(event)
        ),
    )


def month_bounds(now: datetime) -> tuple[datetime, datetime]:
    """Return the first and last instant of the month containing *now*."""
    first = now + relativedelta(day=1, hour=0, minute=0, second=0, microsecond=0)
    last = first + relativedelta(months=1) - timedelta(microseconds=1)
    return first, last
