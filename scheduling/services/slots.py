"""Service for finding open meeting slots inside working hours.

The search is greedy left-to-right: each weekday is folded over its events in
start order, carrying a ``(cursor, slots)`` state. A gap before an event yields
at most one slot at its left edge, and the cursor always moves to
``event.end + buffer`` (never earlier than the start of working hours)
whether or not the gap was usable. No slot ever ends after working hours.
"""

from __future__ import annotations

import logging
import re
from datetime import date, datetime, time, timedelta, tzinfo
from functools import reduce
from itertools import chain, groupby
from typing import NamedTuple, Sequence

from dateutil.rrule import DAILY, FR, MO, TH, TU, WE, rrule

from scheduling.domain.errors import SchedulingValidationError
from scheduling.domain.models import Event, Slot, WorkingHours, ensure_aware

logger = logging.getLogger(__name__)

DEFAULT_WORK_START = "09:00"
DEFAULT_WORK_END = "17:00"
DEFAULT_BUFFER_MINUTES = 15

_HH_MM = re.compile(r"^(\d{1,2}):(\d{2})$")
_WEEKDAYS = (MO, TU, WE, TH, FR)


class _DayState(NamedTuple):
    cursor: datetime
    slots: tuple[Slot, ...]


def parse_time_of_day(value: str) -> time:
    """Parse a 24-hour ``HH:MM`` string."""
    match = _HH_MM.match(value.strip()) if isinstance(value, str) else None
    if match is None:
        raise SchedulingValidationError(f"Invalid time of day {value!r}, expected HH:MM")
    hour, minute = int(match.group(1)), int(match.group(2))
    if hour > 23 or minute > 59:
        raise SchedulingValidationError(f"Invalid time of day {value!r}, expected HH:MM")
    return time(hour, minute)


def parse_working_hours(start: str, end: str) -> WorkingHours:
    return WorkingHours(start=parse_time_of_day(start), end=parse_time_of_day(end))


def validate_range(range_start: datetime, range_end: datetime) -> None:
    if range_end < range_start:
        raise SchedulingValidationError("range end must not be before range start")


def eligible_days(first: date, last: date) -> tuple[date, ...]:
    """Monday-to-Friday dates from *first* to *last* inclusive."""
    if last < first:
        return ()
    rule = rrule(
        DAILY,
        dtstart=datetime.combine(first, time()),
        until=datetime.combine(last, time()),
        byweekday=_WEEKDAYS,
    )
    return tuple(dt.date() for dt in rule)


def _wall_clock(value: datetime, frame: tzinfo) -> datetime:
    """Express *value* in the calendar frame used to split days."""
    return ensure_aware(value).astimezone(frame)


def _events_by_day(
    events: Sequence[Event], frame: tzinfo
) -> dict[date, tuple[Event, ...]]:
    def day_of(event: Event) -> date:
        return _wall_clock(event.start_time, frame).date()

    return {day: tuple(group) for day, group in groupby(events, key=day_of)}


def _day_slots(
    day: date,
    day_events: Sequence[Event],
    hours: WorkingHours,
    duration: timedelta,
    buffer: timedelta,
    frame: tzinfo,
) -> tuple[Slot, ...]:
    day_start = datetime.combine(day, hours.start, tzinfo=frame)
    day_end = datetime.combine(day, hours.end, tzinfo=frame)

    def step(state: _DayState, event: Event) -> _DayState:
        slots = state.slots
        if event.start_time - state.cursor >= duration + buffer:
            slot_end = state.cursor + duration
            if slot_end <= event.start_time and slot_end <= day_end:
                slots = slots + (Slot(start=state.cursor, end=slot_end),)
        # An event ending before working hours leaves the cursor at day_start.
        cursor = max(event.end_time + buffer, day_start)
        return _DayState(cursor=cursor, slots=slots)

    final = reduce(step, day_events, _DayState(cursor=day_start, slots=()))
    if day_end - final.cursor >= duration:
        tail = Slot(start=final.cursor, end=final.cursor + duration)
        return final.slots + (tail,)
    return final.slots


def find_slots(
    events: Sequence[Event],
    range_start: datetime,
    range_end: datetime,
    duration_minutes: int,
    work_start: str = DEFAULT_WORK_START,
    work_end: str = DEFAULT_WORK_END,
    buffer_minutes: int = DEFAULT_BUFFER_MINUTES,
) -> list[Slot]:
    """Return free slots of exactly *duration_minutes* between the range bounds.

    *events* is the owner's snapshot, sorted by start. Working hours are
    wall-clock times applied in the timezone of *range_start*; naive
    bounds are read as UTC. Saturdays and Sundays never produce slots.
    """
    hours = parse_working_hours(work_start, work_end)
    if duration_minutes <= 0:
        raise SchedulingValidationError("duration must be a positive number of minutes")
    if buffer_minutes < 0:
        raise SchedulingValidationError("buffer must not be negative")
    range_start, range_end = ensure_aware(range_start), ensure_aware(range_end)
    validate_range(range_start, range_end)

    frame = range_start.tzinfo
    duration = timedelta(minutes=duration_minutes)
    buffer = timedelta(minutes=buffer_minutes)
    by_day = _events_by_day(events, frame)
    days = eligible_days(range_start.date(), _wall_clock(range_end, frame).date())

    slots = list(
        chain.from_iterable(
            _day_slots(day, by_day.get(day, ()), hours, duration, buffer, frame)
            for day in days
        )
    )
    logger.debug(
        "found %d slots over %d weekdays from %d events", len(slots), len(days), len(events)
    )
    return slots
