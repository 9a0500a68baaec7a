"""FastAPI application, entry point for the calendar scheduling service."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Annotated

from fastapi import FastAPI, Header, HTTPException

from scheduling.core.config import load_config
from scheduling.domain.bus import EventBus
from scheduling.domain.errors import EventNotFoundError, SchedulingValidationError
from scheduling.domain.events import EventCreated, EventDeleted, EventUpdated
from scheduling.domain.handlers import HandlerRegistry
from scheduling.domain.models import (
    AvailabilityResponse,
    CalendarStats,
    ConflictCheckRequest,
    ConflictCheckResponse,
    CreateEventRequest,
    Event,
    EventPage,
    EventStatus,
    FindTimeRequest,
    FindTimeResponse,
    UpdateEventRequest,
)
from scheduling.repos.memory import EventRepository
from scheduling.services.engine import FIND_TIME_NOTE, SchedulingEngine
from scheduling.services.stats import month_bounds

config = load_config()
logging.basicConfig(level=config.log_level)
logger = logging.getLogger(__name__)

app = FastAPI(title="Calendar Scheduling Service")

# ── Singletons (created at import time for simplicity) ────────────────
event_bus = EventBus()
event_repo = EventRepository()
engine = SchedulingEngine(event_repo)

handler_registry = HandlerRegistry(bus=event_bus, event_repo=event_repo, engine=engine)

OwnerId = Annotated[str, Header(alias="X-User-Id")]


def _bad_request(exc: SchedulingValidationError) -> HTTPException:
    logger.info("rejected scheduling query: %s", exc)
    return HTTPException(status_code=400, detail=str(exc))


# ── Events ────────────────────────────────────────────────────────────


@app.get("/events", response_model=EventPage)
def list_events(
    owner_id: OwnerId,
    start: datetime | None = None,
    end: datetime | None = None,
    is_online: bool | None = None,
    status: EventStatus | None = None,
    limit: int = 50,
    offset: int = 0,
) -> EventPage:
    """Return the owner's events, filtered and paginated."""
    limit = max(1, min(limit, 200))
    items, total = event_repo.search(
        owner_id,
        start=start,
        end=end,
        is_online=is_online,
        status=status,
        limit=limit,
        offset=max(offset, 0),
    )
    return EventPage(items=items, total=total, limit=limit, offset=offset)


@app.post("/events", response_model=Event, status_code=201)
def create_event(owner_id: OwnerId, body: CreateEventRequest) -> Event:
    event = Event(owner_id=owner_id, **body.model_dump())
    event_repo.add(event)

    # Triggers the conflict re-check.
    event_bus.publish(EventCreated(event_id=event.id, owner_id=owner_id))
    return event_repo.get(event.id, owner_id)


@app.get("/events/{event_id}", response_model=Event)
def get_event(owner_id: OwnerId, event_id: str) -> Event:
    event = event_repo.get(event_id, owner_id)
    if event is None:
        raise HTTPException(status_code=404, detail="Event not found")
    return event


@app.patch("/events/{event_id}", response_model=Event)
def update_event(
    owner_id: OwnerId, event_id: str, body: UpdateEventRequest
) -> Event:
    try:
        event_repo.update(event_id, owner_id, body.model_dump(exclude_unset=True))
    except EventNotFoundError:
        raise HTTPException(status_code=404, detail="Event not found")
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc))

    event_bus.publish(EventUpdated(event_id=event_id, owner_id=owner_id))
    return event_repo.get(event_id, owner_id)


@app.delete("/events/{event_id}", status_code=200)
def delete_event(owner_id: OwnerId, event_id: str) -> dict:
    try:
        event_repo.delete(event_id, owner_id)
    except EventNotFoundError:
        raise HTTPException(status_code=404, detail="Event not found")
    event_bus.publish(EventDeleted(event_id=event_id, owner_id=owner_id))
    return {"status": "deleted"}


# ── Calendar queries ──────────────────────────────────────────────────


@app.get("/calendar/today", response_model=list[Event])
def today_events(owner_id: OwnerId, now: datetime | None = None) -> list[Event]:
    """Events starting today. Pass *now* to pin the clock."""
    return engine.get_today_events(owner_id, now or datetime.now(timezone.utc))


@app.get("/calendar/stats", response_model=CalendarStats)
def calendar_stats(
    owner_id: OwnerId,
    start: datetime | None = None,
    end: datetime | None = None,
    now: datetime | None = None,
) -> CalendarStats:
    """Meeting-load statistics; defaults to the current month."""
    month_start, month_end = month_bounds(now or datetime.now(timezone.utc))
    try:
        return engine.get_stats(owner_id, start or month_start, end or month_end)
    except SchedulingValidationError as exc:
        raise _bad_request(exc)


@app.get("/calendar/availability", response_model=AvailabilityResponse)
def availability(
    owner_id: OwnerId,
    start: datetime,
    end: datetime,
    duration: int | None = None,
    buffer_minutes: int | None = None,
    work_start: str | None = None,
    work_end: str | None = None,
) -> AvailabilityResponse:
    try:
        slots = engine.find_slots(
            owner_id,
            start,
            end,
            duration if duration is not None else config.default_duration_minutes,
            work_start=work_start or config.work_start,
            work_end=work_end or config.work_end,
            buffer_minutes=(
                buffer_minutes if buffer_minutes is not None else config.buffer_minutes
            ),
        )
    except SchedulingValidationError as exc:
        raise _bad_request(exc)
    return AvailabilityResponse(slots=slots)


@app.post("/calendar/find-time", response_model=FindTimeResponse)
def find_time(owner_id: OwnerId, body: FindTimeRequest) -> FindTimeResponse:
    """Find free time for a meeting; only the requester's calendar is consulted."""
    try:
        slots = engine.find_time(
            owner_id,
            body.start_date,
            body.end_date,
            body.duration,
            limit=config.find_time_max_slots,
        )
    except SchedulingValidationError as exc:
        raise _bad_request(exc)
    return FindTimeResponse(slots=slots, attendees=body.attendees, note=FIND_TIME_NOTE)


@app.post("/calendar/conflicts", response_model=ConflictCheckResponse)
def check_conflicts(owner_id: OwnerId, body: ConflictCheckRequest) -> ConflictCheckResponse:
    conflicts = engine.find_conflicts(
        owner_id, body.start_time, body.end_time, body.exclude_event_id
    )
    return ConflictCheckResponse(has_conflict=bool(conflicts), conflicts=conflicts)
