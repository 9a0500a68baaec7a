"""Domain models for the calendar scheduling service."""

from __future__ import annotations

import uuid
from datetime import datetime, time, timezone
from enum import StrEnum

from pydantic import BaseModel, Field, field_validator, model_validator


class EventStatus(StrEnum):
    CONFIRMED = "confirmed"
    TENTATIVE = "tentative"
    CONFLICTED = "conflicted"
    CANCELLED = "cancelled"


class ResponseStatus(StrEnum):
    NEEDS_ACTION = "needsAction"
    ACCEPTED = "accepted"
    DECLINED = "declined"
    TENTATIVE = "tentative"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _new_id() -> str:
    return str(uuid.uuid4())


def ensure_aware(value: datetime) -> datetime:
    """Read naive datetimes as UTC so every instant sits on one timeline."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


# ---------------------------------------------------------------------------
# Core domain models
# ---------------------------------------------------------------------------


class Attendee(BaseModel):
    email: str
    name: str | None = None
    organizer: bool | None = None
    status: ResponseStatus | None = None

    @property
    def is_external(self) -> bool:
        """Anyone not flagged as organizer counts as external exposure."""
        return not self.organizer


class Event(BaseModel):
    id: str = Field(default_factory=_new_id)
    owner_id: str
    title: str
    start_time: datetime
    end_time: datetime
    timezone: str = "UTC"
    location: str | None = None
    description: str | None = None
    is_online: bool = False
    meeting_url: str | None = None
    attendees: list[Attendee] = Field(default_factory=list)
    status: EventStatus = EventStatus.CONFIRMED
    created_at: datetime = Field(default_factory=_utcnow)

    @field_validator("start_time", "end_time")
    @classmethod
    def _aware_times(cls, value: datetime) -> datetime:
        return ensure_aware(value)

    @model_validator(mode="after")
    def _end_after_start(self) -> Event:
        if self.end_time <= self.start_time:
            raise ValueError("end_time must be after start_time")
        return self

    @property
    def duration_minutes(self) -> float:
        return (self.end_time - self.start_time).total_seconds() / 60


class TimeRange(BaseModel):
    """Half-open interval ``[start, end)``."""

    start: datetime
    end: datetime

    def overlaps(self, other: TimeRange) -> bool:
        return self.start < other.end and other.start < self.end


class Slot(TimeRange):
    """A free interval produced by the slot finder."""


class WorkingHours(BaseModel):
    start: time
    end: time


class CalendarStats(BaseModel):
    total_meetings: int = 0
    total_minutes: float = 0.0
    average_duration: float = 0.0
    virtual_meetings: int = 0
    in_person_meetings: int = 0
    meetings_with_external_attendees: int = 0


# ---------------------------------------------------------------------------
# Request / Response DTOs
# ---------------------------------------------------------------------------


class CreateEventRequest(BaseModel):
    title: str
    start_time: datetime
    end_time: datetime
    timezone: str = "UTC"
    location: str | None = None
    description: str | None = None
    is_online: bool = False
    meeting_url: str | None = None
    attendees: list[Attendee] = Field(default_factory=list)
    status: EventStatus = EventStatus.CONFIRMED

    @field_validator("start_time", "end_time")
    @classmethod
    def _aware_times(cls, value: datetime) -> datetime:
        return ensure_aware(value)

    @model_validator(mode="after")
    def _end_after_start(self) -> CreateEventRequest:
        if self.end_time <= self.start_time:
            raise ValueError("end_time must be after start_time")
        return self


class UpdateEventRequest(BaseModel):
    title: str | None = None
    start_time: datetime | None = None
    end_time: datetime | None = None
    timezone: str | None = None
    location: str | None = None
    description: str | None = None
    is_online: bool | None = None
    meeting_url: str | None = None
    attendees: list[Attendee] | None = None
    status: EventStatus | None = None

    @field_validator("start_time", "end_time")
    @classmethod
    def _aware_times(cls, value: datetime | None) -> datetime | None:
        return ensure_aware(value) if value is not None else None


class ConflictCheckRequest(BaseModel):
    start_time: datetime
    end_time: datetime
    exclude_event_id: str | None = None

    @field_validator("start_time", "end_time")
    @classmethod
    def _aware_times(cls, value: datetime) -> datetime:
        return ensure_aware(value)


class ConflictCheckResponse(BaseModel):
    has_conflict: bool
    conflicts: list[Event] = Field(default_factory=list)


class FindTimeRequest(BaseModel):
    attendees: list[str] = Field(default_factory=list)
    duration: int = Field(default=30, gt=0)
    start_date: datetime
    end_date: datetime

    @field_validator("start_date", "end_date")
    @classmethod
    def _aware_dates(cls, value: datetime) -> datetime:
        return ensure_aware(value)


class FindTimeResponse(BaseModel):
    slots: list[Slot]
    attendees: list[str]
    note: str


class AvailabilityResponse(BaseModel):
    slots: list[Slot]


class EventPage(BaseModel):
    items: list[Event]
    total: int
    limit: int
    offset: int
