"""Domain events emitted when calendar events change."""

from __future__ import annotations

from pydantic import BaseModel


class EventCreated(BaseModel):
    """Fired when a new Event is persisted."""

    event_id: str
    owner_id: str


class EventUpdated(BaseModel):
    """Fired after an Event's fields have been changed."""

    event_id: str
    owner_id: str


class EventDeleted(BaseModel):
    event_id: str
    owner_id: str


class ConflictDetected(BaseModel):
    """Fired when an event overlaps other events of the same owner."""

    event_id: str
    owner_id: str
    conflicting_event_ids: list[str]
