"""Errors raised by the scheduling engine and its collaborators."""

from __future__ import annotations


class SchedulingValidationError(ValueError):
    """Bad input to a scheduling query (working hours, duration, range)."""


class EventNotFoundError(LookupError):
    """The event does not exist or belongs to another owner."""

    def __init__(self, event_id: str) -> None:
        super().__init__(f"Event {event_id} not found")
        self.event_id = event_id
