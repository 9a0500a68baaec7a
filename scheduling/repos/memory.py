"""In-memory event repository, the persistence collaborator of the engine."""

from __future__ import annotations

from datetime import datetime

from scheduling.domain.errors import EventNotFoundError
from scheduling.domain.models import Event, EventStatus, ensure_aware


class EventRepository:
    """Dict-backed store for Event instances, keyed by id.

    Reads hand out deep copies so callers only ever see snapshots.
    """

    def __init__(self) -> None:
        self._store: dict[str, Event] = {}

    def add(self, event: Event) -> None:
        self._store[event.id] = event

    def get(self, event_id: str, owner_id: str) -> Event | None:
        event = self._store.get(event_id)
        if event is None or event.owner_id != owner_id:
            return None
        return event.model_copy(deep=True)

    def _owned(self, event_id: str, owner_id: str) -> Event:
        event = self._store.get(event_id)
        if event is None or event.owner_id != owner_id:
            raise EventNotFoundError(event_id)
        return event

    def update(self, event_id: str, owner_id: str, changes: dict) -> Event:
        """Apply *changes* to an owned event, re-running model validation."""
        current = self._owned(event_id, owner_id)
        merged = Event.model_validate({**current.model_dump(), **changes})
        self._store[event_id] = merged
        return merged.model_copy(deep=True)

    def set_status(self, event_id: str, status: EventStatus) -> None:
        event = self._store.get(event_id)
        if event is not None:
            event.status = status

    def delete(self, event_id: str, owner_id: str) -> None:
        self._owned(event_id, owner_id)
        del self._store[event_id]

    def list_events(
        self,
        owner_id: str,
        start: datetime | None = None,
        end: datetime | None = None,
    ) -> list[Event]:
        return [event.model_copy(deep=True) for event in self._select(owner_id, start, end)]

    def search(
        self,
        owner_id: str,
        start: datetime | None = None,
        end: datetime | None = None,
        is_online: bool | None = None,
        status: EventStatus | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> tuple[list[Event], int]:
        """Filtered, paginated listing; returns the page and the total match count."""
        matches = [
            event
            for event in self._select(owner_id, start, end)
            if (is_online is None or event.is_online == is_online)
            and (status is None or event.status == status)
        ]
        page = matches[offset : offset + limit]
        return [event.model_copy(deep=True) for event in page], len(matches)

    def _select(
        self, owner_id: str, start: datetime | None, end: datetime | None
    ) -> list[Event]:
        start = ensure_aware(start) if start is not None else None
        end = ensure_aware(end) if end is not None else None
        return sorted(
            (
                event
                for event in self._store.values()
                if event.owner_id == owner_id
                and (start is None or event.start_time >= start)
                and (end is None or event.start_time <= end)
            ),
            key=lambda e: e.start_time,
        )
