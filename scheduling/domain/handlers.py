"""Domain event handlers, wired up at application startup."""

from __future__ import annotations

import logging

from scheduling.domain.bus import EventBus
from scheduling.domain.events import (
    ConflictDetected,
    EventCreated,
    EventDeleted,
    EventUpdated,
)
from scheduling.domain.models import EventStatus
from scheduling.repos.memory import EventRepository
from scheduling.services.engine import SchedulingEngine

logger = logging.getLogger(__name__)


class HandlerRegistry:
    """Wires domain-event handlers to the bus with access to the repository."""

    def __init__(
        self,
        bus: EventBus,
        event_repo: EventRepository,
        engine: SchedulingEngine,
    ) -> None:
        self.bus = bus
        self.event_repo = event_repo
        self.engine = engine
        self._register()

    def _register(self) -> None:
        self.bus.subscribe(EventCreated, self.on_event_created)
        self.bus.subscribe(EventUpdated, self.on_event_updated)
        self.bus.subscribe(EventDeleted, self.on_event_deleted)
        self.bus.subscribe(ConflictDetected, self.on_conflict_detected)

    # ------------------------------------------------------------------
    # Handlers
    # ------------------------------------------------------------------

    def on_event_created(self, event: EventCreated) -> None:
        self._recheck_conflicts(event.event_id, event.owner_id)

    def on_event_updated(self, event: EventUpdated) -> None:
        stored = self.event_repo.get(event.event_id, event.owner_id)
        if stored is None:
            return
        conflicts = self._recheck_conflicts(event.event_id, event.owner_id)
        # An edit that moved the event clear of everything lifts the flag.
        if not conflicts and stored.status == EventStatus.CONFLICTED:
            self.event_repo.set_status(event.event_id, EventStatus.CONFIRMED)

    def on_event_deleted(self, event: EventDeleted) -> None:
        logger.info("event %s deleted by %s", event.event_id, event.owner_id)

    def on_conflict_detected(self, event: ConflictDetected) -> None:
        logger.warning(
            "event %s conflicts with %s",
            event.event_id,
            ", ".join(event.conflicting_event_ids),
        )
        self.event_repo.set_status(event.event_id, EventStatus.CONFLICTED)

    # ------------------------------------------------------------------

    def _recheck_conflicts(self, event_id: str, owner_id: str) -> list[str]:
        stored = self.event_repo.get(event_id, owner_id)
        if stored is None or stored.status == EventStatus.CANCELLED:
            return []
        conflicts = self.engine.find_conflicts(
            owner_id, stored.start_time, stored.end_time, exclude_event_id=event_id
        )
        conflicting_ids = [
            c.id for c in conflicts if c.status != EventStatus.CANCELLED
        ]
        if conflicting_ids:
            self.bus.publish(
                ConflictDetected(
                    event_id=event_id,
                    owner_id=owner_id,
                    conflicting_event_ids=conflicting_ids,
                )
            )
        return conflicting_ids
