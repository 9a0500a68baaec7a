"""Tests for the in-memory event repository."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from scheduling.domain.errors import EventNotFoundError
from scheduling.domain.models import Event, EventStatus
from scheduling.repos.memory import EventRepository

_NOW = datetime(2026, 6, 1, 12, 0, tzinfo=timezone.utc)


def _make_event(hours_from_now: int = 1, owner_id: str = "u1", **overrides) -> Event:
    defaults = dict(
        owner_id=owner_id,
        title="Test event",
        start_time=_NOW + timedelta(hours=hours_from_now),
        end_time=_NOW + timedelta(hours=hours_from_now + 1),
    )
    defaults.update(overrides)
    return Event(**defaults)


@pytest.fixture()
def repo() -> EventRepository:
    return EventRepository()


def test_event_rejects_end_before_start():
    with pytest.raises(ValueError):
        Event(owner_id="u1", title="Bad", start_time=_NOW, end_time=_NOW)


def test_get_is_owner_scoped(repo):
    event = _make_event()
    repo.add(event)
    assert repo.get(event.id, "u1").id == event.id
    assert repo.get(event.id, "intruder") is None
    assert repo.get("missing", "u1") is None


def test_list_events_sorted_and_bounded(repo):
    later, earlier, outside = _make_event(5), _make_event(1), _make_event(48)
    for event in (later, earlier, outside):
        repo.add(event)
    repo.add(_make_event(2, owner_id="u2"))

    listed = repo.list_events("u1", _NOW, _NOW + timedelta(hours=24))
    assert [e.id for e in listed] == [earlier.id, later.id]
    assert [e.id for e in repo.list_events("u1")] == [earlier.id, later.id, outside.id]


def test_list_events_bounds_are_inclusive(repo):
    event = _make_event(1)
    repo.add(event)
    assert repo.list_events("u1", event.start_time, event.start_time)


def test_list_events_returns_snapshots(repo):
    event = _make_event()
    repo.add(event)
    snapshot = repo.list_events("u1")[0]
    snapshot.title = "changed"
    assert repo.get(event.id, "u1").title == "Test event"


def test_update_merges_and_validates(repo):
    event = _make_event()
    repo.add(event)
    updated = repo.update(event.id, "u1", {"title": "Renamed", "is_online": True})
    assert updated.title == "Renamed"
    assert updated.is_online is True
    assert updated.start_time == event.start_time

    with pytest.raises(ValueError):
        repo.update(event.id, "u1", {"end_time": event.start_time - timedelta(hours=1)})
    assert repo.get(event.id, "u1").title == "Renamed"


def test_update_and_delete_require_ownership(repo):
    event = _make_event()
    repo.add(event)
    with pytest.raises(EventNotFoundError):
        repo.update(event.id, "intruder", {"title": "x"})
    with pytest.raises(EventNotFoundError):
        repo.delete(event.id, "intruder")

    repo.delete(event.id, "u1")
    assert repo.get(event.id, "u1") is None


def test_search_filters_and_paginates(repo):
    for hour in range(5):
        repo.add(_make_event(hour, is_online=hour % 2 == 0))
    repo.add(_make_event(10, status=EventStatus.CANCELLED))

    online, total = repo.search("u1", is_online=True)
    assert total == 3
    assert all(e.is_online for e in online)

    cancelled, total = repo.search("u1", status=EventStatus.CANCELLED)
    assert total == 1
    assert cancelled[0].status == EventStatus.CANCELLED

    page, total = repo.search("u1", limit=2, offset=2)
    assert total == 6
    assert [e.start_time for e in page] == [
        _NOW + timedelta(hours=2),
        _NOW + timedelta(hours=3),
    ]
