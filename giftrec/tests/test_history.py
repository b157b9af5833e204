from __future__ import annotations

from datetime import datetime, timedelta, timezone

from conftest import BIRTHDAY_BASKET, COFFEE_MAKER, GAMING_KEYBOARD
from giftrec.history.models import EventType

T0 = datetime(2024, 5, 1, tzinfo=timezone.utc)


def test_events_newest_first(history):
    history.record_event("u1", "1", EventType.view, timestamp=T0)
    history.record_event("u1", "2", EventType.click, timestamp=T0 + timedelta(hours=2))
    history.record_event("u1", "3", EventType.save, timestamp=T0 + timedelta(hours=1))

    events = history.fetch_user_events("u1")
    assert [e.item_id for e in events] == ["2", "3", "1"]


def test_events_limit(history):
    for i in range(5):
        history.record_event("u1", "1", EventType.view, timestamp=T0 + timedelta(minutes=i))
    assert len(history.fetch_user_events("u1", 3)) == 3


def test_later_insert_wins_timestamp_tie(history):
    history.record_event("u1", "1", EventType.view, timestamp=T0)
    history.record_event("u1", "2", EventType.view, timestamp=T0)
    assert [e.item_id for e in history.fetch_user_events("u1")] == ["2", "1"]


def test_events_are_scoped_to_user(history):
    history.record_event("u1", "1", EventType.view)
    history.record_event("u2", "2", EventType.view)
    assert [e.item_id for e in history.fetch_user_events("u2")] == ["2"]


def test_top_category(history):
    history.record_event("u1", GAMING_KEYBOARD.id, EventType.view)
    history.record_event("u1", COFFEE_MAKER.id, EventType.view)
    history.record_event("u1", COFFEE_MAKER.id, EventType.save)

    top = history.fetch_top_category("u1")
    assert top.category == "Home"
    assert top.count == 2


def test_top_category_tie_goes_to_first_seen(history):
    history.record_event("u1", BIRTHDAY_BASKET.id, EventType.view)
    history.record_event("u1", GAMING_KEYBOARD.id, EventType.view)
    assert history.fetch_top_category("u1").category == "Food"


def test_top_category_without_history(history):
    assert history.fetch_top_category("nobody") is None


def test_top_category_ignores_unknown_items(history):
    history.record_event("u1", "deleted-item", EventType.view)
    assert history.fetch_top_category("u1") is None


def test_clear(history):
    history.record_event("u1", "1", EventType.view)
    history.clear()
    assert history.fetch_user_events("u1") == []
