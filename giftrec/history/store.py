from __future__ import annotations

import threading
from collections import Counter
from datetime import datetime

from ..catalog.data_store import get_catalog
from ..recommendations.ports import CatalogLookup, InteractionHistory
from .models import EventType, InteractionEvent, LearnedCategory


class InMemoryInteractionHistory(InteractionHistory):
    """Append-only event log kept in process memory."""

    def __init__(self, catalog: CatalogLookup):
        self._catalog = catalog
        self._events: list[InteractionEvent] = []
        self._lock = threading.Lock()

    def record_event(
        self,
        user_id: str,
        item_id: str,
        event_type: EventType,
        timestamp: datetime | None = None,
    ) -> InteractionEvent:
        fields = {"user_id": user_id, "item_id": item_id, "event_type": event_type}
        if timestamp is not None:
            fields["timestamp"] = timestamp
        event = InteractionEvent(**fields)
        with self._lock:
            self._events.append(event)
        return event

    def _user_events(self, user_id: str) -> list[InteractionEvent]:
        with self._lock:
            return [e for e in self._events if e.user_id == user_id]

    def fetch_user_events(self, user_id: str, limit: int | None = None) -> list[InteractionEvent]:
        # Later inserts win timestamp ties
        events = sorted(
            reversed(self._user_events(user_id)),
            key=lambda e: e.timestamp,
            reverse=True,
        )
        return events[:limit] if limit is not None else events

    def fetch_top_category(self, user_id: str) -> LearnedCategory | None:
        events = self._user_events(user_id)
        if not events:
            return None

        per_item = Counter(e.item_id for e in events)
        items = self._catalog.fetch_items_by_ids(list(per_item))
        category_by_id = {item.id: item.category for item in items}

        category_counter: Counter[str] = Counter()
        for item_id, count in per_item.items():
            category = category_by_id.get(item_id)
            if category:
                category_counter[category] += count

        if not category_counter:
            return None
        category, count = category_counter.most_common(1)[0]
        return LearnedCategory(category=category, count=count)

    def clear(self) -> None:
        with self._lock:
            self._events.clear()


_history: InMemoryInteractionHistory | None = None


def get_history() -> InMemoryInteractionHistory:
    """Return the process-wide interaction history."""
    global _history
    if _history is None:
        _history = InMemoryInteractionHistory(get_catalog())
    return _history
