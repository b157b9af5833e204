from __future__ import annotations

import threading
from unittest.mock import patch

from fastapi.testclient import TestClient

from giftrec.app import app, get_explanation_generator
from giftrec.llm.groq_client import NullExplanationGenerator
from giftrec.recommendations.cache import (
    _DEFAULT_TTL,
    cache_get,
    cache_set,
    clear_cache,
    get_cache_stats,
    invalidate_user,
)

app.dependency_overrides[get_explanation_generator] = NullExplanationGenerator
client = TestClient(app)

REQUEST = {"user_id": "user-1", "budget": 100, "interests": ["gaming"], "limit": 3}


def test_cache_miss_then_hit():
    clear_cache()
    resp1 = client.post("/recommendations", json=REQUEST)
    assert resp1.status_code == 200
    assert get_cache_stats()["misses"] >= 1

    resp2 = client.post("/recommendations", json=REQUEST)
    assert resp2.status_code == 200
    assert get_cache_stats()["hits"] >= 1
    assert resp2.json() == resp1.json()


def test_cache_different_queries_miss():
    clear_cache()
    client.post("/recommendations", json=REQUEST)
    client.post("/recommendations", json={**REQUEST, "budget": 50})
    stats = get_cache_stats()
    assert stats["misses"] >= 2
    assert stats["hits"] == 0


def test_cache_expires():
    clear_cache()
    with patch("giftrec.recommendations.cache.time.time", return_value=1000.0):
        cache_set({"k": 1}, "value")
        assert cache_get({"k": 1}) == "value"
    with patch("giftrec.recommendations.cache.time.time", return_value=1000.0 + _DEFAULT_TTL):
        assert cache_get({"k": 1}) is None
    assert get_cache_stats()["size"] == 0


def test_cache_set_purges_expired_entries():
    clear_cache()
    with patch("giftrec.recommendations.cache.time.time", return_value=1000.0):
        cache_set({"k": 1}, "old")
        cache_set({"k": 2}, "old")
    with patch("giftrec.recommendations.cache.time.time", return_value=1000.0 + _DEFAULT_TTL + 1):
        cache_set({"k": 3}, "new")
    assert get_cache_stats()["size"] == 1


def test_cache_stats_endpoint():
    clear_cache()
    client.post("/recommendations", json=REQUEST)
    client.post("/recommendations", json=REQUEST)
    resp = client.get("/cache/stats")
    assert resp.status_code == 200
    body = resp.json()
    assert body["hits"] >= 1
    assert "hit_rate" in body


def test_event_invalidates_only_that_users_rankings():
    clear_cache()
    client.post("/recommendations", json=REQUEST)
    client.post("/recommendations", json={**REQUEST, "user_id": "someone-else"})
    assert get_cache_stats()["size"] == 2

    resp = client.post("/events", json={"user_id": "user-1", "item_id": "p-001", "event_type": "click"})
    assert resp.status_code == 201
    assert get_cache_stats()["size"] == 1


def test_invalidate_user_returns_dropped_count():
    clear_cache()
    cache_set({"user_id": "a", "budget": 1}, "x")
    cache_set({"user_id": "a", "budget": 2}, "y")
    cache_set({"user_id": "b", "budget": 1}, "z")
    assert invalidate_user("a") == 2
    assert cache_get({"user_id": "b", "budget": 1}) == "z"


def test_concurrent_writes_and_invalidation():
    clear_cache()
    errors: list[Exception] = []
    done = threading.Event()

    def writer():
        try:
            for i in range(5000):
                cache_set({"user_id": f"u{i % 7}", "budget": i}, i)
        except Exception as exc:
            errors.append(exc)
        finally:
            done.set()

    thread = threading.Thread(target=writer)
    thread.start()
    try:
        while not done.is_set():
            for u in range(7):
                invalidate_user(f"u{u}")
            get_cache_stats()
    except Exception as exc:
        errors.append(exc)
    thread.join()

    assert errors == []
