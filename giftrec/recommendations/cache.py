from __future__ import annotations

import hashlib
import json
import os
import threading
import time
from typing import Any

_cache: dict[str, dict[str, Any]] = {}
_hits: int = 0
_misses: int = 0
_lock = threading.Lock()
_DEFAULT_TTL = int(os.getenv("CACHE_TTL_SECONDS") or 300)


def _make_key(request_dict: dict) -> str:
    normalized = json.dumps(request_dict, sort_keys=True, default=str)
    return hashlib.sha256(normalized.encode()).hexdigest()[:16]


def _is_fresh(entry: dict[str, Any], now: float) -> bool:
    return now - entry["created_at"] < _DEFAULT_TTL


def cache_get(request_dict: dict) -> Any | None:
    global _hits, _misses
    key = _make_key(request_dict)
    with _lock:
        entry = _cache.get(key)
        if entry and _is_fresh(entry, time.time()):
            _hits += 1
            return entry["value"]
        if entry:
            del _cache[key]
        _misses += 1
        return None


def cache_set(request_dict: dict, value: Any) -> None:
    key = _make_key(request_dict)
    now = time.time()
    with _lock:
        # Expired entries nobody asks for again would otherwise stay forever
        expired = [k for k, entry in _cache.items() if not _is_fresh(entry, now)]
        for k in expired:
            del _cache[k]
        _cache[key] = {
            "value": value,
            "user_id": request_dict.get("user_id"),
            "created_at": now,
        }


def invalidate_user(user_id: str) -> int:
    """Drop every cached ranking for a user, e.g. after they interact with an item."""
    with _lock:
        stale = [key for key, entry in _cache.items() if entry["user_id"] == user_id]
        for key in stale:
            del _cache[key]
    return len(stale)


def get_cache_stats() -> dict:
    with _lock:
        hits, misses, size = _hits, _misses, len(_cache)
    total = hits + misses
    return {
        "size": size,
        "ttl_seconds": _DEFAULT_TTL,
        "hits": hits,
        "misses": misses,
        "hit_rate": round(hits / total * 100, 1) if total > 0 else 0.0,
    }


def clear_cache() -> None:
    global _hits, _misses
    with _lock:
        _cache.clear()
        _hits = 0
        _misses = 0
