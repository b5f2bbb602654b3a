"""
Server-state query cache

Holds API results under query keys with a TTL, an explicit stale flag
(invalidate → refetch on next read) and snapshot/restore support for
optimistic updates.
"""

import copy
import logging
import threading
import time
from typing import Any, Callable, Dict, Hashable, Optional

ORDERS_QUERY_KEY = ("orders",)


class QueryCache:
    """In-memory cache of query results with TTL and stale tracking"""

    def __init__(self, default_ttl: int = 300):
        self._entries: Dict[Hashable, Dict[str, Any]] = {}
        self._default_ttl = default_ttl
        self._lock = threading.RLock()
        self._stats = {
            "hits": 0,
            "misses": 0,
            "sets": 0,
            "invalidations": 0,
            "restores": 0,
        }
        self._logger = logging.getLogger(self.__class__.__name__)

    def get_query_data(self, key: Hashable) -> Optional[Any]:
        """Cached data regardless of freshness, or None"""
        with self._lock:
            entry = self._entries.get(key)
            return entry["value"] if entry else None

    def is_fresh(self, key: Hashable) -> bool:
        """Data present, not invalidated and within its TTL"""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                self._stats["misses"] += 1
                return False
            fresh = not entry["stale"] and entry["expires_at"] > time.time()
            self._stats["hits" if fresh else "misses"] += 1
            return fresh

    def set_query_data(self, key: Hashable, value: Any, ttl: Optional[int] = None) -> None:
        """Store fresh data for a query"""
        if ttl is None:
            ttl = self._default_ttl
        with self._lock:
            self._entries[key] = {
                "value": value,
                "expires_at": time.time() + ttl,
                "created_at": time.time(),
                "stale": False,
            }
            self._stats["sets"] += 1

    def update_query_data(self, key: Hashable, updater: Callable[[Any], Any]) -> Any:
        """Replace cached data with updater(old); keeps the entry's freshness"""
        with self._lock:
            entry = self._entries.get(key)
            new_value = updater(entry["value"] if entry else None)
            if entry is None:
                self.set_query_data(key, new_value)
            else:
                entry["value"] = new_value
            return new_value

    def snapshot(self, key: Hashable) -> Optional[Dict[str, Any]]:
        """Deep copy of an entry for later restore()"""
        with self._lock:
            entry = self._entries.get(key)
            return copy.deepcopy(entry) if entry is not None else None

    def restore(self, key: Hashable, snapshot: Optional[Dict[str, Any]]) -> None:
        """Put an entry back exactly as it was when snapshotted"""
        with self._lock:
            if snapshot is None:
                self._entries.pop(key, None)
            else:
                self._entries[key] = copy.deepcopy(snapshot)
            self._stats["restores"] += 1
        self._logger.debug("↩️ CACHE RESTORED: %s", key)

    def invalidate(self, key: Hashable) -> None:
        """Mark data stale so the next read refetches it"""
        with self._lock:
            entry = self._entries.get(key)
            if entry is not None:
                entry["stale"] = True
                self._stats["invalidations"] += 1

    def remove(self, key: Hashable) -> bool:
        with self._lock:
            return self._entries.pop(key, None) is not None

    def clear(self) -> None:
        """Clear all cache entries"""
        with self._lock:
            self._entries.clear()
            self._stats = {k: 0 for k in self._stats}

    def get_stats(self) -> Dict[str, Any]:
        """Get cache statistics"""
        with self._lock:
            total_requests = self._stats["hits"] + self._stats["misses"]
            hit_rate = (
                (self._stats["hits"] / total_requests * 100) if total_requests > 0 else 0
            )
            return {
                **self._stats,
                "total_requests": total_requests,
                "hit_rate": round(hit_rate, 2),
                "cache_size": len(self._entries),
            }
