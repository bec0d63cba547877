"""
Bounded LRU cache for heuristic scores.

Shared by every worker thread of a request (and across requests when
the caller keeps one instance), so all access goes through a lock.
"""
import threading
from collections import OrderedDict
from typing import Any, Callable, Dict, Hashable, Optional


class HeuristicCache:
    """
    Thread-safe LRU cache with hit/miss/eviction counters.

    Example:
        cache = HeuristicCache(max_entries=50_000)
        value = cache.get_or_compute(key, lambda: expensive(board))
    """

    def __init__(self, max_entries: int = 100_000):
        if max_entries < 1:
            raise ValueError(f"max_entries must be positive, got {max_entries}")
        self._table: 'OrderedDict[Hashable, Any]' = OrderedDict()
        self._lock = threading.Lock()
        self.max_entries = max_entries
        self.hits = 0
        self.misses = 0
        self.evictions = 0

    def get(self, key: Hashable) -> Optional[Any]:
        """Get value, moving it to the most recently used end."""
        with self._lock:
            if key in self._table:
                self._table.move_to_end(key)
                self.hits += 1
                return self._table[key]
            self.misses += 1
            return None

    def put(self, key: Hashable, value: Any) -> None:
        """Add entry, evicting the least recently used one at capacity."""
        with self._lock:
            if key in self._table:
                self._table.move_to_end(key)
            elif len(self._table) >= self.max_entries:
                self._table.popitem(last=False)
                self.evictions += 1
            self._table[key] = value

    def get_or_compute(self, key: Hashable, compute: Callable[[], Any]) -> Any:
        """
        Return the cached value or compute and store it.

        ``compute`` runs outside the lock; two threads missing on the same
        key may both compute it, which is harmless for pure functions.
        """
        value = self.get(key)
        if value is None:
            value = compute()
            self.put(key, value)
        return value

    def __contains__(self, key: Hashable) -> bool:
        with self._lock:
            return key in self._table

    def __len__(self) -> int:
        with self._lock:
            return len(self._table)

    def clear(self) -> None:
        """Clear all entries and reset stats."""
        with self._lock:
            self._table.clear()
            self.hits = 0
            self.misses = 0
            self.evictions = 0

    def stats(self) -> Dict[str, Any]:
        with self._lock:
            lookups = self.hits + self.misses
            return {
                'entries': len(self._table),
                'max_entries': self.max_entries,
                'hits': self.hits,
                'misses': self.misses,
                'evictions': self.evictions,
                'hit_rate': self.hits / lookups if lookups else 0.0,
            }
