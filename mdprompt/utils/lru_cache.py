"""Thread-safe LRU cache used for compiled template artifacts."""

from collections import OrderedDict
from dataclasses import dataclass
from threading import RLock
from typing import Generic, TypeVar

K = TypeVar("K")
V = TypeVar("V")


@dataclass(frozen=True, slots=True)
class CacheStats:
    """Snapshot of cache counters."""

    hits: int
    misses: int
    size: int
    max_size: int


class LRUCache(Generic[K, V]):
    """Least recently used cache guarded by a re-entrant lock."""

    def __init__(self, max_size: int = 256):
        """
        Initialize LRU cache.

        Args:
            max_size: Maximum number of entries kept before evicting the oldest
        """
        if max_size <= 0:
            raise ValueError("max_size must be positive")

        self._cache: OrderedDict[K, V] = OrderedDict()
        self._max_size = max_size
        self._lock = RLock()
        self._hits = 0
        self._misses = 0

    def get(self, key: K, default: V | None = None) -> V | None:
        """
        Get value by key, marking it as most recently used.

        Args:
            key: Cache key
            default: Returned when the key is absent

        Returns:
            Cached value or default
        """
        with self._lock:
            if key not in self._cache:
                self._misses += 1
                return default

            self._hits += 1
            self._cache.move_to_end(key)
            return self._cache[key]

    def put(self, key: K, value: V) -> None:
        """Store a value, evicting the least recently used entries when full."""
        with self._lock:
            if key in self._cache:
                self._cache[key] = value
                self._cache.move_to_end(key)
                return

            while len(self._cache) >= self._max_size:
                self._cache.popitem(last=False)

            self._cache[key] = value

    def delete(self, key: K) -> bool:
        """Delete a key; return True if it was present."""
        with self._lock:
            if key in self._cache:
                del self._cache[key]
                return True
            return False

    def clear(self) -> None:
        """Drop every entry and reset the counters."""
        with self._lock:
            self._cache.clear()
            self._hits = 0
            self._misses = 0

    def stats(self) -> CacheStats:
        with self._lock:
            return CacheStats(
                hits=self._hits,
                misses=self._misses,
                size=len(self._cache),
                max_size=self._max_size,
            )

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._cache

    def __len__(self) -> int:
        with self._lock:
            return len(self._cache)
