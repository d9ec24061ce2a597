"""
In-memory cache for reference lookup results.

Bounded in size (least recently used entries are evicted first) and
time-expiring: an entry not read for ``ttl_seconds`` is dropped.  The
cache is shared by all worker threads of a run.
"""

import threading
import time
from collections import OrderedDict
from typing import Callable, Generic, Hashable, Optional, Tuple, TypeVar

from .models import MatchQuery, TaxonMatch
from .protocols import TaxonomyMatcher

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")


class LookupCache(Generic[K, V]):
    """
    Thread-safe LRU cache with expire-after-access semantics.

    Features:
    - Maximum entry count with LRU eviction
    - TTL refreshed on every hit
    - Hit/miss statistics
    """

    def __init__(
        self,
        max_size: int = 10000,
        ttl_seconds: float = 7200.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Initialize cache.

        Args:
            max_size: Maximum number of entries kept
            ttl_seconds: Seconds an entry survives without being read
            clock: Monotonic time source (injectable for tests)
        """
        if max_size < 1:
            raise ValueError("max_size must be at least 1")
        self.max_size = max_size
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: "OrderedDict[K, Tuple[V, float]]" = OrderedDict()
        self._lock = threading.Lock()
        self.hits = 0
        self.misses = 0

    def get(self, key: K) -> Optional[V]:
        """
        Get cached value if present and not expired.

        Returns:
            Cached value if valid, None otherwise
        """
        now = self._clock()
        with self._lock:
            entry = self._entries.get(key)
            if entry is not None:
                value, last_access = entry
                if now - last_access < self.ttl_seconds:
                    self._entries[key] = (value, now)
                    self._entries.move_to_end(key)
                    self.hits += 1
                    return value
                del self._entries[key]
            self.misses += 1
            return None

    def set(self, key: K, value: V) -> None:
        """Store value, evicting the least recently used entry when full."""
        with self._lock:
            self._entries[key] = (value, self._clock())
            self._entries.move_to_end(key)
            while len(self._entries) > self.max_size:
                self._entries.popitem(last=False)

    def clear(self) -> None:
        """Clear all cache entries."""
        with self._lock:
            self._entries.clear()
            self.hits = 0
            self.misses = 0

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def get_stats(self) -> dict:
        """Get cache statistics."""
        with self._lock:
            total_requests = self.hits + self.misses
            hit_rate = (self.hits / total_requests * 100) if total_requests > 0 else 0

            return {
                "hits": self.hits,
                "misses": self.misses,
                "hit_rate": f"{hit_rate:.1f}%",
                "total_entries": len(self._entries),
            }

    def prune_expired(self) -> int:
        """Remove expired entries from cache."""
        now = self._clock()
        with self._lock:
            expired_keys = [
                key
                for key, (_, last_access) in self._entries.items()
                if now - last_access >= self.ttl_seconds
            ]
            for key in expired_keys:
                del self._entries[key]
            return len(expired_keys)


class CachedTaxonomyMatcher:
    """
    Memoising front for a :class:`TaxonomyMatcher`.

    Misses are filled by calling the wrapped matcher.  Concurrent misses for
    the same query may both reach the upstream service; results are
    idempotent per query so the last writer wins harmlessly.  Transport
    failures propagate and are never cached.
    """

    def __init__(self, matcher: TaxonomyMatcher, cache: Optional[LookupCache] = None):
        self.matcher = matcher
        self.cache: LookupCache[MatchQuery, TaxonMatch] = cache if cache is not None else LookupCache()

    def match(self, query: MatchQuery) -> TaxonMatch:
        result = self.cache.get(query)
        if result is None:
            result = self.matcher.match(query)
            self.cache.set(query, result)
        return result


__all__ = ["LookupCache", "CachedTaxonomyMatcher"]
