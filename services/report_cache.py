"""
In-process cache for occupancy reports.

Entries are keyed by the full report parameter tuple, expire after a TTL and
are evicted least-recently-used once the cache is full. All entries of a
restaurant are dropped whenever one of its reservations changes, and a
report computed before such an eviction is never stored after it.
"""
import logging
import time
from collections import OrderedDict
from dataclasses import dataclass
from datetime import datetime
from threading import RLock
from typing import Any, Callable, Dict, NamedTuple, Optional
from uuid import UUID


logger = logging.getLogger(__name__)


class ReportCacheKey(NamedTuple):
    """Structured key: every report parameter participates."""
    restaurant_id: UUID
    start: datetime
    end: datetime
    space_id: Optional[UUID]
    page: int
    size: int


@dataclass
class CacheEntry:
    """A cached value and when it stops being valid."""
    value: Any
    expires_at: Optional[float]

    def is_expired(self, now: float) -> bool:
        return self.expires_at is not None and now >= self.expires_at


@dataclass
class CacheStats:
    """Cache statistics"""
    hits: int = 0
    misses: int = 0
    evictions: int = 0
    expirations: int = 0

    def hit_rate(self) -> float:
        total = self.hits + self.misses
        return self.hits / total if total > 0 else 0.0


class ReportCache:
    """Thread-safe TTL + LRU cache for occupancy reports."""

    def __init__(
        self,
        ttl_seconds: Optional[float] = 600,
        max_size: int = 500,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Args:
            ttl_seconds: Lifetime of an entry; None or 0 disables expiry
            max_size: Maximum number of entries kept
            clock: Monotonic time source, replaceable in tests
        """
        if max_size < 1:
            raise ValueError("max_size must be at least 1")
        self.ttl_seconds = ttl_seconds or None
        self.max_size = max_size
        self._clock = clock
        self._entries: "OrderedDict[ReportCacheKey, CacheEntry]" = OrderedDict()
        self._lock = RLock()
        self._stats = CacheStats()
        self._generations: Dict[UUID, int] = {}

    @classmethod
    def from_settings(cls, settings) -> "ReportCache":
        return cls(
            ttl_seconds=settings.analytics_cache_ttl_minutes * 60,
            max_size=settings.analytics_cache_max_size,
        )

    def get(self, key: ReportCacheKey) -> Optional[Any]:
        """Return the cached value or None on a miss or an expired entry."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                self._stats.misses += 1
                return None

            if entry.is_expired(self._clock()):
                del self._entries[key]
                self._stats.expirations += 1
                self._stats.misses += 1
                return None

            self._entries.move_to_end(key)
            self._stats.hits += 1
            return entry.value

    def generation(self, restaurant_id: UUID) -> int:
        """Eviction counter of a restaurant, captured before computing a report."""
        with self._lock:
            return self._generations.get(restaurant_id, 0)

    def put(self, key: ReportCacheKey, value: Any, generation: Optional[int] = None) -> bool:
        """
        Store a value, evicting the least recently used entry when full.

        Args:
            key: Report parameters
            value: Report to cache
            generation: Restaurant generation read before the report was
                computed; the value is dropped if the restaurant was evicted since

        Returns:
            True if the value was stored
        """
        with self._lock:
            if generation is not None and generation != self._generations.get(key.restaurant_id, 0):
                logger.debug(f"Discarding report for {key}: restaurant changed while it was computed")
                return False

            expires_at = None
            if self.ttl_seconds is not None:
                expires_at = self._clock() + self.ttl_seconds

            if key in self._entries:
                self._entries.move_to_end(key)
            self._entries[key] = CacheEntry(value=value, expires_at=expires_at)

            while len(self._entries) > self.max_size:
                evicted, _ = self._entries.popitem(last=False)
                self._stats.evictions += 1
                logger.debug(f"Report cache full, evicted {evicted}")
            return True

    def evict_restaurant(self, restaurant_id: UUID) -> int:
        """Drop every entry of one restaurant and advance its generation. Returns the number removed."""
        with self._lock:
            self._generations[restaurant_id] = self._generations.get(restaurant_id, 0) + 1
            keys = [k for k in self._entries if k.restaurant_id == restaurant_id]
            for key in keys:
                del self._entries[key]
            if keys:
                logger.debug(f"Evicted {len(keys)} cached report(s) for restaurant {restaurant_id}")
            return len(keys)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def stats(self) -> CacheStats:
        with self._lock:
            return CacheStats(**vars(self._stats))

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: ReportCacheKey) -> bool:
        with self._lock:
            entry = self._entries.get(key)
            return entry is not None and not entry.is_expired(self._clock())
