"""
Main cache orchestration: TTL expiry, priority-aware eviction,
compression of large values and tag-based invalidation.
"""
import threading
import logging
import time
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Union

from .core import CacheConfig, CacheEntry, CacheStats, Priority, RawValue
from .compression import compress, decompress, estimate_size
from .scheduler import CleanupScheduler
from .ttl_policies import HOME_WARMUP_SECTIONS, resolve_entry_options
from content_cache.utils.helpers import format_size

logger = logging.getLogger("cache.manager")


class CacheManager:
    """
    Bounded in-process cache for content fetched from a slower store.

    - Per-entry TTL, from explicit options, the per-key table or the default
    - Priority + usage ordered eviction when size or count limits are hit
    - Compression of values above the configured threshold
    - Bulk invalidation by tag
    - Pausable background sweep of expired entries

    The cache is an accelerator only: no operation raises to the caller,
    and a miss is always safe.
    """

    def __init__(
        self,
        config: Optional[CacheConfig] = None,
        clock: Callable[[], float] = time.monotonic,
        start_cleanup: bool = True,
    ):
        """
        Initialize the cache manager.

        Args:
            config: Limits and timings; defaults to CacheConfig()
            clock: Monotonic time source in seconds (injectable for tests)
            start_cleanup: Start the background expiry sweep immediately
        """
        self.config = config or CacheConfig()
        self._clock = clock
        self._cache: Dict[str, CacheEntry] = {}
        self._cache_lock = threading.RLock()
        self._total_size = 0

        # Stats tracking
        self._stats = {
            "hits": 0,
            "misses": 0,
            "evictions": 0,
            "compressions": 0,
        }

        self._scheduler = CleanupScheduler(self.config.cleanup_interval, self.cleanup)
        if start_cleanup:
            self._scheduler.start()

    def get(self, key: str) -> Optional[Any]:
        """
        Get a cached value.

        Returns:
            The value, or None on a miss or an expired entry
        """
        with self._cache_lock:
            entry = self._cache.get(key)

            if entry is None:
                self._stats["misses"] += 1
                logger.debug(f"CACHE MISS: {key}")
                return None

            now = self._clock()
            if entry.is_expired(now):
                self._remove(key)
                self._stats["misses"] += 1
                logger.debug(f"CACHE EXPIRED: {key} [age={entry.age(now):.1f}s]")
                return None

            entry.access_count += 1
            entry.last_access = now
            self._stats["hits"] += 1
            stored = entry.data

        logger.debug(f"CACHE HIT: {key}")
        return decompress(stored)

    def set(
        self,
        key: str,
        data: Any,
        ttl: Optional[float] = None,
        priority: Optional[Union[Priority, str]] = None,
        tags: Optional[Iterable[str]] = None,
    ) -> None:
        """
        Store a value, replacing any existing entry for the key.

        Args:
            key: Content key, e.g. "home.hero"
            data: JSON-serializable value
            ttl: Seconds until expiry (overrides the per-key table)
            priority: Eviction priority (overrides the per-key table)
            tags: Labels for clear_by_tag (overrides the per-key table)
        """
        entry_ttl, entry_priority, entry_tags = resolve_entry_options(
            key, self.config.default_ttl, ttl=ttl, priority=priority, tags=tags
        )

        stored = RawValue(data)
        raw_size = size = estimate_size(data)
        compressed = False
        if size > self.config.compression_threshold:
            stored = compress(data)
            size = estimate_size(stored)
            compressed = not isinstance(stored, RawValue)

        with self._cache_lock:
            if compressed:
                self._stats["compressions"] += 1

            # A replaced entry must not count against the incoming one
            self._remove(key)

            if (
                len(self._cache) >= self.config.max_entries
                or self._total_size + size > self.config.max_size
            ):
                self._evict_entries(size)

            now = self._clock()
            self._cache[key] = CacheEntry(
                key=key,
                data=stored,
                timestamp=now,
                ttl=entry_ttl,
                size=size,
                priority=entry_priority,
                tags=entry_tags,
                access_count=0,
                last_access=now,
            )
            self._total_size += size

        logger.debug(
            f"CACHE SET: {key} [size={format_size(size)}, ttl={entry_ttl:.0f}s, "
            f"priority={entry_priority.value}, compressed={compressed}"
            + (f", raw={format_size(raw_size)}" if compressed else "")
            + "]"
        )

    def has(self, key: str) -> bool:
        """
        Check for a live entry without touching hit/miss stats.

        Expired entries are removed.
        """
        with self._cache_lock:
            entry = self._cache.get(key)
            if entry is None:
                return False
            if entry.is_expired(self._clock()):
                self._remove(key)
                return False
            return True

    def delete(self, key: str) -> bool:
        """
        Remove a specific cache entry.

        Returns:
            True if entry was found and removed
        """
        with self._cache_lock:
            removed = self._remove(key)
        if removed:
            logger.info(f"Invalidated cache: {key}")
        return removed

    def clear_by_tag(self, tag: str) -> int:
        """
        Remove every entry carrying a tag.

        Returns:
            Number of entries removed
        """
        with self._cache_lock:
            to_delete = [k for k, entry in self._cache.items() if tag in entry.tags]
            for key in to_delete:
                self._remove(key)
        if to_delete:
            logger.info(f"Invalidated {len(to_delete)} entries tagged '{tag}'")
        return len(to_delete)

    def clear(self) -> int:
        """
        Remove all entries and reset every counter.

        Returns:
            Number of entries cleared
        """
        with self._cache_lock:
            count = len(self._cache)
            self._cache.clear()
            self._total_size = 0
            for name in self._stats:
                self._stats[name] = 0
        logger.info(f"Cleared {count} cache entries")
        return count

    def get_stats(self) -> CacheStats:
        """Get a snapshot of cache statistics."""
        with self._cache_lock:
            hits = self._stats["hits"]
            misses = self._stats["misses"]
            total = hits + misses
            return CacheStats(
                entries=len(self._cache),
                size=self._total_size,
                hit_rate=(hits / total * 100) if total > 0 else 0.0,
                miss_rate=(misses / total * 100) if total > 0 else 0.0,
                evictions=self._stats["evictions"],
                compressions=self._stats["compressions"],
            )

    def preload(self, entries: Iterable[Mapping[str, Any]]) -> int:
        """
        Seed the cache with already-fetched values.

        Args:
            entries: Mappings with "key", "data" and an optional "options"
                dict (ttl, priority, tags). Entries without data are skipped.

        Returns:
            Number of entries stored
        """
        loaded = 0
        for item in entries:
            key = item.get("key")
            data = item.get("data")
            if key is None or data is None:
                continue
            options = item.get("options") or {}
            self.set(
                key,
                data,
                ttl=options.get("ttl"),
                priority=options.get("priority"),
                tags=options.get("tags"),
            )
            loaded += 1
        return loaded

    def warmup_home_cache(self, home_data: Optional[Mapping[str, Any]]) -> int:
        """
        Seed the home page sections from a fetched home document.

        Returns:
            Number of sections cached
        """
        home_data = home_data or {}
        # Empty sections are not worth a slot
        warmup_entries: List[Dict[str, Any]] = [
            {
                "key": f"home.{section}",
                "data": home_data.get(section),
                "options": {"priority": priority},
            }
            for section, priority in HOME_WARMUP_SECTIONS
            if home_data.get(section)
        ]
        warmed = self.preload(warmup_entries)
        logger.info(f"Cache warmed up with {warmed} home sections")
        return warmed

    def cleanup(self) -> int:
        """
        Remove every expired entry, accessed or not.

        Returns:
            Number of entries removed
        """
        with self._cache_lock:
            now = self._clock()
            expired = [k for k, entry in self._cache.items() if entry.is_expired(now)]
            for key in expired:
                self._remove(key)
        if expired:
            logger.info(f"Cache cleanup: removed {len(expired)} expired entries")
        return len(expired)

    def pause_cleanup(self) -> None:
        """Stop the background sweep while the host is idle."""
        self._scheduler.pause()

    def resume_cleanup(self) -> None:
        """Restart the background sweep."""
        self._scheduler.resume()

    @property
    def cleanup_running(self) -> bool:
        """Whether the background sweep is scheduled."""
        return self._scheduler.is_running

    def destroy(self) -> None:
        """Stop the background sweep and drop all entries."""
        self._scheduler.stop()
        self.clear()

    def _remove(self, key: str) -> bool:
        """Remove an entry and release its size. Caller holds the lock."""
        entry = self._cache.pop(key, None)
        if entry is None:
            return False
        self._total_size -= entry.size
        return True

    def _evict_entries(self, size_needed: int) -> None:
        """
        Evict the least valuable entries until the incoming entry fits.

        Ordered by priority score, then by usage score, lowest first.
        Caller holds the lock.
        """
        now = self._clock()
        candidates = sorted(
            self._cache.values(),
            key=lambda e: (e.priority.score, e.usage_score(now)),
        )

        freed = 0
        evicted = 0
        for entry in candidates:
            if (
                len(self._cache) < self.config.max_entries
                and self._total_size + size_needed <= self.config.max_size
            ):
                break
            self._remove(entry.key)
            freed += entry.size
            evicted += 1

        self._stats["evictions"] += evicted

        if self._total_size + size_needed > self.config.max_size:
            logger.warning(
                f"Entry of {format_size(size_needed)} exceeds cache budget of "
                f"{format_size(self.config.max_size)}; storing over the limit"
            )
        logger.info(f"Evicted {evicted} entries, freed {format_size(freed)}")
