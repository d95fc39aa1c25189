"""
Core cache data structures.
"""
from dataclasses import dataclass, field, asdict
from enum import Enum
from typing import Any, FrozenSet, Union


class Priority(Enum):
    """Eviction priority of a cache entry. Higher score survives longer."""
    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @property
    def score(self) -> int:
        """Numeric rank used to order eviction candidates."""
        return _PRIORITY_SCORES[self]

    @classmethod
    def coerce(cls, value: Union["Priority", str]) -> "Priority":
        """Accept either a Priority or its string value."""
        if isinstance(value, cls):
            return value
        return cls(str(value).lower())


_PRIORITY_SCORES = {
    Priority.CRITICAL: 4,
    Priority.HIGH: 3,
    Priority.MEDIUM: 2,
    Priority.LOW: 1,
}


@dataclass(frozen=True)
class RawValue:
    """A value stored as-is."""
    value: Any


@dataclass(frozen=True)
class CompressedValue:
    """A value stored as compressed serialized bytes."""
    payload: bytes


StoredValue = Union[RawValue, CompressedValue]


@dataclass
class CacheEntry:
    """
    A cached content section with the bookkeeping needed for expiry
    and eviction.
    """
    key: str
    data: StoredValue
    timestamp: float
    ttl: float
    size: int
    priority: Priority = Priority.MEDIUM
    tags: FrozenSet[str] = field(default_factory=frozenset)
    access_count: int = 0
    last_access: float = 0.0

    @property
    def is_compressed(self) -> bool:
        return isinstance(self.data, CompressedValue)

    def age(self, now: float) -> float:
        """Seconds since the entry was stored."""
        return now - self.timestamp

    def is_expired(self, now: float) -> bool:
        """An entry is still valid exactly at its deadline."""
        return self.age(now) > self.ttl

    def usage_score(self, now: float) -> float:
        """
        Frequency/recency score used to break ties within a priority.

        Rarely and long-ago accessed entries score lowest.
        """
        return self.access_count / max(1.0, now - self.last_access)


@dataclass
class CacheStats:
    """
    Snapshot of cache statistics.
    """
    entries: int = 0
    size: int = 0           # bytes
    hit_rate: float = 0.0   # percent
    miss_rate: float = 0.0  # percent
    evictions: int = 0
    compressions: int = 0

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON response."""
        return asdict(self)


@dataclass(frozen=True)
class CacheConfig:
    """
    Limits and timings for a CacheManager. Durations are in seconds.
    """
    max_size: int = 50 * 1024 * 1024           # 50 MiB
    max_entries: int = 1000
    default_ttl: float = 5 * 60                # 5 minutes
    cleanup_interval: float = 60               # 1 minute
    compression_threshold: int = 100 * 1024    # 100 KiB

    @classmethod
    def from_settings(cls, settings) -> "CacheConfig":
        """Build a config from the application Settings object."""
        return cls(
            max_size=settings.cache_max_size,
            max_entries=settings.cache_max_entries,
            default_ttl=settings.cache_default_ttl_seconds,
            cleanup_interval=settings.cache_cleanup_interval_seconds,
            compression_threshold=settings.cache_compression_threshold,
        )
