"""
In-memory content cache with per-key TTL, priority-aware eviction,
compression of large values and tag-based invalidation.
"""
from .core import (
    CacheConfig,
    CacheEntry,
    CacheStats,
    CompressedValue,
    Priority,
    RawValue,
    StoredValue,
)
from .ttl_policies import (
    CONTENT_CACHE_CONFIG,
    KeyPolicy,
    get_policy_for_key,
    resolve_entry_options,
)
from .scheduler import CleanupScheduler
from .manager import CacheManager

__all__ = [
    # Core types
    "CacheConfig",
    "CacheEntry",
    "CacheStats",
    "CompressedValue",
    "Priority",
    "RawValue",
    "StoredValue",
    # Per-key policies
    "CONTENT_CACHE_CONFIG",
    "KeyPolicy",
    "get_policy_for_key",
    "resolve_entry_options",
    # Scheduling
    "CleanupScheduler",
    # Manager
    "CacheManager",
]
