"""
Pydantic schemas for the cache admin API request/response models
"""
from pydantic import BaseModel
from typing import Any, Dict, List, Optional


# ===== STATS SCHEMAS =====

class CacheLimits(BaseModel):
    """Configured limits of the cache"""
    max_size: int
    max_size_human: str
    max_entries: int
    default_ttl_seconds: float
    compression_threshold: int


class CacheStatsResponse(BaseModel):
    """Cache statistics snapshot"""
    entries: int
    size: int
    size_human: str
    hit_rate: float
    miss_rate: float
    evictions: int
    compressions: int
    cleanup_running: bool
    limits: CacheLimits

    class Config:
        from_attributes = True


# ===== INVALIDATION SCHEMAS =====

class ClearResponse(BaseModel):
    """Result of an invalidation"""
    cleared: int
    tag: Optional[str] = None


class DeleteResponse(BaseModel):
    """Result of deleting one key"""
    key: str
    deleted: bool


# ===== WARMUP SCHEMAS =====

class HomeDocument(BaseModel):
    """Home page document sections used to warm the cache"""
    hero: Optional[Any] = None
    stats: Optional[Any] = None
    services: Optional[Any] = None
    portfolio: Optional[Any] = None

    class Config:
        extra = "allow"


class PreloadItem(BaseModel):
    """One entry to seed"""
    key: str
    data: Optional[Any] = None
    ttl: Optional[float] = None
    priority: Optional[str] = None
    tags: Optional[List[str]] = None


class WarmupResponse(BaseModel):
    """Number of entries seeded"""
    warmed: int


class CleanupStatus(BaseModel):
    """Background sweep state"""
    cleanup_running: bool


def options_from_item(item: PreloadItem) -> Dict[str, Any]:
    """Build CacheManager.set options from a preload item."""
    return {"ttl": item.ttl, "priority": item.priority, "tags": item.tags}
