"""
Content Cache - admin API for inspecting and invalidating the content cache
"""
import logging
from contextlib import asynccontextmanager
from typing import List, Optional

from fastapi import Depends, FastAPI, HTTPException, Request

from content_cache.cache import CacheConfig, CacheManager
from content_cache.schemas import (
    CacheLimits,
    CacheStatsResponse,
    CleanupStatus,
    ClearResponse,
    DeleteResponse,
    HomeDocument,
    PreloadItem,
    WarmupResponse,
    options_from_item,
)
from content_cache.utils.helpers import format_size
from config.settings import Settings, settings as default_settings

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("content_cache.main")

# Version tracking
APP_VERSION = "v0.1.0"
APP_NAME = "Content Cache"


def get_cache(request: Request) -> CacheManager:
    """Dependency: the cache instance owned by the running app."""
    return request.app.state.cache


def create_app(
    cache: Optional[CacheManager] = None,
    settings: Optional[Settings] = None,
) -> FastAPI:
    """
    Build the admin app around a cache instance.

    Args:
        cache: Cache to expose; built from settings when omitted
        settings: Settings used to build the cache and toggle the sweep
    """
    settings = settings or default_settings
    if cache is None:
        cache = CacheManager(CacheConfig.from_settings(settings), start_cleanup=False)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if settings.cache_cleanup_enabled:
            app.state.cache.resume_cleanup()
        logger.info("Content cache started")
        yield
        app.state.cache.destroy()
        logger.info("Content cache stopped")

    app = FastAPI(
        title=APP_NAME,
        description="In-memory content cache administration",
        version=APP_VERSION,
        lifespan=lifespan,
    )
    app.state.cache = cache

    @app.get("/health")
    def health_check():
        """Health check endpoint."""
        return {"status": "ok"}

    @app.get("/version")
    def version_info():
        """Version information endpoint."""
        return {
            "name": APP_NAME,
            "version": APP_VERSION,
            "full": f"{APP_NAME} {APP_VERSION}",
        }

    @app.get("/cache/stats", response_model=CacheStatsResponse)
    def cache_stats(cache: CacheManager = Depends(get_cache)):
        """Get cache statistics."""
        stats = cache.get_stats()
        config = cache.config
        return CacheStatsResponse(
            entries=stats.entries,
            size=stats.size,
            size_human=format_size(stats.size),
            hit_rate=round(stats.hit_rate, 1),
            miss_rate=round(stats.miss_rate, 1),
            evictions=stats.evictions,
            compressions=stats.compressions,
            cleanup_running=cache.cleanup_running,
            limits=CacheLimits(
                max_size=config.max_size,
                max_size_human=format_size(config.max_size),
                max_entries=config.max_entries,
                default_ttl_seconds=config.default_ttl,
                compression_threshold=config.compression_threshold,
            ),
        )

    @app.delete("/cache", response_model=ClearResponse)
    def clear_cache(cache: CacheManager = Depends(get_cache)):
        """Drop every entry and reset counters."""
        return ClearResponse(cleared=cache.clear())

    @app.delete("/cache/tags/{tag}", response_model=ClearResponse)
    def clear_tag(tag: str, cache: CacheManager = Depends(get_cache)):
        """Drop every entry carrying a tag."""
        return ClearResponse(cleared=cache.clear_by_tag(tag), tag=tag)

    @app.delete("/cache/entries/{key}", response_model=DeleteResponse)
    def delete_entry(key: str, cache: CacheManager = Depends(get_cache)):
        """Drop a single entry."""
        if not cache.delete(key):
            raise HTTPException(status_code=404, detail=f"No cache entry for '{key}'")
        return DeleteResponse(key=key, deleted=True)

    @app.post("/cache/warmup", response_model=WarmupResponse)
    def warmup(home: HomeDocument, cache: CacheManager = Depends(get_cache)):
        """Seed the home sections from an already-fetched home document."""
        return WarmupResponse(warmed=cache.warmup_home_cache(home.model_dump()))

    @app.post("/cache/preload", response_model=WarmupResponse)
    def preload(items: List[PreloadItem], cache: CacheManager = Depends(get_cache)):
        """Seed arbitrary keys."""
        loaded = cache.preload(
            {"key": item.key, "data": item.data, "options": options_from_item(item)}
            for item in items
        )
        return WarmupResponse(warmed=loaded)

    @app.post("/cache/cleanup/pause", response_model=CleanupStatus)
    def pause_cleanup(cache: CacheManager = Depends(get_cache)):
        """Suspend the expiry sweep while the host is idle."""
        cache.pause_cleanup()
        return CleanupStatus(cleanup_running=cache.cleanup_running)

    @app.post("/cache/cleanup/resume", response_model=CleanupStatus)
    def resume_cleanup(cache: CacheManager = Depends(get_cache)):
        """Restart the expiry sweep."""
        cache.resume_cleanup()
        return CleanupStatus(cleanup_running=cache.cleanup_running)

    @app.post("/cache/cleanup", response_model=ClearResponse)
    def run_cleanup(cache: CacheManager = Depends(get_cache)):
        """Sweep expired entries now."""
        return ClearResponse(cleared=cache.cleanup())

    return app


app = create_app()
