"""
Tests for the pausable cleanup timer.
"""
import threading

from content_cache.cache import CacheConfig, CacheManager, CleanupScheduler


def test_scheduler_fires_repeatedly():
    """Test that the callback runs on every interval until stopped"""
    fired = threading.Event()
    calls = []

    def callback():
        calls.append(1)
        if len(calls) >= 3:
            fired.set()

    scheduler = CleanupScheduler(0.01, callback)
    scheduler.start()
    try:
        assert fired.wait(timeout=5)
    finally:
        scheduler.stop()
    assert scheduler.is_running is False


def test_scheduler_survives_callback_error():
    """Test that a failing sweep does not stop future sweeps"""
    fired = threading.Event()
    calls = []

    def callback():
        calls.append(1)
        if len(calls) == 1:
            raise RuntimeError("boom")
        fired.set()

    scheduler = CleanupScheduler(0.01, callback)
    scheduler.start()
    try:
        assert fired.wait(timeout=5)
    finally:
        scheduler.stop()


def test_pause_prevents_firing():
    """Test that a paused scheduler does not call back"""
    fired = threading.Event()
    scheduler = CleanupScheduler(0.2, fired.set)
    scheduler.start()
    scheduler.pause()
    assert scheduler.is_running is False
    assert fired.wait(timeout=0.5) is False


def test_resume_is_idempotent():
    """Test that resuming a running scheduler keeps a single timer"""
    scheduler = CleanupScheduler(60, lambda: None)
    scheduler.resume()
    first = scheduler._timer
    scheduler.resume()
    assert scheduler._timer is first
    scheduler.stop()


def test_background_sweep_expires_entries():
    """Test that the cache's own timer removes cold expired entries"""
    now = [0.0]
    cache = CacheManager(
        CacheConfig(cleanup_interval=0.01),
        clock=lambda: now[0],
        start_cleanup=False,
    )
    cache.set("cold", "value", ttl=1)
    now[0] = 5.0

    swept = threading.Event()
    removed_counts = []
    original_cleanup = cache.cleanup

    def cleanup_and_signal():
        removed = original_cleanup()
        removed_counts.append(removed)
        swept.set()
        return removed

    cache._scheduler._callback = cleanup_and_signal
    cache.resume_cleanup()
    try:
        assert swept.wait(timeout=5)
    finally:
        cache.destroy()
    assert removed_counts[0] == 1
