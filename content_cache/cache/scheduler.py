"""
Pausable periodic timer for the background expiry sweep.
"""
import logging
import threading
from typing import Callable, Optional

logger = logging.getLogger("cache.scheduler")


class CleanupScheduler:
    """
    Runs a callback every `interval` seconds on a daemon timer thread.

    Pausing cancels the pending firing; resuming schedules a new one.
    A sweep already running is synchronous and is never interrupted.

    Usage:
        scheduler = CleanupScheduler(60, cache.cleanup)
        scheduler.start()
        scheduler.pause()   # host went idle
        scheduler.resume()  # host active again
    """

    def __init__(self, interval: float, callback: Callable[[], object]):
        """
        Args:
            interval: Seconds between firings
            callback: Function to call on each firing
        """
        self.interval = interval
        self._callback = callback
        self._timer: Optional[threading.Timer] = None
        self._lock = threading.Lock()

    @property
    def is_running(self) -> bool:
        with self._lock:
            return self._timer is not None

    def start(self) -> None:
        """Schedule the next firing, unless one is already pending."""
        with self._lock:
            if self._timer is not None:
                return
            self._schedule()

    def stop(self) -> None:
        """Cancel any pending firing."""
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None

    # Pause/resume are start/stop under the names the host's idle signal uses
    def pause(self) -> None:
        logger.debug("Cleanup timer paused")
        self.stop()

    def resume(self) -> None:
        logger.debug("Cleanup timer resumed")
        self.start()

    def _schedule(self) -> None:
        timer = threading.Timer(self.interval, self._run)
        timer.daemon = True
        timer.name = "cache-cleanup"
        self._timer = timer
        timer.start()

    def _run(self) -> None:
        with self._lock:
            if self._timer is None or self._timer is not threading.current_thread():
                # Stopped (or restarted) after this firing was due
                return
        try:
            self._callback()
        except Exception as e:
            logger.warning(f"Cache cleanup failed: {e}")
        finally:
            with self._lock:
                if self._timer is threading.current_thread():
                    self._schedule()
