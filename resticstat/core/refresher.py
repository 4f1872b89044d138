"""RefreshWorker: background thread that keeps the stats cache warm.

Runs a forced refresh every ``interval`` seconds so queries are normally
answered from cache. Refreshes go through the cache's single-flight path,
so a round already started by a query is joined, not duplicated.
"""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from resticstat.core.cache import StatsCache

logger = logging.getLogger(__name__)


class RefreshWorker:
    """Daemon thread calling ``cache.refresh()`` on a fixed interval.

    The first refresh runs immediately on start. Failures are logged and
    retried on the next tick; the previous cache entry keeps being served.
    """

    def __init__(self, cache: StatsCache, interval: float):
        self.cache = cache
        self.interval = interval
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None

    def start(self) -> None:
        """Start the background refresh thread."""
        if self.interval <= 0:
            logger.info("RefreshWorker: skipping start (interval disabled)")
            return

        self._stop_event.clear()
        self._thread = threading.Thread(target=self._run_loop, daemon=True, name="RefreshWorker")
        self._thread.start()
        logger.info("RefreshWorker: started (every %ss)", self.interval)

    def stop(self) -> None:
        """Signal the worker to stop and wait for it to finish."""
        if self._thread is None:
            return

        self._stop_event.set()
        self._thread.join(timeout=10)
        if self._thread.is_alive():
            logger.warning("RefreshWorker: thread did not stop within timeout")
        else:
            logger.info("RefreshWorker: stopped")
        self._thread = None

    def _run_loop(self) -> None:
        while not self._stop_event.is_set():
            self.tick()
            self._stop_event.wait(timeout=self.interval)

    def tick(self) -> None:
        """Run one refresh, swallowing the error after logging it."""
        try:
            self.cache.refresh()
        except Exception:
            logger.warning("RefreshWorker: refresh failed", exc_info=True)
