"""Coalescing TTL cache for aggregated profile stats.

Serves the last completed aggregation while it is younger than the TTL.
Once stale, the first caller starts a refresh round and every caller that
arrives before it finishes waits on the same future, so one round costs
one set of resticprofile invocations no matter how many requests queue up.

A failed round leaves the previous entry in place and hands the error to
the callers of that round only.
"""

from __future__ import annotations

import logging
import threading
import time
from concurrent.futures import Future
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Callable, Iterable

from resticstat.core.models import CacheEntry, ProfileStats

if TYPE_CHECKING:
    from resticstat.core.stats import RefreshStats

logger = logging.getLogger(__name__)


class StatsCache:
    """Single-flight cache around an aggregation callable.

    Args:
        aggregate: Zero-arg callable returning the profile records.
        ttl_seconds: Maximum entry age served without refreshing.
        stats: Optional RefreshStats to record round outcomes.
        clock: Monotonic time source, injectable for tests.
    """

    def __init__(
        self,
        aggregate: Callable[[], Iterable[ProfileStats]],
        ttl_seconds: float,
        *,
        stats: RefreshStats | None = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._aggregate = aggregate
        self.ttl_seconds = ttl_seconds
        self.stats = stats
        self._clock = clock

        self._entry: CacheEntry | None = None
        self._entry_lock = threading.Lock()  # guards _entry
        self._flight_lock = threading.Lock()  # guards _inflight
        self._inflight: Future | None = None

    # -- Public ------------------------------------------------------------

    @property
    def entry(self) -> CacheEntry | None:
        """The last completed entry, fresh or not. Never triggers work."""
        with self._entry_lock:
            return self._entry

    def age(self) -> float | None:
        entry = self.entry
        if entry is None:
            return None
        return self._clock() - entry.completed_at

    @property
    def refreshing(self) -> bool:
        with self._flight_lock:
            return self._inflight is not None

    def query(self) -> tuple[ProfileStats, ...]:
        """Return cached profiles, refreshing first if the entry is stale.

        Raises:
            Exception: whatever the aggregation round this call joined raised.
        """
        entry = self._fresh_entry()
        if entry is not None:
            return entry.profiles
        return self._join_round(force=False)

    def refresh(self) -> tuple[ProfileStats, ...]:
        """Run (or join) a refresh round even if the entry is still fresh."""
        return self._join_round(force=True)

    # -- Internal ----------------------------------------------------------

    def _fresh_entry(self) -> CacheEntry | None:
        with self._entry_lock:
            entry = self._entry
        if entry is not None and self._clock() - entry.completed_at < self.ttl_seconds:
            return entry
        return None

    def _join_round(self, *, force: bool) -> tuple[ProfileStats, ...]:
        with self._flight_lock:
            flight = self._inflight
            if flight is None:
                # A round may have landed between the caller's freshness
                # check and taking the lock.
                if not force:
                    entry = self._fresh_entry()
                    if entry is not None:
                        return entry.profiles
                flight = self._inflight = Future()
                leader = True
            else:
                leader = False

        if not leader:
            if self.stats:
                self.stats.record_waiter()
            return flight.result()

        return self._run_round(flight)

    def _run_round(self, flight: Future) -> tuple[ProfileStats, ...]:
        if self.stats:
            self.stats.record_round_started()
        started = self._clock()
        logger.info("Stats refresh started")

        try:
            profiles = tuple(self._aggregate())
        except BaseException as e:
            duration = self._clock() - started
            logger.warning("Stats refresh failed after %.1fs: %s", duration, e)
            if self.stats:
                self.stats.record_failure(str(e), duration)
            self._settle(flight, exc=e)
            raise

        entry = CacheEntry(
            profiles=profiles,
            completed_at=self._clock(),
            completed_wall=datetime.now(timezone.utc),
        )
        with self._entry_lock:
            self._entry = entry

        duration = entry.completed_at - started
        logger.info("Stats refresh finished in %.1fs (%d profiles)", duration, len(profiles))
        if self.stats:
            self.stats.record_success(duration)
        self._settle(flight, result=profiles)
        return profiles

    def _settle(self, flight: Future, *, result=None, exc: BaseException | None = None) -> None:
        """Clear the round slot, then wake every waiter with the outcome."""
        with self._flight_lock:
            self._inflight = None
        if exc is not None:
            flight.set_exception(exc)
        else:
            flight.set_result(result)
