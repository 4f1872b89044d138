"""Thread-safe refresh-round stats. In-memory only: resets on restart."""

import threading
from collections import deque
from datetime import datetime, timezone

from resticstat.core.constants import HEALTH_WINDOW


class RefreshStats:
    """Track refresh rounds, per-profile skips, and derive health."""

    def __init__(self):
        self._lock = threading.RLock()
        self._rounds_started = 0
        self._rounds_completed = 0
        self._rounds_failed = 0
        self._coalesced_waiters = 0
        self._profiles_aggregated = 0
        self._profiles_skipped = 0
        self._skipped_names: list[str] = []
        self._last_duration_s: float | None = None
        self._last_success: datetime | None = None
        self._last_error: datetime | None = None
        self._last_error_msg: str | None = None
        # Rolling window of round outcomes: True = success, False = error
        self._recent: deque[bool] = deque(maxlen=HEALTH_WINDOW)

    def record_round_started(self) -> None:
        with self._lock:
            self._rounds_started += 1

    def record_waiter(self) -> None:
        with self._lock:
            self._coalesced_waiters += 1

    def record_profiles(self, aggregated: int, skipped: list[str]) -> None:
        with self._lock:
            self._profiles_aggregated = aggregated
            self._profiles_skipped = len(skipped)
            self._skipped_names = list(skipped)

    def record_success(self, duration_s: float) -> None:
        with self._lock:
            self._rounds_completed += 1
            self._last_duration_s = duration_s
            self._last_success = datetime.now(timezone.utc)
            self._recent.append(True)

    def record_failure(self, msg: str, duration_s: float) -> None:
        with self._lock:
            self._rounds_failed += 1
            self._last_duration_s = duration_s
            self._last_error = datetime.now(timezone.utc)
            self._last_error_msg = msg
            self._recent.append(False)

    @property
    def health(self) -> str:
        with self._lock:
            if not self._recent:
                return "unknown"
            recent = list(self._recent)
        # Last 3+ consecutive failures = unhealthy
        if len(recent) >= 3 and all(not r for r in recent[-3:]):
            return "unhealthy"
        # Any error in window = degraded
        if any(not r for r in recent):
            return "degraded"
        return "healthy"

    def to_dict(self) -> dict:
        with self._lock:
            return {
                "health": self.health,
                "rounds": {
                    "started": self._rounds_started,
                    "completed": self._rounds_completed,
                    "failed": self._rounds_failed,
                    "coalesced_waiters": self._coalesced_waiters,
                },
                "last_round": {
                    "profiles_aggregated": self._profiles_aggregated,
                    "profiles_skipped": self._profiles_skipped,
                    "skipped": list(self._skipped_names),
                    "duration_s": round(self._last_duration_s, 3) if self._last_duration_s is not None else None,
                },
                "last_success": self._last_success.isoformat() if self._last_success else None,
                "last_error": self._last_error.isoformat() if self._last_error else None,
                "last_error_msg": self._last_error_msg,
            }
