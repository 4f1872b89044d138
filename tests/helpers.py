"""Shared test helpers for resticstat tests."""

import threading
from collections import Counter

from resticstat.core.constants import QueryMode
from resticstat.core.errors import SourceError
from resticstat.sources.interface import TelemetrySource


RESTORE = {"total_size": 681918411961, "total_file_count": 1200, "snapshots_count": 3}
RAW = {
    "total_size": 340959205980,
    "total_uncompressed_size": 681918411961,
    "compression_ratio": 2.0,
    "compression_progress": 100,
    "compression_space_saving": 50.0,
    "total_blob_count": 4242,
    "snapshots_count": 3,
}
SNAPSHOTS = [
    {"time": "2025-01-01T10:00:00.123456789Z", "paths": ["/home", "/etc"], "id": "a1"},
    {"time": "2025-01-02T10:00:00Z", "paths": ["/home"], "id": "b2"},
]


def default_responses() -> dict:
    return {
        QueryMode.RESTORE_SIZE: RESTORE,
        QueryMode.RAW_DATA: RAW,
        QueryMode.SNAPSHOTS: SNAPSHOTS,
        QueryMode.LATEST_SNAPSHOT: SNAPSHOTS[-1:],
    }


class FakeSource(TelemetrySource):
    """Returns canned JSON per mode, records every call.

    ``failures`` maps profile name -> set of modes that raise SourceError.
    ``gate``, when set, blocks every run() until the event is set.
    """

    def __init__(self, responses: dict | None = None, failures: dict | None = None, gate: threading.Event | None = None):
        self.responses = responses or default_responses()
        self.failures = failures or {}
        self.gate = gate
        self.calls: Counter = Counter()
        self._lock = threading.Lock()

    def run(self, profile_dir: str, mode: str) -> dict | list:
        name = profile_dir.rstrip("/").rsplit("/", 1)[-1]
        with self._lock:
            self.calls[(name, mode)] += 1
        if self.gate is not None:
            self.gate.wait(timeout=5)
        if mode in self.failures.get(name, set()):
            raise SourceError(f"{mode} failed for {name}", mode=mode)
        return self.responses[mode]

    def get_backend_name(self) -> str:
        return "fake"

    @property
    def total_calls(self) -> int:
        with self._lock:
            return sum(self.calls.values())


class ExplodingSource(TelemetrySource):
    """Always raises SourceError."""

    def run(self, profile_dir: str, mode: str) -> dict | list:
        raise SourceError("resticprofile is down", mode=mode)

    def get_backend_name(self) -> str:
        return "exploding"


def make_profiles(root, *names):
    """Create profile directories under a tmp_path root."""
    for name in names:
        (root / name).mkdir()
    return root
