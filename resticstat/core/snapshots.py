"""Snapshot summarization: latest snapshot overall and per source path."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable

from resticstat.core.models import SnapshotEntry


@dataclass
class SnapshotSummary:
    latest: datetime | None = None
    per_path: dict[str, datetime] = field(default_factory=dict)


def summarize_snapshots(entries: Iterable[SnapshotEntry]) -> SnapshotSummary:
    """Reduce a snapshot listing to its newest timestamp and, for every
    distinct path, the newest snapshot that included it."""
    summary = SnapshotSummary()
    for entry in entries:
        if summary.latest is None or entry.time > summary.latest:
            summary.latest = entry.time
        for path in entry.paths:
            seen = summary.per_path.get(path)
            if seen is None or entry.time > seen:
                summary.per_path[path] = entry.time
    return summary
