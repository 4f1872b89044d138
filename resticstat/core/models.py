"""Data model: raw resticprofile JSON results and the enriched per-profile record.

Raw results are pydantic models so malformed tool output fails validation
instead of leaking into the merge. The enriched records are frozen
dataclasses built once per refresh round.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import datetime, timezone

from pydantic import BaseModel, TypeAdapter, field_validator

# restic emits RFC3339 with nanoseconds; datetime stops at microseconds.
_FRACTION_RE = re.compile(r"(\.\d{6})\d+")


# ============================================================
# Raw query results
# ============================================================

class RestoreTotals(BaseModel):
    """``stats --mode restore-size --json``."""
    total_size: int = 0
    total_file_count: int = 0
    snapshots_count: int = 0


class RawTotals(BaseModel):
    """``stats --mode raw-data --json``."""
    total_size: int = 0
    total_uncompressed_size: int = 0
    compression_ratio: float = 0.0
    compression_progress: float = 0.0
    compression_space_saving: float = 0.0
    total_blob_count: int = 0
    snapshots_count: int = 0


class SnapshotEntry(BaseModel):
    """One element of ``snapshots --json``. Only time and paths matter here."""
    time: datetime
    paths: list[str] = []

    @field_validator("time", mode="before")
    @classmethod
    def trim_fraction(cls, v):
        if isinstance(v, str):
            v = _FRACTION_RE.sub(r"\1", v.strip())
            if v.endswith("Z"):
                v = v[:-1] + "+00:00"
        return v

    @field_validator("time")
    @classmethod
    def assume_utc(cls, v: datetime) -> datetime:
        return v if v.tzinfo is not None else v.replace(tzinfo=timezone.utc)

    @field_validator("paths", mode="before")
    @classmethod
    def null_paths(cls, v):
        return v or []


SnapshotList = TypeAdapter(list[SnapshotEntry])


# ============================================================
# Enriched output
# ============================================================

@dataclass(frozen=True)
class PathSnapshot:
    """A backed-up source path and how recently it was last snapshotted."""
    path: str
    last_snapshot: str

    def to_dict(self) -> dict:
        return {"path": self.path, "last_snapshot": self.last_snapshot}


@dataclass(frozen=True)
class ProfileStats:
    name: str

    # Restore-size stats
    restore_bytes: int = 0
    restore_human: str = "0 B"
    restore_files: int = 0

    # Raw-data stats
    raw_bytes: int = 0
    raw_human: str = "0 B"
    uncompressed_bytes: int = 0
    uncompressed_human: str = "0 B"
    compression_ratio: float = 0.0
    compression_ratio_human: str = "0.00"
    compression_space_saving: float = 0.0
    compression_space_saving_human: str = "0.00%"
    compression_progress: int = 0
    raw_blob_count: int = 0

    # Common
    snapshots: int = 0
    last_snapshot: str = "never"
    paths: tuple[PathSnapshot, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "restore_bytes": self.restore_bytes,
            "restore_human": self.restore_human,
            "restore_files": self.restore_files,
            "raw_bytes": self.raw_bytes,
            "raw_human": self.raw_human,
            "uncompressed_bytes": self.uncompressed_bytes,
            "uncompressed_human": self.uncompressed_human,
            "compression_ratio": self.compression_ratio,
            "compression_ratio_human": self.compression_ratio_human,
            "compression_space_saving": self.compression_space_saving,
            "compression_space_saving_human": self.compression_space_saving_human,
            "compression_progress": self.compression_progress,
            "raw_blob_count": self.raw_blob_count,
            "snapshots": self.snapshots,
            "last_snapshot": self.last_snapshot,
            "paths": [p.to_dict() for p in self.paths],
        }


@dataclass(frozen=True)
class CacheEntry:
    """One completed aggregation pass. Replaced whole, never mutated."""
    profiles: tuple[ProfileStats, ...]
    completed_at: float  # monotonic clock, for TTL checks
    completed_wall: datetime  # for display
