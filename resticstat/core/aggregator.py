"""Stats aggregation: one enriched ProfileStats per profile directory.

Each profile is queried three times (restore-size, raw-data, snapshots)
and the results merged. A profile whose queries fail is logged and left
out; the others are unaffected. Only an unreadable data root fails the
whole pass.
"""

from __future__ import annotations

import logging
import os
from datetime import datetime
from typing import TYPE_CHECKING

from pydantic import ValidationError

from resticstat.core.constants import QueryMode
from resticstat.core.discovery import discover_profiles
from resticstat.core.errors import SourceError
from resticstat.core.humanize import format_percent, format_ratio, human_bytes, human_since
from resticstat.core.models import (
    PathSnapshot,
    ProfileStats,
    RawTotals,
    RestoreTotals,
    SnapshotList,
)
from resticstat.core.snapshots import SnapshotSummary, summarize_snapshots

if TYPE_CHECKING:
    from resticstat.core.stats import RefreshStats
    from resticstat.sources.interface import TelemetrySource

logger = logging.getLogger(__name__)


def build_profile_stats(
    name: str,
    restore: RestoreTotals,
    raw: RawTotals,
    summary: SnapshotSummary,
    now: datetime | None = None,
) -> ProfileStats:
    """Merge the three raw results into one presentation-ready record."""
    paths = tuple(
        PathSnapshot(path=path, last_snapshot=human_since(ts, now))
        for path, ts in sorted(summary.per_path.items())
    )
    return ProfileStats(
        name=name,
        restore_bytes=restore.total_size,
        restore_human=human_bytes(restore.total_size),
        restore_files=restore.total_file_count,
        raw_bytes=raw.total_size,
        raw_human=human_bytes(raw.total_size),
        uncompressed_bytes=raw.total_uncompressed_size,
        uncompressed_human=human_bytes(raw.total_uncompressed_size),
        compression_ratio=raw.compression_ratio,
        compression_ratio_human=format_ratio(raw.compression_ratio),
        compression_space_saving=raw.compression_space_saving,
        compression_space_saving_human=format_percent(raw.compression_space_saving),
        compression_progress=int(raw.compression_progress),
        raw_blob_count=raw.total_blob_count,
        snapshots=restore.snapshots_count,
        last_snapshot=human_since(summary.latest, now),
        paths=paths,
    )


class StatsAggregator:
    """Runs one aggregation pass over every profile under the data root.

    Profiles are processed sequentially to bound the load put on the
    backup repositories.
    """

    def __init__(
        self,
        source: TelemetrySource,
        data_root: str,
        *,
        reduced_mode: bool = False,
        stats: RefreshStats | None = None,
    ):
        self.source = source
        self.data_root = data_root
        self.reduced_mode = reduced_mode
        self.stats = stats

    def __call__(self) -> list[ProfileStats]:
        return self.aggregate()

    def aggregate(self) -> list[ProfileStats]:
        """Aggregate all profiles.

        Raises:
            DiscoveryError: the data root can't be listed.
        """
        names = discover_profiles(self.data_root)
        results: list[ProfileStats] = []
        skipped: list[str] = []

        for name in names:
            profile_dir = os.path.join(self.data_root, name)
            try:
                if self.reduced_mode:
                    record = self._aggregate_reduced(name, profile_dir)
                else:
                    record = self._aggregate_full(name, profile_dir)
            except (SourceError, ValidationError) as e:
                logger.warning("Skipping profile %s: %s", name, e)
                skipped.append(name)
                continue
            results.append(record)

        logger.info(
            "Aggregated %d/%d profiles under %s%s",
            len(results), len(names), self.data_root,
            " (reduced mode)" if self.reduced_mode else "",
        )
        if self.stats:
            self.stats.record_profiles(len(results), skipped)
        return results

    def _aggregate_full(self, name: str, profile_dir: str) -> ProfileStats:
        restore = RestoreTotals.model_validate(
            self._query(profile_dir, QueryMode.RESTORE_SIZE, dict)
        )
        raw = RawTotals.model_validate(
            self._query(profile_dir, QueryMode.RAW_DATA, dict)
        )
        entries = SnapshotList.validate_python(
            self._query(profile_dir, QueryMode.SNAPSHOTS, list)
        )
        return build_profile_stats(name, restore, raw, summarize_snapshots(entries))

    def _aggregate_reduced(self, name: str, profile_dir: str) -> ProfileStats:
        entries = SnapshotList.validate_python(
            self._query(profile_dir, QueryMode.LATEST_SNAPSHOT, list)
        )
        return build_profile_stats(
            name, RestoreTotals(), RawTotals(), summarize_snapshots(entries),
        )

    def _query(self, profile_dir: str, mode: str, expected: type) -> dict | list:
        data = self.source.run(profile_dir, mode)
        if not isinstance(data, expected):
            raise SourceError(
                f"{mode} returned {type(data).__name__}, expected {expected.__name__}",
                mode=mode,
            )
        return data
