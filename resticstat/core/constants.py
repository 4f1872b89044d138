"""Centralized constants for resticstat core modules."""

from __future__ import annotations


# ============================================================
# Query modes
# ============================================================

class QueryMode:
    RESTORE_SIZE = "restore-size"
    RAW_DATA = "raw-data"
    SNAPSHOTS = "snapshots"
    LATEST_SNAPSHOT = "latest-snapshot"

    ALL = {RESTORE_SIZE, RAW_DATA, SNAPSHOTS, LATEST_SNAPSHOT}


# ============================================================
# Humanizer
# ============================================================

IEC_UNITS = ["KiB", "MiB", "GiB", "TiB", "PiB", "EiB"]
BYTES_PER_UNIT = 1024

NEVER = "never"
ABSOLUTE_TIME_FORMAT = "%Y-%m-%d %H:%M"


# ============================================================
# Refresh stats
# ============================================================

HEALTH_WINDOW = 5  # rolling window of round outcomes
STDERR_EXCERPT = 500  # chars of tool stderr kept on a SourceError
