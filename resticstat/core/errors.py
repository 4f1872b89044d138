"""Error types raised by the aggregation pipeline."""

from __future__ import annotations


class StatsError(Exception):
    """Base class for resticstat failures."""


class DiscoveryError(StatsError):
    """The data root could not be listed. Fatal for a refresh round."""


class SourceError(StatsError):
    """A telemetry source invocation failed or produced unusable output."""

    def __init__(self, message: str, *, mode: str = "", returncode: int | None = None, stderr: str = ""):
        super().__init__(message)
        self.mode = mode
        self.returncode = returncode
        self.stderr = stderr
