"""resticprofile CLI backend: spawns ``resticprofile`` once per (profile, mode).

resticprofile picks up the ``profiles.yaml`` in its working directory, so
each profile directory is passed as ``cwd``. The tool mixes progress text
with a single JSON document on stdout; the first line that opens a JSON
object or array is decoded and everything else is logged.
"""

from __future__ import annotations

import json
import logging
import subprocess

from resticstat.config import SourceConfig
from resticstat.core.constants import STDERR_EXCERPT, QueryMode
from resticstat.core.errors import SourceError
from resticstat.sources.interface import TelemetrySource

logger = logging.getLogger(__name__)

# Mode -> resticprofile arguments (after the binary)
_MODE_ARGS: dict[str, list[str]] = {
    QueryMode.RESTORE_SIZE: ["stats", "--mode", "restore-size", "--json"],
    QueryMode.RAW_DATA: ["stats", "--mode", "raw-data", "--json"],
    QueryMode.SNAPSHOTS: ["snapshots", "--json"],
    QueryMode.LATEST_SNAPSHOT: ["snapshots", "--latest", "1", "--json"],
}


def extract_json_line(output: str, mode: str = "") -> dict | list:
    """Decode the first line of ``output`` that starts with ``{`` or ``[``.

    Every other non-blank line is logged, including those after the JSON.

    Raises:
        SourceError: no such line, or it isn't valid JSON.
    """
    json_line = None
    for line in output.splitlines():
        stripped = line.strip()
        if json_line is None and stripped.startswith(("{", "[")):
            json_line = stripped
        elif stripped:
            logger.debug("[%s] %s", mode, stripped)

    if json_line is None:
        raise SourceError(f"no JSON line in {mode} output", mode=mode)
    try:
        return json.loads(json_line)
    except json.JSONDecodeError as e:
        raise SourceError(f"decode {mode} JSON: {e}", mode=mode) from e


def _log_stderr(stderr: str, mode: str) -> None:
    for line in stderr.splitlines():
        if line.strip():
            logger.debug("[%s] stderr: %s", mode, line.rstrip())


class ResticProfileSource(TelemetrySource):
    """Runs the resticprofile binary with a bounded timeout."""

    def __init__(self, config: SourceConfig | None = None):
        self._config = config or SourceConfig()

    def get_backend_name(self) -> str:
        return "resticprofile"

    def build_args(self, mode: str) -> list[str]:
        try:
            return [self._config.binary, *_MODE_ARGS[mode]]
        except KeyError:
            raise SourceError(f"unsupported query mode: {mode!r}", mode=mode) from None

    def run(self, profile_dir: str, mode: str) -> dict | list:
        args = self.build_args(mode)
        logger.debug("Running %s in %s", " ".join(args), profile_dir)

        try:
            result = subprocess.run(
                args, capture_output=True, text=True, encoding="utf-8", errors="replace",
                cwd=profile_dir, timeout=self._config.timeout,
            )
        except subprocess.TimeoutExpired:
            raise SourceError(
                f"resticprofile {mode} timed out after {self._config.timeout}s",
                mode=mode,
            )
        except FileNotFoundError:
            raise SourceError(
                f"resticprofile binary not found at {self._config.binary}",
                mode=mode,
            )
        except OSError as e:
            raise SourceError(f"resticprofile {mode} failed to start: {e}", mode=mode) from e

        stderr = (result.stderr or "").strip()
        _log_stderr(stderr, mode)
        if result.returncode != 0:
            raise SourceError(
                f"resticprofile {mode} exited with code {result.returncode}: {stderr[:STDERR_EXCERPT]}",
                mode=mode,
                returncode=result.returncode,
                stderr=stderr[:STDERR_EXCERPT],
            )
        return extract_json_line(result.stdout or "", mode=mode)
