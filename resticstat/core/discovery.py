"""Profile discovery: every immediate subdirectory of the data root is a profile."""

from __future__ import annotations

import logging
import os

from resticstat.core.errors import DiscoveryError

logger = logging.getLogger(__name__)


def discover_profiles(root: str) -> list[str]:
    """Return profile names under ``root``, sorted by name.

    Names are used verbatim, dot-directories included. Files are ignored,
    as is any child whose type can't be determined. No recursion.

    Raises:
        DiscoveryError: the root is missing or unreadable.
    """
    names: list[str] = []
    try:
        with os.scandir(root) as it:
            for entry in it:
                try:
                    if entry.is_dir():
                        names.append(entry.name)
                except OSError as e:
                    logger.warning("Skipping %s under %s: %s", entry.name, root, e)
    except OSError as e:
        raise DiscoveryError(f"cannot list data root {root}: {e}") from e

    names.sort()
    logger.debug("Discovered %d profiles under %s", len(names), root)
    return names
