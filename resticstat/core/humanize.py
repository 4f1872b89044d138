"""Presentation helpers: IEC byte sizes, relative times, ratios. Pure functions."""

from __future__ import annotations

from datetime import datetime, timezone

from resticstat.core.constants import (
    ABSOLUTE_TIME_FORMAT,
    BYTES_PER_UNIT,
    IEC_UNITS,
    NEVER,
)


def human_bytes(n: int | float) -> str:
    """Render a byte count with binary units, e.g. 1536 -> '1.50 KiB'."""
    if n < BYTES_PER_UNIT:
        return f"{int(n)} B"
    value = float(n)
    unit = -1
    while value >= BYTES_PER_UNIT and unit < len(IEC_UNITS) - 1:
        value /= BYTES_PER_UNIT
        unit += 1
    return f"{value:.2f} {IEC_UNITS[unit]}"


def human_since(ts: datetime | None, now: datetime | None = None) -> str:
    """Render how long ago ``ts`` was.

    Under a minute is "just now", under an hour "N min ago", under a day
    "H.h h ago". Anything older is shown as an absolute local date.
    Naive datetimes are treated as UTC.
    """
    if ts is None:
        return NEVER
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    if now is None:
        now = datetime.now(timezone.utc)
    elif now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)

    seconds = (now - ts).total_seconds()
    if seconds < 60:
        return "just now"
    if seconds < 3600:
        return f"{int(seconds // 60)} min ago"
    if seconds < 86400:
        return f"{seconds / 3600:.1f} h ago"
    try:
        ts = ts.astimezone()
    except OverflowError:
        pass  # year-1 timestamps can't shift west of UTC
    return ts.strftime(ABSOLUTE_TIME_FORMAT)


def format_ratio(value: float) -> str:
    return f"{value:.2f}"


def format_percent(value: float) -> str:
    return f"{value:.2f}%"
