"""Tests for resticstat.core.humanize: byte sizes, relative times, ratios."""

from datetime import datetime, timedelta, timezone

import pytest

from resticstat.core.humanize import format_percent, format_ratio, human_bytes, human_since


NOW = datetime(2025, 1, 2, 12, 0, tzinfo=timezone.utc)


class TestHumanBytes:
    @pytest.mark.parametrize("n,expected", [
        (0, "0 B"),
        (999, "999 B"),
        (1023, "1023 B"),
        (1024, "1.00 KiB"),
        (1536, "1.50 KiB"),
        (1048576, "1.00 MiB"),
        (681918411961, "635.09 GiB"),
        (5 * 1024 ** 4, "5.00 TiB"),
        (1024 ** 6, "1.00 EiB"),
    ])
    def test_iec_units(self, n, expected):
        assert human_bytes(n) == expected

    def test_caps_at_exbibytes(self):
        assert human_bytes(1024 ** 7) == "1024.00 EiB"


class TestHumanSince:
    def test_just_now(self):
        assert human_since(NOW - timedelta(seconds=30), now=NOW) == "just now"

    def test_just_under_a_minute(self):
        assert human_since(NOW - timedelta(seconds=59), now=NOW) == "just now"

    def test_minutes(self):
        assert human_since(NOW - timedelta(minutes=15), now=NOW) == "15 min ago"

    def test_whole_minutes_truncate(self):
        assert human_since(NOW - timedelta(minutes=15, seconds=50), now=NOW) == "15 min ago"

    def test_hours_one_decimal(self):
        assert human_since(NOW - timedelta(hours=2, minutes=18), now=NOW) == "2.3 h ago"

    def test_exactly_one_hour(self):
        assert human_since(NOW - timedelta(hours=1), now=NOW) == "1.0 h ago"

    def test_older_than_a_day_is_absolute(self):
        ts = NOW - timedelta(hours=30)
        expected = ts.astimezone().strftime("%Y-%m-%d %H:%M")
        assert human_since(ts, now=NOW) == expected

    def test_none_is_never(self):
        assert human_since(None, now=NOW) == "never"

    def test_naive_timestamp_is_utc(self):
        naive = (NOW - timedelta(minutes=5)).replace(tzinfo=None)
        assert human_since(naive, now=NOW) == "5 min ago"

    def test_epoch_renders_absolute(self):
        epoch = datetime(1970, 1, 1, tzinfo=timezone.utc)
        assert human_since(epoch, now=NOW) == epoch.astimezone().strftime("%Y-%m-%d %H:%M")

    def test_defaults_to_current_time(self):
        assert human_since(datetime.now(timezone.utc)) == "just now"


class TestRatioFormatting:
    def test_ratio_two_decimals(self):
        assert format_ratio(2.0) == "2.00"
        assert format_ratio(1.23456) == "1.23"

    def test_percent_suffix(self):
        assert format_percent(50.0) == "50.00%"
        assert format_percent(33.333) == "33.33%"
