"""
Tests for datetime utilities module.

Tests timezone handling, UTC conversion, elapsed time and ISO serialization.
"""
from datetime import datetime, timezone, timedelta

from callhub.utils.datetime_utils import utc_now, ensure_utc, seconds_between, to_iso_utc


class TestUtcNow:
    """Tests for utc_now() function."""

    def test_returns_timezone_aware_datetime(self):
        """Test that utc_now returns timezone-aware datetime."""
        result = utc_now()
        assert result.tzinfo == timezone.utc

    def test_returns_current_time(self):
        """Test that utc_now returns approximately current time."""
        before = datetime.now(timezone.utc)
        result = utc_now()
        after = datetime.now(timezone.utc)

        assert before <= result <= after


class TestEnsureUtc:
    """Tests for ensure_utc() function."""

    def test_converts_naive_datetime_to_aware(self):
        """Test that naive datetime is treated as UTC."""
        result = ensure_utc(datetime(2025, 12, 16, 11, 30, 0, 123456))

        assert result == datetime(2025, 12, 16, 11, 30, 0, 123456, tzinfo=timezone.utc)

    def test_converts_other_timezone_to_utc(self):
        """Test that aware non-UTC datetime is converted."""
        plus_eight = timezone(timedelta(hours=8))
        result = ensure_utc(datetime(2025, 12, 16, 19, 30, tzinfo=plus_eight))

        assert result.tzinfo == timezone.utc
        assert result.hour == 11

    def test_none_returns_none(self):
        assert ensure_utc(None) is None


class TestSecondsBetween:
    """Tests for seconds_between() function."""

    def test_mixed_naive_and_aware(self):
        """Test that naive (SQLite) and aware values subtract cleanly."""
        start = datetime(2025, 12, 16, 11, 30)
        end = datetime(2025, 12, 16, 11, 31, 30, tzinfo=timezone.utc)

        assert seconds_between(start, end) == 90.0

    def test_missing_bound_is_zero(self):
        assert seconds_between(datetime(2025, 12, 16), None) == 0.0
        assert seconds_between(None, datetime(2025, 12, 16)) == 0.0


class TestToIsoUtc:
    """Tests for to_iso_utc() function."""

    def test_uses_z_suffix(self):
        dt = datetime(2025, 12, 16, 11, 30, 0, 123456, tzinfo=timezone.utc)

        assert to_iso_utc(dt) == "2025-12-16T11:30:00.123456Z"

    def test_naive_is_treated_as_utc(self):
        assert to_iso_utc(datetime(2025, 12, 16, 11, 30)) == "2025-12-16T11:30:00Z"

    def test_none_returns_none(self):
        assert to_iso_utc(None) is None
