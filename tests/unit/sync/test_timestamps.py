"""
Unit tests for timestamp normalization.

Why: Stored timestamps drive incremental cursors, so every GitHub format
     must land in one canonical form and come back in the form ``since``
     accepts.
What: Tests to_store_timestamp and to_cursor_timestamp on every format the
      mirror meets, plus None passthrough.
How: Pure function calls with literal inputs.
"""

from datetime import UTC, datetime, timedelta, timezone

import pytest

from issue_mirror.sync.timestamps import to_cursor_timestamp, to_store_timestamp


class TestToStoreTimestamp:
    """Test conversion of GitHub timestamps to the stored form."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("2014-10-31 23:21:44 UTC", "2014-10-31T23:21:44+00:00"),
            ("2014-10-31T23:21:44Z", "2014-10-31T23:21:44+00:00"),
            ("2014-10-31T23:21:44+00:00", "2014-10-31T23:21:44+00:00"),
        ],
    )
    def test_utc_formats_become_offset_form(self, value: str, expected: str) -> None:
        """Test that each UTC notation maps to the +00:00 form."""
        assert to_store_timestamp(value) == expected

    def test_none_passes_through(self) -> None:
        """Test that a missing timestamp stays missing."""
        assert to_store_timestamp(None) is None

    def test_non_utc_offset_kept(self) -> None:
        """Test that an explicit non-UTC offset is not rewritten."""
        assert to_store_timestamp("2014-10-31T23:21:44+02:00") == (
            "2014-10-31T23:21:44+02:00"
        )

    def test_aware_datetime_converted_to_utc(self) -> None:
        """Test that datetimes are rendered in UTC."""
        value = datetime(2014, 11, 1, 1, 21, 44, tzinfo=timezone(timedelta(hours=2)))

        assert to_store_timestamp(value) == "2014-10-31T23:21:44+00:00"

    def test_naive_datetime_treated_as_utc(self) -> None:
        """Test that a naive datetime is assumed to be UTC."""
        assert to_store_timestamp(datetime(2014, 10, 31, 23, 21, 44)) == (
            "2014-10-31T23:21:44+00:00"
        )

    def test_idempotent(self) -> None:
        """Test that normalizing a stored value leaves it unchanged."""
        stored = to_store_timestamp("2014-10-31 23:21:44 UTC")

        assert to_store_timestamp(stored) == stored

    def test_utc_datetime_matches_string_form(self) -> None:
        """Test that datetime and string inputs agree."""
        value = datetime(2014, 10, 31, 23, 21, 44, tzinfo=UTC)

        from_datetime = to_store_timestamp(value)

        assert from_datetime == to_store_timestamp("2014-10-31T23:21:44Z")


class TestToCursorTimestamp:
    """Test conversion of stored timestamps to ``since`` cursors."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("2015-04-18 14:17:02", "2015-04-18T14:17:02Z"),
            ("2015-04-18T14:17:02+00:00", "2015-04-18T14:17:02Z"),
            ("2015-04-18T14:17:02Z", "2015-04-18T14:17:02Z"),
            ("2015-04-18 14:17:02 UTC", "2015-04-18T14:17:02Z"),
        ],
    )
    def test_cursor_form(self, value: str, expected: str) -> None:
        """Test that stored forms map to the Z-suffixed ISO form."""
        assert to_cursor_timestamp(value) == expected

    def test_none_passes_through(self) -> None:
        """Test that an empty scope yields no cursor."""
        assert to_cursor_timestamp(None) is None

    def test_non_utc_offset_kept(self) -> None:
        """Test that a non-UTC offset is already a valid cursor."""
        assert to_cursor_timestamp("2015-04-18T14:17:02-07:00") == (
            "2015-04-18T14:17:02-07:00"
        )

    def test_round_trip_from_github_format(self) -> None:
        """Test that a GitHub timestamp survives store and cursor conversion."""
        stored = to_store_timestamp("2015-04-18T14:17:02Z")

        assert to_cursor_timestamp(stored) == "2015-04-18T14:17:02Z"
