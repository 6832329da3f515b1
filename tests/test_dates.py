"""Tests for bizledger.dates."""

import pytest

from bizledger.dates import month_range, system_clock
from bizledger.domain.models import Period


class TestMonthRange:
    """Tests for month_range."""

    def test_january_range(self) -> None:
        """Should calculate range for January."""
        since, until, label = month_range(Period(2025, 1))

        assert since == "2025-01-01"
        assert until == "2025-02-01"
        assert label == "January 2025"

    def test_december_range_crosses_year(self) -> None:
        """Should handle December (crosses year boundary)."""
        since, until, label = month_range(Period(2025, 12))

        assert since == "2025-12-01"
        assert until == "2026-01-01"
        assert label == "December 2025"

    def test_february_leap_year(self) -> None:
        """Should handle February in leap year."""
        since, until, _ = month_range(Period(2024, 2))

        assert since == "2024-02-01"
        assert until == "2024-03-01"

    def test_invalid_month_number_raises_valueerror(self) -> None:
        """Should raise ValueError for invalid month number."""
        with pytest.raises(ValueError):
            month_range(Period(2025, 13))


class TestSystemClock:
    """Tests for system_clock."""

    def test_has_no_microseconds(self) -> None:
        assert system_clock().microsecond == 0
