"""Tests for gastos.dates pure functions."""

from datetime import date

import pytest

from gastos.dates import (
    build_window,
    current_month_key,
    enumerate_range,
    from_date,
    is_month_key,
    month_label,
    month_range,
    parse_month_input,
    step_month,
    to_date,
)
from gastos.domain.models import Month
from gastos.domain.money import EN_GB, PT_BR


class TestMonthKeys:
    """Tests for key/date conversion."""

    def test_to_date_is_first_of_month(self) -> None:
        """Should convert a key to the first day of its month."""
        assert to_date(Month("2024-03")) == date(2024, 3, 1)

    def test_from_date_truncates_to_month(self) -> None:
        """Should drop the day when building a key."""
        assert from_date(date(2024, 3, 31)) == "2024-03"

    def test_round_trip(self) -> None:
        """Should be inverse functions."""
        for month_num in range(1, 13):
            key = Month(f"2025-{month_num:02d}")
            assert from_date(to_date(key)) == key

    def test_current_month_key_uses_given_date(self) -> None:
        """Should derive the key from the given day."""
        assert current_month_key(date(2026, 10, 19)) == "2026-10"

    def test_current_month_key_defaults_to_today(self) -> None:
        """Should use today's date when none is given."""
        assert current_month_key() == from_date(date.today())

    def test_is_month_key(self) -> None:
        """Should accept only canonical YYYY-MM keys."""
        assert is_month_key("2024-01")
        assert not is_month_key("2024-1")
        assert not is_month_key("2024-13")
        assert not is_month_key("2024-00")
        assert not is_month_key("24-01")

    def test_invalid_key_raises_valueerror(self) -> None:
        """Should raise ValueError for non-canonical keys."""
        with pytest.raises(ValueError):
            to_date(Month("invalid"))


class TestStepMonth:
    """Tests for step_month."""

    def test_forward(self) -> None:
        """Should move forward within a year."""
        assert step_month(Month("2024-03"), 2) == "2024-05"

    def test_forward_across_year(self) -> None:
        """Should roll over into the next year."""
        assert step_month(Month("2024-11"), 3) == "2025-02"

    def test_backward_across_year(self) -> None:
        """Should roll back into the previous year."""
        assert step_month(Month("2024-01"), -1) == "2023-12"

    def test_many_years(self) -> None:
        """Should handle deltas larger than a year."""
        assert step_month(Month("2024-06"), -30) == "2021-12"

    def test_zero(self) -> None:
        """Should return the same month for a zero delta."""
        assert step_month(Month("2024-06"), 0) == "2024-06"


class TestEnumerateRange:
    """Tests for enumerate_range."""

    def test_single_month(self) -> None:
        """Should return just the month when from equals to."""
        assert enumerate_range(Month("2024-05"), Month("2024-05")) == ["2024-05"]

    def test_inverted_range_is_empty(self) -> None:
        """Should return nothing when from is after to."""
        assert enumerate_range(Month("2024-03"), Month("2024-01")) == []

    def test_year_rollover(self) -> None:
        """Should list contiguous months across a year boundary."""
        assert enumerate_range(Month("2024-11"), Month("2025-02")) == [
            "2024-11",
            "2024-12",
            "2025-01",
            "2025-02",
        ]

    def test_full_year_has_twelve_months(self) -> None:
        """Should produce no gaps or duplicates."""
        months = enumerate_range(Month("2024-01"), Month("2024-12"))
        assert len(months) == 12
        assert len(set(months)) == 12
        assert months == sorted(months)


class TestBuildWindow:
    """Tests for build_window."""

    def test_small_window(self) -> None:
        """Should span past and future months around the center."""
        window = build_window(Month("2024-06"), 2, 1)
        assert window == ["2024-04", "2024-05", "2024-06", "2024-07"]

    def test_default_window_length(self) -> None:
        """Should hold 24 past, 12 future and the center month."""
        window = build_window(Month("2024-06"))
        assert len(window) == 37
        assert window[0] == "2022-06"
        assert window[-1] == "2025-06"

    def test_center_only(self) -> None:
        """Should contain only the center for zero counts."""
        assert build_window(Month("2024-06"), 0, 0) == ["2024-06"]


class TestMonthLabel:
    """Tests for month_label."""

    def test_portuguese(self) -> None:
        """Should use Portuguese month names by default."""
        assert month_label(Month("2024-03")) == "março de 2024"
        assert month_label(Month("2024-03"), PT_BR) == "março de 2024"

    def test_english(self) -> None:
        """Should use English month names for en-GB."""
        assert month_label(Month("2024-12"), EN_GB) == "December 2024"


class TestMonthRange:
    """Tests for month_range."""

    def test_january_range(self) -> None:
        """Should calculate range for January."""
        since, until, label = month_range(Month("2025-01"))

        assert since == "2025-01-01"
        assert until == "2025-02-01"
        assert label == "janeiro de 2025"

    def test_label_follows_locale(self) -> None:
        """Should label the month in the given locale."""
        _, _, label = month_range(Month("2025-01"), EN_GB)

        assert label == "January 2025"

    def test_december_range_crosses_year(self) -> None:
        """Should handle December (crosses year boundary)."""
        since, until, _ = month_range(Month("2025-12"))

        assert since == "2025-12-01"
        assert until == "2026-01-01"

    def test_february_leap_year(self) -> None:
        """Should handle February in leap year."""
        since, until, _ = month_range(Month("2024-02"))

        assert since == "2024-02-01"
        assert until == "2024-03-01"


class TestParseMonthInput:
    """Tests for parse_month_input."""

    def test_canonical_key(self) -> None:
        """Should accept canonical keys unchanged."""
        assert parse_month_input("2024-03") == "2024-03"

    def test_month_slash_year(self) -> None:
        """Should accept MM/YYYY."""
        assert parse_month_input("3/2024") == "2024-03"
        assert parse_month_input("03/2024") == "2024-03"

    def test_full_date_day_first(self) -> None:
        """Should read full dates day first."""
        assert parse_month_input("15/03/2024") == "2024-03"

    def test_iso_date(self) -> None:
        """Should read ISO dates."""
        assert parse_month_input("2024-03-15") == "2024-03"

    def test_garbage_raises_valueerror(self) -> None:
        """Should raise ValueError for unreadable input."""
        with pytest.raises(ValueError):
            parse_month_input("not a month")

    def test_empty_raises_valueerror(self) -> None:
        """Should raise ValueError for empty input."""
        with pytest.raises(ValueError):
            parse_month_input("   ")
