"""
Tests for the numeric and date safety primitives.
"""

import math
from datetime import date, datetime
from decimal import Decimal

import pytest

from family_finance.safety import (
    end_of_month,
    is_finite_number,
    is_same_month,
    parse_calendar_date,
    precise_subtract,
    precise_sum,
    resolve_reference_date,
    round_money,
    safe_average,
    safe_operation,
    safe_percentage,
    safe_sum,
    to_safe_number,
)


class TestToSafeNumber:
    """Tests for to_safe_number."""

    def test_none_is_zero(self):
        """Test that None converts to 0."""
        assert to_safe_number(None) == 0

    def test_nan_uses_fallback(self):
        """Test that NaN is replaced by the fallback."""
        assert to_safe_number(math.nan, 7) == 7

    def test_infinity_uses_fallback(self):
        """Test that both infinities are replaced by the fallback."""
        assert to_safe_number(math.inf) == 0
        assert to_safe_number(-math.inf, 3) == 3

    def test_numeric_string_is_parsed(self):
        """Test that numeric strings parse, including a leading prefix."""
        assert to_safe_number("12.5") == 12.5
        assert to_safe_number(" 42 ") == 42
        assert to_safe_number("12.5abc") == 12.5

    def test_non_numeric_string_uses_fallback(self):
        """Test that text without a numeric prefix falls back."""
        assert to_safe_number("abc", 9) == 9
        assert to_safe_number("", 1) == 1

    def test_bool_is_one_or_zero(self):
        """Test that booleans become 1 or 0."""
        assert to_safe_number(True) == 1
        assert to_safe_number(False) == 0

    def test_decimal_is_converted(self):
        """Test that Decimal values become floats."""
        assert to_safe_number(Decimal("10.25")) == 10.25

    def test_containers_use_fallback(self):
        """Test that lists, dicts and objects fall back."""
        assert to_safe_number([1, 2]) == 0
        assert to_safe_number({"a": 1}, 5) == 5
        assert to_safe_number(object()) == 0


class TestIsFiniteNumber:
    """Tests for is_finite_number."""

    def test_finite_values(self):
        assert is_finite_number(1)
        assert is_finite_number(-2.5)
        assert is_finite_number(Decimal("3"))

    def test_rejects_non_finite_and_non_numbers(self):
        """Test that NaN, infinity, bools and strings are rejected."""
        assert not is_finite_number(math.nan)
        assert not is_finite_number(math.inf)
        assert not is_finite_number(True)
        assert not is_finite_number("1")
        assert not is_finite_number(None)


class TestMonetaryPrecision:
    """Tests for Decimal-backed rounding and sums."""

    def test_precise_sum_has_no_float_drift(self):
        """Test that 0.1 + 0.2 sums to exactly 0.3."""
        assert precise_sum([0.1, 0.2]) == 0.3

    def test_precise_sum_skips_bad_values(self):
        """Test that NaN and None count as zero."""
        assert precise_sum([10, math.nan, None, 5.5]) == 15.5

    def test_precise_sum_of_nothing(self):
        assert precise_sum([]) == 0.0

    def test_round_money_half_up(self):
        """Test that halves round away from zero."""
        assert round_money(2.675) == 2.68
        assert round_money(-1.005) == -1.01
        assert round_money(1.004) == 1.0

    def test_round_money_places(self):
        assert round_money(1.23456, 3) == 1.235

    def test_precise_subtract(self):
        assert precise_subtract(0.3, 0.1) == 0.2
        assert precise_subtract(None, 5) == -5


class TestAggregates:
    """Tests for safe_sum, safe_average and safe_percentage."""

    def test_safe_sum_coerces_elements(self):
        assert safe_sum([1, "2", None, math.nan, math.inf]) == 3

    def test_safe_sum_of_non_list(self):
        """Test that non-list input sums to 0."""
        assert safe_sum(None) == 0
        assert safe_sum("123") == 0

    def test_safe_average(self):
        assert safe_average([2, 4, math.nan]) == 2
        assert safe_average([]) == 0

    def test_percentage_by_zero(self):
        """Test that dividing by zero gives 0."""
        assert safe_percentage(50, 0) == 0
        assert safe_percentage(50, None) == 0

    def test_percentage(self):
        assert safe_percentage(25, 200) == 12.5
        assert safe_percentage(-10, 100) == -10


class TestSafeOperation:
    """Tests for the primitive operation boundary."""

    def test_returns_result(self):
        assert safe_operation(lambda: 2 * 21, 0) == 42

    def test_exception_gives_fallback(self):
        """Test that a raising operation yields the fallback."""
        assert safe_operation(lambda: 1 / 0, -1, "division") == -1

    def test_nan_gives_fallback(self):
        """Test that a NaN result yields the fallback, not NaN."""
        assert safe_operation(lambda: math.nan, 5.0) == 5.0

    def test_infinity_gives_fallback(self):
        assert safe_operation(lambda: math.inf, 0.0) == 0.0

    def test_non_numeric_results_pass_through(self):
        assert safe_operation(lambda: [1, 2], []) == [1, 2]


class TestDates:
    """Tests for calendar date helpers."""

    def test_parse_plain_date(self):
        assert parse_calendar_date("2025-01-10") == date(2025, 1, 10)

    def test_parse_iso_datetime(self):
        """Test that only the calendar part of a datetime is kept."""
        assert parse_calendar_date("2025-01-10T23:59:00Z") == date(2025, 1, 10)
        assert parse_calendar_date(datetime(2025, 3, 1, 12)) == date(2025, 3, 1)

    def test_rejects_non_existent_day(self):
        """Test that 2024-02-30 is not a date."""
        assert parse_calendar_date("2024-02-30") is None

    @pytest.mark.parametrize("value", [None, "", "garbage", "2025-1-1", 20250101])
    def test_rejects_garbage(self, value):
        assert parse_calendar_date(value) is None

    def test_same_month(self):
        reference = date(2025, 1, 15)
        assert is_same_month("2025-01-31", reference)
        assert not is_same_month("2024-01-15", reference)
        assert not is_same_month(None, reference)

    def test_end_of_month(self):
        assert end_of_month(date(2024, 2, 10)) == date(2024, 2, 29)
        assert end_of_month(date(2025, 12, 1)) == date(2025, 12, 31)

    def test_reference_date_falls_back_to_today(self):
        today = date(2025, 1, 15)
        assert resolve_reference_date("nope", today) == today
        assert resolve_reference_date("2024-06-01", today) == date(2024, 6, 1)
