"""Tests for billing cycle helpers."""

from datetime import date, datetime
from decimal import Decimal

import pytest

from cofinance.utils.billing import (
    days_until,
    is_due_soon,
    is_overdue,
    monthly_equivalent,
    next_payment_date,
    yearly_equivalent,
)


class TestMonthlyEquivalent:
    """Tests for monthly_equivalent function."""

    @pytest.mark.parametrize(
        ("cycle", "expected"),
        [
            ("Weekly", Decimal("433.00")),
            ("Annual", Decimal("8.33")),
            ("Monthly", Decimal("100")),
        ],
    )
    def test_cycles(self, cycle: str, expected: Decimal) -> None:
        result = monthly_equivalent(100, cycle)

        assert result.quantize(Decimal("0.01")) == expected

    def test_unknown_cycle_is_monthly(self) -> None:
        assert monthly_equivalent(Decimal("9.99"), "Quarterly-ish") == Decimal("9.99")
        assert monthly_equivalent(Decimal("9.99"), None) == Decimal("9.99")

    def test_custom_interval(self) -> None:
        assert monthly_equivalent(10, "Custom", 15) == Decimal("20")

    def test_custom_interval_never_divides_by_zero(self) -> None:
        assert monthly_equivalent(1, "Custom", 0) == Decimal("30")

    def test_float_amount(self) -> None:
        assert monthly_equivalent(15.99, "Monthly") == Decimal("15.99")

    def test_yearly(self) -> None:
        assert yearly_equivalent(100, "Monthly") == Decimal("1200")


class TestNextPaymentDate:
    """Tests for next_payment_date function."""

    def test_weekly(self) -> None:
        assert next_payment_date(date(2026, 12, 28), "Weekly") == date(2027, 1, 4)

    def test_monthly_clamps_to_month_end(self) -> None:
        assert next_payment_date(datetime(2026, 1, 31, 8, 0), "Monthly") == datetime(2026, 2, 28, 8, 0)

    def test_annual_leap_day(self) -> None:
        assert next_payment_date(date(2028, 2, 29), "Annual") == date(2029, 2, 28)

    def test_custom(self) -> None:
        assert next_payment_date(date(2026, 1, 1), "Custom", 10) == date(2026, 1, 11)

    def test_unknown_cycle_is_monthly(self) -> None:
        assert next_payment_date(date(2026, 1, 15), "whatever") == date(2026, 2, 15)


class TestDueDates:
    """Tests for due/overdue helpers."""

    def test_days_until(self) -> None:
        today = date(2026, 10, 18)

        assert days_until(datetime(2026, 10, 25, 23, 0), today) == 7
        assert days_until(date(2026, 10, 17), today) == -1

    def test_due_soon_window(self) -> None:
        today = date(2026, 10, 18)

        assert is_due_soon(date(2026, 10, 18), today)
        assert is_due_soon(date(2026, 10, 25), today)
        assert not is_due_soon(date(2026, 10, 26), today)
        assert not is_due_soon(date(2026, 10, 17), today)

    def test_overdue(self) -> None:
        today = date(2026, 10, 18)

        assert is_overdue(date(2026, 10, 17), today)
        assert not is_overdue(date(2026, 10, 18), today)
