# utils/billing.py
"""Ciclos de cobro de las suscripciones."""
from datetime import date, datetime, timedelta
from decimal import Decimal

from dateutil.relativedelta import relativedelta

WEEKLY = "Weekly"
MONTHLY = "Monthly"
ANNUAL = "Annual"
CUSTOM = "Custom"

BILLING_CYCLES = (WEEKLY, MONTHLY, ANNUAL, CUSTOM)

WEEKS_PER_MONTH = Decimal("4.33")
DAYS_PER_MONTH = Decimal("30")


def _to_decimal(value) -> Decimal:
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value or 0))


def monthly_equivalent(amount, cycle: str | None, interval_days: int | None = 30) -> Decimal:
    """
    Importe mensual equivalente de un cargo.
    Un ciclo desconocido (texto libre) se trata como mensual.
    """
    amount = _to_decimal(amount)
    if cycle == WEEKLY:
        return amount * WEEKS_PER_MONTH
    if cycle == ANNUAL:
        return amount / 12
    if cycle == CUSTOM:
        return amount * DAYS_PER_MONTH / max(1, interval_days or 0)
    return amount


def yearly_equivalent(amount, cycle: str | None, interval_days: int | None = 30) -> Decimal:
    return monthly_equivalent(amount, cycle, interval_days) * 12


def next_payment_date(fecha, cycle: str | None, interval_days: int | None = 30):
    """Siguiente fecha de cobro tras `fecha` según el ciclo."""
    if cycle == WEEKLY:
        return fecha + timedelta(days=7)
    if cycle == ANNUAL:
        return fecha + relativedelta(years=1)
    if cycle == CUSTOM:
        return fecha + timedelta(days=max(1, interval_days or 0))
    return fecha + relativedelta(months=1)


def _as_date(value) -> date:
    return value.date() if isinstance(value, datetime) else value


def days_until(fecha, today: date | None = None) -> int:
    """Días hasta el cobro; negativo si ya pasó."""
    if today is None:
        today = date.today()
    return (_as_date(fecha) - _as_date(today)).days


def is_due_soon(fecha, today: date | None = None, window_days: int = 7) -> bool:
    return 0 <= days_until(fecha, today) <= window_days


def is_overdue(fecha, today: date | None = None) -> bool:
    return days_until(fecha, today) < 0
