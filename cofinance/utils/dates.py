# utils/dates.py
from datetime import date, datetime


def month_label(fecha) -> str:
    """Etiqueta mes-año según el locale activo, p.ej. 'October 2026'."""
    return fecha.strftime("%B %Y")


def week_label(fecha) -> str:
    year, week, _ = fecha.isocalendar()
    return f"Week {week}, {year}"


def month_key(fecha) -> tuple[int, int]:
    return fecha.year, fecha.month


def same_month(fecha, today: date | None = None) -> bool:
    """Mismo mes y mismo año calendario que `today`."""
    if today is None:
        today = date.today()
    return month_key(fecha) == month_key(today)


def start_of_day(fecha: date) -> datetime:
    return datetime(fecha.year, fecha.month, fecha.day)
