"""Calendar arithmetic utilities"""

import calendar
from datetime import date


def days_in_month(year: int, month: int) -> int:
    """Number of days in a month, leap years included"""
    return calendar.monthrange(year, month)[1]


def add_months(year: int, month: int, months: int = 1) -> tuple[int, int]:
    """Shift a (year, month) pair, wrapping December into January"""
    index = year * 12 + (month - 1) + months
    return index // 12, index % 12 + 1


def clamped_date(year: int, month: int, day: int) -> date:
    """Build a date, pulling day back to the last day of short months"""
    return date(year, month, min(day, days_in_month(year, month)))


def parse_iso_date(raw: object) -> date | None:
    """Accept a date or an ISO 'YYYY-MM-DD' string, None otherwise"""
    if isinstance(raw, date):
        return raw
    if not isinstance(raw, str):
        return None
    try:
        return date.fromisoformat(raw.strip())
    except ValueError:
        return None
