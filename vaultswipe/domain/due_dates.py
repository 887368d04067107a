"""Monthly due-date computation for card statements"""

from datetime import date
from decimal import ROUND_HALF_UP

from vaultswipe.utils.date_utils import add_months, clamped_date
from vaultswipe.utils.money import parse_amount

MIN_DUE_DAY = 1
MAX_DUE_DAY = 31
DUE_SOON_DAYS = 5


def sanitize_due_day(raw: object) -> int:
    """
    Coerce any input into a day-of-month in [1, 31].

    Non-numeric input becomes 1. Halves round up (14.5 -> 15).
    """
    value = parse_amount(raw)
    if value is None:
        return MIN_DUE_DAY
    day = int(value.to_integral_value(rounding=ROUND_HALF_UP))
    return max(MIN_DUE_DAY, min(MAX_DUE_DAY, day))


def next_due_date(due_day: int, today: date) -> date:
    """
    Next occurrence of due_day on or after today.

    A due day past the end of a short month lands on that month's last day
    (31 -> Feb 28). When this month's occurrence has already passed, the
    next month is used, December rolling into January.
    """
    due_day = sanitize_due_day(due_day)
    candidate = clamped_date(today.year, today.month, due_day)
    if candidate < today:
        year, month = add_months(today.year, today.month, 1)
        candidate = clamped_date(year, month, due_day)
    return candidate


def days_until_next_due(due_day: int, today: date | None = None) -> int:
    """Whole days until the next due date, 0 when due today"""
    today = today or date.today()
    return (next_due_date(due_day, today) - today).days


def is_due_soon(days_until_due: int, threshold: int = DUE_SOON_DAYS) -> bool:
    """Boundary inclusive: due in exactly `threshold` days counts as soon"""
    return days_until_due <= threshold


def ordinal_suffix(n: int) -> str:
    """1 -> '1st', 11 -> '11th', 22 -> '22nd'"""
    if 11 <= abs(n) % 100 <= 13:
        suffix = "th"
    else:
        suffix = {1: "st", 2: "nd", 3: "rd"}.get(abs(n) % 10, "th")
    return f"{n}{suffix}"


def due_label(due_day: int, today: date | None = None) -> str:
    """Display text such as 'Due on the 31st (in 13 days)'"""
    days = days_until_next_due(due_day, today)
    if days == 0:
        when = "today"
    elif days == 1:
        when = "tomorrow"
    else:
        when = f"in {days} days"
    return f"Due on the {ordinal_suffix(due_day)} ({when})"
