"""Unit tests for due-day sanitization and next-due computation"""

import pytest
from datetime import date
from vaultswipe.domain.due_dates import (
    days_until_next_due,
    due_label,
    is_due_soon,
    next_due_date,
    ordinal_suffix,
    sanitize_due_day,
)
from vaultswipe.utils.date_utils import add_months, days_in_month


@pytest.mark.parametrize(
    "raw, expected",
    [
        (15, 15),
        ("7", 7),
        (14.4, 14),
        (14.5, 15),
        ("  20  ", 20),
        (0, 1),
        (-5, 1),
        (45, 31),
        (31.6, 31),
        ("abc", 1),
        ("", 1),
        (None, 1),
        (float("nan"), 1),
        (float("inf"), 1),
        (True, 1),
    ],
)
def test_sanitize_due_day(raw, expected):
    """Test rounding, clamping and non-numeric fallback"""
    assert sanitize_due_day(raw) == expected


@pytest.mark.parametrize("raw", [-100, -0.4, 0, 0.6, 1, 15.5, 30.49, 31, 32, 1000, "x", None, "12"])
def test_sanitize_due_day_idempotent(raw):
    """Test sanitizing twice gives the same in-range day"""
    once = sanitize_due_day(raw)
    assert 1 <= once <= 31
    assert sanitize_due_day(once) == once


def test_days_in_month_leap_years():
    assert days_in_month(2025, 2) == 28
    assert days_in_month(2024, 2) == 29
    assert days_in_month(1900, 2) == 28
    assert days_in_month(2000, 2) == 29
    assert days_in_month(2025, 4) == 30


def test_add_months_wraps_year():
    assert add_months(2025, 12, 1) == (2026, 1)
    assert add_months(2025, 1, -1) == (2024, 12)
    assert add_months(2025, 6, 1) == (2025, 7)


def test_due_day_clamped_to_short_month():
    """Test due day 31 in February lands on Feb 28"""
    today = date(2025, 2, 15)
    assert next_due_date(31, today) == date(2025, 2, 28)
    assert days_until_next_due(31, today) == 13


def test_due_day_clamped_in_leap_february():
    assert next_due_date(30, date(2024, 2, 10)) == date(2024, 2, 29)
    assert days_until_next_due(30, date(2024, 2, 10)) == 19


def test_due_today_is_zero():
    """Test the due date itself counts as 0 days"""
    assert days_until_next_due(15, date(2025, 2, 15)) == 0
    # clamped due date that equals today
    assert days_until_next_due(31, date(2025, 2, 28)) == 0


def test_passed_due_day_rolls_to_next_month():
    """Test yesterday's due day moves to next month"""
    today = date(2025, 3, 16)
    assert next_due_date(15, today) == date(2025, 4, 15)
    assert days_until_next_due(15, today) == 30


def test_next_month_candidate_is_clamped():
    """Test rollover into a short month re-applies the clamp"""
    assert next_due_date(30, date(2025, 1, 31)) == date(2025, 2, 28)
    assert days_until_next_due(30, date(2025, 1, 31)) == 28


def test_december_rolls_into_january():
    today = date(2025, 12, 20)
    assert next_due_date(10, today) == date(2026, 1, 10)
    assert days_until_next_due(10, today) == 21


def test_days_until_next_due_never_negative():
    """Test every due day against every day of a year is within one month"""
    day = date(2025, 1, 1)
    while day.year == 2025:
        for due in range(1, 32):
            assert 0 <= days_until_next_due(due, day) <= 31
        day = date.fromordinal(day.toordinal() + 1)


@pytest.mark.parametrize(
    "n, expected",
    [
        (1, "1st"),
        (2, "2nd"),
        (3, "3rd"),
        (4, "4th"),
        (11, "11th"),
        (12, "12th"),
        (13, "13th"),
        (21, "21st"),
        (22, "22nd"),
        (23, "23rd"),
        (24, "24th"),
        (31, "31st"),
        (101, "101st"),
        (111, "111th"),
        (112, "112th"),
    ],
)
def test_ordinal_suffix(n, expected):
    assert ordinal_suffix(n) == expected


def test_is_due_soon_boundary_inclusive():
    """Test exactly 5 days out counts as due soon"""
    assert is_due_soon(0)
    assert is_due_soon(5)
    assert not is_due_soon(6)
    assert is_due_soon(7, threshold=7)


def test_due_label():
    today = date(2025, 2, 15)
    assert due_label(31, today) == "Due on the 31st (in 13 days)"
    assert due_label(15, today) == "Due on the 15th (today)"
    assert due_label(16, today) == "Due on the 16th (tomorrow)"
