"""Tests for date parsing and calendar arithmetic."""

import pytest
from datetime import date, timedelta

from ledgerbook.domain.entities import Frequency
from ledgerbook.domain.errors import InvalidDate
from ledgerbook.utils.date_parser import (
    advance_date,
    days_until,
    format_date,
    get_date_range,
    parse_date,
    parse_user_date,
    start_of_week,
)


def test_parse_date():
    assert parse_date("05/02/2024") == date(2024, 2, 5)


def test_parse_date_without_padding():
    assert parse_date("5/2/2024") == date(2024, 2, 5)


@pytest.mark.parametrize("text", ["2024-02-05", "05/02", "", "aa/bb/cccc", "31/02/2024", "00/01/2024"])
def test_parse_date_rejects_malformed(text):
    with pytest.raises(InvalidDate):
        parse_date(text)


def test_invalid_date_is_value_error():
    """InvalidDate keeps ValueError compatibility for callers."""
    with pytest.raises(ValueError):
        parse_date("not a date")


def test_format_date_zero_pads():
    assert format_date(date(2024, 3, 7)) == "07/03/2024"


def test_days_until():
    today = date(2024, 1, 10)
    assert days_until("15/01/2024", today=today) == 5
    assert days_until("10/01/2024", today=today) == 0
    assert days_until("01/01/2024", today=today) == -9


def test_advance_daily_and_weekly():
    assert advance_date(date(2024, 2, 28), Frequency.DAILY) == date(2024, 2, 29)
    assert advance_date(date(2024, 12, 28), Frequency.WEEKLY) == date(2025, 1, 4)


def test_advance_monthly_clamps_to_month_end():
    """A day missing from the next month lands on its last day."""
    assert advance_date(date(2024, 1, 31), Frequency.MONTHLY) == date(2024, 2, 29)
    assert advance_date(date(2023, 1, 31), Frequency.MONTHLY) == date(2023, 2, 28)


def test_monthly_clamping_drifts():
    """Each step starts from the clamped date, so the day does not recover."""
    first = date(2024, 1, 31)
    second = advance_date(first, Frequency.MONTHLY)
    third = advance_date(second, Frequency.MONTHLY)
    assert (second, third) == (date(2024, 2, 29), date(2024, 3, 29))


def test_advance_yearly_from_leap_day():
    assert advance_date(date(2024, 2, 29), Frequency.YEARLY) == date(2025, 2, 28)


def test_start_of_week_is_monday():
    assert start_of_week(date(2024, 1, 21)) == date(2024, 1, 15)
    assert start_of_week(date(2024, 1, 15)) == date(2024, 1, 15)


def test_parse_user_date_formats():
    today = date(2024, 6, 10)
    assert parse_user_date("today", today=today) == today
    assert parse_user_date("Yesterday", today=today) == today - timedelta(days=1)
    assert parse_user_date("tomorrow", today=today) == today + timedelta(days=1)
    assert parse_user_date("15/01/2024", today=today) == date(2024, 1, 15)
    assert parse_user_date("2024-01-15", today=today) == date(2024, 1, 15)


def test_parse_user_date_invalid():
    with pytest.raises(InvalidDate):
        parse_user_date("next blue moon")


def test_get_date_range_last_month_in_january():
    start, end = get_date_range("last-month", today=date(2024, 1, 20))
    assert start == date(2023, 12, 1)
    assert end == date(2023, 12, 31)


def test_get_date_range_this_week():
    start, end = get_date_range("this-week", today=date(2024, 1, 18))
    assert start == date(2024, 1, 15)
    assert end == date(2024, 1, 18)


def test_get_date_range_last_year():
    start, end = get_date_range("last-year", today=date(2024, 5, 5))
    assert start == date(2023, 1, 1)
    assert end == date(2023, 12, 31)


def test_get_date_range_unknown():
    with pytest.raises(ValueError):
        get_date_range("next-decade")
