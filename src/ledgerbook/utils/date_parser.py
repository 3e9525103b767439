"""Date parsing utilities.

Dates are stored and displayed as ``DD/MM/YYYY`` and always interpreted as
UTC calendar dates, with no time of day.
"""

from datetime import date, datetime, timedelta, UTC
from typing import Optional

from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

from ledgerbook.domain.entities import Frequency
from ledgerbook.domain.errors import InvalidDate

DATE_FORMAT = "%d/%m/%Y"


def today_utc() -> date:
    """Return the current UTC calendar date."""
    return datetime.now(UTC).date()


def parse_date(date_str: str) -> date:
    """Parse a ``DD/MM/YYYY`` string into a date.

    Args:
        date_str: Date text such as "05/02/2024"

    Returns:
        Date object

    Raises:
        InvalidDate: If the text does not decompose into day, month and year
            or does not name a real calendar day
    """
    if not isinstance(date_str, str):
        raise InvalidDate(f"Could not parse date {date_str!r}: expected text")

    parts = date_str.strip().split("/")
    if len(parts) != 3:
        raise InvalidDate(f"Could not parse date '{date_str}': expected DD/MM/YYYY")

    try:
        day, month, year = (int(part) for part in parts)
        return date(year, month, day)
    except ValueError as e:
        raise InvalidDate(f"Could not parse date '{date_str}': {e}")


def format_date(value: date) -> str:
    """Format a date as zero-padded ``DD/MM/YYYY``."""
    return f"{value.day:02d}/{value.month:02d}/{value.year:04d}"


def days_until(date_str: str, today: Optional[date] = None) -> int:
    """Return whole days from today until the given date.

    Negative values are in the past and 0 means today.

    Args:
        date_str: Target date as ``DD/MM/YYYY``
        today: Reference date, defaults to the current UTC date

    Returns:
        Number of days

    Raises:
        InvalidDate: If date_str is malformed
    """
    if today is None:
        today = today_utc()
    return (parse_date(date_str) - today).days


def advance_date(value: date, frequency: Frequency) -> date:
    """Advance a date by one recurrence period.

    Monthly and yearly steps are calendar aware: a day that does not exist in
    the target month is clamped to that month's last day (31/01 becomes
    29/02 in a leap year), as relativedelta does.

    Args:
        value: Current due date
        frequency: Recurrence period

    Returns:
        The next due date
    """
    if frequency is Frequency.DAILY:
        return value + timedelta(days=1)
    if frequency is Frequency.WEEKLY:
        return value + timedelta(days=7)
    if frequency is Frequency.MONTHLY:
        return value + relativedelta(months=1)
    if frequency is Frequency.YEARLY:
        return value + relativedelta(years=1)
    raise ValueError(f"Unknown frequency: {frequency!r}")


def start_of_week(value: date) -> date:
    """Return the Monday of the week containing the given date."""
    return value - timedelta(days=value.weekday())


def parse_user_date(date_str: str, today: Optional[date] = None) -> date:
    """Parse a date typed on the command line.

    Accepts ``DD/MM/YYYY``, ISO ``YYYY-MM-DD`` and the relative words
    "today", "yesterday" and "tomorrow".

    Raises:
        InvalidDate: If the text cannot be parsed
    """
    text = date_str.strip().lower()
    if today is None:
        today = today_utc()

    relative_dates = {
        "today": today,
        "yesterday": today - timedelta(days=1),
        "tomorrow": today + timedelta(days=1),
    }
    if text in relative_dates:
        return relative_dates[text]

    if "/" in text:
        return parse_date(text)

    try:
        return date_parser.isoparse(text).date()
    except (ValueError, TypeError) as e:
        raise InvalidDate(f"Could not parse date '{date_str}': {e}")


def get_date_range(period: str, today: Optional[date] = None) -> tuple[date, date]:
    """Get start and end dates for a specified period.

    Args:
        period: One of this-month, this-year, this-week, last-month, last-year

    Returns:
        Tuple of (start_date, end_date)

    Raises:
        ValueError: If period string is not recognized
    """
    period = period.strip().lower()
    if today is None:
        today = today_utc()

    if period == "this-month":
        return (today.replace(day=1), today)

    elif period == "this-year":
        return (today.replace(month=1, day=1), today)

    elif period == "this-week":
        return (start_of_week(today), today)

    elif period == "last-month":
        start_date = (today - relativedelta(months=1)).replace(day=1)
        # Day before the first day of the current month
        end_date = today.replace(day=1) - timedelta(days=1)
        return (start_date, end_date)

    elif period == "last-year":
        start_date = today.replace(month=1, day=1) - relativedelta(years=1)
        end_date = today.replace(month=1, day=1) - timedelta(days=1)
        return (start_date, end_date)

    else:
        raise ValueError(
            f"Unknown period: '{period}'. Supported periods: this-month, "
            "this-year, this-week, last-month, last-year"
        )
