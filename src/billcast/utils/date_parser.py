"""Date parsing and calendar arithmetic utilities."""

from datetime import date, datetime, timedelta
from typing import Optional

from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

ISO_DATE_FORMAT = "%Y-%m-%d"


def normalize_date(value: date | datetime) -> date:
    """Strip the time of day from a date or datetime."""
    if isinstance(value, datetime):
        return value.date()
    return value


def parse_iso_date(value: Optional[str | date]) -> Optional[date]:
    """Parse an ISO-8601 calendar date coming from a data source.

    Timestamps are accepted and truncated to their calendar date. Empty
    values return None.

    Raises:
        ValueError: If the value is not an ISO-8601 date
    """
    if value is None:
        return None
    if isinstance(value, (date, datetime)):
        return normalize_date(value)
    if not isinstance(value, str):
        raise ValueError(f"Could not parse ISO date '{value}': expected a string")
    value = value.strip()
    if not value:
        return None
    try:
        return date_parser.isoparse(value).date()
    except (ValueError, OverflowError) as e:
        raise ValueError(f"Could not parse ISO date '{value}': {e}")


def format_iso_date(value: date) -> str:
    """Serialize a date as yyyy-MM-dd."""
    return value.strftime(ISO_DATE_FORMAT)


def start_of_month(value: date) -> date:
    return value.replace(day=1)


def end_of_month(value: date) -> date:
    return value + relativedelta(day=31)


def add_months(value: date, months: int) -> date:
    """Add calendar months, clamping to the last day of the target month."""
    return value + relativedelta(months=months)


def on_day_of_month(value: date, day: int) -> date:
    """Return the given day in value's month, clamped to the month's length."""
    return value + relativedelta(day=day)


def months_between(start: date, end: date) -> int:
    """Whole calendar months from start's month to end's month."""
    return (end.year - start.year) * 12 + (end.month - start.month)


def parse_date(date_str: str, today: Optional[date] = None) -> date:
    """Parse a date string into a date object.

    Supports various formats including relative dates:
    - Absolute dates: "2024-01-15", "January 15, 2024", etc.
    - Relative dates: "today", "yesterday", "last month", "this year", etc.

    Args:
        date_str: Date string in various formats
        today: Reference date for relative dates (defaults to the current date)

    Returns:
        Date object

    Raises:
        ValueError: If date string cannot be parsed
    """
    date_str = date_str.strip().lower()
    if today is None:
        today = date.today()

    relative_dates = {
        "today": today,
        "yesterday": today - timedelta(days=1),
        "tomorrow": today + timedelta(days=1),
    }

    if date_str in relative_dates:
        return relative_dates[date_str]

    if date_str.startswith("last "):
        period = date_str[5:]
        if period == "month":
            return (today - relativedelta(months=1)).replace(day=1)
        elif period == "year":
            return today.replace(month=1, day=1) - relativedelta(years=1)
        elif period == "week":
            days_since_monday = today.weekday()
            return today - timedelta(days=days_since_monday + 7)

    elif date_str.startswith("this "):
        period = date_str[5:]
        if period == "month":
            return today.replace(day=1)
        elif period == "year":
            return today.replace(month=1, day=1)
        elif period == "week":
            return today - timedelta(days=today.weekday())

    elif date_str.startswith("next "):
        period = date_str[5:]
        if period == "month":
            return (today + relativedelta(months=1)).replace(day=1)
        elif period == "year":
            return today.replace(month=1, day=1) + relativedelta(years=1)
        elif period == "week":
            return today + timedelta(days=(7 - today.weekday()))

    try:
        dt = date_parser.parse(date_str)
        return dt.date()
    except (ValueError, TypeError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")


def parse_month(month_str: str, today: Optional[date] = None) -> date:
    """Parse a month reference ("2024-03", "this month", "next month").

    Returns:
        First day of the referenced month
    """
    value = month_str.strip()
    if len(value) == 7 and value[4] == "-":
        try:
            return datetime.strptime(value, "%Y-%m").date()
        except ValueError as e:
            raise ValueError(f"Could not parse month '{month_str}': {e}")
    return start_of_month(parse_date(value, today=today))


def get_date_range(period: str, today: Optional[date] = None) -> tuple[date, date]:
    """Get start and end dates for a specified period.

    Unlike a historical report, a projection looks forward, so "this" periods
    run to the end of the period rather than stopping at today.

    Args:
        period: Period string (this-month, next-month, this-week, next-week,
            next-30-days)
        today: Reference date (defaults to the current date)

    Returns:
        Tuple of (start_date, end_date) for the specified period

    Raises:
        ValueError: If period string is not recognized
    """
    period = period.strip().lower()
    if today is None:
        today = date.today()

    if period == "this-month":
        return (start_of_month(today), end_of_month(today))

    elif period == "next-month":
        first = start_of_month(today) + relativedelta(months=1)
        return (first, end_of_month(first))

    elif period == "this-week":
        start_date = today - timedelta(days=today.weekday())
        return (start_date, start_date + timedelta(days=6))

    elif period == "next-week":
        start_date = today - timedelta(days=today.weekday()) + timedelta(days=7)
        return (start_date, start_date + timedelta(days=6))

    elif period == "next-30-days":
        return (today, today + timedelta(days=30))

    else:
        raise ValueError(
            f"Unknown period: '{period}'. Supported periods: this-month, next-month, this-week, next-week, next-30-days"
        )
