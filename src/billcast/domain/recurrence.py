"""Expansion of recurring obligations into concrete due dates.

Every function here is pure: the same obligation and window always produce
the same dates, and the obligation itself is never modified.

Day-of-month handling: when recurrence_day_of_month does not exist in a
month (31 in April, 30 in February) the occurrence is clamped to the last day
of that month. Yearly obligations step a cursor 12 months at a time from
start_date; a February 29 start moves to February 28 and stays there.
"""

import logging
from datetime import date, timedelta
from typing import Optional

from billcast.domain.entities import Obligation, RecurrenceInterval
from billcast.domain.errors import ConfigurationError, missing_recurrence_field
from billcast.utils.date_parser import (
    add_months,
    months_between,
    normalize_date,
    on_day_of_month,
)

logger = logging.getLogger(__name__)

WEEKLY_DAYS = 7
BIWEEKLY_DAYS = 14

MONTH_STEPS = {
    RecurrenceInterval.MONTHLY: 1,
    RecurrenceInterval.QUARTERLY: 3,
}


def validate_recurrence(obligation: Obligation) -> None:
    """Check that a recurring obligation carries its required fields.

    Raises:
        ConfigurationError: If the interval, start date, or the day field the
            interval needs is missing or out of range
    """
    if obligation.recurrence_interval is None:
        raise ConfigurationError(
            missing_recurrence_field(obligation.id, "a recurrence interval")
        )
    if obligation.start_date is None:
        raise ConfigurationError(missing_recurrence_field(obligation.id, "a start date"))

    if obligation.recurrence_interval.day_of_week_based:
        day_of_week = obligation.recurrence_day_of_week
        if day_of_week is None or not 0 <= day_of_week <= 6:
            raise ConfigurationError(
                missing_recurrence_field(obligation.id, "a day of week (0-6)")
            )
    else:
        day_of_month = obligation.recurrence_day_of_month
        if day_of_month is None or not 1 <= day_of_month <= 31:
            raise ConfigurationError(
                missing_recurrence_field(obligation.id, "a day of month (1-31)")
            )


def expand_recurrence(
    obligation: Obligation, window_start: date, window_end: date
) -> list[date]:
    """Expand a recurring obligation into its due dates within a window.

    Args:
        obligation: Recurring obligation to expand
        window_start: First date of the window (inclusive)
        window_end: Last date of the window (inclusive)

    Returns:
        Ascending, de-duplicated dates d with window_start <= d <= window_end
        and d <= obligation.end_date. Malformed obligations yield an empty list.
    """
    try:
        validate_recurrence(obligation)
    except ConfigurationError as e:
        logger.debug("Skipping malformed recurring obligation: %s", e)
        return []

    start = normalize_date(obligation.start_date)
    window_start = normalize_date(window_start)
    window_end = normalize_date(window_end)
    end = normalize_date(obligation.end_date) if obligation.end_date else None

    if end is not None and end < window_start:
        return []

    bound = min(end, window_end) if end is not None else window_end
    if bound < window_start or bound < start:
        return []

    interval = obligation.recurrence_interval
    if interval is RecurrenceInterval.WEEKLY:
        dates = _step_days(start, WEEKLY_DAYS, window_start, bound)
    elif interval is RecurrenceInterval.BI_WEEKLY:
        dates = _step_days(start, BIWEEKLY_DAYS, window_start, bound)
    elif interval is RecurrenceInterval.YEARLY:
        dates = _step_years(start, window_start, bound)
    else:
        dates = _step_months(
            start,
            MONTH_STEPS[interval],
            obligation.recurrence_day_of_month,
            window_start,
            bound,
        )

    return sorted(set(dates))


def _step_days(start: date, interval_days: int, window_start: date, bound: date) -> list[date]:
    current = _first_occurrence_on_or_after(start, window_start, interval_days)
    step = timedelta(days=interval_days)
    dates: list[date] = []
    while current <= bound:
        dates.append(current)
        current += step
    return dates


def _step_months(
    start: date,
    month_step: int,
    day_of_month: int,
    window_start: date,
    bound: date,
) -> list[date]:
    """Advance a month cursor from start, re-anchoring the day in every month.

    The cursor is start_date plus k steps of whole months. Iteration stops
    once the cursor passes the bound, and months whose cursor is still
    before window_start are not considered. The candidate for a month is
    recurrence_day_of_month of the cursor's month.
    """
    offset = _aligned_month_offset(start, window_start, month_step)
    dates: list[date] = []
    while True:
        cursor = add_months(start, offset)
        if cursor > bound:
            break
        if cursor >= window_start:
            candidate = on_day_of_month(cursor, day_of_month)
            if window_start <= candidate <= bound:
                dates.append(candidate)
        offset += month_step
    return dates


def _step_years(start: date, window_start: date, bound: date) -> list[date]:
    # Chained: once Feb 29 clamps to Feb 28 it stays there
    current = start
    dates: list[date] = []
    while current <= bound:
        if current >= window_start:
            dates.append(current)
        current = add_months(current, 12)
    return dates


def _first_occurrence_on_or_after(start: date, minimum: date, interval_days: int) -> date:
    if start >= minimum:
        return start
    days_between = (minimum - start).days
    intervals = (days_between + interval_days - 1) // interval_days
    return start + timedelta(days=interval_days * intervals)


def _aligned_month_offset(start: date, window_start: date, month_step: int) -> int:
    """Largest multiple of month_step whose month is not after window_start's."""
    months = months_between(start, window_start)
    if months <= 0:
        return 0
    return (months // month_step) * month_step


def next_due_date(obligation: Obligation, on_or_after: date, horizon_days: int = 400) -> Optional[date]:
    """First due date of an obligation on or after a date, within a horizon."""
    if not obligation.is_recurring:
        due = obligation.due_date
        return due if due is not None and due >= on_or_after else None
    dates = expand_recurrence(
        obligation, on_or_after, on_or_after + timedelta(days=horizon_days)
    )
    return dates[0] if dates else None
