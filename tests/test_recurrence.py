"""Tests for recurring obligation expansion."""

from datetime import date, timedelta

import pytest

from billcast.domain.entities import RecurrenceInterval
from billcast.domain.errors import ConfigurationError
from billcast.domain.recurrence import expand_recurrence, next_due_date, validate_recurrence


def test_monthly_bill_in_later_month(make_bill):
    """A monthly bill started in January lands on its day in March."""
    bill = make_bill(amount="100", day_of_month=15, start=date(2024, 1, 15))

    dates = expand_recurrence(bill, date(2024, 3, 1), date(2024, 3, 31))

    assert dates == [date(2024, 3, 15)]


def test_weekly_bill_over_a_month(make_bill):
    bill = make_bill(
        amount="20",
        interval=RecurrenceInterval.WEEKLY,
        start=date(2024, 1, 1),
        day_of_month=None,
        day_of_week=1,
    )

    dates = expand_recurrence(bill, date(2024, 1, 1), date(2024, 1, 31))

    assert dates == [
        date(2024, 1, 1),
        date(2024, 1, 8),
        date(2024, 1, 15),
        date(2024, 1, 22),
        date(2024, 1, 29),
    ]


def test_biweekly_skips_ahead_to_window(make_bill):
    bill = make_bill(
        interval=RecurrenceInterval.BI_WEEKLY,
        start=date(2024, 1, 5),
        day_of_month=None,
        day_of_week=5,
    )

    dates = expand_recurrence(bill, date(2024, 2, 1), date(2024, 2, 29))

    assert dates == [date(2024, 2, 2), date(2024, 2, 16)]


@pytest.mark.parametrize(
    "interval,step",
    [(RecurrenceInterval.WEEKLY, 7), (RecurrenceInterval.BI_WEEKLY, 14)],
)
def test_day_based_steps_are_constant(make_bill, interval, step):
    bill = make_bill(interval=interval, start=date(2023, 11, 7), day_of_month=None, day_of_week=2)

    dates = expand_recurrence(bill, date(2024, 1, 1), date(2024, 6, 30))

    assert len(dates) > 2
    for earlier, later in zip(dates, dates[1:]):
        assert later - earlier == timedelta(days=step)


def test_day_of_month_clamps_to_month_end(make_bill):
    bill = make_bill(day_of_month=31, start=date(2024, 1, 31))

    dates = expand_recurrence(bill, date(2024, 1, 1), date(2024, 4, 30))

    assert dates == [
        date(2024, 1, 31),
        date(2024, 2, 29),
        date(2024, 3, 31),
        date(2024, 4, 30),
    ]


def test_clamping_does_not_drift(make_bill):
    """A clamped February does not pull later months back to the 29th."""
    bill = make_bill(day_of_month=30, start=date(2023, 12, 30))

    dates = expand_recurrence(bill, date(2024, 2, 1), date(2024, 3, 31))

    assert dates == [date(2024, 2, 29), date(2024, 3, 30)]


def test_quarterly_bill(make_bill):
    bill = make_bill(interval=RecurrenceInterval.QUARTERLY, day_of_month=10, start=date(2024, 1, 10))

    assert expand_recurrence(bill, date(2024, 1, 1), date(2024, 12, 31)) == [
        date(2024, 1, 10),
        date(2024, 4, 10),
        date(2024, 7, 10),
        date(2024, 10, 10),
    ]
    assert expand_recurrence(bill, date(2024, 5, 1), date(2024, 12, 31)) == [
        date(2024, 7, 10),
        date(2024, 10, 10),
    ]


def test_yearly_leap_day_stays_on_last_day_of_february(make_bill):
    bill = make_bill(interval=RecurrenceInterval.YEARLY, day_of_month=29, start=date(2024, 2, 29))

    dates = expand_recurrence(bill, date(2024, 1, 1), date(2028, 12, 31))

    assert dates == [
        date(2024, 2, 29),
        date(2025, 2, 28),
        date(2026, 2, 28),
        date(2027, 2, 28),
        date(2028, 2, 28),
    ]


def test_first_month_candidate_before_start_day_is_kept(make_bill):
    """The day is re-anchored in the start month even when it precedes the start day."""
    bill = make_bill(day_of_month=5, start=date(2024, 1, 20))

    dates = expand_recurrence(bill, date(2024, 1, 1), date(2024, 3, 31))

    assert dates == [date(2024, 1, 5), date(2024, 2, 5), date(2024, 3, 5)]


def test_month_skipped_when_cursor_passes_window_end(make_bill):
    bill = make_bill(day_of_month=5, start=date(2024, 1, 25))

    assert expand_recurrence(bill, date(2024, 3, 1), date(2024, 3, 10)) == []


def test_month_skipped_when_cursor_precedes_window_start(make_bill):
    bill = make_bill(day_of_month=20, start=date(2024, 1, 5))

    assert expand_recurrence(bill, date(2024, 3, 10), date(2024, 4, 9)) == []


def test_quarterly_cursor_bounds_each_quarter(make_bill):
    bill = make_bill(interval=RecurrenceInterval.QUARTERLY, day_of_month=28, start=date(2024, 1, 3))

    assert expand_recurrence(bill, date(2024, 1, 1), date(2024, 7, 15)) == [
        date(2024, 1, 28),
        date(2024, 4, 28),
    ]


def test_end_date_limits_expansion(make_bill):
    bill = make_bill(start=date(2024, 1, 15), end=date(2024, 3, 15))

    assert expand_recurrence(bill, date(2024, 1, 1), date(2024, 12, 31)) == [
        date(2024, 1, 15),
        date(2024, 2, 15),
        date(2024, 3, 15),
    ]


def test_end_date_before_window_is_empty(make_bill):
    bill = make_bill(start=date(2023, 1, 15), end=date(2023, 12, 15))

    assert expand_recurrence(bill, date(2024, 1, 1), date(2024, 12, 31)) == []


def test_start_after_window_is_empty(make_bill):
    bill = make_bill(start=date(2025, 1, 15))

    assert expand_recurrence(bill, date(2024, 1, 1), date(2024, 12, 31)) == []


@pytest.mark.parametrize(
    "overrides",
    [
        {"day_of_month": None},
        {"interval": RecurrenceInterval.WEEKLY, "day_of_month": None, "day_of_week": None},
        {"interval": RecurrenceInterval.WEEKLY, "day_of_week": 7},
        {"start": None},
        {"interval": None},
        {"day_of_month": 32},
    ],
)
def test_malformed_recurrence_expands_to_nothing(make_bill, overrides):
    bill = make_bill(**overrides)

    assert expand_recurrence(bill, date(2024, 1, 1), date(2024, 12, 31)) == []
    with pytest.raises(ConfigurationError):
        validate_recurrence(bill)


@pytest.mark.parametrize(
    "interval,day_of_month,day_of_week",
    [
        (RecurrenceInterval.WEEKLY, None, 3),
        (RecurrenceInterval.BI_WEEKLY, None, 3),
        (RecurrenceInterval.MONTHLY, 31, None),
        (RecurrenceInterval.QUARTERLY, 29, None),
        (RecurrenceInterval.YEARLY, 29, None),
    ],
)
@pytest.mark.parametrize(
    "window",
    [
        (date(2024, 1, 1), date(2024, 1, 31)),
        (date(2024, 2, 14), date(2024, 5, 3)),
        (date(2023, 6, 30), date(2026, 2, 28)),
        (date(2024, 3, 31), date(2024, 3, 31)),
    ],
)
def test_dates_stay_inside_window(make_bill, interval, day_of_month, day_of_week, window):
    bill = make_bill(
        interval=interval,
        start=date(2023, 8, 31),
        day_of_month=day_of_month,
        day_of_week=day_of_week,
    )
    window_start, window_end = window

    dates = expand_recurrence(bill, window_start, window_end)

    assert dates == sorted(set(dates))
    assert all(window_start <= d <= window_end for d in dates)


def test_next_due_date(make_bill, make_one_time_bill):
    bill = make_bill(day_of_month=15, start=date(2024, 1, 15))

    assert next_due_date(bill, date(2024, 3, 15)) == date(2024, 3, 15)
    assert next_due_date(bill, date(2024, 3, 16)) == date(2024, 4, 15)
    assert next_due_date(make_one_time_bill(due=date(2024, 3, 1)), date(2024, 3, 2)) is None
