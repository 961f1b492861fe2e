"""Paycheck scheduling: next/last pay dates and upcoming paychecks."""

import logging
from datetime import date, timedelta
from typing import Iterable, Optional

from dateutil.relativedelta import relativedelta

from billcast.config import MID_MONTH_PAY_DAY
from billcast.domain.entities import IncomeFrequency, PayDates, Paycheck, PaycheckConfig
from billcast.domain.errors import MissingDependencyError, profile_not_found
from billcast.utils.date_parser import (
    add_months,
    end_of_month,
    format_iso_date,
    on_day_of_month,
    start_of_month,
)

logger = logging.getLogger(__name__)

WEEKLY_DAYS = 7
BIWEEKLY_DAYS = 14

# How far ahead to look for the next derived paycheck
NEXT_PAYCHECK_HORIZON_MONTHS = 13


def calculate_pay_dates(config: PaycheckConfig, today: date) -> PayDates:
    """Derive the last and next pay dates from an income configuration.

    Weekly, bi-weekly and monthly dates are offsets from today, not anchored
    to the configured pay day; displays built on these values depend on that.

    Args:
        config: The user's income configuration
        today: Reference date

    Returns:
        PayDates; both dates are None for a specific-date schedule without an
        income day
    """
    frequency = config.income_frequency

    if frequency is IncomeFrequency.WEEKLY:
        return PayDates(
            last_pay_date=today - timedelta(days=WEEKLY_DAYS),
            next_pay_date=today + timedelta(days=WEEKLY_DAYS),
        )

    if frequency is IncomeFrequency.BI_WEEKLY:
        return PayDates(
            last_pay_date=today - timedelta(days=BIWEEKLY_DAYS),
            next_pay_date=today + timedelta(days=BIWEEKLY_DAYS),
        )

    if frequency is IncomeFrequency.BI_MONTHLY:
        return _bi_monthly_pay_dates(today)

    if frequency is IncomeFrequency.MONTHLY:
        return PayDates(
            last_pay_date=add_months(today, -1),
            next_pay_date=add_months(today, 1),
        )

    if not config.income_day:
        return PayDates(last_pay_date=None, next_pay_date=None)

    previous_month = on_day_of_month(add_months(start_of_month(today), -1), config.income_day)
    this_month = on_day_of_month(today, config.income_day)
    next_month = on_day_of_month(add_months(start_of_month(today), 1), config.income_day)
    if today < this_month:
        return PayDates(last_pay_date=previous_month, next_pay_date=this_month)
    return PayDates(last_pay_date=this_month, next_pay_date=next_month)


def _bi_monthly_pay_dates(today: date) -> PayDates:
    mid_month = today.replace(day=MID_MONTH_PAY_DAY)
    last_day = end_of_month(today)

    if today.day < MID_MONTH_PAY_DAY:
        return PayDates(
            last_pay_date=start_of_month(today) - timedelta(days=1),
            next_pay_date=mid_month,
        )
    if today.day < last_day.day:
        return PayDates(last_pay_date=mid_month, next_pay_date=last_day)
    return PayDates(
        last_pay_date=last_day,
        next_pay_date=add_months(mid_month, 1),
    )


def generate_paychecks(
    config: PaycheckConfig, window_start: date, window_end: date
) -> list[Paycheck]:
    """Derive concrete paychecks from an income configuration.

    Weekly and bi-weekly schedules step from next_paydate_override, falling
    back to income_start_date; without either anchor nothing is derived.
    Bi-monthly pay lands on the 15th and the last day of each month; monthly
    and specific-date pay lands on income_day, clamped to the month's length.

    Args:
        config: The user's income configuration
        window_start: First date of the window (inclusive)
        window_end: Last date of the window (exclusive)

    Returns:
        Paychecks in chronological order
    """
    if window_start >= window_end:
        return []

    frequency = config.income_frequency
    if frequency in (IncomeFrequency.WEEKLY, IncomeFrequency.BI_WEEKLY):
        anchor = config.next_paydate_override or config.income_start_date
        if anchor is None:
            logger.debug("No anchor date for %s income; nothing derived", frequency.value)
            return []
        step = WEEKLY_DAYS if frequency is IncomeFrequency.WEEKLY else BIWEEKLY_DAYS
        dates = _step_from_anchor(anchor, step, window_start, window_end)
    elif frequency is IncomeFrequency.BI_MONTHLY:
        dates = []
        for month_first in _month_starts(window_start, window_end):
            dates.append(month_first.replace(day=MID_MONTH_PAY_DAY))
            dates.append(end_of_month(month_first))
    else:
        if not config.income_day:
            logger.debug("No income day for %s income; nothing derived", frequency.value)
            return []
        dates = [
            on_day_of_month(month_first, config.income_day)
            for month_first in _month_starts(window_start, window_end)
        ]

    return [
        Paycheck(
            id=f"derived-{format_iso_date(pay_date)}",
            amount=config.income_amount,
            payment_date=pay_date,
            frequency=frequency.value,
        )
        for pay_date in sorted(set(dates))
        if window_start <= pay_date < window_end
    ]


def _step_from_anchor(anchor: date, step_days: int, window_start: date, window_end: date) -> list[date]:
    offset = (window_start - anchor).days // step_days
    current = anchor + timedelta(days=offset * step_days)
    dates: list[date] = []
    while current < window_end:
        if current >= window_start:
            dates.append(current)
        current += timedelta(days=step_days)
    return dates


def _month_starts(window_start: date, window_end: date) -> list[date]:
    months: list[date] = []
    current = start_of_month(window_start)
    while current < window_end:
        months.append(current)
        current += relativedelta(months=1)
    return months


class PaycheckScheduler:
    """Answers paycheck questions from stored rows or the income profile.

    Stored paychecks win whenever any exist; otherwise paychecks are derived
    from the PaycheckConfig.
    """

    def __init__(
        self,
        paychecks: Iterable[Paycheck] = (),
        config: Optional[PaycheckConfig] = None,
    ):
        """Initialize paycheck scheduler.

        Args:
            paychecks: Stored paychecks, in any order
            config: Optional income configuration
        """
        self.paychecks = sorted(paychecks, key=lambda paycheck: paycheck.payment_date)
        self.config = config

    @property
    def has_stored_paychecks(self) -> bool:
        return bool(self.paychecks)

    def next_paycheck_date(self, today: date) -> Optional[date]:
        """Earliest paycheck date strictly after today, or None."""
        if self.has_stored_paychecks:
            for paycheck in self.paychecks:
                if paycheck.payment_date > today:
                    return paycheck.payment_date
            return None

        if self.config is None:
            return None
        derived = generate_paychecks(
            self.config,
            today + timedelta(days=1),
            add_months(today, NEXT_PAYCHECK_HORIZON_MONTHS),
        )
        return derived[0].payment_date if derived else None

    def upcoming_paychecks(self, window_start: date, window_end: date) -> list[Paycheck]:
        """Paychecks with window_start <= payment_date < window_end, in order."""
        if self.has_stored_paychecks:
            return [
                paycheck
                for paycheck in self.paychecks
                if window_start <= paycheck.payment_date < window_end
            ]
        if self.config is None:
            return []
        return generate_paychecks(self.config, window_start, window_end)

    def pay_dates(self, today: date) -> PayDates:
        """Last and next pay dates from the income profile.

        Raises:
            MissingDependencyError: If there is no income profile
        """
        if self.config is None:
            raise MissingDependencyError(profile_not_found())
        return calculate_pay_dates(self.config, today)
