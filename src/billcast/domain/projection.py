"""Cash-flow projection: next-paycheck overview, income book, 30-day outlook."""

import logging
from dataclasses import replace
from datetime import date, timedelta
from decimal import Decimal
from typing import Iterable, Optional, Sequence

from billcast.config import DEFAULT_WINDOW_MONTHS, OUTLOOK_DAYS, SAVINGS_PAYMENT_LIMIT
from billcast.domain.entities import (
    CashFlowOutlook,
    CreditCardPayment,
    DebitCard,
    FinanceSnapshot,
    IncomeBook,
    NextPaycheckOverview,
    Obligation,
    ObligationSources,
    Occurrence,
    Paycheck,
    ProjectionPeriod,
    SavingsPayment,
)
from billcast.domain.errors import (
    MissingDependencyError,
    next_pay_date_unavailable,
    no_paychecks_in_window,
)
from billcast.domain.obligations import (
    attach_payment_methods,
    dedupe_card_payments,
    minimum_card_payments,
    occurrences_for_sources,
    sort_occurrences,
)
from billcast.domain.paychecks import PaycheckScheduler
from billcast.utils.amount_parser import ZERO
from billcast.utils.date_parser import add_months

logger = logging.getLogger(__name__)


def total_available_funds(accounts: Iterable[DebitCard]) -> Decimal:
    """Sum of available balances across debit and savings accounts."""
    return sum((account.available_balance for account in accounts), ZERO)


def period_obligations(
    sources: ObligationSources, period_start: date, period_end: date
) -> list[Occurrence]:
    """Deduplicated occurrences with period_start <= due date < period_end."""
    if period_end <= period_start:
        return []
    candidates = occurrences_for_sources(
        sources, period_start, period_end - timedelta(days=1)
    )
    return sort_occurrences(dedupe_card_payments(candidates))


def project_cash_flow(
    starting_balance: Decimal,
    sources: ObligationSources,
    paychecks: Iterable[Paycheck],
    window_start: date,
    window_months: int = DEFAULT_WINDOW_MONTHS,
    savings_payments: Iterable[SavingsPayment] = (),
    include_savings: bool = True,
) -> list[ProjectionPeriod]:
    """Project running balances across the paychecks in a window.

    Each paycheck opens a period that runs until the next paycheck (or the
    window end for the last one). Obligations due on the period's first day
    belong to it; those due on the next period's first day do not. Within a
    period: ending = starting + paycheck - obligations - savings (savings only
    when include_savings is set).

    Args:
        starting_balance: Balance carried into the first period
        sources: Bills, cards and categories to expand per period
        paychecks: Candidate paychecks, in any order
        window_start: First day of the window (inclusive)
        window_months: Window length in calendar months
        savings_payments: Savings contributions, debited when include_savings
        include_savings: Whether savings contributions reduce the balance

    Returns:
        Periods ordered by period_start

    Raises:
        MissingDependencyError: If no paychecks fall in the window
    """
    window_end = add_months(window_start, window_months)
    relevant = sorted(
        (
            paycheck
            for paycheck in paychecks
            if window_start <= paycheck.payment_date < window_end
        ),
        key=lambda paycheck: paycheck.payment_date,
    )
    if not relevant:
        raise MissingDependencyError(no_paychecks_in_window(window_months))

    savings = list(savings_payments) if include_savings else []
    running_balance = starting_balance
    periods: list[ProjectionPeriod] = []

    for index, paycheck in enumerate(relevant):
        period_start = paycheck.payment_date
        if index + 1 < len(relevant):
            period_end = relevant[index + 1].payment_date
        else:
            period_end = window_end

        obligations = period_obligations(sources, period_start, period_end)
        period_savings = sorted(
            (
                payment
                for payment in savings
                if period_start <= payment.payment_date < period_end
            ),
            key=lambda payment: payment.payment_date,
        )

        period_starting_balance = running_balance
        running_balance += paycheck.amount
        running_balance -= sum((occ.amount for occ in obligations), ZERO)
        running_balance -= sum((payment.amount for payment in period_savings), ZERO)

        periods.append(
            ProjectionPeriod(
                paycheck=paycheck,
                period_start=period_start,
                period_end=period_end,
                obligations=tuple(obligations),
                savings_payments=tuple(period_savings),
                starting_balance=period_starting_balance,
                ending_balance=running_balance,
            )
        )

    logger.info(
        "Projected %d periods from %s to %s", len(periods), window_start, window_end
    )
    return periods


def next_paycheck_overview(
    today: date,
    next_pay_date: Optional[date],
    accounts: Sequence[DebitCard],
    sources: ObligationSources,
) -> NextPaycheckOverview:
    """Summarize what is owed between today and the next pay date.

    Obligations due from today through next_pay_date (both inclusive) are
    listed; only unpaid ones reduce the projected balance.

    Raises:
        MissingDependencyError: If next_pay_date is None
    """
    if next_pay_date is None:
        raise MissingDependencyError(next_pay_date_unavailable())

    obligations = sort_occurrences(
        dedupe_card_payments(occurrences_for_sources(sources, today, next_pay_date))
    )
    available = total_available_funds(accounts)
    unpaid_total = sum(
        (occ.amount for occ in obligations if not occ.is_paid), ZERO
    )
    return NextPaycheckOverview(
        today=today,
        next_pay_date=next_pay_date,
        available_funds=available,
        obligations=tuple(obligations),
        unpaid_total=unpaid_total,
        projected_balance=available - unpaid_total,
    )


def thirty_day_outlook(
    today: date,
    accounts: Sequence[DebitCard],
    sources: ObligationSources,
    card_payments: Iterable[CreditCardPayment],
    paychecks: Iterable[Paycheck],
    days: int = OUTLOOK_DAYS,
) -> CashFlowOutlook:
    """Funds, bills, card payments and paychecks over the next few days.

    Bills count from today through the horizon (inclusive); card payments
    after today through the horizon; paychecks from today up to but not
    including the horizon.
    """
    horizon = today + timedelta(days=days)
    bills = occurrences_for_sources(sources, today, horizon)
    upcoming_card_payments = sorted(
        (payment for payment in card_payments if today < payment.payment_date <= horizon),
        key=lambda payment: payment.payment_date,
    )
    upcoming_paychecks = sorted(
        (paycheck for paycheck in paychecks if today <= paycheck.payment_date < horizon),
        key=lambda paycheck: paycheck.payment_date,
    )
    return CashFlowOutlook(
        start_date=today,
        end_date=horizon,
        available_funds=total_available_funds(accounts),
        bills=tuple(bills),
        card_payments=tuple(upcoming_card_payments),
        paychecks=tuple(upcoming_paychecks),
    )


class ProjectionService:
    """Service for building projections from a fetched finance snapshot."""

    def __init__(self, snapshot: FinanceSnapshot):
        """Initialize projection service.

        Args:
            snapshot: Finance data fetched for this request
        """
        self.snapshot = snapshot
        self.scheduler = PaycheckScheduler(snapshot.paychecks, snapshot.profile)

    def stored_bills(self) -> list[Obligation]:
        """Stored bills with their payment methods resolved."""
        return attach_payment_methods(
            self.snapshot.bills, self.snapshot.credit_cards, self.snapshot.debit_cards
        )

    def obligation_sources(self, include_scheduled_card_payments: bool = True) -> ObligationSources:
        """Bills plus minimum card payments, optionally with scheduled payments.

        Args:
            include_scheduled_card_payments: If True, each card's scheduled
                payment is expanded alongside its minimum payment
        """
        snapshot = self.snapshot
        bills = self.stored_bills() + minimum_card_payments(
            snapshot.credit_cards, snapshot.categories
        )
        return ObligationSources(
            bills=tuple(bills),
            credit_cards=snapshot.credit_cards if include_scheduled_card_payments else (),
            categories=snapshot.categories,
        )

    def next_paycheck_overview(self, today: date) -> NextPaycheckOverview:
        """Overview of obligations due before the next paycheck.

        Raises:
            MissingDependencyError: If no next pay date can be resolved
        """
        return next_paycheck_overview(
            today,
            self.scheduler.next_paycheck_date(today),
            self.snapshot.debit_cards,
            self.obligation_sources(include_scheduled_card_payments=True),
        )

    def income_book(
        self,
        today: date,
        window_months: int = DEFAULT_WINDOW_MONTHS,
        include_savings: bool = True,
        starting_balance: Optional[Decimal] = None,
    ) -> IncomeBook:
        """Project balances paycheck by paycheck over the coming months.

        The starting balance defaults to the next-paycheck overview's
        projected balance.

        Raises:
            MissingDependencyError: If the next pay date is unavailable or no
                paychecks fall within the window
        """
        if starting_balance is None:
            starting_balance = self.next_paycheck_overview(today).projected_balance

        window_end = add_months(today, window_months)
        periods = project_cash_flow(
            starting_balance=starting_balance,
            sources=self.obligation_sources(include_scheduled_card_payments=False),
            paychecks=self.scheduler.upcoming_paychecks(today, window_end),
            window_start=today,
            window_months=window_months,
            savings_payments=self.recent_savings_payments(),
            include_savings=include_savings,
        )
        return IncomeBook(
            starting_balance=starting_balance,
            window_months=window_months,
            include_savings=include_savings,
            periods=tuple(periods),
        )

    def thirty_day_outlook(self, today: date, days: int = OUTLOOK_DAYS) -> CashFlowOutlook:
        """Short-horizon outlook over stored bills, card payments and pay."""
        sources = ObligationSources(
            bills=tuple(self.stored_bills()),
            categories=self.snapshot.categories,
        )
        outlook = thirty_day_outlook(
            today,
            self.snapshot.debit_cards,
            sources,
            self.snapshot.credit_card_payments,
            self.scheduler.upcoming_paychecks(today, today + timedelta(days=days)),
            days=days,
        )
        if self.snapshot.profile is None:
            return outlook
        return replace(outlook, pay_dates=self.scheduler.pay_dates(today))

    def recent_savings_payments(self) -> list[SavingsPayment]:
        """Most recent savings payments, newest first, capped at the fetch limit."""
        payments = sorted(
            self.snapshot.savings_payments,
            key=lambda payment: payment.payment_date,
            reverse=True,
        )
        return payments[:SAVINGS_PAYMENT_LIMIT]
