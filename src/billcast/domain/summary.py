"""Financial summary, spending recommendation and category grouping."""

from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Optional

from billcast.domain.entities import (
    CategoryGroup,
    CreditCard,
    FinanceSnapshot,
    FinancialSummary,
    IncomeFrequency,
    Obligation,
    Occurrence,
    PaycheckConfig,
    RecurrenceInterval,
    SpendingRecommendation,
)
from billcast.domain.obligations import minimum_card_payments
from billcast.utils.amount_parser import ZERO

UNCATEGORIZED = "Uncategorized"

WEEKS_PER_YEAR = Decimal("52")
BIWEEKS_PER_YEAR = Decimal("26")
MONTHS_PER_YEAR = Decimal("12")

HIGH_DEBT_RATIO = Decimal("0.5")
LOW_DEBT_RATIO = Decimal("0.2")
HIGH_DEBT_SPENDING_SHARE = Decimal("0.2")
LOW_DEBT_SPENDING_SHARE = Decimal("0.4")
DEFAULT_SPENDING_SHARE = Decimal("0.3")


def monthly_equivalent(obligation: Obligation) -> Decimal:
    """Average monthly cost of an obligation; one-time bills count as zero."""
    if not obligation.is_recurring:
        return ZERO

    interval = obligation.recurrence_interval
    if interval is RecurrenceInterval.WEEKLY:
        return obligation.amount * WEEKS_PER_YEAR / MONTHS_PER_YEAR
    if interval is RecurrenceInterval.BI_WEEKLY:
        return obligation.amount * BIWEEKS_PER_YEAR / MONTHS_PER_YEAR
    if interval is RecurrenceInterval.MONTHLY:
        return obligation.amount
    if interval is RecurrenceInterval.QUARTERLY:
        return obligation.amount / Decimal("3")
    if interval is RecurrenceInterval.YEARLY:
        return obligation.amount / MONTHS_PER_YEAR
    return ZERO


def monthly_income(config: Optional[PaycheckConfig]) -> Decimal:
    """Average monthly income implied by an income configuration."""
    if config is None:
        return ZERO

    frequency = config.income_frequency
    if frequency is IncomeFrequency.WEEKLY:
        return config.income_amount * WEEKS_PER_YEAR / MONTHS_PER_YEAR
    if frequency is IncomeFrequency.BI_WEEKLY:
        return config.income_amount * BIWEEKS_PER_YEAR / MONTHS_PER_YEAR
    if frequency is IncomeFrequency.BI_MONTHLY:
        return config.income_amount * 2
    return config.income_amount


def calculate_financial_summary(
    config: Optional[PaycheckConfig],
    bills: Iterable[Obligation],
    credit_cards: Iterable[CreditCard],
) -> FinancialSummary:
    """Compare monthly income with monthly bills, card minimums and debt.

    Args:
        config: Income configuration (None counts as zero income)
        bills: Stored bills
        credit_cards: All credit cards

    Returns:
        FinancialSummary; the debt-to-income ratio is zero without income
    """
    cards = list(credit_cards)
    income = monthly_income(config)
    total_bills = sum((monthly_equivalent(bill) for bill in bills), ZERO)
    total_minimum_payments = sum((card.minimum_payment for card in cards), ZERO)
    total_debt = sum((card.current_balance for card in cards), ZERO)
    available_income = income - total_bills - total_minimum_payments
    ratio = total_debt / income if income > ZERO else ZERO

    return FinancialSummary(
        income=income,
        total_bills=total_bills,
        total_minimum_payments=total_minimum_payments,
        total_debt=total_debt,
        available_income=available_income,
        debt_to_income_ratio=ratio,
    )


def recommend_spending(summary: FinancialSummary) -> SpendingRecommendation:
    """Split available income between discretionary spending and debt.

    High debt-to-income (> 0.5) shifts the split toward debt payment, low
    (< 0.2) allows more spending. Amounts are rounded to whole units.
    """
    if summary.available_income <= ZERO:
        return SpendingRecommendation(spending=ZERO, debt_payment=ZERO)

    if summary.debt_to_income_ratio > HIGH_DEBT_RATIO:
        share = HIGH_DEBT_SPENDING_SHARE
    elif summary.debt_to_income_ratio < LOW_DEBT_RATIO:
        share = LOW_DEBT_SPENDING_SHARE
    else:
        share = DEFAULT_SPENDING_SHARE

    spending = summary.available_income * share
    debt_payment = summary.available_income - spending
    return SpendingRecommendation(
        spending=spending.quantize(Decimal("1"), rounding=ROUND_HALF_UP),
        debt_payment=debt_payment.quantize(Decimal("1"), rounding=ROUND_HALF_UP),
    )


def group_by_category(occurrences: Iterable[Occurrence]) -> list[CategoryGroup]:
    """Group occurrences by category, in order of first appearance.

    Occurrences without a resolvable category land in an "Uncategorized"
    group keyed by ''.
    """
    groups: dict[str, list[Occurrence]] = {}
    names: dict[str, str] = {}
    for occurrence in occurrences:
        category = occurrence.category
        key = category.id if category is not None else ""
        if key not in groups:
            groups[key] = []
            names[key] = category.name if category is not None else UNCATEGORIZED
        groups[key].append(occurrence)

    return [
        CategoryGroup(category_id=key, name=names[key], occurrences=tuple(items))
        for key, items in groups.items()
    ]


class SummaryService:
    """Service for building summary views from a fetched finance snapshot."""

    def __init__(self, snapshot: FinanceSnapshot):
        """Initialize summary service.

        Args:
            snapshot: Finance data fetched for this request
        """
        self.snapshot = snapshot

    def financial_summary(self) -> FinancialSummary:
        """Monthly income versus stored bills and card obligations."""
        return calculate_financial_summary(
            self.snapshot.profile, self.snapshot.bills, self.snapshot.credit_cards
        )

    def spending_recommendation(self) -> SpendingRecommendation:
        return recommend_spending(self.financial_summary())

    def minimum_payments_due(self) -> list[Obligation]:
        """Minimum-payment obligations for cards that owe one."""
        return minimum_card_payments(self.snapshot.credit_cards, self.snapshot.categories)
