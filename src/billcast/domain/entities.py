"""Domain model entities for billcast.

These are pure value objects representing the inputs and results of the
projection engine, independent of where the data is fetched from. Every
entity is immutable; computed results never mutate their inputs.
"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Optional


def _normalize_token(value: str) -> str:
    return "".join(ch for ch in value.strip().lower() if ch.isalnum())


class ObligationKind(str, Enum):
    """Whether an obligation happens once or repeats."""

    ONE_TIME = "one-time"
    RECURRING = "recurring"


class RecurrenceInterval(str, Enum):
    """Recurrence rule of a recurring obligation."""

    WEEKLY = "weekly"
    BI_WEEKLY = "bi-weekly"
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    YEARLY = "yearly"

    @classmethod
    def parse(cls, value: Optional[str]) -> Optional["RecurrenceInterval"]:
        """Parse a stored interval string.

        Unknown or empty values return None; an obligation without a usable
        interval expands to nothing rather than failing.
        """
        if not value:
            return None
        token = _normalize_token(value)
        if token == "annually":
            token = "yearly"
        for member in cls:
            if _normalize_token(member.value) == token:
                return member
        return None

    @property
    def day_of_week_based(self) -> bool:
        return self in (RecurrenceInterval.WEEKLY, RecurrenceInterval.BI_WEEKLY)


class IncomeFrequency(str, Enum):
    """How often the user is paid."""

    WEEKLY = "weekly"
    BI_WEEKLY = "bi-weekly"
    BI_MONTHLY = "bi-monthly"
    MONTHLY = "monthly"
    SPECIFIC_DATE = "specific-date"

    @classmethod
    def parse(cls, value: Optional[str]) -> Optional["IncomeFrequency"]:
        """Parse a stored income frequency string, None if unrecognized."""
        if not value:
            return None
        token = _normalize_token(value)
        for member in cls:
            if _normalize_token(member.value) == token:
                return member
        return None


class SourceKind(str, Enum):
    """Where an obligation came from."""

    STORED_BILL = "stored-bill"
    SYNTHETIC_CARD_PAYMENT = "synthetic-card-payment"


class CategoryKind(str, Enum):
    """Category classification fixed when the category is constructed."""

    CREDIT_CARD_PAYMENT = "credit-card-payment"
    REGULAR = "regular"


class PaymentMethodKind(str, Enum):
    """How an obligation gets paid."""

    DIRECT = "direct"
    CREDIT = "credit"
    DEBIT = "debit"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class Category:
    """Bill category domain entity."""

    id: str
    name: str
    color: Optional[str] = None
    kind: CategoryKind = CategoryKind.REGULAR


@dataclass(frozen=True)
class PaymentMethod:
    """Resolved payment method of an obligation."""

    kind: PaymentMethodKind
    label: str
    card_id: Optional[str] = None


@dataclass(frozen=True)
class Obligation:
    """Bill-like unit consumed by the projection engine.

    A recurring obligation carries start_date; monthly, quarterly and yearly
    ones carry recurrence_day_of_month (1-31); weekly and bi-weekly ones carry
    recurrence_day_of_week (0-6, Sunday=0). For one-time obligations due_date
    is the concrete date; otherwise it is only an anchor.
    """

    id: str
    name: str
    amount: Decimal
    category_id: str
    kind: ObligationKind
    due_date: Optional[date] = None
    recurrence_interval: Optional[RecurrenceInterval] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    recurrence_day_of_month: Optional[int] = None
    recurrence_day_of_week: Optional[int] = None
    source_kind: SourceKind = SourceKind.STORED_BILL
    category_kind: CategoryKind = CategoryKind.REGULAR
    is_paid: bool = False
    is_autopay: bool = False
    card_id: Optional[str] = None
    notes: Optional[str] = None
    category: Optional[Category] = None
    payment_method: Optional[PaymentMethod] = None

    @property
    def is_recurring(self) -> bool:
        return self.kind is ObligationKind.RECURRING

    @property
    def is_synthetic(self) -> bool:
        return self.source_kind is SourceKind.SYNTHETIC_CARD_PAYMENT


@dataclass(frozen=True)
class Occurrence:
    """An obligation materialized at one concrete date."""

    obligation: Obligation
    due_date: date

    @property
    def id(self) -> str:
        return self.obligation.id

    @property
    def name(self) -> str:
        return self.obligation.name

    @property
    def amount(self) -> Decimal:
        return self.obligation.amount

    @property
    def category_id(self) -> str:
        return self.obligation.category_id

    @property
    def category(self) -> Optional[Category]:
        return self.obligation.category

    @property
    def category_kind(self) -> CategoryKind:
        return self.obligation.category_kind

    @property
    def source_kind(self) -> SourceKind:
        return self.obligation.source_kind

    @property
    def is_paid(self) -> bool:
        return self.obligation.is_paid


@dataclass(frozen=True)
class CreditCard:
    """Credit card domain entity.

    The payment_* fields describe the user's scheduled payment and mirror the
    recurrence fields of a bill.
    """

    id: str
    name: str
    current_balance: Decimal
    minimum_payment: Decimal
    payment_amount: Decimal = Decimal("0")
    payment_frequency: Optional[str] = None
    due_date: Optional[date] = None
    payment_day: Optional[int] = None
    payment_week_day: Optional[int] = None
    payment_start_date: Optional[date] = None
    payment_end_date: Optional[date] = None
    is_autopay: bool = False
    bank_name: Optional[str] = None
    last_four_digits: Optional[str] = None
    credit_limit: Decimal = Decimal("0")
    interest_rate: Decimal = Decimal("0")


@dataclass(frozen=True)
class DebitCard:
    """Debit or savings account with an available balance."""

    id: str
    name: str
    available_balance: Decimal
    bank_name: Optional[str] = None
    last_four_digits: Optional[str] = None
    account_type: str = "checking"
    is_primary: bool = False


@dataclass(frozen=True)
class Paycheck:
    """Concrete paycheck, stored or derived from a PaycheckConfig."""

    id: str
    amount: Decimal
    payment_date: date
    frequency: Optional[str] = None


@dataclass(frozen=True)
class PaycheckConfig:
    """Income configuration from the user's profile."""

    income_amount: Decimal
    income_frequency: IncomeFrequency
    income_day: Optional[int] = None
    next_paydate_override: Optional[date] = None
    income_start_date: Optional[date] = None


@dataclass(frozen=True)
class PayDates:
    """Last and next pay dates derived from a PaycheckConfig."""

    last_pay_date: Optional[date]
    next_pay_date: Optional[date]


@dataclass(frozen=True)
class SavingsPayment:
    """Contribution into a savings plan."""

    id: str
    amount: Decimal
    payment_date: date
    savings_id: Optional[str] = None
    payment_type: Optional[str] = None


@dataclass(frozen=True)
class CreditCardPayment:
    """Planned or recorded payment against a credit card."""

    id: str
    credit_card_id: str
    amount: Decimal
    payment_date: date
    card_name: Optional[str] = None


@dataclass(frozen=True)
class FinanceSnapshot:
    """Everything the engine needs, fetched up front and joined."""

    bills: tuple[Obligation, ...] = ()
    credit_cards: tuple[CreditCard, ...] = ()
    debit_cards: tuple[DebitCard, ...] = ()
    categories: tuple[Category, ...] = ()
    paychecks: tuple[Paycheck, ...] = ()
    profile: Optional[PaycheckConfig] = None
    savings_payments: tuple[SavingsPayment, ...] = ()
    credit_card_payments: tuple[CreditCardPayment, ...] = ()


@dataclass(frozen=True)
class ObligationSources:
    """Bills, cards and categories that obligations are aggregated from."""

    bills: tuple[Obligation, ...] = ()
    credit_cards: tuple[CreditCard, ...] = ()
    categories: tuple[Category, ...] = ()


@dataclass(frozen=True)
class CategoryGroup:
    """Occurrences sharing a category, for display."""

    category_id: str
    name: str
    occurrences: tuple[Occurrence, ...]

    @property
    def total(self) -> Decimal:
        return sum((occ.amount for occ in self.occurrences), Decimal("0"))


@dataclass(frozen=True)
class ProjectionPeriod:
    """One slice of the projection between consecutive paychecks."""

    paycheck: Paycheck
    period_start: date
    period_end: date
    obligations: tuple[Occurrence, ...]
    savings_payments: tuple[SavingsPayment, ...]
    starting_balance: Decimal
    ending_balance: Decimal

    @property
    def obligations_total(self) -> Decimal:
        return sum((occ.amount for occ in self.obligations), Decimal("0"))

    @property
    def savings_total(self) -> Decimal:
        return sum((payment.amount for payment in self.savings_payments), Decimal("0"))


@dataclass(frozen=True)
class NextPaycheckOverview:
    """What is owed between today and the next pay date."""

    today: date
    next_pay_date: date
    available_funds: Decimal
    obligations: tuple[Occurrence, ...]
    unpaid_total: Decimal
    projected_balance: Decimal


@dataclass(frozen=True)
class IncomeBook:
    """Multi-month projection seeded from the next-paycheck overview."""

    starting_balance: Decimal
    window_months: int
    include_savings: bool
    periods: tuple[ProjectionPeriod, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class CashFlowOutlook:
    """Short-horizon projection of funds, bills, card payments and pay."""

    start_date: date
    end_date: date
    available_funds: Decimal
    bills: tuple[Occurrence, ...]
    card_payments: tuple[CreditCardPayment, ...]
    paychecks: tuple[Paycheck, ...]
    pay_dates: Optional[PayDates] = None

    @property
    def bills_total(self) -> Decimal:
        return sum((occ.amount for occ in self.bills), Decimal("0"))

    @property
    def card_payments_total(self) -> Decimal:
        return sum((payment.amount for payment in self.card_payments), Decimal("0"))

    @property
    def paychecks_total(self) -> Decimal:
        return sum((paycheck.amount for paycheck in self.paychecks), Decimal("0"))

    @property
    def total_expected_funds(self) -> Decimal:
        return self.available_funds + self.paychecks_total

    @property
    def remaining_after_bills(self) -> Decimal:
        return self.total_expected_funds - self.bills_total - self.card_payments_total


@dataclass(frozen=True)
class FinancialSummary:
    """Monthly income versus monthly obligations and debt."""

    income: Decimal
    total_bills: Decimal
    total_minimum_payments: Decimal
    total_debt: Decimal
    available_income: Decimal
    debt_to_income_ratio: Decimal


@dataclass(frozen=True)
class SpendingRecommendation:
    """Split of available income between spending and debt payment."""

    spending: Decimal
    debt_payment: Decimal
