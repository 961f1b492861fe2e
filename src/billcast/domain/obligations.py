"""Aggregation of stored bills and credit-card payments into occurrences.

Credit cards turn into bill-like obligations along two separate paths:

- scheduled_card_payment: the payment the user has scheduled
  (payment_amount on payment_frequency). Answers "what will be paid".
- minimum_card_payments: the card's minimum payment for every card whose
  balance covers it. Answers "what must be paid".

The amounts can differ (a scheduled payment may exceed the minimum), so the
two are kept as distinct operations.
"""

import logging
from dataclasses import replace
from datetime import date
from typing import Iterable, Optional, Sequence

from billcast.config import CREDIT_CARD_CATEGORY_NAME
from billcast.domain.entities import (
    Category,
    CategoryKind,
    CreditCard,
    DebitCard,
    Obligation,
    ObligationKind,
    ObligationSources,
    Occurrence,
    PaymentMethod,
    PaymentMethodKind,
    RecurrenceInterval,
    SourceKind,
)
from billcast.domain.recurrence import expand_recurrence
from billcast.utils.amount_parser import ZERO
from billcast.utils.date_parser import end_of_month, normalize_date, start_of_month

logger = logging.getLogger(__name__)

SCHEDULED_PAYMENT_ID_PREFIX = "cc-payment-"
MINIMUM_PAYMENT_ID_PREFIX = "cc-"

DIRECT_PAYMENT_LABEL = "Direct Payment"
UNKNOWN_PAYMENT_LABEL = "Unknown Payment Method"


def category_kind_for_name(name: str) -> CategoryKind:
    """Classify a category by its name when it is first constructed."""
    if name.strip().lower() == CREDIT_CARD_CATEGORY_NAME.lower():
        return CategoryKind.CREDIT_CARD_PAYMENT
    return CategoryKind.REGULAR


def find_credit_card_category(categories: Iterable[Category]) -> Optional[Category]:
    """Return the category credit-card payments are filed under, if any."""
    for category in categories:
        if category.kind is CategoryKind.CREDIT_CARD_PAYMENT:
            return category
    return None


def resolve_category(obligation: Obligation, categories: Sequence[Category]) -> Obligation:
    """Attach category metadata to a stored bill.

    A bill whose category cannot be found keeps its place in every listing,
    uncategorized (category_id '' and no category).
    """
    if obligation.is_synthetic:
        return obligation
    for category in categories:
        if category.id == obligation.category_id:
            return replace(obligation, category=category, category_kind=category.kind)
    return replace(obligation, category_id="", category=None, category_kind=CategoryKind.REGULAR)


def scheduled_card_payment(
    card: CreditCard, categories: Sequence[Category]
) -> Optional[Obligation]:
    """Turn a card's scheduled payment into a synthetic recurring obligation.

    Returns None when the card has no payment frequency or no positive
    payment amount.
    """
    if not card.payment_frequency or card.payment_amount <= ZERO:
        return None

    category = find_credit_card_category(categories)
    return Obligation(
        id=f"{SCHEDULED_PAYMENT_ID_PREFIX}{card.id}",
        name=f"{card.name} Payment",
        amount=card.payment_amount,
        category_id=category.id if category else "",
        kind=ObligationKind.RECURRING,
        due_date=card.due_date,
        recurrence_interval=RecurrenceInterval.parse(card.payment_frequency),
        start_date=card.payment_start_date,
        end_date=card.payment_end_date,
        recurrence_day_of_month=card.payment_day,
        recurrence_day_of_week=card.payment_week_day,
        source_kind=SourceKind.SYNTHETIC_CARD_PAYMENT,
        category_kind=CategoryKind.CREDIT_CARD_PAYMENT,
        is_autopay=card.is_autopay,
        card_id=card.id,
        notes=f"Automatic payment for {card.bank_name or card.name} credit card",
        category=category,
        payment_method=_credit_payment_method(card),
    )


def minimum_card_payments(
    credit_cards: Iterable[CreditCard], categories: Sequence[Category]
) -> list[Obligation]:
    """Synthesize one minimum-payment obligation per card that owes one.

    A card is included when it carries a balance and that balance is at least
    its minimum payment; the obligation's amount is the minimum payment.
    """
    category = find_credit_card_category(categories)
    obligations: list[Obligation] = []
    for card in credit_cards:
        if card.current_balance <= ZERO or card.current_balance < card.minimum_payment:
            continue
        obligations.append(
            Obligation(
                id=f"{MINIMUM_PAYMENT_ID_PREFIX}{card.id}",
                name=card.name,
                amount=card.minimum_payment,
                category_id=category.id if category else "",
                kind=ObligationKind.RECURRING,
                due_date=card.due_date,
                recurrence_interval=RecurrenceInterval.parse(card.payment_frequency),
                start_date=card.payment_start_date,
                end_date=card.payment_end_date,
                recurrence_day_of_month=card.payment_day,
                recurrence_day_of_week=card.payment_week_day,
                source_kind=SourceKind.SYNTHETIC_CARD_PAYMENT,
                category_kind=CategoryKind.CREDIT_CARD_PAYMENT,
                is_autopay=card.is_autopay,
                card_id=card.id,
                notes=f"Minimum payment for {card.name}",
                category=category,
                payment_method=_credit_payment_method(card),
            )
        )
    return obligations


def resolve_payment_method(
    obligation: Obligation,
    credit_cards: Sequence[CreditCard],
    debit_cards: Sequence[DebitCard],
) -> PaymentMethod:
    """Work out how an obligation is paid.

    A card_id that matches neither a credit nor a debit card resolves to
    "Unknown Payment Method" instead of failing.
    """
    if not obligation.card_id:
        return PaymentMethod(kind=PaymentMethodKind.DIRECT, label=DIRECT_PAYMENT_LABEL)

    for card in credit_cards:
        if card.id == obligation.card_id:
            return _credit_payment_method(card)

    for card in debit_cards:
        if card.id == obligation.card_id:
            return PaymentMethod(
                kind=PaymentMethodKind.DEBIT,
                label=_card_label(card.bank_name or card.name, card.last_four_digits),
                card_id=card.id,
            )

    logger.debug(
        "Obligation %s references unknown card %s", obligation.id, obligation.card_id
    )
    return PaymentMethod(
        kind=PaymentMethodKind.UNKNOWN,
        label=UNKNOWN_PAYMENT_LABEL,
        card_id=obligation.card_id,
    )


def attach_payment_methods(
    bills: Iterable[Obligation],
    credit_cards: Sequence[CreditCard],
    debit_cards: Sequence[DebitCard],
) -> list[Obligation]:
    """Return copies of bills with their payment method resolved."""
    return [
        replace(bill, payment_method=resolve_payment_method(bill, credit_cards, debit_cards))
        for bill in bills
    ]


def expand_obligation(obligation: Obligation, start_date: date, end_date: date) -> list[Occurrence]:
    """Materialize one obligation within an inclusive date window."""
    if not obligation.is_recurring:
        if obligation.due_date is None:
            return []
        due = normalize_date(obligation.due_date)
        if start_date <= due <= end_date:
            return [Occurrence(obligation=obligation, due_date=due)]
        return []

    return [
        Occurrence(obligation=obligation, due_date=due)
        for due in expand_recurrence(obligation, start_date, end_date)
    ]


def obligations_in_range(
    bills: Iterable[Obligation],
    credit_cards: Iterable[CreditCard],
    categories: Sequence[Category],
    start_date: date,
    end_date: date,
) -> list[Occurrence]:
    """Expand bills and scheduled card payments within an inclusive window.

    Args:
        bills: Stored bills (and any minimum-payment obligations the caller
            wants listed alongside them)
        credit_cards: Cards whose scheduled payments should be included
        categories: Categories used to resolve bill metadata
        start_date: First date of the window
        end_date: Last date of the window

    Returns:
        Occurrences sorted by due date; ties keep bills before card payments
        and otherwise their input order
    """
    start_date = normalize_date(start_date)
    end_date = normalize_date(end_date)
    if start_date > end_date:
        return []

    occurrences: list[Occurrence] = []
    for bill in bills:
        occurrences.extend(
            expand_obligation(resolve_category(bill, categories), start_date, end_date)
        )

    for card in credit_cards:
        payment = scheduled_card_payment(card, categories)
        if payment is not None:
            occurrences.extend(expand_obligation(payment, start_date, end_date))

    return sort_occurrences(occurrences)


def monthly_obligations(
    bills: Iterable[Obligation],
    credit_cards: Iterable[CreditCard],
    categories: Sequence[Category],
    reference_month: date,
) -> list[Occurrence]:
    """Expand everything due in the calendar month containing reference_month."""
    return obligations_in_range(
        bills,
        credit_cards,
        categories,
        start_of_month(reference_month),
        end_of_month(reference_month),
    )


def occurrences_for_sources(
    sources: ObligationSources, start_date: date, end_date: date
) -> list[Occurrence]:
    """obligations_in_range over an ObligationSources bundle."""
    return obligations_in_range(
        sources.bills, sources.credit_cards, sources.categories, start_date, end_date
    )


def dedupe_card_payments(occurrences: Iterable[Occurrence]) -> list[Occurrence]:
    """Drop repeated credit-card payments, keeping the first one seen.

    A credit-card-payment occurrence is a duplicate when an earlier
    credit-card-payment occurrence has the same amount and due date. Other
    occurrences are never dropped. Applying this twice changes nothing.
    """
    seen: set[tuple] = set()
    unique: list[Occurrence] = []
    for occurrence in occurrences:
        if occurrence.category_kind is not CategoryKind.CREDIT_CARD_PAYMENT:
            unique.append(occurrence)
            continue
        key = (occurrence.amount, occurrence.due_date)
        if key in seen:
            continue
        seen.add(key)
        unique.append(occurrence)
    return unique


def sort_occurrences(occurrences: Iterable[Occurrence]) -> list[Occurrence]:
    """Stable sort by due date."""
    return sorted(occurrences, key=lambda occurrence: occurrence.due_date)


def _credit_payment_method(card: CreditCard) -> PaymentMethod:
    return PaymentMethod(
        kind=PaymentMethodKind.CREDIT,
        label=_card_label(card.name, card.last_four_digits),
        card_id=card.id,
    )


def _card_label(name: str, last_four_digits: Optional[str]) -> str:
    if last_four_digits:
        return f"{name} (•••• {last_four_digits})"
    return name
