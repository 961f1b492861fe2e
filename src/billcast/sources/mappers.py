"""Mapper functions to convert raw source records into domain entities.

Records arrive as dictionaries with snake_case keys and ISO-8601 date
strings. This layer isolates the conversion so the domain never sees the raw
shape.
"""

from typing import Any, Optional

from billcast.domain import entities as domain
from billcast.domain.errors import ValidationError, invalid_choice
from billcast.domain.obligations import category_kind_for_name
from billcast.utils.amount_parser import coerce_amount
from billcast.utils.date_parser import parse_iso_date

Record = dict[str, Any]

TRUE_STRINGS = {"true", "t", "yes", "y", "1"}
FALSE_STRINGS = {"false", "f", "no", "n", "0", ""}


def bill_to_domain(record: Record) -> domain.Obligation:
    """Convert a stored bill record to an Obligation entity."""
    bill_type = _required(record, "bill_type", "bill")
    try:
        kind = domain.ObligationKind(str(bill_type).strip().lower())
    except ValueError:
        raise ValidationError(
            invalid_choice("bill_type", bill_type, [k.value for k in domain.ObligationKind])
        )

    recurrence_interval = None
    if kind is domain.ObligationKind.RECURRING:
        recurrence_interval = domain.RecurrenceInterval.parse(
            record.get("recurrence_interval") or record.get("frequency")
        )

    return domain.Obligation(
        id=str(_required(record, "id", "bill")),
        name=str(record.get("name") or ""),
        amount=_amount(record, "amount"),
        category_id=str(record.get("category_id") or ""),
        kind=kind,
        due_date=_date(record, "due_date"),
        recurrence_interval=recurrence_interval,
        start_date=_date(record, "start_date"),
        end_date=_date(record, "end_date"),
        recurrence_day_of_month=_optional_int(record, "recurrence_day"),
        recurrence_day_of_week=_optional_int(record, "recurrence_week_day"),
        is_paid=_flag(record, "is_paid"),
        is_autopay=_flag(record, "is_autopay"),
        card_id=_optional_str(record, "card_id"),
        notes=record.get("notes"),
    )


def category_to_domain(record: Record) -> domain.Category:
    """Convert a category record to a Category entity."""
    name = str(_required(record, "name", "category"))
    return domain.Category(
        id=str(_required(record, "id", "category")),
        name=name,
        color=record.get("color"),
        kind=category_kind_for_name(name),
    )


def credit_card_to_domain(record: Record) -> domain.CreditCard:
    """Convert a credit card record to a CreditCard entity."""
    return domain.CreditCard(
        id=str(_required(record, "id", "credit card")),
        name=str(record.get("name") or ""),
        current_balance=_amount(record, "current_balance"),
        minimum_payment=_amount(record, "minimum_payment"),
        payment_amount=_amount(record, "payment_amount"),
        payment_frequency=record.get("payment_frequency") or None,
        due_date=_date(record, "due_date"),
        payment_day=_optional_int(record, "payment_day"),
        payment_week_day=_optional_int(record, "payment_week_day"),
        payment_start_date=_date(record, "payment_start_date"),
        payment_end_date=_date(record, "payment_end_date"),
        is_autopay=_flag(record, "is_autopay"),
        bank_name=record.get("bank_name"),
        last_four_digits=_optional_str(record, "last_four_digits"),
        credit_limit=_amount(record, "credit_limit"),
        interest_rate=_amount(record, "interest_rate"),
    )


def debit_card_to_domain(record: Record) -> domain.DebitCard:
    """Convert a debit card record to a DebitCard entity."""
    return domain.DebitCard(
        id=str(_required(record, "id", "debit card")),
        name=str(record.get("name") or ""),
        available_balance=_amount(record, "available_balance"),
        bank_name=record.get("bank_name"),
        last_four_digits=_optional_str(record, "last_four_digits"),
        account_type=str(record.get("account_type") or "checking"),
        is_primary=_flag(record, "is_primary"),
    )


def paycheck_to_domain(record: Record) -> domain.Paycheck:
    """Convert a paycheck record to a Paycheck entity."""
    payment_date = _date(record, "payment_date")
    if payment_date is None:
        raise ValidationError(f"Paycheck {record.get('id')} has no payment_date")
    return domain.Paycheck(
        id=str(_required(record, "id", "paycheck")),
        amount=_amount(record, "amount"),
        payment_date=payment_date,
        frequency=record.get("frequency"),
    )


def profile_to_domain(record: Record) -> domain.PaycheckConfig:
    """Convert a user profile record to a PaycheckConfig entity."""
    raw_frequency = _required(record, "income_frequency", "profile")
    frequency = domain.IncomeFrequency.parse(str(raw_frequency))
    if frequency is None:
        raise ValidationError(
            invalid_choice(
                "income_frequency", raw_frequency, [f.value for f in domain.IncomeFrequency]
            )
        )
    return domain.PaycheckConfig(
        income_amount=_amount(record, "income_amount"),
        income_frequency=frequency,
        income_day=_optional_int(record, "income_day"),
        next_paydate_override=_date(record, "user_entry_next_paydate"),
        income_start_date=_date(record, "income_start_date"),
    )


def savings_payment_to_domain(record: Record) -> domain.SavingsPayment:
    """Convert a savings payment record to a SavingsPayment entity."""
    payment_date = _date(record, "payment_date")
    if payment_date is None:
        raise ValidationError(f"Savings payment {record.get('id')} has no payment_date")
    return domain.SavingsPayment(
        id=str(_required(record, "id", "savings payment")),
        amount=_amount(record, "amount"),
        payment_date=payment_date,
        savings_id=_optional_str(record, "savings_id"),
        payment_type=record.get("payment_type"),
    )


def credit_card_payment_to_domain(record: Record) -> domain.CreditCardPayment:
    """Convert a credit card payment record to a CreditCardPayment entity."""
    payment_date = _date(record, "payment_date")
    if payment_date is None:
        raise ValidationError(f"Credit card payment {record.get('id')} has no payment_date")
    card = record.get("credit_card") or {}
    return domain.CreditCardPayment(
        id=str(_required(record, "id", "credit card payment")),
        credit_card_id=str(_required(record, "credit_card_id", "credit card payment")),
        amount=_amount(record, "amount"),
        payment_date=payment_date,
        card_name=record.get("card_name") or card.get("name"),
    )


def _required(record: Record, key: str, kind: str) -> Any:
    value = record.get(key)
    if value is None or value == "":
        raise ValidationError(f"Invalid {kind} record: missing '{key}'")
    return value


def _amount(record: Record, key: str):
    try:
        return coerce_amount(record.get(key))
    except ValueError as e:
        raise ValidationError(f"Invalid {key}: {e}")


def _date(record: Record, key: str):
    try:
        return parse_iso_date(record.get(key))
    except ValueError as e:
        raise ValidationError(f"Invalid {key}: {e}")


def _optional_int(record: Record, key: str) -> Optional[int]:
    value = record.get(key)
    if value is None or value == "":
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid {key} '{value}': expected an integer")


def _optional_str(record: Record, key: str) -> Optional[str]:
    value = record.get(key)
    if value is None or value == "":
        return None
    return str(value)


def _flag(record: Record, key: str) -> bool:
    value = record.get(key)
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        normalized = value.strip().lower()
        if normalized in TRUE_STRINGS:
            return True
        if normalized in FALSE_STRINGS:
            return False
    raise ValidationError(f"Invalid {key} '{value}': expected true or false")
