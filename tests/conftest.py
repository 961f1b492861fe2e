"""Shared pytest fixtures for billcast tests."""

from datetime import date
from decimal import Decimal
from pathlib import Path

import pytest
from click.testing import CliRunner

from billcast.domain.entities import (
    Category,
    CategoryKind,
    CreditCard,
    DebitCard,
    Obligation,
    ObligationKind,
    RecurrenceInterval,
)


@pytest.fixture
def fixtures_dir():
    """Return path to test fixtures directory."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def snapshot_path(fixtures_dir):
    """Path to the sample finance snapshot used by CLI and source tests."""
    return fixtures_dir / "snapshot.json"


@pytest.fixture
def cli_runner():
    """Create a click test runner."""
    return CliRunner()


@pytest.fixture
def categories():
    """A regular category plus the Credit Card category."""
    return (
        Category(id="c-housing", name="Housing"),
        Category(id="c-util", name="Utilities"),
        Category(id="c-cc", name="Credit Card", kind=CategoryKind.CREDIT_CARD_PAYMENT),
    )


@pytest.fixture
def make_bill():
    """Factory for stored bills with sensible recurring defaults."""

    def _make(
        id="bill-1",
        amount="100",
        interval=RecurrenceInterval.MONTHLY,
        start=date(2024, 1, 15),
        day_of_month=15,
        day_of_week=None,
        end=None,
        category_id="c-housing",
        **kwargs,
    ):
        return Obligation(
            id=id,
            name=kwargs.pop("name", f"Bill {id}"),
            amount=Decimal(amount),
            category_id=category_id,
            kind=ObligationKind.RECURRING,
            recurrence_interval=interval,
            start_date=start,
            end_date=end,
            recurrence_day_of_month=day_of_month,
            recurrence_day_of_week=day_of_week,
            **kwargs,
        )

    return _make


@pytest.fixture
def make_one_time_bill():
    """Factory for one-time bills."""

    def _make(id="once-1", amount="50", due=date(2024, 3, 10), category_id="c-util", **kwargs):
        return Obligation(
            id=id,
            name=kwargs.pop("name", f"Bill {id}"),
            amount=Decimal(amount),
            category_id=category_id,
            kind=ObligationKind.ONE_TIME,
            due_date=due,
            **kwargs,
        )

    return _make


@pytest.fixture
def visa_card():
    """Card owing a minimum payment with a monthly scheduled payment."""
    return CreditCard(
        id="visa",
        name="Visa",
        current_balance=Decimal("500"),
        minimum_payment=Decimal("35"),
        payment_amount=Decimal("200"),
        payment_frequency="monthly",
        payment_day=25,
        payment_start_date=date(2024, 1, 25),
        last_four_digits="4242",
    )


@pytest.fixture
def checking_account():
    return DebitCard(
        id="dc-1",
        name="Checking",
        available_balance=Decimal("2500"),
        bank_name="First Bank",
        last_four_digits="1111",
    )
