"""Abstract finance data source interface."""

from abc import ABC, abstractmethod
from typing import Optional

from billcast.domain.entities import (
    Category,
    CreditCard,
    CreditCardPayment,
    DebitCard,
    Obligation,
    Paycheck,
    PaycheckConfig,
    SavingsPayment,
)


class FinanceSource(ABC):
    """Abstract read-only source of a user's finance data.

    Every fetch is independent of the others, so callers may issue them
    concurrently.
    """

    @abstractmethod
    def connect(self) -> None:
        """Open the source."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Release the source."""
        pass

    @abstractmethod
    def fetch_bills(self) -> list[Obligation]:
        """Fetch stored bills."""
        pass

    @abstractmethod
    def fetch_credit_cards(self) -> list[CreditCard]:
        """Fetch credit cards."""
        pass

    @abstractmethod
    def fetch_debit_cards(self) -> list[DebitCard]:
        """Fetch debit and savings accounts."""
        pass

    @abstractmethod
    def fetch_categories(self) -> list[Category]:
        """Fetch bill categories."""
        pass

    @abstractmethod
    def fetch_paychecks(self) -> list[Paycheck]:
        """Fetch stored paychecks ordered by payment date."""
        pass

    @abstractmethod
    def fetch_user_profile(self) -> Optional[PaycheckConfig]:
        """Fetch the income configuration, or None if no profile exists."""
        pass

    @abstractmethod
    def fetch_savings_payments(self, limit: int) -> list[SavingsPayment]:
        """Fetch the most recent savings payments, newest first."""
        pass

    @abstractmethod
    def fetch_credit_card_payments(self) -> list[CreditCardPayment]:
        """Fetch planned and recorded credit card payments."""
        pass
