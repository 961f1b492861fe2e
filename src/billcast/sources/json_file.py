"""Finance data source backed by a JSON snapshot file."""

import json
import logging
import threading
from pathlib import Path
from typing import Any, Optional

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
from billcast.domain.errors import SourceError
from billcast.sources.base import FinanceSource
from billcast.sources.mappers import (
    bill_to_domain,
    category_to_domain,
    credit_card_payment_to_domain,
    credit_card_to_domain,
    debit_card_to_domain,
    paycheck_to_domain,
    profile_to_domain,
    savings_payment_to_domain,
)

logger = logging.getLogger(__name__)


class JsonFileSource(FinanceSource):
    """Reads every collection from a single JSON document.

    The document is an object with the keys bills, credit_cards,
    debit_cards, categories, paychecks, profile, savings_payments and
    credit_card_payments; missing keys are treated as empty.
    """

    def __init__(self, path: str | Path):
        """Initialize JSON file source.

        Args:
            path: Path to the JSON snapshot file
        """
        self.path = Path(path)
        self._document: Optional[dict[str, Any]] = None
        self._lock = threading.Lock()

    def _get_document(self) -> dict[str, Any]:
        """Get the parsed document, reading the file on first use."""
        with self._lock:
            if self._document is None:
                self._document = self._read()
            return self._document

    def _read(self) -> dict[str, Any]:
        if not self.path.exists():
            raise SourceError(f"Data file '{self.path}' not found")
        try:
            with self.path.open(encoding="utf-8") as handle:
                document = json.load(handle)
        except json.JSONDecodeError as e:
            raise SourceError(f"Data file '{self.path}' is not valid JSON: {e}")
        except OSError as e:
            raise SourceError(f"Could not read data file '{self.path}': {e}")
        if not isinstance(document, dict):
            raise SourceError(f"Data file '{self.path}' must contain a JSON object")
        logger.debug("Loaded finance data from %s", self.path)
        return document

    def _records(self, key: str) -> list[dict[str, Any]]:
        records = self._get_document().get(key) or []
        if not isinstance(records, list):
            raise SourceError(f"'{key}' in '{self.path}' must be a list")
        return records

    def connect(self) -> None:
        """Connect to the source."""
        # Reading is lazy, so this is a no-op
        pass

    def disconnect(self) -> None:
        """Drop the cached document."""
        with self._lock:
            self._document = None

    def fetch_bills(self) -> list[Obligation]:
        return [bill_to_domain(record) for record in self._records("bills")]

    def fetch_credit_cards(self) -> list[CreditCard]:
        cards = [credit_card_to_domain(record) for record in self._records("credit_cards")]
        return sorted(cards, key=lambda card: card.name)

    def fetch_debit_cards(self) -> list[DebitCard]:
        return [debit_card_to_domain(record) for record in self._records("debit_cards")]

    def fetch_categories(self) -> list[Category]:
        return [category_to_domain(record) for record in self._records("categories")]

    def fetch_paychecks(self) -> list[Paycheck]:
        paychecks = [paycheck_to_domain(record) for record in self._records("paychecks")]
        return sorted(paychecks, key=lambda paycheck: paycheck.payment_date)

    def fetch_user_profile(self) -> Optional[PaycheckConfig]:
        record = self._get_document().get("profile")
        if not record:
            return None
        return profile_to_domain(record)

    def fetch_savings_payments(self, limit: int) -> list[SavingsPayment]:
        payments = [
            savings_payment_to_domain(record) for record in self._records("savings_payments")
        ]
        payments.sort(key=lambda payment: payment.payment_date, reverse=True)
        return payments[:limit]

    def fetch_credit_card_payments(self) -> list[CreditCardPayment]:
        payments = [
            credit_card_payment_to_domain(record)
            for record in self._records("credit_card_payments")
        ]
        return sorted(payments, key=lambda payment: payment.payment_date)
