"""Concurrent fan-out of the independent source fetches."""

import logging
from concurrent.futures import ThreadPoolExecutor

from billcast.config import SAVINGS_PAYMENT_LIMIT
from billcast.domain.entities import FinanceSnapshot
from billcast.sources.base import FinanceSource

logger = logging.getLogger(__name__)


def load_snapshot(
    source: FinanceSource, savings_limit: int = SAVINGS_PAYMENT_LIMIT
) -> FinanceSnapshot:
    """Fetch everything a projection needs and join it into one snapshot.

    The fetches have no ordering dependency on one another, so they run
    concurrently; the first failure propagates once all have been joined.
    """
    with ThreadPoolExecutor(max_workers=8, thread_name_prefix="billcast-fetch") as pool:
        bills = pool.submit(source.fetch_bills)
        credit_cards = pool.submit(source.fetch_credit_cards)
        debit_cards = pool.submit(source.fetch_debit_cards)
        categories = pool.submit(source.fetch_categories)
        paychecks = pool.submit(source.fetch_paychecks)
        profile = pool.submit(source.fetch_user_profile)
        savings_payments = pool.submit(source.fetch_savings_payments, savings_limit)
        card_payments = pool.submit(source.fetch_credit_card_payments)

    snapshot = FinanceSnapshot(
        bills=tuple(bills.result()),
        credit_cards=tuple(credit_cards.result()),
        debit_cards=tuple(debit_cards.result()),
        categories=tuple(categories.result()),
        paychecks=tuple(paychecks.result()),
        profile=profile.result(),
        savings_payments=tuple(savings_payments.result()),
        credit_card_payments=tuple(card_payments.result()),
    )
    logger.debug(
        "Loaded %d bills, %d credit cards, %d paychecks",
        len(snapshot.bills),
        len(snapshot.credit_cards),
        len(snapshot.paychecks),
    )
    return snapshot
