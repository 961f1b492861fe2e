"""Domain layer for billcast application."""

from billcast.domain.recurrence import expand_recurrence
from billcast.domain.obligations import (
    dedupe_card_payments,
    minimum_card_payments,
    monthly_obligations,
    obligations_in_range,
    scheduled_card_payment,
)
from billcast.domain.paychecks import PaycheckScheduler, calculate_pay_dates
from billcast.domain.projection import ProjectionService, project_cash_flow
from billcast.domain.summary import SummaryService

__all__ = [
    "expand_recurrence",
    "dedupe_card_payments",
    "minimum_card_payments",
    "monthly_obligations",
    "obligations_in_range",
    "scheduled_card_payment",
    "PaycheckScheduler",
    "calculate_pay_dates",
    "ProjectionService",
    "project_cash_flow",
    "SummaryService",
]
