"""Shared domain error messages and error types."""


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class ConfigurationError(DomainError):
    """Recurring obligation lacks the fields its interval requires."""


class MissingDependencyError(DomainError):
    """A projection input (pay date, paychecks, profile) is unavailable."""


class SourceError(DomainError):
    """Finance data could not be read from its source."""


def next_pay_date_unavailable() -> str:
    """Return message when no next pay date can be resolved."""
    return "Next pay date is not available"


def no_paychecks_in_window(window_months: int) -> str:
    """Return message when no paychecks fall inside the projection window."""
    return f"No paychecks found in the next {window_months} month{'s' if window_months != 1 else ''}"


def profile_not_found() -> str:
    """Return message for a missing income profile."""
    return "User profile not found. Please check your profile settings."


def missing_recurrence_field(obligation_id: str, field_name: str) -> str:
    """Return message for a recurring obligation missing a required field."""
    return f"Recurring obligation '{obligation_id}' is missing {field_name}"


def invalid_choice(field_name: str, value: object, choices: list[str]) -> str:
    """Return message for an unrecognized enum value."""
    return f"Invalid {field_name} '{value}'. Expected one of: {', '.join(choices)}"
