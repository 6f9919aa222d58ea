"""Domain errors raised by the loan computations."""


class FinanceTrackerError(Exception):
    """Base exception for all finance tracker errors."""


class InvalidInputError(FinanceTrackerError, ValueError):
    """Raised when a loan lacks or has out-of-range principal, rate or term."""


class InvalidPaymentError(FinanceTrackerError, ValueError):
    """Raised when a payment amount is missing or not positive."""
