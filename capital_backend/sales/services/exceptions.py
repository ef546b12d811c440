# sales/services/exceptions.py

"""
SALES SERVICE ERRORS
"""


class SaleServiceError(Exception):
    """Base exception for sale recording / reversal failures."""


class SaleNotFoundError(SaleServiceError):
    """Raised when a sale id does not resolve."""


class SaleAlreadyReversedError(SaleServiceError):
    """Raised when reversing a sale twice."""
