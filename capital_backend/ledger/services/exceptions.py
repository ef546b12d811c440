# ledger/services/exceptions.py

"""
LEDGER SERVICE ERRORS

Centralized domain errors for the capital ledger.
"""


class LedgerServiceError(Exception):
    """Base exception for all capital ledger failures."""


class StorageUnavailableError(LedgerServiceError):
    """Raised when the ledger record cannot be read or written."""


class LedgerRecordNotFound(LedgerServiceError):
    """Raised when the singleton ledger record does not exist yet."""


class LedgerWriteConflict(LedgerServiceError):
    """Raised when a conditional write loses the race (stale version)."""


class WithdrawalValidationError(LedgerServiceError):
    """Raised when a withdrawal amount is not a positive amount within cash in hand."""


class WithdrawalNotFoundError(LedgerServiceError):
    """Raised when a withdrawal id does not resolve."""


class WithdrawalStateError(LedgerServiceError):
    """Raised on an illegal withdrawal state transition."""
