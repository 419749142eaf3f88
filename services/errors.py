# services/errors.py
"""
Ledger error kinds.

Every failure is scoped to the single call that raised it. ValidationError
subclasses ValueError, so callers that already catch ValueError from the
service layer keep working.
"""


class LedgerError(Exception):
     """Base class for all ledger engine errors."""


class ValidationError(LedgerError, ValueError):
     """Rejected input. Raised before any mutation; retry with corrected input."""


class InvalidReadingError(ValidationError):
     """Meter reading lower than the previous reading."""


class ConcessionExceedsPendingError(ValidationError):
     """Concession larger than the room's pending amount."""


class NotFoundError(LedgerError, LookupError):
     """Referenced room or record does not exist."""


class AlreadyReversedError(LedgerError):
     """Record was already reversed. Reversal is one-way."""


class ConcurrencyConflictError(LedgerError):
     """
     Room balances changed underneath the operation (lost update detected).
     Safe to retry the whole operation from scratch.
     """
