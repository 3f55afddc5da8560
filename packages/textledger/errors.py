"""Exception types for fatal ledger and import failures.

Only structural problems raise: broken bookkeeping in the journal, or an
import whose CSV/account setup cannot work at all. Bad individual lines and
rows are dropped by the parser/importer and never surface here.
"""

from __future__ import annotations

from datetime import date
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .amount import Amount


class LedgerError(ValueError):
    """Base class for all fatal ``textledger`` errors."""


class JournalParseError(LedgerError):
    """A transaction in the journal cannot be finalized."""

    def __init__(self, message: str, *, payee: str, date: date) -> None:
        super().__init__(message)
        self.payee = payee
        self.date = date


class MultipleElidedPostingsError(JournalParseError):
    def __init__(self, *, payee: str, date: date) -> None:
        super().__init__(
            f"Multiple empty accounts in transaction: {payee} ({date:%Y/%m/%d})",
            payee=payee,
            date=date,
        )


class UnbalancedTransactionError(JournalParseError):
    def __init__(self, *, payee: str, date: date, difference: Amount) -> None:
        super().__init__(
            f"Transaction not balanced: {payee} ({date:%Y/%m/%d}) (diff: {difference})",
            payee=payee,
            date=date,
        )
        self.difference = difference


class CsvImportError(LedgerError):
    """The CSV import cannot proceed."""


class MissingColumnsError(CsvImportError):
    def __init__(self, missing: tuple[str, ...]) -> None:
        super().__init__(
            "Unable to find columns required from header field names: " + ", ".join(missing)
        )
        self.missing = missing


class AccountNotFoundError(CsvImportError):
    def __init__(self, hint: str) -> None:
        super().__init__(f"Unable to find matching account for {hint!r}.")
        self.hint = hint


class IncludeError(LedgerError):
    """An ``include`` directive references a file that cannot be read."""

    def __init__(self, message: str, *, path: str) -> None:
        super().__init__(message)
        self.path = path


__all__ = [
    "AccountNotFoundError",
    "CsvImportError",
    "IncludeError",
    "JournalParseError",
    "LedgerError",
    "MissingColumnsError",
    "MultipleElidedPostingsError",
    "UnbalancedTransactionError",
]
