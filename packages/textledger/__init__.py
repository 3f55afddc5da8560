"""Plain-text double-entry ledger: journal parsing, reports and CSV import."""

from __future__ import annotations

from .amount import Amount
from .api import (
    balances,
    balances_by_period,
    import_csv,
    parse_journal,
    register,
    stats,
    train_classifier,
)
from .errors import (
    AccountNotFoundError,
    CsvImportError,
    IncludeError,
    JournalParseError,
    LedgerError,
    MissingColumnsError,
    MultipleElidedPostingsError,
    UnbalancedTransactionError,
)
from .models import (
    AccountBalance,
    BalanceOptions,
    BalanceReport,
    ImportOptions,
    LedgerStats,
    PeriodBalances,
    PeriodKind,
    Posting,
    RegisterRow,
    Transaction,
)

__version__ = "0.1.0"

__all__ = [
    "AccountBalance",
    "AccountNotFoundError",
    "Amount",
    "BalanceOptions",
    "BalanceReport",
    "CsvImportError",
    "ImportOptions",
    "IncludeError",
    "JournalParseError",
    "LedgerError",
    "LedgerStats",
    "MissingColumnsError",
    "MultipleElidedPostingsError",
    "PeriodBalances",
    "PeriodKind",
    "Posting",
    "RegisterRow",
    "Transaction",
    "UnbalancedTransactionError",
    "balances",
    "balances_by_period",
    "import_csv",
    "parse_journal",
    "register",
    "stats",
    "train_classifier",
]
