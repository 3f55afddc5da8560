"""Public API for the ``textledger`` package.

A stable import surface over the implementation modules: each function here
either re-exports or thinly wraps the module that owns the behavior, so
callers (the CLI, tests, embedding code) import from one place.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime

from .balances import balance_report
from .classifier import PayeeClassifier, train
from .importer import ImportResult
from .importer import import_csv as _import_csv
from .models import (
    BalanceOptions,
    BalanceReport,
    ImportOptions,
    LedgerStats,
    PeriodBalances,
    PeriodKind,
    RegisterRow,
    Transaction,
)
from .parser import parse_journal
from .periods import balances_by_period as _balances_by_period
from .register import register as _register
from .stats import ledger_stats


def balances(
    transactions: Sequence[Transaction], options: BalanceOptions | None = None
) -> BalanceReport:
    """Leaf balances, hierarchical display rows and the grand total.

    The total is the sum of the unconsolidated leaves, so it does not depend
    on ``max_depth`` or ``include_empty``.
    """

    return balance_report(transactions, options)


def balances_by_period(
    transactions: Sequence[Transaction],
    period: PeriodKind | str,
    filters: Sequence[str] = (),
) -> list[PeriodBalances]:
    """Partition by calendar period and compute each bucket's balances independently."""

    return _balances_by_period(transactions, period, filters)


def register(transactions: Sequence[Transaction], filters: Sequence[str] = ()) -> list[RegisterRow]:
    return _register(transactions, filters)


def stats(transactions: Sequence[Transaction], now: datetime | None = None) -> LedgerStats:
    return ledger_stats(transactions, now)


def train_classifier(
    transactions: Sequence[Transaction], class_substring: str = "Expenses"
) -> PayeeClassifier:
    return train(transactions, class_substring)


def import_csv(
    transactions: Sequence[Transaction],
    csv_text: str,
    account: str,
    options: ImportOptions | None = None,
) -> ImportResult:
    """Convert bank-export CSV text into journal entries.

    Raises
    ------
    AccountNotFoundError
        No existing posting account contains ``account`` (case-insensitive).
    MissingColumnsError
        The header lacks a date, payee/description or amount column.
    """

    return _import_csv(transactions, csv_text, account, options)


__all__ = [
    "balances",
    "balances_by_period",
    "import_csv",
    "parse_journal",
    "register",
    "stats",
    "train_classifier",
]
