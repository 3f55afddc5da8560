"""Transaction-level selection helpers used by the report commands."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import date

from .balances import matches_filters
from .models import Transaction


def filter_by_date(
    transactions: Iterable[Transaction], begin: date | None = None, end: date | None = None
) -> list[Transaction]:
    """Keep transactions dated within ``[begin, end]`` (both inclusive)."""

    return [
        t
        for t in transactions
        if (begin is None or t.date >= begin) and (end is None or t.date <= end)
    ]


def filter_by_payee(transactions: Iterable[Transaction], needle: str = "") -> list[Transaction]:
    """Case-insensitive payee substring filter; an empty needle keeps everything."""

    if not needle:
        return list(transactions)
    lowered = needle.lower()
    return [t for t in transactions if lowered in t.payee.lower()]


def filter_by_account(
    transactions: Iterable[Transaction], filters: Sequence[str] = ()
) -> list[Transaction]:
    """Keep transactions with at least one posting whose account matches ``filters``."""

    return [t for t in transactions if any(matches_filters(p.account, filters) for p in t.postings)]


__all__ = ["filter_by_account", "filter_by_date", "filter_by_payee"]
