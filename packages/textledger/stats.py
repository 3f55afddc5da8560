"""Summary statistics over a journal."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import UTC, datetime, time

from .models import LedgerStats, Transaction


def ledger_stats(transactions: Sequence[Transaction], now: datetime | None = None) -> LedgerStats:
    """Compute journal statistics.

    ``transactions`` must be date-ordered (as returned by the parser) and
    non-empty. "Time since last post" is measured from UTC midnight of the
    last transaction's date to ``now`` (UTC; naive values are taken as UTC).
    """

    if not transactions:
        raise ValueError("ledger_stats requires at least one transaction")

    start = transactions[0].date
    end = transactions[-1].date
    days = (end - start).days + 1

    payees = {t.payee for t in transactions}
    accounts = {p.account for t in transactions for p in t.postings}
    postings = sum(len(t.postings) for t in transactions)

    current = now or datetime.now(UTC)
    if current.tzinfo is None:
        current = current.replace(tzinfo=UTC)
    last_midnight = datetime.combine(end, time(0, 0), tzinfo=UTC)

    divisor = max(days, 1)
    return LedgerStats(
        start=start,
        end=end,
        days=days,
        unique_payees=len(payees),
        unique_accounts=len(accounts),
        transactions=len(transactions),
        postings=postings,
        transactions_per_day=len(transactions) / divisor,
        postings_per_day=postings / divisor,
        since_last_post=current - last_midnight,
    )


__all__ = ["ledger_stats"]
