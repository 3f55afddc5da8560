"""Running-balance register."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from .amount import Amount
from .balances import iter_matching_postings
from .models import PeriodKind, PeriodRange, RegisterRow, Transaction
from .periods import transactions_by_period


def register(
    transactions: Iterable[Transaction], filters: Sequence[str] = ()
) -> list[RegisterRow]:
    """One row per matching posting, in journal order.

    The running total accumulates across every matching posting; it is not
    reset between transactions.
    """

    rows: list[RegisterRow] = []
    running = Amount.zero()
    for txn, posting, amount in iter_matching_postings(transactions, filters):
        running = running.plus(amount)
        rows.append(
            RegisterRow(
                date=txn.date,
                payee=txn.payee,
                account=posting.account,
                amount=amount,
                running_total=running,
            )
        )
    return rows


def register_by_period(
    transactions: Iterable[Transaction],
    period: PeriodKind | str,
    filters: Sequence[str] = (),
) -> list[tuple[PeriodRange, list[RegisterRow]]]:
    """Register per calendar bucket; the running total restarts in each."""

    return [
        (r, register(r.transactions, filters))
        for r in transactions_by_period(transactions, period)
    ]


__all__ = ["register", "register_by_period"]
