"""Calendar-period partitioning.

Transactions are grouped into non-overlapping buckets (month, quarter,
half-year or year). Each bucket's ``start``/``end`` are the earliest and
latest transaction dates actually present, and buckets come out ordered by
``start``. Balances per period are computed independently for each bucket;
nothing carries forward from one period to the next.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import date
from decimal import Decimal

from .amount import Amount
from .balances import get_balances
from .models import (
    MonthlyFigure,
    PeriodBalances,
    PeriodKind,
    PeriodRange,
    RegisterRow,
    Transaction,
)


def period_key(d: date, kind: PeriodKind) -> str:
    if kind is PeriodKind.MONTHLY:
        return f"{d.year:04d}-{d.month:02d}"
    if kind is PeriodKind.QUARTERLY:
        return f"{d.year:04d}-Q{(d.month + 2) // 3}"
    if kind is PeriodKind.SEMIYEARLY:
        return f"{d.year:04d}-H{1 if d.month <= 6 else 2}"
    return f"{d.year:04d}"


def transactions_by_period(
    transactions: Iterable[Transaction], period: PeriodKind | str
) -> list[PeriodRange]:
    kind = PeriodKind.parse(period)
    grouped: dict[str, list[Transaction]] = {}
    for txn in transactions:
        grouped.setdefault(period_key(txn.date, kind), []).append(txn)

    ranges: list[PeriodRange] = []
    for key, members in grouped.items():
        members.sort(key=lambda t: t.date)
        ranges.append(
            PeriodRange(
                key=key,
                start=members[0].date,
                end=members[-1].date,
                transactions=tuple(members),
            )
        )
    ranges.sort(key=lambda r: r.start)
    return ranges


def balances_by_period(
    transactions: Iterable[Transaction],
    period: PeriodKind | str,
    filters: Sequence[str] = (),
) -> list[PeriodBalances]:
    return [
        PeriodBalances(
            key=r.key,
            start=r.start,
            end=r.end,
            balances=tuple(get_balances(r.transactions, filters)),
        )
        for r in transactions_by_period(transactions, period)
    ]


def monthly_figures(rows: Iterable[RegisterRow]) -> list[MonthlyFigure]:
    """Total, average and maximum posting amount per ``YYYY/MM``."""

    by_month: dict[str, list[Decimal]] = {}
    for row in rows:
        by_month.setdefault(f"{row.date:%Y/%m}", []).append(row.amount.value)

    figures: list[MonthlyFigure] = []
    for month in sorted(by_month):
        values = by_month[month]
        total = sum(values, Decimal(0))
        figures.append(
            MonthlyFigure(
                month=month,
                total=Amount(total),
                average=Amount(total / len(values)),
                maximum=Amount(max(values)),
                count=len(values),
            )
        )
    return figures


__all__ = ["balances_by_period", "monthly_figures", "period_key", "transactions_by_period"]
