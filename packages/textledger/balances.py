"""Account balances and hierarchical rollup.

Account names are colon-separated paths (``Assets:Bank:Checking``); the
hierarchy is implied by their prefixes only. :func:`get_balances` sums leaf
accounts; :func:`rollup` turns leaves into the display rows of a balance
sheet, where every ancestor carries the sum of its descendants.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from .amount import Amount, sum_amounts
from .models import AccountBalance, BalanceOptions, BalanceReport, Posting, Transaction


def matches_filters(account: str, filters: Sequence[str]) -> bool:
    """Case-sensitive substring match; no filters matches everything."""

    if not filters:
        return True
    return any(f in account for f in filters)


def iter_matching_postings(
    transactions: Iterable[Transaction], filters: Sequence[str] = ()
) -> Iterable[tuple[Transaction, Posting, Amount]]:
    """Yield ``(transaction, posting, amount)`` for valued postings passing ``filters``."""

    for txn in transactions:
        for posting in txn.postings:
            if posting.amount is None:
                continue
            if matches_filters(posting.account, filters):
                yield txn, posting, posting.amount


def get_balances(
    transactions: Iterable[Transaction], filters: Sequence[str] = ()
) -> list[AccountBalance]:
    """Sum amounts per exact account name; result sorted by name."""

    totals: dict[str, Amount] = {}
    for _txn, posting, amount in iter_matching_postings(transactions, filters):
        prev = totals.get(posting.account, Amount.zero())
        totals[posting.account] = prev.plus(amount)
    return [AccountBalance(name, totals[name]) for name in sorted(totals)]


def rollup(
    leaves: Iterable[AccountBalance],
    *,
    max_depth: int | None = None,
    include_empty: bool = False,
) -> list[AccountBalance]:
    """Consolidate leaf balances into display rows.

    Each leaf contributes to every prefix of its name, up to ``max_depth``
    segments; deeper accounts fold into their ancestor at ``max_depth``.
    Rows within ``EPSILON`` of zero are dropped unless ``include_empty``.
    Output is a pre-order walk of the account tree (parents before children,
    siblings in lexicographic order).
    """

    consolidated: dict[tuple[str, ...], Amount] = {}
    for leaf in leaves:
        parts = tuple(leaf.account.split(":"))
        depth = len(parts) if max_depth is None else min(len(parts), max_depth)
        for k in range(1, depth + 1):
            key = parts[:k]
            consolidated[key] = consolidated.get(key, Amount.zero()).plus(leaf.balance)

    rows: list[AccountBalance] = []
    for key in sorted(consolidated):
        balance = consolidated[key]
        if include_empty or not balance.is_zero():
            rows.append(AccountBalance(":".join(key), balance))
    return rows


def balance_report(
    transactions: Iterable[Transaction], options: BalanceOptions | None = None
) -> BalanceReport:
    opts = options or BalanceOptions()
    leaves = get_balances(transactions, opts.filters)
    rows = rollup(leaves, max_depth=opts.max_depth, include_empty=opts.include_empty)
    return BalanceReport(
        leaves=tuple(leaves),
        rows=tuple(rows),
        total=sum_amounts(leaf.balance for leaf in leaves),
    )


def list_accounts(transactions: Iterable[Transaction]) -> list[str]:
    """Distinct posting account names, sorted."""

    return sorted({p.account for txn in transactions for p in txn.postings})


__all__ = [
    "balance_report",
    "get_balances",
    "iter_matching_postings",
    "list_accounts",
    "matches_filters",
    "rollup",
]
