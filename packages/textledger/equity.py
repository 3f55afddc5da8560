"""Opening-balance (equity) transaction generation.

Collapses a journal into a single transaction carrying every account's
closing balance, suitable for starting a new journal file.
"""

from __future__ import annotations

from collections.abc import Sequence

from .balances import get_balances
from .models import Posting, Transaction

OPENING_BALANCES_PAYEE = "Opening Balances"


def opening_balances(
    transactions: Sequence[Transaction], payee: str = OPENING_BALANCES_PAYEE
) -> Transaction | None:
    """Return the equity transaction, or ``None`` when there is nothing to carry.

    The transaction is dated at the last input transaction. Accounts whose
    balance is zero (within epsilon) are left out; the rest are sorted by name.
    """

    if not transactions:
        return None
    postings = tuple(
        Posting(b.account, b.balance) for b in get_balances(transactions) if not b.balance.is_zero()
    )
    if not postings:
        return None
    last_date = max(t.date for t in transactions)
    return Transaction(date=last_date, payee=payee, postings=postings)


__all__ = ["OPENING_BALANCES_PAYEE", "opening_balances"]
