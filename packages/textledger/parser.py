"""Journal text parser.

Converts plain-text journal content into an ordered list of
:class:`~textledger.models.Transaction`. Single pass, line oriented:

- blank line: closes the open transaction
- ``;`` line: buffered comment, attached to the transaction being closed
- ``YYYY/MM/DD payee`` (``-`` or ``.`` also accepted): opens a transaction
- line indented by 4+ spaces or a tab: a posting of the open transaction

Garbage is tolerated (a header whose date does not parse drops that whole
transaction), broken bookkeeping is not: an unbalanced transaction or one with
two elided postings aborts the parse.
"""

from __future__ import annotations

import re
from datetime import date, datetime

from .amount import BALANCE_TOLERANCE, Amount, sum_amounts
from .errors import MultipleElidedPostingsError, UnbalancedTransactionError
from .logging_setup import get_logger
from .models import Posting, Transaction

_HEADER_RE = re.compile(r"^(\d{4}[/\-.]\d{1,2}[/\-.]\d{1,2})\s+(.+)$")
_ACCOUNT_VALUE_RE = re.compile(r"^(.*?)\s{2,}(.+)$")

_logger = get_logger("textledger.parser")


class _OpenTransaction:
    """Mutable accumulator for the transaction currently being read."""

    __slots__ = ("date", "payee", "postings")

    def __init__(self, txn_date: date, payee: str) -> None:
        self.date = txn_date
        self.payee = payee
        self.postings: list[Posting] = []


def parse_date(text: str) -> date:
    """Parse a header date with ``/``, ``-`` or ``.`` separators."""

    normalized = text.replace(".", "/").replace("-", "/")
    return datetime.strptime(normalized, "%Y/%m/%d").date()


def _try_amount(token: str) -> Amount | None:
    try:
        return Amount.parse(token)
    except ValueError:
        return None


def parse_posting(line: str) -> Posting:
    """Split a posting line into account and optional amount.

    The account ends at the first run of two or more whitespace characters;
    failing that, the last whitespace-separated token is tried as the value.
    A line whose value does not parse is an account with no amount.
    """

    line = line.strip()
    m = _ACCOUNT_VALUE_RE.match(line)
    if m:
        amount = _try_amount(m.group(2))
        if amount is not None:
            return Posting(m.group(1).strip(), amount)

    parts = line.split()
    if len(parts) >= 2:
        amount = _try_amount(parts[-1])
        if amount is not None:
            return Posting(" ".join(parts[:-1]), amount)

    return Posting(line)


def _finalize(open_txn: _OpenTransaction, comments: list[str]) -> Transaction:
    """Fill the elided posting and check the zero-sum invariant."""

    elided_index: int | None = None
    for i, posting in enumerate(open_txn.postings):
        if posting.amount is None:
            if elided_index is not None:
                raise MultipleElidedPostingsError(payee=open_txn.payee, date=open_txn.date)
            elided_index = i

    postings = list(open_txn.postings)
    if elided_index is not None:
        rest = sum_amounts(p.amount for p in postings if p.amount is not None)
        postings[elided_index] = Posting(postings[elided_index].account, rest.negate())

    check = sum_amounts(p.amount for p in postings if p.amount is not None)
    if abs(check.value) > BALANCE_TOLERANCE:
        raise UnbalancedTransactionError(
            payee=open_txn.payee, date=open_txn.date, difference=check
        )

    return Transaction(
        date=open_txn.date,
        payee=open_txn.payee,
        postings=tuple(postings),
        comments=tuple(comments),
    )


def parse_journal(text: str) -> list[Transaction]:
    """Parse journal text; returns transactions stably sorted by date.

    Raises :class:`~textledger.errors.JournalParseError` subclasses for
    unbalanced or doubly-elided transactions.
    """

    transactions: list[Transaction] = []
    current: _OpenTransaction | None = None
    comments: list[str] = []

    def close() -> None:
        nonlocal current, comments
        if current is not None:
            transactions.append(_finalize(current, comments))
            comments = []
        current = None

    for lineno, raw in enumerate(text.split("\n"), start=1):
        line = raw.rstrip()

        if not line.strip():
            close()
            continue

        if line.strip().startswith(";"):
            comments.append(line)
            continue

        header = _HEADER_RE.match(line)
        if header:
            close()
            try:
                txn_date = parse_date(header.group(1))
            except ValueError:
                _logger.debug(
                    "line %d: skipping transaction with invalid date %r", lineno, header.group(1)
                )
                continue
            current = _OpenTransaction(txn_date, header.group(2))
        elif current is not None and (line.startswith("    ") or line.startswith("\t")):
            current.postings.append(parse_posting(line))

    close()

    transactions.sort(key=lambda t: t.date)
    _logger.debug("parsed %d transactions", len(transactions))
    return transactions


__all__ = ["parse_date", "parse_journal", "parse_posting"]
