"""Data models, option models and type aliases for ``textledger``.

Journal entities (``Posting``, ``Transaction``) and report rows are frozen
dataclasses: once the parser finalizes a transaction it is never mutated.
Option surfaces handed in by callers (``BalanceOptions``, ``ImportOptions``)
are Pydantic models so that values coming from a CLI or environment are
validated in one place.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date, timedelta
from decimal import Decimal
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, field_validator

from .amount import Amount

# ---------------------------------------------------------------------------
# Journal entities
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Posting:
    """One ``account  amount`` line of a transaction.

    ``amount`` is ``None`` only for an elided posting that has not been
    filled in; finalized transactions never contain one.
    """

    account: str
    amount: Amount | None = None


@dataclass(frozen=True, slots=True)
class Transaction:
    """A dated, balanced group of postings.

    ``comments`` holds raw ``;`` lines as they appeared in the journal (or as
    generated by the importer), in order.
    """

    date: date
    payee: str
    postings: tuple[Posting, ...]
    comments: tuple[str, ...] = ()

    def accounts(self) -> list[str]:
        return [p.account for p in self.postings]


type Journal = Sequence[Transaction]
"""An ordered (by date, ascending) sequence of transactions."""


# ---------------------------------------------------------------------------
# Report rows
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class AccountBalance:
    account: str
    balance: Amount


@dataclass(frozen=True, slots=True)
class BalanceReport:
    """Balances for one set of transactions.

    Attributes
    ----------
    leaves:
        Per exact account name, sorted by name.
    rows:
        Display rows after hierarchical rollup, depth folding and the
        empty-account filter, in pre-order.
    total:
        Sum of ``leaves`` (not of ``rows``).
    """

    leaves: tuple[AccountBalance, ...]
    rows: tuple[AccountBalance, ...]
    total: Amount


class PeriodKind(StrEnum):
    MONTHLY = "Monthly"
    QUARTERLY = "Quarterly"
    SEMIYEARLY = "SemiYearly"
    YEARLY = "Yearly"

    @classmethod
    def parse(cls, value: str | PeriodKind) -> PeriodKind:
        if isinstance(value, PeriodKind):
            return value
        key = value.strip().lower()
        for kind in cls:
            if kind.value.lower() == key:
                return kind
        aliases = {
            "month": cls.MONTHLY,
            "quarter": cls.QUARTERLY,
            "half": cls.SEMIYEARLY,
            "semiyear": cls.SEMIYEARLY,
            "year": cls.YEARLY,
        }
        try:
            return aliases[key]
        except KeyError:
            allowed = ", ".join(k.value for k in cls)
            raise ValueError(f"unknown period: {value!r} (expected one of: {allowed})") from None


@dataclass(frozen=True, slots=True)
class PeriodRange:
    """Transactions of one calendar bucket.

    ``start``/``end`` are the first and last transaction dates present in the
    bucket, not the calendar boundaries.
    """

    key: str
    start: date
    end: date
    transactions: tuple[Transaction, ...]


@dataclass(frozen=True, slots=True)
class PeriodBalances:
    key: str
    start: date
    end: date
    balances: tuple[AccountBalance, ...]


@dataclass(frozen=True, slots=True)
class RegisterRow:
    date: date
    payee: str
    account: str
    amount: Amount
    running_total: Amount


@dataclass(frozen=True, slots=True)
class MonthlyFigure:
    month: str
    total: Amount
    average: Amount
    maximum: Amount
    count: int


@dataclass(frozen=True, slots=True)
class LedgerStats:
    start: date
    end: date
    days: int
    unique_payees: int
    unique_accounts: int
    transactions: int
    postings: int
    transactions_per_day: float
    postings_per_day: float
    since_last_post: timedelta

    @property
    def since_last_post_label(self) -> str:
        """Human label: ceiling hours below one day, ceiling days otherwise."""

        seconds = max(0, int(self.since_last_post.total_seconds()))
        hours = -(-seconds // 3600)
        if hours < 24:
            return f"{hours} hour" + ("s" if hours != 1 else "")
        days = -(-seconds // 86400)
        return f"{days} day" + ("s" if days > 1 else "")


# ---------------------------------------------------------------------------
# Option models
# ---------------------------------------------------------------------------


class BalanceOptions(BaseModel):
    """Options for :func:`textledger.api.balances`.

    ``max_depth`` counts colon-separated segments; ``None`` (or any negative
    value) means unlimited.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    filters: tuple[str, ...] = ()
    max_depth: int | None = None
    include_empty: bool = False

    @field_validator("max_depth")
    @classmethod
    def _normalize_depth(cls, v: int | None) -> int | None:
        if v is None or v < 0:
            return None
        if v == 0:
            raise ValueError("max_depth must be positive (or negative for unlimited)")
        return v


class ImportOptions(BaseModel):
    """Options for the CSV import pipeline.

    ``date_format`` is a :func:`datetime.strptime` format tried before the
    built-in fallbacks.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    delimiter: str = ","
    date_format: str = "%m/%d/%Y"
    scale: Decimal = Decimal(1)
    negate: bool = False
    allow_matching: bool = False
    class_substring: str = "Expenses"
    columns: int = 79

    @field_validator("delimiter")
    @classmethod
    def _single_char(cls, v: str) -> str:
        if len(v) != 1:
            raise ValueError("delimiter must be a single character")
        return v

    @field_validator("scale")
    @classmethod
    def _finite_scale(cls, v: Decimal) -> Decimal:
        if not v.is_finite():
            raise ValueError("scale must be a finite number")
        return v


__all__ = [
    "AccountBalance",
    "BalanceOptions",
    "BalanceReport",
    "ImportOptions",
    "Journal",
    "LedgerStats",
    "MonthlyFigure",
    "PeriodBalances",
    "PeriodKind",
    "PeriodRange",
    "Posting",
    "RegisterRow",
    "Transaction",
]
