"""Monetary amount value type.

``Amount`` wraps a :class:`~decimal.Decimal` and is immutable: ``plus`` and
``negate`` return new values. Comparisons are tolerant to ``EPSILON`` (1e-6);
exact equality is never used for money. ``BALANCE_TOLERANCE`` (one display
unit) is the separate, looser band used when checking that a transaction's
postings sum to zero.

Text parsing follows the journal conventions:

- a value fully wrapped in parentheses is negative: ``"(12.00)"`` -> ``-12.00``
- currency glyphs (``$ € £ ¥``) and inner whitespace are dropped
- a single comma with no dot is a decimal comma (``"4,50"``); otherwise commas
  are grouping separators and removed (``"1,234.56"``)
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, localcontext

EPSILON = Decimal("1e-6")
BALANCE_TOLERANCE = Decimal("0.01")
DISPLAY_PRECISION = 2

_STRIP_RE = re.compile(r"[$€£¥\s]")
_PARENS_RE = re.compile(r"^\((.+)\)$")
# Plain decimal notation only; exponents and digit separators are not amounts.
_NUMBER_RE = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)$")


def normalize_decimal_commas(s: str) -> str:
    """Resolve commas to either a decimal point or nothing (grouping)."""

    if "." not in s and s.count(",") == 1:
        return s.replace(",", ".")
    return s.replace(",", "")


def to_decimal(raw: str) -> Decimal:
    """Parse journal-style amount text into a finite ``Decimal``.

    Raises ``ValueError`` unless the text is a plain decimal number.
    """

    s = raw.strip()
    negative = False
    m = _PARENS_RE.match(s)
    if m:
        negative = True
        s = m.group(1)
    s = _STRIP_RE.sub("", s)
    s = normalize_decimal_commas(s)
    if not _NUMBER_RE.match(s):
        raise ValueError(f"invalid amount: {raw!r}")
    d = Decimal(s)
    return -d if negative else d


@dataclass(frozen=True, slots=True)
class Amount:
    """A signed decimal value displayed at two decimal places."""

    value: Decimal

    @classmethod
    def parse(cls, text: str) -> Amount:
        return cls(to_decimal(text))

    @classmethod
    def of(cls, value: Decimal | int | str) -> Amount:
        if isinstance(value, str):
            return cls.parse(value)
        return cls(Decimal(value))

    @classmethod
    def zero(cls) -> Amount:
        return cls(Decimal(0))

    def plus(self, other: Amount) -> Amount:
        return Amount(self.value + other.value)

    def negate(self) -> Amount:
        return Amount(-self.value)

    def is_zero(self) -> bool:
        return abs(self.value) < EPSILON

    def sign(self) -> int:
        if self.value > EPSILON:
            return 1
        if self.value < -EPSILON:
            return -1
        return 0

    def equals(self, other: Amount) -> bool:
        return abs(self.value - other.value) < EPSILON

    def format(self, precision: int = DISPLAY_PRECISION) -> str:
        with localcontext() as ctx:
            ctx.prec = max(ctx.prec, self.value.adjusted() + precision + 2)
            q = self.value.quantize(Decimal(1).scaleb(-precision), rounding=ROUND_HALF_UP)
        if q.is_zero():
            # Avoid rendering "-0.00".
            q = abs(q)
        return f"{q:.{precision}f}"

    def __str__(self) -> str:
        return self.format()


def sum_amounts(amounts: Iterable[Amount]) -> Amount:
    total = Amount.zero()
    for a in amounts:
        total = total.plus(a)
    return total


__all__ = [
    "Amount",
    "BALANCE_TOLERANCE",
    "DISPLAY_PRECISION",
    "EPSILON",
    "normalize_decimal_commas",
    "sum_amounts",
    "to_decimal",
]
