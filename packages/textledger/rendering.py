"""Plain-text report rendering.

Every function returns the complete report as one string with a trailing
newline (or ``""`` when there is nothing to show), so callers decide where it
goes: stdout, a file, or a test assertion.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import date

from .amount import Amount
from .models import (
    BalanceReport,
    LedgerStats,
    MonthlyFigure,
    PeriodRange,
    RegisterRow,
    Transaction,
)

DEFAULT_COLUMNS = 79
WIDE_COLUMNS = 132
DATE_FORMAT = "%Y/%m/%d"

_INDENT = "    "
_VALUE_WIDTH = 12
_MAX_NAME_COLUMN = 50


def _lines(lines: Iterable[str]) -> str:
    body = "\n".join(lines)
    return body + "\n" if body else ""


def _right(text: str, columns: int) -> str:
    return " " * max(columns - len(text), 0) + text


# ---------------------------------------------------------------------------
# Balances
# ---------------------------------------------------------------------------


def render_balance_report(report: BalanceReport, columns: int = DEFAULT_COLUMNS) -> str:
    if not report.rows:
        return ""
    lines = []
    for row in report.rows:
        value = row.balance.format()
        lines.append(row.account + " " * max(columns - len(row.account) - len(value), 0) + value)
    lines.append("-" * columns)
    lines.append(_right(report.total.format(), columns))
    return _lines(lines)


def _period_header(start: date, end: date, columns: int) -> list[str]:
    return [f"{start:{DATE_FORMAT}} - {end:{DATE_FORMAT}}", "=" * columns]


def render_period_balances(
    buckets: Sequence[tuple[PeriodRange, BalanceReport]], columns: int = DEFAULT_COLUMNS
) -> str:
    """One balance report per bucket, separated by a blank line and a ``=`` rule."""

    parts: list[str] = []
    for i, (period, report) in enumerate(buckets):
        chunk = ""
        if i > 0:
            chunk += "\n" + "=" * columns + "\n"
        chunk += _lines(_period_header(period.start, period.end, columns))
        chunk += render_balance_report(report, columns)
        parts.append(chunk)
    return "".join(parts)


# ---------------------------------------------------------------------------
# Register
# ---------------------------------------------------------------------------


def register_widths(columns: int) -> tuple[int, int]:
    """Payee and account column widths for a register of ``columns`` characters."""

    remaining = max(columns - 10 * 3 - 4, 0)
    payee_width = remaining // 3
    return payee_width, remaining - payee_width


def _clip(text: str, width: int) -> str:
    return text[:width].ljust(width)


def render_register(rows: Sequence[RegisterRow], columns: int = DEFAULT_COLUMNS) -> str:
    payee_width, account_width = register_widths(columns)
    return _lines(
        " ".join(
            (
                _clip(f"{row.date:{DATE_FORMAT}}", 10),
                _clip(row.payee, payee_width),
                _clip(row.account, account_width),
                row.amount.format()[:10].rjust(10),
                row.running_total.format()[:10].rjust(10),
            )
        )
        for row in rows
    )


def render_register_by_period(
    buckets: Sequence[tuple[PeriodRange, Sequence[RegisterRow]]],
    columns: int = DEFAULT_COLUMNS,
    empty_message: str = "No transactions in the period.",
) -> str:
    parts: list[str] = []
    for i, (period, rows) in enumerate(buckets):
        lines = ["=" * columns] if i > 0 else []
        lines.extend(_period_header(period.start, period.end, columns))
        parts.append(_lines(lines))
        parts.append(render_register(rows, columns) if rows else empty_message + "\n")
    return "".join(parts)


# ---------------------------------------------------------------------------
# Transactions
# ---------------------------------------------------------------------------


def _name_column(names: Sequence[str], columns: int) -> int:
    available = columns - len(_INDENT)
    longest = max((len(n) for n in names), default=0)
    return min(longest + 4, available - _VALUE_WIDTH, _MAX_NAME_COLUMN)


def _truncate(name: str, name_column: int) -> str:
    if len(name) > name_column - 4:
        keep = name_column - 7
        if keep > 10:
            return name[:keep] + "..."
    return name


def render_transaction(txn: Transaction, columns: int = DEFAULT_COLUMNS) -> str:
    """Journal text for one transaction, followed by a blank line."""

    available = columns - len(_INDENT)
    name_column = _name_column([p.account for p in txn.postings], columns)

    lines = list(txn.comments)
    lines.append(f"{txn.date:{DATE_FORMAT}} {txn.payee}")
    for posting in txn.postings:
        if posting.amount is None:
            lines.append(_INDENT + posting.account)
            continue
        name = _truncate(posting.account, name_column)
        value = posting.amount.format()
        gap = max(available - len(name) - len(value), 2)
        lines.append(_INDENT + name + " " * gap + value)
    lines.append("")
    return _lines(lines)


def render_transactions(transactions: Iterable[Transaction], columns: int = DEFAULT_COLUMNS) -> str:
    return "".join(render_transaction(t, columns) for t in transactions)


# ---------------------------------------------------------------------------
# Summaries
# ---------------------------------------------------------------------------


def _plural(n: int, unit: str) -> str:
    return f"{n} {unit}" + ("s" if n > 1 else "")


def render_stats(stats: LedgerStats) -> str:
    return _lines(
        [
            f"Time period               : {stats.start:%Y-%m-%d} to {stats.end:%Y-%m-%d} "
            f"({_plural(stats.days, 'day')})",
            f"Unique payees             : {stats.unique_payees}",
            f"Unique accounts           : {stats.unique_accounts}",
            f"Number of transactions    : {stats.transactions} "
            f"({stats.transactions_per_day:.1f} per day)",
            f"Number of postings        : {stats.postings} ({stats.postings_per_day:.1f} per day)",
            f"Time since last post      : {stats.since_last_post_label}",
        ]
    )


def render_accounts(accounts: Sequence[str], columns: int = DEFAULT_COLUMNS) -> str:
    return _lines(
        [
            "Accounts in ledger:",
            "-" * columns,
            *accounts,
            "-" * columns,
            f"Total: {len(accounts)} accounts",
        ]
    )


def render_monthly(figures: Sequence[MonthlyFigure]) -> str:
    """Per-month total/average/maximum table."""

    if not figures:
        return ""
    header = f"{'Month':<8} {'Total':>12} {'Average':>12} {'Maximum':>12} {'Count':>6}"

    def cell(a: Amount) -> str:
        return f"{a.format():>12}"

    rows = [
        f"{f.month:<8} {cell(f.total)} {cell(f.average)} {cell(f.maximum)} {f.count:>6}"
        for f in figures
    ]
    return _lines([header, *rows])


__all__ = [
    "DATE_FORMAT",
    "DEFAULT_COLUMNS",
    "WIDE_COLUMNS",
    "register_widths",
    "render_accounts",
    "render_balance_report",
    "render_monthly",
    "render_period_balances",
    "render_register",
    "render_register_by_period",
    "render_stats",
    "render_transaction",
    "render_transactions",
]
