"""CLI for the ``textledger`` package.

A Typer console interface over :mod:`textledger.api`: ``balance``,
``register``, ``print``, ``stats``, ``accounts``, ``equity``, ``monthly``,
``import`` and ``insert``. Defaults come from ``TEXTLEDGER_*`` environment
variables (a local ``.env`` is loaded first, without overriding already-set
variables). Reports go to stdout; fatal errors go to stderr as
``Error: <message>`` with exit status 1.
"""

from __future__ import annotations

import sys
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from datetime import date, timedelta
from pathlib import Path
from typing import Annotated

import typer
from dotenv import load_dotenv
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape

from .amount import Amount
from .api import import_csv, parse_journal
from .balances import balance_report, list_accounts
from .config import load_settings
from .equity import opening_balances
from .errors import LedgerError
from .filters import filter_by_account, filter_by_date, filter_by_payee
from .importer import compose_entry
from .logging_setup import configure_logging, get_logger, level_from_verbosity
from .models import BalanceOptions, ImportOptions, PeriodKind, Transaction
from .parser import parse_date
from .periods import monthly_figures, transactions_by_period
from .register import register, register_by_period
from .rendering import (
    render_accounts,
    render_balance_report,
    render_monthly,
    render_period_balances,
    render_register,
    render_register_by_period,
    render_stats,
    render_transaction,
    render_transactions,
)
from .sources import read_journal, read_stream
from .stats import ledger_stats

_logger = get_logger("textledger.cli")

app = typer.Typer(
    name="textledger",
    no_args_is_help=True,
    add_completion=False,
    help="Plain-text double-entry ledger: reports over a journal file and CSV import.",
)
err_console = Console(stderr=True)

DEFAULT_BEGIN = "1970/01/01"

# ---- Shared option types -----------------------------------------------------

FileOpt = Annotated[
    str, typer.Option("--file", "-f", help="Journal file; '-' reads standard input.")
]
BeginOpt = Annotated[
    str, typer.Option("--begin", "-b", help="First date to include (YYYY/MM/DD).")
]
EndOpt = Annotated[
    str | None,
    typer.Option("--end", "-e", help="Last date to include (YYYY/MM/DD); default tomorrow."),
]
PayeeOpt = Annotated[
    str, typer.Option("--payee", help="Only transactions whose payee contains this text.")
]
PeriodOpt = Annotated[
    str | None,
    typer.Option("--period", help="Split by Monthly, Quarterly, SemiYearly or Yearly."),
]
ColumnsOpt = Annotated[
    int | None, typer.Option("--columns", min=1, help="Report width in characters.")
]
WideOpt = Annotated[bool, typer.Option("--wide", help="Use a 132-column report width.")]
FiltersArg = Annotated[
    list[str] | None,
    typer.Argument(help="Account substrings (case-sensitive); any match selects a posting."),
]


# ---- Helpers -----------------------------------------------------------------


@contextmanager
def _fatal_errors() -> Iterator[None]:
    """Turn expected failures into ``Error: ...`` on stderr and exit status 1."""

    try:
        yield
    except (LedgerError, OSError, ValidationError) as exc:
        _logger.debug("command failed", exc_info=True)
        err_console.print(f"Error: {escape(str(exc))}", soft_wrap=True, highlight=False)
        raise typer.Exit(1) from exc


def _parse_cli_date(value: str, name: str) -> date:
    try:
        return parse_date(value)
    except ValueError as exc:
        raise typer.BadParameter(f"expected YYYY/MM/DD, got {value!r}", param_hint=name) from exc


def _read_text(path: str) -> str:
    if path == "-":
        return read_stream(sys.stdin)
    return read_journal(path)


def _load(path: str, begin: str, end: str | None, payee: str) -> list[Transaction]:
    """Parse the journal and apply the date and payee selections."""

    first = _parse_cli_date(begin, "--begin")
    last = _parse_cli_date(end, "--end") if end else date.today() + timedelta(days=1)
    transactions = parse_journal(_read_text(path))
    transactions = filter_by_date(transactions, first, last)
    return filter_by_payee(transactions, payee)


def _period(value: str | None) -> PeriodKind | None:
    if not value:
        return None
    try:
        return PeriodKind.parse(value)
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint="--period") from exc


def _out(text: str) -> None:
    typer.echo(text, nl=False)


# ---- Commands ----------------------------------------------------------------


def balance(
    file: FileOpt,
    filters: FiltersArg = None,
    begin: BeginOpt = DEFAULT_BEGIN,
    end: EndOpt = None,
    payee: PayeeOpt = "",
    period: PeriodOpt = None,
    empty: Annotated[bool, typer.Option("--empty", help="Show zero-balance accounts.")] = False,
    depth: Annotated[
        int, typer.Option("--depth", help="Fold accounts deeper than N levels; -1 for all.")
    ] = -1,
    columns: ColumnsOpt = None,
    wide: WideOpt = False,
) -> None:
    """Account balances with hierarchical subtotals."""

    kind = _period(period)
    with _fatal_errors():
        width = load_settings().report_columns(columns, wide=wide)
        transactions = _load(file, begin, end, payee)
        if not transactions:
            _out("No transactions found.\n")
            return
        options = BalanceOptions(filters=tuple(filters or ()), max_depth=depth, include_empty=empty)
        if kind is None:
            _out(render_balance_report(balance_report(transactions, options), width))
            return
        buckets = [
            (r, balance_report(r.transactions, options))
            for r in transactions_by_period(transactions, kind)
        ]
        _out(render_period_balances(buckets, width))


def register_cmd(
    file: FileOpt,
    filters: FiltersArg = None,
    begin: BeginOpt = DEFAULT_BEGIN,
    end: EndOpt = None,
    payee: PayeeOpt = "",
    period: PeriodOpt = None,
    columns: ColumnsOpt = None,
    wide: WideOpt = False,
) -> None:
    """Postings with a running total."""

    kind = _period(period)
    with _fatal_errors():
        width = load_settings().report_columns(columns, wide=wide)
        transactions = _load(file, begin, end, payee)
        selected = tuple(filters or ())
        if kind is not None and transactions:
            _out(render_register_by_period(register_by_period(transactions, kind, selected), width))
            return
        rows = register(transactions, selected)
        if not rows:
            _out("No transactions in the period.\n")
            return
        _out(render_register(rows, width))


def print_cmd(
    file: FileOpt,
    filters: FiltersArg = None,
    begin: BeginOpt = DEFAULT_BEGIN,
    end: EndOpt = None,
    payee: PayeeOpt = "",
    columns: ColumnsOpt = None,
    wide: WideOpt = False,
) -> None:
    """Reprint matching transactions in journal format."""

    with _fatal_errors():
        width = load_settings().report_columns(columns, wide=wide)
        transactions = filter_by_account(_load(file, begin, end, payee), tuple(filters or ()))
        _out(render_transactions(transactions, width))


def stats_cmd(
    file: FileOpt,
    begin: BeginOpt = DEFAULT_BEGIN,
    end: EndOpt = None,
    payee: PayeeOpt = "",
) -> None:
    """Summary statistics for the journal."""

    with _fatal_errors():
        transactions = _load(file, begin, end, payee)
        if not transactions:
            _out("Empty ledger.\n")
            return
        _out(render_stats(ledger_stats(transactions)))


def accounts_cmd(
    file: FileOpt,
    begin: BeginOpt = DEFAULT_BEGIN,
    end: EndOpt = None,
    payee: PayeeOpt = "",
    columns: ColumnsOpt = None,
    wide: WideOpt = False,
) -> None:
    """List every account used by a posting."""

    with _fatal_errors():
        width = load_settings().report_columns(columns, wide=wide)
        _out(render_accounts(list_accounts(_load(file, begin, end, payee)), width))


def equity_cmd(
    file: FileOpt,
    begin: BeginOpt = DEFAULT_BEGIN,
    end: EndOpt = None,
    payee: PayeeOpt = "",
    columns: ColumnsOpt = None,
) -> None:
    """Opening-balances transaction carrying every non-zero account."""

    with _fatal_errors():
        width = load_settings().report_columns(columns)
        txn = opening_balances(_load(file, begin, end, payee))
        if txn is None:
            _out("No transactions in specified period.\n")
            return
        _out(render_transaction(txn, width))


def monthly_cmd(
    file: FileOpt,
    filters: FiltersArg = None,
    begin: BeginOpt = DEFAULT_BEGIN,
    end: EndOpt = None,
    payee: PayeeOpt = "",
) -> None:
    """Monthly total, average and maximum of matching postings."""

    with _fatal_errors():
        rows = register(_load(file, begin, end, payee), tuple(filters or ()))
        if not rows:
            _out("No transactions found.\n")
            return
        _out(render_monthly(monthly_figures(rows)))


def import_cmd(
    account: Annotated[str, typer.Argument(help="Destination account (substring match).")],
    csv_file: Annotated[Path, typer.Argument(help="Bank export to import.", dir_okay=False)],
    file: FileOpt,
    neg: Annotated[bool, typer.Option("--neg", help="Negate the amount column.")] = False,
    allow_matching: Annotated[
        bool,
        typer.Option("--allow-matching", help="Keep rows matching existing transactions."),
    ] = False,
    scale: Annotated[
        str, typer.Option("--scale", help="Multiply every imported amount by this factor.")
    ] = "1",
    set_search: Annotated[
        str | None,
        typer.Option("--set-search", help="Substring selecting the classification accounts."),
    ] = None,
    date_format: Annotated[
        str | None, typer.Option("--date-format", help="strptime format of the date column.")
    ] = None,
    delimiter: Annotated[
        str | None, typer.Option("--delimiter", help="CSV field delimiter.")
    ] = None,
    columns: ColumnsOpt = None,
    wide: WideOpt = False,
) -> None:
    """Convert a CSV bank export into journal entries (printed, not written)."""

    with _fatal_errors():
        settings = load_settings()
        options = ImportOptions(
            delimiter=delimiter or settings.csv_delimiter,
            date_format=date_format or settings.date_format,
            scale=scale,
            negate=neg,
            allow_matching=allow_matching,
            class_substring=set_search or settings.class_search,
            columns=settings.report_columns(columns, wide=wide),
        )
        transactions = parse_journal(_read_text(file))
        csv_text = csv_file.read_text(encoding="utf-8-sig")
        result = import_csv(transactions, csv_text, account, options)
        _logger.info(
            "imported %d rows into %s (%d skipped, %d duplicates)",
            len(result.entries),
            result.destination,
            result.skipped,
            result.duplicates,
        )
        _out(result.text)


def insert_cmd(
    source: Annotated[str, typer.Option("--source", help="Account receiving the amount.")],
    target: Annotated[str, typer.Option("--target", help="Account receiving the negation.")],
    amount: Annotated[str, typer.Option("--amount", help="Transaction amount.")],
    payee: Annotated[str, typer.Option("--payee", help="Payee of the new entry.")],
    note: Annotated[
        str | None, typer.Option("--note", help="Comment line above the entry.")
    ] = None,
    on: Annotated[
        str | None, typer.Option("--date", help="Entry date (YYYY/MM/DD); default today.")
    ] = None,
    columns: ColumnsOpt = None,
) -> None:
    """Print a two-posting journal entry for a manual transaction."""

    entry_date = _parse_cli_date(on, "--date") if on else date.today()
    try:
        value = Amount.parse(amount)
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint="--amount") from exc
    with _fatal_errors():
        width = load_settings().report_columns(columns)
        entry = compose_entry(entry_date, payee, source, target, value, note=note)
        _out(render_transaction(entry.to_transaction(), width))


app.command("balance")(balance)
app.command("bal", hidden=True)(balance)
app.command("register")(register_cmd)
app.command("reg", hidden=True)(register_cmd)
app.command("print")(print_cmd)
app.command("stats")(stats_cmd)
app.command("accounts")(accounts_cmd)
app.command("equity")(equity_cmd)
app.command("monthly")(monthly_cmd)
app.command("import")(import_cmd)
app.command("insert")(insert_cmd)


@app.callback(invoke_without_command=True)
def _root(
    ctx: typer.Context,
    verbose: Annotated[
        int, typer.Option("--verbose", "-v", count=True, help="More logging (-vv for debug).")
    ] = 0,
) -> None:
    """Root command.

    Loads ``.env`` from the current working directory (without overriding any
    already-set environment variables) and configures package logging: ``-v``
    flags win over ``TEXTLEDGER_LOG_LEVEL``.
    """

    load_dotenv(dotenv_path=Path.cwd() / ".env", override=False)
    with _fatal_errors():
        settings = load_settings()
    level = level_from_verbosity(verbose)
    configure_logging(level if level is not None else settings.log_level)

    if ctx.invoked_subcommand is None:
        typer.echo("No subcommand provided. Use --help to see available commands.")
        raise typer.Exit(1)


def main(argv: Sequence[str] | None = None) -> None:
    """Console entry point; ``argv`` defaults to ``sys.argv[1:]``."""

    app(args=list(argv) if argv is not None else None, prog_name="textledger")


__all__ = ["app", "main"]


if __name__ == "__main__":  # pragma: no cover
    main()
