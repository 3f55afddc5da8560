"""CSV bank-export import.

Turns rows of a delimited export into two-posting journal entries:

1. resolve the destination account from a hint (last matching account wins)
2. map header cells to columns (date, payee, amount are required)
3. per row: parse date and amount, drop duplicates of existing transactions,
   classify the payee with a Naive Bayes model trained on the journal
4. emit ``destination  amount`` / ``classified  -amount`` plus optional
   note/UUID/buyer comment lines

Bad rows (unparsable date or amount) are skipped; missing columns and an
unknown destination account abort the import.
"""

from __future__ import annotations

import csv
import re
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from io import StringIO

from .amount import Amount, normalize_decimal_commas
from .classifier import PayeeClassifier, train
from .errors import AccountNotFoundError, MissingColumnsError
from .logging_setup import get_logger
from .models import ImportOptions, Posting, Transaction
from .rendering import render_transactions

_logger = get_logger("textledger.importer")

# Tried in order after the configured format and its separator variants.
FALLBACK_DATE_FORMATS: tuple[str, ...] = (
    "%d/%m/%Y",
    "%d-%m-%Y",
    "%d.%m.%Y",
    "%Y-%m-%d",
    "%Y/%m/%d",
    "%Y.%m.%d",
    "%m/%d/%Y",
    "%m-%d-%Y",
    "%m.%d.%Y",
    "%d\\%m\\%Y",
    "%Y\\%m\\%d",
    "%Y-%m-%d %H:%M:%S",
    "%d/%m/%Y %H:%M:%S",
    "%m/%d/%Y %H:%M:%S",
    "%Y-%m-%dT%H:%M:%S",
    "%Y%m%d",
    "%d%m%Y",
    "%m%d%y",
)

_AMOUNT_JUNK_RE = re.compile(r"[^\d.,\-]")
_PARENS_RE = re.compile(r"^\((.+)\)$")


# ---------------------------------------------------------------------------
# Column detection
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class ColumnMap:
    date: int
    payee: int
    amount: int
    note: int | None = None
    uuid: int | None = None
    buyer: int | None = None

    def width(self) -> int:
        cols = [self.date, self.payee, self.amount, self.note, self.uuid, self.buyer]
        return max(c for c in cols if c is not None) + 1


# First matching rule wins per cell; a later cell of the same kind overrides.
_HEADER_RULES: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("date", ("date",)),
    ("payee", ("description", "payee")),
    ("amount", ("amount", "expense")),
    ("note", ("note",)),
    ("uuid", ("uuid",)),
    ("buyer", ("buyer",)),
)


def detect_columns(header: Sequence[str]) -> ColumnMap:
    """Classify header cells by case-insensitive substring."""

    found: dict[str, int] = {}
    for index, cell in enumerate(header):
        name = cell.strip().lower()
        for kind, needles in _HEADER_RULES:
            if any(n in name for n in needles):
                found[kind] = index
                break

    missing = tuple(k for k in ("date", "payee", "amount") if k not in found)
    if missing:
        raise MissingColumnsError(missing)
    return ColumnMap(
        date=found["date"],
        payee=found["payee"],
        amount=found["amount"],
        note=found.get("note"),
        uuid=found.get("uuid"),
        buyer=found.get("buyer"),
    )


# ---------------------------------------------------------------------------
# Cell parsing
# ---------------------------------------------------------------------------


def _separator_variants(fmt: str) -> list[str]:
    variants = [
        fmt.replace("/", "-"),
        fmt.replace("-", "/"),
        fmt.replace("/", "."),
        fmt.replace(".", "/"),
    ]
    return [v for v in variants if v != fmt]


def parse_csv_date(text: str, date_format: str | None = None) -> date | None:
    """Parse a CSV date cell; ``None`` when no known format fits."""

    s = text.strip()
    if not s:
        return None
    candidates: list[str] = []
    if date_format:
        candidates.append(date_format)
        candidates.extend(_separator_variants(date_format))
    candidates.extend(FALLBACK_DATE_FORMATS)
    for fmt in candidates:
        try:
            return datetime.strptime(s, fmt).date()
        except ValueError:
            continue
    return None


def parse_csv_amount(text: str) -> Decimal | None:
    """Parse a CSV amount cell; ``None`` when the cell is not numeric.

    An odd number of ``-`` signs makes the value negative (``"--5"`` is 5);
    parentheses count as one more sign. An empty cell is zero.
    """

    s = text.strip()
    m = _PARENS_RE.match(s)
    if m:
        s = "-" + m.group(1)
    s = _AMOUNT_JUNK_RE.sub("", s)
    if not s:
        return Decimal(0)
    negative = s.count("-") % 2 == 1
    s = normalize_decimal_commas(s.replace("-", ""))
    try:
        d = Decimal(s)
    except InvalidOperation:
        return None
    if not d.is_finite():
        return None
    return -d if negative else d


# ---------------------------------------------------------------------------
# Journal lookups
# ---------------------------------------------------------------------------


def resolve_destination_account(transactions: Iterable[Transaction], hint: str) -> str:
    """Return the last (in discovery order) account containing ``hint``."""

    needle = hint.lower()
    seen: dict[str, None] = {}
    for txn in transactions:
        for posting in txn.postings:
            seen.setdefault(posting.account, None)
    matching = [name for name in seen if needle in name.lower()]
    if not matching:
        raise AccountNotFoundError(hint)
    return matching[-1]


def is_duplicate(transactions: Iterable[Transaction], row_date: date, payee: str) -> bool:
    """Same date and an existing payee starting with the row's first word."""

    first_word = payee.split(" ")[0]
    return any(t.date == row_date and t.payee.startswith(first_word) for t in transactions)


# ---------------------------------------------------------------------------
# Entries
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class ImportedEntry:
    """A generated two-posting entry, not yet part of any journal."""

    date: date
    payee: str
    destination: str
    account: str
    amount: Amount
    comments: tuple[str, ...] = ()

    def to_transaction(self) -> Transaction:
        return Transaction(
            date=self.date,
            payee=self.payee,
            postings=(
                Posting(self.destination, self.amount),
                Posting(self.account, self.amount.negate()),
            ),
            comments=self.comments,
        )


@dataclass(frozen=True, slots=True)
class ImportResult:
    destination: str
    entries: tuple[ImportedEntry, ...]
    text: str
    skipped: int = 0
    duplicates: int = 0
    classifier: PayeeClassifier | None = field(default=None, repr=False, compare=False)


def compose_entry(
    entry_date: date,
    payee: str,
    source: str,
    target: str,
    amount: Decimal | Amount,
    note: str | None = None,
) -> ImportedEntry:
    """Build a manual two-posting entry: ``source`` gets ``amount``, ``target`` its negation."""

    value = amount if isinstance(amount, Amount) else Amount(amount)
    comments = (f"; {note}",) if note else ()
    return ImportedEntry(
        date=entry_date,
        payee=payee,
        destination=source,
        account=target,
        amount=value,
        comments=comments,
    )


def render_entries(entries: Iterable[ImportedEntry], columns: int = 79) -> str:
    """Journal text for ``entries``; ends with two blank lines when non-empty."""

    text = render_transactions((e.to_transaction() for e in entries), columns=columns)
    return text + "\n" if text else text


def _cell(record: Sequence[str], index: int | None) -> str:
    if index is None:
        return ""
    return record[index].strip()


def _read_rows(csv_text: str, delimiter: str) -> list[list[str]]:
    with StringIO(csv_text.strip()) as f:
        return list(csv.reader(f, delimiter=delimiter))


def import_csv(
    transactions: Sequence[Transaction],
    csv_text: str,
    account: str,
    options: ImportOptions | None = None,
) -> ImportResult:
    """Convert CSV text into journal entries against ``account``."""

    opts = options or ImportOptions()
    destination = resolve_destination_account(transactions, account)
    _logger.debug("destination account for %r: %s", account, destination)

    model = train(transactions, opts.class_substring)

    rows = _read_rows(csv_text, opts.delimiter)
    columns = detect_columns(rows[0] if rows else [])
    width = columns.width()

    entries: list[ImportedEntry] = []
    skipped = 0
    duplicates = 0
    for lineno, record in enumerate(rows[1:], start=2):
        if not any(cell.strip() for cell in record):
            continue
        record = record + [""] * (width - len(record))

        row_date = parse_csv_date(record[columns.date], opts.date_format)
        if row_date is None:
            _logger.debug("row %d: skipping unparsable date %r", lineno, record[columns.date])
            skipped += 1
            continue

        payee = _cell(record, columns.payee)
        if not payee:
            _logger.debug("row %d: skipping row without a payee", lineno)
            skipped += 1
            continue
        if not opts.allow_matching and is_duplicate(transactions, row_date, payee):
            _logger.info("row %d: skipping existing transaction %s %s", lineno, row_date, payee)
            duplicates += 1
            continue

        value = parse_csv_amount(record[columns.amount])
        if value is None:
            _logger.debug("row %d: skipping unparsable amount %r", lineno, record[columns.amount])
            skipped += 1
            continue
        value *= opts.scale
        if opts.negate:
            value = -value

        comments: list[str] = []
        if note := _cell(record, columns.note):
            comments.append(f";{note}")
        if uuid := _cell(record, columns.uuid):
            comments.append(f"; UUID: {uuid}")
        if buyer := _cell(record, columns.buyer):
            comments.append(f"; Buyer: {buyer}")

        entries.append(
            ImportedEntry(
                date=row_date,
                payee=payee,
                destination=destination,
                account=model.classify(payee),
                amount=Amount(value),
                comments=tuple(comments),
            )
        )

    return ImportResult(
        destination=destination,
        entries=tuple(entries),
        text=render_entries(entries, columns=opts.columns),
        skipped=skipped,
        duplicates=duplicates,
        classifier=model,
    )


__all__ = [
    "ColumnMap",
    "FALLBACK_DATE_FORMATS",
    "ImportResult",
    "ImportedEntry",
    "compose_entry",
    "detect_columns",
    "import_csv",
    "is_duplicate",
    "parse_csv_amount",
    "parse_csv_date",
    "render_entries",
    "resolve_destination_account",
]
