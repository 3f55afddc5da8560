from datetime import UTC, date, datetime, timedelta
from decimal import Decimal

import pytest

from textledger.api import parse_journal, register, stats
from textledger.models import LedgerStats
from textledger.register import register_by_period


def test_running_total_accumulates_across_transactions(sample_text: str) -> None:
    rows = register(parse_journal(sample_text), ["Checking"])
    assert [r.amount.value for r in rows] == [
        Decimal("1000.00"),
        Decimal("-4.50"),
        Decimal("-62.30"),
        Decimal("-80.00"),
    ]
    assert [r.running_total.format() for r in rows] == ["1000.00", "995.50", "933.20", "853.20"]
    assert rows[1].payee == "Coffee Shop"
    assert rows[1].date == date(2024, 1, 5)


def test_register_without_filters_nets_to_zero(sample_text: str) -> None:
    rows = register(parse_journal(sample_text))
    assert len(rows) == 10
    assert rows[-1].running_total.is_zero()


def test_register_by_period_restarts_running_total(sample_text: str) -> None:
    buckets = register_by_period(parse_journal(sample_text), "Monthly", ["Coffee"])
    assert [(r.key, [row.running_total.format() for row in rows]) for r, rows in buckets] == [
        ("2024-01", ["4.50"]),
        ("2024-02", []),
        ("2024-04", ["5.25"]),
    ]


def test_stats_counts(sample_text: str) -> None:
    now = datetime(2024, 4, 15, 5, 30, tzinfo=UTC)
    s = stats(parse_journal(sample_text), now=now)
    assert (s.start, s.end, s.days) == (date(2024, 1, 1), date(2024, 4, 15), 106)
    assert s.unique_payees == 5
    assert s.unique_accounts == 6
    assert s.transactions == 5
    assert s.postings == 10
    assert s.transactions_per_day == pytest.approx(5 / 106)
    assert s.since_last_post == timedelta(hours=5, minutes=30)
    assert s.since_last_post_label == "6 hours"


def test_stats_day_count_includes_both_ends() -> None:
    txns = parse_journal("2024/01/01 X\n    A    1\n    B\n\n2024/01/03 Y\n    A    1\n    B\n")
    s = stats(txns, now=datetime(2024, 1, 3))
    assert s.days == 3
    assert s.transactions_per_day == pytest.approx(2 / 3)


def test_stats_single_day_divides_by_one() -> None:
    txns = parse_journal("2024/01/01 X\n    A    1\n    B\n")
    s = stats(txns, now=datetime(2024, 1, 3))
    assert s.days == 1
    assert s.transactions_per_day == 1.0
    assert s.postings_per_day == 2.0
    assert s.since_last_post_label == "2 days"


def test_stats_requires_transactions() -> None:
    with pytest.raises(ValueError):
        stats([])


def _label(delta: timedelta) -> str:
    s = LedgerStats(
        start=date(2024, 1, 1),
        end=date(2024, 1, 1),
        days=0,
        unique_payees=0,
        unique_accounts=0,
        transactions=0,
        postings=0,
        transactions_per_day=0.0,
        postings_per_day=0.0,
        since_last_post=delta,
    )
    return s.since_last_post_label


@pytest.mark.parametrize(
    ("delta", "label"),
    [
        (timedelta(0), "0 hours"),
        (timedelta(minutes=1), "1 hour"),
        (timedelta(hours=23), "23 hours"),
        (timedelta(hours=23, minutes=1), "1 day"),
        (timedelta(hours=24), "1 day"),
        (timedelta(hours=24, seconds=1), "2 days"),
        (timedelta(days=-3), "0 hours"),
    ],
)
def test_since_last_post_label(delta: timedelta, label: str) -> None:
    assert _label(delta) == label
