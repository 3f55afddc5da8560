from datetime import date
from decimal import Decimal

import pytest
from pydantic import ValidationError

from textledger.amount import Amount
from textledger.api import balances, parse_journal
from textledger.balances import (
    get_balances,
    iter_matching_postings,
    list_accounts,
    matches_filters,
    rollup,
)
from textledger.models import AccountBalance, BalanceOptions, Posting, Transaction


def _as_dict(rows) -> dict[str, Decimal]:
    return {r.account: r.balance.value for r in rows}


def _leaf(name: str, value: str) -> AccountBalance:
    return AccountBalance(name, Amount(Decimal(value)))


LEAVES = [_leaf("Assets:Bank:Checking", "100"), _leaf("Assets:Bank:Savings", "50")]


def test_scenario_balances() -> None:
    txns = parse_journal("2024/01/01 Coffee\n    Expenses:Food    5.00\n    Assets:Cash\n\n")
    assert _as_dict(get_balances(txns, [])) == {
        "Assets:Cash": Decimal("-5.00"),
        "Expenses:Food": Decimal("5.00"),
    }


def test_get_balances_sorted_and_filtered(sample_text: str) -> None:
    txns = parse_journal(sample_text)
    all_rows = get_balances(txns)
    assert [r.account for r in all_rows] == sorted(r.account for r in all_rows)
    assert _as_dict(get_balances(txns, ["Food"])) == {
        "Expenses:Food:Coffee": Decimal("9.75"),
        "Expenses:Food:Groceries": Decimal("62.30"),
    }
    # case-sensitive substring
    assert get_balances(txns, ["food"]) == []


def test_matches_filters() -> None:
    assert matches_filters("Assets:Cash", [])
    assert matches_filters("Assets:Cash", ["Bank", "Cash"])
    assert not matches_filters("Assets:Cash", ["cash"])


def test_hierarchical_rollup_in_preorder() -> None:
    rows = rollup(LEAVES)
    assert [(r.account, r.balance.value) for r in rows] == [
        ("Assets", Decimal("150")),
        ("Assets:Bank", Decimal("150")),
        ("Assets:Bank:Checking", Decimal("100")),
        ("Assets:Bank:Savings", Decimal("50")),
    ]


def test_depth_truncation_folds_children() -> None:
    rows = rollup(LEAVES, max_depth=2)
    assert _as_dict(rows) == {"Assets": Decimal("150"), "Assets:Bank": Decimal("150")}


def test_depth_one_keeps_only_roots() -> None:
    leaves = [*LEAVES, _leaf("Expenses:Food", "7")]
    assert _as_dict(rollup(leaves, max_depth=1)) == {
        "Assets": Decimal("150"),
        "Expenses": Decimal("7"),
    }


def test_empty_filter() -> None:
    leaves = [_leaf("Assets:Cash", "10"), _leaf("Assets:Old", "0.0000001")]
    assert "Assets:Old" not in _as_dict(rollup(leaves))
    kept = rollup(leaves, include_empty=True)
    old = next(r for r in kept if r.account == "Assets:Old")
    assert old.balance.format() == "0.00"


def test_parent_summing_to_zero_is_dropped_unless_requested() -> None:
    leaves = [_leaf("Assets:A", "5"), _leaf("Assets:B", "-5")]
    assert [r.account for r in rollup(leaves)] == ["Assets:A", "Assets:B"]
    assert [r.account for r in rollup(leaves, include_empty=True)][0] == "Assets"


def test_sibling_order_is_by_segment() -> None:
    leaves = [_leaf("A:B", "1"), _leaf("A-B", "1"), _leaf("A:A", "1")]
    assert [r.account for r in rollup(leaves)] == ["A", "A:A", "A:B", "A-B"]


def test_balance_report_total_ignores_depth(sample_text: str) -> None:
    txns = parse_journal(sample_text)
    full = balances(txns)
    shallow = balances(txns, BalanceOptions(max_depth=1))
    assert full.total.is_zero()
    assert shallow.total.equals(full.total)
    assert {r.account for r in shallow.rows} == {"Assets", "Equity", "Expenses"}
    assert len(full.leaves) == 6


def test_balance_report_total_of_filtered_leaves(sample_text: str) -> None:
    report = balances(parse_journal(sample_text), BalanceOptions(filters=("Expenses",)))
    assert report.total.value == Decimal("152.05")
    assert report.rows[0].account == "Expenses"


def test_balance_options_validation() -> None:
    assert BalanceOptions(max_depth=-1).max_depth is None
    with pytest.raises(ValidationError):
        BalanceOptions(max_depth=0)
    with pytest.raises(ValidationError):
        BalanceOptions(unknown=True)


def test_list_accounts(sample_text: str) -> None:
    assert list_accounts(parse_journal(sample_text)) == [
        "Assets:Bank:Checking",
        "Assets:Cash",
        "Equity:Opening",
        "Expenses:Food:Coffee",
        "Expenses:Food:Groceries",
        "Expenses:Utilities:Power",
    ]


def test_matching_postings_skip_unvalued_postings() -> None:
    txn = Transaction(
        date=date(2024, 1, 1),
        payee="Manual",
        postings=(Posting("Assets:Cash", Amount(Decimal("-3"))), Posting("Expenses:Misc", None)),
    )
    found = [(p.account, a.value) for _t, p, a in iter_matching_postings([txn])]
    assert found == [("Assets:Cash", Decimal("-3"))]
    assert _as_dict(get_balances([txn])) == {"Assets:Cash": Decimal("-3")}
