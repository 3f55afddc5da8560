from datetime import date
from decimal import Decimal

import pytest

from conftest import dedent
from textledger.errors import (
    JournalParseError,
    MultipleElidedPostingsError,
    UnbalancedTransactionError,
)
from textledger.parser import parse_date, parse_journal, parse_posting


def _values(txn) -> list[tuple[str, Decimal]]:
    return [(p.account, p.amount.value) for p in txn.postings]


def test_scenario_single_transaction_with_elided_posting() -> None:
    text = "2024/01/01 Coffee\n    Expenses:Food    5.00\n    Assets:Cash\n\n"
    [txn] = parse_journal(text)
    assert txn.date == date(2024, 1, 1)
    assert txn.payee == "Coffee"
    assert _values(txn) == [("Expenses:Food", Decimal("5.00")), ("Assets:Cash", Decimal("-5.00"))]


def test_elided_posting_in_first_position() -> None:
    [txn] = parse_journal("2024/01/01 X\n    A    -50.00\n    B\n")
    assert _values(txn) == [("A", Decimal("-50.00")), ("B", Decimal("50.00"))]


def test_multiple_elided_postings_are_fatal() -> None:
    with pytest.raises(MultipleElidedPostingsError) as excinfo:
        parse_journal("2024/01/01 X\n    A\n    B\n")
    assert excinfo.value.payee == "X"
    assert excinfo.value.date == date(2024, 1, 1)
    assert isinstance(excinfo.value, JournalParseError)


def test_unbalanced_transaction_is_fatal() -> None:
    with pytest.raises(UnbalancedTransactionError) as excinfo:
        parse_journal("2024/03/02 Shop\n    A    10.00\n    B    -9.00\n")
    assert "Transaction not balanced: Shop (2024/03/02)" in str(excinfo.value)
    assert excinfo.value.difference.value == Decimal("1.00")


def test_balance_within_one_cent_is_accepted() -> None:
    [txn] = parse_journal("2024/03/02 Shop\n    A    10.00\n    B    -9.995\n")
    assert len(txn.postings) == 2


def test_transactions_are_stably_sorted_by_date() -> None:
    text = dedent(
        """
        2024/02/01 Second
            A    1
            B

        2024/01/15 First
            A    1
            B

        2024/02/01 Third
            A    1
            B
        """
    )
    assert [t.payee for t in parse_journal(text)] == ["First", "Second", "Third"]


def test_comments_attach_to_the_following_transaction() -> None:
    text = dedent(
        """
        ; imported from bank
        ; UUID: abc
        2024/01/01 Coffee
            Expenses:Food    5.00
            Assets:Cash

        2024/01/02 Tea
            Expenses:Food    3.00
            Assets:Cash
        """
    )
    first, second = parse_journal(text)
    assert first.comments == ("; imported from bank", "; UUID: abc")
    assert second.comments == ()


def test_header_date_separators_and_invalid_dates() -> None:
    text = dedent(
        """
        2024-01-03 Dashes
            A    1
            B

        2024.01.04 Dots
            A    1
            B

        2024/13/45 Broken
            A    1
            B    1

        2024/01/05 After
            A    2
            B
        """
    )
    payees = [t.payee for t in parse_journal(text)]
    assert payees == ["Dashes", "Dots", "After"]


def test_posting_lines_need_indentation_and_an_open_transaction() -> None:
    text = "    Orphan    1.00\n2024/01/01 X\n    A    1\nNotAPosting  5\n\tB\n"
    [txn] = parse_journal(text)
    assert [p.account for p in txn.postings] == ["A", "B"]


def test_empty_and_blank_input() -> None:
    assert parse_journal("") == []
    assert parse_journal("\n\n   \n") == []


def test_parse_posting_splits_account_and_value() -> None:
    p = parse_posting("    Expenses:Food and Drink    (12.50)")
    assert p.account == "Expenses:Food and Drink"
    assert p.amount.value == Decimal("-12.50")

    fallback = parse_posting("Assets:Cash $5")
    assert fallback.account == "Assets:Cash"
    assert fallback.amount.value == Decimal("5")

    elided = parse_posting("    Assets:Checking Account")
    assert elided.account == "Assets:Checking Account"
    assert elided.amount is None


def test_parse_date() -> None:
    assert parse_date("2024/2/9") == date(2024, 2, 9)
    with pytest.raises(ValueError):
        parse_date("2024/02/30")
