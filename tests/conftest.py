"""Pytest configuration for test isolation.

Puts the workspace ``packages/`` directory on ``sys.path`` so ``textledger``
imports without an install, and keeps every test independent of the caller's
environment: ``TEXTLEDGER_*`` variables are cleared and the package log
handler is detached after each test.
"""

from __future__ import annotations

import os
import sys
import textwrap
from pathlib import Path

import pytest

_ROOT = Path(__file__).resolve().parents[1]
_PKG_DIR = _ROOT / "packages"
sys.path[:0] = [p for p in [str(_PKG_DIR)] if p not in sys.path]

from textledger.logging_setup import reset_logging  # noqa: E402


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path):
    """Drop ``TEXTLEDGER_*`` variables and run from an empty directory (no ``.env``)."""

    for key in list(os.environ):
        if key.startswith("TEXTLEDGER_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)
    yield
    reset_logging()


def dedent(s: str) -> str:
    return textwrap.dedent(s).lstrip("\n")


SAMPLE_JOURNAL = dedent(
    """
    ; opening
    2024/01/01 Opening Balances
        Assets:Bank:Checking    1000.00
        Equity:Opening

    2024/01/05 Coffee Shop
        Expenses:Food:Coffee    4.50
        Assets:Bank:Checking

    2024/01/20 Grocery Store
        Expenses:Food:Groceries    62.30
        Assets:Bank:Checking

    2024/02/03 Electric Company
        Expenses:Utilities:Power    80.00
        Assets:Bank:Checking

    2024/04/15 Coffee Shop Downtown
        Expenses:Food:Coffee    5.25
        Assets:Cash    -5.25
    """
)


@pytest.fixture
def sample_text() -> str:
    return SAMPLE_JOURNAL


@pytest.fixture
def journal_file(tmp_path: Path) -> Path:
    path = tmp_path / "journal.txt"
    path.write_text(SAMPLE_JOURNAL, encoding="utf-8")
    return path
