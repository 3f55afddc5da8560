import io
import logging

import pytest
from pydantic import ValidationError

from textledger.config import Settings, load_settings
from textledger.logging_setup import (
    configure_logging,
    get_logger,
    level_from_verbosity,
    resolve_level,
)


def test_settings_defaults() -> None:
    s = load_settings({})
    assert s == Settings()
    assert (s.columns, s.class_search, s.date_format, s.csv_delimiter) == (
        79,
        "Expenses",
        "%m/%d/%Y",
        ",",
    )


def test_settings_from_environment_mapping() -> None:
    s = load_settings(
        {
            "TEXTLEDGER_COLUMNS": "100",
            "TEXTLEDGER_CLASS_SEARCH": "Utilities",
            "TEXTLEDGER_CSV_DELIMITER": ";",
            "TEXTLEDGER_DATE_FORMAT": "",
            "OTHER": "ignored",
        }
    )
    assert s.columns == 100
    assert s.class_search == "Utilities"
    assert s.csv_delimiter == ";"
    assert s.date_format == "%m/%d/%Y"


def test_settings_log_level() -> None:
    assert load_settings({}).log_level is None
    assert load_settings({"TEXTLEDGER_LOG_LEVEL": "debug"}).log_level == "debug"


def test_settings_read_process_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("TEXTLEDGER_COLUMNS", "120")
    assert load_settings().columns == 120


@pytest.mark.parametrize(
    "env",
    [
        {"TEXTLEDGER_COLUMNS": "abc"},
        {"TEXTLEDGER_COLUMNS": "0"},
        {"TEXTLEDGER_CSV_DELIMITER": "::"},
        {"TEXTLEDGER_LOG_LEVEL": "chatty"},
    ],
)
def test_invalid_settings(env: dict[str, str]) -> None:
    with pytest.raises(ValidationError):
        load_settings(env)


def test_report_columns() -> None:
    s = Settings(columns=90)
    assert s.report_columns() == 90
    assert s.report_columns(60) == 60
    assert s.report_columns(60, wide=True) == 132


def test_resolve_level(monkeypatch: pytest.MonkeyPatch) -> None:
    assert resolve_level() == logging.WARNING
    assert resolve_level("debug") == logging.DEBUG
    assert resolve_level("15") == 15
    monkeypatch.setenv("TEXTLEDGER_LOG_LEVEL", "INFO")
    assert resolve_level() == logging.INFO
    with pytest.raises(ValueError):
        resolve_level("chatty")


def test_level_from_verbosity() -> None:
    assert level_from_verbosity(0) is None
    assert level_from_verbosity(1) == logging.INFO
    assert level_from_verbosity(3) == logging.DEBUG


def test_configure_logging_attaches_one_handler() -> None:
    stream = io.StringIO()
    configure_logging("INFO", stream=stream)
    configure_logging("DEBUG", stream=io.StringIO())
    pkg = logging.getLogger("textledger")
    assert len([h for h in pkg.handlers if isinstance(h, logging.StreamHandler)]) == 1

    get_logger("textledger.importer").debug("row %d skipped", 3)
    assert "DEBUG textledger.importer: row 3 skipped" in stream.getvalue()
