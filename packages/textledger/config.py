"""Environment-derived defaults for the command line.

Only the CLI reads the environment; library functions take explicit option
models. ``.env`` files are loaded by the CLI before :func:`load_settings`.
"""

from __future__ import annotations

import os
from collections.abc import Mapping

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .logging_setup import resolve_level
from .rendering import DEFAULT_COLUMNS, WIDE_COLUMNS

_PREFIX = "TEXTLEDGER_"


class Settings(BaseModel):
    """Defaults that the CLI options fall back to."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    columns: int = Field(default=DEFAULT_COLUMNS, gt=0)
    class_search: str = "Expenses"
    date_format: str = "%m/%d/%Y"
    csv_delimiter: str = ","
    log_level: str | None = None

    @field_validator("csv_delimiter")
    @classmethod
    def _single_char(cls, v: str) -> str:
        if len(v) != 1:
            raise ValueError("delimiter must be a single character")
        return v

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, v: str | None) -> str | None:
        if v is not None:
            resolve_level(v)
        return v

    def report_columns(self, columns: int | None = None, *, wide: bool = False) -> int:
        """Width for a report: ``--wide`` wins, then an explicit value, then the default."""

        if wide:
            return WIDE_COLUMNS
        return columns if columns is not None else self.columns


def load_settings(environ: Mapping[str, str] | None = None) -> Settings:
    """Build :class:`Settings` from ``TEXTLEDGER_*`` variables.

    Raises ``pydantic.ValidationError`` on invalid values (e.g. a
    non-numeric ``TEXTLEDGER_COLUMNS``).
    """

    env = os.environ if environ is None else environ
    values = {
        key[len(_PREFIX) :].lower(): value
        for key, value in env.items()
        if key.startswith(_PREFIX) and value != ""
    }
    return Settings.model_validate(values)


__all__ = ["Settings", "load_settings"]
