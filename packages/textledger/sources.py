"""Reading journal text from files and streams.

``include`` directives are expanded recursively: a line ``include other.txt``
(or ``!include "other.txt"``) is replaced by the contents of that file, with
relative paths resolved against the including file's directory.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import IO

from .errors import IncludeError
from .logging_setup import get_logger

_logger = get_logger("textledger.sources")

_INCLUDE_RE = re.compile(r"^\s*!?include\s+(.+?)\s*$", re.IGNORECASE)


def _include_target(line: str) -> str | None:
    m = _INCLUDE_RE.match(line)
    if not m:
        return None
    target = m.group(1)
    if len(target) >= 2 and target[0] == target[-1] and target[0] in "\"'":
        target = target[1:-1]
    return target


def expand_includes(text: str, base_dir: Path, _seen: frozenset[Path] = frozenset()) -> str:
    """Inline every include directive found in ``text``."""

    out: list[str] = []
    for line in text.split("\n"):
        target = _include_target(line)
        if target is None:
            out.append(line)
            continue
        path = (base_dir / target).resolve()
        if path in _seen:
            raise IncludeError(f"circular include: {target}", path=str(path))
        _logger.debug("including %s", path)
        try:
            content = path.read_text(encoding="utf-8")
        except OSError as exc:
            message = f"cannot read included file {target}: {exc}"
            raise IncludeError(message, path=str(path)) from exc
        included = expand_includes(content, path.parent, _seen | {path}).strip("\n")
        if included.strip():
            out.append(included)
    return "\n".join(out)


def read_journal(path: str | Path) -> str:
    """Read a journal file and expand its include directives."""

    p = Path(path)
    text = p.read_text(encoding="utf-8")
    return expand_includes(text, p.parent, frozenset({p.resolve()}))


def read_stream(stream: IO[str]) -> str:
    """Read journal text from an open stream; includes resolve against the cwd."""

    return expand_includes(stream.read(), Path.cwd())


__all__ = ["expand_includes", "read_journal", "read_stream"]
