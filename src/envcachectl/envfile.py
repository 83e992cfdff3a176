"""Parsing of `.env` files into ordered name/value entries.

Only the literal text of the file is read: no variable expansion, no escape
processing and no lookup in the live process environment.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path

from .core.context import RunContext
from .core.logging import log_event
from .errors import InputMissing

_NAME_RE = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")
_QUOTES = ("'", '"')


@dataclass(frozen=True)
class EnvEntry:
    name: str
    value: str
    line: int
    quote: str = ""


def unquote_value(raw: str) -> tuple[str, str]:
    """Return `(value, quote)` for a raw right-hand side.

    A value wrapped in matching single or double quotes is unwrapped and kept
    verbatim; anything else is only trimmed. `quote` is the stripped quote
    character or an empty string.
    """
    value = raw.strip()
    if len(value) >= 2 and value[0] in _QUOTES and value[-1] == value[0]:
        return value[1:-1], value[0]
    return value, ""


def split_env_line(line: str) -> tuple[str, str] | None:
    stripped = line.strip()
    if not stripped or stripped.startswith("#"):
        return None
    if "=" not in stripped:
        return None
    name, raw = stripped.split("=", 1)
    name = name.strip()
    if name.startswith("export "):
        name = name[len("export ") :].strip()
    if not _NAME_RE.fullmatch(name):
        return None
    return name, raw


def parse_env_text(text: str, ctx: RunContext | None = None) -> dict[str, EnvEntry]:
    entries: dict[str, EnvEntry] = {}
    for lineno, line in enumerate((text or "").splitlines(), start=1):
        parts = split_env_line(line)
        if parts is None:
            if line.strip() and not line.strip().startswith("#"):
                log_event(ctx, "debug", "envfile", "skip-line", line=lineno)
            continue
        name, raw = parts
        value, quote = unquote_value(raw)
        # Reassigning an existing key keeps its first-declaration position.
        entries[name] = EnvEntry(name=name, value=value, line=lineno, quote=quote)
    return entries


def load_env_file(path: Path, ctx: RunContext | None = None) -> dict[str, EnvEntry]:
    if not path.is_file():
        raise InputMissing(f"environment file not found: {path}")
    text = path.read_text(encoding="utf-8", errors="replace")
    entries = parse_env_text(text, ctx)
    log_event(ctx, "debug", "envfile", "parsed", path=str(path), entries=len(entries))
    return entries


def format_env_line(entry: EnvEntry) -> str:
    return f"{entry.name}={entry.quote}{entry.value}{entry.quote}"
