"""Static discovery of `env('NAME')` reads in PHP configuration sources.

Each `config/<section>.php` file returns a nested array literal. The scanner
walks its tokens once, top to bottom, keeping a stack of open brackets and the
key that owns each one. When it meets `env('NAME', ...)` the current stack
spells the configuration path the value lands in, for example
`database.connections.mysql.host`.

This is a structural scan, not a PHP parser. Keys computed by expressions or
named by constants (`PDO::MYSQL_ATTR_SSL_CA => ...`) are recorded as their
literal text and will not resolve against the cached configuration. Lists of
arrays (`[['host' => env('A')]]`) are attributed to the enclosing key.
"""

from __future__ import annotations

import re
from collections.abc import Iterator
from dataclasses import dataclass, field
from pathlib import Path

from .core.context import RunContext
from .core.logging import log_event
from .core.scan import iter_php_files
from .errors import InputMissing

_TOKEN_RE = re.compile(
    r"""
      (?P<comment>//[^\n]*|\#[^\n]*|/\*.*?(?:\*/|\Z))
    | (?P<string>'(?:[^'\\]|\\.)*'|"(?:[^"\\]|\\.)*")
    | (?P<arrow>=>)
    | (?P<open>[\[(])
    | (?P<close>[\])])
    | (?P<comma>,)
    | (?P<word>\\?[A-Za-z_][A-Za-z0-9_\\]*(?:::[A-Za-z_][A-Za-z0-9_]*)?)
    | (?P<number>\d+(?:\.\d+)?)
    """,
    re.VERBOSE | re.DOTALL,
)
_ENV_NAME_RE = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")
_ENV_FUNCS = {"env", "\\env"}
_LITERAL_KINDS = {"string", "number", "word"}


@dataclass(frozen=True)
class ConfigReference:
    env_name: str
    config_path: tuple[str, ...]
    source: str = ""
    line: int = 0

    @property
    def dotted(self) -> str:
        return ".".join(self.config_path)


@dataclass
class _Frame:
    structural: bool
    key: str | None
    outer_pending: str | None


def _unquote_php(token: str) -> str:
    body = token[1:-1]
    return re.sub(r"\\([\\'\"])", r"\1", body)


def iter_tokens(text: str) -> Iterator[tuple[str, str, int]]:
    """Yield `(kind, value, line)` for every significant token, comments excluded."""
    line = 1
    last = 0
    for match in _TOKEN_RE.finditer(text):
        line += text.count("\n", last, match.start())
        last = match.start()
        kind = match.lastgroup or ""
        if kind == "comment":
            continue
        yield kind, match.group(), line


@dataclass
class ReferenceScanner:
    """Bracket-depth + key-stack state machine over one configuration file."""

    section: tuple[str, ...]
    source: str = ""
    references: list[ConfigReference] = field(default_factory=list)
    _frames: list[_Frame] = field(default_factory=list, init=False, repr=False)
    _pending: str | None = field(default=None, init=False, repr=False)
    _literal: str | None = field(default=None, init=False, repr=False)
    _last_kind: str = field(default="", init=False, repr=False)
    _last_value: str = field(default="", init=False, repr=False)
    # 0: idle, 1: saw `env`, 2: saw `env(`
    _env_state: int = field(default=0, init=False, repr=False)

    def current_path(self) -> tuple[str, ...]:
        keys = [frame.key for frame in self._frames if frame.structural and frame.key is not None]
        if self._pending is not None:
            keys.append(self._pending)
        return (*self.section, *keys)

    def _at_structural_level(self) -> bool:
        return not self._frames or self._frames[-1].structural

    def feed(self, kind: str, value: str, line: int) -> None:
        env_state = self._env_state
        self._env_state = 0
        if kind == "string":
            text = _unquote_php(value)
            if env_state == 2 and _ENV_NAME_RE.fullmatch(text):
                self.references.append(ConfigReference(text, self.current_path(), self.source, line))
            self._literal = text
        elif kind == "word":
            if value.lower() in _ENV_FUNCS:
                self._env_state = 1
            self._literal = value
        elif kind == "number":
            self._literal = value
        elif kind == "open":
            self._open(value, env_state)
        elif kind == "close":
            if self._frames:
                self._pending = self._frames.pop().outer_pending
        elif kind == "arrow":
            if self._at_structural_level() and self._last_kind in _LITERAL_KINDS:
                self._pending = self._literal
        elif kind == "comma":
            if self._at_structural_level():
                self._pending = None
        self._last_kind = kind
        self._last_value = value

    def _open(self, bracket: str, env_state: int) -> None:
        structural = bracket == "[" or (self._last_kind == "word" and self._last_value.lower() == "array")
        if structural:
            self._frames.append(_Frame(True, self._pending, self._pending))
            self._pending = None
            return
        self._frames.append(_Frame(False, None, self._pending))
        if env_state == 1:
            self._env_state = 2

    def scan(self, text: str) -> list[ConfigReference]:
        for kind, value, line in iter_tokens(text):
            self.feed(kind, value, line)
        return self.references


def section_for(path: Path, config_dir: Path) -> tuple[str, ...]:
    rel = path.relative_to(config_dir)
    return (*rel.parent.parts, rel.stem)


def scan_config_text(text: str, section: tuple[str, ...], source: str = "") -> list[ConfigReference]:
    return ReferenceScanner(section=section, source=source).scan(text)


def scan_config_dir(config_dir: Path, ctx: RunContext | None = None) -> dict[str, list[ConfigReference]]:
    if not config_dir.is_dir():
        raise InputMissing(f"configuration directory not found: {config_dir}")
    mapping: dict[str, list[ConfigReference]] = {}
    for path in iter_php_files(config_dir):
        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            log_event(ctx, "warn", "references", "skip-file", path=str(path), error=str(exc))
            continue
        refs = scan_config_text(text, section_for(path, config_dir), path.relative_to(config_dir).as_posix())
        for ref in refs:
            mapping.setdefault(ref.env_name, []).append(ref)
        log_event(ctx, "debug", "references", "scanned", path=str(path), references=len(refs))
    return mapping
