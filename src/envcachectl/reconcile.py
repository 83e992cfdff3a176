"""Join `.env` values, `env()` references and the cached config tree.

A variable is reported when it is read by at least one `env()` call and none
of the configuration paths those calls feed holds a value equal to the one in
`.env`. Variables no configuration file reads are skipped.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Literal

from .core.context import RunContext
from .core.logging import log_event
from .envfile import EnvEntry
from .references import ConfigReference
from .snapshot.model import ConfigNode, MappingNode, Scalar, ScalarNode, SequenceNode, resolve_path

DiffReason = Literal["unresolved", "mismatch"]

# Keyword casts applied by Laravel's env() helper, compared case-insensitively.
_ENV_KEYWORDS = {
    "true": "true",
    "(true)": "true",
    "false": "false",
    "(false)": "false",
    "null": "null",
    "(null)": "null",
    "empty": "",
    "(empty)": "",
}
_NULL_LIKE = {"null", '""', "''", ""}


@dataclass(frozen=True)
class DiffResult:
    env_name: str
    env_value: str
    paths: tuple[str, ...]
    reason: DiffReason


@dataclass
class Reconciliation:
    diffs: list[DiffResult] = field(default_factory=list)
    checked: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)

    @property
    def names(self) -> list[str]:
        return [diff.env_name for diff in self.diffs]


def should_skip_unmapped(references: Sequence[ConfigReference]) -> bool:
    """A variable no `env()` call reads says nothing about the cache."""
    return not references


def normalize_env_literal(value: str) -> str:
    text = value.strip()
    return _ENV_KEYWORDS.get(text.lower(), text)


def render_scalar(value: Scalar) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value).strip()


def scalar_renderings(value: Scalar) -> tuple[str, ...]:
    """Every text form a `.env` value may take to equal `value`.

    A whole float such as `1.0` also accepts its integer spelling, since YAML
    and `json_encode` may turn an integer-valued setting into a float.
    """
    rendered = render_scalar(value)
    if isinstance(value, float) and value.is_integer():
        return (rendered, str(int(value)))
    return (rendered,)


def is_null_like(text: str) -> bool:
    return text.strip().lower() in _NULL_LIKE


def _cached_is_null_like(value: Scalar, allow_false: bool) -> bool:
    if value is None or (allow_false and value is False):
        return True
    return isinstance(value, str) and is_null_like(value)


def values_match(env_value: str, cached: Scalar) -> bool:
    expected = normalize_env_literal(env_value)
    # A null-like `.env` value also accepts `false`, which is what `(bool) env()` caches.
    if is_null_like(expected):
        return _cached_is_null_like(cached, allow_false=True)
    if _cached_is_null_like(cached, allow_false=False):
        return False
    if expected in ("true", "false"):
        return render_scalar(cached).lower() == expected
    return expected in scalar_renderings(cached)


def node_matches(env_value: str, node: ConfigNode) -> bool:
    if isinstance(node, ScalarNode):
        return values_match(env_value, node.value)
    if isinstance(node, SequenceNode):
        if not node.items:
            # An empty list is what an empty `.env` value exploded into an array caches.
            return is_null_like(normalize_env_literal(env_value))
        return any(isinstance(item, ScalarNode) and values_match(env_value, item.value) for item in node.items)
    if isinstance(node, MappingNode):
        return False
    raise TypeError(f"unexpected config node: {type(node).__name__}")


def check_entry(entry: EnvEntry, references: Sequence[ConfigReference], tree: ConfigNode) -> DiffResult | None:
    resolved_any = False
    for ref in references:
        node = resolve_path(tree, ref.config_path)
        if node is None:
            continue
        resolved_any = True
        if node_matches(entry.value, node):
            return None
    paths = tuple(dict.fromkeys(ref.dotted for ref in references))
    return DiffResult(entry.name, entry.value, paths, "mismatch" if resolved_any else "unresolved")


def reconcile(
    env: Mapping[str, EnvEntry],
    references: Mapping[str, Sequence[ConfigReference]],
    tree: ConfigNode,
    ctx: RunContext | None = None,
) -> Reconciliation:
    result = Reconciliation()
    for name, entry in env.items():
        refs = references.get(name, ())
        if should_skip_unmapped(refs):
            result.skipped.append(name)
            continue
        result.checked.append(name)
        diff = check_entry(entry, refs, tree)
        if diff is not None:
            result.diffs.append(diff)
            log_event(ctx, "debug", "reconcile", "diff", name=name, reason=diff.reason)
    log_event(
        ctx,
        "debug",
        "reconcile",
        "done",
        checked=len(result.checked),
        skipped=len(result.skipped),
        diffs=len(result.diffs),
    )
    return result
