from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any, Union

Scalar = Union[str, int, float, bool, None]


@dataclass(frozen=True)
class ScalarNode:
    value: Scalar


@dataclass(frozen=True)
class MappingNode:
    entries: dict[str, "ConfigNode"]

    def get(self, key: str) -> "ConfigNode | None":
        return self.entries.get(key)


@dataclass(frozen=True)
class SequenceNode:
    items: tuple["ConfigNode", ...]


ConfigNode = Union[ScalarNode, MappingNode, SequenceNode]


def build_node(raw: Any) -> ConfigNode:
    """Convert decoded JSON/YAML data into a `ConfigNode` tree.

    Mapping keys are stringified, matching how PHP arrays with integer keys
    come out of `json_encode`. Values of any other type are kept as their
    string form.
    """
    if isinstance(raw, dict):
        return MappingNode({str(key): build_node(value) for key, value in raw.items()})
    if isinstance(raw, (list, tuple)):
        return SequenceNode(tuple(build_node(item) for item in raw))
    if raw is None or isinstance(raw, (str, bool, int, float)):
        return ScalarNode(raw)
    return ScalarNode(str(raw))


def resolve_path(root: ConfigNode, path: Sequence[str]) -> ConfigNode | None:
    """Descend `path` through mapping nodes; `None` when any step is unresolved."""
    node: ConfigNode = root
    for segment in path:
        if isinstance(node, MappingNode):
            child = node.get(segment)
            if child is None:
                return None
            node = child
        elif isinstance(node, (ScalarNode, SequenceNode)):
            return None
        else:
            raise TypeError(f"unexpected config node: {type(node).__name__}")
    return node
