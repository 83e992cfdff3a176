"""Cached configuration snapshot: node model and loaders."""

from .loader import load_snapshot
from .model import ConfigNode, MappingNode, ScalarNode, SequenceNode, build_node, resolve_path

__all__ = [
    "ConfigNode",
    "MappingNode",
    "ScalarNode",
    "SequenceNode",
    "build_node",
    "load_snapshot",
    "resolve_path",
]
