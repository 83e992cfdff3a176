from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import yaml

from ..core.context import RunContext
from ..core.logging import log_event
from ..core.process import run_command
from ..core.yaml_utils import load_yaml
from ..errors import SnapshotLoadError, SnapshotNotFound
from .model import ConfigNode, MappingNode, build_node

# Evaluates the cached config file and prints it as JSON. Objects (closures,
# service instances) are reduced to their class name, resources to a marker.
PHP_DUMP_PROGRAM = r"""
function envcachectl_sanitize($data) {
    if (is_array($data)) {
        return array_map('envcachectl_sanitize', $data);
    } elseif (is_object($data)) {
        return get_class($data);
    } elseif (is_resource($data)) {
        return 'resource';
    }
    return $data;
}
$config = include $argv[1];
if (!is_array($config)) {
    fwrite(STDERR, "config cache did not return an array\n");
    exit(3);
}
$json = json_encode(envcachectl_sanitize($config), JSON_PARTIAL_OUTPUT_ON_ERROR | JSON_INVALID_UTF8_SUBSTITUTE);
if ($json === false) {
    fwrite(STDERR, json_last_error_msg() . "\n");
    exit(4);
}
echo $json;
"""

JSON_SUFFIXES = {".json"}
YAML_SUFFIXES = {".yaml", ".yml"}


def php_dump_command(php_binary: str, path: Path) -> list[str]:
    return [php_binary, "-d", "display_errors=stderr", "-r", PHP_DUMP_PROGRAM, "--", str(path)]


def _decode_php(path: Path, php_binary: str, ctx: RunContext | None, timeout_seconds: int) -> Any:
    cwd = ctx.project_root if ctx else path.parent
    try:
        result = run_command(php_dump_command(php_binary, path), cwd=cwd, timeout_seconds=timeout_seconds, ctx=ctx)
    except OSError as exc:
        raise SnapshotLoadError(f"unable to run php executable `{php_binary}` (needed to read {path}): {exc}") from exc
    if result.code != 0:
        detail = result.stderr.strip().splitlines()[-1] if result.stderr.strip() else f"exit code {result.code}"
        raise SnapshotLoadError(f"failed to load {path}: {detail}")
    try:
        return json.loads(result.stdout)
    except json.JSONDecodeError as exc:
        raise SnapshotLoadError(f"failed to parse JSON emitted for {path}: {exc}") from exc


def _decode(path: Path, php_binary: str, ctx: RunContext | None, timeout_seconds: int) -> Any:
    suffix = path.suffix.lower()
    if suffix in JSON_SUFFIXES:
        try:
            return json.loads(path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise SnapshotLoadError(f"failed to read JSON snapshot {path}: {exc}") from exc
    if suffix in YAML_SUFFIXES:
        try:
            return load_yaml(path)
        except (OSError, UnicodeDecodeError, yaml.YAMLError) as exc:
            raise SnapshotLoadError(f"failed to read YAML snapshot {path}: {exc}") from exc
    return _decode_php(path, php_binary, ctx, timeout_seconds)


def load_snapshot(
    path: Path,
    php_binary: str = "php",
    ctx: RunContext | None = None,
    timeout_seconds: int = 60,
) -> ConfigNode:
    """Load the materialized configuration at `path` as a `MappingNode` tree.

    Raises `SnapshotNotFound` when the artifact is absent and
    `SnapshotLoadError` for every other failure.
    """
    if not path.is_file():
        raise SnapshotNotFound.for_path(ctx.display_path(path) if ctx else str(path))
    raw = _decode(path, php_binary, ctx, timeout_seconds)
    node = build_node(raw)
    if not isinstance(node, MappingNode):
        raise SnapshotLoadError(f"snapshot root must be a mapping: {path}")
    log_event(ctx, "debug", "snapshot", "loaded", path=str(path), sections=len(node.entries))
    return node
