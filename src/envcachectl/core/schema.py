from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import jsonschema

from ..errors import InputMissing, ScriptError
from ..exit_codes import ERR_VALIDATION


def load_json(path: Path) -> Any:
    if not path.is_file():
        raise InputMissing(f"JSON file not found: {path}")
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise ScriptError(f"unable to read JSON from {path}: {exc}", ERR_VALIDATION, kind="invalid_json") from exc


def validate_payload(payload: Any, schema: dict[str, Any], label: str = "payload") -> None:
    try:
        jsonschema.validate(payload, schema)
    except jsonschema.ValidationError as exc:
        pointer = "/".join(str(p) for p in exc.absolute_path)
        loc = pointer or "<root>"
        raise ScriptError(f"schema validation failed for {label} at {loc}: {exc.message}", ERR_VALIDATION) from exc


def validate_json_file_against_schema(schema_path: Path, payload_path: Path) -> None:
    validate_payload(load_json(payload_path), load_json(schema_path), label=payload_path.name)
