from __future__ import annotations

from pathlib import Path
from typing import Any

from ..core.schema import load_json, validate_json_file_against_schema, validate_payload
from ..core.serialize import dumps_json
from ..report import REPORT_SCHEMA_NAME
from .schemas import schema_path_for


def validate_report(payload: dict[str, Any]) -> None:
    validate_payload(payload, load_json(schema_path_for(REPORT_SCHEMA_NAME)), label=REPORT_SCHEMA_NAME)


def validate_json_output(schema_path: str, file_path: str, as_json: bool = False) -> int:
    validate_json_file_against_schema(Path(schema_path), Path(file_path))
    if as_json:
        print(dumps_json({"status": "ok", "schema": schema_path, "file": file_path}))
    else:
        print(f"ok: {file_path} matches {schema_path}")
    return 0
