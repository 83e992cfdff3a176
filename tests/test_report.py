from __future__ import annotations

from pathlib import Path

import pytest

from envcachectl.contracts.output import validate_report
from envcachectl.core.context import RunContext
from envcachectl.errors import ScriptError
from envcachectl.reconcile import DiffResult, Reconciliation
from envcachectl.report import build_payload, header_line, render_text


def _result(*names: str) -> Reconciliation:
    return Reconciliation(
        diffs=[DiffResult(name, "v", (f"app.{name.lower()}",), "mismatch") for name in names],
        checked=list(names) + ["OK_VAR"],
        skipped=["UNMAPPED"],
    )


def test_header_line() -> None:
    assert header_line(".env", "bootstrap/cache/config.php") == (
        "=== Differences between .env and bootstrap/cache/config.php ==="
    )


def test_render_text_lists_diffs_in_order() -> None:
    text = render_text(_result("DB_HOST", "APP_URL"), ".env", "bootstrap/cache/config.php")
    assert text.splitlines() == [
        "=== Differences between .env and bootstrap/cache/config.php ===",
        "[DIFF] DB_HOST",
        "[DIFF] APP_URL",
    ]


def test_render_text_empty() -> None:
    text = render_text(Reconciliation(), ".env", "bootstrap/cache/config.php")
    assert text.splitlines()[1:] == ["No differences found."]


def test_render_text_verbose_adds_details() -> None:
    lines = render_text(_result("DB_HOST"), ".env", "c.php", verbose=True).splitlines()
    assert lines[1] == "[DIFF] DB_HOST"
    assert lines[2].strip() == "reason=mismatch expected='v' paths=app.db_host"


def _ctx(root: Path) -> RunContext:
    return RunContext.from_args(run_id="t-report", project_root=str(root))


def test_payload_matches_schema(tmp_path: Path) -> None:
    payload = build_payload(_ctx(tmp_path), _result("DB_HOST"))
    validate_report(payload)
    assert payload["status"] == "diff"
    assert payload["env_file"] == ".env"
    assert payload["snapshot"] == "bootstrap/cache/config.php"
    assert payload["checked_count"] == 2
    assert payload["skipped_count"] == 1
    assert payload["diffs"] == [{"name": "DB_HOST", "reason": "mismatch", "paths": ["app.db_host"]}]


def test_payload_without_diffs_is_ok(tmp_path: Path) -> None:
    payload = build_payload(_ctx(tmp_path), Reconciliation())
    validate_report(payload)
    assert payload["status"] == "ok"


def test_schema_rejects_unknown_reason(tmp_path: Path) -> None:
    payload = build_payload(_ctx(tmp_path), _result("DB_HOST"))
    payload["diffs"][0]["reason"] = "other"  # type: ignore[index]
    with pytest.raises(ScriptError, match="diffs/0/reason"):
        validate_report(payload)
