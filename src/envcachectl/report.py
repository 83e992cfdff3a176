from __future__ import annotations

from typing import TYPE_CHECKING

from .reconcile import Reconciliation

if TYPE_CHECKING:
    from .core.context import RunContext

REPORT_SCHEMA_NAME = "envcachectl.report.v1"
NO_DIFFERENCES = "No differences found."


def header_line(env_label: str, snapshot_label: str) -> str:
    return f"=== Differences between {env_label} and {snapshot_label} ==="


def render_text(result: Reconciliation, env_label: str, snapshot_label: str, verbose: bool = False) -> str:
    lines = [header_line(env_label, snapshot_label)]
    if not result.diffs:
        lines.append(NO_DIFFERENCES)
    for diff in result.diffs:
        lines.append(f"[DIFF] {diff.env_name}")
        if verbose:
            lines.append(f"    reason={diff.reason} expected={diff.env_value!r} paths={','.join(diff.paths)}")
    return "\n".join(lines)


def build_payload(ctx: RunContext, result: Reconciliation) -> dict[str, object]:
    return {
        "schema_name": REPORT_SCHEMA_NAME,
        "schema_version": 1,
        "tool": "envcachectl",
        "status": "diff" if result.diffs else "ok",
        "run_id": ctx.run_id,
        "env_file": ctx.display_path(ctx.env_file),
        "snapshot": ctx.display_path(ctx.snapshot_path),
        "checked_count": len(result.checked),
        "skipped_count": len(result.skipped),
        "diff_count": len(result.diffs),
        "diffs": [
            {"name": diff.env_name, "reason": diff.reason, "paths": list(diff.paths)}
            for diff in result.diffs
        ],
    }
