from __future__ import annotations

import argparse
import platform
import shutil
import subprocess
import sys

from ..core.context import RunContext
from ..core.scan import iter_php_files
from ..core.serialize import dumps_json
from ..exit_codes import ERR_PREREQ, OK
from ..snapshot.loader import JSON_SUFFIXES, YAML_SUFFIXES


def configure_doctor_parser(sub: argparse._SubParsersAction) -> None:
    sub.add_parser("doctor", help="show project layout and tooling diagnostics")


def _tool_version(cmd: list[str]) -> str:
    try:
        out = subprocess.check_output(cmd, stderr=subprocess.STDOUT, text=True, timeout=10).strip()
        return out.splitlines()[0] if out else "unknown"
    except (OSError, subprocess.SubprocessError):
        return "missing"


def build_report(ctx: RunContext) -> dict[str, object]:
    needs_php = ctx.snapshot_path.suffix.lower() not in JSON_SUFFIXES | YAML_SUFFIXES
    php_version = _tool_version([ctx.php_binary, "-r", "echo PHP_VERSION;"]) if needs_php else "not required"
    config_files = iter_php_files(ctx.config_dir) if ctx.config_dir.is_dir() else []
    checks = {
        "env_file_ok": ctx.env_file.is_file(),
        "config_dir_ok": ctx.config_dir.is_dir(),
        "snapshot_ok": ctx.snapshot_path.is_file(),
        "php_ok": (not needs_php) or php_version != "missing",
    }
    return {
        "schema_version": 1,
        "tool": "envcachectl",
        "status": "ok" if all(checks.values()) else "fail",
        "run_id": ctx.run_id,
        "project_root": str(ctx.project_root),
        "env_file": ctx.display_path(ctx.env_file),
        "config_dir": ctx.display_path(ctx.config_dir),
        "config_file_count": len(config_files),
        "snapshot": ctx.display_path(ctx.snapshot_path),
        "python": sys.version.split()[0],
        "platform": platform.platform(),
        "tools": {
            "php": shutil.which(ctx.php_binary) or "missing",
            "php_version": php_version,
        },
        "checks": checks,
    }


def run_doctor(ctx: RunContext, ns: argparse.Namespace) -> int:
    report = build_report(ctx)
    if ctx.output_format == "json":
        print(dumps_json(report))
    else:
        checks = report["checks"]
        print(f"project_root: {report['project_root']}")
        for name, ok in checks.items():
            print(f"- {name}: {'ok' if ok else 'FAIL'}")
        if not checks["snapshot_ok"]:
            print("hint: run `php artisan config:cache` to generate the config cache")
    return OK if report["status"] == "ok" else ERR_PREREQ
