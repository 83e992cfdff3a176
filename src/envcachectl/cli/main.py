from __future__ import annotations

import argparse
import platform
import sys

from .. import __version__
from ..commands.diff import configure_diff_parser, run_diff_command
from ..commands.doctor import configure_doctor_parser, run_doctor
from ..commands.refs import configure_refs_parser, run_refs_command
from ..contracts.output import validate_json_output
from ..core.context import RunContext
from ..core.logging import log_event
from ..core.serialize import dumps_json
from ..errors import ScriptError
from ..exit_codes import ERR_INTERNAL, ERR_USAGE
from .output import render_error, resolve_output_format

COMMAND_RUNNERS = {
    "diff": run_diff_command,
    "refs": run_refs_command,
    "doctor": run_doctor,
}


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="envcachectl",
        description="Compare a project's .env file with its cached configuration.",
    )
    p.add_argument("--version", action="version", version=f"envcachectl {__version__}")
    p.add_argument("--cwd", help="project root (default: nearest ancestor with `artisan`)")
    p.add_argument("--env-file", help="environment file, relative to the project root")
    p.add_argument("--config-dir", help="configuration source directory, relative to the project root")
    p.add_argument("--snapshot", help="config cache artifact (.php, .json, .yaml)")
    p.add_argument("--php", help="php executable used to read .php snapshots")
    p.add_argument("--run-id", help="run identifier attached to log events")
    p.add_argument("--format", choices=["text", "json"], default=None, help="output format")
    p.add_argument("--json", action="store_true", help="alias for --format json")
    p.add_argument("--log-json", action="store_true", help="emit log events as JSON lines")
    vg = p.add_mutually_exclusive_group()
    vg.add_argument("--verbose", action="store_true", help="enable verbose diagnostics")
    vg.add_argument("--quiet", action="store_true", help="only emit errors")
    sub = p.add_subparsers(dest="cmd")

    configure_diff_parser(sub)
    configure_refs_parser(sub)
    configure_doctor_parser(sub)

    sub.add_parser("version", help="print tool and interpreter versions")

    val_p = sub.add_parser("validate-output", help="validate JSON output against schema")
    val_p.add_argument("--schema", required=True)
    val_p.add_argument("--file", required=True)

    return p


def main(argv: list[str] | None = None) -> int:
    p = build_parser()
    ns = p.parse_args(argv)
    cmd = ns.cmd or "diff"
    if ns.format and ns.json and ns.format != "json":
        message = "conflicting output flags: use either --format json or --json"
        print(render_error(as_json=False, message=message, code=ERR_USAGE), file=sys.stderr)
        return ERR_USAGE
    fmt = resolve_output_format(cli_json=ns.json, cli_format=ns.format)
    as_json = fmt == "json"
    try:
        if cmd == "version":
            payload = {"tool": "envcachectl", "version": __version__, "python": platform.python_version()}
            print(dumps_json(payload) if as_json else f"envcachectl {__version__} (python {payload['python']})")
            return 0
        if cmd == "validate-output":
            return validate_json_output(ns.schema, ns.file, as_json)
        ctx = RunContext.from_args(
            run_id=ns.run_id,
            project_root=ns.cwd,
            env_file=ns.env_file,
            config_dir=ns.config_dir,
            snapshot=ns.snapshot,
            php_binary=ns.php,
            output_format="json" if as_json else "text",
            verbose=ns.verbose,
            quiet=ns.quiet,
            log_json=ns.log_json,
        )
        log_event(ctx, "debug", "cli", "start", cmd=cmd, fmt=ctx.output_format, root=str(ctx.project_root))
        return COMMAND_RUNNERS[cmd](ctx, ns)
    except ScriptError as exc:
        print(render_error(as_json=as_json, message=str(exc), code=exc.code, kind=exc.kind), file=sys.stderr)
        return exc.code
    except Exception as exc:  # pragma: no cover
        print(render_error(as_json=as_json, message=f"internal error: {exc}", code=ERR_INTERNAL), file=sys.stderr)
        return ERR_INTERNAL


if __name__ == "__main__":
    raise SystemExit(main())
