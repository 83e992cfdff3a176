from __future__ import annotations

import argparse

from ..contracts.output import validate_report
from ..core.context import RunContext
from ..core.serialize import dumps_json
from ..envfile import load_env_file
from ..exit_codes import DIFF_FOUND, OK
from ..reconcile import Reconciliation, reconcile
from ..references import scan_config_dir
from ..report import build_payload, render_text
from ..snapshot.loader import load_snapshot


def configure_diff_parser(sub: argparse._SubParsersAction) -> None:
    p = sub.add_parser("diff", help="report .env variables not reflected in the config cache")
    p.add_argument("--fail-on-diff", action="store_true", help="exit 1 when differences are found")


def run_pipeline(ctx: RunContext) -> Reconciliation:
    env = load_env_file(ctx.env_file, ctx)
    references = scan_config_dir(ctx.config_dir, ctx)
    tree = load_snapshot(ctx.snapshot_path, ctx.php_binary, ctx, ctx.php_timeout_seconds)
    return reconcile(env, references, tree, ctx)


def run_diff_command(ctx: RunContext, ns: argparse.Namespace) -> int:
    result = run_pipeline(ctx)
    if ctx.output_format == "json":
        payload = build_payload(ctx, result)
        validate_report(payload)
        print(dumps_json(payload))
    else:
        print(
            render_text(
                result,
                ctx.display_path(ctx.env_file),
                ctx.display_path(ctx.snapshot_path),
                verbose=ctx.verbose,
            )
        )
    if getattr(ns, "fail_on_diff", False) and result.diffs:
        return DIFF_FOUND
    return OK
