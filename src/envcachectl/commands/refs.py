from __future__ import annotations

import argparse

from ..core.context import RunContext
from ..core.serialize import dumps_json
from ..exit_codes import OK
from ..references import scan_config_dir


def configure_refs_parser(sub: argparse._SubParsersAction) -> None:
    p = sub.add_parser("refs", help="list env() references found in the configuration sources")
    p.add_argument("names", nargs="*", help="only show these variable names")


def run_refs_command(ctx: RunContext, ns: argparse.Namespace) -> int:
    mapping = scan_config_dir(ctx.config_dir, ctx)
    wanted = set(getattr(ns, "names", None) or [])
    rows = [
        {"name": name, "path": ref.dotted, "source": ref.source, "line": ref.line}
        for name in sorted(mapping)
        if not wanted or name in wanted
        for ref in mapping[name]
    ]
    if ctx.output_format == "json":
        print(
            dumps_json(
                {
                    "schema_version": 1,
                    "tool": "envcachectl",
                    "status": "ok",
                    "run_id": ctx.run_id,
                    "config_dir": ctx.display_path(ctx.config_dir),
                    "references": rows,
                }
            )
        )
        return OK
    for row in rows:
        print(f"{row['name']} -> {row['path']} ({row['source']}:{row['line']})")
    return OK
