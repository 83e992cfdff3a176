from __future__ import annotations

import subprocess
import time
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from .logging import log_event

if TYPE_CHECKING:
    from .context import RunContext


@dataclass(frozen=True)
class CommandResult:
    code: int
    stdout: str
    stderr: str
    duration_ms: int


def run_command(
    cmd: list[str],
    cwd: Path | None = None,
    timeout_seconds: int = 0,
    ctx: RunContext | None = None,
) -> CommandResult:
    """Run `cmd` once and capture its output.

    A missing executable surfaces as `FileNotFoundError`; a timeout is folded
    into a result with code 124 like coreutils `timeout`.
    """
    started = time.monotonic()
    try:
        proc = subprocess.run(
            cmd,
            cwd=cwd,
            text=True,
            capture_output=True,
            check=False,
            timeout=(timeout_seconds if timeout_seconds > 0 else None),
        )
        result = CommandResult(
            code=proc.returncode,
            stdout=proc.stdout or "",
            stderr=proc.stderr or "",
            duration_ms=int((time.monotonic() - started) * 1000),
        )
    except subprocess.TimeoutExpired as exc:
        stdout = exc.stdout.decode("utf-8", "replace") if isinstance(exc.stdout, bytes) else (exc.stdout or "")
        stderr = exc.stderr.decode("utf-8", "replace") if isinstance(exc.stderr, bytes) else (exc.stderr or "")
        result = CommandResult(
            code=124,
            stdout=stdout,
            stderr=(stderr + f"\ncommand timed out after {timeout_seconds}s").strip(),
            duration_ms=int((time.monotonic() - started) * 1000),
        )
    log_event(
        ctx,
        "debug",
        "process",
        "run-command",
        command=cmd[0],
        cwd=str(cwd) if cwd else "",
        code=result.code,
        duration_ms=result.duration_ms,
    )
    return result
