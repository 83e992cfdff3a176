from __future__ import annotations

import os
import subprocess
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]


def run_envcachectl(*args: str, cwd: Path | None = None, env: dict[str, str] | None = None) -> subprocess.CompletedProcess[str]:
    run_env = os.environ.copy()
    for key in [k for k in run_env if k.startswith("ENVCACHECTL_")]:
        run_env.pop(key)
    run_env["PYTHONPATH"] = str(ROOT / "src")
    run_env.setdefault("RUN_ID", "pytest-run")
    run_env.update(env or {})
    return subprocess.run(
        [sys.executable, "-m", "envcachectl", *args],
        cwd=(cwd or ROOT),
        env=run_env,
        text=True,
        capture_output=True,
        check=False,
    )
