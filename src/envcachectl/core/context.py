from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Literal

from ..errors import ScriptError
from ..exit_codes import ERR_CONFIG
from .clock import utc_now
from .project_root import find_project_root

OutputFormat = Literal["text", "json"]

DEFAULT_ENV_FILE = ".env"
DEFAULT_CONFIG_DIR = "config"
DEFAULT_SNAPSHOT = "bootstrap/cache/config.php"
DEFAULT_PHP_BINARY = "php"
DEFAULT_PHP_TIMEOUT_SECONDS = 60


def _resolve_under(root: Path, raw: str) -> Path:
    path = Path(raw)
    return (root / path).resolve() if not path.is_absolute() else path.resolve()


@dataclass(frozen=True)
class RunContext:
    run_id: str
    project_root: Path
    env_file: Path
    config_dir: Path
    snapshot_path: Path
    php_binary: str
    php_timeout_seconds: int
    output_format: OutputFormat
    verbose: bool
    quiet: bool
    log_json: bool

    def display_path(self, path: Path) -> str:
        try:
            return path.relative_to(self.project_root).as_posix()
        except ValueError:
            return str(path)

    @classmethod
    def from_args(
        cls,
        run_id: str | None = None,
        project_root: str | None = None,
        env_file: str | None = None,
        config_dir: str | None = None,
        snapshot: str | None = None,
        php_binary: str | None = None,
        output_format: OutputFormat = "text",
        verbose: bool = False,
        quiet: bool = False,
        log_json: bool = False,
    ) -> "RunContext":
        raw_root = project_root or os.environ.get("ENVCACHECTL_PROJECT_ROOT")
        if raw_root:
            root = Path(raw_root).resolve()
        else:
            try:
                root = find_project_root()
            except RuntimeError as exc:
                raise ScriptError(
                    "unable to resolve project root (no `artisan` or `config/` + `bootstrap/` found); pass --cwd",
                    ERR_CONFIG,
                    kind="project_root_missing",
                ) from exc
        default_run = f"envcache-{utc_now().strftime('%Y%m%d-%H%M%S')}"
        return cls(
            run_id=run_id or os.environ.get("RUN_ID", default_run),
            project_root=root,
            env_file=_resolve_under(root, env_file or os.environ.get("ENVCACHECTL_ENV_FILE", DEFAULT_ENV_FILE)),
            config_dir=_resolve_under(root, config_dir or os.environ.get("ENVCACHECTL_CONFIG_DIR", DEFAULT_CONFIG_DIR)),
            snapshot_path=_resolve_under(root, snapshot or os.environ.get("ENVCACHECTL_SNAPSHOT", DEFAULT_SNAPSHOT)),
            php_binary=php_binary or os.environ.get("ENVCACHECTL_PHP", DEFAULT_PHP_BINARY),
            php_timeout_seconds=DEFAULT_PHP_TIMEOUT_SECONDS,
            output_format=output_format,
            verbose=verbose,
            quiet=quiet,
            log_json=log_json,
        )
