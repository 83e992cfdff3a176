"""Project root detection helpers.

`Path.cwd()` is only allowed in this module.
"""

from __future__ import annotations

from pathlib import Path


def is_project_root(path: Path) -> bool:
    if (path / "artisan").is_file():
        return True
    return (path / "config").is_dir() and (path / "bootstrap").is_dir()


def find_project_root(start: Path | None = None) -> Path:
    cur = (start or Path.cwd()).resolve()
    if cur.is_file():
        cur = cur.parent
    while True:
        if is_project_root(cur):
            return cur
        if cur.parent == cur:
            raise RuntimeError("unable to resolve project root")
        cur = cur.parent
