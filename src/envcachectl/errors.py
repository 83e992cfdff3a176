from __future__ import annotations

from dataclasses import dataclass

from .exit_codes import ERR_ARTIFACT, ERR_CONFIG, ERR_INTERNAL

SNAPSHOT_REMEDIATION = "php artisan config:cache"


@dataclass
class ScriptError(Exception):
    message: str
    code: int = ERR_INTERNAL
    kind: str = "generic_error"

    def __str__(self) -> str:
        return self.message


@dataclass
class InputMissing(ScriptError):
    code: int = ERR_CONFIG
    kind: str = "input_missing"


@dataclass
class SnapshotNotFound(ScriptError):
    code: int = ERR_ARTIFACT
    kind: str = "snapshot_not_found"

    @classmethod
    def for_path(cls, path: str) -> "SnapshotNotFound":
        return cls(f"config cache file not found: {path} (run `{SNAPSHOT_REMEDIATION}` to generate it)")


@dataclass
class SnapshotLoadError(ScriptError):
    code: int = ERR_ARTIFACT
    kind: str = "snapshot_load_failure"
