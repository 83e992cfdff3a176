__version__ = "0.1.0"

__all__ = [
    "__version__",
    "cli",
    "commands",
    "contracts",
    "core",
    "envfile",
    "errors",
    "exit_codes",
    "reconcile",
    "references",
    "report",
    "snapshot",
]
