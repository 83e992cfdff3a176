"""Output contracts: packaged JSON schemas and validation entrypoints."""

from .output import validate_json_output, validate_report

__all__ = ["validate_json_output", "validate_report"]
