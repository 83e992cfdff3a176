"""Command-line entrypoint for envcachectl."""

from .main import build_parser, main

__all__ = ["build_parser", "main"]
