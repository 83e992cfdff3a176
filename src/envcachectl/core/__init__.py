"""Runtime plumbing shared by the envcachectl commands."""

from .context import RunContext
from .logging import log_event

__all__ = ["RunContext", "log_event"]
