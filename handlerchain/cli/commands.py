"""CLI commands for handlerchain."""

from . import config_commands, run_commands  # noqa: F401  (registers commands)
from .core import app

__all__ = ["app"]
