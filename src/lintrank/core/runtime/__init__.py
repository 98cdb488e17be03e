"""Runtime helpers (subprocess execution)."""

from .process import CommandOptions, run_command

__all__ = ["CommandOptions", "run_command"]
