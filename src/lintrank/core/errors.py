# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Custom exceptions raised by the correlation and ordering engine."""

from __future__ import annotations


class LintRankError(RuntimeError):
    """Base class for errors raised by lintrank."""


class InvalidArgumentError(LintRankError, ValueError):
    """Raised when a caller supplies an argument outside its documented domain."""


class ProgramUnavailableError(LintRankError):
    """Raised when a program model cannot be constructed for the workspace."""


class DuplicateReportError(LintRankError):
    """Raised when a duplicate-code report cannot be read as a JSON object."""


class ConfigError(LintRankError):
    """Raised when configuration values fail validation."""


class VcsCommandError(LintRankError):
    """Raised when a checked version-control command exits unsuccessfully."""

    def __init__(self, args: tuple[str, ...], returncode: int, stderr: str) -> None:
        message = f"{args[0] if args else 'git'} exited with status {returncode}"
        if stderr.strip():
            message = f"{message}: {stderr.strip()}"
        super().__init__(message)
        self.command = args
        self.returncode = returncode
        self.stderr = stderr


__all__ = [
    "ConfigError",
    "DuplicateReportError",
    "InvalidArgumentError",
    "LintRankError",
    "ProgramUnavailableError",
    "VcsCommandError",
]
