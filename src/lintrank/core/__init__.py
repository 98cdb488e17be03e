# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Core data models, severities, and errors."""

from __future__ import annotations

from .errors import (
    ConfigError,
    DuplicateReportError,
    InvalidArgumentError,
    LintRankError,
    ProgramUnavailableError,
    VcsCommandError,
)
from .models import (
    Diagnostic,
    DiagnosticId,
    DiffSnippet,
    DiffSnippetLine,
    DuplicatePair,
    Edge,
    SnippetSelection,
    diagnostic_id,
    resolve_file_path,
)
from .severity import Severity, coerce_severity, severity_label

__all__ = [
    "ConfigError",
    "Diagnostic",
    "DiagnosticId",
    "DiffSnippet",
    "DiffSnippetLine",
    "DuplicatePair",
    "DuplicateReportError",
    "Edge",
    "InvalidArgumentError",
    "LintRankError",
    "ProgramUnavailableError",
    "Severity",
    "SnippetSelection",
    "VcsCommandError",
    "coerce_severity",
    "diagnostic_id",
    "resolve_file_path",
    "severity_label",
]
