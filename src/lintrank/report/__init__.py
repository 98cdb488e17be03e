# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Report assembly and rendering."""

from __future__ import annotations

from .context import DiagnosticContext, ReportEntry, build_report, collect_context, select_diff_snippet
from .diff_block import DiffBlock, HighlightRange, build_diff_block, highlight_range
from .file_context import build_file_context
from .history_block import CommitDiffBlock, build_history_blocks
from .render import ReportSummary, render_duplicates, render_report

__all__ = [
    "CommitDiffBlock",
    "DiagnosticContext",
    "DiffBlock",
    "HighlightRange",
    "ReportEntry",
    "ReportSummary",
    "build_diff_block",
    "build_file_context",
    "build_history_blocks",
    "build_report",
    "collect_context",
    "highlight_range",
    "render_duplicates",
    "render_report",
    "select_diff_snippet",
]
