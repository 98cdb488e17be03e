# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Correlate and order diagnostics from several static-analysis tools."""

from __future__ import annotations

from .analysis.dependencies import build_edges
from .analysis.duplicates import parse_duplicate_report
from .analysis.ordering import order_diagnostics, topo_rank
from .core.models import Diagnostic, DuplicatePair, Edge, diagnostic_id
from .core.severity import Severity
from .diff.column import expand_tabs, real_column_from_visual, visual_column_at
from .diff.parser import extract_diff_snippet, pick_snippet_for_line

__all__ = [
    "Diagnostic",
    "DuplicatePair",
    "Edge",
    "Severity",
    "build_edges",
    "diagnostic_id",
    "expand_tabs",
    "extract_diff_snippet",
    "order_diagnostics",
    "parse_duplicate_report",
    "pick_snippet_for_line",
    "real_column_from_visual",
    "topo_rank",
    "visual_column_at",
]
