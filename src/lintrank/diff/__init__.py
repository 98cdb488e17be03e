# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Column mapping and unified-diff parsing helpers."""

from __future__ import annotations

from .column import TAB_WIDTH, expand_tabs, real_column_from_visual, visual_column_at
from .parser import extract_diff_snippet, parse_hunk_header, pick_snippet_for_line, split_lines

__all__ = (
    "TAB_WIDTH",
    "expand_tabs",
    "extract_diff_snippet",
    "parse_hunk_header",
    "pick_snippet_for_line",
    "real_column_from_visual",
    "split_lines",
    "visual_column_at",
)
