# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Git-backed diff source and parsers for blame and line history."""

from __future__ import annotations

from .blame import BlameInfo, parse_blame
from .history import HistoryEntry, LineHistory, parse_history
from .source import GitDiffSource, GitRunner

__all__ = [
    "BlameInfo",
    "GitDiffSource",
    "GitRunner",
    "HistoryEntry",
    "LineHistory",
    "parse_blame",
    "parse_history",
]
