# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Correlation, dependency, and ordering analysis over collected diagnostics."""

from __future__ import annotations

from .dependencies import build_edges
from .duplicates import load_duplicate_report, parse_duplicate_report
from .ordering import order_diagnostics, presentation_key, topo_rank
from .priority import RuleLevelMap, group_by_level, group_by_sections, priority_level, priority_name
from .program import AstProgramModel

__all__ = [
    "AstProgramModel",
    "RuleLevelMap",
    "build_edges",
    "group_by_level",
    "group_by_sections",
    "load_duplicate_report",
    "order_diagnostics",
    "parse_duplicate_report",
    "presentation_key",
    "priority_level",
    "priority_name",
    "topo_rank",
]
