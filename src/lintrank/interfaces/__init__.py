# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Protocols for the collaborators consumed by the correlation engine."""

from __future__ import annotations

from .program import Declaration, NodeKind, ProgramModel
from .vcs import DiffDescriptor, DiffSource

__all__ = ["Declaration", "DiffDescriptor", "DiffSource", "NodeKind", "ProgramModel"]
