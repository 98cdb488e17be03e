# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Severity related types and helpers."""

from __future__ import annotations

from enum import IntEnum
from typing import Final


class Severity(IntEnum):
    """Severity levels shared by every aggregated tool.

    The numeric values follow the ESLint convention (``1`` warning, ``2``
    error) so that raw tool payloads can be validated directly.
    """

    WARNING = 1
    ERROR = 2


_SEVERITY_ALIASES: Final[dict[str, Severity]] = {
    "error": Severity.ERROR,
    "fatal": Severity.ERROR,
    "warning": Severity.WARNING,
    "warn": Severity.WARNING,
    "info": Severity.WARNING,
    "information": Severity.WARNING,
    "suggestion": Severity.WARNING,
}


def coerce_severity(value: Severity | int | str | None) -> Severity:
    """Return a :class:`Severity` for the heterogeneous ``value``.

    Args:
        value: Severity emitted by a tool as an enum, integer, or label.

    Returns:
        Severity: Coerced severity, defaulting to ``Severity.ERROR`` when the
        value is missing or unknown.
    """

    if isinstance(value, Severity):
        return value
    if isinstance(value, int) and not isinstance(value, bool):
        return Severity.ERROR if value >= Severity.ERROR else Severity.WARNING
    if isinstance(value, str):
        stripped = value.strip().lower()
        if stripped.isdigit():
            return coerce_severity(int(stripped))
        return _SEVERITY_ALIASES.get(stripped, Severity.ERROR)
    return Severity.ERROR


def severity_label(severity: Severity) -> str:
    """Return the lowercase display label for ``severity``."""

    return "error" if severity is Severity.ERROR else "warning"


__all__ = ["Severity", "coerce_severity", "severity_label"]
