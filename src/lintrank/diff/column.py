# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tab-aware conversion between visual columns and string indices.

Analysis tools and ``git diff`` report columns as rendered on screen, where a
tab advances to the next multiple of the tab width. Python strings address
characters by index. The helpers here translate between both views.
"""

from __future__ import annotations

from typing import Final

from lintrank.core.errors import InvalidArgumentError

TAB_WIDTH: Final[int] = 8
_TAB: Final[str] = "\t"


def _check_tab_width(tab_width: int) -> None:
    if tab_width <= 0:
        raise InvalidArgumentError(f"tab_width must be positive, received {tab_width}")


def _advance(visual: int, char: str, tab_width: int) -> int:
    if char == _TAB:
        return (visual // tab_width + 1) * tab_width
    return visual + 1


def real_column_from_visual(line: str, visual_column: int, tab_width: int = TAB_WIDTH) -> int:
    """Return the string index at which ``visual_column`` is first reached.

    Args:
        line: Source line without any diff prefix.
        visual_column: Zero-based visual column reported by a tool.
        tab_width: Distance between tab stops.

    Returns:
        int: Zero-based index into ``line``, clamped to ``len(line)`` when the
        target lies beyond the rendered width of the line.

    Raises:
        InvalidArgumentError: If ``visual_column`` is negative or ``tab_width``
            is not positive.

    Example:
        >>> real_column_from_visual("\\tab", 8)
        1
        >>> real_column_from_visual("\\tab", 9)
        2
    """

    if visual_column < 0:
        raise InvalidArgumentError(f"visual_column must be non-negative, received {visual_column}")
    _check_tab_width(tab_width)
    visual = 0
    for index, char in enumerate(line):
        if visual >= visual_column:
            return index
        visual = _advance(visual, char, tab_width)
    return len(line)


def visual_column_at(line: str, real_index: int, tab_width: int = TAB_WIDTH) -> int:
    """Return the visual column of ``line[real_index]``.

    Args:
        line: Source line without any diff prefix.
        real_index: Zero-based string index; clamped to ``[0, len(line)]``.
        tab_width: Distance between tab stops.

    Returns:
        int: Zero-based visual column.

    Raises:
        InvalidArgumentError: If ``tab_width`` is not positive.
    """

    _check_tab_width(tab_width)
    limit = max(0, min(real_index, len(line)))
    visual = 0
    for char in line[:limit]:
        visual = _advance(visual, char, tab_width)
    return visual


def expand_tabs(line: str, tab_width: int = TAB_WIDTH) -> str:
    """Replace every tab in ``line`` with spaces up to the next tab stop.

    Args:
        line: Source line that may contain tabs.
        tab_width: Distance between tab stops.

    Returns:
        str: Tab-free line whose length equals ``visual_column_at(line, len(line))``.

    Raises:
        InvalidArgumentError: If ``tab_width`` is not positive.
    """

    _check_tab_width(tab_width)
    parts: list[str] = []
    visual = 0
    for char in line:
        if char == _TAB:
            stop = _advance(visual, char, tab_width)
            parts.append(" " * (stop - visual))
            visual = stop
        else:
            parts.append(char)
            visual += 1
    return "".join(parts)


__all__ = ["TAB_WIDTH", "expand_tabs", "real_column_from_visual", "visual_column_at"]
