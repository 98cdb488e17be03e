# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Render a selected diff hunk around a diagnostic with a caret underline."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Final

from lintrank.core.errors import InvalidArgumentError
from lintrank.core.models import Diagnostic, DiffSnippet
from lintrank.diff.column import TAB_WIDTH, expand_tabs, real_column_from_visual, visual_column_at

EARLIER_MARKER: Final[str] = "       ... (earlier lines omitted)"
LATER_MARKER: Final[str] = "       ... (later lines omitted)"
FOOTER: Final[str] = "   |" + "-" * 59
_HEADING_RULE: Final[str] = "-" * 25
_LINE_NUMBER_WIDTH: Final[int] = 4
# symbol, space, line number, space, bar, space
_GUTTER_WIDTH: Final[int] = 1 + 1 + _LINE_NUMBER_WIDTH + 1 + 1 + 1
_QUOTED_IDENTIFIER: Final[re.Pattern[str]] = re.compile(r"[\"']([A-Za-z0-9_$]+)[\"']")


@dataclass(frozen=True, slots=True)
class HighlightRange:
    """Half-open range of real string indices on the pointer line."""

    start: int
    end: int


@dataclass(frozen=True, slots=True)
class DiffBlock:
    """Formatted diff context for one diagnostic.

    Attributes:
        heading: Title naming the comparison source and context size.
        lines: Hunk header followed by the windowed, tab-expanded lines with
            the caret line inserted below the pointer line.
        footer: Closing rule.
        head_line_numbers: Head line numbers of the displayed lines.
        descriptor: Label of the comparison source the hunk came from.
    """

    heading: str
    lines: tuple[str, ...]
    footer: str
    head_line_numbers: frozenset[int]
    descriptor: str


def _to_real(content: str, column: int, diagnostic: Diagnostic, tab_width: int) -> int:
    if diagnostic.column_kind == "real":
        return min(max(0, column), len(content))
    return real_column_from_visual(content, max(0, column), tab_width)


def highlight_range(content: str, diagnostic: Diagnostic, tab_width: int = TAB_WIDTH) -> HighlightRange:
    """Return the real-index range to underline on ``content``.

    The diagnostic's start and end columns are mapped to real indices and
    clamped to the line so at least one character is covered. When the
    message quotes an identifier that occurs on the line, that occurrence is
    underlined instead.

    Args:
        content: Pointer line text, tabs intact.
        diagnostic: Diagnostic positioned on ``content``.
        tab_width: Tab stop width for visual columns.

    Returns:
        HighlightRange: Range with ``start < end``.
    """

    zero_start = diagnostic.column - 1
    start = _to_real(content, zero_start, diagnostic, tab_width)
    end_column = zero_start + 1
    if diagnostic.end_column is not None and diagnostic.end_line in (None, diagnostic.line):
        end_column = max(zero_start + 1, diagnostic.end_column - 1)
    end = _to_real(content, end_column, diagnostic, tab_width)

    start = min(start, len(content))
    end = max(start + 1, min(len(content), end))

    match = _QUOTED_IDENTIFIER.search(diagnostic.message)
    if match is not None:
        found = content.find(match.group(1))
        if found != -1:
            start, end = found, found + len(match.group(1))

    start = max(0, min(start, len(content)))
    return HighlightRange(start=start, end=max(start + 1, min(len(content), end)))


def format_gutter_line(symbol: str, head_line: int | None, content: str, tab_width: int) -> str:
    """Return ``content`` behind a one-character marker and a line-number gutter."""

    number = str(head_line).rjust(_LINE_NUMBER_WIDTH) if head_line is not None else " " * _LINE_NUMBER_WIDTH
    return f"{symbol} {number} | {expand_tabs(content, tab_width)}"


def caret_line(content: str, highlight: HighlightRange, tab_width: int) -> str:
    """Return the underline for ``highlight``, aligned below a gutter line."""

    expanded = expand_tabs(content, tab_width)
    visual_start = visual_column_at(content, highlight.start, tab_width)
    visual_end = max(visual_start + 1, visual_column_at(content, highlight.end, tab_width))
    capped_end = min(len(expanded), visual_end)
    caret = " " * min(visual_start, len(expanded)) + "^" * max(1, capped_end - visual_start)
    return " " * _GUTTER_WIDTH + caret.ljust(len(expanded))


def build_diff_block(
    snippet: DiffSnippet,
    descriptor: str,
    diagnostic: Diagnostic,
    *,
    diff_context: int,
    snippet_context: int = 2,
    tab_width: int = TAB_WIDTH,
) -> DiffBlock | None:
    """Format ``snippet`` around its pointer line for ``diagnostic``.

    Args:
        snippet: Hunk selected for the diagnostic's line.
        descriptor: Label of the comparison the hunk came from.
        diagnostic: Diagnostic whose position is underlined.
        diff_context: Context size the diff was requested with.
        snippet_context: Lines kept on each side of the pointer line.
        tab_width: Tab stop width.

    Returns:
        DiffBlock | None: Rendered block, or ``None`` when the snippet has no
        pointer line.

    Raises:
        InvalidArgumentError: If ``snippet_context`` is negative.
    """

    if snippet_context < 0:
        raise InvalidArgumentError(f"snippet_context must be non-negative, received {snippet_context}")
    pointer = snippet.pointer_line
    if pointer is None or snippet.pointer_index is None:
        return None

    first = max(0, snippet.pointer_index - snippet_context)
    last = min(len(snippet.lines), snippet.pointer_index + snippet_context + 1)
    highlight = highlight_range(pointer.content, diagnostic, tab_width)

    rendered: list[str] = [snippet.header]
    if first > 0:
        rendered.append(EARLIER_MARKER)
    head_lines: set[int] = set()
    for index in range(first, last):
        line = snippet.lines[index]
        if line.head_line_number is not None:
            head_lines.add(line.head_line_number)
        rendered.append(format_gutter_line(line.symbol, line.head_line_number, line.content, tab_width))
        if index == snippet.pointer_index:
            rendered.append(caret_line(pointer.content, highlight, tab_width))
    if last < len(snippet.lines):
        rendered.append(LATER_MARKER)

    return DiffBlock(
        heading=f"--- git diff ({descriptor}, U={diff_context}) {_HEADING_RULE}",
        lines=tuple(rendered),
        footer=FOOTER,
        head_line_numbers=frozenset(head_lines),
        descriptor=descriptor,
    )


__all__ = [
    "DiffBlock",
    "HighlightRange",
    "build_diff_block",
    "caret_line",
    "format_gutter_line",
    "highlight_range",
]
