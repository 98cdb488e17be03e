# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Source lines around a diagnostic that the diff block did not already show."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path
from typing import Final

from lintrank.core.errors import InvalidArgumentError
from lintrank.core.models import Diagnostic
from lintrank.diff.column import TAB_WIDTH
from lintrank.diff.parser import split_lines
from lintrank.report.diff_block import caret_line, format_gutter_line, highlight_range

LOGGER = logging.getLogger(__name__)

POINTER_MARKER: Final[str] = ">"
PLAIN_MARKER: Final[str] = " "


def read_source_lines(path: str | Path) -> list[str] | None:
    """Return the lines of ``path`` or ``None`` when it cannot be read as text."""

    try:
        text = Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        LOGGER.debug("no file context for %s: %s", path, exc)
        return None
    return split_lines(text.removesuffix("\n"))


def build_file_context(
    lines: Sequence[str],
    diagnostic: Diagnostic,
    *,
    context_lines: int = 2,
    shown_lines: frozenset[int] = frozenset(),
    tab_width: int = TAB_WIDTH,
) -> tuple[str, ...]:
    """Format the file lines around ``diagnostic`` with a caret below its line.

    Args:
        lines: Current file content split into lines.
        diagnostic: Diagnostic whose line is marked with ``>``.
        context_lines: Lines kept on each side of the diagnostic's line.
        shown_lines: One-based line numbers already printed by the diff block.
        tab_width: Tab stop width.

    Returns:
        tuple[str, ...]: Formatted lines; empty when every line in the window
        was already shown or the window lies past the end of the file.

    Raises:
        InvalidArgumentError: If ``context_lines`` is negative.
    """

    if context_lines < 0:
        raise InvalidArgumentError(f"context_lines must be non-negative, received {context_lines}")
    first = max(1, diagnostic.line - context_lines)
    last = min(len(lines), diagnostic.line + context_lines)
    rendered: list[str] = []
    for number in range(first, last + 1):
        if number in shown_lines:
            continue
        content = lines[number - 1]
        marker = POINTER_MARKER if number == diagnostic.line else PLAIN_MARKER
        rendered.append(format_gutter_line(marker, number, content, tab_width))
        if number == diagnostic.line:
            rendered.append(caret_line(content, highlight_range(content, diagnostic, tab_width), tab_width))
    return tuple(rendered)


__all__ = ["build_file_context", "read_source_lines"]
