# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Parse unified-diff hunks into snippets anchored to post-change line numbers."""

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Final

from lintrank.core.errors import InvalidArgumentError
from lintrank.core.models import DiffSnippet, DiffSnippetLine, DiffSymbol, SnippetSelection

HUNK_HEADER_PATTERN: Final[re.Pattern[str]] = re.compile(r"^@@ -\d+(?:,\d+)? \+(\d+)(?:,(\d+))? @@")
_FILE_HEADER_PREFIX: Final[str] = "diff --git "
_HEAD_SYMBOLS: Final[frozenset[str]] = frozenset({"+", " "})
_REMOVED_SYMBOL: Final[str] = "-"


@dataclass(slots=True)
class _HunkState:
    """Mutable accumulator for the hunk currently being scanned."""

    header: str
    head_line: int
    lines: list[DiffSnippetLine] = field(default_factory=list)
    pointer_index: int | None = None

    def snippet(self) -> DiffSnippet | None:
        if self.pointer_index is None:
            return None
        return DiffSnippet(header=self.header, lines=tuple(self.lines), pointer_index=self.pointer_index)


def parse_hunk_header(line: str) -> int | None:
    """Return the new-range start line encoded in a hunk header.

    Args:
        line: Candidate ``@@ -a,b +c,d @@`` header line.

    Returns:
        int | None: The head start line ``c`` or ``None`` when ``line`` is not a
        hunk header.
    """

    match = HUNK_HEADER_PATTERN.match(line)
    if match is None:
        return None
    return int(match.group(1))


def split_lines(text: str) -> list[str]:
    r"""Split git output on ``\n`` only, dropping a trailing ``\r`` from each row.

    ``str.splitlines`` also breaks on form feeds, ``\x85`` and the Unicode
    line separators, which may legitimately appear inside a source line.
    """

    return [row[:-1] if row.endswith("\r") else row for row in text.split("\n")]


def _ensure_positive(target_head_line: int) -> None:
    if target_head_line <= 0:
        raise InvalidArgumentError(f"target_head_line must be positive, received {target_head_line}")


def _is_file_header(line: str) -> bool:
    # A new file section ends the current hunk; ``--- x`` inside a hunk is a removed line.
    return line.startswith(_FILE_HEADER_PREFIX)


def extract_diff_snippet(diff_text: str, target_head_line: int) -> DiffSnippet | None:
    """Return the first hunk of ``diff_text`` that contains ``target_head_line``.

    The head line counter starts at the hunk's new-range start and advances
    for every context and added line. Removed lines do not exist in the
    post-change file, so they carry ``head_line_number=None``.

    Args:
        diff_text: Unified diff produced by ``git diff``.
        target_head_line: One-based line number in the post-change file.

    Returns:
        DiffSnippet | None: Hunk with ``pointer_index`` set to the matching
        line, or ``None`` when no hunk contains the target.

    Raises:
        InvalidArgumentError: If ``target_head_line`` is not positive.
    """

    _ensure_positive(target_head_line)
    state: _HunkState | None = None
    for raw in split_lines(diff_text):
        head_start = parse_hunk_header(raw)
        if head_start is not None:
            if state is not None and (found := state.snippet()) is not None:
                return found
            state = _HunkState(header=raw, head_line=head_start)
            continue
        if _is_file_header(raw):
            if state is not None and (found := state.snippet()) is not None:
                return found
            state = None
            continue
        if state is None or not raw:
            continue
        _consume_line(state, raw, target_head_line)
    return state.snippet() if state is not None else None


def _consume_line(state: _HunkState, raw: str, target_head_line: int) -> None:
    symbol = raw[0]
    if symbol in _HEAD_SYMBOLS:
        head_line: int | None = state.head_line
        state.head_line += 1
    elif symbol == _REMOVED_SYMBOL:
        head_line = None
    else:
        # ``\ No newline at end of file`` and other annotations carry no content.
        return
    typed_symbol: DiffSymbol = "+" if symbol == "+" else (" " if symbol == " " else "-")
    state.lines.append(DiffSnippetLine(content=raw[1:], symbol=typed_symbol, head_line_number=head_line))
    if head_line == target_head_line and state.pointer_index is None:
        state.pointer_index = len(state.lines) - 1


def pick_snippet_for_line(candidates: Sequence[str], target_head_line: int) -> SnippetSelection | None:
    """Return the first candidate diff whose hunks contain ``target_head_line``.

    Candidates are tried in priority order, most contextually relevant first
    (for example the upstream comparison, then the working tree, then the
    staged index). Blank candidates are skipped.

    Args:
        candidates: Unified diff texts in priority order.
        target_head_line: One-based line number in the post-change file.

    Returns:
        SnippetSelection | None: Matching snippet and the index of the
        candidate it came from, or ``None`` when no candidate matches.

    Raises:
        InvalidArgumentError: If ``target_head_line`` is not positive.
    """

    _ensure_positive(target_head_line)
    for index, diff_text in enumerate(candidates):
        if not diff_text or not diff_text.strip():
            continue
        snippet = extract_diff_snippet(diff_text, target_head_line)
        if snippet is not None:
            return SnippetSelection(snippet=snippet, index=index)
    return None


__all__ = [
    "HUNK_HEADER_PATTERN",
    "extract_diff_snippet",
    "parse_hunk_header",
    "pick_snippet_for_line",
    "split_lines",
]
