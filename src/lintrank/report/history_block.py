# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Diff snippets showing how a line changed between consecutive commits."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Final

from lintrank.core.models import DiffSnippet
from lintrank.diff.column import TAB_WIDTH
from lintrank.diff.parser import extract_diff_snippet
from lintrank.git.history import EMPTY_TREE_HASH, HistoryEntry
from lintrank.interfaces.vcs import DiffSource
from lintrank.report.diff_block import EARLIER_MARKER, LATER_MARKER, format_gutter_line

INITIAL_SUMMARY: Final[str] = "File did not exist"
INITIAL_LABEL: Final[str] = "(initial)"
HISTORY_SNIPPET_CONTEXT: Final[int] = 3


@dataclass(frozen=True, slots=True)
class CommitDiffBlock:
    """Change of the tracked line between ``older`` and ``newer``.

    Attributes:
        heading: Command line reproducing the full diff.
        newer: Commit that introduced the change.
        older: Preceding commit, or a placeholder for the empty tree.
        snippet: Hunk covering the line, ``None`` when git showed no change there.
        lines: Formatted hunk lines around the pointer line.
    """

    heading: str
    newer: HistoryEntry
    older: HistoryEntry
    snippet: DiffSnippet | None
    lines: tuple[str, ...]

    @property
    def is_creation(self) -> bool:
        return self.older.commit_hash == EMPTY_TREE_HASH

    @property
    def older_label(self) -> str:
        return INITIAL_LABEL if self.is_creation else self.older.short_hash


def commit_pairs(entries: Sequence[HistoryEntry], limit: int) -> list[tuple[HistoryEntry, HistoryEntry]]:
    """Return ``(newer, older)`` pairs for the newest ``limit`` changes.

    A line touched by a single commit is compared against the empty tree.
    """

    if not entries or limit <= 0:
        return []
    if len(entries) == 1:
        creation = entries[0]
        placeholder = HistoryEntry(
            commit_hash=EMPTY_TREE_HASH,
            author=creation.author,
            date=creation.date,
            summary=INITIAL_SUMMARY,
        )
        return [(creation, placeholder)]
    return [(entries[index], entries[index + 1]) for index in range(min(len(entries) - 1, limit))]


def _snippet_lines(snippet: DiffSnippet | None, newer: HistoryEntry, tab_width: int) -> tuple[str, ...]:
    if snippet is None or snippet.pointer_index is None:
        return (f"(code for commit {newer.short_hash} is not available)",)
    first = max(0, snippet.pointer_index - HISTORY_SNIPPET_CONTEXT)
    last = min(len(snippet.lines), snippet.pointer_index + HISTORY_SNIPPET_CONTEXT + 1)
    rendered = [snippet.header]
    if first > 0:
        rendered.append(EARLIER_MARKER)
    rendered.extend(
        format_gutter_line(line.symbol, line.head_line_number, line.content, tab_width)
        for line in snippet.lines[first:last]
    )
    if last < len(snippet.lines):
        rendered.append(LATER_MARKER)
    return tuple(rendered)


def build_history_blocks(
    diff_source: DiffSource,
    file_path: str,
    line: int,
    entries: Sequence[HistoryEntry],
    *,
    limit: int,
    context_lines: int,
    tab_width: int = TAB_WIDTH,
) -> tuple[CommitDiffBlock, ...]:
    """Diff each consecutive commit pair of a line's history at ``line``.

    Args:
        diff_source: Provider of commit-range diffs.
        file_path: File the history belongs to.
        line: Current line number used to locate the hunk in each diff.
        entries: History of the line, newest commit first.
        limit: Maximum number of blocks.
        context_lines: Unchanged context requested from each diff.
        tab_width: Tab stop width.

    Returns:
        tuple[CommitDiffBlock, ...]: Blocks ordered newest change first.
    """

    blocks: list[CommitDiffBlock] = []
    for newer, older in commit_pairs(entries, limit):
        text = diff_source.raw_commit_diff(file_path, older.commit_hash, newer.commit_hash, context_lines)
        snippet = extract_diff_snippet(text, line) if text.strip() else None
        blocks.append(
            CommitDiffBlock(
                heading=f"--- git diff {older.short_hash}..{newer.short_hash} -- {file_path} | cat",
                newer=newer,
                older=older,
                snippet=snippet,
                lines=_snippet_lines(snippet, newer, tab_width),
            )
        )
    return tuple(blocks)


__all__ = ["CommitDiffBlock", "build_history_blocks", "commit_pairs"]
