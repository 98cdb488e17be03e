# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for per-commit diff snippets of a line's history."""

from __future__ import annotations

from conftest import FakeDiffSource

from lintrank.git.history import EMPTY_TREE_HASH, HistoryEntry
from lintrank.report.history_block import build_history_blocks, commit_pairs

NEWEST = HistoryEntry(commit_hash="a" * 40, author="Ada", date="2024-03-02", summary="Bump value")
MIDDLE = HistoryEntry(commit_hash="b" * 40, author="Grace", date="2023-01-15", summary="Rename")
OLDEST = HistoryEntry(commit_hash="c" * 40, author="Linus", date="2022-07-01", summary="Create")
CHANGE = "@@ -1,2 +1,2 @@\n-old = 0\n+value = 1\n tail = 2\n"


def test_pairs_walk_consecutive_commits_up_to_limit() -> None:
    entries = [NEWEST, MIDDLE, OLDEST]

    assert commit_pairs(entries, 5) == [(NEWEST, MIDDLE), (MIDDLE, OLDEST)]
    assert commit_pairs(entries, 1) == [(NEWEST, MIDDLE)]
    assert commit_pairs(entries, 0) == []
    assert commit_pairs([], 3) == []


def test_single_commit_is_compared_with_empty_tree() -> None:
    ((newer, older),) = commit_pairs([OLDEST], 3)

    assert newer is OLDEST
    assert older.commit_hash == EMPTY_TREE_HASH
    assert (older.author, older.date, older.summary) == ("Linus", "2022-07-01", "File did not exist")


def test_blocks_hold_snippet_at_line() -> None:
    source = FakeDiffSource(commit_diffs={(MIDDLE.commit_hash, NEWEST.commit_hash): CHANGE})

    (block,) = build_history_blocks(source, "src/app.py", 1, [NEWEST, MIDDLE], limit=5, context_lines=3)

    assert source.calls == [("commit_diff", "src/app.py", MIDDLE.commit_hash, NEWEST.commit_hash)]
    assert block.heading == f"--- git diff {'b' * 12}..{'a' * 12} -- src/app.py | cat"
    assert block.snippet is not None
    assert block.snippet.pointer_line is not None
    assert block.snippet.pointer_line.content == "value = 1"
    assert block.lines == (
        "@@ -1,2 +1,2 @@",
        "-" + " " * 6 + "| old = 0",
        "+    1 | value = 1",
        "     2 | tail = 2",
    )
    assert block.older_label == "b" * 12
    assert not block.is_creation


def test_missing_commit_diff_reports_unavailable_code() -> None:
    (block,) = build_history_blocks(FakeDiffSource(), "src/app.py", 1, [OLDEST], limit=5, context_lines=3)

    assert block.is_creation
    assert block.older_label == "(initial)"
    assert block.snippet is None
    assert block.lines == (f"(code for commit {'c' * 12} is not available)",)
