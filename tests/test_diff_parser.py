# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for unified-diff snippet extraction and selection."""

from __future__ import annotations

import pytest

from lintrank.core.errors import InvalidArgumentError
from lintrank.diff.parser import extract_diff_snippet, parse_hunk_header, pick_snippet_for_line

INSERTION_DIFF = "\n".join(
    [
        "diff --git a/src/app.ts b/src/app.ts",
        "index 1111111..2222222 100644",
        "--- a/src/app.ts",
        "+++ b/src/app.ts",
        "@@ -14,2 +120,4 @@",
        " context-one",
        "+inserted-one",
        "+inserted-two",
        " context-two",
    ]
)


def test_target_outside_hunk_returns_none() -> None:
    assert extract_diff_snippet("@@ -1,2 +50,2 @@\n ctx\n+change\n ctx", 10) is None


def test_pointer_marks_target_line() -> None:
    snippet = extract_diff_snippet(INSERTION_DIFF, 121)

    assert snippet is not None
    assert snippet.header == "@@ -14,2 +120,4 @@"
    assert snippet.pointer_index == 1
    assert snippet.head_line_numbers == (120, 121, 122, 123)
    assert snippet.pointer_line is not None
    assert snippet.pointer_line.content == "inserted-one"
    assert snippet.pointer_line.symbol == "+"


def test_removed_lines_do_not_advance_head_counter() -> None:
    diff = "@@ -5,3 +5,2 @@\n keep\n-gone\n+new\n-also gone\n tail"
    snippet = extract_diff_snippet(diff, 7)

    assert snippet is not None
    assert snippet.head_line_numbers == (5, None, 6, None, 7)
    assert [line.symbol for line in snippet.lines] == [" ", "-", "+", "-", " "]
    assert snippet.pointer_index == 4


def test_first_matching_hunk_wins() -> None:
    diff = "@@ -1,1 +1,2 @@\n a\n+b\n@@ -9,1 +10,1 @@\n+late"
    snippet = extract_diff_snippet(diff, 10)

    assert snippet is not None
    assert snippet.header == "@@ -9,1 +10,1 @@"
    assert snippet.lines[0].content == "late"


def test_no_newline_marker_is_ignored() -> None:
    diff = "@@ -1 +1 @@\n-old\n\\ No newline at end of file\n+new\n\\ No newline at end of file"
    snippet = extract_diff_snippet(diff, 1)

    assert snippet is not None
    assert [line.content for line in snippet.lines] == ["old", "new"]
    assert snippet.pointer_index == 1


def test_file_header_ends_previous_hunk() -> None:
    diff = "\n".join(
        [
            "diff --git a/one.py b/one.py",
            "@@ -1,1 +1,1 @@",
            "+one",
            "diff --git a/two.py b/two.py",
            "--- a/two.py",
            "+++ b/two.py",
            "@@ -3,1 +3,1 @@",
            "+two",
        ]
    )

    first = extract_diff_snippet(diff, 1)
    second = extract_diff_snippet(diff, 3)

    assert first is not None and len(first.lines) == 1
    assert second is not None and second.lines[0].content == "two"


def test_hunk_header_without_counts() -> None:
    assert parse_hunk_header("@@ -3 +7 @@ def handler():") == 7
    assert parse_hunk_header(" context") is None


def test_non_positive_target_is_rejected() -> None:
    with pytest.raises(InvalidArgumentError):
        extract_diff_snippet(INSERTION_DIFF, 0)
    with pytest.raises(InvalidArgumentError):
        pick_snippet_for_line([INSERTION_DIFF], -1)


def test_pick_returns_index_of_matching_candidate() -> None:
    diff_a = "@@ -1,1 +1,1 @@\n+elsewhere"
    selection = pick_snippet_for_line([diff_a, INSERTION_DIFF], 122)

    assert selection is not None
    assert selection.index == 1
    assert selection.snippet.pointer_index == 2


def test_pick_skips_blank_candidates() -> None:
    selection = pick_snippet_for_line(["", "   \n", INSERTION_DIFF], 120)

    assert selection is not None
    assert selection.index == 2


def test_pick_without_match_returns_none() -> None:
    assert pick_snippet_for_line(["@@ -1,1 +1,1 @@\n+x"], 50) is None
    assert pick_snippet_for_line([], 1) is None


def test_unicode_line_separators_stay_inside_one_row() -> None:
    diff = "@@ -1,0 +1,2 @@\n+s = 'a\u2028 b'\n+target = 1\n"
    snippet = extract_diff_snippet(diff, 2)

    assert snippet is not None
    assert snippet.head_line_numbers == (1, 2)
    assert snippet.pointer_line is not None
    assert snippet.pointer_line.content == "target = 1"


def test_crlf_rows_are_trimmed() -> None:
    snippet = extract_diff_snippet("@@ -1,1 +1,2 @@\r\n keep\r\n+x = '\x0c'\r\n", 2)

    assert snippet is not None
    assert [line.content for line in snippet.lines] == ["keep", "x = '\x0c'"]
    assert snippet.pointer_index == 1
