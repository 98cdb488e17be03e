# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for the file lines shown around a diagnostic."""

from __future__ import annotations

from pathlib import Path

import pytest
from conftest import DiagnosticFactory

from lintrank.core.errors import InvalidArgumentError
from lintrank.report.file_context import build_file_context, read_source_lines

LINES = ["import os", "", "value = compute(1)", "other = 2", "last = 3"]
GUTTER = " " * 9


def test_context_marks_target_line_and_underlines_column(make_diagnostic: DiagnosticFactory) -> None:
    rendered = build_file_context(LINES, make_diagnostic(line=3, column=9), context_lines=1)

    assert len(rendered) == 4
    assert rendered[0] == "     2 | "
    assert rendered[1] == ">    3 | value = compute(1)"
    assert rendered[2].rstrip() == GUTTER + " " * 8 + "^"
    assert rendered[3] == "     4 | other = 2"


def test_lines_already_in_diff_block_are_skipped(make_diagnostic: DiagnosticFactory) -> None:
    rendered = build_file_context(
        LINES, make_diagnostic(line=3, column=9), context_lines=1, shown_lines=frozenset({2, 3})
    )

    assert rendered == ("     4 | other = 2",)


def test_window_is_clamped_to_the_file(make_diagnostic: DiagnosticFactory) -> None:
    first = build_file_context(LINES, make_diagnostic(line=1), context_lines=2)
    last = build_file_context(LINES, make_diagnostic(line=5), context_lines=2)

    assert first[0] == ">    1 | import os"
    assert [line[:6] for line in first if not line.startswith(GUTTER)] == [">    1", "     2", "     3"]
    assert last[-2] == ">    5 | last = 3"
    assert build_file_context(LINES, make_diagnostic(line=40), context_lines=2) == ()


def test_tabs_are_expanded_with_configured_width(make_diagnostic: DiagnosticFactory) -> None:
    rendered = build_file_context(["\tx = 1"], make_diagnostic(line=1, column=5), context_lines=0, tab_width=4)

    assert rendered[0] == ">    1 |     x = 1"
    assert rendered[1].rstrip() == GUTTER + "    ^"


def test_negative_context_is_rejected(make_diagnostic: DiagnosticFactory) -> None:
    with pytest.raises(InvalidArgumentError):
        build_file_context(LINES, make_diagnostic(line=1), context_lines=-1)


def test_read_source_lines(tmp_path: Path) -> None:
    source = tmp_path / "app.py"
    source.write_bytes(b"a = 1\r\nb = '\x0c'\n")

    assert read_source_lines(source) == ["a = 1", "b = '\x0c'"]
    assert read_source_lines(tmp_path / "missing.py") is None
