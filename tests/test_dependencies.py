# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for dependency edge construction from the Python program model."""

from __future__ import annotations

from pathlib import Path

from conftest import DiagnosticFactory, write_typed_project

from lintrank.analysis.dependencies import build_edges
from lintrank.analysis.program import AstProgramModel
from lintrank.core.models import Edge, diagnostic_id

HELPERS = "def compute(value):\n    return value + 1\n"
MAIN = "from pkg.helpers import compute\n\n\ndef run():\n    return compute(2)\n"


def _project(root: Path, main: str = MAIN) -> None:
    write_typed_project(
        root,
        {
            "pkg/__init__.py": "",
            "pkg/helpers.py": HELPERS,
            "pkg/main.py": main,
        },
    )


def test_use_depends_on_diagnostic_inside_declaration(tmp_path: Path, make_diagnostic: DiagnosticFactory) -> None:
    _project(tmp_path)
    use = make_diagnostic(tmp_path / "pkg" / "main.py", line=5, column=12)
    declaration = make_diagnostic(tmp_path / "pkg" / "helpers.py", line=2, column=5)

    edges = build_edges([use, declaration], AstProgramModel(tmp_path))

    assert edges == [Edge(source_id=diagnostic_id(declaration), target_id=diagnostic_id(use))]


def test_import_fallback_links_first_diagnostic_of_imported_module(
    tmp_path: Path, make_diagnostic: DiagnosticFactory
) -> None:
    _project(tmp_path, main="import pkg.helpers\n\nVALUE = 1\n")
    use = make_diagnostic(tmp_path / "pkg" / "main.py", line=3, column=1)
    first = make_diagnostic(tmp_path / "pkg" / "helpers.py", line=1, column=5)
    second = make_diagnostic(tmp_path / "pkg" / "helpers.py", line=2, column=5)

    edges = build_edges([use, first, second], AstProgramModel(tmp_path))

    assert Edge(source_id=diagnostic_id(first), target_id=diagnostic_id(use)) in edges
    assert all(edge.source_id != diagnostic_id(second) for edge in edges)


def test_edges_are_distinct_and_never_self_referencing(tmp_path: Path, make_diagnostic: DiagnosticFactory) -> None:
    _project(tmp_path)
    diagnostics = [
        make_diagnostic(tmp_path / "pkg" / "main.py", line=5, column=12),
        make_diagnostic(tmp_path / "pkg" / "main.py", line=4, column=1),
        make_diagnostic(tmp_path / "pkg" / "helpers.py", line=1, column=5),
        make_diagnostic(tmp_path / "pkg" / "helpers.py", line=2, column=12),
    ]

    edges = build_edges(diagnostics, AstProgramModel(tmp_path))

    assert edges
    assert len({edge.as_tuple() for edge in edges}) == len(edges)
    assert all(edge.source_id != edge.target_id for edge in edges)


def test_diagnostics_outside_the_program_are_skipped(tmp_path: Path, make_diagnostic: DiagnosticFactory) -> None:
    _project(tmp_path)
    (tmp_path / "notes.md").write_text("# notes\n", encoding="utf-8")
    diagnostics = [
        make_diagnostic(tmp_path / "notes.md", line=1),
        make_diagnostic(tmp_path / "missing.py", line=1),
    ]

    assert build_edges(diagnostics, AstProgramModel(tmp_path)) == []


def test_no_type_check_configuration_yields_no_edges(tmp_path: Path, make_diagnostic: DiagnosticFactory) -> None:
    (tmp_path / "pkg").mkdir()
    (tmp_path / "pkg" / "helpers.py").write_text(HELPERS, encoding="utf-8")
    (tmp_path / "pkg" / "main.py").write_text(MAIN, encoding="utf-8")
    diagnostics = [
        make_diagnostic(tmp_path / "pkg" / "main.py", line=5, column=12),
        make_diagnostic(tmp_path / "pkg" / "helpers.py", line=2, column=5),
    ]

    assert build_edges(diagnostics, AstProgramModel(tmp_path)) == []


def test_missing_program_model_yields_no_edges(make_diagnostic: DiagnosticFactory) -> None:
    assert build_edges([make_diagnostic()], None) == []


def test_empty_diagnostics_yield_no_edges(tmp_path: Path) -> None:
    _project(tmp_path)

    assert build_edges([], AstProgramModel(tmp_path)) == []


TABBED = "def run():\n\treturn compute(1)\n\n\n\ndef compute(value):\n\treturn value\n"


def test_visual_columns_follow_configured_tab_width(tmp_path: Path, make_diagnostic: DiagnosticFactory) -> None:
    write_typed_project(tmp_path, {"pkg/__init__.py": "", "pkg/tabbed.py": TABBED})
    # With four-column tabs, visual column 12 on line 2 is the ``c`` of ``compute``.
    use = make_diagnostic(tmp_path / "pkg" / "tabbed.py", line=2, column=12)
    declaration = make_diagnostic(tmp_path / "pkg" / "tabbed.py", line=7, column=5)

    narrow = build_edges([use, declaration], AstProgramModel(tmp_path), tab_width=4)
    default = build_edges([use, declaration], AstProgramModel(tmp_path))

    assert narrow == [Edge(source_id=diagnostic_id(declaration), target_id=diagnostic_id(use))]
    assert default == []
