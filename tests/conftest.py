# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared pytest fixtures."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

from lintrank.core.models import Diagnostic
from lintrank.interfaces.vcs import DiffDescriptor, DiffSource

DiagnosticFactory = Callable[..., Diagnostic]


@pytest.fixture
def make_diagnostic() -> DiagnosticFactory:
    """Return a factory building diagnostics with sensible defaults."""

    def _factory(file_path: str | Path = "src/app.py", line: int = 1, **overrides: Any) -> Diagnostic:
        payload: dict[str, Any] = {
            "file_path": str(file_path),
            "line": line,
            "message": "problem",
            "source": "ruff",
            "rule": "E001",
        }
        payload.update(overrides)
        return Diagnostic(**payload)

    return _factory


class FakeDiffSource(DiffSource):
    """Diff source returning canned text and recording every request."""

    def __init__(
        self,
        diffs: dict[DiffDescriptor, str] | None = None,
        *,
        blame: str = "",
        history: str = "",
        commit_diffs: dict[tuple[str, str], str] | None = None,
    ) -> None:
        self.diffs = diffs or {}
        self.blame = blame
        self.history = history
        self.commit_diffs = commit_diffs or {}
        self.calls: list[tuple[str, ...]] = []

    def raw_diff(self, file_path: str, descriptor: DiffDescriptor, context_lines: int) -> str:
        self.calls.append(("diff", file_path, descriptor, str(context_lines)))
        return self.diffs.get(descriptor, "")

    def raw_blame(self, file_path: str, line: int, context_lines: int) -> str:
        self.calls.append(("blame", file_path, str(line)))
        return self.blame

    def raw_history(self, file_path: str, line: int, limit: int) -> str:
        self.calls.append(("history", file_path, str(line)))
        return self.history

    def raw_commit_diff(self, file_path: str, older: str, newer: str, context_lines: int) -> str:
        self.calls.append(("commit_diff", file_path, older, newer))
        return self.commit_diffs.get((older, newer), "")


@pytest.fixture
def fake_diff_source() -> type[FakeDiffSource]:
    """Return the fake diff source class for tests that configure canned output."""

    return FakeDiffSource


def write_typed_project(root: Path, files: dict[str, str]) -> None:
    """Create a Python project with a mypy configuration and ``files``."""

    (root / "pyproject.toml").write_text("[tool.mypy]\nstrict = true\n", encoding="utf-8")
    for relative, content in files.items():
        target = root / relative
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content, encoding="utf-8")
