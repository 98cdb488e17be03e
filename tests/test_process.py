# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for subprocess execution helpers."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

from lintrank.core.errors import VcsCommandError
from lintrank.core.runtime.process import TIMEOUT_RETURNCODE, CommandOptions, run_command


def test_run_command_captures_output(tmp_path: Path) -> None:
    completed = run_command(
        [sys.executable, "-c", "import os; print(os.getcwd())"],
        options=CommandOptions(cwd=tmp_path),
    )

    assert completed.returncode == 0
    assert Path(completed.stdout.strip()).resolve() == tmp_path.resolve()


def test_run_command_check_raises_on_failure() -> None:
    with pytest.raises(VcsCommandError) as excinfo:
        run_command(
            [sys.executable, "-c", "import sys; sys.stderr.write('boom'); sys.exit(3)"],
            options=CommandOptions(check=True),
        )

    assert excinfo.value.returncode == 3
    assert "boom" in str(excinfo.value)


def test_run_command_timeout_reports_status() -> None:
    completed = run_command(
        [sys.executable, "-c", "import time; time.sleep(5)"],
        options=CommandOptions(timeout=0.2),
    )

    assert completed.returncode == TIMEOUT_RETURNCODE
    assert "timed out" in completed.stderr


def test_missing_executable_raises_file_not_found() -> None:
    with pytest.raises(FileNotFoundError):
        run_command(["lintrank-definitely-missing-binary"])


def test_negative_timeout_is_rejected() -> None:
    with pytest.raises(ValueError):
        CommandOptions(timeout=-1)
