# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for configuration loading."""

from __future__ import annotations

from pathlib import Path

import pytest

from lintrank.config import DEFAULT_DIFF_SOURCES, LintRankConfig, load_config
from lintrank.core.errors import ConfigError


def test_defaults_without_configuration(tmp_path: Path) -> None:
    config = load_config(tmp_path)

    assert config == LintRankConfig()
    assert config.tab_width == 8
    assert config.diff_sources == DEFAULT_DIFF_SOURCES
    assert config.rule_levels is None


def test_pyproject_section_accepts_kebab_case(tmp_path: Path) -> None:
    (tmp_path / "pyproject.toml").write_text(
        "\n".join(
            [
                "[tool.lintrank]",
                "tab-width = 4",
                'diff-sources = ["workspace", "index", "workspace"]',
                'upstream-ref = "origin/develop"',
                "",
                "[[tool.lintrank.priority-levels]]",
                "level = 0",
                'name = "Type errors"',
                'rules = ["TS2304", "TS2322"]',
                "",
                "[[tool.lintrank.priority-levels]]",
                "level = 9",
                'name = "Everything else"',
                'rules = "all"',
            ]
        ),
        encoding="utf-8",
    )

    config = load_config(tmp_path)

    assert config.tab_width == 4
    assert config.diff_sources == ("workspace", "index")
    assert config.upstream_ref == "origin/develop"
    rule_levels = config.rule_levels
    assert rule_levels is not None
    assert rule_levels.lookup("ts2322") is not None
    assert rule_levels.lookup("ts2322").name == "Type errors"  # type: ignore[union-attr]
    assert rule_levels.lookup("e501").level == 9  # type: ignore[union-attr]


def test_standalone_file_and_overrides_take_precedence(tmp_path: Path) -> None:
    (tmp_path / "pyproject.toml").write_text("[tool.lintrank]\nmax-duplicates = 5\ndiff-context = 1\n", encoding="utf-8")
    (tmp_path / ".lintrank.toml").write_text("max-duplicates = 7\nhistory-limit = 2\n", encoding="utf-8")

    config = load_config(tmp_path, {"max_duplicates": 9, "history_limit": None})

    assert config.max_duplicates == 9
    assert config.history_limit == 2
    assert config.diff_context == 1


def test_unrelated_pyproject_is_ignored(tmp_path: Path) -> None:
    (tmp_path / "pyproject.toml").write_text('[project]\nname = "demo"\n', encoding="utf-8")

    assert load_config(tmp_path) == LintRankConfig()


@pytest.mark.parametrize(
    "content",
    [
        "[tool.lintrank\n",
        "[tool.lintrank]\ntab-width = 0\n",
        "[tool.lintrank]\nunknown-key = true\n",
        '[tool.lintrank]\ndiff-sources = ["stash"]\n',
        "[tool.lintrank]\ndiff-sources = []\n",
        "[tool]\nlintrank = 3\n",
    ],
)
def test_invalid_configuration_raises_config_error(tmp_path: Path, content: str) -> None:
    (tmp_path / "pyproject.toml").write_text(content, encoding="utf-8")

    with pytest.raises(ConfigError):
        load_config(tmp_path)
