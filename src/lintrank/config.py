# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Configuration model and loaders for lintrank."""

from __future__ import annotations

import logging
import tomllib
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Final

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from lintrank.analysis.priority import PriorityLevel, RuleLevelMap
from lintrank.core.errors import ConfigError
from lintrank.interfaces.vcs import DiffDescriptor

LOGGER = logging.getLogger(__name__)

PYPROJECT_FILENAME: Final[str] = "pyproject.toml"
STANDALONE_FILENAME: Final[str] = ".lintrank.toml"
PYPROJECT_TOOL_KEY: Final[str] = "tool"
PYPROJECT_SECTION_KEY: Final[str] = "lintrank"
DEFAULT_DIFF_SOURCES: Final[tuple[DiffDescriptor, ...]] = ("upstream", "workspace", "index")


class LintRankConfig(BaseModel):
    """Tunable settings for ordering and report assembly.

    Attributes:
        tab_width: Visual width of a tab stop used by the column mapper.
        diff_context: Unchanged context lines requested from ``git diff``.
        snippet_context: Lines shown on each side of the pointer line.
        max_duplicates: Maximum duplicate pairs listed in the report.
        diff_sources: Comparison sources tried in order for each diagnostic.
        upstream_ref: Base revision for the ``upstream`` comparison; detected
            from the tracking branch when unset.
        git_timeout: Seconds allowed for each git invocation.
        max_workers: Thread count used to fetch diff context.
        history_limit: Commits requested when reading line history.
        priority_levels: Optional rule groups used to rank sections.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    tab_width: int = Field(default=8, ge=1)
    diff_context: int = Field(default=3, ge=0)
    snippet_context: int = Field(default=2, ge=0)
    max_duplicates: int = Field(default=20, ge=0)
    diff_sources: tuple[DiffDescriptor, ...] = DEFAULT_DIFF_SOURCES
    upstream_ref: str | None = None
    git_timeout: float = Field(default=10.0, gt=0)
    max_workers: int = Field(default=4, ge=1)
    history_limit: int = Field(default=5, ge=1)
    priority_levels: tuple[PriorityLevel, ...] = ()

    @field_validator("diff_sources", mode="after")
    @classmethod
    def _dedupe_sources(cls, value: tuple[DiffDescriptor, ...]) -> tuple[DiffDescriptor, ...]:
        """Drop repeated comparison sources while keeping their order."""

        if not value:
            raise ValueError("at least one diff source is required")
        return tuple(dict.fromkeys(value))

    @property
    def rule_levels(self) -> RuleLevelMap | None:
        """Return the priority lookup or ``None`` when no levels are configured."""

        if not self.priority_levels:
            return None
        return RuleLevelMap.from_levels(self.priority_levels)


def _normalise_keys(payload: Mapping[str, Any]) -> dict[str, Any]:
    return {str(key).replace("-", "_"): value for key, value in payload.items()}


def _read_toml(path: Path) -> dict[str, Any]:
    try:
        with path.open("rb") as handle:
            return tomllib.load(handle)
    except (OSError, tomllib.TOMLDecodeError) as exc:
        raise ConfigError(f"cannot read configuration from {path}: {exc}") from exc


def _pyproject_section(path: Path) -> dict[str, Any]:
    if not path.is_file():
        return {}
    document = _read_toml(path)
    tool_section = document.get(PYPROJECT_TOOL_KEY, {})
    section = tool_section.get(PYPROJECT_SECTION_KEY, {}) if isinstance(tool_section, Mapping) else {}
    if not isinstance(section, Mapping):
        raise ConfigError(f"[tool.{PYPROJECT_SECTION_KEY}] in {path} must be a table")
    return _normalise_keys(section)


def _standalone_section(path: Path) -> dict[str, Any]:
    if not path.is_file():
        return {}
    return _normalise_keys(_read_toml(path))


def load_config(root: Path, overrides: Mapping[str, Any] | None = None) -> LintRankConfig:
    """Load configuration for the workspace at ``root``.

    ``[tool.lintrank]`` in ``pyproject.toml`` is read first, then
    ``.lintrank.toml`` and finally ``overrides``; later sources win per key.

    Args:
        root: Workspace directory.
        overrides: Explicit values, typically from command-line options.
            ``None`` values are ignored.

    Returns:
        LintRankConfig: Validated configuration.

    Raises:
        ConfigError: If a file cannot be parsed or a value is invalid.
    """

    merged: dict[str, Any] = {}
    merged.update(_pyproject_section(root / PYPROJECT_FILENAME))
    merged.update(_standalone_section(root / STANDALONE_FILENAME))
    if overrides:
        merged.update({key: value for key, value in _normalise_keys(overrides).items() if value is not None})
    try:
        config = LintRankConfig.model_validate(merged)
    except ValidationError as exc:
        raise ConfigError(f"invalid lintrank configuration: {exc}") from exc
    LOGGER.debug("loaded configuration for %s: %s", root, config)
    return config


__all__ = ["DEFAULT_DIFF_SOURCES", "LintRankConfig", "load_config"]
