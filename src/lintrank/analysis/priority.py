# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Priority levels assigned to diagnostics through configured rule groups."""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from typing import Final

from pydantic import BaseModel, ConfigDict, Field, field_validator

from lintrank.core.models import Diagnostic

DEFAULT_LEVEL: Final[int] = 2
DEFAULT_LEVEL_NAME: Final[str] = "Critical Compiler Errors"
ALL_RULES: Final[str] = "all"
UNKNOWN_RULE: Final[str] = "unknown"
SECTION_LIMIT: Final[int] = 15


class RuleLevel(BaseModel):
    """Numeric priority level paired with its display name."""

    model_config = ConfigDict(frozen=True)

    level: int = Field(ge=0)
    name: str


class PriorityLevel(RuleLevel):
    """Configured priority group listing the rules it covers.

    The special rule name ``"all"`` applies the group to every rule that no
    other group names explicitly.
    """

    rules: tuple[str, ...] = ()

    @field_validator("rules", mode="before")
    @classmethod
    def _normalise_rules(cls, value: Iterable[str] | str) -> tuple[str, ...]:
        """Lowercase rule identifiers and accept a single string.

        Args:
            value: Rule identifier or collection of identifiers.

        Returns:
            tuple[str, ...]: Normalised rule identifiers.
        """

        items = [value] if isinstance(value, str) else list(value)
        return tuple(str(item).strip().lower() for item in items if str(item).strip())


class RuleLevelMap(BaseModel):
    """Lookup from rule identifiers to priority levels."""

    model_config = ConfigDict(frozen=True)

    explicit_rules: Mapping[str, RuleLevel] = Field(default_factory=dict)
    all_level: RuleLevel | None = None

    @classmethod
    def from_levels(cls, levels: Sequence[PriorityLevel]) -> RuleLevelMap:
        """Build a map from configured priority groups.

        Later groups override earlier ones for the same rule.

        Args:
            levels: Configured priority groups.

        Returns:
            RuleLevelMap: Lookup table for :func:`priority_level`.
        """

        explicit: dict[str, RuleLevel] = {}
        all_level: RuleLevel | None = None
        for entry in levels:
            level = RuleLevel(level=entry.level, name=entry.name)
            for rule in entry.rules:
                if rule == ALL_RULES:
                    all_level = level
                else:
                    explicit[rule] = level
        return cls(explicit_rules=explicit, all_level=all_level)

    def lookup(self, rule_id: str) -> RuleLevel | None:
        """Return the level for ``rule_id`` falling back to the ``all`` group."""

        return self.explicit_rules.get(rule_id, self.all_level)


def priority_rule_id(diagnostic: Diagnostic) -> str:
    """Return the lowercase rule identifier used for priority lookups."""

    return diagnostic.rule.lower() if diagnostic.rule else UNKNOWN_RULE


def _resolve(diagnostic: Diagnostic, rule_levels: RuleLevelMap | None) -> RuleLevel | None:
    if rule_levels is None:
        return None
    return rule_levels.lookup(priority_rule_id(diagnostic))


def priority_level(diagnostic: Diagnostic, rule_levels: RuleLevelMap | None) -> int:
    """Return the numeric priority of ``diagnostic``; lower values come first."""

    resolved = _resolve(diagnostic, rule_levels)
    return resolved.level if resolved is not None else DEFAULT_LEVEL


def priority_name(diagnostic: Diagnostic, rule_levels: RuleLevelMap | None) -> str:
    """Return the display name of the priority group of ``diagnostic``."""

    resolved = _resolve(diagnostic, rule_levels)
    return resolved.name if resolved is not None else DEFAULT_LEVEL_NAME


def group_by_level(
    diagnostics: Iterable[Diagnostic],
    rule_levels: RuleLevelMap | None,
) -> dict[int, list[Diagnostic]]:
    """Group diagnostics by priority level, sorted by ascending level.

    Args:
        diagnostics: Diagnostics in presentation order.
        rule_levels: Optional rule lookup.

    Returns:
        dict[int, list[Diagnostic]]: Diagnostics per level; each list keeps
        the input order.
    """

    grouped: dict[int, list[Diagnostic]] = {}
    for diagnostic in diagnostics:
        grouped.setdefault(priority_level(diagnostic, rule_levels), []).append(diagnostic)
    return dict(sorted(grouped.items()))


def group_by_sections(
    diagnostics: Sequence[Diagnostic],
    rule_levels: RuleLevelMap | None,
    *,
    limit: int = SECTION_LIMIT,
) -> dict[str, list[Diagnostic]]:
    """Group the first ``limit`` diagnostics by priority name.

    Args:
        diagnostics: Diagnostics in presentation order.
        rule_levels: Optional rule lookup.
        limit: Number of leading diagnostics to consider.

    Returns:
        dict[str, list[Diagnostic]]: Sections in first-encounter order.
    """

    sections: dict[str, list[Diagnostic]] = {}
    for diagnostic in diagnostics[: max(0, limit)]:
        sections.setdefault(priority_name(diagnostic, rule_levels), []).append(diagnostic)
    return sections


__all__ = [
    "DEFAULT_LEVEL",
    "DEFAULT_LEVEL_NAME",
    "PriorityLevel",
    "RuleLevel",
    "RuleLevelMap",
    "group_by_level",
    "group_by_sections",
    "priority_level",
    "priority_name",
    "priority_rule_id",
]
