# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Core data models shared across the lintrank package."""

from __future__ import annotations

import os
from functools import lru_cache
from typing import Final, Literal, TypeAlias

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from lintrank.core.severity import Severity, coerce_severity

DiagnosticId: TypeAlias = str
DiffSymbol: TypeAlias = Literal["+", "-", " "]
ColumnKind: TypeAlias = Literal["visual", "real"]

NO_RULE: Final[str] = "no-rule"
_PATH_CACHE_SIZE: Final[int] = 1024


@lru_cache(maxsize=_PATH_CACHE_SIZE)
def resolve_file_path(path: str) -> str:
    """Return the absolute, normalised form of ``path`` without touching symlinks.

    Args:
        path: File path as reported by an analysis tool.

    Returns:
        str: Absolute path used as the file component of diagnostic identifiers.
    """

    return os.path.normpath(os.path.abspath(os.path.expanduser(path)))


class Diagnostic(BaseModel):
    """Standardize diagnostics emitted by the aggregated tools into one schema.

    Lines are 1-based. Columns are 1-based and, unless ``column_kind`` says
    otherwise, expressed in visual units where a tab advances to the next tab
    stop.
    """

    model_config = ConfigDict(frozen=True)

    file_path: str
    line: int = Field(ge=1)
    column: int = Field(default=1, ge=1)
    end_line: int | None = Field(default=None, ge=1)
    end_column: int | None = Field(default=None, ge=1)
    severity: Severity = Severity.ERROR
    message: str
    source: str
    rule: str | None = None
    column_kind: ColumnKind = "visual"

    @field_validator("severity", mode="before")
    @classmethod
    def _coerce_severity(cls, value: Severity | int | str | None) -> Severity:
        """Accept numeric and textual severities from tool payloads.

        Args:
            value: Raw severity value.

        Returns:
            Severity: Normalised severity enumeration member.
        """

        return coerce_severity(value)

    @field_validator("rule", mode="before")
    @classmethod
    def _blank_rule_is_missing(cls, value: str | int | None) -> str | None:
        """Treat blank rule identifiers as absent and stringify numeric codes.

        Args:
            value: Raw rule identifier or compiler code.

        Returns:
            str | None: Normalised rule identifier.
        """

        if value is None:
            return None
        text = str(value).strip()
        return text or None

    @model_validator(mode="after")
    def _check_range(self) -> Diagnostic:
        """Reject end positions that precede the start position.

        Returns:
            Diagnostic: The validated diagnostic.

        Raises:
            ValueError: If the end line lies before the start line.
        """

        if self.end_line is not None and self.end_line < self.line:
            raise ValueError("end_line must not precede line")
        return self

    @property
    def resolved_path(self) -> str:
        """Return the absolute path of the file the diagnostic refers to."""

        return resolve_file_path(self.file_path)

    @property
    def rule_id(self) -> str:
        """Return the rule identifier or :data:`NO_RULE` when the tool gave none."""

        return self.rule or NO_RULE


def diagnostic_id(diagnostic: Diagnostic) -> DiagnosticId:
    """Return the canonical identifier used as the graph node key.

    Args:
        diagnostic: Diagnostic to identify.

    Returns:
        DiagnosticId: ``"<resolved file>:<line>:<column>:<source>:<rule>"``.
    """

    return (
        f"{diagnostic.resolved_path}:{diagnostic.line}:{diagnostic.column}:"
        f"{diagnostic.source}:{diagnostic.rule_id}"
    )


class Edge(BaseModel):
    """Directed dependency between two diagnostics.

    ``source_id`` marks the location that defines or exports something which
    the location identified by ``target_id`` uses.
    """

    model_config = ConfigDict(frozen=True)

    source_id: DiagnosticId
    target_id: DiagnosticId

    def as_tuple(self) -> tuple[DiagnosticId, DiagnosticId]:
        """Return the edge as a ``(source, target)`` tuple."""

        return self.source_id, self.target_id


class DiffSnippetLine(BaseModel):
    """Single line of a unified-diff hunk anchored to the post-change file."""

    model_config = ConfigDict(frozen=True)

    content: str
    symbol: DiffSymbol
    head_line_number: int | None

    @model_validator(mode="after")
    def _removed_lines_have_no_head_line(self) -> DiffSnippetLine:
        """Enforce that only removed lines lack a head line number.

        Returns:
            DiffSnippetLine: The validated line.

        Raises:
            ValueError: If the head line number disagrees with ``symbol``.
        """

        if (self.symbol == "-") != (self.head_line_number is None):
            raise ValueError("head_line_number must be None exactly for removed lines")
        return self


class DiffSnippet(BaseModel):
    """Hunk of a unified diff together with the line matching the requested target."""

    model_config = ConfigDict(frozen=True)

    header: str
    lines: tuple[DiffSnippetLine, ...] = Field(default_factory=tuple)
    pointer_index: int | None = None

    @property
    def head_line_numbers(self) -> tuple[int | None, ...]:
        """Return the head line number of every line in hunk order."""

        return tuple(line.head_line_number for line in self.lines)

    @property
    def pointer_line(self) -> DiffSnippetLine | None:
        """Return the line addressed by :attr:`pointer_index` when present."""

        if self.pointer_index is None:
            return None
        return self.lines[self.pointer_index]


class SnippetSelection(BaseModel):
    """Snippet chosen from an ordered list of diff candidates."""

    model_config = ConfigDict(frozen=True)

    snippet: DiffSnippet
    index: int = Field(ge=0)


class DuplicatePair(BaseModel):
    """Pair of duplicated regions, each an inclusive 1-based line range."""

    model_config = ConfigDict(frozen=True)

    file_a: str
    start_a: int
    end_a: int
    file_b: str
    start_b: int
    end_b: int

    @property
    def span_a(self) -> int:
        """Return the number of lines covered by the first region."""

        return self.end_a - self.start_a + 1


__all__ = [
    "NO_RULE",
    "ColumnKind",
    "Diagnostic",
    "DiagnosticId",
    "DiffSnippet",
    "DiffSnippetLine",
    "DiffSymbol",
    "DuplicatePair",
    "Edge",
    "SnippetSelection",
    "diagnostic_id",
    "resolve_file_path",
]
