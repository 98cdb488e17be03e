# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Parse ``git blame --line-porcelain`` output."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Final

from lintrank.diff.parser import split_lines

SHORT_HASH_LENGTH: Final[int] = 12
UNKNOWN_AUTHOR: Final[str] = "unknown"
UNKNOWN_DATE: Final[str] = "unknown-date"
NO_SUMMARY: Final[str] = "(no summary)"

_HEADER_PATTERN: Final[re.Pattern[str]] = re.compile(r"^(?P<hash>[0-9a-f]{40}|[0-9a-f]{64}) \d+ (?P<final>\d+)(?: \d+)?$")
_ZERO_HASH_PATTERN: Final[re.Pattern[str]] = re.compile(r"^0+$")


@dataclass(frozen=True, slots=True)
class BlameInfo:
    """Last commit that touched a line.

    ``date`` is the author date as ``YYYY-MM-DD`` in UTC.
    """

    line: int
    commit_hash: str
    author: str = UNKNOWN_AUTHOR
    date: str = UNKNOWN_DATE
    summary: str = NO_SUMMARY
    code: str = ""

    @property
    def short_hash(self) -> str:
        return self.commit_hash[:SHORT_HASH_LENGTH]

    @property
    def is_uncommitted(self) -> bool:
        """Return ``True`` for lines git reports as "Not Committed Yet"."""

        return bool(_ZERO_HASH_PATTERN.match(self.commit_hash))


@dataclass(slots=True)
class _Record:
    commit_hash: str
    line: int
    fields: dict[str, str] = field(default_factory=dict)
    code: str | None = None


def _format_epoch(raw: str | None) -> str:
    if raw is None:
        return UNKNOWN_DATE
    try:
        return datetime.fromtimestamp(int(raw.strip()), tz=UTC).strftime("%Y-%m-%d")
    except (ValueError, OverflowError, OSError):
        return UNKNOWN_DATE


def _records(text: str) -> list[_Record]:
    records: list[_Record] = []
    current: _Record | None = None
    for row in split_lines(text):
        if row.startswith("\t"):
            if current is not None:
                current.code = row[1:]
                records.append(current)
                current = None
            continue
        header = _HEADER_PATTERN.match(row)
        if header is not None:
            current = _Record(commit_hash=header["hash"], line=int(header["final"]))
            continue
        if current is not None:
            key, _, value = row.partition(" ")
            current.fields.setdefault(key, value)
    return records


def parse_blame(text: str, line: int) -> BlameInfo | None:
    """Return blame details for ``line`` from porcelain ``text``.

    Args:
        text: Output of ``git blame --line-porcelain`` covering ``line``.
        line: One-based line number in the current file.

    Returns:
        BlameInfo | None: Details of the record for ``line``, falling back to
        the first record; ``None`` when ``text`` holds no records.
    """

    records = _records(text)
    if not records:
        return None
    record = next((entry for entry in records if entry.line == line), records[0])
    author = record.fields.get("author", "").strip()
    summary = record.fields.get("summary", "").strip()
    return BlameInfo(
        line=record.line,
        commit_hash=record.commit_hash,
        author=author or UNKNOWN_AUTHOR,
        date=_format_epoch(record.fields.get("author-time")),
        summary=summary or NO_SUMMARY,
        code=record.code or "",
    )


__all__ = ["BlameInfo", "parse_blame"]
