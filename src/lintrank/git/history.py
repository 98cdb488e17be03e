# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Parse ``git log -L`` output into per-commit history entries."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from typing import Final

from lintrank.core.errors import InvalidArgumentError
from lintrank.diff.parser import split_lines

SHORT_HASH_LENGTH: Final[int] = 12
# Object id of the empty tree; diffing against it shows a file's first commit in full.
EMPTY_TREE_HASH: Final[str] = "4b825dc642cb6eb9a060e54bf8d69288fbee4904"
SUMMARY_LIMIT: Final[int] = 100
UNKNOWN_AUTHOR: Final[str] = "unknown"
UNKNOWN_DATE: Final[str] = "unknown-date"
NO_SUBJECT: Final[str] = "(no subject)"
_COMMIT_PREFIX: Final[str] = "commit "
_AUTHOR_PREFIX: Final[str] = "Author:"
_DATE_PREFIX: Final[str] = "Date:"
_MESSAGE_INDENT: Final[str] = "    "


@dataclass(frozen=True, slots=True)
class HistoryEntry:
    """Commit that changed the tracked line."""

    commit_hash: str
    author: str
    date: str
    summary: str

    @property
    def short_hash(self) -> str:
        return self.commit_hash[:SHORT_HASH_LENGTH]


@dataclass(frozen=True, slots=True)
class LineHistory:
    """Recent commits of a line together with the total number found."""

    entries: tuple[HistoryEntry, ...]
    total_commits: int


def _segments(text: str) -> Iterator[list[str]]:
    segment: list[str] = []
    for row in split_lines(text):
        if row.startswith(_COMMIT_PREFIX) and segment:
            yield segment
            segment = []
        segment.append(row)
    if any(row.strip() for row in segment):
        yield segment


def _first(rows: list[str], prefix: str) -> str | None:
    return next((row for row in rows if row.startswith(prefix)), None)


def _summarise(message: str) -> str:
    if len(message) > SUMMARY_LIMIT:
        return f"{message[: SUMMARY_LIMIT - 3]}..."
    return message


def _entry(rows: list[str]) -> HistoryEntry | None:
    commit_row = _first(rows, _COMMIT_PREFIX)
    if commit_row is None:
        return None
    tokens = commit_row[len(_COMMIT_PREFIX) :].split()
    if not tokens:
        return None
    author_row = _first(rows, _AUTHOR_PREFIX)
    author = author_row[len(_AUTHOR_PREFIX) :].split("<", 1)[0].strip() if author_row else ""
    date_row = _first(rows, _DATE_PREFIX)
    date_tokens = date_row[len(_DATE_PREFIX) :].split() if date_row else []
    message_row = _first(rows, _MESSAGE_INDENT)
    message = message_row.strip() if message_row else ""
    return HistoryEntry(
        commit_hash=tokens[0],
        author=author or UNKNOWN_AUTHOR,
        date=date_tokens[0] if date_tokens else UNKNOWN_DATE,
        summary=_summarise(message) if message else NO_SUBJECT,
    )


def parse_history(text: str, limit: int) -> LineHistory:
    """Return the newest ``limit`` commits listed in ``git log -L`` output.

    Args:
        text: Raw ``git log`` output, newest commit first.
        limit: Maximum number of entries to keep.

    Returns:
        LineHistory: Parsed entries and the count of every commit in ``text``.

    Raises:
        InvalidArgumentError: If ``limit`` is negative.
    """

    if limit < 0:
        raise InvalidArgumentError(f"limit must be non-negative, received {limit}")
    entries = [entry for entry in map(_entry, _segments(text)) if entry is not None]
    return LineHistory(entries=tuple(entries[:limit]), total_commits=len(entries))


__all__ = ["EMPTY_TREE_HASH", "HistoryEntry", "LineHistory", "parse_history"]
