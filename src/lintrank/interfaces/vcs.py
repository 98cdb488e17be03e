# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Protocols describing version-control text sources used for diagnostic context."""

from __future__ import annotations

from abc import abstractmethod
from typing import Literal, Protocol, runtime_checkable

DiffDescriptor = Literal["upstream", "workspace", "index"]


@runtime_checkable
class DiffSource(Protocol):
    """Provide raw diff, blame, and history text for files in a repository.

    Implementations return an empty string when the underlying command fails
    or produces no output; they never raise for "nothing to show".
    """

    @abstractmethod
    def raw_diff(self, file_path: str, descriptor: DiffDescriptor, context_lines: int) -> str:
        """Return the unified diff of ``file_path`` for the comparison ``descriptor``.

        Args:
            file_path: Path of the file to diff.
            descriptor: ``upstream`` (upstream branch to HEAD), ``workspace``
                (working tree to index) or ``index`` (staged changes).
            context_lines: Number of unchanged context lines around each change.

        Returns:
            str: Unified diff text, possibly empty.
        """
        raise NotImplementedError

    @abstractmethod
    def raw_blame(self, file_path: str, line: int, context_lines: int) -> str:
        """Return porcelain blame text for ``line`` and its surrounding lines."""
        raise NotImplementedError

    @abstractmethod
    def raw_history(self, file_path: str, line: int, limit: int) -> str:
        """Return the commit history of ``line`` limited to ``limit`` commits."""
        raise NotImplementedError

    @abstractmethod
    def raw_commit_diff(self, file_path: str, older: str, newer: str, context_lines: int) -> str:
        """Return the unified diff of ``file_path`` between two revisions.

        Args:
            file_path: Path of the file to diff.
            older: Base commit hash, or the empty tree hash for a file's first commit.
            newer: Commit hash compared against ``older``.
            context_lines: Number of unchanged context lines around each change.

        Returns:
            str: Unified diff text, possibly empty.
        """
        raise NotImplementedError

    def describe(self, descriptor: DiffDescriptor) -> str:
        """Return the label shown for ``descriptor`` in report headings."""

        return descriptor


__all__ = ["DiffDescriptor", "DiffSource"]
