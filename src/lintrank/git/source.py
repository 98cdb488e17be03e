# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Diff, blame, and history text read from a git working tree."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Sequence
from pathlib import Path
from typing import Final

from lintrank.core.errors import InvalidArgumentError
from lintrank.core.runtime.process import CommandOptions, run_command
from lintrank.interfaces.vcs import DiffDescriptor, DiffSource

LOGGER = logging.getLogger(__name__)

GitRunner = Callable[[Sequence[str], Path], str]

LOCAL_RANGE: Final[str] = "HEAD"
_UPSTREAM_LOOKUP: Final[tuple[str, ...]] = (
    "git",
    "rev-parse",
    "--abbrev-ref",
    "--symbolic-full-name",
    "HEAD@{upstream}",
)


class GitDiffSource(DiffSource):
    """Run git in ``root`` to obtain raw diff, blame, and history text.

    Every query degrades to an empty string when git is missing, the path is
    untracked, or the command fails.
    """

    def __init__(
        self,
        root: Path,
        *,
        upstream_ref: str | None = None,
        timeout: float | None = 10.0,
        runner: GitRunner | None = None,
    ) -> None:
        """Create a source bound to the repository at ``root``.

        Args:
            root: Working directory for git commands.
            upstream_ref: Base revision for the ``upstream`` comparison. The
                tracking branch of ``HEAD`` is used when omitted.
            timeout: Seconds allowed for each git invocation.
            runner: Callable executing a git command in a directory and
                returning its stdout; defaults to :func:`run_command`.
        """

        self._root = root
        self._timeout = timeout
        self._runner = runner or self._default_runner
        self._configured_upstream = upstream_ref
        self._range: str | None = None
        self._range_lock = threading.Lock()

    # Public API --------------------------------------------------------

    @property
    def diff_range(self) -> str:
        """Return the revision range compared by the ``upstream`` descriptor.

        Returns:
            str: ``"<upstream>...HEAD"`` when an upstream is known, otherwise
            ``"HEAD"``.
        """

        with self._range_lock:
            if self._range is None:
                self._range = self._detect_range()
            return self._range

    def describe(self, descriptor: DiffDescriptor) -> str:
        """Return the label shown for ``descriptor`` in diff headings."""

        return self.diff_range if descriptor == "upstream" else descriptor

    def raw_diff(self, file_path: str, descriptor: DiffDescriptor, context_lines: int) -> str:
        """Return the unified diff of ``file_path`` for ``descriptor``.

        Raises:
            InvalidArgumentError: If ``context_lines`` is negative or the
                descriptor is unknown.
        """

        if context_lines < 0:
            raise InvalidArgumentError(f"context_lines must be non-negative, received {context_lines}")
        unified = f"--unified={context_lines}"
        if descriptor == "upstream":
            cmd = ["git", "diff", unified, self.diff_range, "--", file_path]
        elif descriptor == "workspace":
            cmd = ["git", "diff", unified, "--", file_path]
        elif descriptor == "index":
            cmd = ["git", "diff", "--cached", unified, "--", file_path]
        else:
            raise InvalidArgumentError(f"unknown diff descriptor: {descriptor!r}")
        return self._runner(cmd, self._root)

    def raw_blame(self, file_path: str, line: int, context_lines: int) -> str:
        """Return ``git blame --line-porcelain`` text around ``line``."""

        if line < 1:
            raise InvalidArgumentError(f"line must be positive, received {line}")
        start = max(1, line - max(0, context_lines))
        end = line + max(0, context_lines)
        return self._runner(["git", "blame", "--line-porcelain", "-L", f"{start},{end}", "--", file_path], self._root)

    def raw_history(self, file_path: str, line: int, limit: int) -> str:
        """Return ``git log -L`` output for ``line``.

        ``limit`` is applied when parsing so the total commit count stays
        available.
        """

        if line < 1:
            raise InvalidArgumentError(f"line must be positive, received {line}")
        if limit < 1:
            raise InvalidArgumentError(f"limit must be positive, received {limit}")
        return self._runner(["git", "log", f"-L{line},{line}:{file_path}", "--date=short"], self._root)

    def raw_commit_diff(self, file_path: str, older: str, newer: str, context_lines: int) -> str:
        """Return ``git diff older..newer`` for ``file_path``."""

        if context_lines < 0:
            raise InvalidArgumentError(f"context_lines must be non-negative, received {context_lines}")
        if not older or not newer:
            raise InvalidArgumentError("both revisions are required for a commit diff")
        cmd = ["git", "diff", f"--unified={context_lines}", f"{older}..{newer}", "--", file_path]
        return self._runner(cmd, self._root)

    # Internals ---------------------------------------------------------

    def _detect_range(self) -> str:
        if self._configured_upstream:
            return f"{self._configured_upstream}...{LOCAL_RANGE}"
        upstream = self._runner(list(_UPSTREAM_LOOKUP), self._root).strip()
        if upstream:
            LOGGER.debug("comparing against upstream %s", upstream)
            return f"{upstream}...{LOCAL_RANGE}"
        LOGGER.debug("no upstream branch configured; comparing against %s", LOCAL_RANGE)
        return LOCAL_RANGE

    def _default_runner(self, cmd: Sequence[str], root: Path) -> str:
        """Run ``cmd`` returning stdout, or an empty string when nothing usable came back."""

        try:
            completed = run_command(cmd, options=CommandOptions(cwd=root, timeout=self._timeout))
        except (FileNotFoundError, NotADirectoryError) as exc:
            LOGGER.debug("cannot run %s: %s", cmd[0], exc)
            return ""
        if completed.returncode != 0:
            LOGGER.debug("%s exited with %d: %s", " ".join(cmd[:2]), completed.returncode, completed.stderr.strip())
        return completed.stdout or ""


__all__ = ["GitDiffSource", "GitRunner", "LOCAL_RANGE"]
