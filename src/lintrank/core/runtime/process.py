# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Shell-free subprocess execution for version-control queries."""

from __future__ import annotations

import shutil

# Arguments are built internally from validated paths; ``shell=True`` is never used.
import subprocess  # nosec B404
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path
from subprocess import CompletedProcess
from typing import Final

from lintrank.core.errors import VcsCommandError

TIMEOUT_RETURNCODE: Final[int] = 124


@dataclass(frozen=True, slots=True)
class CommandOptions:
    """Execution options for :func:`run_command`.

    Attributes:
        cwd: Working directory for the child process.
        env: Complete environment for the child, or ``None`` to inherit.
        check: Raise :class:`VcsCommandError` on a non-zero exit status.
        timeout: Seconds before the child is abandoned.
    """

    cwd: Path | None = None
    env: Mapping[str, str] | None = None
    check: bool = False
    timeout: float | None = None

    def __post_init__(self) -> None:
        if self.timeout is not None and self.timeout < 0:
            raise ValueError("timeout must be non-negative")


def _ensure_text(value: str | bytes | None) -> str:
    if value is None:
        return ""
    if isinstance(value, bytes):
        return value.decode(errors="ignore")
    return value


def _normalize_args(args: Sequence[str]) -> list[str]:
    """Resolve the executable of ``args`` on ``PATH``.

    Raises:
        ValueError: If ``args`` is empty.
        FileNotFoundError: If the executable cannot be found.
    """

    if not args:
        raise ValueError("subprocess command requires at least one argument")
    head, *rest = args
    if Path(head).is_absolute():
        return [head, *rest]
    resolved = shutil.which(head)
    if resolved is None:
        raise FileNotFoundError(f"Executable '{head}' was not found on PATH")
    return [resolved, *rest]


def run_command(args: Sequence[str], *, options: CommandOptions | None = None) -> CompletedProcess[str]:
    """Run ``args`` capturing text output.

    Timeouts are reported as a completed process with return code
    :data:`TIMEOUT_RETURNCODE` rather than an exception.

    Args:
        args: Command and arguments.
        options: Execution options; defaults to unchecked execution.

    Returns:
        CompletedProcess[str]: Captured result.

    Raises:
        FileNotFoundError: If the executable is not on ``PATH``.
        VcsCommandError: When ``options.check`` is set and the command fails.
    """

    resolved = options or CommandOptions()
    normalized = _normalize_args(args)
    try:
        completed: CompletedProcess[str] = subprocess.run(  # nosec B603
            normalized,
            cwd=str(resolved.cwd) if resolved.cwd is not None else None,
            env=dict(resolved.env) if resolved.env is not None else None,
            check=False,
            capture_output=True,
            text=True,
            timeout=resolved.timeout,
            stdin=subprocess.DEVNULL,
        )
    except subprocess.TimeoutExpired as exc:
        message = f"Command timed out after {resolved.timeout:.1f}s" if resolved.timeout else "Command timed out"
        stderr = _ensure_text(exc.stderr)
        completed = CompletedProcess(
            args=normalized,
            returncode=TIMEOUT_RETURNCODE,
            stdout=_ensure_text(exc.stdout),
            stderr=f"{stderr}\n{message}" if stderr else message,
        )

    if resolved.check and completed.returncode != 0:
        raise VcsCommandError(tuple(args), completed.returncode, completed.stderr or "")
    return completed


__all__ = [
    "TIMEOUT_RETURNCODE",
    "CommandOptions",
    "run_command",
]
