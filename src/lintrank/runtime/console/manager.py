# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Rich console provisioning shared by the report renderer and log helpers."""

from __future__ import annotations

import sys
from functools import lru_cache
from typing import Literal

from rich.console import Console


def detect_tty() -> bool:
    """Return ``True`` when stdout appears to be backed by a terminal."""

    try:
        return sys.stdout.isatty()
    except (AttributeError, ValueError):
        return False


class RichConsoleManager:
    """Hand out Rich consoles keyed by colour, emoji, and TTY state."""

    def __init__(self) -> None:
        self._cache: dict[tuple[bool, bool, bool], Console] = {}

    def get(self, *, color: bool, emoji: bool) -> Console:
        """Return a console configured for the requested presentation flags.

        Args:
            color: Enable ANSI styling when stdout is a terminal.
            emoji: Render emoji shortcodes.

        Returns:
            Console: Cached console for the ``(color, emoji, tty)`` combination.
        """

        tty = detect_tty()
        key = (color, emoji, tty)
        console = self._cache.get(key)
        if console is None:
            styled = color and tty
            color_system: Literal["auto"] | None = "auto" if styled else None
            console = Console(
                color_system=color_system,
                force_terminal=tty,
                no_color=not styled,
                emoji=emoji,
                soft_wrap=True,
                highlight=False,
            )
            self._cache[key] = console
        return console

    def clear(self) -> None:
        """Forget every cached console."""

        self._cache.clear()


@lru_cache(maxsize=1)
def get_console_manager() -> RichConsoleManager:
    """Return the process-wide :class:`RichConsoleManager`."""

    return RichConsoleManager()


__all__ = ["RichConsoleManager", "detect_tty", "get_console_manager"]
