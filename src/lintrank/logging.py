# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""User-facing status lines and verbose diagnostics logging."""

from __future__ import annotations

import logging
import sys
from typing import Final

from rich.rule import Rule
from rich.text import Text

from lintrank.runtime.console.manager import detect_tty, get_console_manager

PACKAGE_LOGGER: Final[str] = "lintrank"
_VERBOSE_MARKER: Final[str] = "_lintrank_verbose_configured"


def emoji(symbol: str, enable: bool) -> str:
    """Return ``symbol`` when emoji output is enabled, otherwise blank."""

    return symbol if enable else ""


def _print_line(msg: str, *, style: str | None, use_emoji: bool, use_color: bool | None = None) -> None:
    color_enabled = detect_tty() if use_color is None else use_color
    console = get_console_manager().get(color=color_enabled, emoji=use_emoji)
    text = Text(msg)
    if style and color_enabled:
        text.stylize(style)
    console.print(text)


def section(title: str, *, use_color: bool) -> None:
    """Print a section header.

    Args:
        title: Header text.
        use_color: Draw a Rich rule instead of a plain dashed header.
    """

    console = get_console_manager().get(color=use_color, emoji=True)
    if use_color:
        console.print()
        console.print(Rule(title))
    else:
        console.print(f"\n--- {title} ---")


def info(msg: str, *, use_emoji: bool, use_color: bool | None = None) -> None:
    """Emit an informational message."""

    _print_line(f"{emoji('ℹ️ ', use_emoji)}{msg}", style="cyan", use_emoji=use_emoji, use_color=use_color)


def ok(msg: str, *, use_emoji: bool, use_color: bool | None = None) -> None:
    """Emit a success message."""

    _print_line(f"{emoji('✅ ', use_emoji)}{msg}", style="green", use_emoji=use_emoji, use_color=use_color)


def fail(msg: str, *, use_emoji: bool, use_color: bool | None = None) -> None:
    """Emit an error message."""

    _print_line(f"{emoji('❌ ', use_emoji)}{msg}", style="red", use_emoji=use_emoji, use_color=use_color)


def enable_verbose_logging() -> logging.Logger:
    """Stream ``lintrank`` debug records to stderr.

    Repeated calls reuse the handler installed by the first call.

    Returns:
        logging.Logger: The package logger.
    """

    logger = logging.getLogger(PACKAGE_LOGGER)
    if getattr(logger, _VERBOSE_MARKER, False):
        return logger
    handler = logging.StreamHandler(stream=sys.stderr)
    handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG)
    logger.propagate = False
    setattr(logger, _VERBOSE_MARKER, True)
    return logger


__all__ = ["emoji", "enable_verbose_logging", "fail", "info", "ok", "section"]
