# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Command-line entry point for ordering diagnostics and listing duplicates."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Annotated

import typer

from lintrank.analysis.duplicates import load_duplicate_report, parse_duplicate_report
from lintrank.analysis.program import AstProgramModel
from lintrank.config import LintRankConfig, load_config
from lintrank.core.errors import LintRankError
from lintrank.core.models import DuplicatePair
from lintrank.git.source import GitDiffSource
from lintrank.logging import enable_verbose_logging, fail, info, ok, section
from lintrank.report.context import build_report
from lintrank.report.render import render_duplicates, render_report
from lintrank.runtime.console.manager import detect_tty, get_console_manager

from ._diagnostics_input import load_diagnostics
from .typer_ext import create_typer

LOGGER = logging.getLogger(__name__)

app = create_typer(
    name="lintrank",
    help="Order diagnostics so that root causes come first.",
    no_args_is_help=True,
    add_completion=False,
)

RootOption = Annotated[
    Path,
    typer.Option("--root", help="Workspace root holding the type-checking configuration and git repository."),
]
ColorOption = Annotated[bool | None, typer.Option("--color/--no-color", help="Force coloured output on or off.")]
EmojiOption = Annotated[bool, typer.Option("--emoji/--no-emoji", help="Prefix status lines with emoji.")]
VerboseOption = Annotated[bool, typer.Option("--verbose", "-v", help="Log internal decisions to stderr.")]


def _load_config(root: Path, **overrides: object) -> LintRankConfig:
    try:
        return load_config(root, overrides)
    except LintRankError as exc:
        raise typer.BadParameter(str(exc), param_hint="--root") from exc


def _load_pairs(report: Path, max_pairs: int) -> list[DuplicatePair]:
    try:
        return parse_duplicate_report(load_duplicate_report(report), max_pairs)
    except LintRankError as exc:
        raise typer.BadParameter(str(exc), param_hint="--duplicates") from exc


@app.command("order")
def order_command(
    diagnostics_file: Annotated[
        Path,
        typer.Argument(help="JSON file listing diagnostics from every tool.", exists=True, dir_okay=False),
    ],
    root: RootOption = Path("."),
    duplicates: Annotated[
        Path | None,
        typer.Option("--duplicates", help="SARIF report produced by a duplicate-code detector.", dir_okay=False),
    ] = None,
    max_duplicates: Annotated[
        int | None,
        typer.Option("--max-duplicates", min=0, help="Maximum duplicate pairs to list."),
    ] = None,
    no_diff: Annotated[bool, typer.Option("--no-diff", help="Skip git diff context.")] = False,
    blame: Annotated[bool, typer.Option("--blame", help="Include git blame and line history.")] = False,
    color: ColorOption = None,
    emoji: EmojiOption = False,
    verbose: VerboseOption = False,
) -> None:
    """Print diagnostics in dependency order with diff context.

    Exits with status 1 when any diagnostic is present.
    """

    if verbose:
        enable_verbose_logging()
    use_color = detect_tty() if color is None else color
    config = _load_config(root, max_duplicates=max_duplicates)
    try:
        diagnostics = load_diagnostics(diagnostics_file)
    except LintRankError as exc:
        raise typer.BadParameter(str(exc), param_hint="DIAGNOSTICS_FILE") from exc

    diff_source = None
    if not no_diff:
        diff_source = GitDiffSource(root, upstream_ref=config.upstream_ref, timeout=config.git_timeout)
    entries = build_report(diagnostics, AstProgramModel(root), diff_source, config, with_blame=blame)

    console = get_console_manager().get(color=use_color, emoji=emoji)
    summary = render_report(console, entries, config.rule_levels, color=use_color)

    if duplicates is not None:
        pairs = _load_pairs(duplicates, config.max_duplicates)
        section("Duplicate code", use_color=use_color)
        if pairs:
            render_duplicates(console, pairs, root=root, tab_width=config.tab_width, color=use_color)
        else:
            info("No duplicate pairs reported.", use_emoji=emoji, use_color=use_color)

    if summary.total:
        fail(f"{summary.total} diagnostics need attention.", use_emoji=emoji, use_color=use_color)
        raise typer.Exit(code=1)
    ok("No diagnostics reported.", use_emoji=emoji, use_color=use_color)


@app.command("duplicates")
def duplicates_command(
    report: Annotated[
        Path,
        typer.Argument(help="SARIF report produced by a duplicate-code detector.", exists=True, dir_okay=False),
    ],
    root: RootOption = Path("."),
    max_duplicates: Annotated[
        int | None,
        typer.Option("--max-duplicates", min=0, help="Maximum duplicate pairs to list."),
    ] = None,
    color: ColorOption = None,
) -> None:
    """List duplicate-code pairs from a SARIF report."""

    use_color = detect_tty() if color is None else color
    config = _load_config(root, max_duplicates=max_duplicates)
    try:
        pairs = parse_duplicate_report(load_duplicate_report(report), config.max_duplicates)
    except LintRankError as exc:
        raise typer.BadParameter(str(exc), param_hint="REPORT") from exc
    LOGGER.debug("listing %d duplicate pairs from %s", len(pairs), report)
    if not pairs:
        ok("No duplicate pairs reported.", use_emoji=False, use_color=use_color)
        return
    console = get_console_manager().get(color=use_color, emoji=False)
    render_duplicates(console, pairs, root=root, tab_width=config.tab_width, color=use_color)


__all__ = ["app"]
