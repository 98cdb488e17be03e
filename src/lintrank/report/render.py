# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Rich rendering of ordered report entries and duplicate pairs."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Final

from rich import box
from rich.console import Console
from rich.rule import Rule
from rich.table import Table
from rich.text import Text

from lintrank.analysis.priority import RuleLevelMap, group_by_level, group_by_sections
from lintrank.core.models import DuplicatePair, diagnostic_id
from lintrank.core.severity import Severity, severity_label
from lintrank.diff.column import TAB_WIDTH, expand_tabs
from lintrank.report.context import ReportEntry
from lintrank.report.diff_block import FOOTER
from lintrank.report.file_context import read_source_lines
from lintrank.report.history_block import CommitDiffBlock

SEVERITY_STYLES: Final[dict[Severity, str]] = {Severity.ERROR: "red", Severity.WARNING: "yellow"}
_DIFF_STYLES: Final[dict[str, str]] = {"+": "green", "-": "red"}


@dataclass(frozen=True, slots=True)
class ReportSummary:
    """Counts shown after the report."""

    errors: int
    warnings: int

    @property
    def total(self) -> int:
        return self.errors + self.warnings


def summarise(entries: Sequence[ReportEntry]) -> ReportSummary:
    """Count errors and warnings among ``entries``."""

    errors = sum(1 for entry in entries if entry.diagnostic.severity is Severity.ERROR)
    return ReportSummary(errors=errors, warnings=len(entries) - errors)


def select_focus(entries: Sequence[ReportEntry], rule_levels: RuleLevelMap | None) -> dict[str, list[ReportEntry]]:
    """Return the sections of the most urgent priority level.

    Only the lowest non-empty level is shown, limited to its leading
    diagnostics, so the report points at what to fix first.
    """

    by_id = {diagnostic_id(entry.diagnostic): entry for entry in entries}
    levels = group_by_level([entry.diagnostic for entry in entries], rule_levels)
    if not levels:
        return {}
    first_level = next(iter(levels.values()))
    sections = group_by_sections(first_level, rule_levels)
    return {
        name: [by_id[diagnostic_id(diagnostic)] for diagnostic in diagnostics]
        for name, diagnostics in sections.items()
    }


def _diff_line(line: str, *, color: bool) -> Text:
    text = Text(line)
    style = _DIFF_STYLES.get(line[:1])
    if color and style:
        text.stylize(style)
    return text


def _render_history_block(console: Console, block: CommitDiffBlock, *, color: bool) -> None:
    newer, older = block.newer, block.older
    console.print(Text(f"  {block.heading}"))
    console.print(Text(f"    Newer: {newer.short_hash} ({newer.date}) {newer.author}: {newer.summary}"))
    console.print(Text(f"    Older: {block.older_label} ({older.date}) {older.author}: {older.summary}"))
    for line in block.lines:
        console.print(_diff_line(line, color=color))
    console.print(Text(FOOTER))


def render_entry(console: Console, entry: ReportEntry, *, color: bool) -> None:
    """Print one diagnostic with its diff, file, and blame context."""

    diagnostic = entry.diagnostic
    header = Text()
    label = Text(f"[{severity_label(diagnostic.severity)}]")
    if color:
        label.stylize(SEVERITY_STYLES[diagnostic.severity])
    header.append_text(label)
    header.append(f" {diagnostic.file_path}:{diagnostic.line}:{diagnostic.column} ")
    header.append(f"{diagnostic.source}/{diagnostic.rule_id}", style="dim" if color else None)
    console.print(header)
    console.print(Text(f"  {diagnostic.message}"))

    block = entry.diff_block
    if block is not None:
        console.print(Text(block.heading))
        for line in block.lines:
            console.print(_diff_line(line, color=color))
        console.print(Text(block.footer))
    for line in entry.context.file_context:
        console.print(Text(line))

    blame = entry.blame
    if blame is not None and not blame.is_uncommitted:
        console.print(Text(f"  commit {blame.short_hash} ({blame.date})  Author: {blame.author}"))
        console.print(Text(f"  summary: {blame.summary}"))
        history = entry.context.history
        if history is not None:
            console.print(Text(f"  Total commits for line: {history.total_commits}"))
        for commit_block in entry.context.history_blocks:
            _render_history_block(console, commit_block, color=color)


def render_report(
    console: Console,
    entries: Sequence[ReportEntry],
    rule_levels: RuleLevelMap | None,
    *,
    color: bool,
) -> ReportSummary:
    """Print the most urgent sections of ``entries`` followed by totals.

    Returns:
        ReportSummary: Counts over every entry, shown or not.
    """

    for name, section_entries in select_focus(entries, rule_levels).items():
        console.print()
        console.print(Rule(name) if color else Text(f"--- {name} ---"))
        for entry in section_entries:
            render_entry(console, entry, color=color)
    summary = summarise(entries)
    console.print()
    console.print(Text(f"{summary.total} problems ({summary.errors} errors, {summary.warnings} warnings)"))
    return summary


def _line_at(lines: Sequence[str], number: int) -> str:
    return lines[number - 1] if 0 < number <= len(lines) else ""


def duplicate_table(
    pair: DuplicatePair,
    lines_a: Sequence[str],
    lines_b: Sequence[str],
    *,
    tab_width: int = TAB_WIDTH,
    color: bool = False,
) -> Table:
    """Return both regions of ``pair`` side by side, one row per line.

    Only the line count the two regions share is shown.
    """

    table = Table(box=box.SIMPLE_HEAVY if color else box.SIMPLE)
    table.add_column("", justify="right", no_wrap=True)
    table.add_column(Text(f"A: {pair.file_a}:{pair.start_a}-{pair.end_a}"), no_wrap=True, overflow="ellipsis")
    table.add_column("", justify="right", no_wrap=True)
    table.add_column(Text(f"B: {pair.file_b}:{pair.start_b}-{pair.end_b}"), no_wrap=True, overflow="ellipsis")
    span_b = pair.end_b - pair.start_b + 1
    for offset in range(min(pair.span_a, span_b)):
        number_a = pair.start_a + offset
        number_b = pair.start_b + offset
        table.add_row(
            str(number_a),
            Text(expand_tabs(_line_at(lines_a, number_a), tab_width)),
            str(number_b),
            Text(expand_tabs(_line_at(lines_b, number_b), tab_width)),
        )
    return table


def render_duplicates(
    console: Console,
    pairs: Sequence[DuplicatePair],
    *,
    root: Path | None = None,
    tab_width: int = TAB_WIDTH,
    color: bool = False,
) -> None:
    """Print one line per duplicate pair, followed by its code when ``root`` is given.

    Args:
        console: Destination console.
        pairs: Duplicate pairs in report order.
        root: Directory the pair paths are relative to; ``None`` lists the
            pairs without reading any code.
        tab_width: Tab stop width for the code columns.
        color: Use the heavier table border.
    """

    for index, pair in enumerate(pairs, start=1):
        console.print(
            Text(
                f"{index}. {pair.file_a}:{pair.start_a}-{pair.end_a} "
                f"<-> {pair.file_b}:{pair.start_b}-{pair.end_b} ({pair.span_a} lines)"
            )
        )
        if root is None:
            continue
        lines_a = read_source_lines(root / pair.file_a)
        lines_b = read_source_lines(root / pair.file_b)
        if lines_a is None or lines_b is None:
            console.print(Text(f"   cannot read {pair.file_a} or {pair.file_b}"))
            continue
        console.print(duplicate_table(pair, lines_a, lines_b, tab_width=tab_width, color=color))


__all__ = [
    "ReportSummary",
    "duplicate_table",
    "render_duplicates",
    "render_entry",
    "render_report",
    "select_focus",
    "summarise",
]
