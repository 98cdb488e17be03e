# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Assemble ordered diagnostics with their source, diff, and blame context."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from typing import Final

from lintrank.analysis.dependencies import AnyProgramModel, build_edges
from lintrank.analysis.ordering import order_diagnostics, topo_rank
from lintrank.analysis.priority import priority_level, priority_name
from lintrank.config import LintRankConfig
from lintrank.core.models import Diagnostic, DiffSnippet, diagnostic_id
from lintrank.diff.parser import extract_diff_snippet
from lintrank.git.blame import BlameInfo, parse_blame
from lintrank.git.history import LineHistory, parse_history
from lintrank.interfaces.vcs import DiffDescriptor, DiffSource
from lintrank.report.diff_block import DiffBlock, build_diff_block
from lintrank.report.file_context import build_file_context, read_source_lines
from lintrank.report.history_block import CommitDiffBlock, build_history_blocks

LOGGER = logging.getLogger(__name__)

BLAME_CONTEXT_LINES: Final[int] = 2


@dataclass(frozen=True, slots=True)
class DiagnosticContext:
    """Source and version-control context gathered for one diagnostic."""

    diff_block: DiffBlock | None = None
    file_context: tuple[str, ...] = ()
    blame: BlameInfo | None = None
    history: LineHistory | None = None
    history_blocks: tuple[CommitDiffBlock, ...] = ()


@dataclass(frozen=True, slots=True)
class ReportEntry:
    """Diagnostic in presentation order with its rank and context."""

    diagnostic: Diagnostic
    rank: int
    level: int
    section: str
    context: DiagnosticContext

    @property
    def diff_block(self) -> DiffBlock | None:
        return self.context.diff_block

    @property
    def blame(self) -> BlameInfo | None:
        return self.context.blame


def select_diff_snippet(
    diff_source: DiffSource,
    diagnostic: Diagnostic,
    descriptors: Sequence[DiffDescriptor],
    context_lines: int,
) -> tuple[DiffSnippet, DiffDescriptor] | None:
    """Return the first hunk covering the diagnostic's line and its source.

    Comparison sources are queried in order; querying stops at the first
    source whose diff contains the line.

    Args:
        diff_source: Provider of raw diff text.
        diagnostic: Diagnostic whose line is looked up.
        descriptors: Comparison sources in priority order.
        context_lines: Unchanged context requested from the diff.

    Returns:
        tuple[DiffSnippet, DiffDescriptor] | None: Selected hunk and the
        descriptor that produced it.
    """

    for descriptor in descriptors:
        text = diff_source.raw_diff(diagnostic.resolved_path, descriptor, context_lines)
        if not text.strip():
            continue
        snippet = extract_diff_snippet(text, diagnostic.line)
        if snippet is not None:
            return snippet, descriptor
    return None


def collect_context(
    diff_source: DiffSource | None,
    diagnostic: Diagnostic,
    config: LintRankConfig,
    *,
    with_blame: bool = False,
) -> DiagnosticContext:
    """Gather file, diff, and optionally blame and history context for ``diagnostic``.

    Without a ``diff_source`` only the surrounding file lines are read.
    """

    diff_block: DiffBlock | None = None
    if diff_source is not None:
        selected = select_diff_snippet(diff_source, diagnostic, config.diff_sources, config.diff_context)
        if selected is not None:
            snippet, descriptor = selected
            diff_block = build_diff_block(
                snippet,
                diff_source.describe(descriptor),
                diagnostic,
                diff_context=config.diff_context,
                snippet_context=config.snippet_context,
                tab_width=config.tab_width,
            )
    file_context = _file_context(diagnostic, diff_block, config)
    if diff_source is None or not with_blame:
        return DiagnosticContext(diff_block=diff_block, file_context=file_context)
    path = diagnostic.resolved_path
    blame = parse_blame(diff_source.raw_blame(path, diagnostic.line, BLAME_CONTEXT_LINES), diagnostic.line)
    history = None
    history_blocks: tuple[CommitDiffBlock, ...] = ()
    if blame is not None and not blame.is_uncommitted:
        # One commit past the limit is the base of the oldest change shown.
        requested = config.history_limit + 1
        history = parse_history(diff_source.raw_history(path, diagnostic.line, requested), requested)
        history_blocks = build_history_blocks(
            diff_source,
            path,
            diagnostic.line,
            history.entries,
            limit=config.history_limit,
            context_lines=config.diff_context,
            tab_width=config.tab_width,
        )
    return DiagnosticContext(
        diff_block=diff_block,
        file_context=file_context,
        blame=blame,
        history=history,
        history_blocks=history_blocks,
    )


def _file_context(diagnostic: Diagnostic, diff_block: DiffBlock | None, config: LintRankConfig) -> tuple[str, ...]:
    lines = read_source_lines(diagnostic.resolved_path)
    if lines is None:
        return ()
    return build_file_context(
        lines,
        diagnostic,
        context_lines=config.snippet_context,
        shown_lines=diff_block.head_line_numbers if diff_block is not None else frozenset(),
        tab_width=config.tab_width,
    )


def _collect_all(
    diff_source: DiffSource | None,
    diagnostics: Sequence[Diagnostic],
    config: LintRankConfig,
    *,
    with_blame: bool,
) -> list[DiagnosticContext]:
    contexts: list[DiagnosticContext] = [DiagnosticContext()] * len(diagnostics)
    with ThreadPoolExecutor(max_workers=config.max_workers) as executor:
        future_map = {
            executor.submit(collect_context, diff_source, diagnostic, config, with_blame=with_blame): index
            for index, diagnostic in enumerate(diagnostics)
        }
        for future in as_completed(future_map):
            contexts[future_map[future]] = future.result()
    return contexts


def build_report(
    diagnostics: Sequence[Diagnostic],
    program_model: AnyProgramModel | None,
    diff_source: DiffSource | None,
    config: LintRankConfig,
    *,
    with_blame: bool = False,
) -> list[ReportEntry]:
    """Order ``diagnostics`` and attach their version-control context.

    Args:
        diagnostics: Diagnostics from every tool in original order.
        program_model: Program model used to derive dependency edges, or
            ``None`` to order without edges.
        diff_source: Source of diff and blame text, or ``None`` to show only
            the surrounding file lines.
        config: Report settings.
        with_blame: Also read blame and line history for each diagnostic.

    Returns:
        list[ReportEntry]: Entries in presentation order.
    """

    edges = build_edges(diagnostics, program_model, tab_width=config.tab_width)
    LOGGER.debug("derived %d dependency edges for %d diagnostics", len(edges), len(diagnostics))
    rank = topo_rank(diagnostics, edges)
    ordered = order_diagnostics(diagnostics, rank)
    contexts = _collect_all(diff_source, ordered, config, with_blame=with_blame) if ordered else []
    rule_levels = config.rule_levels
    return [
        ReportEntry(
            diagnostic=diagnostic,
            rank=rank[diagnostic_id(diagnostic)],
            level=priority_level(diagnostic, rule_levels),
            section=priority_name(diagnostic, rule_levels),
            context=context,
        )
        for diagnostic, context in zip(ordered, contexts, strict=True)
    ]


__all__ = [
    "DiagnosticContext",
    "ReportEntry",
    "build_report",
    "collect_context",
    "select_diff_snippet",
]
