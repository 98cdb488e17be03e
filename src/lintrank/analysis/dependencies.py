# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Dependency edges between diagnostics derived from symbol and import relationships."""

from __future__ import annotations

import logging
from collections.abc import Hashable, Sequence
from dataclasses import dataclass
from typing import Any, Final

from lintrank.core.errors import ProgramUnavailableError
from lintrank.core.models import Diagnostic, DiagnosticId, Edge, diagnostic_id
from lintrank.diff.column import TAB_WIDTH, real_column_from_visual
from lintrank.interfaces.program import NodeKind, ProgramModel

LOGGER = logging.getLogger(__name__)

_REFERENCE_KINDS: Final[frozenset[NodeKind]] = frozenset({"identifier", "call", "member_access", "index_access"})

AnyProgramModel = ProgramModel[Any, Any, Any, Hashable]


@dataclass(frozen=True, slots=True)
class _Located:
    """Diagnostic with its identifier and character span inside its file."""

    diagnostic: Diagnostic
    ident: DiagnosticId
    start: int
    end: int


class _EdgeAccumulator:
    """Collect distinct edges in emission order while rejecting self edges."""

    def __init__(self, known_ids: set[DiagnosticId]) -> None:
        self._known = known_ids
        self._seen: set[tuple[DiagnosticId, DiagnosticId]] = set()
        self.edges: list[Edge] = []

    def add(self, source_id: DiagnosticId, target_id: DiagnosticId) -> None:
        if source_id == target_id or source_id not in self._known or target_id not in self._known:
            return
        key = (source_id, target_id)
        if key in self._seen:
            return
        self._seen.add(key)
        self.edges.append(Edge(source_id=source_id, target_id=target_id))


def _group_by_file(diagnostics: Sequence[Diagnostic]) -> dict[str, list[Diagnostic]]:
    by_file: dict[str, list[Diagnostic]] = {}
    for diagnostic in diagnostics:
        by_file.setdefault(diagnostic.resolved_path, []).append(diagnostic)
    return by_file


def _real_column(
    model: AnyProgramModel, source_file: object, line: int, column: int, *, visual: bool, tab_width: int
) -> int:
    zero_based = max(0, column - 1)
    if not visual:
        return zero_based
    return real_column_from_visual(model.line_text(source_file, line), zero_based, tab_width)


def _locate(model: AnyProgramModel, source_file: object, diagnostic: Diagnostic, tab_width: int) -> _Located:
    visual = diagnostic.column_kind == "visual"
    start_column = _real_column(
        model, source_file, diagnostic.line, diagnostic.column, visual=visual, tab_width=tab_width
    )
    start = model.position_at(source_file, diagnostic.line, start_column)
    end = start
    if diagnostic.end_line is not None and diagnostic.end_column is not None:
        end_column = _real_column(
            model, source_file, diagnostic.end_line, diagnostic.end_column, visual=visual, tab_width=tab_width
        )
        end = max(start, model.position_at(source_file, diagnostic.end_line, end_column))
    return _Located(diagnostic=diagnostic, ident=diagnostic_id(diagnostic), start=start, end=end)


def _reference_node(model: AnyProgramModel, source_file: object, offset: int) -> object:
    """Return the innermost identifier, call, or member/index access around ``offset``."""

    node = model.node_at(source_file, offset)
    while model.node_kind(node) not in _REFERENCE_KINDS:
        parent = model.parent_of(node)
        if parent is None:
            break
        node = parent
    return node


class _GraphContext:
    """Per-call lookup tables shared by the symbol and import passes."""

    def __init__(self, model: AnyProgramModel, diagnostics: Sequence[Diagnostic], tab_width: int) -> None:
        self.model = model
        self.tab_width = tab_width
        self.by_file = _group_by_file(diagnostics)
        self._located: dict[str, list[_Located] | None] = {}
        self._sources: dict[str, object | None] = {}

    def source(self, path: str) -> object | None:
        if path not in self._sources:
            self._sources[path] = self.model.get_source_file(path)
        return self._sources[path]

    def located(self, path: str) -> list[_Located] | None:
        if path not in self.by_file:
            return []
        if path not in self._located:
            source_file = self.source(path)
            diagnostics = self.by_file.get(path, [])
            self._located[path] = (
                [_locate(self.model, source_file, diagnostic, self.tab_width) for diagnostic in diagnostics]
                if source_file is not None
                else None
            )
        return self._located[path]


def build_edges(
    diagnostics: Sequence[Diagnostic],
    program_model: AnyProgramModel | None,
    *,
    tab_width: int = TAB_WIDTH,
) -> list[Edge]:
    """Return dependency edges ``declaration diagnostic -> use diagnostic``.

    For each diagnostic the innermost reference node at its position is
    resolved to symbols; any other diagnostic lying inside a declaration of
    those symbols becomes the edge source. Separately, every diagnostic of a
    file depends on the first diagnostic of each module the file imports.

    Args:
        diagnostics: Diagnostics from the current analysis run in original order.
        program_model: Program model of the workspace, or ``None`` when unavailable.
        tab_width: Tab stop width used to map visual columns to character offsets.

    Returns:
        list[Edge]: Distinct edges in emission order; empty when no program can
        be built.
    """

    if program_model is None or not diagnostics:
        return []
    try:
        if program_model.resolve_configured_program() is None:
            LOGGER.info("no program model available; ordering diagnostics without dependency edges")
            return []
        return _build_edges(diagnostics, program_model, tab_width)
    except ProgramUnavailableError as exc:
        LOGGER.info("program model unavailable (%s); ordering diagnostics without dependency edges", exc)
        return []


def _build_edges(diagnostics: Sequence[Diagnostic], model: AnyProgramModel, tab_width: int) -> list[Edge]:
    context = _GraphContext(model, diagnostics, tab_width)
    accumulator = _EdgeAccumulator({diagnostic_id(diagnostic) for diagnostic in diagnostics})
    for path in context.by_file:
        located = context.located(path)
        source_file = context.source(path)
        if located is None or source_file is None:
            LOGGER.debug("skipping %s: not part of the program", path)
            continue
        for use in located:
            _emit_symbol_edges(context, source_file, use, accumulator)
        _emit_import_edges(context, source_file, path, located, accumulator)
    return accumulator.edges


def _emit_symbol_edges(
    context: _GraphContext,
    source_file: object,
    use: _Located,
    accumulator: _EdgeAccumulator,
) -> None:
    model = context.model
    node = _reference_node(model, source_file, use.start)
    for symbol in model.symbol_at(node):
        for declaration in model.declarations_of(symbol):
            candidates = context.located(declaration.path)
            if not candidates:
                continue
            found = next(
                (
                    candidate
                    for candidate in candidates
                    if candidate.ident != use.ident and declaration.contains(candidate.start, candidate.end)
                ),
                None,
            )
            if found is not None:
                accumulator.add(found.ident, use.ident)


def _emit_import_edges(
    context: _GraphContext,
    source_file: object,
    path: str,
    located: list[_Located],
    accumulator: _EdgeAccumulator,
) -> None:
    model = context.model
    for specifier in model.imports_of(source_file):
        target = model.resolve_import(specifier, path)
        if target is None:
            continue
        target_diagnostics = context.by_file.get(target)
        if not target_diagnostics:
            continue
        first_id = diagnostic_id(target_diagnostics[0])
        for use in located:
            accumulator.add(first_id, use.ident)


__all__ = ["build_edges"]
