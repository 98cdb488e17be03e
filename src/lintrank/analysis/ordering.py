# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Deterministic topological ordering of diagnostics."""

from __future__ import annotations

import heapq
from collections.abc import Iterable, Mapping, Sequence

from lintrank.core.models import Diagnostic, DiagnosticId, Edge, diagnostic_id


def topo_rank(diagnostics: Sequence[Diagnostic], edges: Iterable[Edge]) -> dict[DiagnosticId, int]:
    """Rank diagnostics so that every edge source precedes its target.

    Kahn's algorithm where, among the nodes with no remaining predecessors,
    the lexicographically smallest identifier is always taken next. Nodes
    left over because they sit on a cycle are appended afterwards in their
    original diagnostic order.

    Args:
        diagnostics: Diagnostics in original order; repeated identifiers
            collapse into one node.
        edges: Dependency edges. Edges naming unknown identifiers are ignored
            and duplicates count once.

    Returns:
        dict[DiagnosticId, int]: Bijection from every identifier onto
        ``0..n-1``.
    """

    ids = list(dict.fromkeys(diagnostic_id(diagnostic) for diagnostic in diagnostics))
    successors: dict[DiagnosticId, set[DiagnosticId]] = {ident: set() for ident in ids}
    in_degree: dict[DiagnosticId, int] = dict.fromkeys(ids, 0)

    for edge in edges:
        source, target = edge.as_tuple()
        if source not in successors or target not in successors or source == target:
            continue
        if target in successors[source]:
            continue
        successors[source].add(target)
        in_degree[target] += 1

    ready = [ident for ident in ids if in_degree[ident] == 0]
    heapq.heapify(ready)
    order: list[DiagnosticId] = []
    while ready:
        current = heapq.heappop(ready)
        order.append(current)
        for successor in successors[current]:
            in_degree[successor] -= 1
            if in_degree[successor] == 0:
                heapq.heappush(ready, successor)

    if len(order) != len(ids):
        placed = set(order)
        order.extend(ident for ident in ids if ident not in placed)

    return {ident: position for position, ident in enumerate(order)}


def presentation_key(diagnostic: Diagnostic, rank: Mapping[DiagnosticId, int]) -> tuple[int, int, str, int, int]:
    """Return the sort key combining topological rank with the secondary comparator.

    Args:
        diagnostic: Diagnostic to order.
        rank: Rank map produced by :func:`topo_rank`.

    Returns:
        tuple[int, int, str, int, int]: ``(rank, -severity, path, line, column)``.
        Diagnostics missing from ``rank`` sort after every ranked one.
    """

    return (
        rank.get(diagnostic_id(diagnostic), len(rank)),
        -int(diagnostic.severity),
        diagnostic.resolved_path,
        diagnostic.line,
        diagnostic.column,
    )


def order_diagnostics(diagnostics: Sequence[Diagnostic], rank: Mapping[DiagnosticId, int]) -> list[Diagnostic]:
    """Return ``diagnostics`` in final presentation order.

    Rank takes priority; severity (descending), file path, line, and column
    break ties between diagnostics that share a rank or are unranked.

    Args:
        diagnostics: Diagnostics to sort.
        rank: Rank map produced by :func:`topo_rank`.

    Returns:
        list[Diagnostic]: New list in presentation order.
    """

    return sorted(diagnostics, key=lambda diagnostic: presentation_key(diagnostic, rank))


__all__ = ["order_diagnostics", "presentation_key", "topo_rank"]
