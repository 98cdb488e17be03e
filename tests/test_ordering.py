# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for deterministic topological ordering of diagnostics."""

from __future__ import annotations

import itertools

from conftest import DiagnosticFactory

from lintrank.analysis.ordering import order_diagnostics, presentation_key, topo_rank
from lintrank.core.models import Edge, diagnostic_id
from lintrank.core.severity import Severity


def _edge(source: object, target: object) -> Edge:
    return Edge(source_id=diagnostic_id(source), target_id=diagnostic_id(target))  # type: ignore[arg-type]


def test_rank_is_bijection_onto_range(make_diagnostic: DiagnosticFactory) -> None:
    diagnostics = [make_diagnostic(line=line) for line in (5, 1, 3)]

    rank = topo_rank(diagnostics, [])

    assert sorted(rank.values()) == [0, 1, 2]
    assert set(rank) == {diagnostic_id(d) for d in diagnostics}


def test_without_edges_smallest_identifier_comes_first(make_diagnostic: DiagnosticFactory) -> None:
    diagnostics = [make_diagnostic("b.py"), make_diagnostic("a.py")]

    rank = topo_rank(diagnostics, [])

    assert rank[diagnostic_id(diagnostics[1])] == 0


def test_edges_place_sources_before_targets(make_diagnostic: DiagnosticFactory) -> None:
    use = make_diagnostic("a.py", line=1)
    middle = make_diagnostic("b.py", line=1)
    declaration = make_diagnostic("c.py", line=1)
    edges = [_edge(declaration, middle), _edge(middle, use)]

    rank = topo_rank([use, middle, declaration], edges)

    assert rank[diagnostic_id(declaration)] < rank[diagnostic_id(middle)] < rank[diagnostic_id(use)]
    for edge in edges:
        assert rank[edge.source_id] < rank[edge.target_id]


def test_rank_is_independent_of_input_permutation(make_diagnostic: DiagnosticFactory) -> None:
    diagnostics = [make_diagnostic(f"{name}.py", line=2) for name in "wxyz"]
    edges = [_edge(diagnostics[3], diagnostics[0]), _edge(diagnostics[2], diagnostics[1])]
    expected = topo_rank(diagnostics, edges)

    for permutation in itertools.permutations(diagnostics):
        for edge_order in itertools.permutations(edges):
            assert topo_rank(list(permutation), list(edge_order)) == expected


def test_cycle_members_are_appended_in_original_order(make_diagnostic: DiagnosticFactory) -> None:
    free = make_diagnostic("z.py")
    second = make_diagnostic("b.py")
    first = make_diagnostic("a.py")
    edges = [_edge(second, first), _edge(first, second)]

    rank = topo_rank([free, second, first], edges)

    assert rank == {diagnostic_id(free): 0, diagnostic_id(second): 1, diagnostic_id(first): 2}


def test_unknown_self_and_duplicate_edges_are_ignored(make_diagnostic: DiagnosticFactory) -> None:
    a = make_diagnostic("a.py")
    b = make_diagnostic("b.py")
    ghost = make_diagnostic("ghost.py")
    edges = [_edge(b, a), _edge(b, a), _edge(a, a), _edge(ghost, a), _edge(a, ghost)]

    rank = topo_rank([a, b], edges)

    assert rank == {diagnostic_id(b): 0, diagnostic_id(a): 1}


def test_identical_diagnostics_collapse_to_one_node(make_diagnostic: DiagnosticFactory) -> None:
    duplicate = make_diagnostic("a.py", line=4)

    rank = topo_rank([duplicate, duplicate, make_diagnostic("b.py")], [])

    assert len(rank) == 2


def test_empty_input_yields_empty_rank() -> None:
    assert topo_rank([], []) == {}


def test_secondary_order_uses_severity_then_location(make_diagnostic: DiagnosticFactory) -> None:
    warning = make_diagnostic("a.py", line=1, severity=Severity.WARNING)
    late_error = make_diagnostic("a.py", line=9, severity=Severity.ERROR)
    early_error = make_diagnostic("a.py", line=2, severity=Severity.ERROR)
    diagnostics = [warning, late_error, early_error]
    shared_rank = dict.fromkeys((diagnostic_id(d) for d in diagnostics), 0)

    ordered = order_diagnostics(diagnostics, shared_rank)

    assert ordered == [early_error, late_error, warning]


def test_rank_dominates_secondary_order(make_diagnostic: DiagnosticFactory) -> None:
    warning = make_diagnostic("a.py", severity=Severity.WARNING)
    error = make_diagnostic("b.py", severity=Severity.ERROR)
    rank = topo_rank([error, warning], [_edge(warning, error)])

    assert order_diagnostics([error, warning], rank) == [warning, error]


def test_unranked_diagnostics_sort_last(make_diagnostic: DiagnosticFactory) -> None:
    ranked = make_diagnostic("z.py")
    unranked = make_diagnostic("a.py")

    rank = {diagnostic_id(ranked): 0}

    assert presentation_key(unranked, rank)[0] == 1
    assert order_diagnostics([unranked, ranked], rank) == [ranked, unranked]
