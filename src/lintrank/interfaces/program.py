# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Protocols describing the program model consumed by the dependency graph builder."""

from __future__ import annotations

from abc import abstractmethod
from collections.abc import Hashable, Sequence
from dataclasses import dataclass
from typing import Literal, Protocol, TypeVar, runtime_checkable

NodeKind = Literal["identifier", "call", "member_access", "index_access", "other"]

ProgramT = TypeVar("ProgramT", covariant=True)
SourceT = TypeVar("SourceT")
NodeT = TypeVar("NodeT")
SymbolT = TypeVar("SymbolT", bound=Hashable)


@dataclass(frozen=True, slots=True)
class Declaration:
    """Source span of a declaration expressed as character offsets.

    Attributes:
        path: Absolute path of the file holding the declaration.
        start: Inclusive start offset within the file text.
        end: Exclusive end offset within the file text.
    """

    path: str
    start: int
    end: int

    def contains(self, start: int, end: int) -> bool:
        """Return ``True`` when ``[start, end]`` lies within the declaration.

        Args:
            start: Start offset of the candidate span.
            end: End offset of the candidate span.

        Returns:
            bool: ``True`` when the candidate span is enclosed.
        """

        return self.start <= start and end <= self.end


@runtime_checkable
class ProgramModel(Protocol[ProgramT, SourceT, NodeT, SymbolT]):
    """Expose parse trees, symbol resolution, and import resolution for a codebase.

    Line numbers are one-based. Columns passed to :meth:`position_at` are
    zero-based string indices (real columns).
    """

    @abstractmethod
    def resolve_configured_program(self) -> ProgramT | None:
        """Return the program described by the workspace type-checking configuration.

        Returns:
            ProgramT | None: Program handle, or ``None`` when no usable
            configuration exists.
        """
        raise NotImplementedError

    @abstractmethod
    def get_source_file(self, path: str) -> SourceT | None:
        """Return the parsed source file for ``path`` when it belongs to the program.

        Args:
            path: Absolute file path.

        Returns:
            SourceT | None: Source handle, or ``None`` when the file is unknown.
        """
        raise NotImplementedError

    @abstractmethod
    def line_text(self, source_file: SourceT, line: int) -> str:
        """Return the text of ``line`` without its line terminator.

        Args:
            source_file: Source handle returned by :meth:`get_source_file`.
            line: One-based line number.

        Returns:
            str: Line content, or an empty string for out-of-range lines.
        """
        raise NotImplementedError

    @abstractmethod
    def position_at(self, source_file: SourceT, line: int, column: int) -> int:
        """Return the absolute character offset of ``line``/``column``.

        Args:
            source_file: Source handle returned by :meth:`get_source_file`.
            line: One-based line number.
            column: Zero-based real column.

        Returns:
            int: Offset clamped to the bounds of the file text.
        """
        raise NotImplementedError

    @abstractmethod
    def node_at(self, source_file: SourceT, offset: int) -> NodeT:
        """Return the smallest syntax node enclosing ``offset``.

        Args:
            source_file: Source handle returned by :meth:`get_source_file`.
            offset: Absolute character offset.

        Returns:
            NodeT: Innermost node; the file root when nothing narrower encloses it.
        """
        raise NotImplementedError

    @abstractmethod
    def parent_of(self, node: NodeT) -> NodeT | None:
        """Return the parent of ``node`` or ``None`` for the file root."""
        raise NotImplementedError

    @abstractmethod
    def node_kind(self, node: NodeT) -> NodeKind:
        """Classify ``node`` for the reference-node search."""
        raise NotImplementedError

    @abstractmethod
    def symbol_at(self, node: NodeT) -> Sequence[SymbolT]:
        """Return the symbols referenced at ``node`` with aliases resolved.

        Args:
            node: Node returned by :meth:`node_at` or one of its ancestors.

        Returns:
            Sequence[SymbolT]: Resolved symbols; empty when nothing resolves.
        """
        raise NotImplementedError

    @abstractmethod
    def declarations_of(self, symbol: SymbolT) -> Sequence[Declaration]:
        """Return every declaration of ``symbol``."""
        raise NotImplementedError

    @abstractmethod
    def imports_of(self, source_file: SourceT) -> Sequence[str]:
        """Return the module specifiers imported at the top level of ``source_file``."""
        raise NotImplementedError

    @abstractmethod
    def resolve_import(self, specifier: str, from_file: str) -> str | None:
        """Resolve ``specifier`` imported by ``from_file`` to an absolute file path.

        Args:
            specifier: Module specifier as written in the import statement.
            from_file: Absolute path of the importing file.

        Returns:
            str | None: Absolute path of the imported module, or ``None``.
        """
        raise NotImplementedError


__all__ = ["Declaration", "NodeKind", "ProgramModel"]
