# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Program model for Python codebases built on the standard :mod:`ast` module.

The model mirrors what a type checker offers the dependency graph builder:
offsets for diagnostic positions, the innermost node at an offset, symbol
resolution that follows import aliases across modules, declaration spans, and
module import resolution against the configured source roots.
"""

from __future__ import annotations

import ast
import configparser
import logging
import re
import tomllib
from collections.abc import Iterator, Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Final

from lintrank.core.errors import ProgramUnavailableError
from lintrank.core.models import resolve_file_path
from lintrank.interfaces.program import Declaration, NodeKind, ProgramModel

LOGGER = logging.getLogger(__name__)

MODULE_SYMBOL: Final[str] = "<module>"
TYPECHECK_CONFIG_FILES: Final[tuple[str, ...]] = (
    "pyrightconfig.json",
    "mypy.ini",
    ".mypy.ini",
    "pyproject.toml",
    "setup.cfg",
)
_PYPROJECT_CHECKER_SECTIONS: Final[tuple[str, ...]] = ("mypy", "pyright", "basedpyright")
_SETUP_CFG_SECTION: Final[str] = "mypy"
_NEWLINE_PATTERN: Final[re.Pattern[str]] = re.compile(r"\r\n|\r|\n")
_ScopeNode = ast.FunctionDef | ast.AsyncFunctionDef | ast.Lambda
_NESTED_BLOCK_FIELDS: Final[tuple[str, ...]] = ("body", "orelse", "finalbody", "handlers", "cases")


@dataclass(frozen=True, slots=True)
class AstProgram:
    """Workspace described by a type-checking configuration file."""

    root: Path
    config_file: Path
    source_roots: tuple[Path, ...]


@dataclass(eq=False, slots=True)
class AstSourceFile:
    """Parsed Python module with the lookup tables the model needs."""

    path: str
    text: str
    tree: ast.Module
    line_starts: tuple[int, ...]
    parents: dict[ast.AST, ast.AST] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class AstNode:
    """Syntax node bound to the source file it belongs to."""

    source: AstSourceFile
    node: ast.AST


@dataclass(frozen=True, slots=True)
class AstSymbol:
    """Name bound in a module or function scope.

    ``name`` equals :data:`MODULE_SYMBOL` when the symbol is a module itself.
    ``scope`` is ``None`` for module-level bindings.
    """

    path: str
    name: str
    scope: _ScopeNode | None = None


@dataclass(frozen=True, slots=True)
class _Binding:
    """Statement or parameter that binds a name."""

    node: ast.AST
    alias: ast.alias | None = None


def _line_starts(text: str) -> tuple[int, ...]:
    starts = [0]
    starts.extend(match.end() for match in _NEWLINE_PATTERN.finditer(text))
    return tuple(starts)


def _char_column(line: str, byte_column: int) -> int:
    """Convert a UTF-8 byte column reported by :mod:`ast` into a string index."""

    return len(line.encode("utf-8")[:byte_column].decode("utf-8", errors="ignore"))


def _has_position(node: ast.AST) -> bool:
    return getattr(node, "lineno", None) is not None and getattr(node, "end_lineno", None) is not None


def _positioned_children(node: ast.AST) -> Iterator[ast.AST]:
    # ``arguments``, ``comprehension`` and ``withitem`` carry no position of their own.
    for child in ast.iter_child_nodes(node):
        if _has_position(child):
            yield child
        else:
            yield from _positioned_children(child)


def _bound_names(target: ast.AST) -> Iterator[str]:
    if isinstance(target, ast.Name):
        yield target.id
    elif isinstance(target, (ast.Tuple, ast.List)):
        for element in target.elts:
            yield from _bound_names(element)
    elif isinstance(target, ast.Starred):
        yield from _bound_names(target.value)


def _statement_bindings(stmt: ast.stmt) -> Iterator[tuple[str, _Binding]]:
    if isinstance(stmt, (ast.FunctionDef, ast.AsyncFunctionDef, ast.ClassDef)):
        yield stmt.name, _Binding(stmt)
    elif isinstance(stmt, ast.Assign):
        for target in stmt.targets:
            for name in _bound_names(target):
                yield name, _Binding(stmt)
    elif isinstance(stmt, (ast.AnnAssign, ast.AugAssign, ast.For, ast.AsyncFor)):
        for name in _bound_names(stmt.target):
            yield name, _Binding(stmt)
    elif isinstance(stmt, (ast.With, ast.AsyncWith)):
        for item in stmt.items:
            if item.optional_vars is not None:
                for name in _bound_names(item.optional_vars):
                    yield name, _Binding(stmt)
    elif isinstance(stmt, ast.Import):
        for alias in stmt.names:
            yield (alias.asname or alias.name.split(".", 1)[0]), _Binding(stmt, alias)
    elif isinstance(stmt, ast.ImportFrom):
        for alias in stmt.names:
            if alias.name != "*":
                yield (alias.asname or alias.name), _Binding(stmt, alias)


def _collect_bindings(body: Sequence[ast.AST]) -> dict[str, list[_Binding]]:
    """Return bindings made by ``body`` without entering nested scopes."""

    bindings: dict[str, list[_Binding]] = {}
    pending: list[ast.AST] = list(body)
    while pending:
        stmt = pending.pop(0)
        if isinstance(stmt, ast.stmt):
            for name, binding in _statement_bindings(stmt):
                bindings.setdefault(name, []).append(binding)
        if isinstance(stmt, (ast.FunctionDef, ast.AsyncFunctionDef, ast.ClassDef)):
            continue
        for field_name in _NESTED_BLOCK_FIELDS:
            nested = getattr(stmt, field_name, None)
            if isinstance(nested, list):
                pending.extend(nested)
    return bindings


def _scope_bindings(scope: _ScopeNode) -> tuple[dict[str, list[_Binding]], set[str]]:
    arguments = scope.args
    bindings: dict[str, list[_Binding]] = {}
    params = [*arguments.posonlyargs, *arguments.args, *arguments.kwonlyargs]
    params.extend(arg for arg in (arguments.vararg, arguments.kwarg) if arg is not None)
    for param in params:
        bindings.setdefault(param.arg, []).append(_Binding(param))
    if isinstance(scope, ast.Lambda):
        return bindings, set()
    for name, entries in _collect_bindings(scope.body).items():
        bindings.setdefault(name, []).extend(entries)
    global_names: set[str] = set()
    for node in ast.walk(scope):
        if isinstance(node, (ast.Global, ast.Nonlocal)):
            global_names.update(node.names)
    return bindings, global_names


class AstProgramModel(ProgramModel[AstProgram, AstSourceFile, AstNode, AstSymbol]):
    """Program model over the Python sources beneath ``root``."""

    def __init__(self, root: Path) -> None:
        """Create a model rooted at ``root``.

        Args:
            root: Workspace directory holding the type-checking configuration.
        """

        self._root = Path(resolve_file_path(str(root)))
        self._program: AstProgram | None = None
        self._program_resolved = False
        self._sources: dict[str, AstSourceFile | None] = {}
        self._module_bindings: dict[str, dict[str, list[_Binding]]] = {}

    # Program discovery -------------------------------------------------

    def resolve_configured_program(self) -> AstProgram | None:
        """Return the program described by the first usable checker configuration.

        Returns:
            AstProgram | None: Program rooted at the workspace, or ``None`` when
            no mypy/pyright configuration is present.
        """

        if not self._program_resolved:
            self._program = self._discover_program()
            self._program_resolved = True
        return self._program

    def _discover_program(self) -> AstProgram | None:
        for name in TYPECHECK_CONFIG_FILES:
            candidate = self._root / name
            if candidate.is_file() and self._is_usable_config(candidate):
                source_roots = [self._root]
                src_dir = self._root / "src"
                if src_dir.is_dir():
                    source_roots.append(src_dir)
                LOGGER.debug("using %s as program configuration", candidate)
                return AstProgram(root=self._root, config_file=candidate, source_roots=tuple(source_roots))
        LOGGER.debug("no type-checking configuration found beneath %s", self._root)
        return None

    @staticmethod
    def _is_usable_config(path: Path) -> bool:
        if path.name == "pyproject.toml":
            try:
                with path.open("rb") as handle:
                    document = tomllib.load(handle)
            except (OSError, tomllib.TOMLDecodeError) as exc:
                LOGGER.warning("ignoring unreadable %s: %s", path, exc)
                return False
            tool_section = document.get("tool", {})
            return isinstance(tool_section, Mapping) and any(
                key in tool_section for key in _PYPROJECT_CHECKER_SECTIONS
            )
        if path.name == "setup.cfg":
            parser = configparser.ConfigParser()
            try:
                parser.read(path, encoding="utf-8")
            except configparser.Error as exc:
                LOGGER.warning("ignoring unreadable %s: %s", path, exc)
                return False
            return parser.has_section(_SETUP_CFG_SECTION)
        return True

    def _require_program(self) -> AstProgram:
        program = self.resolve_configured_program()
        if program is None:
            raise ProgramUnavailableError(f"no type-checking configuration found in {self._root}")
        return program

    # Source files ------------------------------------------------------

    def get_source_file(self, path: str) -> AstSourceFile | None:
        """Return the parsed module at ``path`` or ``None`` when it cannot be parsed.

        Args:
            path: File path; relative paths resolve against the working directory.

        Returns:
            AstSourceFile | None: Parsed module when ``path`` is readable Python.
        """

        self._require_program()
        key = resolve_file_path(path)
        if key not in self._sources:
            self._sources[key] = self._parse(key)
        return self._sources[key]

    @staticmethod
    def _parse(path: str) -> AstSourceFile | None:
        if not path.endswith((".py", ".pyi")):
            return None
        try:
            text = Path(path).read_text(encoding="utf-8")
            tree = ast.parse(text, filename=path)
        except (OSError, UnicodeDecodeError, SyntaxError, ValueError) as exc:
            LOGGER.debug("cannot parse %s: %s", path, exc)
            return None
        parents: dict[ast.AST, ast.AST] = {}
        for parent in ast.walk(tree):
            for child in ast.iter_child_nodes(parent):
                parents[child] = parent
        return AstSourceFile(path=path, text=text, tree=tree, line_starts=_line_starts(text), parents=parents)

    def line_text(self, source_file: AstSourceFile, line: int) -> str:
        """Return the content of one-based ``line`` without its terminator."""

        if line < 1 or line > len(source_file.line_starts):
            return ""
        start = source_file.line_starts[line - 1]
        end = source_file.line_starts[line] if line < len(source_file.line_starts) else len(source_file.text)
        return source_file.text[start:end].rstrip("\r\n")

    def position_at(self, source_file: AstSourceFile, line: int, column: int) -> int:
        """Return the character offset of ``line``/``column`` clamped to the file."""

        if line < 1:
            return 0
        if line > len(source_file.line_starts):
            return len(source_file.text)
        content = self.line_text(source_file, line)
        return source_file.line_starts[line - 1] + max(0, min(column, len(content)))

    def _span(self, source_file: AstSourceFile, node: ast.AST) -> tuple[int, int]:
        if isinstance(node, ast.Module):
            return 0, len(source_file.text)
        anchor = node
        decorators = getattr(node, "decorator_list", None)
        if decorators:
            anchor = decorators[0]
        start_line: int = getattr(anchor, "lineno")
        end_line: int = getattr(node, "end_lineno")
        start_column = _char_column(self.line_text(source_file, start_line), getattr(anchor, "col_offset", 0))
        end_column = _char_column(self.line_text(source_file, end_line), getattr(node, "end_col_offset", 0) or 0)
        return (
            self.position_at(source_file, start_line, start_column),
            self.position_at(source_file, end_line, end_column),
        )

    # Syntax tree navigation -------------------------------------------

    def node_at(self, source_file: AstSourceFile, offset: int) -> AstNode:
        """Return the innermost node whose span contains ``offset``."""

        current: ast.AST = source_file.tree
        while True:
            for child in _positioned_children(current):
                start, end = self._span(source_file, child)
                if start <= offset < end:
                    current = child
                    break
            else:
                return AstNode(source=source_file, node=current)

    def parent_of(self, node: AstNode) -> AstNode | None:
        """Return the parent node or ``None`` for the module root."""

        parent = node.source.parents.get(node.node)
        return AstNode(source=node.source, node=parent) if parent is not None else None

    def node_kind(self, node: AstNode) -> NodeKind:
        """Classify ``node`` as identifier, call, member or index access."""

        target = node.node
        if isinstance(target, ast.Name):
            return "identifier"
        if isinstance(target, ast.Call):
            return "call"
        if isinstance(target, ast.Attribute):
            return "member_access"
        if isinstance(target, ast.Subscript):
            return "index_access"
        return "other"

    # Symbols -----------------------------------------------------------

    def symbol_at(self, node: AstNode) -> list[AstSymbol]:
        """Return the symbols referenced at ``node`` following import aliases.

        Calls resolve through their callee and subscripts through their index
        expression. Names resolve through enclosing function scopes before the
        module scope.
        """

        target = node.node
        if isinstance(target, ast.Call):
            target = target.func
        elif isinstance(target, ast.Subscript):
            target = target.slice
        return self._resolve_expression(node.source, target, set())

    def _resolve_expression(
        self,
        source_file: AstSourceFile,
        expression: ast.AST,
        seen: set[tuple[str, str]],
    ) -> list[AstSymbol]:
        if isinstance(expression, ast.Name):
            scope = self._binding_scope(source_file, expression, expression.id)
            if scope is not None:
                return [AstSymbol(path=source_file.path, name=expression.id, scope=scope)]
            return self._lookup_module_name(source_file.path, expression.id, seen)
        if isinstance(expression, ast.Attribute):
            resolved: list[AstSymbol] = []
            for owner in self._resolve_expression(source_file, expression.value, seen):
                if owner.name == MODULE_SYMBOL:
                    resolved.extend(self._lookup_module_name(owner.path, expression.attr, seen))
            return resolved
        return []

    def _binding_scope(self, source_file: AstSourceFile, at: ast.AST, name: str) -> _ScopeNode | None:
        parent = source_file.parents.get(at)
        while parent is not None:
            if isinstance(parent, (ast.FunctionDef, ast.AsyncFunctionDef, ast.Lambda)):
                bindings, global_names = _scope_bindings(parent)
                if name in global_names:
                    return None
                if name in bindings:
                    return parent
            parent = source_file.parents.get(parent)
        return None

    def _bindings_for(self, source_file: AstSourceFile) -> dict[str, list[_Binding]]:
        if source_file.path not in self._module_bindings:
            self._module_bindings[source_file.path] = _collect_bindings(source_file.tree.body)
        return self._module_bindings[source_file.path]

    def _lookup_module_name(self, path: str, name: str, seen: set[tuple[str, str]]) -> list[AstSymbol]:
        key = (path, name)
        if key in seen:
            return []
        seen.add(key)
        source_file = self.get_source_file(path)
        if source_file is None:
            return []
        bindings = self._bindings_for(source_file).get(name, [])
        resolved: list[AstSymbol] = []
        for binding in bindings:
            if binding.alias is None:
                resolved.append(AstSymbol(path=path, name=name))
                continue
            followed = self._follow_import(path, binding, seen)
            resolved.extend(followed or [AstSymbol(path=path, name=name)])
        return list(dict.fromkeys(resolved))

    def _follow_import(self, path: str, binding: _Binding, seen: set[tuple[str, str]]) -> list[AstSymbol]:
        statement = binding.node
        alias = binding.alias
        if alias is None:
            return []
        if isinstance(statement, ast.Import):
            module_name = alias.name if alias.asname else alias.name.split(".", 1)[0]
            target = self.resolve_import(module_name, path)
            return [AstSymbol(path=target, name=MODULE_SYMBOL)] if target else []
        if not isinstance(statement, ast.ImportFrom):
            return []
        specifier = "." * statement.level + (statement.module or "")
        module_path = self.resolve_import(specifier, path)
        if module_path is None:
            return []
        symbols = self._lookup_module_name(module_path, alias.name, seen)
        if symbols:
            return symbols
        separator = "" if specifier.endswith(".") else "."
        submodule = self.resolve_import(f"{specifier}{separator}{alias.name}", path)
        return [AstSymbol(path=submodule, name=MODULE_SYMBOL)] if submodule else []

    def declarations_of(self, symbol: AstSymbol) -> list[Declaration]:
        """Return the spans of every statement or parameter binding ``symbol``."""

        source_file = self.get_source_file(symbol.path)
        if source_file is None:
            return []
        if symbol.name == MODULE_SYMBOL:
            return [Declaration(path=source_file.path, start=0, end=len(source_file.text))]
        if symbol.scope is not None:
            bindings = _scope_bindings(symbol.scope)[0].get(symbol.name, [])
        else:
            bindings = self._bindings_for(source_file).get(symbol.name, [])
        declarations: list[Declaration] = []
        for binding in bindings:
            start, end = self._span(source_file, binding.node)
            declarations.append(Declaration(path=source_file.path, start=start, end=end))
        return declarations

    # Imports -----------------------------------------------------------

    def imports_of(self, source_file: AstSourceFile) -> list[str]:
        """Return top-level import specifiers in statement order."""

        specifiers: list[str] = []
        for statement in source_file.tree.body:
            if isinstance(statement, ast.Import):
                specifiers.extend(alias.name for alias in statement.names)
            elif isinstance(statement, ast.ImportFrom):
                specifiers.append("." * statement.level + (statement.module or ""))
        return specifiers

    def resolve_import(self, specifier: str, from_file: str) -> str | None:
        """Resolve an absolute or relative module specifier to a source file.

        Args:
            specifier: Dotted module path, optionally prefixed with dots.
            from_file: Path of the importing module.

        Returns:
            str | None: Absolute path of the module or package ``__init__``.
        """

        program = self._require_program()
        module = specifier.lstrip(".")
        level = len(specifier) - len(module)
        if level:
            base = Path(resolve_file_path(from_file)).parent
            for _ in range(level - 1):
                base = base.parent
            bases: tuple[Path, ...] = (base,)
        else:
            bases = program.source_roots
        parts = [part for part in module.split(".") if part]
        for base in bases:
            candidate = base.joinpath(*parts)
            options = [candidate / "__init__.py", candidate / "__init__.pyi"]
            if parts:
                options[:0] = [candidate.parent / f"{candidate.name}.py", candidate.parent / f"{candidate.name}.pyi"]
            for option in options:
                if option.is_file():
                    return resolve_file_path(str(option))
        return None


__all__ = [
    "MODULE_SYMBOL",
    "TYPECHECK_CONFIG_FILES",
    "AstNode",
    "AstProgram",
    "AstProgramModel",
    "AstSourceFile",
    "AstSymbol",
]
