# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Typer helpers that list command options alphabetically in help output."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import Any, Final, TypeVar

import typer
from click.core import Context, Parameter
from click.formatting import HelpFormatter
from typer.core import TyperCommand, TyperGroup

ARGUMENT_PARAM_TYPE: Final[str] = "argument"

CommandCallback = TypeVar("CommandCallback", bound=Callable[..., Any])


def _primary_option_name(param: Parameter) -> str:
    """Return the long option name of ``param`` without dashes, for sorting."""

    option_names: Iterable[str] = tuple(getattr(param, "opts", ())) + tuple(getattr(param, "secondary_opts", ()))
    long_names = [name for name in option_names if name.startswith("--")]
    candidate = long_names[0] if long_names else (next(iter(option_names), "") or param.name or "")
    return candidate.lstrip("-").lower()


class SortedTyperCommand(TyperCommand):
    """Command whose plain-text help lists arguments first, then sorted options."""

    def format_options(self, ctx: Context, formatter: HelpFormatter) -> None:
        arguments: list[tuple[str, str]] = []
        options: list[tuple[tuple[str, int], tuple[str, str]]] = []
        for index, param in enumerate(self.get_params(ctx)):
            record = param.get_help_record(ctx)
            if record is None:
                continue
            if getattr(param, "param_type_name", "") == ARGUMENT_PARAM_TYPE:
                arguments.append(record)
            else:
                options.append(((_primary_option_name(param), index), record))
        if arguments:
            with formatter.section("Arguments"):
                formatter.write_dl(arguments)
        if options:
            with formatter.section("Options"):
                formatter.write_dl([record for _, record in sorted(options, key=lambda item: item[0])])


class SortedTyperGroup(TyperGroup):
    """Group that creates :class:`SortedTyperCommand` instances."""

    command_class = SortedTyperCommand


class SortedTyper(typer.Typer):
    """Typer application registering sorted-help commands by default."""

    def __init__(self, *args: Any, cls: type[TyperGroup] | None = None, **kwargs: Any) -> None:
        super().__init__(*args, cls=cls or SortedTyperGroup, **kwargs)

    def command(
        self,
        name: str | None = None,
        *,
        cls: type[TyperCommand] | None = None,
        **kwargs: Any,
    ) -> Callable[[CommandCallback], CommandCallback]:
        """Register a command using :class:`SortedTyperCommand` unless ``cls`` is given."""

        return super().command(name, cls=cls or SortedTyperCommand, **kwargs)


def create_typer(**kwargs: Any) -> SortedTyper:
    """Return a :class:`SortedTyper` built with ``kwargs``."""

    return SortedTyper(**kwargs)


__all__ = ["SortedTyper", "SortedTyperCommand", "SortedTyperGroup", "create_typer"]
