# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Read diagnostics supplied to the command line as JSON."""

from __future__ import annotations

import json
import re
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Final

from pydantic import ValidationError

from lintrank.core.errors import InvalidArgumentError
from lintrank.core.models import Diagnostic

_CAMEL_BOUNDARY: Final[re.Pattern[str]] = re.compile(r"(?<=[a-z0-9])([A-Z])")
_KEY_ALIASES: Final[dict[str, str]] = {
    "file": "file_path",
    "filename": "file_path",
    "path": "file_path",
    "rule_id": "rule",
    "code": "rule",
}
_DIAGNOSTICS_KEY: Final[str] = "diagnostics"


def _snake_case(key: str) -> str:
    return _CAMEL_BOUNDARY.sub(r"_\1", key).lower()


def _normalise(entry: Mapping[str, Any]) -> dict[str, Any]:
    normalised: dict[str, Any] = {}
    for raw_key, value in entry.items():
        key = _snake_case(str(raw_key))
        key = _KEY_ALIASES.get(key, key)
        normalised.setdefault(key, value)
    return normalised


def parse_diagnostics(payload: Any) -> list[Diagnostic]:
    """Validate a decoded JSON payload into diagnostics.

    The payload is either a list of diagnostic objects or an object holding
    such a list under ``"diagnostics"``. Keys may be snake_case or camelCase.

    Raises:
        InvalidArgumentError: If the payload shape or any entry is invalid.
    """

    if isinstance(payload, Mapping):
        payload = payload.get(_DIAGNOSTICS_KEY)
    if not isinstance(payload, list):
        raise InvalidArgumentError("expected a JSON list of diagnostics")
    diagnostics: list[Diagnostic] = []
    for index, entry in enumerate(payload):
        if not isinstance(entry, Mapping):
            raise InvalidArgumentError(f"diagnostic #{index} is not a JSON object")
        try:
            diagnostics.append(Diagnostic.model_validate(_normalise(entry)))
        except ValidationError as exc:
            raise InvalidArgumentError(f"diagnostic #{index} is invalid: {exc}") from exc
    return diagnostics


def load_diagnostics(path: Path) -> list[Diagnostic]:
    """Read diagnostics from the JSON document at ``path``.

    Raises:
        InvalidArgumentError: If the file is unreadable or malformed.
    """

    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise InvalidArgumentError(f"cannot read diagnostics from {path}: {exc}") from exc
    return parse_diagnostics(payload)


__all__ = ["load_diagnostics", "parse_diagnostics"]
