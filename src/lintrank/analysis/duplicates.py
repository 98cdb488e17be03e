# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Correlate duplicate-code reports into paired file regions.

Reports follow the SARIF layout produced by duplicate detectors such as
``jscpd --reporters sarif``. Only the structured ``physicalLocation`` data is
used; the human-readable message text differs across tool versions and
locales and is never parsed for file or line information.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterator, Mapping, Sequence
from pathlib import Path
from typing import Any, Final, TypeAlias

from lintrank.core.errors import DuplicateReportError, InvalidArgumentError
from lintrank.core.models import DuplicatePair

LOGGER = logging.getLogger(__name__)

_RUNS_KEY: Final[str] = "runs"
_RESULTS_KEY: Final[str] = "results"
_LOCATIONS_KEY: Final[str] = "locations"
_PHYSICAL_KEY: Final[str] = "physicalLocation"
_ARTIFACT_KEY: Final[str] = "artifactLocation"
_URI_KEY: Final[str] = "uri"
_REGION_KEY: Final[str] = "region"
_START_LINE_KEY: Final[str] = "startLine"
_END_LINE_KEY: Final[str] = "endLine"

_Region: TypeAlias = tuple[str, int, int]


def _as_sequence(value: Any) -> Sequence[Any]:
    if isinstance(value, Sequence) and not isinstance(value, (str, bytes)):
        return value
    return ()


def _positive_int(value: Any) -> int | None:
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        return None
    return value


def _region(location: Any) -> _Region | None:
    """Return ``(uri, start, end)`` for a SARIF location or ``None`` when incomplete."""

    if not isinstance(location, Mapping):
        return None
    physical = location.get(_PHYSICAL_KEY)
    if not isinstance(physical, Mapping):
        return None
    artifact = physical.get(_ARTIFACT_KEY)
    region = physical.get(_REGION_KEY)
    if not isinstance(artifact, Mapping) or not isinstance(region, Mapping):
        return None
    uri = artifact.get(_URI_KEY)
    start = _positive_int(region.get(_START_LINE_KEY))
    if not isinstance(uri, str) or not uri or start is None:
        return None
    end = _positive_int(region.get(_END_LINE_KEY)) or start
    if end < start:
        return None
    return uri, start, end


def _iter_results(report: Mapping[str, Any]) -> Iterator[Mapping[str, Any]]:
    for run in _as_sequence(report.get(_RUNS_KEY)):
        if not isinstance(run, Mapping):
            continue
        for result in _as_sequence(run.get(_RESULTS_KEY)):
            if isinstance(result, Mapping):
                yield result


def _pair_from_result(result: Mapping[str, Any]) -> DuplicatePair | None:
    regions = [region for region in map(_region, _as_sequence(result.get(_LOCATIONS_KEY))) if region is not None]
    if len(regions) < 2:
        return None
    (file_a, start_a, end_a), (file_b, start_b, end_b) = regions[0], regions[1]
    return DuplicatePair(
        file_a=file_a,
        start_a=start_a,
        end_a=end_a,
        file_b=file_b,
        start_b=start_b,
        end_b=end_b,
    )


def parse_duplicate_report(report: Mapping[str, Any], max_pairs: int) -> list[DuplicatePair]:
    """Return duplicate pairs found in a SARIF-shaped duplicate report.

    Args:
        report: Decoded SARIF document.
        max_pairs: Maximum number of pairs to return.

    Returns:
        list[DuplicatePair]: Pairs in report encounter order, truncated to
        ``max_pairs`` after the whole report has been parsed. Results with
        fewer than two usable locations are skipped.

    Raises:
        InvalidArgumentError: If ``max_pairs`` is negative.
    """

    if max_pairs < 0:
        raise InvalidArgumentError(f"max_pairs must be non-negative, received {max_pairs}")
    pairs: list[DuplicatePair] = []
    skipped = 0
    for result in _iter_results(report):
        pair = _pair_from_result(result)
        if pair is None:
            skipped += 1
            continue
        pairs.append(pair)
    if skipped:
        LOGGER.debug("skipped %d duplicate results without two structured locations", skipped)
    return pairs[:max_pairs]


def load_duplicate_report(path: Path) -> dict[str, Any]:
    """Read the SARIF document at ``path``.

    Args:
        path: Location of the duplicate detector's SARIF output.

    Returns:
        dict[str, Any]: Decoded JSON object.

    Raises:
        DuplicateReportError: If the file cannot be read, is not valid JSON,
            or does not contain a JSON object.
    """

    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise DuplicateReportError(f"cannot read duplicate report {path}: {exc}") from exc
    if not isinstance(payload, dict):
        raise DuplicateReportError(f"duplicate report {path} must contain a JSON object")
    return payload


__all__ = ["load_duplicate_report", "parse_duplicate_report"]
