"""Marker-delimited grouping for help catalog lines.

Catalog lines are grouped by paired sentinel lines of the form
``begin <keyword> <label>`` / ``end <keyword>``. Lines outside any block land in
the ``"Other commands"`` bucket. Blocks do not nest; an unbalanced marker is a
content error in the contributing module's documentation and aborts the parse.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from typing import Dict, List, Sequence

__all__ = [
    "OTHER_COMMANDS",
    "ClosingMarkerMissing",
    "LineKind",
    "MarkerError",
    "MarkerState",
    "OpeningMarkerMissing",
    "classify_line",
    "parse_marker_groups",
]

OTHER_COMMANDS = "Other commands"
UNKNOWN_SCRIPT = "some script"


class MarkerError(ValueError):
    """Structural problem with begin/end markers in the catalog."""

    marker_role = "marker"

    def __init__(self, keyword: str, label: str = "") -> None:
        self.keyword = keyword
        self.label = label
        super().__init__(self.describe())

    def describe(self) -> str:
        where = f'In the script "{self.label}"' if self.label else f"In {UNKNOWN_SCRIPT}"
        return f"{where} the {self.marker_role} marker was not found."


class OpeningMarkerMissing(MarkerError):
    """An ``end <keyword>`` line appeared with no open block."""

    marker_role = "opening"


class ClosingMarkerMissing(MarkerError):
    """A ``begin <keyword>`` block was never closed."""

    marker_role = "closing"


class LineKind(Enum):
    BEGIN = "begin"
    END = "end"
    PLAIN = "plain"


class MarkerState(Enum):
    IDLE = "idle"
    IN_BLOCK = "in_block"


@dataclass(frozen=True)
class _Cursor:
    state: MarkerState = MarkerState.IDLE
    label: str = ""


@lru_cache(maxsize=None)
def _marker_pattern(keyword: str) -> re.Pattern[str]:
    return re.compile(
        rf"^\s*(begin|end)\s*({re.escape(keyword)})\s*(.*)$",
        re.IGNORECASE,
    )


def classify_line(line: str, keyword: str) -> tuple[LineKind, str]:
    """Return the kind of ``line`` for ``keyword`` and its marker label."""

    match = _marker_pattern(keyword).match(line)
    if match is None:
        return LineKind.PLAIN, ""
    kind = LineKind.BEGIN if match.group(1).lower() == "begin" else LineKind.END
    return kind, match.group(3).strip()


def _transition(cursor: _Cursor, kind: LineKind, label: str, keyword: str) -> _Cursor:
    if kind is LineKind.BEGIN:
        if cursor.state is MarkerState.IN_BLOCK:
            raise ClosingMarkerMissing(keyword, cursor.label)
        return _Cursor(MarkerState.IN_BLOCK, label)
    if kind is LineKind.END:
        if cursor.state is MarkerState.IDLE:
            raise OpeningMarkerMissing(keyword)
        return _Cursor()
    return cursor


def parse_marker_groups(entries: Sequence[str], keyword: str) -> Dict[str, List[str]]:
    """Split ``entries`` into buckets named by ``begin <keyword> <label>`` markers.

    Marker lines themselves are never stored. Buckets keep first-seen order and
    every plain line keeps its relative position inside its bucket.

    Raises
    ------
    OpeningMarkerMissing
        When an ``end <keyword>`` line has no open block.
    ClosingMarkerMissing
        When a block is still open at the next ``begin <keyword>`` or at the
        end of ``entries``.
    """

    buckets: Dict[str, List[str]] = {}
    cursor = _Cursor()
    for line in entries:
        kind, label = classify_line(line, keyword)
        cursor = _transition(cursor, kind, label, keyword)
        if kind is not LineKind.PLAIN:
            continue
        bucket = cursor.label if cursor.state is MarkerState.IN_BLOCK else OTHER_COMMANDS
        buckets.setdefault(bucket, []).append(line)

    if cursor.state is MarkerState.IN_BLOCK:
        raise ClosingMarkerMissing(keyword, cursor.label)
    return buckets
