"""Help catalog assembly, rendering and command suggestions."""

from .access import AccessSplit, split_access_tiers
from .assembler import (
    ADMIN_SEPARATOR,
    assemble_catalog,
    filter_catalog,
    flatten_catalog,
)
from .markers import (
    OTHER_COMMANDS,
    ClosingMarkerMissing,
    MarkerError,
    OpeningMarkerMissing,
    parse_marker_groups,
)
from .matcher import is_probable_match

__all__ = [
    "ADMIN_SEPARATOR",
    "OTHER_COMMANDS",
    "AccessSplit",
    "ClosingMarkerMissing",
    "MarkerError",
    "OpeningMarkerMissing",
    "assemble_catalog",
    "filter_catalog",
    "flatten_catalog",
    "is_probable_match",
    "parse_marker_groups",
    "split_access_tiers",
]
