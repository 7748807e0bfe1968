"""Build the grouped, access-filtered help catalog for one request."""

from __future__ import annotations

from typing import Dict, Iterator, List, Mapping, Sequence

from .access import split_access_tiers
from .markers import OTHER_COMMANDS, parse_marker_groups

__all__ = [
    "ADMIN_SEPARATOR",
    "GROUP_KEYWORD",
    "assemble_catalog",
    "filter_catalog",
    "flatten_catalog",
    "iter_groups",
]

GROUP_KEYWORD = "group"
ADMIN_SEPARATOR = "Admin only:"

GroupedCatalog = Dict[str, List[str]]


def assemble_catalog(raw_catalog: Sequence[str], is_requester_admin: bool) -> GroupedCatalog:
    """Group ``raw_catalog`` and resolve admin-only entries for the requester.

    ``is_requester_admin`` must be resolved by the caller before assembly; the
    catalog is rebuilt from scratch on every call. Any marker error aborts the
    whole assembly.
    """

    grouped: GroupedCatalog = {}
    for name, entries in parse_marker_groups(raw_catalog, GROUP_KEYWORD).items():
        split = split_access_tiers(entries)
        lines = list(split.public)
        if is_requester_admin and split.admin_only:
            lines.append(ADMIN_SEPARATOR)
            lines.extend(split.admin_only)
        grouped[name] = lines
    return grouped


def iter_groups(grouped: Mapping[str, Sequence[str]]) -> Iterator[tuple[str, Sequence[str]]]:
    """Yield groups in render order: insertion order, ``Other commands`` last."""

    for name, lines in grouped.items():
        if name != OTHER_COMMANDS:
            yield name, lines
    if OTHER_COMMANDS in grouped:
        yield OTHER_COMMANDS, grouped[OTHER_COMMANDS]


def flatten_catalog(grouped: Mapping[str, Sequence[str]]) -> List[str]:
    """Return every command line in render order, without separator lines."""

    return [
        line
        for _, lines in iter_groups(grouped)
        for line in lines
        if line != ADMIN_SEPARATOR
    ]


def filter_catalog(grouped: Mapping[str, Sequence[str]], query: str) -> GroupedCatalog:
    """Keep entries containing ``query`` (case-insensitive); drop empty groups."""

    needle = query.strip().lower()
    if not needle:
        return {name: list(lines) for name, lines in grouped.items()}

    filtered: GroupedCatalog = {}
    for name, lines in grouped.items():
        public: List[str] = []
        admin: List[str] = []
        target = public
        for line in lines:
            if line == ADMIN_SEPARATOR:
                target = admin
                continue
            if needle in line.lower():
                target.append(line)
        kept = public + ([ADMIN_SEPARATOR, *admin] if admin else [])
        if kept:
            filtered[name] = kept
    return filtered
