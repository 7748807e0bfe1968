"""Public/admin split for the entries of a single help group."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Sequence

from .markers import OTHER_COMMANDS, parse_marker_groups

__all__ = ["ADMIN_KEYWORD", "AccessSplit", "split_access_tiers"]

ADMIN_KEYWORD = "admin"


@dataclass(frozen=True)
class AccessSplit:
    """Entries of one group, separated by visibility tier."""

    public: List[str] = field(default_factory=list)
    admin_only: List[str] = field(default_factory=list)


def split_access_tiers(group_entries: Sequence[str]) -> AccessSplit:
    """Separate ``begin admin`` / ``end admin`` blocks from the public entries.

    Admin blocks are unlabeled by convention; a labeled admin block is still
    treated as admin-only. Marker errors propagate to the caller.
    """

    buckets = parse_marker_groups(group_entries, ADMIN_KEYWORD)
    public = list(buckets.pop(OTHER_COMMANDS, []))
    admin_only: List[str] = []
    for entries in buckets.values():
        admin_only.extend(entries)
    return AccessSplit(public=public, admin_only=admin_only)
