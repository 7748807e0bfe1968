"""Lenient "did you mean" matching between an utterance and a command name."""

from __future__ import annotations

__all__ = ["MAX_EXTRA_CHARS", "MAX_MISSING_CHARS", "MIN_ALIGNED_CHARS", "is_probable_match"]

# Utterance may be at most this many characters longer than the candidate.
MAX_EXTRA_CHARS = 4
# Utterance may be at most this many characters shorter than the candidate.
MAX_MISSING_CHARS = 3
# Fewer aligned characters than this is never a suggestion.
MIN_ALIGNED_CHARS = 3

_INF = 1 << 30


def _edit_budget(length: int) -> int:
    return max(1, (length + 1) // 3)


def _best_prefix_distance(candidate: str, utterance: str) -> int:
    """Smallest banded OSA distance between ``candidate`` and any utterance prefix.

    Row ``i`` walks the candidate, column ``j`` the utterance. Cells outside
    ``-MAX_MISSING_CHARS <= j - i <= MAX_EXTRA_CHARS`` are unreachable.
    """

    rows, cols = len(candidate), len(utterance)
    previous: list[int] = []
    current = [j if j <= MAX_EXTRA_CHARS else _INF for j in range(cols + 1)]
    for i in range(1, rows + 1):
        before, previous = previous, current
        current = [_INF] * (cols + 1)
        if i <= MAX_MISSING_CHARS:
            current[0] = i
        low = max(1, i - MAX_MISSING_CHARS)
        high = min(cols, i + MAX_EXTRA_CHARS)
        for j in range(low, high + 1):
            cost = 0 if candidate[i - 1] == utterance[j - 1] else 1
            best = min(
                previous[j - 1] + cost,
                previous[j] + 1,
                current[j - 1] + 1,
            )
            if (
                i > 1
                and j > 1
                and candidate[i - 1] == utterance[j - 2]
                and candidate[i - 2] == utterance[j - 1]
            ):
                best = min(best, before[j - 2] + 1)
            current[j] = best
    return min(current)


def is_probable_match(utterance: str, candidate: str) -> bool:
    """Return ``True`` when ``utterance`` looks like a mistyped ``candidate``.

    The comparison is case-insensitive and order-preserving. Characters the
    user typed after a plausible spelling of the command are ignored, so
    ``"helpme"`` still suggests ``"help"``. Never raises.
    """

    typed = (utterance or "").strip().lower()
    wanted = (candidate or "").strip().lower()
    if typed == wanted:
        return True
    if not typed or not wanted:
        return False
    if len(typed) - len(wanted) > MAX_EXTRA_CHARS:
        return False
    if len(wanted) - len(typed) > MAX_MISSING_CHARS:
        return False

    distance = _best_prefix_distance(wanted, typed)
    if len(wanted) - distance < MIN_ALIGNED_CHARS:
        return False
    return distance <= _edit_budget(len(wanted))
