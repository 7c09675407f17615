"""Closest-match suggestions for unknown command keys.

Candidates are ranked by ``difflib.SequenceMatcher`` ratio.  Ties are broken
by the shorter key, then lexicographically, so the same input always yields
the same suggestion.
"""

from __future__ import annotations

from collections.abc import Iterable
from difflib import SequenceMatcher

DEFAULT_CUTOFF = 0.6


def similarity(a: str, b: str) -> float:
    return SequenceMatcher(None, a, b).ratio()


def closest_match(
    key: str, candidates: Iterable[str], *, cutoff: float = DEFAULT_CUTOFF
) -> str | None:
    """Return the best candidate scoring at least *cutoff*, or None."""
    scored = [
        (similarity(key, candidate), candidate)
        for candidate in set(candidates)
        if candidate and candidate != key
    ]
    scored = [(score, candidate) for score, candidate in scored if score >= cutoff]
    if not scored:
        return None
    scored.sort(key=lambda item: (-item[0], len(item[1]), item[1]))
    return scored[0][1]
