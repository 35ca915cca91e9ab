"""Deduplication of raw extracted link lists."""

from __future__ import annotations

from typing import Iterable


def count_targets(raw: Iterable[str]) -> dict[str, int]:
    """Return an ordered ``target -> occurrences`` mapping for *raw*.

    Keys keep the order of their first appearance and are compared by exact
    string equality: no case, trailing-slash or percent-encoding
    normalisation is applied.
    """
    counts: dict[str, int] = {}
    for target in raw:
        counts[target] = counts.get(target, 0) + 1
    return counts
