"""Tests for deduplication of raw link lists."""

from __future__ import annotations

from hrefcheck.links.counter import count_targets


class TestCountTargets:
    def test_counts_sum_to_input_length(self) -> None:
        raw = ["#a", "#b", "#a", "#c", "#a", "#b"]
        counts = count_targets(raw)
        assert sum(counts.values()) == len(raw)
        assert len(counts) == len(set(raw))

    def test_preserves_first_occurrence_order(self) -> None:
        counts = count_targets(["b", "a", "b", "c"])
        assert list(counts) == ["b", "a", "c"]
        assert counts == {"b": 2, "a": 1, "c": 1}

    def test_empty_input(self) -> None:
        assert count_targets([]) == {}

    def test_no_normalisation(self) -> None:
        """Trailing slashes, case and percent-encoding produce distinct keys."""
        counts = count_targets([
            "https://x.test/a",
            "https://x.test/a/",
            "https://x.test/A",
            "https://x.test/%41",
        ])
        assert len(counts) == 4
        assert all(count == 1 for count in counts.values())

    def test_accepts_any_iterable(self) -> None:
        counts = count_targets(t for t in ("x", "x"))
        assert counts == {"x": 2}
