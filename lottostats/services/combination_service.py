"""Business logic for recurring number combinations."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from itertools import combinations

from lottostats.errors import InvalidArgument
from lottostats.store import DrawStore

PRIMARY_COUNT = 6
TOP_N = 20


@dataclass(frozen=True)
class CombinationStat:
    combination: tuple[int, ...]
    frequency: int


class CombinationAnalysisService:
    """Rank the k-sized subsets of primary numbers by how often they were drawn."""

    def __init__(self, top_n: int = TOP_N) -> None:
        self._top_n = top_n

    @staticmethod
    def _validate_k(k: object) -> int:
        if isinstance(k, bool) or not isinstance(k, int) or not (1 <= k <= PRIMARY_COUNT):
            raise InvalidArgument(
                message=f"k must be between 1 and {PRIMARY_COUNT}",
                details={"k": [f"Must be an integer in 1..{PRIMARY_COUNT}"]},
            )
        return k

    def count_combinations(self, store: DrawStore, k: int) -> Counter[tuple[int, ...]]:
        """Occurrences of every canonical (ascending) k-combination across all draws."""

        size = self._validate_k(k)
        counts: Counter[tuple[int, ...]] = Counter()
        for numbers in store.primary_numbers():
            for combo in combinations(numbers, size):
                counts[tuple(sorted(combo))] += 1
        return counts

    def frequent_combinations(self, store: DrawStore, k: int) -> list[CombinationStat]:
        """Top combinations by frequency.

        Ties are ordered by the combination itself, ascending, so the
        result does not depend on storage order.
        """

        counts = self.count_combinations(store, k)
        ranked = sorted(counts.items(), key=lambda kv: (-kv[1], kv[0]))
        return [CombinationStat(combination=combo, frequency=freq) for combo, freq in ranked[: self._top_n]]
