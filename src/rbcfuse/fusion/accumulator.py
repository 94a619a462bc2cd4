"""Score accumulation and finalization for Rank-Biased Centroids."""

from __future__ import annotations

import math
from collections.abc import Hashable, Iterable, Iterator
from dataclasses import dataclass
from typing import Generic, TypeVar, overload

from rbcfuse.fusion.schedule import WeightSchedule

T = TypeVar("T", bound=Hashable)


@dataclass(frozen=True)
class FusedRanking(Generic[T]):
    """A finalized fused ranking: ``(item, score)`` pairs, best first.

    Items with equal scores keep the order in which they were first seen
    while folding. That tie order is an implementation detail of this
    package, not something RBC itself defines. Scores are ordered as a
    total order on floats, so ``0.0`` ranks above ``-0.0``.
    """

    entries: tuple[tuple[T, float], ...] = ()

    def items(self) -> list[T]:
        """The fused order without scores."""
        return [item for item, _score in self.entries]

    def with_scores(self) -> list[tuple[T, float]]:
        return list(self.entries)

    def scores(self) -> dict[T, float]:
        return dict(self.entries)

    def top(self, n: int) -> FusedRanking[T]:
        if n < 0:
            raise ValueError(f"n must be non-negative (got {n})")
        return FusedRanking(self.entries[:n])

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[tuple[T, float]]:
        return iter(self.entries)

    @overload
    def __getitem__(self, index: int) -> tuple[T, float]: ...

    @overload
    def __getitem__(self, index: slice) -> tuple[tuple[T, float], ...]: ...

    def __getitem__(self, index):
        return self.entries[index]


class Accumulator(Generic[T]):
    """Running RBC score per item.

    Every observation of an item at some rank adds
    ``schedule.weight(rank) * run_weight`` to that item's total. Repeated
    observations (including duplicates inside one ranking) simply add up.
    """

    def __init__(self, schedule: WeightSchedule) -> None:
        self.schedule = schedule
        self._totals: dict[T, float] = {}
        self._finalized = False
        self.max_depth = 0

    def update(self, rank: int, item: T, run_weight: float = 1.0) -> None:
        self._check_open()
        contribution = self.schedule.weight(rank) * run_weight
        if rank + 1 > self.max_depth:
            self.max_depth = rank + 1
        totals = self._totals
        if item in totals:
            totals[item] += contribution
        else:
            totals[item] = contribution

    def fold(self, ranking: Iterable[T], run_weight: float = 1.0) -> int:
        """Fold one ranking (most preferred first); returns the number of items seen."""
        n = 0
        for rank, item in enumerate(ranking):
            self.update(rank, item, run_weight)
            n += 1
        return n

    def score(self, item: T) -> float:
        return self._totals[item]

    def __contains__(self, item: object) -> bool:
        return item in self._totals

    def __len__(self) -> int:
        return len(self._totals)

    def finalize(self) -> FusedRanking[T]:
        """Sort by descending score and hand the totals over to a FusedRanking.

        The accumulator cannot be updated or finalized again afterwards.
        """
        self._check_open()
        self._finalized = True
        # sorted() is stable with reverse=True, so ties stay in first-seen order
        entries = sorted(self._totals.items(), key=_score_key, reverse=True)
        self._totals = {}
        return FusedRanking(tuple(entries))

    def _check_open(self) -> None:
        if self._finalized:
            raise RuntimeError("accumulator has already been finalized")


def _score_key(entry: tuple[object, float]) -> tuple[float, float]:
    # The sign term puts 0.0 above -0.0, which compare equal as floats
    score = entry[1]
    return score, math.copysign(1.0, score)
