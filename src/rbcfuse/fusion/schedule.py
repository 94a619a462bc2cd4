"""Per-rank weight schedule for Rank-Biased Centroids."""

from __future__ import annotations

import numbers

from rbcfuse.errors import InvalidPersistence

# Ranks materialized up front; deeper ranks are appended on demand.
DEFAULT_PREFIX = 10_000


def validate_persistence(persistence: float) -> float:
    """Return *persistence* as a float, raising if it is not in ``[0.0, 1.0)``."""
    if not is_real(persistence):
        raise InvalidPersistence(persistence)
    p = float(persistence)
    # NaN fails both comparisons
    if not (0.0 <= p < 1.0):
        raise InvalidPersistence(persistence)
    return p


def is_real(value: object) -> bool:
    """True for real numbers other than bools; numeric strings do not count."""
    return isinstance(value, numbers.Real) and not isinstance(value, bool)


class WeightSchedule:
    """Geometric weights ``(1 - p) * p**rank`` indexed by zero-based rank.

    Weights are produced by the recurrence ``w[i] = w[i - 1] * p`` starting
    from ``w[0] = 1 - p``. The cache only grows: a rank past the end is
    reached by continuing the recurrence from the last stored weight, never
    by recomputing with ``**``, so results are reproducible bit for bit.
    """

    def __init__(self, persistence: float, prefix: int = DEFAULT_PREFIX) -> None:
        self._p = validate_persistence(persistence)
        if prefix < 1:
            raise ValueError(f"prefix must be >= 1 (got {prefix})")
        self._weights: list[float] = [1.0 - self._p]
        self._extend_to(prefix)

    @property
    def persistence(self) -> float:
        return self._p

    @property
    def expected_depth(self) -> float:
        """Mean depth ``1 / (1 - p)`` an RBC agent reads into each ranking."""
        return 1.0 / (1.0 - self._p)

    def weight(self, rank: int) -> float:
        if rank < 0:
            raise IndexError(f"rank must be non-negative (got {rank})")
        if rank >= len(self._weights):
            self._extend_to(rank + 1)
        return self._weights[rank]

    def _extend_to(self, length: int) -> None:
        weights = self._weights
        p = self._p
        last = weights[-1]
        while len(weights) < length:
            last = last * p
            weights.append(last)

    def __len__(self) -> int:
        return len(self._weights)

    def __repr__(self) -> str:
        return f"WeightSchedule(persistence={self._p!r}, cached={len(self._weights)})"
