"""Rank-Biased Centroids (RBC) rank fusion.

RBC (Bailey, Moffat, Scholer & Thomas, SIGIR 2017) merges several rankings
of the same universe of items using only rank information. An item at
zero-based rank ``x`` in a ranking receives weight ``(1 - p) * p**x``; the
fused ranking orders items by the sum of their weights over all rankings.

The persistence ``p`` controls how deep the rankings are read. ``p = 0``
only credits first places (first-past-the-post), while ``p`` close to 1
makes every position count almost equally (a popularity count). On
average the first ``1 / (1 - p)`` positions of each ranking drive the
result, e.g. ten positions for ``p = 0.9``.

Example, using the rankings from the paper::

    >>> r1 = ["A", "D", "B", "C", "G", "F"]
    >>> r2 = ["B", "D", "E", "C"]
    >>> r3 = ["A", "B", "D", "C", "G", "F", "E"]
    >>> r4 = ["G", "D", "E", "A", "F", "C"]
    >>> fuse([r1, r2, r3, r4], 0.9)
    ['D', 'C', 'A', 'B', 'G', 'E', 'F']

Scores are a plain weighted sum; no residual is extrapolated for rankings
that stop early.
"""

from __future__ import annotations

import math
from collections.abc import Hashable, Iterable
from typing import TypeVar

from rbcfuse.errors import InvalidRunWeights
from rbcfuse.fusion.accumulator import Accumulator, FusedRanking
from rbcfuse.fusion.schedule import DEFAULT_PREFIX, WeightSchedule, is_real, validate_persistence
from rbcfuse.logging import get_logger

log = get_logger(__name__)

T = TypeVar("T", bound=Hashable)


def fuse(rankings: Iterable[Iterable[T]], p: float) -> list[T]:
    """Fuse *rankings* with persistence *p* and return the items, best first."""
    return fuse_ranking(rankings, p).items()


def fuse_with_scores(rankings: Iterable[Iterable[T]], p: float) -> list[tuple[T, float]]:
    """Fuse *rankings* with persistence *p*, returning ``(item, score)`` pairs."""
    return fuse_ranking(rankings, p).with_scores()


def fuse_with_weights(
    rankings: Iterable[Iterable[T]],
    weights: Iterable[float],
    p: float,
) -> list[tuple[T, float]]:
    """Fuse *rankings*, scaling each ranking's contributions by its run weight.

    *weights* must hold exactly one finite number per ranking.
    """
    return fuse_ranking(rankings, p, weights=weights).with_scores()


def fuse_ranking(
    rankings: Iterable[Iterable[T]],
    p: float,
    weights: Iterable[float] | None = None,
    schedule_prefix: int = DEFAULT_PREFIX,
) -> FusedRanking[T]:
    """Run RBC and return the finalized :class:`FusedRanking`.

    Parameters
    ----------
    rankings:
        Rankings to fuse, each ordered most preferred first. Items must be
        hashable; equal items across rankings are merged.
    p:
        Persistence, ``0.0 <= p < 1.0``.
    weights:
        Optional run weight per ranking. Defaults to 1.0 for every ranking.
    schedule_prefix:
        Number of rank weights to precompute. Deeper ranks still work.

    Raises
    ------
    InvalidPersistence
        If *p* is outside ``[0.0, 1.0)`` or NaN.
    InvalidRunWeights
        If the number of weights differs from the number of rankings, or a
        weight is infinite or NaN.
    """
    # Validate everything before folding anything
    p = validate_persistence(p)
    lists = [list(ranking) for ranking in rankings]
    run_weights = _validate_run_weights(weights, len(lists))

    schedule = WeightSchedule(p, prefix=schedule_prefix)
    acc: Accumulator[T] = Accumulator(schedule)
    for ranking, run_weight in zip(lists, run_weights):
        acc.fold(ranking, run_weight)

    result = acc.finalize()
    log.debug(
        "rbc_fusion_complete",
        persistence=p,
        n_rankings=len(lists),
        n_items=len(result),
        max_depth=acc.max_depth,
        weighted=weights is not None,
    )
    return result


def _validate_run_weights(weights: Iterable[float] | None, n_rankings: int) -> list[float]:
    if weights is None:
        return [1.0] * n_rankings

    values = list(weights)
    if len(values) != n_rankings:
        raise InvalidRunWeights(
            f"got {len(values)} weights for {n_rankings} rankings; expected one per ranking"
        )

    checked: list[float] = []
    for i, w in enumerate(values):
        if not is_real(w):
            raise InvalidRunWeights(f"weight {i} is not a real number: {w!r}")
        value = float(w)
        if not math.isfinite(value):
            raise InvalidRunWeights(f"weight {i} is not finite: {w!r}")
        checked.append(value)
    return checked
