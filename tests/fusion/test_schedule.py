import math

import pytest

from rbcfuse.errors import InvalidPersistence
from rbcfuse.fusion.schedule import DEFAULT_PREFIX, WeightSchedule, validate_persistence


def test_first_weight_is_one_minus_p():
    assert WeightSchedule(0.9).weight(0) == 1.0 - 0.9
    assert WeightSchedule(0.0).weight(0) == 1.0


def test_weights_follow_recurrence():
    sched = WeightSchedule(0.7, prefix=5)
    for r in range(1, 50):
        assert sched.weight(r) == sched.weight(r - 1) * 0.7


def test_weights_close_to_direct_formula():
    sched = WeightSchedule(0.9)
    for r in (0, 1, 10, 100, 1000):
        assert math.isclose(sched.weight(r), 0.1 * 0.9**r, rel_tol=1e-9)


def test_weights_strictly_decrease_for_positive_p():
    sched = WeightSchedule(0.5, prefix=1)
    weights = [sched.weight(r) for r in range(30)]
    assert all(a > b for a, b in zip(weights, weights[1:]))


def test_zero_persistence_only_weights_first_rank():
    sched = WeightSchedule(0.0)
    assert sched.weight(0) == 1.0
    assert sched.weight(1) == 0.0
    assert sched.weight(50) == 0.0


def test_prefix_is_precomputed():
    assert len(WeightSchedule(0.9)) == DEFAULT_PREFIX
    assert len(WeightSchedule(0.9, prefix=3)) == 3


def test_extends_lazily_and_never_shrinks():
    sched = WeightSchedule(0.99, prefix=4)
    direct = WeightSchedule(0.99, prefix=200)

    assert sched.weight(150) == direct.weight(150)
    assert len(sched) == 151

    sched.weight(2)
    assert len(sched) == 151


def test_deep_rank_beyond_default_prefix():
    sched = WeightSchedule(0.999)
    w = sched.weight(DEFAULT_PREFIX + 500)
    assert len(sched) == DEFAULT_PREFIX + 501
    assert w > 0.0
    assert w < sched.weight(DEFAULT_PREFIX)


def test_negative_rank_rejected():
    with pytest.raises(IndexError):
        WeightSchedule(0.5).weight(-1)


def test_invalid_prefix_rejected():
    with pytest.raises(ValueError):
        WeightSchedule(0.5, prefix=0)


def test_expected_depth():
    assert WeightSchedule(0.9).expected_depth == pytest.approx(10.0)
    assert WeightSchedule(0.0).expected_depth == 1.0


@pytest.mark.parametrize("p", [1.0, 1.5, -0.1, -1e-12, float("nan"), float("inf"), "abc", "0.5", None, True])
def test_invalid_persistence_rejected(p):
    with pytest.raises(InvalidPersistence):
        WeightSchedule(p)


@pytest.mark.parametrize("p", [0.0, 0.5, 0.9, 0.999999])
def test_valid_persistence_accepted(p):
    assert validate_persistence(p) == p
    assert WeightSchedule(p).persistence == p
