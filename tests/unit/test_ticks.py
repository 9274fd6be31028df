import numpy as np
import pytest

from plotscale.config import ChooseTicksParams
from plotscale.ticks import TickCoverage, optimize_ticks


def _assert_evenly_spaced(ticks):
    steps = np.diff(ticks)
    assert len(ticks) >= 2
    assert np.all(steps > 0)
    assert steps == pytest.approx(np.full(len(steps), steps[0]))


@pytest.mark.parametrize(
    "xmin,xmax", [(0.0, 10.0), (1.0, 1000.0), (-3.2, 7.9), (0.001, 0.0042), (5.0, 6.0)]
)
def test_strict_super_covers_range(xmin, xmax):
    ticks, viewmin, viewmax = optimize_ticks(xmin, xmax, coverage=TickCoverage.StrictSuper)
    _assert_evenly_spaced(ticks)
    assert ticks[0] <= xmin
    assert ticks[-1] >= xmax
    assert viewmin == ticks[0]
    assert viewmax == ticks[-1]


@pytest.mark.parametrize("xmin,xmax", [(0.0, 10.0), (-3.2, 7.9), (13.0, 87.0)])
def test_strict_sub_within_range(xmin, xmax):
    ticks, viewmin, viewmax = optimize_ticks(xmin, xmax, coverage="sub")
    _assert_evenly_spaced(ticks)
    assert ticks[0] >= xmin
    assert ticks[-1] <= xmax
    assert viewmin == xmin
    assert viewmax == xmax


def test_tick_count_limits():
    params = ChooseTicksParams(
        k_min=2,
        k_max=4,
        k_ideal=3,
        granularity_weight=1 / 4,
        simplicity_weight=1 / 6,
        coverage_weight=1 / 2,
        niceness_weight=1 / 4,
    )
    ticks, _, _ = optimize_ticks(0.0, 100.0, params)
    assert 2 <= len(ticks) <= 4


def test_ticks_are_round():
    ticks, _, _ = optimize_ticks(0.1, 0.9, coverage="super")
    for tick in ticks:
        assert round(tick, 6) == tick


def test_degenerate_range():
    ticks, viewmin, viewmax = optimize_ticks(5.0, 5.0)
    assert list(ticks) == [4.0, 6.0]
    assert viewmin == 4.0
    assert viewmax == 6.0


def test_reversed_range():
    ticks_a, _, _ = optimize_ticks(10.0, 0.0, coverage="super")
    ticks_b, _, _ = optimize_ticks(0.0, 10.0, coverage="super")
    assert np.array_equal(ticks_a, ticks_b)


def test_deterministic():
    ticks_a, _, _ = optimize_ticks(3.7, 42.1)
    ticks_b, _, _ = optimize_ticks(3.7, 42.1)
    assert np.array_equal(ticks_a, ticks_b)


def test_tick_coverage_from_str():
    assert TickCoverage.from_str("flexible") == TickCoverage.Flexible
    assert TickCoverage.from_str("Sub") == TickCoverage.StrictSub
    assert TickCoverage.from_str("strictsuper") == TickCoverage.StrictSuper
    with pytest.raises(ValueError, match="Invalid tick coverage"):
        TickCoverage.from_str("everywhere")
