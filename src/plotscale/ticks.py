from __future__ import annotations

from enum import Enum
from typing import NamedTuple

import numpy as np
from numpy.typing import NDArray

from .config import DEFAULT_TICK_PARAMS, ChooseTicksParams


class TickStep(NamedTuple):
    tick_step: float
    niceness: float


TICK_STEP_OPTIONS = [
    TickStep(1.0, 1.0),
    TickStep(5.0, 0.9),
    TickStep(2.0, 0.7),
    TickStep(2.5, 0.5),
    TickStep(3.0, 0.2),
]


class TickCoverage(Enum):
    Flexible = 1
    StrictSub = 2
    StrictSuper = 3

    @classmethod
    def from_str(cls, value: str) -> "TickCoverage":
        value = value.lower()
        if value == "flexible":
            return cls.Flexible
        elif value == "strictsub" or value == "sub":
            return cls.StrictSub
        elif value == "strictsuper" or value == "super":
            return cls.StrictSuper
        else:
            raise ValueError(f"Invalid tick coverage: {value}")


def _fallback_ticks(xmin: float) -> tuple[NDArray[np.float64], float, float]:
    t0 = round(xmin - 1.0)
    t1 = round(xmin + 1.0)
    return np.array([t0, t1], dtype=np.float64), float(t0), float(t1)


def optimize_ticks(
    xmin: float,
    xmax: float,
    params: ChooseTicksParams | None = None,
    coverage: TickCoverage | str = TickCoverage.Flexible,
) -> tuple[NDArray[np.float64], float, float]:
    """
    Choose human friendly tick positions for the range [xmin, xmax] via a
    version of Wilkinson's ad-hoc scoring method.

    Returns the ticks along with a view range, which is the data range widened
    to include every tick.
    """

    if params is None:
        params = DEFAULT_TICK_PARAMS
    if isinstance(coverage, str):
        coverage = TickCoverage.from_str(coverage)

    xmin = float(xmin)
    xmax = float(xmax)
    if xmin > xmax:
        xmin, xmax = xmax, xmin

    scale_span = xmax - xmin

    if scale_span == 0.0:
        return _fallback_ticks(xmin)

    CONSTRAINT_PENALTY = 10000.0
    high_score = -np.inf

    oom_best = 0.0
    k_best = 0
    t0_best = 0.0
    step_best = 0.0

    # Consider all orders of magnitude where we can span the range with k_max ticks
    oom = np.ceil(np.log10(scale_span))
    while params.k_max * 10.0 ** (oom + 1) > scale_span:
        # Consider numbers of ticks
        for k in range(params.k_min, params.k_max + 1):
            # Consider steps
            for step in TICK_STEP_OPTIONS:
                step_size = step.tick_step * 10.0**oom
                if step_size == 0.0:
                    continue

                t0 = step_size * np.floor(xmin / step_size)

                # Consider tick starting places
                while t0 <= xmax:
                    score = step.niceness * params.niceness_weight

                    tk = t0 + (k - 1) * step_size

                    has_zero = t0 <= 0 and np.abs(t0 / step_size) < k
                    if has_zero:
                        score += params.simplicity_weight

                    if 0 < k and k < 2 * params.k_ideal:
                        score += (
                            1 - abs(k - params.k_ideal) / params.k_ideal
                        ) * params.granularity_weight

                    coverage_jaccard = (min(xmax, tk) - max(xmin, t0)) / (
                        max(xmax, tk) - min(xmin, t0)
                    )
                    score += coverage_jaccard * params.coverage_weight

                    # strict-ish limits on coverage
                    if coverage == TickCoverage.StrictSub and (
                        t0 < xmin or tk > xmax
                    ):
                        score -= CONSTRAINT_PENALTY
                    elif coverage == TickCoverage.StrictSuper and (
                        t0 > xmin or tk < xmax
                    ):
                        score -= CONSTRAINT_PENALTY

                    if score > high_score:
                        high_score = score
                        oom_best = oom
                        k_best = k
                        t0_best = t0
                        step_best = step.tick_step

                    t0 += step_size / 2

        oom -= 1

    if not np.isfinite(high_score):
        return _fallback_ticks(xmin)

    step_size = step_best * 10.0**oom_best
    ticks = t0_best + step_size * np.arange(k_best, dtype=np.float64)

    # Snap away accumulated floating point error, e.g. 0.30000000000000004.
    ticks = np.round(ticks, max(0, int(-oom_best) + 2))

    viewmin = min(xmin, float(ticks[0]))
    viewmax = max(xmax, float(ticks[-1]))
    return ticks, viewmin, viewmax
