from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Any, NamedTuple

import numpy as np
from numpy.typing import NDArray

from .data import ismissing


class OrderLengthError(ValueError):
    """Raised when a level order doesn't match the number of levels."""


class Discretized(NamedTuple):
    """
    Categorical representation of some values: an ordered collection of
    distinct levels and, for every value, a 1-based index into `levels`.
    Values that are missing, or absent from `levels`, get index 0.
    """

    levels: list[Any]
    refs: NDArray[np.int64]

    def values(self) -> list[Any]:
        """Recover the level value for every element (None for index 0)."""
        return [self.levels[ref - 1] if ref > 0 else None for ref in self.refs]


def sorted_levels(levels: Iterable[Any]) -> list[Any]:
    """
    Sort distinct level values. Values that can't be compared with each other
    (e.g. a mix of strings and numbers) are grouped by type name first.
    """
    levels = list(levels)
    try:
        return sorted(levels)
    except TypeError:
        return sorted(levels, key=lambda v: (type(v).__name__, repr(v)))


def _observed_levels(values: Iterable[Any]) -> list[Any]:
    return sorted_levels(dict.fromkeys(v for v in values if not ismissing(v)))


def _pool(values: Iterable[Any], levels: Sequence[Any]) -> Discretized:
    index: dict[Any, int] = dict()
    for i, level in enumerate(levels):
        if level in index:
            raise ValueError(f"Duplicate level {level!r} in {list(levels)}")
        index[level] = i + 1

    refs = np.fromiter(
        (0 if ismissing(v) else index.get(v, 0) for v in values), dtype=np.int64
    )
    return Discretized(list(levels), refs)


def reorder_levels(da: Discretized, order: Sequence[int]) -> Discretized:
    """
    Permute the levels of discretized values. `order` lists, for each new
    position, the (0-based) position of the level currently there. Elements
    keep referring to the same level values.
    """
    order = [int(i) for i in order]
    nlevels = len(da.levels)
    if len(order) != nlevels:
        raise OrderLengthError(
            f"Discrete scale order has length {len(order)}, but the data has {nlevels} levels."
        )
    if sorted(order) != list(range(nlevels)):
        raise ValueError(f"Discrete scale order {order} is not a permutation.")

    remap = np.zeros(nlevels + 1, dtype=np.int64)
    remap[np.asarray(order, dtype=np.int64) + 1] = np.arange(
        1, nlevels + 1, dtype=np.int64
    )

    return Discretized([da.levels[i] for i in order], remap[da.refs])


def discretize(
    values: Iterable[Any] | Discretized,
    levels: Sequence[Any] | None = None,
    order: Sequence[int] | None = None,
) -> Discretized:
    """
    Convert values into a categorical representation.

    If `levels` is omitted, they are the distinct non-missing values, sorted.
    Otherwise values not in `levels` are treated as missing. Already
    discretized input is re-leveled without changing which values are grouped
    together.
    """
    if isinstance(values, Discretized):
        if levels is None:
            da = values
        else:
            da = _pool(values.values(), levels)
    else:
        if not isinstance(values, (Sequence, np.ndarray)):
            values = list(values)
        if levels is None:
            levels = _observed_levels(values)
        da = _pool(values, levels)

    if order is not None:
        return reorder_levels(da, order)
    else:
        return da
