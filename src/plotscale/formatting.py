"""
Number formatting shared by axis, legend, and discrete category labels.

All numbers in a collection are formatted together so they share precision,
e.g. [1.0, 1.5, 2.0] becomes ["1.0", "1.5", "2.0"] rather than ["1", "1.5", "2"].
"""

from __future__ import annotations

from collections.abc import Sequence
from numbers import Number
from typing import Any

import numpy as np
from numpy.typing import ArrayLike, NDArray

MAX_PRECISION = 5

NUMBER_FORMATS = ("auto", "plain", "scientific", "engineering")


def _label_numbers(xs: NDArray[np.float64]) -> list[str]:
    """
    Format an array of finite numbers with consistent precision.
    Determines appropriate precision based on the differences between values.
    """
    if len(xs) == 0:
        return []

    fmt_str = f"{{:.{MAX_PRECISION}f}}"

    xstrs = [fmt_str.format(x) for x in xs]
    trim = min([len(xstr) - len(xstr.rstrip("0")) for xstr in xstrs])
    if trim == MAX_PRECISION:
        trim += 1

    labels = [xstr[: len(xstr) - trim] for xstr in xstrs]
    return ["0" if label == "-0" else label for label in labels]


def _label_exponential(xs: NDArray[np.float64], step: int) -> list[str]:
    # Exponents are rounded down to a multiple of `step`; 1 for scientific
    # notation, 3 for engineering notation.
    nonzero = xs != 0.0
    exponents = np.zeros(len(xs), dtype=int)
    exponents[nonzero] = np.floor(np.log10(np.abs(xs[nonzero]))).astype(int)
    exponents = step * np.floor_divide(exponents, step)
    mantissas = xs / 10.0 ** exponents.astype(np.float64)

    labels = []
    for mantissa_label, exponent, nz in zip(
        _label_numbers(mantissas), exponents, nonzero
    ):
        labels.append(f"{mantissa_label}e{exponent}" if nz else "0")
    return labels


def _choose_format(xs: NDArray[np.float64]) -> str:
    magnitudes = np.abs(xs[xs != 0.0])
    if len(magnitudes) == 0:
        return "plain"
    if magnitudes.max() >= 1e6 or magnitudes.min() < 1e-4:
        return "scientific"
    return "plain"


def format_numbers(xs: ArrayLike, fmt: str | None = "auto") -> list[str]:
    """
    Format a collection of numbers for display.

    `fmt` is one of "plain", "scientific", "engineering", or "auto", which
    switches to scientific notation for very large or very small magnitudes.
    Non-finite values are rendered as "NaN", "∞", and "-∞".
    """
    if fmt is None:
        fmt = "auto"
    if fmt not in NUMBER_FORMATS:
        raise ValueError(
            f"Unknown number format '{fmt}', expected one of {NUMBER_FORMATS}"
        )

    arr = np.asarray(xs, dtype=np.float64).reshape(-1)
    finite = np.isfinite(arr)
    finite_values = arr[finite]

    if fmt == "auto":
        fmt = _choose_format(finite_values)

    if fmt == "plain":
        finite_labels = _label_numbers(finite_values)
    elif fmt == "scientific":
        finite_labels = _label_exponential(finite_values, 1)
    else:
        finite_labels = _label_exponential(finite_values, 3)

    labels: list[str] = []
    it = iter(finite_labels)
    for x, isfinite in zip(arr, finite):
        if isfinite:
            labels.append(next(it))
        elif np.isnan(x):
            labels.append("NaN")
        else:
            labels.append("∞" if x > 0 else "-∞")
    return labels


def default_labeler(values: Sequence[Any], fmt: str | None = "auto") -> list[str]:
    """
    Default labeler function that converts a collection of values to strings.

    For numeric values, formats all numbers with matching precision.
    For other types, uses str() conversion.
    """
    if len(values) == 0:
        return []

    all_numbers = all(
        isinstance(v, Number) and not isinstance(v, (bool, np.bool_)) for v in values
    )

    if all_numbers:
        return format_numbers([float(v) for v in values], fmt)
    else:
        return [str(v) for v in values]
