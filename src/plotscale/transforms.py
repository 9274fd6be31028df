from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable

import numpy as np
from numpy.typing import ArrayLike

from .formatting import format_numbers


@dataclass(frozen=True)
class ContinuousScaleTransform:
    """
    Invertible transformation applied by continuous scales.

    `label` takes already transformed values (e.g. tick positions) and a
    number format, and returns strings describing them in terms of the
    untransformed scale.
    """

    name: str
    f: Callable[[Any], Any]
    finv: Callable[[Any], Any]
    label: Callable[..., list[str]]


def identity_formatter(xs: ArrayLike, format: str | None = "auto") -> list[str]:
    return format_numbers(xs, format)


def _exponent_formatter(base: str) -> Callable[..., list[str]]:
    def formatter(xs: ArrayLike, format: str | None = "plain") -> list[str]:
        return [f"{base}^{x}" for x in format_numbers(xs, format)]

    return formatter


def asinh_formatter(xs: ArrayLike, format: str | None = "plain") -> list[str]:
    return [f"asinh({x})" for x in format_numbers(xs, format)]


def sqrt_formatter(xs: ArrayLike, format: str | None = "plain") -> list[str]:
    return [f"√{x}" for x in format_numbers(xs, format)]


def _identity(x: Any) -> Any:
    return x


identity_transform = ContinuousScaleTransform(
    "identity", _identity, _identity, identity_formatter
)

log10_transform = ContinuousScaleTransform(
    "log10", np.log10, lambda x: np.power(10.0, x), _exponent_formatter("10")
)

log2_transform = ContinuousScaleTransform(
    "log2", np.log2, np.exp2, _exponent_formatter("2")
)

ln_transform = ContinuousScaleTransform(
    "ln", np.log, np.exp, _exponent_formatter("e")
)

asinh_transform = ContinuousScaleTransform(
    "asinh", np.arcsinh, np.sinh, asinh_formatter
)

sqrt_transform = ContinuousScaleTransform(
    "sqrt", np.sqrt, np.square, sqrt_formatter
)


TRANSFORMS: dict[str, ContinuousScaleTransform] = {
    trans.name: trans
    for trans in (
        identity_transform,
        log10_transform,
        log2_transform,
        ln_transform,
        asinh_transform,
        sqrt_transform,
    )
}


def get_transform(name: str) -> ContinuousScaleTransform:
    try:
        return TRANSFORMS[name]
    except KeyError:
        raise KeyError(
            f"Unknown transform '{name}', expected one of {list(TRANSFORMS)}"
        ) from None
