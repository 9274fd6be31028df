from __future__ import annotations

import math
from dataclasses import dataclass, field, fields
from numbers import Number, Real
from typing import Any, Callable

import numpy as np


def ismissing(value: Any) -> bool:
    """
    True for per-element missing values: None, or a floating NaN.
    """
    if value is None:
        return True
    if isinstance(value, Real) and not isinstance(value, (bool, np.bool_)):
        return math.isnan(value)
    return False


def isconcrete(value: Any) -> bool:
    """
    Concrete values can be passed through a scale. Missing values aren't, and
    neither are infinite numbers.
    """
    if ismissing(value):
        return False
    if isinstance(value, Number) and not isinstance(value, (bool, np.bool_)):
        return bool(np.isfinite(value))
    return True


# Aesthetics that are read from data and may be written by scales.
DATA_FIELDS: tuple[str, ...] = (
    "x",
    "y",
    "xmin",
    "xmax",
    "ymin",
    "ymax",
    "xintercept",
    "yintercept",
    "size",
    "opacity",
    "color",
    "label",
    "xgroup",
    "ygroup",
)


@dataclass(frozen=True)
class Data:
    """
    Unscaled data for one panel. Each field is either None (not supplied) or a
    sequence of values, where individual elements may be missing.
    """

    x: Any = None
    y: Any = None
    xmin: Any = None
    xmax: Any = None
    ymin: Any = None
    ymax: Any = None
    xintercept: Any = None
    yintercept: Any = None
    size: Any = None
    opacity: Any = None
    color: Any = None
    label: Any = None
    xgroup: Any = None
    ygroup: Any = None
    titles: dict[str, str] = field(default_factory=dict)

    def get(self, name: str) -> Any:
        if name not in DATA_FIELDS:
            raise KeyError(f"Data has no field '{name}'")
        return getattr(self, name)


Labeler = Callable[[Any], list[str]]


@dataclass
class Aesthetics:
    """
    Scaled values for one panel, along with label functions used when drawing
    guides. Populated by `apply_scales`.
    """

    x: Any = None
    y: Any = None
    xmin: Any = None
    xmax: Any = None
    ymin: Any = None
    ymax: Any = None
    xintercept: Any = None
    yintercept: Any = None
    size: Any = None
    opacity: Any = None
    color: Any = None
    label: Any = None
    xgroup: Any = None
    ygroup: Any = None

    xviewmin: Any = None
    xviewmax: Any = None
    yviewmin: Any = None
    yviewmax: Any = None

    x_label: Labeler | None = None
    y_label: Labeler | None = None
    xgroup_label: Labeler | None = None
    ygroup_label: Labeler | None = None
    color_label: Labeler | None = None

    color_key_colors: list[str] | None = None
    color_key_continuous: bool = False

    titles: dict[str, str] = field(default_factory=dict)

    @classmethod
    def has_field(cls, name: str) -> bool:
        return name in AESTHETIC_FIELDS

    def get(self, name: str) -> Any:
        if name not in AESTHETIC_FIELDS:
            raise KeyError(f"Aesthetics has no field '{name}'")
        return getattr(self, name)

    def set(self, name: str, value: Any) -> None:
        if name not in AESTHETIC_FIELDS:
            raise KeyError(f"Aesthetics has no field '{name}'")
        setattr(self, name, value)


AESTHETIC_FIELDS: frozenset[str] = frozenset(f.name for f in fields(Aesthetics))
