from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from numbers import Real
from typing import Any, Callable, Generic, TypeVar, override

import numpy as np
from numpy.typing import ArrayLike, NDArray

from .colors import DEFAULT_GRADIENT, ColormapGradient, ManualPalette, color, hue_palette
from .config import ChooseTicksParams, ConfigKey
from .data import DATA_FIELDS, Aesthetics, Data, isconcrete, ismissing
from .discretize import Discretized, discretize, reorder_levels, sorted_levels
from .formatting import format_numbers
from .ticks import TickCoverage, optimize_ticks
from .transforms import (
    ContinuousScaleTransform,
    asinh_transform,
    identity_transform,
    ln_transform,
    log2_transform,
    log10_transform,
    sqrt_transform,
)

X_VARS: tuple[str, ...] = ("x", "xmin", "xmax", "xintercept")
Y_VARS: tuple[str, ...] = ("y", "ymin", "ymax", "yintercept")

Palette = Callable[[int], Sequence[Any]]
Gradient = Callable[[float], Any]


class ScaleElement(ABC):
    """
    Scales map unscaled data onto aesthetics: positions, categorical indices,
    or colors. They also install the label functions used to draw guides.

    Scale elements are immutable, and may be applied any number of times.
    """

    @abstractmethod
    def element_aesthetics(self) -> list[str]:
        """Names of the aesthetics this scale writes."""
        pass

    @abstractmethod
    def apply_scale(self, aess: Sequence[Aesthetics], datas: Sequence[Data]) -> None:
        """Scale each data object, storing the result in the paired aesthetics."""
        pass


ContextType = TypeVar("ContextType")


class JointScaleElement(ScaleElement, Generic[ContextType]):
    """
    Scales that must see every data object before scaling any of them, so
    that e.g. colors are consistent across panels sharing a key.

    Application happens in two phases: `scan` summarizes all the data into a
    context, or returns None if there's nothing to scale, and `apply` uses that
    context to scale each data object.
    """

    @abstractmethod
    def scan(self, datas: Sequence[Data]) -> ContextType | None:
        pass

    @abstractmethod
    def apply(
        self, context: ContextType, aess: Sequence[Aesthetics], datas: Sequence[Data]
    ) -> None:
        pass

    @override
    def apply_scale(self, aess: Sequence[Aesthetics], datas: Sequence[Data]) -> None:
        context = self.scan(datas)
        if context is not None:
            self.apply(context, aess, datas)


def _cast_value(var: str, value: Any) -> np.float64:
    try:
        return np.float64(value)
    except (TypeError, ValueError):
        raise ValueError(
            f"Cannot use continuous scale for '{var}' with non-numerical value: {value!r}"
        )


def _check_vars(vars: Iterable[str]) -> tuple[str, ...]:
    vars = tuple(vars)
    for var in vars:
        if var not in DATA_FIELDS:
            raise KeyError(f"Unknown aesthetic '{var}'")
    return vars


# Labelers


@dataclass(frozen=True)
class ContinuousLabeler:
    """
    Labels positions on a continuous scale in terms of the untransformed values.
    """

    transform: ContinuousScaleTransform
    format: str | None = None

    def __call__(self, xs: ArrayLike) -> list[str]:
        if self.format is None:
            return self.transform.label(xs)
        else:
            return self.transform.label(xs, format=self.format)


@dataclass(frozen=True)
class DiscreteLabeler:
    """
    Labels 1-based level indices with the level values. Indices outside the
    levels are labeled with an empty string.
    """

    levels: tuple[Any, ...]

    def __call__(self, xs: Iterable[Any]) -> list[str]:
        nlevels = len(self.levels)
        vals = [
            self.levels[int(x) - 1]
            if isinstance(x, Real)
            and not ismissing(x)
            and float(x).is_integer()
            and 1 <= x <= nlevels
            else ""
            for x in xs
        ]

        if vals and all(isinstance(val, (float, np.floating)) for val in vals):
            return format_numbers(vals)
        else:
            return [str(val) for val in vals]


@dataclass(frozen=True)
class ContinuousColorLabeler:
    """
    Labels the colors of a continuous color key. Colors that don't correspond
    to a tick are labeled with an empty string.
    """

    colors: tuple[str, ...]
    labels: tuple[str, ...]

    def __call__(self, xs: Iterable[Any]) -> list[str]:
        lookup: dict[str, str] = dict()
        for c, label in zip(self.colors, self.labels):
            if not lookup.get(c):
                lookup[c] = label
        return [lookup.get(x, "") if isinstance(x, str) else "" for x in xs]


# Continuous scales


def _label_var(var: str) -> str:
    if var in X_VARS:
        return "x_label"
    elif var in Y_VARS:
        return "y_label"
    else:
        return f"{var}_label"


def _transform_values(
    var: str, f: Callable[[Any], Any], values: Iterable[Any]
) -> NDArray[Any]:
    ds: list[Any] = []
    allconcrete = True
    for d in values:
        if isconcrete(d):
            ds.append(f(_cast_value(var, d)))
        else:
            allconcrete = False
            ds.append(d)

    if allconcrete:
        return np.array(ds, dtype=np.float64)

    out = np.empty(len(ds), dtype=object)
    out[:] = ds
    return out


@dataclass(frozen=True)
class ContinuousScale(ScaleElement):
    """
    Maps numbers through a transform (identity, log, etc.) onto continuous
    aesthetics. Missing and non-finite values are passed through unchanged.

    `minvalue` and `maxvalue`, when given, fix the view range of the x or y axis.
    """

    vars: tuple[str, ...]
    trans: ContinuousScaleTransform = identity_transform
    minvalue: Any = None
    maxvalue: Any = None
    format: str | None = None

    def __post_init__(self):
        object.__setattr__(self, "vars", _check_vars(self.vars))

    @override
    def element_aesthetics(self) -> list[str]:
        return list(self.vars)

    def labeler(self) -> ContinuousLabeler:
        return ContinuousLabeler(self.trans, self.format)

    @override
    def apply_scale(self, aess: Sequence[Aesthetics], datas: Sequence[Data]) -> None:
        labeler = self.labeler()
        for aes, data in zip(aess, datas):
            for var in self.vars:
                values = data.get(var)
                if values is None:
                    continue

                aes.set(var, _transform_values(var, self.trans.f, values))

                label_var = _label_var(var)
                if Aesthetics.has_field(label_var):
                    aes.set(label_var, labeler)

            if self.minvalue is not None:
                if self.vars == X_VARS:
                    aes.xviewmin = self.trans.f(_cast_value("xviewmin", self.minvalue))
                elif self.vars == Y_VARS:
                    aes.yviewmin = self.trans.f(_cast_value("yviewmin", self.minvalue))

            if self.maxvalue is not None:
                if self.vars == X_VARS:
                    aes.xviewmax = self.trans.f(_cast_value("xviewmax", self.maxvalue))
                elif self.vars == Y_VARS:
                    aes.yviewmax = self.trans.f(_cast_value("yviewmax", self.maxvalue))


def continuous_scale_partial(
    vars: tuple[str, ...], trans: ContinuousScaleTransform
) -> Callable[..., ContinuousScale]:
    def scale(
        *, minvalue: Any = None, maxvalue: Any = None, format: str | None = None
    ) -> ContinuousScale:
        return ContinuousScale(
            vars, trans, minvalue=minvalue, maxvalue=maxvalue, format=format
        )

    return scale


# Commonly used scales.
x_continuous = continuous_scale_partial(X_VARS, identity_transform)
y_continuous = continuous_scale_partial(Y_VARS, identity_transform)
x_log10 = continuous_scale_partial(X_VARS, log10_transform)
y_log10 = continuous_scale_partial(Y_VARS, log10_transform)
x_log2 = continuous_scale_partial(X_VARS, log2_transform)
y_log2 = continuous_scale_partial(Y_VARS, log2_transform)
x_log = continuous_scale_partial(X_VARS, ln_transform)
y_log = continuous_scale_partial(Y_VARS, ln_transform)
x_asinh = continuous_scale_partial(X_VARS, asinh_transform)
y_asinh = continuous_scale_partial(Y_VARS, asinh_transform)
x_sqrt = continuous_scale_partial(X_VARS, sqrt_transform)
y_sqrt = continuous_scale_partial(Y_VARS, sqrt_transform)

size_continuous = continuous_scale_partial(("size",), identity_transform)
opacity_continuous = continuous_scale_partial(("opacity",), identity_transform)


# Discrete scales


def _optional_tuple(values: Iterable[Any] | None) -> tuple[Any, ...] | None:
    return None if values is None else tuple(values)


@dataclass(frozen=True)
class DiscreteScale(ScaleElement):
    """
    Maps values onto 1-based category indices.

    If `levels` is given, it fixes the categories and their order; anything in
    the data that's not among them becomes missing. If `order` is given, it's
    a permutation of the levels.
    """

    vars: tuple[str, ...]
    levels: tuple[Any, ...] | None = None
    order: tuple[int, ...] | None = None

    def __post_init__(self):
        object.__setattr__(self, "vars", _check_vars(self.vars))
        object.__setattr__(self, "levels", _optional_tuple(self.levels))
        object.__setattr__(self, "order", _optional_tuple(self.order))

    @override
    def element_aesthetics(self) -> list[str]:
        return list(self.vars)

    @override
    def apply_scale(self, aess: Sequence[Aesthetics], datas: Sequence[Data]) -> None:
        for aes, data in zip(aess, datas):
            for var in self.vars:
                values = data.get(var)
                if values is None:
                    continue

                disc_data = discretize(values, self.levels, self.order)
                aes.set(var, disc_data.refs.astype(np.int64))

                label_var = f"{var}_label"
                if Aesthetics.has_field(label_var):
                    aes.set(label_var, DiscreteLabeler(tuple(disc_data.levels)))


discrete = DiscreteScale


def x_discrete(*, levels=None, order=None) -> DiscreteScale:
    return DiscreteScale(X_VARS, levels=levels, order=order)


def y_discrete(*, levels=None, order=None) -> DiscreteScale:
    return DiscreteScale(Y_VARS, levels=levels, order=order)


@dataclass(frozen=True)
class GroupingScale(DiscreteScale):
    """
    Discrete scale over a single grouping aesthetic (xgroup or ygroup), used
    to arrange subplots.
    """

    @property
    def var(self) -> str:
        return self.vars[0]


def xgroup(*, levels=None, order=None) -> GroupingScale:
    return GroupingScale(("xgroup",), levels=levels, order=order)


def ygroup(*, levels=None, order=None) -> GroupingScale:
    return GroupingScale(("ygroup",), levels=levels, order=order)


# Label scale is always discrete, hence we call it 'label' rather
# 'label_discrete'.
@dataclass(frozen=True)
class LabelScale(ScaleElement):
    @override
    def element_aesthetics(self) -> list[str]:
        return ["label"]

    @override
    def apply_scale(self, aess: Sequence[Aesthetics], datas: Sequence[Data]) -> None:
        for aes, data in zip(aess, datas):
            if data.label is None:
                continue
            aes.label = discretize(data.label)


label = LabelScale


# Color scales


def _color_values(data: Data) -> Sequence[Any]:
    if isinstance(data.color, Discretized):
        return data.color.values()
    return data.color


@dataclass(frozen=True)
class DiscreteColorContext:
    levels: tuple[Any, ...]
    colors: tuple[str, ...]


@dataclass(frozen=True)
class DiscreteColorScale(JointScaleElement[DiscreteColorContext]):
    """
    Assigns one distinguishable color to every distinct value, consistently
    across all the data the scale is applied to.

    `palette` is a function f(n) returning n colors.
    """

    palette: Palette | ConfigKey = ConfigKey("discrete_palette")
    levels: tuple[Any, ...] | None = None
    order: tuple[int, ...] | None = None

    def __post_init__(self):
        object.__setattr__(self, "levels", _optional_tuple(self.levels))
        object.__setattr__(self, "order", _optional_tuple(self.order))

    @override
    def element_aesthetics(self) -> list[str]:
        return ["color"]

    @override
    def scan(self, datas: Sequence[Data]) -> DiscreteColorContext | None:
        if all(data.color is None for data in datas):
            return None

        if self.levels is None:
            levelset: dict[Any, None] = dict()
            for data in datas:
                if data.color is None:
                    continue
                for d in _color_values(data):
                    if not ismissing(d):
                        levelset[d] = None
            # Sorted, so the assignment of colors doesn't depend on which
            # panel a value was first seen in.
            scale_levels = sorted_levels(levelset)
        else:
            scale_levels = list(self.levels)

        if self.order is not None:
            scale_levels = reorder_levels(
                Discretized(scale_levels, np.zeros(0, dtype=np.int64)), self.order
            ).levels

        assert callable(self.palette), f"Expected a palette function but got {self.palette}"
        colors = color(list(self.palette(len(scale_levels)))).hex()
        if len(colors) < len(scale_levels):
            raise ValueError(
                f"Palette produced {len(colors)} colors for {len(scale_levels)} levels"
            )

        return DiscreteColorContext(
            tuple(scale_levels), tuple(colors[: len(scale_levels)])
        )

    @override
    def apply(
        self,
        context: DiscreteColorContext,
        aess: Sequence[Aesthetics],
        datas: Sequence[Data],
    ) -> None:
        labeler = DiscreteLabeler(context.levels)
        for aes, data in zip(aess, datas):
            if data.color is None:
                continue

            ds = discretize(data.color, context.levels)

            # Every color in the palette is a level, so keys can include colors
            # not present in this particular data.
            aes.color = Discretized(list(context.colors), ds.refs)
            aes.color_label = labeler
            aes.color_key_colors = list(context.colors)


def discrete_color_hue(*, levels=None, order=None) -> DiscreteColorScale:
    """Discrete color scale that always uses the built-in hue palette."""
    return DiscreteColorScale(hue_palette, levels=levels, order=order)


def discrete_color(*, levels=None, order=None) -> DiscreteColorScale:
    """
    Discrete color scale using the configured `discrete_palette`. With the
    default config this is the same palette as `discrete_color_hue`.
    """
    return DiscreteColorScale(levels=levels, order=order)


def discrete_color_manual(*colors: Any, levels=None, order=None) -> DiscreteColorScale:
    hexcolors = tuple(color(list(colors)).hex())
    return DiscreteColorScale(ManualPalette(hexcolors), levels=levels, order=order)


@dataclass(frozen=True)
class ContinuousColorContext:
    cmin: float
    cmax: float
    cspan: float
    ticks: tuple[float, ...]
    key_colors: tuple[str, ...]
    key_labels: tuple[str, ...]


@dataclass(frozen=True)
class ContinuousColorScale(JointScaleElement[ContinuousColorContext]):
    """
    Maps numbers onto a color gradient. The mapped range is chosen to begin
    and end on nice round ticks, which label the color key.

    `gradient` is a function f(p) giving a color for 0 <= p <= 1.
    """

    gradient: Gradient | ConfigKey = ConfigKey("continuous_gradient")
    minvalue: Any = None
    maxvalue: Any = None
    tick_params: ChooseTicksParams | ConfigKey = ConfigKey("tick_params")
    tick_coverage: TickCoverage | str | ConfigKey = ConfigKey("color_tick_coverage")
    key_steps: int | ConfigKey = ConfigKey("key_steps")
    format: str | ConfigKey = ConfigKey("number_format")

    @override
    def element_aesthetics(self) -> list[str]:
        return ["color"]

    def _color(self, p: float) -> str:
        assert callable(self.gradient), f"Expected a gradient function but got {self.gradient}"
        return color(self.gradient(p)).hex()[0]

    @override
    def scan(self, datas: Sequence[Data]) -> ContinuousColorContext | None:
        cmin = np.inf
        cmax = -np.inf
        for data in datas:
            if data.color is None:
                continue

            for c in _color_values(data):
                if not isconcrete(c):
                    continue

                c = _cast_value("color", c)
                if c < cmin:
                    cmin = c
                if c > cmax:
                    cmax = c

        if cmin == np.inf or cmax == -np.inf:
            return None

        if self.minvalue is not None:
            cmin = _cast_value("color", self.minvalue)

        if self.maxvalue is not None:
            cmax = _cast_value("color", self.maxvalue)

        assert isinstance(self.tick_params, ChooseTicksParams)
        assert isinstance(self.tick_coverage, (TickCoverage, str))
        assert isinstance(self.key_steps, int)
        assert isinstance(self.format, str)

        ticks, _viewmin, _viewmax = optimize_ticks(
            cmin, cmax, self.tick_params, self.tick_coverage
        )
        if ticks[0] == 0 and cmin >= 1:
            ticks[0] = 1

        cmin = float(ticks[0])
        cmax = float(ticks[-1])
        cspan = cmax - cmin if cmax != cmin else 1.0

        key_colors: list[str] = []
        key_labels: list[str] = []
        tick_labels = format_numbers(ticks, self.format)
        for i, j, tick_label in zip(ticks, ticks[1:], tick_labels):
            key_colors.append(self._color((i - cmin) / cspan))
            key_labels.append(tick_label)

            for step in range(1, self.key_steps + 1):
                k = i + (j - i) * (step / (1 + self.key_steps))
                key_colors.append(self._color((k - cmin) / cspan))
                key_labels.append("")

        key_colors.append(self._color((ticks[-1] - cmin) / cspan))
        key_labels.append(tick_labels[-1])

        return ContinuousColorContext(
            cmin,
            cmax,
            cspan,
            tuple(float(t) for t in ticks),
            tuple(key_colors),
            tuple(key_labels),
        )

    @override
    def apply(
        self,
        context: ContinuousColorContext,
        aess: Sequence[Aesthetics],
        datas: Sequence[Data],
    ) -> None:
        labeler = ContinuousColorLabeler(context.key_colors, context.key_labels)
        for aes, data in zip(aess, datas):
            if data.color is None:
                continue

            values = _color_values(data)
            cs = np.empty(len(values), dtype=object)
            for i, c in enumerate(values):
                if not isconcrete(c):
                    continue
                p = (_cast_value("color", c) - context.cmin) / context.cspan
                cs[i] = self._color(p)

            aes.color = cs
            aes.color_label = labeler
            # Keys are drawn top to bottom, from high to low values.
            aes.color_key_colors = list(reversed(context.key_colors))
            aes.color_key_continuous = True


def continuous_color_gradient(*, minvalue=None, maxvalue=None) -> ContinuousColorScale:
    """Continuous color scale that always uses the default Lab gradient."""
    return ContinuousColorScale(DEFAULT_GRADIENT, minvalue=minvalue, maxvalue=maxvalue)


def continuous_color(*, minvalue=None, maxvalue=None) -> ContinuousColorScale:
    """
    Continuous color scale using the configured `continuous_gradient`, which
    defaults to the same gradient as `continuous_color_gradient`.
    """
    return ContinuousColorScale(minvalue=minvalue, maxvalue=maxvalue)


def continuous_color_cmap(
    colormap: Any, *, minvalue=None, maxvalue=None
) -> ContinuousColorScale:
    return ContinuousColorScale(
        ColormapGradient(colormap), minvalue=minvalue, maxvalue=maxvalue
    )
