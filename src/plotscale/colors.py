from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from functools import singledispatch

import numpy as np
from basic_colormath import get_delta_e_matrix_lab, labs_to_rgb, rgbs_to_lab
from cmap import Color, Colormap, ColormapLike
from numpy.typing import ArrayLike, NDArray


# RGBA encoded colors stored in a [n, 4] array
@dataclass
class Colors:
    values: NDArray[np.float32]

    def __len__(self) -> int:
        return self.values.shape[0]

    def __getitem__(self, key) -> "Colors":
        if isinstance(key, (np.ndarray, list)):
            return Colors(self.values[key])
        return Colors(
            self.values[key : key + 1] if isinstance(key, int) else self.values[key]
        )

    def rgb(self) -> NDArray[np.float32]:
        return self.values[:, 0:3]

    def hex(self) -> list[str]:
        return [Color(self.values[i, :]).hex for i in range(len(self))]


@singledispatch
def color(value) -> Colors:
    raise TypeError(f"Type {type(value)} can't be converted to colors.")


@color.register(list)
@color.register(tuple)
def _(value) -> Colors:
    n = len(value)
    values = np.zeros((n, 4), dtype=np.float32)
    for i, v in enumerate(value):
        rgba = Color(v).rgba
        values[i, :] = [rgba.r, rgba.g, rgba.b, rgba.a]
    return Colors(values)


@color.register(str)
def _(value) -> Colors:
    return color(Color(value))


@color.register(Color)
def _(value) -> Colors:
    rgba = value.rgba
    return Colors(np.array([[rgba.r, rgba.g, rgba.b, rgba.a]], dtype=np.float32))


@color.register(Colors)
def _(value) -> Colors:
    return value


def rgb_colors(rgb: NDArray[np.floating]) -> Colors:
    """Opaque colors from an [n, 3] array of sRGB values in [0, 1]."""
    rgb = np.clip(np.asarray(rgb, dtype=np.float32), 0.0, 1.0)
    alpha = np.ones((rgb.shape[0], 1), dtype=np.float32)
    return Colors(np.concatenate([rgb, alpha], axis=-1))


def linearize_srgb(rgb: NDArray[np.floating]) -> NDArray[np.floating]:
    output = rgb / 12.92
    mask = rgb > 0.04045
    output[mask] = np.pow((rgb[mask] + 0.055) / 1.055, 2.4)
    return output


def linearize_srgb_inv(rgb: NDArray[np.floating]) -> NDArray[np.floating]:
    output = rgb * 12.92
    mask = rgb > 0.0031308
    output[mask] = 1.055 * np.pow(rgb[mask], 1 / 2.4) - 0.055
    return output


def lchab_to_lab(lch: ArrayLike) -> NDArray[np.float64]:
    lch = np.atleast_2d(np.asarray(lch, dtype=np.float64))
    lab = np.empty_like(lch)
    lab[:, 0] = lch[:, 0]
    lab[:, 1] = lch[:, 1] * np.cos(lch[:, 2] * np.pi / 180)
    lab[:, 2] = lch[:, 1] * np.sin(lch[:, 2] * np.pi / 180)
    return lab


def lab_to_rgb(lab: ArrayLike) -> NDArray[np.float64]:
    """CIELAB (D65) to sRGB, clipped to the displayable gamut."""
    lab = np.atleast_2d(np.asarray(lab, dtype=np.float64))
    rgb = np.asarray(labs_to_rgb(lab), dtype=np.float64) / 255.0
    return np.clip(rgb, 0.0, 1.0)


def lchab_to_rgb(lch: ArrayLike) -> NDArray[np.float64]:
    return lab_to_rgb(lchab_to_lab(lch))


# Linear RGB to LMS cone response, and the projection of the medium wavelength
# response onto the long and short responses that a deuteranope perceives
# (Viénot, Brettel & Mollon, 1999).
_RGB_TO_LMS = np.array(
    [
        [17.8824, 43.5161, 4.11935],
        [3.45565, 27.1554, 3.86714],
        [0.0299566, 0.184309, 1.46709],
    ],
    dtype=np.float64,
)
_LMS_TO_RGB = np.linalg.inv(_RGB_TO_LMS)
_DEUTERANOPE_M = np.array([0.494207, 1.24827], dtype=np.float64)


def deuteranopic(rgb: NDArray[np.floating], p: float = 1.0) -> NDArray[np.float64]:
    """
    Simulate how sRGB colors appear with deuteranopia. `p` in [0, 1] is the
    severity, where 0 leaves colors unchanged.
    """
    lms = linearize_srgb(np.asarray(rgb, dtype=np.float64)) @ _RGB_TO_LMS.transpose()
    m = lms[:, 0] * _DEUTERANOPE_M[0] + lms[:, 2] * _DEUTERANOPE_M[1]
    lms[:, 1] = (1 - p) * lms[:, 1] + p * m
    linear = np.clip(lms @ _LMS_TO_RGB.transpose(), 0.0, 1.0)
    return linearize_srgb_inv(linear)


def rgb_to_lab(rgb: NDArray[np.floating]) -> NDArray[np.float32]:
    return np.asarray(rgbs_to_lab(255.0 * np.asarray(rgb)), dtype=np.float32)


# Greedy approximation of the max-min dispersion problem. We want to choose k
# colors that maximize the minimum pairwise distance between any two colors.
def distinguishable_colors(
    k: int,
    seed: Colors | None = None,
    transform: Callable[[NDArray[np.float64]], NDArray[np.float64]] | None = None,
    lchoices: Sequence[float] = tuple(np.linspace(0, 100, 15)),
    cchoices: Sequence[float] = tuple(np.linspace(0, 100, 15)),
    hchoices: Sequence[float] = tuple(np.linspace(0, 340, 20)),
) -> Colors:
    """
    Generate k distinguishable colors, starting with the seed colors.

    Candidates are drawn from a grid in LCHab space. Distances are CIEDE2000
    differences, measured after applying `transform` (e.g. a color vision
    deficiency simulation) to every color.
    """

    if seed is None:
        seed = Colors(np.zeros((0, 4), dtype=np.float32))

    if k <= len(seed):
        return seed[:k]

    hs, cs, ls = np.meshgrid(hchoices, cchoices, lchoices, indexing="ij")
    candidates_lch = np.stack([ls.ravel(), cs.ravel(), hs.ravel()], axis=-1)
    candidates_rgb = lchab_to_rgb(candidates_lch)

    seed_rgb = seed.rgb().astype(np.float64)
    if transform is not None:
        candidates_t = transform(candidates_rgb)
        seed_t = transform(seed_rgb)
    else:
        candidates_t = candidates_rgb
        seed_t = seed_rgb

    candidates_lab = rgb_to_lab(candidates_t)

    ds = np.full(candidates_lab.shape[0], np.inf, dtype=np.float32)
    if len(seed) > 0:
        ds = get_delta_e_matrix_lab(candidates_lab, rgb_to_lab(seed_t)).min(axis=1)

    chosen = np.zeros(k - len(seed), dtype=np.int32)
    for i in range(len(chosen)):
        j = int(ds.argmax())
        chosen[i] = j
        ds = np.minimum(
            ds, get_delta_e_matrix_lab(candidates_lab, candidates_lab[j : j + 1, :])[:, 0]
        )

    return Colors(
        np.concatenate([seed.values, rgb_colors(candidates_rgb[chosen]).values], axis=0)
    )


HUE_PALETTE_SEED = (70.0, 60.0, 240.0)


def hue_palette(n: int) -> list[str]:
    """
    Default discrete palette: mostly saturated, mid-lightness colors chosen to
    stay distinguishable under partial deuteranopia.
    """
    seed = rgb_colors(lchab_to_rgb(HUE_PALETTE_SEED))
    return distinguishable_colors(
        n,
        seed,
        transform=lambda rgb: deuteranopic(rgb, 0.5),
        lchoices=(65.0, 70.0, 75.0, 80.0),
        cchoices=(0.0, 50.0, 60.0, 70.0),
        hchoices=tuple(np.linspace(0, 330, 24)),
    ).hex()


@dataclass(frozen=True)
class ManualPalette:
    """
    Palette that starts with the given colors, extended with distinguishable
    colors when more are needed.
    """

    colors: tuple[str, ...]

    def __call__(self, n: int) -> list[str]:
        return distinguishable_colors(n, color(list(self.colors))).hex()


@dataclass(frozen=True)
class LabGradient:
    """
    Linear interpolation between two LCHab colors, done in CIELAB space.
    Called with p in [0, 1], returns a hex color.
    """

    start: tuple[float, float, float]
    end: tuple[float, float, float]

    def __call__(self, p: float) -> str:
        p = min(max(float(p), 0.0), 1.0)
        lab0 = lchab_to_lab(self.start)
        lab1 = lchab_to_lab(self.end)
        return rgb_colors(lab_to_rgb((1 - p) * lab0 + p * lab1)).hex()[0]


@dataclass(frozen=True)
class ColormapGradient:
    """
    Gradient backed by any colormap `cmap` understands, e.g. "viridis".
    """

    colormap: Colormap

    def __init__(self, colormap: ColormapLike):
        if not isinstance(colormap, Colormap):
            colormap = Colormap(colormap)
        object.__setattr__(self, "colormap", colormap)

    def __call__(self, p: float) -> str:
        p = min(max(float(p), 0.0), 1.0)
        return self.colormap(p).hex


DEFAULT_GRADIENT = LabGradient((20.0, 44.0, 262.0), (100.0, 44.0, 262.0))
