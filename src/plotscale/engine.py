from __future__ import annotations

from collections.abc import Iterable, Sequence

from .config import Config, default_config
from .data import Aesthetics, Data
from .scales import ScaleElement


def apply_scales(
    scales: Iterable[ScaleElement],
    *datas: Data,
    aess: Sequence[Aesthetics] | None = None,
    config: Config | None = None,
) -> list[Aesthetics]:
    """
    Apply scales to data, in the given order.

    Each scale is applied to every data object before moving on to the next,
    so scales that share state across panels (e.g. color keys) see all the
    data. Later scales overwrite aesthetics written by earlier ones.

    Args:
        scales: Scale elements to apply.
        datas: Zero or more data objects.
        aess: Aesthetics to update, one per data object. Fresh ones are created
            if not given.
        config: Supplies values for scale parameters left as `ConfigKey`s.
            Defaults to `default_config()`.

    Returns:
        The aesthetics, in the same order as `datas`.
    """

    if aess is None:
        aess = [Aesthetics() for _ in datas]
    elif len(aess) != len(datas):
        raise ValueError(
            f"Expected one Aesthetics per Data, but got {len(aess)} for {len(datas)}"
        )

    if config is None:
        config = default_config()

    for scale in scales:
        scale = config.resolve_keys(scale)
        assert isinstance(scale, ScaleElement), f"Expected a scale but got {type(scale)}"
        scale.apply_scale(aess, datas)

    for aes, data in zip(aess, datas):
        aes.titles = dict(data.titles)

    return list(aess)
