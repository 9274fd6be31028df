"""
Integration tests applying several scales to several data objects.
"""

import numpy as np
import pytest

import plotscale as ps
from plotscale.colors import color, hue_palette


def test_apply_scales_end_to_end():
    d1 = ps.Data(
        x=[1, 10, 100],
        y=["low", "high", "low"],
        color=["a", "b", "a"],
        titles={"x": "Dose", "color": "Group"},
    )
    d2 = ps.Data(x=[1000], y=["mid"], color=["c"])

    aes1, aes2 = ps.apply_scales(
        [ps.x_log10(), ps.y_discrete(), ps.discrete_color_hue()],
        d1,
        d2,
        config=ps.Config(),
    )

    assert aes1.x == pytest.approx([0.0, 1.0, 2.0])
    assert aes2.x == pytest.approx([3.0])
    assert list(aes1.y) == [2, 1, 2]
    assert list(aes2.y) == [1]

    palette = color(hue_palette(3)).hex()
    assert aes1.color.values() == [palette[0], palette[1], palette[0]]
    assert aes2.color.values() == [palette[2]]

    assert aes1.titles == {"x": "Dose", "color": "Group"}
    assert aes2.titles == {}


def test_titles_are_copied():
    titles = {"x": "Time"}
    data = ps.Data(x=[1.0], titles=titles)
    (aes,) = ps.apply_scales([], data, config=ps.Config())
    aes.titles["x"] = "Changed"
    assert titles == {"x": "Time"}


def test_last_scale_wins():
    data = ps.Data(x=[3.0, 1.0, 2.0])
    (aes,) = ps.apply_scales(
        [ps.x_continuous(), ps.x_discrete()], data, config=ps.Config()
    )
    assert list(aes.x) == [3, 1, 2]
    assert aes.x_label([1, 2, 3]) == ["1", "2", "3"]


def test_existing_aesthetics_are_updated():
    data = ps.Data(x=[1.0], color=["a"])
    aes = ps.Aesthetics(y=[5.0])
    result = ps.apply_scales(
        [ps.x_continuous(), ps.discrete_color_hue()],
        data,
        aess=[aes],
        config=ps.Config(),
    )
    assert result[0] is aes
    assert aes.y == [5.0]
    assert list(aes.x) == [1.0]
    assert aes.color_label([1]) == ["a"]


def test_aesthetics_count_mismatch():
    data = ps.Data(x=[1.0])
    with pytest.raises(ValueError, match="one Aesthetics per Data"):
        ps.apply_scales(
            [ps.x_continuous()],
            data,
            aess=[ps.Aesthetics(), ps.Aesthetics()],
            config=ps.Config(),
        )


def test_no_data():
    assert ps.apply_scales([ps.x_continuous()], config=ps.Config()) == []


def test_scales_are_not_modified():
    scale = ps.continuous_color()
    data = ps.Data(color=[0.0, 1.0])
    ps.apply_scales([scale], data, config=ps.Config(key_steps=2))
    assert isinstance(scale.key_steps, ps.ConfigKey)
    assert isinstance(scale.gradient, ps.ConfigKey)


def test_continuous_color_with_positions():
    d1 = ps.Data(x=[0.0, 1.0], color=[0.0, 50.0])
    d2 = ps.Data(x=[2.0], color=[100.0])
    aes1, aes2 = ps.apply_scales(
        [ps.x_continuous(minvalue=0.0, maxvalue=2.0), ps.continuous_color_gradient()],
        d1,
        d2,
        config=ps.Config(),
    )
    assert aes1.xviewmin == 0.0
    assert aes2.xviewmax == 2.0
    assert aes1.color_key_colors == aes2.color_key_colors
    assert aes1.color_key_continuous and aes2.color_key_continuous
    assert all(isinstance(c, str) for c in np.concatenate([aes1.color, aes2.color]))


def test_default_config_used(monkeypatch):
    import plotscale.config

    monkeypatch.setattr(plotscale.config, "_default_config", ps.Config(key_steps=0))
    data = ps.Data(color=[0.0, 10.0])
    (aes,) = ps.apply_scales([ps.continuous_color()], data)
    assert "" not in aes.color_label(aes.color_key_colors)
