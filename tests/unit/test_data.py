import math

import numpy as np
import pytest

from plotscale.data import (
    AESTHETIC_FIELDS,
    DATA_FIELDS,
    Aesthetics,
    Data,
    isconcrete,
    ismissing,
)


def test_ismissing():
    assert ismissing(None)
    assert ismissing(math.nan)
    assert ismissing(np.float64("nan"))
    assert not ismissing(0)
    assert not ismissing(False)
    assert not ismissing("a")
    assert not ismissing(math.inf)


def test_isconcrete():
    assert isconcrete(1.5)
    assert isconcrete("a")
    assert isconcrete(True)
    assert isconcrete(np.int64(3))
    assert not isconcrete(None)
    assert not isconcrete(math.nan)
    assert not isconcrete(math.inf)
    assert not isconcrete(-np.inf)


def test_data_get():
    data = Data(x=[1, 2], color=["a", "b"])
    assert data.get("x") == [1, 2]
    assert data.get("y") is None
    with pytest.raises(KeyError):
        data.get("titles")
    with pytest.raises(KeyError):
        data.get("shape")


def test_data_is_immutable():
    data = Data(x=[1])
    with pytest.raises(AttributeError):
        data.x = [2]  # type: ignore[misc]


def test_aesthetics_fields():
    for name in DATA_FIELDS:
        assert Aesthetics.has_field(name)
    for name in ("x_label", "y_label", "color_label", "xviewmin", "color_key_colors"):
        assert name in AESTHETIC_FIELDS
    assert not Aesthetics.has_field("size_label")


def test_aesthetics_get_set():
    aes = Aesthetics()
    aes.set("x", [1.0])
    assert aes.get("x") == [1.0]
    assert aes.color_key_continuous is False
    with pytest.raises(KeyError):
        aes.set("shape", [1])
    with pytest.raises(KeyError):
        aes.get("shape")
