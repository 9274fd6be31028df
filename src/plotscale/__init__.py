from .config import Config, ConfigKey, default_config
from .data import Aesthetics, Data
from .discretize import Discretized, OrderLengthError, discretize
from .engine import apply_scales
from .scales import (
    ContinuousColorScale,
    ContinuousScale,
    DiscreteColorScale,
    DiscreteScale,
    GroupingScale,
    LabelScale,
    ScaleElement,
    continuous_color,
    continuous_color_cmap,
    continuous_color_gradient,
    discrete,
    discrete_color,
    discrete_color_hue,
    discrete_color_manual,
    label,
    opacity_continuous,
    size_continuous,
    x_asinh,
    x_continuous,
    x_discrete,
    x_log,
    x_log2,
    x_log10,
    x_sqrt,
    xgroup,
    y_asinh,
    y_continuous,
    y_discrete,
    y_log,
    y_log2,
    y_log10,
    y_sqrt,
    ygroup,
)
from .transforms import TRANSFORMS, ContinuousScaleTransform, get_transform
