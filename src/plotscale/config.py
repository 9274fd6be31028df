from dataclasses import dataclass, field, fields, is_dataclass, replace
from typing import Any, Callable, Optional
from pathlib import Path
import os
import tomllib
import warnings

from .colors import DEFAULT_GRADIENT, ColormapGradient, ManualPalette, hue_palette


@dataclass(frozen=True)
class ConfigKey:
    """
    Reprent a value that should be looked up in the a `Config`
    instance when scales are applied.
    """

    key: str


@dataclass(frozen=True)
class ChooseTicksParams:
    k_min: int
    k_max: int
    k_ideal: int
    granularity_weight: float
    simplicity_weight: float
    coverage_weight: float
    niceness_weight: float


DEFAULT_TICK_PARAMS = ChooseTicksParams(
    k_min=2,
    k_max=10,
    k_ideal=5,
    granularity_weight=1 / 4,
    simplicity_weight=1 / 6,
    coverage_weight=1 / 2,
    niceness_weight=1 / 4,
)


def _get_config_paths() -> list[Path]:
    """Returns list of paths to check for config files, in order of priority."""
    paths: list[Path] = []

    # 1. Current directory
    paths.append(Path.cwd() / ".plotscalerc.toml")

    # 2. Home directory
    home = Path.home()
    paths.append(home / ".plotscalerc.toml")

    # 3. XDG config directory
    xdg_config = Path(os.environ.get("XDG_CONFIG_HOME", str(home / ".config")))
    paths.append(Path(xdg_config) / "plotscale" / "config.toml")

    return paths


def _load_config_file() -> dict[str, object] | None:
    """Load config from file if it exists."""
    for path in _get_config_paths():
        if path.exists():
            try:
                with open(path, "rb") as f:
                    return tomllib.load(f)
            except (OSError, tomllib.TOMLDecodeError) as e:
                warnings.warn(f"Failed to load config from {path}: {e}")
    return None


def _parse_config_value(key: str, value: object) -> object:
    """Convert config file values to proper types."""
    # A list of colors for the discrete palette, extended as needed
    if key == "discrete_palette" and isinstance(value, list):
        return ManualPalette(tuple(str(v) for v in value))

    # Colormap names for the continuous gradient
    if key == "continuous_gradient" and isinstance(value, str):
        return ColormapGradient(value)

    # Handle nested ChooseTicksParams
    if key == "tick_params" and isinstance(value, dict):
        return ChooseTicksParams(**value)

    return value


@dataclass
class Config:
    discrete_palette: Callable[[int], list[str]] = hue_palette
    continuous_gradient: Callable[[float], str] = DEFAULT_GRADIENT
    tick_params: ChooseTicksParams = field(default_factory=lambda: DEFAULT_TICK_PARAMS)

    # Continuous color scales map the range spanned by their ticks, so
    # ticks need to cover the data.
    color_tick_coverage: str = "super"

    # Number of unlabeled swatches between labeled ticks in continuous color keys.
    key_steps: int = 1

    number_format: str = "auto"

    @staticmethod
    def load(path: Optional[Path | str] = None) -> "Config":
        """
        Load config from a file. If no path is provided, searches standard locations.
        """
        if path is not None:
            # Load from specific file
            path = Path(path)
            if not path.exists():
                # File doesn't exist, return defaults
                return Config()
            with open(path, "rb") as f:
                config_data = tomllib.load(f)
        else:
            # Load from standard locations
            config_data = _load_config_file()
            if config_data is None:
                # No config file found, return defaults
                return Config()

        config = Config()
        for key, value in config_data.items():
            if hasattr(config, key):
                parsed_value = _parse_config_value(key, value)
                setattr(config, key, parsed_value)

        return config

    def get(self, key: ConfigKey) -> Any:
        return getattr(self, key.key)

    def resolve_keys(self, obj: Any) -> Any:
        """
        Return a copy of a dataclass instance (e.g. a scale) with every
        ConfigKey field replaced by its associated value in the Config.
        The original is left untouched.
        """

        if isinstance(obj, ConfigKey):
            return self.get(obj)

        if not is_dataclass(obj) or isinstance(obj, type):
            return obj

        changes = {
            f.name: self.get(getattr(obj, f.name))
            for f in fields(obj)
            if f.init and isinstance(getattr(obj, f.name), ConfigKey)
        }
        if not changes:
            return obj
        return replace(obj, **changes)


# Global default config loaded from file
_default_config: Optional[Config] = None


def default_config() -> Config:
    """
    Returns the default config, loading from file if not already loaded.
    This is cached so the file is only read once per session.
    """
    global _default_config
    if _default_config is None:
        _default_config = Config.load()
    return _default_config
