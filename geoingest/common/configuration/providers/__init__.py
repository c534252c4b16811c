from .provider import ConfigProvider
from .environ import EnvironProvider
from .toml import ConfigTomlProvider, StringTomlProvider, CONFIG_TOML, DOT_GEOINGEST

__all__ = [
    "ConfigProvider",
    "EnvironProvider",
    "ConfigTomlProvider",
    "StringTomlProvider",
    "CONFIG_TOML",
    "DOT_GEOINGEST",
]
