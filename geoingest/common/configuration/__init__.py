from .specs.base_configuration import configspec, is_valid_hint
from .resolve import resolve_configuration

from .exceptions import (
    ConfigFieldMissingException,
    ConfigValueCannotBeCoercedException,
    ConfigurationException,
    ConfigurationValueError,
    UnknownColumnsException,
    UnknownSpatialDriverException,
)


__all__ = [
    "configspec",
    "is_valid_hint",
    "resolve_configuration",
    "ConfigFieldMissingException",
    "ConfigValueCannotBeCoercedException",
    "ConfigurationException",
    "ConfigurationValueError",
    "UnknownColumnsException",
    "UnknownSpatialDriverException",
]
