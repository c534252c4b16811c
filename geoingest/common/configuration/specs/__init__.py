from .base_configuration import BaseConfiguration, configspec, extract_inner_hint, is_base_configuration_inner_hint, is_valid_hint  # noqa: F401
from .run_configuration import RunConfiguration  # noqa: F401
from .config_providers_context import ConfigProvidersContext  # noqa: F401
