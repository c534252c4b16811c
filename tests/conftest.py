from typing import List

# patch which providers to enable
from geoingest.common.configuration.providers import (
    ConfigProvider,
    ConfigTomlProvider,
    EnvironProvider,
)
from geoingest.common.configuration.specs.config_providers_context import (
    ConfigProvidersContext,
    reset_providers_context,
)


def initial_providers() -> List[ConfigProvider]:
    # do not read the global config
    return [
        EnvironProvider(),
        ConfigTomlProvider(settings_dir="tests/.geoingest"),
    ]


ConfigProvidersContext.initial_providers = staticmethod(initial_providers)  # type: ignore[method-assign]
reset_providers_context()
