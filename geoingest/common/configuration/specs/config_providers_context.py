from typing import List

from geoingest.common.configuration.providers import (
    ConfigProvider,
    ConfigTomlProvider,
    EnvironProvider,
)


class ConfigProvidersContext:
    """List of providers used by the configuration `resolve` module, in order of precedence"""

    providers: List[ConfigProvider]

    def __init__(self) -> None:
        self.providers = ConfigProvidersContext.initial_providers()

    def __getitem__(self, name: str) -> ConfigProvider:
        try:
            return next(p for p in self.providers if p.name == name)
        except StopIteration:
            raise KeyError(name)

    def __contains__(self, name: object) -> bool:
        try:
            self.__getitem__(name)  # type: ignore
            return True
        except KeyError:
            return False

    def add_provider(self, provider: ConfigProvider) -> None:
        if provider.name in self:
            raise KeyError(f"Provider with name {provider.name} already present")
        self.providers.append(provider)

    @staticmethod
    def initial_providers() -> List[ConfigProvider]:
        return [EnvironProvider(), ConfigTomlProvider()]


_ACTIVE_CONTEXT: ConfigProvidersContext = None


def get_providers_context() -> ConfigProvidersContext:
    """Returns providers context, creating it on first use"""
    global _ACTIVE_CONTEXT

    if _ACTIVE_CONTEXT is None:
        _ACTIVE_CONTEXT = ConfigProvidersContext()
    return _ACTIVE_CONTEXT


def reset_providers_context() -> None:
    """Drops the current providers so they are recreated (and config files re-read) on next use"""
    global _ACTIVE_CONTEXT

    _ACTIVE_CONTEXT = None
