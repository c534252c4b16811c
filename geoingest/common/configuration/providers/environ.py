from os import environ
from typing import Any, Optional, Type, Tuple

from .provider import ConfigProvider


class EnvironProvider(ConfigProvider):
    key_separator = "__"

    @classmethod
    def get_key_name(cls, key: str, *sections: str) -> str:
        # env key is always upper case
        return super().get_key_name(key, *sections).upper()

    @property
    def name(self) -> str:
        return "Environment Variables"

    def get_value(self, key: str, hint: Type[Any], *sections: str) -> Tuple[Optional[Any], str]:
        env_key = self.get_key_name(key, *sections)
        return environ.get(env_key, None), env_key
