import os
import tomlkit
from typing import Any, Optional, Tuple, Type

from geoingest.common.typing import DictStrAny
from geoingest.common.configuration.exceptions import TomlProviderReadException

from .provider import ConfigProvider

CONFIG_TOML = "config.toml"
DOT_GEOINGEST = ".geoingest"


class BaseTomlProvider(ConfigProvider):
    def __init__(self, toml_document: tomlkit.TOMLDocument) -> None:
        # plain python values without tomlkit wrappers
        self._config_doc: DictStrAny = toml_document.unwrap()

    def get_value(self, key: str, hint: Type[Any], *sections: str) -> Tuple[Optional[Any], str]:
        full_path = sections + (key,)
        full_key = self.get_key_name(key, *sections)
        node: Any = self._config_doc
        for k in full_path:
            if not isinstance(node, dict):
                return None, full_key
            node = node.get(k)
            if node is None:
                return None, full_key
        return node, full_key

    @property
    def is_empty(self) -> bool:
        return len(self._config_doc) == 0


class StringTomlProvider(BaseTomlProvider):
    def __init__(self, toml_string: str) -> None:
        super().__init__(tomlkit.parse(toml_string))

    @property
    def name(self) -> str:
        return "memory"


class ConfigTomlProvider(BaseTomlProvider):
    def __init__(self, settings_dir: str = DOT_GEOINGEST, file_name: str = CONFIG_TOML) -> None:
        """Creates config provider from a `toml` file in `settings_dir`. A missing file gives an empty provider

        Raises:
            TomlProviderReadException: File could not be read, most probably `toml` parsing error
        """
        self._toml_path = os.path.join(settings_dir, file_name)
        super().__init__(self._read_toml(self._toml_path))

    @property
    def name(self) -> str:
        return CONFIG_TOML

    def _read_toml(self, toml_path: str) -> tomlkit.TOMLDocument:
        if not os.path.isfile(toml_path):
            return tomlkit.document()
        try:
            with open(toml_path, "r", encoding="utf-8") as f:
                # use whitespace preserving parser
                return tomlkit.load(f)
        except Exception as ex:
            raise TomlProviderReadException(self.name, os.path.basename(toml_path), toml_path, str(ex))
