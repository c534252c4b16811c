"""Config providers look up raw values of configuration fields by field name and sections.

Sections narrow the lookup, ie. `delimiter` in sections `sources`, `spatial`, `csv` is the
`SOURCES__SPATIAL__CSV__DELIMITER` environment variable or the `delimiter` key of the
`[sources.spatial.csv]` table in `config.toml`. Values are coerced to field types by the resolver.
"""
import abc
from typing import Any, ClassVar, Optional, Tuple, Type


class ConfigProvider(abc.ABC):
    key_separator: ClassVar[str] = "."
    """Joins sections and field name into a full key"""

    @abc.abstractmethod
    def get_value(self, key: str, hint: Type[Any], *sections: str) -> Tuple[Optional[Any], str]:
        """Returns value of `key` in `sections` or None if not present, and the full key that was looked up"""

    @property
    @abc.abstractmethod
    def name(self) -> str:
        """Provider name shown in lookup traces of missing fields"""

    @property
    def supports_sections(self) -> bool:
        """Providers without sections are queried by field name only"""
        return True

    @property
    def is_empty(self) -> bool:
        return False

    @classmethod
    def get_key_name(cls, key: str, *sections: str) -> str:
        """Joins non empty `sections` and `key` with `key_separator`"""
        return cls.key_separator.join((*(s for s in sections if s), key))
