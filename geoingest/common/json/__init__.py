"""Json codec used for GeoJSON payloads, nested property values and json logs.

Backed by `orjson`. Documents are compact and non ascii characters are not escaped, tuples (ie.
coordinates of geometries rendered by shapely) are written as arrays.
"""
import dataclasses
from typing import Any, IO, Protocol, Union


class SupportsJson(Protocol):
    """Json codec interface"""

    _impl_name: str
    """Implementation name"""

    def dump(self, obj: Any, fp: IO[bytes], sort_keys: bool = False, pretty: bool = False) -> None:
        ...

    def dumps(self, obj: Any, sort_keys: bool = False, pretty: bool = False) -> str:
        ...

    def dumpb(self, obj: Any, sort_keys: bool = False, pretty: bool = False) -> bytes:
        ...

    def dumpb_line(self, obj: Any) -> bytes:
        ...

    def load(self, fp: IO[bytes]) -> Any:
        ...

    def loads(self, s: Union[str, bytes]) -> Any:
        ...

    def loadb(self, s: Union[bytes, bytearray, memoryview]) -> Any:
        ...


def custom_encode(obj: Any) -> Any:
    """Encodes values orjson does not serialize natively"""
    if hasattr(obj, "_asdict"):
        # named tuples ie. records
        return obj._asdict()
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return dataclasses.asdict(obj)
    if isinstance(obj, (set, frozenset)):
        return sorted(obj)
    if isinstance(obj, (bytes, bytearray)):
        return bytes(obj).decode("utf-8", errors="replace")
    raise TypeError(repr(obj) + " is not JSON serializable")


from geoingest.common.json import _orjson as json  # noqa: E402

__all__ = ["json", "custom_encode", "SupportsJson"]
