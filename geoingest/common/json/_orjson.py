import typing as t

import orjson

from geoingest.common.json import custom_encode

_impl_name = "orjson"

_DEFAULT_OPTIONS = orjson.OPT_NON_STR_KEYS | orjson.OPT_SERIALIZE_NUMPY


def _dumps(obj: t.Any, sort_keys: bool = False, pretty: bool = False, options: int = 0) -> bytes:
    options |= _DEFAULT_OPTIONS
    if pretty:
        options |= orjson.OPT_INDENT_2
    if sort_keys:
        options |= orjson.OPT_SORT_KEYS
    return orjson.dumps(obj, default=custom_encode, option=options)


def dump(obj: t.Any, fp: t.IO[bytes], sort_keys: bool = False, pretty: bool = False) -> None:
    fp.write(_dumps(obj, sort_keys, pretty))


def dumps(obj: t.Any, sort_keys: bool = False, pretty: bool = False) -> str:
    return _dumps(obj, sort_keys, pretty).decode("utf-8")


def dumpb(obj: t.Any, sort_keys: bool = False, pretty: bool = False) -> bytes:
    return _dumps(obj, sort_keys, pretty)


def dumpb_line(obj: t.Any) -> bytes:
    """Compact document terminated with a newline, a single line of a json sequence"""
    return _dumps(obj, options=orjson.OPT_APPEND_NEWLINE)


def load(fp: t.IO[bytes]) -> t.Any:
    return orjson.loads(fp.read())


def loads(s: t.Union[str, bytes]) -> t.Any:
    # orjson accepts both str and bytes
    return orjson.loads(s)


def loadb(s: t.Union[bytes, bytearray, memoryview]) -> t.Any:
    return orjson.loads(s)
