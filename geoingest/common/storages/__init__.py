from .fsspec_filesystem import (
    fsspec_from_url,
    get_protocol,
    open_binary,
    open_binary_write,
    read_binary,
)
from .line_reader import LineReader

__all__ = [
    "fsspec_from_url",
    "get_protocol",
    "open_binary",
    "open_binary_write",
    "read_binary",
    "LineReader",
]
