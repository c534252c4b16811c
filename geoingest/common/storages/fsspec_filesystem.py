import posixpath
from typing import IO, Optional, Tuple
from urllib.parse import urlparse

from fsspec import AbstractFileSystem
from fsspec.core import url_to_fs

from geoingest.common.exceptions import MissingDependencyException, StorageIoException
from geoingest.common.typing import DictStrAny


def get_protocol(url: str) -> str:
    """Returns protocol of `url`, local paths (including windows drive letters) have `file` protocol"""
    scheme = urlparse(url).scheme
    if len(scheme) <= 1:
        return "file"
    return scheme


def fsspec_from_url(
    url: str, storage_options: Optional[DictStrAny] = None
) -> Tuple[AbstractFileSystem, str]:
    """Instantiates fsspec `FileSystem` for `url`. `storage_options` are passed to the filesystem constructor.

    Credentials are not looked up, pass them in `storage_options` when needed.

    Returns: (fsspec filesystem, path within filesystem)
    """
    try:
        return url_to_fs(url, **(storage_options or {}))  # type: ignore
    except ImportError as e:
        protocol = get_protocol(url)
        raise MissingDependencyException(
            f"reading from {protocol} filesystem", [f"fsspec[{protocol}]"]
        ) from e
    except ValueError as e:
        # unknown protocol
        raise StorageIoException(str(e), context=url, source=e) from e


def open_binary(url: str, storage_options: Optional[DictStrAny] = None) -> IO[bytes]:
    """Opens `url` for binary reading. Caller must close the returned file

    Raises:
        StorageIoException: file cannot be opened ie. does not exist, network or permission error
    """
    fs, path = fsspec_from_url(url, storage_options)
    try:
        return fs.open(path, "rb")  # type: ignore[no-any-return]
    except OSError as e:
        raise StorageIoException(f"Could not open file: {e}", context=url, source=e) from e


def read_binary(url: str, storage_options: Optional[DictStrAny] = None) -> bytes:
    """Reads the whole content of `url` into memory"""
    with open_binary(url, storage_options) as f:
        try:
            return f.read()
        except OSError as e:
            raise StorageIoException(f"Could not read file: {e}", context=url, source=e) from e


def open_binary_write(url: str, storage_options: Optional[DictStrAny] = None) -> IO[bytes]:
    """Opens `url` for binary writing, creates missing parent directories. Caller must close the returned file"""
    fs, path = fsspec_from_url(url, storage_options)
    fs.makedirs(posixpath.dirname(path), exist_ok=True)
    return fs.open(path, "wb")  # type: ignore[no-any-return]
