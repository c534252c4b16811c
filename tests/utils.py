import os
import uuid
from os import environ
from typing import Iterator

import pytest

from geoingest.common.configuration.specs.config_providers_context import reset_providers_context
from geoingest.common.storages import fsspec_from_url


def _preserve_environ() -> Iterator[None]:
    saved_environ = environ.copy()
    try:
        yield
    finally:
        environ.clear()
        environ.update(saved_environ)


@pytest.fixture(scope="function", autouse=True)
def preserve_environ() -> Iterator[None]:
    yield from _preserve_environ()


@pytest.fixture(scope="function")
def providers_context() -> Iterator[None]:
    """Re-creates config providers before and after the test so config files are read again"""
    reset_providers_context()
    try:
        yield
    finally:
        reset_providers_context()


def write_text(path: str, content: str, encoding: str = "utf-8") -> str:
    """Writes `content` to local `path` or any fsspec url and returns the url"""
    fs, fs_path = fsspec_from_url(path)
    parent = os.path.dirname(fs_path)
    if parent:
        fs.makedirs(parent, exist_ok=True)
    with fs.open(fs_path, "wb") as f:
        f.write(content.encode(encoding))
    return path


def write_bytes(path: str, content: bytes) -> str:
    fs, fs_path = fsspec_from_url(path)
    with fs.open(fs_path, "wb") as f:
        f.write(content)
    return path


def unique_memory_url(file_name: str) -> str:
    """Returns url of a file in fsspec memory filesystem that no other test uses"""
    return f"memory://geoingest-tests/{uuid.uuid4().hex}/{file_name}"
