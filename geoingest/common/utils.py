from itertools import islice
from os import environ
from typing import Iterable, Iterator, List, Sequence, TypeVar

from geoingest.common.typing import StrStr

T = TypeVar("T")


def str2bool(v: str) -> bool:
    if isinstance(v, bool):
        return v
    if v.lower() in ("yes", "true", "t", "y", "1"):
        return True
    elif v.lower() in ("no", "false", "f", "n", "0"):
        return False
    else:
        raise ValueError("Boolean value expected.")


def filter_env_vars(envs: List[str]) -> StrStr:
    return {k.lower(): environ[k] for k in envs if k in environ}


def chunks(items: Iterable[T], chunk_size: int) -> Iterator[List[T]]:
    """Splits `items` into lists of at most `chunk_size` elements, consuming the iterable lazily"""
    if chunk_size < 1:
        raise ValueError(f"chunk_size must be positive, got {chunk_size}")
    it = iter(items)
    while True:
        chunk = list(islice(it, chunk_size))
        if not chunk:
            return
        yield chunk


def find_duplicates(names: Sequence[str]) -> List[str]:
    """Returns names that appear more than once, in order of the first repetition"""
    seen = set()
    duplicates: List[str] = []
    for name in names:
        if name in seen and name not in duplicates:
            duplicates.append(name)
        seen.add(name)
    return duplicates
