from typing import (
    Any,
    Callable,
    Dict,
    Iterator,
    List,
    Mapping,
    Optional,
    Sequence,
    Type,
    TypeVar,
    Union,
)

from typing_extensions import Literal, TypeAlias, TypedDict, get_args, get_origin

AnyType: TypeAlias = Any
NoneType = type(None)
DictStrAny: TypeAlias = Dict[str, Any]
DictStrStr: TypeAlias = Dict[str, str]
StrAny: TypeAlias = Mapping[str, Any]  # immutable, covariant entity
StrStr: TypeAlias = Mapping[str, str]  # immutable, covariant entity
AnyFun: TypeAlias = Callable[..., Any]
TFun = TypeVar("TFun", bound=AnyFun)
TAny = TypeVar("TAny", bound=Any)
TAnyClass = TypeVar("TAnyClass", bound=object)

TDataItem: TypeAlias = Any
"""A single data item as extracted from a source"""
TDataItems: TypeAlias = Union[TDataItem, List[TDataItem]]


def is_optional_type(t: Type[Any]) -> bool:
    return get_origin(t) is Union and NoneType in get_args(t)


def is_literal_type(hint: Type[Any]) -> bool:
    return get_origin(hint) is Literal


def extract_inner_type(hint: Type[Any]) -> Type[Any]:
    """Gets the inner type from Optional and Literal hints. For literals the type of the first value is returned"""
    if is_optional_type(hint):
        return extract_inner_type(next(t for t in get_args(hint) if t is not NoneType))
    if is_literal_type(hint):
        return type(get_args(hint)[0])  # type: ignore[no-any-return]
    return hint


__all__ = [
    "Any",
    "Callable",
    "Dict",
    "Iterator",
    "List",
    "Mapping",
    "Optional",
    "Sequence",
    "Type",
    "AnyType",
    "NoneType",
    "DictStrAny",
    "DictStrStr",
    "StrAny",
    "StrStr",
    "AnyFun",
    "TFun",
    "TAny",
    "TAnyClass",
    "TDataItem",
    "TDataItems",
    "TypeAlias",
    "TypedDict",
    "Literal",
    "get_args",
    "get_origin",
    "is_optional_type",
    "is_literal_type",
    "extract_inner_type",
]
