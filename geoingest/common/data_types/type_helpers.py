import re
from functools import lru_cache, reduce
from typing import Any, Callable, Dict, Iterable, Optional, Tuple, Type

from geoingest.common.utils import str2bool
from geoingest.common.data_types.typing import INT64_MAX, INT64_MIN, TDataType, TPropertyValue


# fast type map for common Python types to data types
PY_TYPE_TO_SC_TYPE: Dict[Type[Any], TDataType] = {
    str: "text",
    int: "bigint",
    float: "double",
    bool: "bool",
}

# same grammar the csv type inference of the arrow project uses
_BOOL_TOKEN = re.compile(r"^(true|false)$", re.IGNORECASE)
_INT_TOKEN = re.compile(r"^-?\d+$")
_FLOAT_TOKEN = re.compile(r"^-?((\d*\.\d+|\d+\.\d*)([eE][-+]?\d+)?|\d+[eE][-+]?\d+)$")


@lru_cache(maxsize=None)
def py_type_to_sc_type(t: Type[Any]) -> TDataType:
    if result := PY_TYPE_TO_SC_TYPE.get(t):
        return result
    # bool cannot be subclassed so int subclasses are numbers
    if issubclass(t, str):
        return "text"
    if issubclass(t, float):
        return "double"
    if issubclass(t, int):
        return "bigint"
    raise TypeError(t)


def is_int64(value: int) -> bool:
    return INT64_MIN <= value <= INT64_MAX


def py_value_to_data_type(value: TPropertyValue) -> Optional[TDataType]:
    """Returns data type of a property value or None for the null value.

    Integers that do not fit into 64 bits are reported as `double`
    """
    if value is None:
        return None
    data_type = py_type_to_sc_type(type(value))
    if data_type == "bigint" and not is_int64(value):  # type: ignore[arg-type]
        return "double"
    return data_type


def parse_text_token(token: str) -> TPropertyValue:
    """Converts a raw delimited-text token into a typed property value.

    An empty token is the null value. Integer looking tokens become `int` (or `float` when they
    do not fit 64 bits), float looking tokens become `float`, `true` and `false` in any case become
    `bool`. Everything else is kept as text.
    """
    if token == "":
        return None
    if _INT_TOKEN.match(token):
        value = int(token)
        return value if is_int64(value) else float(value)
    if _FLOAT_TOKEN.match(token):
        return float(token)
    if _BOOL_TOKEN.match(token):
        return token.lower() == "true"
    return token


def merge_data_types(left: Optional[TDataType], right: Optional[TDataType]) -> Optional[TDataType]:
    """Least upper bound of two data types.

    `None` (only nulls observed) is the bottom, `text` is the top. `bigint` and `double` join to
    `double`, any other pair of distinct types joins to `text`.
    """
    if left is None:
        return right
    if right is None or left == right:
        return left
    if {left, right} == {"bigint", "double"}:
        return "double"
    return "text"


def reduce_data_types(data_types: Iterable[Optional[TDataType]]) -> Optional[TDataType]:
    return reduce(merge_data_types, data_types, None)


def is_widening(from_type: TDataType, to_type: TDataType) -> bool:
    """Tells if value of `from_type` may be stored in column of `to_type` without loss of information"""
    return merge_data_types(from_type, to_type) == to_type


def _text_to_bigint(value: str) -> int:
    v = int(value.strip())
    if not is_int64(v):
        raise ValueError(value)
    return v


def _numeric_to_bigint(value: Any) -> int:
    if value % 1 != 0:
        raise ValueError(value)
    return _text_to_bigint(str(int(value)))


def _bool_to_text(value: bool) -> str:
    return "true" if value else "false"


_COERCE_DISPATCH: Dict[Tuple[TDataType, TDataType], Callable[[Any], Any]] = {
    # to text
    ("text", "bool"): _bool_to_text,
    ("text", "bigint"): str,
    ("text", "double"): str,
    # to bigint
    ("bigint", "text"): _text_to_bigint,
    ("bigint", "double"): _numeric_to_bigint,
    # to double
    ("double", "text"): lambda v: float(v.strip()),
    ("double", "bigint"): float,
    # to bool
    ("bool", "text"): str2bool,
    ("bool", "bigint"): bool,
}


def coerce_value(to_type: TDataType, from_type: TDataType, value: Any) -> Any:
    """Converts `value` of `from_type` into `to_type`, raises ValueError when not possible"""
    if to_type == from_type:
        return value

    coercer = _COERCE_DISPATCH.get((to_type, from_type))
    if coercer is not None:
        try:
            return coercer(value)
        except OverflowError as e:
            raise ValueError(value) from e

    raise ValueError(value)
