from decimal import Decimal

import pytest

from geoingest.common.data_types import (
    DATA_TYPES,
    TDataType,
    coerce_value,
    is_int64,
    is_widening,
    merge_data_types,
    parse_text_token,
    py_type_to_sc_type,
    py_value_to_data_type,
    reduce_data_types,
)
from geoingest.common.data_types.typing import INT64_MAX, INT64_MIN


def test_data_types() -> None:
    assert set(DATA_TYPES) == {"bool", "bigint", "double", "text"}


def test_py_type_to_sc_type() -> None:
    assert py_type_to_sc_type(bool) == "bool"
    assert py_type_to_sc_type(int) == "bigint"
    assert py_type_to_sc_type(float) == "double"
    assert py_type_to_sc_type(str) == "text"
    with pytest.raises(TypeError):
        py_type_to_sc_type(list)


def test_py_type_to_sc_type_property_values_only() -> None:
    class Code(str):
        pass

    class Count(int):
        pass

    assert py_type_to_sc_type(Code) == "text"
    assert py_type_to_sc_type(Count) == "bigint"
    # types that never appear in extracted properties are rejected
    for t in (Decimal, dict, bytes, type(None)):
        with pytest.raises(TypeError):
            py_type_to_sc_type(t)


def test_py_value_to_data_type() -> None:
    assert py_value_to_data_type(None) is None
    assert py_value_to_data_type(True) == "bool"
    assert py_value_to_data_type(1) == "bigint"
    assert py_value_to_data_type(INT64_MAX) == "bigint"
    assert py_value_to_data_type(INT64_MAX + 1) == "double"
    assert py_value_to_data_type(1.0) == "double"
    assert py_value_to_data_type("1") == "text"


def test_is_int64() -> None:
    assert is_int64(INT64_MIN)
    assert is_int64(INT64_MAX)
    assert not is_int64(INT64_MIN - 1)
    assert not is_int64(2**64)


@pytest.mark.parametrize(
    "token,expected",
    [
        ("", None),
        ("42", 42),
        ("-7", -7),
        ("007", 7),
        ("4.2", 4.2),
        ("-.5", -0.5),
        ("5.", 5.0),
        ("1e3", 1000.0),
        ("2.5E-1", 0.25),
        ("true", True),
        ("FALSE", False),
        ("True", True),
        ("yes", "yes"),
        (" 42", " 42"),
        ("1,5", "1,5"),
        ("nan", "nan"),
        ("0x10", "0x10"),
        ("abc", "abc"),
    ],
)
def test_parse_text_token(token: str, expected: object) -> None:
    value = parse_text_token(token)
    assert value == expected
    assert type(value) is type(expected)


def test_parse_text_token_big_integer() -> None:
    value = parse_text_token("99999999999999999999")
    assert isinstance(value, float)
    assert value == 1e20


@pytest.mark.parametrize(
    "left,right,expected",
    [
        (None, None, None),
        (None, "bool", "bool"),
        ("bigint", None, "bigint"),
        ("bigint", "bigint", "bigint"),
        ("bigint", "double", "double"),
        ("double", "bigint", "double"),
        ("bigint", "text", "text"),
        ("double", "text", "text"),
        ("bool", "text", "text"),
        ("bool", "bigint", "text"),
        ("bool", "double", "text"),
    ],
)
def test_merge_data_types(left: TDataType, right: TDataType, expected: TDataType) -> None:
    assert merge_data_types(left, right) == expected
    # join is commutative
    assert merge_data_types(right, left) == expected


def test_reduce_data_types() -> None:
    assert reduce_data_types([]) is None
    assert reduce_data_types([None, None]) is None
    # 9 integers and a float
    assert reduce_data_types(["bigint"] * 9 + ["double"]) == "double"
    assert reduce_data_types(["bigint", None, "bigint"]) == "bigint"
    assert reduce_data_types(["double", "bigint", "text", "bigint"]) == "text"


def test_is_widening() -> None:
    assert is_widening("bigint", "double")
    assert is_widening("bigint", "text")
    assert is_widening("bool", "text")
    assert not is_widening("double", "bigint")
    assert not is_widening("text", "bigint")
    assert not is_widening("bool", "bigint")


def test_coerce_value() -> None:
    assert coerce_value("double", "bigint", 3) == 3.0
    assert isinstance(coerce_value("double", "bigint", 3), float)
    assert coerce_value("text", "bool", True) == "true"
    assert coerce_value("text", "bool", False) == "false"
    assert coerce_value("text", "bigint", 5) == "5"
    assert coerce_value("text", "double", 1.5) == "1.5"
    assert coerce_value("bigint", "text", " 12 ") == 12
    assert coerce_value("bigint", "double", 3.0) == 3
    assert coerce_value("double", "text", "2.5") == 2.5
    assert coerce_value("bool", "text", "yes") is True
    assert coerce_value("bool", "bigint", 0) is False
    # same type
    assert coerce_value("text", "text", "a") == "a"


@pytest.mark.parametrize(
    "to_type,from_type,value",
    [
        ("bigint", "double", 3.5),
        ("bigint", "text", "abc"),
        ("bigint", "text", str(2**70)),
        ("double", "text", "x"),
        ("bool", "text", "maybe"),
        ("bool", "double", 1.0),
    ],
)
def test_coerce_value_invalid(to_type: TDataType, from_type: TDataType, value: object) -> None:
    with pytest.raises(ValueError):
        coerce_value(to_type, from_type, value)
