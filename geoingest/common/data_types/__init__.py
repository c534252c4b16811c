from geoingest.common.data_types.type_helpers import (
    coerce_value,
    is_int64,
    is_widening,
    merge_data_types,
    parse_text_token,
    py_type_to_sc_type,
    py_value_to_data_type,
    reduce_data_types,
)
from geoingest.common.data_types.typing import TDataType, TPropertyValue, DATA_TYPES

__all__ = [
    "TDataType",
    "TPropertyValue",
    "DATA_TYPES",
    "py_type_to_sc_type",
    "py_value_to_data_type",
    "parse_text_token",
    "merge_data_types",
    "reduce_data_types",
    "is_widening",
    "coerce_value",
    "is_int64",
]
