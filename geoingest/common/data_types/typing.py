from typing import Literal, Optional, Set, Union

from geoingest.common.typing import TypeAlias, get_args


TDataType = Literal[
    "bool",
    "bigint",
    "double",
    "text",
]
DATA_TYPES: Set[TDataType] = set(get_args(TDataType))

TPropertyValue: TypeAlias = Optional[Union[bool, int, float, str]]
"""A scalar property value of a record. `None` is the null value"""

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1
