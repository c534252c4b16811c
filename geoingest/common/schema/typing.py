from typing import Dict, List, Literal, NamedTuple, Optional, Set

from geoingest.common.typing import TypedDict, get_args
from geoingest.common.data_types import TDataType, TPropertyValue
from geoingest.common.geometry.models import TOptionalGeometry
from geoingest.common.geometry.typing import TColumnGeometryType


DEFAULT_GEOMETRY_COLUMN_NAME = "geometry"
"""Name of the geometry column when not configured"""

TColumnDataType = Literal["bool", "bigint", "double", "text", "geometry"]
"""Declared type of a column. Property columns use one of the scalar data types"""
COLUMN_DATA_TYPES: Set[TColumnDataType] = set(get_args(TColumnDataType))


class TColumnSchema(TypedDict, total=False):
    """TypedDict that defines a column: name, declared type and nullability"""

    name: Optional[str]
    data_type: Optional[TColumnDataType]
    nullable: Optional[bool]
    geometry_type: Optional[TColumnGeometryType]
    """Target geometry type, present only on the geometry column"""


TTableSchemaColumns = Dict[str, TColumnSchema]
"""An ordered mapping from column name to column schema. Property columns come first, geometry column is last"""

TColumnNames = List[str]


class Record(NamedTuple):
    """Extracted record: property values by name and an optional geometry"""

    properties: Dict[str, TPropertyValue]
    geometry: TOptionalGeometry
    tokens: Optional[Dict[str, str]] = None
    """Source text of each property, present when values were parsed from delimited text"""


__all__ = [
    "DEFAULT_GEOMETRY_COLUMN_NAME",
    "TColumnDataType",
    "COLUMN_DATA_TYPES",
    "TColumnSchema",
    "TTableSchemaColumns",
    "TColumnNames",
    "TDataType",
    "Record",
]
