from typing import List, Optional, Sequence

from geoingest.common.data_types import TDataType
from geoingest.common.geometry.typing import COLUMN_GEOMETRY_TYPES, TColumnGeometryType
from geoingest.common.configuration.exceptions import (
    ConfigurationValueError,
    UnknownColumnsException,
)
from geoingest.common.schema.typing import TColumnSchema, TTableSchemaColumns


def new_column(column_name: str, data_type: TDataType = None, nullable: bool = True) -> TColumnSchema:
    column: TColumnSchema = {"name": column_name, "nullable": nullable}
    if data_type:
        column["data_type"] = data_type
    return column


def new_geometry_column(
    column_name: str, geometry_type: TColumnGeometryType, nullable: bool = True
) -> TColumnSchema:
    if geometry_type not in COLUMN_GEOMETRY_TYPES:
        raise ConfigurationValueError(
            f"Unknown geometry type {geometry_type!r}, expected one of:"
            f" {sorted(COLUMN_GEOMETRY_TYPES)}"
        )
    return {
        "name": column_name,
        "data_type": "geometry",
        "nullable": nullable,
        "geometry_type": geometry_type,
    }


def is_geometry_column(column: TColumnSchema) -> bool:
    return column.get("data_type") == "geometry"


def get_geometry_column(columns: TTableSchemaColumns) -> Optional[TColumnSchema]:
    return next((c for c in columns.values() if is_geometry_column(c)), None)


def get_property_columns(columns: TTableSchemaColumns) -> List[TColumnSchema]:
    return [c for c in columns.values() if not is_geometry_column(c)]


def select_columns(
    columns: TTableSchemaColumns, projection: Optional[Sequence[str]]
) -> TTableSchemaColumns:
    """Returns columns in `projection` keeping the schema order. `None` selects all columns

    Raises:
        UnknownColumnsException: when `projection` names columns not present in the schema
    """
    if projection is None:
        return dict(columns)
    unknown = [name for name in projection if name not in columns]
    if unknown:
        raise UnknownColumnsException(unknown, list(columns.keys()))
    selected = set(projection)
    return {name: c for name, c in columns.items() if name in selected}
