"""Arrow types of the GeoArrow native encoding with separated x/y coordinates"""
from typing import Dict, List, Optional, Sequence

from geoingest.common.libs.pyarrow import pyarrow, get_py_arrow_datatype
from geoingest.common.geometry.typing import (
    GEOARROW_TYPE_CODES,
    GENERIC_GEOMETRY_TYPE,
    TColumnGeometryType,
    TGeometryType,
)
from geoingest.common.schema.typing import TTableSchemaColumns
from geoingest.common.schema.utils import is_geometry_column

EXTENSION_NAME_KEY = "ARROW:extension:name"
EXTENSION_METADATA_KEY = "ARROW:extension:metadata"

# names of the list fields, outermost first
LIST_FIELD_NAMES: Dict[TGeometryType, Sequence[str]] = {
    "point": (),
    "linestring": ("vertices",),
    "multipoint": ("points",),
    "polygon": ("rings", "vertices"),
    "multilinestring": ("linestrings", "vertices"),
    "multipolygon": ("polygons", "rings", "vertices"),
}
SIMPLE_GEOMETRY_TYPES: List[TGeometryType] = [
    "point",
    "linestring",
    "polygon",
    "multipoint",
    "multilinestring",
    "multipolygon",
]
GEOMETRY_COLLECTION_FIELD_NAME = "geometries"

COORD_TYPE = pyarrow.struct(
    [
        pyarrow.field("x", pyarrow.float64(), nullable=False),
        pyarrow.field("y", pyarrow.float64(), nullable=False),
    ]
)


def nested_list_type(field_names: Sequence[str], value_type: pyarrow.DataType) -> pyarrow.DataType:
    """Wraps `value_type` in lists with non nullable items named by `field_names`, outermost first"""
    for name in reversed(field_names):
        value_type = pyarrow.list_(pyarrow.field(name, value_type, nullable=False))
    return value_type


def simple_geometry_arrow_type(geometry_type: TGeometryType) -> pyarrow.DataType:
    return nested_list_type(LIST_FIELD_NAMES[geometry_type], COORD_TYPE)


def simple_geometry_union_type() -> pyarrow.DataType:
    """Dense union of all non collection types, members of geometry collection"""
    return pyarrow.dense_union(
        [pyarrow.field(t, simple_geometry_arrow_type(t)) for t in SIMPLE_GEOMETRY_TYPES],
        type_codes=[GEOARROW_TYPE_CODES[t] for t in SIMPLE_GEOMETRY_TYPES],
    )


def geometry_collection_arrow_type() -> pyarrow.DataType:
    return pyarrow.list_(
        pyarrow.field(GEOMETRY_COLLECTION_FIELD_NAME, simple_geometry_union_type(), nullable=False)
    )


def generic_geometry_arrow_type() -> pyarrow.DataType:
    """Dense union of all geometry types with geoarrow type codes"""
    types: List[TGeometryType] = SIMPLE_GEOMETRY_TYPES + ["geometrycollection"]
    return pyarrow.dense_union(
        [pyarrow.field(t, geometry_arrow_type(t)) for t in types],
        type_codes=[GEOARROW_TYPE_CODES[t] for t in types],
    )


def geometry_arrow_type(geometry_type: TColumnGeometryType) -> pyarrow.DataType:
    if geometry_type == GENERIC_GEOMETRY_TYPE:
        return generic_geometry_arrow_type()
    if geometry_type == "geometrycollection":
        return geometry_collection_arrow_type()
    return simple_geometry_arrow_type(geometry_type)


def geometry_field_metadata(geometry_type: TColumnGeometryType) -> Dict[str, str]:
    return {EXTENSION_NAME_KEY: f"geoarrow.{geometry_type}", EXTENSION_METADATA_KEY: "{}"}


def geometry_field(
    name: str, geometry_type: TColumnGeometryType, nullable: bool = True
) -> pyarrow.Field:
    return pyarrow.field(
        name,
        geometry_arrow_type(geometry_type),
        nullable=nullable,
        metadata=geometry_field_metadata(geometry_type),
    )


def columns_to_arrow(
    columns: TTableSchemaColumns, projection: Optional[Sequence[str]] = None
) -> pyarrow.Schema:
    """Convert columns to arrow schema, keeping only columns in `projection` if specified.

    Args:
        columns (TTableSchemaColumns): property columns and the geometry column
        projection (Sequence[str], optional): names of columns to keep

    Returns:
        pyarrow.Schema: pyarrow schema
    """
    selected = None if projection is None else set(projection)
    fields = []
    for name, column in columns.items():
        if selected is not None and name not in selected:
            continue
        nullable = column.get("nullable", True)
        if is_geometry_column(column):
            fields.append(geometry_field(name, column["geometry_type"], nullable))
        else:
            fields.append(
                pyarrow.field(name, get_py_arrow_datatype(column["data_type"]), nullable=nullable)
            )
    return pyarrow.schema(fields)
