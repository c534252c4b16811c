from geoingest.common.schema.typing import (
    DEFAULT_GEOMETRY_COLUMN_NAME,
    Record,
    TColumnSchema,
    TTableSchemaColumns,
)
from geoingest.common.schema.inference import SchemaInferrer, infer_schema

__all__ = [
    "DEFAULT_GEOMETRY_COLUMN_NAME",
    "Record",
    "TColumnSchema",
    "TTableSchemaColumns",
    "SchemaInferrer",
    "infer_schema",
]
