from itertools import islice
from typing import Dict, Iterable, Mapping, Optional

from geoingest.common import logger
from geoingest.common.data_types import (
    TDataType,
    TPropertyValue,
    merge_data_types,
    py_value_to_data_type,
)
from geoingest.common.exceptions import SchemaInferenceException
from geoingest.common.geometry.typing import GENERIC_GEOMETRY_TYPE, TColumnGeometryType
from geoingest.common.schema.typing import (
    DEFAULT_GEOMETRY_COLUMN_NAME,
    Record,
    TTableSchemaColumns,
)
from geoingest.common.schema.utils import new_column, new_geometry_column

DEFAULT_SCHEMA_SAMPLE_SIZE = 1000
UNRESOLVED_DATA_TYPE: TDataType = "text"
"""Type of columns where only nulls were observed"""


class SchemaInferrer:
    """Merges observed property value types into a column schema.

    Each property keeps the least upper bound of the types seen so far, see `merge_data_types`.
    Columns are ordered by first observation.
    """

    def __init__(
        self,
        geometry_column_name: str = DEFAULT_GEOMETRY_COLUMN_NAME,
        geometry_type: TColumnGeometryType = GENERIC_GEOMETRY_TYPE,
    ) -> None:
        self.geometry_column_name = geometry_column_name
        self.geometry_type = geometry_type
        self.records_observed = 0
        self._observed: Dict[str, Optional[TDataType]] = {}

    def observe(self, properties: Mapping[str, TPropertyValue]) -> None:
        for name, value in properties.items():
            self._observed[name] = merge_data_types(
                self._observed.get(name), py_value_to_data_type(value)
            )
        self.records_observed += 1

    @property
    def observed_types(self) -> Mapping[str, Optional[TDataType]]:
        """Merged type per property, `None` when only nulls were seen"""
        return self._observed

    def columns(self) -> TTableSchemaColumns:
        if self.geometry_column_name in self._observed:
            raise SchemaInferenceException(
                f"Property '{self.geometry_column_name}' conflicts with the geometry column name."
                " Set a different geometry column name."
            )
        columns: TTableSchemaColumns = {}
        for name, data_type in self._observed.items():
            # every column is nullable, records outside of the sample may have nulls
            columns[name] = new_column(name, data_type or UNRESOLVED_DATA_TYPE, nullable=True)
        columns[self.geometry_column_name] = new_geometry_column(
            self.geometry_column_name, self.geometry_type
        )
        return columns


def infer_schema(
    records: Iterable[Record],
    geometry_column_name: str = DEFAULT_GEOMETRY_COLUMN_NAME,
    geometry_type: TColumnGeometryType = GENERIC_GEOMETRY_TYPE,
    sample_size: Optional[int] = DEFAULT_SCHEMA_SAMPLE_SIZE,
) -> TTableSchemaColumns:
    """Infers columns from at most `sample_size` records. `None` samples all records.

    An empty sample produces a schema with the geometry column only.
    """
    inferrer = SchemaInferrer(geometry_column_name, geometry_type)
    for record in islice(records, sample_size):
        inferrer.observe(record.properties)
    columns = inferrer.columns()
    logger.debug(
        f"Inferred {len(columns) - 1} property columns from {inferrer.records_observed} records"
    )
    return columns
