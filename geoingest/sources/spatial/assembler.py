from typing import Iterable, Iterator, List, Optional, Sequence

from geoingest.common import logger
from geoingest.common.data_types import TDataType, coerce_value, is_widening, py_value_to_data_type
from geoingest.common.exceptions import ValidationException
from geoingest.common.geometry.columnar import GeometryArrayBuilder
from geoingest.common.libs.geoarrow import columns_to_arrow
from geoingest.common.libs.pyarrow import pyarrow, property_values_to_arrow, row_count_only_batch
from geoingest.common.schema.typing import Record, TColumnSchema, TTableSchemaColumns
from geoingest.common.schema.utils import is_geometry_column, select_columns
from geoingest.common.utils import chunks


class BatchAssembler:
    """Assembles records into arrow record batches with a fixed schema.

    Only columns in `projection` are materialized, values of other columns are never read. Property
    values that do not match the declared column type are widened (ie. bigint to double) or rejected
    with `ValidationException`. Text columns of delimited sources hold the source token unchanged,
    ie. `00501` stays `00501`. Geometries that do not match the target geometry type are rejected
    with `GeometryTypeException`.
    """

    def __init__(
        self,
        columns: TTableSchemaColumns,
        projection: Optional[Sequence[str]] = None,
        context: str = None,
    ) -> None:
        self.columns = select_columns(columns, projection)
        self.arrow_schema = columns_to_arrow(self.columns)
        self.context = context

    def assemble(self, records: Sequence[Record], row_offset: int = 0) -> pyarrow.RecordBatch:
        """Builds a batch from `records`. `row_offset` is the number of rows in preceding batches"""
        if not self.columns:
            return row_count_only_batch(len(records))
        arrays: List[pyarrow.Array] = []
        for name, column in self.columns.items():
            if is_geometry_column(column):
                arrays.append(self._geometry_array(records, row_offset))
            else:
                arrays.append(self._property_array(name, column, records, row_offset))
        return pyarrow.RecordBatch.from_arrays(arrays, schema=self.arrow_schema)

    def iter_batches(self, records: Iterable[Record], batch_size: int) -> Iterator[pyarrow.RecordBatch]:
        """Yields batches of at most `batch_size` rows, only the last batch may be shorter"""
        row_offset = 0
        for chunk in chunks(records, batch_size):
            batch = self.assemble(chunk, row_offset)
            logger.debug(
                f"Assembled batch of {batch.num_rows} rows starting at row {row_offset}"
                f" with {batch.num_columns} columns"
            )
            row_offset += len(chunk)
            yield batch

    def _geometry_array(self, records: Sequence[Record], row_offset: int) -> pyarrow.Array:
        builder = GeometryArrayBuilder(self._geometry_column["geometry_type"])
        for idx, record in enumerate(records):
            builder.append(record.geometry, context=self._row_context(row_offset + idx))
        return builder.finish()

    def _property_array(
        self, name: str, column: TColumnSchema, records: Sequence[Record], row_offset: int
    ) -> pyarrow.Array:
        data_type: TDataType = column["data_type"]
        nullable = column.get("nullable", True)
        values = []
        for idx, record in enumerate(records):
            value = record.properties.get(name)
            if value is None:
                if not nullable:
                    raise ValidationException(
                        name, idx, data_type, value, self._row_context(row_offset + idx)
                    )
            elif data_type == "text" and record.tokens is not None and name in record.tokens:
                # text columns of delimited sources keep the token as written
                value = record.tokens[name]
            else:
                value_type = py_value_to_data_type(value)
                if value_type != data_type:
                    if not is_widening(value_type, data_type):
                        raise ValidationException(
                            name, idx, data_type, value, self._row_context(row_offset + idx)
                        )
                    value = coerce_value(data_type, value_type, value)
            values.append(value)
        return property_values_to_arrow(values, data_type)

    @property
    def _geometry_column(self) -> TColumnSchema:
        return next(c for c in self.columns.values() if is_geometry_column(c))

    def _row_context(self, row: int) -> str:
        if self.context:
            return f"{self.context}; row {row}"
        return f"row {row}"
