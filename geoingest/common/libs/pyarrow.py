from typing import Any, List, Sequence

from geoingest import version
from geoingest.common.exceptions import MissingDependencyException
from geoingest.common.data_types import TDataType, TPropertyValue

try:
    import pyarrow
except ModuleNotFoundError:
    raise MissingDependencyException(
        "geoingest pyarrow helpers",
        [f"{version.GEOINGEST_PKG_NAME}", "pyarrow>=14.0.0"],
        "Install pyarrow to build columnar batches.",
    )

ROW_COUNT_COLUMN = "__row_count"
"""Name of the transient column used to create batches without columns"""


def get_py_arrow_datatype(data_type: TDataType) -> Any:
    if data_type == "text":
        return pyarrow.string()
    elif data_type == "double":
        return pyarrow.float64()
    elif data_type == "bool":
        return pyarrow.bool_()
    elif data_type == "bigint":
        return pyarrow.int64()
    else:
        raise ValueError(data_type)


def property_values_to_arrow(values: Sequence[TPropertyValue], data_type: TDataType) -> pyarrow.Array:
    """Builds typed array from values already coerced to `data_type`, `None` becomes null"""
    return pyarrow.array(values, type=get_py_arrow_datatype(data_type))


def row_count_only_batch(num_rows: int) -> pyarrow.RecordBatch:
    """Creates a record batch with no columns that still reports `num_rows` rows"""
    batch = pyarrow.RecordBatch.from_arrays([pyarrow.nulls(num_rows)], names=[ROW_COUNT_COLUMN])
    return batch.select([])


def concat_batches(batches: List[pyarrow.RecordBatch], schema: pyarrow.Schema) -> pyarrow.Table:
    """Concatenates batches with `schema` into a table, no batches give an empty table"""
    return pyarrow.Table.from_batches(batches, schema=schema)
