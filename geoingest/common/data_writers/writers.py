import abc
import csv
import io
from typing import IO, Any, ClassVar, Iterable, Iterator, List, Literal, Optional, Tuple, Type

from geoingest.common import logger
from geoingest.common.data_writers.exceptions import DataWriterNotFound, FileWriteException
from geoingest.common.geometry import TOptionalGeometry, geometry_to_geojson, geometry_to_wkt
from geoingest.common.geometry.columnar import geometries_from_arrow
from geoingest.common.geometry.typing import GENERIC_GEOMETRY_TYPE
from geoingest.common.json import json
from geoingest.common.libs.pyarrow import pyarrow
from geoingest.common.schema.typing import TTableSchemaColumns
from geoingest.common.schema.utils import is_geometry_column
from geoingest.common.storages import open_binary_write
from geoingest.common.typing import DictStrAny, get_args

TFileFormat = Literal["geojson", "geojsonl", "csv"]
FILE_FORMATS: Tuple[TFileFormat, ...] = get_args(TFileFormat)


class DataWriter(abc.ABC):
    """Writes arrow record batches of a fixed set of columns into a binary file"""

    file_format: ClassVar[TFileFormat] = None

    def __init__(self, f: IO[bytes]) -> None:
        self._f = f
        self.items_count = 0
        self._properties: List[str] = []
        self._geometry_column: Optional[str] = None
        self._geometry_type: str = GENERIC_GEOMETRY_TYPE

    def write_header(self, columns: TTableSchemaColumns) -> None:
        self._properties = [name for name, c in columns.items() if not is_geometry_column(c)]
        for name, column in columns.items():
            if is_geometry_column(column):
                self._geometry_column = name
                self._geometry_type = column.get("geometry_type") or GENERIC_GEOMETRY_TYPE

    def write_data(self, batch: pyarrow.RecordBatch) -> None:
        self.items_count += batch.num_rows

    def write_footer(self) -> None:  # noqa
        pass

    def write_all(self, columns: TTableSchemaColumns, batches: Iterable[pyarrow.RecordBatch]) -> None:
        self.write_header(columns)
        for batch in batches:
            self.write_data(batch)
        self.write_footer()

    def _rows(self, batch: pyarrow.RecordBatch) -> Iterator[Tuple[DictStrAny, TOptionalGeometry]]:
        """Yields property values and geometry of each row of `batch`"""
        values = {name: batch.column(name).to_pylist() for name in self._properties}
        if self._geometry_column:
            geometries = geometries_from_arrow(
                batch.column(self._geometry_column), self._geometry_type  # type: ignore[arg-type]
            )
        else:
            geometries = [None] * batch.num_rows
        for idx, geometry in enumerate(geometries):
            yield {name: column[idx] for name, column in values.items()}, geometry

    @classmethod
    def class_factory(cls, file_format: str) -> Type["DataWriter"]:
        for writer in ALL_WRITERS:
            if writer.file_format == file_format:
                return writer
        raise DataWriterNotFound(file_format, FILE_FORMATS)

    @classmethod
    def from_file_format(cls, file_format: str, f: IO[bytes], **options: Any) -> "DataWriter":
        return cls.class_factory(file_format)(f, **options)


def _feature(properties: DictStrAny, geometry: TOptionalGeometry) -> DictStrAny:
    return {"type": "Feature", "properties": properties, "geometry": geometry_to_geojson(geometry)}


class GeoJsonWriter(DataWriter):
    """Writes a single FeatureCollection document with one feature per line"""

    file_format = "geojson"

    def write_header(self, columns: TTableSchemaColumns) -> None:
        super().write_header(columns)
        self._f.write(b'{"type":"FeatureCollection","features":[\n')

    def write_data(self, batch: pyarrow.RecordBatch) -> None:
        for properties, geometry in self._rows(batch):
            if self.items_count > 0:
                self._f.write(b",\n")
            self._f.write(json.dumpb(_feature(properties, geometry)))
            self.items_count += 1

    def write_footer(self) -> None:
        self._f.write(b"\n]}\n")


class GeoJsonSeqWriter(DataWriter):
    """Writes newline delimited GeoJSON features"""

    file_format = "geojsonl"

    def write_data(self, batch: pyarrow.RecordBatch) -> None:
        super().write_data(batch)
        for properties, geometry in self._rows(batch):
            self._f.write(json.dumpb_line(_feature(properties, geometry)))


class CsvWktWriter(DataWriter):
    """Writes delimited text with a header row, the geometry is stored as WKT in the last column.

    Nulls are written as empty fields and booleans as `true` / `false`.
    """

    file_format = "csv"

    def __init__(self, f: IO[bytes], delimiter: str = ",", quotechar: str = '"') -> None:
        super().__init__(f)
        self._buffer = io.StringIO()
        self._writer = csv.writer(
            self._buffer, delimiter=delimiter, quotechar=quotechar, lineterminator="\n"
        )

    def write_header(self, columns: TTableSchemaColumns) -> None:
        super().write_header(columns)
        header = list(self._properties)
        if self._geometry_column:
            header.append(self._geometry_column)
        self._writer.writerow(header)
        self._flush()

    def write_data(self, batch: pyarrow.RecordBatch) -> None:
        super().write_data(batch)
        for properties, geometry in self._rows(batch):
            row = [self._text(value) for value in properties.values()]
            if self._geometry_column:
                row.append(geometry_to_wkt(geometry) or "")
            self._writer.writerow(row)
        self._flush()

    @staticmethod
    def _text(value: Any) -> str:
        if value is None:
            return ""
        if isinstance(value, bool):
            return "true" if value else "false"
        if isinstance(value, float):
            return repr(value)
        return str(value)

    def _flush(self) -> None:
        self._f.write(self._buffer.getvalue().encode("utf-8"))
        self._buffer.seek(0)
        self._buffer.truncate(0)


ALL_WRITERS: List[Type[DataWriter]] = [GeoJsonWriter, GeoJsonSeqWriter, CsvWktWriter]


def write_batches(
    url: str,
    batches: Iterable[pyarrow.RecordBatch],
    columns: TTableSchemaColumns,
    file_format: TFileFormat,
    storage_options: Optional[DictStrAny] = None,
    **writer_options: Any,
) -> int:
    """Writes `batches` with `columns` to `url` in `file_format`, returns the number of written rows.

    Parent directories are created when missing. `writer_options` go to the writer, ie. `delimiter`
    of `csv`.

    Raises:
        DataWriterNotFound: unknown `file_format`
        FileWriteException: file cannot be opened or written
    """
    writer_class = DataWriter.class_factory(file_format)
    try:
        with open_binary_write(url, storage_options) as f:
            writer = writer_class(f, **writer_options)
            writer.write_all(columns, batches)
    except OSError as e:
        raise FileWriteException(url, str(e), e) from e
    logger.info(f"Wrote {writer.items_count} rows to {url} as {file_format}")
    return writer.items_count
