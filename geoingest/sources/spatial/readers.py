from contextlib import closing
from typing import Any, Iterator, List, Optional, Sequence, TypeVar

from geoingest.common import logger
from geoingest.common.configuration import resolve_configuration
from geoingest.common.configuration.exceptions import ConfigurationValueError
from geoingest.common.data_writers import TFileFormat, write_batches
from geoingest.common.exceptions import SpatialReadException
from geoingest.common.libs.pyarrow import pyarrow, concat_batches
from geoingest.common.libs.geoarrow import columns_to_arrow
from geoingest.common.schema.inference import infer_schema
from geoingest.common.schema.typing import Record, TTableSchemaColumns
from geoingest.common.schema.utils import is_geometry_column, select_columns
from geoingest.common.runtime import initialize_runtime
from geoingest.common.typing import DictStrAny
from geoingest.sources.spatial.assembler import BatchAssembler
from geoingest.sources.spatial.configuration import (
    CsvReaderConfiguration,
    GeoJsonReaderConfiguration,
    SpatialReaderConfiguration,
)
from geoingest.sources.spatial.extractors import (
    CsvRecordExtractor,
    GeoJsonRecordExtractor,
    RecordExtractor,
)

TReaderConfiguration = TypeVar("TReaderConfiguration", bound=SpatialReaderConfiguration)


class SpatialSource:
    """Streams a spatial file as arrow record batches.

    The schema is inferred from the first `schema_sample_size` records on first use and kept for
    the lifetime of the source. Each call to `iter_batches` or `iter_records` reads the source again
    from the start, so a failed read may be retried by iterating again.
    """

    def __init__(self, extractor: RecordExtractor, config: SpatialReaderConfiguration) -> None:
        self.extractor = extractor
        self.config = config
        self._columns: Optional[TTableSchemaColumns] = None

    @property
    def url(self) -> str:
        return self.extractor.url

    @property
    def geometry_column_name(self) -> str:
        return self.extractor.geometry_column_name

    def schema(self) -> TTableSchemaColumns:
        """Returns inferred columns: property columns in order of appearance and the geometry column"""
        if self._columns is None:
            # geometries are not needed to infer property types
            sample_records = self.extractor.extract(
                limit=self.config.schema_sample_size, with_geometry=False
            )
            with closing(sample_records) as sample:
                try:
                    columns = infer_schema(
                        sample,
                        self.geometry_column_name,
                        self.config.geometry_type,
                        sample_size=None,
                    )
                except SpatialReadException as ex:
                    if not ex.context:
                        ex.with_additional_context(self.url)
                    raise
            logger.info(
                f"Inferred schema of {self.url} with columns {list(columns.keys())} from at most"
                f" {self.config.schema_sample_size} records"
            )
            self._columns = columns
        return self._columns

    def arrow_schema(self, projection: Optional[Sequence[str]] = None) -> pyarrow.Schema:
        """Returns arrow schema of batches produced with `projection`"""
        return columns_to_arrow(select_columns(self.schema(), self._projection(projection)))

    def iter_records(self, limit: Optional[int] = None) -> Iterator[Record]:
        """Yields extracted records without assembling them into batches"""
        with closing(self.extractor.extract(limit=limit)) as records:
            yield from records

    def iter_batches(self, projection: Optional[Sequence[str]] = None) -> Iterator[pyarrow.RecordBatch]:
        """Yields record batches of at most `batch_size` rows with columns in `projection`.

        Values of columns outside of `projection` are neither parsed nor validated. Errors abort the
        iteration at the failing record, no rows are skipped.
        """
        assembler = BatchAssembler(self.schema(), self._projection(projection), context=self.url)
        num_rows = 0
        num_batches = 0
        logger.metrics("start", self.url, {"columns": list(assembler.columns.keys())})
        properties = [n for n, c in assembler.columns.items() if not is_geometry_column(c)]
        with_geometry = len(properties) < len(assembler.columns)
        records = self.extractor.extract(properties=properties, with_geometry=with_geometry)
        with closing(records):
            for batch in assembler.iter_batches(records, self.config.batch_size):
                num_rows += batch.num_rows
                num_batches += 1
                yield batch
        logger.metrics("stop", self.url, {"rows": num_rows, "batches": num_batches})
        logger.info(f"Read {num_rows} rows in {num_batches} batches from {self.url}")

    def read_all(self, projection: Optional[Sequence[str]] = None) -> pyarrow.Table:
        """Reads all batches into a table"""
        batches: List[pyarrow.RecordBatch] = list(self.iter_batches(projection))
        return concat_batches(batches, self.arrow_schema(projection))

    def write(
        self,
        url: str,
        file_format: TFileFormat,
        projection: Optional[Sequence[str]] = None,
        storage_options: Optional[DictStrAny] = None,
        **writer_options: Any,
    ) -> int:
        """Streams batches with columns in `projection` into `url` as `file_format`, returns number of rows"""
        columns = select_columns(self.schema(), self._projection(projection))
        return write_batches(
            url, self.iter_batches(projection), columns, file_format, storage_options, **writer_options
        )

    def _projection(self, projection: Optional[Sequence[str]]) -> Optional[Sequence[str]]:
        return self.config.projection if projection is None else projection


def _resolve_reader_configuration(
    config: TReaderConfiguration, options: DictStrAny
) -> TReaderConfiguration:
    if not logger.is_logging():
        initialize_runtime()
    unknown = [key for key in options if key not in config]
    if unknown:
        raise ConfigurationValueError(
            f"Unknown options {unknown} for {config.__driver__} reader. Known options:"
            f" {list(config.keys())}"
        )
    return resolve_configuration(config, sections=config.config_sections(), explicit_value=options)


def _read_csv(url: str, **options: Any) -> SpatialSource:
    config = _resolve_reader_configuration(CsvReaderConfiguration(), options)
    logger.info(
        f"Opening delimited text source {url} with geometry column '{config.geometry_column}'"
    )
    return SpatialSource(CsvRecordExtractor(url, config), config)


def _read_geojson(url: str, **options: Any) -> SpatialSource:
    config = _resolve_reader_configuration(GeoJsonReaderConfiguration(), options)
    logger.info(f"Opening GeoJSON source {url} in {config.json_mode} mode")
    return SpatialSource(GeoJsonRecordExtractor(url, config), config)
