import codecs
from typing import Any, ClassVar, Dict, List, Optional, Tuple

from geoingest.common.configuration import configspec
from geoingest.common.configuration.exceptions import ConfigurationValueError
from geoingest.common.configuration.specs import BaseConfiguration
from geoingest.common.geometry.typing import (
    COLUMN_GEOMETRY_TYPES,
    GENERIC_GEOMETRY_TYPE,
    TColumnGeometryType,
)
from geoingest.sources.spatial.settings import (
    DEFAULT_BATCH_SIZE,
    DEFAULT_GEOMETRY_COLUMN_NAME,
    DEFAULT_READ_CHUNK_SIZE,
    DEFAULT_SCHEMA_SAMPLE_SIZE,
    JSON_MODES,
    SOURCES_SECTION,
    SPATIAL_SECTION,
    TJsonMode,
)


@configspec
class SpatialReaderConfiguration(BaseConfiguration):
    """Options shared by all spatial readers"""

    batch_size: int = DEFAULT_BATCH_SIZE
    schema_sample_size: int = DEFAULT_SCHEMA_SAMPLE_SIZE
    geometry_column_name: Optional[str] = None
    """Name of the output geometry column, defaults to driver specific name"""
    geometry_type: TColumnGeometryType = GENERIC_GEOMETRY_TYPE
    projection: Optional[List[str]] = None
    """Names of columns to materialize, all columns if not set"""
    read_chunk_size: int = DEFAULT_READ_CHUNK_SIZE
    storage_options: Optional[Dict[str, Any]] = None
    """Passed to fsspec when opening the locator"""

    __driver__: ClassVar[str] = None

    def on_resolved(self) -> None:
        if self.batch_size < 1:
            raise ConfigurationValueError(f"batch_size must be positive, got {self.batch_size}")
        if self.schema_sample_size < 0:
            raise ConfigurationValueError(
                f"schema_sample_size must not be negative, got {self.schema_sample_size}"
            )
        if self.read_chunk_size < 1:
            raise ConfigurationValueError(
                f"read_chunk_size must be positive, got {self.read_chunk_size}"
            )
        if self.geometry_type not in COLUMN_GEOMETRY_TYPES:
            raise ConfigurationValueError(
                f"Unknown geometry type {self.geometry_type!r}. Use one of"
                f" {', '.join(COLUMN_GEOMETRY_TYPES)}"
            )

    @classmethod
    def config_sections(cls) -> Tuple[str, ...]:
        """Sections searched by config providers, most specific last"""
        if cls.__driver__:
            return (SOURCES_SECTION, SPATIAL_SECTION, cls.__driver__)
        return (SOURCES_SECTION, SPATIAL_SECTION)


@configspec
class CsvReaderConfiguration(SpatialReaderConfiguration):
    geometry_column: str = None
    """Column holding WKT geometry, required"""
    delimiter: str = ","
    quotechar: str = '"'
    has_header: bool = True
    encoding: str = "utf-8-sig"

    __driver__: ClassVar[str] = "csv"

    def on_resolved(self) -> None:
        if len(self.delimiter) != 1:
            raise ConfigurationValueError(
                f"delimiter must be a single character, got {self.delimiter!r}"
            )
        if len(self.quotechar) != 1:
            raise ConfigurationValueError(
                f"quotechar must be a single character, got {self.quotechar!r}"
            )
        try:
            codecs.lookup(self.encoding)
        except LookupError:
            raise ConfigurationValueError(f"Unknown encoding {self.encoding!r}") from None

    @property
    def output_geometry_column_name(self) -> str:
        return self.geometry_column_name or self.geometry_column


@configspec
class GeoJsonReaderConfiguration(SpatialReaderConfiguration):
    json_mode: TJsonMode = "auto"

    __driver__: ClassVar[str] = "geojson"

    def on_resolved(self) -> None:
        if self.json_mode not in JSON_MODES:
            raise ConfigurationValueError(
                f"Unknown json_mode {self.json_mode!r}. Use one of {', '.join(JSON_MODES)}"
            )

    @property
    def output_geometry_column_name(self) -> str:
        return self.geometry_column_name or DEFAULT_GEOMETRY_COLUMN_NAME
