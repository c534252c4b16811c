"""
Spatial sources - read delimited text with WKT geometries and GeoJSON into arrow record batches

This module infers a typed column schema from a sample of records and streams the whole file as
`pyarrow.RecordBatch`es with geometries in the GeoArrow native encoding:
- delimited text (CSV, TSV) with a WKT geometry column
- GeoJSON FeatureCollection, Feature and geometry documents
- newline delimited GeoJSON sequences, streamed line by line
- local files and any fsspec url (s3, gs, az, http, memory)

Batches are written back as GeoJSON, newline delimited GeoJSON or delimited text with WKT with
`SpatialSource.write`.

Example:
    ```python
    from geoingest.sources.spatial import read_csv

    roads = read_csv("s3://bucket/roads.csv", geometry_column="wkt", batch_size=10000)
    print(roads.arrow_schema())
    for batch in roads.iter_batches(projection=["name", "wkt"]):
        ...
    ```

Options not passed explicitly are taken from environment variables ie. `SOURCES__SPATIAL__CSV__DELIMITER`
or from `.geoingest/config.toml` sections `[sources.spatial]` and `[sources.spatial.csv]`.
"""

from typing import Any, Dict, List, Optional

from geoingest.common.configuration.exceptions import UnknownSpatialDriverException
from geoingest.common.geometry.typing import TColumnGeometryType
from geoingest.sources.spatial.readers import SpatialSource, _read_csv, _read_geojson
from geoingest.sources.spatial.settings import SUPPORTED_DRIVERS, TJsonMode


def read_csv(
    url: str,
    geometry_column: str = None,
    *,
    delimiter: str = None,
    quotechar: str = None,
    has_header: bool = None,
    encoding: str = None,
    geometry_column_name: Optional[str] = None,
    geometry_type: Optional[TColumnGeometryType] = None,
    batch_size: Optional[int] = None,
    schema_sample_size: Optional[int] = None,
    projection: Optional[List[str]] = None,
    storage_options: Optional[Dict[str, Any]] = None,
) -> SpatialSource:
    """
    Read delimited text with geometries stored as WKT

    Property columns are typed from raw tokens: integers, floats, `true`/`false` and text. Empty
    tokens are nulls.

    Args:
        url (str): Local path or fsspec url of the file
        geometry_column (str): Column holding WKT geometry, required
        delimiter (str): Field delimiter (default: ",")
        quotechar (str): Quote character (default: '"')
        has_header (bool): First row holds column names, otherwise columns are named `column_0`, `column_1`...
        encoding (str): Text encoding (default: utf-8 with optional BOM)
        geometry_column_name (Optional[str]): Output geometry column name, defaults to `geometry_column`
        geometry_type (Optional[str]): Target geometry type, `geometry` accepts any shape
        batch_size (Optional[int]): Maximum number of rows in a batch (default: 8192)
        schema_sample_size (Optional[int]): Number of records sampled to infer the schema (default: 1000)
        projection (Optional[List[str]]): Columns to materialize, all columns if not set
        storage_options (Optional[Dict[str, Any]]): fsspec filesystem options ie. credentials

    Returns:
        SpatialSource: source that infers the schema and yields record batches

    Raises:
        ConfigFieldMissingException: `geometry_column` was not passed nor configured
    """
    return _read_csv(url, **_explicit_options(locals()))


def read_geojson(
    url: str,
    *,
    json_mode: Optional[TJsonMode] = None,
    geometry_column_name: Optional[str] = None,
    geometry_type: Optional[TColumnGeometryType] = None,
    batch_size: Optional[int] = None,
    schema_sample_size: Optional[int] = None,
    projection: Optional[List[str]] = None,
    read_chunk_size: Optional[int] = None,
    storage_options: Optional[Dict[str, Any]] = None,
) -> SpatialSource:
    """
    Read GeoJSON documents or newline delimited GeoJSON sequences

    Args:
        url (str): Local path or fsspec url of the file
        json_mode (str): `auto` parses the whole document and falls back to a sequence, `document`
            parses the whole document only, `sequence` streams the file line by line (default: auto)
        geometry_column_name (Optional[str]): Output geometry column name (default: "geometry")
        geometry_type (Optional[str]): Target geometry type, `geometry` accepts any shape
        batch_size (Optional[int]): Maximum number of rows in a batch (default: 8192)
        schema_sample_size (Optional[int]): Number of features sampled to infer the schema (default: 1000)
        projection (Optional[List[str]]): Columns to materialize, all columns if not set
        read_chunk_size (Optional[int]): Bytes read from storage at once in sequence mode
        storage_options (Optional[Dict[str, Any]]): fsspec filesystem options ie. credentials

    Returns:
        SpatialSource: source that infers the schema and yields record batches
    """
    return _read_geojson(url, **_explicit_options(locals()))


def spatial_source(url: str, driver: str, **options: Any) -> SpatialSource:
    """Creates a source for `driver` (`csv` or `geojson`), `options` are the reader options

    Raises:
        UnknownSpatialDriverException: driver is not supported
        ConfigurationValueError: unknown option was passed
    """
    if driver == "csv":
        return _read_csv(url, **options)
    if driver == "geojson":
        return _read_geojson(url, **options)
    raise UnknownSpatialDriverException(driver, SUPPORTED_DRIVERS)


def _explicit_options(args: Dict[str, Any]) -> Dict[str, Any]:
    return {k: v for k, v in args.items() if k != "url" and v is not None}


__all__ = [
    "read_csv",
    "read_geojson",
    "spatial_source",
    "SpatialSource",
    "SUPPORTED_DRIVERS",
]
