from typing import Literal, Tuple

from geoingest.common.schema.inference import DEFAULT_SCHEMA_SAMPLE_SIZE  # noqa: F401
from geoingest.common.schema.typing import DEFAULT_GEOMETRY_COLUMN_NAME  # noqa: F401
from geoingest.common.storages.line_reader import DEFAULT_CHUNK_SIZE as DEFAULT_READ_CHUNK_SIZE  # noqa: F401
from geoingest.common.typing import get_args

DEFAULT_BATCH_SIZE = 8192

TSpatialDriver = Literal["csv", "geojson"]
SUPPORTED_DRIVERS: Tuple[str, ...] = get_args(TSpatialDriver)

TJsonMode = Literal["auto", "document", "sequence"]
"""How GeoJSON payload is parsed: `auto` tries the whole document then falls back to a sequence,
`document` parses the whole payload only, `sequence` streams one document per line"""
JSON_MODES: Tuple[str, ...] = get_args(TJsonMode)

SOURCES_SECTION = "sources"
SPATIAL_SECTION = "spatial"
