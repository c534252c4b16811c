"""geoingest

Load geospatial files into typed arrow record batches:

    >>> from geoingest import read_geojson
    >>> source = read_geojson("s3://bucket/parcels.geojsonl", json_mode="sequence")
    >>> for batch in source.iter_batches():
    ...     print(batch.num_rows)

Delimited text with WKT geometry is read with `read_csv`, `spatial_source` selects the reader by driver name.
"""

from geoingest.version import __version__
from geoingest.sources.spatial import SpatialSource, read_csv, read_geojson, spatial_source

__all__ = ["__version__", "SpatialSource", "read_csv", "read_geojson", "spatial_source"]
