from typing import Dict, Literal, Set

from geoingest.common.typing import get_args


TGeometryType = Literal[
    "point",
    "linestring",
    "polygon",
    "multipoint",
    "multilinestring",
    "multipolygon",
    "geometrycollection",
]
"""Shape of a single geometry value"""

TColumnGeometryType = Literal[
    "geometry",
    "point",
    "linestring",
    "polygon",
    "multipoint",
    "multilinestring",
    "multipolygon",
    "geometrycollection",
]
"""Target type of a geometry column. `geometry` holds any shape"""
COLUMN_GEOMETRY_TYPES: Set[TColumnGeometryType] = set(get_args(TColumnGeometryType))
GENERIC_GEOMETRY_TYPE: TColumnGeometryType = "geometry"

GEOJSON_TYPES: Dict[str, TGeometryType] = {
    "Point": "point",
    "LineString": "linestring",
    "Polygon": "polygon",
    "MultiPoint": "multipoint",
    "MultiLineString": "multilinestring",
    "MultiPolygon": "multipolygon",
    "GeometryCollection": "geometrycollection",
}

GEOARROW_TYPE_CODES: Dict[TGeometryType, int] = {
    "point": 1,
    "linestring": 2,
    "polygon": 3,
    "multipoint": 4,
    "multilinestring": 5,
    "multipolygon": 6,
    "geometrycollection": 7,
}
"""Type codes of the geoarrow dense union for xy geometries"""
