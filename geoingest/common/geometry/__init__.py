from geoingest.common.geometry.models import (
    GeometryCollection,
    LineString,
    MultiLineString,
    MultiPoint,
    MultiPolygon,
    Point,
    Polygon,
    TCoord,
    TGeometry,
    TOptionalGeometry,
)
from geoingest.common.geometry.typing import TColumnGeometryType, TGeometryType
from geoingest.common.geometry.wkt import geometry_to_wkt, wkt_to_geometry
from geoingest.common.geometry.geojson import geojson_to_geometry, geometry_to_geojson

__all__ = [
    "Point",
    "LineString",
    "Polygon",
    "MultiPoint",
    "MultiLineString",
    "MultiPolygon",
    "GeometryCollection",
    "TCoord",
    "TGeometry",
    "TOptionalGeometry",
    "TGeometryType",
    "TColumnGeometryType",
    "wkt_to_geometry",
    "geometry_to_wkt",
    "geojson_to_geometry",
    "geometry_to_geojson",
]
