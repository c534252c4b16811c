"""Conversion between shapely geometries and geometry values"""
from typing import Any, Iterable, Tuple

from geoingest.common.libs.shapely import BaseGeometry, shapely_geometry
from geoingest.common.geometry.models import (
    GeometryCollection,
    LineString,
    MultiLineString,
    MultiPoint,
    MultiPolygon,
    Point,
    Polygon,
    TCoord,
    TCoords,
    TGeometry,
    TRing,
)


def _xy(coords: Iterable[Any]) -> TCoords:
    return tuple((float(c[0]), float(c[1])) for c in coords)


def _point_xy(point: Any) -> TCoord:
    if point.is_empty:
        raise ValueError("Empty point cannot be a member of MultiPoint")
    return (float(point.x), float(point.y))


def _rings(polygon: Any) -> Tuple[TRing, ...]:
    if polygon.is_empty:
        return ()
    return (_xy(polygon.exterior.coords),) + tuple(_xy(r.coords) for r in polygon.interiors)


def from_shapely(geom: BaseGeometry) -> TGeometry:
    """Converts shapely geometry into a geometry value. Z and M ordinates are dropped

    Raises:
        ValueError: geometry type has no counterpart ie. LinearRing
    """
    geom_type = geom.geom_type
    if geom_type == "Point":
        return Point(() if geom.is_empty else _point_xy(geom))
    if geom_type == "LineString":
        return LineString(_xy(geom.coords))
    if geom_type == "Polygon":
        return Polygon(_rings(geom))
    if geom_type == "MultiPoint":
        return MultiPoint(tuple(_point_xy(p) for p in geom.geoms))
    if geom_type == "MultiLineString":
        return MultiLineString(tuple(_xy(line.coords) for line in geom.geoms))
    if geom_type == "MultiPolygon":
        return MultiPolygon(tuple(_rings(p) for p in geom.geoms))
    if geom_type == "GeometryCollection":
        return GeometryCollection(tuple(from_shapely(g) for g in geom.geoms))
    raise ValueError(f"Unsupported geometry type {geom_type}")


def _polygon(rings: Tuple[TRing, ...]) -> Any:
    if not rings:
        return shapely_geometry.Polygon()
    return shapely_geometry.Polygon(rings[0], rings[1:])


def to_shapely(geometry: TGeometry) -> BaseGeometry:
    """Converts geometry value into shapely geometry"""
    if isinstance(geometry, Point):
        if geometry.is_empty:
            return shapely_geometry.Point()
        return shapely_geometry.Point(geometry.coord)
    if geometry.is_empty:
        return _EMPTY[type(geometry)]()
    if isinstance(geometry, LineString):
        return shapely_geometry.LineString(geometry.coords)
    if isinstance(geometry, Polygon):
        return _polygon(geometry.rings)
    if isinstance(geometry, MultiPoint):
        return shapely_geometry.MultiPoint(list(geometry.coords))
    if isinstance(geometry, MultiLineString):
        return shapely_geometry.MultiLineString([list(line) for line in geometry.lines])
    if isinstance(geometry, MultiPolygon):
        return shapely_geometry.MultiPolygon([_polygon(rings) for rings in geometry.polygons])
    if isinstance(geometry, GeometryCollection):
        return shapely_geometry.GeometryCollection([to_shapely(g) for g in geometry.geometries])
    raise TypeError(f"Not a geometry: {geometry!r}")


_EMPTY = {
    LineString: shapely_geometry.LineString,
    Polygon: shapely_geometry.Polygon,
    MultiPoint: shapely_geometry.MultiPoint,
    MultiLineString: shapely_geometry.MultiLineString,
    MultiPolygon: shapely_geometry.MultiPolygon,
    GeometryCollection: shapely_geometry.GeometryCollection,
}
