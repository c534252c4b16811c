"""GeoJSON geometry object decoder and encoder backed by shapely"""
from typing import Any, Optional

from geoingest.common.typing import DictStrAny
from geoingest.common.exceptions import ParseException
from geoingest.common.libs.shapely import SHAPELY_INPUT_ERRORS, shapely_geometry
from geoingest.common.geometry.conversion import from_shapely, to_shapely
from geoingest.common.geometry.models import (
    GeometryCollection,
    LineString,
    MultiLineString,
    MultiPoint,
    MultiPolygon,
    Point,
    Polygon,
    TGeometry,
    TOptionalGeometry,
    validate_ring,
)
from geoingest.common.geometry.typing import GEOJSON_TYPES

_EMPTY_GEOMETRIES = {
    "Point": Point(()),
    "LineString": LineString(()),
    "Polygon": Polygon(()),
    "MultiPoint": MultiPoint(()),
    "MultiLineString": MultiLineString(()),
    "MultiPolygon": MultiPolygon(()),
}
_GEOJSON_NAMES = {v: k for k, v in GEOJSON_TYPES.items()}


def _check_rings(rings: Any, path: str) -> None:
    """Rejects rings that are not closed, shapely would close them silently"""
    if not isinstance(rings, (list, tuple)):
        return
    for idx, ring in enumerate(rings):
        if isinstance(ring, (list, tuple)) and all(isinstance(c, (list, tuple)) for c in ring):
            try:
                validate_ring(ring)  # type: ignore[arg-type]
            except ValueError as v_ex:
                raise ParseException(f"{v_ex} at {path}[{idx}]") from v_ex


def _decode(obj: Any, path: str) -> TGeometry:
    if not isinstance(obj, dict):
        raise ParseException(f"Expected geometry object at {path} but got {type(obj).__name__}")
    geojson_type = obj.get("type")
    if geojson_type not in GEOJSON_TYPES:
        raise ParseException(f"Unknown GeoJSON geometry type {geojson_type!r} at {path}.type")

    if geojson_type == "GeometryCollection":
        geometries = obj.get("geometries")
        g_path = f"{path}.geometries"
        if not isinstance(geometries, list):
            raise ParseException(f"Expected array at {g_path}")
        return GeometryCollection(
            tuple(_decode(g, f"{g_path}[{idx}]") for idx, g in enumerate(geometries))
        )

    c_path = f"{path}.coordinates"
    if "coordinates" not in obj:
        raise ParseException(f"Missing coordinates at {c_path}")
    coordinates = obj["coordinates"]
    if isinstance(coordinates, (list, tuple)) and len(coordinates) == 0:
        return _EMPTY_GEOMETRIES[geojson_type]
    if geojson_type == "Polygon":
        _check_rings(coordinates, c_path)
    elif geojson_type == "MultiPolygon" and isinstance(coordinates, (list, tuple)):
        for idx, polygon in enumerate(coordinates):
            _check_rings(polygon, f"{c_path}[{idx}]")

    try:
        return from_shapely(shapely_geometry.shape({"type": geojson_type, "coordinates": coordinates}))
    except SHAPELY_INPUT_ERRORS as ex:
        raise ParseException(f"Invalid {geojson_type} coordinates at {c_path}: {ex}") from ex


def geojson_to_geometry(obj: Any) -> TOptionalGeometry:
    """Decodes parsed GeoJSON geometry object. `None` (json null) decodes to null geometry.

    Raises:
        ParseException: with JSON path (ie. `$.geometries[1].coordinates`) of the offending element in the message
    """
    if obj is None:
        return None
    return _decode(obj, "$")


def geometry_to_geojson(geometry: TOptionalGeometry) -> Optional[DictStrAny]:
    """Renders geometry as GeoJSON geometry object, coordinates are tuples"""
    if geometry is None:
        return None
    geojson_type = _GEOJSON_NAMES[geometry.geometry_type]
    if isinstance(geometry, GeometryCollection):
        return {
            "type": geojson_type,
            "geometries": [geometry_to_geojson(g) for g in geometry.geometries],
        }
    if geometry.is_empty:
        return {"type": geojson_type, "coordinates": ()}
    return shapely_geometry.mapping(to_shapely(geometry))  # type: ignore[no-any-return]
