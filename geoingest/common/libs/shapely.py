from geoingest import version
from geoingest.common.exceptions import MissingDependencyException

try:
    from shapely import geometry as shapely_geometry
    from shapely import wkt as shapely_wkt
    from shapely.errors import ShapelyError
    from shapely.geometry.base import BaseGeometry
except ModuleNotFoundError:
    raise MissingDependencyException(
        "geoingest geometry decoders",
        [f"{version.GEOINGEST_PKG_NAME}", "shapely>=2.0.0"],
        "Install shapely to decode WKT and GeoJSON geometries.",
    )

# errors raised by shapely constructors and GEOS on malformed input
SHAPELY_INPUT_ERRORS = (ShapelyError, ValueError, TypeError, IndexError)

__all__ = [
    "shapely_geometry",
    "shapely_wkt",
    "ShapelyError",
    "BaseGeometry",
    "SHAPELY_INPUT_ERRORS",
]
