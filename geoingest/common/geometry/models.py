"""Canonical in-memory geometry values, independent of the text encoding they were decoded from.

Only the x/y ordinates are kept, higher dimensions are dropped by the decoders. A null geometry is
represented by `None`, an empty geometry by a value with no coordinates.
"""
from dataclasses import dataclass
from typing import ClassVar, Optional, Tuple, Union

from geoingest.common.typing import TypeAlias
from geoingest.common.geometry.typing import TGeometryType

TCoord: TypeAlias = Tuple[float, float]
TCoords: TypeAlias = Tuple[TCoord, ...]
TRing: TypeAlias = TCoords


def validate_ring(ring: TCoords) -> None:
    """Checks that `ring` is closed and has at least 4 coordinates. Rings are never repaired"""
    if len(ring) < 4:
        raise ValueError(f"Polygon ring must have at least 4 coordinates, got {len(ring)}")
    if ring[0] != ring[-1]:
        raise ValueError(f"Polygon ring is not closed: first {ring[0]} != last {ring[-1]}")


@dataclass(frozen=True)
class Point:
    geometry_type: ClassVar[TGeometryType] = "point"
    coord: Union[TCoord, Tuple[()]]
    """x/y pair or an empty tuple for an empty point"""

    @property
    def is_empty(self) -> bool:
        return len(self.coord) == 0

    @property
    def x(self) -> float:
        return self.coord[0]

    @property
    def y(self) -> float:
        return self.coord[1]


@dataclass(frozen=True)
class LineString:
    geometry_type: ClassVar[TGeometryType] = "linestring"
    coords: TCoords

    @property
    def is_empty(self) -> bool:
        return len(self.coords) == 0


@dataclass(frozen=True)
class Polygon:
    """First ring is the exterior, the following rings are holes"""

    geometry_type: ClassVar[TGeometryType] = "polygon"
    rings: Tuple[TRing, ...]

    def __post_init__(self) -> None:
        for ring in self.rings:
            validate_ring(ring)

    @property
    def is_empty(self) -> bool:
        return len(self.rings) == 0


@dataclass(frozen=True)
class MultiPoint:
    geometry_type: ClassVar[TGeometryType] = "multipoint"
    coords: TCoords

    @property
    def is_empty(self) -> bool:
        return len(self.coords) == 0


@dataclass(frozen=True)
class MultiLineString:
    geometry_type: ClassVar[TGeometryType] = "multilinestring"
    lines: Tuple[TCoords, ...]

    @property
    def is_empty(self) -> bool:
        return len(self.lines) == 0


@dataclass(frozen=True)
class MultiPolygon:
    geometry_type: ClassVar[TGeometryType] = "multipolygon"
    polygons: Tuple[Tuple[TRing, ...], ...]

    def __post_init__(self) -> None:
        for rings in self.polygons:
            for ring in rings:
                validate_ring(ring)

    @property
    def is_empty(self) -> bool:
        return len(self.polygons) == 0


@dataclass(frozen=True)
class GeometryCollection:
    geometry_type: ClassVar[TGeometryType] = "geometrycollection"
    geometries: Tuple["TGeometry", ...]

    @property
    def is_empty(self) -> bool:
        return len(self.geometries) == 0


TGeometry: TypeAlias = Union[
    Point, LineString, Polygon, MultiPoint, MultiLineString, MultiPolygon, GeometryCollection
]
TOptionalGeometry: TypeAlias = Optional[TGeometry]

def geometry_type_name(geometry: TOptionalGeometry) -> str:
    """Human readable name of the geometry shape, used in error messages"""
    if geometry is None:
        return "null"
    return geometry.geometry_type
