"""Builds GeoArrow native arrays from geometry values and decodes them back.

Coordinates of all geometries go to flat x and y buffers, each nesting level (parts, rings, vertices)
adds an int32 offsets buffer and the outermost level carries the null bitmap. A null geometry takes an
empty offsets range. Empty points are stored as NaN coordinates. The generic `geometry` type is a dense
union with one child per geometry type, null geometries are stored as nulls of the point child.
"""
import math
from typing import Any, Dict, Iterable, List, Optional, Sequence

from geoingest.common.exceptions import GeometryTypeException
from geoingest.common.libs.numpy import numpy
from geoingest.common.libs.pyarrow import pyarrow
from geoingest.common.libs.geoarrow import (
    COORD_TYPE,
    LIST_FIELD_NAMES,
    SIMPLE_GEOMETRY_TYPES,
    geometry_collection_arrow_type,
    nested_list_type,
)
from geoingest.common.geometry.models import (
    GeometryCollection,
    LineString,
    MultiLineString,
    MultiPoint,
    MultiPolygon,
    Point,
    Polygon,
    TCoords,
    TGeometry,
    TOptionalGeometry,
    geometry_type_name,
)
from geoingest.common.geometry.typing import (
    COLUMN_GEOMETRY_TYPES,
    GEOARROW_TYPE_CODES,
    GENERIC_GEOMETRY_TYPE,
    TColumnGeometryType,
    TGeometryType,
)

_NON_COLLECTION = "non-collection geometry"
_GEOMETRY_TYPES_BY_CODE: Dict[int, TGeometryType] = {v: k for k, v in GEOARROW_TYPE_CODES.items()}


def _parts(geometry: TGeometry) -> Sequence[Any]:
    """Returns nested coordinate sequences of a non point geometry"""
    if isinstance(geometry, (LineString, MultiPoint)):
        return geometry.coords
    if isinstance(geometry, Polygon):
        return geometry.rings
    if isinstance(geometry, MultiLineString):
        return geometry.lines
    if isinstance(geometry, MultiPolygon):
        return geometry.polygons
    raise TypeError(geometry)


def _mask(nulls: List[bool]) -> Optional[pyarrow.Array]:
    if not any(nulls):
        return None
    return pyarrow.array(nulls, type=pyarrow.bool_())


def _offsets(offsets: List[int]) -> pyarrow.Array:
    return pyarrow.array(numpy.asarray(offsets, dtype=numpy.int32), type=pyarrow.int32())


class _CoordBuffer:
    def __init__(self) -> None:
        self.xs: List[float] = []
        self.ys: List[float] = []

    def append(self, coord: Any) -> None:
        if coord:
            self.xs.append(coord[0])
            self.ys.append(coord[1])
        else:
            # empty point
            self.xs.append(math.nan)
            self.ys.append(math.nan)

    def extend(self, coords: TCoords) -> None:
        for x, y in coords:
            self.xs.append(x)
            self.ys.append(y)

    def __len__(self) -> int:
        return len(self.xs)

    def finish(self, mask: Optional[pyarrow.Array] = None) -> pyarrow.StructArray:
        x = pyarrow.array(numpy.asarray(self.xs, dtype=numpy.float64), type=pyarrow.float64())
        y = pyarrow.array(numpy.asarray(self.ys, dtype=numpy.float64), type=pyarrow.float64())
        fields = [COORD_TYPE.field(i) for i in range(COORD_TYPE.num_fields)]
        return pyarrow.StructArray.from_arrays([x, y], fields=fields, mask=mask)


class _PointBuilder:
    def __init__(self) -> None:
        self.coords = _CoordBuffer()
        self.nulls: List[bool] = []

    def append_value(self, geometry: Point) -> None:
        self.coords.append(geometry.coord)
        self.nulls.append(False)

    def append_null(self) -> None:
        self.coords.append(())
        self.nulls.append(True)

    def __len__(self) -> int:
        return len(self.nulls)

    def finish(self) -> pyarrow.Array:
        return self.coords.finish(_mask(self.nulls))


class _NestedBuilder:
    """Builds list arrays over coordinates, one offsets buffer per nesting level"""

    def __init__(self, geometry_type: TGeometryType) -> None:
        self.geometry_type = geometry_type
        self.field_names = LIST_FIELD_NAMES[geometry_type]
        self.coords = _CoordBuffer()
        self.offsets: List[List[int]] = [[0] for _ in self.field_names]
        self.nulls: List[bool] = []

    def append_value(self, geometry: TGeometry) -> None:
        self._append_level(0, _parts(geometry))
        self.nulls.append(False)

    def append_null(self) -> None:
        level_offsets = self.offsets[0]
        level_offsets.append(level_offsets[-1])
        self.nulls.append(True)

    def _append_level(self, level: int, parts: Sequence[Any]) -> None:
        if level == len(self.field_names) - 1:
            self.coords.extend(parts)
        else:
            for part in parts:
                self._append_level(level + 1, part)
        level_offsets = self.offsets[level]
        level_offsets.append(level_offsets[-1] + len(parts))

    def __len__(self) -> int:
        return len(self.nulls)

    def finish(self) -> pyarrow.Array:
        values: pyarrow.Array = self.coords.finish()
        for level in reversed(range(len(self.field_names))):
            values = pyarrow.ListArray.from_arrays(
                _offsets(self.offsets[level]),
                values,
                type=nested_list_type(self.field_names[level:], COORD_TYPE),
                mask=_mask(self.nulls) if level == 0 else None,
            )
        return values


class _UnionBuilder:
    """Dense union with a child per geometry type in `member_types`"""

    def __init__(self, member_types: Sequence[TGeometryType]) -> None:
        self.children: Dict[TGeometryType, Any] = {t: _new_builder(t) for t in member_types}
        self.type_ids: List[int] = []
        self.value_offsets: List[int] = []

    def append_value(self, geometry: TGeometry) -> None:
        self._append(geometry.geometry_type).append_value(geometry)

    def append_null(self) -> None:
        # dense unions do not have a validity bitmap, nulls go to the point child
        self._append("point").append_null()

    def _append(self, geometry_type: TGeometryType) -> Any:
        child = self.children[geometry_type]
        self.type_ids.append(GEOARROW_TYPE_CODES[geometry_type])
        self.value_offsets.append(len(child))
        return child

    def __len__(self) -> int:
        return len(self.type_ids)

    def finish(self) -> pyarrow.Array:
        types = pyarrow.array(numpy.asarray(self.type_ids, dtype=numpy.int8), type=pyarrow.int8())
        return pyarrow.UnionArray.from_dense(
            types,
            _offsets(self.value_offsets),
            [child.finish() for child in self.children.values()],
            list(self.children.keys()),
            [GEOARROW_TYPE_CODES[t] for t in self.children.keys()],
        )


class _GeometryCollectionBuilder:
    def __init__(self) -> None:
        self.members = _UnionBuilder(SIMPLE_GEOMETRY_TYPES)
        self.offsets: List[int] = [0]
        self.nulls: List[bool] = []

    def check_value(self, geometry: GeometryCollection, context: Optional[str]) -> None:
        for member in geometry.geometries:
            if isinstance(member, GeometryCollection):
                raise GeometryTypeException(
                    _NON_COLLECTION, "geometrycollection nested in geometrycollection", context
                )

    def append_value(self, geometry: GeometryCollection) -> None:
        for member in geometry.geometries:
            self.members.append_value(member)
        self.offsets.append(self.offsets[-1] + len(geometry.geometries))
        self.nulls.append(False)

    def append_null(self) -> None:
        self.offsets.append(self.offsets[-1])
        self.nulls.append(True)

    def __len__(self) -> int:
        return len(self.nulls)

    def finish(self) -> pyarrow.Array:
        return pyarrow.ListArray.from_arrays(
            _offsets(self.offsets),
            self.members.finish(),
            type=geometry_collection_arrow_type(),
            mask=_mask(self.nulls),
        )


def _new_builder(geometry_type: TGeometryType) -> Any:
    if geometry_type == "point":
        return _PointBuilder()
    if geometry_type == "geometrycollection":
        return _GeometryCollectionBuilder()
    return _NestedBuilder(geometry_type)


class GeometryArrayBuilder:
    """Accumulates geometry values into a GeoArrow array of a fixed target type.

    Geometries with a shape different from the target type are rejected with `GeometryTypeException`,
    the `geometry` target type accepts any shape. A builder produces a single array with `finish`.

    The `geometry` target type produces a dense union. Unions have no validity bitmap so the
    `null_count` of such array is always 0, a null geometry is stored as a null row of the point
    child and shows up as `None` in `to_pylist()` and in the validity of the point child.
    """

    def __init__(self, geometry_type: TColumnGeometryType = GENERIC_GEOMETRY_TYPE) -> None:
        if geometry_type not in COLUMN_GEOMETRY_TYPES:
            raise ValueError(f"Unknown geometry type {geometry_type!r}")
        self.geometry_type = geometry_type
        if geometry_type == GENERIC_GEOMETRY_TYPE:
            self._builder = _UnionBuilder(SIMPLE_GEOMETRY_TYPES + ["geometrycollection"])
        else:
            self._builder = _new_builder(geometry_type)

    def append(self, geometry: TOptionalGeometry, context: str = None) -> None:
        """Appends geometry or null. `context` describes the row in errors"""
        if geometry is None:
            self._builder.append_null()
            return
        if self.geometry_type != GENERIC_GEOMETRY_TYPE and geometry.geometry_type != self.geometry_type:
            raise GeometryTypeException(self.geometry_type, geometry_type_name(geometry), context)
        if isinstance(geometry, GeometryCollection):
            # members are validated before anything is appended
            collection_builder = (
                self._builder.children["geometrycollection"]
                if isinstance(self._builder, _UnionBuilder)
                else self._builder
            )
            collection_builder.check_value(geometry, context)
        self._builder.append_value(geometry)

    def extend(self, geometries: Iterable[TOptionalGeometry]) -> None:
        for geometry in geometries:
            self.append(geometry)

    def __len__(self) -> int:
        return len(self._builder)

    def finish(self) -> pyarrow.Array:
        return self._builder.finish()


def geometries_to_arrow(
    geometries: Iterable[TOptionalGeometry],
    geometry_type: TColumnGeometryType = GENERIC_GEOMETRY_TYPE,
) -> pyarrow.Array:
    builder = GeometryArrayBuilder(geometry_type)
    builder.extend(geometries)
    return builder.finish()



def _xy(values: Sequence[Any]) -> TCoords:
    return tuple((c["x"], c["y"]) for c in values)


def _geometry_from_py(geometry_type: TGeometryType, value: Any) -> TGeometry:
    """Converts a python value of a simple geoarrow array (see `to_pylist`) into a geometry"""
    if geometry_type == "point":
        x, y = value["x"], value["y"]
        if math.isnan(x) and math.isnan(y):
            return Point(())
        return Point((x, y))
    if geometry_type == "linestring":
        return LineString(_xy(value))
    if geometry_type == "polygon":
        return Polygon(tuple(_xy(ring) for ring in value))
    if geometry_type == "multipoint":
        return MultiPoint(_xy(value))
    if geometry_type == "multilinestring":
        return MultiLineString(tuple(_xy(line) for line in value))
    if geometry_type == "multipolygon":
        return MultiPolygon(tuple(tuple(_xy(ring) for ring in polygon) for polygon in value))
    raise ValueError(f"Unknown geometry type {geometry_type!r}")


def _union_from_arrow(array: pyarrow.UnionArray) -> List[TOptionalGeometry]:
    children: Dict[int, List[TOptionalGeometry]] = {}
    for idx, code in enumerate(array.type.type_codes):
        children[code] = geometries_from_arrow(array.field(idx), _GEOMETRY_TYPES_BY_CODE[code])
    return [
        children[code][offset]
        for code, offset in zip(array.type_codes.to_pylist(), array.offsets.to_pylist())
    ]


def _collections_from_arrow(array: pyarrow.ListArray) -> List[TOptionalGeometry]:
    members = _union_from_arrow(array.values)
    offsets = array.offsets.to_pylist()
    return [
        GeometryCollection(tuple(members[offsets[idx] : offsets[idx + 1]])) if valid else None
        for idx, valid in enumerate(array.is_valid().to_pylist())
    ]


def geometries_from_arrow(
    array: Any, geometry_type: TColumnGeometryType = GENERIC_GEOMETRY_TYPE
) -> List[TOptionalGeometry]:
    """Decodes a GeoArrow array (or chunked array) of `geometry_type` back into geometry values.

    Reverses `geometries_to_arrow`: NaN points decode into empty points and nulls into `None`.
    """
    if isinstance(array, pyarrow.ChunkedArray):
        return [g for chunk in array.chunks for g in geometries_from_arrow(chunk, geometry_type)]
    if geometry_type == GENERIC_GEOMETRY_TYPE:
        return _union_from_arrow(array)
    if geometry_type == "geometrycollection":
        return _collections_from_arrow(array)
    return [
        None if value is None else _geometry_from_py(geometry_type, value)  # type: ignore[arg-type]
        for value in array.to_pylist()
    ]
