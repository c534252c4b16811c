import math

import pyarrow as pa
import pytest

from geoingest.common.exceptions import GeometryTypeException
from geoingest.common.geometry import (
    GeometryCollection,
    LineString,
    MultiLineString,
    MultiPoint,
    MultiPolygon,
    Point,
    Polygon,
    wkt_to_geometry,
)
from geoingest.common.geometry.columnar import (
    GeometryArrayBuilder,
    geometries_from_arrow,
    geometries_to_arrow,
)
from geoingest.common.libs.geoarrow import (
    COORD_TYPE,
    geometry_arrow_type,
    geometry_field,
    nested_list_type,
)


def _xy(x: float, y: float) -> dict:
    return {"x": x, "y": y}


def test_point_array() -> None:
    arr = geometries_to_arrow([Point((1.0, 2.0)), None, Point(())], "point")
    assert arr.type == COORD_TYPE
    assert arr.type == geometry_arrow_type("point")
    assert len(arr) == 3
    assert arr.null_count == 1
    values = arr.to_pylist()
    assert values[0] == _xy(1.0, 2.0)
    assert values[1] is None
    # empty point is stored as NaN coordinates
    assert math.isnan(values[2]["x"]) and math.isnan(values[2]["y"])


def test_linestring_array() -> None:
    arr = geometries_to_arrow(
        [
            wkt_to_geometry("LINESTRING (0 0, 1 1)"),
            None,
            wkt_to_geometry("LINESTRING EMPTY"),
            wkt_to_geometry("LINESTRING (2 2, 3 3, 4 4)"),
        ],
        "linestring",
    )
    assert arr.type == nested_list_type(["vertices"], COORD_TYPE)
    assert arr.type.value_field.name == "vertices"
    assert not arr.type.value_field.nullable
    assert arr.to_pylist() == [
        [_xy(0, 0), _xy(1, 1)],
        None,
        [],
        [_xy(2, 2), _xy(3, 3), _xy(4, 4)],
    ]
    assert arr.offsets.to_pylist() == [0, 2, 2, 2, 5]


def test_polygon_array() -> None:
    arr = geometries_to_arrow(
        [
            wkt_to_geometry("POLYGON ((0 0, 4 0, 4 4, 0 0), (1 1, 2 1, 2 2, 1 1))"),
            None,
        ],
        "polygon",
    )
    assert arr.type == geometry_arrow_type("polygon")
    assert arr.type.value_field.name == "rings"
    assert arr.type.value_type.value_field.name == "vertices"
    polygon = arr.to_pylist()[0]
    assert len(polygon) == 2
    assert polygon[0][0] == _xy(0, 0)
    assert len(polygon[1]) == 4
    assert arr.to_pylist()[1] is None


def test_multipolygon_array() -> None:
    arr = geometries_to_arrow(
        [
            wkt_to_geometry("MULTIPOLYGON (((0 0, 1 0, 1 1, 0 0)), ((5 5, 6 5, 6 6, 5 5)))"),
            MultiPolygon(()),
        ],
        "multipolygon",
    )
    assert arr.type == geometry_arrow_type("multipolygon")
    values = arr.to_pylist()
    assert len(values[0]) == 2
    assert values[0][1][0][0] == _xy(5, 5)
    assert values[1] == []


def test_multipoint_and_multilinestring_arrays() -> None:
    arr = geometries_to_arrow([wkt_to_geometry("MULTIPOINT (1 2, 3 4)")], "multipoint")
    assert arr.type.value_field.name == "points"
    assert arr.to_pylist() == [[_xy(1, 2), _xy(3, 4)]]

    arr = geometries_to_arrow(
        [wkt_to_geometry("MULTILINESTRING ((0 0, 1 1), (2 2, 3 3))")], "multilinestring"
    )
    assert arr.type.value_field.name == "linestrings"
    assert arr.to_pylist() == [[[_xy(0, 0), _xy(1, 1)], [_xy(2, 2), _xy(3, 3)]]]


def test_generic_geometry_array() -> None:
    geometries = [
        Point((1.0, 2.0)),
        LineString(((0.0, 0.0), (1.0, 1.0))),
        None,
        wkt_to_geometry("GEOMETRYCOLLECTION (POINT (5 6), LINESTRING (0 0, 1 1))"),
        Point((3.0, 4.0)),
    ]
    arr = geometries_to_arrow(geometries)
    assert arr.type == geometry_arrow_type("geometry")
    assert arr.type.mode == "dense"
    assert list(arr.type.type_codes) == [1, 2, 3, 4, 5, 6, 7]
    # null goes to point child
    assert arr.type_codes.to_pylist() == [1, 2, 1, 7, 1]
    assert arr.offsets.to_pylist() == [0, 0, 1, 0, 2]
    values = arr.to_pylist()
    assert values[0] == _xy(1, 2)
    assert values[1] == [_xy(0, 0), _xy(1, 1)]
    assert values[2] is None
    assert values[3] == [_xy(5, 6), [_xy(0, 0), _xy(1, 1)]]
    assert values[4] == _xy(3, 4)


def test_generic_geometry_array_nulls() -> None:
    arr = geometries_to_arrow([None, Point((1.0, 2.0)), None])
    # dense union has no validity bitmap
    assert arr.null_count == 0
    assert arr.to_pylist() == [None, _xy(1, 2), None]
    assert arr.type_codes.to_pylist() == [1, 1, 1]
    points = arr.field(0)
    assert points.null_count == 2
    assert points.is_null().to_pylist() == [True, False, True]


def test_geometry_collection_array() -> None:
    arr = geometries_to_arrow(
        [
            wkt_to_geometry("GEOMETRYCOLLECTION (POINT (1 2), POLYGON ((0 0, 1 0, 1 1, 0 0)))"),
            GeometryCollection(()),
            None,
        ],
        "geometrycollection",
    )
    assert arr.type == geometry_arrow_type("geometrycollection")
    assert arr.type.value_field.name == "geometries"
    values = arr.to_pylist()
    assert values[0][0] == _xy(1, 2)
    assert len(values[0][1][0]) == 4
    assert values[1] == []
    assert values[2] is None


def test_empty_builders() -> None:
    for geometry_type in ["geometry", "point", "polygon", "geometrycollection"]:
        arr = GeometryArrayBuilder(geometry_type).finish()  # type: ignore[arg-type]
        assert len(arr) == 0
        assert arr.type == geometry_arrow_type(geometry_type)  # type: ignore[arg-type]


def test_shape_mismatch() -> None:
    builder = GeometryArrayBuilder("point")
    builder.append(Point((1.0, 2.0)))
    with pytest.raises(GeometryTypeException) as py_ex:
        builder.append(LineString(((0.0, 0.0), (1.0, 1.0))), context="row 2")
    assert py_ex.value.expected == "point"
    assert py_ex.value.observed == "linestring"
    assert py_ex.value.context == "row 2"
    # builder is still usable
    assert len(builder) == 1
    assert builder.finish().to_pylist() == [_xy(1, 2)]


def test_nested_geometry_collection_rejected() -> None:
    nested = GeometryCollection((GeometryCollection((Point((1.0, 2.0)),)),))
    for geometry_type in ["geometry", "geometrycollection"]:
        builder = GeometryArrayBuilder(geometry_type)  # type: ignore[arg-type]
        with pytest.raises(GeometryTypeException):
            builder.append(nested)
        assert len(builder) == 0


def test_unknown_target_type() -> None:
    with pytest.raises(ValueError):
        GeometryArrayBuilder("circle")  # type: ignore[arg-type]


def test_geometry_field_metadata() -> None:
    field = geometry_field("geom", "polygon")
    assert field.name == "geom"
    assert field.nullable
    assert field.metadata == {
        b"ARROW:extension:name": b"geoarrow.polygon",
        b"ARROW:extension:metadata": b"{}",
    }
    assert isinstance(field.type, pa.ListType)


SQUARE = ((0.0, 0.0), (1.0, 0.0), (1.0, 1.0), (0.0, 0.0))
DECODE_CASES = [
    ("point", [Point((1.0, 2.0)), None, Point(())]),
    ("linestring", [LineString(((0.0, 0.0), (1.5, 2.5))), None, LineString(())]),
    ("polygon", [Polygon((SQUARE,)), Polygon(()), None]),
    ("multipoint", [MultiPoint(((1.0, 1.0), (2.0, 2.0))), None]),
    ("multilinestring", [MultiLineString((((0.0, 0.0), (1.0, 1.0)),)), MultiLineString(())]),
    ("multipolygon", [None, MultiPolygon(((SQUARE,), (SQUARE,)))]),
    (
        "geometrycollection",
        [GeometryCollection((Point((1.0, 2.0)), LineString(((0.0, 0.0), (1.0, 1.0))))), None],
    ),
]


@pytest.mark.parametrize("geometry_type,geometries", DECODE_CASES, ids=[c[0] for c in DECODE_CASES])
def test_geometries_from_arrow(geometry_type: str, geometries: list) -> None:
    arr = geometries_to_arrow(geometries, geometry_type)  # type: ignore[arg-type]
    assert geometries_from_arrow(arr, geometry_type) == geometries  # type: ignore[arg-type]


def test_generic_geometries_from_arrow() -> None:
    geometries = [
        Point((1.0, 2.0)),
        None,
        Polygon((SQUARE,)),
        GeometryCollection((Point(()), MultiPoint(((3.0, 4.0),)))),
        Point((5.0, 6.0)),
    ]
    arr = geometries_to_arrow(geometries)
    assert geometries_from_arrow(arr) == geometries
    # chunked arrays of a table column decode chunk by chunk
    chunked = pa.chunked_array([arr, geometries_to_arrow([None, Point((7.0, 8.0))])])
    assert geometries_from_arrow(chunked) == geometries + [None, Point((7.0, 8.0))]
