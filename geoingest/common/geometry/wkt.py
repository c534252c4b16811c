"""Well-Known-Text decoder and encoder backed by shapely.

Any dimension GEOS reads is accepted, only x and y are kept from each coordinate. An EWKT
`SRID=<n>;` prefix is accepted and ignored.
"""
import re
from typing import Optional

from geoingest.common.exceptions import ParseException, SourcePosition
from geoingest.common.libs.shapely import SHAPELY_INPUT_ERRORS, shapely_wkt
from geoingest.common.geometry.conversion import from_shapely, to_shapely
from geoingest.common.geometry.models import TGeometry

_SRID_PREFIX = re.compile(r"^\s*SRID=(-?\d+);", re.IGNORECASE)
# GEOS prefixes messages with the exception class and quotes the offending token at the end
_GEOS_EXCEPTION_PREFIX = re.compile(r"^\w+Exception: ")
_GEOS_QUOTED_TOKEN = re.compile(r": '([^']+)'$")


def error_column(text: str, message: str, start: int = 0) -> Optional[int]:
    """Finds 1-based column of the token quoted at the end of GEOS `message` in `text`"""
    quoted = _GEOS_QUOTED_TOKEN.search(message)
    if not quoted:
        return None
    token = re.compile(
        r"(?<![\w.+-])" + re.escape(quoted.group(1)) + r"(?![\w.+-])", re.IGNORECASE
    )
    found = token.search(text, start)
    if not found:
        return None
    return found.start() + 1


def wkt_to_geometry(text: str) -> TGeometry:
    """Decodes a WKT (or EWKT) string into a geometry value.

    Raises:
        ParseException: with the 1-based character column of the offending token when GEOS names it
    """
    srid = _SRID_PREFIX.match(text)
    start = srid.end() if srid else 0
    if not text[start:].strip():
        raise ParseException(
            "Expected geometry type keyword but found end of input",
            position=SourcePosition(column=len(text) + 1),
        )
    try:
        geom = shapely_wkt.loads(text[start:])
        return from_shapely(geom)
    except SHAPELY_INPUT_ERRORS as ex:
        message = _GEOS_EXCEPTION_PREFIX.sub("", str(ex))
        column = error_column(text, message, start)
        raise ParseException(
            message, position=SourcePosition(column=column) if column else None
        ) from ex


def geometry_to_wkt(geometry: Optional[TGeometry]) -> Optional[str]:
    """Renders geometry as WKT with full precision and trailing zeros trimmed"""
    if geometry is None:
        return None
    return shapely_wkt.dumps(to_shapely(geometry), trim=True, rounding_precision=-1)  # type: ignore[no-any-return]
