"""Record extractors turn rows of delimited text and GeoJSON features into records.

A record is a mapping of property values and an optional geometry. Extractors are restartable:
each call to `extract` opens the source again and yields records lazily.
"""
import abc
import csv
import io
from itertools import count, islice
from typing import Any, Callable, Collection, Iterator, List, Optional, Tuple

from geoingest.common import json
from geoingest.common.data_types import TPropertyValue, is_int64, parse_text_token
from geoingest.common.exceptions import ParseException, SchemaInferenceException, SourcePosition
from geoingest.common.geometry import geojson_to_geometry, wkt_to_geometry
from geoingest.common.geometry.models import TOptionalGeometry
from geoingest.common.geometry.typing import GEOJSON_TYPES
from geoingest.common.schema.typing import Record
from geoingest.common.storages import LineReader, open_binary, read_binary
from geoingest.common.utils import find_duplicates
from geoingest.sources.spatial.configuration import (
    CsvReaderConfiguration,
    GeoJsonReaderConfiguration,
    SpatialReaderConfiguration,
)

# whitespace and RFC 8142 record separators around sequence documents
_SEQUENCE_STRIP_CHARS = b" \t\r\n\x0b\x0c\x1e"
TFeatureToRecord = Callable[[Any, Optional[int]], Record]


class RecordExtractor(abc.ABC):
    """Extracts records from a single source locator"""

    def __init__(self, url: str, config: SpatialReaderConfiguration) -> None:
        self.url = url
        self.config = config

    @property
    @abc.abstractmethod
    def geometry_column_name(self) -> str:
        """Name of the geometry column in the output"""

    @abc.abstractmethod
    def _records(
        self, properties: Optional[Collection[str]], with_geometry: bool
    ) -> Iterator[Record]:
        pass

    def extract(
        self,
        limit: Optional[int] = None,
        properties: Optional[Collection[str]] = None,
        with_geometry: bool = True,
    ) -> Iterator[Record]:
        """Yields at most `limit` records, all records if `limit` is None.

        Only values of `properties` are parsed, all properties when `properties` is None. When
        `with_geometry` is False geometries are not decoded and records carry a null geometry.
        Storage handles are released when the returned generator is exhausted or closed.
        """
        records = self._records(properties, with_geometry)
        try:
            yield from islice(records, limit)
        finally:
            records.close()


class CsvRecordExtractor(RecordExtractor):
    """Extracts records from delimited text with geometry stored as WKT in one of the columns"""

    config: CsvReaderConfiguration

    @property
    def geometry_column_name(self) -> str:
        return self.config.output_geometry_column_name

    def _records(
        self, properties: Optional[Collection[str]], with_geometry: bool
    ) -> Iterator[Record]:
        text = self._decode(read_binary(self.url, self.config.storage_options))
        reader = csv.reader(
            io.StringIO(text, newline=""),
            delimiter=self.config.delimiter,
            quotechar=self.config.quotechar,
        )
        names: List[str] = None
        geometry_index: int = None
        selected: List[Tuple[int, str]] = None
        record_no = 0
        try:
            for row in reader:
                # blank line
                if not row:
                    continue
                if names is None:
                    names = self._column_names(row)
                    geometry_index = self._geometry_index(names)
                    selected = self._selected_columns(names, geometry_index, properties)
                    if self.config.has_header:
                        continue
                if len(row) != len(names):
                    raise ParseException(
                        f"Expected {len(names)} fields but found {len(row)}",
                        context=self.url,
                        position=SourcePosition(line=reader.line_num, record=record_no + 1),
                    )
                record_no += 1
                tokens = {name: row[idx] for idx, name in selected}
                geometry = (
                    self._geometry(names, row, geometry_index, reader.line_num, record_no)
                    if with_geometry
                    else None
                )
                yield Record(
                    {name: parse_text_token(token) for name, token in tokens.items()},
                    geometry,
                    tokens,
                )
        except csv.Error as e:
            raise ParseException(
                f"Malformed delimited text: {e}",
                context=self.url,
                position=SourcePosition(line=reader.line_num),
            ) from e

    def _decode(self, payload: bytes) -> str:
        try:
            return payload.decode(self.config.encoding)
        except UnicodeDecodeError as e:
            raise ParseException(
                f"Payload is not valid {self.config.encoding}: {e.reason}",
                context=self.url,
                position=SourcePosition(byte_offset=e.start),
            ) from e

    def _column_names(self, first_row: List[str]) -> List[str]:
        if not self.config.has_header:
            return [f"column_{idx}" for idx in range(len(first_row))]
        duplicates = find_duplicates(first_row)
        if duplicates:
            raise SchemaInferenceException(
                f"Duplicate column names in header: {', '.join(duplicates)}", context=self.url
            )
        return first_row

    def _geometry_index(self, names: List[str]) -> int:
        try:
            return names.index(self.config.geometry_column)
        except ValueError:
            raise SchemaInferenceException(
                f"Geometry column '{self.config.geometry_column}' not found in columns {names}",
                context=self.url,
            ) from None

    @staticmethod
    def _selected_columns(
        names: List[str], geometry_index: int, properties: Optional[Collection[str]]
    ) -> List[Tuple[int, str]]:
        return [
            (idx, name)
            for idx, name in enumerate(names)
            if idx != geometry_index and (properties is None or name in properties)
        ]

    def _geometry(
        self, names: List[str], row: List[str], geometry_index: int, line: int, record_no: int
    ) -> TOptionalGeometry:
        token = row[geometry_index]
        if not token.strip():
            return None
        try:
            return wkt_to_geometry(token)
        except ParseException as ex:
            ex.position = SourcePosition(
                line=line,
                column=ex.position.column if ex.position else None,
                record=record_no,
                field=geometry_index + 1,
            )
            raise ex.with_additional_context(self.url).with_additional_context(
                f"column '{names[geometry_index]}'"
            )


class GeoJsonRecordExtractor(RecordExtractor):
    """Extracts records from GeoJSON documents and newline delimited GeoJSON sequences"""

    config: GeoJsonReaderConfiguration

    @property
    def geometry_column_name(self) -> str:
        return self.config.output_geometry_column_name

    def _records(
        self, properties: Optional[Collection[str]], with_geometry: bool
    ) -> Iterator[Record]:
        record_nos = count(1)

        def to_record(feature: Any, line: Optional[int]) -> Record:
            return self._record(feature, line, next(record_nos), properties, with_geometry)

        if self.config.json_mode == "sequence":
            # stream line by line without loading the payload
            with open_binary(self.url, self.config.storage_options) as stream:
                yield from self._sequence_records(
                    LineReader(stream, self.config.read_chunk_size, context=self.url), to_record
                )
            return

        payload = read_binary(self.url, self.config.storage_options)
        try:
            document = json.loadb(payload)
        except ValueError as doc_ex:
            if self.config.json_mode == "document":
                raise ParseException(
                    f"Failed to parse GeoJSON document: {doc_ex}", context=self.url
                ) from doc_ex
            yield from self._fallback_sequence_records(payload, doc_ex, to_record)
            return
        for feature in self._features(document, None):
            yield to_record(feature, None)

    def _fallback_sequence_records(
        self, payload: bytes, doc_ex: Exception, to_record: TFeatureToRecord
    ) -> Iterator[Record]:
        lines = LineReader(io.BytesIO(payload), self.config.read_chunk_size, context=self.url)
        try:
            yield from self._sequence_records(lines, to_record)
        except ParseException as seq_ex:
            raise ParseException(
                f"Failed to parse GeoJSON as FeatureCollection ({doc_ex}); also failed to parse as"
                f" GeoJSON sequence: {seq_ex.msg}",
                context=self.url,
                position=seq_ex.position,
            ) from seq_ex

    def _sequence_records(
        self, lines: LineReader, to_record: TFeatureToRecord
    ) -> Iterator[Record]:
        found = False
        for line in lines:
            line = line.strip(_SEQUENCE_STRIP_CHARS)
            if not line:
                continue
            try:
                unit = json.loads(line.decode("utf-8"))
            except UnicodeDecodeError as e:
                raise ParseException(
                    f"GeoJSON sequence line is not valid UTF-8: {e.reason}",
                    context=self.url,
                    position=SourcePosition(line=lines.line_number, byte_offset=lines.line_offset),
                ) from e
            except ValueError as e:
                raise ParseException(
                    f"Failed to parse GeoJSON: {e}",
                    context=self.url,
                    position=SourcePosition(line=lines.line_number, byte_offset=lines.line_offset),
                ) from e
            for feature in self._features(unit, lines.line_number):
                found = True
                yield to_record(feature, lines.line_number)
        if not found:
            raise ParseException("No GeoJSON features found", context=self.url)

    def _features(self, document: Any, line: Optional[int]) -> Iterator[Any]:
        """Yields feature objects of a FeatureCollection, Feature or bare geometry document"""
        if not isinstance(document, dict):
            raise self._error(f"Expected GeoJSON object but got {type(document).__name__}", line)
        geojson_type = document.get("type")
        if geojson_type == "FeatureCollection":
            features = document.get("features")
            if not isinstance(features, list):
                raise self._error("FeatureCollection must have a 'features' array", line)
            yield from features
        elif geojson_type == "Feature":
            yield document
        elif geojson_type in GEOJSON_TYPES:
            yield {"type": "Feature", "geometry": document, "properties": None}
        else:
            raise self._error(f"Unsupported GeoJSON type {geojson_type!r}", line)

    def _record(
        self,
        feature: Any,
        line: Optional[int],
        record_no: int,
        selected: Optional[Collection[str]] = None,
        with_geometry: bool = True,
    ) -> Record:
        if not isinstance(feature, dict):
            raise self._error(
                f"Expected GeoJSON Feature but got {type(feature).__name__}", line, record_no
            )
        properties = feature.get("properties")
        if properties is None:
            properties = {}
        elif not isinstance(properties, dict):
            raise self._error("Feature 'properties' must be an object or null", line, record_no)
        geometry: TOptionalGeometry = None
        if with_geometry:
            try:
                geometry = geojson_to_geometry(feature.get("geometry"))
            except ParseException as ex:
                ex.position = SourcePosition(line=line, record=record_no)
                raise ex.with_additional_context(self.url)
        return Record(
            {
                name: self._property_value(value)
                for name, value in properties.items()
                if selected is None or name in selected
            },
            geometry,
        )

    @staticmethod
    def _property_value(value: Any) -> TPropertyValue:
        if value is None or isinstance(value, (bool, float, str)):
            return value
        if isinstance(value, int):
            return value if is_int64(value) else float(value)
        # objects and arrays are kept as their json rendering
        return json.dumps(value)

    def _error(
        self, msg: str, line: Optional[int], record_no: Optional[int] = None
    ) -> ParseException:
        return ParseException(
            msg, context=self.url, position=SourcePosition(line=line, record=record_no)
        )
