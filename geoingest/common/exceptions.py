from typing import Any, List, Optional, Sequence


class GeoIngestException(Exception):
    def __reduce__(self) -> Any:
        """Enables exceptions with parametrized constructor to be pickled"""
        return type(self).__new__, (type(self), *self.args), self.__dict__


class TerminalException(BaseException):
    """
    Marks an exception that cannot be recovered from, should be mixed in into concrete exception class
    """


class TransientException(BaseException):
    """
    Marks an exception in operation that can be retried, should be mixed in into concrete exception class
    """


class MissingDependencyException(GeoIngestException):
    def __init__(self, caller: str, dependencies: Sequence[str], appendix: str = "") -> None:
        self.caller = caller
        self.dependencies = dependencies
        super().__init__(self._get_msg(appendix))

    def _get_msg(self, appendix: str) -> str:
        msg = f"""
You must install additional dependencies to run {self.caller}. If you use pip you may do the following:

{self._to_pip_install()}
"""
        if appendix:
            msg = msg + "\n" + appendix
        return msg

    def _to_pip_install(self) -> str:
        return "\n".join([f'pip install "{d}"' for d in self.dependencies])


class SourcePosition:
    """A position within a source, ie. a line of a sequence document or a record of a csv file.

    Line, column, record and field are 1-based, byte offset is counted from the start of the source.
    """

    __slots__ = ("line", "column", "byte_offset", "record", "field")

    def __init__(
        self,
        line: Optional[int] = None,
        column: Optional[int] = None,
        byte_offset: Optional[int] = None,
        record: Optional[int] = None,
        field: Optional[int] = None,
    ) -> None:
        self.line = line
        self.column = column
        self.byte_offset = byte_offset
        self.record = record
        self.field = field

    def is_empty(self) -> bool:
        return all(getattr(self, attr) is None for attr in self.__slots__)

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, SourcePosition):
            return NotImplemented
        return all(getattr(self, attr) == getattr(other, attr) for attr in self.__slots__)

    def __repr__(self) -> str:
        args = ", ".join(
            f"{attr}={getattr(self, attr)}"
            for attr in self.__slots__
            if getattr(self, attr) is not None
        )
        return f"SourcePosition({args})"

    def __str__(self) -> str:
        parts: List[str] = []
        if self.line is not None:
            parts.append(f"line {self.line}")
        if self.column is not None:
            parts.append(f"column {self.column}")
        if self.record is not None:
            parts.append(f"record {self.record}")
        if self.byte_offset is not None:
            parts.append(f"byte {self.byte_offset}")
        if self.field is not None:
            parts.append(f"field {self.field}")
        if not parts:
            return "unknown position"
        return ", ".join(parts)


class SpatialReadException(GeoIngestException):
    """Base class for all errors raised while reading spatial sources"""

    kind: str = "Read"

    def __init__(self, msg: str, context: Optional[str] = None) -> None:
        self.msg = msg
        self.context = context
        super().__init__(msg, context)

    def with_additional_context(self, context: str) -> "SpatialReadException":
        """Appends `context` to the existing context and returns the same exception"""
        if self.context:
            self.context = f"{self.context}; {context}"
        else:
            self.context = context
        return self

    def _fmt_context(self) -> str:
        return f" while reading {self.context}" if self.context else ""

    def _fmt_position(self) -> str:
        return ""

    def __str__(self) -> str:
        return f"{self.kind} error{self._fmt_context()}{self._fmt_position()}: {self.msg}"


class StorageIoException(SpatialReadException, TransientException):
    kind = "I/O"

    def __init__(self, msg: str, context: Optional[str] = None, source: Exception = None) -> None:
        self.source = source
        super().__init__(msg, context)


class ParseException(SpatialReadException, TerminalException):
    kind = "Parse"

    def __init__(
        self, msg: str, context: Optional[str] = None, position: Optional[SourcePosition] = None
    ) -> None:
        self.position = position
        super().__init__(msg, context)
        self.args = (msg, context, position)

    def _fmt_position(self) -> str:
        if self.position is None or self.position.is_empty():
            return ""
        return f" at {self.position}"


class SchemaInferenceException(SpatialReadException, TerminalException):
    kind = "Schema inference"


class GeometryTypeException(SpatialReadException, TerminalException):
    """Raised when a geometry cannot be represented by the target geometry type of a column"""

    kind = "Geometry"

    def __init__(self, expected: str, observed: str, context: Optional[str] = None) -> None:
        self.expected = expected
        self.observed = observed
        super().__init__(
            f"Expected geometry of type {expected} but got {observed}",
            context,
        )
        # keep constructor args so the exception pickles
        self.args = (expected, observed, context)


class ValidationException(SpatialReadException, TerminalException):
    """Raised when a property value does not match the inferred column type"""

    kind = "Validation"

    def __init__(
        self,
        column_name: str,
        row_index: int,
        expected_type: str,
        value: Any,
        context: Optional[str] = None,
    ) -> None:
        self.column_name = column_name
        self.row_index = row_index
        self.expected_type = expected_type
        self.value = value
        super().__init__(
            f"Value {value!r} in column '{column_name}' at row {row_index} of the batch cannot be"
            f" coerced to {expected_type}",
            context,
        )
        self.args = (column_name, row_index, expected_type, value, context)


