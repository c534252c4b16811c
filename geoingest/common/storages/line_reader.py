from typing import IO, Iterator, Optional

from geoingest.common.exceptions import StorageIoException

DEFAULT_CHUNK_SIZE = 64 * 1024


class LineReader(Iterator[bytes]):
    """Pulls lines from a binary stream, reading from storage only when the buffer has no complete line.

    Lines are returned without the line terminator (`\\n` or `\\r\\n`). After each returned line
    `line_number` holds its 1-based number and `line_offset` the byte offset of its first byte.
    """

    def __init__(
        self, stream: IO[bytes], chunk_size: int = DEFAULT_CHUNK_SIZE, context: str = None
    ) -> None:
        if chunk_size < 1:
            raise ValueError(f"chunk_size must be positive, got {chunk_size}")
        self._stream = stream
        self.chunk_size = chunk_size
        self.context = context
        self._buffer = bytearray()
        # position in the buffer from which the terminator was not yet searched
        self._scan_from = 0
        self._eof = False
        self._next_offset = 0
        self.line_number = 0
        self.line_offset = 0
        self.bytes_read = 0

    def read_line(self) -> Optional[bytes]:
        """Returns next line or None when the stream is exhausted"""
        while True:
            idx = self._buffer.find(b"\n", self._scan_from)
            if idx >= 0:
                line = bytes(self._buffer[:idx])
                del self._buffer[: idx + 1]
                self._scan_from = 0
                return self._emit(line, idx + 1)
            if self._eof:
                if not self._buffer:
                    return None
                # last line without terminator
                line = bytes(self._buffer)
                self._buffer.clear()
                self._scan_from = 0
                return self._emit(line, len(line))
            self._scan_from = len(self._buffer)
            self._fill()

    def _emit(self, line: bytes, consumed: int) -> bytes:
        self.line_number += 1
        self.line_offset = self._next_offset
        self._next_offset += consumed
        if line.endswith(b"\r"):
            line = line[:-1]
        return line

    def _fill(self) -> None:
        try:
            chunk = self._stream.read(self.chunk_size)
        except OSError as e:
            raise StorageIoException(f"Could not read file: {e}", context=self.context, source=e) from e
        if not chunk:
            self._eof = True
        else:
            self.bytes_read += len(chunk)
            self._buffer.extend(chunk)

    def __iter__(self) -> "LineReader":
        return self

    def __next__(self) -> bytes:
        line = self.read_line()
        if line is None:
            raise StopIteration
        return line
