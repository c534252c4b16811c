from typing import Optional, Sequence

from geoingest.common.exceptions import GeoIngestException, TransientException


class DataWriterException(GeoIngestException):
    pass


class DataWriterNotFound(DataWriterException, ValueError):
    def __init__(self, file_format: str, known_formats: Sequence[str]) -> None:
        self.file_format = file_format
        self.known_formats = known_formats
        super().__init__(
            f"Can't find a file writer for file format {file_format!r}, known formats:"
            f" {', '.join(known_formats)}"
        )


class FileWriteException(DataWriterException, TransientException):
    def __init__(self, url: str, msg: str, source: Optional[Exception] = None) -> None:
        self.url = url
        self.msg = msg
        self.source = source
        super().__init__(f"Could not write {url}: {msg}")
