from geoingest.common.data_writers.writers import (
    FILE_FORMATS,
    CsvWktWriter,
    DataWriter,
    GeoJsonSeqWriter,
    GeoJsonWriter,
    TFileFormat,
    write_batches,
)
from geoingest.common.data_writers.exceptions import (
    DataWriterException,
    DataWriterNotFound,
    FileWriteException,
)

__all__ = [
    "DataWriter",
    "GeoJsonWriter",
    "GeoJsonSeqWriter",
    "CsvWktWriter",
    "TFileFormat",
    "FILE_FORMATS",
    "write_batches",
    "DataWriterException",
    "DataWriterNotFound",
    "FileWriteException",
]
