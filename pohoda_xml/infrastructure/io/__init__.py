"""Infrastructure I/O layer.

Streaming writer and reader for Pohoda data pack documents.
"""

from .data_pack_reader import DataPackReader, ReaderState, XmlToken, XmlTokenCursor
from .data_pack_writer import DataPackWriter, WriterState, fragment_events
from .exceptions import (
    DataStreamError,
    DocumentStateError,
    MalformedFragmentError,
    PohodaInfrastructureError,
    StreamOpenError,
    StreamWriteError,
)

__all__ = [
    "DataPackReader",
    "DataPackWriter",
    "DataStreamError",
    "DocumentStateError",
    "MalformedFragmentError",
    "PohodaInfrastructureError",
    "ReaderState",
    "StreamOpenError",
    "StreamWriteError",
    "WriterState",
    "XmlToken",
    "XmlTokenCursor",
    "fragment_events",
]
