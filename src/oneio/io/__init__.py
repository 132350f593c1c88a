"""I/O layer for oneio - raw byte sources and sinks per protocol."""

# Re-export these for import convenience
from .base import AsyncByteReader, ChunkStream, OwningReader, OwningWriter, StreamAdapter, ensure_buffered
from .local import open_local_reader, open_local_writer, open_local_reader_async
from .http_sync import create_session_with_headers, get_http_reader_raw
from .http_async import open_http_reader_async
from .ftp import get_ftp_reader_raw
from .progress import ProgressReader
