"""oneio - one reader for local and remote files with any compression."""

from .core.errors import (                                            # re-export
    OneIoError, IoError, CacheError, NetworkError, S3StatusError, NotSupportedError,
)
from .core.location import get_protocol
from .core.tls import ensure_default_context
from .io.http_sync import create_session_with_headers
from .pipeline import (
    get_reader, get_reader_raw, get_http_reader, get_reader_with_progress,
    get_writer, get_writer_raw, get_cache_reader, get_content_length,
    download, download_with_retry, exists,
)
from .utils import read_to_string, read_lines, read_json
from .digest import get_sha256_digest
from .aio import get_reader_async, read_to_string_async, read_lines_async, download_async
from .io.s3 import (
    s3_url_parse, s3_env_check, s3_reader, s3_upload, s3_download,
    s3_stats, s3_exists, s3_list, s3_copy, s3_delete,
)

__version__ = "0.1.0"

__all__ = [
    "get_reader", "get_reader_raw", "get_http_reader", "get_reader_with_progress",
    "get_writer", "get_writer_raw", "get_cache_reader", "get_content_length",
    "download", "download_with_retry", "exists",
    "read_to_string", "read_lines", "read_json", "get_sha256_digest",
    "get_reader_async", "read_to_string_async", "read_lines_async", "download_async",
    "create_session_with_headers", "get_protocol", "ensure_default_context",
    "s3_url_parse", "s3_env_check", "s3_reader", "s3_upload", "s3_download",
    "s3_stats", "s3_exists", "s3_list", "s3_copy", "s3_delete",
    "OneIoError", "IoError", "CacheError", "NetworkError", "S3StatusError", "NotSupportedError",
]
