"""Error taxonomy shared by every oneio component."""

from __future__ import annotations


class OneIoError(RuntimeError):
    """Base class for all errors raised by oneio."""
    pass


class IoError(OneIoError):
    """Raised on local filesystem failures (missing file, permissions, short reads)."""
    pass


class CacheError(IoError):
    """Raised when the local cache directory cannot be prepared."""
    pass


class NetworkError(OneIoError):
    """Raised on any failure originating from a remote transport or service."""
    pass


class S3StatusError(NetworkError):
    """Raised when object storage answers with a non-2xx status code."""

    def __init__(self, status_code: int, message: str | None = None):
        self.status_code = status_code
        super().__init__(message or f"object storage request failed with status {status_code}")


class NotSupportedError(OneIoError):
    """Raised for unknown schemes, write-only-unsupported codecs and similar."""
    pass
