"""
Stream resolution pipeline.

Read path:  location -> protocol -> raw source -> [progress] -> codec by suffix -> reader
Write path: local path -> sink -> codec by suffix -> writer

Progress is measured on raw (transferred) bytes and the cache stores raw
bytes; both sit beneath the decoder and must stay there.
"""

from __future__ import annotations

import os
import shutil
import tempfile
from contextlib import closing, suppress
from pathlib import Path
from typing import BinaryIO, Callable, Dict, Optional, Tuple, Union

import requests

from . import codecs  # noqa: F401  (registers the codecs)
from .core.errors import CacheError, IoError, NotSupportedError, OneIoError
from .core.location import Location, file_name, file_type, get_protocol
from .core.log import get_logger
from .core.registry import _REGISTRY
from .io.base import OwningReader, OwningWriter
from .io.ftp import get_ftp_reader_raw
from .io.http_sync import get_http_reader_raw, http_content_length, http_exists
from .io.local import local_exists, local_size, open_local_reader, open_local_writer
from .io.progress import ProgressCallback, ProgressReader
from .io import s3

logger = get_logger(__name__)

PathLike = Union[str, Path]


# --- raw sources ------------------------------------------------------------

def _open_local(loc: Location) -> BinaryIO:
    return open_local_reader(loc.path)


def _open_http(loc: Location) -> BinaryIO:
    return get_http_reader_raw(loc.raw)


def _open_ftp(loc: Location) -> BinaryIO:
    return get_ftp_reader_raw(loc.raw)


def _open_s3(loc: Location) -> BinaryIO:
    bucket, key = s3.s3_url_parse(loc.raw)
    return s3.s3_reader(bucket, key, scheme=loc.scheme)


_RAW_SOURCES: Dict[Optional[str], Callable[[Location], BinaryIO]] = {
    None: _open_local,
    "http": _open_http,
    "https": _open_http,
    "ftp": _open_ftp,
    "s3": _open_s3,
    "r2": _open_s3,
}


def get_reader_raw(path: PathLike) -> BinaryIO:
    """Open the undecoded bytes behind `path`. Never looks at the suffix."""
    loc = Location.parse(str(path))
    opener = _RAW_SOURCES.get(loc.scheme)
    if opener is None:
        raise NotSupportedError(loc.raw)
    logger.debug("opening raw source %s", loc.raw)
    return opener(loc)


# --- content length ---------------------------------------------------------

def _local_length(loc: Location) -> Optional[int]:
    return local_size(loc.path)


def _http_length(loc: Location) -> Optional[int]:
    return http_content_length(loc.raw)


def _ftp_length(loc: Location) -> Optional[int]:
    raise NotSupportedError(f"content length not supported for FTP: {loc.raw}")


def _s3_length(loc: Location) -> Optional[int]:
    bucket, key = s3.s3_url_parse(loc.raw)
    return s3.s3_stats(bucket, key, scheme=loc.scheme).get("ContentLength")


_LENGTH_RESOLVERS: Dict[Optional[str], Callable[[Location], Optional[int]]] = {
    None: _local_length,
    "http": _http_length,
    "https": _http_length,
    "ftp": _ftp_length,
    "s3": _s3_length,
    "r2": _s3_length,
}


def get_content_length(path: PathLike) -> int:
    """Return the raw (undecoded) size of `path`.

    Raises NotSupportedError when the transport cannot report a size.
    """
    loc = Location.parse(str(path))
    resolver = _LENGTH_RESOLVERS.get(loc.scheme)
    if resolver is None:
        raise NotSupportedError(loc.raw)
    size = resolver(loc)
    if size is None:
        raise NotSupportedError(f"cannot determine content length of {loc.raw}")
    return size


def _try_content_length(path: PathLike) -> Optional[int]:
    try:
        return get_content_length(path)
    except OneIoError as e:
        # the read itself still goes ahead and reports its own failures
        logger.warning("size of %s unknown, progress total reported as 0: %s", path, e)
        return None


# --- decode / encode --------------------------------------------------------

def _decode(raw: BinaryIO, path: str) -> BinaryIO:
    suffix = file_type(path)
    decoder = _REGISTRY.decoder_for(suffix)
    codec = _REGISTRY.lookup(suffix)
    if codec is None:
        # pass-through keeps ownership of raw itself
        return decoder(raw)
    try:
        decoded = decoder(raw)
    except BaseException:
        raw.close()
        raise
    return OwningReader(decoded, raw, errors=codec.read_errors)


def get_reader(path: PathLike) -> BinaryIO:
    """Open `path` (local or remote) and decode it according to its suffix."""
    path = str(path)
    return _decode(get_reader_raw(path), path)


def get_http_reader(path: str, session: Optional[requests.Session] = None) -> BinaryIO:
    """Like `get_reader` for HTTP(S), with a caller-provided session (custom headers)."""
    return _decode(get_http_reader_raw(path, session), path)


def get_reader_with_progress(path: PathLike, callback: ProgressCallback) -> Tuple[BinaryIO, Optional[int]]:
    """Open `path` with `callback(bytes_so_far, total_or_zero)` fired on every non-empty raw read.

    Returns the decoded reader and the raw total size (None when unknown).
    """
    path = str(path)
    total = _try_content_length(path)
    tracked = ProgressReader(get_reader_raw(path), total, callback)
    return _decode(tracked, path), total


def get_writer_raw(path: PathLike) -> BinaryIO:
    return open_local_writer(path)


def get_writer(path: PathLike) -> BinaryIO:
    """Create a local file that compresses on write according to its suffix."""
    path = str(path)
    if get_protocol(path) is not None:
        raise NotSupportedError(f"writing to remote locations is not supported: {path}")

    encoder = _REGISTRY.encoder_for(file_type(path))   # fails before the file is created
    sink = get_writer_raw(path)
    try:
        stream = encoder(sink)
    except BaseException:
        sink.close()
        raise
    return sink if stream is sink else OwningWriter(stream, sink)


# --- cache ------------------------------------------------------------------

def _default_file_mode() -> int:
    """Mode a plain open(..., "w") would give a new file under the current umask."""
    umask = os.umask(0)
    os.umask(umask)
    return 0o666 & ~umask


def _fill_cache(path: str, cache_path: Path) -> None:
    """Copy the raw bytes of `path` to `cache_path`, atomically."""
    try:
        fd, tmp_name = tempfile.mkstemp(dir=cache_path.parent, prefix=f".{cache_path.name}.", suffix=".part")
    except OSError as e:
        raise CacheError(f"cannot create cache file in {cache_path.parent}: {e}") from e

    try:
        with os.fdopen(fd, "wb") as out, closing(get_reader_raw(path)) as reader:
            shutil.copyfileobj(reader, out)
        # mkstemp creates 0600 files
        os.chmod(tmp_name, _default_file_mode())
        os.replace(tmp_name, cache_path)
    except OSError as e:
        with suppress(FileNotFoundError):
            os.unlink(tmp_name)
        raise IoError(f"writing cache file {cache_path} failed: {e}") from e
    except BaseException:
        with suppress(FileNotFoundError):
            os.unlink(tmp_name)
        raise


def get_cache_reader(
    path: PathLike,
    cache_dir: PathLike,
    cache_file_name: Optional[str] = None,
    force_cache: bool = False,
) -> BinaryIO:
    """Read `path` through a local cache copy of its raw bytes.

    The cache file keeps the original encoding and is decoded by its own suffix.
    With `force_cache` the copy is always refreshed first.
    """
    path = str(path)
    cache_root = Path(cache_dir)
    try:
        cache_root.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise CacheError(f"cache directory creation failed: {e}") from e

    cache_path = cache_root / (cache_file_name or file_name(path))

    if cache_path.exists() and not force_cache:
        logger.debug("cache hit for %s at %s", path, cache_path)
    else:
        logger.debug("caching %s to %s", path, cache_path)
        _fill_cache(path, cache_path)

    return get_reader(cache_path)


# --- download / exists ------------------------------------------------------

def download(remote_path: PathLike, local_path: PathLike, session: Optional[requests.Session] = None) -> None:
    """Copy the raw bytes of `remote_path` into a new local file (no decompression)."""
    remote_path = str(remote_path)
    protocol = get_protocol(remote_path)

    if protocol in s3.S3_SCHEMES:
        bucket, key = s3.s3_url_parse(remote_path)
        s3.s3_download(bucket, key, local_path, scheme=protocol)
        return

    if protocol in ("http", "https"):
        reader = get_http_reader_raw(remote_path, session)
    else:
        reader = get_reader_raw(remote_path)

    with closing(reader), get_writer_raw(local_path) as writer:
        try:
            shutil.copyfileobj(reader, writer)
        except OSError as e:
            raise IoError(f"writing {local_path} failed: {e}") from e
    logger.debug("downloaded %s to %s", remote_path, local_path)


def download_with_retry(
    remote_path: PathLike,
    local_path: PathLike,
    retry: int,
    session: Optional[requests.Session] = None,
) -> None:
    """`download`, retried from scratch up to `retry` more times; the last error propagates."""
    attempts_left = retry
    while True:
        try:
            download(remote_path, local_path, session)
            return
        except OneIoError as e:
            if attempts_left <= 0:
                raise
            attempts_left -= 1
            logger.warning("download of %s failed (%s), retrying (%d left)", remote_path, e, attempts_left)


def exists(path: PathLike) -> bool:
    """Whether `path` exists, locally or remotely."""
    loc = Location.parse(str(path))
    if loc.is_local:
        return local_exists(loc.path)
    if loc.scheme in ("http", "https"):
        return http_exists(loc.raw)
    if loc.scheme in s3.S3_SCHEMES:
        bucket, key = s3.s3_url_parse(loc.raw)
        return s3.s3_exists(bucket, key, scheme=loc.scheme)
    raise NotSupportedError(loc.raw)
