"""Synchronous HTTP(S) raw sources using requests."""

from typing import Mapping, Optional

import requests
import urllib3

from ..core.errors import NetworkError
from ..core.log import get_logger
from ..core.settings import create_settings_from_env
from .base import CHUNK_SIZE, ChunkStream

logger = get_logger(__name__)

# Bodies must arrive exactly as stored; no transport compression
IDENTITY = {"Accept-Encoding": "identity"}

# Module-level session for connection pooling
_session = None


def _get_session() -> requests.Session:
    """Get or create the global requests session."""
    global _session
    if _session is None:
        _session = requests.Session()
        _session.headers["User-Agent"] = create_settings_from_env().user_agent
    return _session


def create_session_with_headers(headers: Mapping[str, str]) -> requests.Session:
    """Create a session sending `headers` with every request (e.g. Authorization)."""
    session = requests.Session()
    session.headers["User-Agent"] = create_settings_from_env().user_agent
    session.headers.update(headers)
    return session


def get_http_reader_raw(url: str, session: Optional[requests.Session] = None) -> ChunkStream:
    """Issue a streaming GET and return the undecoded response body."""
    settings = create_settings_from_env()
    session = session or _get_session()
    try:
        response = session.get(
            url,
            stream=True,
            headers=IDENTITY,
            timeout=settings.http_timeout_s,
            verify=not settings.accept_invalid_certs,
        )
        response.raise_for_status()
    except requests.RequestException as e:
        raise NetworkError(f"GET {url} failed: {e}") from e

    logger.debug("GET %s -> %s", url, response.status_code)
    # read the socket directly; iter_content would undo any Content-Encoding
    return ChunkStream(
        response.raw.stream(CHUNK_SIZE, decode_content=False),
        on_close=response.close,
        errors=(requests.RequestException, urllib3.exceptions.HTTPError),
    )


def http_content_length(url: str, session: Optional[requests.Session] = None) -> Optional[int]:
    """HEAD `url` and return its Content-Length, or None when the header is absent."""
    settings = create_settings_from_env()
    session = session or _get_session()
    try:
        response = session.head(
            url,
            allow_redirects=True,
            headers=IDENTITY,
            timeout=settings.http_timeout_s,
            verify=not settings.accept_invalid_certs,
        )
        response.raise_for_status()
    except requests.RequestException as e:
        raise NetworkError(f"HEAD {url} failed: {e}") from e

    content_length_header = response.headers.get("content-length")
    if content_length_header is None:
        return None
    try:
        return int(content_length_header)
    except ValueError as e:
        raise NetworkError(f"malformed Content-Length from {url}: {content_length_header!r}") from e


def http_exists(url: str) -> bool:
    """Return True if a HEAD request on `url` succeeds with a 2xx status."""
    settings = create_settings_from_env()
    try:
        response = _get_session().head(
            url,
            allow_redirects=True,
            headers=IDENTITY,
            timeout=settings.exists_timeout_s,
            verify=not settings.accept_invalid_certs,
        )
    except requests.RequestException as e:
        raise NetworkError(f"HEAD {url} failed: {e}") from e
    return response.ok
