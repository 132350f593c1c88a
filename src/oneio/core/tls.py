"""Process-wide TLS context shared by the cooperative HTTP client."""

from __future__ import annotations
import ssl
import threading
from typing import Optional

from .log import get_logger
from .settings import create_settings_from_env

logger = get_logger(__name__)

_lock = threading.Lock()
_context: Optional[ssl.SSLContext] = None


def ensure_default_context() -> ssl.SSLContext:
    """Create the shared SSL context once; later calls return the same object.

    Safe to call from any number of threads. An already-installed context is
    success, never an error.
    """
    global _context
    if _context is not None:
        return _context

    with _lock:
        if _context is None:
            context = ssl.create_default_context()
            if create_settings_from_env().accept_invalid_certs:
                context.check_hostname = False
                context.verify_mode = ssl.CERT_NONE
                logger.warning("TLS certificate validation disabled by ONEIO_ACCEPT_INVALID_CERTS")
            _context = context
    return _context


def reset_default_context() -> None:
    """Forget the shared context so the next call rebuilds it."""
    global _context
    with _lock:
        _context = None
