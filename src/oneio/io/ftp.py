"""Anonymous FTP raw sources using ftplib."""

from __future__ import annotations
import ftplib
import io
import socket

from ..core.errors import NetworkError, NotSupportedError
from ..core.log import get_logger
from ..core.settings import create_settings_from_env

logger = get_logger(__name__)

DEFAULT_PORT = 21


def parse_ftp_url(url: str) -> tuple[str, int, str]:
    """Split ``ftp://host[:port]/path`` into (host, port, path)."""
    if not url.startswith("ftp://"):
        raise NotSupportedError(url)
    parts = url.split("/")
    if len(parts) < 4 or not parts[2]:
        raise NotSupportedError(f"invalid FTP location: {url}")
    host, _, port = parts[2].partition(":")
    try:
        port_number = int(port) if port else DEFAULT_PORT
    except ValueError as e:
        raise NotSupportedError(f"invalid FTP port in {url}") from e
    return host, port_number, "/".join(parts[3:])


class FTPByteReader(io.RawIOBase):
    """Binary RETR transfer exposed as a raw stream; owns the control connection."""

    def __init__(self, ftp: ftplib.FTP, conn: socket.socket):
        super().__init__()
        self._ftp = ftp
        self._conn = conn

    def readable(self) -> bool:
        return True

    def readinto(self, b) -> int:
        try:
            return self._conn.recv_into(b)
        except ftplib.all_errors as e:
            raise NetworkError(f"FTP transfer failed: {e}") from e

    def close(self) -> None:
        if self.closed:
            return
        try:
            self._conn.close()
            try:
                self._ftp.voidresp()
                self._ftp.quit()
            except ftplib.all_errors as e:
                # the server may reject an aborted transfer
                logger.debug("FTP shutdown: %s", e)
                self._ftp.close()
        finally:
            super().close()


def get_ftp_reader_raw(url: str) -> FTPByteReader:
    """Connect, log in anonymously, switch to binary mode and start retrieving `url`."""
    host, port, path = parse_ftp_url(url)
    ftp = ftplib.FTP()
    try:
        ftp.connect(host, port, timeout=create_settings_from_env().http_timeout_s)
        ftp.login("anonymous", "oneio")
        ftp.voidcmd("TYPE I")
    except ftplib.all_errors as e:
        ftp.close()
        raise NetworkError(f"FTP connection to {host}:{port} failed: {e}") from e

    try:
        conn = ftp.transfercmd(f"RETR {path}")
    except ftplib.all_errors as e:
        ftp.close()
        raise NetworkError(f"FTP RETR {path} failed: {e}") from e

    logger.debug("FTP RETR %s from %s:%d", path, host, port)
    return FTPByteReader(ftp, conn)
