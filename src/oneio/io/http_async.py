"""Asynchronous HTTP(S) raw sources using httpx."""

from typing import AsyncIterator, Optional

import httpx

from ..core.errors import NetworkError
from ..core.settings import create_settings_from_env
from ..core.tls import ensure_default_context
from .base import CHUNK_SIZE


def _new_client() -> httpx.AsyncClient:
    settings = create_settings_from_env()
    return httpx.AsyncClient(
        timeout=settings.http_timeout_s,
        verify=ensure_default_context(),
        headers={"User-Agent": settings.user_agent},
        follow_redirects=True,
    )


class HTTPAsyncByteReader:
    """Streaming HTTP body exposed as an `AsyncByteReader`."""

    def __init__(self, url: str, response: httpx.Response, client: Optional[httpx.AsyncClient] = None):
        self.url = url
        self.bytes_fetched = 0
        self._response = response
        self._client = client     # owned only when we created it
        # raw body; aiter_bytes would undo any Content-Encoding
        self._chunks: AsyncIterator[bytes] = response.aiter_raw(CHUNK_SIZE)
        self._pending = b""
        self._done = False

    async def _next_chunk(self) -> bytes:
        try:
            return await self._chunks.__anext__()
        except StopAsyncIteration:
            self._done = True
            return b""
        except httpx.HTTPError as e:
            raise NetworkError(f"reading {self.url} failed: {e}") from e

    async def read(self, size: int = -1) -> bytes:
        """Return up to `size` bytes (everything left when negative)."""
        if size is None or size < 0:
            parts = [self._pending]
            self._pending = b""
            while not self._done:
                parts.append(await self._next_chunk())
            data = b"".join(parts)
        else:
            while not self._pending and not self._done:
                self._pending = await self._next_chunk()
            data, self._pending = self._pending[:size], self._pending[size:]
        self.bytes_fetched += len(data)
        return data

    async def aclose(self) -> None:
        await self._response.aclose()
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()


async def open_http_reader_async(url: str, client: Optional[httpx.AsyncClient] = None) -> HTTPAsyncByteReader:
    """Issue a streaming GET; the returned reader owns the client unless one is passed in."""
    owned = client is None
    client = client or _new_client()
    try:
        response = await client.send(client.build_request("GET", url, headers={"Accept-Encoding": "identity"}), stream=True)
    except httpx.HTTPError as e:
        if owned:
            await client.aclose()
        raise NetworkError(f"GET {url} failed: {e}") from e

    if response.is_error:
        await response.aclose()
        if owned:
            await client.aclose()
        raise NetworkError(f"GET {url} failed with status {response.status_code}")

    return HTTPAsyncByteReader(url, response, client if owned else None)
