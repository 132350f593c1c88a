"""
Cooperative (asyncio) variant of the read pipeline.

Raw sources: local files (worker thread) and HTTP(S) via httpx.
Decoding: gzip, bzip2 and zstd. Requests for other codecs or schemes fail
with NotSupportedError before anything is opened; there is no fallback to
blocking readers inside the event loop.
"""

from __future__ import annotations

import asyncio
from typing import AsyncIterator

from . import codecs  # noqa: F401  (registers the codecs)
from .core.errors import IoError, NotSupportedError
from .core.location import Location, file_type
from .core.registry import _REGISTRY
from .io.base import CHUNK_SIZE, AsyncByteReader, AsyncDecodedReader
from .io.http_async import open_http_reader_async
from .io.local import open_local_reader_async, open_local_writer
from .pipeline import PathLike


async def get_reader_raw_async(path: PathLike) -> AsyncByteReader:
    loc = Location.parse(str(path))
    if loc.is_local:
        return await open_local_reader_async(loc.path)
    if loc.scheme in ("http", "https"):
        return await open_http_reader_async(loc.raw)
    raise NotSupportedError(f"async reader not supported for {loc.raw}")


async def get_reader_async(path: PathLike) -> AsyncByteReader:
    """Open and decode `path` cooperatively."""
    path = str(path)
    factory = _REGISTRY.async_decoder_for(file_type(path))
    raw = await get_reader_raw_async(path)
    if factory is None:
        return raw
    return AsyncDecodedReader(raw, factory)


async def read_to_string_async(path: PathLike, encoding: str = "utf-8") -> str:
    reader = await get_reader_async(path)
    try:
        return (await reader.read()).decode(encoding)
    finally:
        await reader.aclose()


async def read_lines_async(path: PathLike, encoding: str = "utf-8") -> AsyncIterator[str]:
    """Yield the lines of `path` without terminators as chunks arrive."""
    reader = await get_reader_async(path)
    pending = b""
    try:
        while chunk := await reader.read(CHUNK_SIZE):
            pending += chunk
            *lines, pending = pending.split(b"\n")
            for line in lines:
                yield line.decode(encoding).removesuffix("\r")
        if pending:
            yield pending.decode(encoding).removesuffix("\r")
    finally:
        await reader.aclose()


async def download_async(remote_path: PathLike, local_path: PathLike) -> None:
    """Copy the raw bytes of `remote_path` into a local file without decoding."""
    reader = await get_reader_raw_async(remote_path)
    try:
        writer = await asyncio.to_thread(open_local_writer, local_path)
        try:
            while chunk := await reader.read(CHUNK_SIZE):
                await asyncio.to_thread(writer.write, chunk)
        except OSError as e:
            raise IoError(f"writing {local_path} failed: {e}") from e
        finally:
            await asyncio.to_thread(writer.close)
    finally:
        await reader.aclose()
