"""Local file readers and writers."""

import asyncio
import os
from pathlib import Path
from typing import BinaryIO, Union

from ..core.errors import IoError

PathLike = Union[str, Path]


def open_local_reader(path: PathLike) -> BinaryIO:
    """Open a local file for binary reading."""
    try:
        return open(path, "rb")
    except OSError as e:
        raise IoError(f"cannot open {path}: {e}") from e


def open_local_writer(path: PathLike) -> BinaryIO:
    """Create (or truncate) a local file, creating parent directories as needed."""
    target = Path(path)
    try:
        if target.parent != Path("."):
            target.parent.mkdir(parents=True, exist_ok=True)
        return open(target, "wb")
    except OSError as e:
        raise IoError(f"cannot create {path}: {e}") from e


def local_size(path: PathLike) -> int:
    """Return the size of a local file from its metadata."""
    try:
        return os.stat(path).st_size
    except OSError as e:
        raise IoError(f"cannot stat {path}: {e}") from e


def local_exists(path: PathLike) -> bool:
    return Path(path).exists()


class LocalAsyncByteReader:
    """Asynchronous local file reader - thin wrapper around a sync file object."""

    def __init__(self, path: PathLike):
        self._file = open_local_reader(path)

    async def read(self, size: int = -1) -> bytes:
        """Return up to `size` bytes; reads run in a worker thread."""
        return await asyncio.to_thread(self._file.read, size)

    async def aclose(self) -> None:
        await asyncio.to_thread(self._file.close)

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()


async def open_local_reader_async(path: PathLike) -> LocalAsyncByteReader:
    """Create an asynchronous local byte reader."""
    return await asyncio.to_thread(LocalAsyncByteReader, path)
