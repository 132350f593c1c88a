"""Stream adapters and protocols shared by the I/O layer."""

from __future__ import annotations
import io
import zlib
from typing import Any, BinaryIO, Callable, Iterable, Iterator, Optional, Protocol, Type, runtime_checkable

from ..core.errors import IoError, NetworkError, OneIoError

CHUNK_SIZE = 64 * 1024


@runtime_checkable
class AsyncByteReader(Protocol):
    """Protocol for cooperative byte readers."""

    async def read(self, size: int = -1) -> bytes:
        """Return up to `size` bytes (all remaining when negative); b"" at end of stream."""
        ...

    async def aclose(self) -> None:
        ...


class StreamAdapter(io.RawIOBase):
    """Expose any object with ``read(n)`` as a raw binary stream.

    Exceptions listed in `errors` are re-raised as `wrap_as`, keeping the message.
    """

    def __init__(self, inner: Any, errors: tuple[Type[BaseException], ...] = (),
                 wrap_as: Type[Exception] = NetworkError):
        super().__init__()
        self._inner = inner
        self._errors = errors
        self._wrap_as = wrap_as

    def readable(self) -> bool:
        return True

    def _read_inner(self, size: int) -> bytes:
        try:
            return self._inner.read(size)
        except self._errors as e:
            raise self._wrap_as(str(e)) from e

    def readinto(self, b) -> int:
        data = self._read_inner(len(b))
        n = len(data)
        b[:n] = data
        return n

    def close(self) -> None:
        if self.closed:
            return
        try:
            close = getattr(self._inner, "close", None)
            if close is not None:
                close()
        finally:
            super().close()


class ChunkStream(io.RawIOBase):
    """Raw stream over an iterator of byte chunks (e.g. an HTTP body)."""

    def __init__(self, chunks: Iterable[bytes], on_close: Optional[Callable[[], None]] = None,
                 errors: tuple[Type[BaseException], ...] = ()):
        super().__init__()
        self._chunks: Iterator[bytes] = iter(chunks)
        self._pending = b""
        self._on_close = on_close
        self._errors = errors

    def readable(self) -> bool:
        return True

    def readinto(self, b) -> int:
        while not self._pending:
            try:
                self._pending = next(self._chunks)
            except StopIteration:
                return 0
            except self._errors as e:
                raise NetworkError(str(e)) from e
        n = min(len(b), len(self._pending))
        b[:n] = self._pending[:n]
        self._pending = self._pending[n:]
        return n

    def close(self) -> None:
        if self.closed:
            return
        try:
            if self._on_close is not None:
                self._on_close()
        finally:
            super().close()


def ensure_buffered(raw: Any) -> BinaryIO:
    """Return `raw` as a buffered binary reader without changing its bytes."""
    if isinstance(raw, io.BufferedIOBase):
        return raw
    if isinstance(raw, io.RawIOBase):
        return io.BufferedReader(raw, CHUNK_SIZE)
    return io.BufferedReader(StreamAdapter(raw), CHUNK_SIZE)


class OwningReader(io.BufferedIOBase):
    """Decoded reader that also closes the undecoded stream beneath it.

    Decoder failures listed in `errors` (corrupt or truncated input) are
    re-raised as IoError; errors already in the oneio taxonomy pass through.
    """

    def __init__(self, stream: Any, owned: Any, errors: tuple[Type[BaseException], ...] = ()):
        super().__init__()
        self._stream = stream
        self._owned = owned
        self._errors = errors

    def readable(self) -> bool:
        return True

    def _call(self, fn: Callable[..., bytes], *args) -> bytes:
        try:
            return fn(*args)
        except OneIoError:
            raise
        except self._errors as e:
            raise IoError(f"invalid compressed data: {e}") from e

    def read(self, size: Optional[int] = -1) -> bytes:
        return self._call(self._stream.read, -1 if size is None else size)

    def read1(self, size: int = -1) -> bytes:
        read1 = getattr(self._stream, "read1", None)
        return self._call(read1 if read1 is not None else self._stream.read, size)

    def peek(self, size: int = 0) -> bytes:
        peek = getattr(self._stream, "peek", None)
        return self._call(peek, size) if peek is not None else b""

    def readinto(self, b) -> int:
        data = self.read(len(b))
        n = len(data)
        b[:n] = data
        return n

    def close(self) -> None:
        if self.closed:
            return
        try:
            self._stream.close()
        finally:
            try:
                self._owned.close()
            finally:
                super().close()


class OwningWriter(io.BufferedIOBase):
    """Encoding writer that finalizes the encoder, then closes the local sink."""

    def __init__(self, stream: Any, sink: Any):
        super().__init__()
        self._stream = stream
        self._sink = sink

    def writable(self) -> bool:
        return True

    def write(self, b) -> int:
        return self._stream.write(b)

    def flush(self) -> None:
        # IOBase.close flushes after the encoder is already finalized
        if not self.closed and not getattr(self._stream, "closed", False):
            self._stream.flush()

    def close(self) -> None:
        if self.closed:
            return
        try:
            self._stream.close()
        finally:
            try:
                self._sink.close()
            finally:
                super().close()


class AsyncDecodedReader:
    """Cooperative reader that decodes an `AsyncByteReader` incrementally.

    Concatenated members/frames are decoded back to back.
    """

    def __init__(self, raw: AsyncByteReader, decompressor_factory: Callable[[], Any],
                 chunk_size: int = CHUNK_SIZE):
        self._raw = raw
        self._factory = decompressor_factory
        self._decomp = decompressor_factory()
        self._fed = False
        self._buffer = bytearray()
        self._eof = False
        self._chunk_size = chunk_size

    def _feed(self, data: bytes) -> None:
        while data:
            if self._decomp.eof:
                # previous member finished, start the next one
                self._decomp = self._factory()
                self._fed = False
            self._buffer += self._decomp.decompress(data)
            self._fed = True
            data = self._decomp.unused_data if self._decomp.eof else b""

    async def _fill(self) -> None:
        data = await self._raw.read(self._chunk_size)
        if not data:
            self._eof = True
            if self._fed and not self._decomp.eof:
                raise IoError("compressed stream ended before the end-of-stream marker")
            return
        try:
            self._feed(data)
        except (OSError, EOFError, ValueError, zlib.error) as e:
            raise IoError(f"invalid compressed data: {e}") from e

    async def read(self, size: int = -1) -> bytes:
        if size is None or size < 0:
            while not self._eof:
                await self._fill()
            data = bytes(self._buffer)
            self._buffer.clear()
            return data

        while len(self._buffer) < size and not self._eof:
            await self._fill()
        data = bytes(self._buffer[:size])
        del self._buffer[:size]
        return data

    async def aclose(self) -> None:
        await self._raw.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()
