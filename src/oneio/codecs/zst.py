from __future__ import annotations

from typing import BinaryIO, ClassVar

import zstandard as zstd

from ..core.codec_base import Codec

DEFAULT_LEVEL = 3


class ZstdCodec(Codec):
    name: ClassVar = "zstd"
    suffixes: ClassVar = ("zst", "zstd")
    async_capable: ClassVar = True
    read_errors: ClassVar = (OSError, EOFError, zstd.ZstdError)

    @classmethod
    def reader(cls, raw) -> BinaryIO:
        return zstd.ZstdDecompressor().stream_reader(raw, read_across_frames=True, closefd=False)

    @classmethod
    def writer(cls, sink: BinaryIO) -> BinaryIO:
        return zstd.ZstdCompressor(level=DEFAULT_LEVEL).stream_writer(sink, closefd=False)

    @classmethod
    def decompressor(cls):
        return zstd.ZstdDecompressor().decompressobj()
