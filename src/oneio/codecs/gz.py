from __future__ import annotations

import gzip
import zlib
from typing import BinaryIO, ClassVar

from ..core.codec_base import Codec


class GzipCodec(Codec):
    """gzip (multi-member streams are read back to back)."""

    name: ClassVar = "gzip"
    suffixes: ClassVar = ("gz", "gzip", "tgz")
    async_capable: ClassVar = True
    read_errors: ClassVar = (OSError, EOFError, zlib.error)

    @classmethod
    def reader(cls, raw) -> BinaryIO:
        return gzip.GzipFile(fileobj=raw, mode="rb")

    @classmethod
    def writer(cls, sink: BinaryIO) -> BinaryIO:
        return gzip.GzipFile(fileobj=sink, mode="wb")

    @classmethod
    def decompressor(cls):
        return zlib.decompressobj(wbits=zlib.MAX_WBITS | 16)
