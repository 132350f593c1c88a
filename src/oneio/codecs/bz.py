from __future__ import annotations

import bz2
from typing import BinaryIO, ClassVar

from ..core.codec_base import Codec


class Bzip2Codec(Codec):
    name: ClassVar = "bzip2"
    suffixes: ClassVar = ("bz", "bz2")
    async_capable: ClassVar = True

    @classmethod
    def reader(cls, raw) -> BinaryIO:
        return bz2.BZ2File(raw, mode="rb")

    @classmethod
    def writer(cls, sink: BinaryIO) -> BinaryIO:
        return bz2.BZ2File(sink, mode="wb")

    @classmethod
    def decompressor(cls):
        return bz2.BZ2Decompressor()
