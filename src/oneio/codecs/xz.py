from __future__ import annotations

import lzma
from typing import BinaryIO, ClassVar

from ..core.codec_base import Codec


class XzCodec(Codec):
    """xz container; legacy .lzma streams are also accepted on read."""

    name: ClassVar = "xz"
    suffixes: ClassVar = ("xz", "xz2", "lzma")
    read_errors: ClassVar = (OSError, EOFError, lzma.LZMAError)

    @classmethod
    def reader(cls, raw) -> BinaryIO:
        return lzma.LZMAFile(raw, mode="rb")

    @classmethod
    def writer(cls, sink: BinaryIO) -> BinaryIO:
        return lzma.LZMAFile(sink, mode="wb", format=lzma.FORMAT_XZ)
