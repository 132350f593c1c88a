from __future__ import annotations

from typing import BinaryIO, ClassVar

from ..core.codec_base import Codec
from ..io.base import ensure_buffered


class PlainCodec(Codec):
    """Pass-through for locations without a known compression suffix."""

    name: ClassVar = "plain"
    suffixes: ClassVar = ()

    @classmethod
    def reader(cls, raw) -> BinaryIO:
        return ensure_buffered(raw)

    @classmethod
    def writer(cls, sink: BinaryIO) -> BinaryIO:
        return sink
