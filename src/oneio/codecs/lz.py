from __future__ import annotations

from typing import BinaryIO, ClassVar

import lz4.frame

from ..core.codec_base import Codec


class Lz4Codec(Codec):
    """LZ4 frame format, read-only."""

    name: ClassVar = "lz4"
    suffixes: ClassVar = ("lz", "lz4")
    writable: ClassVar = False
    # the frame decoder reports bad input as RuntimeError
    read_errors: ClassVar = (OSError, EOFError, RuntimeError)

    @classmethod
    def reader(cls, raw) -> BinaryIO:
        return lz4.frame.LZ4FrameFile(raw, mode="rb")
