"""Progress-reporting stream decorator."""

from __future__ import annotations
from typing import Any, Callable, Optional

from .base import StreamAdapter

# (bytes_so_far, total_or_zero)
ProgressCallback = Callable[[int, int], None]


class ProgressReader(StreamAdapter):
    """Count bytes read from the wrapped source and report them after every non-empty read.

    Sits beneath any decoder, so the counts are transferred (undecoded) bytes.
    An unknown total is reported as 0.
    """

    def __init__(self, inner: Any, total_size: Optional[int], callback: ProgressCallback):
        super().__init__(inner)
        self.total_size = total_size
        self.bytes_read = 0
        self._callback = callback

    def readinto(self, b) -> int:
        n = super().readinto(b)
        if n > 0:
            self.bytes_read += n
            self._callback(self.bytes_read, self.total_size or 0)
        return n
