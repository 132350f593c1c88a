from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Any, BinaryIO, ClassVar

from .errors import NotSupportedError


class Codec(ABC):
    # --- required by subclasses ---
    name: ClassVar[str]
    suffixes: ClassVar[tuple[str, ...]]      # lower-case, no dot; empty = pass-through default
    writable: ClassVar[bool] = True
    async_capable: ClassVar[bool] = False
    read_errors: ClassVar[tuple[type[BaseException], ...]] = (OSError, EOFError)   # corrupt/truncated input

    # --- decode ---
    @classmethod
    @abstractmethod
    def reader(cls, raw: BinaryIO) -> BinaryIO:
        """Wrap an undecoded byte stream in a decoding stream."""
        ...

    # --- encode ---
    @classmethod
    def writer(cls, sink: BinaryIO) -> BinaryIO:
        """Wrap a local sink in an encoding stream."""
        raise NotSupportedError(f"{cls.name} writer not supported")

    # --- cooperative decode ---
    @classmethod
    def decompressor(cls) -> Any:
        """Return a fresh incremental decompressor (``decompress``/``eof``/``unused_data``)."""
        raise NotSupportedError(f"{cls.name} async reader not supported")

    # --- registry hook ---
    def __init_subclass__(cls, register: bool = True, **kw):
        super().__init_subclass__(**kw)
        if register:
            from .registry import _REGISTRY
            _REGISTRY.register(cls)
