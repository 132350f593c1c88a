from __future__ import annotations
from typing import Any, BinaryIO, Callable, Dict, List, Optional, Type

from .codec_base import Codec
from .errors import NotSupportedError

Decoder = Callable[[BinaryIO], BinaryIO]
Encoder = Callable[[BinaryIO], BinaryIO]


class CodecRegistry:
    def __init__(self) -> None:
        self._by_suffix: Dict[str, Type[Codec]] = {}
        self._default: Optional[Type[Codec]] = None

    # called from Codec.__init_subclass__
    def register(self, codec_cls: Type[Codec]) -> None:
        if not codec_cls.suffixes:
            self._default = codec_cls
            return
        for suffix in codec_cls.suffixes:
            self._by_suffix[suffix.lower()] = codec_cls

    def suffixes(self) -> List[str]:
        return sorted(self._by_suffix)

    # --- lookup helpers ---
    def lookup(self, suffix: str) -> Optional[Type[Codec]]:
        """Return the codec registered for `suffix`, or None for pass-through."""
        return self._by_suffix.get(suffix.lower())

    def decoder_for(self, suffix: str) -> Decoder:
        # an unknown suffix is read as uncompressed, never an error
        codec = self.lookup(suffix) or self._default
        if codec is None:
            raise NotSupportedError("no pass-through codec registered")
        return codec.reader

    def encoder_for(self, suffix: str) -> Encoder:
        codec = self.lookup(suffix) or self._default
        if codec is None:
            raise NotSupportedError("no pass-through codec registered")
        if not codec.writable:
            raise NotSupportedError(f"{codec.name} writer not supported")
        return codec.writer

    def async_decoder_for(self, suffix: str) -> Optional[Callable[[], Any]]:
        """Return a decompressor factory, None for pass-through, or raise NotSupportedError."""
        codec = self.lookup(suffix)
        if codec is None:
            return None
        if not codec.async_capable:
            raise NotSupportedError(f"{codec.name} async reader not supported")
        return codec.decompressor


# singleton used project-wide
_REGISTRY = CodecRegistry()
