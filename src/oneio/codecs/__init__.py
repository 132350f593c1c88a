"""Compression codecs for oneio; importing this package registers them."""

from .plain import PlainCodec
from .gz import GzipCodec
from .bz import Bzip2Codec
from .lz import Lz4Codec
from .xz import XzCodec
from .zst import ZstdCodec
