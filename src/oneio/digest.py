"""SHA-256 digests of raw (undecoded) content."""

import hashlib

from .io.base import CHUNK_SIZE
from .pipeline import PathLike, get_reader_raw


def get_sha256_digest(path: PathLike) -> str:
    """Return the hex SHA-256 of the bytes stored at `path`, before any decompression."""
    digest = hashlib.sha256()
    with get_reader_raw(path) as reader:
        while chunk := reader.read(CHUNK_SIZE):
            digest.update(chunk)
    return digest.hexdigest()
