"""Shared fixtures: the same two-line text stored in every supported format."""

import bz2
import gzip
import lzma
from pathlib import Path

import lz4.frame
import pytest
import zstandard

TEST_TEXT = "OneIO test file.\nThis is a test."

COMPRESSORS = {
    "txt": lambda data: data,
    "txt.gz": gzip.compress,
    "txt.bz2": bz2.compress,
    "txt.lz4": lz4.frame.compress,
    "txt.xz": lzma.compress,
    "txt.zst": lambda data: zstandard.ZstdCompressor().compress(data),
}


@pytest.fixture
def test_text() -> str:
    return TEST_TEXT


@pytest.fixture
def sample_files(tmp_path) -> dict:
    """Map of suffix -> path of a file holding TEST_TEXT encoded with that suffix."""
    files = {}
    for suffix, compress in COMPRESSORS.items():
        path = tmp_path / f"test_data.{suffix}"
        path.write_bytes(compress(TEST_TEXT.encode()))
        files[suffix] = path
    return files


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep tests independent from the developer's environment."""
    for key in ("ONEIO_ACCEPT_INVALID_CERTS", "ONEIO_HTTP_TIMEOUT", "ONEIO_USER_AGENT",
                "AWS_ACCESS_KEY_ID", "AWS_SECRET_ACCESS_KEY", "AWS_REGION",
                "AWS_ENDPOINT", "AWS_ENDPOINT_URL"):
        monkeypatch.delenv(key, raising=False)
