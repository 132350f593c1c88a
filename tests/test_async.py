"""Tests for the asyncio read pipeline."""

import gzip

import pytest
import zstandard

import oneio
from oneio import IoError, NetworkError, NotSupportedError
from oneio.io.http_async import HTTPAsyncByteReader, open_http_reader_async
from oneio.io.local import LocalAsyncByteReader, open_local_reader_async

TEXT = b"OneIO test file.\nThis is a test."


class TestLocalAsync:

    @pytest.mark.asyncio
    @pytest.mark.parametrize("suffix", ["txt", "txt.gz", "txt.bz2", "txt.zst"])
    async def test_read_to_string(self, sample_files, test_text, suffix):
        assert await oneio.read_to_string_async(sample_files[suffix]) == test_text

    @pytest.mark.asyncio
    async def test_local_reader(self, sample_files):
        reader = await open_local_reader_async(sample_files["txt"])
        assert isinstance(reader, LocalAsyncByteReader)
        async with reader:
            assert await reader.read(5) == TEXT[:5]
            assert await reader.read() == TEXT[5:]
            assert await reader.read(5) == b""

    @pytest.mark.asyncio
    async def test_missing_file(self, tmp_path):
        with pytest.raises(IoError):
            await oneio.get_reader_async(tmp_path / "missing.gz")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("suffix", ["txt.xz", "txt.lz4"])
    async def test_unsupported_codec_fails_before_opening(self, tmp_path, suffix):
        # the file does not exist; the codec check comes first
        with pytest.raises(NotSupportedError):
            await oneio.get_reader_async(tmp_path / f"missing.{suffix}")

    @pytest.mark.asyncio
    async def test_unsupported_scheme(self):
        with pytest.raises(NotSupportedError):
            await oneio.get_reader_async("ftp://example.com/pub/data.txt")

    @pytest.mark.asyncio
    async def test_read_lines(self, sample_files):
        lines = [line async for line in oneio.read_lines_async(sample_files["txt.gz"])]
        assert lines == ["OneIO test file.", "This is a test."]

    @pytest.mark.asyncio
    async def test_small_reads_across_members(self, tmp_path):
        path = tmp_path / "multi.gz"
        path.write_bytes(gzip.compress(b"first\n") + gzip.compress(b"second\n"))
        reader = await oneio.get_reader_async(path)
        async with reader:
            parts = []
            while chunk := await reader.read(3):
                parts.append(chunk)
        assert b"".join(parts) == b"first\nsecond\n"
        assert all(len(p) <= 3 for p in parts)

    @pytest.mark.asyncio
    async def test_truncated_stream(self, tmp_path):
        path = tmp_path / "cut.gz"
        path.write_bytes(gzip.compress(TEXT)[:-6])
        with pytest.raises(IoError):
            await oneio.read_to_string_async(path)

    @pytest.mark.asyncio
    async def test_corrupt_stream(self, tmp_path):
        path = tmp_path / "bad.bz2"
        path.write_bytes(b"this is not bzip2 data")
        with pytest.raises(IoError):
            await oneio.read_to_string_async(path)

    @pytest.mark.asyncio
    async def test_download(self, sample_files, tmp_path):
        target = tmp_path / "out" / "copy.gz"
        await oneio.download_async(sample_files["txt.gz"], target)
        assert target.read_bytes() == sample_files["txt.gz"].read_bytes()


class TestHTTPAsync:

    @pytest.mark.asyncio
    async def test_read_gzip(self, httpserver):
        httpserver.expect_request("/data.txt.gz").respond_with_data(gzip.compress(TEXT))
        assert await oneio.read_to_string_async(httpserver.url_for("/data.txt.gz")) == TEXT.decode()

    @pytest.mark.asyncio
    async def test_reader_counts_bytes(self, httpserver):
        httpserver.expect_request("/data.bin").respond_with_data(TEXT)
        reader = await open_http_reader_async(httpserver.url_for("/data.bin"))
        assert isinstance(reader, HTTPAsyncByteReader)
        async with reader:
            assert await reader.read(4) == TEXT[:4]
            assert await reader.read() == TEXT[4:]
        assert reader.bytes_fetched == len(TEXT)

    @pytest.mark.asyncio
    async def test_not_found(self, httpserver):
        httpserver.expect_request("/gone.txt").respond_with_data("", status=404)
        with pytest.raises(NetworkError):
            await oneio.get_reader_async(httpserver.url_for("/gone.txt"))

    @pytest.mark.asyncio
    async def test_download_keeps_compression(self, httpserver, tmp_path):
        payload = gzip.compress(TEXT)
        httpserver.expect_request("/data.txt.gz").respond_with_data(payload)
        target = tmp_path / "data.txt.gz"
        await oneio.download_async(httpserver.url_for("/data.txt.gz"), target)
        assert target.read_bytes() == payload

    @pytest.mark.asyncio
    async def test_read_lines(self, httpserver):
        httpserver.expect_request("/data.txt.zst").respond_with_data(zstandard.ZstdCompressor().compress(TEXT))
        lines = [line async for line in oneio.read_lines_async(httpserver.url_for("/data.txt.zst"))]
        assert lines == TEXT.decode().split("\n")

    @pytest.mark.asyncio
    async def test_content_encoded_body_kept_verbatim(self, httpserver, tmp_path):
        payload = gzip.compress(TEXT)
        httpserver.expect_request("/encoded.txt.gz").respond_with_data(
            payload, headers={"Content-Encoding": "gzip"})
        url = httpserver.url_for("/encoded.txt.gz")

        assert await oneio.read_to_string_async(url) == TEXT.decode()
        target = tmp_path / "encoded.txt.gz"
        await oneio.download_async(url, target)
        assert target.read_bytes() == payload
