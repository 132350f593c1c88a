"""Tests for download, download_with_retry and digests."""

import gzip
import hashlib

import pytest

import oneio
from oneio import IoError, NetworkError
from oneio import pipeline

TEXT = b"OneIO test file.\nThis is a test."


class TestDownload:

    def test_http_download_is_verbatim(self, httpserver, tmp_path):
        payload = gzip.compress(TEXT)
        httpserver.expect_request("/data.txt.gz").respond_with_data(payload)
        target = tmp_path / "nested" / "data.txt.gz"

        oneio.download(httpserver.url_for("/data.txt.gz"), target)
        assert target.read_bytes() == payload

    def test_download_with_session(self, httpserver, tmp_path):
        httpserver.expect_request("/private.bin", headers={"Authorization": "Bearer t"}).respond_with_data(TEXT)
        session = oneio.create_session_with_headers({"Authorization": "Bearer t"})

        oneio.download(httpserver.url_for("/private.bin"), tmp_path / "private.bin", session=session)
        assert (tmp_path / "private.bin").read_bytes() == TEXT

    def test_local_source(self, sample_files, tmp_path):
        target = tmp_path / "copy.bz2"
        oneio.download(sample_files["txt.bz2"], target)
        assert target.read_bytes() == sample_files["txt.bz2"].read_bytes()

    def test_missing_remote(self, httpserver, tmp_path):
        httpserver.expect_request("/gone").respond_with_data("", status=404)
        with pytest.raises(NetworkError):
            oneio.download(httpserver.url_for("/gone"), tmp_path / "gone")
        assert not (tmp_path / "gone").exists()

    def test_missing_local_source(self, tmp_path):
        with pytest.raises(IoError):
            oneio.download(tmp_path / "missing", tmp_path / "out")


class TestDownloadWithRetry:

    def _flaky(self, monkeypatch, failures):
        """Replace download with a stub failing `failures` times before succeeding."""
        attempts = []

        def fake_download(remote, local, session=None):
            attempts.append(remote)
            if len(attempts) <= failures:
                raise NetworkError(f"attempt {len(attempts)} failed")

        monkeypatch.setattr(pipeline, "download", fake_download)
        return attempts

    def test_succeeds_first_time(self, monkeypatch, tmp_path):
        attempts = self._flaky(monkeypatch, 0)
        oneio.download_with_retry("http://example.com/a", tmp_path / "a", 3)
        assert len(attempts) == 1

    def test_succeeds_after_failures(self, monkeypatch, tmp_path):
        attempts = self._flaky(monkeypatch, 2)
        oneio.download_with_retry("http://example.com/a", tmp_path / "a", 2)
        assert len(attempts) == 3

    def test_exhausted_raises_last_error(self, monkeypatch, tmp_path):
        attempts = self._flaky(monkeypatch, 10)
        with pytest.raises(NetworkError, match="attempt 3 failed"):
            oneio.download_with_retry("http://example.com/a", tmp_path / "a", 2)
        assert len(attempts) == 3

    def test_zero_retries(self, monkeypatch, tmp_path):
        attempts = self._flaky(monkeypatch, 1)
        with pytest.raises(NetworkError):
            oneio.download_with_retry("http://example.com/a", tmp_path / "a", 0)
        assert len(attempts) == 1

    def test_real_transfer(self, httpserver, tmp_path):
        httpserver.expect_request("/data.txt").respond_with_data(TEXT)
        oneio.download_with_retry(httpserver.url_for("/data.txt"), tmp_path / "data.txt", 1)
        assert (tmp_path / "data.txt").read_bytes() == TEXT


class TestDigest:

    def test_digest_of_raw_bytes(self, sample_files):
        path = sample_files["txt.gz"]
        assert oneio.get_sha256_digest(path) == hashlib.sha256(path.read_bytes()).hexdigest()

    def test_digest_over_http(self, httpserver):
        httpserver.expect_request("/data.txt").respond_with_data(TEXT)
        assert oneio.get_sha256_digest(httpserver.url_for("/data.txt")) == hashlib.sha256(TEXT).hexdigest()
