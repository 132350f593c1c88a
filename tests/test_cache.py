"""Tests for the read-through cache."""

import gzip
import stat

import pytest

import oneio
from oneio import CacheError, NetworkError

TEXT = b"OneIO test file.\nThis is a test."


def _gets(httpserver, uri):
    return [req for req, _ in httpserver.log if req.method == "GET" and req.path == uri]


class TestCacheReader:

    def test_first_read_populates_cache(self, httpserver, tmp_path):
        gz_data = gzip.compress(TEXT)
        httpserver.expect_request("/data.txt.gz").respond_with_data(gz_data)
        cache_dir = tmp_path / "cache"

        with oneio.get_cache_reader(httpserver.url_for("/data.txt.gz"), cache_dir) as reader:
            assert reader.read() == TEXT

        # stored verbatim, still compressed
        assert (cache_dir / "data.txt.gz").read_bytes() == gz_data
        assert len(_gets(httpserver, "/data.txt.gz")) == 1

    def test_hit_does_not_contact_source(self, httpserver, tmp_path):
        httpserver.expect_request("/data.txt.gz").respond_with_data(gzip.compress(TEXT))
        url = httpserver.url_for("/data.txt.gz")

        for _ in range(3):
            with oneio.get_cache_reader(url, tmp_path) as reader:
                assert reader.read() == TEXT

        assert len(_gets(httpserver, "/data.txt.gz")) == 1

    def test_force_refreshes(self, httpserver, tmp_path):
        httpserver.expect_request("/data.txt").respond_with_data(TEXT)
        url = httpserver.url_for("/data.txt")
        (tmp_path / "data.txt").write_bytes(b"stale")

        with oneio.get_cache_reader(url, tmp_path) as reader:
            assert reader.read() == b"stale"
        assert _gets(httpserver, "/data.txt") == []

        with oneio.get_cache_reader(url, tmp_path, force_cache=True) as reader:
            assert reader.read() == TEXT
        assert len(_gets(httpserver, "/data.txt") ) == 1
        assert (tmp_path / "data.txt").read_bytes() == TEXT

    def test_custom_cache_file_name(self, httpserver, tmp_path):
        httpserver.expect_request("/data.txt.gz").respond_with_data(gzip.compress(TEXT))

        reader = oneio.get_cache_reader(httpserver.url_for("/data.txt.gz"), tmp_path, "renamed.gz")
        with reader:
            assert reader.read() == TEXT
        assert (tmp_path / "renamed.gz").exists()
        assert not (tmp_path / "data.txt.gz").exists()

    def test_cache_dir_created(self, sample_files, tmp_path, test_text):
        cache_dir = tmp_path / "a" / "b"
        with oneio.get_cache_reader(sample_files["txt.zst"], cache_dir) as reader:
            assert reader.read().decode() == test_text
        assert (cache_dir / "test_data.txt.zst").exists()

    def test_failed_fetch_leaves_no_file(self, httpserver, tmp_path):
        httpserver.expect_request("/gone.txt").respond_with_data("", status=404)

        with pytest.raises(NetworkError):
            oneio.get_cache_reader(httpserver.url_for("/gone.txt"), tmp_path)
        assert list(tmp_path.iterdir()) == []

    def test_cache_dir_is_a_file(self, sample_files, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_bytes(b"")
        with pytest.raises(CacheError):
            oneio.get_cache_reader(sample_files["txt"], blocker)

    def test_cache_file_mode_matches_plain_files(self, sample_files, tmp_path):
        cache_dir = tmp_path / "cache"
        oneio.get_cache_reader(sample_files["txt.gz"], cache_dir).close()

        with oneio.get_writer_raw(tmp_path / "plain.bin") as f:
            f.write(b"x")

        cached_mode = stat.S_IMODE((cache_dir / "test_data.txt.gz").stat().st_mode)
        assert cached_mode == stat.S_IMODE((tmp_path / "plain.bin").stat().st_mode)
