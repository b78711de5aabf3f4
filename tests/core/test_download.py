"""
Unit tests for download module.

Tests download functionality with mocked network requests.
"""

import hashlib

import pytest
import responses

from zigswitch.core.download import (
    DownloadProgress,
    StreamingHasher,
    download_file,
    fetch_bytes,
    format_progress,
)
from zigswitch.core.exceptions import NetworkError


class TestStreamingHasher:
    """Test StreamingHasher class."""

    def test_update_and_finalize(self):
        hasher = StreamingHasher("sha256")
        hasher.update(b"hello ")
        hasher.update(b"world")

        assert hasher.finalize() == hashlib.sha256(b"hello world").hexdigest()

    def test_unsupported_algorithm(self):
        with pytest.raises(ValueError, match="Unsupported hash algorithm"):
            StreamingHasher("md5")


class TestFormatProgress:
    """Test format_progress function."""

    def test_format_with_known_size(self):
        progress = DownloadProgress(
            bytes_downloaded=10485760,  # 10 MB
            total_bytes=104857600,  # 100 MB
            percentage=10.0,
            speed_bps=2097152,  # 2 MB/s
            eta_seconds=45,
        )

        result = format_progress(progress)

        assert "10.0/100.0 MB" in result
        assert "(10.0%)" in result
        assert "2.0 MB/s" in result
        assert "ETA: 45s" in result

    def test_format_with_unknown_size(self):
        progress = DownloadProgress(
            bytes_downloaded=10485760,
            total_bytes=10485760,
            percentage=0.0,
            speed_bps=1048576,
            eta_seconds=0,
        )

        result = str(progress)

        assert "10.0 MB" in result
        assert "1.0 MB/s" in result
        assert "ETA" not in result


class TestDownloadFile:
    """Test download_file function."""

    @responses.activate
    def test_download_returns_checksum(self, tmp_path):
        url = "https://example.com/zig.tar.xz"
        content = b"archive bytes" * 1000
        responses.add(
            responses.GET,
            url,
            body=content,
            status=200,
            headers={"content-length": str(len(content))},
        )

        result = download_file(url, tmp_path / "dl" / "zig.tar.xz")

        assert result.path.read_bytes() == content
        assert result.checksum == hashlib.sha256(content).hexdigest()
        assert result.size == len(content)

    @responses.activate
    def test_progress_callback_reports_completion(self, tmp_path):
        url = "https://example.com/zig.tar.xz"
        content = b"x" * 200000
        responses.add(
            responses.GET,
            url,
            body=content,
            status=200,
            headers={"content-length": str(len(content))},
        )
        updates = []

        download_file(url, tmp_path / "zig.tar.xz", progress_callback=updates.append)

        assert updates
        assert updates[-1].bytes_downloaded == len(content)
        assert updates[-1].percentage == 100.0

    @responses.activate
    def test_http_error_is_not_retried(self, tmp_path):
        url = "https://example.com/zig.tar.xz"
        responses.add(responses.GET, url, status=500)

        with pytest.raises(NetworkError, match="Download failed"):
            download_file(url, tmp_path / "zig.tar.xz")

        assert len(responses.calls) == 1

    def test_empty_url(self, tmp_path):
        with pytest.raises(NetworkError, match="empty"):
            download_file("", tmp_path / "zig.tar.xz")


class TestFetchBytes:
    @responses.activate
    def test_returns_body(self):
        responses.add(responses.GET, "https://example.com/index.json", body=b"{}")

        assert fetch_bytes("https://example.com/index.json") == b"{}"

    @responses.activate
    def test_http_error(self):
        responses.add(responses.GET, "https://example.com/index.json", status=404)

        with pytest.raises(NetworkError):
            fetch_bytes("https://example.com/index.json")
