"""
Unit tests for the release index client.
"""

import json

import pytest
import responses

from zigswitch.core.exceptions import ManifestError, NetworkError, VersionNotFoundError
from zigswitch.toolchain.manifest import (
    ReleaseArtifact,
    ReleaseIndexClient,
    ReleaseManifest,
    parse_manifest,
)

INDEX_URL = "https://ziglang.org/download/index.json"

SAMPLE_INDEX = {
    "master": {
        "version": "0.12.0-dev.1+abcdef",
        "x86_64-linux": {
            "tarball": "https://ziglang.org/builds/zig-linux-x86_64-0.12.0-dev.1.tar.xz",
            "shasum": "aa" * 32,
            "size": "44000000",
        },
    },
    "0.11.0": {
        "date": "2023-08-04",
        "x86_64-linux": {
            "tarball": "https://ziglang.org/download/0.11.0/zig-linux-x86_64-0.11.0.tar.xz",
            "shasum": "bb" * 32,
            "size": "44961892",
        },
        "aarch64-macos": {
            "tarball": "https://ziglang.org/download/0.11.0/zig-macos-aarch64-0.11.0.tar.xz",
            "shasum": "cc" * 32,
            "size": "40000000",
        },
    },
    "0.7.0": {
        "x86_64-linux": {
            "tarball": "https://ziglang.org/download/0.7.0/zig-linux-x86_64-0.7.0.tar.xz",
            "shasum": "dd" * 32,
        },
    },
    "0.10.1": {
        "aarch64-macos": {
            "tarball": "https://ziglang.org/download/0.10.1/zig-macos-aarch64-0.10.1.tar.xz",
            "shasum": "ee" * 32,
        },
    },
}


@pytest.fixture
def manifest():
    return ReleaseManifest(SAMPLE_INDEX)


class TestLookup:
    """Test ReleaseManifest.lookup."""

    def test_lookup_numbered_version(self, manifest):
        artifact = manifest.lookup("0.11.0", "x86_64-linux")

        assert artifact == ReleaseArtifact(
            version="0.11.0",
            platform="x86_64-linux",
            tarball=SAMPLE_INDEX["0.11.0"]["x86_64-linux"]["tarball"],
            shasum="bb" * 32,
            size=44961892,
        )
        assert artifact.filename == "zig-linux-x86_64-0.11.0.tar.xz"

    def test_lookup_latest_uses_master_key(self, manifest):
        artifact = manifest.lookup("latest", "x86_64-linux")

        assert artifact.version == "latest"
        assert artifact.shasum == "aa" * 32

    def test_lookup_without_size(self, manifest):
        assert manifest.lookup("0.7.0", "x86_64-linux").size is None

    def test_unknown_version(self, manifest):
        with pytest.raises(VersionNotFoundError, match="0.3.0"):
            manifest.lookup("0.3.0", "x86_64-linux")

    def test_unknown_platform(self, manifest):
        with pytest.raises(VersionNotFoundError) as exc_info:
            manifest.lookup("0.10.1", "x86_64-linux")

        assert exc_info.value.platform == "x86_64-linux"
        assert "for x86_64-linux" in str(exc_info.value)

    def test_entry_without_shasum(self):
        manifest = ReleaseManifest(
            {"0.7.0": {"x86_64-linux": {"tarball": "https://example.com/z.tar.xz"}}}
        )
        with pytest.raises(VersionNotFoundError):
            manifest.lookup("0.7.0", "x86_64-linux")


class TestListing:
    def test_versions_newest_first(self, manifest):
        assert manifest.versions() == ["0.11.0", "0.10.1", "0.7.0"]

    def test_latest_build(self, manifest):
        assert manifest.latest_build() == "0.12.0-dev.1+abcdef"

    def test_platforms(self, manifest):
        assert manifest.platforms("0.11.0") == ["aarch64-macos", "x86_64-linux"]
        assert manifest.platforms("0.3.0") == []


class TestParseManifest:
    def test_invalid_json(self):
        with pytest.raises(ManifestError, match="not valid JSON"):
            parse_manifest(b"<html>oops</html>")

    def test_non_object(self):
        with pytest.raises(ManifestError, match="JSON object"):
            parse_manifest(b"[1, 2, 3]")


class TestReleaseIndexClient:
    """Test fetching the index over HTTP."""

    @responses.activate
    def test_fetch_writes_scratch_file(self, tmp_path):
        body = json.dumps(SAMPLE_INDEX)
        responses.add(responses.GET, INDEX_URL, body=body, status=200)
        scratch = tmp_path / "index.json"

        manifest = ReleaseIndexClient(INDEX_URL, scratch).fetch()

        assert manifest.lookup("0.11.0", "x86_64-linux").shasum == "bb" * 32
        assert scratch.read_text() == body

    @responses.activate
    def test_fetch_overwrites_previous_scratch_file(self, tmp_path):
        scratch = tmp_path / "index.json"
        scratch.write_text('{"stale": true}')
        responses.add(responses.GET, INDEX_URL, json={"0.7.0": {}}, status=200)

        ReleaseIndexClient(INDEX_URL, scratch).fetch()

        assert json.loads(scratch.read_text()) == {"0.7.0": {}}

    @responses.activate
    def test_http_error_raises_network_error(self, tmp_path):
        responses.add(responses.GET, INDEX_URL, status=503)

        with pytest.raises(NetworkError):
            ReleaseIndexClient(INDEX_URL, tmp_path / "index.json").fetch()

        assert len(responses.calls) == 1  # no retry

    @responses.activate
    def test_connection_error_raises_network_error(self):
        # No registered response: responses raises ConnectionError
        with pytest.raises(NetworkError, match="Failed to fetch"):
            ReleaseIndexClient(INDEX_URL).fetch()
