"""
Pytest configuration and shared fixtures for zigswitch tests.
"""

import hashlib
import io
import json
import tarfile
from pathlib import Path
from typing import Dict, Optional

import pytest

from zigswitch.core.directory import RootLayout
from zigswitch.core.platform import clear_platform_cache
from zigswitch.toolchain.store import InstallStore

PLATFORM = "x86_64-linux"
INDEX_URL = "https://ziglang.org/download/index.json"
DOWNLOAD_BASE = "https://ziglang.org/download"


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "unit: fast tests without filesystem side effects")
    config.addinivalue_line(
        "markers",
        "integration: marks tests that drive the full CLI against a mocked index",
    )


# ============================================================================
# Release Builders
# ============================================================================


def build_tarball(top_dir: str, files: Optional[Dict[str, str]] = None) -> bytes:
    """Build an in-memory .tar.xz with every file under a single top directory."""
    files = files or {"zig": "#!/bin/sh\necho zig\n", "lib/std/std.zig": "// std\n"}
    buffer = io.BytesIO()
    with tarfile.open(fileobj=buffer, mode="w:xz") as tar:
        for name, content in files.items():
            data = content.encode("utf-8")
            info = tarfile.TarInfo(name=f"{top_dir}/{name}")
            info.size = len(data)
            info.mode = 0o755
            tar.addfile(info, io.BytesIO(data))
    return buffer.getvalue()


def sha256(data: bytes) -> str:
    return hashlib.sha256(data).hexdigest()


class FakeRelease:
    """A release archive plus the index entry describing it."""

    def __init__(self, version: str, platform: str = PLATFORM, files: Optional[Dict[str, str]] = None):
        self.version = version
        self.platform = platform
        label = "master" if version == "latest" else version
        self.filename = f"zig-{platform}-{label}.tar.xz"
        self.url = f"{DOWNLOAD_BASE}/{label}/{self.filename}"
        self.data = build_tarball(f"zig-{platform}-{label}", files)
        self.shasum = sha256(self.data)

    def index_entry(self, shasum: Optional[str] = None) -> dict:
        return {
            self.platform: {
                "tarball": self.url,
                "shasum": shasum or self.shasum,
                "size": str(len(self.data)),
            }
        }


def build_index(*releases: FakeRelease, **shasum_overrides) -> dict:
    """Release index JSON for the given releases."""
    index = {}
    for release in releases:
        key = "master" if release.version == "latest" else release.version
        entry = release.index_entry(shasum_overrides.get(key))
        if key == "master":
            entry["version"] = "0.12.0-dev.1+abcdef"
        index.setdefault(key, {}).update(entry)
    return index


# ============================================================================
# Shared Test Fixtures
# ============================================================================


@pytest.fixture
def make_release():
    """Factory for FakeRelease objects."""
    return FakeRelease


@pytest.fixture
def make_index():
    """Factory for release index dicts."""
    return build_index


@pytest.fixture
def index_body():
    """Serialize a release index dict."""
    return lambda index: json.dumps(index)


@pytest.fixture
def layout(tmp_path: Path) -> RootLayout:
    """Prepared zigswitch root directory."""
    return RootLayout(tmp_path / "zigroot").ensure()


@pytest.fixture
def store(layout: RootLayout) -> InstallStore:
    return InstallStore(layout)


@pytest.fixture
def zig_env(tmp_path: Path, monkeypatch) -> Path:
    """
    Isolated environment for CLI runs.

    Returns the root directory. HOME, PATH, the profile and the platform are
    all pinned so tests never touch the real user environment.
    """
    home = tmp_path / "home"
    home.mkdir()
    root = tmp_path / "zigroot"

    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("ZIGSWITCH_ROOT", str(root))
    monkeypatch.setenv("ZIGSWITCH_PLATFORM", PLATFORM)
    monkeypatch.setenv("ZIGSWITCH_PROFILE", str(home / ".profile"))
    monkeypatch.setenv("PATH", "/usr/bin:/bin")
    for var in ("ZIGSWITCH_INDEX_URL", "SHELL"):
        monkeypatch.delenv(var, raising=False)
    return root


@pytest.fixture(autouse=True)
def _reset_platform_cache():
    clear_platform_cache()
    yield
    clear_platform_cache()
