"""
Release index client.

The release index is a JSON document keyed by version. Each version maps
platform keys to the archive that platform should download:

    {
      "master": {
        "version": "0.12.0-dev.1+abc",
        "x86_64-linux": {"tarball": "https://...", "shasum": "...", "size": "44"}
      },
      "0.11.0": {
        "date": "2023-08-04",
        "x86_64-linux": {"tarball": "https://...", "shasum": "...", "size": "44"}
      }
    }

The index is fetched fresh on every run. A copy is written to the root
directory for inspection, never read back.
"""

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

from zigswitch.core.download import DEFAULT_TIMEOUT, fetch_bytes
from zigswitch.core.exceptions import ManifestError, VersionNotFoundError
from zigswitch.core.filesystem import atomic_write
from zigswitch.toolchain.versions import (
    MASTER_KEY,
    ValidVersion,
    manifest_key,
    parse_version_token,
    version_sort_key,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReleaseArtifact:
    """Download metadata for one version on one platform."""

    version: str
    platform: str
    tarball: str
    shasum: str
    size: Optional[int] = None

    @property
    def filename(self) -> str:
        return self.tarball.rstrip("/").split("/")[-1] or "archive"


class ReleaseManifest:
    """Parsed release index."""

    def __init__(self, data: Dict[str, Any]):
        self.data = data

    def lookup(self, version: str, platform: str) -> ReleaseArtifact:
        """
        Find the artifact for a resolved version on a platform.

        Args:
            version: Resolved version ('latest' or 'M.m.p')
            platform: Release index platform key, e.g. 'x86_64-linux'

        Raises:
            VersionNotFoundError: If the index has no usable entry
        """
        entry = self.data.get(manifest_key(version))
        if not isinstance(entry, dict):
            raise VersionNotFoundError(version)

        record = entry.get(platform)
        if not isinstance(record, dict):
            raise VersionNotFoundError(version, platform)

        tarball = record.get("tarball")
        shasum = record.get("shasum")
        if not tarball or not shasum:
            raise VersionNotFoundError(version, platform)

        return ReleaseArtifact(
            version=version,
            platform=platform,
            tarball=tarball,
            shasum=shasum,
            size=_parse_size(record.get("size")),
        )

    def versions(self) -> List[str]:
        """Numbered releases in the index, newest first."""
        numbered = [
            key
            for key in self.data
            if isinstance(parse_version_token(key), ValidVersion)
        ]
        return sorted(numbered, key=version_sort_key, reverse=True)

    def latest_build(self) -> Optional[str]:
        """Version string of the newest development build, if published."""
        entry = self.data.get(MASTER_KEY)
        if isinstance(entry, dict):
            return entry.get("version")
        return None

    def platforms(self, version: str) -> List[str]:
        """Platform keys that have an archive for version."""
        entry = self.data.get(manifest_key(version))
        if not isinstance(entry, dict):
            return []
        return sorted(
            key for key, value in entry.items()
            if isinstance(value, dict) and "tarball" in value
        )


def _parse_size(value) -> Optional[int]:
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def parse_manifest(raw: bytes) -> ReleaseManifest:
    """
    Parse the raw index body.

    Raises:
        ManifestError: If the body is not a JSON object
    """
    try:
        data = json.loads(raw)
    except (ValueError, UnicodeDecodeError) as e:
        raise ManifestError(f"Release index is not valid JSON: {e}") from e

    if not isinstance(data, dict):
        raise ManifestError("Release index must be a JSON object")
    return ReleaseManifest(data)


class ReleaseIndexClient:
    """
    Fetches the release index.

    Example:
        >>> client = ReleaseIndexClient(DEFAULT_INDEX_URL, layout.index_file)
        >>> artifact = client.fetch().lookup("0.11.0", "x86_64-linux")
    """

    def __init__(self, url: str, scratch_file: Optional[Path] = None, timeout: int = DEFAULT_TIMEOUT):
        self.url = url
        self.scratch_file = scratch_file
        self.timeout = timeout

    def fetch(self) -> ReleaseManifest:
        """
        Download and parse the release index.

        Raises:
            NetworkError: If the request fails (no retry)
            ManifestError: If the response is not a JSON object
        """
        logger.info(f"Fetching release index from {self.url}")
        raw = fetch_bytes(self.url, timeout=self.timeout)

        if self.scratch_file is not None:
            atomic_write(self.scratch_file, raw)

        return parse_manifest(raw)
