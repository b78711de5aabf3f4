"""
Toolchain management for zigswitch.

Provides version resolution, the release index client, checksum-gated
installation and the active-version switch.
"""

from zigswitch.toolchain.fetcher import FetchResult, ToolchainFetcher
from zigswitch.toolchain.linking import ToolchainLinkManager
from zigswitch.toolchain.manifest import (
    ReleaseArtifact,
    ReleaseIndexClient,
    ReleaseManifest,
    parse_manifest,
)
from zigswitch.toolchain.profile import PROFILE_MARKER, ProfileEditor
from zigswitch.toolchain.store import InstallStore
from zigswitch.toolchain.versions import (
    LATEST,
    InvalidVersion,
    ValidVersion,
    manifest_key,
    parse_version_token,
    resolve_version,
)

__all__ = [
    "FetchResult",
    "ToolchainFetcher",
    "ToolchainLinkManager",
    "ReleaseArtifact",
    "ReleaseIndexClient",
    "ReleaseManifest",
    "parse_manifest",
    "PROFILE_MARKER",
    "ProfileEditor",
    "InstallStore",
    "LATEST",
    "InvalidVersion",
    "ValidVersion",
    "manifest_key",
    "parse_version_token",
    "resolve_version",
]
