"""
Core infrastructure for zigswitch: directories, platform detection,
downloads, verification, filesystem helpers and locking.
"""

from zigswitch.core.directory import RootLayout, get_root_dir
from zigswitch.core.exceptions import (
    ArchiveError,
    ChecksumMismatchError,
    ConfigError,
    InvalidVersionError,
    LockError,
    ManifestError,
    NetworkError,
    PrerequisiteError,
    UnsupportedPlatformError,
    VersionNotFoundError,
    ZigSwitchError,
)
from zigswitch.core.platform import PlatformInfo, detect_platform

__all__ = [
    "RootLayout",
    "get_root_dir",
    "ArchiveError",
    "ChecksumMismatchError",
    "ConfigError",
    "InvalidVersionError",
    "LockError",
    "ManifestError",
    "NetworkError",
    "PrerequisiteError",
    "UnsupportedPlatformError",
    "VersionNotFoundError",
    "ZigSwitchError",
    "PlatformInfo",
    "detect_platform",
]
