"""
Centralized exception hierarchy for zigswitch.

Every error that can abort a run derives from ZigSwitchError and carries the
process exit code the CLI should return for it.
"""


# ============================================================================
# Base Exceptions
# ============================================================================


class ZigSwitchError(Exception):
    """Base exception for all zigswitch errors."""

    exit_code = 1


# ============================================================================
# Environment / Prerequisite Exceptions
# ============================================================================


class PrerequisiteError(ZigSwitchError):
    """Raised when required tooling is missing from the host."""

    pass


class UnsupportedPlatformError(PrerequisiteError):
    """Raised when the host OS/architecture has no release artifacts."""

    pass


class ConfigError(ZigSwitchError):
    """Raised when the configuration file or environment is invalid."""

    pass


class LockError(ZigSwitchError):
    """Raised when another zigswitch process holds the root directory lock."""

    pass


# ============================================================================
# Version Exceptions
# ============================================================================


class InvalidVersionError(ZigSwitchError):
    """Unrecognized version token. Reported as usage, not as a failure."""

    exit_code = 0

    def __init__(self, token: str):
        self.token = token
        super().__init__(f"Unrecognized version: {token}")


# ============================================================================
# Release Index Exceptions
# ============================================================================


class NetworkError(ZigSwitchError):
    """Raised when fetching the index or a tarball fails."""

    pass


class ManifestError(ZigSwitchError):
    """Raised when the release index cannot be parsed."""

    pass


class VersionNotFoundError(ManifestError):
    """Raised when the release index has no artifact for a version/platform."""

    def __init__(self, version: str, platform: str = ""):
        self.version = version
        self.platform = platform
        msg = f"Version {version} not found in release index"
        if platform:
            msg += f" for {platform}"
        super().__init__(msg)


# ============================================================================
# Install Exceptions
# ============================================================================


class ChecksumMismatchError(ZigSwitchError):
    """Raised when a downloaded archive does not match the index checksum."""

    def __init__(self, filename: str, expected: str, actual: str):
        self.filename = filename
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Checksum mismatch for {filename}: expected {expected}, got {actual}. "
            "The download may be corrupt, please run again."
        )


class ArchiveError(ZigSwitchError):
    """Raised when a release archive cannot be extracted safely."""

    pass
