"""
Platform detection for zigswitch.

The release index keys artifacts by "<arch>-<os>" strings such as
'x86_64-linux' or 'aarch64-macos'. This module maps the running host onto
that naming.

Usage:
    from zigswitch.core.platform import detect_platform

    info = detect_platform()
    print(info.platform_string())  # e.g. 'x86_64-linux'
"""

import functools
import platform
from dataclasses import dataclass

from zigswitch.core.exceptions import UnsupportedPlatformError


@dataclass(frozen=True)
class PlatformInfo:
    """
    Host platform information.

    Attributes:
        os: Operating system as named in the release index ('linux', 'macos', 'windows', 'freebsd')
        arch: CPU architecture as named in the release index ('x86_64', 'aarch64', ...)
    """

    os: str
    arch: str

    def platform_string(self) -> str:
        """
        Get the release index key for this platform.

        Example:
            >>> PlatformInfo('linux', 'x86_64').platform_string()
            'x86_64-linux'
        """
        return f"{self.arch}-{self.os}"

    def __str__(self) -> str:
        return self.platform_string()


_OS_NAMES = {
    "linux": "linux",
    "darwin": "macos",
    "windows": "windows",
    "freebsd": "freebsd",
}

_ARCH_NAMES = {
    "x86_64": "x86_64",
    "amd64": "x86_64",
    "aarch64": "aarch64",
    "arm64": "aarch64",
    "armv7l": "armv7a",
    "i386": "x86",
    "i686": "x86",
    "x86": "x86",
    "riscv64": "riscv64",
    "ppc64le": "powerpc64le",
}


@functools.lru_cache(maxsize=1)
def detect_platform() -> PlatformInfo:
    """
    Detect the current platform.

    This function is cached - it only runs detection once per process.

    Raises:
        UnsupportedPlatformError: If the OS or architecture is unknown
    """
    return PlatformInfo(os=_detect_os(), arch=_detect_architecture())


def _detect_os() -> str:
    system = platform.system().lower()
    try:
        return _OS_NAMES[system]
    except KeyError:
        raise UnsupportedPlatformError(f"Unsupported operating system: {system}")


def _detect_architecture() -> str:
    machine = platform.machine().lower()
    try:
        return _ARCH_NAMES[machine]
    except KeyError:
        raise UnsupportedPlatformError(f"Unsupported architecture: {machine}")


def clear_platform_cache():
    """Clear cached platform detection (used by tests)."""
    detect_platform.cache_clear()
