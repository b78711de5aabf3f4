"""
Version token parsing and resolution.

A user-supplied token is one of:
    latest      the newest development build
    M.m.p       a numbered release, used as-is
    M.m         shorthand for M.m.0

Components may have any number of digits ("0.10", "0.12.1").
"""

import re
from dataclasses import dataclass
from typing import Optional, Union

from zigswitch.core.exceptions import InvalidVersionError

LATEST = "latest"

# Release index key holding the newest development build
MASTER_KEY = "master"

_VERSION_RE = re.compile(r"^(\d+)\.(\d+)(?:\.(\d+))?$")


@dataclass(frozen=True)
class ValidVersion:
    """A numbered release version."""

    major: int
    minor: int
    patch: int

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"


@dataclass(frozen=True)
class InvalidVersion:
    """A token that is neither 'latest' nor a dotted version."""

    raw_token: str


ParsedVersion = Union[ValidVersion, InvalidVersion]


def parse_version_token(token: str) -> ParsedVersion:
    """
    Parse a dotted version token.

    Example:
        >>> parse_version_token("0.7")
        ValidVersion(major=0, minor=7, patch=0)
        >>> parse_version_token("0.x")
        InvalidVersion(raw_token='0.x')
    """
    match = _VERSION_RE.match(token.strip())
    if not match:
        return InvalidVersion(token)
    major, minor, patch = match.groups()
    return ValidVersion(int(major), int(minor), int(patch or 0))


def resolve_version(token: Optional[str], current: Optional[str]) -> str:
    """
    Map a user token to a canonical version identifier.

    Args:
        token: Token from the command line, or None when absent
        current: Version the active symlink targets, or None

    Returns:
        'latest' or 'M.m.p'

    Raises:
        InvalidVersionError: If the token is not recognized
    """
    if token is None:
        return current or LATEST

    if token == LATEST:
        return LATEST

    parsed = parse_version_token(token)
    if isinstance(parsed, InvalidVersion):
        raise InvalidVersionError(parsed.raw_token)
    return str(parsed)


def manifest_key(version: str) -> str:
    """Release index key for a resolved version."""
    return MASTER_KEY if version == LATEST else version


def version_sort_key(version: str):
    """Sort key placing numbered versions in numeric order and 'latest' last."""
    parsed = parse_version_token(version)
    if isinstance(parsed, ValidVersion):
        return (0, parsed.major, parsed.minor, parsed.patch, "")
    return (1, 0, 0, 0, version)
