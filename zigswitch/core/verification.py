"""
Hash verification helpers.

Checksums in the release index are SHA-256 hex strings. Comparison is
case-insensitive and constant-time.
"""

import hashlib
import logging
import secrets
from typing import Optional

logger = logging.getLogger(__name__)

SUPPORTED_ALGORITHMS = ("sha256", "sha512")


def new_hasher(algorithm: str = "sha256"):
    """
    Create a hashlib object for a supported algorithm.

    Raises:
        ValueError: If algorithm is not supported
    """
    algorithm = algorithm.lower()
    if algorithm not in SUPPORTED_ALGORITHMS:
        raise ValueError(f"Unsupported hash algorithm: {algorithm}")
    return hashlib.new(algorithm)


def normalize_checksum(value: Optional[str]) -> str:
    """Lower-case and strip a checksum string. None becomes ''."""
    return (value or "").strip().lower()


def checksums_match(actual: Optional[str], expected: Optional[str]) -> bool:
    """
    Compare two checksum strings in constant time.

    Empty values never match, so a missing record or a missing index entry
    always counts as a mismatch.

    Example:
        >>> checksums_match("ABC123", "abc123")
        True
        >>> checksums_match(None, "abc123")
        False
    """
    a = normalize_checksum(actual)
    b = normalize_checksum(expected)
    if not a or not b:
        return False
    return secrets.compare_digest(a.encode("utf-8"), b.encode("utf-8"))
