"""
Unit tests for hash verification helpers.
"""

import hashlib

import pytest

from zigswitch.core.verification import checksums_match, new_hasher, normalize_checksum


def test_new_hasher_sha256():
    hasher = new_hasher("SHA256")
    hasher.update(b"test content")
    assert hasher.hexdigest() == hashlib.sha256(b"test content").hexdigest()


def test_new_hasher_sha512():
    assert new_hasher("sha512").name == "sha512"


def test_new_hasher_unsupported_algorithm():
    with pytest.raises(ValueError):
        new_hasher("crc32")


@pytest.mark.parametrize(
    "actual,expected,result",
    [
        ("abc123", "abc123", True),
        ("ABC123", "abc123", True),
        (" abc123\n", "abc123", True),
        ("abc123", "abc124", False),
        (None, "abc123", False),
        ("", "", False),
        ("abc123", None, False),
    ],
)
def test_checksums_match(actual, expected, result):
    assert checksums_match(actual, expected) is result


def test_normalize_checksum():
    assert normalize_checksum("  ABC\n") == "abc"
    assert normalize_checksum(None) == ""
