"""Provides SHA-256 content digest calculation and verification helpers."""

import hashlib
import re

from common.constants import DIGEST_HEX_LENGTH

_DIGEST_RE = re.compile(rf"^[0-9a-f]{{{DIGEST_HEX_LENGTH}}}$")


def compute_digest(data: bytes) -> str:
    """
    Compute SHA-256 digest for given data.

    Args:
        data: Bytes to hash

    Returns:
        Lowercase hexadecimal SHA-256 digest
    """
    return hashlib.sha256(data).hexdigest()


def verify_digest(data: bytes, expected: str) -> bool:
    """
    Verify that data hashes to the expected digest.

    Args:
        data: Bytes to verify
        expected: Expected SHA-256 digest (hex string)

    Returns:
        True if digest matches, False otherwise
    """
    return compute_digest(data) == expected


def is_valid_digest(value) -> bool:
    """Return whether value looks like a hex SHA-256 digest."""
    return isinstance(value, str) and bool(_DIGEST_RE.match(value))
