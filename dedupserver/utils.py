"""Utility helper functions for the dedup server."""

import mimetypes
import ntpath
import posixpath
import uuid
from typing import Optional

from common.constants import MANIFEST_FILE_SUFFIX, MAX_FILENAME_BYTES, UNNAMED_UPLOAD
from common.exceptions import InvalidInputError


def generate_request_id() -> str:
    """
    Generate a new UUID4 string.

    Returns:
        UUID4 string
    """
    return str(uuid.uuid4())


def safe_name(name: Optional[str]) -> str:
    """
    Reduce a client-supplied filename to a safe basename.

    Both '/' and '\\' are treated as separators so no path component
    survives. A missing name becomes 'unnamed'. The manifest file name
    (basename plus suffix) must fit in MAX_FILENAME_BYTES.

    Args:
        name: Filename as supplied by the client

    Returns:
        Basename usable as a manifest key

    Raises:
        InvalidInputError: If nothing usable remains
    """
    if name is None or name == "":
        return UNNAMED_UPLOAD

    base = posixpath.basename(ntpath.basename(name)).strip()
    if base in ("", ".", "..") or "\x00" in base:
        raise InvalidInputError(f"Filename {name!r} cannot be sanitized to a safe basename")
    if len(base.encode('utf-8', errors='surrogatepass')) + len(MANIFEST_FILE_SUFFIX) > MAX_FILENAME_BYTES:
        raise InvalidInputError(
            f"Filename {base[:32]!r}... is too long (max {MAX_FILENAME_BYTES - len(MANIFEST_FILE_SUFFIX)} bytes)"
        )
    return base


def is_safe_name(name: str) -> bool:
    """Return whether name is already a safe basename."""
    try:
        return bool(name) and safe_name(name) == name
    except InvalidInputError:
        return False


def guess_media_type(filename: str) -> str:
    """Guess a Content-Type from filename, falling back to application/octet-stream."""
    media_type, _ = mimetypes.guess_type(filename)
    return media_type or "application/octet-stream"
