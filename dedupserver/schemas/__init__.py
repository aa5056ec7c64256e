"""Pydantic schemas for API responses."""

from dedupserver.schemas.common import ErrorResponse
from dedupserver.schemas.files import (
    MESSAGE_DUPLICATE,
    MESSAGE_NEW_CHUNKS,
    HealthResponse,
    UploadResponse,
)

__all__ = [
    "ErrorResponse",
    "HealthResponse",
    "UploadResponse",
    "MESSAGE_DUPLICATE",
    "MESSAGE_NEW_CHUNKS",
]
