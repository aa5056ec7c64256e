"""Pydantic schemas for upload/download/list endpoints."""

from pydantic import BaseModel

MESSAGE_NEW_CHUNKS = "Upload stored (new chunks written)"
MESSAGE_DUPLICATE = "Duplicate content - no chunk rewrite needed"


class UploadResponse(BaseModel):
    """Response model for file upload."""
    message: str
    filename: str
    chunk_count: int
    new_chunks_written: bool
    signature: str


class HealthResponse(BaseModel):
    """Response model for the health check."""
    status: str
    files: int
    signatures: int
    chunks: int
