"""File operation API routes: upload, download, list."""

from typing import List, Optional

from fastapi import APIRouter, Depends, File, Request, UploadFile, status
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import Response

from common.constants import LEGACY_UPLOAD_FIELD_NAME, UPLOAD_FIELD_NAME
from common.exceptions import InvalidInputError, PayloadTooLargeError
from common.logging_config import get_logger
from dedupserver.schemas import MESSAGE_DUPLICATE, MESSAGE_NEW_CHUNKS, ErrorResponse, UploadResponse
from dedupserver.store import DedupStore
from dedupserver.utils import guess_media_type, safe_name

logger = get_logger(__name__)

router = APIRouter(tags=["Files"])


def get_store(request: Request) -> DedupStore:
    """
    FastAPI dependency returning the store opened at startup.
    """
    return request.app.state.store


@router.post(
    "/upload",
    response_model=UploadResponse,
    status_code=status.HTTP_200_OK,
    responses={400: {"model": ErrorResponse}, 413: {"model": ErrorResponse}},
)
async def upload_file(
    file: Optional[UploadFile] = File(None, alias=UPLOAD_FIELD_NAME),
    legacy_file: Optional[UploadFile] = File(None, alias=LEGACY_UPLOAD_FIELD_NAME),
    store: DedupStore = Depends(get_store),
):
    """
    Upload a file; only chunks not already stored are written.

    Parameters:
        - file: File to upload (multipart/form-data); 'pdfFile' is accepted too

    Returns:
        - message: whether new chunks were written
        - filename: sanitized name the file is stored under
        - chunk_count: number of chunks in the file
        - new_chunks_written: True if at least one chunk blob was created
        - signature: chunk-sequence signature

    Raises:
        - 400: No file, empty file, or unusable filename
        - 413: File larger than the configured limit
        - 500: Chunk or manifest write failed
    """
    upload = file or legacy_file
    if upload is None:
        raise InvalidInputError(f'No file provided (use field "{UPLOAD_FIELD_NAME}")')

    limit = store.config.max_upload_bytes
    content = await upload.read(limit + 1)
    if len(content) > limit:
        raise PayloadTooLargeError(f"File exceeds maximum upload size of {limit} bytes")

    result = await run_in_threadpool(store.ingest, upload.filename, content)

    return UploadResponse(
        message=MESSAGE_NEW_CHUNKS if result.new_chunks_written else MESSAGE_DUPLICATE,
        filename=result.filename,
        chunk_count=result.chunk_count,
        new_chunks_written=result.new_chunks_written,
        signature=result.signature,
    )


@router.get(
    "/download/{filename}",
    responses={404: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def download_file(filename: str, store: DedupStore = Depends(get_store)):
    """
    Reconstruct and return a stored file.

    Parameters:
        - filename: Name the file was uploaded under

    Returns:
        - The original bytes as an attachment

    Raises:
        - 404: Unknown filename
        - 500: A referenced chunk is missing or damaged
    """
    name = safe_name(filename)
    data = await run_in_threadpool(store.reconstruct, name)
    quoted = name.replace('\\', '\\\\').replace('"', '\\"')
    return Response(
        content=data,
        media_type=guess_media_type(name),
        headers={"Content-Disposition": f'attachment; filename="{quoted}"'},
    )


@router.get("/list", response_model=List[str])
async def list_files(store: DedupStore = Depends(get_store)):
    """
    List every filename the store currently remembers, sorted.
    """
    return sorted(store.list_filenames())
