"""Entry point for the dedup server."""

import time
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse

from common.exceptions import (
    CorruptStoreError,
    DedupStoreError,
    FileNotFoundInStoreError,
    InvalidInputError,
    PayloadTooLargeError,
)
from common.logging_config import reset_request_id, set_request_id, setup_logging
from dedupserver.config import SERVER_HOST, SERVER_PORT, StoreConfig
from dedupserver.routes.file_routes import router as file_router
from dedupserver.schemas import ErrorResponse, HealthResponse
from dedupserver.store import DedupStore
from dedupserver.utils import generate_request_id

logger = setup_logging('dedupserver')


def _error_response(status_code: int, exc: Exception, code: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=ErrorResponse(detail=str(exc), code=code).model_dump())


def create_app(config: Optional[StoreConfig] = None, store: Optional[DedupStore] = None) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        config: Store settings; read from the environment when omitted
        store: Already opened store to serve instead of opening one at startup

    Returns:
        Configured FastAPI app
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if getattr(app.state, "store", None) is None:
            logger.info("Dedup server starting up...")
            app.state.store = DedupStore.open(config or StoreConfig.from_env())
        yield
        logger.info("Dedup server shutting down")

    app = FastAPI(
        title="Dedup Store",
        description="Single-node chunk-level deduplicating file store",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.store = store

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        """
        Middleware to log all HTTP requests and responses.
        """
        request_id = request.headers.get("X-Request-ID") or generate_request_id()
        request.state.request_id = request_id
        token = set_request_id(request_id)
        start_time = time.time()

        logger.info(f"Request started: {request.method} {request.url.path}")
        try:
            response = await call_next(request)
            duration = time.time() - start_time
            logger.info(
                f"Request completed: {request.method} {request.url.path} "
                f"status={response.status_code} duration={duration:.3f}s"
            )
            response.headers["X-Request-ID"] = request_id
            return response
        finally:
            reset_request_id(token)

    @app.exception_handler(PayloadTooLargeError)
    async def payload_too_large_handler(request: Request, exc: PayloadTooLargeError):
        logger.warning(f"Payload too large: {exc} path={request.url.path}")
        return _error_response(status.HTTP_413_REQUEST_ENTITY_TOO_LARGE, exc, "PAYLOAD_TOO_LARGE")

    @app.exception_handler(InvalidInputError)
    async def invalid_input_handler(request: Request, exc: InvalidInputError):
        logger.warning(f"Invalid input: {exc} path={request.url.path}")
        return _error_response(status.HTTP_400_BAD_REQUEST, exc, "INVALID_INPUT")

    @app.exception_handler(FileNotFoundInStoreError)
    async def file_not_found_handler(request: Request, exc: FileNotFoundInStoreError):
        logger.warning(f"File not found: {exc} path={request.url.path}")
        return _error_response(status.HTTP_404_NOT_FOUND, exc, "FILE_NOT_FOUND")

    @app.exception_handler(CorruptStoreError)
    async def corrupt_store_handler(request: Request, exc: CorruptStoreError):
        logger.error(f"Corrupt store: {exc} path={request.url.path}")
        return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, exc, "CORRUPT_STORE")

    @app.exception_handler(DedupStoreError)
    async def store_exception_handler(request: Request, exc: DedupStoreError):
        logger.error(f"Store exception: {exc} path={request.url.path}", exc_info=True)
        return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, exc, "INTERNAL_ERROR")

    app.include_router(file_router)

    @app.get("/health", response_model=HealthResponse)
    async def health_check(request: Request):
        """
        Health check endpoint. Returns index sizes recovered at startup plus
        everything ingested since, and the number of chunk blobs on disk.
        """
        counts = await run_in_threadpool(request.app.state.store.stats)
        return HealthResponse(status="healthy", **counts)

    return app


app = create_app()


def main() -> None:
    """
    Start the FastAPI server with uvicorn.
    """
    uvicorn.run(
        "dedupserver.main:app",
        host=SERVER_HOST,
        port=SERVER_PORT,
    )


if __name__ == "__main__":
    main()
