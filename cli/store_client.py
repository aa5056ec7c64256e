"""HTTP client for communicating with the dedup server."""

import os
import time
import uuid
from pathlib import Path
from typing import Optional
from urllib.parse import quote

import httpx

from cli.config import Config
from cli.constants import DOWNLOADS_DIR
from cli.utils import end_progress, format_file_size, show_progress
from common.constants import UNNAMED_UPLOAD, UPLOAD_FIELD_NAME
from common.logging_config import get_logger

logger = get_logger(__name__)

ERROR_MESSAGES = {
    'INVALID_INPUT': 'The server rejected the upload (empty file or unusable filename).',
    'PAYLOAD_TOO_LARGE': 'File is larger than the server accepts.',
    'FILE_NOT_FOUND': 'File not found on server.',
    'CORRUPT_STORE': 'The server is missing data for this file; it cannot be reconstructed.',
}

STATUS_MESSAGES = {
    400: 'Bad request',
    404: 'Not found',
    413: 'File too large',
    422: 'Malformed request',
    500: 'Server error',
    503: 'Service unavailable',
}


class StoreClient:
    """HTTP client for the dedup server API with retry logic and error handling."""

    def __init__(self, config: Config):
        """
        Initialize store client.

        Args:
            config: Configuration instance
        """
        self.config = config
        self.session = httpx.Client(
            base_url=config.get_base_url(),
            timeout=config.get_timeout()
        )
        self.request_id = None
        logger.info(f"Initialized StoreClient [base_url={config.get_base_url()}]")

    def _calculate_upload_timeout(self, file_size: int) -> float:
        """
        Calculate timeout for upload based on file size.

        Returns:
            Timeout in seconds (30s base + 0.1s per MB)
        """
        return 30.0 + (file_size / (1024 * 1024)) * 0.1

    def _resolve_download_path(self, output_path: Optional[str], filename: str) -> Path:
        """
        Work out where a download should be written.

        Args:
            output_path: Target file or directory; defaults to downloads/<filename>
            filename: Stored filename; only its last path component is used locally

        Returns:
            Path of the file to write, with its parent directory created
        """
        local_name = Path(filename.replace('\\', '/')).name
        if local_name in ('', '.', '..'):
            local_name = UNNAMED_UPLOAD

        if output_path:
            output_file = Path(output_path).expanduser()
            if output_file.is_dir():
                output_file = output_file / local_name
        else:
            output_file = Path(DOWNLOADS_DIR) / local_name

        output_file.parent.mkdir(parents=True, exist_ok=True)
        return output_file

    def _request_with_retry(
        self,
        method: str,
        endpoint: str,
        max_retries: Optional[int] = None,
        **kwargs
    ) -> httpx.Response:
        """
        Make HTTP request with retry logic on 5xx errors and network failures.

        Args:
            method: HTTP method (GET, POST, ...)
            endpoint: API endpoint path
            max_retries: Max retry attempts (uses config default if None)
            **kwargs: Additional arguments to pass to httpx request

        Returns:
            HTTP response object

        Raises:
            ConnectionError: If max retries exceeded or connection fails
        """
        retry_config = self.config.get_retry_config()
        max_retries = max_retries if max_retries is not None else retry_config['max_retries']
        backoff = retry_config['retry_backoff_multiplier']

        self.request_id = str(uuid.uuid4())
        kwargs.setdefault('headers', {})['X-Request-ID'] = self.request_id

        last_exception = None
        for attempt in range(max_retries + 1):
            try:
                response = self.session.request(method, endpoint, **kwargs)
                logger.debug(
                    f"Response received: {method} {endpoint} status={response.status_code} "
                    f"[request_id={self.request_id}]"
                )

                if response.status_code >= 500 and attempt < max_retries:
                    delay = backoff ** attempt
                    logger.warning(
                        f"Server error (attempt {attempt + 1}/{max_retries + 1}): {method} {endpoint} "
                        f"status={response.status_code}, retrying in {delay}s"
                    )
                    time.sleep(delay)
                    continue

                return response

            except (httpx.ConnectError, httpx.TimeoutException) as e:
                last_exception = e
                if attempt < max_retries:
                    delay = backoff ** attempt
                    logger.warning(
                        f"Network error (attempt {attempt + 1}/{max_retries + 1}): {method} {endpoint} "
                        f"error={type(e).__name__}, retrying in {delay}s"
                    )
                    time.sleep(delay)
                    continue
                logger.error(f"Network error (max retries exceeded): {method} {endpoint} error={e}")

        if isinstance(last_exception, httpx.TimeoutException):
            raise ConnectionError("Request timed out. Server may be overloaded.")
        raise ConnectionError("Cannot connect to dedup server. Is it running?")

    def _format_error(self, response: httpx.Response) -> str:
        """
        Map HTTP errors to user-friendly messages.

        Args:
            response: HTTP response object

        Returns:
            User-friendly error message
        """
        try:
            error_data = response.json()
            detail = error_data.get('detail', 'Unknown error')
            code = error_data.get('code', 'UNKNOWN')
        except (ValueError, AttributeError):
            detail = response.text or 'Unknown error'
            code = 'UNKNOWN'

        if code in ERROR_MESSAGES:
            return ERROR_MESSAGES[code]

        message = STATUS_MESSAGES.get(response.status_code, str(detail))
        return f"{message} (Code: {code})" if code != 'UNKNOWN' else message

    def upload_files(self, file_paths: list[str]) -> str:
        """
        Upload local files.

        Args:
            file_paths: Paths of files to upload

        Returns:
            Formatted result message with upload status for each file
        """
        results = []

        for file_path in file_paths:
            path = Path(file_path).expanduser()

            if not path.exists():
                results.append(f"Error: File not found: {file_path}")
                continue
            if not path.is_file():
                results.append(f"Error: Not a file: {file_path}")
                continue

            file_size = os.path.getsize(path)
            if file_size == 0:
                results.append(f"Error: File is empty: {file_path}")
                continue

            try:
                content = path.read_bytes()
                show_progress("Uploading", path.name, 0, file_size)
                response = self._request_with_retry(
                    'POST',
                    '/upload',
                    files={UPLOAD_FIELD_NAME: (path.name, content)},
                    timeout=self._calculate_upload_timeout(file_size),
                )
                show_progress("Uploading", path.name, file_size, file_size)
                end_progress()
            except ConnectionError as e:
                end_progress()
                results.append(f"Error uploading {file_path}: {e}")
                continue
            except OSError as e:
                results.append(f"Error reading {file_path}: {e}")
                continue

            if response.status_code == 200:
                result = response.json()
                results.append(
                    f"Stored: {result['filename']} "
                    f"(Size: {format_file_size(file_size)}, "
                    f"Chunks: {result['chunk_count']}) - {result['message']}"
                )
            else:
                results.append(f"Error uploading {file_path}: {self._format_error(response)}")

        return '\n'.join(results) if results else "No files uploaded."

    def list_files(self) -> str:
        """
        List stored filenames.

        Returns:
            Formatted list of files
        """
        try:
            response = self._request_with_retry('GET', '/list')
        except ConnectionError as e:
            return f"Error: {e}"

        if response.status_code != 200:
            return f"Error: {self._format_error(response)}"

        names = response.json()
        if not names:
            return "No files stored."

        output = [f"Found {len(names)} file(s):"]
        output.extend(f"  - {name}" for name in names)
        return '\n'.join(output)

    def download(self, filename: str, output_path: Optional[str] = None) -> str:
        """
        Download a file by filename with progress feedback.

        Args:
            filename: Name of file to download
            output_path: Optional output file or directory

        Returns:
            Success message with download details
        """
        try:
            with self.session.stream('GET', f'/download/{quote(filename, safe="")}') as response:
                if response.status_code != 200:
                    response.read()
                    return f"Error: {self._format_error(response)}"

                output_file = self._resolve_download_path(output_path, filename)
                total_size = int(response.headers.get('Content-Length', 0))
                downloaded = 0

                with open(output_file, 'wb') as f:
                    for piece in response.iter_bytes(chunk_size=8192):
                        f.write(piece)
                        downloaded += len(piece)
                        show_progress("Downloading", filename, downloaded, total_size)
                end_progress()

        except httpx.ConnectError:
            return "Error: Cannot connect to dedup server. Is it running?"
        except httpx.TimeoutException:
            return "Error: Request timed out. Server may be overloaded."
        except OSError as e:
            return f"Error writing file: {e}"

        return f"Downloaded: {filename} ({format_file_size(downloaded)})\nSaved to: {output_file.absolute()}"

    def close(self) -> None:
        """Close the HTTP session."""
        self.session.close()
