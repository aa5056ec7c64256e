"""Command handler functions for CLI operations."""

from pathlib import Path
from typing import Optional

from cli.config import Config
from cli.models import DownloadCommand, ListCommand, UploadCommand
from cli.store_client import StoreClient
from common.logging_config import get_logger

logger = get_logger(__name__)


_client: Optional[StoreClient] = None


def get_client() -> StoreClient:
    """
    Get or create global StoreClient instance.

    Returns:
        StoreClient instance
    """
    global _client
    if _client is None:
        logger.debug("Creating new StoreClient instance")
        config = Config(Path.home() / '.dedupstore' / 'config.json')
        _client = StoreClient(config)
    return _client


def handle_upload(cmd: UploadCommand, client: Optional[StoreClient] = None) -> str:
    """
    Handle 'upload' command.

    Args:
        cmd: UploadCommand with file_list
        client: Optional StoreClient for dependency injection (testing)

    Returns:
        Success or error message with upload results
    """
    logger.info(f"Executing upload command: {len(cmd.file_list)} files")
    if client is None:
        client = get_client()
    return client.upload_files(list(cmd.file_list))


def handle_list(cmd: ListCommand, client: Optional[StoreClient] = None) -> str:
    """
    Handle 'list' command.

    Returns:
        Formatted list of files
    """
    if client is None:
        client = get_client()
    return client.list_files()


def handle_download(cmd: DownloadCommand, client: Optional[StoreClient] = None) -> str:
    """
    Handle 'download' command.

    Args:
        cmd: DownloadCommand with filename and optional output_path
        client: Optional StoreClient for dependency injection (testing)

    Returns:
        Success or error message with download results
    """
    logger.info(f"Executing download command: filename={cmd.filename} output_path={cmd.output_path}")
    if client is None:
        client = get_client()
    return client.download(cmd.filename, cmd.output_path)
