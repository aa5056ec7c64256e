"""Manages physical chunk blobs on disk: write-once put, read, listing."""

import os
import tempfile
from pathlib import Path
from typing import Iterator, Union

from chunkstore.hasher import is_valid_digest, verify_digest
from common.constants import CHUNK_FILE_SUFFIX, TEMP_FILE_SUFFIX
from common.exceptions import CorruptStoreError
from common.logging_config import get_logger

logger = get_logger(__name__)


class ChunkStore:
    """
    Content-addressed blob store: one file per unique digest, named
    ``<digest>.chunk``, never rewritten once present.
    """

    def __init__(self, chunks_dir: Union[str, Path]):
        """
        Initialize chunk store.

        Args:
            chunks_dir: Directory holding chunk blobs
        """
        self.chunks_dir = Path(chunks_dir)

    def ensure_directory(self) -> None:
        """Ensure chunks directory exists."""
        self.chunks_dir.mkdir(parents=True, exist_ok=True)

    def get_chunk_path(self, digest: str) -> Path:
        """
        Get file path for a chunk.

        Args:
            digest: Hex SHA-256 digest of the chunk

        Returns:
            Path object for chunk file

        Raises:
            ValueError: If digest is not a hex SHA-256 digest
        """
        if not is_valid_digest(digest):
            raise ValueError(f"Invalid chunk digest: {digest!r}")
        return self.chunks_dir / f"{digest}{CHUNK_FILE_SUFFIX}"

    def put(self, digest: str, data: bytes) -> bool:
        """
        Write chunk data to disk unless a blob for digest already exists.

        The blob is written to a unique temporary file in the chunks
        directory and renamed into place, so readers never observe a
        partially written chunk and concurrent writers of one digest
        cannot corrupt it.

        Args:
            digest: Hex SHA-256 digest of data
            data: Raw chunk bytes

        Returns:
            True if this call created the blob, False if it already existed

        Raises:
            OSError: If write operation fails
        """
        filepath = self.get_chunk_path(digest)
        if filepath.exists():
            return False

        self.ensure_directory()
        fd, tmp_name = tempfile.mkstemp(
            dir=self.chunks_dir, prefix=f".{digest[:16]}-", suffix=TEMP_FILE_SUFFIX
        )
        try:
            with os.fdopen(fd, 'wb') as f:
                f.write(data)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_name, filepath)
        except BaseException:
            try:
                os.unlink(tmp_name)
            except FileNotFoundError:
                pass
            raise

        logger.debug(f"Wrote chunk {digest} ({len(data)} bytes)")
        return True

    def get(self, digest: str, verify: bool = False) -> bytes:
        """
        Read entire chunk from disk.

        Args:
            digest: Hex SHA-256 digest of the chunk
            verify: Recompute the digest of the bytes read and compare

        Returns:
            Raw chunk data

        Raises:
            CorruptStoreError: If the blob is missing, unreadable, or fails verification
        """
        try:
            filepath = self.get_chunk_path(digest)
        except ValueError as e:
            raise CorruptStoreError(str(e)) from e

        try:
            data = filepath.read_bytes()
        except FileNotFoundError as e:
            raise CorruptStoreError(f"Missing chunk {digest}") from e
        except OSError as e:
            raise CorruptStoreError(f"Unreadable chunk {digest}: {e}") from e

        if verify and not verify_digest(data, digest):
            raise CorruptStoreError(f"Chunk {digest} does not match its digest")
        return data

    def iter_digests(self) -> Iterator[str]:
        """Yield the digest of every blob in the chunks directory."""
        if not self.chunks_dir.exists():
            return
        for filepath in self.chunks_dir.glob(f"*{CHUNK_FILE_SUFFIX}"):
            if is_valid_digest(filepath.stem):
                yield filepath.stem

    def count(self) -> int:
        """Return the number of chunk blobs on disk."""
        return sum(1 for _ in self.iter_digests())
