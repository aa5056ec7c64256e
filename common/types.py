"""Shared data type definitions (Chunk, FileManifest, IngestResult, BootstrapReport)."""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

from common.constants import SIGNATURE_SEPARATOR


def build_signature(chunk_digests) -> str:
    """
    Compute the signature of an ordered chunk digest sequence.

    Args:
        chunk_digests: Ordered iterable of hex digests

    Returns:
        The digests joined with the signature separator
    """
    return SIGNATURE_SEPARATOR.join(chunk_digests)


@dataclass(frozen=True)
class Chunk:
    """
    One fixed-size slice of a file, identified by its content digest.
    """
    digest: str
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)


@dataclass(frozen=True)
class FileManifest:
    """
    Durable record mapping a filename to its ordered chunk digests.
    """
    filename: str
    signature: str
    chunk_digests: Tuple[str, ...]

    @classmethod
    def from_digests(cls, filename: str, chunk_digests) -> "FileManifest":
        digests = tuple(chunk_digests)
        return cls(filename=filename, signature=build_signature(digests), chunk_digests=digests)

    @property
    def chunk_count(self) -> int:
        return len(self.chunk_digests)


@dataclass(frozen=True)
class IngestResult:
    """
    Outcome of a single ingestion.
    """
    filename: str
    signature: str
    chunk_count: int
    new_chunks_written: bool


@dataclass(frozen=True)
class BootstrapReport:
    """
    Summary of the startup rehydration pass.
    """
    files: int
    signatures: int
    skipped: int


@dataclass(frozen=True)
class ManifestLoadResult:
    """
    A durable manifest record as read from disk: either parsed or failed.
    """
    path: Path
    manifest: Optional[FileManifest] = None
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.manifest is not None
