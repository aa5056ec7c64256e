"""Fixed-size chunking of in-memory byte buffers."""

from typing import Iterator, List

from chunkstore.hasher import compute_digest
from common.types import Chunk


def validate_chunk_size(chunk_size: int) -> int:
    """
    Check that chunk_size is a positive integer.

    Raises:
        ValueError: If chunk_size is not a positive int
    """
    if isinstance(chunk_size, bool) or not isinstance(chunk_size, int):
        raise ValueError(f"Chunk size must be an integer, got {chunk_size!r}")
    if chunk_size <= 0:
        raise ValueError(f"Chunk size must be positive, got {chunk_size}")
    return chunk_size


def iter_slices(data: bytes, chunk_size: int) -> Iterator[bytes]:
    """
    Yield consecutive slices of data, each chunk_size long except possibly the last.

    Args:
        data: Buffer to split
        chunk_size: Slice length in bytes (> 0)

    Yields:
        Byte slices in offset order; nothing for an empty buffer
    """
    validate_chunk_size(chunk_size)
    data = bytes(data)
    for offset in range(0, len(data), chunk_size):
        yield data[offset:offset + chunk_size]


def split_into_chunks(data: bytes, chunk_size: int) -> List[Chunk]:
    """
    Split data into fixed-size chunks and hash each one.

    Args:
        data: Buffer to split
        chunk_size: Chunk length in bytes (> 0)

    Returns:
        Ordered list of Chunk objects
    """
    return [Chunk(digest=compute_digest(piece), data=piece) for piece in iter_slices(data, chunk_size)]
