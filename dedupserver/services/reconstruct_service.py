"""Reconstruction: reassemble a file from its manifest's chunks, in order."""

from chunkstore.chunk_storage import ChunkStore
from common.exceptions import CorruptStoreError, FileNotFoundInStoreError
from common.logging_config import get_logger
from dedupserver.indexes import StoreState

logger = get_logger(__name__)


class ReconstructService:
    def __init__(self, chunk_store: ChunkStore, state: StoreState, verify_chunks: bool = True):
        self.chunk_store = chunk_store
        self.state = state
        self.verify_chunks = verify_chunks

    def reconstruct(self, filename: str) -> bytes:
        """
        Return the original bytes of filename.

        Args:
            filename: Name as listed by the store

        Returns:
            Concatenation of the manifest's chunks in manifest order

        Raises:
            FileNotFoundInStoreError: If filename has no manifest
            CorruptStoreError: If any referenced chunk is missing or damaged
        """
        manifest = self.state.get_manifest(filename)
        if manifest is None:
            raise FileNotFoundInStoreError(f"Unknown filename: {filename}")

        pieces = []
        for index, digest in enumerate(manifest.chunk_digests):
            try:
                pieces.append(self.chunk_store.get(digest, verify=self.verify_chunks))
            except CorruptStoreError as e:
                logger.error(f"Failed to reconstruct {filename}: chunk {index} ({digest}): {e}")
                raise

        return b"".join(pieces)
