"""Ingestion: chunk, hash, write new chunks, commit signature and manifest."""

from chunkstore.chunk_storage import ChunkStore
from chunkstore.chunker import split_into_chunks
from common.exceptions import InvalidInputError
from common.logging_config import get_logger
from common.types import FileManifest, IngestResult
from dedupserver.indexes import StoreState
from dedupserver.repositories.manifest_repository import ManifestRepository
from dedupserver.utils import safe_name

logger = get_logger(__name__)


class IngestService:
    def __init__(
        self,
        chunk_store: ChunkStore,
        manifest_repo: ManifestRepository,
        state: StoreState,
        chunk_size: int,
    ):
        self.chunk_store = chunk_store
        self.manifest_repo = manifest_repo
        self.state = state
        self.chunk_size = chunk_size

    def ingest(self, filename: str, content: bytes) -> IngestResult:
        """
        Store content under filename, writing only chunks not seen before.

        Chunk writes, the signature commit and the manifest write form one
        step: if any chunk write fails nothing is committed, and chunks
        already written remain on disk as orphans.

        Args:
            filename: Client-supplied name, reduced to its basename
            content: Whole file buffered in memory

        Returns:
            IngestResult for the stored file

        Raises:
            InvalidInputError: If content is empty or filename is unusable
            OSError: If a chunk or manifest write fails
        """
        name = safe_name(filename)
        if not content:
            raise InvalidInputError(f"Refusing to store empty file {name!r}")

        chunks = split_into_chunks(content, self.chunk_size)
        manifest = FileManifest.from_digests(name, (chunk.digest for chunk in chunks))

        wrote_something = False
        if not self.state.has_signature(manifest.signature):
            try:
                for chunk in chunks:
                    if self.chunk_store.put(chunk.digest, chunk.data):
                        wrote_something = True
            except OSError as e:
                logger.error(f"Upload of {name} aborted while writing chunks: {e}")
                raise
            self.state.add_signature(manifest.signature)

        with self.state.filename_lock(name):
            self.manifest_repo.save(manifest)
            previous = self.state.put_manifest(manifest)

        if previous is not None and previous.signature != manifest.signature:
            logger.info(f"Replaced manifest for {name}")
        logger.info(
            f"Ingested {name}: {manifest.chunk_count} chunks, "
            f"{'new chunks written' if wrote_something else 'no new chunks'}"
        )

        return IngestResult(
            filename=name,
            signature=manifest.signature,
            chunk_count=manifest.chunk_count,
            new_chunks_written=wrote_something,
        )
