"""The dedup store core: wires chunk storage, manifests and indexes together."""

from typing import Optional, Set

from chunkstore.chunk_storage import ChunkStore
from common.logging_config import get_logger
from common.types import BootstrapReport, FileManifest, IngestResult
from dedupserver.bootstrap import Bootstrapper
from dedupserver.config import StoreConfig
from dedupserver.indexes import StoreState
from dedupserver.repositories.manifest_repository import ManifestRepository
from dedupserver.services.ingest_service import IngestService
from dedupserver.services.reconstruct_service import ReconstructService

logger = get_logger(__name__)


class DedupStore:
    """
    Single-node content-addressable store.

    Use DedupStore.open() to get an instance whose indexes have been
    rebuilt from disk; ingest/reconstruct must not be called before the
    bootstrap has run.
    """

    def __init__(self, config: StoreConfig):
        self.config = config.validate()

        self.state = StoreState()
        self.chunk_store = ChunkStore(config.chunks_dir)
        self.manifest_repo = ManifestRepository(config.manifests_dir)
        self.ingest_service = IngestService(
            chunk_store=self.chunk_store,
            manifest_repo=self.manifest_repo,
            state=self.state,
            chunk_size=config.chunk_size,
        )
        self.reconstruct_service = ReconstructService(
            chunk_store=self.chunk_store,
            state=self.state,
            verify_chunks=config.verify_chunks,
        )
        self.bootstrap_report: Optional[BootstrapReport] = None

    @classmethod
    def open(cls, config: StoreConfig) -> "DedupStore":
        """
        Create storage directories, run the bootstrap, and return a store
        ready to serve.
        """
        store = cls(config)
        store.bootstrap()
        return store

    def bootstrap(self) -> BootstrapReport:
        """
        Rebuild indexes from durable manifests. Runs once.

        Raises:
            RuntimeError: If called a second time
            ManifestCorruptError: If strict_manifests and a record is corrupt
        """
        if self.bootstrap_report is not None:
            raise RuntimeError("Store has already been bootstrapped")

        self.chunk_store.ensure_directory()
        self.manifest_repo.ensure_directory()
        logger.info(
            f"Opening store [chunks_dir={self.config.chunks_dir}] "
            f"[manifests_dir={self.config.manifests_dir}] [chunk_size={self.config.chunk_size}]"
        )
        self.bootstrap_report = Bootstrapper(
            self.manifest_repo, self.state, strict=self.config.strict_manifests
        ).run()
        return self.bootstrap_report

    def _require_bootstrap(self) -> None:
        if self.bootstrap_report is None:
            raise RuntimeError("Store must be bootstrapped before serving requests")

    def ingest(self, filename: str, content: bytes) -> IngestResult:
        self._require_bootstrap()
        return self.ingest_service.ingest(filename, content)

    def reconstruct(self, filename: str) -> bytes:
        self._require_bootstrap()
        return self.reconstruct_service.reconstruct(filename)

    def list_filenames(self) -> Set[str]:
        self._require_bootstrap()
        return self.state.filenames()

    def get_manifest(self, filename: str) -> Optional[FileManifest]:
        return self.state.get_manifest(filename)

    def stats(self) -> dict:
        """Return counts of indexed files, known signatures and chunk blobs on disk."""
        counts = self.state.counts()
        counts["chunks"] = self.chunk_store.count()
        return counts
