"""Service layer for ingestion and reconstruction."""

from dedupserver.services.ingest_service import IngestService
from dedupserver.services.reconstruct_service import ReconstructService

__all__ = [
    "IngestService",
    "ReconstructService",
]
