"""Repository layer for durable data access."""

from dedupserver.repositories.manifest_repository import ManifestRecord, ManifestRepository

__all__ = [
    "ManifestRecord",
    "ManifestRepository",
]
