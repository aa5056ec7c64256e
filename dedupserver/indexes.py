"""In-memory indexes: filename -> manifest, and the set of known signatures."""

import threading
from typing import Dict, Optional, Set

from common.types import FileManifest


class FileIndex:
    """
    Mapping from filename to its current manifest. Not thread-safe on its
    own; StoreState serializes access.
    """

    def __init__(self):
        self._manifests: Dict[str, FileManifest] = {}

    def put(self, manifest: FileManifest) -> Optional[FileManifest]:
        """
        Insert or replace the manifest for manifest.filename.

        Returns:
            The manifest that was replaced, or None
        """
        previous = self._manifests.get(manifest.filename)
        self._manifests[manifest.filename] = manifest
        return previous

    def get(self, filename: str) -> Optional[FileManifest]:
        return self._manifests.get(filename)

    def filenames(self) -> Set[str]:
        return set(self._manifests)

    def __contains__(self, filename: str) -> bool:
        return filename in self._manifests

    def __len__(self) -> int:
        return len(self._manifests)


class SignatureIndex:
    """
    Set of signatures for every chunk sequence successfully ingested.
    Only grows.
    """

    def __init__(self):
        self._signatures: Set[str] = set()

    def contains(self, signature: str) -> bool:
        return signature in self._signatures

    def add(self, signature: str) -> None:
        self._signatures.add(signature)

    def __len__(self) -> int:
        return len(self._signatures)


class StoreState:
    """
    Process-wide index state shared by ingestion, reconstruction and
    bootstrap. Index access goes through a single lock held only for in-memory
    operations; callers only ever receive copies or immutable manifests.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._files = FileIndex()
        self._signatures = SignatureIndex()
        self._filename_locks: Dict[str, threading.Lock] = {}

    def filename_lock(self, filename: str) -> threading.Lock:
        """
        Lock serializing manifest commits for one filename.

        Held across the manifest write and the index update so the record on
        disk and the one in memory come from the same writer. Commits for
        other filenames do not wait on it.
        """
        with self._lock:
            return self._filename_locks.setdefault(filename, threading.Lock())

    def has_signature(self, signature: str) -> bool:
        with self._lock:
            return self._signatures.contains(signature)

    def add_signature(self, signature: str) -> None:
        with self._lock:
            self._signatures.add(signature)

    def get_manifest(self, filename: str) -> Optional[FileManifest]:
        with self._lock:
            return self._files.get(filename)

    def put_manifest(self, manifest: FileManifest) -> Optional[FileManifest]:
        """Replace the manifest for its filename, returning the previous one."""
        with self._lock:
            return self._files.put(manifest)

    def load_manifest(self, manifest: FileManifest) -> None:
        """Record a manifest read from disk, with its signature."""
        with self._lock:
            self._files.put(manifest)
            self._signatures.add(manifest.signature)

    def filenames(self) -> Set[str]:
        with self._lock:
            return self._files.filenames()

    def counts(self) -> Dict[str, int]:
        with self._lock:
            return {"files": len(self._files), "signatures": len(self._signatures)}
