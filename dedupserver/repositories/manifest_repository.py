"""Manifest repository: one durable JSON record per filename."""

import json
import os
import tempfile
from pathlib import Path
from typing import Iterator, List, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from chunkstore.hasher import is_valid_digest
from common.constants import MANIFEST_FILE_SUFFIX, TEMP_FILE_SUFFIX
from common.exceptions import InvalidInputError, ManifestCorruptError
from common.logging_config import get_logger
from common.types import FileManifest, ManifestLoadResult, build_signature
from dedupserver.utils import is_safe_name

logger = get_logger(__name__)


class ManifestRecord(BaseModel):
    """On-disk shape of a manifest: filename, signature, chunkHashes."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    filename: str
    signature: str
    chunk_hashes: List[str] = Field(alias="chunkHashes")

    @field_validator("filename")
    @classmethod
    def _filename_is_basename(cls, value: str) -> str:
        if not is_safe_name(value):
            raise ValueError(f"unsafe filename {value!r}")
        return value

    @field_validator("chunk_hashes")
    @classmethod
    def _hashes_are_digests(cls, value: List[str]) -> List[str]:
        if not value:
            raise ValueError("chunkHashes must not be empty")
        for digest in value:
            if not is_valid_digest(digest):
                raise ValueError(f"invalid chunk digest {digest!r}")
        return value

    @model_validator(mode="after")
    def _signature_matches_hashes(self) -> "ManifestRecord":
        if self.signature != build_signature(self.chunk_hashes):
            raise ValueError("signature does not match chunkHashes")
        return self

    @classmethod
    def from_manifest(cls, manifest: FileManifest) -> "ManifestRecord":
        return cls(
            filename=manifest.filename,
            signature=manifest.signature,
            chunk_hashes=list(manifest.chunk_digests),
        )

    def to_manifest(self) -> FileManifest:
        return FileManifest(
            filename=self.filename,
            signature=self.signature,
            chunk_digests=tuple(self.chunk_hashes),
        )


class ManifestRepository:
    """
    Stores manifests as ``<manifests_dir>/<filename>.json``. A save replaces
    any previous record for the same filename.
    """

    def __init__(self, manifests_dir: Union[str, Path]):
        self.manifests_dir = Path(manifests_dir)

    def ensure_directory(self) -> None:
        """Ensure manifests directory exists."""
        self.manifests_dir.mkdir(parents=True, exist_ok=True)

    def get_manifest_path(self, filename: str) -> Path:
        """
        Get file path for a filename's manifest.

        Raises:
            InvalidInputError: If filename is not a safe basename
        """
        if not is_safe_name(filename):
            raise InvalidInputError(f"Unsafe manifest filename: {filename!r}")
        return self.manifests_dir / f"{filename}{MANIFEST_FILE_SUFFIX}"

    def save(self, manifest: FileManifest) -> Path:
        """
        Persist a manifest, overwriting any prior record for its filename.

        Args:
            manifest: Manifest to write

        Returns:
            Path of the written record

        Raises:
            OSError: If write operation fails
        """
        path = self.get_manifest_path(manifest.filename)
        record = ManifestRecord.from_manifest(manifest)
        payload = json.dumps(record.model_dump(by_alias=True), indent=2)

        self.ensure_directory()
        fd, tmp_name = tempfile.mkstemp(dir=self.manifests_dir, prefix=".manifest-", suffix=TEMP_FILE_SUFFIX)
        try:
            with os.fdopen(fd, 'w', encoding='utf-8') as f:
                f.write(payload)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_name, path)
        except BaseException:
            try:
                os.unlink(tmp_name)
            except FileNotFoundError:
                pass
            raise

        logger.debug(f"Saved manifest for {manifest.filename} ({manifest.chunk_count} chunks)")
        return path

    def load(self, path: Union[str, Path]) -> FileManifest:
        """
        Parse one manifest record.

        Raises:
            ManifestCorruptError: If the record cannot be read or fails validation
        """
        path = Path(path)
        try:
            raw = path.read_text(encoding='utf-8')
            data = json.loads(raw)
            return ManifestRecord.model_validate(data).to_manifest()
        except (OSError, ValueError, RecursionError, ValidationError) as e:
            raise ManifestCorruptError(f"Cannot parse manifest {path.name}: {e}") from e

    def list(self) -> Iterator[ManifestLoadResult]:
        """
        Enumerate every durable manifest record, sorted by file name.

        Yields:
            ManifestLoadResult per ``*.json`` file, carrying either the
            parsed manifest or the parse error
        """
        if not self.manifests_dir.exists():
            return
        for path in sorted(self.manifests_dir.glob(f"*{MANIFEST_FILE_SUFFIX}")):
            if not path.is_file():
                continue
            try:
                yield ManifestLoadResult(path=path, manifest=self.load(path))
            except ManifestCorruptError as e:
                yield ManifestLoadResult(path=path, error=e)
