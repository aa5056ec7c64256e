"""Configuration settings for the dedup server."""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from common.constants import (
    CHUNKS_SUBDIR,
    DEFAULT_CHUNK_SIZE_BYTES,
    DEFAULT_DATA_DIR,
    DEFAULT_MAX_UPLOAD_BYTES,
    DEFAULT_SERVER_HOST,
    DEFAULT_SERVER_PORT,
    MANIFESTS_SUBDIR,
)


DATA_DIR = os.environ.get("DEDUP_DATA_DIR", DEFAULT_DATA_DIR)

SERVER_HOST = os.environ.get("DEDUP_HOST", DEFAULT_SERVER_HOST)

SERVER_PORT = int(os.environ.get("DEDUP_PORT", str(DEFAULT_SERVER_PORT)))


def _env_bool(value: Optional[str], default: bool) -> bool:
    if value is None or value.strip() == "":
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _env_int(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from e


@dataclass(frozen=True)
class StoreConfig:
    """
    Settings for one store instance.

    Attributes:
        chunks_dir: Directory holding chunk blobs
        manifests_dir: Directory holding per-filename manifest records
        chunk_size: Fixed chunk length in bytes
        max_upload_bytes: Largest upload the HTTP layer accepts
        strict_manifests: Refuse to start on an unparsable manifest instead of skipping it
        verify_chunks: Re-hash chunks on reconstruction
    """
    chunks_dir: Path
    manifests_dir: Path
    chunk_size: int = DEFAULT_CHUNK_SIZE_BYTES
    max_upload_bytes: int = DEFAULT_MAX_UPLOAD_BYTES
    strict_manifests: bool = False
    verify_chunks: bool = True

    @classmethod
    def for_data_dir(cls, data_dir, **overrides) -> "StoreConfig":
        """Build a config with chunks/ and manifests/ under one data directory."""
        base = Path(data_dir)
        return cls(
            chunks_dir=base / CHUNKS_SUBDIR,
            manifests_dir=base / MANIFESTS_SUBDIR,
            **overrides,
        ).validate()

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "StoreConfig":
        """
        Build a config from DEDUP_* environment variables.

        Args:
            env: Mapping to read instead of os.environ

        Returns:
            Validated StoreConfig

        Raises:
            ValueError: If a numeric setting is malformed or out of range
        """
        if env is None:
            env = os.environ

        data_dir = Path(env.get("DEDUP_DATA_DIR", DEFAULT_DATA_DIR))
        return cls(
            chunks_dir=Path(env.get("DEDUP_CHUNKS_DIR", str(data_dir / CHUNKS_SUBDIR))),
            manifests_dir=Path(env.get("DEDUP_MANIFESTS_DIR", str(data_dir / MANIFESTS_SUBDIR))),
            chunk_size=_env_int(env, "DEDUP_CHUNK_SIZE", DEFAULT_CHUNK_SIZE_BYTES),
            max_upload_bytes=_env_int(env, "DEDUP_MAX_UPLOAD_BYTES", DEFAULT_MAX_UPLOAD_BYTES),
            strict_manifests=_env_bool(env.get("DEDUP_STRICT_MANIFESTS"), False),
            verify_chunks=_env_bool(env.get("DEDUP_VERIFY_CHUNKS"), True),
        ).validate()

    def validate(self) -> "StoreConfig":
        """
        Check numeric settings.

        Raises:
            ValueError: If chunk_size or max_upload_bytes is not a positive int
        """
        for name in ("chunk_size", "max_upload_bytes"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
                raise ValueError(f"{name} must be a positive integer, got {value!r}")
        return self
