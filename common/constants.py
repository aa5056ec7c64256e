"""Project-wide constants (chunk size, storage layout, network defaults)."""

DEFAULT_CHUNK_SIZE_BYTES: int = 1024 * 1024  # 1 MiB
DEFAULT_MAX_UPLOAD_BYTES: int = 2 * 1024 * 1024 * 1024  # 2 GiB

DEFAULT_DATA_DIR: str = "./data"
CHUNKS_SUBDIR: str = "chunks"
MANIFESTS_SUBDIR: str = "manifests"

CHUNK_FILE_SUFFIX: str = ".chunk"
MANIFEST_FILE_SUFFIX: str = ".json"
MAX_FILENAME_BYTES: int = 255
TEMP_FILE_SUFFIX: str = ".tmp"

SIGNATURE_SEPARATOR: str = "-"
DIGEST_HEX_LENGTH: int = 64

DEFAULT_SERVER_HOST: str = "0.0.0.0"
DEFAULT_SERVER_PORT: int = 3000

UPLOAD_FIELD_NAME: str = "file"
LEGACY_UPLOAD_FIELD_NAME: str = "pdfFile"
UNNAMED_UPLOAD: str = "unnamed"
