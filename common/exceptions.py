"""Exception classes shared by the chunk store and the dedup server."""


class DedupStoreError(Exception):
    """
    Base exception class for all store-related errors.
    """
    pass


class InvalidInputError(DedupStoreError):
    """
    Raised when an upload is missing, empty, or its filename cannot be made safe.
    """
    pass


class PayloadTooLargeError(InvalidInputError):
    """
    Raised when an upload exceeds the configured maximum size.
    """
    pass


class FileNotFoundInStoreError(DedupStoreError):
    """
    Raised when reconstruction is requested for an unknown filename.
    """
    pass


class CorruptStoreError(DedupStoreError):
    """
    Raised when a manifest references a chunk that is missing or does not
    match its digest.
    """
    pass


class ManifestCorruptError(DedupStoreError):
    """
    Raised when a durable manifest record cannot be parsed.
    """
    pass
