"""Asset store interface definitions.

The asset store is a content-addressed store (CAS) for bitstream bytes.
Identity is the lowercase SHA-256 hex digest of the content; identical
content is stored once. Records in the persistence layer point at digests,
so removing a blob is the caller's decision (see `BitstreamService.expunge`).
"""

import abc
import io
import os
from collections.abc import Iterator
from dataclasses import dataclass
from typing import BinaryIO

PathLike = str | os.PathLike[str]

CHUNK_SIZE = 1024 * 1024  # 1 MiB
SHA256_LENGTH = 64


class AssetStoreError(Exception):
    """Raised when there is an asset store error."""


class NotFound(AssetStoreError):
    """Raised when a blob is not found in the store."""


class InvalidDigest(AssetStoreError, ValueError):
    """Raised when a digest is not a lowercase 64-character SHA-256 hex string."""


@dataclass(frozen=True)
class BlobStat:
    """Minimal blob descriptor from the CAS.

    Attributes:
        digest: Lowercase SHA-256 hex digest of the content.
        size_bytes: Size of the content in bytes.
        uri: Optional locator hint (e.g., "file:///..."); never the identity.
    """

    digest: str
    size_bytes: int
    uri: str | None = None


def validate_digest(digest: str) -> None:
    """Raise InvalidDigest if `digest` is not a SHA-256 hex key.

    Enforced:
    - No slashes
    - Exact length of 64 characters
    - Lowercase hexadecimal characters only
    """

    if "/" in digest or "\\" in digest:
        raise InvalidDigest("Invalid CAS key")

    if len(digest) != SHA256_LENGTH:
        raise InvalidDigest("Invalid CAS key length (expected 64 characters)")

    if digest.lower() != digest or any(c not in "0123456789abcdef" for c in digest):
        raise InvalidDigest("SHA-256 key contains non-hex characters")


class AssetStore(abc.ABC):
    """Abstract base class for CAS asset storage operations."""

    # --- Core Operations ---

    @abc.abstractmethod
    def put_stream(self, fileobj: BinaryIO) -> BlobStat:
        """Store bytes from a binary file-like object.

        The store reads from the stream's *current position* until EOF and
        does not close it.

        Returns:
            BlobStat: Metadata about the stored blob. If the content already
            exists it is not duplicated; the existing blob's metadata is
            returned.
        """

    @abc.abstractmethod
    def open_read(self, digest: str) -> BinaryIO:
        """Open a blob for reading in binary mode. The caller must close it.

        Raises:
            NotFound: If the blob does not exist.
            InvalidDigest: If the digest is malformed.
        """

    @abc.abstractmethod
    def stat(self, digest: str) -> BlobStat:
        """Return metadata for `digest` without reading the body.

        Raises:
            NotFound: If the blob does not exist.
        """

    @abc.abstractmethod
    def remove(self, digest: str) -> bool:
        """Physically remove a blob.

        Returns:
            bool: True if a blob was removed, False if it was already absent.
        """

    @abc.abstractmethod
    def digests(self) -> Iterator[str]:
        """Yield the digest of every stored blob (no particular order)."""

    # --- Convenience Methods ---

    def exists(self, digest: str) -> bool:
        """Return True if a blob with `digest` is present."""
        try:
            self.stat(digest)
        except NotFound:
            return False
        return True

    def put_bytes(self, data: bytes) -> BlobStat:
        """Ingest an in-memory byte string."""
        return self.put_stream(io.BytesIO(data))

    def readall(self, digest: str) -> bytes:
        """Read the entire blob into memory (convenience)."""
        with self.open_read(digest) as fp:
            return fp.read()
