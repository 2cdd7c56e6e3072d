"""In-memory Content-Addressed Store (CAS) backend.

Objects are kept entirely in RAM and addressed by their SHA-256 hex digest.
There is no persistence across process restarts; meant for tests and the
in-memory persistence backend.

Key behaviors
-------------
- **Deduplication**: Only a single copy of bytes exists per digest.
- **Thread-safety**: All installs/lookups/removals happen under an `RLock`.
- `open_read()` returns a `BytesIO` that the **caller** must close.
"""

from __future__ import annotations

import hashlib
import io
import threading
from collections.abc import Iterator
from typing import BinaryIO

from repobuilder.interfaces.assetstore import (
    CHUNK_SIZE,
    AssetStore,
    BlobStat,
    NotFound,
    validate_digest,
)

__all__ = ["MemoryAssetStore"]


class MemoryAssetStore(AssetStore):
    """In-memory CAS backend.

    Example
    -------
        store = MemoryAssetStore()
        info = store.put_bytes(b"hello")
        with store.open_read(info.digest) as fp:
            assert fp.read() == b"hello"
    """

    def __init__(self) -> None:
        self._objects: dict[str, bytes] = {}
        self._lock = threading.RLock()

    # ---- AssetStore ----

    def put_stream(self, fileobj: BinaryIO) -> BlobStat:
        hasher = hashlib.sha256()
        buffer = bytearray()
        for chunk in iter(lambda: fileobj.read(CHUNK_SIZE), b""):
            hasher.update(chunk)
            buffer.extend(chunk)

        digest = hasher.hexdigest()
        with self._lock:
            existing = self._objects.setdefault(digest, bytes(buffer))
        return BlobStat(digest=digest, size_bytes=len(existing), uri=f"mem://{digest}")

    def open_read(self, digest: str) -> io.BytesIO:
        validate_digest(digest)
        with self._lock:
            try:
                data = self._objects[digest]
            except KeyError as e:
                raise NotFound(digest) from e
        return io.BytesIO(data)

    def stat(self, digest: str) -> BlobStat:
        validate_digest(digest)
        with self._lock:
            try:
                size = len(self._objects[digest])
            except KeyError as exc:
                raise NotFound(digest) from exc
        return BlobStat(digest=digest, size_bytes=size, uri=f"mem://{digest}")

    def remove(self, digest: str) -> bool:
        validate_digest(digest)
        with self._lock:
            return self._objects.pop(digest, None) is not None

    def digests(self) -> Iterator[str]:
        with self._lock:
            snapshot = list(self._objects)
        yield from snapshot
