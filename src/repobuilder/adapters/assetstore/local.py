"""Local filesystem-based CAS asset store adapter."""

from __future__ import annotations

import hashlib
import os
import tempfile
from collections.abc import Iterator
from pathlib import Path
from typing import BinaryIO

from repobuilder.interfaces.assetstore import (
    CHUNK_SIZE,
    SHA256_LENGTH,
    AssetStore,
    BlobStat,
    NotFound,
    PathLike,
    validate_digest,
)


class LocalAssetStore(AssetStore):
    """CAS asset store that uses the local filesystem.

    Blobs live under a sharded directory layout: ``root/aa/bb/aabbccdd...``.
    Writes go to a temporary file in the root first and are moved into place
    with `os.replace`, so readers never observe partial blobs.
    """

    def __init__(self, root: PathLike) -> None:
        self._root = Path(root)
        self._root.mkdir(parents=True, exist_ok=True)

    @property
    def root(self) -> Path:
        """Root directory of the store."""
        return self._root

    # --- Core Operations ---

    def put_stream(self, fileobj: BinaryIO) -> BlobStat:
        hasher = hashlib.sha256()
        size = 0

        with tempfile.NamedTemporaryFile(dir=self._root, delete=False) as tmp:
            tmp_path = Path(tmp.name)

            for chunk in iter(lambda: fileobj.read(CHUNK_SIZE), b""):
                hasher.update(chunk)
                tmp.write(chunk)
                size += len(chunk)

        digest = hasher.hexdigest()
        dest = self._determine_cas_path(digest)

        # If blob already exists: use it, delete temp
        if dest.exists():
            tmp_path.unlink()
            return BlobStat(digest=digest, size_bytes=size, uri=dest.as_uri())

        dest.parent.mkdir(parents=True, exist_ok=True)
        os.replace(tmp_path, dest)

        return BlobStat(digest=digest, size_bytes=size, uri=dest.as_uri())

    def open_read(self, digest: str) -> BinaryIO:
        path = self._determine_cas_path(digest)

        try:
            return path.open("rb")
        except FileNotFoundError:
            raise NotFound(digest) from None

    def stat(self, digest: str) -> BlobStat:
        path = self._determine_cas_path(digest)
        try:
            size = path.stat().st_size
        except FileNotFoundError:
            raise NotFound(digest) from None
        return BlobStat(digest=digest, size_bytes=size, uri=path.as_uri())

    def remove(self, digest: str) -> bool:
        path = self._determine_cas_path(digest)
        try:
            path.unlink()
        except FileNotFoundError:
            return False
        self._prune_empty_shards(path.parent)
        return True

    def digests(self) -> Iterator[str]:
        for path in self._root.glob("*/*/*"):
            if path.is_file() and len(path.name) == SHA256_LENGTH:
                yield path.name

    # --- Internal Helpers ---

    def _determine_cas_path(self, digest: str) -> Path:
        """Determine the filesystem path for a given SHA-256 key.

        Sharded directory structure: root/aa/bb/aabbccddeeff...
        """
        validate_digest(digest)
        return self._root / digest[0:2] / digest[2:4] / digest

    def _prune_empty_shards(self, directory: Path) -> None:
        """Remove now-empty shard directories up to (not including) the root."""
        while directory != self._root:
            try:
                directory.rmdir()
            except OSError:
                return
            directory = directory.parent
