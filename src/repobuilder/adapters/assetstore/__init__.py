"""Content-addressed asset store backends for bitstream bytes."""

from .local import LocalAssetStore
from .memory import MemoryAssetStore

__all__ = ["LocalAssetStore", "MemoryAssetStore"]
