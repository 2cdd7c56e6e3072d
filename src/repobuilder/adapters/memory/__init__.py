"""In-memory persistence backend.

All records live in a shared `InMemoryRepositoryData` and are lost when it is
discarded. Sessions keep an undo journal so `rollback()` reverts only the
changes made through that session. Suitable for unit tests and prototyping;
not thread-safe.
"""

from .services import (
    InMemoryBitstreamService,
    InMemoryCollectionService,
    InMemoryCommunityService,
    InMemoryEPersonService,
    InMemoryIndexingService,
    InMemoryItemService,
)
from .session import InMemorySession
from .store import InMemoryRepositoryData

__all__ = [
    "InMemoryBitstreamService",
    "InMemoryCollectionService",
    "InMemoryCommunityService",
    "InMemoryEPersonService",
    "InMemoryIndexingService",
    "InMemoryItemService",
    "InMemoryRepositoryData",
    "InMemorySession",
]
