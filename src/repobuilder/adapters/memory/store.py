"""Shared in-memory storage for the memory backend."""

from __future__ import annotations

from dataclasses import dataclass, field

from repobuilder.adapters.assetstore.memory import MemoryAssetStore
from repobuilder.domain.model import RepositoryObject
from repobuilder.interfaces.assetstore import AssetStore

TABLES = ("communities", "collections", "items", "epersons", "bitstreams")


def _empty_tables() -> dict[str, dict[str, RepositoryObject]]:
    return {name: {} for name in TABLES}


@dataclass
class InMemoryRepositoryData:
    """Holds every record table plus the asset store for bitstream bytes.

    Tables map record ids to immutable record snapshots, in insertion order.
    """

    tables: dict[str, dict[str, RepositoryObject]] = field(default_factory=_empty_tables)
    assetstore: AssetStore = field(default_factory=MemoryAssetStore)

    def table(self, name: str) -> dict[str, RepositoryObject]:
        """Return the table called `name`.

        Raises:
            KeyError: If there is no such table.
        """
        return self.tables[name]
