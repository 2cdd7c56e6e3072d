"""Service providers for each backend, and the standalone leak sweep."""

from __future__ import annotations

from collections.abc import Callable
from functools import partial
from typing import TYPE_CHECKING

from repobuilder.adapters.assetstore import LocalAssetStore
from repobuilder.adapters.db.engine import make_engine
from repobuilder.adapters.memory import (
    InMemoryBitstreamService,
    InMemoryCollectionService,
    InMemoryCommunityService,
    InMemoryEPersonService,
    InMemoryIndexingService,
    InMemoryItemService,
    InMemoryRepositoryData,
    InMemorySession,
)
from repobuilder.adapters.sqlalchemy_adapters import (
    SqlAlchemyBitstreamService,
    SqlAlchemyCollectionService,
    SqlAlchemyCommunityService,
    SqlAlchemyEPersonService,
    SqlAlchemyItemService,
    SqlAlchemySession,
)
from repobuilder.builders.locator import ServiceHandles, ServiceLocator
from repobuilder.builders.sweeper import LeakSweeper, SweepReport

if TYPE_CHECKING:
    from pathlib import Path

    from sqlalchemy.engine import Engine

    from repobuilder.interfaces.assetstore import AssetStore
    from repobuilder.interfaces.id_generator import IdGenerator

ServiceProvider = Callable[[], ServiceHandles]


def memory_services(
    data: InMemoryRepositoryData | None = None,
    id_generator: IdGenerator | None = None,
) -> ServiceProvider:
    """Provider for the in-memory backend.

    Every handle set it produces shares `data`, so records outlive a single
    locator cycle only if the caller keeps passing the same instance.
    """
    data = data if data is not None else InMemoryRepositoryData()

    def provide() -> ServiceHandles:
        return ServiceHandles(
            new_session=partial(InMemorySession, data),
            communities=InMemoryCommunityService(id_generator),
            collections=InMemoryCollectionService(id_generator),
            items=InMemoryItemService(id_generator),
            epersons=InMemoryEPersonService(id_generator),
            bitstreams=InMemoryBitstreamService(id_generator),
            indexing=InMemoryIndexingService(),
            assetstore=data.assetstore,
        )

    return provide


def sqlalchemy_services(
    engine: Engine,
    assetstore: AssetStore,
    id_generator: IdGenerator | None = None,
) -> ServiceProvider:
    """Provider for the SQLAlchemy backend, storing bytes in `assetstore`."""

    def provide() -> ServiceHandles:
        return ServiceHandles(
            new_session=partial(SqlAlchemySession, engine),
            communities=SqlAlchemyCommunityService(id_generator),
            collections=SqlAlchemyCollectionService(id_generator),
            items=SqlAlchemyItemService(id_generator),
            epersons=SqlAlchemyEPersonService(id_generator),
            bitstreams=SqlAlchemyBitstreamService(assetstore, id_generator),
            indexing=InMemoryIndexingService(),
            assetstore=assetstore,
        )

    return provide


def sweep_storage(
    db_url: str, assetstore_dir: Path, *, strict: bool = True
) -> SweepReport:
    """Run one leak sweep against a database and a local asset store.

    Raises:
        LeakSweepError: If bitstreams cannot be enumerated or purged,
            including database errors (e.g. a schema that was never created).
        LeakDetectedError: In strict mode, if live bitstreams were found.
    """
    engine = make_engine(db_url)
    locator = ServiceLocator(sqlalchemy_services(engine, LocalAssetStore(assetstore_dir)))
    locator.init()
    try:
        return LeakSweeper(locator, strict=strict).sweep()
    finally:
        locator.destroy()
        engine.dispose()
