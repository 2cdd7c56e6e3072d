"""Service locator: the run-scoped handle set the builders act through."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from .errors import ServicesNotInitializedError

if TYPE_CHECKING:
    from repobuilder.interfaces.assetstore import AssetStore
    from repobuilder.interfaces.services import (
        BitstreamService,
        CollectionService,
        CommunityService,
        EPersonService,
        IndexingService,
        ItemService,
    )
    from repobuilder.interfaces.session import AbstractSession

logger = logging.getLogger(__name__)

# pylint: disable=too-many-instance-attributes


@dataclass(frozen=True)
class ServiceHandles:
    """Resolved references to every service the builders may need."""

    new_session: Callable[[], AbstractSession]
    communities: CommunityService
    collections: CollectionService
    items: ItemService
    epersons: EPersonService
    bitstreams: BitstreamService
    indexing: IndexingService
    assetstore: AssetStore


class ServiceLocator:
    """Resolves and caches a `ServiceHandles` set for one test-run cycle.

    Args:
        provider: Zero-argument callable producing the handle set. Called once
            per `init()`; its exceptions propagate unchanged.
    """

    def __init__(self, provider: Callable[[], ServiceHandles]) -> None:
        self._provider = provider
        self._handles: ServiceHandles | None = None

    @property
    def initialized(self) -> bool:
        """True between `init()` and `destroy()`."""
        return self._handles is not None

    @property
    def handles(self) -> ServiceHandles:
        """The cached handle set.

        Raises:
            ServicesNotInitializedError: Before `init()` or after `destroy()`.
        """
        if self._handles is None:
            raise ServicesNotInitializedError()
        return self._handles

    def init(self) -> ServiceHandles:
        """Resolve the handle set. A second call within a cycle is a no-op."""
        if self._handles is not None:
            logger.debug("Service locator already initialized; keeping handles")
            return self._handles
        self._handles = self._provider()
        logger.debug("Service locator initialized")
        return self._handles

    def destroy(self) -> None:
        """Release the cached handles so stale references cannot cross cycles."""
        if self._handles is not None:
            logger.debug("Service locator destroyed")
        self._handles = None
