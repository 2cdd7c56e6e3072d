"""Collection builder."""

from __future__ import annotations

from typing import TYPE_CHECKING

from repobuilder.domain.model import Collection, Community
from repobuilder.interfaces.services import CollectionService

from .base import Builder

if TYPE_CHECKING:
    from repobuilder.interfaces.session import AbstractSession

    from .locator import ServiceLocator
    from .registry import BuilderRegistry

PRIORITY = 75


class CollectionBuilder(Builder[Collection, CollectionService]):
    """Builds a collection inside `community`.

    Torn down after the items it holds and before its community.
    """

    def __init__(
        self,
        session: AbstractSession,
        *,
        registry: BuilderRegistry,
        locator: ServiceLocator,
        community: Community,
    ) -> None:
        self._community = community
        self._name = "Test collection"
        super().__init__(session, registry=registry, locator=locator)

    def with_name(self, name: str) -> CollectionBuilder:
        """Set the collection name."""
        self._name = name
        return self

    def get_priority(self) -> int:
        return PRIORITY

    def get_service(self) -> CollectionService:
        return self.services.collections

    def _create(self, session: AbstractSession) -> Collection:
        return self.get_service().create(session, self._name, self._community)
