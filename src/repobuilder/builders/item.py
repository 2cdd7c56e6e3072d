"""Item builder."""

from __future__ import annotations

from typing import TYPE_CHECKING

from repobuilder.domain.model import Collection, EPerson, Item
from repobuilder.interfaces.services import ItemService

from .base import Builder

if TYPE_CHECKING:
    from repobuilder.interfaces.session import AbstractSession

    from .locator import ServiceLocator
    from .registry import BuilderRegistry

PRIORITY = 200


class ItemBuilder(Builder[Item, ItemService]):
    """Builds an item in `collection`.

    Removing the item soft-deletes its bitstreams; the leak sweep expunges
    them afterwards.
    """

    def __init__(
        self,
        session: AbstractSession,
        *,
        registry: BuilderRegistry,
        locator: ServiceLocator,
        collection: Collection,
    ) -> None:
        self._collection = collection
        self._title = "Test item"
        self._submitter: EPerson | None = None
        super().__init__(session, registry=registry, locator=locator)

    def with_title(self, title: str) -> ItemBuilder:
        """Set the item title."""
        self._title = title
        return self

    def with_submitter(self, submitter: EPerson) -> ItemBuilder:
        """Record `submitter` as the account that deposited the item."""
        self._submitter = submitter
        return self

    def get_priority(self) -> int:
        return PRIORITY

    def get_service(self) -> ItemService:
        return self.services.items

    def _create(self, session: AbstractSession) -> Item:
        return self.get_service().create(
            session, self._title, self._collection, submitter=self._submitter
        )
