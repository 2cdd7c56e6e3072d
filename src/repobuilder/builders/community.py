"""Community builder."""

from __future__ import annotations

from typing import TYPE_CHECKING

from repobuilder.domain.model import Community
from repobuilder.interfaces.services import CommunityService

from .base import Builder

if TYPE_CHECKING:
    from repobuilder.interfaces.session import AbstractSession

    from .locator import ServiceLocator
    from .registry import BuilderRegistry

BASE_PRIORITY = 25
MAX_DEPTH_BONUS = 24


class CommunityBuilder(Builder[Community, CommunityService]):
    """Builds a top-level community, or a sub-community when `parent` is given.

    Communities are torn down after the collections they own. Nested
    communities get one extra priority point per level of depth, so children
    are removed before their parents.
    """

    def __init__(
        self,
        session: AbstractSession,
        *,
        registry: BuilderRegistry,
        locator: ServiceLocator,
        parent: Community | None = None,
    ) -> None:
        self._parent = parent
        self._name = "Test community"
        self._depth: int | None = None
        super().__init__(session, registry=registry, locator=locator)

    def with_name(self, name: str) -> CommunityBuilder:
        """Set the community name."""
        self._name = name
        return self

    def get_priority(self) -> int:
        if self._depth is None:
            self._depth = self._nesting_depth()
        return BASE_PRIORITY + min(self._depth, MAX_DEPTH_BONUS)

    def get_service(self) -> CommunityService:
        return self.services.communities

    def _create(self, session: AbstractSession) -> Community:
        return self.get_service().create(session, self._name, parent=self._parent)

    def _nesting_depth(self) -> int:
        depth = 0
        ancestor = self._parent
        while ancestor is not None and depth <= MAX_DEPTH_BONUS:
            depth += 1
            if ancestor.parent_id is None:
                break
            ancestor = self.get_service().find(self.session, ancestor.parent_id)
        return depth
