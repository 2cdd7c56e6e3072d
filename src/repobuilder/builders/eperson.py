"""EPerson (user account) builder."""

from __future__ import annotations

import uuid
from typing import TYPE_CHECKING

from repobuilder.domain.model import EPerson
from repobuilder.interfaces.services import EPersonService

from .base import Builder

if TYPE_CHECKING:
    from repobuilder.interfaces.session import AbstractSession

    from .locator import ServiceLocator
    from .registry import BuilderRegistry

PRIORITY = 150


class EPersonBuilder(Builder[EPerson, EPersonService]):
    """Builds a user account.

    Without `with_email` a unique address under example.org is generated.
    Accounts are torn down after the items they submitted.
    """

    def __init__(
        self,
        session: AbstractSession,
        *,
        registry: BuilderRegistry,
        locator: ServiceLocator,
    ) -> None:
        self._email = f"user-{uuid.uuid4().hex[:12]}@example.org"
        self._first_name = ""
        self._last_name = ""
        self._can_log_in = True
        super().__init__(session, registry=registry, locator=locator)

    def with_email(self, email: str) -> EPersonBuilder:
        """Set the e-mail address."""
        self._email = email
        return self

    def with_name(self, first_name: str, last_name: str) -> EPersonBuilder:
        """Set first and last name."""
        self._first_name = first_name
        self._last_name = last_name
        return self

    def with_can_log_in(self, can_log_in: bool) -> EPersonBuilder:
        """Allow or forbid password login."""
        self._can_log_in = can_log_in
        return self

    def get_priority(self) -> int:
        return PRIORITY

    def get_service(self) -> EPersonService:
        return self.services.epersons

    def _create(self, session: AbstractSession) -> EPerson:
        return self.get_service().create(
            session,
            self._email,
            first_name=self._first_name,
            last_name=self._last_name,
            can_log_in=self._can_log_in,
        )
