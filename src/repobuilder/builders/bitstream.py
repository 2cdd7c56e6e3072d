"""Bitstream builder."""

from __future__ import annotations

import io
from typing import TYPE_CHECKING, BinaryIO

from repobuilder.domain.model import Bitstream, Item
from repobuilder.interfaces.services import BitstreamService

from .base import Builder

if TYPE_CHECKING:
    from repobuilder.interfaces.session import AbstractSession

    from .locator import ServiceLocator
    from .registry import BuilderRegistry

PRIORITY = 300


class BitstreamBuilder(Builder[Bitstream, BitstreamService]):
    """Builds a bitstream, attached to `item` when one is given.

    `delete()` and `cleanup()` only soft-delete: the record and its bytes
    remain until the run's leak sweep expunges them.
    """

    def __init__(
        self,
        session: AbstractSession,
        *,
        registry: BuilderRegistry,
        locator: ServiceLocator,
        item: Item | None = None,
    ) -> None:
        self._item = item
        self._name = "test.txt"
        self._mime_type = "text/plain"
        self._content: BinaryIO = io.BytesIO(b"test content")
        super().__init__(session, registry=registry, locator=locator)

    def with_name(self, name: str) -> BitstreamBuilder:
        """Set the file name."""
        self._name = name
        return self

    def with_mime_type(self, mime_type: str) -> BitstreamBuilder:
        """Set the MIME type."""
        self._mime_type = mime_type
        return self

    def with_content(self, content: bytes | BinaryIO) -> BitstreamBuilder:
        """Set the bytes to store, as bytes or a readable binary stream."""
        self._content = io.BytesIO(content) if isinstance(content, bytes) else content
        return self

    def get_priority(self) -> int:
        return PRIORITY

    def get_service(self) -> BitstreamService:
        return self.services.bitstreams

    def _create(self, session: AbstractSession) -> Bitstream:
        return self.get_service().create(
            session,
            self._content,
            name=self._name,
            mime_type=self._mime_type,
            item=self._item,
        )
