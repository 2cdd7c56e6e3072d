"""Repository records.

Records are immutable value snapshots of what the persistence layer holds.
Services return fresh snapshots; state changes (e.g., a bitstream soft
delete) produce a new record via `dataclasses.replace`.
"""

from __future__ import annotations

from dataclasses import dataclass

# pylint: disable=too-many-instance-attributes


@dataclass(frozen=True, slots=True)
class Community:
    """A top-level (or nested) container of collections."""

    id: str
    name: str
    parent_id: str | None = None


@dataclass(frozen=True, slots=True)
class Collection:
    """A container of items, owned by exactly one community."""

    id: str
    name: str
    community_id: str


@dataclass(frozen=True, slots=True)
class Item:
    """An archived item inside a collection."""

    id: str
    title: str
    collection_id: str
    submitter_id: str | None = None


@dataclass(frozen=True, slots=True)
class EPerson:
    """A user account."""

    id: str
    email: str
    first_name: str = ""
    last_name: str = ""
    can_log_in: bool = True

    @property
    def full_name(self) -> str:
        """First and last name joined, ignoring empty parts."""
        return " ".join(part for part in (self.first_name, self.last_name) if part)


@dataclass(frozen=True, slots=True)
class Bitstream:
    """A stored binary object.

    `deleted` is the logical (soft) delete flag. The bytes addressed by
    `digest` stay in the asset store until the record is expunged.
    """

    id: str
    name: str
    digest: str
    size_bytes: int
    mime_type: str = "application/octet-stream"
    item_id: str | None = None
    deleted: bool = False


RepositoryObject = Community | Collection | Item | EPerson | Bitstream
