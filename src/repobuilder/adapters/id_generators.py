"""ID generators for REPOBUILDER records."""

import itertools
import threading

from ulid import monotonic

from repobuilder.interfaces.id_generator import ID_LENGTH, IdGenerator

# pylint: disable=too-few-public-methods


class ULIDGenerator(IdGenerator):
    """Thread-safe monotonic ULID generator.

    ULIDs are unique, lexicographically sortable identifiers, so records
    created later sort after records created earlier. This generator uses the
    `ulid-py` library to create ULIDs.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()

    def new_id(self) -> str:
        """Generate a new ULID (serialized across threads)."""
        with self._lock:
            return str(monotonic.new())


class SequentialIdGenerator(IdGenerator):
    """Produces zero-padded sequential IDs with the same width as a ULID.

    Note:
        Not suitable for production use; handy for deterministic test output.
    """

    def __init__(self, length: int = ID_LENGTH) -> None:
        self._counter = itertools.count(1)
        self._length = length

    def new_id(self) -> str:
        """Generate the next identifier."""
        return f"{next(self._counter):0{self._length}d}"
