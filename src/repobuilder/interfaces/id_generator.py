"""Interface for record ID generators."""

import abc

# pylint: disable=too-few-public-methods

ID_LENGTH = 26


class IdGenerator(abc.ABC):
    """Contract for an ID generator.

    Every repository record is keyed by a string of exactly `ID_LENGTH`
    characters (the width of a ULID and of every ``id`` column). IDs must be
    unique for the generator's lifetime.
    """

    @abc.abstractmethod
    def new_id(self) -> str:
        """Generate a new unique identifier."""
