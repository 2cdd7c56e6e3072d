"""Domain-layer error definitions."""

# ============================================================================
#                           General domain errors
# ============================================================================


class DomainError(Exception):
    """Base class for domain-layer errors."""


class EntityNotFoundError(DomainError):
    """Raised when an operation targets a record that does not exist."""

    def __init__(self, kind: str, entity_id: str) -> None:
        super().__init__(f"{kind} '{entity_id}' does not exist.")
        self.kind = kind
        self.entity_id = entity_id


class DuplicateEntityError(DomainError):
    """Raised when a unique attribute is already taken by another record."""

    def __init__(self, kind: str, field: str, value: str) -> None:
        super().__init__(f"{kind} with {field} '{value}' already exists.")
        self.kind = kind
        self.field = field
        self.value = value


class ReferentialIntegrityError(DomainError):
    """Raised when deleting a record that other records still depend on."""

    def __init__(self, kind: str, entity_id: str, dependents: str) -> None:
        super().__init__(
            f"{kind} '{entity_id}' cannot be deleted while it still has {dependents}."
        )
        self.kind = kind
        self.entity_id = entity_id
        self.dependents = dependents


class AuthorizationError(DomainError):
    """Raised when an administrative operation runs without an authorization bypass."""

    def __init__(self, action: str) -> None:
        super().__init__(f"Not authorized to {action}.")
        self.action = action


# ============================================================================
#                   Bitstream related errors
# ============================================================================


class BitstreamNotDeletedError(DomainError):
    """Raised when expunging a bitstream that has not been soft-deleted first."""

    def __init__(self, bitstream_id: str) -> None:
        super().__init__(
            f"Bitstream {bitstream_id} must be deleted before it can be expunged."
        )
        self.bitstream_id = bitstream_id
