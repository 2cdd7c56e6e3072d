"""Builder lifecycle errors.

Taxonomy
--------
- Configuration errors (fatal, fail fast): `ServicesNotInitializedError`,
  `InvalidPriorityError`, `DuplicateRegistrationError`.
- Creation/deletion errors: `CreationError`, `DeletionError`. Chained to the
  domain error that caused them.
- Teardown errors: `TeardownError`, aggregating every failed cleanup.
- Leak sweep errors: `LeakSweepError` (storage trouble) and
  `LeakDetectedError` (bitstreams a test never deleted).
- `RunFailedError`: teardown and the leak sweep after it both failed.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .base import Builder


class BuilderError(Exception):
    """Base class for builder lifecycle errors."""


# ============================================================================
#                           Configuration errors
# ============================================================================


class ConfigurationError(BuilderError):
    """Base class for programming/configuration errors of the lifecycle."""


class ServicesNotInitializedError(ConfigurationError):
    """Raised when services are used before `init()` or after `destroy()`."""

    def __init__(self) -> None:
        super().__init__(
            "Builder services are not initialized; call ServiceLocator.init() "
            "before using builders and do not use them after destroy()."
        )


class InvalidPriorityError(ConfigurationError, ValueError):
    """Raised when a builder declares a teardown priority that is not a positive int."""

    def __init__(self, builder: Builder, priority: object) -> None:
        super().__init__(
            f"{type(builder).__name__} declares teardown priority {priority!r}; "
            "it must be a positive integer."
        )
        self.builder = builder
        self.priority = priority


class DuplicateRegistrationError(ConfigurationError):
    """Raised when the same builder is registered twice."""

    def __init__(self, builder: Builder) -> None:
        super().__init__(f"{builder!r} is already registered.")
        self.builder = builder


# ============================================================================
#                           Creation/deletion errors
# ============================================================================


class CreationError(BuilderError):
    """Raised when the domain services reject a build."""

    def __init__(self, builder: Builder, reason: str) -> None:
        super().__init__(f"{type(builder).__name__} failed to build: {reason}")
        self.builder = builder


class DeletionError(BuilderError):
    """Raised when the domain services reject a delete."""

    def __init__(self, builder: Builder, reason: str) -> None:
        super().__init__(f"{type(builder).__name__} failed to delete: {reason}")
        self.builder = builder


# ============================================================================
#                           Teardown errors
# ============================================================================


class TeardownError(BuilderError):
    """Raised after a teardown sweep in which one or more cleanups failed."""

    def __init__(self, failures: Sequence[tuple[Builder, BaseException]]) -> None:
        names = ", ".join(f"{type(b).__name__} ({e})" for b, e in failures)
        super().__init__(f"{len(failures)} builder cleanup(s) failed: {names}")
        self.failures = list(failures)


# ============================================================================
#                           Leak sweep errors
# ============================================================================


class LeakSweepError(BuilderError):
    """Raised when bitstreams cannot be enumerated or purged."""


class LeakDetectedError(BuilderError):
    """Raised when the sweep finds bitstreams that no test deleted.

    They have been purged by the time this is raised; the error points at the
    test-hygiene defect that left them behind.
    """

    def __init__(self, bitstream_ids: Sequence[str]) -> None:
        super().__init__(
            f"{len(bitstream_ids)} bitstream(s) were never deleted by the tests "
            f"that created them: {', '.join(bitstream_ids)}"
        )
        self.bitstream_ids = tuple(bitstream_ids)


# ============================================================================
#                           Run errors
# ============================================================================


class RunFailedError(BuilderError):
    """Raised when teardown failed and the leak sweep that followed failed too.

    Attributes:
        teardown_error: What teardown raised (a `TeardownError`, or the first
            cleanup error in fail-fast mode).
        sweep_error: What the sweep raised.
        failures: The failed cleanups, as on `TeardownError`.
    """

    def __init__(self, teardown_error: Exception, sweep_error: BuilderError) -> None:
        super().__init__(
            f"Teardown failed: {teardown_error}; the leak sweep then failed too: "
            f"{sweep_error}"
        )
        self.teardown_error = teardown_error
        self.sweep_error = sweep_error
        self.failures = (
            list(teardown_error.failures)
            if isinstance(teardown_error, TeardownError)
            else []
        )
