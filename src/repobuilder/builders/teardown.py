"""Teardown coordinator: drains the registry in priority order."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from .errors import TeardownError

if TYPE_CHECKING:
    from .base import Builder
    from .registry import BuilderRegistry

logger = logging.getLogger(__name__)


def teardown_order(builders: list[Builder]) -> list[Builder]:
    """Sort builders by descending priority.

    The sort is stable, so builders with equal priority keep their
    registration order and repeated runs tear down in the same order.
    """
    return sorted(builders, key=lambda b: b.get_priority(), reverse=True)


class TeardownCoordinator:
    """Invokes `cleanup()` on every registered builder, highest priority first.

    Args:
        registry: The run's registry; it is empty when `cleanup_all()` returns
            or raises.
        fail_fast: When False (default) every cleanup runs in its own failure
            boundary and failures are raised together at the end as a
            `TeardownError`. When True the first failure aborts the sweep and
            propagates; the builders not reached are discarded with a warning.
    """

    def __init__(self, registry: BuilderRegistry, *, fail_fast: bool = False) -> None:
        self.registry = registry
        self.fail_fast = fail_fast

    def cleanup_all(self) -> list[Builder]:
        """Clean up every registered builder.

        Returns:
            The builders whose cleanup succeeded, in invocation order.

        Raises:
            TeardownError: (isolated mode) if any cleanup failed.
            Exception: (fail-fast mode) the first cleanup failure.
        """
        ordered = teardown_order(self.registry.snapshot())
        logger.debug("Tearing down %d builder(s)", len(ordered))

        cleaned: list[Builder] = []
        failures: list[tuple[Builder, Exception]] = []
        for position, builder in enumerate(ordered):
            try:
                builder.cleanup()
            except Exception as e:  # pylint: disable=broad-except
                self.registry.discard(builder)
                logger.warning("Discarding %r after failed cleanup", builder)
                if self.fail_fast:
                    self._discard_remaining(ordered[position + 1 :])
                    raise
                logger.exception("Cleanup of %r failed", builder)
                failures.append((builder, e))
                continue
            self.registry.discard(builder)
            cleaned.append(builder)

        if failures:
            raise TeardownError(failures)
        return cleaned

    def _discard_remaining(self, builders: list[Builder]) -> None:
        for builder in builders:
            self.registry.discard(builder)
            logger.warning("Discarding %r without cleanup (teardown aborted)", builder)
