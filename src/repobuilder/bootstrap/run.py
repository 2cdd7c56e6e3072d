"""Builder run: the lifecycle of one test, from locator init to leak sweep."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, TypeVar

from repobuilder.builders.errors import BuilderError, RunFailedError
from repobuilder.builders.locator import ServiceLocator
from repobuilder.builders.registry import BuilderRegistry
from repobuilder.builders.sweeper import LeakSweeper, SweepReport
from repobuilder.builders.teardown import TeardownCoordinator

if TYPE_CHECKING:
    from collections.abc import Callable

    from repobuilder.builders.base import Builder
    from repobuilder.builders.locator import ServiceHandles
    from repobuilder.interfaces.session import AbstractSession

logger = logging.getLogger(__name__)

B = TypeVar("B", bound="Builder")


class BuilderRun:
    """Owns the registry, locator, coordinator and sweeper of one test run.

    Usage:
        ```py
        with BuilderRun(memory_services()) as run:
            community = run.new(CommunityBuilder).with_name("Top").build()
        ```

    Args:
        provider: Produces the run's `ServiceHandles`.
        fail_fast: Passed to the `TeardownCoordinator`.
        strict: Passed to the `LeakSweeper`.
    """

    def __init__(
        self,
        provider: Callable[[], ServiceHandles],
        *,
        fail_fast: bool = False,
        strict: bool = True,
    ) -> None:
        self.registry = BuilderRegistry()
        self.locator = ServiceLocator(provider)
        self.coordinator = TeardownCoordinator(self.registry, fail_fast=fail_fast)
        self.sweeper = LeakSweeper(self.locator, strict=strict)
        self._session: AbstractSession | None = None

    @property
    def session(self) -> AbstractSession:
        """The test's session, shared by builders created through `new()`."""
        if self._session is None:
            raise RuntimeError("Builder run has not been started")
        return self._session

    def start(self) -> BuilderRun:
        """Reset the registry, initialize services and open the test session."""
        self.registry.reset()
        handles = self.locator.init()
        self._session = handles.new_session()
        logger.debug("Builder run started")
        return self

    def new(self, builder_cls: type[B], **kwargs: Any) -> B:
        """Construct `builder_cls` bound to this run's session, registry and locator."""
        return builder_cls(
            self.session, registry=self.registry, locator=self.locator, **kwargs
        )

    def finish(self) -> SweepReport:
        """Tear the run down.

        Closes the test session, cleans up every registered builder, sweeps
        leftover bitstreams and destroys the service handles. The locator is
        destroyed even if teardown or the sweep raises. The sweep runs even
        when teardown failed; the teardown error is then raised after it.

        Raises:
            TeardownError: If any builder cleanup failed (in fail-fast mode,
                the first cleanup error instead).
            LeakSweepError, LeakDetectedError: From the sweep.
            RunFailedError: If teardown and the sweep both failed.
        """
        try:
            if self._session is not None:
                self._session.rollback()
                self._session.close()
                self._session = None

            teardown_error: Exception | None = None
            try:
                self.coordinator.cleanup_all()
            except Exception as e:  # pylint: disable=broad-exception-caught
                teardown_error = e

            try:
                report = self.sweeper.sweep()
            except BuilderError as e:
                if teardown_error is None:
                    raise
                raise RunFailedError(teardown_error, e) from e
            if teardown_error is not None:
                raise teardown_error
        finally:
            self.locator.destroy()
            logger.debug("Builder run finished")
        return report

    def __enter__(self) -> BuilderRun:
        return self.start()

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.finish()
