"""pytest fixtures that bracket each test with a builder run.

Load with ``pytest_plugins = ["repobuilder.pytest_plugin"]`` in a conftest.
Override `builder_services` to run builders against another backend:

    ```py
    @pytest.fixture
    def builder_services(sqlite_engine_file, tmp_path):
        return sqlalchemy_services(sqlite_engine_file, LocalAssetStore(tmp_path))
    ```
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from typing import TYPE_CHECKING

import pytest

from repobuilder.bootstrap import BuilderRun, memory_services

if TYPE_CHECKING:
    from repobuilder.builders.locator import ServiceHandles
    from repobuilder.interfaces.session import AbstractSession


@pytest.fixture
def builder_services() -> Callable[[], ServiceHandles]:
    """Service provider for `builder_run`. Defaults to a fresh in-memory backend."""
    return memory_services()


@pytest.fixture
def builder_run(builder_services: Callable[[], ServiceHandles]) -> Iterator[BuilderRun]:
    """A started `BuilderRun`; torn down and swept after the test.

    Teardown and leak-sweep failures surface as errors of the test.
    """
    run = BuilderRun(builder_services).start()
    yield run
    run.finish()


@pytest.fixture
def builder_session(builder_run: BuilderRun) -> AbstractSession:
    """The session builders created through `builder_run.new()` use."""
    return builder_run.session
