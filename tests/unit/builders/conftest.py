"""Fixtures for builder lifecycle unit tests (in-memory backend)."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from typing import TYPE_CHECKING

import pytest

from repobuilder.adapters.memory import InMemoryRepositoryData
from repobuilder.bootstrap import memory_services
from repobuilder.builders.locator import ServiceLocator
from repobuilder.builders.registry import BuilderRegistry

from .fakes import RecordingBuilder

if TYPE_CHECKING:
    from repobuilder.interfaces.session import AbstractSession

# pylint: disable=redefined-outer-name


@pytest.fixture
def data() -> InMemoryRepositoryData:
    """Shared in-memory tables backing the locator's services."""
    return InMemoryRepositoryData()


@pytest.fixture
def locator(data: InMemoryRepositoryData) -> Iterator[ServiceLocator]:
    """An initialized locator over `data`; destroyed after the test."""
    loc = ServiceLocator(memory_services(data))
    loc.init()
    yield loc
    loc.destroy()


@pytest.fixture
def registry() -> BuilderRegistry:
    """An empty registry."""
    return BuilderRegistry()


@pytest.fixture
def test_session(locator: ServiceLocator) -> AbstractSession:
    """The session builders under test create through."""
    return locator.handles.new_session()


@pytest.fixture
def make_recording(
    test_session: AbstractSession, registry: BuilderRegistry, locator: ServiceLocator
) -> Callable[..., RecordingBuilder]:
    """Factory fixture: construct a registered `RecordingBuilder`.

    Example:
        make_recording("X", priority=10, log=calls)
    """

    def _make(name: str, **kwargs) -> RecordingBuilder:
        return RecordingBuilder(
            test_session, registry=registry, locator=locator, name=name, **kwargs
        )

    return _make
