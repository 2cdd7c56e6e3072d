"""Fixtures providing service handles for each persistence backend."""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path
from typing import TYPE_CHECKING

import pytest

from repobuilder.adapters.assetstore import LocalAssetStore
from repobuilder.bootstrap import memory_services, sqlalchemy_services

if TYPE_CHECKING:
    from repobuilder.bootstrap.bootstrap import ServiceProvider
    from repobuilder.builders.locator import ServiceHandles
    from repobuilder.interfaces.session import AbstractSession

# pylint: disable=redefined-outer-name


@pytest.fixture(params=["memory", "sqlite"])
def provider(request: pytest.FixtureRequest, tmp_path: Path) -> ServiceProvider:
    """Service provider for the requested backend.

    Current params:
      - `"memory"` → in-memory records and `MemoryAssetStore`
      - `"sqlite"` → SQLAlchemy services on a temp SQLite file and a
        `LocalAssetStore` under `tmp_path`
    """
    match request.param:
        case "memory":
            return memory_services()
        case "sqlite":
            engine = request.getfixturevalue("sqlite_engine_file")
            return sqlalchemy_services(engine, LocalAssetStore(tmp_path / "assetstore"))
        case _:
            raise ValueError(f"unknown backend: {request.param}")


@pytest.fixture
def handles(provider: ServiceProvider) -> ServiceHandles:
    """A resolved handle set for the requested backend."""
    return provider()


@pytest.fixture
def session(handles: ServiceHandles) -> Iterator[AbstractSession]:
    """An open session on the requested backend, closed after the test."""
    with handles.new_session() as s:
        yield s
