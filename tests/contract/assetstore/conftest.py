"""Pytest fixtures for asset store contract tests.

Provided fixtures
-----------------
- **store**: Parametrized backend factory returning a **fresh** `AssetStore`
  per test: `"memory"` (`MemoryAssetStore`) and `"local"` (`LocalAssetStore`
  under the test's temp dir).
- **payload**: Small deterministic byte sample.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from repobuilder.adapters.assetstore import LocalAssetStore, MemoryAssetStore
from repobuilder.interfaces.assetstore import AssetStore


@pytest.fixture(params=["memory", "local"])
def store(request: pytest.FixtureRequest, tmp_path: Path) -> AssetStore:
    """Return a fresh asset store for the requested backend."""
    match request.param:
        case "memory":
            return MemoryAssetStore()
        case "local":
            return LocalAssetStore(tmp_path / "assetstore")
        case _:
            raise ValueError(f"unknown store type: {request.param}")


@pytest.fixture
def payload() -> bytes:
    """Deterministic sample payload."""
    return b"The quick brown fox jumps over the lazy dog"
