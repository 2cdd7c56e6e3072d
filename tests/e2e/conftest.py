"""Default marks for tests under `tests/e2e/`."""

import logging
from pathlib import Path

import pytest

# pylint: disable=unused-argument

E2E_ROOT = Path(__file__).parent.resolve()
MARKER_NAME = "e2e"


@pytest.hookimpl(tryfirst=True)
def pytest_collection_modifyitems(
    config: pytest.Config, items: list[pytest.Item]
) -> None:
    """Add default `e2e` marks to items in `tests/e2e/`."""
    for item in items:
        path = item.path.resolve()  # pytest>=8: pathlib.Path
        if E2E_ROOT in path.parents:
            if not any(marker.name == MARKER_NAME for marker in item.iter_markers()):
                item.add_marker(pytest.mark.e2e)


@pytest.fixture(autouse=True)
def _restore_root_logger():
    """Undo the CLI's `basicConfig(force=True)` so later tests see the default root logger."""
    root = logging.getLogger()
    level, handlers = root.level, root.handlers[:]
    yield
    root.setLevel(level)
    root.handlers[:] = handlers
