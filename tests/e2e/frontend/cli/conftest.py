"""Fixtures and test helpers for end-to-end CLI tests.

Provides a test-only `log-demo` Click command that emits structured log
messages, fixtures to register that command, obtain a CliRunner and run
tests within an isolated filesystem, and a SQLite database for the `db` and
`sweep` commands.
"""

import io
import logging

import click
import pytest
from click.testing import CliRunner

from repobuilder.adapters.assetstore import LocalAssetStore
from repobuilder.bootstrap import sqlalchemy_services
from repobuilder.entrypoints.cli.main import repobuilder
from tests.fixtures.sqlite import sqlite_url

# pylint: disable=redefined-outer-name


@click.command()
def log_demo():
    """Emit representative log messages for CLI/flight-recorder tests.

    Emits DEBUG/INFO/WARNING/ERROR/CRITICAL messages on the 'repobuilder.demo'
    logger and additional messages on a 'some.thirdparty' logger to exercise
    logger-level filtering and flight-recorder behavior.
    """
    logger = logging.getLogger("repobuilder.demo")
    logger.debug("This is a debug-level test message.")
    logger.info("This is an info-level test message.")
    logger.warning("This is a warning-level test message.")
    logger.error("This is an error-level test message.")
    logger.critical("This is a critical-level test message.")
    third_party_logger = logging.getLogger("some.thirdparty")
    third_party_logger.debug("This is a debug-level third-party test message.")
    third_party_logger.info("This is an info-level third-party test message.")
    third_party_logger.warning("This is a warning-level third-party test message.")
    logger.debug("This is a final debug-level test message.")


def _remove_command_everywhere(group, name: str) -> None:
    """Remove a command from a Click group and its internal sections.

    Ensures the test-only command is removed from the group and any internal
    registries Click may use so cleanup is robust across Click versions.
    """
    group.commands.pop(name, None)
    if hasattr(group, "_default_section"):
        group._default_section.commands.pop(name, None)  # pylint: disable=protected-access
    for sec in getattr(group, "_sections", []):
        getattr(sec, "commands", {}).pop(name, None)


@pytest.fixture
def registered_log_demo():
    """Register the 'log-demo' command for the duration of a test."""
    repobuilder.add_command(log_demo, name="log-demo")
    try:
        yield
    finally:
        _remove_command_everywhere(repobuilder, "log-demo")


@pytest.fixture
def runner():
    """Return a CliRunner whose flight recorder writes into the working directory."""
    return CliRunner(env={"REPOBUILDER_LOG_PATH": "latest.log"})


@pytest.fixture
def fs(runner):
    """Provide an isolated filesystem context for tests using CliRunner."""
    with runner.isolated_filesystem():
        yield


@pytest.fixture
def db_env(tmp_path, sqlite_engine_file):
    """Environment pointing the CLI at the test's SQLite database and asset store."""
    return {
        "REPOBUILDER_DB_URL": sqlite_url(tmp_path / "test.db"),
        "REPOBUILDER_ASSETSTORE_DIR": str(tmp_path / "assetstore"),
        "REPOBUILDER_LOG_PATH": str(tmp_path / "cli.log"),
    }


@pytest.fixture
def seed_bitstream(tmp_path, sqlite_engine_file):
    """Return a function that leaves one bitstream behind in the test database."""
    handles = sqlalchemy_services(
        sqlite_engine_file, LocalAssetStore(tmp_path / "assetstore")
    )()

    def _seed(*, deleted: bool) -> str:
        with handles.new_session() as session:
            bitstream = handles.bitstreams.create(
                session, io.BytesIO(b"left behind"), name="left.txt"
            )
            if deleted:
                handles.bitstreams.delete(session, bitstream)
            session.commit()
        return bitstream.id

    return _seed
