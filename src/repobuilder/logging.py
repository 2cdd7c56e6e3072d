"""Logging helpers used by the repobuilder CLI and test runs.

Console output goes through Rich; an in-memory "flight recorder" buffers
DEBUG records and writes them to disk when something goes wrong, so a failed
teardown or leak sweep leaves a full trace behind without making the console
noisy. Records from third-party loggers get a short bracketed prefix.
"""

from __future__ import annotations

import logging
import os
import platform
import sys
from logging.handlers import MemoryHandler
from pathlib import Path
from typing import TYPE_CHECKING, Literal, TypeAlias

import alembic
import sqlalchemy
from rich.console import Console
from rich.logging import RichHandler

if TYPE_CHECKING:
    from logging import Logger

# pylint: disable=too-few-public-methods

PROJECT_PREFIX = "repobuilder"
BASE_LEVEL = logging.WARNING


class ThirdPartyPrefixFilter(logging.Filter):
    """Annotate third-party log records with a short prefix.

    Records whose logger name does not start with the project prefix get
    `record.prefix` set to a token like "[sqlalchemy]"; project records get an
    empty prefix. Never filters anything out.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        if not record.name.startswith(PROJECT_PREFIX):
            # e.g. "sqlalchemy.engine.Engine" -> "[sqlalchemy]"
            record.prefix = f"[{record.name.split('.')[0]}]"
        else:
            record.prefix = ""
        return True


def effective_level(verbose_count: int = 0, quiet_count: int = 0) -> int:
    """Shift the WARNING default one level per -v/-q, clamped to DEBUG..CRITICAL."""
    level = BASE_LEVEL - (10 * verbose_count) + (10 * quiet_count)
    return max(logging.DEBUG, min(logging.CRITICAL, level))


def config_console_handler(
    level: int = logging.INFO, debug_mode: bool = False, color: bool = True
) -> RichHandler:
    """Configure and return a RichHandler writing to stderr.

    In debug mode the handler logs at DEBUG and shows source paths and
    timestamps; otherwise third-party records get a short prefix.

    Args:
        level: Minimum level for console output (overridden to DEBUG in debug_mode).
        debug_mode: Enable debug formatting.
        color: Enable color output when True.

    Returns:
        RichHandler: Handler suitable to attach to the root logger.
    """

    # Mirrors click-extra's --color / --no-color option
    ColorSystem: TypeAlias = Literal["auto", "standard", "256", "truecolor", "windows"]
    color_system: ColorSystem | None = "auto" if color else None
    console = Console(color_system=color_system, stderr=True)

    if debug_mode:
        level = logging.DEBUG

    handler = RichHandler(
        level=level,
        console=console,
        rich_tracebacks=True,
        show_time=False,
        show_path=debug_mode,
        enable_link_path=debug_mode,
    )

    fmt = (
        "%(prefix)s %(message)s"
        if not debug_mode
        else "%(asctime)s %(name)s: %(message)s"
    )
    handler.setFormatter(logging.Formatter(fmt=fmt))

    if not debug_mode:
        handler.addFilter(ThirdPartyPrefixFilter())

    return handler


def config_flight_recorder(
    path: Path,
    capacity: int = 2000,
    flush_level: int = logging.WARNING,
    flush_on_close: bool = False,
) -> MemoryHandler:
    """Configure an in-memory flight recorder backed by a file.

    Buffers up to `capacity` records and flushes them to `path` when a record
    at `flush_level` or higher is emitted, or on close if `flush_on_close`.

    Args:
        path: Destination file for flushed records.
        capacity: Number of records to buffer in memory.
        flush_level: Level at or above which the buffer is flushed.
        flush_on_close: Flush the buffer when the handler is closed.

    Returns:
        MemoryHandler: A memory-backed handler with a FileHandler target.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    file_handler = logging.FileHandler(path, mode="w", encoding="utf-8")
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(
        logging.Formatter(
            "[%(asctime)s] [%(process)d:%(threadName)s] %(levelname)s %(name)s:%(lineno)d: %(message)s"
        )
    )

    return MemoryHandler(
        capacity=capacity,
        flushLevel=flush_level,
        target=file_handler,
        flushOnClose=flush_on_close,
    )


def configure_logging(  # pylint: disable=too-many-arguments
    *,
    level: int,
    debug: bool = False,
    color: bool = True,
    log_path: Path | None = None,
    flight_capacity: int = 2000,
    force_flush: bool = False,
    logger_levels: dict[str, int] | None = None,
) -> list[logging.Handler]:
    """Install the console handler (and the flight recorder when `log_path` is set).

    The root logger captures everything; each handler filters on its own
    level. Entries in `logger_levels` set the named loggers' own levels, so
    they apply to both handlers.

    Returns:
        The installed handlers.
    """
    handlers: list[logging.Handler] = [
        config_console_handler(level=level, debug_mode=debug, color=color)
    ]
    if log_path is not None:
        handlers.append(
            config_flight_recorder(
                path=log_path, capacity=flight_capacity, flush_on_close=force_flush
            )
        )

    logging.basicConfig(level=logging.DEBUG, handlers=handlers, force=True)

    for name, lvl in (logger_levels or {}).items():
        logging.getLogger(name).setLevel(lvl)
    return handlers


def log_startup(  # pylint: disable=too-many-arguments
    logger: Logger,
    *,
    app_version: str,
    level: int,
    handlers: list[logging.Handler],
    log_path: Path | None,
    flight_capacity: int | None,
    force_flush_fr: bool,
    logger_levels: dict[str, int],
) -> None:
    """Log a one-line summary at INFO and environment diagnostics at DEBUG.

    Args:
        logger: Logger used to emit startup messages.
        app_version: Application version string to display.
        level: Effective console logging level.
        handlers: Handlers attached to the root logger.
        log_path: Flight-recorder output file, or None when it is disabled.
        flight_capacity: Flight recorder buffer size, or None.
        force_flush_fr: Whether the flight recorder flushes on close.
        logger_levels: Per-logger level overrides.
    """
    flight_recorder = log_path is not None
    logger.info(
        "REPOBUILDER %s: console=%s, flight-recorder=%s",
        app_version,
        logging.getLevelName(level),
        "ON" if flight_recorder else "OFF",
    )

    logger.debug("Python: %s", sys.version.split()[0])
    logger.debug("Platform: %s %s", platform.system(), platform.release())
    logger.debug("PID: %s", os.getpid())
    logger.debug("CWD: %s", Path.cwd())
    logger.debug("Alembic: %s", alembic.__version__)
    logger.debug("SQLAlchemy: %s", sqlalchemy.__version__)
    logger.debug("Handlers: %s", [type(h).__name__ for h in handlers])
    if flight_recorder:
        logger.debug(
            "Flight recorder: path=%s, capacity=%s, flush_on_close=%s",
            log_path,
            flight_capacity,
            force_flush_fr,
        )
    logger.debug(
        "Per-logger overrides: %s",
        {name: logging.getLevelName(lvl) for name, lvl in logger_levels.items()}
        or "<none>",
    )
