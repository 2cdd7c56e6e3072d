"""Parse ``-L NAME=LEVEL`` logger-level options.

Values may be repeated or packed into one comma/space-separated string (as
they arrive from an environment variable). Levels
are standard logging names, case-insensitive.
"""

import logging
import re

import click

# Quiet the chatty libraries unless asked otherwise
DEFAULT_LIB_LEVELS = {"sqlalchemy": logging.WARNING, "alembic": logging.WARNING}

_SEPARATORS = re.compile(r"[,\s]+")


def _normalize_items(value: str | list[str] | tuple[str, ...]) -> list[str]:
    """Flatten `value` into non-empty NAME=LEVEL fragments."""
    chunks = [value] if isinstance(value, str) else list(value)
    return [item for chunk in chunks for item in _SEPARATORS.split(chunk) if item]


def parse_log_level(
    ctx: click.Context,  # pylint: disable=unused-argument
    param: click.Parameter | None,  # pylint: disable=unused-argument
    value: str | list[str] | tuple[str, ...],
) -> dict[str, int]:
    """Click callback mapping NAME=LEVEL items onto DEFAULT_LIB_LEVELS.

    Returns:
        dict[str, int]: Logger names to numeric levels; later items win.

    Raises:
        click.BadParameter: If an item is not NAME=LEVEL or LEVEL is unknown.
    """
    known = logging.getLevelNamesMapping()
    levels = dict(DEFAULT_LIB_LEVELS)
    for item in _normalize_items(value):
        name, sep, level_str = item.partition("=")
        if not sep or not name.strip():
            raise click.BadParameter(f"Expected NAME=LEVEL, got {item!r}")
        if (lvl := known.get(level_str.strip().upper())) is None:
            raise click.BadParameter(f"Invalid log level: {level_str}")
        levels[name.strip()] = lvl
    return levels
