"""Terminal message helpers for the repobuilder CLI.

Every message goes to stderr so stdout stays free for machine-readable
output (e.g. the list of purged bitstream ids printed by ``sweep``). Emoji
markers fall back to ASCII on streams that cannot encode them.
"""

import click

CAUTION = ("⚠️", "[!]")  # pragma: no mutate
SUCCESS = ("✅", "[OK]")  # pragma: no mutate
ERROR = ("❌", "[X]")  # pragma: no mutate


def _supports_character(character: str) -> bool:
    """Return True if *character* can be encoded on the current stderr stream."""
    stream = click.get_text_stream("stderr")  # pragma: no mutate
    encoding = getattr(stream, "encoding")
    try:
        character.encode(encoding)
    except UnicodeEncodeError:
        return False
    return True


def _glyph(pair: tuple[str, str]) -> str:
    emoji, fallback = pair
    return emoji if _supports_character(emoji) else fallback


def caution_glyph() -> str:
    """Caution marker: ⚠️ or [!] where stderr cannot encode it."""
    return _glyph(CAUTION)


def success_glyph() -> str:
    """Success marker: ✅ or [OK] where stderr cannot encode it."""
    return _glyph(SUCCESS)


def error_glyph() -> str:
    """Error marker: ❌ or [X] where stderr cannot encode it."""
    return _glyph(ERROR)


def warn(msg: str) -> None:
    """Emit a yellow, bold warning line to stderr.

    Example:
        ``⚠️  Purged 2 bitstream(s) that were never deleted.``
    """
    click.secho(f"{caution_glyph()}  {msg}", fg="yellow", bold=True, err=True)


def success(msg: str) -> None:
    """Emit a green, bold success line to stderr.

    Example:
        ``✅  No leftover bitstreams.``
    """
    click.secho(f"{success_glyph()}  {msg}", fg="green", bold=True, err=True)


def error(msg: str) -> None:
    """Emit a red, bold error line to stderr.

    Example:
        ``❌  Leak sweep failed.``
    """
    click.secho(f"{error_glyph()}  {msg}", fg="red", bold=True, err=True)
