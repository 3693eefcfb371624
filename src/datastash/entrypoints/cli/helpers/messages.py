"""Terminal message helpers for the DATASTASH CLI.

Status lines go to stderr so stdout only carries command results (resolved
paths, listed coordinates) and stays safe to pipe.
"""

import click

CAUTION = ("⚠️", "[!]")  # pragma: no mutate
SUCCESS = ("✅", "[OK]")  # pragma: no mutate
ERROR = ("❌", "[X]")  # pragma: no mutate


def _supports_character(character: str) -> bool:
    """Return True if `character` can be encoded on the current stderr stream.

    The stream is looked up on every call so a redirected or replaced stderr
    is honoured.
    """
    stream = click.get_text_stream("stderr")  # pragma: no mutate
    encoding = getattr(stream, "encoding", None) or "ascii"
    try:
        character.encode(encoding)
    except UnicodeEncodeError:
        return False
    return True


def _glyph(pair: tuple[str, str]) -> str:
    emoji, fallback = pair
    return emoji if _supports_character(emoji) else fallback


def caution_glyph() -> str:
    """Warning marker: "⚠️" or "[!]"."""
    return _glyph(CAUTION)


def success_glyph() -> str:
    """Success marker: "✅" or "[OK]"."""
    return _glyph(SUCCESS)


def error_glyph() -> str:
    """Error marker: "❌" or "[X]"."""
    return _glyph(ERROR)


def warn(msg: str) -> None:
    """Emit a yellow, bold warning line to stderr.

    Example:
        ``⚠️  This will delete every cached artifact under ~/.cache/datastash.``
    """
    click.secho(f"{caution_glyph()}  {msg}", fg="yellow", bold=True, err=True)


def success(msg: str) -> None:
    """Emit a green, bold success line to stderr.

    Example:
        ``✅  Published models/encoder-d3``
    """
    click.secho(f"{success_glyph()}  {msg}", fg="green", bold=True, err=True)


def error(msg: str) -> None:
    """Emit a red, bold error line to stderr."""
    click.secho(f"{error_glyph()}  {msg}", fg="red", bold=True, err=True)
