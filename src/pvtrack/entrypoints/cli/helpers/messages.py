"""Terminal message helpers for the PVTRACK CLI.

Small helpers for rendering user-visible lines with emoji to ASCII fallbacks.
Messages write to stderr so stdout can remain machine-readable.
"""

import click

CAUTION = ("⚠️", "[!]")  # pragma: no mutate
SUCCESS = ("✅", "[OK]")  # pragma: no mutate
ERROR = ("❌", "[X]")  # pragma: no mutate


def _supports_character(character: str) -> bool:
    """Return True if *character* can be encoded on stderr.

    Terminals without UTF-8 would raise `UnicodeEncodeError` on emojis, so
    callers fall back to ASCII when this returns False.
    """
    stream = click.get_text_stream("stderr")  # pragma: no mutate
    encoding = getattr(stream, "encoding", None) or "ascii"
    try:
        character.encode(encoding)
    except UnicodeEncodeError:
        return False
    return True


def glyph(choices: tuple[str, str]) -> str:
    """Return the emoji of ``choices`` if stderr can encode it, else the ASCII form."""
    emoji, fallback = choices
    return emoji if _supports_character(emoji) else fallback


def warn(msg: str) -> None:
    """Emit a yellow, bold warning line to **stderr**.

    Example:
        ``⚠️  Unit 07 has no test test-99.``
    """
    click.secho(f"{glyph(CAUTION)}  {msg}", fg="yellow", bold=True, err=True)


def success(msg: str) -> None:
    """Emit a green, bold success line to **stderr**.

    Example:
        ``✅  PV05 test-1 is now in-progress.``
    """
    click.secho(f"{glyph(SUCCESS)}  {msg}", fg="green", bold=True, err=True)


def error(msg: str) -> None:
    """Emit a red, bold error line to **stderr**."""
    click.secho(f"{glyph(ERROR)}  {msg}", fg="red", bold=True, err=True)
