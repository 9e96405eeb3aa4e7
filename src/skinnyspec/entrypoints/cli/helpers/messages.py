"""Terminal message helpers for the skinnyspec CLI.

Status lines go to stderr so the listings ``skinnyspec routes`` and
``skinnyspec describe`` print on stdout stay pipeable. Emoji glyphs fall
back to ASCII on streams that cannot encode them.
"""

import click

GLYPHS = {
    "warn": ("⚠️", "[!]"),
    "success": ("✅", "[OK]"),
    "error": ("❌", "[X]"),
}


def glyph(kind: str) -> str:
    """Return the emoji for ``kind`` when stderr can encode it, else its ASCII fallback.

    Args:
        kind: One of ``"warn"``, ``"success"`` or ``"error"``.

    Returns:
        str: The emoji or the fallback.
    """
    emoji, fallback = GLYPHS[kind]  # pragma: no mutate
    encoding = getattr(click.get_text_stream("stderr"), "encoding", None) or "ascii"
    try:
        emoji.encode(encoding)
    except UnicodeEncodeError:
        return fallback
    return emoji


def warn(msg: str) -> None:
    """Yellow, bold warning line on stderr, e.g. ``⚠️  No examples found``."""
    click.secho(f"{glyph('warn')}  {msg}", fg="yellow", bold=True, err=True)


def success(msg: str) -> None:
    """Green, bold success line on stderr."""
    click.secho(f"{glyph('success')}  {msg}", fg="green", bold=True, err=True)


def error(msg: str) -> None:
    """Red, bold error line on stderr."""
    click.secho(f"{glyph('error')}  {msg}", fg="red", bold=True, err=True)
