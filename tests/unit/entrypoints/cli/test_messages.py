"""Unit tests for skinnyspec.entrypoints.cli.helpers.messages.

Glyph choice follows the encoding of Click's stderr stream, and every helper
writes a bold, colored line to stderr so stdout listings stay pipeable.
"""

import io
import sys

import click
import pytest

from skinnyspec.entrypoints.cli.helpers.messages import GLYPHS, error, glyph, success, warn

SET_YELLOW = "\x1b[33m"
SET_GREEN = "\x1b[32m"
SET_RED = "\x1b[31m"
SET_BOLD = "\x1b[1m"
RESET = "\x1b[0m"


class FakeTTY(io.StringIO):
    """A text stream that claims to be a TTY with a given encoding."""

    def __init__(self, encoding: str):
        super().__init__()
        self._encoding = encoding

    @property
    def encoding(self) -> str:
        return self._encoding

    def isatty(self) -> bool:
        return True


@pytest.fixture
def fake_stderr(monkeypatch):
    """Point Click's stderr lookup and sys.stderr at one FakeTTY per encoding."""

    def install(encoding: str) -> FakeTTY:
        stream = FakeTTY(encoding)
        monkeypatch.setattr(click, "get_text_stream", lambda name: stream)
        monkeypatch.setattr(sys, "stderr", stream, raising=False)
        monkeypatch.delenv("NO_COLOR", raising=False)
        return stream

    return install


@pytest.mark.parametrize("kind", sorted(GLYPHS))
@pytest.mark.parametrize("encoding, index", [("utf-8", 0), ("ascii", 1)])
def test_glyph_follows_stream_encoding(fake_stderr, kind, encoding, index):
    fake_stderr(encoding)
    assert glyph(kind) == GLYPHS[kind][index]


def test_glyph_requeries_the_stream(monkeypatch):
    """The stream is looked up on every call, never cached."""
    encodings = iter(["ascii", "utf-8"])
    monkeypatch.setattr(click, "get_text_stream", lambda name: FakeTTY(next(encodings)))
    assert glyph("warn") == "[!]"
    assert glyph("warn") == "⚠️"


@pytest.mark.parametrize(
    "func, kind, color",
    [(warn, "warn", SET_YELLOW), (success, "success", SET_GREEN), (error, "error", SET_RED)],
)
@pytest.mark.parametrize("encoding", ["ascii", "utf-8"])
def test_messages_are_styled(fake_stderr, func, kind, color, encoding):
    stream = fake_stderr(encoding)
    func("careful")
    out = stream.getvalue()
    assert glyph(kind) in out
    assert "careful" in out
    assert SET_BOLD in out
    assert color in out
    assert RESET in out


def test_messages_leave_stdout_alone(capsys):
    warn("heads up")
    captured = capsys.readouterr()
    assert "heads up" in captured.err
    assert captured.out == ""
