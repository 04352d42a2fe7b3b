"""Unit tests for :mod:`pvtrack.entrypoints.cli.helpers.messages`.

Glyph selection follows the encoding of Click's stderr stream, and every
message is a styled line on stderr.
"""

import io
import sys

import click
import pytest

from pvtrack.entrypoints.cli.helpers.messages import (
    CAUTION,
    ERROR,
    SUCCESS,
    _supports_character,
    error,
    glyph,
    success,
    warn,
)

SET_YELLOW = "\x1b[33m"
SET_GREEN = "\x1b[32m"
SET_RED = "\x1b[31m"
SET_BOLD = "\x1b[1m"


class FakeTTY(io.StringIO):
    """A text stream that claims to be a TTY with a chosen encoding."""

    def __init__(self, encoding: str):
        super().__init__()
        self._encoding = encoding

    @property
    def encoding(self) -> str:
        return self._encoding

    def isatty(self) -> bool:
        return True


@pytest.mark.parametrize(
    ("encoding", "expected"),
    [("ascii", ["[!]", "[OK]", "[X]"]), ("utf-8", ["⚠️", "✅", "❌"])],
)
def test_glyphs_respect_stream_encoding(monkeypatch, encoding, expected):
    stream = FakeTTY(encoding)
    monkeypatch.setattr(click, "get_text_stream", lambda name: stream)

    assert [glyph(CAUTION), glyph(SUCCESS), glyph(ERROR)] == expected


def test_supports_character_requeries_stream_each_call(monkeypatch):
    encodings = iter(["ascii", "utf-8"])
    monkeypatch.setattr(click, "get_text_stream", lambda name: FakeTTY(next(encodings)))

    assert _supports_character("✅") is False
    assert _supports_character("✅") is True


@pytest.mark.parametrize(
    ("func", "expected_glyph", "color_code"),
    [(warn, "[!]", SET_YELLOW), (success, "[OK]", SET_GREEN), (error, "[X]", SET_RED)],
)
def test_messages_emit_styled_stderr(monkeypatch, func, expected_glyph, color_code):
    stream = FakeTTY("ascii")
    monkeypatch.setattr(click, "get_text_stream", lambda name: stream)
    monkeypatch.setattr(sys, "stderr", stream, raising=False)
    monkeypatch.delenv("NO_COLOR", raising=False)

    func("PV05 test-1 is now In Progress.")

    out = stream.getvalue()
    assert expected_glyph in out
    assert SET_BOLD in out
    assert color_code in out
    assert "PV05 test-1" in out


def test_warn_writes_to_stderr_only(capsys):
    warn("nothing changed")
    captured = capsys.readouterr()
    assert "nothing changed" in captured.err
    assert captured.out == ""
