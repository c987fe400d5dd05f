"""Tests for the exception hierarchy and error messages."""

from __future__ import annotations

import pytest

from sabores import Markdown
from sabores.errors import DialectError, ParseError, RenderError, SaboresError


class TestParseError:
    def test_message_only(self) -> None:
        error = ParseError("bad range")
        assert str(error) == "bad range"
        assert error.lineno is None

    def test_full_location(self) -> None:
        error = ParseError("bad range", lineno=3, col_offset=2, source_file="a.md")
        assert str(error) == "a.md:3:2 bad range"
        assert (error.lineno, error.col_offset, error.source_file) == (3, 2, "a.md")

    def test_line_only(self) -> None:
        assert str(ParseError("bad", lineno=7)) == "7 bad"

    def test_is_sabores_error(self) -> None:
        assert issubclass(ParseError, SaboresError)


class TestDialectError:
    def test_message(self) -> None:
        error = DialectError("x", "unknown dialect")
        assert str(error) == "Dialect 'x': unknown dialect"
        assert error.dialect_name == "x"

    def test_hierarchy(self) -> None:
        error = DialectError("x", "m")
        assert isinstance(error, SaboresError)
        assert isinstance(error, KeyError)


class TestRenderError:
    def test_is_sabores_error(self) -> None:
        assert issubclass(RenderError, SaboresError)


class TestMalformedInputNeverRaises:
    @pytest.mark.parametrize(
        "source",
        [
            "[unclosed",
            "](",
            "*** _ ~~~ ` ``",
            "<not a tag",
            "[a](<b)",
            "![",
            "&#xFFFFFFFF; &;",
            "www.",
            "https://",
            "\\",
            "[a]: ",
        ],
    )
    def test_renders(self, source: str) -> None:
        html = Markdown()(source)
        assert isinstance(html, str)
        assert "<script" not in html
