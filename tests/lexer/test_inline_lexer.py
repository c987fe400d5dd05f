"""Tests for the CommonMark inline lexer."""

from __future__ import annotations

import pytest

from sabores.lexer import InlineLexer
from sabores.tokens import TokenType


def kinds(source: str) -> list[str]:
    return [t.type.name for t in InlineLexer(source).tokenize()]


def texts(source: str) -> list[str]:
    return [t.text(source) for t in InlineLexer(source).tokenize()]


class TestSingleCharTokens:
    """Punctuation with inline meaning gets its own token."""

    def test_emphasis_and_text(self) -> None:
        assert kinds("*hi* there") == ["EMPH", "TEXT", "EMPH", "WHITE_SPACE", "TEXT"]

    def test_underscore_is_emph(self) -> None:
        assert kinds("_a_") == ["EMPH", "TEXT", "EMPH"]

    def test_link_punctuation(self) -> None:
        assert kinds("![a](b)") == [
            "EXCLAMATION_MARK",
            "LBRACKET",
            "TEXT",
            "RBRACKET",
            "LPAREN",
            "TEXT",
            "RPAREN",
        ]

    def test_quotes_and_colon(self) -> None:
        assert kinds("'\":") == ["SINGLE_QUOTE", "DOUBLE_QUOTE", "COLON"]

    def test_tilde_is_plain_text(self) -> None:
        """CommonMark has no strikethrough; tildes stay inside text runs."""
        assert kinds("~~x~~") == ["TEXT"]


class TestRuns:
    def test_backtick_run_is_one_token(self) -> None:
        assert texts("``code``") == ["``", "code", "``"]
        assert kinds("``code``") == ["BACKTICK", "TEXT", "BACKTICK"]

    def test_whitespace_run(self) -> None:
        assert texts("a \t b") == ["a", " \t ", "b"]


class TestEscapesAndEntities:
    def test_escaped_punctuation(self) -> None:
        assert kinds("\\*") == ["ESCAPED_CHAR"]

    def test_backslash_before_letter_is_text(self) -> None:
        assert kinds("\\a")[0] == "TEXT"

    @pytest.mark.parametrize("entity", ["&amp;", "&copy;", "&#35;", "&#x1F;"])
    def test_valid_entities(self, entity: str) -> None:
        assert kinds(entity) == ["ENTITY"]

    def test_unknown_entity_is_text(self) -> None:
        assert kinds("&bogus;") == ["TEXT", "TEXT"]


class TestAngleBrackets:
    def test_uri_autolink(self) -> None:
        assert kinds("<https://example.com>") == ["AUTOLINK"]

    def test_email_autolink(self) -> None:
        assert kinds("<foo@bar.com>") == ["EMAIL_AUTOLINK"]

    def test_html_tag(self) -> None:
        assert kinds("<span>") == ["HTML_TAG"]
        assert kinds("</span>") == ["HTML_TAG"]
        assert kinds("<!-- note -->") == ["HTML_TAG"]

    def test_lone_angle_bracket(self) -> None:
        assert kinds("a < b")[2] == "LT"


class TestLineBreaks:
    def test_soft_break_swallows_indent(self) -> None:
        assert texts("a\n  b") == ["a", "\n  ", "b"]
        assert kinds("a\n  b") == ["TEXT", "EOL", "TEXT"]

    def test_two_trailing_spaces_make_hard_break(self) -> None:
        assert kinds("a  \nb") == ["TEXT", "HARD_LINE_BREAK", "TEXT"]

    def test_one_trailing_space_is_soft_break(self) -> None:
        assert kinds("a \nb") == ["TEXT", "EOL", "TEXT"]

    def test_backslash_hard_break(self) -> None:
        assert kinds("a\\\nb") == ["TEXT", "HARD_LINE_BREAK", "TEXT"]


class TestRange:
    """tokenize() honors an explicit [start, end) window."""

    def test_sub_range(self) -> None:
        source = "# *title*"
        stream = InlineLexer(source).tokenize(2, len(source))
        assert stream.start == 2
        assert stream.end == len(source)
        assert [t.type for t in stream] == [TokenType.EMPH, TokenType.TEXT, TokenType.EMPH]

    def test_empty_range(self) -> None:
        stream = InlineLexer("abc").tokenize(1, 1)
        assert len(stream) == 0
        assert stream.offset_of(0) == 1
