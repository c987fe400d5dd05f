"""Char-dispatch inline lexer with guaranteed forward progress.

Turns a range of paragraph or heading text into a contiguous TokenStream.
Every scan step commits at least one character, so tokenizing is O(n) with
no rewinds. Regexes are only used anchored at the current position with an
explicit end bound, never to search ahead.

Thread Safety:
Lexers hold only the source string. ``tokenize`` keeps its cursor in locals,
so one lexer may be shared, but creating one per document is cheap.

"""

from __future__ import annotations

import re

from sabores.parsing.charsets import ASCII_PUNCTUATION, INLINE_SPECIAL
from sabores.tokens import ElementKind, TokenSpan, TokenStream, TokenType
from sabores.utils.text import decode_reference

# CommonMark 6.7: scheme of 2-32 chars, no spaces or angle brackets inside
_URI_AUTOLINK_RE = re.compile(r"<[a-zA-Z][a-zA-Z0-9+.\-]{1,31}:[^\s<>]*>")

_EMAIL_AUTOLINK_RE = re.compile(
    r"<[a-zA-Z0-9.!#$%&'*+/=?^_`{|}~\-]+@[a-zA-Z0-9]"
    r"(?:[a-zA-Z0-9\-]{0,61}[a-zA-Z0-9])?"
    r"(?:\.[a-zA-Z0-9](?:[a-zA-Z0-9\-]{0,61}[a-zA-Z0-9])?)*>"
)

# CommonMark 6.6: open tag, closing tag, comment
_HTML_TAG_RE = re.compile(
    r"<[a-zA-Z][a-zA-Z0-9-]*"
    r"(?:\s+[a-zA-Z_:][a-zA-Z0-9_.:\-]*(?:\s*=\s*(?:[^\s\"'=<>`]+|'[^']*'|\"[^\"]*\"))?)*"
    r"\s*/?>"
    r"|</[a-zA-Z][a-zA-Z0-9-]*\s*>"
    r"|<!--(?:>|->|[\s\S]*?-->)"
)

_ENTITY_RE = re.compile(r"&(#[xX][0-9a-fA-F]{1,6}|#[0-9]{1,7}|[a-zA-Z][a-zA-Z0-9]{0,31});")

_SINGLE_CHAR_TOKENS: dict[str, ElementKind] = {
    "*": TokenType.EMPH,
    "_": TokenType.EMPH,
    "[": TokenType.LBRACKET,
    "]": TokenType.RBRACKET,
    "(": TokenType.LPAREN,
    ")": TokenType.RPAREN,
    "!": TokenType.EXCLAMATION_MARK,
    ">": TokenType.GT,
    ":": TokenType.COLON,
    "'": TokenType.SINGLE_QUOTE,
    '"': TokenType.DOUBLE_QUOTE,
}


class InlineLexer:
    """CommonMark inline lexer.

    Usage:
        >>> stream = InlineLexer("*hi* there").tokenize()
        >>> [t.type.name for t in stream]
        ['EMPH', 'TEXT', 'EMPH', 'WHITE_SPACE', 'TEXT']

    Subclasses extend the dispatch by overriding ``_scan`` and ``special``.

    """

    __slots__ = ("_source",)

    # Characters that end a TEXT run
    special: frozenset[str] = INLINE_SPECIAL

    def __init__(self, source: str) -> None:
        self._source = source

    @property
    def source(self) -> str:
        return self._source

    def tokenize(self, start: int = 0, end: int | None = None) -> TokenStream:
        """Tokenize ``source[start:end]``.

        Returns:
            TokenStream whose spans cover the range contiguously.
        """
        if end is None:
            end = len(self._source)
        tokens: list[TokenSpan] = []
        tokens_append = tokens.append
        pos = start
        while pos < end:
            kind, new_pos = self._scan(pos, start, end)
            if new_pos <= pos:
                # A scanner that fails to advance degrades to one TEXT char
                kind, new_pos = TokenType.TEXT, pos + 1
            tokens_append(TokenSpan(kind, pos, new_pos))
            pos = new_pos
        return TokenStream(self._source, tuple(tokens), start, end)

    # =========================================================================
    # Dispatch
    # =========================================================================

    def _scan(self, pos: int, start: int, end: int) -> tuple[ElementKind, int]:
        """Scan one token at pos; ``start`` is the lower bound of the range."""
        source = self._source
        char = source[pos]

        if char == "\n":
            return TokenType.EOL, self._skip_indent(pos + 1, end)

        if char in " \t":
            return self._scan_whitespace(pos, end)

        if char == "\\":
            return self._scan_backslash(pos, end)

        if char == "`":
            run_end = pos
            while run_end < end and source[run_end] == "`":
                run_end += 1
            return TokenType.BACKTICK, run_end

        if char == "<":
            return self._scan_angle(pos, end)

        if char == "&":
            match = _ENTITY_RE.match(source, pos, end)
            if match and decode_reference(match.group(1)) is not None:
                return TokenType.ENTITY, match.end()
            return TokenType.TEXT, pos + 1

        kind = _SINGLE_CHAR_TOKENS.get(char)
        if kind is not None:
            return kind, pos + 1

        return TokenType.TEXT, self._scan_text(pos, end)

    def _scan_text(self, pos: int, end: int) -> int:
        """Consume a run of characters that carry no inline meaning."""
        source = self._source
        special = self.special
        pos += 1
        while pos < end and source[pos] not in special:
            pos += 1
        return pos

    def _skip_indent(self, pos: int, end: int) -> int:
        source = self._source
        while pos < end and source[pos] in " \t":
            pos += 1
        return pos

    def _scan_whitespace(self, pos: int, end: int) -> tuple[ElementKind, int]:
        """Spaces and tabs; before a newline they fold into a line break token.

        CommonMark 6.7: two or more trailing spaces make a hard line break.
        Fewer are stripped, so they become part of the EOL token.
        """
        source = self._source
        run_end = pos
        while run_end < end and source[run_end] in " \t":
            run_end += 1
        if run_end < end and source[run_end] == "\n":
            trailing = source[pos:run_end]
            line_end = self._skip_indent(run_end + 1, end)
            if len(trailing) >= 2 and "\t" not in trailing:
                return TokenType.HARD_LINE_BREAK, line_end
            return TokenType.EOL, line_end
        return TokenType.WHITE_SPACE, run_end

    def _scan_backslash(self, pos: int, end: int) -> tuple[ElementKind, int]:
        source = self._source
        if pos + 1 < end:
            next_char = source[pos + 1]
            if next_char == "\n":
                return TokenType.HARD_LINE_BREAK, self._skip_indent(pos + 2, end)
            if next_char in ASCII_PUNCTUATION:
                return TokenType.ESCAPED_CHAR, pos + 2
        return TokenType.TEXT, pos + 1

    def _scan_angle(self, pos: int, end: int) -> tuple[ElementKind, int]:
        """Autolinks, then raw HTML, then a literal ``<``."""
        source = self._source
        match = _URI_AUTOLINK_RE.match(source, pos, end)
        if match:
            return TokenType.AUTOLINK, match.end()
        match = _EMAIL_AUTOLINK_RE.match(source, pos, end)
        if match:
            return TokenType.EMAIL_AUTOLINK, match.end()
        match = _HTML_TAG_RE.match(source, pos, end)
        if match:
            return TokenType.HTML_TAG, match.end()
        return TokenType.LT, pos + 1
