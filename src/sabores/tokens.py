"""Element kinds, token spans, and the token stream.

Every node in a Sabores syntax tree is tagged with an ElementKind. Token kinds
are element kinds too: a leaf node carries the kind of the token it wraps, so
the renderer registry can key on either.

Thread Safety:
ElementKind, TokenSpan and TokenStream are immutable once built and safe to
share across threads.

"""

from __future__ import annotations

from bisect import bisect_left
from collections.abc import Iterator
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class ElementKind:
    """Opaque tag naming a syntax node's role.

    Compared by value, hashable, used as the renderer registry key.

    Attributes:
        name: Human-readable identifier (e.g. "STRIKETHROUGH")
        is_token: True for kinds produced by a lexer (leaf nodes)

    """

    name: str
    is_token: bool = False

    def __repr__(self) -> str:
        prefix = "token" if self.is_token else "element"
        return f"<{prefix} {self.name}>"


class TokenType:
    """Token kinds produced by the CommonMark inline lexer."""

    TEXT = ElementKind("TEXT", is_token=True)
    WHITE_SPACE = ElementKind("WHITE_SPACE", is_token=True)
    EOL = ElementKind("EOL", is_token=True)  # newline + continuation indent
    HARD_LINE_BREAK = ElementKind("HARD_LINE_BREAK", is_token=True)
    BACKTICK = ElementKind("BACKTICK", is_token=True)  # run of `
    EMPH = ElementKind("EMPH", is_token=True)  # single * or _
    LBRACKET = ElementKind("LBRACKET", is_token=True)
    RBRACKET = ElementKind("RBRACKET", is_token=True)
    LPAREN = ElementKind("LPAREN", is_token=True)
    RPAREN = ElementKind("RPAREN", is_token=True)
    EXCLAMATION_MARK = ElementKind("EXCLAMATION_MARK", is_token=True)
    LT = ElementKind("LT", is_token=True)
    GT = ElementKind("GT", is_token=True)
    COLON = ElementKind("COLON", is_token=True)
    SINGLE_QUOTE = ElementKind("SINGLE_QUOTE", is_token=True)
    DOUBLE_QUOTE = ElementKind("DOUBLE_QUOTE", is_token=True)
    ESCAPED_CHAR = ElementKind("ESCAPED_CHAR", is_token=True)  # \*
    ENTITY = ElementKind("ENTITY", is_token=True)  # &amp; &#123; &#x1F;
    AUTOLINK = ElementKind("AUTOLINK", is_token=True)  # <https://...>
    EMAIL_AUTOLINK = ElementKind("EMAIL_AUTOLINK", is_token=True)  # <a@b.c>
    HTML_TAG = ElementKind("HTML_TAG", is_token=True)

    # Block-level leaves
    ATX_HEADER = ElementKind("ATX_HEADER", is_token=True)  # leading #s


class GfmTokenTypes:
    """Token kinds added by the GitHub-flavored inline lexer."""

    TILDE = ElementKind("TILDE", is_token=True)
    GFM_AUTOLINK = ElementKind("GFM_AUTOLINK", is_token=True)  # www.x.com, https://x


class ElementType:
    """Composite node kinds shared by every dialect."""

    DOCUMENT = ElementKind("DOCUMENT")
    PARAGRAPH = ElementKind("PARAGRAPH")
    ATX_1 = ElementKind("ATX_1")
    ATX_2 = ElementKind("ATX_2")
    ATX_3 = ElementKind("ATX_3")
    ATX_4 = ElementKind("ATX_4")
    ATX_5 = ElementKind("ATX_5")
    ATX_6 = ElementKind("ATX_6")
    ATX_CONTENT = ElementKind("ATX_CONTENT")
    LINK_DEFINITION = ElementKind("LINK_DEFINITION")

    PLAIN_TEXT = ElementKind("PLAIN_TEXT")  # coalesced unclaimed tokens
    CODE_SPAN = ElementKind("CODE_SPAN")
    EMPH = ElementKind("EMPH")
    STRONG = ElementKind("STRONG")
    AUTOLINK = ElementKind("AUTOLINK")
    IMAGE = ElementKind("IMAGE")
    INLINE_LINK = ElementKind("INLINE_LINK")
    FULL_REFERENCE_LINK = ElementKind("FULL_REFERENCE_LINK")
    SHORT_REFERENCE_LINK = ElementKind("SHORT_REFERENCE_LINK")
    LINK_TEXT = ElementKind("LINK_TEXT")
    LINK_LABEL = ElementKind("LINK_LABEL")
    LINK_DESTINATION = ElementKind("LINK_DESTINATION")
    LINK_TITLE = ElementKind("LINK_TITLE")


class GfmElementTypes:
    """Composite node kinds added by the GitHub-flavored dialect."""

    STRIKETHROUGH = ElementKind("STRIKETHROUGH")
    GFM_AUTOLINK = ElementKind("GFM_AUTOLINK")


ATX_LEVELS: tuple[ElementKind, ...] = (
    ElementType.ATX_1,
    ElementType.ATX_2,
    ElementType.ATX_3,
    ElementType.ATX_4,
    ElementType.ATX_5,
    ElementType.ATX_6,
)


@dataclass(frozen=True, slots=True)
class TokenSpan:
    """A half-open ``[start, end)`` range of source text with a token kind.

    Produced by a lexer, consumed by recognizers, never mutated.

    """

    type: ElementKind
    start: int
    end: int

    def text(self, source: str) -> str:
        """Slice this span out of the source."""
        return source[self.start : self.end]

    def __len__(self) -> int:
        return self.end - self.start

    def __repr__(self) -> str:
        return f"TokenSpan({self.type.name}, {self.start}:{self.end})"


class TokenStream:
    """Ordered, contiguous token spans over one lexed range.

    Positions are token indices. ``len(stream)`` is a valid position meaning
    "past the last token"; its offset is the end of the lexed range.

    Thread Safety:
        Immutable after construction.
    """

    __slots__ = ("_source", "_tokens", "_starts", "_start", "_end")

    def __init__(self, source: str, tokens: tuple[TokenSpan, ...], start: int, end: int) -> None:
        self._source = source
        self._tokens = tokens
        self._starts = [t.start for t in tokens]
        self._start = start
        self._end = end

    @property
    def source(self) -> str:
        return self._source

    @property
    def start(self) -> int:
        """Character offset where the lexed range begins."""
        return self._start

    @property
    def end(self) -> int:
        """Character offset where the lexed range ends."""
        return self._end

    def __len__(self) -> int:
        return len(self._tokens)

    def __getitem__(self, index: int) -> TokenSpan:
        return self._tokens[index]

    def __iter__(self) -> Iterator[TokenSpan]:
        return iter(self._tokens)

    def kind_at(self, index: int) -> ElementKind | None:
        """Kind of the token at index, or None past either end."""
        if 0 <= index < len(self._tokens):
            return self._tokens[index].type
        return None

    def text_at(self, index: int) -> str:
        """Source text of the token at index ("" past either end)."""
        if 0 <= index < len(self._tokens):
            return self._tokens[index].text(self._source)
        return ""

    def try_claim(self, kind: ElementKind, index: int) -> int | None:
        """Claim one token of ``kind`` at index.

        Returns:
            The next unclaimed position, or None if the token differs.
        """
        if self.kind_at(index) == kind:
            return index + 1
        return None

    def offset_of(self, index: int) -> int:
        """Start offset of token index; ``len(self)`` maps to the range end."""
        if index >= len(self._tokens):
            return self._end
        return self._tokens[index].start

    def end_offset_of(self, index: int) -> int:
        """End offset of token index."""
        return self._tokens[index].end

    def index_at_offset(self, offset: int) -> int | None:
        """Token index starting exactly at ``offset``.

        Returns ``len(self)`` for the range end and None for offsets that fall
        inside a token.
        """
        if offset == self._end:
            return len(self._tokens)
        i = bisect_left(self._starts, offset)
        if i < len(self._starts) and self._starts[i] == offset:
            return i
        return None

    def __repr__(self) -> str:
        return f"TokenStream({len(self._tokens)} tokens, {self._start}:{self._end})"
