"""Sequential inline parser chain.

Inline markup is disambiguated by priority, not by grammar backtracking.
A chain is an ordered tuple of recognizers. At each cursor position the
chain asks every recognizer in order; the first one that claims a range wins,
the cursor jumps past the claim, and evaluation restarts from the top.
Tokens nobody claims collect into a single PLAIN_TEXT node.

The output of ``run`` always covers the input range exactly: PLAIN_TEXT
nodes hold the unclaimed tokens as leaves, and every recognizer includes its
own delimiters as leaf children.

Thread Safety:
Chains and contexts are immutable. Recursion passes the context down the
call stack, so one chain can serve any number of concurrent parses.

"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from sabores.errors import ParseError
from sabores.location import SourceLocation
from sabores.nodes import SyntaxNode
from sabores.tokens import ElementKind, ElementType
from sabores.utils.logger import get_logger

if TYPE_CHECKING:
    from sabores.linkmap import LinkMap
    from sabores.tokens import TokenStream

logger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class Claim:
    """A recognizer's answer: the node it built and the next free position.

    ``node`` may start after the cursor; the tokens in between become text.
    ``next`` is the token index just past the claimed range.
    """

    node: SyntaxNode
    next: int


@runtime_checkable
class SequentialParser(Protocol):
    """A recognizer in the inline chain.

    Recognizers are consulted only at positions whose token kind is in
    ``claims``. They must decline (return None) on malformed input instead
    of raising.
    """

    claims: frozenset[ElementKind]

    def parse(self, ctx: InlineContext, pos: int, end: int) -> Claim | None:
        """Try to claim tokens starting at ``pos``, never reaching past ``end``."""
        ...


@dataclass(frozen=True, slots=True)
class InlineContext:
    """Everything a recognizer may look at while parsing one inline range.

    Attributes:
        source: Full document text
        tokens: Token stream of the block being parsed
        chain: The chain, for recursive parsing of nested content
        link_map: Reference definitions of the document
        in_link: True while parsing the text of a link

    """

    source: str
    tokens: TokenStream
    chain: SequentialParserManager
    link_map: LinkMap | None = None
    in_link: bool = False

    def parse(self, start: int, end: int) -> tuple[SyntaxNode, ...]:
        """Run the chain over tokens ``[start, end)`` with this context."""
        return self.chain.run(self, start, end)

    def inside_link(self) -> InlineContext:
        """Context for parsing link text."""
        return self if self.in_link else replace(self, in_link=True)

    def leaves(self, start: int, end: int) -> tuple[SyntaxNode, ...]:
        """Leaf nodes for tokens ``[start, end)``."""
        tokens = self.tokens
        return tuple(SyntaxNode.leaf(tokens[i]) for i in range(start, end))

    def index_at(self, offset: int) -> int | None:
        """Token index starting at a character offset (None mid-token)."""
        return self.tokens.index_at_offset(offset)

    def char_before(self, offset: int) -> str:
        """Character before offset, "" at the start of the lexed range."""
        if offset <= self.tokens.start:
            return ""
        return self.source[offset - 1]

    def char_at(self, offset: int) -> str:
        """Character at offset, "" at the end of the lexed range."""
        if offset >= self.tokens.end:
            return ""
        return self.source[offset]

    def is_defined(self, label: str) -> bool:
        """True if a reference definition exists for the label."""
        return self.link_map is not None and label in self.link_map


class SequentialParserManager:
    """Runs an ordered chain of recognizers over a token range.

    Usage:
        >>> chain = SequentialParserManager([AutolinkParser(), EmphStrongParser()])
        >>> nodes = chain.run(ctx, 0, len(ctx.tokens))

    """

    __slots__ = ("_parsers",)

    def __init__(self, parsers: Sequence[SequentialParser]) -> None:
        self._parsers: tuple[SequentialParser, ...] = tuple(parsers)

    @property
    def parsers(self) -> tuple[SequentialParser, ...]:
        """Recognizers in priority order."""
        return self._parsers

    def __len__(self) -> int:
        return len(self._parsers)

    def run(self, ctx: InlineContext, start: int, end: int) -> tuple[SyntaxNode, ...]:
        """Convert tokens ``[start, end)`` into inline nodes.

        Returns:
            Nodes in document order whose ranges tile the input range.

        Raises:
            ParseError: If a recognizer returns a claim outside the range
                (a recognizer bug, never malformed Markdown).
        """
        tokens = ctx.tokens
        nodes: list[SyntaxNode] = []
        text_start = start
        pos = start

        while pos < end:
            kind = tokens.kind_at(pos)
            for parser in self._parsers:
                if kind not in parser.claims:
                    continue
                claim = parser.parse(ctx, pos, end)
                if claim is None:
                    continue
                node = claim.node
                if claim.next <= pos or node.end <= node.start:
                    logger.debug(
                        "%s declined with zero-length claim at token %d",
                        type(parser).__name__,
                        pos,
                    )
                    continue
                claim_start = self._check_claim(ctx, parser, claim, pos, end)
                if text_start < claim_start:
                    nodes.append(self._text_node(ctx, text_start, claim_start))
                nodes.append(node)
                pos = text_start = claim.next
                break
            else:
                pos += 1

        if text_start < end:
            nodes.append(self._text_node(ctx, text_start, end))
        return tuple(nodes)

    @staticmethod
    def _check_claim(
        ctx: InlineContext, parser: SequentialParser, claim: Claim, pos: int, end: int
    ) -> int:
        """Validate a claim's bounds and return the index where it starts."""
        tokens = ctx.tokens
        node = claim.node
        claim_start = tokens.index_at_offset(node.start)
        if (
            claim.next > end
            or claim_start is None
            or claim_start < pos
            or claim_start >= claim.next
            or tokens.offset_of(claim.next) != node.end
        ):
            loc = SourceLocation.from_offset(ctx.source, node.start)
            raise ParseError(
                f"{type(parser).__name__} claimed {node.kind.name} {node.start}:{node.end} "
                f"outside tokens {pos}:{end}",
                loc.lineno,
                loc.col_offset,
            )
        return claim_start

    @staticmethod
    def _text_node(ctx: InlineContext, start: int, end: int) -> SyntaxNode:
        tokens = ctx.tokens
        return SyntaxNode(
            ElementType.PLAIN_TEXT,
            tokens.offset_of(start),
            tokens.end_offset_of(end - 1),
            ctx.leaves(start, end),
        )

    def __repr__(self) -> str:
        names = ", ".join(type(p).__name__ for p in self._parsers)
        return f"SequentialParserManager([{names}])"
