"""Two-pass parser producing a SyntaxTree.

Pass one splits the document into blocks and collects link reference
definitions. Pass two tokenizes each block's inline content with the
dialect's lexer and runs the dialect's recognizer chain over it, so
reference links can resolve labels defined anywhere in the document.

Thread Safety:
- Configuration is read from ContextVar (thread-local)
- The resulting tree is immutable and safe to share across threads

"""

from __future__ import annotations

from typing import TYPE_CHECKING

from sabores.config import get_parse_config
from sabores.linkmap import LinkMap
from sabores.nodes import SyntaxNode, SyntaxTree
from sabores.parsing.inline import InlineContext
from sabores.tokens import ElementType
from sabores.utils.logger import get_logger

if TYPE_CHECKING:
    from sabores.dialects.descriptor import DialectDescriptor
    from sabores.parsing.blocks import Block

logger = get_logger(__name__)


class Parser:
    """Markdown parser driven by a dialect.

    Usage:
        >>> tree = Parser("# Hello\\n\\nWorld").parse()
        >>> [ref.kind.name for ref in tree.root.children]
        ['ATX_1', 'PARAGRAPH']

    Thread Safety:
        Parser instances are single-use. The dialect comes from the
        active ParseConfig unless one is passed explicitly.

    """

    __slots__ = ("_source", "_source_file", "_dialect")

    def __init__(
        self,
        source: str,
        source_file: str | None = None,
        *,
        dialect: DialectDescriptor | None = None,
    ) -> None:
        self._source = source
        self._source_file = source_file
        self._dialect = dialect or get_parse_config().resolve_dialect()

    @property
    def dialect(self) -> DialectDescriptor:
        return self._dialect

    def parse(self) -> SyntaxTree:
        """Parse the source into a tree rooted at a DOCUMENT node.

        Raises:
            ParseError: If a recognizer or the block parser produced ranges
                that do not nest (never for malformed Markdown)
        """
        source = self._source
        dialect = self._dialect
        blocks = dialect.block_parser(source).parse()
        link_map = self._collect_definitions(blocks)

        lexer = dialect.create_inline_lexer(source)
        children: list[SyntaxNode] = []
        for block in blocks:
            if block.content is None:
                children.append(block.to_node())
                continue
            tokens = lexer.tokenize(*block.content)
            ctx = InlineContext(source, tokens, dialect.chain, link_map)
            children.append(block.to_node(ctx.parse(0, len(tokens))))

        logger.debug(
            "Parsed %d blocks (%d definitions) with dialect %s",
            len(blocks),
            len(link_map),
            dialect.name,
        )
        root = SyntaxNode(ElementType.DOCUMENT, 0, len(source), tuple(children))
        return SyntaxTree(root, source, source_file=self._source_file)

    def _collect_definitions(self, blocks: tuple[Block, ...]) -> LinkMap:
        definitions = tuple(
            block.to_node() for block in blocks if block.kind == ElementType.LINK_DEFINITION
        )
        if not definitions:
            return LinkMap()
        root = SyntaxNode(ElementType.DOCUMENT, 0, len(self._source), definitions)
        return LinkMap.build(SyntaxTree(root, self._source, source_file=self._source_file))
