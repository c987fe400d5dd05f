"""
Sabores: Dialect-Extensible Markdown to HTML

Inline markup is recognized by an ordered chain of recognizers, and every
node renders through a registry of generating providers. A dialect bundles
both; new dialects are composed from existing ones without touching them.

Quick Start:
    >>> from sabores import parse, render
    >>> tree = parse("Visit www.example.com")
    >>> print(render(tree))
    <p>Visit <a href="http://www.example.com">www.example.com</a></p>

    >>> # Or use the high-level Markdown class
    >>> from sabores import Markdown
    >>> md = Markdown(dialect="commonmark")
    >>> html = md("Hello **World**")

Custom Dialects:
    >>> from sabores import get_dialect, register_dialect
    >>>
    >>> @register_dialect("plain-strike")
    ... def build_plain_strike():
    ...     return get_dialect("gfm").extend(
    ...         "plain-strike",
    ...         providers={GfmElementTypes.STRIKETHROUGH: SimpleInlineTagProvider("del", 2, -2)},
    ...     )
    >>> md = Markdown(dialect="plain-strike")

Installation:
    pip install sabores              # Zero runtime dependencies
"""

from collections.abc import Callable, Iterable
from dataclasses import replace

from sabores.config import (
    ParseConfig,
    get_parse_config,
    parse_config_context,
    reset_parse_config,
    set_parse_config,
)
from sabores.dialects import (
    BUILTIN_DIALECTS,
    DEFAULT_DIALECT,
    DialectDescriptor,
    compose,
    get_dialect,
    register_dialect,
)
from sabores.errors import DialectError, ParseError, RenderError, SaboresError
from sabores.lexer import GfmInlineLexer, InlineLexer
from sabores.linkmap import LinkInfo, LinkMap
from sabores.location import SourceLocation
from sabores.nodes import NodeRef, SyntaxNode, SyntaxTree
from sabores.parser import Parser
from sabores.parsing import Block, BlockParser, InlineContext, SequentialParserManager
from sabores.parsing.inline import Claim, SequentialParser
from sabores.renderers import (
    ASTRenderer,
    GeneratingProvider,
    HtmlGenerator,
    HtmlRenderer,
    ProviderRegistry,
    ProviderRegistryBuilder,
)
from sabores.tokens import (
    ElementKind,
    ElementType,
    GfmElementTypes,
    GfmTokenTypes,
    TokenSpan,
    TokenStream,
    TokenType,
)
from sabores.utils.text import EntityConverter

__version__ = "0.1.0"


def _resolve_dialect(dialect: str | DialectDescriptor | None) -> DialectDescriptor:
    if isinstance(dialect, str):
        return get_dialect(dialect)
    if dialect is not None:
        return dialect
    return get_parse_config().resolve_dialect()


def parse(
    source: str,
    *,
    dialect: str | DialectDescriptor | None = None,
    source_file: str | None = None,
) -> SyntaxTree:
    """Parse Markdown source into a syntax tree.

    Args:
        source: Markdown source text
        dialect: Dialect name or descriptor (default "gfm")
        source_file: Optional source file path for error messages

    Returns:
        SyntaxTree rooted at a DOCUMENT node

    Raises:
        DialectError: If ``dialect`` names an unknown dialect

    Example:
        >>> tree = parse("# Hello ~~World~~")
        >>> tree.root.children[0].kind.name
        'ATX_1'
    """
    # Keep the caller's base_uri and text_transformer for a later render()
    config = replace(get_parse_config(), dialect=_resolve_dialect(dialect))
    with parse_config_context(config):
        return Parser(source, source_file=source_file).parse()


def render(
    tree: SyntaxTree,
    *,
    dialect: str | DialectDescriptor | None = None,
    base_uri: str | None = None,
) -> str:
    """Render a syntax tree to HTML.

    Args:
        tree: Tree returned by ``parse``
        dialect: Dialect whose providers render the tree (default "gfm")
        base_uri: Base for resolving relative link destinations (default:
            the active ParseConfig's)

    Returns:
        HTML string

    Example:
        >>> render(parse("ftp://example.com/x"))
        '<p><a href="ftp://example.com/x">ftp://example.com/x</a></p>\\n'
    """
    renderer = HtmlRenderer(_resolve_dialect(dialect), base_uri=base_uri)
    return renderer.render(tree)


class Markdown:
    """High-level Markdown processor combining parser and renderer.

    Usage:
        >>> md = Markdown()
        >>> md("Hello **World**")
        '<p>Hello <strong>World</strong></p>\\n'

        >>> # Access the tree
        >>> tree = md.parse("# Heading")
        >>> tree.root.children[0].kind.name
        'ATX_1'

    Thread Safety:
        Uses ContextVar for thread-local configuration. Safe to use multiple
        Markdown instances concurrently from different threads.

    """

    __slots__ = ("_config", "_renderer")

    def __init__(
        self,
        dialect: str | DialectDescriptor = DEFAULT_DIALECT,
        *,
        base_uri: str | None = None,
        text_transformer: Callable[[str], str] | None = None,
    ) -> None:
        """Initialize Markdown processor.

        Args:
            dialect: Dialect name or descriptor
            base_uri: Base for resolving relative link destinations
            text_transformer: Optional callback applied to plain text

        Raises:
            DialectError: If ``dialect`` names an unknown dialect
        """
        # Build immutable config once (thread-safe, reused across calls)
        self._config = ParseConfig(
            dialect=_resolve_dialect(dialect),
            base_uri=base_uri,
            text_transformer=text_transformer,
        )
        self._renderer = HtmlRenderer(
            self._config.dialect,
            base_uri=base_uri,
            text_transformer=text_transformer,
        )

    @property
    def dialect(self) -> DialectDescriptor:
        return self._renderer.dialect

    @property
    def config(self) -> ParseConfig:
        return self._config

    def __call__(self, source: str) -> str:
        """Parse and render Markdown in one call."""
        return self._renderer.render(self.parse(source))

    def parse(self, source: str, *, source_file: str | None = None) -> SyntaxTree:
        """Parse Markdown source into a syntax tree.

        Thread Safety:
            Sets config via ContextVar (thread-local). Safe for concurrent use.
        """
        with parse_config_context(self._config):
            return Parser(source, source_file=source_file).parse()

    def parse_many(
        self,
        sources: Iterable[str],
        *,
        source_file: str | None = None,
    ) -> list[SyntaxTree]:
        """Parse multiple Markdown sources.

        Sets config once, parses all, then restores the previous config.

        Example:
            >>> md = Markdown()
            >>> trees = md.parse_many(["# Doc 1", "# Doc 2", "# Doc 3"])
        """
        with parse_config_context(self._config):
            return [Parser(source, source_file=source_file).parse() for source in sources]

    def render(self, tree: SyntaxTree) -> str:
        """Render a syntax tree to HTML."""
        return self._renderer.render(tree)


__all__ = [  # noqa: RUF022 (grouped by category)
    # Version
    "__version__",
    # Core API
    "parse",
    "render",
    "Markdown",
    "Parser",
    # Configuration
    "ParseConfig",
    "get_parse_config",
    "parse_config_context",
    "reset_parse_config",
    "set_parse_config",
    # Dialects
    "BUILTIN_DIALECTS",
    "DEFAULT_DIALECT",
    "DialectDescriptor",
    "compose",
    "get_dialect",
    "register_dialect",
    # Tree
    "ElementKind",
    "ElementType",
    "GfmElementTypes",
    "NodeRef",
    "SourceLocation",
    "SyntaxNode",
    "SyntaxTree",
    # Tokens and lexing
    "GfmInlineLexer",
    "GfmTokenTypes",
    "InlineLexer",
    "TokenSpan",
    "TokenStream",
    "TokenType",
    # Parsing
    "Block",
    "BlockParser",
    "Claim",
    "InlineContext",
    "SequentialParser",
    "SequentialParserManager",
    # Rendering
    "ASTRenderer",
    "EntityConverter",
    "GeneratingProvider",
    "HtmlGenerator",
    "HtmlRenderer",
    "LinkInfo",
    "LinkMap",
    "ProviderRegistry",
    "ProviderRegistryBuilder",
    # Errors
    "DialectError",
    "ParseError",
    "RenderError",
    "SaboresError",
]
