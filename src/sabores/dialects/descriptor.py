"""Dialect descriptors and their composition.

A dialect bundles the two pluggable stages of the pipeline: the ordered
recognizer chain that builds inline nodes, and the provider registry that
renders them. A derived dialect is composed from a base:

- its chain is the one it declares, or the base chain when it declares none
- its registry is the base registry with its own providers merged on top,
  later entries replacing earlier ones by element kind

Thread Safety:
Descriptors are frozen. Build them once, then share them freely; only the
construction step is single-threaded.

"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from sabores.lexer import InlineLexer
from sabores.parsing.blocks import BlockParser
from sabores.parsing.inline import SequentialParser, SequentialParserManager
from sabores.renderers.registry import ProviderRegistry

if TYPE_CHECKING:
    from sabores.renderers.providers import GeneratingProvider
    from sabores.tokens import ElementKind


@dataclass(frozen=True, slots=True)
class DialectDescriptor:
    """Immutable description of one Markdown dialect.

    Attributes:
        name: Dialect identifier (e.g. "gfm")
        chain: Inline recognizers in priority order
        registry: Element kind to provider mapping
        lexer: Inline lexer class
        block_parser: Block parser class
        base: Descriptor this one was composed from, if any

    """

    name: str
    chain: SequentialParserManager
    registry: ProviderRegistry
    lexer: type[InlineLexer] = InlineLexer
    block_parser: type[BlockParser] = BlockParser
    base: DialectDescriptor | None = field(default=None, repr=False, compare=False)

    @property
    def parsers(self) -> tuple[SequentialParser, ...]:
        """Recognizers in priority order."""
        return self.chain.parsers

    def create_inline_lexer(self, source: str) -> InlineLexer:
        return self.lexer(source)

    def extend(
        self,
        name: str,
        *,
        parsers: Sequence[SequentialParser] | None = None,
        providers: Mapping[ElementKind, GeneratingProvider] | None = None,
        lexer: type[InlineLexer] | None = None,
        block_parser: type[BlockParser] | None = None,
    ) -> DialectDescriptor:
        """Compose a new dialect on top of this one. See ``compose``."""
        return compose(
            self,
            name=name,
            parsers=parsers,
            providers=providers,
            lexer=lexer,
            block_parser=block_parser,
        )


def compose(
    base: DialectDescriptor | None,
    *,
    name: str,
    parsers: Sequence[SequentialParser] | None = None,
    providers: Mapping[ElementKind, GeneratingProvider] | None = None,
    lexer: type[InlineLexer] | None = None,
    block_parser: type[BlockParser] | None = None,
) -> DialectDescriptor:
    """Build a descriptor from a base and overrides.

    Args:
        base: Dialect to inherit from, or None for a root dialect
        name: Name of the new dialect
        parsers: The full recognizer chain; None keeps the base chain
        providers: Providers merged over the base registry (override wins)
        lexer: Inline lexer class; None keeps the base lexer
        block_parser: Block parser class; None keeps the base one

    Returns:
        New immutable DialectDescriptor

    Example:
        >>> gfm = compose(commonmark, name="gfm", parsers=[...], providers={...})
        >>> gfm.registry.lookup(GfmElementTypes.STRIKETHROUGH)

    """
    if parsers is not None:
        chain = SequentialParserManager(parsers)
    elif base is not None:
        chain = base.chain
    else:
        chain = SequentialParserManager(())

    if base is not None:
        registry = base.registry.merged(providers or {})
    else:
        registry = ProviderRegistry(providers)

    return DialectDescriptor(
        name=name,
        chain=chain,
        registry=registry,
        lexer=lexer or (base.lexer if base is not None else InlineLexer),
        block_parser=block_parser or (base.block_parser if base is not None else BlockParser),
        base=base,
    )
