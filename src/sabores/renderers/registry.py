"""Generating-provider registry: element kind to rendering rule.

The registry is what makes rendering pluggable. The HTML visitor knows
nothing about links or emphasis; for every node it asks the registry for the
provider registered under the node's kind and hands the node over.

Thread Safety:
ProviderRegistry is immutable after creation. Safe to share.
Use ProviderRegistryBuilder for mutable construction.

Example:
    >>> builder = ProviderRegistryBuilder()
    >>> builder.register(ElementType.PARAGRAPH, SimpleTagProvider("p"))
    >>> registry = builder.build()
    >>> registry.lookup(ElementType.PARAGRAPH)
    SimpleTagProvider('p')
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from sabores.renderers.providers import GeneratingProvider
    from sabores.tokens import ElementKind


class ProviderRegistry:
    """Immutable mapping from ElementKind to GeneratingProvider.

    A missing entry is not an error: the visitor then renders the node's
    children (composites) or its escaped text (leaves) with no markup.

    Thread Safety:
        Immutable after creation. Safe to share across threads.
    """

    __slots__ = ("_providers",)

    def __init__(self, providers: Mapping[ElementKind, GeneratingProvider] | None = None) -> None:
        """Initialize registry with a pre-built mapping.

        Use ProviderRegistryBuilder or ``merged`` to create instances.
        """
        self._providers: dict[ElementKind, GeneratingProvider] = dict(providers or {})

    def lookup(self, kind: ElementKind) -> GeneratingProvider | None:
        """Get the provider for an element kind.

        Args:
            kind: Element or token kind of the node being rendered

        Returns:
            Provider if registered, None otherwise
        """
        return self._providers.get(kind)

    def merged(self, overrides: Mapping[ElementKind, GeneratingProvider] | ProviderRegistry) -> ProviderRegistry:
        """Right-biased merge: entries in ``overrides`` replace ours.

        Keys absent from ``overrides`` are inherited unchanged. Collisions
        are never reported; the override always wins.
        """
        if isinstance(overrides, ProviderRegistry):
            overrides = overrides._providers
        return ProviderRegistry({**self._providers, **overrides})

    @property
    def kinds(self) -> frozenset[ElementKind]:
        """All registered element kinds."""
        return frozenset(self._providers)

    def items(self) -> Iterator[tuple[ElementKind, GeneratingProvider]]:
        return iter(self._providers.items())

    def __contains__(self, kind: ElementKind) -> bool:
        return kind in self._providers

    def __len__(self) -> int:
        return len(self._providers)

    def __repr__(self) -> str:
        return f"ProviderRegistry({len(self._providers)} kinds)"


class ProviderRegistryBuilder:
    """Mutable builder for ProviderRegistry.

    Registering a kind twice keeps the last provider, matching the
    override policy of ``ProviderRegistry.merged``.

    Example:
        >>> registry = (
        ...     ProviderRegistryBuilder()
        ...     .register(ElementType.EMPH, SimpleInlineTagProvider("em", 1, -1))
        ...     .register(ElementType.STRONG, SimpleInlineTagProvider("strong", 2, -2))
        ...     .build()
        ... )
    """

    __slots__ = ("_providers",)

    def __init__(self, base: ProviderRegistry | None = None) -> None:
        """Initialize builder, optionally seeded from an existing registry."""
        self._providers: dict[ElementKind, GeneratingProvider] = dict(base.items()) if base else {}

    def register(self, kind: ElementKind, provider: GeneratingProvider) -> ProviderRegistryBuilder:
        """Register a provider for a kind.

        Returns:
            Self for chaining

        Raises:
            TypeError: If provider has no ``process_node`` method
        """
        if not callable(getattr(provider, "process_node", None)):
            msg = f"Provider {type(provider).__name__} missing 'process_node' method"
            raise TypeError(msg)
        self._providers[kind] = provider
        return self

    def register_all(self, providers: Mapping[ElementKind, GeneratingProvider]) -> ProviderRegistryBuilder:
        """Register several providers; later entries win."""
        for kind, provider in providers.items():
            self.register(kind, provider)
        return self

    def build(self) -> ProviderRegistry:
        """Build immutable registry from registered providers."""
        return ProviderRegistry(self._providers)

    def __len__(self) -> int:
        return len(self._providers)
