"""Sabores renderers.

Rendering is registry dispatch: a ProviderRegistry maps element kinds to
generating providers, and HtmlGenerator walks the tree asking the registry
what to do with each node.

Available Renderers:
- HtmlRenderer: renders a SyntaxTree with a dialect's providers

Thread Safety:
Each render builds its own visitor and StringBuilder.
Safe for concurrent use from multiple threads.

"""

from sabores.renderers.html import HtmlGeneratingVisitor, HtmlGenerator, HtmlRenderer
from sabores.renderers.protocol import ASTRenderer
from sabores.renderers.providers import GeneratingProvider
from sabores.renderers.registry import ProviderRegistry, ProviderRegistryBuilder

__all__ = [
    "ASTRenderer",
    "GeneratingProvider",
    "HtmlGeneratingVisitor",
    "HtmlGenerator",
    "HtmlRenderer",
    "ProviderRegistry",
    "ProviderRegistryBuilder",
]
