"""ASTRenderer protocol: stable interface for tree renderers.

Any object with ``render(tree) -> str`` conforms. The built-in
``HtmlRenderer`` is the reference implementation.

Example:
    from sabores.renderers.protocol import ASTRenderer

    def render_page(renderer: ASTRenderer, tree: SyntaxTree) -> str:
        return renderer.render(tree)

"""

from typing import Protocol, runtime_checkable

from sabores.nodes import SyntaxTree


@runtime_checkable
class ASTRenderer(Protocol):
    """Protocol for syntax tree renderers."""

    def render(self, tree: SyntaxTree) -> str:
        """Render a parsed document to a string."""
        ...
