"""StringBuilder for O(n) HTML accumulation.

Providers append fragments as the visitor walks the tree; the fragments are
joined once when generation finishes.

Thread Safety:
One StringBuilder per generate_html() call. No shared mutable state.

"""

from __future__ import annotations


class StringBuilder:
    """Append-only string accumulator.

    Usage:
            >>> sb = StringBuilder()
            >>> sb.append("<p>").append("hi").append("</p>")
            >>> sb.build()
            '<p>hi</p>'

    """

    __slots__ = ("_parts",)

    def __init__(self) -> None:
        self._parts: list[str] = []

    def append(self, s: str) -> StringBuilder:
        """Append a fragment (empty strings are skipped).

        Returns:
            self for method chaining
        """
        if s:
            self._parts.append(s)
        return self

    def build(self) -> str:
        """Join all fragments into the final string."""
        return "".join(self._parts)

    def __len__(self) -> int:
        """Number of fragments appended so far (not total length)."""
        return len(self._parts)
