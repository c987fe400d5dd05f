"""Exception classes for Sabores.

Malformed Markdown never raises: recognizers decline and the text renders
literally. These exceptions signal misuse of the API or a collaborator that
broke its contract (for example a block parser emitting overlapping ranges).
"""

from __future__ import annotations


class SaboresError(Exception):
    """Base exception for all Sabores errors."""


class ParseError(SaboresError):
    """A parse-time contract was violated.

    Raised when a syntax tree cannot be assembled from the ranges a
    collaborator produced.
    """

    def __init__(
        self,
        message: str,
        lineno: int | None = None,
        col_offset: int | None = None,
        source_file: str | None = None,
    ) -> None:
        """Initialize parse error with optional location.

        Args:
            message: Error description
            lineno: Line number where error occurred (1-indexed)
            col_offset: Column offset where error occurred (1-indexed)
            source_file: Path to source file (optional)
        """
        self.message = message
        self.lineno = lineno
        self.col_offset = col_offset
        self.source_file = source_file

        location = ""
        if source_file:
            location = f"{source_file}:"
        if lineno is not None:
            location += f"{lineno}:"
            if col_offset is not None:
                location += f"{col_offset}:"
        if location:
            location = location.rstrip(":") + " "

        super().__init__(f"{location}{message}")


class RenderError(SaboresError):
    """The renderer was handed a tree it cannot serialize.

    Raised for trees whose offsets do not fit the source text given to
    the generator.
    """


class DialectError(SaboresError, KeyError):
    """Unknown dialect name or invalid dialect composition."""

    def __init__(self, dialect_name: str, message: str) -> None:
        """Initialize dialect error.

        Args:
            dialect_name: Name of the dialect that failed to resolve
            message: Description of the problem
        """
        self.dialect_name = dialect_name
        self.message = f"Dialect '{dialect_name}': {message}"
        super().__init__(self.message)

    def __str__(self) -> str:
        # KeyError.__str__ would repr() the message
        return self.message
