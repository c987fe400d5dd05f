"""ContextVar-based parse configuration for Sabores.

Config is set once per Markdown instance and read by the parser and
renderer in the same context.

Thread Safety:
    ContextVars are thread-local by design. Each thread has independent
    storage, so no locks are needed.

Usage:
    # In Markdown class
    md = Markdown(dialect="commonmark")
    html = md("# Hello")  # Sets config internally via ContextVar

    # Direct parser usage
    from sabores.config import parse_config_context, ParseConfig

    with parse_config_context(ParseConfig.from_dict({"dialect": "commonmark"})):
        tree = Parser(source).parse()

"""

from __future__ import annotations

from collections.abc import Callable, Iterator, Mapping
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from sabores.dialects.descriptor import DialectDescriptor


@dataclass(frozen=True, slots=True)
class ParseConfig:
    """Immutable parse configuration.

    Note: source_file is not configuration; it is per-call state passed to
    the Parser.

    Attributes:
        dialect: Dialect to parse and render with; None means the default
            dialect ("gfm")
        base_uri: Base for resolving relative link destinations
        text_transformer: Optional callback applied to plain text when
            rendering

    """

    dialect: DialectDescriptor | None = None
    base_uri: str | None = None
    text_transformer: Callable[[str], str] | None = None

    def resolve_dialect(self) -> DialectDescriptor:
        """The configured dialect, or the default one."""
        if self.dialect is not None:
            return self.dialect
        from sabores.dialects import DEFAULT_DIALECT, get_dialect

        return get_dialect(DEFAULT_DIALECT)

    @classmethod
    def from_dict(cls, config_dict: Mapping[str, Any]) -> ParseConfig:
        """Create ParseConfig from a dictionary.

        Unknown keys are ignored. A dialect given by name is resolved through
        the dialect registry.

        Raises:
            DialectError: If ``dialect`` names an unknown dialect

        Example:
            >>> config = ParseConfig.from_dict({"dialect": "commonmark", "x": 1})
            >>> config.dialect.name
            'commonmark'

        """
        valid_fields = {f.name for f in cls.__dataclass_fields__.values()}
        filtered = {k: v for k, v in config_dict.items() if k in valid_fields}
        dialect = filtered.get("dialect")
        if isinstance(dialect, str):
            from sabores.dialects import get_dialect

            filtered["dialect"] = get_dialect(dialect)
        return cls(**filtered)


# Module-level default config (reused, never recreated)
_DEFAULT_CONFIG: ParseConfig = ParseConfig()

_parse_config: ContextVar[ParseConfig] = ContextVar(
    "sabores_parse_config",
    default=_DEFAULT_CONFIG,
)


def get_parse_config() -> ParseConfig:
    """Get the active parse configuration for this context."""
    return _parse_config.get()


def set_parse_config(config: ParseConfig) -> None:
    """Set parse configuration for the current context.

    Only affects the current thread's context.
    """
    _parse_config.set(config)


def reset_parse_config() -> None:
    """Reset to the default configuration."""
    _parse_config.set(_DEFAULT_CONFIG)


@contextmanager
def parse_config_context(config: ParseConfig) -> Iterator[None]:
    """Context manager for temporary config changes.

    Restores the previous config even if an exception is raised.

    Example:
        >>> with parse_config_context(ParseConfig(base_uri="https://x.org/")):
        ...     html = render(parse("[a](b)"))

    """
    previous = _parse_config.get()
    _parse_config.set(config)
    try:
        yield
    finally:
        _parse_config.set(previous)


__all__ = [
    "ParseConfig",
    "get_parse_config",
    "set_parse_config",
    "reset_parse_config",
    "parse_config_context",
]
