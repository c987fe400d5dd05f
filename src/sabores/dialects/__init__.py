"""Dialect registry for Sabores.

Dialects decide which inline constructs are recognized and how every node
renders:
- commonmark: base dialect (links, images, code spans, emphasis, autolinks)
- gfm: GitHub-flavored, adds strikethrough and bare-URL autolinks (default)

Usage:
    >>> from sabores.dialects import get_dialect
    >>> gfm = get_dialect("gfm")
    >>> [type(p).__name__ for p in gfm.parsers][:2]
    ['AutolinkParser', 'BacktickParser']

Custom dialects register a factory:

    @register_dialect("mine")
    def build_mine() -> DialectDescriptor:
        return get_dialect("gfm").extend("mine", providers={...})

Thread Safety:
Factories run once, under a lock; the resulting descriptors are immutable
and shared by every caller.

"""

from __future__ import annotations

import threading
from collections.abc import Callable

from sabores.dialects.descriptor import DialectDescriptor, compose
from sabores.errors import DialectError
from sabores.utils.logger import get_logger

__all__ = [
    "BUILTIN_DIALECTS",
    "DEFAULT_DIALECT",
    "DialectDescriptor",
    "compose",
    "get_dialect",
    "register_dialect",
]

logger = get_logger(__name__)

DEFAULT_DIALECT = "gfm"

DialectFactory = Callable[[], DialectDescriptor]

# Registry of dialect factories by name
BUILTIN_DIALECTS: dict[str, DialectFactory] = {}

_built: dict[str, DialectDescriptor] = {}
# Reentrant: a factory may build its base dialect through get_dialect
_build_lock = threading.RLock()


def register_dialect(name: str) -> Callable[[DialectFactory], DialectFactory]:
    """Decorator to register a dialect factory.

    Registering a name again replaces the earlier factory and drops any
    descriptor already built from it.

    Args:
        name: Dialect name for lookup

    Returns:
        Decorator function that registers and returns the factory

    Usage:
        @register_dialect("gfm")
        def build_gfm() -> DialectDescriptor:
                ...

    """

    def decorator(factory: DialectFactory) -> DialectFactory:
        with _build_lock:
            BUILTIN_DIALECTS[name] = factory
            _built.pop(name, None)
        return factory

    return decorator


def get_dialect(name: str) -> DialectDescriptor:
    """Get a dialect descriptor by name, building it on first use.

    Args:
        name: Dialect name (e.g., "commonmark", "gfm")

    Returns:
        Shared DialectDescriptor

    Raises:
        DialectError: If the name is not registered

    """
    descriptor = _built.get(name)
    if descriptor is not None:
        return descriptor

    with _build_lock:
        descriptor = _built.get(name)
        if descriptor is not None:
            return descriptor
        factory = BUILTIN_DIALECTS.get(name)
        if factory is None:
            available = ", ".join(sorted(BUILTIN_DIALECTS))
            raise DialectError(name, f"unknown dialect. Available: {available}")
        logger.debug("Building dialect %s", name)
        descriptor = factory()
        _built[name] = descriptor
        return descriptor


# Import built-in dialects to register them
# These imports trigger the @register_dialect decorators
from sabores.dialects.commonmark import build_commonmark  # noqa: E402
from sabores.dialects.gfm import build_gfm  # noqa: E402

__all__ += ["build_commonmark", "build_gfm"]
