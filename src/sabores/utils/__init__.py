"""Utility modules for Sabores.

Provides:
- text: escape_html, EntityConverter for HTML-safe text
- logger: get_logger for logging
"""

from sabores.utils.logger import get_logger
from sabores.utils.text import EntityConverter, escape_html

__all__ = [
    "EntityConverter",
    "escape_html",
    "get_logger",
]
