"""Utility modules for marginalia.

Provides:
- text: slugify, escape_html for anchors and attribute values
- logger: get_logger for logging
"""

from marginalia.utils.logger import get_logger
from marginalia.utils.text import escape_html, slugify

__all__ = [
    "escape_html",
    "get_logger",
    "slugify",
]
