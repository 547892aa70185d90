"""Text helpers shared by the heading and link plugins.

Example:
    >>> from marginalia.utils.text import slugify
    >>> slugify("WIR SIND SOLDATEN FÜR CHRISTUS")
    'wir-sind-soldaten-für-christus'
"""

from __future__ import annotations

import html as html_module
import re

_NON_WORD_RE = re.compile(r"[^\w\s-]")
_SEPARATOR_RUN_RE = re.compile(r"[-\s]+")


def slugify(
    text: str,
    unescape_html: bool = True,
    max_length: int | None = None,
    separator: str = "-",
) -> str:
    """Convert heading or link text to an anchor id.

    Unicode word characters are kept, so German or Chinese headings produce
    readable ids instead of empty strings.

    Args:
        text: Text to slugify
        unescape_html: Decode HTML entities first (``&amp;`` -> ``&``)
        max_length: Maximum slug length (None = unlimited)
        separator: Character placed between words

    Returns:
        Lowercase slug made of word characters and separators

    Examples:
        >>> slugify("Hello World!")
        'hello-world'
        >>> slugify("Test &amp; Code")
        'test-code'
        >>> slugify("Very Long Title Here", max_length=10)
        'very-long'
    """
    if not text:
        return ""

    if unescape_html:
        text = html_module.unescape(text)

    text = _NON_WORD_RE.sub("", text.lower().strip())
    text = _SEPARATOR_RUN_RE.sub(separator, text).strip(separator)

    if max_length is not None and len(text) > max_length:
        truncated = text[:max_length]
        # Prefer cutting at a word boundary
        if separator in truncated:
            truncated = truncated.rsplit(separator, 1)[0]
        text = truncated

    return text


def escape_html(text: str) -> str:
    """Escape text for use inside a double-quoted HTML attribute.

    Examples:
        >>> escape_html('a "b" <c>')
        'a &quot;b&quot; &lt;c&gt;'
    """
    if not text:
        return ""
    return html_module.escape(text, quote=True).replace("'", "&#x27;")
