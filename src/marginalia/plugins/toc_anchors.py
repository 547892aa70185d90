"""TOC anchors plugin for marginalia.

Inserts an anchor element in front of each heading so a table of contents
can link to it.

Usage:
    >>> md = Markdown(plugins=["toc_anchors"])
    >>> md("## My Heading")
    '<a for="toc-anchor" id="my-heading"></a><h2>My Heading</h2>\\n'

Only headings whose level is listed in ``AnnotationConfig.toc_levels``
(default 1-3) get an anchor. The id is the slug of the heading source text.

Thread Safety:
This plugin is stateless and thread-safe.

"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from markdown_it.token import Token

from marginalia.config import AnnotationConfig, get_annotation_config
from marginalia.plugins import register_plugin
from marginalia.utils.text import escape_html, slugify

if TYPE_CHECKING:
    from collections.abc import Callable

    from markdown_it import MarkdownIt
    from markdown_it.rules_core import StateCore

TOKEN_TYPE = "toc_anchor"


def _heading_level(token: Token) -> int:
    # heading_open tags are "h1".."h6"
    return int(token.tag[1:])


def toc_anchor_rule(levels: frozenset[int]) -> Callable[[StateCore], None]:
    """Build the core rule inserting anchors before headings in ``levels``."""

    def rule(state: StateCore) -> None:
        tokens: list[Token] = []
        source = state.tokens
        for i, token in enumerate(source):
            if token.type == "heading_open" and _heading_level(token) in levels:
                anchor = Token(TOKEN_TYPE, "a", 0)
                inline = source[i + 1] if i + 1 < len(source) else None
                anchor.content = inline.content if inline is not None else ""
                anchor.block = True
                tokens.append(anchor)
            tokens.append(token)
        state.tokens = tokens

    return rule


def render_toc_anchor(self: Any, tokens: list[Token], idx: int, options: Any, env: Any) -> str:
    slug = slugify(tokens[idx].content)
    return f'<a for="toc-anchor" id="{escape_html(slug)}"></a>'


@register_plugin("toc_anchors")
class TocAnchorsPlugin:
    """Plugin adding heading anchors for tables of contents."""

    __slots__ = ("_config",)

    def __init__(self, config: AnnotationConfig | None = None) -> None:
        self._config = config if config is not None else get_annotation_config()

    @property
    def config(self) -> AnnotationConfig:
        return self._config

    @property
    def name(self) -> str:
        return "toc_anchors"

    def extend_parser(self, md: MarkdownIt) -> None:
        md.core.ruler.push(TOKEN_TYPE, toc_anchor_rule(frozenset(self._config.toc_levels)))

    def extend_renderer(self, md: MarkdownIt) -> None:
        md.add_render_rule(TOKEN_TYPE, render_toc_anchor)
