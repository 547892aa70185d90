"""Anchor links plugin for marginalia.

Rewrites same-page links so they point at slugified heading ids, matching
the anchors produced by the toc_anchors plugin.

Usage:
    >>> md = Markdown(plugins=["anchor_links"])
    >>> md("See [the intro](#Getting-Started).")
    '<p>See <a href="#getting-started">the intro</a>.</p>\\n'

Links to other pages are left alone.

Thread Safety:
This plugin is stateless and thread-safe.

"""

from __future__ import annotations

from typing import TYPE_CHECKING
from urllib.parse import unquote

from marginalia.config import AnnotationConfig, get_annotation_config
from marginalia.plugins import register_plugin
from marginalia.utils.logger import get_logger
from marginalia.utils.text import slugify

if TYPE_CHECKING:
    from markdown_it import MarkdownIt
    from markdown_it.rules_core import StateCore
    from markdown_it.token import Token

logger = get_logger(__name__)

RULE_NAME = "anchor_links"


def _rewrite_links(children: list[Token]) -> None:
    for child in children:
        if child.type != "link_open":
            continue
        href = child.attrGet("href")
        if not isinstance(href, str) or not href.startswith("#"):
            continue
        # markdown-it percent-encodes hrefs; slug the decoded heading text
        slug = slugify(unquote(href[1:]))
        if not slug:
            logger.debug("Anchor link %r has no slug, left unchanged", href)
            continue
        child.attrSet("href", f"#{slug}")


def anchor_link_rule(state: StateCore) -> None:
    for token in state.tokens:
        if token.type == "inline" and token.children:
            _rewrite_links(token.children)


@register_plugin("anchor_links")
class AnchorLinksPlugin:
    """Plugin rewriting ``#Heading Text`` links to heading slugs."""

    __slots__ = ("_config",)

    def __init__(self, config: AnnotationConfig | None = None) -> None:
        self._config = config if config is not None else get_annotation_config()

    @property
    def config(self) -> AnnotationConfig:
        return self._config

    @property
    def name(self) -> str:
        return "anchor_links"

    def extend_parser(self, md: MarkdownIt) -> None:
        md.core.ruler.push(RULE_NAME, anchor_link_rule)

    def extend_renderer(self, md: MarkdownIt) -> None:
        """No render rules needed - link tokens keep their default rendering."""
        pass
