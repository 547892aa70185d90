"""Annotations plugin for marginalia.

Adds sidenotes, marginal notes and left/right sidebars.

Usage:
    >>> from markdown_it import MarkdownIt
    >>> md = MarkdownIt("commonmark").use(annotations_plugin)
    >>> md.render("Text ++ref|note **body**++")
    '<p>Text <span class="sn-ref">ref</span><span class="sidenote">note <strong>body</strong></span></p>\\n'

Syntax:
++reference|note++ → sidenote (reference must not be blank, note may be empty)
!!reference|note!! → marginal note
$content$ → left sidebar
@content@ → right sidebar

Annotation content is parsed as inline markdown, up to ``max_depth`` levels
of nested annotations. Unclosed or malformed markers stay plain text.

Thread Safety:
This plugin is stateless and thread-safe.

"""

from __future__ import annotations

from typing import TYPE_CHECKING

from marginalia.config import AnnotationConfig, get_annotation_config
from marginalia.markers import MARKERS
from marginalia.plugins import register_plugin
from marginalia.renderers.html import install_render_rules
from marginalia.rule import AnnotationTokenizer

if TYPE_CHECKING:
    from markdown_it import MarkdownIt

RULE_NAME = "annotations"

# Annotations are tried before link detection
RULE_BEFORE = "link"


@register_plugin("annotations")
class AnnotationsPlugin:
    """Plugin adding the four inline annotation kinds."""

    __slots__ = ("_config",)

    def __init__(self, config: AnnotationConfig | None = None) -> None:
        self._config = config if config is not None else get_annotation_config()

    @property
    def config(self) -> AnnotationConfig:
        return self._config

    @property
    def name(self) -> str:
        return "annotations"

    def extend_parser(self, md: MarkdownIt) -> None:
        """Register the tokenizer before the link rule, replacing an earlier install."""
        rule = AnnotationTokenizer(self._config).chain_rule
        ruler = md.inline.ruler
        if ruler.__find__(RULE_NAME) >= 0:
            ruler.at(RULE_NAME, rule)
        else:
            ruler.before(RULE_BEFORE, RULE_NAME, rule)

    def extend_renderer(self, md: MarkdownIt) -> None:
        """Register span wrappers for the enabled kinds."""
        enabled = [m for m in MARKERS if m.kind in self._config.kinds]
        install_render_rules(md, enabled)


def annotations_plugin(md: MarkdownIt, config: AnnotationConfig | None = None) -> None:
    """Install annotation support on ``md`` (``md.use(annotations_plugin)``)."""
    plugin = AnnotationsPlugin(config)
    plugin.extend_parser(md)
    plugin.extend_renderer(md)
