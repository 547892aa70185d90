"""
marginalia — Sidenotes, marginal notes and sidebars for markdown-it-py

An inline annotation extension for markdown-it-py. Annotation content is
parsed as inline markdown; malformed annotations fall back to plain text and
never abort rendering of the rest of a document.

Quick Start:
    >>> from marginalia import render
    >>> render("Paul calls Archippus a fellow soldier ++Phm 2|++")
    '<p>Paul calls Archippus a fellow soldier <span class="sn-ref">Phm 2</span><span class="sidenote"></span></p>\\n'

    >>> # Or use the high-level Markdown class
    >>> from marginalia import Markdown
    >>> md = Markdown(plugins=["all"])
    >>> html = md("## Serving @(3 Min.)@")

    >>> # Or install on your own markdown-it instance
    >>> from markdown_it import MarkdownIt
    >>> from marginalia import annotations_plugin
    >>> md = MarkdownIt("commonmark").use(annotations_plugin)

Syntax:
    ++reference|note++   sidenote
    !!reference|note!!   marginal note
    $content$            left sidebar
    @content@            right sidebar

Installation:
    pip install marginalia
"""

from collections.abc import Iterable

from markdown_it import MarkdownIt
from markdown_it.token import Token

from marginalia.config import (
    AnnotationConfig,
    annotation_config_context,
    get_annotation_config,
    reset_annotation_config,
    set_annotation_config,
)
from marginalia.errors import (
    AnnotationSyntaxError,
    ConfigError,
    EmptyReference,
    MarginaliaError,
    MissingSeparator,
    NoClosingMarker,
    PluginError,
    RecursionLimitExceeded,
    SubParseFailure,
)
from marginalia.markers import (
    LEFT_SIDEBAR,
    MARGINNOTE,
    MARKERS,
    RIGHT_SIDEBAR,
    SIDENOTE,
    Marker,
    MarkerFamily,
    NoteMarker,
    SidebarMarker,
    get_marker,
)
from marginalia.plugins import BUILTIN_PLUGINS, annotations_plugin, apply_plugins
from marginalia.rule import AnnotationTokenizer
from marginalia.scanning import Extraction, detect_marker, extract_annotation

__version__ = "0.3.0"

DEFAULT_PLUGINS: tuple[str, ...] = ("annotations",)


class Markdown:
    """High-level Markdown processor with annotation support.

    Usage:
        >>> md = Markdown()
        >>> html = md("Text $**bold** sidebar$")
        '<p>Text <span class="left-sidebar"><strong>bold</strong> sidebar</span></p>\\n'

        >>> # Access the token stream
        >>> tokens = md.parse("++ref|note++")
        >>> [t.type for t in tokens[1].children][:2]
        ['sidenote_open', 'sidenote_ref_open']

    Thread Safety:
        Each call renders with a fresh env, so depth counters are never
        shared between documents. Safe to use one instance from several
        threads.

    """

    __slots__ = ("_config", "_md", "_plugins")

    def __init__(
        self,
        *,
        plugins: Iterable[str] | None = None,
        config: AnnotationConfig | None = None,
        preset: str = "commonmark",
    ) -> None:
        """Initialize Markdown processor.

        Args:
            plugins: Plugin names to enable (default: annotations only).
                Use ["all"] to enable all built-in plugins.
            config: Annotation config (uses the active context config if None)
            preset: markdown-it preset name
        """
        self._config = config if config is not None else get_annotation_config()
        self._md = MarkdownIt(preset)
        self._plugins = apply_plugins(
            self._md,
            DEFAULT_PLUGINS if plugins is None else plugins,
            self._config,
            disabled=self._config.disabled_plugins,
        )

    @property
    def plugins(self) -> list[str]:
        """Names of the installed plugins."""
        return list(self._plugins)

    @property
    def config(self) -> AnnotationConfig:
        return self._config

    @property
    def markdown_it(self) -> MarkdownIt:
        """The underlying markdown-it instance."""
        return self._md

    def __call__(self, source: str) -> str:
        """Parse and render Markdown in one call."""
        return self._md.render(source, {})

    def parse(self, source: str) -> list[Token]:
        """Parse Markdown to a markdown-it token stream."""
        return self._md.parse(source, {})

    def render_inline(self, source: str) -> str:
        """Render a single line without paragraph wrapping."""
        return self._md.renderInline(source, {})


def render(source: str, **kwargs: object) -> str:
    """Render Markdown to HTML; keyword arguments go to ``Markdown``."""
    return Markdown(**kwargs)(source)  # type: ignore[arg-type]


def parse(source: str, **kwargs: object) -> list[Token]:
    """Parse Markdown to tokens; keyword arguments go to ``Markdown``."""
    return Markdown(**kwargs).parse(source)  # type: ignore[arg-type]


__all__ = [
    "AnnotationConfig",
    "AnnotationSyntaxError",
    "AnnotationTokenizer",
    "BUILTIN_PLUGINS",
    "ConfigError",
    "DEFAULT_PLUGINS",
    "EmptyReference",
    "Extraction",
    "LEFT_SIDEBAR",
    "MARGINNOTE",
    "MARKERS",
    "MarginaliaError",
    "Marker",
    "MarkerFamily",
    "Markdown",
    "MissingSeparator",
    "NoClosingMarker",
    "NoteMarker",
    "PluginError",
    "RIGHT_SIDEBAR",
    "RecursionLimitExceeded",
    "SIDENOTE",
    "SidebarMarker",
    "SubParseFailure",
    "annotation_config_context",
    "annotations_plugin",
    "apply_plugins",
    "detect_marker",
    "extract_annotation",
    "get_annotation_config",
    "get_marker",
    "parse",
    "render",
    "reset_annotation_config",
    "set_annotation_config",
]
