"""Plugin system for marginalia.

Plugins extend a markdown-it instance with extra syntax and output:
- annotations: ++sidenotes|...++, !!marginal notes|...!!, $left$ and @right@ sidebars
- toc_anchors: anchor elements in front of headings for tables of contents
- anchor_links: same-page links rewritten to the heading anchor ids

Usage:
    >>> from marginalia import Markdown
    >>>
    >>> # Enable specific plugins
    >>> md = Markdown(plugins=["annotations", "toc_anchors"])
    >>> html = md("## Intro @(3 Min.)@")
    >>>
    >>> # Enable all plugins
    >>> md = Markdown(plugins=["all"])

Plugin Architecture:
Plugins hook into markdown-it's two extension points:

1. Parser rules (inline annotations, core token rewrites):
   - Registered on ``md.inline.ruler`` or ``md.core.ruler``

2. Render rules:
   - Registered with ``md.add_render_rule`` for the new token types

Thread Safety:
All plugins are stateless apart from their frozen config. State lives in
tokens and in the per-render ``env`` mapping.

"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import TYPE_CHECKING, Protocol, TypeAlias, runtime_checkable

from marginalia.errors import PluginError
from marginalia.utils.logger import get_logger

if TYPE_CHECKING:
    from markdown_it import MarkdownIt

    from marginalia.config import AnnotationConfig

__all__ = [
    "BUILTIN_PLUGINS",
    "MarginaliaPlugin",
    "apply_plugins",
    "get_plugin",
    "register_plugin",
]

logger = get_logger(__name__)


@runtime_checkable
class MarginaliaPlugin(Protocol):
    """Protocol for marginalia plugins.

    Plugins can hook into two extension points:
    - extend_parser: Add inline or core rules
    - extend_renderer: Add render rules for new token types

    """

    @property
    def name(self) -> str:
        """Plugin identifier."""
        ...

    def extend_parser(self, md: MarkdownIt) -> None:
        """Register parsing rules on ``md``.

        Called once per markdown-it instance.
        """
        ...

    def extend_renderer(self, md: MarkdownIt) -> None:
        """Register render rules for the plugin's token types.

        Called once per markdown-it instance, after extend_parser.
        """
        ...


PluginFactory: TypeAlias = "Callable[[AnnotationConfig | None], MarginaliaPlugin]"

# Registry of built-in plugins
BUILTIN_PLUGINS: dict[str, PluginFactory] = {}


def register_plugin(name: str) -> Callable[[type], type]:
    """Decorator to register a plugin class.

    Args:
        name: Plugin name for lookup

    Usage:
        @register_plugin("toc_anchors")
        class TocAnchorsPlugin:
                ...

    """

    def decorator(cls: type) -> type:
        BUILTIN_PLUGINS[name] = cls
        return cls

    return decorator


def get_plugin(name: str, config: AnnotationConfig | None = None) -> MarginaliaPlugin:
    """Get a plugin instance by name.

    Raises:
        KeyError: If plugin name is not recognized

    """
    if name not in BUILTIN_PLUGINS:
        available = ", ".join(sorted(BUILTIN_PLUGINS.keys()))
        raise KeyError(f"Unknown plugin: {name!r}. Available: {available}")
    return BUILTIN_PLUGINS[name](config)


def resolve_plugin_names(plugins: Iterable[str], disabled: Iterable[str] = ()) -> list[str]:
    """Expand "all", drop duplicates and disabled names, keep order."""
    requested = list(plugins)
    if "all" in requested:
        requested = list(BUILTIN_PLUGINS)
    skipped = set(disabled)
    names: list[str] = []
    for name in requested:
        if name in skipped or name in names:
            continue
        names.append(name)
    return names


def apply_plugins(
    md: MarkdownIt,
    plugins: Iterable[str],
    config: AnnotationConfig | None = None,
    disabled: Iterable[str] = (),
) -> list[str]:
    """Install plugins on a markdown-it instance.

    Args:
        md: Instance to extend
        plugins: Plugin names; "all" selects every built-in plugin
        config: Config passed to each plugin (None = active context config)
        disabled: Plugin names to skip

    Returns:
        Names of the plugins that were installed

    Raises:
        KeyError: If a plugin name is not recognized
        PluginError: If a plugin fails to install

    """
    names = resolve_plugin_names(plugins, disabled)
    for name in names:
        plugin = get_plugin(name, config)
        try:
            plugin.extend_parser(md)
            plugin.extend_renderer(md)
        except Exception as exc:
            raise PluginError(name, str(exc)) from exc
        logger.debug("Installed plugin %r", name)
    return names


# Import built-in plugins to register them
# These imports trigger the @register_plugin decorators
from marginalia.plugins.annotations import AnnotationsPlugin, annotations_plugin  # noqa: E402
from marginalia.plugins.anchor_links import AnchorLinksPlugin  # noqa: E402
from marginalia.plugins.toc_anchors import TocAnchorsPlugin  # noqa: E402

__all__ += [
    "AnchorLinksPlugin",
    "AnnotationsPlugin",
    "TocAnchorsPlugin",
    "annotations_plugin",
    "resolve_plugin_names",
]
