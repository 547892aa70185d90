"""ContextVar-based annotation configuration for marginalia.

Config is captured when the plugin is installed on a markdown-it instance.
Installers that receive no explicit config read the one active in the
current context.

Thread Safety:
    ContextVars are thread-local by design. Each thread has independent storage,
    so no locks are needed.

Usage:
    # Explicit config
    md = MarkdownIt("commonmark")
    annotations_plugin(md, AnnotationConfig(max_depth=2))

    # Or use the context manager
    with annotation_config_context(AnnotationConfig(kinds=("sidenote",))):
        md = Markdown()

"""

from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass
from typing import Any

from marginalia.errors import ConfigError
from marginalia.markers import MARKER_KINDS


def _split_names(value: str | Iterable[str]) -> tuple[str, ...]:
    # Comma-separated strings come from settings files: "toc, sidenote"
    if isinstance(value, str):
        value = value.split(",")
    return tuple(name.strip().lower() for name in value if name.strip())


@dataclass(frozen=True, slots=True)
class AnnotationConfig:
    """Immutable annotation configuration.

    Attributes:
        max_depth: Nested annotation parses allowed before content stays literal
        search_window: Characters scanned ahead for a closing marker
        kinds: Annotation kinds the tokenizer recognizes
        toc_levels: Heading levels that receive a TOC anchor
        disabled_plugins: Plugin names skipped by ``Markdown``

    """

    max_depth: int = 3
    search_window: int = 1000
    kinds: tuple[str, ...] = MARKER_KINDS
    toc_levels: tuple[int, ...] = (1, 2, 3)
    disabled_plugins: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        # Accept any iterable but store tuples so the config stays hashable
        for name in ("kinds", "toc_levels", "disabled_plugins"):
            object.__setattr__(self, name, tuple(getattr(self, name)))

        if self.max_depth < 0:
            raise ConfigError(f"max_depth must be >= 0, got {self.max_depth}")
        if self.search_window < 1:
            raise ConfigError(f"search_window must be >= 1, got {self.search_window}")
        unknown = [k for k in self.kinds if k not in MARKER_KINDS]
        if unknown:
            raise ConfigError(
                f"Unknown annotation kinds: {', '.join(unknown)}. "
                f"Available: {', '.join(MARKER_KINDS)}"
            )
        bad_levels = [lvl for lvl in self.toc_levels if not 1 <= lvl <= 6]
        if bad_levels:
            raise ConfigError(f"toc_levels must be within 1..6, got {bad_levels}")

    @classmethod
    def from_dict(cls, config_dict: dict[str, Any]) -> "AnnotationConfig":
        """Create AnnotationConfig from a settings dictionary.

        Unknown keys are ignored. ``kinds`` and ``disabled_plugins`` accept a
        comma-separated string. An empty ``toc_levels`` falls back to the
        default levels.

        Example:
            >>> config = AnnotationConfig.from_dict({
            ...     "max_depth": 2,
            ...     "disabled_plugins": "toc_anchors, anchor_links",
            ...     "unknown_key": "ignored",
            ... })
            >>> config.disabled_plugins
            ('toc_anchors', 'anchor_links')

        """
        valid_fields = {f for f in cls.__dataclass_fields__}
        filtered = {k: v for k, v in config_dict.items() if k in valid_fields}

        for key in ("kinds", "disabled_plugins"):
            if key in filtered:
                filtered[key] = _split_names(filtered[key])
        if "toc_levels" in filtered:
            levels = tuple(lvl for lvl in filtered["toc_levels"] if isinstance(lvl, int))
            if levels:
                filtered["toc_levels"] = levels
            else:
                del filtered["toc_levels"]

        return cls(**filtered)


# Module-level default config (reused, never recreated)
_DEFAULT_CONFIG: AnnotationConfig = AnnotationConfig()

_annotation_config: ContextVar[AnnotationConfig] = ContextVar(
    "annotation_config",
    default=_DEFAULT_CONFIG,
)


def get_annotation_config() -> AnnotationConfig:
    """Get the annotation configuration active in this context."""
    return _annotation_config.get()


def set_annotation_config(config: AnnotationConfig) -> None:
    """Set annotation configuration for the current context."""
    _annotation_config.set(config)


def reset_annotation_config() -> None:
    """Reset to the default configuration."""
    _annotation_config.set(_DEFAULT_CONFIG)


@contextmanager
def annotation_config_context(config: AnnotationConfig) -> Iterator[None]:
    """Context manager for temporary config changes.

    Restores the previous config even if an exception is raised.

    Example:
        >>> with annotation_config_context(AnnotationConfig(max_depth=1)):
        ...     md = Markdown()
        >>> get_annotation_config().max_depth
        3

    """
    previous = _annotation_config.get()
    _annotation_config.set(config)
    try:
        yield
    finally:
        _annotation_config.set(previous)


__all__ = [
    "AnnotationConfig",
    "annotation_config_context",
    "get_annotation_config",
    "reset_annotation_config",
    "set_annotation_config",
]
