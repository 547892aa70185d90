"""Exception classes for marginalia.

Annotation errors describe why a candidate annotation was not turned into
structural tokens. The tokenizer resolves every one of them locally, either
by rejecting the match or by emitting the content as literal text, so they
never reach code that renders a document.
"""

from __future__ import annotations


class MarginaliaError(Exception):
    """Base exception for all marginalia errors.

    Subclass this for specific error categories.
    """

    pass


class AnnotationSyntaxError(MarginaliaError):
    """A candidate annotation is not well formed.

    The match is rejected and the source is left for the other inline rules.
    """

    reason = "malformed annotation"

    def __init__(self, kind: str, pos: int, detail: str | None = None) -> None:
        """Initialize syntax error with the marker kind and source offset.

        Args:
            kind: Annotation kind (e.g., "sidenote", "left_sidebar")
            pos: Offset of the opening marker in the scanned source
            detail: Optional extra description
        """
        self.kind = kind
        self.pos = pos
        message = f"{kind} at offset {pos}: {self.reason}"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)


class NoClosingMarker(AnnotationSyntaxError):
    """Closing marker absent within the search window."""

    reason = "no closing marker"


class MissingSeparator(AnnotationSyntaxError):
    """Note span has no reference/body separator."""

    reason = "no reference separator"


class EmptyReference(AnnotationSyntaxError):
    """Note reference text is empty or whitespace only."""

    reason = "empty reference"


class RecursionLimitExceeded(MarginaliaError):
    """Annotation nesting reached the configured depth ceiling.

    Content at this depth is emitted as literal text instead of being parsed.
    """

    def __init__(self, depth: int, limit: int) -> None:
        self.depth = depth
        self.limit = limit
        super().__init__(f"annotation depth {depth} reached limit {limit}")


class SubParseFailure(MarginaliaError):
    """The host inline parser raised while parsing annotation content.

    The original exception is chained as ``__cause__``.
    """

    def __init__(self, text: str) -> None:
        self.text = text
        preview = text if len(text) <= 40 else f"{text[:37]}..."
        super().__init__(f"inline parse failed for {preview!r}")


class ConfigError(MarginaliaError):
    """Invalid annotation configuration value."""

    pass


class PluginError(MarginaliaError):
    """Error in plugin lookup or installation.

    Raised when a plugin fails to register with a markdown-it instance.
    """

    def __init__(self, plugin_name: str, message: str) -> None:
        """Initialize plugin error.

        Args:
            plugin_name: Name of the failing plugin
            message: Description of the error
        """
        self.plugin_name = plugin_name
        super().__init__(f"Plugin '{plugin_name}': {message}")
