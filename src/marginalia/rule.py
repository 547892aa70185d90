"""Top-level inline rule for annotations.

Each call walks Idle -> Detected -> Extracted -> Committed, or stops at
Rejected with the cursor where it was. Nothing persists between calls.

Contract with the inline rule chain:
    silent=True   detection and extraction only; no tokens, cursor unchanged
    silent=False  on success, tokens pushed and cursor just past the closing
                  marker; on failure, nothing pushed and cursor unchanged

No error raised while matching escapes ``tokenize``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from marginalia.bridge import fragment_children, has_inline_link
from marginalia.config import AnnotationConfig, get_annotation_config
from marginalia.emitter import emit_annotation
from marginalia.errors import AnnotationSyntaxError
from marginalia.markers import markers_for
from marginalia.scanning import Extraction, detect_marker, extract_annotation
from marginalia.utils.logger import get_logger

if TYPE_CHECKING:
    from markdown_it.rules_inline import StateInline

logger = get_logger(__name__)


class AnnotationTokenizer:
    """Inline rule recognizing sidenotes, marginal notes and sidebars.

    Stateless apart from its immutable configuration; safe to share between
    markdown-it instances and threads.

    Usage:
        tokenizer = AnnotationTokenizer(AnnotationConfig())
        md.inline.ruler.before("link", "annotations", tokenizer.chain_rule)

    """

    __slots__ = ("_config", "_markers")

    def __init__(self, config: AnnotationConfig | None = None) -> None:
        self._config = config if config is not None else get_annotation_config()
        self._markers = markers_for(self._config.kinds)

    @property
    def config(self) -> AnnotationConfig:
        return self._config

    def probe(self, state: StateInline) -> Extraction | None:
        """Detect and extract at ``state.pos`` without side effects."""
        pos = state.pos
        marker = detect_marker(state.src, pos, state.posMax, self._markers)
        if marker is None:
            return None
        try:
            return extract_annotation(
                state.src, marker, pos, state.posMax, self._config.search_window
            )
        except AnnotationSyntaxError as exc:
            logger.debug("Rejected annotation: %s", exc)
            return None

    def tokenize(self, state: StateInline, silent: bool) -> bool:
        match = self.probe(state)
        if match is None:
            return False
        if silent:
            return True

        emit_annotation(state, match, self._config.max_depth)
        state.pos = match.end
        return True

    def chain_rule(self, state: StateInline, silent: bool) -> bool:
        """Entry registered in the host rule chain.

        The host's link-label scanner runs rules in silent mode and requires
        every successful rule to step over what it matched, so a confirmed
        match moves the cursor in that mode too. An annotation holding a
        link is not stepped over: the scanner walks into it, finds the
        nested link and refuses the enclosing one, as it does for
        ``[a [b](c)](d)``.
        """
        if not silent:
            return self.tokenize(state, False)
        match = self.probe(state)
        if match is None:
            return False
        if self.holds_link(state, match):
            return False
        state.pos = match.end
        return True

    def holds_link(self, state: StateInline, match: Extraction) -> bool:
        """Check whether the content of ``match`` parses to a link."""
        texts = [match.body] if match.reference is None else [match.reference, match.body]
        max_depth = self._config.max_depth
        return any(has_inline_link(fragment_children(state, text, max_depth)) for text in texts)


__all__ = ["AnnotationTokenizer"]
