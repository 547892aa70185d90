"""Re-entry into the host inline parser for annotation content.

Reference and body text are parsed as inline markdown in a fresh child
``StateInline``, so the enclosing state's cursor, pending text and
delimiter stacks are never touched by the nested parse. The child inherits
the enclosing ``linkLevel``, so content inside a link is parsed as if it
were still inside that link. The resulting children are then pushed into
the enclosing state with ``splice``.

Failures never escape: content past the depth ceiling, or content whose
parse raised, becomes a single literal text token.
"""

from __future__ import annotations

from markdown_it.rules_inline import StateInline
from markdown_it.token import Token

from marginalia.depth import descend
from marginalia.errors import RecursionLimitExceeded, SubParseFailure
from marginalia.utils.logger import get_logger

logger = get_logger(__name__)

# Token fields carried over when a child is pushed into the enclosing state.
# type, tag and nesting go through push(); level is recomputed by push().
_SPLICED_FIELDS = ("attrs", "map", "content", "markup", "info", "meta", "block", "hidden", "children")

# link_open markup of links that come from bare URLs rather than [text](dest)
_AUTO_LINK_MARKUP = frozenset({"autolink", "linkify"})


def literal_token(text: str) -> Token:
    """Build an unparsed text token."""
    token = Token("text", "", 0)
    token.content = text
    return token


def _parse_child(state: StateInline, text: str, children: list[Token]) -> None:
    # Same steps as ParserInline.parse, on a state that keeps the link level
    child = StateInline(text, state.md, state.env, children)
    child.linkLevel = state.linkLevel
    inline = state.md.inline
    inline.tokenize(child)
    for rule in inline.ruler2.getRules(""):
        rule(child)


def parse_fragment(state: StateInline, text: str, max_depth: int) -> list[Token]:
    """Parse ``text`` as inline markdown one nesting level deeper.

    Raises:
        RecursionLimitExceeded: The session is already at ``max_depth``
        SubParseFailure: The host parser raised

    """
    children: list[Token] = []
    with descend(state.env, max_depth):
        try:
            _parse_child(state, text, children)
        except Exception as exc:
            raise SubParseFailure(text) from exc
    return children


def fragment_children(state: StateInline, text: str, max_depth: int) -> list[Token]:
    """Return child tokens for annotation content, never raising."""
    if not text:
        return []
    try:
        return parse_fragment(state, text, max_depth)
    except RecursionLimitExceeded as exc:
        logger.debug("Annotation content kept literal: %s", exc)
    except SubParseFailure as exc:
        logger.debug("Annotation content kept literal: %s", exc, exc_info=exc.__cause__)
    return [literal_token(text)]


def is_balanced(children: list[Token]) -> bool:
    """Check that open/close nesting never dips below zero and ends at zero."""
    depth = 0
    for child in children:
        depth += child.nesting
        if depth < 0:
            return False
    return depth == 0


def has_inline_link(children: list[Token]) -> bool:
    """Check for a ``[text](dest)`` or reference link among ``children``."""
    return any(
        child.type == "link_open" and child.markup not in _AUTO_LINK_MARKUP for child in children
    )


def splice(state: StateInline, children: list[Token]) -> None:
    """Push ``children`` into ``state``, keeping every other token field."""
    for child in children:
        token = state.push(child.type, child.tag, child.nesting)
        for field in _SPLICED_FIELDS:
            setattr(token, field, getattr(child, field))


__all__ = [
    "fragment_children",
    "has_inline_link",
    "is_balanced",
    "literal_token",
    "parse_fragment",
    "splice",
]
