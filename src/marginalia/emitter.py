"""Structural token emission for matched annotations.

Emission is staged. The full token plan, including every child list, is
built before the first push, and pushing a checked plan cannot fail
halfway. If building the plan raises, the raw annotation source is pushed as
one text token instead, so the stream never holds an unbalanced sequence.

Token sequence for notes:
    {kind}_open, {kind}_ref_open, [reference], {kind}_ref_close,
    {kind}_content_open, [body], {kind}_content_close, {kind}_close

Token sequence for sidebars:
    {kind}_open, [body], {kind}_close
"""

from __future__ import annotations

from typing import TYPE_CHECKING, NamedTuple

from marginalia.bridge import fragment_children, is_balanced, literal_token, splice
from marginalia.markers import MarkerFamily
from marginalia.utils.logger import get_logger

if TYPE_CHECKING:
    from markdown_it.rules_inline import StateInline
    from markdown_it.token import Token

    from marginalia.scanning import Extraction

logger = get_logger(__name__)

TAG = "span"


class PlannedToken(NamedTuple):
    """One step of an emission plan: a structural token or a run of children."""

    type: str
    nesting: int
    markup: str = ""
    children: list[Token] | None = None


def _content(state: StateInline, text: str, max_depth: int) -> PlannedToken:
    children = fragment_children(state, text, max_depth)
    if not is_balanced(children):
        logger.debug("Unbalanced fragment tokens for %r, keeping it literal", text)
        children = [literal_token(text)]
    return PlannedToken("", 0, children=children)


def plan_tokens(state: StateInline, match: Extraction, max_depth: int) -> list[PlannedToken]:
    """Build the emission plan for ``match``; pushes nothing."""
    marker = match.marker
    kind = marker.kind
    plan = [PlannedToken(f"{kind}_open", 1, marker.open)]

    if marker.family is MarkerFamily.NOTE:
        assert match.reference is not None
        plan += [
            PlannedToken(f"{kind}_ref_open", 1),
            _content(state, match.reference, max_depth),
            PlannedToken(f"{kind}_ref_close", -1),
            PlannedToken(f"{kind}_content_open", 1),
            _content(state, match.body, max_depth),
            PlannedToken(f"{kind}_content_close", -1),
        ]
    else:
        plan.append(_content(state, match.body, max_depth))

    plan.append(PlannedToken(f"{kind}_close", -1, marker.close))
    return plan


def push_plan(state: StateInline, plan: list[PlannedToken]) -> None:
    for step in plan:
        if step.children is not None:
            splice(state, step.children)
            continue
        token = state.push(step.type, TAG, step.nesting)
        if step.markup:
            token.markup = step.markup


def emit_annotation(state: StateInline, match: Extraction, max_depth: int) -> None:
    """Append the token sequence for ``match`` to ``state.tokens``."""
    try:
        plan = plan_tokens(state, match, max_depth)
    except Exception:
        logger.debug("Emitting %s as text after planning failed", match.marker.kind, exc_info=True)
        splice(state, [literal_token(match.raw)])
        return
    push_plan(state, plan)


__all__ = ["PlannedToken", "emit_annotation", "plan_tokens", "push_plan"]
