"""HTML render rules for annotation tokens.

Every structural token type maps to one fixed HTML fragment. Child tokens
inside annotations are rendered by markdown-it's own rules.

Output:
    ++ref|body++   <span class="sn-ref">ref</span><span class="sidenote">body</span>
    !!ref|body!!   <span class="mn-ref">ref</span><span class="mnote">body</span>
    $body$         <span class="left-sidebar">body</span>
    @body@         <span class="right-sidebar">body</span>

The outer note tokens render as nothing: the reference and body spans are
siblings so stylesheets can place the body in the margin.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import TYPE_CHECKING, Any

from marginalia.markers import MARKERS, Marker, MarkerFamily
from marginalia.utils.text import escape_html

if TYPE_CHECKING:
    from markdown_it import MarkdownIt
    from markdown_it.token import Token

CLOSE_SPAN = "</span>"


def _open_span(css_class: str) -> str:
    return f'<span class="{escape_html(css_class)}">'


def render_rules(markers: Iterable[Marker] = MARKERS) -> dict[str, str]:
    """Map each structural token type to its HTML fragment."""
    rules: dict[str, str] = {}
    for marker in markers:
        kind = marker.kind
        if marker.family is MarkerFamily.NOTE:
            rules[f"{kind}_open"] = ""
            rules[f"{kind}_ref_open"] = _open_span(marker.ref_class)
            rules[f"{kind}_ref_close"] = CLOSE_SPAN
            rules[f"{kind}_content_open"] = _open_span(marker.body_class)
            rules[f"{kind}_content_close"] = CLOSE_SPAN
            rules[f"{kind}_close"] = ""
        else:
            rules[f"{kind}_open"] = _open_span(marker.body_class)
            rules[f"{kind}_close"] = CLOSE_SPAN
    return rules


def _fixed(fragment: str) -> Callable[..., str]:
    # markdown-it binds render rules to the renderer: (self, tokens, idx, options, env)
    def render(self: Any, tokens: list[Token], idx: int, options: Any, env: Any) -> str:
        return fragment

    return render


def install_render_rules(md: MarkdownIt, markers: Iterable[Marker] = MARKERS) -> list[str]:
    """Register the fixed render rules on ``md``; returns the token types."""
    rules = render_rules(markers)
    for token_type, fragment in rules.items():
        md.add_render_rule(token_type, _fixed(fragment))
    return list(rules)


__all__ = ["CLOSE_SPAN", "install_render_rules", "render_rules"]
