"""Marker table for the four inline annotation kinds.

Notes carry a reference and a body separated by ``|``; sidebars carry a
single body. Both families share the ``family`` discriminant so callers
branch on it instead of probing for fields.

Syntax:
    ++reference|note body++   sidenote
    !!reference|note body!!   marginal note
    $sidebar body$            left sidebar
    @sidebar body@            right sidebar

Thread Safety:
    All markers are frozen and built once at import.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TypeAlias


class MarkerFamily(Enum):
    """Discriminant shared by every marker configuration."""

    NOTE = "note"
    SIDEBAR = "sidebar"


@dataclass(frozen=True, slots=True)
class NoteMarker:
    """Annotation with a reference span and a body span.

    Attributes:
        kind: Token type prefix (e.g., "sidenote")
        open: Opening marker string (doubled lead character)
        close: Closing marker string
        ref_class: CSS class of the reference span
        body_class: CSS class of the body span
        separator: Character splitting reference from body

    """

    kind: str
    open: str
    close: str
    ref_class: str
    body_class: str
    separator: str = "|"

    @property
    def family(self) -> MarkerFamily:
        return MarkerFamily.NOTE

    @property
    def lead(self) -> str:
        return self.open[0]

    @property
    def token_types(self) -> tuple[str, ...]:
        """Structural token types in emission order."""
        k = self.kind
        return (
            f"{k}_open",
            f"{k}_ref_open",
            f"{k}_ref_close",
            f"{k}_content_open",
            f"{k}_content_close",
            f"{k}_close",
        )


@dataclass(frozen=True, slots=True)
class SidebarMarker:
    """Annotation with a single body span.

    Attributes:
        kind: Token type prefix (e.g., "left_sidebar")
        open: Opening marker string (single character)
        close: Closing marker string
        body_class: CSS class of the sidebar span

    """

    kind: str
    open: str
    close: str
    body_class: str

    @property
    def family(self) -> MarkerFamily:
        return MarkerFamily.SIDEBAR

    @property
    def lead(self) -> str:
        return self.open[0]

    @property
    def token_types(self) -> tuple[str, ...]:
        """Structural token types in emission order."""
        return (f"{self.kind}_open", f"{self.kind}_close")


Marker: TypeAlias = NoteMarker | SidebarMarker


SIDENOTE = NoteMarker(
    kind="sidenote", open="++", close="++", ref_class="sn-ref", body_class="sidenote"
)
MARGINNOTE = NoteMarker(
    kind="marginnote", open="!!", close="!!", ref_class="mn-ref", body_class="mnote"
)
LEFT_SIDEBAR = SidebarMarker(kind="left_sidebar", open="$", close="$", body_class="left-sidebar")
RIGHT_SIDEBAR = SidebarMarker(
    kind="right_sidebar", open="@", close="@", body_class="right-sidebar"
)

MARKERS: tuple[Marker, ...] = (SIDENOTE, MARGINNOTE, LEFT_SIDEBAR, RIGHT_SIDEBAR)

# Leading character -> marker, for O(1) rejection at every scan position
MARKERS_BY_LEAD: dict[str, Marker] = {m.lead: m for m in MARKERS}

MARKER_KINDS: tuple[str, ...] = tuple(m.kind for m in MARKERS)


def get_marker(kind: str) -> Marker:
    """Look up a marker by kind name.

    Raises:
        KeyError: If the kind is not one of the four annotation kinds

    """
    for marker in MARKERS:
        if marker.kind == kind:
            return marker
    available = ", ".join(MARKER_KINDS)
    raise KeyError(f"Unknown annotation kind: {kind!r}. Available: {available}")


def markers_for(kinds: tuple[str, ...] | frozenset[str]) -> dict[str, Marker]:
    """Build a lead-character lookup restricted to the given kinds."""
    return {m.lead: m for m in MARKERS if m.kind in kinds}


__all__ = [
    "LEFT_SIDEBAR",
    "MARGINNOTE",
    "MARKERS",
    "MARKERS_BY_LEAD",
    "MARKER_KINDS",
    "Marker",
    "MarkerFamily",
    "NoteMarker",
    "RIGHT_SIDEBAR",
    "SIDENOTE",
    "SidebarMarker",
    "get_marker",
    "markers_for",
]
