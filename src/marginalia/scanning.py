"""Annotation detection and span extraction.

Detection runs at every inline scan position, so it only looks at one or
two characters. Extraction searches for the closing marker inside a fixed
window ahead of the opening marker, which keeps a full document scan linear
even when many openers are never closed.

Both functions are pure: they read the source and return values, and
callers decide what to do with the result.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass

from marginalia.errors import EmptyReference, MissingSeparator, NoClosingMarker
from marginalia.markers import MARKERS_BY_LEAD, Marker, MarkerFamily


@dataclass(frozen=True, slots=True)
class Extraction:
    """A validated annotation span.

    Attributes:
        marker: The marker configuration that matched
        start: Offset of the opening marker
        end: Offset one past the closing marker
        reference: Reference text for notes, None for sidebars
        body: Body text (may be empty)
        raw: Source slice from opening through closing marker

    """

    marker: Marker
    start: int
    end: int
    reference: str | None
    body: str
    raw: str


def detect_marker(
    src: str,
    pos: int,
    pos_max: int,
    markers: Mapping[str, Marker] = MARKERS_BY_LEAD,
) -> Marker | None:
    """Return the marker whose opening sequence starts at ``pos``.

    Note markers are doubled (``++``, ``!!``); sidebar markers are a single
    character. Returns None when nothing starts here.
    """
    if pos >= pos_max:
        return None
    marker = markers.get(src[pos])
    if marker is None:
        return None
    width = len(marker.open)
    if pos + width > pos_max or not src.startswith(marker.open, pos):
        return None
    return marker


def extract_annotation(
    src: str,
    marker: Marker,
    start: int,
    pos_max: int,
    window: int = 1000,
) -> Extraction:
    """Find the closing marker and split the enclosed span.

    Args:
        src: Source being scanned
        marker: Marker detected at ``start``
        start: Offset of the opening marker
        pos_max: Scan bound; the closing marker must end at or before it
        window: Characters after the opening marker searched for the close

    Returns:
        The validated Extraction

    Raises:
        NoClosingMarker: No closing marker within the window
        MissingSeparator: A note span has no separator
        EmptyReference: A note reference is empty or whitespace

    """
    inner_start = start + len(marker.open)
    limit = min(pos_max, inner_start + window + len(marker.close))
    close_at = src.find(marker.close, inner_start, limit)
    if close_at < 0:
        raise NoClosingMarker(marker.kind, start, f"searched {window} characters")

    span = src[inner_start:close_at]
    end = close_at + len(marker.close)
    raw = src[start:end]

    if marker.family is MarkerFamily.SIDEBAR:
        return Extraction(marker, start, end, None, span, raw)

    reference, sep, body = span.partition(marker.separator)
    if not sep:
        raise MissingSeparator(marker.kind, start)
    if not reference.strip():
        raise EmptyReference(marker.kind, start)
    return Extraction(marker, start, end, reference, body, raw)


__all__ = ["Extraction", "detect_marker", "extract_annotation"]
