"""Search highlight overlay for the raw-text edit surface.

The overlay is laid over the editable text. It has to occupy exactly the same
characters as the text underneath: matched spans are painted, everything else
is present but invisible.
"""

from __future__ import annotations

import html
import re
from dataclasses import dataclass, field


@dataclass(frozen=True)
class OverlaySpan:
    """Run of raw characters, either a search match or hidden filler."""

    text: str
    highlighted: bool = False


@dataclass(frozen=True)
class Overlay:
    """Character-aligned projection of raw text.

    Attributes:
        spans: Consecutive spans whose concatenation is the raw text.
    """

    spans: tuple = ()

    def __post_init__(self):
        if not isinstance(self.spans, tuple):
            object.__setattr__(self, "spans", tuple(self.spans))

    @property
    def text(self) -> str:
        return "".join(span.text for span in self.spans)

    @property
    def matches(self) -> list[str]:
        return [span.text for span in self.spans if span.highlighted]


@dataclass(frozen=True)
class MatchLocation:
    """Position of a search match in raw text.

    Attributes:
        offset: Zero-based character offset of the match.
        line: Zero-based line number containing the start of the match.
        column: Zero-based column of the match within its line.
        length: Number of matched characters.
    """

    offset: int
    line: int
    column: int
    length: int


def _search_pattern(search: str) -> re.Pattern[str]:
    return re.compile(re.escape(search), re.IGNORECASE)


def project_overlay(text: str, search: str | None = None) -> Overlay:
    """Project raw text into highlighted and hidden spans.

    No character is added, removed, or altered, so the overlay keeps the
    length and line breaks of `text`.

    Args:
        text: Raw note text as shown in the edit surface.
        search: Case-insensitive query; empty or None yields one hidden span.

    Returns:
        Overlay: Spans covering `text` exactly.

    Examples:
        project_overlay("a Cat", "cat").spans
        # (OverlaySpan("a "), OverlaySpan("Cat", highlighted=True))
    """
    if not text:
        return Overlay(())
    if not search:
        return Overlay((OverlaySpan(text),))

    spans = []
    offset = 0
    for match in _search_pattern(search).finditer(text):
        if match.start() > offset:
            spans.append(OverlaySpan(text[offset : match.start()]))
        spans.append(OverlaySpan(match.group(0), highlighted=True))
        offset = match.end()
    if offset < len(text):
        spans.append(OverlaySpan(text[offset:]))
    return Overlay(spans)


def render_overlay_html(overlay: Overlay) -> str:
    """Render an overlay as HTML for layering over a textarea.

    Matches become ``<mark>`` elements; other characters are wrapped in a
    transparent span so they still take up their space.

    Args:
        overlay: Projection produced by `project_overlay`.

    Returns:
        str: Escaped HTML with the same visible characters as the raw text.
    """
    parts = []
    for span in overlay.spans:
        escaped = html.escape(span.text, quote=False)
        if span.highlighted:
            parts.append(f'<mark class="overlay-match">{escaped}</mark>')
        else:
            parts.append(f'<span class="overlay-hidden">{escaped}</span>')
    return "".join(parts)


def find_first_match(text: str, search: str | None) -> MatchLocation | None:
    """Locate the first case-insensitive match of `search` in raw text.

    Returns:
        MatchLocation | None: Where the match starts, or None when the query is
            empty or absent from the text.
    """
    if not search:
        return None
    match = _search_pattern(search).search(text)
    if match is None:
        return None
    start = match.start()
    line_start = text.rfind("\n", 0, start) + 1
    return MatchLocation(
        offset=start,
        line=text.count("\n", 0, start),
        column=start - line_start,
        length=len(match.group(0)),
    )


@dataclass
class ScrollOffset:
    top: int = 0
    left: int = 0


@dataclass
class ScrollSync:
    """Mirror the edit surface scroll position onto the overlay.

    The edit surface is the only writer. Each scroll event updates the overlay
    offset before `on_scroll` returns, so the next paint sees both in step.

    Attributes:
        editor: Last offset reported by the edit surface.
        overlay: Offset applied to the overlay layer.
    """

    editor: ScrollOffset = field(default_factory=ScrollOffset)
    overlay: ScrollOffset = field(default_factory=ScrollOffset)

    def on_scroll(self, top: int, left: int = 0) -> ScrollOffset:
        self.editor = ScrollOffset(top, left)
        self.overlay = ScrollOffset(top, left)
        return self.overlay

    @property
    def in_sync(self) -> bool:
        return self.editor == self.overlay
