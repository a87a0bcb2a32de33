"""Inline markup transformation.

Text spans go through a fixed sequence of passes. Each pass only splits
fragments that are still plain `Text`, so delimiters consumed by an earlier
pass are never reinterpreted by a later one.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable
from itertools import islice

from .constants import (
    EMPHASIS_PATTERN,
    ESCAPABLE_CHARACTERS,
    ESCAPE_PATTERN,
    IMAGE_PATTERN,
    INLINE_CODE_PATTERN,
    LINK_PATTERN,
    PRIVATE_USE_RANGES,
    RAW_HTML_PATTERN,
    STRONG_PATTERN,
)
from .models import Code, Emphasis, Highlighted, Image, Inline, Link, RawHtml, Strong, Text


class EscapeShield:
    """Swap escaped characters for private-use code points and back.

    Placeholders are private-use code points that do not occur in the text, so
    restoring never alters characters the author typed. If every private-use
    code point is taken, escapes are left as written.

    Args:
        text: Span the shield will be applied to.
    """

    def __init__(self, text: str):
        used = set(text)
        free = (
            chr(code_point)
            for start, end in PRIVATE_USE_RANGES
            for code_point in range(start, end + 1)
            if chr(code_point) not in used
        )
        placeholders = list(islice(free, len(ESCAPABLE_CHARACTERS)))
        if len(placeholders) < len(ESCAPABLE_CHARACTERS):
            placeholders = []
        self._protect_table = dict(zip(ESCAPABLE_CHARACTERS, placeholders))
        self._restore_table = {
            ord(placeholder): character for character, placeholder in self._protect_table.items()
        }

    def protect(self, text: str) -> str:
        if not self._protect_table:
            return text
        return ESCAPE_PATTERN.sub(lambda match: self._protect_table[match.group(1)], text)

    def restore(self, text: str) -> str:
        return text.translate(self._restore_table)

    def restore_fragment(self, fragment: Inline) -> Inline:
        """Return `fragment` with every string field restored, recursively."""
        if isinstance(fragment, Strong):
            return Strong([self.restore_fragment(child) for child in fragment.children])
        if isinstance(fragment, Emphasis):
            return Emphasis([self.restore_fragment(child) for child in fragment.children])
        if isinstance(fragment, Link):
            return Link(
                [self.restore_fragment(child) for child in fragment.label],
                self.restore(fragment.target),
            )
        if isinstance(fragment, Image):
            return Image(self.restore(fragment.alt), self.restore(fragment.src))
        if isinstance(fragment, RawHtml):
            return RawHtml(self.restore(fragment.html))
        return type(fragment)(self.restore(fragment.text))


def _split_plain(
    fragments: Iterable[Inline], pattern: re.Pattern[str], build: Callable[[re.Match], Inline]
) -> list[Inline]:
    """Replace every match of `pattern` inside plain text with `build(match)`."""
    result: list[Inline] = []
    for fragment in fragments:
        if not isinstance(fragment, Text):
            result.append(fragment)
            continue

        text = fragment.text
        offset = 0
        for match in pattern.finditer(text):
            if match.start() > offset:
                result.append(Text(text[offset : match.start()]))
            result.append(build(match))
            offset = match.end()
        if offset < len(text):
            result.append(Text(text[offset:]))
    return result


def _delimited_text(match: re.Match) -> str:
    star = match.group("star")
    return star if star is not None else match.group("underscore")


# Applied in order after escaping; highlighting runs once escapes are restored.
_PASSES: tuple[tuple[re.Pattern[str], Callable[[re.Match], Inline]], ...] = (
    (RAW_HTML_PATTERN, lambda match: RawHtml(match.group(0))),
    (IMAGE_PATTERN, lambda match: Image(match.group("alt"), match.group("src"))),
    (LINK_PATTERN, lambda match: Link([Text(match.group("label"))], match.group("target"))),
    (STRONG_PATTERN, lambda match: Strong([Text(_delimited_text(match))])),
    (EMPHASIS_PATTERN, lambda match: Emphasis([Text(_delimited_text(match))])),
    (INLINE_CODE_PATTERN, lambda match: Code(match.group("code"))),
)


def merge_text(fragments: Iterable[Inline]) -> list[Inline]:
    """Join adjacent `Text` fragments and drop empty ones.

    Args:
        fragments: Inline fragments in order.

    Returns:
        list[Inline]: Fragments with no two consecutive `Text` entries.
    """
    merged: list[Inline] = []
    for fragment in fragments:
        if isinstance(fragment, Text):
            if not fragment.text:
                continue
            if merged and isinstance(merged[-1], Text):
                merged[-1] = Text(merged[-1].text + fragment.text)
                continue
        merged.append(fragment)
    return merged


def highlight_matches(fragments: Iterable[Inline], search: str | None) -> list[Inline]:
    """Wrap case-insensitive occurrences of `search` in plain text.

    Only top-level `Text` fragments are searched; code, links, images, raw
    markup, and strong or emphasized runs are left untouched.

    Args:
        fragments: Inline fragments to scan.
        search: Query string; empty or None disables highlighting.

    Returns:
        list[Inline]: Fragments with matches split out as `Highlighted`.

    Examples:
        highlight_matches([Text("Cat and cat")], "cat")
        # [Highlighted("Cat"), Text(" and "), Highlighted("cat")]
    """
    if not search:
        return list(fragments)
    pattern = re.compile(re.escape(search), re.IGNORECASE)
    return _split_plain(fragments, pattern, lambda match: Highlighted(match.group(0)))


def transform_inline(text: str, search: str | None = None) -> list[Inline]:
    r"""Turn a plain text span into styled inline fragments.

    Passes run in a fixed order: escapes, raw markup, images, links, strong,
    emphasis, inline code, then search highlighting. Unmatched delimiters stay
    literal; the function never raises.

    Args:
        text: Span to transform. Must not contain line breaks that matter to
            block structure; those are handled by the segmenter.
        search: Optional case-insensitive query to highlight.

    Returns:
        list[Inline]: Ordered fragments. An empty span yields an empty list.

    Examples:
        transform_inline("Some **bold** text")
        # [Text("Some "), Strong([Text("bold")]), Text(" text")]
        transform_inline(r"\*not bold\*")  # [Text("*not bold*")]
    """
    if not text:
        return []

    shield = EscapeShield(text)
    fragments: list[Inline] = [Text(shield.protect(text))]
    for pattern, build in _PASSES:
        fragments = _split_plain(fragments, pattern, build)

    fragments = merge_text(shield.restore_fragment(fragment) for fragment in fragments)
    return highlight_matches(fragments, search)
