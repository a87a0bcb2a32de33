"""HTML and dictionary presentation of parsed documents.

The parser passes raw markup through untouched. This layer decides what to do
with it: by default raw markup is escaped, and `allow_raw_html=True` inserts
it verbatim, leaving sanitization to the caller.
"""

from __future__ import annotations

import dataclasses
import html
from dataclasses import dataclass

from .models import (
    Blank,
    Blockquote,
    Code,
    CodeBlock,
    Document,
    Emphasis,
    Heading,
    Highlighted,
    Image,
    Link,
    ListItem,
    Paragraph,
    Placeholder,
    RawHtml,
    RawMarkup,
    Strong,
    Table,
    Text,
    ThematicBreak,
)

# Heading level -> (tag, css class)
HEADING_STYLES = {
    1: ("h1", "note-title"),
    2: ("h2", "note-section"),
    3: ("h3", "note-subsection"),
    4: ("h4", "note-minor"),
    5: ("h5", "note-minor"),
    6: ("h6", "note-minor"),
}


@dataclass(frozen=True)
class NoteStats:
    """Footer counters for a note.

    Attributes:
        characters: Length of the raw text.
        words: Number of whitespace-separated tokens.
    """

    characters: int
    words: int


def note_stats(text: str) -> NoteStats:
    return NoteStats(characters=len(text), words=len(text.split()))


def _escape(text: str) -> str:
    return html.escape(text, quote=True)


def render_inline_html(fragments, allow_raw_html: bool = False) -> str:
    """Render inline fragments to HTML.

    Args:
        fragments: Inline fragments from the transformer.
        allow_raw_html: Insert `RawHtml` verbatim instead of escaping it.

    Returns:
        str: HTML fragment.
    """
    parts = []
    for fragment in fragments:
        if isinstance(fragment, Text):
            parts.append(_escape(fragment.text))
        elif isinstance(fragment, Strong):
            inner = render_inline_html(fragment.children, allow_raw_html)
            parts.append(f"<strong>{inner}</strong>")
        elif isinstance(fragment, Emphasis):
            inner = render_inline_html(fragment.children, allow_raw_html)
            parts.append(f"<em>{inner}</em>")
        elif isinstance(fragment, Code):
            parts.append(f"<code>{_escape(fragment.text)}</code>")
        elif isinstance(fragment, Link):
            label = render_inline_html(fragment.label, allow_raw_html)
            parts.append(f'<a href="{_escape(fragment.target)}">{label}</a>')
        elif isinstance(fragment, Image):
            parts.append(f'<img src="{_escape(fragment.src)}" alt="{_escape(fragment.alt)}">')
        elif isinstance(fragment, Highlighted):
            parts.append(f'<mark class="search-match">{_escape(fragment.text)}</mark>')
        elif isinstance(fragment, RawHtml):
            parts.append(fragment.html if allow_raw_html else _escape(fragment.html))
    return "".join(parts)


def _render_block(block, allow_raw_html: bool) -> str:
    if isinstance(block, Heading):
        tag, css_class = HEADING_STYLES[block.level]
        content = render_inline_html(block.inline, allow_raw_html)
        return f'<{tag} class="{css_class}">{content}</{tag}>'

    if isinstance(block, Paragraph):
        return f"<p>{render_inline_html(block.inline, allow_raw_html)}</p>"

    if isinstance(block, ListItem):
        content = render_inline_html(block.inline, allow_raw_html)
        if block.checked is None:
            return f'<div class="list-item">{content}</div>'
        checked = " checked" if block.checked else ""
        return (
            f'<div class="list-item task"><input type="checkbox" disabled{checked}> '
            f"{content}</div>"
        )

    if isinstance(block, CodeBlock):
        language = f' class="language-{_escape(block.language)}"' if block.language else ""
        return f"<pre><code{language}>{_escape(block.text)}</code></pre>"

    if isinstance(block, Table):
        header = "".join(
            f"<th>{render_inline_html(cell, allow_raw_html)}</th>" for cell in block.header
        )
        rows = "".join(
            "<tr>"
            + "".join(f"<td>{render_inline_html(cell, allow_raw_html)}</td>" for cell in row)
            + "</tr>"
            for row in block.rows
        )
        return f"<table><thead><tr>{header}</tr></thead><tbody>{rows}</tbody></table>"

    if isinstance(block, Blockquote):
        paragraphs = "".join(
            f"<p>{render_inline_html(paragraph, allow_raw_html)}</p>"
            for paragraph in block.paragraphs
        )
        return f"<blockquote>{paragraphs}</blockquote>"

    if isinstance(block, RawMarkup):
        return block.raw if allow_raw_html else f"<pre>{_escape(block.raw)}</pre>"

    if isinstance(block, ThematicBreak):
        return "<hr>"

    if isinstance(block, Blank):
        return '<div class="blank"></div>'

    if isinstance(block, Placeholder):
        return f'<div class="placeholder">{_escape(block.text)}</div>'

    return ""


def render_html(document: Document, allow_raw_html: bool = False) -> str:
    """Render a document as an HTML fragment, one element per line.

    Args:
        document: Parsed document.
        allow_raw_html: Insert raw markup verbatim. The caller is then
            responsible for sanitizing the result.

    Returns:
        str: HTML, newline-terminated.

    Examples:
        render_html(parse_markdown("# Title"))
        # '<h1 class="note-title">Title</h1>\\n'
    """
    return "".join(f"{_render_block(block, allow_raw_html)}\n" for block in document.blocks)


def to_dict(node) -> object:
    """Convert a document, block, or fragment into JSON-ready data.

    Each dataclass becomes a mapping with a ``"type"`` key naming its variant;
    tuples become lists.

    Examples:
        to_dict(Text("hi"))  # {"type": "Text", "text": "hi"}
    """
    if dataclasses.is_dataclass(node) and not isinstance(node, type):
        data = {"type": type(node).__name__}
        for item in dataclasses.fields(node):
            data[item.name] = to_dict(getattr(node, item.name))
        return data
    if isinstance(node, (list, tuple)):
        return [to_dict(item) for item in node]
    return node
