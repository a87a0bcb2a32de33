"""Constants used across the notemark package."""

from __future__ import annotations

import re

from .config import NotemarkConfig

DEFAULT_CONFIG = NotemarkConfig()

# Block patterns
FENCE_PATTERN = re.compile(r"^(?P<indent>[ \t]{0,3})```(?!`)[ \t]*(?P<info>[^`\s]*)[ \t]*$")
HEADING_PATTERN = re.compile(r"^(?P<hashes>#{1,6})[ \t]+(?P<text>\S.*?)[ \t]*$")
TASK_ITEM_PATTERN = re.compile(r"^[ \t]*[-*] \[(?P<mark>[ xX])\](?:[ \t]+(?P<text>.*))?$")
LIST_ITEM_PATTERN = re.compile(r"^[ \t]*[-*] (?P<text>.*)$")
THEMATIC_BREAKS = frozenset({"---", "***", "___"})

# Block-level tags that start a raw-markup run
RAW_BLOCK_TAGS = frozenset(
    {
        "address",
        "article",
        "aside",
        "blockquote",
        "center",
        "details",
        "dialog",
        "div",
        "dl",
        "fieldset",
        "figcaption",
        "figure",
        "footer",
        "form",
        "h1",
        "h2",
        "h3",
        "h4",
        "h5",
        "h6",
        "header",
        "iframe",
        "main",
        "nav",
        "ol",
        "p",
        "pre",
        "section",
        "summary",
        "table",
        "ul",
        "video",
    }
)
RAW_BLOCK_OPEN_PATTERN = re.compile(r"^[ \t]*<(?P<tag>[A-Za-z][A-Za-z0-9]*)(?=[\s/>])[^>]*>")

# Inline patterns, applied in pipeline order
ESCAPABLE_CHARACTERS = "*_`\\#[]>|!"
ESCAPE_PATTERN = re.compile(r"\\([*_`\\#\[\]>|!])")
RAW_HTML_PATTERN = re.compile(r"<[A-Za-z/!][^<>]*>")
IMAGE_PATTERN = re.compile(r"!\[(?P<alt>[^\[\]]*)\]\((?P<src>[^()\s]*)\)")
LINK_PATTERN = re.compile(r"\[(?P<label>[^\[\]]+)\]\((?P<target>[^()\s]*)\)")
STRONG_PATTERN = re.compile(r"\*\*(?P<star>.+?)\*\*|__(?P<underscore>.+?)__")
EMPHASIS_PATTERN = re.compile(r"\*(?P<star>[^*]+)\*|_(?P<underscore>[^_]+)_")
INLINE_CODE_PATTERN = re.compile(r"`(?P<code>[^`]+)`")
TABLE_CELL_SEPARATOR = re.compile(r"(?<!\\)\|")

# Private-use ranges used to shield escaped characters from later passes
PRIVATE_USE_RANGES = (
    (0xE000, 0xF8FF),
    (0xF0000, 0xFFFFD),
    (0x100000, 0x10FFFD),
)

EMPTY_PLACEHOLDER = DEFAULT_CONFIG.empty_placeholder
MARKDOWN_EXTENSIONS = (".md", ".markdown")
WELCOME_NOTE_ID = "Welcome.md"
WELCOME_NOTE = (
    "# Welcome\n"
    "\n"
    "This vault stores notes as plain Markdown files.\n"
    "\n"
    "- [ ] Write a note\n"
    "- [ ] Search it with **highlighting**\n"
)
