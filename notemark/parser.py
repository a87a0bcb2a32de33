"""Markdown block segmentation."""

from __future__ import annotations

import logging

from .constants import (
    EMPTY_PLACEHOLDER,
    FENCE_PATTERN,
    HEADING_PATTERN,
    LIST_ITEM_PATTERN,
    RAW_BLOCK_OPEN_PATTERN,
    RAW_BLOCK_TAGS,
    TASK_ITEM_PATTERN,
    THEMATIC_BREAKS,
)
from .inline import transform_inline
from .models import (
    AccumulatorState,
    Blank,
    Block,
    Document,
    Heading,
    ListItem,
    Paragraph,
    ParserCursor,
    Placeholder,
    RawMarkup,
    ThematicBreak,
)
from .presenters import build_blockquote, build_code_block, build_table

logger = logging.getLogger(__name__)


def split_lines(text: str) -> list[str]:
    """Split note text on line feeds, dropping one trailing carriage return per line.

    Args:
        text: Raw note text.

    Returns:
        list[str]: Lines without terminators. Text ending in a line feed yields
            a final empty line.

    Examples:
        split_lines("a\\r\\nb")  # ["a", "b"]
        split_lines("a\\n")  # ["a", ""]
    """
    return [line[:-1] if line.endswith("\r") else line for line in text.split("\n")]


def is_quote_line(line: str) -> bool:
    return line.lstrip().startswith(">")


def is_table_line(line: str) -> bool:
    trimmed = line.strip()
    return len(trimmed) >= 2 and trimmed.startswith("|") and trimmed.endswith("|")


def raw_markup_tag(line: str) -> str | None:
    """Return the block-level tag a line opens, or None.

    Self-closing openers (``<div />``) and tags outside the block-level set do
    not start a raw-markup run.

    Examples:
        raw_markup_tag("<details open>")  # "details"
        raw_markup_tag("<span>inline</span>")  # None
    """
    match = RAW_BLOCK_OPEN_PATTERN.match(line)
    if not match:
        return None
    tag = match.group("tag").lower()
    if tag not in RAW_BLOCK_TAGS:
        return None
    if match.group(0).endswith("/>"):
        return None
    return tag


def closes_raw_markup(line: str, tag: str) -> bool:
    return line.rstrip().lower().endswith(f"</{tag}>")


def _flush(cursor: ParserCursor, blocks: list[Block], search: str | None) -> None:
    """Emit the active buffer and reset the cursor to `AccumulatorState.NONE`.

    Every transition between accumulators goes through this function, so at
    most one buffer is ever pending.
    """
    state = cursor.state
    lines = cursor.buffer

    if state is AccumulatorState.IN_CODE:
        blocks.extend(build_code_block(lines, cursor.language))
    elif state is AccumulatorState.IN_TABLE:
        blocks.extend(build_table(lines, search))
    elif state is AccumulatorState.IN_BLOCKQUOTE:
        blocks.extend(build_blockquote(lines, search))
    elif state is AccumulatorState.IN_RAW_MARKUP:
        blocks.append(RawMarkup("\n".join(lines)))

    cursor.state = AccumulatorState.NONE
    cursor.buffer = []
    cursor.language = None
    cursor.raw_tag = None


def _enter(
    cursor: ParserCursor, blocks: list[Block], search: str | None, state: AccumulatorState
) -> None:
    if cursor.state is not state:
        _flush(cursor, blocks, search)
        cursor.state = state


def _try_toggle_fence(
    cursor: ParserCursor, blocks: list[Block], line: str, search: str | None
) -> bool:
    """Open or close a code fence.

    Args:
        cursor: Parser cursor to update.
        blocks: Output block list receiving flushed buffers.
        line: Current line.
        search: Search term forwarded to flushed non-code buffers.

    Returns:
        bool: True when the line was a fence and has been consumed.

    Examples:
        _try_toggle_fence(ParserCursor(), [], "```python", None)  # True
    """
    match = FENCE_PATTERN.match(line)
    if not match:
        return False

    if cursor.state is AccumulatorState.IN_CODE:
        _flush(cursor, blocks, search)
        return True

    _flush(cursor, blocks, search)
    cursor.state = AccumulatorState.IN_CODE
    cursor.language = match.group("info") or None
    return True


def _try_raw_markup(
    cursor: ParserCursor, blocks: list[Block], line: str, search: str | None
) -> bool:
    """Start or continue a raw-markup run.

    A run ends at a line closing the opening tag (kept) or at a blank line
    (left for normal classification). Nested or multi-line tag structures are
    not balanced.

    Returns:
        bool: True when the line was consumed by the raw-markup buffer.
    """
    if cursor.state is AccumulatorState.IN_RAW_MARKUP:
        if not line.strip():
            _flush(cursor, blocks, search)
            return False
        cursor.buffer.append(line)
        if closes_raw_markup(line, cursor.raw_tag):
            _flush(cursor, blocks, search)
        return True

    tag = raw_markup_tag(line)
    if tag is None:
        return False

    _enter(cursor, blocks, search, AccumulatorState.IN_RAW_MARKUP)
    cursor.raw_tag = tag
    cursor.buffer.append(line)
    if closes_raw_markup(line, tag):
        _flush(cursor, blocks, search)
    return True


def _try_accumulate(
    cursor: ParserCursor, blocks: list[Block], line: str, search: str | None
) -> bool:
    """Append a blockquote or table line, switching accumulators as needed."""
    if is_quote_line(line):
        _enter(cursor, blocks, search, AccumulatorState.IN_BLOCKQUOTE)
    elif is_table_line(line):
        _enter(cursor, blocks, search, AccumulatorState.IN_TABLE)
    else:
        return False
    cursor.buffer.append(line)
    return True


def classify_line(line: str, search: str | None = None) -> Block:
    """Classify a line that no accumulator claimed.

    Args:
        line: Line to classify.
        search: Optional query highlighted in the line's inline content.

    Returns:
        Block: Heading, thematic break, list item, blank, or paragraph.

    Examples:
        classify_line("## Notes")  # Heading(2, [Text("Notes")])
        classify_line("- [x] done")  # ListItem([Text("done")], checked=True)
    """
    heading_match = HEADING_PATTERN.match(line)
    if heading_match:
        return Heading(
            len(heading_match.group("hashes")),
            transform_inline(heading_match.group("text"), search),
        )

    if line.strip() in THEMATIC_BREAKS:
        return ThematicBreak()

    task_match = TASK_ITEM_PATTERN.match(line)
    if task_match:
        return ListItem(
            transform_inline(task_match.group("text") or "", search),
            checked=task_match.group("mark") != " ",
        )

    list_match = LIST_ITEM_PATTERN.match(line)
    if list_match:
        return ListItem(transform_inline(list_match.group("text"), search))

    if not line.strip():
        return Blank()

    return Paragraph(transform_inline(line, search))


def parse_markdown(
    text: str, search: str | None = None, placeholder: str = EMPTY_PLACEHOLDER
) -> Document:
    """Parse note text into a document of typed blocks.

    Lines are scanned once. Fences take priority, then raw markup, then
    blockquote and table runs; anything else is classified on its own.
    Pending buffers are flushed at end of input, so an unterminated fence
    becomes one trailing code block. The function never raises.

    Args:
        text: Raw note text.
        search: Optional case-insensitive query highlighted in inline content.
        placeholder: Text of the block returned for an empty note.

    Returns:
        Document: Blocks in source order. Empty text yields a single
            `Placeholder`.

    Examples:
        parse_markdown("# Title\\n\\nSome **bold** text.")
        parse_markdown("| A | B |\\n|---|---|\\n| 1 | 2 |", search="1")
    """
    if not text:
        return Document([Placeholder(placeholder)])

    blocks: list[Block] = []
    cursor = ParserCursor()

    for line_index, line in enumerate(split_lines(text)):
        cursor.line_index = line_index

        if _try_toggle_fence(cursor, blocks, line, search):
            continue

        # Code content is kept verbatim, blank lines included
        if cursor.state is AccumulatorState.IN_CODE:
            cursor.buffer.append(line)
            continue

        if _try_raw_markup(cursor, blocks, line, search):
            continue

        if _try_accumulate(cursor, blocks, line, search):
            continue

        _flush(cursor, blocks, search)
        blocks.append(classify_line(line, search))

    if cursor.state is not AccumulatorState.NONE:
        logger.debug(
            "Closing unterminated %s run at end of input (line %d, %d buffered lines)",
            cursor.state.name,
            cursor.line_index,
            len(cursor.buffer),
        )
    _flush(cursor, blocks, search)
    return Document(blocks)
