"""Block presenters for buffered line runs.

The segmenter hands each finished run of table, blockquote, or code lines to
one of these builders.
"""

from __future__ import annotations

import time
from collections.abc import Callable

from .clipboard import Clipboard
from .constants import DEFAULT_CONFIG, TABLE_CELL_SEPARATOR
from .inline import transform_inline
from .models import Block, Blockquote, CodeBlock, Paragraph, Status, Table


def split_table_cells(line: str) -> list[str]:
    r"""Split a pipe-table row into trimmed cell texts.

    Outer pipes are removed and escaped pipes (``\|``) do not separate cells.

    Args:
        line: Table row, with or without surrounding whitespace.

    Returns:
        list[str]: Cell texts in column order.

    Examples:
        split_table_cells("| A | B |")  # ["A", "B"]
        split_table_cells(r"| a \| b | c |")  # [r"a \| b", "c"]
    """
    inner = line.strip()
    if inner.startswith("|"):
        inner = inner[1:]
    if inner.endswith("|") and not inner.endswith("\\|"):
        inner = inner[:-1]
    return [cell.strip() for cell in TABLE_CELL_SEPARATOR.split(inner)]


def build_table(lines: list[str], search: str | None = None) -> list[Block]:
    """Build a table from buffered rows, degrading short runs to paragraphs.

    Row 0 is the header, row 1 the delimiter row (discarded), and the rest are
    body rows. Column counts are not reconciled.

    Args:
        lines: Buffered table lines.
        search: Optional query highlighted inside cell text.

    Returns:
        list[Block]: One `Table`, or one `Paragraph` per line when fewer than
            two lines were buffered.
    """
    if len(lines) < 2:
        return [Paragraph(transform_inline(line, search)) for line in lines]

    header = [transform_inline(cell, search) for cell in split_table_cells(lines[0])]
    rows = [
        [transform_inline(cell, search) for cell in split_table_cells(line)] for line in lines[2:]
    ]
    return [Table(header, rows)]


def strip_quote_marker(line: str) -> str:
    """Remove leading whitespace, one `>`, and one following space."""
    content = line.lstrip()
    if content.startswith(">"):
        content = content[1:]
    if content.startswith(" "):
        content = content[1:]
    return content


def build_blockquote(lines: list[str], search: str | None = None) -> list[Block]:
    """Group quoted lines into paragraphs.

    Consecutive non-blank lines are joined with single spaces; a line that is
    blank after its marker starts a new paragraph.
    """
    groups: list[list[str]] = []
    current: list[str] = []
    for line in lines:
        content = strip_quote_marker(line).strip()
        if not content:
            if current:
                groups.append(current)
                current = []
            continue
        current.append(content)
    if current:
        groups.append(current)

    return [Blockquote([transform_inline(" ".join(group), search) for group in groups])]


def build_code_block(lines: list[str], language: str | None = None) -> list[Block]:
    # Code content never goes through inline transformation.
    return [CodeBlock("\n".join(lines), language or None)]


class CodeCopyAction:
    """Copy action attached to a rendered code block.

    A successful copy writes the exact block text to the clipboard and keeps
    the action confirmed for `confirm_seconds`, after which it reverts on its
    own. Copying again restarts the window.

    Args:
        block: Code block whose text is copied.
        clipboard: Clipboard collaborator receiving the text.
        confirm_seconds: Length of the confirmation window.
        clock: Monotonic time source, injectable for tests.

    Examples:
        action = CodeCopyAction(block, MemoryClipboard())
        action.copy()  # Status.ACK
        action.confirmed  # True for the next two seconds
    """

    def __init__(
        self,
        block: CodeBlock,
        clipboard: Clipboard,
        confirm_seconds: float = DEFAULT_CONFIG.copy_confirm_seconds,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.block = block
        self.clipboard = clipboard
        self.confirm_seconds = confirm_seconds
        self.clock = clock
        self._confirmed_until: float | None = None

    def copy(self) -> Status:
        status = self.clipboard.write(self.block.text)
        if status is Status.ACK:
            self._confirmed_until = self.clock() + self.confirm_seconds
        else:
            self._confirmed_until = None
        return status

    @property
    def confirmed(self) -> bool:
        if self._confirmed_until is None:
            return False
        if self.clock() >= self._confirmed_until:
            self._confirmed_until = None
            return False
        return True
