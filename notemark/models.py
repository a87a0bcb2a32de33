"""Data models for notemark.

Inline fragments and blocks are frozen dataclasses. Sequence fields accept
lists for convenience and are stored as tuples, so two documents built from
the same input compare equal field by field.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto


def _freeze(instance: object, *names: str) -> None:
    for name in names:
        value = getattr(instance, name)
        if not isinstance(value, tuple):
            object.__setattr__(instance, name, tuple(value))


# Inline fragments


@dataclass(frozen=True)
class Text:
    """Plain literal text."""

    text: str


@dataclass(frozen=True)
class Strong:
    """Bold run; children hold literal inner text."""

    children: tuple = ()

    def __post_init__(self):
        _freeze(self, "children")


@dataclass(frozen=True)
class Emphasis:
    """Italic run; children hold literal inner text."""

    children: tuple = ()

    def __post_init__(self):
        _freeze(self, "children")


@dataclass(frozen=True)
class Code:
    """Inline code span, verbatim."""

    text: str


@dataclass(frozen=True)
class Link:
    """Hyperlink with a literal label."""

    label: tuple
    target: str

    def __post_init__(self):
        _freeze(self, "label")


@dataclass(frozen=True)
class Image:
    """Inline image reference."""

    alt: str
    src: str


@dataclass(frozen=True)
class Highlighted:
    """Search match inside plain text."""

    text: str


@dataclass(frozen=True)
class RawHtml:
    """Inline markup passed through unescaped and unsanitized."""

    html: str


Inline = Text | Strong | Emphasis | Code | Link | Image | Highlighted | RawHtml


# Blocks


@dataclass(frozen=True)
class Heading:
    """ATX heading; `level` is in the range 1..6."""

    level: int
    inline: tuple = ()

    def __post_init__(self):
        _freeze(self, "inline")


@dataclass(frozen=True)
class Paragraph:
    inline: tuple = ()

    def __post_init__(self):
        _freeze(self, "inline")


@dataclass(frozen=True)
class ListItem:
    """Bullet item. `checked` is None for plain bullets, a bool for tasks."""

    inline: tuple = ()
    checked: bool | None = None
    ordered: bool = False

    def __post_init__(self):
        _freeze(self, "inline")


@dataclass(frozen=True)
class CodeBlock:
    """Fenced code, kept byte-identical to the source lines."""

    text: str
    language: str | None = None


@dataclass(frozen=True)
class Table:
    """Pipe table. Each cell is a tuple of inline fragments."""

    header: tuple = ()
    rows: tuple = ()

    def __post_init__(self):
        object.__setattr__(self, "header", tuple(tuple(cell) for cell in self.header))
        object.__setattr__(
            self, "rows", tuple(tuple(tuple(cell) for cell in row) for row in self.rows)
        )


@dataclass(frozen=True)
class Blockquote:
    """Quoted run; each paragraph is a tuple of inline fragments."""

    paragraphs: tuple = ()

    def __post_init__(self):
        object.__setattr__(
            self, "paragraphs", tuple(tuple(paragraph) for paragraph in self.paragraphs)
        )


@dataclass(frozen=True)
class RawMarkup:
    """Block-level markup passed through unescaped and unsanitized."""

    raw: str


@dataclass(frozen=True)
class ThematicBreak:
    pass


@dataclass(frozen=True)
class Blank:
    pass


@dataclass(frozen=True)
class Placeholder:
    """Stand-in block emitted for an empty buffer."""

    text: str


Block = (
    Heading
    | Paragraph
    | ListItem
    | CodeBlock
    | Table
    | Blockquote
    | RawMarkup
    | ThematicBreak
    | Blank
    | Placeholder
)


@dataclass(frozen=True)
class Document:
    """Ordered blocks produced by one parse call.

    Attributes:
        blocks: Blocks in source line order.
    """

    blocks: tuple = ()

    def __post_init__(self):
        _freeze(self, "blocks")

    def __iter__(self):
        return iter(self.blocks)

    def __len__(self) -> int:
        return len(self.blocks)


# Parser and editor state


class AccumulatorState(Enum):
    """Multi-line construct currently being buffered by the segmenter.

    Attributes:
        NONE: No buffer is active; lines are classified one at a time.
        IN_CODE: Inside a fenced code block.
        IN_TABLE: Collecting pipe-table rows.
        IN_BLOCKQUOTE: Collecting `>` lines.
        IN_RAW_MARKUP: Collecting a block-level markup run.
    """

    NONE = auto()
    IN_CODE = auto()
    IN_TABLE = auto()
    IN_BLOCKQUOTE = auto()
    IN_RAW_MARKUP = auto()


@dataclass
class ParserCursor:
    """Transient segmenter state while walking the lines of a note.

    Attributes:
        line_index: Zero-based index of the line being scanned.
        state: Active accumulator; exactly one at a time.
        buffer: Lines collected by the active accumulator.
        language: Language tag of the open code fence, if any.
        raw_tag: Lower-cased tag name that opened a raw-markup run.
    """

    line_index: int = 0
    state: AccumulatorState = AccumulatorState.NONE
    buffer: list[str] = field(default_factory=list)
    language: str | None = None
    raw_tag: str | None = None


class EditorMode(Enum):
    """Editor surfaces a note can be shown in."""

    EDIT = auto()
    PREVIEW = auto()


class Status(Enum):
    """Outcome reported by a storage or clipboard collaborator."""

    ACK = auto()
    FAIL = auto()


def plain_text(fragments) -> str:
    """Concatenate the literal text of inline fragments, ignoring styling.

    Args:
        fragments: Iterable of inline fragments.

    Returns:
        str: Visible text, with image alt text standing in for images.

    Examples:
        plain_text([Text("a "), Strong([Text("b")])])  # "a b"
    """
    parts = []
    for fragment in fragments:
        if isinstance(fragment, (Strong, Emphasis)):
            parts.append(plain_text(fragment.children))
        elif isinstance(fragment, Link):
            parts.append(plain_text(fragment.label))
        elif isinstance(fragment, Image):
            parts.append(fragment.alt)
        elif isinstance(fragment, RawHtml):
            parts.append(fragment.html)
        else:
            parts.append(fragment.text)
    return "".join(parts)
