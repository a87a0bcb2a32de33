"""
notemark: Markdown rendering engine for a note-taking editor.

This package can be used both as a CLI tool and as a library.

CLI Usage:
    notemark render notes/todo.md --search milk

Library Usage:
    from notemark import parse_markdown, project_overlay, render_html

    document = parse_markdown("# Title\\n\\nSome **bold** text.", search="bold")
    html = render_html(document)
    overlay = project_overlay("Some **bold** text.", "bold")
"""

from .cache import RenderCache
from .clipboard import CommandClipboard, MemoryClipboard
from .config import ConfigError, NotemarkConfig
from .exceptions import ClipboardError, NotemarkError, StorageError
from .inline import transform_inline
from .models import (
    Blank,
    Blockquote,
    Code,
    CodeBlock,
    Document,
    EditorMode,
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
    Status,
    Strong,
    Table,
    Text,
    ThematicBreak,
    plain_text,
)
from .overlay import Overlay, OverlaySpan, ScrollSync, project_overlay, render_overlay_html
from .parser import parse_markdown
from .presenters import CodeCopyAction
from .render import note_stats, render_html, to_dict
from .session import EditorSession
from .storage import MemoryStorage, VaultStorage

__version__ = "0.1.0"

__all__ = [
    # Core functionality
    "parse_markdown",
    "transform_inline",
    "project_overlay",
    "render_overlay_html",
    "render_html",
    "to_dict",
    "note_stats",
    "plain_text",
    # Editor
    "EditorSession",
    "EditorMode",
    "RenderCache",
    "ScrollSync",
    "CodeCopyAction",
    # Collaborators
    "MemoryStorage",
    "VaultStorage",
    "MemoryClipboard",
    "CommandClipboard",
    "Status",
    # Data models
    "Document",
    "Heading",
    "Paragraph",
    "ListItem",
    "CodeBlock",
    "Table",
    "Blockquote",
    "RawMarkup",
    "ThematicBreak",
    "Blank",
    "Placeholder",
    "Text",
    "Strong",
    "Emphasis",
    "Code",
    "Link",
    "Image",
    "Highlighted",
    "RawHtml",
    "Overlay",
    "OverlaySpan",
    # Configuration
    "NotemarkConfig",
    # Exceptions
    "ConfigError",
    "NotemarkError",
    "StorageError",
    "ClipboardError",
    # Version
    "__version__",
]
