"""Editor session: mode switching, search navigation, and persistence.

The session holds the state the parser must not: the current note, the active
mode, and the search term. Rendering is delegated to a `RenderCache`, so every
call sees a document parsed from exactly the current text and query.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass

from .cache import RenderCache
from .clipboard import Clipboard, MemoryClipboard
from .config import NotemarkConfig
from .exceptions import StorageError
from .models import (
    Blockquote,
    CodeBlock,
    Document,
    EditorMode,
    Heading,
    Highlighted,
    ListItem,
    Paragraph,
    Status,
    Table,
)
from .overlay import MatchLocation, Overlay, ScrollSync, find_first_match, project_overlay
from .presenters import CodeCopyAction
from .storage import Storage

logger = logging.getLogger(__name__)

Scheduler = Callable[[float, Callable[[], None]], None]


def run_immediately(delay: float, callback: Callable[[], None]) -> None:
    """Scheduler that ignores the delay; UI hosts pass their own timer."""
    callback()


@dataclass(frozen=True)
class PreviewTarget:
    """First rendered block containing a search match."""

    block_index: int


def _has_highlight(fragments) -> bool:
    return any(isinstance(fragment, Highlighted) for fragment in fragments)


def find_first_highlighted_block(document: Document) -> PreviewTarget | None:
    """Return the index of the first block with a `Highlighted` fragment."""
    for index, block in enumerate(document.blocks):
        if isinstance(block, (Heading, Paragraph, ListItem)):
            found = _has_highlight(block.inline)
        elif isinstance(block, Table):
            found = any(_has_highlight(cell) for cell in block.header) or any(
                _has_highlight(cell) for row in block.rows for cell in row
            )
        elif isinstance(block, Blockquote):
            found = any(_has_highlight(paragraph) for paragraph in block.paragraphs)
        else:
            found = False
        if found:
            return PreviewTarget(index)
    return None


class EditorSession:
    """State machine behind the note editor.

    Modes only change through `set_mode` or `toggle_mode`; editing content
    never switches them. Entering edit mode calls `focus`. A non-empty search
    change schedules navigation to the first match in the active view after
    the configured settle delay; only the latest search is navigated.

    Args:
        storage: Collaborator holding note text.
        config: Settings for the settle delay, cache, and placeholder.
        scheduler: ``scheduler(delay, callback)`` runs `callback` later.
        scroll_into_view: Receives a `MatchLocation` in edit mode or a
            `PreviewTarget` in preview mode, to centre it on screen.
        focus: Called when the edit surface should take focus.
        clipboard: Target of code block copy actions.

    Examples:
        session = EditorSession(MemoryStorage({"a.md": "# A"}))
        session.load("a.md")
        session.set_search("a")
        session.render()
    """

    def __init__(
        self,
        storage: Storage,
        config: NotemarkConfig | None = None,
        scheduler: Scheduler = run_immediately,
        scroll_into_view: Callable[[object], None] | None = None,
        focus: Callable[[], None] | None = None,
        clipboard: Clipboard | None = None,
    ):
        self.config = config or NotemarkConfig()
        self.storage = storage
        self.scheduler = scheduler
        self.scroll_into_view = scroll_into_view
        self.focus = focus
        self.clipboard = clipboard or MemoryClipboard()
        self.cache = RenderCache(self.config.cache_size, self.config.empty_placeholder)
        self.scroll = ScrollSync()

        self.note_id: str | None = None
        self.text = ""
        self.search = ""
        self.mode = EditorMode.EDIT
        self.last_status: Status | None = None
        self.last_error: str | None = None
        self._search_generation = 0

    # Mode state machine

    def set_mode(self, mode: EditorMode) -> None:
        if mode is self.mode:
            return
        self.mode = mode
        if mode is EditorMode.EDIT and self.focus is not None:
            self.focus()

    def toggle_mode(self) -> EditorMode:
        self.set_mode(EditorMode.PREVIEW if self.mode is EditorMode.EDIT else EditorMode.EDIT)
        return self.mode

    # Content and rendering

    def update_content(self, text: str) -> None:
        self.text = text

    def render(self) -> Document:
        return self.cache.parse(self.text, self.search)

    def overlay(self) -> Overlay:
        return project_overlay(self.text, self.search)

    def on_editor_scroll(self, top: int, left: int = 0) -> None:
        self.scroll.on_scroll(top, left)

    def copy_action(self, block: CodeBlock) -> CodeCopyAction:
        return CodeCopyAction(block, self.clipboard, self.config.copy_confirm_seconds)

    # Search navigation

    def set_search(self, search: str) -> None:
        search = search or ""
        if search == self.search:
            return
        self.search = search
        self._search_generation += 1
        if not self.search:
            return
        generation = self._search_generation
        self.scheduler(
            self.config.search_settle_delay, lambda: self._navigate_to_match(generation)
        )

    def first_match(self) -> MatchLocation | PreviewTarget | None:
        """Locate the first match in the active view, or None."""
        if self.mode is EditorMode.EDIT:
            return find_first_match(self.text, self.search)
        return find_first_highlighted_block(self.render())

    def _navigate_to_match(self, generation: int) -> None:
        if generation != self._search_generation:
            return
        target = self.first_match()
        if target is None or self.scroll_into_view is None:
            return
        self.scroll_into_view(target)

    # Persistence

    def load(self, note_id: str) -> Status:
        """Load a note, keeping the current one when the read fails."""
        try:
            text = self.storage.get(note_id)
        except StorageError as error:
            logger.warning("%s", error)
            return self._record(Status.FAIL, str(error))
        self.note_id = note_id
        self.text = text
        return self._record(Status.ACK)

    def save(self) -> Status:
        """Write the current text back; the rendered document is unaffected."""
        if self.note_id is None:
            return self._record(Status.FAIL, "No note is open")
        status = self.storage.put(self.note_id, self.text)
        if status is Status.FAIL:
            return self._record(Status.FAIL, f"Could not save {self.note_id}")
        return self._record(Status.ACK)

    def _record(self, status: Status, error: str | None = None) -> Status:
        self.last_status = status
        self.last_error = error
        return status
