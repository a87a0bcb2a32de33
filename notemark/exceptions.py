"""Package-specific exception types."""

from __future__ import annotations


class NotemarkError(Exception):
    """Base class for errors raised by notemark collaborators.

    The rendering core never raises; only storage, clipboard, and
    configuration layers report failures.
    """


class StorageError(NotemarkError):
    """Raised when a note cannot be read from or written to storage.

    Args:
        note_id: Identifier of the note being accessed.
        reason: Human-readable description of the failure.
    """

    def __init__(self, note_id: str, reason: str):
        self.note_id = note_id
        self.reason = reason
        super().__init__(self._build_message())

    def _build_message(self) -> str:
        return f"Storage failure for note {self.note_id!r}: {self.reason}"


class ClipboardError(NotemarkError):
    """Raised when a clipboard backend rejects a write."""
