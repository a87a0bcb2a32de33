"""Storage collaborators for note text."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Protocol

from .constants import DEFAULT_CONFIG, MARKDOWN_EXTENSIONS, WELCOME_NOTE, WELCOME_NOTE_ID
from .exceptions import StorageError
from .filesystem import (
    atomic_write,
    collect_file_stat,
    enforce_file_size,
    resolve_note_path,
    safe_read,
)
from .models import Status

logger = logging.getLogger(__name__)


class Storage(Protocol):
    """Synchronous note store.

    `get` raises `StorageError` when a note cannot be read; `put` reports
    failures through its return value instead of raising.
    """

    def get(self, note_id: str) -> str: ...

    def put(self, note_id: str, text: str) -> Status: ...


class MemoryStorage:
    """Dictionary-backed store, mainly for tests and scratch sessions.

    Args:
        notes: Initial note contents keyed by id.
        read_only: When True every `put` and `delete` fails.
    """

    def __init__(self, notes: dict[str, str] | None = None, read_only: bool = False):
        self.notes = dict(notes or {})
        self.read_only = read_only

    def get(self, note_id: str) -> str:
        try:
            return self.notes[note_id]
        except KeyError as error:
            raise StorageError(note_id, "no such note") from error

    def put(self, note_id: str, text: str) -> Status:
        if self.read_only:
            logger.warning("Refusing to write %s: storage is read-only", note_id)
            return Status.FAIL
        self.notes[note_id] = text
        return Status.ACK

    def delete(self, note_id: str) -> Status:
        if self.read_only:
            logger.warning("Refusing to delete %s: storage is read-only", note_id)
            return Status.FAIL
        self.notes.pop(note_id, None)
        return Status.ACK


class VaultStorage:
    """Store notes as Markdown files under a vault directory.

    Note ids are POSIX-style paths relative to the vault root. Reads are
    limited to `max_file_size` bytes and writes replace files atomically.

    Args:
        root: Vault directory.
        max_file_size: Largest note, in bytes, that `get` will read.

    Examples:
        vault = VaultStorage(Path("vault"))
        vault.ensure_vault()
        vault.put("ideas.md", "# Ideas\\n")
    """

    def __init__(self, root: Path, max_file_size: int = DEFAULT_CONFIG.max_file_size):
        self.root = Path(root).expanduser()
        self.max_file_size = max_file_size

    def ensure_vault(self) -> None:
        """Create the vault directory and seed a welcome note when it is empty.

        Raises:
            StorageError: If the directory or welcome note cannot be created.
        """
        try:
            self.root.mkdir(parents=True, exist_ok=True)
            if any(self.root.iterdir()):
                return
            logger.info("Creating welcome note in empty vault %s", self.root)
            atomic_write(self.root / WELCOME_NOTE_ID, WELCOME_NOTE)
        except OSError as error:
            raise StorageError(WELCOME_NOTE_ID, str(error)) from error

    def list_notes(self) -> list[str]:
        """Return ids of every Markdown note in the vault, sorted.

        Symlinked files and directories are skipped.
        """
        if not self.root.is_dir():
            return []

        note_ids = []
        for path in self.root.rglob("*"):
            if path.suffix.lower() not in MARKDOWN_EXTENSIONS:
                continue
            relative = path.relative_to(self.root)
            if any((self.root / parent).is_symlink() for parent in relative.parents):
                continue
            if path.is_symlink() or not path.is_file():
                continue
            note_ids.append(relative.as_posix())
        return sorted(note_ids)

    def get(self, note_id: str) -> str:
        try:
            path = resolve_note_path(self.root, note_id)
            stat_result = collect_file_stat(path)
            enforce_file_size(stat_result, self.max_file_size, path)
            with safe_read(path) as handle:
                return handle.read()
        except UnicodeDecodeError as error:
            raise StorageError(note_id, f"invalid UTF-8 sequence: {error}") from error
        except (ValueError, OSError) as error:
            raise StorageError(note_id, str(error)) from error

    def put(self, note_id: str, text: str) -> Status:
        try:
            path = resolve_note_path(self.root, note_id)
            atomic_write(path, text)
        except (ValueError, OSError) as error:
            logger.warning("Failed to write note %s: %s", note_id, error)
            return Status.FAIL
        return Status.ACK

    def delete(self, note_id: str) -> Status:
        """Remove a note file. Deleting a note that does not exist succeeds."""
        try:
            path = resolve_note_path(self.root, note_id)
            if path.exists():
                collect_file_stat(path)
            path.unlink(missing_ok=True)
        except (ValueError, OSError) as error:
            logger.warning("Failed to delete note %s: %s", note_id, error)
            return Status.FAIL
        logger.info("Deleted note %s", note_id)
        return Status.ACK
