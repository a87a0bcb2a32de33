"""Filesystem helpers for notemark."""

from __future__ import annotations

import os
import stat
import tempfile
from pathlib import Path, PurePosixPath
from typing import TextIO

from .constants import MARKDOWN_EXTENSIONS


def contains_symlink(path: Path) -> bool:
    """Check whether a path or any parent directory is a symlink.

    Args:
        path: Path to inspect.

    Returns:
        bool: True when a symlink is encountered, otherwise False.

    Examples:
        contains_symlink(Path("/tmp/link/child"))
    """
    for candidate in (path, *path.parents):
        try:
            if candidate.is_symlink():
                return True
        except OSError:
            continue
    return False


def normalize_filepath(raw_path: str, base_dir: Path) -> Path:
    """Resolve and validate a Markdown filepath under a base directory.

    Args:
        raw_path: User-supplied path to a Markdown file (absolute or relative).
        base_dir: Working directory that constrains allowed paths.

    Returns:
        Path: Absolute path to the Markdown file.

    Raises:
        ValueError: If the path does not exist, is outside `base_dir`, uses an
            unsupported extension, or traverses a symlink.

    Examples:
        normalize_filepath("notes/todo.md", Path.cwd())
    """
    path = Path(raw_path).expanduser()

    if contains_symlink(path):
        raise ValueError(f"Symlinks are not supported for security reasons: {path}")

    try:
        resolved = path.resolve(strict=True)
    except FileNotFoundError as error:
        raise ValueError(f"{path} does not exist.") from error
    except OSError as error:
        raise ValueError(f"Error resolving {path}: {error}") from error

    if not resolved.is_file():
        raise ValueError(f"{resolved} is not a regular file.")

    try:
        resolved.relative_to(base_dir)
    except ValueError as error:
        raise ValueError(f"{resolved} is outside of the working directory {base_dir}.") from error

    if resolved.suffix.lower() not in MARKDOWN_EXTENSIONS:
        error_message = f"{resolved} is not a Markdown file.\n"
        error_message += f"Supported extensions are: {', '.join(MARKDOWN_EXTENSIONS)}"
        raise ValueError(error_message)

    return resolved


def resolve_note_path(vault_root: Path, note_id: str) -> Path:
    """Map a vault-relative note id to a path inside the vault.

    Args:
        vault_root: Root directory of the vault.
        note_id: POSIX-style relative path such as ``"journal/today.md"``.

    Returns:
        Path: Location of the note; the file need not exist yet.

    Raises:
        ValueError: If the id is empty or absolute, climbs out of the vault,
            names a non-Markdown file, or passes through a symlink.

    Examples:
        resolve_note_path(Path("vault"), "ideas.md")
    """
    if not note_id:
        raise ValueError("Note id must not be empty.")

    relative = PurePosixPath(note_id)
    if relative.is_absolute() or ".." in relative.parts:
        raise ValueError(f"Note id {note_id!r} must stay inside the vault.")

    if relative.suffix.lower() not in MARKDOWN_EXTENSIONS:
        raise ValueError(f"Note id {note_id!r} is not a Markdown file.")

    path = vault_root.joinpath(*relative.parts)
    if contains_symlink(path):
        raise ValueError(f"Symlinks are not supported for security reasons: {path}")
    return path


def collect_file_stat(filepath: Path) -> os.stat_result:
    """Return stat information for a file while disallowing symlinks.

    Args:
        filepath: Path to the file.

    Returns:
        os.stat_result: File metadata gathered without following symlinks.

    Raises:
        IOError: If the path is inaccessible, a symlink, or not a regular file.
    """
    try:
        stat_result = os.stat(filepath, follow_symlinks=False)
    except OSError as error:
        raise IOError(f"Error accessing {filepath}: {error}") from error

    if stat.S_ISLNK(stat_result.st_mode):
        raise IOError(f"Symlinks are not supported: {filepath}.")

    if not stat.S_ISREG(stat_result.st_mode):
        raise IOError(f"{filepath} is not a regular file.")

    return stat_result


def enforce_file_size(stat_result: os.stat_result, max_size: int, filepath: Path):
    """Guard against files that exceed the configured maximum size.

    Raises:
        IOError: If `stat_result.st_size` exceeds `max_size`.
    """
    if stat_result.st_size > max_size:
        raise IOError(f"{filepath} exceeds the maximum allowed size of {max_size} bytes.")


def safe_read(filepath: Path) -> TextIO:
    """Open a file for reading with consistent error handling.

    Newlines are not translated, so the text matches the file byte for byte.

    Args:
        filepath: Path to the file.

    Returns:
        TextIO: File handle opened for reading in UTF-8.

    Raises:
        IOError: If the path is missing, inaccessible, or not a file.

    Examples:
        with safe_read(Path("vault/Welcome.md")) as handle:
            content = handle.read()
    """
    try:
        return open(filepath, "r", encoding="UTF-8", newline="")
    except (
        FileNotFoundError,
        PermissionError,
        IsADirectoryError,
        NotADirectoryError,
    ) as error:
        raise IOError(f"Error accessing {filepath}: {error}") from error


def atomic_write(filepath: Path, text: str) -> None:
    """Replace a file's content through a synced temporary file.

    Existing permissions are carried over; new files get the process default.

    Args:
        filepath: Destination path. Parent directories are created as needed.
        text: Full new content.

    Raises:
        IOError: If the temporary file cannot be written or moved into place.

    Examples:
        atomic_write(Path("vault/ideas.md"), "# Ideas\\n")
    """
    permissions = None
    if filepath.exists():
        permissions = stat.S_IMODE(collect_file_stat(filepath).st_mode)

    temp_path: Path | None = None
    try:
        filepath.parent.mkdir(parents=True, exist_ok=True)
        with tempfile.NamedTemporaryFile(
            mode="w", encoding="UTF-8", newline="", delete=False, dir=filepath.parent
        ) as tmp_file:
            temp_path = Path(tmp_file.name)
            tmp_file.write(text)
            tmp_file.flush()
            os.fsync(tmp_file.fileno())
            if permissions is not None:
                os.chmod(tmp_file.name, permissions)

        # Replace the original file with the temporary file (atomic operation)
        os.replace(temp_path, filepath)
    except OSError as error:
        raise IOError(f"Error writing {filepath}: {error}") from error
    finally:
        if temp_path is not None:
            try:
                temp_path.unlink(missing_ok=True)
            except OSError:
                pass
