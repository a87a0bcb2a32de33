"""Clipboard collaborators."""

from __future__ import annotations

import logging
import subprocess
from typing import Protocol

from .exceptions import ClipboardError
from .models import Status

logger = logging.getLogger(__name__)


class Clipboard(Protocol):
    """Anything that accepts a text write and reports `Status`."""

    def write(self, text: str) -> Status: ...


class MemoryClipboard:
    """Clipboard that keeps the last written text in memory.

    Args:
        fail: When True every write is rejected, for exercising failure paths.
    """

    def __init__(self, fail: bool = False):
        self.fail = fail
        self.content: str | None = None
        self.writes = 0

    def write(self, text: str) -> Status:
        if self.fail:
            logger.warning("Clipboard write rejected (%d characters)", len(text))
            return Status.FAIL
        self.content = text
        self.writes += 1
        return Status.ACK


class CommandClipboard:
    """Clipboard that pipes text into an external command.

    Args:
        command: Argument vector of the copy tool, e.g. ``["wl-copy"]`` or
            ``["xclip", "-selection", "clipboard"]``.
        timeout: Seconds to wait for the command to finish.

    Examples:
        CommandClipboard(["pbcopy"]).write("hello")
    """

    def __init__(self, command: list[str], timeout: float = 5.0):
        if not command:
            raise ClipboardError("Clipboard command must not be empty")
        self.command = list(command)
        self.timeout = timeout

    def write(self, text: str) -> Status:
        try:
            subprocess.run(
                self.command,
                input=text,
                text=True,
                encoding="UTF-8",
                check=True,
                capture_output=True,
                timeout=self.timeout,
            )
        except (OSError, subprocess.SubprocessError) as error:
            logger.warning("Clipboard command %s failed: %s", self.command[0], error)
            return Status.FAIL
        return Status.ACK
