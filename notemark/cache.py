"""Bounded cache of parsed documents."""

from __future__ import annotations

import logging
from collections import OrderedDict

from .constants import DEFAULT_CONFIG, EMPTY_PLACEHOLDER
from .models import Document
from .parser import parse_markdown

logger = logging.getLogger(__name__)


class RenderCache:
    """Least-recently-used cache of `parse_markdown` results.

    Entries are keyed by the exact ``(text, search)`` pair; a lookup never
    returns a document parsed from different text or a different query.

    Args:
        maxsize: Maximum number of documents kept.
        placeholder: Text of the block used for empty notes.

    Examples:
        cache = RenderCache(maxsize=8)
        cache.parse("# Title", "title")
    """

    def __init__(
        self, maxsize: int = DEFAULT_CONFIG.cache_size, placeholder: str = EMPTY_PLACEHOLDER
    ):
        if maxsize <= 0:
            raise ValueError("`maxsize` must be a positive integer")
        self.maxsize = maxsize
        self.placeholder = placeholder
        self.hits = 0
        self.misses = 0
        self._entries: OrderedDict[tuple[str, str], Document] = OrderedDict()

    def parse(self, text: str, search: str | None = None) -> Document:
        key = (text, search or "")
        document = self._entries.get(key)
        if document is not None:
            self.hits += 1
            self._entries.move_to_end(key)
            logger.debug("Render cache hit (%d characters)", len(text))
            return document

        self.misses += 1
        document = parse_markdown(text, search or None, placeholder=self.placeholder)
        self._entries[key] = document
        if len(self._entries) > self.maxsize:
            self._entries.popitem(last=False)
        return document

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
