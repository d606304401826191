"""Scrollable, pre-wrapped view over an article's text."""

from . import config
from .text_layout import process_text_content


class ReaderSession:
    """
    Pagination state for one article opened in the reader.

    The wrapped lines are computed once per (text, width) pair and reused
    for every scroll step; only a width change triggers a re-wrap.
    """

    def __init__(self, source_text, width, viewport_height):
        self.source_text = source_text
        self.width = max(0, width)
        self.viewport_height = max(1, viewport_height)
        self.scroll_offset = 0
        self._cache_key = None
        self._processed_lines = []

    @property
    def processed_lines(self):
        key = (self.source_text, self.width)
        if key != self._cache_key:
            self._processed_lines = process_text_content(self.source_text, self.width)
            self._cache_key = key
        return self._processed_lines

    @property
    def total_lines(self):
        return len(self.processed_lines)

    @property
    def max_scroll(self):
        return max(0, self.total_lines - self.viewport_height)

    def _clamp(self, offset):
        return max(0, min(offset, self.max_scroll))

    def scroll_by(self, delta):
        self.scroll_offset = self._clamp(self.scroll_offset + delta)

    def scroll_lines(self, direction):
        """Scroll a few lines; direction is +1 (down) or -1 (up)."""
        self.scroll_by(direction * config.LINE_SCROLL_STEP)

    def scroll_pages(self, direction):
        """Scroll by a page step; direction is +1 (down) or -1 (up)."""
        self.scroll_by(direction * config.PAGE_SCROLL_STEP)

    def resize(self, width, viewport_height):
        self.width = max(0, width)
        self.viewport_height = max(1, viewport_height)
        self.scroll_offset = self._clamp(self.scroll_offset)

    def visible_lines(self):
        """
        Lines currently in view, padded with blank lines to the viewport height.

        Returns:
            list[str]: Exactly viewport_height lines
        """
        start = self.scroll_offset
        lines = self.processed_lines[start:start + self.viewport_height]
        blank = " " * self.width
        return lines + [blank] * (self.viewport_height - len(lines))

    def scroll_info(self):
        """Position marker like "[16-25/25]", empty when everything fits."""
        total = self.total_lines
        if total <= self.viewport_height:
            return ""
        start = self.scroll_offset + 1
        end = min(self.scroll_offset + self.viewport_height, total)
        return f"[{start}-{end}/{total}]"
