"""Screen state and keyboard routing for the curaq-tui client.

The Navigator owns everything the screens show: the article list, the
selection and whichever modal is open. It reacts to key names and to
result events from finished background work, and answers with a list of
Effects that the application carries out (network calls, clipboard,
browser, settings). It never does I/O itself.

Only one modal can be open at a time: ``Navigator.modal`` holds either
None (the article list has the keyboard) or exactly one modal object.
"""

import enum
import logging
from dataclasses import dataclass, field
from typing import NamedTuple
from urllib.parse import urlparse

from .reader_view import ReaderSession


class Mode(enum.Enum):
    LIST = "list"
    READER = "reader"
    THEME = "theme"
    ADD_ARTICLE = "add_article"


class Effect(NamedTuple):
    """Work requested from the application, e.g. Effect("mark_read", article_id)."""

    name: str
    payload: object = None


@dataclass
class ListState:
    articles: list = field(default_factory=list)
    selected_index: int = 0
    loading: bool = True
    error: str | None = None
    # Article with a mark-read or delete request in flight
    pending_article_id: str | None = None
    pending_action: str | None = None


@dataclass
class ReaderModal:
    url: str
    request_id: int
    loading: bool = True
    content: object = None
    session: ReaderSession | None = None


@dataclass
class ThemeModal:
    cursor: int = 0


@dataclass
class AddArticleModal:
    buffer: str = ""
    status: str = "input"  # input, submitting, success or error
    error: str | None = None


MODAL_MODES = {
    ReaderModal: Mode.READER,
    ThemeModal: Mode.THEME,
    AddArticleModal: Mode.ADD_ARTICLE,
}

DOWN_KEYS = ("j", "down")
UP_KEYS = ("k", "up")
REFRESH_KEYS = ("R", "ctrl_r")


def is_valid_url(text):
    """True for absolute http(s) URLs with a host."""
    try:
        parsed = urlparse(text)
    except ValueError:
        return False
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


class Navigator:
    def __init__(self, theme_names, current_theme, start_screen="unread", theme_picker_only=False):
        """
        Args:
            theme_names: Available theme names, in display order
            current_theme: Name of the active theme
            start_screen: "unread" or "read"; which articles the list shows
            theme_picker_only: Start in the theme picker and quit when it closes
        """
        self.theme_names = list(theme_names)
        self.current_theme = current_theme
        self.start_screen = start_screen
        self.theme_picker_only = theme_picker_only
        self.list = ListState()
        self.modal = None
        self.reader_width = 0
        self.reader_height = 1
        self._last_request_id = 0

        if theme_picker_only:
            self.list.loading = False
            self.modal = ThemeModal(cursor=self._theme_index())

        self._key_handlers = {
            ReaderModal: self._handle_reader_key,
            ThemeModal: self._handle_theme_key,
            AddArticleModal: self._handle_add_key,
        }
        self._event_handlers = {
            "articles_loaded": self._on_articles_loaded,
            "articles_failed": self._on_articles_failed,
            "reader_loaded": self._on_reader_loaded,
            "clipboard_read": self._on_clipboard_read,
            "mark_read_done": self._on_pending_done,
            "delete_done": self._on_pending_done,
            "article_added": self._on_article_added,
            "add_success_elapsed": self._on_add_success_elapsed,
        }

    @property
    def mode(self) -> Mode:
        if self.modal is None:
            return Mode.LIST
        return MODAL_MODES[type(self.modal)]

    def selected_article(self):
        articles = self.list.articles
        if 0 <= self.list.selected_index < len(articles):
            return articles[self.list.selected_index]
        return None

    def set_reader_geometry(self, width, height):
        """Record the reader's text area size and re-flow an open article."""
        self.reader_width = width
        self.reader_height = height
        if isinstance(self.modal, ReaderModal) and self.modal.session is not None:
            self.modal.session.resize(width, height)

    def start(self):
        """Effects to run when the application starts."""
        if self.theme_picker_only:
            return []
        return [Effect("load_articles")]

    # ---- keyboard ----

    def handle_key(self, key) -> list:
        """
        Route a key to the active screen.

        Args:
            key: Key name from input_handler ("enter", "escape", "down", ...)
                or a single printable character

        Returns:
            list[Effect]: Work for the application to carry out
        """
        if self.modal is None:
            return self._handle_list_key(key)
        return self._key_handlers[type(self.modal)](key)

    def _handle_list_key(self, key):
        if key == "q":
            return [Effect("quit")]
        if key in REFRESH_KEYS:
            return self._reload()
        if self.list.loading or self.list.error:
            return []

        article = self.selected_article()
        last_index = max(0, len(self.list.articles) - 1)

        if key in DOWN_KEYS:
            self.list.selected_index = min(self.list.selected_index + 1, last_index)
        elif key in UP_KEYS:
            self.list.selected_index = max(self.list.selected_index - 1, 0)
        elif key == "enter":
            if article and article.url:
                return self._open_reader(article.url)
        elif key == "a":
            self.modal = AddArticleModal()
            return [Effect("read_clipboard")]
        elif key == "T":
            self.modal = ThemeModal(cursor=self._theme_index())
        elif key == "m":
            return self._start_pending(article, "mark_read")
        elif key == "d":
            return self._start_pending(article, "delete_article")
        elif key == "o":
            if article and article.url:
                return [Effect("open_url", article.url)]
        return []

    def _handle_reader_key(self, key):
        modal = self.modal
        if key in ("escape", "q"):
            self.modal = None
            return []
        if key == "o":
            return [Effect("open_url", modal.url)]

        session = modal.session
        if session is None:
            return []
        if key in DOWN_KEYS:
            session.scroll_lines(1)
        elif key in UP_KEYS:
            session.scroll_lines(-1)
        elif key in ("space", "page_down"):
            session.scroll_pages(1)
        elif key == "page_up":
            session.scroll_pages(-1)
        return []

    def _handle_theme_key(self, key):
        modal = self.modal
        if key in ("q", "escape"):
            return self._close_theme_modal()
        if key in DOWN_KEYS:
            modal.cursor = min(modal.cursor + 1, len(self.theme_names) - 1)
        elif key in UP_KEYS:
            modal.cursor = max(modal.cursor - 1, 0)
        elif key == "enter":
            self.current_theme = self.theme_names[modal.cursor]
            return [Effect("save_theme", self.current_theme)] + self._close_theme_modal()
        return []

    def _handle_add_key(self, key):
        modal = self.modal
        if key == "escape":
            self.modal = None
            return []
        if modal.status in ("submitting", "success"):
            return []

        if key == "enter":
            return self._submit_article()
        if key == "backspace":
            modal.buffer = modal.buffer[:-1]
        elif key == "space":
            modal.buffer += " "
        elif len(key) == 1 and key.isprintable():
            modal.buffer += key
        return []

    # ---- transitions ----

    def _theme_index(self):
        if self.current_theme in self.theme_names:
            return self.theme_names.index(self.current_theme)
        return 0

    def _close_theme_modal(self):
        self.modal = None
        if self.theme_picker_only:
            return [Effect("quit")]
        return []

    def _reload(self):
        if self.list.loading:
            return []
        self.list.loading = True
        self.list.error = None
        return [Effect("load_articles")]

    def _open_reader(self, url):
        self._last_request_id += 1
        self.modal = ReaderModal(url=url, request_id=self._last_request_id)
        return [Effect("load_reader", (url, self._last_request_id))]

    def _start_pending(self, article, action):
        if not article or not article.id or self.list.pending_article_id is not None:
            return []
        self.list.pending_article_id = article.id
        self.list.pending_action = action
        return [Effect(action, article.id)]

    def _submit_article(self):
        modal = self.modal
        url = modal.buffer.strip()
        if not url:
            modal.status, modal.error = "error", "URL is required"
            return []
        if not is_valid_url(url):
            modal.status, modal.error = "error", "Invalid URL format"
            return []
        modal.status, modal.error = "submitting", None
        return [Effect("submit_article", url)]

    # ---- results ----

    def handle_event(self, name, data=None) -> list:
        """
        Apply the result of background work.

        Args:
            name: Event name, e.g. "reader_loaded"
            data: Event payload

        Returns:
            list[Effect]: Follow-up work for the application
        """
        handler = self._event_handlers.get(name)
        if handler is None:
            logging.warning(f"Ignoring unknown event: {name}")
            return []
        return handler(data) or []

    def _filter_start_screen(self, articles):
        if self.start_screen == "read":
            return [a for a in articles if a.is_read]
        return [a for a in articles if not a.is_read]

    def _clamp_selection(self):
        last_index = max(0, len(self.list.articles) - 1)
        self.list.selected_index = max(0, min(self.list.selected_index, last_index))

    def _on_articles_loaded(self, articles):
        self.list.articles = self._filter_start_screen(articles)
        self.list.loading = False
        self.list.error = None
        self._clamp_selection()

    def _on_articles_failed(self, message):
        self.list.loading = False
        self.list.error = message or "Failed to load"

    def _on_reader_loaded(self, data):
        request_id, content = data
        modal = self.modal
        if not isinstance(modal, ReaderModal) or modal.request_id != request_id:
            # The reader was closed or another article opened meanwhile
            return
        modal.loading = False
        modal.content = content
        if content is not None:
            modal.session = ReaderSession(content.text_content, self.reader_width, self.reader_height)

    def _on_clipboard_read(self, text):
        modal = self.modal
        if not isinstance(modal, AddArticleModal) or modal.status != "input" or modal.buffer:
            return
        if text and is_valid_url(text):
            modal.buffer = text

    def _on_pending_done(self, data):
        article_id, ok = data
        if self.list.pending_article_id == article_id:
            self.list.pending_article_id = None
            self.list.pending_action = None
        if ok:
            self.list.articles = [a for a in self.list.articles if a.id != article_id]
            self._clamp_selection()

    def _on_article_added(self, data):
        ok, error = data
        modal = self.modal
        if not isinstance(modal, AddArticleModal):
            return
        if ok:
            modal.status, modal.error = "success", None
            return [Effect("close_add_after_delay")]
        modal.status, modal.error = "error", error or "Failed to add article"

    def _on_add_success_elapsed(self, _data):
        modal = self.modal
        if not isinstance(modal, AddArticleModal) or modal.status != "success":
            return
        self.modal = None
        self.list.loading = True
        self.list.error = None
        return [Effect("load_articles")]
