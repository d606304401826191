import asyncio
import logging
import os
import signal
import sys
from rich.console import Console
from . import config, ui
from .api_client import ApiError
from .content_reader import fetch_readable_content
from .desktop import open_in_browser, read_clipboard
from .input_handler import KeyReader
from .navigation import Navigator
from .themes import get_theme, theme_names


class CuraQApp:
    def __init__(self, client, settings_store, settings, theme_picker_only=False):
        """
        Args:
            client: CuraQClient used for every API call
            settings_store: SettingsStore that persists theme changes
            settings: Settings loaded at startup
            theme_picker_only: Only show the theme picker, then exit
        """
        self.client = client
        self.settings_store = settings_store
        self.settings = settings
        self.theme = get_theme(settings.theme)
        self.navigator = Navigator(theme_names(), self.theme.name, settings.start_screen, theme_picker_only)
        self._sync_reader_geometry()

        self.events = asyncio.Queue()
        self.running = True
        self.loop = None
        self.ui_update_task = None
        self.background_tasks = set()

        self.state_version = 0
        self.last_rendered_state = None
        self.last_terminal_size = None
        self.render_lock = asyncio.Lock()

        self._effect_handlers = {
            "load_articles": self._effect_load_articles,
            "load_reader": self._effect_load_reader,
            "mark_read": self._effect_mark_read,
            "delete_article": self._effect_delete_article,
            "read_clipboard": self._effect_read_clipboard,
            "submit_article": self._effect_submit_article,
            "close_add_after_delay": self._effect_close_add_after_delay,
            "open_url": self._effect_open_url,
            "save_theme": self._effect_save_theme,
            "quit": self._effect_quit,
        }

    def post_event(self, name, data=None):
        self.events.put_nowait((name, data))

    def _post_event_threadsafe(self, name, data=None):
        if self.loop and self.loop.is_running():
            self.loop.call_soon_threadsafe(self.post_event, name, data)

    def _on_key(self, key):
        self.post_event("key", key)

    def _on_eof(self):
        # stdin closed; nothing more can be typed
        self.loop.remove_reader(sys.stdin.fileno())
        self.post_event("quit")

    def _handle_resize(self, signum, frame):
        self._post_event_threadsafe("resize")

    def _handle_exit_signal(self, signum, frame):
        self.running = False
        self._post_event_threadsafe("quit")

    def _sync_reader_geometry(self):
        width, height = ui.get_terminal_size()
        self.navigator.set_reader_geometry(*ui.reader_geometry(width, height))

    # ---- event dispatch ----

    def dispatch(self, name, data=None):
        """
        Apply one queued event to the navigator and run the resulting effects.

        Args:
            name: "key", "resize", "quit" or a navigator result event name
            data: Key name or event payload
        """
        if name == "quit":
            self.running = False
            return

        if name == "key":
            effects = self.navigator.handle_key(data)
        elif name == "resize":
            self._sync_reader_geometry()
            effects = []
        else:
            effects = self.navigator.handle_event(name, data)

        self.state_version += 1
        self.run_effects(effects)

    def run_effects(self, effects):
        for effect in effects:
            handler = self._effect_handlers.get(effect.name)
            if handler is None:
                logging.warning(f"No handler for effect: {effect.name}")
                continue
            handler(effect.payload)

    def _spawn(self, coro, failure_event=None):
        """Run coro in the background; failure_event is posted if it raises unexpectedly."""
        task = asyncio.create_task(self._guarded(coro, failure_event))
        self.background_tasks.add(task)
        task.add_done_callback(self.background_tasks.discard)
        return task

    async def _guarded(self, coro, failure_event):
        try:
            await coro
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logging.error(f"Background task failed: {e}", exc_info=True)
            if failure_event:
                self.post_event(*failure_event)

    # ---- effects ----

    def _effect_load_articles(self, _payload):
        self._spawn(self._load_articles(), ("articles_failed", "Failed to load articles"))

    def _effect_load_reader(self, payload):
        url, request_id = payload
        self._spawn(self._load_reader(url, request_id), ("reader_loaded", (request_id, None)))

    def _effect_mark_read(self, article_id):
        self._spawn(
            self._pending_call(self.client.mark_as_read, article_id, "mark_read_done"),
            ("mark_read_done", (article_id, False)),
        )

    def _effect_delete_article(self, article_id):
        self._spawn(
            self._pending_call(self.client.delete_article, article_id, "delete_done"),
            ("delete_done", (article_id, False)),
        )

    def _effect_read_clipboard(self, _payload):
        self._spawn(self._read_clipboard(), ("clipboard_read", ""))

    def _effect_submit_article(self, url):
        self._spawn(self._submit_article(url), ("article_added", (False, "Failed to add article")))

    def _effect_close_add_after_delay(self, _payload):
        self._spawn(self._close_add_after_delay())

    def _effect_open_url(self, url):
        self._spawn(open_in_browser(url))

    def _effect_save_theme(self, name):
        self.theme = get_theme(name)
        try:
            self.settings = self.settings_store.update(theme=name)
        except OSError as e:
            logging.error(f"Could not save theme '{name}': {e}")

    def _effect_quit(self, _payload):
        self.running = False

    async def _load_articles(self):
        try:
            result = await self.client.get_articles()
        except ApiError as e:
            logging.error(f"Failed to load articles: {e}")
            self.post_event("articles_failed", str(e))
            return
        self.post_event("articles_loaded", result.articles)

    async def _load_reader(self, url, request_id):
        content = await fetch_readable_content(url)
        self.post_event("reader_loaded", (request_id, content))

    async def _pending_call(self, call, article_id, done_event):
        try:
            await call(article_id)
            ok = True
        except ApiError as e:
            logging.warning(f"Request for article {article_id} failed: {e}")
            ok = False
        self.post_event(done_event, (article_id, ok))

    async def _read_clipboard(self):
        self.post_event("clipboard_read", await read_clipboard())

    async def _submit_article(self, url):
        try:
            await self.client.create_article(url)
        except ApiError as e:
            logging.error(f"Failed to add article {url}: {e}")
            self.post_event("article_added", (False, str(e)))
            return
        self.post_event("article_added", (True, None))

    async def _close_add_after_delay(self):
        await asyncio.sleep(config.ADD_SUCCESS_DELAY)
        self.post_event("add_success_elapsed")

    # ---- main loop ----

    async def _ui_update_loop(self):
        while self.running:
            try:
                await ui.display_ui(self)
                await asyncio.sleep(config.UI_UPDATE_INTERVAL)
            except asyncio.CancelledError:
                break
            except Exception as e:
                logging.error(f"Error in UI update loop: {e}", exc_info=True)
                await asyncio.sleep(config.UI_UPDATE_INTERVAL)

    async def run(self):
        self.loop = asyncio.get_running_loop()
        fd = sys.stdin.fileno()
        key_reader = KeyReader(fd, self._on_key, self._on_eof)
        self.loop.add_reader(fd, key_reader.read_available)

        signal.signal(signal.SIGWINCH, self._handle_resize)
        signal.signal(signal.SIGINT, self._handle_exit_signal)
        signal.signal(signal.SIGTERM, self._handle_exit_signal)

        self.ui_update_task = asyncio.create_task(self._ui_update_loop())
        self.run_effects(self.navigator.start())

        try:
            while self.running:
                name, data = await self.events.get()
                self.dispatch(name, data)
        finally:
            self.loop.remove_reader(fd)
            await self._shutdown()

    async def _shutdown(self):
        self.running = False
        signal.signal(signal.SIGWINCH, signal.SIG_DFL)
        signal.signal(signal.SIGINT, signal.SIG_DFL)
        signal.signal(signal.SIGTERM, signal.SIG_DFL)

        tasks_to_cancel = [self.ui_update_task, *self.background_tasks]
        for task in tasks_to_cancel:
            if task and not task.done():
                task.cancel()
                try:
                    await asyncio.wait_for(task, timeout=1.0)
                except (asyncio.CancelledError, asyncio.TimeoutError):
                    pass

        await self.client.aclose()
        logging.info("--- Application Shutting Down ---")
        sys.stdout.write('\033[2J\033[H\033[?25h')
        sys.stdout.flush()

        if config.SHOW_ERRORS_ON_EXIT:
            show_session_errors()


def show_session_errors(log_file=None):
    """Print the ERROR lines logged since the last start marker, then remove the log."""
    log_file = log_file or config.LOG_FILE
    if not os.path.exists(log_file):
        return

    try:
        with open(log_file, 'r', encoding='utf-8') as f:
            lines = f.readlines()
    except OSError as e:
        logging.warning(f"Could not read log file {log_file}: {e}")
        return

    start_indices = [i for i, line in enumerate(lines) if "--- Application Starting ---" in line]
    last_start_index = start_indices[-1] if start_indices else 0

    session_lines = lines[last_start_index:]
    error_lines = [line.strip() for line in session_lines if " - ERROR - " in line]

    if error_lines:
        error_console = Console()
        error_console.print("\n[bold red]Errors recorded during this session:[/bold red]")
        for error in error_lines:
            message = ' - '.join(error.split(' - ')[3:])
            error_console.print(f"- {message}", markup=False)

    try:
        os.remove(log_file)
    except OSError:
        pass
