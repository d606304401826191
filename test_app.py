#!/usr/bin/env python3
"""
Integration tests for CuraQApp: keys and results flowing through the
navigator, with the API client and desktop helpers mocked out.
"""

import asyncio
import os
import shutil
import sys
import tempfile
import unittest
from unittest.mock import AsyncMock, Mock, patch

sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from curaq_tui import app as app_module
from curaq_tui.api_client import ApiError
from curaq_tui.app import CuraQApp, show_session_errors
from curaq_tui.models import Article, ArticleList, ReaderContent
from curaq_tui.navigation import Mode
from curaq_tui.settings_manager import Settings, SettingsStore


def sample_articles():
    return [
        Article(id="1", title="First", url="https://example.com/1", reading_time_minutes=3),
        Article(id="2", title="Second", url="https://example.com/2", reading_time_minutes=4),
        Article(id="3", title="Done already", url="https://example.com/3", is_read=True),
    ]


class TestCuraQApp(unittest.IsolatedAsyncioTestCase):

    async def asyncSetUp(self):
        self.temp_dir = tempfile.mkdtemp()
        self.addCleanup(shutil.rmtree, self.temp_dir)
        self.store = SettingsStore(os.path.join(self.temp_dir, "config.json"))

        self.client = Mock()
        self.client.get_articles = AsyncMock(return_value=ArticleList(articles=sample_articles()))
        self.client.mark_as_read = AsyncMock(return_value=None)
        self.client.delete_article = AsyncMock(return_value=None)
        self.client.create_article = AsyncMock(return_value=sample_articles()[0])
        self.client.aclose = AsyncMock()

        size_patcher = patch('curaq_tui.ui.get_terminal_size', return_value=(100, 30))
        size_patcher.start()
        self.addCleanup(size_patcher.stop)

        self.app = CuraQApp(self.client, self.store, Settings(theme="ocean"))

    async def settle(self):
        """Let background work finish and feed its events back in until idle."""
        while self.app.background_tasks or not self.app.events.empty():
            if self.app.background_tasks:
                await asyncio.gather(*list(self.app.background_tasks))
            while not self.app.events.empty():
                self.app.dispatch(*self.app.events.get_nowait())

    async def start(self):
        self.app.run_effects(self.app.navigator.start())
        await self.settle()

    async def press(self, *keys):
        for key in keys:
            self.app.dispatch("key", key)
        await self.settle()

    async def test_start_loads_unread_articles(self):
        await self.start()
        nav = self.app.navigator
        self.assertFalse(nav.list.loading)
        self.assertEqual([a.id for a in nav.list.articles], ["1", "2"])
        self.client.get_articles.assert_awaited_once()

    async def test_load_failure_shows_error(self):
        self.client.get_articles.side_effect = ApiError("API Error: 500 Internal Server Error", 500)
        with self.assertLogs(level="ERROR"):
            await self.start()
        self.assertEqual(self.app.navigator.list.error, "API Error: 500 Internal Server Error")

    async def test_unexpected_failure_becomes_failure_event(self):
        self.client.get_articles.side_effect = RuntimeError("boom")
        with self.assertLogs(level="ERROR"):
            await self.start()
        self.assertEqual(self.app.navigator.list.error, "Failed to load articles")

    async def test_retry_after_failure(self):
        self.client.get_articles.side_effect = [ApiError("API Error: 503 Service Unavailable", 503),
                                                ArticleList(articles=sample_articles())]
        with self.assertLogs(level="ERROR"):
            await self.start()
        await self.press("ctrl_r")
        self.assertIsNone(self.app.navigator.list.error)
        self.assertEqual(len(self.app.navigator.list.articles), 2)

    async def test_mark_read_removes_article(self):
        await self.start()
        await self.press("m")
        self.client.mark_as_read.assert_awaited_once_with("1")
        self.assertEqual([a.id for a in self.app.navigator.list.articles], ["2"])

    async def test_delete_failure_keeps_article(self):
        self.client.delete_article.side_effect = ApiError("API Error: 404 Not Found", 404)
        await self.start()
        with self.assertLogs(level="WARNING"):
            await self.press("d")
        self.assertEqual(len(self.app.navigator.list.articles), 2)
        self.assertIsNone(self.app.navigator.list.pending_article_id)

    @patch('curaq_tui.app.fetch_readable_content', new_callable=AsyncMock)
    async def test_reader_opens_extracted_content(self, mock_fetch):
        text = "\n".join(f"line {i}" for i in range(40))
        mock_fetch.return_value = ReaderContent(title="First", content="", text_content=text, excerpt="")
        await self.start()
        await self.press("j", "enter")

        mock_fetch.assert_awaited_once_with("https://example.com/2")
        session = self.app.navigator.modal.session
        self.assertEqual(session.width, 96)
        self.assertEqual(session.scroll_info(), "[1-10/40]")

        await self.press("escape")
        self.assertEqual(self.app.navigator.mode, Mode.LIST)

    @patch('curaq_tui.app.open_in_browser', new_callable=AsyncMock)
    async def test_open_in_browser(self, mock_open):
        await self.start()
        await self.press("o")
        mock_open.assert_awaited_once_with("https://example.com/1")

    async def test_theme_change_is_saved(self):
        await self.start()
        await self.press("T", "j", "enter")
        self.assertEqual(self.app.theme.name, "forest")
        self.assertEqual(self.store.load().theme, "forest")

    @patch.object(app_module.config, 'ADD_SUCCESS_DELAY', 0)
    @patch('curaq_tui.app.read_clipboard', new_callable=AsyncMock)
    async def test_add_article_from_clipboard(self, mock_clipboard):
        mock_clipboard.return_value = "https://example.com/new"
        await self.start()
        await self.press("a")
        self.assertEqual(self.app.navigator.modal.buffer, "https://example.com/new")

        await self.press("enter")
        self.client.create_article.assert_awaited_once_with("https://example.com/new")
        self.assertIsNone(self.app.navigator.modal)
        self.assertEqual(self.client.get_articles.await_count, 2)

    @patch('curaq_tui.app.read_clipboard', new_callable=AsyncMock)
    async def test_add_article_failure_stays_open(self, mock_clipboard):
        mock_clipboard.return_value = ""
        self.client.create_article.side_effect = ApiError("API Error: 409 Conflict", 409)
        await self.start()
        await self.press("a")
        for char in "https://example.com/x":
            self.app.dispatch("key", char)
        with self.assertLogs(level="ERROR"):
            await self.press("enter")
        self.assertEqual(self.app.navigator.modal.error, "API Error: 409 Conflict")

    async def test_resize_updates_reader_geometry(self):
        with patch('curaq_tui.ui.get_terminal_size', return_value=(60, 40)):
            self.app.dispatch("resize")
        self.assertEqual(self.app.navigator.reader_width, 56)
        self.assertEqual(self.app.navigator.reader_height, 20)

    async def test_quit(self):
        await self.start()
        version = self.app.state_version
        self.app.dispatch("key", "q")
        self.assertFalse(self.app.running)
        self.assertEqual(self.app.state_version, version + 1)


class TestShowSessionErrors(unittest.TestCase):

    def setUp(self):
        self.temp_dir = tempfile.mkdtemp()
        self.log_file = os.path.join(self.temp_dir, "error.log")

    def tearDown(self):
        shutil.rmtree(self.temp_dir)

    @patch('curaq_tui.app.Console')
    def test_prints_errors_from_last_session_only(self, mock_console_class):
        with open(self.log_file, 'w', encoding='utf-8') as f:
            f.write("2024-01-01 - INFO - root - --- Application Starting ---\n")
            f.write("2024-01-01 - ERROR - root - old failure\n")
            f.write("2024-01-02 - INFO - root - --- Application Starting ---\n")
            f.write("2024-01-02 - WARNING - root - just a warning\n")
            f.write("2024-01-02 - ERROR - root - Failed to load articles: API Error: 500\n")

        show_session_errors(self.log_file)

        printed = [c.args[0] for c in mock_console_class.return_value.print.call_args_list]
        self.assertIn("- Failed to load articles: API Error: 500", printed)
        self.assertNotIn("- old failure", printed)
        self.assertFalse(any("warning" in line for line in printed))
        self.assertFalse(os.path.exists(self.log_file))

    @patch('curaq_tui.app.Console')
    def test_quiet_session(self, mock_console_class):
        with open(self.log_file, 'w', encoding='utf-8') as f:
            f.write("2024-01-02 - INFO - root - --- Application Starting ---\n")

        show_session_errors(self.log_file)
        mock_console_class.assert_not_called()
        self.assertFalse(os.path.exists(self.log_file))


if __name__ == '__main__':
    unittest.main()
