#!/usr/bin/env python3
"""
Tests for the Navigator: key routing, modal transitions and result events.
"""

import os
import sys
import unittest

sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from curaq_tui.models import Article, ReaderContent
from curaq_tui.navigation import (
    AddArticleModal,
    Effect,
    Mode,
    Navigator,
    ReaderModal,
    ThemeModal,
    is_valid_url,
)

THEMES = ["default", "ocean", "forest", "sunset"]


def make_article(n, is_read=False):
    return Article(id=str(n), title=f"Article {n}", url=f"https://example.com/{n}", is_read=is_read)


def make_content(text):
    return ReaderContent(title="T", content="<p></p>", text_content=text, excerpt="")


class NavigatorTestCase(unittest.TestCase):

    def setUp(self):
        self.nav = Navigator(THEMES, "default")
        self.nav.set_reader_geometry(20, 10)

    def load(self, count=3):
        self.nav.handle_event("articles_loaded", [make_article(i) for i in range(count)])


class TestListMode(NavigatorTestCase):

    def test_start_requests_articles(self):
        self.assertEqual(self.nav.start(), [Effect("load_articles")])
        self.assertTrue(self.nav.list.loading)
        self.assertEqual(self.nav.mode, Mode.LIST)

    def test_keys_ignored_while_loading(self):
        self.assertEqual(self.nav.handle_key("j"), [])
        self.assertEqual(self.nav.handle_key("a"), [])
        self.assertIsNone(self.nav.modal)
        self.assertEqual(self.nav.handle_key("q"), [Effect("quit")])

    def test_selection_is_clamped(self):
        self.load(3)
        self.nav.handle_key("k")
        self.assertEqual(self.nav.list.selected_index, 0)
        for _ in range(5):
            self.nav.handle_key("down")
        self.assertEqual(self.nav.list.selected_index, 2)
        self.nav.handle_key("up")
        self.assertEqual(self.nav.list.selected_index, 1)

    def test_enter_opens_reader(self):
        self.load(3)
        self.nav.handle_key("j")
        effects = self.nav.handle_key("enter")

        self.assertEqual(self.nav.mode, Mode.READER)
        self.assertTrue(self.nav.modal.loading)
        self.assertEqual(effects, [Effect("load_reader", ("https://example.com/1", self.nav.modal.request_id))])

    def test_open_in_browser(self):
        self.load(2)
        self.assertEqual(self.nav.handle_key("o"), [Effect("open_url", "https://example.com/0")])
        self.assertEqual(self.nav.mode, Mode.LIST)

    def test_start_screen_filters_articles(self):
        articles = [make_article(0), make_article(1, is_read=True), make_article(2, is_read=None)]
        self.nav.handle_event("articles_loaded", articles)
        self.assertEqual([a.id for a in self.nav.list.articles], ["0", "2"])

        read_nav = Navigator(THEMES, "default", start_screen="read")
        read_nav.handle_event("articles_loaded", articles)
        self.assertEqual([a.id for a in read_nav.list.articles], ["1"])

    def test_load_failure_and_retry(self):
        self.nav.handle_event("articles_failed", "API Error: 500 Internal Server Error")
        self.assertFalse(self.nav.list.loading)
        self.assertEqual(self.nav.list.error, "API Error: 500 Internal Server Error")
        self.assertEqual(self.nav.handle_key("j"), [])

        self.assertEqual(self.nav.handle_key("ctrl_r"), [Effect("load_articles")])
        self.assertTrue(self.nav.list.loading)
        self.assertIsNone(self.nav.list.error)
        # A refresh is already running
        self.assertEqual(self.nav.handle_key("R"), [])


class TestMarkAndDelete(NavigatorTestCase):

    def test_mark_read_success_removes_item(self):
        self.load(3)
        self.nav.handle_key("j")
        self.assertEqual(self.nav.handle_key("m"), [Effect("mark_read", "1")])
        self.assertEqual(self.nav.list.pending_article_id, "1")

        self.nav.handle_event("mark_read_done", ("1", True))
        self.assertEqual([a.id for a in self.nav.list.articles], ["0", "2"])
        self.assertIsNone(self.nav.list.pending_article_id)

    def test_marking_last_item_resets_selection(self):
        self.load(1)
        self.nav.handle_key("m")
        self.nav.handle_event("mark_read_done", ("0", True))
        self.assertEqual(self.nav.list.articles, [])
        self.assertEqual(self.nav.list.selected_index, 0)
        self.assertIsNone(self.nav.selected_article())

    def test_selection_clamped_after_removing_last_row(self):
        self.load(3)
        self.nav.handle_key("j")
        self.nav.handle_key("j")
        self.nav.handle_key("d")
        self.nav.handle_event("delete_done", ("2", True))
        self.assertEqual(self.nav.list.selected_index, 1)

    def test_failure_keeps_item(self):
        self.load(2)
        self.assertEqual(self.nav.handle_key("d"), [Effect("delete_article", "0")])
        self.nav.handle_event("delete_done", ("0", False))
        self.assertEqual(len(self.nav.list.articles), 2)
        self.assertIsNone(self.nav.list.pending_article_id)

    def test_one_request_at_a_time(self):
        self.load(2)
        self.nav.handle_key("m")
        self.nav.handle_key("j")
        self.assertEqual(self.nav.handle_key("m"), [])

    def test_nothing_to_mark_in_empty_list(self):
        self.load(0)
        self.assertEqual(self.nav.handle_key("m"), [])
        self.assertEqual(self.nav.handle_key("enter"), [])


class TestReaderMode(NavigatorTestCase):

    def open_reader(self):
        self.load(3)
        self.nav.handle_key("enter")
        return self.nav.modal.request_id

    def test_loaded_content_is_paginated(self):
        request_id = self.open_reader()
        text = "\n".join(f"line {i}" for i in range(25))
        self.nav.handle_event("reader_loaded", (request_id, make_content(text)))

        session = self.nav.modal.session
        self.assertFalse(self.nav.modal.loading)
        self.assertEqual(session.scroll_info(), "[1-10/25]")
        self.nav.handle_key("space")
        self.assertEqual(session.scroll_info(), "[16-25/25]")
        self.nav.handle_key("space")
        self.assertEqual(session.scroll_offset, 15)
        self.nav.handle_key("k")
        self.assertEqual(session.scroll_offset, 12)
        self.nav.handle_key("page_up")
        self.assertEqual(session.scroll_offset, 0)

    def test_failed_extraction(self):
        request_id = self.open_reader()
        self.nav.handle_event("reader_loaded", (request_id, None))
        self.assertFalse(self.nav.modal.loading)
        self.assertIsNone(self.nav.modal.session)
        self.assertEqual(self.nav.handle_key("j"), [])

    def test_stale_response_is_discarded(self):
        first_id = self.open_reader()
        self.nav.handle_key("escape")
        self.assertEqual(self.nav.mode, Mode.LIST)

        self.nav.handle_key("j")
        self.nav.handle_key("enter")
        second = self.nav.modal
        self.assertNotEqual(second.request_id, first_id)

        self.nav.handle_event("reader_loaded", (first_id, make_content("old article")))
        self.assertTrue(second.loading)
        self.assertIsNone(second.content)

    def test_response_after_close_is_discarded(self):
        request_id = self.open_reader()
        self.nav.handle_key("q")
        self.nav.handle_event("reader_loaded", (request_id, make_content("late")))
        self.assertIsNone(self.nav.modal)

    def test_open_in_browser_from_reader(self):
        self.open_reader()
        self.assertEqual(self.nav.handle_key("o"), [Effect("open_url", "https://example.com/0")])
        self.assertIsInstance(self.nav.modal, ReaderModal)

    def test_resize_reflows_open_article(self):
        request_id = self.open_reader()
        self.nav.handle_event("reader_loaded", (request_id, make_content("x" * 40)))
        self.assertEqual(self.nav.modal.session.total_lines, 2)
        self.nav.set_reader_geometry(10, 10)
        self.assertEqual(self.nav.modal.session.total_lines, 4)


class TestThemeMode(NavigatorTestCase):

    def test_cursor_starts_at_current_theme(self):
        nav = Navigator(THEMES, "forest")
        nav.handle_event("articles_loaded", [])
        nav.handle_key("T")
        self.assertIsInstance(nav.modal, ThemeModal)
        self.assertEqual(nav.modal.cursor, 2)

    def test_apply_theme(self):
        self.load(1)
        self.nav.handle_key("T")
        self.nav.handle_key("j")
        effects = self.nav.handle_key("enter")
        self.assertEqual(effects, [Effect("save_theme", "ocean")])
        self.assertEqual(self.nav.current_theme, "ocean")
        self.assertIsNone(self.nav.modal)

    def test_cancel_keeps_theme(self):
        self.load(1)
        self.nav.handle_key("T")
        for _ in range(10):
            self.nav.handle_key("down")
        self.assertEqual(self.nav.modal.cursor, len(THEMES) - 1)
        self.assertEqual(self.nav.handle_key("q"), [])
        self.assertEqual(self.nav.current_theme, "default")
        self.assertEqual(self.nav.mode, Mode.LIST)

    def test_picker_only_quits_on_close(self):
        nav = Navigator(THEMES, "sunset", theme_picker_only=True)
        self.assertEqual(nav.start(), [])
        self.assertEqual(nav.mode, Mode.THEME)
        self.assertEqual(nav.modal.cursor, 3)
        self.assertEqual(nav.handle_key("k"), [])
        self.assertEqual(nav.handle_key("enter"), [Effect("save_theme", "forest"), Effect("quit")])

    def test_picker_only_cancel(self):
        nav = Navigator(THEMES, "default", theme_picker_only=True)
        self.assertEqual(nav.handle_key("escape"), [Effect("quit")])


class TestAddArticleMode(NavigatorTestCase):

    def open_modal(self):
        self.load(1)
        effects = self.nav.handle_key("a")
        self.assertEqual(effects, [Effect("read_clipboard")])
        return self.nav.modal

    def type_text(self, text):
        for char in text:
            self.nav.handle_key("space" if char == " " else char)

    def test_clipboard_url_seeds_buffer(self):
        modal = self.open_modal()
        self.nav.handle_event("clipboard_read", "https://example.com/post")
        self.assertEqual(modal.buffer, "https://example.com/post")

    def test_clipboard_non_url_is_ignored(self):
        modal = self.open_modal()
        self.nav.handle_event("clipboard_read", "grocery list")
        self.assertEqual(modal.buffer, "")

    def test_clipboard_does_not_overwrite_typing(self):
        modal = self.open_modal()
        self.type_text("htt")
        self.nav.handle_event("clipboard_read", "https://example.com/post")
        self.assertEqual(modal.buffer, "htt")

    def test_invalid_url_is_rejected_without_request(self):
        modal = self.open_modal()
        self.type_text("not a url")
        self.assertEqual(self.nav.handle_key("enter"), [])
        self.assertEqual(modal.error, "Invalid URL format")
        self.assertIsInstance(self.nav.modal, AddArticleModal)

    def test_empty_url_is_rejected(self):
        modal = self.open_modal()
        self.assertEqual(self.nav.handle_key("enter"), [])
        self.assertEqual(modal.error, "URL is required")

    def test_backspace_and_q_edit_buffer(self):
        modal = self.open_modal()
        self.type_text("quiz")
        self.nav.handle_key("backspace")
        self.assertEqual(modal.buffer, "qui")
        self.assertIs(self.nav.modal, modal)

    def test_successful_submit_closes_after_delay(self):
        modal = self.open_modal()
        self.type_text("https://example.com/new")
        self.assertEqual(self.nav.handle_key("enter"), [Effect("submit_article", "https://example.com/new")])
        self.assertEqual(modal.status, "submitting")
        # Typing is locked while the request runs
        self.nav.handle_key("x")
        self.assertEqual(modal.buffer, "https://example.com/new")

        self.assertEqual(self.nav.handle_event("article_added", (True, None)), [Effect("close_add_after_delay")])
        self.assertEqual(modal.status, "success")

        self.assertEqual(self.nav.handle_event("add_success_elapsed"), [Effect("load_articles")])
        self.assertIsNone(self.nav.modal)
        self.assertTrue(self.nav.list.loading)

    def test_failed_submit_keeps_modal_open(self):
        modal = self.open_modal()
        self.type_text("https://example.com/new")
        self.nav.handle_key("enter")
        self.nav.handle_event("article_added", (False, "API Error: 409 Conflict"))
        self.assertEqual(modal.status, "error")
        self.assertEqual(modal.error, "API Error: 409 Conflict")
        self.assertIs(self.nav.modal, modal)

    def test_escape_cancels(self):
        self.open_modal()
        self.assertEqual(self.nav.handle_key("escape"), [])
        self.assertIsNone(self.nav.modal)
        self.assertEqual(self.nav.handle_event("add_success_elapsed"), [])


class TestHelpers(unittest.TestCase):

    def test_is_valid_url(self):
        self.assertTrue(is_valid_url("https://example.com"))
        self.assertTrue(is_valid_url("http://example.com/a?b=c"))
        self.assertFalse(is_valid_url("not a url"))
        self.assertFalse(is_valid_url("ftp://example.com"))
        self.assertFalse(is_valid_url("https://"))

    def test_unknown_event_is_ignored(self):
        nav = Navigator(THEMES, "default")
        self.assertEqual(nav.handle_event("something_else", None), [])


if __name__ == '__main__':
    unittest.main()
