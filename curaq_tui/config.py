"""Configuration settings for the curaq-tui client."""

import os
from platformdirs import user_config_dir, user_log_dir

APP_NAME = "curaq-tui"

# CuraQ service
BASE_URL = "https://curaq.app"
TOKEN_ENV_VAR = "CURAQ_MCP_TOKEN"
REQUEST_TIMEOUT = 30.0
ARTICLES_PAGE_SIZE = 100

# Readable content fetching
USER_AGENT = "Mozilla/5.0 (compatible; curaq-tui/1.0; +https://github.com/polidog/curaK)"
CONTENT_FETCH_TIMEOUT = 20.0

# User settings file (token, theme, start screen); created on first write
CONFIG_DIR = user_config_dir(APP_NAME, appauthor=False)
CONFIG_FILE = os.path.join(CONFIG_DIR, "config.json")

# Logging
LOG_DIR = user_log_dir(APP_NAME, appauthor=False)
LOG_FILE = os.path.join(LOG_DIR, "error.log")
SHOW_ERRORS_ON_EXIT = True

# Defaults for user settings
DEFAULT_THEME = "default"
DEFAULT_START_SCREEN = "unread"
START_SCREENS = ("unread", "read")

# Reader scrolling
LINE_SCROLL_STEP = 3
PAGE_SCROLL_STEP = 15

# UI settings
UI_UPDATE_INTERVAL = 0.05  # Seconds between render checks
SPINNER_INTERVAL = 0.08  # Seconds per spinner frame
ADD_SUCCESS_DELAY = 1.0  # Seconds the "article added" message stays up
MIN_TERMINAL_WIDTH = 40
MIN_TERMINAL_HEIGHT = 10
