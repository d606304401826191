"""User settings persistence for the curaq-tui client."""

import json
import logging
import os
from dataclasses import dataclass

from . import config
from .themes import THEMES


@dataclass
class Settings:
    token: str | None = None
    start_screen: str = config.DEFAULT_START_SCREEN
    theme: str = config.DEFAULT_THEME


class SettingsStore:
    """
    Reads and writes the settings JSON file.

    The file holds a single object with the optional keys "token",
    "startScreen" and "theme". Writes start from the object on disk, so
    keys this client does not know about are kept and fields that were
    never set stay absent. There is no locking, so two running instances
    may overwrite each other.
    """

    # Settings field -> key in the JSON file
    FIELD_KEYS = {"token": "token", "start_screen": "startScreen", "theme": "theme"}

    def __init__(self, path=None):
        self.path = path or config.CONFIG_FILE

    def load_raw(self) -> dict:
        """Return the stored JSON object as-is, or {} when it is missing or unreadable."""
        if not os.path.exists(self.path):
            return {}

        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (json.JSONDecodeError, IOError) as e:
            logging.warning(f"Could not read settings file {self.path}: {e}")
            return {}

        if not isinstance(data, dict):
            return {}
        return data

    def load(self) -> Settings:
        """
        Load settings from disk.

        Returns:
            Settings: Stored values, with defaults for anything missing,
            unknown or unreadable
        """
        data = self.load_raw()

        start_screen = data.get("startScreen")
        if start_screen not in config.START_SCREENS:
            start_screen = config.DEFAULT_START_SCREEN

        theme = data.get("theme")
        if theme not in THEMES:
            theme = config.DEFAULT_THEME

        return Settings(token=data.get("token") or None, start_screen=start_screen, theme=theme)

    def _write(self, data):
        os.makedirs(os.path.dirname(os.path.abspath(self.path)), exist_ok=True)
        with open(self.path, 'w', encoding='utf-8') as f:
            json.dump(data, f, indent=2)

    def save(self, settings: Settings):
        """
        Write every field of settings into the stored object.

        Args:
            settings: Values to store; a missing token is removed from the file
        """
        self._apply({field: getattr(settings, field) for field in self.FIELD_KEYS})

    def update(self, **changes) -> Settings:
        """
        Change only the given fields in the stored object and return the result.

        Passing None removes the field from the file.
        """
        self._apply(changes)
        return self.load()

    def _apply(self, changes):
        data = self.load_raw()
        for field, value in changes.items():
            key = self.FIELD_KEYS[field]
            if value is None:
                data.pop(key, None)
            else:
                data[key] = value
        self._write(data)


def resolve_token(store, environ=None):
    """
    Find the API token, preferring the environment over the settings file.

    Args:
        store: SettingsStore to fall back to
        environ: Mapping to read the environment from (defaults to os.environ)

    Returns:
        tuple: (token, source) where source is "env", "config" or None
    """
    environ = os.environ if environ is None else environ
    env_token = environ.get(config.TOKEN_ENV_VAR)
    if env_token:
        return env_token, "env"

    token = store.load().token
    if token:
        return token, "config"
    return None, None


def mask_token(token):
    """Shorten a token for display: first 8 and last 4 characters."""
    if len(token) <= 12:
        return "*" * len(token)
    return f"{token[:8]}...{token[-4:]}"
