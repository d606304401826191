"""Colour themes for the curaq-tui client.

Every value is a rich colour string. The active theme is passed to the
renderer explicitly; switching themes means handing it a different
Theme, nothing here is mutated at runtime.
"""

from dataclasses import dataclass

from . import config


@dataclass(frozen=True)
class Theme:
    name: str
    primary: str
    secondary: str
    accent: str
    unread: str
    read: str
    border: str
    text: str
    text_dim: str
    logo: str
    box_border: str
    title: str
    url: str
    tags: str
    list_item: str
    list_item_selected: str
    help: str
    stats: str
    spinner: str
    error: str
    success: str


GRAY = "#808080"

THEMES = {
    "default": Theme(
        name="default", primary="cyan", secondary="green", accent="yellow",
        unread="yellow", read="green", border="cyan", text="white", text_dim="#888888",
        logo="cyan", box_border="cyan", title="cyan", url="#888888", tags="yellow",
        list_item="#888888", list_item_selected="cyan", help="#888888", stats="#888888",
        spinner="cyan", error="red", success="green",
    ),
    "ocean": Theme(
        name="ocean", primary="blue", secondary="cyan", accent="magenta",
        unread="cyan", read="blue", border="blue", text="white", text_dim="#888888",
        logo="blue", box_border="cyan", title="cyan", url="#6688aa", tags="magenta",
        list_item="#888888", list_item_selected="cyan", help="#6688aa", stats="#6688aa",
        spinner="cyan", error="red", success="cyan",
    ),
    "forest": Theme(
        name="forest", primary="green", secondary="yellow", accent="cyan",
        unread="yellow", read="green", border="green", text="white", text_dim="#888888",
        logo="green", box_border="green", title="green", url="#669966", tags="yellow",
        list_item="#888888", list_item_selected="green", help="#669966", stats="#669966",
        spinner="green", error="red", success="green",
    ),
    "sunset": Theme(
        name="sunset", primary="magenta", secondary="red", accent="yellow",
        unread="yellow", read="red", border="magenta", text="white", text_dim="#888888",
        logo="magenta", box_border="magenta", title="magenta", url="#aa6688", tags="yellow",
        list_item="#888888", list_item_selected="magenta", help="#aa6688", stats="#aa6688",
        spinner="magenta", error="red", success="yellow",
    ),
    "mono": Theme(
        name="mono", primary="white", secondary=GRAY, accent="white",
        unread="white", read=GRAY, border=GRAY, text="white", text_dim="#888888",
        logo="white", box_border=GRAY, title="white", url=GRAY, tags="white",
        list_item=GRAY, list_item_selected="white", help=GRAY, stats=GRAY,
        spinner="white", error="white", success="white",
    ),
    "sakura": Theme(
        name="sakura", primary="#f7768e", secondary="#ff9e64", accent="#ffc0cb",
        unread="#f7768e", read="#ff9e64", border="#f7768e", text="white", text_dim="#a9a9a9",
        logo="#f7768e", box_border="#ffc0cb", title="#f7768e", url="#d4a5a5", tags="#ffc0cb",
        list_item="#d4a5a5", list_item_selected="#f7768e", help="#d4a5a5", stats="#d4a5a5",
        spinner="#f7768e", error="#ff6b6b", success="#ff9e64",
    ),
    "nord": Theme(
        name="nord", primary="#5e81ac", secondary="#88c0d0", accent="#ebcb8b",
        unread="#ebcb8b", read="#a3be8c", border="#5e81ac", text="#eceff4", text_dim="#4c566a",
        logo="#88c0d0", box_border="#5e81ac", title="#88c0d0", url="#81a1c1", tags="#ebcb8b",
        list_item="#d8dee9", list_item_selected="#88c0d0", help="#4c566a", stats="#81a1c1",
        spinner="#88c0d0", error="#bf616a", success="#a3be8c",
    ),
    "dracula": Theme(
        name="dracula", primary="#bd93f9", secondary="#ff79c6", accent="#50fa7b",
        unread="#f1fa8c", read="#50fa7b", border="#bd93f9", text="#f8f8f2", text_dim="#6272a4",
        logo="#bd93f9", box_border="#ff79c6", title="#ff79c6", url="#8be9fd", tags="#f1fa8c",
        list_item="#6272a4", list_item_selected="#bd93f9", help="#6272a4", stats="#8be9fd",
        spinner="#bd93f9", error="#ff5555", success="#50fa7b",
    ),
    "solarized": Theme(
        name="solarized", primary="#268bd2", secondary="#2aa198", accent="#b58900",
        unread="#b58900", read="#859900", border="#268bd2", text="#839496", text_dim="#586e75",
        logo="#268bd2", box_border="#2aa198", title="#268bd2", url="#2aa198", tags="#b58900",
        list_item="#839496", list_item_selected="#268bd2", help="#586e75", stats="#657b83",
        spinner="#268bd2", error="#dc322f", success="#859900",
    ),
    "cyberpunk": Theme(
        name="cyberpunk", primary="#ff00ff", secondary="#00ffff", accent="#ff0080",
        unread="#00ffff", read="#ff00ff", border="#ff0080", text="white", text_dim="#808080",
        logo="#ff00ff", box_border="#00ffff", title="#00ffff", url="#ff0080", tags="#ffff00",
        list_item="#808080", list_item_selected="#00ffff", help="#ff0080", stats="#00ffff",
        spinner="#ff00ff", error="#ff0000", success="#00ff00",
    ),
    "coffee": Theme(
        name="coffee", primary="#c4a77d", secondary="#8b7355", accent="#deb887",
        unread="#deb887", read="#8b7355", border="#c4a77d", text="#f5f5dc", text_dim="#a0826d",
        logo="#c4a77d", box_border="#8b7355", title="#deb887", url="#a0826d", tags="#d2b48c",
        list_item="#a0826d", list_item_selected="#deb887", help="#8b7355", stats="#a0826d",
        spinner="#c4a77d", error="#cd5c5c", success="#8fbc8f",
    ),
    "tokyoMidnight": Theme(
        name="tokyoMidnight", primary="#7aa2f7", secondary="#bb9af7", accent="#7dcfff",
        unread="#e0af68", read="#9ece6a", border="#7aa2f7", text="#c0caf5", text_dim="#565f89",
        logo="#7aa2f7", box_border="#bb9af7", title="#7dcfff", url="#565f89", tags="#e0af68",
        list_item="#a9b1d6", list_item_selected="#7aa2f7", help="#565f89", stats="#565f89",
        spinner="#7aa2f7", error="#f7768e", success="#9ece6a",
    ),
    "kanagawa": Theme(
        name="kanagawa", primary="#7e9cd8", secondary="#957fb8", accent="#7fb4ca",
        unread="#e6c384", read="#98bb6c", border="#7e9cd8", text="#dcd7ba", text_dim="#727169",
        logo="#7e9cd8", box_border="#957fb8", title="#7fb4ca", url="#727169", tags="#e6c384",
        list_item="#c8c093", list_item_selected="#7e9cd8", help="#727169", stats="#727169",
        spinner="#7e9cd8", error="#e82424", success="#98bb6c",
    ),
    "pc98": Theme(
        name="pc98", primary="#00ffff", secondary="#ff00ff", accent="#ffff00",
        unread="#ffff00", read="#00ffff", border="#ff00ff", text="#ffffff", text_dim="#00aaaa",
        logo="#00ffff", box_border="#ff00ff", title="#00ffff", url="#00aaaa", tags="#ffff00",
        list_item="#ffffff", list_item_selected="#ffff00", help="#00aaaa", stats="#00ffff",
        spinner="#00ffff", error="#ff0000", success="#00ff00",
    ),
}


def theme_names():
    """Theme names in display order."""
    return list(THEMES)


def get_theme(name):
    """Look up a theme by name, falling back to the default theme."""
    return THEMES.get(name, THEMES[config.DEFAULT_THEME])
