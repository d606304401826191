import os
import sys
import time
from rich.console import Console
from rich.text import Text
from . import __version__, config
from .navigation import AddArticleModal, ReaderModal, ThemeModal
from .panel import VERTICAL, list_window, render_panel
from .text_layout import display_width, truncate_to_width, truncate_with_ellipsis, wrap_to_width
from .themes import get_theme

# ================================
# SCREEN CONSTANTS
# ================================

class UIIcons:
    """Central place to configure all UI icons and markers."""

    SELECTED = ">"
    BULLET = "●"
    CHECK = "✓"
    CURSOR = "█"
    SWATCH = "████"
    SPINNER_FRAMES = "⠋⠙⠹⠸⠼⠴⠦⠧⠇⠏"


ICONS = UIIcons()

LOGO_ART = [
    ' ██████╗██╗   ██╗██████╗  █████╗  ██████╗ ',
    '██╔════╝██║   ██║██╔══██╗██╔══██╗██╔═══██╗',
    '██║     ██║   ██║██████╔╝███████║██║   ██║',
    '╚██████╗╚██████╔╝██║  ██║██║  ██║╚██████╔╝',
    ' ╚═════╝ ╚═════╝ ╚═╝  ╚═╝╚═╝  ╚═╝ ╚══▀▀═╝ ',
    '            CuraQ TUI Client              ',
]
LOGO_WIDTH = 42
LOGO_PADDING_X = 2
LOGO_PADDING_Y = 2
LOGO_PANEL_WIDTH = LOGO_WIDTH + LOGO_PADDING_X * 2 + 2
LOGO_HEIGHT = len(LOGO_ART) + LOGO_PADDING_Y * 2 + 2

THEME_MODAL_WIDTH = 40
ADD_MODAL_WIDTH = 52
MAX_TAGS = 5

LIST_HELP = "j/k:Navigate  Enter:Read  a:Add  m:Done  d:Delete  o:Open  T:Theme  ^R:Refresh  q:Quit"
READER_HELP = "j/k:Scroll  Space:Page  o:Open  Esc:Back"
THEME_HELP = "j/k:Select  Enter:Apply  q:Cancel"
ADD_HELP = "Enter:Submit  Esc:Cancel"
ERROR_HELP = "^R: Retry  q: Quit"

PENDING_LABELS = {
    "mark_read": "Marking done...",
    "delete_article": "Deleting...",
}


def get_terminal_size():
    """Get terminal size."""
    try:
        columns, rows = os.get_terminal_size()
        return max(columns, config.MIN_TERMINAL_WIDTH), max(rows, config.MIN_TERMINAL_HEIGHT)
    except OSError:
        return 80, 24


def content_height(terminal_height):
    """Rows available inside the list or reader box below the header."""
    return terminal_height - LOGO_HEIGHT - 8


def list_height(terminal_height):
    return max(content_height(terminal_height), 5)


def reader_geometry(terminal_width, terminal_height):
    """(text width, visible lines) of the reader's text area."""
    return max(1, terminal_width - 4), max(1, content_height(terminal_height))


def spinner_frame(now=None):
    now = time.monotonic() if now is None else now
    frames = ICONS.SPINNER_FRAMES
    return frames[int(now / config.SPINNER_INTERVAL) % len(frames)]


# ================================
# BUILDING BLOCKS
# ================================

def _panel_rows(panel, border_style, text_style):
    """Turn a Panel into styled rows."""
    rows = [Text(panel.top, style=border_style)]
    for line, style in zip(panel.content_lines, panel.content_styles):
        row = Text(VERTICAL, style=border_style)
        row.append(line, style=style or text_style)
        row.append(VERTICAL, style=border_style)
        rows.append(row)
    rows.append(Text(panel.bottom, style=border_style))
    return rows


def build_logo_panel():
    lines = [""] * LOGO_PADDING_Y + LOGO_ART + [""] * LOGO_PADDING_Y
    return render_panel(f"CuraQ-TUI v{__version__}", lines, LOGO_PANEL_WIDTH, padding=LOGO_PADDING_X)


def logo_rows(theme):
    return _panel_rows(build_logo_panel(), theme.logo, theme.logo)


def detail_panel_width(terminal_width):
    return max(30, terminal_width - LOGO_PANEL_WIDTH - 3)


def build_detail_panel(article, width, theme):
    """
    Build the box next to the logo that describes the selected article.

    Args:
        article: Selected Article, or None
        width: Total panel width in cells
        theme: Active Theme

    Returns:
        Panel: Always exactly as tall as the logo panel
    """
    text_width = width - 4
    lines = []

    if article:
        lines.append((truncate_with_ellipsis(article.title or "Untitled", text_width), theme.title))
        if article.url:
            lines.append((truncate_with_ellipsis(article.url, text_width), theme.url))
        if article.tags:
            tags = " ".join(f"#{tag}" for tag in article.tags[:MAX_TAGS])
            lines.append((truncate_with_ellipsis(tags, text_width), theme.tags))
        if article.reading_time_minutes:
            lines.append((f"{article.reading_time_minutes} min read", theme.text_dim))
        if article.summary:
            lines.append(("", theme.text_dim))
            for summary_line in article.summary.split("\n"):
                for wrapped in wrap_to_width(summary_line, text_width):
                    lines.append((wrapped, theme.text))
    else:
        lines.append(("No article selected", theme.text_dim))

    body_height = LOGO_HEIGHT - 2
    lines = lines[:body_height]
    lines += [("", theme.text_dim)] * (body_height - len(lines))
    return render_panel("Detail", lines, width, padding=1)


def build_stats_line(articles, start_screen, theme):
    total_minutes = sum(a.reading_time_minutes or 0 for a in articles)
    return Text.assemble(
        (f" {ICONS.BULLET} ", f"bold {theme.accent}"),
        (f"{len(articles)} {start_screen}", f"bold {theme.accent}"),
        ("  |  ", theme.text_dim),
        (f"~{total_minutes} min", f"bold {theme.accent}"),
        (" total reading time", theme.text_dim),
    )


def build_header(nav, theme, width):
    """Logo and detail panel side by side, followed by the stats line."""
    detail = build_detail_panel(nav.selected_article(), detail_panel_width(width), theme)
    detail_rows = _panel_rows(detail, theme.box_border, theme.text)

    rows = [Text.assemble(logo_row, " ", detail_row) for logo_row, detail_row in zip(logo_rows(theme), detail_rows)]
    rows.append(build_stats_line(nav.list.articles, nav.start_screen, theme))
    rows.append(Text(""))
    return rows


def _tail_to_width(text, max_width):
    """Keep the end of text that fits in max_width cells."""
    return truncate_to_width(text[::-1], max_width)[::-1]


# ================================
# SCREENS
# ================================

def build_loading_screen(theme, spinner):
    rows = logo_rows(theme)
    rows.append(Text(""))
    rows.append(Text(f"{spinner} Loading...", style=theme.spinner))
    return rows


def build_error_screen(message, theme):
    rows = logo_rows(theme)
    rows.append(Text(""))
    rows.append(Text(f"Error: {message}", style=theme.error))
    rows.append(Text(ERROR_HELP, style=theme.help))
    return rows


def build_list_screen(nav, theme, width, height, spinner):
    rows = build_header(nav, theme, width)
    box_width = width - 2
    inner_width = box_width - 2
    articles = nav.list.articles

    lines = []
    if not articles:
        lines.append((" No articles", theme.text_dim))
    else:
        start, end = list_window(nav.list.selected_index, len(articles), list_height(height))
        for index in range(start, end):
            article = articles[index]
            title = article.title or "Untitled"
            if article.id == nav.list.pending_article_id:
                label = PENDING_LABELS.get(nav.list.pending_action, "Working...")
                prefix = f" {spinner} {label} "
                title = truncate_with_ellipsis(title, inner_width - display_width(prefix))
                lines.append((prefix + title, f"black on {theme.accent}"))
            elif index == nav.list.selected_index:
                title = truncate_with_ellipsis(title, inner_width - 3)
                lines.append((f" {ICONS.SELECTED} {title}", f"bold {theme.list_item_selected}"))
            else:
                title = truncate_with_ellipsis(title, inner_width - 3)
                lines.append((f"   {title}", theme.list_item))

    panel = render_panel("Articles", lines, box_width, padding=0)
    rows.extend(_panel_rows(panel, theme.box_border, theme.text))
    rows.append(Text(""))
    rows.append(Text(LIST_HELP, style=theme.help))
    return rows


def build_reader_screen(nav, theme, width, spinner):
    modal = nav.modal
    rows = build_header(nav, theme, width)

    if modal.loading:
        rows.append(Text(f"{spinner} Loading article...", style=theme.spinner))
        return rows

    if modal.session is None:
        rows.append(Text("Failed to load article", style=theme.error))
        rows.append(Text("Press Esc to go back", style=theme.help))
        return rows

    session = modal.session
    scroll_info = session.scroll_info()
    label = f"Reader {scroll_info}" if scroll_info else "Reader"
    panel = render_panel(label, session.visible_lines(), width - 2, padding=0)
    rows.extend(_panel_rows(panel, theme.box_border, theme.text))
    rows.append(Text(READER_HELP, style=theme.help))
    return rows


def build_theme_box(nav, theme, max_rows=None):
    """
    Build the theme picker box.

    Args:
        nav: Navigator with a ThemeModal open
        theme: Active Theme used for the box itself
        max_rows: Rows available for theme names; the list scrolls to keep
            the cursor visible when there are more themes than rows

    Returns:
        list[Text]: Styled rows of the box
    """
    names = nav.theme_names
    cursor = nav.modal.cursor
    inner_width = THEME_MODAL_WIDTH - 2
    indent = "  "

    start, end = 0, len(names)
    if max_rows is not None:
        start, end = list_window(cursor, len(names), max(1, max_rows))

    lines = []
    swatch_index = None
    for index in range(start, end):
        name = names[index]
        selected = index == cursor
        marker = ICONS.SELECTED if selected else " "
        current = " (current)" if name == nav.current_theme else ""
        style = f"bold {theme.primary}" if selected else theme.text_dim
        lines.append((f"{marker} {name}{current}", style))
        if selected:
            swatch_index = len(lines)
            lines.append((indent + " ".join([ICONS.SWATCH] * 4), None))

    panel = render_panel("Theme", lines, THEME_MODAL_WIDTH, padding=0)
    rows = _panel_rows(panel, theme.box_border, theme.text)

    if swatch_index is not None:
        option = get_theme(names[cursor])
        # Row 0 is the top border and column 0 the left bar
        swatch_row = rows[swatch_index + 1]
        block = len(ICONS.SWATCH)
        for n, color in enumerate((option.primary, option.secondary, option.accent, option.text_dim)):
            column = 1 + len(indent) + n * (block + 1)
            if column + block <= inner_width + 1:
                swatch_row.stylize(color, column, column + block)
    return rows


def build_theme_screen(nav, theme, width, height):
    rows = [] if nav.theme_picker_only else build_header(nav, theme, width)
    # Box borders, swatch row and footer
    max_rows = height - len(rows) - 4
    rows.extend(build_theme_box(nav, theme, max_rows))
    rows.append(Text(THEME_HELP, style=theme.help))
    return rows


def build_add_screen(nav, theme, width, spinner):
    modal = nav.modal
    rows = build_header(nav, theme, width)
    text_width = ADD_MODAL_WIDTH - 4

    lines = [""]
    if modal.status == "submitting":
        lines.append((f"{spinner} Adding article...", theme.spinner))
    elif modal.status == "success":
        lines.append((f"{ICONS.CHECK} Article added successfully!", theme.success))
    else:
        lines.append(("Enter article URL:", theme.text))
        if modal.buffer:
            shown = _tail_to_width(modal.buffer, text_width - 1)
            lines.append((shown + ICONS.CURSOR, theme.text))
        else:
            lines.append((ICONS.CURSOR + "https://...", theme.text_dim))
        if modal.error:
            lines.append((truncate_with_ellipsis(modal.error, text_width), theme.error))
    lines.append("")

    panel = render_panel("Add Article", lines, ADD_MODAL_WIDTH, padding=1)
    rows.extend(_panel_rows(panel, theme.box_border, theme.text))
    rows.append(Text(ADD_HELP, style=theme.help))
    return rows


def build_frame(nav, theme, width, height, spinner=None):
    """
    Compose every row of the screen for the current navigation state.

    Args:
        nav: Navigator holding the state to draw
        theme: Active Theme
        width: Terminal width in cells
        height: Terminal height in rows
        spinner: Spinner glyph to use (defaults to the frame for now)

    Returns:
        list[Text]: At most height rows, each cropped to width
    """
    spinner = spinner or spinner_frame()
    modal = nav.modal

    if isinstance(modal, ThemeModal):
        rows = build_theme_screen(nav, theme, width, height)
    elif nav.list.loading:
        rows = build_loading_screen(theme, spinner)
    elif nav.list.error:
        rows = build_error_screen(nav.list.error, theme)
    elif isinstance(modal, ReaderModal):
        rows = build_reader_screen(nav, theme, width, spinner)
    elif isinstance(modal, AddArticleModal):
        rows = build_add_screen(nav, theme, width, spinner)
    else:
        rows = build_list_screen(nav, theme, width, height, spinner)

    rows = rows[:height]
    for row in rows:
        row.truncate(width, overflow="crop")
    return rows


def needs_animation(nav):
    """True while something on screen shows a spinner."""
    modal = nav.modal
    if nav.list.loading or nav.list.pending_article_id is not None:
        return True
    if isinstance(modal, ReaderModal) and modal.loading:
        return True
    return isinstance(modal, AddArticleModal) and modal.status == "submitting"


async def display_ui(app):
    """Draw the current state if it changed since the last frame."""
    if app.render_lock.locked():
        return

    async with app.render_lock:
        width, height = get_terminal_size()
        spinner = spinner_frame() if needs_animation(app.navigator) else ICONS.SPINNER_FRAMES[0]
        current_state = (app.state_version, app.theme.name, spinner)

        if app.last_rendered_state == current_state and app.last_terminal_size == (width, height):
            return

        app.last_rendered_state = current_state
        app.last_terminal_size = (width, height)

        rows = build_frame(app.navigator, app.theme, width, height, spinner)
        frame = Text("\n").join(rows)

        temp_console = Console(width=width, height=height, force_terminal=True)
        with temp_console.capture() as capture:
            temp_console.print(frame, end='', soft_wrap=True)

        output_lines = capture.get().split('\n')[:height]
        # Home the cursor and clear whatever the previous frame left behind
        sys.stdout.write('\033[?25l\033[H' + '\033[K\n'.join(output_lines) + '\033[K\033[J')
        sys.stdout.flush()
