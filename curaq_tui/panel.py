"""Bordered panels and list windows for the curaq-tui screens."""

from dataclasses import dataclass

from .text_layout import display_width, fit_to_width

TOP_LEFT = "╭"
TOP_RIGHT = "╮"
BOTTOM_LEFT = "╰"
BOTTOM_RIGHT = "╯"
HORIZONTAL = "─"
VERTICAL = "│"


@dataclass(frozen=True)
class Panel:
    """A rendered box: two border rules around fixed-width content lines."""

    top: str
    bottom: str
    content_lines: tuple
    content_styles: tuple
    width: int

    def bordered_lines(self):
        """Content lines with the side bars attached."""
        return [f"{VERTICAL}{line}{VERTICAL}" for line in self.content_lines]

    def lines(self):
        """All rows of the panel, top border to bottom border."""
        return [self.top, *self.bordered_lines(), self.bottom]

    @property
    def height(self):
        return len(self.content_lines) + 2


def top_border(label, inner_width):
    """Top rule with the label embedded after the corner: ╭─ label ───╮"""
    fill = HORIZONTAL * max(0, inner_width - display_width(label) - 3)
    return f"{TOP_LEFT}{HORIZONTAL} {label} {fill}{TOP_RIGHT}"


def bottom_border(inner_width):
    return f"{BOTTOM_LEFT}{HORIZONTAL * max(0, inner_width)}{BOTTOM_RIGHT}"


def render_panel(label, lines, width, padding=1):
    """
    Build a rounded box of the given total width.

    Args:
        label: Text embedded in the top border
        lines: Content rows, either plain strings or (text, style) pairs
        width: Total width in cells, borders included
        padding: Spaces inserted before each content row

    Returns:
        Panel: The rendered box
    """
    inner_width = max(0, width - 2)
    pad = " " * padding

    content_lines = []
    content_styles = []
    for line in lines:
        if isinstance(line, tuple):
            text, style = line
        else:
            text, style = line, None
        content_lines.append(fit_to_width(pad + text, inner_width))
        content_styles.append(style)

    return Panel(
        top=top_border(label, inner_width),
        bottom=bottom_border(inner_width),
        content_lines=tuple(content_lines),
        content_styles=tuple(content_styles),
        width=width,
    )


def list_window(selected_index, total_items, viewport_height):
    """
    Compute the slice of a list to show so the selection stays centred.

    The window is clamped so it never runs past either end of the list.

    Args:
        selected_index: Index of the selected item
        total_items: Number of items in the list
        viewport_height: Number of rows available

    Returns:
        tuple: (start, end) indices for slicing the list
    """
    viewport_height = max(0, viewport_height)
    max_start = max(0, total_items - viewport_height)
    start = max(0, min(selected_index - viewport_height // 2, max_start))
    return start, min(total_items, start + viewport_height)
