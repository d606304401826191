"""Fixed-grid text layout helpers for the curaq-tui client.

Everything the renderer draws goes through these functions so that every
line lands on the terminal grid at a known width. Widths are measured in
terminal cells using a small, deliberately approximate classification:
wide East-Asian and emoji blocks take two cells, a handful of invisible
formatting characters take none, and everything else takes one.
"""

ELLIPSIS = "..."

# (first, last) code point ranges, inclusive
ZERO_WIDTH_RANGES = (
    (0xFE00, 0xFE0F),  # Variation selectors
    (0x200B, 0x200F),  # Zero-width spaces and direction marks
    (0x2028, 0x202F),  # Line/paragraph separators
    (0x2060, 0x206F),  # Word joiner and invisible operators
)

DOUBLE_WIDTH_RANGES = (
    # Emoji and symbols
    (0x1F300, 0x1F9FF),
    (0x2600, 0x26FF),
    (0x2700, 0x27BF),
    (0x23E9, 0x23FF),
    (0x1F600, 0x1F64F),
    (0x1F680, 0x1F6FF),
    # CJK and full-width forms
    (0x1100, 0x11FF),
    (0x3000, 0x9FFF),
    (0xAC00, 0xD7AF),
    (0xF900, 0xFAFF),
    (0xFE10, 0xFE1F),
    (0xFE30, 0xFE6F),
    (0xFF00, 0xFF60),
    (0xFFE0, 0xFFE6),
)


def _in_ranges(code, ranges):
    for first, last in ranges:
        if first <= code <= last:
            return True
    return False


def char_width(char: str) -> int:
    """
    Return the number of terminal cells a single character occupies.

    Args:
        char: A single code point

    Returns:
        int: 0, 1 or 2
    """
    code = ord(char)
    if _in_ranges(code, ZERO_WIDTH_RANGES):
        return 0
    if _in_ranges(code, DOUBLE_WIDTH_RANGES):
        return 2
    if code > 0xFFFF:
        # Anything outside the BMP is most likely an emoji
        return 2
    return 1


def display_width(text: str) -> int:
    """Return the total cell width of a string."""
    return sum(char_width(char) for char in text)


def _prefix_length(text, max_width):
    """Count the leading characters of text that fit in max_width cells."""
    width = 0
    count = 0
    for char in text:
        w = char_width(char)
        if width + w > max_width:
            break
        width += w
        count += 1
    return count


def truncate_to_width(text: str, max_width: int) -> str:
    """Cut text to the longest prefix that fits in max_width cells."""
    return text[:_prefix_length(text, max_width)]


def truncate_with_ellipsis(text: str, max_width: int) -> str:
    """
    Shorten text to max_width cells, marking the cut with an ellipsis.

    Text that already fits in max_width - 3 cells is returned untouched;
    otherwise three cells are reserved for the "..." suffix.

    Args:
        text: Text to shorten
        max_width: Maximum width in cells, ellipsis included

    Returns:
        str: The original text or a truncated prefix ending in "..."
    """
    available = max_width - len(ELLIPSIS)
    if display_width(text) <= available:
        return text
    return truncate_to_width(text, max(0, available)) + ELLIPSIS


def pad_to_width(text: str, target_width: int) -> str:
    """Right-pad text with spaces to target_width cells. Never truncates."""
    return text + " " * max(0, target_width - display_width(text))


def fit_to_width(text: str, width: int) -> str:
    """Truncate and pad text so it renders at exactly width cells."""
    return pad_to_width(truncate_to_width(text, width), width)


def wrap_to_width(text: str, max_width: int) -> list[str]:
    """
    Break text into lines of at most max_width cells.

    Wrapping is per character, not per word. The returned lines joined
    together give back the input unchanged.

    Args:
        text: Text to wrap (should not contain newlines)
        max_width: Maximum line width in cells

    Returns:
        list[str]: At least one line; [""] for empty input
    """
    lines = []
    current = ""
    current_width = 0
    for char in text:
        w = char_width(char)
        if current and current_width + w > max_width:
            lines.append(current)
            current = char
            current_width = w
        else:
            current += char
            current_width += w
    if current:
        lines.append(current)
    return lines or [""]


def process_text_content(text: str, max_width: int) -> list[str]:
    """
    Turn multi-line article text into fixed-width, pre-padded lines.

    Each source line is wrapped into as many physical lines as needed and
    every physical line is padded to max_width, so the reader can slice
    the result directly without re-measuring anything.

    Args:
        text: Raw article text
        max_width: Width of the reader's text area in cells

    Returns:
        list[str]: Lines that each render at max_width cells
    """
    processed = []
    blank = " " * max(0, max_width)

    for line in text.split("\n"):
        if not line:
            processed.append(blank)
            continue

        remaining = line
        while remaining:
            used = _prefix_length(remaining, max_width)
            if used == 0:
                # A single character wider than the whole line
                used = 1
            processed.append(pad_to_width(remaining[:used], max_width))
            remaining = remaining[used:]

    return processed
