"""Keyboard input decoding for the curaq-tui client.

The terminal is put in cbreak mode, so stdin delivers raw bytes: plain
characters, control codes and escape sequences for arrows and paging
keys. This module turns those bytes into key names the Navigator
understands.
"""

import codecs
import logging
import os

ESCAPE_SEQUENCES = {
    '\x1b[A': 'up',
    '\x1b[B': 'down',
    '\x1b[C': 'right',
    '\x1b[D': 'left',
    '\x1bOA': 'up',
    '\x1bOB': 'down',
    '\x1bOC': 'right',
    '\x1bOD': 'left',
    '\x1b[5~': 'page_up',
    '\x1b[6~': 'page_down',
    '\x1b[H': 'home',
    '\x1b[F': 'end',
    '\x1b[1~': 'home',
    '\x1b[4~': 'end',
    '\x1b[3~': 'delete',
}

CONTROL_KEYS = {
    '\r': 'enter',
    '\n': 'enter',
    ' ': 'space',
    '\t': 'tab',
    '\x7f': 'backspace',
    '\x08': 'backspace',
    '\x12': 'ctrl_r',
}


def _sequence_end(text, start):
    """Index just past the escape sequence starting at text[start], or None."""
    if start + 1 >= len(text) or text[start + 1] not in '[O':
        return None
    if text[start + 1] == 'O':
        return min(start + 3, len(text))
    # CSI: parameters and intermediates, then a final byte in @..~
    i = start + 2
    while i < len(text) and not ('@' <= text[i] <= '~'):
        i += 1
    return min(i + 1, len(text))


def decode_keys(text):
    """
    Split a chunk of terminal input into key names.

    Args:
        text: Decoded characters read from the terminal

    Returns:
        list[str]: Names such as "up", "enter", "escape", "page_down", or
        the character itself for printable input
    """
    keys = []
    i = 0
    while i < len(text):
        char = text[i]
        if char == '\x1b':
            end = _sequence_end(text, i)
            if end is None:
                keys.append('escape')
                i += 1
                continue
            name = ESCAPE_SEQUENCES.get(text[i:end])
            if name:
                keys.append(name)
            # Unrecognised sequences (bracketed paste markers, F-keys) are dropped
            i = end
            continue

        if char in CONTROL_KEYS:
            keys.append(CONTROL_KEYS[char])
        elif char.isprintable():
            keys.append(char)
        i += 1
    return keys


class KeyReader:
    """Reads whatever is waiting on a file descriptor and reports keys."""

    def __init__(self, fd, on_key, on_eof=None):
        self.fd = fd
        self.on_key = on_key
        self.on_eof = on_eof
        self._decoder = codecs.getincrementaldecoder('utf-8')(errors='replace')

    def read_available(self):
        """Event loop reader callback for the terminal's file descriptor."""
        try:
            data = os.read(self.fd, 1024)
        except (BlockingIOError, InterruptedError):
            return
        except OSError as e:
            logging.error(f"Reading keyboard input failed: {e}")
            data = b''

        if not data:
            if self.on_eof:
                self.on_eof()
            return

        for key in decode_keys(self._decoder.decode(data)):
            self.on_key(key)
