"""Clipboard and browser integration."""

import asyncio
import logging
import platform


def _clipboard_command():
    system = platform.system()
    if system == "Darwin":
        return ["pbpaste"]
    if system == "Windows":
        return ["powershell", "-command", "Get-Clipboard"]
    return ["xclip", "-selection", "clipboard", "-o"]


def _open_command(url):
    system = platform.system()
    if system == "Darwin":
        return ["open", url]
    if system == "Windows":
        return ["cmd", "/c", "start", "", url]
    return ["xdg-open", url]


async def read_clipboard():
    """
    Read the system clipboard as text.

    Returns:
        str: Clipboard text stripped of surrounding whitespace, or "" if
        the clipboard tool is missing or fails
    """
    try:
        process = await asyncio.create_subprocess_exec(
            *_clipboard_command(),
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.DEVNULL,
        )
        stdout, _ = await process.communicate()
    except (OSError, FileNotFoundError):
        return ""
    if process.returncode != 0:
        return ""
    return stdout.decode("utf-8", errors="replace").strip()


async def open_in_browser(url):
    """
    Open a URL with the platform's default handler.

    The opener is awaited so its process is reaped; it normally hands the
    URL to a running browser and exits straight away.

    Returns:
        bool: True if the opener ran and exited successfully
    """
    try:
        process = await asyncio.create_subprocess_exec(
            *_open_command(url),
            stdout=asyncio.subprocess.DEVNULL,
            stderr=asyncio.subprocess.DEVNULL,
        )
        returncode = await process.wait()
    except (OSError, FileNotFoundError) as e:
        logging.warning(f"Could not open {url}: {e}")
        return False
    if returncode != 0:
        logging.warning(f"Opener for {url} exited with status {returncode}")
        return False
    return True
