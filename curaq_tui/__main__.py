"""Main entry point for the curaq-tui client."""

import argparse
import asyncio
import logging
import os
import sys
import termios
import tty
from rich.console import Console
from rich.prompt import Prompt
from . import config, ui
from .api_client import CuraQClient
from .app import CuraQApp
from .settings_manager import SettingsStore, mask_token, resolve_token
from .themes import get_theme, theme_names

HELP_EPILOG = f"""Environment Variables:
  {config.TOKEN_ENV_VAR}    API token (overrides saved token)"""


def setup_logging():
    """Set up file-based logging for the application."""
    os.makedirs(config.LOG_DIR, exist_ok=True)

    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(levelname)s - %(name)s - %(message)s',
        filename=config.LOG_FILE,
        filemode='a',
        force=True,
    )
    logging.info("--- Application Starting ---")


def build_parser():
    parser = argparse.ArgumentParser(
        prog="curaq-tui",
        description="curaq-tui - CuraQ TUI Client",
        epilog=HELP_EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
        add_help=False,
    )
    parser.add_argument(
        '-h', '--help',
        action='help',
        help='Show this help message and exit'
    )

    subparsers = parser.add_subparsers(dest="command", metavar="command")
    subparsers.add_parser("setup", help="Configure API token")
    subparsers.add_parser("config", help="Show current configuration")

    theme_parser = subparsers.add_parser("theme", help="Set theme, or pick one interactively")
    theme_parser.add_argument("name", nargs='?', help=f"One of: {', '.join(theme_names())}")

    start_parser = subparsers.add_parser(
        "start-screen", help="Set start screen (unread, read); filters the loaded articles by read state")
    start_parser.add_argument("mode", nargs='?')

    subparsers.add_parser("clear", help="Clear saved token")
    subparsers.add_parser("help", help="Show this help message")
    return parser


def prompt_for_token(console, store):
    """
    Ask for an API token and store it.

    Returns:
        str or None: The token, or None when the answer was empty
    """
    theme = get_theme(store.load().theme)
    for row in ui.logo_rows(theme):
        console.print(row)
    console.print()
    console.print("Welcome to curaq-tui!", style=f"bold {theme.primary}")
    console.print()
    console.print("No API token configured.", style=theme.text_dim)
    console.print("Please enter your CuraQ API token to get started.", style=theme.text_dim)
    console.print()

    token = Prompt.ask("Token", console=console, password=True, default="", show_default=False).strip()
    if not token:
        console.print("\n✗ No token provided", style=theme.error)
        return None

    store.update(token=token)
    console.print(f"\n✓ Token saved to {store.path}", style=theme.success)
    return token


def cmd_config(console, store, environ=None):
    token, source = resolve_token(store, environ)
    console.print("curaq-tui Configuration\n", markup=False)
    if token:
        if source == "env":
            label = f"Environment variable ({config.TOKEN_ENV_VAR})"
        else:
            label = f"Config file ({store.path})"
        console.print(f"Token source: {label}", markup=False)
        console.print(f"Token: {mask_token(token)}", markup=False)
    else:
        console.print("No token configured")
        console.print('\nRun "curaq-tui setup" to configure your token')

    settings = store.load()
    console.print(f"\nTheme: {settings.theme}", markup=False)
    console.print(f"Start screen: {settings.start_screen}", markup=False)


def cmd_theme(console, store, name):
    if name not in theme_names():
        console.print(f"✗ Unknown theme: {name}", markup=False)
        console.print(f"Available: {', '.join(theme_names())}", markup=False)
        return False
    store.update(theme=name)
    console.print(f"✓ Theme set to: {name}", markup=False)
    return True


def cmd_start_screen(console, store, mode):
    if not mode:
        console.print(f"Current start screen: {store.load().start_screen}", markup=False)
        console.print("The list shows loaded articles whose read state matches.", markup=False)
        console.print("\nUsage: curaq-tui start-screen <unread|read>", markup=False)
        return False
    if mode not in config.START_SCREENS:
        console.print(f"✗ Invalid start screen: {mode}", markup=False)
        console.print(f"Available: {', '.join(config.START_SCREENS)}", markup=False)
        return False
    store.update(start_screen=mode)
    console.print(f"✓ Start screen set to: {mode}", markup=False)
    return True


def cmd_clear(console, store):
    store.update(token=None)
    console.print("✓ Token cleared")


async def run_in_terminal(app):
    """Run the app with the terminal in cbreak mode, restoring it afterwards."""
    fd = sys.stdin.fileno()
    old_settings = termios.tcgetattr(fd)

    # Hide cursor and clear the screen
    sys.stdout.write('\033[?25l\033[2J\033[H')
    sys.stdout.flush()

    try:
        tty.setcbreak(fd)
        await app.run()
    finally:
        sys.stdout.write('\033[?25h')
        sys.stdout.flush()
        termios.tcsetattr(fd, termios.TCSADRAIN, old_settings)


async def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    console = Console()
    store = SettingsStore()

    if args.command == "help":
        parser.print_help()
        return
    if args.command == "setup":
        prompt_for_token(console, store)
        return
    if args.command == "config":
        cmd_config(console, store)
        return
    if args.command == "theme" and args.name:
        cmd_theme(console, store, args.name)
        return
    if args.command == "start-screen":
        cmd_start_screen(console, store, args.mode)
        return
    if args.command == "clear":
        cmd_clear(console, store)
        return

    if not sys.stdin.isatty():
        console.print("[red]curaq-tui needs an interactive terminal.[/red]")
        sys.exit(1)

    setup_logging()

    theme_picker_only = args.command == "theme"
    token = None
    if not theme_picker_only:
        token, _source = resolve_token(store)
        if not token:
            token = prompt_for_token(console, store)
            if not token:
                return

    app = CuraQApp(CuraQClient(token), store, store.load(), theme_picker_only=theme_picker_only)
    await run_in_terminal(app)


def cli():
    """Synchronous entry point for the command-line interface."""
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        pass
    except SystemExit as e:
        if e.code not in (None, 0):
            raise
    except Exception as e:
        logging.critical(f"Fatal error in application startup: {e}", exc_info=True)


if __name__ == "__main__":
    cli()
