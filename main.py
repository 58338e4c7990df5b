#!/usr/bin/env python3
# /tuiedit/main.py
"""
tuiedit Main Entry Point
========================

This script is the primary entry point for launching the editor. It performs:
1) Environment Loading: reads ~/.config/tuiedit/.env early (locale, key tracing).
2) Path Setup: ensures the tuiedit package is importable from a source checkout.
3) Configuration & Logging: loads config and initializes logging ASAP.
4) Core Import: imports the Editor class after logging is ready.
5) Curses Wrapper: safely initializes/tears down curses to avoid terminal corruption.
6) Application Run: wires Editor to the curses input source and DrawScreen.
"""

from __future__ import annotations

import curses
import locale
import logging
import os
import signal
import sys
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv

# --- Step 1: Load Environment Variables from the User's Config Directory ---
try:
    user_config_dir = Path(os.environ.get("TUIEDIT_CONFIG_DIR") or Path.home() / ".config" / "tuiedit")
    load_dotenv(dotenv_path=user_config_dir / ".env")
except (OSError, RuntimeError):
    # No HOME; defaults apply.
    pass

# --- Step 2: Set up the Python Path ---
project_root = os.path.dirname(os.path.abspath(__file__))
source_root = os.path.join(project_root, "src")
if os.path.isdir(source_root) and source_root not in sys.path:
    sys.path.insert(0, source_root)

# --- Step 3: Immediate Logging and Configuration Setup ---
try:
    from tuiedit.utils.logging_config import setup_logging
    from tuiedit.utils.utils import load_config

    config: dict[str, Any] = load_config()
    setup_logging(config)
    logger = logging.getLogger("tuiedit")
except Exception as e:
    # Logging is not ready; print to stderr and exit.
    print(f"FATAL: Could not initialize configuration or logging system: {e}", file=sys.stderr)
    import traceback
    traceback.print_exc()
    sys.exit(1)

# --- Step 4: Import the Core Application ---
try:
    from tuiedit.core.Editor import Editor
    from tuiedit.integrations.Localization import Localization
    from tuiedit.ui.DrawScreen import DrawScreen
    from tuiedit.ui.KeyBinder import CursesInputSource
    from tuiedit.ui.TerminalAppMode import TerminalAppMode
except ImportError as e:
    logger.critical("Failed to import a critical application component: %s", e, exc_info=True)
    sys.exit(1)


def _resolve_cli_path(argv: list[str]) -> Optional[Path]:
    """
    Resolve an optional CLI path from argv[1], expanded to a user path.
    The file does NOT need to exist on disk; a missing file names the new
    document so Save writes there.
    """
    if len(argv) <= 1:
        return None
    raw = argv[1].strip()
    if not raw:
        return None
    return Path(raw).expanduser()


def _preload_cli_document(editor: Editor, candidate: Path) -> None:
    """Opens ``candidate`` if it exists, otherwise names the empty buffer after it."""
    abs_path = str(candidate.resolve())
    if candidate.exists():
        editor.open_file(abs_path)
    else:
        editor.name_new_document(abs_path)
        logger.info("Starting new document %s", abs_path)


# --- Step 5: Curses Application Runner ---
def main_app_runner(stdscr: curses.window, config: dict[str, Any], file_to_open: Optional[Path]) -> None:
    """
    Target for `curses.wrapper`. Puts the terminal in application mode and runs the editor.

    Args:
        stdscr: Curses standard screen window provided by wrapper.
        config: Application configuration dict.
        file_to_open: Optional CLI path (may or may not exist on disk).
    """
    # Ignore terminal suspension (Ctrl+Z), typical for full-screen TUIs.
    if hasattr(signal, "SIGTSTP"):
        try:
            signal.signal(signal.SIGTSTP, signal.SIG_IGN)
        except (OSError, ValueError):
            pass

    terminal = TerminalAppMode(mouse_enabled=bool(config.get("mouse", {}).get("enabled", True)))
    terminal.enter(stdscr)
    try:
        localization = Localization(config.get("editor", {}).get("locale"))
        editor = Editor(config, localization)
        if file_to_open is not None:
            _preload_cli_document(editor, file_to_open)

        # Start the editor main event loop (runs until editor.running is False).
        editor.run(CursesInputSource(stdscr), DrawScreen(stdscr, config))
    finally:
        terminal.exit()


def start() -> None:
    """
    Initializes locale and runs the curses application via wrapper.
    Also toggles application keypad mode around the curses lifecycle so
    modified arrow keys reach the editor instead of the terminal.
    """
    logger.info("tuiedit starting up...")

    # Locale is important for proper character width/encoding behavior in curses.
    try:
        locale.setlocale(locale.LC_ALL, "")
    except locale.Error:
        logger.warning("Could not set system locale. Character rendering may be affected.")

    file_to_open = _resolve_cli_path(sys.argv)

    try:
        # \x1b[?1h → DECCKM (application cursor keys), \x1b= → DECKPAM (keypad application mode)
        sys.stdout.write("\x1b[?1h\x1b=")
        sys.stdout.flush()

        curses.wrapper(main_app_runner, config, file_to_open)

        logger.info("tuiedit shut down gracefully.")
    except Exception:
        logger.critical("Unhandled exception at the top level.", exc_info=True)
        sys.exit(1)
    finally:
        # \x1b[?1l → normal cursor keys, \x1b> → keypad numeric mode
        try:
            sys.stdout.write("\x1b[?1l\x1b>")
            sys.stdout.flush()
        except OSError:
            pass


if __name__ == "__main__":
    start()
