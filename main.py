#!/usr/bin/env python3
# /panedit/main.py
"""
panedit Main Entry Point
========================

Primary entry point for launching the panedit editor. It performs:
1) Environment Loading: reads ~/.config/panedit/.env early.
2) Configuration & Logging: loads config and initializes logging.
3) Curses Wrapper: safely initializes/tears down curses.
4) Application Run: opens the files given on the command line and runs the editor.
"""

from __future__ import annotations

import curses
import locale
import logging
import os
import signal
import sys
from pathlib import Path
from typing import Any

from dotenv import load_dotenv


# --- Step 1: Load Environment Variables from the User's Config Directory ---
load_dotenv(dotenv_path=Path.home() / ".config" / "panedit" / ".env")

# --- Step 2: Logging and Configuration Setup ---
try:
    from panedit.utils.logging_config import setup_logging
    from panedit.utils.utils import load_config

    config: dict[str, Any] = load_config()
    setup_logging(config)
    logger = logging.getLogger("panedit")
except Exception as e:
    print(f"FATAL: Could not initialize configuration or logging system: {e}", file=sys.stderr)
    sys.exit(1)

from panedit.core.Editor import Editor  # noqa: E402


def _resolve_cli_paths(argv: list[str]) -> list[str]:
    """Expands ``~`` in the file arguments; the files need not exist."""
    return [str(Path(raw.strip()).expanduser()) for raw in argv[1:] if raw.strip()]


# --- Step 3: Curses Application Runner ---
def main_app_runner(stdscr: curses.window, config: dict[str, Any], files: list[str]) -> None:
    """
    Target for `curses.wrapper`. Sets up the terminal and runs the editor.

    Args:
        stdscr: Curses standard screen window provided by wrapper.
        config: Application configuration dict.
        files: Paths to open, one pane each.
    """
    try:
        curses.set_escdelay(25)
    except curses.error:
        os.environ.setdefault("ESCDELAY", "25")

    stdscr.keypad(True)
    editor = Editor(stdscr, config)

    # Ignore terminal suspension (Ctrl+Z).
    if hasattr(signal, "SIGTSTP"):
        signal.signal(signal.SIGTSTP, signal.SIG_IGN)

    editor.open_files(files)
    editor.run()


def start() -> None:
    """Initializes locale and runs the curses application via wrapper."""
    logger.info("panedit starting up...")

    try:
        locale.setlocale(locale.LC_ALL, "")
    except locale.Error:
        logger.warning("Could not set system locale. Character rendering may be affected.")

    files = _resolve_cli_paths(sys.argv)

    try:
        curses.wrapper(main_app_runner, config, files)
        logger.info("panedit shut down gracefully.")
    except Exception:
        logger.critical("Unhandled exception at the top level.", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    start()
