# tests/conftest.py
"""Pytest configuration with shared fixtures for the panedit editor tests."""

from __future__ import annotations

import tempfile
from pathlib import Path
from typing import Any, Generator
from unittest.mock import MagicMock, patch

import pytest

from panedit.core.CursorController import CursorController
from panedit.core.TextBuffer import TextBuffer
from panedit.integrations.Indentation import IndentationProvider


class CursesError(Exception):
    """Stand-in for `curses.error` inside the patched UI modules."""


def make_curses_mock() -> MagicMock:
    """Build a `curses` mock with the constants used by the render surface."""
    curses_mock = MagicMock()
    curses_mock.error = CursesError
    curses_mock.has_colors.return_value = True
    curses_mock.color_pair.side_effect = lambda pair_id: pair_id << 8
    constants = {
        "COLORS": 256,
        "COLOR_PAIRS": 256,
        "A_NORMAL": 0,
        "A_BOLD": 1,
        "A_DIM": 2,
        "A_REVERSE": 4,
        "ACS_HLINE": ord("-"),
        "ACS_VLINE": ord("|"),
        "ACS_ULCORNER": ord("+"),
        "ACS_URCORNER": ord("+"),
        "ACS_LLCORNER": ord("+"),
        "ACS_LRCORNER": ord("+"),
        "COLOR_BLACK": 0,
        "COLOR_RED": 1,
        "COLOR_GREEN": 2,
        "COLOR_YELLOW": 3,
        "COLOR_BLUE": 4,
        "COLOR_MAGENTA": 5,
        "COLOR_CYAN": 6,
        "COLOR_WHITE": 7,
    }
    for name, value in constants.items():
        setattr(curses_mock, name, value)
    return curses_mock


# --- Automatic mocking of curses in the render surface ---
@pytest.fixture(autouse=True)
def mock_curses_functions() -> Generator[MagicMock, None, None]:
    """Replace `curses` as seen by `panedit.ui.DrawScreen`.

    Curses calls such as `has_colors()` fail until `initscr()` has run, so
    every test gets a mocked module instead.

    Yields:
        MagicMock: The mock, for assertions on curses calls.
    """
    curses_mock = make_curses_mock()
    with patch("panedit.ui.DrawScreen.curses", curses_mock):
        yield curses_mock


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep user environment variables out of the tests."""
    monkeypatch.delenv("PANEDIT_NANORC_DIR", raising=False)
    monkeypatch.delenv("PANEDIT_KEYTRACE", raising=False)


# --- Base fixtures for curses and configuration ---
@pytest.fixture
def mock_stdscr() -> MagicMock:
    """Create a mock of the `curses` stdscr with terminal size (24, 80)."""
    stdscr = MagicMock()
    stdscr.getmaxyx.return_value = (24, 80)
    return stdscr


@pytest.fixture
def mock_config() -> dict[str, dict[str, Any]]:
    """Provide a baseline configuration that touches no user files."""
    return {
        "editor": {
            "tab_size": 4,
            "indent_size": 4,
            "use_spaces": True,
            "use_system_clipboard": False,
            "insert_mode": True,
            "expand_tabs_on_open": True,
            "strict_invariants": False,
        },
        "layout": {"border_width": 1, "status_bar": True},
        "highlight": {"rules_dir": "", "builtin_rules": True},
        "colors": {},
        "keybindings": {},
        "logging": {"log_to_console": False},
    }


# --- Core fixtures ---
@pytest.fixture
def sample_text() -> list[str]:
    """Provide a sample code snippet as a list of lines."""
    return [
        "def hello_world():",
        "    # This is a comment",
        "    print('Hello, world!')",
        "    return True",
        "",
    ]


@pytest.fixture
def buffer(sample_text: list[str]) -> TextBuffer:
    return TextBuffer("hello.py", sample_text)


@pytest.fixture
def controller(buffer: TextBuffer) -> CursorController:
    """A controller over `buffer` with a 10x40 viewport and 4-space indents."""
    ctrl = CursorController(buffer, IndentationProvider({"editor": {"indent_size": 4}}))
    ctrl.set_viewport_size(10, 40)
    return ctrl


# --- Filesystem fixtures ---
@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory with a text file and a Python file."""
    with tempfile.TemporaryDirectory() as tmp_dir:
        tmp_path = Path(tmp_dir)
        (tmp_path / "file1.txt").write_text("Content of file1\nsecond line\n")
        (tmp_path / "file2.py").write_text("print('Hello, world!')")
        yield tmp_path
