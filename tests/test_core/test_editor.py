# tests/test_core/test_editor.py
"""Test suite for the `Editor` application object.
==================================================

1. Opening files: existing, missing and several files side by side.
2. Global actions: save, new, close, next pane, help and quit.
3. Key routing between global actions and the focused pane.
4. Status line content and the main loop.

Usage
-----
Run just this file:
    pytest tests/test_core/test_editor.py
"""

from pathlib import Path
from typing import Any
from unittest.mock import MagicMock, patch

import pytest

from panedit.core.CursorController import KeyEvent
from panedit.core.Editor import HELP_HEIGHT, Editor
from panedit.ui.panes import Rect


@pytest.fixture
def editor(mock_stdscr: MagicMock, mock_config: dict[str, Any]) -> Editor:
    return Editor(mock_stdscr, mock_config)


def type_text(editor: Editor, text: str) -> None:
    for ch in text:
        editor.process_key(KeyEvent.char(ch))


# --- Initialization ---

def test_initial_layout_reserves_status_row(editor: Editor) -> None:
    assert editor.layout.area == Rect(0, 0, 80, 23)
    assert editor.running is True
    assert editor.layout.panes == []


def test_status_bar_can_be_disabled(mock_stdscr: MagicMock, mock_config: dict[str, Any]) -> None:
    mock_config["layout"]["status_bar"] = False
    assert Editor(mock_stdscr, mock_config).layout.area == Rect(0, 0, 80, 24)


def test_headless_editor_has_no_drawer(mock_config: dict[str, Any]) -> None:
    editor = Editor(None, mock_config)
    assert editor.drawer is None
    editor.redraw()


# --- Opening files ---

class TestOpenFile:
    def test_existing_file(self, editor: Editor, temp_dir: Path) -> None:
        path = str(temp_dir / "file2.py")
        pane = editor.open_file(path)
        assert pane.editor.buffer.lines == ["print('Hello, world!')"]
        assert pane.editor.buffer.name == path
        assert editor.layout.focused is pane
        assert editor.status_message == f"Opened {path}"

    def test_missing_file_opens_empty_named_buffer(self, editor: Editor, tmp_path: Path) -> None:
        path = str(tmp_path / "new.txt")
        pane = editor.open_file(path)
        assert pane.editor.buffer.lines == [""]
        assert pane.editor.buffer.name == path
        assert editor.status_message == f"New file: {path}"

    def test_second_file_docks_right(self, editor: Editor, temp_dir: Path) -> None:
        first = editor.open_file(str(temp_dir / "file1.txt"))
        second = editor.open_file(str(temp_dir / "file2.py"))
        assert first.rect == Rect(0, 0, 40, 23)
        assert second.rect == Rect(40, 0, 40, 23)
        assert editor.layout.focused is second

    def test_no_paths_opens_scratch_buffer(self, editor: Editor) -> None:
        editor.open_files([])
        assert len(editor.layout.panes) == 1
        assert editor.layout.focused.editor.buffer.name == ""

    def test_buffers_follow_editor_settings(self, mock_stdscr: MagicMock, mock_config: dict[str, Any]) -> None:
        mock_config["editor"]["insert_mode"] = False
        mock_config["editor"]["strict_invariants"] = True
        editor = Editor(mock_stdscr, mock_config)
        editor.new_file()
        pane = editor.layout.focused
        assert pane.editor.buffer.insert_mode is False
        assert pane.editor.buffer.strict is True
        assert pane.editor.controller.strict is True


# --- Saving ---

class TestSave:
    def test_save_writes_buffer_and_clears_modified(self, editor: Editor, tmp_path: Path) -> None:
        path = tmp_path / "out.txt"
        editor.open_file(str(path))
        type_text(editor, "hi")
        assert editor.process_key(KeyEvent("ctrl+s")) is True
        assert path.read_text() == "hi"
        assert editor.layout.focused.editor.buffer.modified is False
        assert editor.status_message == f"Saved {path}"

    def test_save_failure_is_reported(self, editor: Editor, tmp_path: Path) -> None:
        editor.open_file(str(tmp_path))
        editor.save_file()
        assert editor.status_message.startswith("Save failed")
        assert editor.running is True

    def test_unnamed_buffer(self, editor: Editor) -> None:
        editor.new_file()
        editor.save_file()
        assert editor.status_message == "Buffer has no file name"

    def test_nothing_to_save(self, editor: Editor) -> None:
        editor.save_file()
        assert editor.status_message == "Nothing to save"


# --- Pane actions ---

class TestPaneActions:
    def test_next_pane_cycles_focus(self, editor: Editor) -> None:
        editor.new_file()
        first = editor.layout.focused
        editor.new_file()
        editor.process_key(KeyEvent("f6"))
        assert editor.layout.focused is first

    def test_close_unmodified_pane(self, editor: Editor) -> None:
        editor.new_file()
        editor.new_file()
        editor.process_key(KeyEvent("ctrl+w"))
        assert len(editor.layout.panes) == 1
        assert editor.running is True

    def test_close_modified_pane_needs_second_press(self, editor: Editor) -> None:
        editor.new_file()
        editor.new_file()
        type_text(editor, "x")
        editor.process_key(KeyEvent("ctrl+w"))
        assert len(editor.layout.panes) == 2
        assert "Press again" in editor.status_message
        editor.process_key(KeyEvent("ctrl+w"))
        assert len(editor.layout.panes) == 1

    def test_closing_last_editor_pane_stops_editor(self, editor: Editor) -> None:
        editor.new_file()
        editor.close_pane()
        assert editor.running is False

    def test_help_pane_toggle(self, editor: Editor) -> None:
        editor.new_file()
        main = editor.layout.focused
        editor.process_key(KeyEvent("f1"))
        help_pane = editor.help_pane
        assert help_pane is not None
        assert editor.layout.focused is help_pane
        assert help_pane.rect == Rect(0, 23 - HELP_HEIGHT, 80, HELP_HEIGHT)
        assert any("Save file" in line for line in help_pane.content.lines)
        assert main.rect.height == 23 - HELP_HEIGHT

        editor.process_key(KeyEvent("escape"))
        assert editor.help_pane is None
        assert editor.layout.focused is main
        assert main.rect.height == 23

    def test_help_keys_scroll_help_not_buffer(self, editor: Editor) -> None:
        editor.new_file()
        editor.toggle_help()
        editor.process_key(KeyEvent("down"))
        type_text(editor, "abc")
        assert editor.layout.panes[0].editor.buffer.lines == [""]


# --- Key routing ---

class TestProcessKey:
    def test_malformed_events(self, editor: Editor) -> None:
        assert editor.process_key(None) is False
        assert editor.process_key(KeyEvent()) is False

    def test_plain_keys_reach_focused_pane(self, editor: Editor) -> None:
        editor.new_file()
        type_text(editor, "ab")
        editor.process_key(KeyEvent("enter"))
        assert editor.layout.focused.editor.buffer.lines == ["ab", ""]

    def test_resize_event_relayouts(self, editor: Editor, mock_stdscr: MagicMock) -> None:
        editor.new_file()
        pane = editor.layout.focused
        mock_stdscr.getmaxyx.return_value = (30, 100)
        assert editor.process_key(KeyEvent("resize")) is True
        assert pane.rect == Rect(0, 0, 100, 29)

    def test_pane_failure_shows_error(self, editor: Editor) -> None:
        editor.new_file()
        editor.layout.focused.editor.controller.handle_key = MagicMock(side_effect=RuntimeError("bad"))
        editor.process_key(KeyEvent("down"))
        left, right, error = editor.status_text()
        assert error is True
        assert right == "Error: bad"
        editor.layout.focused.editor.controller.handle_key = MagicMock(return_value=False)
        editor.process_key(KeyEvent("down"))
        assert editor.status_text()[2] is False

    def test_unhandled_bound_action(self, mock_stdscr: MagicMock, mock_config: dict[str, Any]) -> None:
        mock_config["keybindings"] = {"frobnicate": "f9"}
        editor = Editor(mock_stdscr, mock_config)
        assert editor.process_key(KeyEvent("f9")) is False


# --- Quit ---

class TestQuit:
    def test_quit_without_changes(self, editor: Editor) -> None:
        editor.new_file()
        editor.process_key(KeyEvent("ctrl+q"))
        assert editor.running is False

    def test_quit_with_changes_needs_confirmation(self, editor: Editor) -> None:
        editor.new_file()
        type_text(editor, "x")
        editor.process_key(KeyEvent("ctrl+q"))
        assert editor.running is True
        editor.process_key(KeyEvent("left"))
        editor.process_key(KeyEvent("ctrl+q"))
        assert editor.running is True
        editor.process_key(KeyEvent("ctrl+q"))
        assert editor.running is False


# --- Status line and drawing ---

class TestStatusAndDrawing:
    def test_status_text_describes_focused_buffer(self, editor: Editor, temp_dir: Path) -> None:
        path = str(temp_dir / "file1.txt")
        editor.open_file(path)
        editor.process_key(KeyEvent("down"))
        editor.process_key(KeyEvent("insert"))
        left, right, error = editor.status_text()
        assert left == f" {path} | Ln 2/3 | Col 1 | OVR"
        assert right == "Overwrite"
        assert error is False

    def test_status_text_without_panes(self, editor: Editor) -> None:
        assert editor.status_text() == (" panedit", "Ready", False)

    def test_redraw_paints_panes_status_and_cursor(self, editor: Editor) -> None:
        editor.new_file()
        with (
            patch.object(editor.drawer, "draw_pane") as draw_pane,
            patch.object(editor.drawer, "draw_status_bar") as draw_status_bar,
            patch.object(editor.drawer, "place_cursor") as place_cursor,
        ):
            editor.redraw()
        draw_pane.assert_called_once()
        draw_status_bar.assert_called_once()
        place_cursor.assert_called_once_with(1, 1, True)

    def test_run_processes_keys_until_quit(self, editor: Editor) -> None:
        editor.new_file()
        keys = [KeyEvent.char("h"), None, KeyEvent.char("i"), KeyEvent("ctrl+q"), KeyEvent("ctrl+q")]
        with (
            patch.object(editor.keybinder, "get_key_input", side_effect=keys),
            patch.object(editor, "redraw") as redraw,
        ):
            editor.run()
        assert editor.running is False
        assert editor.layout.panes[0].editor.buffer.lines == ["hi"]
        assert redraw.call_count == len(keys)
