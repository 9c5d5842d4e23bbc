# panedit/core/Editor.py
"""panedit.core.Editor
=====================

The panedit application object.

``Editor`` owns the collaborators (indentation, clipboard, file store,
syntax highlighter), the pane layout, the curses render surface and the key
reader, and runs the single-threaded main loop:

    read key -> global action or focused pane -> layout/cursor -> redraw

A key is fully processed, including any file or clipboard access, before
the next one is read. Failures of collaborators are caught where they are
called, logged, and reported on the status line; they never stop the loop.

Global actions are bound in the ``[keybindings]`` section:

- ``quit``: leave the editor (asks for a second press with unsaved buffers).
- ``save_file``: write the focused buffer.
- ``new_file``: open an empty buffer in a new pane.
- ``close_pane``: close the focused pane (second press for unsaved buffers).
- ``next_pane``: cycle focus.
- ``help``: toggle the help pane docked at the bottom.
"""

import logging
from typing import Any, Callable, Iterable, Optional

from panedit.core.CursorController import CursorController, KeyEvent
from panedit.core.errors import CollaboratorError
from panedit.core.Highlighter import SyntaxHighlighter
from panedit.core.TextBuffer import TextBuffer
from panedit.integrations.Clipboard import ClipboardProvider
from panedit.integrations.FileStore import FileStore
from panedit.integrations.Indentation import IndentationProvider
from panedit.ui.DrawScreen import DrawScreen
from panedit.ui.KeyBinder import KeyBinder
from panedit.ui.PaneLayout import PaneLayout
from panedit.ui.panes import Anchors, Pane, Rect


HELP_HEIGHT = 10

HELP_TEXT = [
    "Movement: arrows, Home/End, PageUp/PageDown",
    "Editing: type to insert, Enter splits, Backspace/Delete join lines",
    "Tab indents to the next stop, Insert toggles insert/overwrite",
    "Ctrl+V pastes from the clipboard",
]


## ==================== Editor Class ====================
class Editor:
    """Class Editor
    =========================
    Application object wiring panes, collaborators and the terminal together.

    Attributes:
        config (dict[str, Any]): Merged configuration.
        layout (PaneLayout): All panes and the focus pointer.
        highlighter (SyntaxHighlighter): Loaded nanorc rulesets.
        drawer (Optional[DrawScreen]): Render surface; None when headless.
        keybinder (KeyBinder): Key reader and global keybindings.
        status_message (str): Message shown on the status line.
        running (bool): The main loop runs while this is True.
    """

    def __init__(self, stdscr: Any, config: dict[str, Any]) -> None:
        self.stdscr = stdscr
        self.config = config
        editor_cfg = config.get("editor", {})
        layout_cfg = config.get("layout", {})

        self.strict: bool = bool(editor_cfg.get("strict_invariants", False))
        self.default_insert_mode: bool = bool(editor_cfg.get("insert_mode", True))
        self.show_status_bar: bool = bool(layout_cfg.get("status_bar", True))

        self.indentation = IndentationProvider(config)
        self.clipboard = ClipboardProvider(config)
        self.file_store = FileStore(config, self.indentation)
        self.highlighter = SyntaxHighlighter(config)
        self.layout = PaneLayout(border_width=int(layout_cfg.get("border_width", 1)))
        self.drawer: Optional[DrawScreen] = DrawScreen(stdscr, config) if stdscr is not None else None
        self.keybinder = KeyBinder(config, stdscr)

        self.status_message: str = "Ready"
        self.running: bool = True
        self.help_pane: Optional[Pane] = None
        self._pending_confirmation: Optional[str] = None

        self.global_actions: dict[str, Callable[[], bool]] = {
            "quit": self.quit,
            "save_file": self.save_file,
            "new_file": self.new_file,
            "close_pane": self.close_pane,
            "next_pane": self.next_pane,
            "help": self.toggle_help,
        }
        if self.drawer is not None:
            self.handle_resize()
        logging.info("Editor initialized with %d rulesets", len(self.highlighter.rulesets))

    # --- Pane creation ---

    def _editor_panes(self) -> list[Pane]:
        return [pane for pane in self.layout.panes if pane.editor is not None]

    def open_buffer(self, buffer: TextBuffer) -> Pane:
        """Adds a focused pane for ``buffer``.

        The first editor pane fills the screen; later ones dock on the right
        and take half of the width still free.
        """
        controller = CursorController(buffer, self.indentation, self.clipboard, strict=self.strict)
        if self._editor_panes():
            anchors = Anchors(top=True, bottom=True, right=True)
        else:
            anchors = Anchors.all()
        pane = Pane.for_buffer(buffer, controller, anchors=anchors)
        return self.layout.add_pane(pane, focus=True)

    def open_file(self, path: str) -> Pane:
        """Opens ``path`` in a new pane; unreadable files open as empty buffers."""
        try:
            contents = self.file_store.read_file(path)
            buffer = TextBuffer(
                path,
                contents.lines,
                insert_mode=self.default_insert_mode,
                encoding=contents.encoding,
                strict=self.strict,
            )
            self.status_message = f"Opened {path}"
        except CollaboratorError as e:
            logging.warning(f"Opening '{path}' as an empty buffer: {e}")
            buffer = TextBuffer(path, insert_mode=self.default_insert_mode, strict=self.strict)
            self.status_message = f"New file: {path}"
        return self.open_buffer(buffer)

    def open_files(self, paths: Iterable[str]) -> None:
        for path in paths:
            self.open_file(path)
        if not self.layout.panes:
            self.new_file()

    # --- Global actions ---

    def new_file(self) -> bool:
        self.open_buffer(TextBuffer("", insert_mode=self.default_insert_mode, strict=self.strict))
        self.status_message = "New buffer"
        return True

    def save_file(self) -> bool:
        pane = self.layout.focused
        if pane is None or pane.editor is None:
            self.status_message = "Nothing to save"
            return True
        buffer = pane.editor.buffer
        if not buffer.name:
            self.status_message = "Buffer has no file name"
            return True
        try:
            self.file_store.write_file(buffer.name, buffer.lines, buffer.encoding)
        except CollaboratorError as e:
            logging.error(f"Save failed: {e}")
            self.status_message = f"Save failed: {e}"
            return True
        buffer.modified = False
        self.status_message = f"Saved {buffer.name}"
        return True

    def _confirmed(self, action: str, unsaved: bool, prompt: str) -> bool:
        """True when ``action`` may proceed; arms a second press for unsaved work."""
        if not unsaved or self._pending_confirmation == action:
            self._pending_confirmation = None
            return True
        self._pending_confirmation = action
        self.status_message = prompt
        return False

    def close_pane(self) -> bool:
        pane = self.layout.focused
        if pane is None:
            return False
        unsaved = pane.editor is not None and pane.editor.buffer.modified
        if not self._confirmed("close_pane", unsaved, "Unsaved changes. Press again to close."):
            return True
        if pane is self.help_pane:
            self.help_pane = None
        self.layout.remove_pane(pane)
        if not self._editor_panes():
            self.running = False
        return True

    def next_pane(self) -> bool:
        return self.layout.next()

    def toggle_help(self) -> bool:
        if self.help_pane is not None:
            self.layout.remove_pane(self.help_pane)
            self.help_pane = None
            return True
        self.help_pane = Pane.notice(
            self._build_help_lines(),
            label="Help",
            anchors=Anchors(bottom=True, left=True, right=True),
            fixed_height=HELP_HEIGHT,
        )
        self.layout.add_pane(self.help_pane, focus=True)
        return True

    def quit(self) -> bool:
        unsaved = any(pane.editor.buffer.modified for pane in self._editor_panes())
        if self._confirmed("quit", unsaved, "Unsaved changes. Press again to quit."):
            self.running = False
        return True

    def _build_help_lines(self) -> list[str]:
        def _pretty(spec: str) -> str:
            return "+".join(part.capitalize() if len(part) > 1 else part.upper() for part in spec.split("+"))

        lines = list(HELP_TEXT)
        for action, keys in sorted(self.keybinder.keybindings.items()):
            lines.append(f"{action.replace('_', ' ').capitalize():<14} {', '.join(_pretty(k) for k in keys)}")
        lines.append("Esc closes this pane")
        return lines

    # --- Event processing ---

    def handle_resize(self) -> bool:
        height, width = self.drawer.size()
        if self.show_status_bar:
            height -= 1
        self.layout.recalculate_layout(Rect(0, 0, max(0, width), max(0, height)))
        logging.debug(f"Window resized to {width}x{height}")
        return True

    def process_key(self, event: Optional[KeyEvent]) -> bool:
        """Handles one key event. Returns True if a redraw is needed."""
        if event is None or not event.name:
            return False
        if event.name == "resize":
            return self.handle_resize()

        self.layout.last_error = ""
        action = self.keybinder.lookup(event)
        if action != self._pending_confirmation:
            self._pending_confirmation = None

        if action is not None:
            handler = self.global_actions.get(action)
            if handler is None:
                logging.warning("No handler for bound action %r", action)
                return False
            return handler()

        if event.name == "escape" and self.help_pane is not None and self.layout.focused is self.help_pane:
            return self.toggle_help()

        return self.layout.handle_key(event)

    # --- Drawing ---

    def status_text(self) -> tuple[str, str, bool]:
        """Left part, right part and error flag of the status line."""
        pane = self.layout.focused
        left = " panedit"
        if pane is not None and pane.editor is not None:
            buffer = pane.editor.buffer
            cursor = pane.editor.controller.cursor
            left = (
                f" {buffer.name or '[No Name]'}{'*' if buffer.modified else ''} | "
                f"Ln {cursor.row + 1}/{buffer.line_count} | Col {cursor.column + 1} | "
                f"{'INS' if buffer.insert_mode else 'OVR'}"
            )
        if self.layout.last_error:
            return left, self.layout.last_error, True
        message = pane.message() if pane is not None else ""
        return left, message or self.status_message, False

    def redraw(self) -> None:
        drawer = self.drawer
        if drawer is None:
            return
        drawer.begin_frame()
        if not drawer.too_small():
            self.layout.draw_all(drawer, self.highlighter)
            if self.show_status_bar:
                left, right, error = self.status_text()
                drawer.draw_status_bar(left, right, error)
            self.layout.update_cursor(drawer)
        drawer.end_frame()

    def run(self) -> None:
        """Main loop: redraw, read one key, process it; until ``running`` is False."""
        logging.info("Entering main loop")
        while self.running:
            self.redraw()
            event = self.keybinder.get_key_input()
            self.process_key(event)
        logging.info("Main loop finished")
