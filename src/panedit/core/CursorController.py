# panedit/core/CursorController.py
"""panedit.core.CursorController
===============================

Cursor and viewport handling for one editor pane.

The ``CursorController`` owns the cursor coordinates and the scrolled window
of a single pane bound to a ``TextBuffer``. It translates logical key events
into buffer mutations and cursor moves, then restores the scroll invariant:

    scroll_row <= cursor.row <= scroll_row + height - 1

Every key performs exactly one of: navigation (cursor and scroll only),
a structural edit (enter, backspace, delete), indentation (tab), literal
character input, paste, or the insert/overwrite toggle.

Columns are buffer columns. The horizontal scroll offset only shifts what
the pane displays, so ``cursor.column`` is already the absolute column used
for writing and for indentation stops. ``display_column`` maps a buffer
column to the screen cell it is drawn at (tabs, control characters and wide
glyphs take more than one cell); horizontal scrolling keeps the cursor cell
inside the viewport width.

Vertical moves clamp the column to the destination line and do not remember
the column held before the clamp.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Optional

from panedit.core.errors import CollaboratorError, InvariantViolation
from panedit.core.TextBuffer import TextBuffer, split_lines
from panedit.integrations.Indentation import IndentationProvider
from panedit.utils.logging_config import KEY_LOGGER


if TYPE_CHECKING:
    from panedit.integrations.Clipboard import ClipboardProvider


PAGE_STEP_RATIO = 0.9


@dataclass
class Cursor:
    """Cursor position inside a buffer (0-based)."""

    column: int = 0
    row: int = 0


@dataclass
class Viewport:
    """The visible window of a pane, in buffer coordinates.

    ``height`` and ``width`` are the content size of the pane (inside its
    border); the layout engine updates them on every recomputation.
    """

    scroll_row: int = 0
    scroll_column: int = 0
    height: int = 1
    width: int = 0


@dataclass(frozen=True)
class KeyEvent:
    """A logical key press.

    Attributes:
        name: Identifying key name ("up", "enter", "ctrl+v", "a", ...).
            Events without a name are malformed and ignored.
        sequence: Text the key produces, if any. Unbound keys with a
            printable one-character sequence are typed into the buffer.
    """

    name: Optional[str] = None
    sequence: Optional[str] = None

    @classmethod
    def char(cls, ch: str) -> "KeyEvent":
        return cls(ch, ch)


## ==================== CursorController Class ====================
class CursorController:
    """Class CursorController
    =========================
    Key handling, cursor movement and scroll maintenance for one pane.

    Attributes:
        buffer (Optional[TextBuffer]): The bound document. Key events are
            rejected while no buffer is bound.
        cursor (Cursor): Current cursor position.
        viewport (Viewport): Scroll offsets and visible size.
        indentation (Optional[IndentationProvider]): Supplies TAB text.
        tab_stops (IndentationProvider): Maps buffer columns to screen
            cells; the indentation provider when one is given.
        clipboard (Optional[ClipboardProvider]): Supplies paste text.
        message (str): Transient message shown by the pane, cleared on the
            next handled key.
        strict (bool): Raise ``InvariantViolation`` for a negative cursor
            instead of clamping it.
    """

    def __init__(
        self,
        buffer: Optional[TextBuffer],
        indentation: Optional["IndentationProvider"] = None,
        clipboard: Optional["ClipboardProvider"] = None,
        strict: bool = False,
    ) -> None:
        self.buffer = buffer
        self.cursor = Cursor()
        self.viewport = Viewport()
        self.indentation = indentation
        self.tab_stops = indentation if indentation is not None else IndentationProvider()
        self.clipboard = clipboard
        self.message: str = ""
        self.strict = strict
        self.action_map: dict[str, Callable[[], bool]] = self._setup_action_map()

    def _setup_action_map(self) -> dict[str, Callable[[], bool]]:
        return {
            "up": self.handle_up,
            "down": self.handle_down,
            "left": self.handle_left,
            "right": self.handle_right,
            "home": self.handle_home,
            "end": self.handle_end,
            "pageup": self.handle_page_up,
            "pagedown": self.handle_page_down,
            "enter": self.handle_enter,
            "return": self.handle_enter,
            "backspace": self.handle_backspace,
            "delete": self.handle_delete,
            "tab": self.handle_tab,
            "insert": self.toggle_insert_mode,
            "ctrl+v": self.paste,
        }

    # --- Dispatch ---

    def handle_key(self, event: Optional[KeyEvent]) -> bool:
        """Processes one key event.

        Returns:
            bool: True if the buffer, cursor, scroll or message changed.
        """
        if self.buffer is None:
            logging.warning("Key event rejected: no buffer bound to controller.")
            return False
        if event is None or not event.name:
            logging.debug("Ignoring malformed key event: %r", event)
            return False

        KEY_LOGGER.debug("controller key %r (sequence %r)", event.name, event.sequence)
        had_message = bool(self.message)
        self.message = ""

        action = self.action_map.get(event.name)
        if action is not None:
            changed = action()
        elif self._is_printable(event.sequence):
            changed = self.insert_character(event.sequence)
        else:
            logging.debug("Unhandled key in controller: %r", event.name)
            changed = False

        self._enforce_invariants()
        return changed or had_message

    @staticmethod
    def _is_printable(sequence: Optional[str]) -> bool:
        return bool(sequence) and len(sequence) == 1 and sequence.isprintable()

    # --- Navigation ---

    def _move_vertical(self, new_row: int) -> bool:
        old = (self.cursor.row, self.cursor.column, self.viewport.scroll_row)
        new_row = max(0, min(new_row, self.buffer.line_count - 1))
        self.cursor.row = new_row
        self.cursor.column = min(self.cursor.column, self.buffer.line_length(new_row))
        self._adjust_scroll_for_cursor()
        return old != (self.cursor.row, self.cursor.column, self.viewport.scroll_row)

    def handle_up(self) -> bool:
        return self._move_vertical(self.cursor.row - 1)

    def handle_down(self) -> bool:
        return self._move_vertical(self.cursor.row + 1)

    def handle_left(self) -> bool:
        """Moves one column left; a no-op at column 0 (no wrap)."""
        if self.cursor.column <= 0:
            return False
        self.cursor.column -= 1
        self._adjust_horizontal_scroll()
        return True

    def handle_right(self) -> bool:
        """Moves one column right; a no-op at end of line (no wrap)."""
        if self.cursor.column >= self.buffer.line_length(self.cursor.row):
            return False
        self.cursor.column += 1
        self._adjust_horizontal_scroll()
        return True

    def handle_home(self) -> bool:
        changed = self.cursor.column != 0
        self.cursor.column = 0
        self._adjust_horizontal_scroll()
        return changed

    def handle_end(self) -> bool:
        end = self.buffer.line_length(self.cursor.row)
        changed = self.cursor.column != end
        self.cursor.column = end
        self._adjust_horizontal_scroll()
        return changed

    def _page_step(self) -> int:
        return max(1, int(self.viewport.height * PAGE_STEP_RATIO))

    def _page_to(self, new_row: int) -> bool:
        old = (self.cursor.row, self.cursor.column, self.viewport.scroll_row)
        height = self.viewport.height
        new_row = max(0, min(new_row, self.buffer.line_count - 1))
        self.cursor.row = new_row
        self.cursor.column = min(self.cursor.column, self.buffer.line_length(new_row))

        # Recenter the cursor row, then clamp to the valid scroll range.
        max_scroll = max(0, self.buffer.line_count - height)
        self.viewport.scroll_row = max(0, min(new_row - height // 2, max_scroll))
        self._adjust_horizontal_scroll()
        return old != (self.cursor.row, self.cursor.column, self.viewport.scroll_row)

    def handle_page_up(self) -> bool:
        return self._page_to(self.cursor.row - self._page_step())

    def handle_page_down(self) -> bool:
        return self._page_to(self.cursor.row + self._page_step())

    # --- Structural edits ---

    def handle_enter(self) -> bool:
        """Splits the line at the cursor and moves to the start of the new line."""
        self.buffer.split_line(self.cursor.row, self.cursor.column)
        self.cursor.row += 1
        self.cursor.column = 0
        self._adjust_scroll_for_cursor()
        return True

    def handle_backspace(self) -> bool:
        row, column = self.cursor.row, self.cursor.column
        if column > 0:
            self.buffer.delete_char(column - 1, row)
            self.cursor.column -= 1
            self._adjust_horizontal_scroll()
            return True
        if row > 0:
            previous_length = self.buffer.line_length(row - 1)
            self.buffer.join_line(row - 1)
            self.cursor.row = row - 1
            self.cursor.column = previous_length
            self._adjust_scroll_for_cursor()
            return True
        logging.debug("handle_backspace: at beginning of buffer, nothing to delete.")
        return False

    def handle_delete(self) -> bool:
        row, column = self.cursor.row, self.cursor.column
        if column < self.buffer.line_length(row):
            self.buffer.delete_char(column, row)
            return True
        if row < self.buffer.line_count - 1:
            return self.buffer.join_line(row)
        logging.debug("handle_delete: at end of buffer, nothing to delete.")
        return False

    # --- Text input ---

    def handle_tab(self) -> bool:
        """Writes the indentation needed to reach the next indent stop."""
        if self.indentation is None:
            text = "\t"
        else:
            text = self.indentation.indentation_for(self.cursor.column)
        if not text:
            return False
        self.buffer.write_text(text, self.cursor.column, self.cursor.row)
        self.cursor.column += len(text)
        self._adjust_horizontal_scroll()
        return True

    def insert_character(self, ch: str) -> bool:
        """Types ``ch`` at the cursor in the buffer's insert/overwrite mode."""
        self.buffer.write_text(ch, self.cursor.column, self.cursor.row)
        self.cursor.column += 1
        self._adjust_horizontal_scroll()
        return True

    def insert_text(self, text: str) -> bool:
        """Inserts possibly multi-line ``text`` at the cursor.

        A single-line payload is written like typed text. A multi-line
        payload splits the current line at the cursor: the first payload
        line joins the prefix, interior lines become new lines and the last
        payload line is followed by the original suffix. The cursor ends
        right after the inserted text.
        """
        if not text:
            return False
        payload = split_lines(text)
        row, column = self.cursor.row, self.cursor.column

        if len(payload) == 1:
            self.buffer.write_text(text, column, row)
            self.cursor.column += len(text)
            self._adjust_horizontal_scroll()
            return True

        line = self.buffer.line(row)
        prefix, suffix = line[:column], line[column:]
        self.buffer.set_line(row, prefix + payload[0])
        for offset, middle in enumerate(payload[1:-1], start=1):
            self.buffer.insert_line(row + offset, middle)
        last_row = row + len(payload) - 1
        self.buffer.insert_line(last_row, payload[-1] + suffix)

        self.cursor.row = last_row
        self.cursor.column = len(payload[-1])
        self._adjust_scroll_for_cursor()
        return True

    def paste(self) -> bool:
        """Inserts the clipboard contents at the cursor."""
        if self.clipboard is None:
            self.message = "Clipboard unavailable"
            return True
        try:
            text = self.clipboard.read()
        except CollaboratorError as e:
            logging.error("Paste failed: %s", e)
            self.message = f"Paste failed: {e}"
            return True
        if not text:
            logging.debug("Clipboard is empty, nothing to paste")
            return False
        logging.debug("Pasting %d characters from clipboard", len(text))
        return self.insert_text(text)

    def toggle_insert_mode(self) -> bool:
        self.buffer.insert_mode = not self.buffer.insert_mode
        self.message = "Insert" if self.buffer.insert_mode else "Overwrite"
        logging.debug("Insert mode is now %s", self.buffer.insert_mode)
        return True

    # --- Scroll maintenance ---

    def set_viewport_size(self, height: int, width: int) -> None:
        """Called by the layout engine with the pane's content size."""
        self.viewport.height = max(1, height)
        self.viewport.width = max(0, width)

    def _adjust_scroll_for_cursor(self) -> None:
        """Restores ``scroll_row <= row <= scroll_row + height - 1``."""
        height = self.viewport.height
        row = self.cursor.row
        if row > self.viewport.scroll_row + height - 1:
            max_scroll = max(0, self.buffer.line_count - height)
            self.viewport.scroll_row = min(row - height + 1, max_scroll)
        elif row < self.viewport.scroll_row:
            self.viewport.scroll_row = max(0, row)
        self._adjust_horizontal_scroll()

    def _adjust_horizontal_scroll(self) -> None:
        width = self.viewport.width
        column = self.cursor.column
        if column < self.viewport.scroll_column:
            self.viewport.scroll_column = column
            return
        if width <= 0:
            return
        line = self.buffer.line(self.cursor.row)
        scroll = self.viewport.scroll_column
        cursor_cell = self.display_column(column)
        scroll_cell = self.display_column(scroll)
        while scroll < column and cursor_cell - scroll_cell >= width:
            if scroll < len(line):
                scroll_cell += self.tab_stops.display_width(line[scroll], scroll_cell)
            else:
                scroll_cell += 1
            scroll += 1
        self.viewport.scroll_column = scroll

    def display_column(self, column: int, row: Optional[int] = None) -> int:
        """Screen cell of buffer ``column`` on ``row`` (the cursor row by default)."""
        row = self.cursor.row if row is None else row
        return self.tab_stops.display_column(self.buffer.line(row), column)

    def prepare_redraw(self) -> None:
        """Re-validates cursor and scroll right before the pane is drawn.

        The buffer may have been resized or the viewport shrunk since the
        last key; this clamps the cursor, pulls ``scroll_row`` back into
        ``[0, max(0, line_count - height)]`` and restores the scroll invariant.
        """
        if self.buffer is None:
            return
        self._enforce_invariants()
        max_scroll = max(0, self.buffer.line_count - self.viewport.height)
        self.viewport.scroll_row = max(0, min(self.viewport.scroll_row, max_scroll))
        self._adjust_scroll_for_cursor()

    def visible_lines(self) -> list[str]:
        if self.buffer is None:
            return []
        return self.buffer.visible_slice(self.viewport.scroll_row, self.viewport.height)

    # --- Invariants ---

    def _enforce_invariants(self) -> None:
        if self.cursor.row < 0 or self.cursor.column < 0:
            if self.strict:
                raise InvariantViolation(f"negative cursor {self.cursor}")
            logging.warning("Negative cursor %s clamped to zero.", self.cursor)
        last_row = self.buffer.line_count - 1
        self.cursor.row = max(0, min(self.cursor.row, last_row))
        self.cursor.column = max(0, min(self.cursor.column, self.buffer.line_length(self.cursor.row)))
