# panedit/core/TextBuffer.py
"""panedit.core.TextBuffer
=========================

The line-array document model behind every editor pane.

A ``TextBuffer`` owns the mutable list of lines of one open document and
exposes position-based read/write/splice operations. It knows nothing about
cursors, scrolling or the screen; the ``CursorController`` translates keys
into calls on this class.

Invariants:
    - ``lines`` is never empty; an empty document is ``[""]``.
    - No line contains a line terminator. ``write_text`` does not interpret
      newlines, callers split lines first.
"""

from __future__ import annotations

import logging
import re
from typing import Iterable, Optional

from panedit.core.errors import InvariantViolation, OutOfBoundsError

_LINE_BREAK_RE = re.compile(r"\r\n|\r|\n")


def split_lines(text: str) -> list[str]:
    """Split decoded file contents on any line boundary.

    A trailing line break yields a trailing empty line, so that
    ``"\\n".join(split_lines(t)) == t`` for text using ``\\n`` endings.
    """
    return _LINE_BREAK_RE.split(text)


## ==================== TextBuffer Class ====================
class TextBuffer:
    """Class TextBuffer
    =========================
    Mutable, line-oriented text storage for a single document.

    Attributes:
        name (str): Logical identifier of the document (path or label).
        lines (list[str]): Document lines without terminators. Never empty.
        insert_mode (bool): True for insert, False for overwrite typing.
        encoding (str): Encoding used when the document is written back.
        modified (bool): Set by every mutating operation.
        strict (bool): Raise ``InvariantViolation`` instead of repairing.
    """

    def __init__(
        self,
        name: str = "",
        lines: Optional[Iterable[str]] = None,
        insert_mode: bool = True,
        encoding: str = "utf-8",
        strict: bool = False,
    ) -> None:
        self.name = name
        self.lines: list[str] = list(lines) if lines is not None else [""]
        if not self.lines:
            self.lines = [""]
        for index, line in enumerate(self.lines):
            if _LINE_BREAK_RE.search(line):
                raise ValueError(f"line {index} contains a line terminator")
        self.insert_mode = insert_mode
        self.encoding = encoding
        self.modified = False
        self.strict = strict

    @classmethod
    def from_text(cls, name: str, text: str, **kwargs) -> "TextBuffer":
        """Builds a buffer from decoded file contents."""
        return cls(name, split_lines(text), **kwargs)

    def __repr__(self) -> str:
        return f"TextBuffer(name={self.name!r}, lines={len(self.lines)})"

    # --- Read access ---

    @property
    def line_count(self) -> int:
        return len(self.lines)

    def line(self, row: int) -> str:
        """Returns line ``row``; raises ``OutOfBoundsError`` for a missing row."""
        if not 0 <= row < len(self.lines):
            raise OutOfBoundsError(f"row {row} outside buffer of {len(self.lines)} lines", row)
        return self.lines[row]

    def line_length(self, row: int) -> int:
        return len(self.line(row))

    def visible_slice(self, start: int, count: int) -> list[str]:
        """Returns at most ``count`` lines starting at ``start``."""
        start = max(0, start)
        return self.lines[start : start + max(0, count)]

    # --- Padding helpers ---

    def ensure_line(self, row: int) -> None:
        """Pads ``lines`` with empty strings until ``row`` is a valid index."""
        if row < 0:
            raise OutOfBoundsError(f"negative row {row}", row)
        while len(self.lines) <= row:
            self.lines.append("")

    def ensure_column(self, row: int, column: int) -> None:
        """Ensures line ``row`` exists and is at least ``column`` characters long."""
        if column < 0:
            raise OutOfBoundsError(f"negative column {column}", row, column)
        self.ensure_line(row)
        if len(self.lines[row]) < column:
            self.lines[row] = self.lines[row].ljust(column)

    # --- Mutations ---

    def write_text(self, text: str, column: int, row: int, insert_mode: Optional[bool] = None) -> None:
        """Writes ``text`` at (``row``, ``column``).

        In insert mode the remainder of the line shifts right; otherwise the
        characters ``[column, column + len(text))`` are overwritten, extending
        the line when ``text`` runs past its end. Missing rows and columns are
        padded first. ``insert_mode`` defaults to the buffer's current mode.
        """
        if insert_mode is None:
            insert_mode = self.insert_mode
        self.ensure_column(row, column)
        line = self.lines[row]
        if insert_mode:
            self.lines[row] = line[:column] + text + line[column:]
        else:
            self.lines[row] = line[:column] + text + line[column + len(text) :]
        self.modified = True
        self._check_invariants()

    def delete_char(self, column: int, row: int) -> str:
        """Removes and returns the character at ``column`` of line ``row``.

        Raises:
            OutOfBoundsError: if the position does not hold a character.
        """
        line = self.line(row)
        if not 0 <= column < len(line):
            raise OutOfBoundsError(
                f"column {column} outside line {row} of length {len(line)}", row, column
            )
        removed = line[column]
        self.lines[row] = line[:column] + line[column + 1 :]
        self.modified = True
        logging.debug("delete_char: removed %r at (%s,%s)", removed, row, column)
        self._check_invariants()
        return removed

    def split_line(self, row: int, column: int) -> None:
        """Cuts line ``row`` at ``column``; the suffix becomes line ``row + 1``."""
        line = self.line(row)
        if not 0 <= column <= len(line):
            raise OutOfBoundsError(
                f"split column {column} outside line {row} of length {len(line)}", row, column
            )
        self.lines[row] = line[:column]
        self.lines.insert(row + 1, line[column:])
        self.modified = True
        self._check_invariants()

    def join_line(self, row: int) -> bool:
        """Appends line ``row + 1`` to line ``row``.

        Returns:
            bool: False (and no change) when ``row`` is the last line.
        """
        self.line(row)
        if row >= len(self.lines) - 1:
            return False
        self.lines[row] += self.lines.pop(row + 1)
        self.modified = True
        self._check_invariants()
        return True

    def set_line(self, row: int, text: str) -> None:
        self.line(row)
        self.lines[row] = text
        self.modified = True

    def insert_line(self, row: int, text: str = "") -> None:
        """Inserts a new line so that it becomes line ``row``."""
        if not 0 <= row <= len(self.lines):
            raise OutOfBoundsError(f"insert row {row} outside 0..{len(self.lines)}", row)
        self.lines.insert(row, text)
        self.modified = True

    # --- Invariants ---

    def _check_invariants(self) -> None:
        if self.lines:
            return
        if self.strict:
            raise InvariantViolation(f"buffer {self.name!r} has no lines")
        logging.warning("Buffer %r lost its last line; restoring an empty line.", self.name)
        self.lines.append("")
