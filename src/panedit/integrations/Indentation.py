# panedit/integrations/Indentation.py
"""Indentation collaborator: tab stops and tab expansion driven by the
``[editor]`` section of the configuration (``tab_size``, ``indent_size``,
``use_spaces``).

It also maps buffer columns to screen cells. A tab occupies the cells up to
the next tab stop, a C0 control character is shown in caret notation
(``^G``) the way curses prints it, and wide glyphs take the cells reported
by ``wcwidth``.
"""

from typing import Any, Optional

from wcwidth import wcwidth


def char_width(ch: str) -> int:
    """Return width (0-2 cells) of a single code point; unprintables count as 1."""
    width = wcwidth(ch)
    return width if width >= 0 else 1


class IndentationProvider:
    """Computes indentation strings for the TAB key and expands tabs on load."""

    def __init__(self, config: Optional[dict[str, Any]] = None) -> None:
        editor_cfg = (config or {}).get("editor", {})
        self.tab_size: int = max(1, int(editor_cfg.get("tab_size", 4)))
        self.indent_size: int = max(1, int(editor_cfg.get("indent_size", self.tab_size)))
        self.use_tabs: bool = not editor_cfg.get("use_spaces", True)

    def indentation_for(self, column: int) -> str:
        """Returns the text that moves ``column`` (0-based) to the next indent stop."""
        if self.use_tabs:
            return "\t"
        next_stop = ((column // self.indent_size) + 1) * self.indent_size
        return " " * (next_stop - column)

    def expand_tabs(self, text: str, start_column: int = 0) -> str:
        """Replaces every tab in ``text`` by spaces up to the next tab stop."""
        result: list[str] = []
        column = start_column
        for ch in text:
            if ch == "\t":
                spaces = self.tab_size - (column % self.tab_size)
                result.append(" " * spaces)
                column += spaces
            else:
                result.append(ch)
                column += 1
        return "".join(result)

    # --- Screen cells ---

    def display_text(self, ch: str, cell: int) -> str:
        """What ``ch`` looks like on screen when it starts at display ``cell``."""
        if ch == "\t":
            return " " * (self.tab_size - cell % self.tab_size)
        if ch < " " or ch == "\x7f":
            return "^" + chr(ord(ch) ^ 0x40)
        return ch

    def display_width(self, text: str, start_cell: int = 0) -> int:
        """Number of screen cells ``text`` takes when drawn from ``start_cell``."""
        cell = start_cell
        for ch in text:
            cell += sum(char_width(glyph) for glyph in self.display_text(ch, cell))
        return cell - start_cell

    def display_column(self, line: str, column: int) -> int:
        """Screen cell at which buffer ``column`` of ``line`` starts.

        Columns past the end of the line count one cell each.
        """
        column = max(0, column)
        return self.display_width(line[:column]) + max(0, column - len(line))
