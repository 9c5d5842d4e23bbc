# panedit/ui/DrawScreen.py
"""DrawScreen.py
========================
DrawScreen: the curses render surface of the panedit editor.

It is responsible for:
- initialising color pairs for highlight color tags and editor chrome,
- painting a pane (frame, title and pre-colored content segments),
- painting the status line on the last terminal row,
- placing or hiding the single terminal cursor and setting its shape
  (bar in insert mode, block in overwrite mode).

Wide Unicode characters are measured in cells (``wcwidth``) so that a line is
never drawn past the right edge of its pane. All curses errors raised while
painting are caught and logged; the editor keeps running.
"""

import curses
import logging
import sys
from typing import TYPE_CHECKING, Any, Optional

from panedit.integrations.Indentation import char_width
from panedit.utils.utils import hex_to_xterm


if TYPE_CHECKING:
    from panedit.ui.panes import Pane, Segments

# DECSCUSR sequences: blinking bar / steady block.
CURSOR_BAR = "\x1b[5 q"
CURSOR_BLOCK = "\x1b[2 q"

BASE_COLORS = {
    "black": curses.COLOR_BLACK,
    "red": curses.COLOR_RED,
    "green": curses.COLOR_GREEN,
    "yellow": curses.COLOR_YELLOW,
    "blue": curses.COLOR_BLUE,
    "magenta": curses.COLOR_MAGENTA,
    "cyan": curses.COLOR_CYAN,
    "white": curses.COLOR_WHITE,
}


def text_width(text: str) -> int:
    return sum(char_width(ch) for ch in text)


def clip_to_width(text: str, max_width: int) -> str:
    """Clips ``text`` to ``max_width`` cells without splitting a wide glyph."""
    used = 0
    out: list[str] = []
    for ch in text:
        w = char_width(ch)
        if used + w > max_width:
            break
        out.append(ch)
        used += w
    return "".join(out)


## ================= DrawScreen Class ==============================
class DrawScreen:
    """DrawScreen Class
    =========================
    Curses implementation of the render surface.

    Attributes:
        stdscr (curses.window): The main curses window.
        config (dict[str, Any]): Editor configuration (``[colors]`` is read).
        colors (dict[str, int]): Color tag or chrome name -> curses attribute.
        insert_cursor (Optional[bool]): Cursor shape currently set, if known.
    """

    MIN_WINDOW_WIDTH = 10
    MIN_WINDOW_HEIGHT = 3

    def __init__(self, stdscr: Any, config: Optional[dict[str, Any]] = None) -> None:
        self.stdscr = stdscr
        self.config = config or {}
        self.colors: dict[str, int] = {}
        self.insert_cursor: Optional[bool] = None
        self.init_colors()

    # --- Colors ---

    def init_colors(self) -> None:
        """Initializes curses color pairs with graceful degradation."""
        self.colors = {"normal": curses.A_NORMAL}

        if not curses.has_colors() or curses.COLORS < 8:
            logging.warning("Terminal has no or limited color support (< 8). Using monochrome attributes.")
            for name in BASE_COLORS:
                self.colors[name] = curses.A_BOLD
            self.colors.update(
                status=curses.A_REVERSE,
                status_error=curses.A_REVERSE | curses.A_BOLD,
                border=curses.A_DIM,
                focused_border=curses.A_BOLD,
            )
            return

        curses.start_color()
        try:
            curses.use_default_colors()
        except curses.error:
            pass

        color_cfg = self.config.get("colors", {})
        wide = curses.COLORS >= 256

        def _fg(name: str, fallback: int) -> int:
            if wide and isinstance(color_cfg.get(name), str):
                return hex_to_xterm(color_cfg[name])
            return fallback

        pairs: list[tuple[str, int, int, int]] = [
            (name, _fg(name, code), -1, curses.A_NORMAL) for name, code in BASE_COLORS.items()
        ]
        status_bg = hex_to_xterm(color_cfg.get("status_bg", "#303030")) if wide else curses.COLOR_BLACK
        pairs += [
            ("status", _fg("status_fg", curses.COLOR_WHITE), status_bg, curses.A_NORMAL),
            ("status_error", curses.COLOR_RED, status_bg, curses.A_BOLD),
            ("border", _fg("border", curses.COLOR_CYAN), -1, curses.A_NORMAL),
            ("focused_border", _fg("focused_border", curses.COLOR_YELLOW), -1, curses.A_BOLD),
        ]

        for pair_id, (name, fg, bg, attr) in enumerate(pairs, start=1):
            try:
                curses.init_pair(pair_id, fg, bg)
                self.colors[name] = curses.color_pair(pair_id) | attr
            except curses.error as e:
                logging.error(f"Failed to initialize curses pair for '{name}': {e}")
                self.colors[name] = attr

    def attr_for(self, tag: Optional[str]) -> int:
        if tag is None:
            return self.colors["normal"]
        return self.colors.get(tag, self.colors["normal"])

    # --- Frame ---

    def size(self) -> tuple[int, int]:
        return self.stdscr.getmaxyx()

    def begin_frame(self) -> None:
        self.stdscr.erase()

    def end_frame(self) -> None:
        """Flushes all pending drawing to the terminal in one update."""
        try:
            self.stdscr.noutrefresh()
            curses.doupdate()
        except curses.error as e:
            logging.error(f"Curses doupdate error: {e}")

    def too_small(self) -> bool:
        height, width = self.size()
        if height >= self.MIN_WINDOW_HEIGHT and width >= self.MIN_WINDOW_WIDTH:
            return False
        try:
            self.stdscr.addstr(0, 0, clip_to_width("Window too small", max(0, width - 1)))
        except curses.error:
            pass
        return True

    # --- Painting ---

    def _put(self, y: int, x: int, text: str, attr: int) -> None:
        try:
            self.stdscr.addstr(y, x, text, attr)
        except curses.error:
            # Writing into the bottom-right cell raises after the write succeeds.
            pass

    def draw_border(self, pane: "Pane", focused: bool) -> None:
        rect = pane.rect
        if rect.width < 2 or rect.height < 2:
            return
        attr = self.colors["focused_border" if focused else "border"]
        right = rect.x + rect.width - 1
        bottom = rect.y + rect.height - 1
        try:
            self.stdscr.hline(rect.y, rect.x + 1, curses.ACS_HLINE | attr, rect.width - 2)
            self.stdscr.hline(bottom, rect.x + 1, curses.ACS_HLINE | attr, rect.width - 2)
            self.stdscr.vline(rect.y + 1, rect.x, curses.ACS_VLINE | attr, rect.height - 2)
            self.stdscr.vline(rect.y + 1, right, curses.ACS_VLINE | attr, rect.height - 2)
            self.stdscr.addch(rect.y, rect.x, curses.ACS_ULCORNER | attr)
            self.stdscr.addch(rect.y, right, curses.ACS_URCORNER | attr)
            self.stdscr.addch(bottom, rect.x, curses.ACS_LLCORNER | attr)
            self.stdscr.insch(bottom, right, curses.ACS_LRCORNER | attr)
        except curses.error as e:
            logging.debug(f"Border of {pane!r} partially drawn: {e}")

        title = pane.title
        if title and rect.width > 4:
            self._put(rect.y, rect.x + 2, clip_to_width(f" {title} ", rect.width - 4), attr)

    def draw_pane(self, pane: "Pane", rows: list["Segments"], focused: bool, border_width: int) -> None:
        """Paints ``pane``: its frame, then ``rows`` inside the content area.

        ``rows`` are already in screen cells (see ``Pane.render``); each row
        is only clipped at the right edge of the content area.
        """
        if pane.border and border_width:
            self.draw_border(pane, focused)

        inner = pane.content_rect(border_width)

        for offset, segments in enumerate(rows[: inner.height]):
            y = inner.y + offset
            x = inner.x
            remaining_cells = inner.width
            for text, tag in segments:
                if not text:
                    continue
                if remaining_cells <= 0:
                    break
                piece = clip_to_width(text, remaining_cells)
                if not piece:
                    break
                self._put(y, x, piece, self.attr_for(tag))
                used = text_width(piece)
                x += used
                remaining_cells -= used

    def draw_status_bar(self, left: str, right: str = "", error: bool = False) -> None:
        """Single-line status bar on the last row of the screen."""
        height, width = self.size()
        if height < 2 or width < 2:
            return
        attr = self.colors["status_error" if error else "status"]
        line = left
        if right:
            gap = width - 1 - text_width(left) - text_width(right)
            line = left + " " * max(1, gap) + right
        line = clip_to_width(line, width - 1)
        line += " " * (width - 1 - text_width(line))
        self._put(height - 1, 0, line, attr)

    # --- Terminal cursor ---

    def place_cursor(self, y: int, x: int, insert_mode: bool) -> None:
        try:
            curses.curs_set(1)
            self.stdscr.move(y, x)
        except curses.error as e:
            logging.warning(f"Curses error positioning cursor at ({y}, {x}): {e}")
            return
        if self.insert_cursor != insert_mode:
            self.set_cursor_shape(insert_mode)

    def hide_cursor(self) -> None:
        try:
            curses.curs_set(0)
        except curses.error:
            pass

    def set_cursor_shape(self, insert_mode: bool) -> None:
        """Bar cursor for insert mode, block cursor for overwrite mode."""
        try:
            sys.stdout.write(CURSOR_BAR if insert_mode else CURSOR_BLOCK)
            sys.stdout.flush()
            self.insert_cursor = insert_mode
        except OSError as e:
            logging.debug(f"Cannot change cursor shape: {e}")
