# panedit/ui/panes.py
"""panes.py
=========

Pane model for the panedit layout engine.

A ``Pane`` is a rectangular region of the terminal. Its rectangle is
derived by ``PaneLayout`` from the pane's anchors and optional fixed size;
everything it shows comes from its content, which is one of two variants:

- ``EditorContent``: a ``TextBuffer`` with its own ``CursorController``.
  Keys edit the buffer; the terminal cursor follows the controller.
- ``NoticeContent``: read-only text (the help screen). Keys scroll it and
  the terminal cursor is hidden while it has focus.

Behaviour that differs between the variants is dispatched with ``match``
on the content object.

Editor rows are returned in screen cells: tabs and control characters are
expanded and the cells scrolled off to the left are already removed, so the
render surface only has to clip at the right edge.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Optional, Union

from panedit.core.CursorController import CursorController, KeyEvent
from panedit.core.TextBuffer import TextBuffer
from panedit.integrations.Indentation import IndentationProvider, char_width


if TYPE_CHECKING:
    from panedit.core.Highlighter import SyntaxHighlighter

Segments = list[tuple[str, Optional[str]]]


## ==================== Geometry ====================
@dataclass
class Rect:
    x: int = 0
    y: int = 0
    width: int = 0
    height: int = 0

    def inner(self, border: int) -> "Rect":
        """The content area inside a border of ``border`` cells."""
        width = max(0, self.width - 2 * border)
        height = max(0, self.height - 2 * border)
        return Rect(self.x + border, self.y + border, width, height)

    @property
    def area(self) -> int:
        return self.width * self.height


@dataclass
class Anchors:
    """Which screen edges a pane tracks."""

    top: bool = False
    bottom: bool = False
    left: bool = False
    right: bool = False

    @classmethod
    def all(cls) -> "Anchors":
        return cls(True, True, True, True)

    @classmethod
    def none(cls) -> "Anchors":
        return cls()


## ==================== Content variants ====================
@dataclass
class EditorContent:
    buffer: TextBuffer
    controller: CursorController


@dataclass
class NoticeContent:
    lines: list[str]
    scroll_row: int = 0
    height: int = 1


PaneContent = Union[EditorContent, NoticeContent]


def to_screen_cells(segments: Segments, tab_stops: IndentationProvider, skip: int = 0) -> Segments:
    """Expands one line of segments to screen text and drops its first ``skip`` cells.

    A wide glyph cut by the left edge is replaced by spaces for its visible part.
    """
    result: Segments = []
    cell = 0
    for text, tag in segments:
        out: list[str] = []
        for ch in text:
            for glyph in tab_stops.display_text(ch, cell):
                width = char_width(glyph)
                if cell >= skip:
                    out.append(glyph)
                elif cell + width > skip:
                    out.append(" " * (cell + width - skip))
                cell += width
        if out:
            result.append(("".join(out), tag))
    return result


## ==================== Pane Class ====================
@dataclass(eq=False)
class Pane:
    """Class Pane
    =========================
    One laid-out region of the screen.

    Attributes:
        content (PaneContent): What the pane shows.
        anchors (Anchors): Edges the pane is docked to.
        fixed_width (Optional[int]): Requested width, clamped by the layout.
        fixed_height (Optional[int]): Requested height, clamped by the layout.
        label (str): Title for non-editor panes.
        border (bool): Whether a frame is drawn around the content.
        rect (Rect): Derived by ``PaneLayout``; never set it directly.
    """

    content: PaneContent
    anchors: Anchors = field(default_factory=Anchors.all)
    fixed_width: Optional[int] = None
    fixed_height: Optional[int] = None
    label: str = ""
    border: bool = True
    rect: Rect = field(default_factory=Rect)

    @classmethod
    def for_buffer(cls, buffer: TextBuffer, controller: CursorController, **kwargs) -> "Pane":
        return cls(EditorContent(buffer, controller), **kwargs)

    @classmethod
    def notice(cls, lines: list[str], label: str = "", **kwargs) -> "Pane":
        return cls(NoticeContent(list(lines)), label=label, **kwargs)

    def __repr__(self) -> str:
        return f"Pane({self.title!r}, rect={self.rect})"

    @property
    def title(self) -> str:
        match self.content:
            case EditorContent(buffer=buffer):
                name = buffer.name or "[No Name]"
                return f"{name} *" if buffer.modified else name
            case NoticeContent():
                return self.label
        return ""

    @property
    def editor(self) -> Optional[EditorContent]:
        match self.content:
            case EditorContent():
                return self.content
        return None

    def content_rect(self, border_width: int) -> Rect:
        return self.rect.inner(border_width if self.border else 0)

    # --- Hooks called by PaneLayout ---

    def resize_content(self, height: int, width: int) -> None:
        match self.content:
            case EditorContent(controller=controller):
                controller.set_viewport_size(height, width)
            case NoticeContent():
                self.content.height = max(1, height)
                max_scroll = max(0, len(self.content.lines) - self.content.height)
                self.content.scroll_row = min(self.content.scroll_row, max_scroll)

    def handle_key(self, event: KeyEvent) -> bool:
        match self.content:
            case EditorContent(controller=controller):
                return controller.handle_key(event)
            case NoticeContent(lines=lines, scroll_row=scroll_row, height=height):
                step = {"up": -1, "down": 1, "pageup": -height, "pagedown": height}.get(event.name or "")
                if step is None:
                    return False
                new_scroll = max(0, min(scroll_row + step, max(0, len(lines) - height)))
                self.content.scroll_row = new_scroll
                return new_scroll != scroll_row
        return False

    def render(self, highlighter: Optional["SyntaxHighlighter"]) -> list[Segments]:
        """Returns the visible lines of the pane as color segments."""
        match self.content:
            case EditorContent(buffer=buffer, controller=controller):
                controller.prepare_redraw()
                first_row = controller.viewport.scroll_row
                rows: list[Segments] = []
                for offset, line in enumerate(controller.visible_lines()):
                    segments = highlighter.segments(line, buffer.name) if highlighter is not None else [(line, None)]
                    skip = controller.display_column(controller.viewport.scroll_column, first_row + offset)
                    rows.append(to_screen_cells(segments, controller.tab_stops, skip))
                return rows
            case NoticeContent(lines=lines, scroll_row=scroll_row):
                return [[(line, None)] for line in lines[scroll_row:]]
        logging.error("Unknown pane content %r", self.content)
        return []

    def message(self) -> str:
        match self.content:
            case EditorContent(controller=controller):
                return controller.message
        return ""
