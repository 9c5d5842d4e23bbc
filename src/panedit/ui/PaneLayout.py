# panedit/ui/PaneLayout.py
"""PaneLayout.py
========================
Owns the ordered collection of panes, computes their rectangles, tracks the
focused pane and positions the single terminal cursor.

Layout is greedy interval packing, performed independently on each axis
(``top``/``bottom`` for rows, ``left``/``right`` for columns):

1. Panes docked to exactly one edge of the axis are stacked from that edge
   in insertion order. Each takes its fixed size, or half of the space that
   is still free, and moves the running offset of its edge.
2. Panes docked to both edges of the axis take the span left between the
   two running offsets, capped by their fixed size.
3. Panes with no anchor on the axis take the same remaining span.

Requested sizes are clamped to the free space, so offsets never go
negative. Insertion order is the only tie-break.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional, Sequence

from panedit.core.CursorController import KeyEvent
from panedit.ui.panes import Pane, Rect


if TYPE_CHECKING:
    from panedit.core.Highlighter import SyntaxHighlighter
    from panedit.ui.DrawScreen import DrawScreen

AxisRequest = tuple[bool, bool, Optional[int]]


def pack_axis(requests: Sequence[AxisRequest], start: int, length: int) -> list[tuple[int, int]]:
    """Packs one axis. Returns ``(offset, size)`` for each request, in order.

    Args:
        requests: ``(docked_at_start, docked_at_end, fixed_size)`` per pane.
        start: First coordinate of the available span.
        length: Size of the available span.
    """
    length = max(0, length)
    placed: list[Optional[tuple[int, int]]] = [None] * len(requests)
    lead = 0
    trail = 0

    for index, (at_start, at_end, fixed) in enumerate(requests):
        if at_start == at_end:
            continue
        remaining = max(0, length - lead - trail)
        size = fixed if fixed is not None else remaining // 2
        size = max(0, min(size, remaining))
        if at_start:
            placed[index] = (start + lead, size)
            lead += size
        else:
            trail += size
            placed[index] = (start + length - trail, size)

    remaining = max(0, length - lead - trail)
    for index, (at_start, at_end, fixed) in enumerate(requests):
        if placed[index] is not None:
            continue
        size = remaining
        if at_start and at_end and fixed is not None:
            size = max(0, min(fixed, remaining))
        placed[index] = (start + lead, size)

    return [item for item in placed if item is not None]


## ================= PaneLayout Class ===============================
class PaneLayout:
    """PaneLayout Class
    ==========================
    Layout engine and focus manager for all panes on screen.

    Attributes:
        panes (list[Pane]): Panes in insertion order.
        focused (Optional[Pane]): The pane receiving keys, if any.
        area (Rect): Screen region available to panes.
        border_width (int): Frame thickness of bordered panes.
        last_error (str): Message of the last failure isolated by
            ``handle_key`` or ``draw_all``.
    """

    def __init__(self, border_width: int = 1) -> None:
        self.panes: list[Pane] = []
        self.focused: Optional[Pane] = None
        self.area = Rect()
        self.border_width = max(0, border_width)
        self.last_error: str = ""

    # --- Pane set ---

    def add_pane(self, pane: Pane, focus: bool = False) -> Pane:
        """Appends ``pane`` and recomputes the layout.

        The first pane added, or any pane added with ``focus=True``, gets focus.
        """
        self.panes.append(pane)
        if self.focused is None or focus:
            self.focused = pane
        logging.info("Pane added: %r (%d panes)", pane, len(self.panes))
        self.recalculate_layout()
        return pane

    def remove_pane(self, pane: Pane) -> bool:
        """Removes ``pane``; focus moves to the first remaining pane if needed."""
        if pane not in self.panes:
            logging.error("remove_pane: %r is not managed by this layout", pane)
            return False
        self.panes.remove(pane)
        if self.focused is pane:
            self.focused = self.panes[0] if self.panes else None
        logging.info("Pane removed: %r (%d panes left)", pane, len(self.panes))
        self.recalculate_layout()
        return True

    def focus(self, pane: Pane) -> bool:
        """Focuses ``pane``. A no-op for panes not in the layout."""
        if pane not in self.panes:
            logging.debug("focus: ignoring pane outside the layout %r", pane)
            return False
        changed = self.focused is not pane
        self.focused = pane
        return changed

    def next(self) -> bool:
        """Moves focus to the next pane in insertion order, wrapping around."""
        if len(self.panes) <= 1:
            return False
        if self.focused not in self.panes:
            self.focused = self.panes[0]
            return True
        index = self.panes.index(self.focused)
        self.focused = self.panes[(index + 1) % len(self.panes)]
        logging.debug("Focus moved to %r", self.focused)
        return True

    # --- Geometry ---

    def recalculate_layout(self, area: Optional[Rect] = None) -> None:
        """Recomputes every pane rectangle for ``area`` (or the last area)."""
        if area is not None:
            self.area = area
        rows = pack_axis(
            [(p.anchors.top, p.anchors.bottom, p.fixed_height) for p in self.panes],
            self.area.y,
            self.area.height,
        )
        columns = pack_axis(
            [(p.anchors.left, p.anchors.right, p.fixed_width) for p in self.panes],
            self.area.x,
            self.area.width,
        )
        for pane, (y, height), (x, width) in zip(self.panes, rows, columns):
            pane.rect = Rect(x, y, width, height)
            inner = pane.content_rect(self.border_width)
            pane.resize_content(inner.height, inner.width)
            logging.debug("Layout: %r", pane)

    def cursor_position(self) -> Optional[tuple[int, int]]:
        """Absolute ``(y, x)`` of the focused pane's cursor, or None to hide it.

        Columns are measured in screen cells, matching what ``Pane.render``
        draws for the cursor line.
        """
        pane = self.focused
        if pane is None or pane.editor is None:
            return None
        controller = pane.editor.controller
        border = self.border_width if pane.border else 0
        relative_y = controller.cursor.row - controller.viewport.scroll_row + border
        if not border <= relative_y < pane.rect.height - border:
            return None
        relative_x = (
            controller.display_column(controller.cursor.column)
            - controller.display_column(controller.viewport.scroll_column)
            + border
        )
        if not border <= relative_x < pane.rect.width - border:
            return None
        return pane.rect.y + relative_y, pane.rect.x + relative_x

    def update_cursor(self, surface: "DrawScreen") -> None:
        position = self.cursor_position()
        if position is None:
            surface.hide_cursor()
            return
        insert_mode = self.focused.editor.buffer.insert_mode
        surface.place_cursor(position[0], position[1], insert_mode)

    # --- Events and drawing ---

    def handle_key(self, event: KeyEvent) -> bool:
        """Routes ``event`` to the focused pane.

        An exception raised while handling is logged and recorded in
        ``last_error``; it never escapes to the caller.
        """
        pane = self.focused
        if pane is None:
            return False
        try:
            return pane.handle_key(event)
        except Exception as e:
            logging.exception("Key handler of %r failed on %r", pane, event)
            self.last_error = f"Error: {e}"
            return True

    def draw_all(self, surface: "DrawScreen", highlighter: Optional["SyntaxHighlighter"] = None) -> int:
        """Draws every pane. Returns the number of panes that failed to draw."""
        failures = 0
        for pane in self.panes:
            if pane.rect.area == 0:
                continue
            try:
                surface.draw_pane(pane, pane.render(highlighter), pane is self.focused, self.border_width)
            except Exception as e:
                failures += 1
                logging.exception("Drawing %r failed", pane)
                self.last_error = f"Draw error in {pane.title}: {e}"
        return failures
