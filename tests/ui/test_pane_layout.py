# tests/ui/test_pane_layout.py
"""Tests for `PaneLayout` and the `pack_axis` packing step.
==========================================================

1. Axis packing: stacking, default halves, clamping of fixed sizes.
2. Rectangles for common docking arrangements and exact tiling.
3. Focus handling: add/remove/focus/next.
4. Terminal cursor translation in screen cells, and hiding.
5. Failure isolation in key handling and drawing.
"""

from itertools import product
from unittest.mock import MagicMock

import pytest

from panedit.core.CursorController import Cursor, CursorController, KeyEvent
from panedit.core.TextBuffer import TextBuffer
from panedit.integrations.Indentation import IndentationProvider
from panedit.ui.PaneLayout import PaneLayout, pack_axis
from panedit.ui.panes import Anchors, Pane, Rect


def editor_pane(lines: list[str] | None = None, **kwargs) -> Pane:
    buffer = TextBuffer("a.txt", lines or ["hello"])
    return Pane.for_buffer(buffer, CursorController(buffer), **kwargs)


# --- pack_axis ---

class TestPackAxis:
    def test_single_edge_default_is_half_of_remaining(self) -> None:
        assert pack_axis([(True, False, None), (True, False, None)], 0, 100) == [(0, 50), (50, 25)]

    def test_trailing_edge_stacks_from_end(self) -> None:
        assert pack_axis([(False, True, 10), (False, True, 5)], 0, 100) == [(90, 10), (85, 5)]

    def test_both_edges_take_remaining_span(self) -> None:
        result = pack_axis([(True, True, None), (True, False, 20), (False, True, 30)], 5, 100)
        assert result == [(25, 50), (5, 20), (75, 30)]

    def test_both_edges_capped_by_fixed_size(self) -> None:
        assert pack_axis([(True, True, 10)], 0, 100) == [(0, 10)]

    def test_floating_takes_remaining_span(self) -> None:
        assert pack_axis([(False, False, 7), (True, False, 40)], 0, 100) == [(40, 60), (0, 40)]

    def test_oversized_requests_are_clamped(self) -> None:
        result = pack_axis([(True, False, 80), (False, True, 80), (True, True, None)], 0, 100)
        assert result == [(0, 80), (80, 20), (80, 0)]
        assert all(offset >= 0 and size >= 0 for offset, size in result)

    def test_zero_length_axis(self) -> None:
        assert pack_axis([(True, False, 5), (True, True, None)], 0, -3) == [(0, 0), (0, 0)]


# --- Rectangles ---

class TestRecalculateLayout:
    def test_sidebar_and_main_pane(self) -> None:
        layout = PaneLayout()
        sidebar = layout.add_pane(editor_pane(anchors=Anchors(top=True, bottom=True, left=True), fixed_width=30))
        main = layout.add_pane(editor_pane(anchors=Anchors.all()))
        layout.recalculate_layout(Rect(0, 0, 100, 40))
        assert sidebar.rect == Rect(0, 0, 30, 40)
        assert main.rect == Rect(30, 0, 70, 40)

    def test_help_docked_at_bottom(self) -> None:
        layout = PaneLayout()
        main = layout.add_pane(editor_pane())
        help_pane = layout.add_pane(
            Pane.notice(["help"], anchors=Anchors(bottom=True, left=True, right=True), fixed_height=10)
        )
        layout.recalculate_layout(Rect(0, 0, 80, 23))
        assert help_pane.rect == Rect(0, 13, 80, 10)
        assert main.rect == Rect(0, 0, 80, 13)

    def test_viewports_follow_content_size(self) -> None:
        layout = PaneLayout(border_width=1)
        pane = layout.add_pane(editor_pane())
        layout.recalculate_layout(Rect(0, 0, 50, 20))
        viewport = pane.editor.controller.viewport
        assert (viewport.height, viewport.width) == (18, 48)

    def test_unbordered_pane_uses_full_rect(self) -> None:
        layout = PaneLayout(border_width=1)
        pane = layout.add_pane(editor_pane(border=False))
        layout.recalculate_layout(Rect(0, 0, 50, 20))
        assert pane.content_rect(1) == Rect(0, 0, 50, 20)

    @pytest.mark.parametrize("width,height", [(80, 24), (101, 37), (7, 3)])
    def test_axis_complete_panes_tile_the_area(self, width: int, height: int) -> None:
        layout = PaneLayout()
        layout.add_pane(editor_pane(anchors=Anchors(top=True, bottom=True, left=True), fixed_width=20))
        layout.add_pane(editor_pane(anchors=Anchors(top=True, bottom=True, right=True)))
        layout.add_pane(editor_pane(anchors=Anchors.all()))
        layout.recalculate_layout(Rect(0, 0, width, height))

        covered = set()
        for pane in layout.panes:
            r = pane.rect
            cells = set(product(range(r.x, r.x + r.width), range(r.y, r.y + r.height)))
            assert not covered & cells
            covered |= cells
        assert covered == set(product(range(width), range(height)))

    def test_vertical_stacking_tiles_exactly(self) -> None:
        layout = PaneLayout()
        top = layout.add_pane(editor_pane(anchors=Anchors(top=True, left=True, right=True), fixed_height=5))
        bottom = layout.add_pane(editor_pane(anchors=Anchors(bottom=True, left=True, right=True), fixed_height=4))
        middle = layout.add_pane(editor_pane(anchors=Anchors.all()))
        layout.recalculate_layout(Rect(0, 1, 60, 30))
        assert top.rect == Rect(0, 1, 60, 5)
        assert middle.rect == Rect(0, 6, 60, 21)
        assert bottom.rect == Rect(0, 27, 60, 4)
        assert sum(p.rect.area for p in layout.panes) == 60 * 30


# --- Focus ---

class TestFocus:
    def test_first_pane_gets_focus(self) -> None:
        layout = PaneLayout()
        first = layout.add_pane(editor_pane())
        layout.add_pane(editor_pane())
        assert layout.focused is first

    def test_add_with_focus(self) -> None:
        layout = PaneLayout()
        layout.add_pane(editor_pane())
        second = layout.add_pane(editor_pane(), focus=True)
        assert layout.focused is second

    def test_focus_outside_set_is_noop(self) -> None:
        layout = PaneLayout()
        first = layout.add_pane(editor_pane())
        assert layout.focus(editor_pane()) is False
        assert layout.focused is first

    def test_next_cycles_in_insertion_order(self) -> None:
        layout = PaneLayout()
        panes = [layout.add_pane(editor_pane()) for _ in range(3)]
        seen = []
        for _ in range(4):
            layout.next()
            seen.append(layout.focused)
        assert seen == [panes[1], panes[2], panes[0], panes[1]]

    @pytest.mark.parametrize("count", [0, 1])
    def test_next_is_noop_for_few_panes(self, count: int) -> None:
        layout = PaneLayout()
        for _ in range(count):
            layout.add_pane(editor_pane())
        focused = layout.focused
        assert layout.next() is False
        assert layout.focused is focused

    def test_remove_focused_moves_focus_to_first(self) -> None:
        layout = PaneLayout()
        first = layout.add_pane(editor_pane())
        second = layout.add_pane(editor_pane(), focus=True)
        assert layout.remove_pane(second) is True
        assert layout.focused is first
        assert layout.remove_pane(second) is False
        layout.remove_pane(first)
        assert layout.focused is None


# --- Cursor ---

class TestCursorPosition:
    def test_translates_to_absolute_coordinates(self) -> None:
        layout = PaneLayout(border_width=1)
        layout.add_pane(editor_pane(anchors=Anchors(top=True, bottom=True, left=True), fixed_width=30))
        pane = layout.add_pane(editor_pane(["x" * 10] * 50), focus=True)
        layout.recalculate_layout(Rect(0, 0, 100, 20))
        controller = pane.editor.controller
        controller.cursor = Cursor(4, 25)
        controller.viewport.scroll_row = 20
        assert layout.cursor_position() == (0 + 5 + 1, 30 + 4 + 1)

    def test_hidden_when_row_outside_pane(self) -> None:
        layout = PaneLayout()
        pane = layout.add_pane(editor_pane(["a"] * 50))
        layout.recalculate_layout(Rect(0, 0, 40, 10))
        pane.editor.controller.cursor = Cursor(0, 30)
        assert layout.cursor_position() is None

    def test_hidden_for_notice_pane(self) -> None:
        layout = PaneLayout()
        layout.add_pane(Pane.notice(["help"]))
        layout.recalculate_layout(Rect(0, 0, 40, 10))
        surface = MagicMock()
        layout.update_cursor(surface)
        surface.hide_cursor.assert_called_once()
        surface.place_cursor.assert_not_called()

    def test_update_cursor_passes_insert_mode(self) -> None:
        layout = PaneLayout()
        pane = layout.add_pane(editor_pane())
        pane.editor.buffer.insert_mode = False
        layout.recalculate_layout(Rect(0, 0, 40, 10))
        surface = MagicMock()
        layout.update_cursor(surface)
        surface.place_cursor.assert_called_once_with(1, 1, False)

    def test_tab_key_with_use_spaces_off_is_drawn_in_cells(self) -> None:
        buffer = TextBuffer("a.txt", ["ab"])
        tab_stops = IndentationProvider({"editor": {"use_spaces": False, "tab_size": 4}})
        controller = CursorController(buffer, indentation=tab_stops)
        layout = PaneLayout(border_width=1)
        layout.add_pane(Pane.for_buffer(buffer, controller))
        layout.recalculate_layout(Rect(0, 0, 40, 10))

        assert layout.handle_key(KeyEvent("tab")) is True
        assert buffer.lines == ["\tab"]
        surface = MagicMock()
        assert layout.draw_all(surface) == 0

        rows = surface.draw_pane.call_args.args[1]
        assert rows[0] == [("    ab", None)]
        assert all("\t" not in text for row in rows for text, _ in row)
        assert controller.cursor == Cursor(1, 0)
        assert layout.cursor_position() == (1, 0 + 4 + 1)

    def test_wide_characters_move_the_cursor_by_cells(self) -> None:
        layout = PaneLayout(border_width=1)
        pane = layout.add_pane(editor_pane(["日本x"]))
        layout.recalculate_layout(Rect(0, 0, 40, 10))
        pane.editor.controller.cursor = Cursor(2, 0)
        assert layout.cursor_position() == (1, 0 + 4 + 1)
        pane.editor.controller.cursor = Cursor(3, 0)
        assert layout.cursor_position() == (1, 0 + 5 + 1)

    def test_cursor_column_is_relative_to_scrolled_cells(self) -> None:
        layout = PaneLayout(border_width=1)
        pane = layout.add_pane(editor_pane(["\t\tabc"]))
        layout.recalculate_layout(Rect(0, 0, 40, 10))
        controller = pane.editor.controller
        controller.cursor = Cursor(3, 0)
        controller.viewport.scroll_column = 1
        assert layout.cursor_position() == (1, 9 - 4 + 1)


# --- Failure isolation ---

class TestFailureIsolation:
    def test_key_handler_error_is_recorded(self) -> None:
        layout = PaneLayout()
        pane = layout.add_pane(editor_pane())
        pane.editor.controller.handle_key = MagicMock(side_effect=RuntimeError("boom"))
        assert layout.handle_key(KeyEvent("down")) is True
        assert layout.last_error == "Error: boom"

    def test_key_without_panes(self) -> None:
        assert PaneLayout().handle_key(KeyEvent("down")) is False

    def test_one_failing_pane_does_not_stop_others(self) -> None:
        layout = PaneLayout()
        broken = layout.add_pane(editor_pane(anchors=Anchors(top=True, bottom=True, left=True)))
        healthy = layout.add_pane(editor_pane(anchors=Anchors.all()))
        layout.recalculate_layout(Rect(0, 0, 80, 20))
        broken.render = MagicMock(side_effect=ValueError("bad render"))
        surface = MagicMock()

        assert layout.draw_all(surface) == 1
        surface.draw_pane.assert_called_once()
        assert surface.draw_pane.call_args.args[0] is healthy
        assert "bad render" in layout.last_error

    def test_zero_area_panes_are_skipped(self) -> None:
        layout = PaneLayout()
        layout.add_pane(editor_pane())
        layout.recalculate_layout(Rect(0, 0, 0, 0))
        surface = MagicMock()
        assert layout.draw_all(surface) == 0
        surface.draw_pane.assert_not_called()
